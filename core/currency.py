"""
Currency Units and Money

Amounts are stored as integer minor units (cents) tagged with the currency
unit they belong to. Arithmetic and ordering are only defined between
amounts of the same unit; mixing units raises CurrencyMismatchError instead
of silently adding euros to dollars.

Copyright (c) 2026 Andreas Wagner. All rights reserved.
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from functools import total_ordering
from typing import ClassVar, Dict, Generic, Type, TypeVar, Union

from utils.logging_config import setup_logger

logger = setup_logger(__name__)


class CurrencyMismatchError(TypeError):
    """Raised when amounts or rates of different currency units are mixed."""
    pass


class CurrencyUnit:
    """
    Marker type for a currency.

    Units are never instantiated; the class itself is the tag carried by
    Money and ExchangeRate. Subclasses define the ISO code, the display
    symbol and the number of minor units per major unit.
    """

    code: ClassVar[str] = ""
    symbol: ClassVar[str] = ""
    scale: ClassVar[int] = 100

    def __new__(cls, *args, **kwargs):
        raise TypeError(f"{cls.__name__} is a currency tag and cannot be instantiated")

    @classmethod
    def format(cls, raw_amount: int) -> str:
        """Format a minor-unit count as '<symbol> <major>.<minor>'."""
        sign = "-" if raw_amount < 0 else ""
        major, minor = divmod(abs(raw_amount), cls.scale)
        digits = len(str(cls.scale - 1)) if cls.scale > 1 else 0
        if digits:
            return f"{cls.symbol} {sign}{major}.{minor:0{digits}d}"
        return f"{cls.symbol} {sign}{major}"


class EUR(CurrencyUnit):
    code = "EUR"
    symbol = "€"
    scale = 100


class USD(CurrencyUnit):
    code = "USD"
    symbol = "$"
    scale = 100


# Units the tools know how to convert between
CURRENCY_UNITS: Dict[str, Type[CurrencyUnit]] = {
    EUR.code: EUR,
    USD.code: USD,
}


@dataclass(frozen=True)
class OtherCurrency:
    """A currency code with no unit of its own, kept verbatim for reporting."""

    code: str

    def __str__(self) -> str:
        return self.code


def parse_currency_code(code: str) -> Union[Type[CurrencyUnit], OtherCurrency]:
    """
    Map a broker currency code to a unit.

    'USD' and 'EUR' (exact match) map to their units. Anything else is
    accepted as OtherCurrency(code) and logged; it is never an error.
    """
    unit = CURRENCY_UNITS.get(code)
    if unit is not None:
        return unit

    logger.warning(f"Unrecognized currency code '{code}', keeping it as-is")
    return OtherCurrency(code)


def unit_for_code(code: str) -> Type[CurrencyUnit]:
    """Strict lookup used where an actual unit is required (conversions)."""
    unit = CURRENCY_UNITS.get(code.strip().upper())
    if unit is None:
        supported = ", ".join(sorted(CURRENCY_UNITS))
        raise ValueError(f"Unsupported currency '{code}' (supported: {supported})")
    return unit


U = TypeVar("U", bound=CurrencyUnit)


@total_ordering
@dataclass(frozen=True)
class Money(Generic[U]):
    """
    An exact number of minor units of one currency.

    Build with from_amount() for major-unit input or from_raw_amount() when
    the minor-unit count is already known.
    """

    raw_amount: int
    unit: Type[U]

    def __post_init__(self):
        if isinstance(self.raw_amount, bool) or not isinstance(self.raw_amount, int):
            raise TypeError(f"Money needs an integer minor-unit amount, got {self.raw_amount!r}")

    @classmethod
    def from_raw_amount(cls, raw_amount: int, unit: Type[U]) -> "Money[U]":
        return cls(raw_amount, unit)

    @classmethod
    def from_amount(cls, amount: Union[int, float], unit: Type[U]) -> "Money[U]":
        """
        Build from a major-unit amount.

        Integers are scaled exactly. Floats are scaled and then truncated
        toward zero, so 0.29 becomes 28 cents (0.29 * 100 is
        28.999999999999996 in binary floating point). Conversions through an
        ExchangeRate round to nearest instead; the two are intentionally
        different.
        """
        if isinstance(amount, bool):
            raise TypeError("Money amount cannot be a bool")
        if isinstance(amount, int):
            return cls(amount * unit.scale, unit)
        return cls(int(amount * unit.scale), unit)

    @classmethod
    def parse_display(cls, text: str, unit: Type[U]) -> "Money[U]":
        """Inverse of display(): '€ 123.45' -> 12345 minor units."""
        prefix = f"{unit.symbol} "
        if not text.startswith(prefix):
            raise ValueError(f"'{text}' is not a {unit.code} amount")
        try:
            major = Decimal(text[len(prefix):])
        except InvalidOperation:
            raise ValueError(f"'{text}' is not a {unit.code} amount")
        raw = major * unit.scale
        if raw != raw.to_integral_value():
            raise ValueError(f"'{text}' has more precision than {unit.code} allows")
        return cls(int(raw), unit)

    def display(self) -> str:
        return self.unit.format(self.raw_amount)

    def to_decimal(self) -> Decimal:
        """Major-unit value, e.g. Decimal('123.45'), as written to output files."""
        exponent = Decimal(1).scaleb(-(len(str(self.unit.scale)) - 1))
        return (Decimal(self.raw_amount) / Decimal(self.unit.scale)).quantize(exponent)

    def _check_same_unit(self, other: "Money") -> None:
        if not isinstance(other, Money):
            raise TypeError(f"Cannot combine Money with {type(other).__name__}")
        if other.unit is not self.unit:
            raise CurrencyMismatchError(
                f"Cannot combine {self.unit.code} with {other.unit.code}"
            )

    def __add__(self, other: "Money[U]") -> "Money[U]":
        self._check_same_unit(other)
        return Money(self.raw_amount + other.raw_amount, self.unit)

    def __sub__(self, other: "Money[U]") -> "Money[U]":
        self._check_same_unit(other)
        return Money(self.raw_amount - other.raw_amount, self.unit)

    def __neg__(self) -> "Money[U]":
        return Money(-self.raw_amount, self.unit)

    def __lt__(self, other: "Money[U]") -> bool:
        self._check_same_unit(other)
        return self.raw_amount < other.raw_amount

    def __str__(self) -> str:
        return self.display()

    def __repr__(self) -> str:
        return f"Money({self.display()})"
