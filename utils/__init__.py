"""Shared utilities: logging and configuration."""

__all__ = ['config', 'logging_config']
