"""Logging for rnpack: named output channels and stdlib file logging."""
from .channel import OutputChannelLogger
from .stdlib_logging import configure_stdlib_logging, reset_stdlib_logging_for_tests

__all__ = ["OutputChannelLogger", "configure_stdlib_logging", "reset_stdlib_logging_for_tests"]
