"""Named output channels.

A channel is the user-facing transcript of one activity (for example
``React Native: Run android``). Every line is forwarded to the stdlib
``rnpack.channel`` logger with the channel name attached, and the channel
keeps the lines written since it was last cleared.
"""
from __future__ import annotations

import logging
from collections import deque
from typing import Deque, Dict, List, Tuple

CHANNEL_LOGGER_NAME = "rnpack.channel"
_MAX_LINES = 1000


class OutputChannelLogger:
    _channels: Dict[str, "OutputChannelLogger"] = {}

    def __init__(self, name: str, *, max_lines: int = _MAX_LINES) -> None:
        self.name = name
        self._logger = logging.getLogger(CHANNEL_LOGGER_NAME)
        self._lines: Deque[Tuple[int, str]] = deque(maxlen=max_lines)

    @classmethod
    def get_channel(cls, name: str) -> "OutputChannelLogger":
        """Return the channel registered under ``name``, creating it on first use."""
        channel = cls._channels.get(name)
        if channel is None:
            channel = cls(name)
            cls._channels[name] = channel
        return channel

    @classmethod
    def dispose_all(cls) -> None:
        cls._channels.clear()

    def _log(self, level: int, message: str) -> None:
        self._lines.append((level, message))
        self._logger.log(level, "[%s] %s", self.name, message, extra={"channel": self.name})

    def debug(self, message: str) -> None:
        self._log(logging.DEBUG, message)

    def info(self, message: str) -> None:
        self._log(logging.INFO, message)

    def warning(self, message: str) -> None:
        self._log(logging.WARNING, message)

    def error(self, message: str) -> None:
        self._log(logging.ERROR, message)

    def clear(self) -> None:
        self._lines.clear()

    @property
    def lines(self) -> List[str]:
        return [message for _, message in self._lines]


__all__ = ["OutputChannelLogger", "CHANNEL_LOGGER_NAME"]
