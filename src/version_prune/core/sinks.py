# version_prune/core/sinks.py
"""
Progress sinks: where the pruner's progress lines end up.
"""
from __future__ import annotations

import logging
import sys
from typing import TextIO

from version_prune.contracts.sink import ProgressSink

logger = logging.getLogger(__name__)


class LoggingSink:
    """Forwards progress lines to a logger at INFO level."""

    def __init__(self, log: logging.Logger | None = None) -> None:
        self._log = log or logger

    def message(self, text: str) -> None:
        self._log.info("%s", text)


class StreamSink:
    """Writes one line per message to a text stream (stdout by default)."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream

    def message(self, text: str) -> None:
        stream = self._stream or sys.stdout
        stream.write(f"{text}\n")
        stream.flush()


class BufferSink:
    """Collects progress lines in memory, e.g. for an HTTP response."""

    def __init__(self) -> None:
        self.lines: list[str] = []

    def message(self, text: str) -> None:
        self.lines.append(text)


class TeeSink:
    def __init__(self, *sinks: ProgressSink) -> None:
        self._sinks = sinks

    def message(self, text: str) -> None:
        for sink in self._sinks:
            sink.message(text)
