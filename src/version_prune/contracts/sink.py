# version_prune/contracts/sink.py
"""
Progress sink protocol.

Progress output is plain, line-oriented text. Sinks decide where the
lines go (logger, terminal, HTTP response body).
"""
from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class ProgressSink(Protocol):
    def message(self, text: str) -> None: ...
