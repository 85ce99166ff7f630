"""Writing events and ignored errors to an output stream."""

from __future__ import annotations

from typing import TextIO

from .event import Event


def log_event(stream: TextIO, event: Event) -> None:
    """Write the event's text on its own line."""
    print(event, file=stream)


def log_error(stream: TextIO, kind: str, error: object) -> None:
    """Report an error that was ignored."""
    print("[ERROR]", kind, "error has occured but was ignored:", error, file=stream)