"""Line source and line sink — the only I/O surface the services see.

A source hands out whitespace-separated tokens or whole lines on demand;
a sink accepts one line of output at a time.  Neither touches stdin or
stdout directly; the CLI injects file-backed or in-memory versions.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from typing import Protocol

from dispatchkit.domain.errors import MalformedInputError


class LineSource(Protocol):
    def next_token(self) -> str | None: ...

    def next_line(self) -> str | None: ...


class LineSink(Protocol):
    def write_line(self, line: str) -> None: ...


class TextLineSource:
    """Token/line reader over any iterable of text lines.

    Tokens may span lines.  ``next_line`` returns the unread remainder of
    the current line if one is left, otherwise the next non-blank line.
    Both return ``None`` at end of input.
    """

    def __init__(self, lines: Iterable[str]) -> None:
        self._lines: Iterator[str] = iter(lines)
        self._rest: str | None = None

    @classmethod
    def from_text(cls, text: str) -> TextLineSource:
        return cls(text.splitlines())

    def _pull(self) -> str | None:
        try:
            return next(self._lines).rstrip("\r\n")
        except StopIteration:
            return None

    def next_token(self) -> str | None:
        while self._rest is None or not self._rest.strip():
            self._rest = self._pull()
            if self._rest is None:
                return None
        parts = self._rest.split(maxsplit=1)
        self._rest = parts[1] if len(parts) > 1 else None
        return parts[0]

    def next_line(self) -> str | None:
        if self._rest is not None and self._rest.strip():
            line, self._rest = self._rest, None
            return line.strip()
        self._rest = None
        while True:
            line = self._pull()
            if line is None:
                return None
            if line.strip():
                return line.strip()


class ListSink:
    """Collects every line written; optionally forwards each one."""

    def __init__(self, forward: Callable[[str], None] | None = None) -> None:
        self.lines: list[str] = []
        self._forward = forward

    def write_line(self, line: str) -> None:
        self.lines.append(line)
        if self._forward is not None:
            self._forward(line)


def read_token(source: LineSource, what: str) -> str:
    token = source.next_token()
    if token is None:
        raise MalformedInputError(f"expected {what}, got end of input")
    return token


def read_count(source: LineSource, what: str) -> int:
    """Read a non-negative integer token."""
    token = read_token(source, what)
    return parse_non_negative(token, what)


def parse_non_negative(token: str, what: str) -> int:
    try:
        value = int(token)
    except ValueError:
        raise MalformedInputError(f"{what} must be an integer, got {token!r}") from None
    if value < 0:
        raise MalformedInputError(f"{what} must not be negative, got {value}")
    return value
