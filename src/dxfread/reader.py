from __future__ import annotations

from typing import Iterator, NamedTuple, TextIO

from .errors import StructuralError


class TaggedPair(NamedTuple):
    code: str
    value: str


class TaggedReader:
    """Reads (group code, value) pairs from a DXF text stream.

    Every pair spans two physical lines: the group code line followed by its
    value line. Values are returned as raw strings; interpreting them is left
    to the consumer.
    """

    def __init__(self, stream: TextIO) -> None:
        self._stream = stream
        self._lookahead: str | None = None
        self._pending: TaggedPair | None = None
        self.position = 0
        self.line_number = 0

    def __iter__(self) -> Iterator[TaggedPair]:
        while not self.at_end():
            yield self.next_pair()

    def at_end(self) -> bool:
        if self._pending is not None:
            return False
        return self._peek_line() is None

    def next_pair(self) -> TaggedPair:
        if self._pending is not None:
            pair = self._pending
            self._pending = None
            self.position += 1
            return pair
        code = self._read_line()
        if code is None:
            raise StructuralError(f"read past end of stream at line {self.line_number}")
        value = self._read_line()
        self.position += 1
        # a truncated last pair keeps its code with an empty value
        return TaggedPair(code.strip(), "" if value is None else value.strip())

    def push_back(self, pair: TaggedPair) -> None:
        if self._pending is not None:
            raise StructuralError("only one pair can be pushed back")
        self._pending = pair
        self.position -= 1

    def _peek_line(self) -> str | None:
        if self._lookahead is None:
            line = self._stream.readline()
            if not line:
                return None
            self._lookahead = line
        return self._lookahead

    def _read_line(self) -> str | None:
        line = self._peek_line()
        if line is None:
            return None
        self._lookahead = None
        self.line_number += 1
        return line.rstrip("\r\n")
