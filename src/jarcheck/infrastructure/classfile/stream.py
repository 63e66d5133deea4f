"""Bounds-checked big-endian byte cursor."""

from __future__ import annotations

from jarcheck.domain.exceptions.classfile import MalformedClassError


class ByteReader:
    """Sequential reader over class file bytes.

    Every read is bounds-checked: running past the end raises
    MalformedClassError instead of IndexError or struct.error.
    """

    __slots__ = ("_data", "_offset")

    def __init__(self, data: bytes) -> None:
        if data is None:
            raise TypeError("data must not be None")
        self._data = memoryview(data)
        self._offset = 0

    @property
    def offset(self) -> int:
        """Current position."""
        return self._offset

    @property
    def remaining(self) -> int:
        """Bytes left to read."""
        return len(self._data) - self._offset

    def u1(self) -> int:
        return self._take(1)[0]

    def u2(self) -> int:
        return int.from_bytes(self._take(2), "big")

    def u4(self) -> int:
        return int.from_bytes(self._take(4), "big")

    def read(self, size: int) -> bytes:
        """Read exactly size bytes."""
        return bytes(self._take(size))

    def skip(self, size: int) -> None:
        self._take(size)

    def _take(self, size: int) -> memoryview:
        if size > self.remaining:
            raise MalformedClassError(
                f"truncated: needed {size} bytes at offset {self._offset}, {self.remaining} left"
            )
        start = self._offset
        self._offset += size
        return self._data[start : self._offset]
