from collections.abc import Iterator
from collections.abc import Sequence


class ChunkedByteStream:
    """
    A forward-only byte cursor over a sequence of body chunks.

    The chunks are walked in place: reading never joins them into one buffer.
    A stream is meant for a single consumer and a single pass. It cannot be
    rewound, and reading one instance from several threads at once is a caller error.

    >>> s = ChunkedByteStream([b"He", b"llo"])
    >>> s.read_byte()
    72
    >>> s.read()
    b'ello'
    >>> s.read_byte() is None
    True
    """

    def __init__(self, chunks: Sequence[bytes]):
        if not chunks:
            raise ValueError("ChunkedByteStream needs at least one chunk.")
        self._chunks = tuple(chunks)
        self._available = sum(len(c) for c in self._chunks)
        self._index = 0
        self._offset = 0

    def __repr__(self) -> str:
        return f"ChunkedByteStream({len(self._chunks)} chunks, {self._available} bytes)"

    def available(self) -> int:
        """
        The total number of bytes in all chunks, as computed at construction.
        This does not decrease as the stream is consumed.
        """
        return self._available

    def read_byte(self) -> int | None:
        """
        Return the next byte as an int, or None once all chunks are exhausted.
        """
        while self._index < len(self._chunks):
            active = self._chunks[self._index]
            if self._offset < len(active):
                b = active[self._offset]
                self._offset += 1
                return b
            self._index += 1
            self._offset = 0
        return None

    def read(self, size: int = -1) -> bytes:
        """
        Read up to `size` bytes, or everything that is left if `size` is negative.
        Returns b"" at the end of the stream.
        """
        parts = []
        remaining = size
        while self._index < len(self._chunks) and remaining != 0:
            active = self._chunks[self._index]
            if remaining < 0:
                end = len(active)
            else:
                end = min(len(active), self._offset + remaining)
            part = active[self._offset:end]
            if part:
                parts.append(part)
                if remaining > 0:
                    remaining -= len(part)
            if end >= len(active):
                self._index += 1
                self._offset = 0
            else:
                self._offset = end
        return b"".join(parts)

    def __iter__(self) -> Iterator[int]:
        while (b := self.read_byte()) is not None:
            yield b
