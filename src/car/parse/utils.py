import os
from struct import Struct
from typing import Any, BinaryIO, Optional, Tuple

from ..errors import CarArchiveError, assert_le

CHUNK_SIZE = 1 << 20


def stream_length(f: BinaryIO) -> Optional[int]:
    """Return the total length of a seekable stream, or ``None``.

    The stream position is left unchanged.
    """
    if not f.seekable():
        return None
    here = f.tell()
    end = f.seek(0, os.SEEK_END)
    f.seek(here, os.SEEK_SET)
    return end


class StreamReader:
    """Read fixed-size values from a binary stream, tracking the offset.

    Unlike a plain ``f.read``, every read must be satisfied in full. A short
    read means the stream was truncated, and raises :class:`CarArchiveError`.

    For seekable streams, lengths are checked against the bytes remaining
    before reading, so a corrupt length cannot trigger a huge allocation.
    Other streams are read in bounded chunks.
    """

    def __init__(self, f: BinaryIO):
        self.f = f
        self.length = stream_length(f)
        self.offset = f.tell() if self.length is not None else 0
        self.prev = self.offset

    def remaining(self) -> Optional[int]:
        if self.length is None:
            return None
        return self.length - self.offset

    def at_eof(self) -> bool:
        remaining = self.remaining()
        if remaining is not None:
            return remaining <= 0
        peek = getattr(self.f, "peek", None)
        if peek is None:  # pragma: no cover
            raise CarArchiveError("stream is neither seekable nor peekable")
        return not peek(1)

    def read_bytes(self, length: int, name: str = "data") -> bytes:
        self.prev = self.offset
        remaining = self.remaining()
        if remaining is not None:
            assert_le(name, remaining, length, self.prev, CarArchiveError)
        value = self._read_bounded(length)
        if len(value) != length:
            raise CarArchiveError(
                f"{name}: expected {length} bytes, got {len(value)} (at {self.prev})"
            )
        self.offset += length
        return value

    def _read_bounded(self, length: int) -> bytes:
        if self.remaining() is not None:
            return self.f.read(length)
        # length is unchecked, so it must not size the buffer
        buf = bytearray()
        while len(buf) < length:
            chunk = self.f.read(min(CHUNK_SIZE, length - len(buf)))
            if not chunk:
                break
            buf += chunk
        return bytes(buf)

    def read(self, struct: Struct, name: str = "value") -> Tuple[Any, ...]:
        data = self.read_bytes(struct.size, name)
        return struct.unpack(data)

    def skip(self, length: int) -> bytes:
        """Advance past up to ``length`` bytes, returning what was skipped.

        Skipping past the end of the stream is not an error.
        """
        self.prev = self.offset
        value = self.f.read(length)
        self.offset += len(value)
        return value
