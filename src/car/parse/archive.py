"""Read and write the archive container.

An archive starts with the 8 byte OLE2 compound document signature, so it
looks like a legacy ``.xls`` spreadsheet to casual inspection. The signature is
cosmetic only. After it, every packed file is stored as one record::

    int32 name_length | name | int64 size | data

All integers are little-endian. Names are the raw bytes of the source file's
base name. There is no count and no footer; the archive ends at the first
record boundary where the stream ends.

By default the reader skips the signature without comparing it, so any 8 byte
prefix is accepted. Pass ``check_magic=True`` to reject other prefixes.
"""
import logging
import os
from dataclasses import dataclass
from struct import Struct
from typing import BinaryIO, Iterable, Iterator, Union

from ..errors import CarArchiveError, assert_eq, assert_ge, assert_le
from .utils import StreamReader

MAGIC = b"\xD0\xCF\x11\xE0\xA1\xB1\x1A\xE1"
NAME_LENGTH = Struct("<i")
FILE_SIZE = Struct("<q")
assert len(MAGIC) == 8, len(MAGIC)

NAME_LENGTH_MAX = 2 ** 31 - 1
FILE_SIZE_MAX = 2 ** 63 - 1

LOG = logging.getLogger(__name__)


@dataclass
class ArchiveEntry:
    name: bytes
    data: bytes
    offset: int = 0


def base_name(path: Union[str, bytes, "os.PathLike[str]"]) -> bytes:
    """Return the final segment of a path as raw filesystem bytes."""
    return os.path.basename(os.fsencode(path))


def write_archive(f: BinaryIO, entries: Iterable[ArchiveEntry]) -> None:
    LOG.debug("Writing archive data...")
    f.write(MAGIC)
    offset = len(MAGIC)

    for i, entry in enumerate(entries):
        name_length = len(entry.name)
        size = len(entry.data)
        assert_le("name length", NAME_LENGTH_MAX, name_length, offset, CarArchiveError)
        assert_le("file size", FILE_SIZE_MAX, size, offset, CarArchiveError)

        LOG.debug(
            "Writing entry %d '%s' (%d bytes) at %d", i, entry.name, size, offset
        )
        f.write(NAME_LENGTH.pack(name_length))
        f.write(entry.name)
        f.write(FILE_SIZE.pack(size))
        f.write(entry.data)
        offset += NAME_LENGTH.size + name_length + FILE_SIZE.size + size

    LOG.debug("Wrote archive data (%d bytes)", offset)


def read_archive(f: BinaryIO, check_magic: bool = False) -> Iterator[ArchiveEntry]:
    reader = StreamReader(f)
    LOG.debug("Reading archive data...")

    if check_magic:
        magic = reader.read_bytes(len(MAGIC), "magic")
        assert_eq("magic", MAGIC, magic, reader.prev, CarArchiveError)
    else:
        # an archive shorter than the signature is simply empty
        magic = reader.skip(len(MAGIC))
    if magic != MAGIC:
        LOG.debug("Ignoring unexpected magic %r", magic)

    i = 0
    while not reader.at_eof():
        offset = reader.offset
        (name_length,) = reader.read(NAME_LENGTH, "name length")
        assert_ge("name length", 0, name_length, reader.prev, CarArchiveError)
        name = reader.read_bytes(name_length, "name")

        (size,) = reader.read(FILE_SIZE, "file size")
        assert_ge("file size", 0, size, reader.prev, CarArchiveError)
        data = reader.read_bytes(size, "file data")

        LOG.debug("Read entry %d '%s' (%d bytes) at %d", i, name, size, offset)
        yield ArchiveEntry(name, data, offset)
        i += 1

    LOG.debug("Read archive data (%d entries)", i)
