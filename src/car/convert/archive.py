"""Pack files into an archive, and unpack or list an archive.

Only base names are stored. Unpacking joins each stored name to the output
directory as-is, so a crafted archive can write outside of it (``../x`` or an
absolute name). Pass ``sanitize=True`` to reject such names instead.
"""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Union

from pydantic import BaseModel, RootModel

from ..errors import CarArchiveError, assert_eq
from ..parse.archive import ArchiveEntry, base_name, read_archive, write_archive
from ..serde import Base64, utf8_or_none

PathArg = Union[str, "os.PathLike[str]"]

LOG = logging.getLogger(__name__)


class ArchiveInfo(BaseModel):
    name: Optional[str] = None
    name_bytes: Optional[Base64] = None
    offset: int
    size: int

    @classmethod
    def from_entry(cls, entry: ArchiveEntry) -> ArchiveInfo:
        name = utf8_or_none(entry.name)
        return cls(
            name=name,
            name_bytes=entry.name if name is None else None,
            offset=entry.offset,
            size=len(entry.data),
        )


class ArchiveManifest(RootModel[List[ArchiveInfo]]):
    pass


def _load_entries(file_paths: Iterable[PathArg]) -> Iterator[ArchiveEntry]:
    for path in file_paths:
        LOG.debug("Reading source file '%s'", path)
        with open(path, "rb") as f:
            data = f.read()
        yield ArchiveEntry(base_name(path), data)


def pack_files(archive_path: PathArg, file_paths: Iterable[PathArg]) -> None:
    """Write the files to a new archive, in order.

    An existing archive is truncated without asking. If a source file cannot be
    read, the error propagates and the partial archive is left on disk.
    """
    with open(archive_path, "wb") as f:
        write_archive(f, _load_entries(file_paths))
    LOG.debug("Packed archive '%s'", archive_path)


def check_name(name: bytes, offset: int) -> None:
    # no filesystem accepts a path with an embedded null
    assert_eq("name null byte", -1, name.find(b"\0"), offset, CarArchiveError)


def safe_join(output_dir: Path, name: bytes, offset: int) -> Path:
    """Join a stored name to the output directory, refusing to escape it."""
    check_name(name, offset)
    decoded = os.fsdecode(name)
    target = output_dir / decoded
    base = output_dir.resolve()
    resolved = target.resolve()
    if (
        not decoded
        or os.path.isabs(decoded)
        or resolved == base
        or base not in resolved.parents
    ):
        raise CarArchiveError(
            f"name: {name!r} escapes output directory (at {offset})"
        )
    return target


def unpack_archive(
    archive_path: PathArg,
    output_dir: PathArg,
    check_magic: bool = False,
    sanitize: bool = False,
) -> List[Path]:
    """Extract every record of the archive into the output directory.

    Records are written in archive order, so a repeated name is overwritten by
    the later record. The output directory is not created. On any error, files
    already extracted are left in place.

    :returns: The paths written, in record order.
    :raises CarArchiveError: If the archive is truncated or corrupt.
    :raises OSError: If the archive can't be read or a file can't be written.
    """
    output_base = Path(output_dir)
    written = []
    with open(archive_path, "rb") as f:
        for entry in read_archive(f, check_magic):
            if sanitize:
                output_path = safe_join(output_base, entry.name, entry.offset)
            else:
                check_name(entry.name, entry.offset)
                output_path = Path(os.path.join(output_base, os.fsdecode(entry.name)))
            LOG.debug("Extracting '%s' (%d bytes)", output_path, len(entry.data))
            output_path.write_bytes(entry.data)
            written.append(output_path)
    return written


def list_archive(archive_path: PathArg, check_magic: bool = False) -> ArchiveManifest:
    with open(archive_path, "rb") as f:
        infos = [ArchiveInfo.from_entry(entry) for entry in read_archive(f, check_magic)]
    return ArchiveManifest(infos)
