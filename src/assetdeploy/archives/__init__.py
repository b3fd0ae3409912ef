"""Archive handling module."""

from .handler import (
    ARCHIVE_ERRORS,
    ArchiveEntry,
    ArchiveHandler,
    ArchiveInfo,
    ArchiveReader,
    TarArchiveReader,
    ZipArchiveReader,
)

__all__ = [
    "ARCHIVE_ERRORS",
    "ArchiveEntry",
    "ArchiveHandler",
    "ArchiveInfo",
    "ArchiveReader",
    "TarArchiveReader",
    "ZipArchiveReader",
]
