"""Archive reading for zip (jar, wheel, ...) and tar formats."""

import logging
import tarfile
import zipfile
import zlib
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import BinaryIO, Iterator

from ..errors import UnsupportedArchiveError

logger = logging.getLogger(__name__)

# Failures that count as I/O errors while reading an archive
ARCHIVE_ERRORS: tuple[type[Exception], ...] = (
    OSError,
    zipfile.BadZipFile,
    zipfile.LargeZipFile,
    tarfile.TarError,
    zlib.error,  # corrupt deflate data
    EOFError,  # truncated compressed stream
    NotImplementedError,  # unsupported compression method
    RuntimeError,  # encrypted zip entry
)


@dataclass
class ArchiveEntry:
    """Represents an entry in an archive."""

    name: str
    size: int
    is_directory: bool
    modified_time: datetime | None = None


@dataclass
class ArchiveInfo:
    """Information about an archive."""

    path: Path
    format: str
    total_size: int
    file_count: int
    entries: list[ArchiveEntry]

    @property
    def directory_count(self) -> int:
        return len(self.entries) - self.file_count


class ArchiveReader(ABC):
    """An open archive whose entries can be enumerated and streamed.

    Readers are context managers; leaving the ``with`` block closes the
    underlying archive handle.
    """

    format: str = ""

    def __init__(self, path: Path):
        self.path = path

    @abstractmethod
    def entries(self) -> Iterator[ArchiveEntry]:
        """Yield every entry in the archive, in archive order."""
        ...

    @abstractmethod
    def open_entry(self, entry: ArchiveEntry) -> BinaryIO:
        """Open a file entry for reading.

        Raises:
            IsADirectoryError: If the entry is a directory marker
        """
        ...

    @abstractmethod
    def close(self) -> None:
        ...

    def __enter__(self) -> "ArchiveReader":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class ZipArchiveReader(ArchiveReader):
    """Reader for ZIP-family archives (zip, jar, whl, pyz, ...)."""

    format = "zip"

    def __init__(self, path: Path):
        super().__init__(path)
        self._zf = zipfile.ZipFile(path, "r")

    def entries(self) -> Iterator[ArchiveEntry]:
        for info in self._zf.infolist():
            modified = None
            if info.date_time:
                try:
                    modified = datetime(*info.date_time)
                except ValueError:
                    pass

            yield ArchiveEntry(
                name=info.filename,
                size=info.file_size,
                is_directory=info.is_dir(),
                modified_time=modified,
            )

    def open_entry(self, entry: ArchiveEntry) -> BinaryIO:
        if entry.is_directory:
            raise IsADirectoryError(f"Archive entry is a directory: {entry.name}")
        return self._zf.open(entry.name, "r")

    def close(self) -> None:
        self._zf.close()


class TarArchiveReader(ArchiveReader):
    """Reader for TAR archives, compressed or not."""

    format = "tar"

    def __init__(self, path: Path):
        super().__init__(path)
        self._tf = tarfile.open(path, "r:*")  # Auto-detect compression

    @staticmethod
    def _entry_name(member: tarfile.TarInfo) -> str:
        name = member.name
        while name.startswith("./"):
            name = name[2:]
        # Match the zip convention of a trailing slash on directory markers
        if member.isdir() and not name.endswith("/"):
            name += "/"
        return name

    def entries(self) -> Iterator[ArchiveEntry]:
        for member in self._tf.getmembers():
            # Hard links are streamed from their target; symlinks and devices are skipped
            if not (member.isdir() or member.isfile() or member.islnk()):
                logger.debug(f"Ignoring non-regular tar member: {member.name}")
                continue

            modified = None
            if member.mtime:
                modified = datetime.fromtimestamp(member.mtime)

            yield ArchiveEntry(
                name=self._entry_name(member),
                size=member.size,
                is_directory=member.isdir(),
                modified_time=modified,
            )

    def open_entry(self, entry: ArchiveEntry) -> BinaryIO:
        if entry.is_directory:
            raise IsADirectoryError(f"Archive entry is a directory: {entry.name}")

        member = None
        for candidate in (entry.name, f"./{entry.name}"):
            try:
                member = self._tf.getmember(candidate)
                break
            except KeyError:
                continue
        if member is None:
            raise FileNotFoundError(f"No such archive entry: {entry.name}")

        src = self._tf.extractfile(member)
        if src is None:
            raise OSError(f"Cannot read archive entry: {entry.name}")
        return src

    def close(self) -> None:
        self._tf.close()


class ArchiveHandler:
    """Detects archive formats and opens readers for them.

    Supported formats:
    - ZIP (.zip, .jar, .war, .ear, .whl, .egg, .pyz)
    - TAR (.tar, .tar.gz, .tgz, .tar.bz2, .tbz2, .tar.xz, .txz)
    """

    # Archive extensions by type
    EXTENSIONS = {
        "zip": [".zip", ".jar", ".war", ".ear", ".whl", ".egg", ".pyz"],
        "tar": [".tar", ".tar.gz", ".tgz", ".tar.bz2", ".tbz2", ".tar.xz", ".txz"],
    }

    READERS: dict[str, type[ArchiveReader]] = {
        "zip": ZipArchiveReader,
        "tar": TarArchiveReader,
    }

    def is_archive(self, path: Path) -> bool:
        """Check if a file is a supported archive.

        Args:
            path: Path to check

        Returns:
            True if file is a supported archive
        """
        return self.get_format(path) is not None

    def get_format(self, path: Path) -> str | None:
        """Get the archive format.

        The file name is checked first; files with an unrecognized name are
        sniffed by content.

        Args:
            path: Path to archive

        Returns:
            Format string or None if not an archive
        """
        path = Path(path)
        name_lower = path.name.lower()

        for format_name, extensions in self.EXTENSIONS.items():
            for ext in extensions:
                if name_lower.endswith(ext):
                    return format_name

        if not path.is_file():
            return None
        if zipfile.is_zipfile(path):
            return "zip"
        try:
            if tarfile.is_tarfile(path):
                return "tar"
        except OSError:
            pass

        return None

    def open(self, path: Path) -> ArchiveReader:
        """Open an archive for reading.

        Args:
            path: Path to archive

        Returns:
            An ArchiveReader, to be used as a context manager

        Raises:
            FileNotFoundError: If archive doesn't exist
            UnsupportedArchiveError: If the format is not supported
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Archive not found: {path}")

        format_type = self.get_format(path)
        if not format_type:
            raise UnsupportedArchiveError(f"Unsupported archive format: {path}")

        logger.debug(f"Opening {format_type} archive {path}")
        return self.READERS[format_type](path)

    def list_contents(self, path: Path) -> ArchiveInfo:
        """List contents of an archive without extracting.

        Args:
            path: Path to archive

        Returns:
            ArchiveInfo with entry listing
        """
        with self.open(path) as reader:
            entries = list(reader.entries())
            fmt = reader.format

        files = [e for e in entries if not e.is_directory]
        return ArchiveInfo(
            path=Path(path),
            format=fmt,
            total_size=sum(e.size for e in files),
            file_count=len(files),
            entries=entries,
        )
