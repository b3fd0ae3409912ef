"""Resource locators: where bundled resources come from.

A locator points either into a packed archive (a jar, zip, wheel or tar
file plus the entry path inside it) or at a plain filesystem path.

Accepted forms::

    jar:file:///opt/app/app.jar!/templates
    zip:/opt/app/assets.zip!/static/css
    tar:file:///opt/app/assets.tar.gz!/static
    file:///opt/app/templates
    /opt/app/templates

``importlib.resources`` traversables are accepted as well; a package
imported from a zip file yields a ``zipfile.Path``, which resolves to an
archive connection.
"""

import os
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from urllib.parse import urlparse
from urllib.request import pathname2url, url2pathname

from .errors import InvalidLocatorError

ARCHIVE_SCHEMES = ("jar", "zip", "tar")
ENTRY_SEPARATOR = "!/"


@dataclass(frozen=True)
class ArchiveConnection:
    """An archive file and the entry path mounted from it."""

    archive_path: Path
    entry_name: str = ""

    @property
    def prefix(self) -> str:
        """Entry-name prefix selecting the mounted subtree.

        Empty when the whole archive is mounted.
        """
        if not self.entry_name:
            return ""
        return self.entry_name + "/"

    def __str__(self) -> str:
        return f"{self.archive_path}{ENTRY_SEPARATOR}{self.entry_name}"


@dataclass(frozen=True)
class ResourceLocator:
    """A parsed resource location."""

    scheme: str  # "archive" or "file"
    path: Path
    entry_name: str = ""

    @property
    def is_archive(self) -> bool:
        return self.scheme == "archive"

    def resolve(self) -> ArchiveConnection | Path:
        """Resolve to an archive connection or a plain filesystem path."""
        if self.is_archive:
            return ArchiveConnection(self.path, self.entry_name)
        return self.path

    def __str__(self) -> str:
        if self.is_archive:
            url = "file:" + pathname2url(str(self.path.absolute()))
            return f"jar:{url}{ENTRY_SEPARATOR}{self.entry_name}"
        return str(self.path)

    @classmethod
    def archive(cls, archive_path: str | os.PathLike, entry_name: str = "") -> "ResourceLocator":
        return cls("archive", Path(archive_path), _normalize_entry(entry_name))

    @classmethod
    def plain(cls, path: str | os.PathLike) -> "ResourceLocator":
        return cls("file", Path(path))

    @classmethod
    def parse(cls, value: Any) -> "ResourceLocator":
        """Build a locator from a URL string, a path or a traversable.

        Raises:
            InvalidLocatorError: If the value cannot be understood
        """
        if isinstance(value, ResourceLocator):
            return value
        if isinstance(value, zipfile.Path):
            return cls.from_traversable(value)
        if isinstance(value, os.PathLike):
            return cls.plain(value)
        if not isinstance(value, str):
            raise InvalidLocatorError(f"Cannot build a resource locator from {value!r}")
        if not value:
            raise InvalidLocatorError("Empty resource locator")

        parsed = urlparse(value)
        scheme = parsed.scheme.lower()

        if scheme in ARCHIVE_SCHEMES:
            rest = value[len(scheme) + 1:]
            archive_part, sep, entry = rest.partition(ENTRY_SEPARATOR)
            if not sep:
                raise InvalidLocatorError(
                    f"Archive locator is missing '{ENTRY_SEPARATOR}': {value}"
                )
            return cls.archive(_path_from_url(archive_part), entry)
        elif scheme == "file":
            return cls.plain(_path_from_url(value))
        elif scheme == "" or len(scheme) == 1:
            # A bare path; single letters are Windows drive names
            return cls.plain(value)
        else:
            raise InvalidLocatorError(f"Unsupported locator scheme: {scheme}")

    @classmethod
    def from_traversable(cls, traversable: Any) -> "ResourceLocator":
        """Build a locator from an ``importlib.resources`` traversable."""
        if isinstance(traversable, zipfile.Path):
            return cls.archive(traversable.root.filename, traversable.at)
        if isinstance(traversable, os.PathLike):
            return cls.plain(traversable)
        raise InvalidLocatorError(
            f"Unsupported resource container: {type(traversable).__name__}"
        )


def _normalize_entry(entry_name: str) -> str:
    return entry_name.replace("\\", "/").strip("/")


def _path_from_url(url: str) -> Path:
    if url.lower().startswith("file:"):
        return Path(url2pathname(urlparse(url).path))
    return Path(url)
