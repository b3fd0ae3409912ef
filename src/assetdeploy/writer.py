"""Writes bundled resources out to the filesystem.

Two error policies apply here. ``write_resource`` and plain filesystem
copies are strict: failures raise to the caller. Archive extraction is
best-effort: an I/O failure stops the extraction, is logged as a warning
and recorded on the returned ``ExtractionResult``, but never raised.
Whatever was written before the failure stays on disk.
"""

import logging
import os
from dataclasses import dataclass, field
from importlib import resources
from pathlib import Path, PurePosixPath
from typing import Any

from .archives import ARCHIVE_ERRORS, ArchiveHandler
from .config import Config
from .errors import ResourceNotFoundError, UnsupportedArchiveError
from .files import FileOperations
from .filters import PathFilter
from .locators import ArchiveConnection, ResourceLocator

logger = logging.getLogger(__name__)


@dataclass
class ExtractionResult:
    """Outcome of a bulk copy."""

    source: str | None
    destination: Path
    files: list[Path] = field(default_factory=list)
    directories: list[Path] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class ResourceWriter:
    """Materializes resources bundled with a package.

    Resource names are resolved relative to an anchor package with
    ``importlib.resources``, so they work whether the package is installed
    as loose files or imported from a zip archive.
    """

    def __init__(
        self,
        package: str | None = None,
        config: Config | None = None,
        archive_handler: ArchiveHandler | None = None,
        file_operations: FileOperations | None = None,
    ):
        """Initialize the writer.

        Args:
            package: Anchor package for resource names (defaults to
                ``config.anchor_package``)
            config: Settings; loaded from the environment when omitted
            archive_handler: Archive reader factory
            file_operations: Copy helpers
        """
        self.config = config or Config()
        self.package = package or self.config.anchor_package
        self.archive_handler = archive_handler or ArchiveHandler()
        self.file_operations = file_operations or FileOperations(
            chunk_size=self.config.chunk_size,
            preserve_times=self.config.preserve_times,
        )

    def _resource(self, resource_name: str, package: str | None = None):
        """Find a resource's traversable, or None if it does not exist."""
        package = package or self.package
        parts = [p for p in resource_name.replace("\\", "/").split("/") if p]

        try:
            root = resources.files(package)
        except ModuleNotFoundError:
            logger.debug(f"Anchor package {package} is not importable")
            return None

        resource = root.joinpath(*parts) if parts else root
        if not (resource.is_file() or resource.is_dir()):
            return None
        return resource

    def locate(self, resource_name: str, package: str | None = None) -> ResourceLocator | None:
        """Get a locator for a bundled resource file or directory.

        Returns:
            The locator, or None if the resource does not exist
        """
        resource = self._resource(resource_name, package)
        if resource is None:
            return None
        return ResourceLocator.from_traversable(resource)

    def write_resource(
        self,
        resource_name: str,
        write_to: str | os.PathLike,
        package: str | None = None,
    ) -> Path:
        """Write a single bundled resource to a file.

        Any existing file at ``write_to`` is overwritten and missing parent
        directories are created. Nothing is written when the resource is
        missing.

        Args:
            resource_name: Resource path relative to the anchor package
            write_to: Destination file
            package: Anchor package override

        Returns:
            The destination path

        Raises:
            ResourceNotFoundError: If the resource does not exist
            OSError: If reading or writing fails
        """
        write_to = Path(write_to)
        resource = self._resource(resource_name, package)
        if resource is None or not resource.is_file():
            raise ResourceNotFoundError(resource_name, package or self.package)

        self.file_operations.ensure_directory(write_to.parent)
        with resource.open("rb") as src:
            self.file_operations.copy_stream(src, write_to)

        logger.debug(f"Wrote resource {resource_name} to {write_to}")
        return write_to

    def copy_resources(
        self,
        source_locator: Any,
        destination_path: str | os.PathLike,
        path_filter: PathFilter | None = None,
    ) -> ExtractionResult:
        """Copy resources from an archive or the filesystem to a target folder.

        Archive-backed locators are extracted best-effort (see
        ``copy_archive_entries``). A plain directory is copied recursively,
        applying ``path_filter`` to each destination file. A plain file is
        copied to ``destination_path`` itself and the filter is not consulted.

        Args:
            source_locator: ResourceLocator, URL string, path or traversable;
                None makes this a no-op
            destination_path: Target directory (or file, for a file source)
            path_filter: Optional predicate over destination paths

        Returns:
            ExtractionResult describing what was written

        Raises:
            OSError: If a plain filesystem copy fails
        """
        destination = Path(destination_path)
        if source_locator is None:
            return ExtractionResult(source=None, destination=destination)

        locator = ResourceLocator.parse(source_locator)
        target = locator.resolve()

        if isinstance(target, ArchiveConnection):
            return self.copy_archive_entries(target, destination, path_filter)

        result = ExtractionResult(source=str(locator), destination=destination)
        if target.is_dir():
            result.files = self.file_operations.copy_directory(target, destination, path_filter)
        else:
            result.files = [self.file_operations.copy_file(target, destination)]
        return result

    def copy_archive_entries(
        self,
        connection: ArchiveConnection,
        destination_path: str | os.PathLike,
        path_filter: PathFilter | None = None,
    ) -> ExtractionResult:
        """Extract the entries under a connection's mount prefix.

        Every entry in the archive is examined; those named
        ``<prefix>/...`` are written under ``destination_path`` with the
        prefix stripped. Directory markers become (possibly empty)
        directories. File entries are written only if ``path_filter`` is
        None or accepts the destination path.

        I/O failures are logged as a warning and stored on the result
        instead of being raised.
        """
        destination = Path(destination_path)
        result = ExtractionResult(source=str(connection), destination=destination)
        prefix = connection.prefix

        try:
            with self.archive_handler.open(connection.archive_path) as reader:
                for entry in reader.entries():
                    if not entry.name.startswith(prefix):
                        continue

                    relative = entry.name[len(prefix):]
                    current = self._entry_destination(destination, relative)
                    if current is None:
                        logger.warning(f"Skipping suspicious path: {entry.name}")
                        result.skipped.append(entry.name)
                        continue

                    if entry.is_directory:
                        self.file_operations.ensure_directory(current)
                        result.directories.append(current)
                    elif path_filter is None or path_filter(current):
                        with reader.open_entry(entry) as src:
                            self.file_operations.copy_stream(src, current)
                        result.files.append(current)
                    else:
                        result.skipped.append(entry.name)
        except (*ARCHIVE_ERRORS, UnsupportedArchiveError) as e:
            logger.warning(f"Extraction from {connection} stopped: {e}")
            result.error = e
            return result

        logger.info(
            f"Extracted {len(result.files)} files from {connection} to {destination}"
        )
        return result

    @staticmethod
    def _entry_destination(destination: Path, relative: str) -> Path | None:
        """Map an entry's relative name under the destination.

        Returns None for names that would land outside the destination.
        """
        rel = PurePosixPath(relative)
        if rel.is_absolute() or ".." in rel.parts:
            return None

        current = destination.joinpath(*rel.parts)
        try:
            current.resolve().relative_to(destination.resolve())
        except ValueError:
            return None
        return current


_default_writer: ResourceWriter | None = None


def get_resource_writer() -> ResourceWriter:
    """Get the shared writer instance."""
    global _default_writer
    if _default_writer is None:
        _default_writer = ResourceWriter()
    return _default_writer


def write_resource(resource_name: str, write_to: str | os.PathLike, package: str | None = None) -> Path:
    """Write a bundled resource using the shared writer."""
    return get_resource_writer().write_resource(resource_name, write_to, package)


def copy_resources(
    source_locator: Any,
    destination_path: str | os.PathLike,
    path_filter: PathFilter | None = None,
) -> ExtractionResult:
    """Copy resources using the shared writer."""
    return get_resource_writer().copy_resources(source_locator, destination_path, path_filter)


def locate_resource(resource_name: str, package: str | None = None) -> ResourceLocator | None:
    """Locate a bundled resource using the shared writer."""
    return get_resource_writer().locate(resource_name, package)
