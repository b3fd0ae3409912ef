"""File operations: stream, single-file and directory-tree copies."""

import logging
import os
import shutil
from pathlib import Path
from typing import BinaryIO

from ..filters import PathFilter

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 64 * 1024


class FileOperations:
    """Copies bytes, files and directory trees onto the local filesystem.

    Every method creates the destination's missing ancestor directories
    before writing and overwrites existing files.
    """

    def __init__(self, chunk_size: int = DEFAULT_CHUNK_SIZE, preserve_times: bool = True):
        """Initialize file operations handler.

        Args:
            chunk_size: Bytes read per iteration when streaming
            preserve_times: Keep source timestamps on plain file copies
        """
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        self.chunk_size = chunk_size
        self.preserve_times = preserve_times

    @staticmethod
    def ensure_directory(path: Path) -> Path:
        """Create a directory and any missing ancestors."""
        path = Path(path)
        path.mkdir(parents=True, exist_ok=True)
        return path

    def copy_stream(self, source: BinaryIO, destination: Path) -> int:
        """Write everything readable from a byte stream to a file.

        The caller keeps ownership of ``source``; the destination file is
        closed before returning.

        Returns:
            Number of bytes written
        """
        destination = Path(destination)
        self.ensure_directory(destination.parent)

        written = 0
        with open(destination, "wb") as dst:
            while True:
                chunk = source.read(self.chunk_size)
                if not chunk:
                    break
                dst.write(chunk)
                written += len(chunk)

        logger.debug(f"Wrote {written} bytes to {destination}")
        return written

    def copy_file(self, source: Path, destination: Path) -> Path:
        """Copy a single file.

        Raises:
            FileNotFoundError: If source doesn't exist
            IsADirectoryError: If source or destination is a directory
        """
        source = Path(source)
        destination = Path(destination)

        if not source.exists():
            raise FileNotFoundError(f"Source file not found: {source}")
        if source.is_dir():
            raise IsADirectoryError(f"Source is a directory: {source}")
        if destination.is_dir():
            raise IsADirectoryError(f"Destination is a directory: {destination}")

        self.ensure_directory(destination.parent)

        if self.preserve_times:
            shutil.copy2(source, destination)
        else:
            shutil.copyfile(source, destination)

        logger.debug(f"Copied {source} to {destination}")
        return destination

    def copy_directory(
        self,
        source: Path,
        destination: Path,
        path_filter: PathFilter | None = None,
    ) -> list[Path]:
        """Copy all files from a directory tree.

        Every directory under ``source`` is recreated under ``destination``.
        Files are copied only when ``path_filter`` accepts their destination
        path. If ``destination`` lies inside ``source`` it is not descended
        into.

        Args:
            source: Source directory
            destination: Destination directory
            path_filter: Optional predicate over destination file paths

        Returns:
            List of destination file paths written

        Raises:
            NotADirectoryError: If source is not a directory
            ValueError: If source and destination are the same directory
        """
        source = Path(source)
        destination = Path(destination)

        if not source.exists():
            raise FileNotFoundError(f"Source directory not found: {source}")
        if not source.is_dir():
            raise NotADirectoryError(f"Source is not a directory: {source}")

        resolved_source = source.resolve()
        resolved_dest = destination.resolve()
        if resolved_source == resolved_dest:
            raise ValueError(f"Source and destination are the same: {source}")

        self.ensure_directory(destination)
        results = []

        for dirpath, dirnames, filenames in os.walk(source):
            current = Path(dirpath)
            rel_dir = current.relative_to(source)
            target_dir = destination / rel_dir

            # Skip the destination tree when it was created inside the source
            dirnames[:] = sorted(
                d for d in dirnames if (current / d).resolve() != resolved_dest
            )

            self.ensure_directory(target_dir)

            for name in sorted(filenames):
                dest_path = target_dir / name
                if path_filter is not None and not path_filter(dest_path):
                    logger.debug(f"Filtered out {dest_path}")
                    continue

                results.append(self.copy_file(current / name, dest_path))

        logger.info(f"Copied {len(results)} files from {source} to {destination}")
        return results
