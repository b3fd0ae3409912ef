"""Local file copy helpers."""

from .operations import DEFAULT_CHUNK_SIZE, FileOperations

__all__ = ["DEFAULT_CHUNK_SIZE", "FileOperations"]
