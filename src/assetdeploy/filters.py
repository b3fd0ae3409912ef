"""Path filters for deciding which destination files get written.

A filter is any callable taking the candidate destination ``Path`` and
returning True to accept it. ``None`` in place of a filter accepts
everything.
"""

import fnmatch
from pathlib import Path
from typing import Callable

# Predicate over candidate destination paths
PathFilter = Callable[[Path], bool]


def accept_all(path: Path) -> bool:
    return True


def _matches(path: Path, patterns: tuple[str, ...]) -> bool:
    """Check a path's name and its full posix form against glob patterns."""
    name = path.name
    full = Path(path).as_posix()
    for pattern in patterns:
        if fnmatch.fnmatch(name, pattern):
            return True
        if fnmatch.fnmatch(full, pattern):
            return True
    return False


def matching(*patterns: str) -> PathFilter:
    """Accept only paths matching at least one glob pattern.

    Patterns are tried against the file name and the whole path, so both
    ``"*.css"`` and ``"*/fonts/*"`` work.
    """
    if not patterns:
        return accept_all

    def _filter(path: Path) -> bool:
        return _matches(Path(path), patterns)

    return _filter


def excluding(*patterns: str) -> PathFilter:
    """Reject paths matching any of the glob patterns."""

    def _filter(path: Path) -> bool:
        return not _matches(Path(path), patterns)

    return _filter


def missing_only(path: Path) -> bool:
    """Accept only destinations that do not exist yet."""
    return not Path(path).exists()


def all_of(*filters: PathFilter | None) -> PathFilter:
    """Combine filters; a path must pass every one. ``None`` entries are ignored."""
    active = [f for f in filters if f is not None]
    if not active:
        return accept_all

    def _filter(path: Path) -> bool:
        return all(f(path) for f in active)

    return _filter
