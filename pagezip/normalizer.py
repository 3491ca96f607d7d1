"""Collision-free archive names for static asset paths."""

from __future__ import annotations

from typing import Dict, Iterator, List, Optional, Tuple

from .errors import NormalizedNameError
from .utils import extension_key


def format_name(key: str, sequence: int) -> str:
    """Render the archive name for the ``sequence``-th path of an extension group."""
    return f"{key}_{sequence:04d}.{key}"


class PathNormalizer:
    """Append-only table mapping static paths to normalized archive names.

    Paths are grouped by lower-cased extension. Each group hands out a
    zero-based sequence number in first-seen order, so two distinct paths
    never share a name and a path keeps its name for the life of the table.
    Path comparison is case-sensitive.
    """

    def __init__(self) -> None:
        self._groups: Dict[str, List[Tuple[str, int]]] = {}
        self._index: Dict[str, Tuple[str, int]] = {}

    def register(self, path: str) -> str:
        """Record ``path`` if unseen and return its normalized name."""
        known = self._index.get(path)
        if known is not None:
            return format_name(*known)
        key = extension_key(path)
        group = self._groups.setdefault(key, [])
        sequence = len(group)
        group.append((path, sequence))
        self._index[path] = (key, sequence)
        return format_name(key, sequence)

    def resolve(self, path: str) -> Optional[str]:
        known = self._index.get(path)
        if known is None:
            return None
        return format_name(*known)

    def items(self) -> Tuple[Tuple[str, str], ...]:
        """All (path, name) pairs, grouped by extension in first-seen order."""
        return tuple(
            (path, format_name(key, sequence))
            for key, group in self._groups.items()
            for path, sequence in group
        )

    def __getitem__(self, path: str) -> str:
        name = self.resolve(path)
        if name is None:
            raise KeyError(path)
        return name

    def __setitem__(self, path: str, name: str) -> None:
        raise NormalizedNameError("Normalized names are derived and cannot be assigned")

    def __delitem__(self, path: str) -> None:
        raise NormalizedNameError("Normalized names cannot be removed")

    def __contains__(self, path: object) -> bool:
        return path in self._index

    def __iter__(self) -> Iterator[str]:
        return (path for path, _ in self.items())

    def __len__(self) -> int:
        return len(self._index)

    def __repr__(self) -> str:
        return f"PathNormalizer({len(self)} paths in {len(self._groups)} groups)"
