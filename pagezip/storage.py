"""Resolution of static asset paths to files on local storage."""

from __future__ import annotations

import logging
import posixpath
from pathlib import Path
from typing import BinaryIO, Optional, Protocol
from urllib.parse import unquote, urlsplit

logger = logging.getLogger("pagezip")


class StorageResolver(Protocol):
    """Anything that can open a referenced path, or report it as missing."""

    def open(self, path: str) -> Optional[BinaryIO]:
        ...


class DirectoryStorage:
    """Maps virtual application paths onto files below ``root``.

    ``~/x`` and ``/x`` are resolved from the root, bare relative paths from
    ``base`` (the virtual directory of the exported page). Anything that is
    not a regular file inside the root counts as missing.
    """

    def __init__(self, root: Path, base: str = "/") -> None:
        self.root = Path(root).resolve()
        self.base = base if base.endswith("/") else base + "/"

    def resolve(self, path: str) -> Optional[Path]:
        parts = urlsplit(path)
        if parts.scheme or parts.netloc:
            return None
        virtual = unquote(parts.path)
        if not virtual:
            return None
        if virtual.startswith("~/"):
            virtual = virtual[1:]
        elif not virtual.startswith("/"):
            virtual = posixpath.join(self.base, virtual)
        virtual = posixpath.normpath(virtual).lstrip("/")
        candidate = (self.root / virtual).resolve()
        if candidate != self.root and self.root not in candidate.parents:
            logger.debug("Refusing path outside storage root: %s", path)
            return None
        if not candidate.is_file():
            return None
        return candidate

    def open(self, path: str) -> Optional[BinaryIO]:
        candidate = self.resolve(path)
        if candidate is None:
            return None
        return candidate.open("rb")

    def __repr__(self) -> str:
        return f"DirectoryStorage({str(self.root)!r}, base={self.base!r})"
