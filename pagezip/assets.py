"""Working set of static and dynamic assets for a single export."""

from __future__ import annotations

import logging
from typing import Dict, List, Tuple

from .models import DynamicAsset
from .normalizer import PathNormalizer

logger = logging.getLogger("pagezip")

QUERY_MARKER = "?"


def is_dynamic(path: str) -> bool:
    """A path is dynamic when it carries a query string."""
    return QUERY_MARKER in path


class Assets:
    """Classifies discovered paths as static or dynamic, exactly once each."""

    def __init__(self) -> None:
        self.static = PathNormalizer()
        self._dynamic: Dict[str, DynamicAsset] = {}

    @property
    def dynamic(self) -> List[DynamicAsset]:
        """Dynamic assets in discovery order."""
        return list(self._dynamic.values())

    def add(self, path: str) -> None:
        if is_dynamic(path):
            if path not in self._dynamic:
                self._dynamic[path] = DynamicAsset(path)
                logger.debug("Registered dynamic asset %s", path)
            return
        if path not in self.static:
            name = self.static.register(path)
            logger.debug("Registered static asset %s as %s", path, name)

    def dynamic_names(self) -> List[Tuple[str, str]]:
        """(path, name) pairs for every dynamic asset that has been fetched."""
        return [
            (asset.path, asset.normalized_name)
            for asset in self._dynamic.values()
            if asset.normalized_name is not None
        ]

    def renamings(self) -> List[Tuple[str, str]]:
        """Static pairs followed by dynamic pairs."""
        return list(self.static.items()) + self.dynamic_names()

    def __contains__(self, path: object) -> bool:
        return path in self.static or path in self._dynamic

    def __len__(self) -> int:
        return len(self.static) + len(self._dynamic)
