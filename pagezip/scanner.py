"""Asset discovery from rendered markup."""

from __future__ import annotations

import logging
from typing import Iterator, List, Optional, Tuple

from bs4 import BeautifulSoup, Tag

from .assets import Assets

logger = logging.getLogger("pagezip")

WATCHED_ATTRIBUTES = ("href", "src")
NAVIGATION_TAGS = frozenset({"a"})


def parse_document(html: str) -> BeautifulSoup:
    """Parse markup the same way for discovery and rewriting."""
    return BeautifulSoup(html, "html.parser")


def iter_reference_attributes(
    soup: BeautifulSoup, include_navigation: bool = False
) -> Iterator[Tuple[Tag, str, str]]:
    """Yield ``(tag, attribute, value)`` for every watched attribute in document order.

    Anchors are skipped unless ``include_navigation`` is set: they point at
    pages, not embeddable assets.
    """
    for tag in soup.find_all(True):
        if tag.name in NAVIGATION_TAGS and not include_navigation:
            continue
        for attr in WATCHED_ATTRIBUTES:
            value = tag.get(attr)
            if value is None or not value.strip():
                continue
            yield tag, attr, value


def iter_references(html: str) -> Iterator[str]:
    """Yield every asset reference in document order, repeats included."""
    for _, _, value in iter_reference_attributes(parse_document(html)):
        yield value


def scan_document(html: str, assets: Optional[Assets] = None) -> List[str]:
    """Feed each discovered path into ``assets``; return the unique paths in order."""
    if assets is None:
        assets = Assets()
    discovered = {}
    for path in iter_references(html):
        assets.add(path)
        discovered.setdefault(path, None)
    paths = list(discovered)
    logger.info("Discovered %d asset reference(s)", len(paths))
    return paths
