"""Rewrite asset references in the rendered document to archive names."""

from __future__ import annotations

import logging
import re
from typing import Dict, Iterable, Tuple

from .assets import Assets
from .scanner import iter_reference_attributes, parse_document

logger = logging.getLogger("pagezip")


def replace_in_attributes(document: str, table: Dict[str, str]) -> str:
    """Swap href/src values that equal a known path, leaving other text untouched.

    Works on the same parse the scanner reads, so every discovered value is
    found again. The document is re-serialized only when something changed.
    """
    if not table:
        return document
    soup = parse_document(document)
    replaced = 0
    for tag, attr, value in iter_reference_attributes(soup, include_navigation=True):
        name = table.get(value)
        if name is not None:
            tag[attr] = name
            replaced += 1
    if not replaced:
        return document
    logger.debug("Replaced %d attribute value(s)", replaced)
    return str(soup)


def replace_in_text(document: str, pairs: Iterable[Tuple[str, str]]) -> str:
    """Replace every literal occurrence of each path in one pass, longest first."""
    table = dict(pairs)
    if not table:
        return document
    pattern = re.compile(
        "|".join(re.escape(path) for path in sorted(table, key=len, reverse=True))
    )
    return pattern.sub(lambda match: table[match.group(0)], document)


def rewrite_document(document: str, assets: Assets, mode: str = "attribute") -> str:
    """Return ``document`` with every discovered path replaced by its archive name.

    The static and dynamic tables never share a key, so their order does not
    matter. ``mode="text"`` rewrites every literal occurrence in the
    document, including ones outside attributes.
    """
    static_pairs = list(assets.static.items())
    dynamic_pairs = assets.dynamic_names()
    if mode == "text":
        updated = replace_in_text(document, static_pairs + dynamic_pairs)
    elif mode == "attribute":
        updated = replace_in_attributes(document, dict(static_pairs + dynamic_pairs))
    else:
        raise ValueError(f"Unknown rewrite mode: {mode!r}")
    logger.info(
        "Rewrote document with %d static and %d dynamic name(s)",
        len(static_pairs),
        len(dynamic_pairs),
    )
    return updated
