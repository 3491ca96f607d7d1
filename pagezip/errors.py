"""Exceptions raised while exporting a document."""

from __future__ import annotations

from typing import Optional


class ExportError(RuntimeError):
    """Base exception for every export failure."""


class DynamicFetchError(ExportError):
    """Raised when a query-bearing asset cannot be fetched; aborts the export."""

    def __init__(
        self,
        path: str,
        url: str,
        message: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        self.path = path
        self.url = url
        self.status_code = status_code
        if message is None:
            message = f"Failed to fetch dynamic asset {path}"
        if status_code is not None:
            message = f"{message} (HTTP {status_code})"
        super().__init__(f"{message}: {url}")


class ArchiveAssemblyError(ExportError):
    """Raised when the archive cannot be built or handed to its destination."""


class NormalizedNameError(ExportError, TypeError):
    """Raised on attempts to assign, delete or mutate normalized names."""
