"""Assembly of the rewritten document and its assets into one ZIP archive."""

from __future__ import annotations

import io
import logging
import os
import shutil
import tempfile
import zipfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, List, Optional, Union

from .assets import Assets
from .config import ExportConfig
from .errors import ArchiveAssemblyError, ExportError
from .storage import StorageResolver

logger = logging.getLogger("pagezip")

Destination = Union[str, os.PathLike, BinaryIO]


@dataclass
class ArchiveReport:
    """What ended up in the archive."""

    entries: List[str] = field(default_factory=list)
    missing: List[str] = field(default_factory=list)
    size: int = 0


def _write_entry(
    archive: zipfile.ZipFile, name: str, source: BinaryIO, buffer_size: int
) -> None:
    with archive.open(name, "w") as target:
        shutil.copyfileobj(source, target, length=buffer_size)


def _build(
    sink: BinaryIO,
    document: str,
    assets: Assets,
    storage: StorageResolver,
    config: ExportConfig,
) -> ArchiveReport:
    report = ArchiveReport()
    buffer_size = config.copy_buffer_size
    with zipfile.ZipFile(
        sink,
        "w",
        compression=zipfile.ZIP_DEFLATED,
        compresslevel=config.compression_level,
        allowZip64=False,
    ) as archive:
        _write_entry(
            archive,
            config.document_entry,
            io.BytesIO(document.encode("utf-8")),
            buffer_size,
        )
        report.entries.append(config.document_entry)

        for path, name in assets.static.items():
            source = storage.open(path)
            if source is None:
                logger.warning("Static asset not found, omitting %s (%s)", path, name)
                report.missing.append(path)
                continue
            with source:
                _write_entry(archive, name, source, buffer_size)
            report.entries.append(name)

        for asset in assets.dynamic:
            if asset.normalized_name is None or not asset.fetched:
                raise ArchiveAssemblyError(f"Dynamic asset was never fetched: {asset.path}")
            _write_entry(archive, asset.normalized_name, asset.open(), buffer_size)
            report.entries.append(asset.normalized_name)
    return report


def _deliver(spool: BinaryIO, destination: Destination, buffer_size: int) -> None:
    if hasattr(destination, "write"):
        shutil.copyfileobj(spool, destination, length=buffer_size)
        return

    target = Path(os.fspath(destination))
    target.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", dir=target.parent)
    try:
        with os.fdopen(fd, "wb") as tmp:
            shutil.copyfileobj(spool, tmp, length=buffer_size)
        os.replace(tmp_name, target)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def assemble_archive(
    document: str,
    assets: Assets,
    storage: StorageResolver,
    destination: Destination,
    config: Optional[ExportConfig] = None,
) -> ArchiveReport:
    """Write ``document`` plus every resolved asset to ``destination`` as a ZIP.

    The archive is finished in a temporary spool first; ``destination`` (a
    writable binary stream or a file path) only receives bytes once the
    archive trailer has been written.
    """
    config = config or ExportConfig()
    with tempfile.SpooledTemporaryFile(max_size=config.spool_threshold) as spool:
        try:
            report = _build(spool, document, assets, storage, config)
        except ExportError:
            raise
        except (OSError, RuntimeError, zipfile.LargeZipFile) as exc:
            raise ArchiveAssemblyError(f"Failed to build archive: {exc}") from exc

        report.size = spool.tell()
        spool.seek(0)
        try:
            _deliver(spool, destination, config.copy_buffer_size)
        except OSError as exc:
            raise ArchiveAssemblyError(f"Failed to deliver archive: {exc}") from exc

    logger.info(
        "Archive written: %d entr%s, %d byte(s), %d missing",
        len(report.entries),
        "y" if len(report.entries) == 1 else "ies",
        report.size,
        len(report.missing),
    )
    return report
