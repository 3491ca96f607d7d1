"""
Tests for pagezip.archive
"""

import io
import zipfile

import pytest

from conftest import GIF_BYTES, PNG_BYTES
from pagezip.archive import assemble_archive
from pagezip.assets import Assets
from pagezip.config import ExportConfig
from pagezip.errors import ArchiveAssemblyError


class FailingStorage:
    """Storage whose reads always fail"""

    def open(self, path):
        raise PermissionError(f"denied: {path}")


def _assets(*paths):
    assets = Assets()
    for path in paths:
        assets.add(path)
    return assets


def _fetched(assets, content=GIF_BYTES, name="dyn_000.gif"):
    asset = assets.dynamic[0]
    asset.content = io.BytesIO(content)
    asset.content.seek(len(content))
    asset.content_type = "image/gif"
    asset.normalized_name = name
    return asset


def test_entries_are_written_document_static_dynamic(storage):
    assets = _assets("/a.png", "css/site.css", "chart.aspx?id=1", "/b.png")
    _fetched(assets)
    sink = io.BytesIO()
    report = assemble_archive("<html>ok</html>", assets, storage, sink)

    with zipfile.ZipFile(io.BytesIO(sink.getvalue())) as archive:
        assert archive.namelist() == [
            "index.html",
            "png_0000.png",
            "png_0001.png",
            "css_0000.css",
            "dyn_000.gif",
        ]
        assert archive.read("index.html") == b"<html>ok</html>"
        assert archive.read("png_0000.png") == PNG_BYTES
        assert archive.read("dyn_000.gif") == GIF_BYTES
        assert all(
            info.compress_type == zipfile.ZIP_DEFLATED for info in archive.infolist()
        )
    assert report.entries == [
        "index.html",
        "png_0000.png",
        "png_0001.png",
        "css_0000.css",
        "dyn_000.gif",
    ]
    assert report.size == len(sink.getvalue())
    assert report.missing == []


def test_missing_static_assets_are_skipped(storage, caplog):
    assets = _assets("/a.png", "/gone.png")
    sink = io.BytesIO()
    with caplog.at_level("WARNING", logger="pagezip"):
        report = assemble_archive("<html></html>", assets, storage, sink)
    with zipfile.ZipFile(io.BytesIO(sink.getvalue())) as archive:
        assert archive.namelist() == ["index.html", "png_0000.png"]
    assert report.missing == ["/gone.png"]
    assert "/gone.png" in caplog.text


def test_document_only_archive(storage):
    sink = io.BytesIO()
    assemble_archive("<p>héllo</p>", Assets(), storage, sink)
    with zipfile.ZipFile(io.BytesIO(sink.getvalue())) as archive:
        assert archive.namelist() == ["index.html"]
        assert archive.read("index.html").decode("utf-8") == "<p>héllo</p>"


def test_custom_document_entry(storage):
    sink = io.BytesIO()
    assemble_archive("<p></p>", Assets(), storage, sink, ExportConfig(document_entry="page.html"))
    with zipfile.ZipFile(io.BytesIO(sink.getvalue())) as archive:
        assert archive.namelist() == ["page.html"]


def test_path_destination_is_replaced_atomically(storage, tmp_path):
    out_dir = tmp_path / "out"
    target = out_dir / "archive.zip"
    assemble_archive("<p></p>", _assets("/a.png"), storage, target)
    assert sorted(p.name for p in out_dir.iterdir()) == ["archive.zip"]
    with zipfile.ZipFile(target) as archive:
        assert archive.namelist() == ["index.html", "png_0000.png"]


def test_unfetched_dynamic_asset_fails_before_delivery(storage):
    assets = _assets("chart.aspx?id=1")
    sink = io.BytesIO()
    with pytest.raises(ArchiveAssemblyError):
        assemble_archive("<p></p>", assets, storage, sink)
    assert sink.getvalue() == b""


def test_storage_errors_leave_no_archive(tmp_path):
    target = tmp_path / "archive.zip"
    with pytest.raises(ArchiveAssemblyError) as excinfo:
        assemble_archive("<p></p>", _assets("/a.png"), FailingStorage(), target)
    assert isinstance(excinfo.value.__cause__, PermissionError)
    assert not target.exists()
    assert list(tmp_path.iterdir()) == []
