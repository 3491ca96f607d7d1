"""
Tests for pagezip.rewriter
"""

import pytest

from pagezip.assets import Assets
from pagezip.rewriter import replace_in_attributes, replace_in_text, rewrite_document
from pagezip.scanner import iter_references, scan_document


def _scanned(html):
    assets = Assets()
    scan_document(html, assets)
    return assets


def test_every_occurrence_is_replaced():
    html = '<img src="a.png"><img src="a.png"><img src="b.png">'
    assets = _scanned(html)
    assert rewrite_document(html, assets) == (
        '<img src="png_0000.png"/><img src="png_0000.png"/><img src="png_0001.png"/>'
    )
    assert rewrite_document(html, assets, mode="text") == (
        '<img src="png_0000.png"><img src="png_0000.png"><img src="png_0001.png">'
    )


def test_attribute_mode_leaves_text_content_alone():
    html = '<p>see a.png</p><img src="a.png" alt="a.png">'
    assets = _scanned(html)
    assert rewrite_document(html, assets) == (
        '<p>see a.png</p><img src="png_0000.png" alt="a.png"/>'
    )


def test_text_mode_rewrites_every_literal_occurrence():
    html = '<p>see a.png</p><img src="a.png">'
    assets = _scanned(html)
    assert rewrite_document(html, assets, mode="text") == (
        '<p>see png_0000.png</p><img src="png_0000.png">'
    )


@pytest.mark.parametrize(
    "mode, expected",
    [
        ("attribute", '<img src="png_0000.png"/><img src="png_0001.png"/>'),
        ("text", '<img src="png_0000.png"><img src="png_0001.png">'),
    ],
)
def test_shorter_path_does_not_corrupt_longer_one(mode, expected):
    html = '<img src="a.png"><img src="data/a.png">'
    assets = _scanned(html)
    assert rewrite_document(html, assets, mode=mode) == expected


def test_static_path_embedded_in_dynamic_path():
    html = '<img src="chart.aspx"><img src="chart.aspx?id=7">'
    assets = _scanned(html)
    assets.dynamic[0].normalized_name = "dyn_000.png"
    assert rewrite_document(html, assets) == (
        '<img src="aspx_0000.aspx"/><img src="dyn_000.png"/>'
    )
    assert rewrite_document(html, assets, mode="text") == (
        '<img src="aspx_0000.aspx"><img src="dyn_000.png">'
    )


def test_unquoted_value_with_apostrophe():
    html = "<img alt=don't src=\"a.png\"><p>x</p><img src='b.png'>"
    assets = _scanned(html)
    assert list(assets.static) == ["a.png", "b.png"]
    assert rewrite_document(html, assets) == (
        '<img alt="don\'t" src="png_0000.png"/><p>x</p><img src="png_0001.png"/>'
    )


def test_slash_separated_attribute():
    html = '<img/src="a.png">'
    assets = _scanned(html)
    assert list(assets.static) == ["a.png"]
    assert rewrite_document(html, assets) == '<img src="png_0000.png"/>'


def test_spaced_and_uppercase_attribute():
    html = '<link HREF = "a.png"><img src=a.png>'
    assets = _scanned(html)
    assert rewrite_document(html, assets) == (
        '<link href="png_0000.png"/><img src="png_0000.png"/>'
    )


@pytest.mark.parametrize(
    "html",
    [
        "<img alt=don't src=\"a.png\"><p>x</p><img src='b.png'>",
        '<img/src="a.png">',
        "<img src='a.png' title=\"it's > 3\"><script src=app.js></script>",
        '<table><tr><td><img src=c.png></table><link href="x.css"',
        '<img src="a.png" src="b.png"><!-- <img src="a.png"> -->',
        '<IMG SRC="a.png"><Link Href="site.css">',
    ],
)
def test_every_discovered_path_is_rewritten(html):
    assets = _scanned(html)
    names = {name for _, name in assets.renamings()}
    rewritten = rewrite_document(html, assets)
    for reference in iter_references(rewritten):
        assert reference not in assets
        assert reference in names


def test_entity_encoded_values_match_decoded_paths():
    html = '<img src="chart.aspx?a=1&amp;b=2">'
    assets = _scanned(html)
    assets.dynamic[0].normalized_name = "dyn_000.png"
    assert rewrite_document(html, assets) == '<img src="dyn_000.png"/>'


def test_other_attributes_are_untouched():
    html = '<img data-src="a.png" src="a.png" title=" src=a.png">'
    assets = _scanned(html)
    assert rewrite_document(html, assets) == (
        '<img data-src="a.png" src="png_0000.png" title=" src=a.png"/>'
    )


def test_anchor_sharing_an_asset_path_is_rewritten():
    html = '<a href="a.png"><img src="a.png"></a>'
    assets = _scanned(html)
    assert rewrite_document(html, assets) == (
        '<a href="png_0000.png"><img src="png_0000.png"/></a>'
    )


def test_unchanged_document_is_returned_verbatim():
    html = "<img src='chart.aspx?id=7'><br>"
    assets = _scanned(html)
    assert rewrite_document(html, assets) == html


def test_unknown_mode():
    with pytest.raises(ValueError):
        rewrite_document("<p></p>", Assets(), mode="regex")


def test_helpers_with_empty_tables():
    html = '<img src="a.png">'
    assert replace_in_attributes(html, {}) == html
    assert replace_in_text(html, []) == html
