"""Tests for single page rendering and asset output."""

from __future__ import annotations

from conftest import soup
from minisite.content import Page
from minisite.markup import MarkupRenderer
from minisite.menu import MENU_PLACEHOLDER
from minisite.render import (
    Renderer,
    body_shell,
    copy_assets,
    excerpt,
    mark_page_as_blog,
    write_default_assets,
)
from minisite.template import Frame

FRAME = Frame(
    prefix=f"<html><head><title>{{{{title}}}}</title></head>\n<body>\n{MENU_PLACEHOLDER}\n",
    suffix="</body></html>",
    title="Site",
    description="",
)


def test_body_shell_with_and_without_title() -> None:
    titled = body_shell("Hello", "<p>x</p>\n")
    assert "<h1>Hello</h1>" in titled
    assert '<div class="page-content-body">\n<p>x</p>\n' in titled
    assert "page-header" not in body_shell(None, "<p>x</p>")


def test_mark_page_as_blog() -> None:
    assert mark_page_as_blog("<html><body><p/></body></html>") == '<html><body class="blog"><p/></body></html>'


def test_excerpt_strips_markup_and_truncates() -> None:
    assert excerpt("<p>Hello <b>world</b></p>") == "Hello world"
    assert excerpt("<p>" + "a" * 250 + "</p>") == "a" * 200 + "..."


def test_excerpt_never_splits_entities() -> None:
    assert excerpt("<p>Fish &amp; chips &lt;3</p>") == "Fish &amp; chips &lt;3"
    text = "<p>" + "a" * 198 + " &amp; more</p>"
    assert excerpt(text) == "a" * 198 + " &amp;..."


def test_render_writes_framed_page(tmp_path) -> None:
    output = tmp_path / "docs" / "deep" / "page.html"
    page = Page("/docs/deep/page.html", "My Page", {}, "Some *text*.")

    Renderer(tmp_path, MarkupRenderer()).render(page, output, FRAME)

    document = soup(output)
    assert document.title.string == "My Page"
    assert document.h1.string == "My Page"
    assert document.find("em").string == "text"
    assert MENU_PLACEHOLDER in output.read_text(encoding="utf-8")


def test_render_without_menu_placeholder(tmp_path) -> None:
    output = tmp_path / "page.html"
    Renderer(tmp_path, MarkupRenderer()).render(Page("/page.html", "P", {}, "x"), output, FRAME, False)
    assert MENU_PLACEHOLDER not in output.read_text(encoding="utf-8")


def test_render_injects_resolved_menu(tmp_path) -> None:
    output = tmp_path / "page.html"
    renderer = Renderer(tmp_path, MarkupRenderer(), menu='<div class="page-navigation-left"></div>')

    renderer.render(Page("/page.html", "P", {}, "x"), output, FRAME)

    text = output.read_text(encoding="utf-8")
    assert MENU_PLACEHOLDER not in text
    assert '<div class="page-navigation-left"></div>' in text


def test_render_passthrough_and_post_processor(tmp_path) -> None:
    output = tmp_path / "raw.html"
    page = Page("/raw.html", None, {"minisite-passthrough": ""}, "<p>*raw*</p>")

    Renderer(tmp_path, MarkupRenderer()).render(page, output, FRAME, False, mark_page_as_blog)

    text = output.read_text(encoding="utf-8")
    assert "<p>*raw*</p>" in text
    assert '<body class="blog">' in text
    assert "<title>Site</title>" in text


def test_render_uses_global_options(tmp_path) -> None:
    output = tmp_path / "page.html"
    renderer = Renderer(tmp_path, MarkupRenderer(), {"projectVersion": "2.1"})

    renderer.render(Page("/page.html", "P", {}, "Version {projectVersion}"), output, FRAME)

    assert "Version 2.1" in output.read_text(encoding="utf-8")


def test_write_default_assets(tmp_path) -> None:
    written = write_default_assets(tmp_path, "/base", "default")

    names = sorted(path.relative_to(tmp_path).as_posix() for path in written)
    assert names == ["css/pygments.css", "css/theme.css", "img/logo.svg", "js/minisite.js"]
    assert ".codehilite" in (tmp_path / "css" / "pygments.css").read_text(encoding="utf-8")
    script = (tmp_path / "js" / "minisite.js").read_text(encoding="utf-8")
    assert "{{base}}" not in script
    assert "/base" in script
    assert "'search.json'" in script


def test_default_assets_point_at_search_index(tmp_path) -> None:
    write_default_assets(tmp_path, "", "default", "docs.json")
    script = (tmp_path / "js" / "minisite.js").read_text(encoding="utf-8")
    assert "'docs.json'" in script
    assert "{{searchIndexName}}" not in script


def test_copy_assets(tmp_path) -> None:
    assets = tmp_path / "assets"
    (assets / "img").mkdir(parents=True)
    (assets / "img" / "shot.png").write_bytes(b"png")
    target = tmp_path / "out"

    copied = copy_assets(assets, target)

    assert copied == [target / "img" / "shot.png"]
    assert (target / "img" / "shot.png").read_bytes() == b"png"
    assert copy_assets(tmp_path / "missing", target) == []
