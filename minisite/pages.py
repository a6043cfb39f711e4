from __future__ import annotations

import datetime as dt
import html
import typing as typ
from pathlib import Path

from .content import (
    ATTR_INDEX,
    ATTR_INDEX_DESCRIPTION,
    ATTR_INDEX_ICON,
    ATTR_INDEX_TITLE,
    ATTR_LASTMOD,
    ATTR_PASSTHROUGH,
    Page,
)
from .errors import IndexOrderError

if typ.TYPE_CHECKING:
    from .config import SiteConfig
    from .template import Frame

DEFAULT_ICON = "fas fa-download-alt"
RIGHT_NAVIGATION = '<div class="page-navigation-right">'


def page_url(path: Path, target: Path, site_base: str) -> str:
    return f"{site_base}/{path.relative_to(target).as_posix()}"


def index_order(page: Page) -> int:
    value = str(page.attributes[ATTR_INDEX]).strip()
    try:
        return int(value)
    except ValueError as exc:
        raise IndexOrderError(f"Invalid {ATTR_INDEX} value {value!r} in {page.relative_path}") from exc


def find_index_pages(files: dict[Page, Path]) -> list[tuple[Page, Path]]:
    entries = [(page, path) for page, path in files.items() if ATTR_INDEX in page.attributes]
    return sorted(entries, key=lambda entry: index_order(entry[0]))


def index_icon(page: Page) -> str:
    icon = page.attributes.get(ATTR_INDEX_ICON)
    if icon is None:
        return DEFAULT_ICON
    icon = str(icon)
    return icon if " " in icon else f"fas fa-{icon}"


def index_title(page: Page) -> str:
    title = page.attributes.get(ATTR_INDEX_TITLE)
    return str(title) if title is not None else (page.title or "")


def index_description(page: Page) -> str:
    description = page.attributes.get(ATTR_INDEX_DESCRIPTION)
    return str(description) if description is not None else (page.title or "")


def blog_index_entry(target: Path) -> tuple[Page, Path]:
    page = Page(
        relative_path="/blog/index.html",
        title="Blog",
        attributes={
            ATTR_INDEX_ICON: "fa fa-blog",
            ATTR_INDEX_TITLE: "Blog",
            ATTR_INDEX_DESCRIPTION: "Blogging area.",
        },
        content=None,
    )
    return page, target / "blog" / "index.html"


def build_index_cards(entries: list[tuple[Page, Path]], target: Path, site_base: str) -> str:
    cards = []
    for page, path in entries:
        cards.append(
            '                    <div class="col-12 col-lg-4 py-3">\n'
            '                        <div class="card shadow-sm">\n'
            '                            <div class="card-body">\n'
            '                                <h5 class="card-title mb-3">\n'
            '                                    <span class="theme-icon-holder card-icon-holder mr-2">\n'
            f'                                        <i class="{index_icon(page)}"></i>\n'
            "                                    </span>\n"
            f'                                    <span class="card-title-text">{index_title(page)}</span>\n'
            "                                </h5>\n"
            '                                <div class="card-text">\n'
            f"                                  {index_description(page)}\n"
            "                                </div>\n"
            f'                                <a class="card-link-mask" href="{page_url(path, target, site_base)}"></a>\n'
            "                            </div>\n"
            "                        </div>\n"
            "                    </div>\n"
        )
    return "".join(cards)


def generate_index(files: dict[Page, Path], frame: Frame, config: SiteConfig, has_blog: bool) -> str:
    """Render ``index.html``: one card per page carrying ``minisite-index``.

    The blog, when generated, is appended as the last card. The index reuses
    the site frame but has neither the left menu nor the right column.
    """
    target = config.target
    entries = find_index_pages(files)
    if has_blog:
        entries.append(blog_index_entry(target))
    content = (
        '    <div class="page-content">\n'
        '        <div class="container">\n'
        f'            <h1 class="page-heading mx-auto">{config.get_index_text()} Documentation</h1>\n'
        f'            <div class="page-intro mx-auto">{config.get_index_subtitle()}</div>\n'
        '            <div class="docs-overview py-5">\n'
        '                <div class="row justify-content-center">\n'
        f"{build_index_cards(entries, target, config.site_base)}"
        "                </div>\n"
        "            </div>\n"
        "        </div>\n"
        "    </div>\n"
    )
    page = Page("/index.html", config.title or "Index", {ATTR_PASSTHROUGH: True}, content)
    return drop_right_column(frame.apply(page, content, include_menu=False))


def drop_right_column(content: str) -> str:
    start = content.find(RIGHT_NAVIGATION)
    if start < 0:
        return content
    end = content.find("</div>", start)
    if end < 0:
        return content
    return content[:start] + content[end + len("</div>") :]


def generate_sitemap(files: dict[Page, Path], target: Path, site_base: str, today: dt.date) -> str:
    now = today.isoformat()
    items = []
    for page, path in sorted(files.items(), key=lambda entry: entry[0].title or ""):
        lastmod = page.attributes.get(ATTR_LASTMOD)
        items.append(
            "    <url>\n"
            f"        <loc>{html.escape(page_url(path, target, site_base))}</loc>\n"
            f"        <lastmod>{lastmod if lastmod is not None else now}</lastmod>\n"
            "    </url>\n"
        )
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9" '
        'xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance" '
        'xsi:schemaLocation="http://www.sitemaps.org/schemas/sitemap/0.9 '
        'http://www.sitemaps.org/schemas/sitemap/0.9/sitemap.xsd">\n'
        f"{''.join(items)}"
        "</urlset>\n"
    )
