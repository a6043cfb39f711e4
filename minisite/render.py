from __future__ import annotations

import html
import logging
import re
import shutil
from collections.abc import Callable, Mapping
from dataclasses import replace
from pathlib import Path

from pygments.formatters import HtmlFormatter

from .config import DEFAULT_SEARCH_INDEX
from .content import ATTR_PASSTHROUGH, Page
from .errors import RenderError
from .markup import MarkupRenderer
from .template import BUNDLED_TEMPLATES, Frame, substitute
from .utils import site_path

logger = logging.getLogger(__name__)

TAG_RE = re.compile(r"<[^>]+>")
DEFAULT_ASSETS = ("css/theme.css", "js/minisite.js", "img/logo.svg")

PostProcessor = Callable[[str], str]


def strip_tags(html_text: str) -> str:
    return TAG_RE.sub("", html_text)


def excerpt(html_text: str, length: int = 200) -> str:
    text = " ".join(html.unescape(strip_tags(html_text)).split())
    return html.escape(text[:length], quote=False) + ("..." if len(text) > length else "")


def write_text(path: Path, text: str) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise RenderError(f"Can't write {path}: {exc}") from exc


def mark_page_as_blog(html_text: str) -> str:
    return html_text.replace("<body>", '<body class="blog">')


def body_shell(title: str | None, html_body: str) -> str:
    header = ""
    if title:
        header = (
            '            <div class="page-header">\n'
            f"                <h1>{title}</h1>\n"
            "            </div>\n"
        )
    return (
        '        <div class="container page-content">\n'
        f"{header}"
        '            <div class="page-content-body">\n'
        f"{html_body.strip()}\n"
        "            </div>\n"
        "        </div>\n"
    )


class Renderer:
    """Writes one page: markup body, body shell, frame and post-processing.

    ``menu`` is the resolved left menu. When it is ``None`` the menu
    placeholder is kept in the written file for a later injection pass.
    """

    def __init__(self, target: Path, markup: MarkupRenderer, options: Mapping[str, object] | None = None,
                 menu: str | None = None):
        self.target = target
        self.markup = markup
        self.options = dict(options or {})
        self.menu = menu

    def to_html(self, page: Page) -> str:
        if page.is_passthrough:
            return page.content or ""
        options = {**self.options, **page.attributes}
        return self.markup.convert(page.content or "", options)

    def render(self, page: Page, output_path: Path, frame: Frame, include_menu_placeholder: bool = True,
               post_processor: PostProcessor | None = None) -> Path:
        shell_page = replace(
            page,
            relative_path=site_path(self.target, output_path),
            title=page.title or frame.title,
            attributes={ATTR_PASSTHROUGH: True, **page.attributes},
            content=body_shell(page.title, self.to_html(page)),
        )
        document = frame.apply(shell_page, shell_page.content, include_menu=include_menu_placeholder, menu=self.menu)
        if post_processor is not None:
            document = post_processor(document)
        write_text(output_path, document)
        logger.debug("Rendered %s to %s", page.relative_path, output_path)
        return output_path


def write_default_assets(target: Path, site_base: str, pygments_style: str,
                         search_index_name: str = DEFAULT_SEARCH_INDEX) -> list[Path]:
    values = {"base": site_base, "searchIndexName": search_index_name}
    written = []
    for resource in DEFAULT_ASSETS:
        source = BUNDLED_TEMPLATES / "assets" / resource
        out = target / resource
        write_text(out, substitute(source.read_text(encoding="utf-8"), values))
        written.append(out)
    out = target / "css" / "pygments.css"
    write_text(out, HtmlFormatter(style=pygments_style).get_style_defs(".codehilite"))
    written.append(out)
    return written


def copy_assets(assets_dir: Path, target: Path) -> list[Path]:
    if not assets_dir.exists():
        return []
    copied = []
    try:
        for item in sorted(assets_dir.rglob("*"), key=lambda p: p.as_posix()):
            if not item.is_file():
                continue
            dest = target / item.relative_to(assets_dir)
            dest.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(item, dest)
            logger.debug("Copying %s to %s", item, dest)
            copied.append(dest)
    except OSError as exc:
        raise RenderError(f"Can't copy assets from {assets_dir}: {exc}") from exc
    return copied
