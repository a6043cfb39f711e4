from __future__ import annotations

import logging
from pathlib import Path

from .content import Page
from .errors import RenderError
from .pages import find_index_pages, index_icon, index_title, page_url

logger = logging.getLogger(__name__)

MENU_PLACEHOLDER = "<minisite-menu-placeholder/>"


def build_left_menu(files: dict[Page, Path], target: Path, site_base: str) -> str:
    items = "".join(
        f'                <li><a href="{page_url(path, target, site_base)}">'
        f'<i class="{index_icon(page)}"></i> {index_title(page)}</a></li>\n'
        for page, path in find_index_pages(files)
    )
    return (
        '        <div class="page-navigation-left">\n'
        "            <h3>Menu</h3>\n"
        "            <ul>\n"
        f"{items}"
        "            </ul>\n"
        "        </div>"
    )


def drop_left_menu(content: str) -> str:
    return content.replace(f"{MENU_PLACEHOLDER}\n", "")


def inject_menu(content: str, menu: str) -> str:
    lines = content.split("\n")
    try:
        index = lines.index(MENU_PLACEHOLDER)
    except ValueError:
        return content
    lines[index] = menu
    return "\n".join(lines)


def inject_menu_files(target: Path, menu: str) -> list[Path]:
    updated = []
    try:
        for path in sorted(target.rglob("*.html"), key=lambda p: p.as_posix()):
            text = path.read_text(encoding="utf-8")
            new_text = inject_menu(text, menu)
            if new_text == text:
                continue
            logger.debug("Replacing left menu in %s", path)
            path.write_text(new_text, encoding="utf-8")
            updated.append(path)
    except OSError as exc:
        raise RenderError(f"Can't inject menu under {target}: {exc}") from exc
    return updated
