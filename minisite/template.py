from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from .config import SiteConfig
from .content import ATTR_DESCRIPTION, ATTR_HIGHLIGHT_SKIP, Page
from .menu import MENU_PLACEHOLDER, drop_left_menu, inject_menu

logger = logging.getLogger(__name__)

TOKEN_RE = re.compile(r"\{\{(\w+)\}\}")
BUNDLED_TEMPLATES = Path(__file__).parent / "templates"

BLOG_LINK = (
    '<li class="list-inline-item"><a href="{base}/blog/"><i class="fa fa-blog fa-fw"></i></a></li>'
)
SEARCH_BUTTON = (
    '<li class="list-inline-item">'
    '<a id="search-button" href="#" data-toggle="modal" data-target="#searchModal">'
    '<i title="Search" class="fas fa-search"></i>'
    "</a>"
    "</li>\n"
)
SEARCH_MODAL = """<div class="modal fade" id="searchModal" tabindex="-1" role="dialog" aria-labelledby="searchModalLabel" aria-hidden="true">
  <div class="modal-dialog modal-dialog-centered" role="document">
    <div class="modal-content">
      <div class="modal-header">
        <h5 class="modal-title" id="searchModalLabel">Search</h5>
        <button type="button" class="close" data-dismiss="modal" aria-label="Close">
          <span aria-hidden="true">&times;</span>
        </button>
      </div>
      <div class="modal-body">
        <form onsubmit="return false;" class="form-inline">
          <div class="form-group">
            <label for="searchInput"><b>Search: </b></label>
            <input class="form-control" id="searchInput" placeholder="Enter search text and hit enter...">
          </div>
        </form>
        <div class="search-hits"></div>
      </div>
      <div class="modal-footer">
        <button type="button" class="btn btn-primary" data-dismiss="modal">Close</button>
      </div>
    </div>
  </div>
</div>"""
SEARCH_SCRIPT = '<script src="https://cdnjs.cloudflare.com/ajax/libs/fuse.js/6.4.3/fuse.min.js"></script>'
HIGHLIGHT_CSS = '<link rel="stylesheet" href="{base}/css/pygments.css?v={version}">'


def substitute(template: str, values: Mapping[str, str]) -> str:
    """Replace ``{{name}}`` tokens in one pass.

    Unknown tokens stay as they are and substituted values are not scanned
    again, so a value may safely contain ``{{...}}`` text.
    """

    def repl(match: re.Match) -> str:
        name = match.group(1)
        if name in values:
            return values[name]
        return match.group(0)

    return TOKEN_RE.sub(repl, template)


def read_templates(layout: Path, names: list[str]) -> str:
    parts = []
    for name in names:
        path = layout / name
        if not path.exists():
            path = BUNDLED_TEMPLATES / name
        if not path.exists():
            logger.debug("No template fragment %s, skipping", name)
            continue
        parts.append(path.read_text(encoding="utf-8").rstrip("\n"))
    return "\n".join(parts)


@dataclass(frozen=True)
class TemplateTokens:
    base: str = ""
    logo_text: str = "Minisite"
    logo: str = "/img/logo.svg"
    project_version: str = ""
    custom_head: str = ""
    custom_menu: str = ""
    custom_scripts: str = ""
    copyright: str = "&copy;"
    blog: bool = False
    search: bool = False

    @classmethod
    def from_config(cls, config: SiteConfig, has_blog: bool) -> TemplateTokens:
        return cls(
            base=config.site_base,
            logo_text=config.get_logo_text(),
            logo=config.get_logo(),
            project_version=config.project_version,
            custom_head=config.custom_head,
            custom_menu=config.custom_menu,
            custom_scripts=config.custom_scripts,
            copyright=config.copyright or f"{config.get_logo_text()} &copy;",
            blog=has_blog,
            search=config.has_search,
        )

    def values(self) -> dict[str, str]:
        scripts = self.custom_scripts.strip()
        if self.search:
            scripts = f"{scripts}\n    {SEARCH_SCRIPT}" if scripts else SEARCH_SCRIPT
        return {
            "base": self.base,
            "logoText": self.logo_text,
            "logo": self.logo,
            "projectVersion": self.project_version,
            "customHead": self.custom_head,
            "customMenu": self.custom_menu,
            "customScripts": scripts,
            "copyright": self.copyright,
            "blogLink": BLOG_LINK.format(base=self.base) if self.blog else "",
            "search": SEARCH_BUTTON if self.search else "",
            "searchModal": SEARCH_MODAL if self.search else "",
        }


@dataclass(frozen=True)
class Frame:
    prefix: str
    suffix: str
    title: str
    description: str
    base: str = ""
    project_version: str = ""

    def page_values(self, page: Page) -> dict[str, str]:
        attributes = page.attributes or {}
        description = attributes.get(ATTR_DESCRIPTION)
        highlight = ""
        if ATTR_HIGHLIGHT_SKIP not in attributes:
            highlight = HIGHLIGHT_CSS.format(base=self.base, version=self.project_version)
        return {
            "title": page.title or self.title,
            "description": str(description) if description is not None else self.description,
            "highlightCss": highlight,
        }

    def apply(self, page: Page, body: str, include_menu: bool = True, menu: str | None = None) -> str:
        values = self.page_values(page)
        prefix = substitute(self.prefix, values)
        if not include_menu:
            prefix = drop_left_menu(prefix)
        elif menu is not None:
            prefix = inject_menu(prefix, menu)
        return "\n".join([prefix, body, substitute(self.suffix, values)])


def create_frame(config: SiteConfig, has_blog: bool) -> Frame:
    tokens = TemplateTokens.from_config(config, has_blog).values()
    layout = config.templates_dir
    prefix = substitute(read_templates(layout, config.template_prefixes), tokens)
    suffix = substitute(read_templates(layout, config.template_suffixes), tokens)
    if config.template_add_left_menu:
        prefix += f"\n{MENU_PLACEHOLDER}\n"
    return Frame(
        prefix=prefix,
        suffix=suffix,
        title=config.get_title(),
        description=config.get_description(),
        base=config.site_base,
        project_version=config.project_version,
    )
