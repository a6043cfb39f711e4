from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass, field
from pathlib import Path

from .actions import execute_pre_actions
from .blog import BlogPaginator
from .config import DEFAULT_SEARCH_INDEX, SiteConfig
from .content import BlogPage, Page, find_pages, is_blog_page, is_skipped, read_published_date
from .errors import RenderError
from .markup import MarkupPool, MarkupRenderer
from .menu import build_left_menu, inject_menu_files
from .pages import generate_index, generate_sitemap
from .render import Renderer, copy_assets, write_default_assets, write_text
from .search import index_site, write_index
from .template import create_frame

logger = logging.getLogger(__name__)


@dataclass
class SiteModel:
    files: dict[Page, Path] = field(default_factory=dict)
    regular: list[Page] = field(default_factory=list)
    blog: list[BlogPage] = field(default_factory=list)
    menu: str = ""
    generate_blog: bool = True

    @property
    def has_blog(self) -> bool:
        return self.generate_blog and bool(self.blog)


def build_site_model(pages: list[Page], config: SiteConfig, now: dt.datetime) -> SiteModel:
    """Classify discovered pages and resolve navigation before anything is written."""
    model = SiteModel(generate_blog=config.generate_blog)
    for page in pages:
        if is_skipped(page):
            logger.debug("Skipping %s", page.relative_path)
            continue
        out = config.target / page.relative_path.lstrip("/")
        if is_blog_page(page):
            published_date = read_published_date(page, now)
            if published_date > now:
                logger.debug("%s is not yet published (%s)", page.relative_path, published_date)
                continue
            model.blog.append(BlogPage(page, published_date))
            if config.generate_blog:
                model.files[page] = out
        else:
            model.regular.append(page)
            model.files[page] = out
    if config.template_add_left_menu:
        model.menu = build_left_menu(model.files, config.target, config.site_base)
    return model


class MiniSite:
    def __init__(self, config: SiteConfig, pool: MarkupPool | None = None, now: dt.datetime | None = None):
        self.config = config
        self.pool = pool or MarkupPool()
        self._now = now

    def now(self) -> dt.datetime:
        if self._now is None:
            return dt.datetime.now(dt.timezone.utc)
        if self._now.tzinfo is None:
            return self._now.replace(tzinfo=dt.timezone.utc)
        return self._now

    def run(self) -> SiteModel | None:
        self.config.fix_config()
        execute_pre_actions(self.config.pre_actions, self.config.source, self.config.target)
        if self.config.skip_rendering:
            logger.info("Rendering skipped")
            return None
        with self.pool.lease() as markup:
            return self.do_render(markup, self.config.create_options())

    def do_render(self, markup: MarkupRenderer, options: dict[str, object]) -> SiteModel:
        config = self.config
        target = config.target
        now = self.now()
        try:
            target.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise RenderError(f"Can't create {target}: {exc}") from exc

        pages = find_pages(config.content_dir, target, markup)
        model = build_site_model(pages, config, now)
        frame = create_frame(config, model.has_blog)
        renderer = Renderer(target, markup, options, menu=model.menu if config.template_add_left_menu else None)

        for page in model.regular:
            renderer.render(page, model.files[page], frame)
        if model.has_blog:
            BlogPaginator(config, renderer, frame).generate(model.blog)

        if config.generate_index:
            write_text(target / "index.html", generate_index(model.files, frame, config, model.has_blog))
            logger.debug("Generated index.html")
        if config.generate_sitemap:
            write_text(target / "sitemap.xml", generate_sitemap(model.files, target, config.site_base, now.date()))
            logger.debug("Generated sitemap.xml")
        if config.use_default_assets:
            write_default_assets(target, config.site_base, config.pygments_style,
                                 config.search_index_name if config.has_search else DEFAULT_SEARCH_INDEX)
        copy_assets(config.assets_dir, target)
        if config.template_add_left_menu:
            inject_menu_files(target, model.menu)
        if config.has_search:
            write_index(index_site(target, config.site_base), target / config.search_index_name)

        logger.info("Rendered minisite '%s'", config.source.name)
        return model
