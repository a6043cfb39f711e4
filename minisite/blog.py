from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from .config import SiteConfig
from .content import (
    ATTR_BLOG_AUTHORS,
    ATTR_BLOG_CATEGORIES,
    ATTR_BLOG_SUMMARY,
    ATTR_PASSTHROUGH,
    BlogPage,
    Page,
    to_human_name,
    to_url_name,
)
from .errors import RenderError
from .render import Renderer, excerpt, mark_page_as_blog, write_text
from .template import Frame
from .utils import parse_list

logger = logging.getLogger(__name__)

REDIRECT_STUB = '<html><head><meta http-equiv="refresh" content="0; URL=page-1.html" /></head><body></body></html>'


@dataclass(frozen=True)
class PaginationGroup:
    posts: list[BlogPage]
    folder: str
    title: Callable[[int, int], str]


def split_by_page(posts: list[BlogPage], page_size: int) -> list[list[BlogPage]]:
    return [posts[start : start + page_size] for start in range(0, len(posts), page_size)]


def sort_posts(posts: list[BlogPage]) -> list[BlogPage]:
    return sorted(posts, key=lambda post: post.published_date)


def group_posts(posts: list[BlogPage], attribute: str) -> dict[str, tuple[str, list[BlogPage]]]:
    """Group posts by the slug of each comma separated ``attribute`` value.

    Keys keep first-seen order and posts keep the order of ``posts``. The
    label of a group is the first spelling met for its slug.
    """
    grouped: dict[str, tuple[str, list[BlogPage]]] = {}
    for post in posts:
        for value in parse_list(post.page.attributes.get(attribute)):
            _, items = grouped.setdefault(to_url_name(value), (value, []))
            if post not in items:
                items.append(post)
    return grouped


class BlogPaginator:
    def __init__(self, config: SiteConfig, renderer: Renderer, frame: Frame):
        self.target = config.target
        self.base = config.site_base
        self.page_size = config.blog_page_size if config.blog_page_size > 0 else 10
        self.blog_dir = self.target / "blog"
        self.renderer = renderer
        self.frame = frame
        self._summaries: dict[Page, str] = {}

    def generate(self, blog: list[BlogPage]) -> list[BlogPage]:
        posts = sort_posts(blog)
        try:
            self.blog_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise RenderError(f"Can't create {self.blog_dir}: {exc}") from exc
        self.paginate(PaginationGroup(posts, "", lambda number, total: f"Blog Page {number}/{total}"))
        self.paginate_per("category", "categories", ATTR_BLOG_CATEGORIES, posts)
        self.paginate_per("author", "authors", ATTR_BLOG_AUTHORS, posts)
        for idx in range(len(posts)):
            self.render_post(posts, idx)
        return posts

    def groups(self, singular: str, grouped: dict[str, tuple[str, list[BlogPage]]]) -> list[PaginationGroup]:
        groups = []
        for slug, (label, items) in grouped.items():
            human_name = to_human_name(label)
            groups.append(
                PaginationGroup(
                    items,
                    f"{singular}/{slug}/",
                    lambda number, total, name=human_name: f"Blog {name} (page {number}/{total})",
                )
            )
        return groups

    def paginate_per(self, singular: str, plural: str, attribute: str, posts: list[BlogPage]) -> bool:
        grouped = group_posts(posts, attribute)
        if not grouped:
            return False
        for group in self.groups(singular, grouped):
            self.paginate(group)
        items = "".join(
            f'<li><a href="{slug}/page-1.html">{to_human_name(label)}</a></li>\n'
            for slug, (label, _) in grouped.items()
        )
        output = self.blog_dir / singular / "index.html"
        page = Page(
            f"/blog/{singular}/index.html",
            f"Blog {plural}",
            {ATTR_PASSTHROUGH: True},
            f'<ul class="blog-{plural}">\n{items}</ul>\n',
        )
        self.renderer.render(page, output, self.frame, False, mark_page_as_blog)
        return True

    def paginate(self, group: PaginationGroup) -> list[Path]:
        if not group.posts:
            return []
        folder = self.blog_dir / group.folder
        pages = split_by_page(group.posts, self.page_size)
        total = len(pages)
        written = []
        for number, posts in enumerate(pages, start=1):
            title = group.title(number, total)
            output = folder / f"page-{number}.html"
            previous_url = self.listing_url(group, number - 1) if number > 1 else None
            next_url = self.listing_url(group, number + 1) if number < total else None
            content = (
                '<div class="blog-cards">\n'
                + "\n".join(self.card(post) for post in posts)
                + "\n</div>\n"
                + self.links(previous_url, next_url, "blog-links blog-links-page")
            )
            page = Page(f"/blog/{group.folder}page-{number}.html", title, {ATTR_PASSTHROUGH: True}, content)
            written.append(self.renderer.render(page, output, self.frame, False, mark_page_as_blog))

        redirect = folder / "index.html"
        if not redirect.exists():
            write_text(redirect, REDIRECT_STUB)
        return written

    def listing_url(self, group: PaginationGroup, number: int) -> str:
        return f"{self.base}/blog/{group.folder}page-{number}.html"

    def summary(self, post: BlogPage) -> str:
        value = post.page.attributes.get(ATTR_BLOG_SUMMARY)
        if value is not None:
            return str(value)
        if post.page not in self._summaries:
            self._summaries[post.page] = excerpt(self.renderer.to_html(post.page))
        return self._summaries[post.page]

    def card(self, post: BlogPage) -> str:
        authors = parse_list(post.page.attributes.get(ATTR_BLOG_AUTHORS))
        byline = f"by {' and '.join(authors)}, " if authors else ""
        return (
            '<div class="card shadow-sm">\n'
            '  <div class="card-body">\n'
            '      <h5 class="card-title mb-3">\n'
            '          <span class="theme-icon-holder card-icon-holder mr-2">\n'
            '              <i class="fa fa-blog"></i>\n'
            "          </span>\n"
            f'          <span class="card-title-text">{post.page.title or ""}</span>\n'
            f'          <span class="card-subtitle-text">{byline}{post.published_date.date().isoformat()}</span>\n'
            "      </h5>\n"
            '      <div class="card-text">\n'
            f"{self.summary(post)}\n"
            "      </div>\n"
            f'      <a class="card-link-mask" href="{self.base}{post.page.relative_path}"></a>\n'
            "  </div>\n"
            "</div>"
        )

    def links(self, previous_url: str | None, next_url: str | None, css_class: str = "blog-links") -> str:
        items = []
        if previous_url:
            items.append(f'  <li class="blog-link-previous"><a href="{previous_url}">Previous</a></li>\n')
        items.append(f'  <li class="blog-link-all"><a href="{self.base}/blog/index.html">All posts</a></li>\n')
        if next_url:
            items.append(f'  <li class="blog-link-next"><a href="{next_url}">Next</a></li>\n')
        return f'<ul class="{css_class}">\n{"".join(items)}</ul>\n'

    def related(self, values: list[str], heading: str, folder: str, label: Callable[[str], str]) -> str:
        if not values:
            return ""
        items = "".join(
            f'  <li><a href="{self.base}/blog/{folder}/{to_url_name(value)}/page-1.html">{label(value)}</a></li>\n'
            for value in values
        )
        return (
            '<div class="blog-categories">\n'
            f"<p>{heading}:</p>\n"
            f'<ul class="blog-links blog-categories">\n{items}</ul>\n'
            "</div>\n"
        )

    def render_post(self, posts: list[BlogPage], idx: int) -> Path:
        post = posts[idx].page
        raw_authors = post.attributes.get(ATTR_BLOG_AUTHORS)
        raw_categories = post.attributes.get(ATTR_BLOG_CATEGORIES)
        authors = self.related(
            parse_list(raw_authors),
            "From the same author" + ("s" if "," in str(raw_authors) else ""),
            "author",
            str,
        )
        categories = self.related(
            parse_list(raw_categories),
            "In the same categor" + ("ies" if "," in str(raw_categories) else "y"),
            "category",
            to_human_name,
        )
        previous_url = f"{self.base}{posts[idx - 1].page.relative_path}" if idx > 0 else None
        next_url = f"{self.base}{posts[idx + 1].page.relative_path}" if idx < len(posts) - 1 else None
        body = "\n".join(
            [self.renderer.to_html(post).strip(), authors + categories + self.links(previous_url, next_url)]
        )
        page = Page(post.relative_path, post.title, {**post.attributes, ATTR_PASSTHROUGH: True}, body)
        output = self.target / post.relative_path.lstrip("/")
        return self.renderer.render(page, output, self.frame, False, mark_page_as_blog)
