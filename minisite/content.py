from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from pathlib import Path

from .errors import ContentError, PublishedDateError, RenderError
from .markup import MarkupRenderer

MARKUP_SUFFIX = ".md"
PARTIALS_DIR = "_partials"

ATTR_PATH = "minisite-path"
ATTR_SKIP = "minisite-skip"
ATTR_PASSTHROUGH = "minisite-passthrough"
ATTR_DESCRIPTION = "minisite-description"
ATTR_HIGHLIGHT_SKIP = "minisite-highlight-skip"
ATTR_INDEX = "minisite-index"
ATTR_INDEX_ICON = "minisite-index-icon"
ATTR_INDEX_TITLE = "minisite-index-title"
ATTR_INDEX_DESCRIPTION = "minisite-index-description"
ATTR_LASTMOD = "minisite-lastmod"
BLOG_PREFIX = "minisite-blog"
ATTR_BLOG_PUBLISHED_DATE = "minisite-blog-published-date"
ATTR_BLOG_SUMMARY = "minisite-blog-summary"
ATTR_BLOG_CATEGORIES = "minisite-blog-categories"
ATTR_BLOG_AUTHORS = "minisite-blog-authors"


@dataclass(frozen=True, eq=False)
class Page:
    relative_path: str
    title: str | None
    attributes: dict[str, object]
    content: str | None

    @property
    def is_passthrough(self) -> bool:
        return ATTR_PASSTHROUGH in self.attributes


@dataclass(frozen=True, eq=False)
class BlogPage:
    page: Page
    published_date: dt.datetime


def find_pages(content_dir: Path, target: Path, markup: MarkupRenderer) -> list[Page]:
    if not content_dir.is_dir():
        raise RenderError(f"Content directory not found: {content_dir}")
    target = target.resolve()
    pages = []
    try:
        files = sorted(content_dir.rglob(f"*{MARKUP_SUFFIX}"), key=lambda p: p.as_posix())
        for md_file in files:
            if not md_file.is_file():
                continue
            relative = md_file.relative_to(content_dir)
            if relative.parts[0] == PARTIALS_DIR:
                continue
            try:
                text = md_file.read_text(encoding="utf-8")
            except UnicodeDecodeError as exc:
                raise RenderError(f"{md_file} is not valid UTF-8: {exc}") from exc
            header = markup.read_header(text)
            out = output_path(relative, header.attributes, target)
            pages.append(Page(relative_path="/" + out.relative_to(target).as_posix(), title=header.title,
                              attributes=dict(header.attributes), content=header.body))
    except OSError as exc:
        raise RenderError(f"Can't read content from {content_dir}: {exc}") from exc
    return pages


def output_path(relative: Path, attributes: dict, target: Path) -> Path:
    override = attributes.get(ATTR_PATH)
    if override is not None:
        out = (target / str(override).strip().lstrip("/")).resolve()
    else:
        out = (target / relative).with_suffix(".html")
    if out == target or not out.is_relative_to(target):
        raise ContentError(f"Output path {out} of {relative} is outside of {target}")
    return out


def is_skipped(page: Page) -> bool:
    return ATTR_SKIP in page.attributes


def is_blog_page(page: Page) -> bool:
    return any(key.startswith(BLOG_PREFIX) for key in page.attributes)


def read_published_date(page: Page, now: dt.datetime) -> dt.datetime:
    value = page.attributes.get(ATTR_BLOG_PUBLISHED_DATE)
    if value is None:
        return now
    value = str(value).strip()
    try:
        if len(value) == 10:
            return dt.datetime.combine(dt.date.fromisoformat(value), dt.time.min, tzinfo=dt.timezone.utc)
        if len(value) > 19:
            parsed = dt.datetime.fromisoformat(value.replace(" ", "T", 1))
            if parsed.tzinfo is None:
                raise ValueError("missing offset")
            return parsed
        # yyyy-MM-dd HH:mm[:ss]
        parsed = dt.datetime.strptime(value.replace(" ", "T", 1), "%Y-%m-%dT%H:%M:%S" if value.count(":") == 2 else "%Y-%m-%dT%H:%M")
        return parsed.replace(tzinfo=dt.timezone.utc)
    except ValueError as exc:
        raise PublishedDateError(f"Invalid published date {value!r} in {page.relative_path}: {exc}") from exc


def to_url_name(text: str) -> str:
    if not text:
        return ""
    out = [text[0].lower()]
    for char in text[1:]:
        lowered = char.lower()
        if char == " " or not f"a{lowered}".isidentifier():
            out.append("-")
        elif char.isupper():
            out.append("-" + lowered)
        else:
            out.append(lowered)
    slug = "".join(out)
    while "--" in slug:
        slug = slug.replace("--", "-")
    return slug


def to_human_name(text: str) -> str:
    if not text:
        return ""
    out = [text[0].upper()]
    for char in text[1:]:
        if char.isupper():
            out.append(" " + char)
        else:
            out.append(char)
    return "".join(out)
