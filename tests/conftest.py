"""Shared fixtures for the minisite test-suite.

``write_content`` drops Markdown files under ``<tmp>/site/content`` and
``site_config`` points a :class:`~minisite.config.SiteConfig` at that source
folder with an output folder next to it. ``render_site`` runs the whole
pipeline with a fixed clock so generated files are stable between runs.
"""

from __future__ import annotations

import datetime as dt
import typing as typ
from textwrap import dedent

import pytest
from bs4 import BeautifulSoup

from minisite.config import SiteConfig
from minisite.site import MiniSite, SiteModel

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

NOW = dt.datetime(2024, 6, 1, 12, 0, tzinfo=dt.timezone.utc)


@pytest.fixture
def source_dir(tmp_path: Path) -> Path:
    source = tmp_path / "site"
    (source / "content").mkdir(parents=True)
    return source


@pytest.fixture
def write_content(source_dir: Path) -> cabc.Callable[[str, str], Path]:
    def write(relative: str, text: str) -> Path:
        path = source_dir / "content" / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(dedent(text).lstrip(), encoding="utf-8")
        return path

    return write


@pytest.fixture
def site_config(source_dir: Path, tmp_path: Path) -> SiteConfig:
    return SiteConfig(source=source_dir, target=tmp_path / "out", search_index_name="none")


@pytest.fixture
def render_site() -> cabc.Callable[..., SiteModel]:
    def run(config: SiteConfig, now: dt.datetime = NOW) -> SiteModel:
        model = MiniSite(config, now=now).run()
        assert model is not None
        return model

    return run


def soup(path: Path) -> BeautifulSoup:
    return BeautifulSoup(path.read_text(encoding="utf-8"), "html.parser")


def blog_post(title: str, published: str, **attributes: str) -> str:
    lines = ["---", f"minisite-blog-published-date: {published}"]
    lines.extend(f"minisite-blog-{key}: {value}" for key, value in attributes.items())
    lines.extend(["---", f"# {title}", "", f"Content of {title}.", ""])
    return "\n".join(lines)
