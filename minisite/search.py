from __future__ import annotations

import html
import json
import logging
import re
from collections.abc import Callable
from pathlib import Path

from .errors import RenderError
from .render import strip_tags, write_text

logger = logging.getLogger(__name__)

TITLE_RE = re.compile(r"<title>(.*?)</title>", re.IGNORECASE | re.DOTALL)
BODY_RE = re.compile(r"<body[^>]*>(.*)</body>", re.IGNORECASE | re.DOTALL)
NOISE_RE = re.compile(r"<(script|style)[^>]*>.*?</\1>", re.IGNORECASE | re.DOTALL)


def default_include(target: Path) -> Callable[[Path], bool]:
    def include(path: Path) -> bool:
        location = path.relative_to(target).as_posix()
        name = path.name
        if location.startswith("blog/") and (name.startswith("page-") or name == "index.html"):
            return False
        return True

    return include


def extract_entry(path: Path, target: Path, site_base: str) -> dict:
    text = path.read_text(encoding="utf-8")
    title_match = TITLE_RE.search(text)
    body_match = BODY_RE.search(text)
    body = NOISE_RE.sub(" ", body_match.group(1) if body_match else text)
    return {
        "title": html.unescape(title_match.group(1).strip()) if title_match else "",
        "url": f"{site_base}/{path.relative_to(target).as_posix()}",
        "content": " ".join(html.unescape(strip_tags(body)).split()),
    }


def index_site(target: Path, site_base: str, include: Callable[[Path], bool] | None = None) -> list[dict]:
    include = include or default_include(target)
    entries = []
    try:
        for path in sorted(target.rglob("*.html"), key=lambda p: p.as_posix()):
            if include(path):
                entries.append(extract_entry(path, target, site_base))
    except OSError as exc:
        raise RenderError(f"Can't index {target}: {exc}") from exc
    return entries


def write_index(entries: list[dict], output: Path) -> None:
    write_text(output, json.dumps({"entries": entries}, indent=2, ensure_ascii=True))
    logger.debug("Wrote search index %s (%d entries)", output, len(entries))
