from __future__ import annotations

import contextlib
import queue
import re
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field

import markdown

LIST_MARKER_RE = re.compile(r"^(?P<indent>[ \t]*)(?:[-+*]|\d+[.)])\s+")
FENCE_RE = re.compile(r"^(?P<indent>[ \t]*)(`{3,}|~{3,})")
IMG_SRC_RE = re.compile(r'<img([^>]*?)src="([^"]+)"', re.IGNORECASE)
ATTRIBUTE_REF_RE = re.compile(r"\{([A-Za-z0-9_][\w-]*)\}")

DEFAULT_EXTENSIONS = ("fenced_code", "tables", "toc", "codehilite")


@dataclass(frozen=True)
class Header:
    title: str | None
    attributes: dict[str, object] = field(default_factory=dict)
    body: str = ""


def parse_front_matter(text: str) -> tuple[dict, str]:
    clean_text = text.lstrip("\ufeff")
    lines = clean_text.splitlines()
    if not lines or lines[0].strip() != "---":
        return {}, clean_text

    end = None
    for i in range(1, len(lines)):
        if lines[i].strip() == "---":
            end = i
            break
    if end is None:
        return {}, clean_text

    meta = {}
    for line in lines[1:end]:
        line = line.strip()
        if not line or line.startswith("#") or ":" not in line:
            continue
        key, value = line.split(":", 1)
        meta[key.strip().lower()] = value.strip()
    body = "\n".join(lines[end + 1 :])
    return meta, body


def extract_title(meta: dict, body: str) -> tuple[str | None, str]:
    if meta.get("title"):
        return str(meta["title"]), body
    lines = body.splitlines()
    for i, line in enumerate(lines):
        stripped = line.strip()
        if stripped.startswith("# "):
            title = stripped[2:].strip() or None
            new_body = "\n".join(lines[i + 1 :]).lstrip()
            return title, new_body
        if stripped:
            break
    return None, body


def normalize_list_spacing(text: str) -> str:
    # python-markdown needs a blank line before a top level list
    lines = text.splitlines()
    out: list[str] = []
    in_fence = False
    fence_marker = ""
    for line in lines:
        fence_match = FENCE_RE.match(line)
        if fence_match:
            marker = fence_match.group(2)
            if not in_fence:
                in_fence = True
                fence_marker = marker
            elif marker == fence_marker:
                in_fence = False
                fence_marker = ""
            out.append(line)
            continue
        if in_fence:
            out.append(line)
            continue
        list_match = LIST_MARKER_RE.match(line)
        if list_match and not list_match.group("indent"):
            if out and out[-1].strip() and not LIST_MARKER_RE.match(out[-1]):
                out.append("")
        out.append(line)
    return "\n".join(out)


def fix_relative_img_src(html_text: str, root: str) -> str:
    def repl(match: re.Match) -> str:
        attrs = match.group(1)
        src = match.group(2)
        if src.startswith(("http://", "https://", "data:", "#", "/", "./", "../")):
            return match.group(0)
        return f'<img{attrs}src="{root.rstrip("/")}/{src}"'

    return IMG_SRC_RE.sub(repl, html_text)


def resolve_attribute_refs(text: str, attributes: Mapping[str, object]) -> str:
    def repl(match: re.Match) -> str:
        name = match.group(1)
        if name in attributes:
            return str(attributes[name])
        return match.group(0)

    return ATTRIBUTE_REF_RE.sub(repl, text)


class MarkupRenderer:
    """Markdown engine wrapper exposing the two operations the pipeline uses."""

    def __init__(self, extensions: tuple[str, ...] = DEFAULT_EXTENSIONS, extension_configs: dict | None = None):
        self.extensions = tuple(extensions)
        self._md = markdown.Markdown(extensions=list(self.extensions), extension_configs=extension_configs or {})

    def read_header(self, text: str) -> Header:
        meta, body = parse_front_matter(text)
        title, body = extract_title(meta, body)
        return Header(title=title, attributes=meta, body=body)

    def convert(self, text: str, options: Mapping[str, object] | None = None) -> str:
        options = options or {}
        source = normalize_list_spacing(resolve_attribute_refs(text, options))
        try:
            html_text = self._md.convert(source)
        finally:
            self._md.reset()
        images_dir = options.get("imagesdir")
        if images_dir:
            html_text = fix_relative_img_src(html_text, str(images_dir))
        return html_text


class MarkupPool:
    """Leases renderers to builds; a renderer is never used by two builds at once."""

    def __init__(self, extensions: tuple[str, ...] = DEFAULT_EXTENSIONS):
        self.extensions = tuple(extensions)
        self._instances: queue.SimpleQueue[MarkupRenderer] = queue.SimpleQueue()

    def new_instance(self) -> MarkupRenderer:
        return MarkupRenderer(self.extensions)

    @contextlib.contextmanager
    def lease(self) -> Iterator[MarkupRenderer]:
        try:
            instance = self._instances.get_nowait()
        except queue.Empty:
            instance = self.new_instance()
        try:
            yield instance
        finally:
            self._instances.put(instance)

    def size(self) -> int:
        return self._instances.qsize()
