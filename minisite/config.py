from __future__ import annotations

import json
import logging
import tomllib
from dataclasses import dataclass, field, fields
from pathlib import Path

import yaml

from .errors import ConfigurationError
from .utils import parse_bool, parse_int, parse_list

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10
DEFAULT_SEARCH_INDEX = "search.json"
NO_SEARCH = "none"
SNIPPETS = ("custom_head", "custom_menu", "custom_scripts")


def load_config(path: Path) -> dict:
    if not path.exists():
        return {}
    suffix = path.suffix.lower()
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Can't read config file {path}: {exc}") from exc
    if suffix == ".toml":
        try:
            data = tomllib.loads(text)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigurationError(f"Invalid TOML in config file {path}: {exc}") from exc
    elif suffix in {".yml", ".yaml"}:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"Invalid YAML in config file {path}: {exc}") from exc
        if data is None:
            return {}
    else:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ConfigurationError(f"Invalid JSON in config file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file must be a mapping: {path}")
    return {str(key).replace("-", "_"): value for key, value in data.items()}


def resolve_snippet(inline: object, file_value: object, base_dir: Path) -> str:
    html_snippet = str(inline or "").strip()
    if html_snippet:
        return html_snippet
    file_value = str(file_value or "").strip()
    if not file_value:
        return ""
    path = Path(file_value)
    if not path.is_absolute():
        path = base_dir / path
    if not path.exists():
        logger.warning("Snippet file not found: %s", path)
        return ""
    return path.read_text(encoding="utf-8")


@dataclass
class SiteConfig:
    source: Path
    target: Path
    site_base: str = ""
    title: str | None = None
    description: str | None = None
    logo_text: str | None = None
    logo: str | None = None
    index_text: str | None = None
    index_subtitle: str | None = None
    project_name: str | None = None
    project_version: str = ""
    copyright: str | None = None
    custom_head: str = ""
    custom_menu: str = ""
    custom_scripts: str = ""
    template_prefixes: list[str] = field(default_factory=lambda: ["header.html"])
    template_suffixes: list[str] = field(default_factory=lambda: ["footer.html"])
    template_add_left_menu: bool = True
    generate_index: bool = True
    generate_sitemap: bool = True
    generate_blog: bool = True
    blog_page_size: int = DEFAULT_PAGE_SIZE
    search_index_name: str | None = DEFAULT_SEARCH_INDEX
    use_default_assets: bool = True
    skip_rendering: bool = False
    pygments_style: str = "default"
    attributes: dict[str, object] = field(default_factory=dict)
    pre_actions: list[dict] = field(default_factory=list)

    @classmethod
    def from_mapping(cls, data: dict, base_dir: Path | None = None) -> SiteConfig:
        base_dir = base_dir or Path.cwd()
        data = {str(key).replace("-", "_"): value for key, value in data.items()}
        if not data.get("source"):
            raise ConfigurationError("No source directory configured")
        if not data.get("target"):
            raise ConfigurationError("No target directory configured")
        known = {item.name: item for item in fields(cls)}
        values: dict[str, object] = {}
        for key, value in data.items():
            if key not in known or value is None:
                continue
            values[key] = value
        for key in ("source", "target"):
            path = Path(str(values[key]))
            values[key] = path if path.is_absolute() else base_dir / path
        for key in SNIPPETS:
            values[key] = resolve_snippet(values.get(key), data.get(f"{key}_file"), base_dir)
        for key in ("template_add_left_menu", "generate_index", "generate_sitemap", "generate_blog",
                    "use_default_assets", "skip_rendering"):
            if key in values:
                values[key] = parse_bool(values[key])
        if "blog_page_size" in values:
            values["blog_page_size"] = parse_int(values["blog_page_size"], DEFAULT_PAGE_SIZE)
        for key in ("template_prefixes", "template_suffixes"):
            if key in values:
                values[key] = parse_list(values[key])
        if "project_version" in values:
            values["project_version"] = str(values["project_version"])
        if "attributes" in values and not isinstance(values["attributes"], dict):
            raise ConfigurationError("attributes must be a mapping")
        if "pre_actions" in values and not isinstance(values["pre_actions"], list):
            raise ConfigurationError("pre_actions must be a list")
        return cls(**values)

    def fix_config(self) -> None:
        if not self.source.is_dir():
            raise ConfigurationError(f"Source directory not found: {self.source}")
        self.source = self.source.resolve()
        self.target = self.target.resolve()
        self.site_base = (self.site_base or "").rstrip("/")
        if self.blog_page_size <= 0:
            self.blog_page_size = DEFAULT_PAGE_SIZE

    @property
    def content_dir(self) -> Path:
        return self.source / "content"

    @property
    def templates_dir(self) -> Path:
        return self.source / "templates"

    @property
    def assets_dir(self) -> Path:
        return self.source / "assets"

    @property
    def has_search(self) -> bool:
        return self.search_index_name is not None and self.search_index_name != NO_SEARCH

    def get_logo_text(self) -> str:
        return self.logo_text or self.project_name or "Minisite"

    def get_title(self) -> str:
        return self.title or self.get_logo_text()

    def get_index_text(self) -> str:
        return self.index_text or self.project_name or self.get_logo_text()

    def get_index_subtitle(self) -> str:
        return self.index_subtitle or self.project_name or self.get_logo_text()

    def get_description(self) -> str:
        return self.description or self.get_index_subtitle()

    def get_logo(self) -> str:
        return self.logo or f"{self.site_base}/img/logo.svg"

    def create_options(self) -> dict[str, object]:
        options: dict[str, object] = dict(self.attributes)
        if self.project_version and "projectVersion" not in options:
            options["projectVersion"] = self.project_version
        return options
