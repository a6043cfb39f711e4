from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path

from .config import DEFAULT_PAGE_SIZE, DEFAULT_SEARCH_INDEX, SiteConfig, load_config
from .errors import MinisiteError
from .site import MiniSite
from .utils import parse_bool, parse_int


def build_parser(config: dict, config_path: str) -> argparse.ArgumentParser:
    def cfg_value(key: str, default: object) -> object:
        value = config.get(key)
        return default if value is None else value

    def cfg_str(key: str, default: str) -> str:
        return str(cfg_value(key, default))

    def cfg_bool(key: str, default: bool) -> bool:
        return parse_bool(cfg_value(key, default))

    def cfg_int(key: str, default: int) -> int:
        return parse_int(cfg_value(key, default), default)

    parser = argparse.ArgumentParser(description="Render a Markdown folder to a static minisite.")
    parser.add_argument("--config", default=config_path, help="Path to site config file (TOML/YAML/JSON).")
    parser.add_argument("--source", default=cfg_str("source", "src/site"),
                        help="Site source folder (content/, templates/, assets/).")
    parser.add_argument("--target", default=cfg_str("target", "target/site"), help="Output directory.")
    parser.add_argument("--site-base", default=cfg_str("site_base", ""), help="Base URL prefix of every link.")
    parser.add_argument("--title", default=config.get("title"), help="Site title.")
    parser.add_argument("--description", default=config.get("description"), help="Site description.")
    parser.add_argument("--project-name", default=config.get("project_name"), help="Project name.")
    parser.add_argument("--project-version", default=cfg_str("project_version", ""),
                        help="Version used to invalidate browser caches.")
    parser.add_argument("--blog-page-size", default=cfg_int("blog_page_size", DEFAULT_PAGE_SIZE), type=int,
                        help="Number of posts per blog listing page.")
    parser.add_argument("--search-index-name", default=cfg_str("search_index_name", DEFAULT_SEARCH_INDEX),
                        help="Search index file name, 'none' to disable it.")
    parser.add_argument("--generate-blog", action=argparse.BooleanOptionalAction,
                        default=cfg_bool("generate_blog", True), help="Generate blog listing and post pages.")
    parser.add_argument("--generate-index", action=argparse.BooleanOptionalAction,
                        default=cfg_bool("generate_index", True), help="Generate index.html.")
    parser.add_argument("--generate-sitemap", action=argparse.BooleanOptionalAction,
                        default=cfg_bool("generate_sitemap", True), help="Generate sitemap.xml.")
    parser.add_argument("--left-menu", action=argparse.BooleanOptionalAction,
                        default=cfg_bool("template_add_left_menu", True), help="Add the left navigation menu.")
    parser.add_argument("--default-assets", action=argparse.BooleanOptionalAction,
                        default=cfg_bool("use_default_assets", True), help="Write the default theme assets.")
    parser.add_argument("--skip-rendering", action=argparse.BooleanOptionalAction,
                        default=cfg_bool("skip_rendering", False), help="Only run pre-actions.")
    parser.add_argument("--log-level", default=cfg_str("log_level", "INFO"), help="Logging level.")
    return parser


def to_config(args: argparse.Namespace, config: dict, base_dir: Path) -> SiteConfig:
    data = dict(config)
    data.update(
        {
            "source": args.source,
            "target": args.target,
            "site_base": args.site_base,
            "title": args.title,
            "description": args.description,
            "project_name": args.project_name,
            "project_version": args.project_version,
            "blog_page_size": args.blog_page_size,
            "search_index_name": args.search_index_name,
            "generate_blog": args.generate_blog,
            "generate_index": args.generate_index,
            "generate_sitemap": args.generate_sitemap,
            "template_add_left_menu": args.left_menu,
            "use_default_assets": args.default_assets,
            "skip_rendering": args.skip_rendering,
        }
    )
    return SiteConfig.from_mapping(data, base_dir)


def main(argv: list[str] | None = None) -> int:
    pre_parser = argparse.ArgumentParser(add_help=False)
    pre_parser.add_argument("--config", default="minisite.toml", help="Path to site config file (TOML/YAML/JSON).")
    pre_args, _ = pre_parser.parse_known_args(argv)
    config_path = Path(pre_args.config)
    try:
        config = load_config(config_path)
    except MinisiteError as exc:
        print(exc, file=sys.stderr)
        return 1

    args = build_parser(config, pre_args.config).parse_args(argv)
    logging.basicConfig(
        level=str(args.log_level).upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    start = time.perf_counter()
    try:
        site_config = to_config(args, config, config_path.resolve().parent)
        MiniSite(site_config).run()
    except MinisiteError as exc:
        print(exc, file=sys.stderr)
        return 1
    elapsed = time.perf_counter() - start
    print(f"Build completed in {elapsed:.2f}s.")
    print(f"Site generated in: {site_config.target}")
    return 0
