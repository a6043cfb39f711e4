"""Tests for configuration loading and defaults."""

from __future__ import annotations

import json

import pytest

from minisite.config import SiteConfig, load_config
from minisite.errors import ConfigurationError


def test_load_toml_yaml_and_json(tmp_path) -> None:
    toml_file = tmp_path / "minisite.toml"
    toml_file.write_text('source = "site"\nsite-base = "/docs"\n', encoding="utf-8")
    yaml_file = tmp_path / "minisite.yml"
    yaml_file.write_text("source: site\nblog_page_size: 3\n", encoding="utf-8")
    json_file = tmp_path / "minisite.json"
    json_file.write_text(json.dumps({"source": "site", "generate-blog": False}), encoding="utf-8")

    assert load_config(toml_file) == {"source": "site", "site_base": "/docs"}
    assert load_config(yaml_file) == {"source": "site", "blog_page_size": 3}
    assert load_config(json_file) == {"source": "site", "generate_blog": False}
    assert load_config(tmp_path / "missing.toml") == {}


@pytest.mark.parametrize(
    ("name", "text"),
    [("bad.toml", "source = "), ("bad.yaml", "a: [1"), ("bad.json", "{"), ("list.json", "[1, 2]")],
)
def test_load_invalid_config(tmp_path, name, text) -> None:
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_config(path)


def test_from_mapping_coerces_values(tmp_path) -> None:
    (tmp_path / "head.html").write_text("<meta name='x'>", encoding="utf-8")
    config = SiteConfig.from_mapping(
        {
            "source": "site",
            "target": "/abs/out",
            "site-base": "/docs/",
            "generate_blog": "false",
            "blog_page_size": "4",
            "template_prefixes": "a.html, b.html",
            "project_version": 1.5,
            "custom_head_file": "head.html",
            "unknown": "ignored",
        },
        tmp_path,
    )

    assert config.source == tmp_path / "site"
    assert str(config.target) == "/abs/out"
    assert config.site_base == "/docs/"
    assert config.generate_blog is False
    assert config.blog_page_size == 4
    assert config.template_prefixes == ["a.html", "b.html"]
    assert config.project_version == "1.5"
    assert config.custom_head == "<meta name='x'>"


def test_from_mapping_requires_source_and_target(tmp_path) -> None:
    with pytest.raises(ConfigurationError):
        SiteConfig.from_mapping({"target": "out"}, tmp_path)
    with pytest.raises(ConfigurationError):
        SiteConfig.from_mapping({"source": "site"}, tmp_path)


def test_missing_snippet_file_is_ignored(tmp_path, caplog) -> None:
    config = SiteConfig.from_mapping({"source": "s", "target": "t", "custom_menu_file": "nope.html"}, tmp_path)
    assert config.custom_menu == ""
    assert "Snippet file not found" in caplog.text


def test_fix_config(tmp_path) -> None:
    (tmp_path / "site").mkdir()
    config = SiteConfig(source=tmp_path / "site", target=tmp_path / "out", site_base="/docs/", blog_page_size=0)

    config.fix_config()

    assert config.site_base == "/docs"
    assert config.blog_page_size == 10
    assert config.target.is_absolute()


def test_fix_config_rejects_missing_source(tmp_path) -> None:
    config = SiteConfig(source=tmp_path / "missing", target=tmp_path / "out")
    with pytest.raises(ConfigurationError):
        config.fix_config()


def test_derived_values(tmp_path) -> None:
    config = SiteConfig(source=tmp_path, target=tmp_path)
    assert config.get_title() == "Minisite"
    assert config.get_description() == "Minisite"
    assert config.has_search

    config = SiteConfig(source=tmp_path, target=tmp_path, project_name="Widgets", index_subtitle="Tools",
                        project_version="3", attributes={"a": "b"}, search_index_name="none")
    assert config.get_index_text() == "Widgets"
    assert config.get_description() == "Tools"
    assert config.create_options() == {"a": "b", "projectVersion": "3"}
    assert not config.has_search
