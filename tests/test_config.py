"""Tests for navdeck.config — frozen config dataclasses and TOML loading."""

from pathlib import Path

import pytest

from navdeck.config import (
    DEFAULT_CATEGORIES,
    Category,
    LoaderConfig,
    NavigationMode,
    RouterConfig,
    SiteConfig,
    load_config,
)
from navdeck.errors import ConfigurationError


class TestRouterConfig:
    def test_defaults(self) -> None:
        cfg = RouterConfig()

        assert cfg.mode is NavigationMode.HISTORY
        assert cfg.base_path == ""

    def test_mode_from_string(self) -> None:
        assert RouterConfig(mode="hash").mode is NavigationMode.HASH  # type: ignore[arg-type]

    def test_unknown_mode(self) -> None:
        with pytest.raises(ConfigurationError, match="navigation mode"):
            RouterConfig(mode="push")  # type: ignore[arg-type]

    @pytest.mark.parametrize("base", ["app", "/app/"])
    def test_malformed_base_path(self, base: str) -> None:
        with pytest.raises(ConfigurationError, match="base_path"):
            RouterConfig(base_path=base)

    def test_frozen(self) -> None:
        cfg = RouterConfig()

        with pytest.raises(AttributeError):
            cfg.base_path = "/x"  # type: ignore[misc]

    def test_from_mapping_rejects_unknown_keys(self) -> None:
        with pytest.raises(ConfigurationError, match="Unknown RouterConfig option"):
            RouterConfig.from_mapping({"mode": "hash", "basepath": "/x"})


class TestLoaderConfig:
    def test_defaults(self) -> None:
        cfg = LoaderConfig()

        assert cfg.selector == "img.lazy"
        assert cfg.root_margin == "0px 0px 200px 0px"
        assert cfg.threshold == 0.1
        assert cfg.loaded_class == "lazy-loaded"

    @pytest.mark.parametrize("margin", ["10px", "10% 5px", "-5px 0px 200px 0px"])
    def test_valid_margins(self, margin: str) -> None:
        assert LoaderConfig(root_margin=margin).root_margin == margin

    @pytest.mark.parametrize("margin", ["", "200", "1px 2px 3px 4px 5px", "10em"])
    def test_invalid_margins(self, margin: str) -> None:
        with pytest.raises(ConfigurationError, match="root_margin"):
            LoaderConfig(root_margin=margin)

    @pytest.mark.parametrize("threshold", [-0.1, 1.5])
    def test_threshold_range(self, threshold: float) -> None:
        with pytest.raises(ConfigurationError, match="threshold"):
            LoaderConfig(threshold=threshold)

    def test_empty_selector(self) -> None:
        with pytest.raises(ConfigurationError, match="selector"):
            LoaderConfig(selector="  ")

    @pytest.mark.parametrize("selector", ["img[", "img.lazy,,", ".site-icon >"])
    def test_malformed_selector(self, selector: str) -> None:
        with pytest.raises(ConfigurationError, match="not a valid CSS selector"):
            LoaderConfig(selector=selector)

    def test_malformed_selector_from_mapping(self) -> None:
        with pytest.raises(ConfigurationError, match="not a valid CSS selector"):
            SiteConfig.from_mapping({"loader": {"selector": "img["}})

    def test_loaded_class_single_name(self) -> None:
        with pytest.raises(ConfigurationError, match="loaded_class"):
            LoaderConfig(loaded_class="a b")


class TestSiteConfig:
    def test_defaults(self) -> None:
        cfg = SiteConfig()

        assert cfg.categories == DEFAULT_CATEGORIES
        assert cfg.categories[0].route == "/ai-tools"
        assert cfg.loader.selector == "img.lazy, .site-icon.lazy"
        assert cfg.router == RouterConfig()

    def test_duplicate_categories(self) -> None:
        with pytest.raises(ConfigurationError, match="Duplicate category"):
            SiteConfig(categories=(Category("a", "A"), Category("a", "Again")))

    def test_category_lookup(self) -> None:
        cfg = SiteConfig()

        assert cfg.category("creation") == Category("creation", "Creation")
        assert cfg.category("missing") is None

    def test_page_title(self) -> None:
        cfg = SiteConfig(title="Links", tagline="All of them")

        assert cfg.page_title() == "Links - All of them"
        assert cfg.page_title("AI Tools") == "AI Tools - Links"

    def test_from_mapping_nested(self) -> None:
        cfg = SiteConfig.from_mapping(
            {
                "title": "Links",
                "router": {"mode": "hash"},
                "loader": {"threshold": 0.5},
                "categories": [{"id": "tools", "title": "Tools"}],
            }
        )

        assert cfg.title == "Links"
        assert cfg.router.mode is NavigationMode.HASH
        assert cfg.loader.threshold == 0.5
        assert cfg.categories == (Category("tools", "Tools"),)

    def test_from_mapping_category_missing_title(self) -> None:
        with pytest.raises(ConfigurationError, match="missing 'title'"):
            SiteConfig.from_mapping({"categories": [{"id": "tools"}]})

    def test_from_mapping_rejects_unknown_keys(self) -> None:
        with pytest.raises(ConfigurationError, match="Unknown SiteConfig option"):
            SiteConfig.from_mapping({"colour": "blue"})


class TestLoadConfig:
    def test_full_file(self, tmp_path: Path) -> None:
        path = tmp_path / "navdeck.toml"
        path.write_text(
            """
[site]
title = "My Links"
search_min_length = 3

[router]
mode = "hash"

[loader]
threshold = 0.25

[[categories]]
id = "tools"
title = "Tools"

[[categories]]
id = "reading"
title = "Reading"
""",
            encoding="utf-8",
        )

        cfg = load_config(path)

        assert cfg.title == "My Links"
        assert cfg.search_min_length == 3
        assert cfg.router.mode is NavigationMode.HASH
        assert cfg.loader.threshold == 0.25
        assert [c.id for c in cfg.categories] == ["tools", "reading"]

    def test_empty_file_gives_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "navdeck.toml"
        path.write_text("", encoding="utf-8")

        assert load_config(path) == SiteConfig()

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError, match="Cannot read config file"):
            load_config(tmp_path / "nope.toml")

    def test_invalid_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "navdeck.toml"
        path.write_text("[site\n", encoding="utf-8")

        with pytest.raises(ConfigurationError, match="Invalid TOML"):
            load_config(path)

    def test_unknown_table(self, tmp_path: Path) -> None:
        path = tmp_path / "navdeck.toml"
        path.write_text("[server]\nport = 1\n", encoding="utf-8")

        with pytest.raises(ConfigurationError, match="Unknown config table"):
            load_config(path)
