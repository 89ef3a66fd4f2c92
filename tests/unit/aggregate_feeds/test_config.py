"""Tests for aggregate_feeds.config module."""

import pytest

from aggregate_feeds.config import AggregateConfig, apply_overrides, load_config, parse_config
from aggregate_feeds.fetch_feeds.fetch_feed import DEFAULT_USER_AGENT


class TestAggregateConfig:
    def test_defaults(self) -> None:
        config = AggregateConfig()
        assert config.mode == "isolate"
        assert config.fetch_workers == 1
        assert config.element_tracking == "latest"
        assert not config.strict

    def test_user_agent_defaults_to_fetcher_default(self) -> None:
        assert AggregateConfig().user_agent == DEFAULT_USER_AGENT

    def test_rejects_unknown_mode(self) -> None:
        with pytest.raises(ValueError):
            AggregateConfig(mode="lenient")

    def test_rejects_unknown_element_tracking(self) -> None:
        with pytest.raises(ValueError):
            AggregateConfig(element_tracking="tree")

    def test_rejects_zero_workers(self) -> None:
        with pytest.raises(ValueError):
            AggregateConfig(fetch_workers=0)


class TestLoadConfig:
    def test_loads_bundled_test_config(self) -> None:
        config = load_config("test")
        assert config.strict
        assert config.output_path.endswith("combined_feeds.json")

    def test_uses_config_env(self, monkeypatch) -> None:
        monkeypatch.setenv("CONFIG_ENV", "test")
        assert load_config().mode == "strict"

    def test_defaults_to_prod(self, monkeypatch) -> None:
        monkeypatch.delenv("CONFIG_ENV", raising=False)
        assert load_config() == load_config("prod")

    def test_loads_yaml_path(self, tmp_path) -> None:
        path = tmp_path / "custom.yaml"
        path.write_text("mode: strict\nparse_workers: 3\n")

        config = load_config(str(path))

        assert config.mode == "strict"
        assert config.parse_workers == 3
        assert config.fetch_workers == 1

    def test_empty_yaml_gives_defaults(self, tmp_path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("")

        assert load_config(str(path)) == AggregateConfig()

    def test_missing_config_raises(self) -> None:
        with pytest.raises(FileNotFoundError):
            load_config("does-not-exist")


class TestParseConfig:
    def test_rejects_unknown_keys(self) -> None:
        with pytest.raises(ValueError, match="sources"):
            parse_config({"sources": ["bbc"]})


class TestApplyOverrides:
    def test_ignores_none(self) -> None:
        config = AggregateConfig(mode="strict")
        assert apply_overrides(config, mode=None, raw_dir=None) is config

    def test_applies_values(self) -> None:
        config = apply_overrides(AggregateConfig(), mode="strict", fetch_workers=4)
        assert config.mode == "strict"
        assert config.fetch_workers == 4

    def test_validates_overrides(self) -> None:
        with pytest.raises(ValueError):
            apply_overrides(AggregateConfig(), element_tracking="tree")
