"""Tests for YAML config, TOML user preferences and the component registry."""

import logging

import pytest

from fieldfind.classifiers.rule_based import RuleBasedTypeClassifier
from fieldfind.core.config import ConfigLoader
from fieldfind.core.registry import ComponentRegistry
from fieldfind.core.user_config import UserConfig
from fieldfind.importers.memory import InMemoryRecordStore
from fieldfind.storage.memory import InMemoryFilterStore


class TestConfigLoader:
    def test_save_and_load(self, tmp_path):
        path = tmp_path / "conf" / "custom.yaml"
        ConfigLoader.save({"search": {"context_window": 20}}, path)

        assert ConfigLoader.load(path) == {"search": {"context_window": 20}}

    def test_empty_file_loads_as_empty_dict(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")

        assert ConfigLoader.load(path) == {}

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ConfigLoader.load(tmp_path / "nope.yaml")

    def test_non_mapping_file_is_rejected(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")

        with pytest.raises(ValueError):
            ConfigLoader.load(path)

    def test_default_config_declares_components(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        config = ConfigLoader.load()

        assert set(config["components"]) == {
            "record_store", "filter_store", "classifier", "exact_matcher", "fuzzy_matcher",
        }
        assert config["search"]["context_window"] == 50

    def test_merge_is_recursive_and_does_not_mutate(self):
        base = {"search": {"context_window": 50, "highlight_marker": "**"}, "logging": {"level": "WARNING"}}
        merged = ConfigLoader.merge(base, {"search": {"context_window": 10}, "extra": 1})

        assert merged == {
            "search": {"context_window": 10, "highlight_marker": "**"},
            "logging": {"level": "WARNING"},
            "extra": 1,
        }
        assert base["search"]["context_window"] == 50


class TestUserConfig:
    def test_missing_file_creates_defaults(self, tmp_path):
        path = tmp_path / ".fieldfind" / "config.toml"
        config = UserConfig.load(path)

        assert path.exists()
        assert config.identity.user_id == "anonymous"
        assert config.search.default_limit == 20
        assert config.ui.suggest_min_chars is None
        assert config.engine_overrides() == {}

    def test_partial_file_keeps_other_defaults(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text('[identity]\nuser_id = "maria"\nscope_id = "org-7"\n\n[search]\nfuzzy = true\n')

        config = UserConfig.load(path)

        assert config.identity.user_id == "maria"
        assert config.identity.scope_id == "org-7"
        assert config.search.fuzzy is True
        assert config.search.sort_by == "relevance"

    def test_save_round_trip(self, tmp_path):
        path = tmp_path / "config.toml"
        config = UserConfig()
        config.search.per_page = 5
        config.save(path)

        assert UserConfig.load(path).search.per_page == 5

    def test_corrupt_file_falls_back_to_defaults(self, tmp_path, caplog):
        path = tmp_path / "config.toml"
        path.write_text("[identity\nuser_id = ")

        with caplog.at_level(logging.WARNING, logger="fieldfind.core.user_config"):
            config = UserConfig.load(path)

        assert config == UserConfig()
        assert "using defaults" in caplog.text

    def test_suggestion_minimum_overrides_engine_config(self, tmp_path):
        path = tmp_path / "config.toml"
        config = UserConfig()
        config.ui.suggest_min_chars = 2
        config.save(path)

        loaded = UserConfig.load(path)
        merged = ConfigLoader.merge(
            {"search": {"suggest_min_chars": 0, "context_window": 50}},
            loaded.engine_overrides(),
        )

        assert merged["search"] == {"suggest_min_chars": 2, "context_window": 50}

    def test_unknown_keys_fall_back_to_defaults(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text('[search]\ncolour = "blue"\n')

        assert UserConfig.load(path) == UserConfig()


class TestComponentRegistry:
    def test_config_constructor(self):
        registry = ComponentRegistry()
        classifier = registry.create_instance(
            "classifier",
            "fieldfind.classifiers.rule_based.RuleBasedTypeClassifier",
            {"extra_patterns": {"ein": r"^\d{2}-\d{7}$"}},
        )

        assert isinstance(classifier, RuleBasedTypeClassifier)
        assert classifier.classify("12-3456789") == "ein"

    def test_keyword_constructor(self):
        store = ComponentRegistry().create_instance(
            "record_store",
            "fieldfind.importers.memory.InMemoryRecordStore",
            {"record_tree": {"a": {"b": 1}}},
        )

        assert isinstance(store, InMemoryRecordStore)
        assert store.get_record_tree() == {"a": {"b": 1}}

    def test_no_argument_constructor(self):
        store = ComponentRegistry().create_instance(
            "filter_store", "fieldfind.storage.memory.InMemoryFilterStore", {},
        )

        assert isinstance(store, InMemoryFilterStore)

    def test_instances_are_cached_by_name(self):
        registry = ComponentRegistry()
        first = registry.create_instance("store", "fieldfind.storage.memory.InMemoryFilterStore")

        assert registry.create_instance("store", "fieldfind.storage.memory.InMemoryFilterStore") is first

    def test_registered_class_shortcut(self):
        registry = ComponentRegistry()
        registry.register_class("memory_filters", InMemoryFilterStore)

        assert registry.load_class("memory_filters") is InMemoryFilterStore

    def test_create_component_skips_unconfigured(self):
        assert ComponentRegistry().create_component("classifier", {}) is None

    @pytest.mark.parametrize("class_path", ["nopackage.Thing", "fieldfind.core.config.Missing", "Thing"])
    def test_bad_class_path(self, class_path):
        with pytest.raises(ImportError, match="Cannot load class"):
            ComponentRegistry().load_class(class_path)

    def test_component_must_implement_its_contract(self):
        components = {"record_store": {"class": "fieldfind.storage.memory.InMemoryFilterStore"}}

        with pytest.raises(TypeError, match="IRecordStore"):
            ComponentRegistry().create_component("record_store", components)
