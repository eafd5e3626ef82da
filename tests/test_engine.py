"""Tests for the SearchEngine facade."""

import logging

from fieldfind.core.engine import SearchEngine
from fieldfind.core.registry import ComponentRegistry
from fieldfind.importers.memory import InMemoryRecordStore
from fieldfind.matchers.fuzzy import FuzzyMatcher
from fieldfind.models.search import SearchOptions
from fieldfind.storage.memory import InMemoryFilterStore
from tests.sample_data import DOCUMENTS, LEAF_COUNT, RECORD_TREE
from tests.fakes import UnreadableScopeStore


def test_search(engine):
    results = engine.search(SearchOptions(query="health initiative"))

    assert results[0].id == "field_impact.summary"


def test_suggest(engine):
    assert engine.suggest("board") == ["Board Chair", "Board Members"]


def test_statistics(engine):
    stats = engine.get_statistics()

    assert stats["scope_id"] == "org-1"
    assert stats["total_entries"] == LEAF_COUNT + len(DOCUMENTS)
    assert stats["total_documents"] == 2
    assert stats["sections"] == {
        "basicInfo": 6,
        "impact": 3,
        "financials": 3,
        "governance": 2,
        "ein": 1,
        "documents": 2,
    }
    assert stats["type_distribution"]["document"] == 2
    assert stats["type_distribution"]["phone"] == 2
    assert stats["saved_filters"] == 0
    assert len(stats["fingerprint"]) == 64


def test_index_is_built_lazily(record_store):
    engine = SearchEngine(record_store=record_store)

    assert engine.get_statistics()["total_entries"] == 0
    assert len(engine.search(SearchOptions(query="health"))) == 3


def test_refresh_picks_up_store_changes(engine, record_store):
    record_store.record_tree["impact"]["summary"] = "Literacy program"
    assert engine.refresh_index() is True

    assert engine.search(SearchOptions(query="literacy"))[0].id == "field_impact.summary"


def test_engine_without_record_store_has_empty_index(caplog):
    engine = SearchEngine()

    with caplog.at_level(logging.WARNING, logger="fieldfind.core.engine"):
        engine.initialize("org-1")

    assert engine.search(SearchOptions(query="health")) == []
    assert "No record store configured" in caplog.text


def test_saved_filters_survive_engine_restart(record_store):
    filter_store = InMemoryFilterStore()
    first = SearchEngine(record_store=record_store, filter_store=filter_store)
    first.initialize("org-1")
    filter_id = first.save_filter("Docs", SearchOptions(query="health", sections=["documents"]), "sam")

    second = SearchEngine(record_store=record_store, filter_store=filter_store)
    second.initialize("org-1")

    assert [saved.id for saved in second.get_saved_filters()] == [filter_id]
    options = second.apply_saved_filter(filter_id)
    assert [result.id for result in second.search(options)] == ["doc_0"]
    assert second.delete_saved_filter(filter_id) is True
    assert second.get_saved_filters() == []


def test_quick_filter_options_feed_a_search(engine):
    has_attachments = next(q for q in engine.get_quick_filters() if q.label == "Has Attachments")
    results = engine.search(SearchOptions(query="report", **has_attachments.options))

    assert [result.id for result in results] == ["doc_0"]


def test_from_config_builds_components(tmp_path):
    source = tmp_path / "application.json"
    source.write_text('{"formData": {"impact": {"summary": "Health outreach"}}}')

    config = {
        "components": {
            "record_store": {
                "class": "fieldfind.importers.json_store.JsonRecordStore",
                "config": {"path": str(source)},
            },
            "filter_store": {
                "class": "fieldfind.storage.sqlite_filters.SQLiteFilterStore",
                "config": {"database": str(tmp_path / "filters.db")},
            },
            "fuzzy_matcher": {
                "class": "fieldfind.matchers.fuzzy.FuzzyMatcher",
                "config": {"complete_bonus": 0},
            },
        },
        "search": {"highlight_marker": "__"},
    }

    engine = SearchEngine.from_config(config, ComponentRegistry())
    engine.initialize("org-1")

    results = engine.search(SearchOptions(query="health"))
    assert results[0].context == "__health__ outreach"
    assert isinstance(engine.query_engine.fuzzy_matcher, FuzzyMatcher)
    assert engine.query_engine.fuzzy_matcher.complete_bonus == 0
    engine.close()


def test_missing_source_file_leaves_index_empty(tmp_path, caplog):
    config = {
        "components": {
            "record_store": {
                "class": "fieldfind.importers.json_store.JsonRecordStore",
                "config": {"path": str(tmp_path / "missing.json")},
            },
        },
    }
    engine = SearchEngine.from_config(config)

    with caplog.at_level(logging.ERROR):
        engine.initialize("org-1")

    assert engine.get_statistics()["total_entries"] == 0
    assert "Source not found" in caplog.text


def test_store_failure_keeps_last_good_index(engine, record_store, monkeypatch):
    def unavailable():
        raise RuntimeError("gone")

    monkeypatch.setattr(record_store, "get_record_tree", unavailable)

    assert engine.refresh_index() is False
    assert engine.get_statistics()["total_entries"] == LEAF_COUNT + len(DOCUMENTS)


def test_in_memory_store_is_not_mutated(engine):
    engine.search(SearchOptions(query="health"))

    assert RECORD_TREE["impact"]["summary"] == "Community health initiative serving families"
    assert InMemoryRecordStore(RECORD_TREE).get_record_tree() == RECORD_TREE


def test_empty_partial_suggests_up_to_ten(engine):
    assert len(engine.suggest("")) == 10


def test_reinitialize_on_unreadable_scope_drops_previous_filters(record_store):
    filter_store = UnreadableScopeStore("org-b")
    engine = SearchEngine(record_store=record_store, filter_store=filter_store)
    engine.initialize("org-a")
    engine.save_filter("A private", SearchOptions(query="health"), "maria")

    engine.initialize("org-b")

    assert engine.get_saved_filters() == []
    engine.save_filter("B own", SearchOptions(query="board"), "sam")
    assert [item.name for item in filter_store.load_filters("org-a")] == ["A private"]
