"""Tests for saved filters, quick filters and the filter stores."""

import logging
from datetime import datetime, timedelta

import pytest

from fieldfind.contracts.filter_store import IFilterStore
from fieldfind.core.errors import FilterStoreError
from fieldfind.core.filter_catalog import FilterCatalog, default_quick_filters
from fieldfind.models.search import DateRange, SearchOptions
from fieldfind.storage.memory import InMemoryFilterStore
from fieldfind.storage.sqlite_filters import SQLiteFilterStore
from tests.fakes import UnreadableScopeStore


NOW = datetime(2024, 6, 10, 9, 30)


class BrokenFilterStore(IFilterStore):
    def load_filters(self, scope_id):
        raise FilterStoreError("store offline")

    def persist_filters(self, scope_id, filters):
        raise FilterStoreError("store offline")


class RejectingFilterStore(IFilterStore):
    def load_filters(self, scope_id):
        return []

    def persist_filters(self, scope_id, filters):
        return False


@pytest.fixture
def catalog(filter_store):
    catalog = FilterCatalog(filter_store, clock=lambda: NOW)
    catalog.load("org-1")
    return catalog


def board_options():
    return SearchOptions(
        query="board",
        sections=["governance"],
        date_range=DateRange(start=datetime(2024, 1, 1), end=datetime(2024, 6, 30)),
        tags=["bylaws"],
    )


def test_save_then_apply_restores_options(catalog):
    filter_id = catalog.save_filter("Board", board_options(), "maria")
    options = catalog.apply_saved_filter(filter_id)

    assert options.query == "board"
    assert options.sections == ["governance"]
    assert options.date_range == DateRange(start=datetime(2024, 1, 1), end=datetime(2024, 6, 30))
    assert options.tags == ["bylaws"]
    assert options.modified_by is None


def test_saved_filter_metadata(catalog):
    filter_id = catalog.save_filter("Board", board_options(), "maria")
    saved = catalog.get_saved_filter(filter_id)

    assert filter_id.startswith("filter_")
    assert saved.name == "Board"
    assert saved.saved_by == "maria"
    assert saved.saved_at == NOW


def test_saved_filter_is_a_snapshot(catalog):
    options = board_options()
    filter_id = catalog.save_filter("Board", options, "maria")
    options.sections.append("impact")

    applied = catalog.apply_saved_filter(filter_id)
    applied.tags.append("other")

    assert catalog.apply_saved_filter(filter_id).sections == ["governance"]
    assert catalog.apply_saved_filter(filter_id).tags == ["bylaws"]


def test_ids_are_unique(catalog):
    ids = {catalog.save_filter(f"f{i}", SearchOptions(query="x"), "sam") for i in range(20)}

    assert len(ids) == 20
    assert len(catalog) == 20


def test_saved_filters_keep_insertion_order(catalog):
    first = catalog.save_filter("first", SearchOptions(query="a"), "sam")
    second = catalog.save_filter("second", SearchOptions(query="b"), "sam")

    assert [saved.id for saved in catalog.get_saved_filters()] == [first, second]


def test_apply_unknown_filter_returns_none(catalog):
    assert catalog.apply_saved_filter("filter_missing") is None


def test_delete(catalog):
    filter_id = catalog.save_filter("Board", board_options(), "maria")

    assert catalog.delete_saved_filter(filter_id) is True
    assert catalog.apply_saved_filter(filter_id) is None
    assert len(catalog) == 0


def test_delete_unknown_leaves_catalog_unchanged(catalog):
    catalog.save_filter("Board", board_options(), "maria")

    assert catalog.delete_saved_filter("filter_missing") is False
    assert len(catalog) == 1


def test_changes_are_written_through_to_store(filter_store, catalog):
    filter_id = catalog.save_filter("Board", board_options(), "maria")

    reloaded = FilterCatalog(filter_store)
    reloaded.load("org-1")
    assert reloaded.apply_saved_filter(filter_id) == catalog.apply_saved_filter(filter_id)

    catalog.delete_saved_filter(filter_id)
    reloaded.load("org-1")
    assert len(reloaded) == 0


def test_scopes_are_isolated(filter_store, catalog):
    catalog.save_filter("Board", board_options(), "maria")

    other = FilterCatalog(filter_store)
    other.load("org-2")

    assert len(other) == 0


def test_store_failures_are_logged_not_raised(caplog):
    catalog = FilterCatalog(BrokenFilterStore())

    with caplog.at_level(logging.ERROR, logger="fieldfind.core.filter_catalog"):
        assert catalog.load("org-1") is False
        filter_id = catalog.save_filter("Board", board_options(), "maria")

    assert catalog.apply_saved_filter(filter_id) is not None
    assert "Failed to load saved filters" in caplog.text
    assert "Failed to save filters" in caplog.text


def test_failed_load_of_another_scope_starts_empty():
    store = UnreadableScopeStore("org-b")
    catalog = FilterCatalog(store)
    catalog.load("org-a")
    catalog.save_filter("A private", SearchOptions(query="a"), "maria")

    assert catalog.load("org-b") is False
    assert catalog.get_saved_filters() == []

    catalog.save_filter("B own", SearchOptions(query="b"), "sam")
    assert [item["name"] for item in store._scopes["org-b"]] == ["B own"]
    assert [item.name for item in store.load_filters("org-a")] == ["A private"]


def test_failed_reload_of_same_scope_keeps_filters():
    store = UnreadableScopeStore(None)
    catalog = FilterCatalog(store)
    catalog.load("org-a")
    catalog.save_filter("A private", SearchOptions(query="a"), "maria")

    store.unreadable_scope = "org-a"

    assert catalog.load("org-a") is False
    assert [item.name for item in catalog.get_saved_filters()] == ["A private"]


def test_rejected_write_is_logged(caplog):
    catalog = FilterCatalog(RejectingFilterStore())
    catalog.load("org-1")

    with caplog.at_level(logging.ERROR, logger="fieldfind.core.filter_catalog"):
        catalog.save_filter("Board", board_options(), "maria")

    assert "rejected write" in caplog.text
    assert len(catalog) == 1


def test_catalog_without_store():
    catalog = FilterCatalog()

    assert catalog.load("org-1") is True
    filter_id = catalog.save_filter("x", SearchOptions(query="x"), "sam")
    assert catalog.delete_saved_filter(filter_id) is True


class TestQuickFilters:
    def test_presets(self):
        quick = {preset.label: preset.options for preset in default_quick_filters(NOW)}

        assert list(quick) == [
            "Incomplete Fields",
            "Recently Modified",
            "Has Attachments",
            "Financial Data",
            "Contact Information",
        ]
        assert quick["Incomplete Fields"] == {"completion_status": "incomplete"}
        assert quick["Has Attachments"] == {"has_attachments": True}
        assert quick["Financial Data"] == {"sections": ["financials"]}
        assert quick["Contact Information"] == {"field_types": ["email", "phone"]}

    def test_recently_modified_covers_last_week(self):
        date_range = default_quick_filters(NOW)[1].options["date_range"]

        assert date_range.end == NOW
        assert date_range.start == NOW - timedelta(days=7)

    def test_catalog_uses_its_clock(self, catalog):
        date_range = catalog.quick_filters()[1].options["date_range"]

        assert date_range.end == NOW

    def test_presets_follow_the_clock_on_each_call(self):
        moments = iter([NOW, NOW + timedelta(hours=5)])
        catalog = FilterCatalog(clock=lambda: next(moments))

        assert catalog.quick_filters()[1].options["date_range"].end == NOW
        assert catalog.quick_filters()[1].options["date_range"].end == NOW + timedelta(hours=5)


class TestSQLiteFilterStore:
    @pytest.fixture
    def store(self, tmp_path):
        store = SQLiteFilterStore({"database": str(tmp_path / "db" / "filters.db")})
        yield store
        store.close()

    def test_round_trip(self, store):
        catalog = FilterCatalog(store, clock=lambda: NOW)
        catalog.load("org-1")
        filter_id = catalog.save_filter("Board", board_options(), "maria")

        saved = store.load_filters("org-1")

        assert [item.id for item in saved] == [filter_id]
        assert saved[0].saved_at == NOW
        assert saved[0].filters["date_range"] == board_options().date_range

    def test_unknown_scope_is_empty(self, store):
        assert store.load_filters("nobody") == []

    def test_persist_replaces_scope(self, store):
        catalog = FilterCatalog(store)
        catalog.load("org-1")
        filter_id = catalog.save_filter("a", SearchOptions(query="a"), "sam")
        catalog.save_filter("b", SearchOptions(query="b"), "sam")
        catalog.delete_saved_filter(filter_id)

        assert [item.name for item in store.load_filters("org-1")] == ["b"]

    def test_statistics(self, store):
        catalog = FilterCatalog(store)
        catalog.load("org-1")
        catalog.save_filter("a", SearchOptions(query="a"), "sam")
        catalog.save_filter("b", SearchOptions(query="b"), "sam")

        stats = store.get_statistics()

        assert stats["total_scopes"] == 1
        assert stats["total_filters"] == 2

    def test_corrupt_row_raises(self, store):
        conn = store._connect()
        conn.execute(
            "INSERT INTO saved_filters (scope_id, filters, filter_count, updated_at) VALUES (?, ?, ?, ?)",
            ("org-1", "not json", 0, "2024-01-01"),
        )
        conn.commit()

        with pytest.raises(FilterStoreError):
            store.load_filters("org-1")

    def test_in_memory_database(self):
        store = SQLiteFilterStore({"database": ":memory:"})
        store.persist_filters("org-1", [])

        assert store.load_filters("org-1") == []
        store.close()


def test_in_memory_store_round_trip():
    store = InMemoryFilterStore()
    catalog = FilterCatalog(store, clock=lambda: NOW)
    catalog.load("org-1")
    catalog.save_filter("Board", board_options(), "maria")

    assert store.load_filters("org-1")[0].filters == board_options().filters()
