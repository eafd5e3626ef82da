"""Shared fixtures: a small application record, its documents and engines over it."""

import copy

import pytest

from fieldfind.core.engine import SearchEngine
from fieldfind.core.indexer import Indexer
from fieldfind.importers.memory import InMemoryRecordStore
from fieldfind.storage.memory import InMemoryFilterStore
from tests.sample_data import DOCUMENTS, FIELD_METADATA, RECORD_TREE


@pytest.fixture
def record_store():
    return InMemoryRecordStore(
        record_tree=copy.deepcopy(RECORD_TREE),
        documents=copy.deepcopy(DOCUMENTS),
        field_metadata=copy.deepcopy(FIELD_METADATA),
    )


@pytest.fixture
def entries(record_store):
    indexer = Indexer()
    indexer.refresh(record_store)
    return indexer.entries


@pytest.fixture
def filter_store():
    return InMemoryFilterStore()


@pytest.fixture
def engine(record_store, filter_store):
    search_engine = SearchEngine(record_store=record_store, filter_store=filter_store)
    search_engine.initialize("org-1")
    return search_engine
