"""Indexing, querying and filter management."""
