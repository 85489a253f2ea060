"""Shared fixtures for Weaviate translation tests."""

from __future__ import annotations

from typing import Any

import pytest

from vectorq_weaviate import FieldRegistry, FieldType, WeaviateFilterTranslator


@pytest.fixture
def registry() -> FieldRegistry:
    """Registry with one field of every declared type."""
    return FieldRegistry(
        fields={
            "country": FieldType.TEXT,
            "year": FieldType.NUMBER,
            "rating": FieldType.NUMBER,
            "isOpen": FieldType.BOOLEAN,
        }
    )


@pytest.fixture
def translator(registry: FieldRegistry) -> WeaviateFilterTranslator:
    return WeaviateFilterTranslator(registry)


@pytest.fixture
def not_translator(registry: FieldRegistry) -> WeaviateFilterTranslator:
    return WeaviateFilterTranslator(registry, supports_not=True)


class FakeSearchClient:
    """Records queries and returns canned hits."""

    def __init__(self, hits: list[dict[str, Any]] | None = None) -> None:
        self.hits = hits or []
        self.queries: list[Any] = []

    async def near_text(self, query: Any) -> list[dict[str, Any]]:
        self.queries.append(query)
        return list(self.hits)


@pytest.fixture
def fake_client() -> FakeSearchClient:
    return FakeSearchClient()
