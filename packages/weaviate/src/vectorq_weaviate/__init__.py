"""Weaviate ``where`` filter translation and vector-store facade."""

from __future__ import annotations

from .config import ConsistencyLevel, MetadataField, WeaviateStoreConfig
from .exceptions import (
    ConfigurationError,
    TranslationError,
    TypeMismatchError,
    UnknownFieldError,
    UnsupportedOperatorError,
)
from .graphql import render_where
from .operators import (
    is_match_everything,
    is_match_nothing,
    match_everything,
    match_nothing,
)
from .registry import DEFAULT_PREFIX, FieldRegistry, FieldType
from .store import (
    Document,
    SearchRequest,
    WeaviateQuery,
    WeaviateSearchClient,
    WeaviateVectorStore,
)
from .translator import WeaviateFilterTranslator

__all__ = [
    # Registry
    "DEFAULT_PREFIX",
    "FieldRegistry",
    "FieldType",
    # Translation
    "WeaviateFilterTranslator",
    "render_where",
    "match_nothing",
    "match_everything",
    "is_match_nothing",
    "is_match_everything",
    # Store
    "ConsistencyLevel",
    "MetadataField",
    "WeaviateStoreConfig",
    "SearchRequest",
    "Document",
    "WeaviateQuery",
    "WeaviateSearchClient",
    "WeaviateVectorStore",
    # Exceptions
    "TranslationError",
    "ConfigurationError",
    "UnknownFieldError",
    "TypeMismatchError",
    "UnsupportedOperatorError",
]
