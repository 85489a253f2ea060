"""WeaviateVectorStore: similarity search with portable metadata filters."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol, Union, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field

from vectorq_filters.ast import Comparison, Logical
from vectorq_filters.exceptions import ValidationError

from .config import ConsistencyLevel, WeaviateStoreConfig
from .operators import is_match_everything, is_match_nothing
from .translator import WeaviateFilterTranslator

if TYPE_CHECKING:
    from .registry import FieldRegistry

logger = logging.getLogger("vectorq.weaviate.store")

DEFAULT_TOP_K = 4

FilterInput = Union[Comparison, Logical, str]


@dataclass(frozen=True)
class SearchRequest:
    """Parameters of one similarity search.

    ``query``, ``top_k`` and ``similarity_threshold`` are passed to the
    client untouched; ``filter_expression`` is translated first.
    """

    query: str
    top_k: int = DEFAULT_TOP_K
    similarity_threshold: float = 0.0
    filter_expression: FilterInput | None = None

    def __post_init__(self) -> None:
        if isinstance(self.top_k, bool) or not isinstance(self.top_k, int):
            raise ValidationError("top_k must be an integer", path="top_k")
        if self.top_k < 0:
            raise ValidationError("top_k must not be negative", path="top_k")
        threshold = self.similarity_threshold
        if isinstance(threshold, bool) or not isinstance(threshold, int | float):
            raise ValidationError(
                "similarity_threshold must be a number",
                path="similarity_threshold",
            )
        if not 0.0 <= threshold <= 1.0:
            raise ValidationError(
                "similarity_threshold must be within [0, 1]",
                path="similarity_threshold",
            )


class Document(BaseModel):
    """A search hit mapped back from a Weaviate object."""

    model_config = ConfigDict(frozen=True)

    id: str | None = None
    content: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    score: float | None = None


@dataclass(frozen=True)
class WeaviateQuery:
    """Everything the search client needs to run one ``nearText`` query."""

    object_class: str
    query: str
    top_k: int
    certainty: float
    where: dict[str, Any] | None
    consistency_level: ConsistencyLevel
    fields: tuple[str, ...]


@runtime_checkable
class WeaviateSearchClient(Protocol):
    """Search-execution collaborator owned by the caller.

    Implementations wrap the Weaviate SDK (connection, authentication,
    embedding of the query text) and return raw objects, each a dict of the
    requested properties plus an ``_additional`` dict with ``id``,
    ``certainty`` and ``distance``.
    """

    async def near_text(self, query: WeaviateQuery) -> list[dict[str, Any]]:
        ...


class WeaviateVectorStore:
    """
    Vector store facade that translates filters before delegating search.

    The client is injected and never created here.  Filter translation
    happens before the client is touched, so a bad filter never reaches the
    database.

    Usage::

        store = WeaviateVectorStore(
            client,
            WeaviateStoreConfig(
                filter_metadata_fields=(
                    MetadataField.text("country"),
                    MetadataField.number("year"),
                ),
            ),
        )
        docs = await store.similarity_search(
            SearchRequest(
                query="The World",
                top_k=5,
                similarity_threshold=0.7,
                filter_expression=and_(eq("country", "UK"), gte("year", 2020)),
            )
        )
    """

    def __init__(
        self,
        client: WeaviateSearchClient,
        config: WeaviateStoreConfig | None = None,
        *,
        translator: WeaviateFilterTranslator | None = None,
    ) -> None:
        if client is None:
            raise ValueError("client parameter is required")
        self._client = client
        self._config = config or WeaviateStoreConfig()
        self._translator = translator or WeaviateFilterTranslator(
            self._config.build_registry(),
            supports_not=self._config.supports_not,
        )
        logger.info(
            "Configured Weaviate store for class %s with %d filter field(s)",
            self._config.object_class,
            len(self.registry),
        )

    @property
    def config(self) -> WeaviateStoreConfig:
        return self._config

    @property
    def registry(self) -> FieldRegistry:
        return self._translator.registry

    @property
    def translator(self) -> WeaviateFilterTranslator:
        return self._translator

    # -- search --------------------------------------------------------------

    def build_query(self, request: SearchRequest) -> WeaviateQuery | None:
        """
        Translate *request* into a client query.

        Returns ``None`` when the filter can match nothing, in which case
        no search needs to run.
        """
        where: dict[str, Any] | None = None
        if request.filter_expression is not None:
            where = self._translator.translate(request.filter_expression)
            if is_match_nothing(where):
                return None
            if is_match_everything(where):
                where = None
        return WeaviateQuery(
            object_class=self._config.object_class,
            query=request.query,
            top_k=request.top_k,
            certainty=request.similarity_threshold,
            where=where,
            consistency_level=self._config.consistency_level,
            fields=self._requested_fields(),
        )

    async def similarity_search(self, request: SearchRequest) -> list[Document]:
        """Run a similarity search and map the hits to :class:`Document`."""
        query = self.build_query(request)
        if query is None:
            logger.debug(
                "Filter matches nothing; skipping search for %r", request.query
            )
            return []
        hits = await self._client.near_text(query)
        return [self._to_document(hit) for hit in hits]

    async def similarity_search_text(
        self,
        query: str,
        *,
        top_k: int = DEFAULT_TOP_K,
        similarity_threshold: float = 0.0,
        filter_expression: FilterInput | None = None,
    ) -> list[Document]:
        """Shortcut for :meth:`similarity_search` with keyword arguments."""
        return await self.similarity_search(
            SearchRequest(
                query=query,
                top_k=top_k,
                similarity_threshold=similarity_threshold,
                filter_expression=filter_expression,
            )
        )

    def _requested_fields(self) -> tuple[str, ...]:
        # The registry may grow after the store is built
        registry = self.registry
        return (
            self._config.content_field_name,
            *(registry.prefixed_name(name) for name in sorted(registry.fields)),
        )

    # -- result mapping ------------------------------------------------------

    def _to_document(self, hit: dict[str, Any]) -> Document:
        additional = hit.get("_additional") or {}
        prefix = self.registry.prefix
        metadata = {
            key[len(prefix) :]: value
            for key, value in hit.items()
            if key.startswith(prefix)
            and not key.startswith("_")
            and key != self._config.content_field_name
            and value is not None
        }
        return Document(
            id=additional.get("id"),
            content=hit.get(self._config.content_field_name),
            metadata=metadata,
            score=additional.get("certainty"),
        )
