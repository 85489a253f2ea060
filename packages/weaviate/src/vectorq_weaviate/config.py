"""Store configuration consumed once when a :class:`WeaviateVectorStore` is built."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from .registry import DEFAULT_PREFIX, FieldRegistry, FieldType


class ConsistencyLevel(str, Enum):
    """Replica acknowledgement required for reads."""

    ONE = "ONE"
    QUORUM = "QUORUM"
    ALL = "ALL"


class MetadataField(BaseModel):
    """A metadata field that filter expressions may reference.

    Example::

        MetadataField.text("country")
        MetadataField.number("year")
    """

    model_config = ConfigDict(frozen=True)

    name: str
    type: FieldType

    @classmethod
    def text(cls, name: str) -> MetadataField:
        return cls(name=name, type=FieldType.TEXT)

    @classmethod
    def number(cls, name: str) -> MetadataField:
        return cls(name=name, type=FieldType.NUMBER)

    @classmethod
    def boolean(cls, name: str) -> MetadataField:
        return cls(name=name, type=FieldType.BOOLEAN)


class WeaviateStoreConfig(BaseModel):
    """Immutable store settings.

    Attributes:
        object_class: Weaviate class (collection) that holds the documents.
        content_field_name: Property that stores the document text.
        metadata_field_prefix: Prepended to every metadata property name.
        filter_metadata_fields: Fields filter expressions may reference.
        consistency_level: Read consistency requested from the database.
        supports_not: Whether the target accepts ``Not`` filter nodes.
    """

    model_config = ConfigDict(frozen=True)

    object_class: str = Field(default="Document", min_length=1)
    content_field_name: str = Field(default="content", min_length=1)
    metadata_field_prefix: str = DEFAULT_PREFIX
    filter_metadata_fields: tuple[MetadataField, ...] = ()
    consistency_level: ConsistencyLevel = ConsistencyLevel.ONE
    supports_not: bool = False

    def build_registry(self) -> FieldRegistry:
        """Create a :class:`FieldRegistry` holding the declared filter fields."""
        registry = FieldRegistry(prefix=self.metadata_field_prefix)
        for field in self.filter_metadata_fields:
            registry.register(field.name, field.type)
        return registry
