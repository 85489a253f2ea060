from pytest_archon import archrule


def test_filters_independence() -> None:
    """
    The portable filter package must not know about any target system.
    Translators depend on it, never the other way round.
    """
    (
        archrule("filters_are_independent")
        .match("vectorq_filters*")
        .should_not_import("vectorq_weaviate*")
        .should_not_import("pydantic*")
        .check("vectorq_filters")
    )


def test_compilers_do_not_reach_the_store() -> None:
    """
    Operator compilers only see the registry and the filter tree.
    """
    (
        archrule("compilers_layering")
        .match("vectorq_weaviate.operators*")
        .should_not_import("vectorq_weaviate.store")
        .should_not_import("vectorq_weaviate.config")
        .should_not_import("vectorq_weaviate.translator")
        .check("vectorq_weaviate")
    )


def test_translator_is_store_agnostic() -> None:
    """
    Translation must stay usable without the store facade or its config.
    """
    (
        archrule("translator_layering")
        .match("vectorq_weaviate.translator")
        .match("vectorq_weaviate.registry")
        .match("vectorq_weaviate.graphql")
        .should_not_import("vectorq_weaviate.store")
        .should_not_import("vectorq_weaviate.config")
        .check("vectorq_weaviate")
    )
