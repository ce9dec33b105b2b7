from typing import Any, NotRequired, TypedDict

# Leaf clauses render as {token: {field: value}}; the token varies by kind,
# so they stay plain mappings.
ESLeafClause = dict[str, dict[str, Any]]


class ESQueryStringBody(TypedDict):
    """Body of a query_string clause."""

    analyze_wildcard: bool
    fields: list[str]
    query: str


class ESQueryStringClause(TypedDict):
    """A free-text query_string clause."""

    query_string: ESQueryStringBody


class ESBooleanQuery(TypedDict):
    """An Elasticsearch boolean query."""

    must: NotRequired[list["ESClause"]]
    must_not: NotRequired[list["ESClause"]]
    should: NotRequired[list["ESClause"]]
    filter: NotRequired[list["ESClause"]]


class ESQueryContext(TypedDict):
    """An Elasticsearch query context."""

    bool: ESBooleanQuery


class ESNestedBody(TypedDict):
    """Body of a nested clause."""

    path: list[str]
    query: ESQueryContext


class ESNestedClause(TypedDict):
    """A clause scoped to a nested object path."""

    nested: ESNestedBody


class ESHasChildBody(TypedDict):
    """Body of a has_child clause."""

    query: ESQueryContext
    type: str


class ESHasChildClause(TypedDict):
    """A clause scoped to a child document type."""

    has_child: ESHasChildBody


ESClause = (
    ESLeafClause
    | ESQueryStringClause
    | ESNestedClause
    | ESHasChildClause
    | ESQueryContext
)


ESPayload = TypedDict(
    "ESPayload",
    {
        "query": ESQueryContext,
        "size": NotRequired[int],
        "from": NotRequired[int],
        "sort": NotRequired[list[dict[str, str]]],
        "search_after": NotRequired[list[Any]],
    },
)
"""A full search request body. Functional syntax since `from` is a keyword."""


class ESBatchHeader(TypedDict):
    """Header line preceding each body in a multi-search batch."""

    index: str
