from enum import IntEnum
from typing import Any

from esquery.errors import UnsupportedKindError


class QueryKind(IntEnum):
    """Clause kinds understood by the renderer."""

    MATCH = 0
    TERM = 1
    TERMS = 2
    WILDCARD = 3
    RANGE = 4
    EXISTS = 5
    QUERY_STRING = 6
    NESTED = 7
    NESTED_QUERY = 8
    HAS_CHILD = 9

    @property
    def token(self) -> str:
        """Wire name of the kind in the query DSL."""
        return WIRE_TOKENS[self]


WIRE_TOKENS: dict[QueryKind, str] = {
    QueryKind.MATCH: "match",
    QueryKind.TERM: "term",
    QueryKind.TERMS: "terms",
    QueryKind.WILDCARD: "wildcard",
    QueryKind.RANGE: "range",
    QueryKind.EXISTS: "exists",
    QueryKind.QUERY_STRING: "query_string",
    QueryKind.NESTED: "nested",
    QueryKind.NESTED_QUERY: "nested",
    QueryKind.HAS_CHILD: "has_child",
}

def coerce(kind: Any) -> QueryKind:
    """Validate a raw kind and return the enum member it names.

    Accepts members, their integer values and their lowercase names
    (``"match"``, ``"nested_query"``...). Anything else, including integers
    past the last member, raises ``UnsupportedKindError``.
    """
    if isinstance(kind, QueryKind):
        return kind
    # bool is an int subclass, but True is not a kind
    if isinstance(kind, int) and not isinstance(kind, bool):
        if 0 <= kind < len(QueryKind):
            return QueryKind(kind)
        raise UnsupportedKindError(kind)
    if isinstance(kind, str):
        try:
            return QueryKind[kind.upper()]
        except KeyError:
            raise UnsupportedKindError(kind) from None
    raise UnsupportedKindError(kind)


def resolve(kind: Any) -> str:
    """Map a kind to its wire token, rejecting unsupported kinds."""
    return coerce(kind).token
