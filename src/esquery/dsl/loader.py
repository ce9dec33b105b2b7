"""Build query documents from plain mappings, as read from JSON or YAML.

A request looks like::

    {
      "index": "articles",
      "size": 20,
      "sort": [{"published": "desc"}],
      "and": [{"kind": "match", "field": "title", "value": "search"}],
      "filter": [
        {"kind": "nested", "field": "comments", "value": {
          "and": [{"kind": "term", "field": "comments.author", "value": "kimchy"}]
        }},
        {"kind": "has_child", "value": {
          "type": "answer",
          "query": {"or": [{"kind": "exists", "field": "body"}]}
        }}
      ]
    }

Kinds are not checked here; an unknown kind is kept so the renderer can report it.
"""

from collections.abc import Mapping
from typing import Any

from esquery.dsl.clauses import (
    ROLE_ATTRS,
    ChildQuery,
    Clause,
    NestedDocument,
    NestedPath,
)
from esquery.dsl.document import QueryDocument
from esquery.dsl.kinds import QueryKind, coerce
from esquery.errors import TypeMismatchError, UnsupportedKindError


def _kind(raw: Any) -> Any:
    """Container kinds have to be known to parse their payload."""
    try:
        return coerce(raw)
    except UnsupportedKindError:
        return raw


def roles_from_dict(data: Mapping[str, Any]) -> dict[str, tuple[Clause, ...]]:
    """Keyword arguments for the role lists found in a mapping."""
    roles = dict[str, tuple[Clause, ...]]()
    for role, attr in ROLE_ATTRS.items():
        roles[attr] = tuple(
            clause_from_dict(_mapping("clause", item)) for item in _list(data, role)
        )
    return roles


def _mapping(kind: str, value: Any) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise TypeMismatchError(kind, "a mapping", value)
    return value


def clause_from_dict(data: Mapping[str, Any]) -> Clause:
    """Build one clause, including the payload of container kinds."""
    if "kind" not in data:
        raise UnsupportedKindError(None)
    kind = _kind(data["kind"])
    field = data.get("field", "")
    value = data.get("value")

    match kind:
        case QueryKind.NESTED:
            value = NestedDocument(**roles_from_dict(_mapping("nested", value)))
        case QueryKind.NESTED_QUERY:
            payload = _mapping("nested_query", value)
            path = payload.get("path") or field
            if not (isinstance(path, str) and path):
                raise TypeMismatchError("nested_query", "a path name", path)
            value = NestedPath(
                path=path,
                query=NestedDocument(
                    **roles_from_dict(_mapping("nested_query", payload.get("query", {})))
                ),
            )
            field = ""
        case QueryKind.HAS_CHILD:
            payload = _mapping("has_child", value)
            child_type = payload.get("type")
            if not (isinstance(child_type, str) and child_type):
                raise TypeMismatchError("has_child", "a child type name", child_type)
            query = _mapping("has_child", payload.get("query"))
            value = ChildQuery(
                query=Clause(
                    field="",
                    value=NestedDocument(**roles_from_dict(query)),
                    kind=QueryKind.NESTED,
                ),
                type=child_type,
            )
        case QueryKind.EXISTS if value is None:
            return Clause.exists(field)
        case _:
            pass

    return Clause(field=field, value=value, kind=kind)


def _count(data: Mapping[str, Any], key: str) -> int:
    value = data.get(key, 0)
    # bool is an int subclass, but not a count
    if not isinstance(value, int) or isinstance(value, bool) or value < 0:
        raise TypeMismatchError(key, "a non-negative integer", value)
    return value


def _text(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key, "")
    if not isinstance(value, str):
        raise TypeMismatchError(key, "a string", value)
    return value


def _list(data: Mapping[str, Any], key: str) -> list[Any]:
    value = data.get(key) or []
    if not isinstance(value, list):
        raise TypeMismatchError(key, "a list", value)
    return value


def document_from_dict(data: Mapping[str, Any]) -> QueryDocument:
    """Build a query document from a request mapping."""
    return QueryDocument(
        index=_text(data, "index"),
        size=_count(data, "size"),
        from_=_count(data, "from"),
        page_size=_count(data, "page_size"),
        sort=tuple(_mapping("sort", entry) for entry in _list(data, "sort")),
        search_after=tuple(_list(data, "search_after")),
        **roles_from_dict(data),
    )
