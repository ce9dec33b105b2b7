from typing import Annotated, Any

from loguru import logger as log
from pydantic import BaseModel, Field

from esquery.dsl.clauses import (
    ROLE_KEYS,
    ROLES,
    ChildQuery,
    Clause,
    NestedDocument,
    NestedPath,
    RoleLists,
)
from esquery.dsl.escape import sanitize
from esquery.dsl.kinds import QueryKind, coerce
from esquery.dsl.types import (
    ESBooleanQuery,
    ESClause,
    ESHasChildClause,
    ESLeafClause,
    ESNestedClause,
    ESQueryContext,
    ESQueryStringClause,
)
from esquery.errors import QueryDepthError, TypeMismatchError


class RenderSettings(BaseModel):
    """Limits applied while rendering."""

    max_depth: Annotated[
        int,
        Field(
            description="Maximum nesting of nested/has_child clauses before a render is refused.",
            ge=1,
        ),
    ] = 32


class ClauseRenderer:
    """Renders clauses and role lists into query DSL fragments.

    Output is plain dicts and lists, ready for any JSON encoder. Rendering never
    mutates its input and holds no state beyond its settings, so one renderer
    can be shared freely.
    """

    def __init__(self, settings: RenderSettings | None = None) -> None:
        """Initialize with render settings, defaulting to the built-in limits."""
        self.settings: RenderSettings = settings or RenderSettings()

    def render_bool(self, roles: RoleLists, depth: int = 0) -> ESQueryContext:
        """Render role lists as a bool query, leaving out empty roles.

        Example return value:

        {
          "bool": {
            "must": [{ "match": { "title": "Search" }}],
            "filter": [{ "term": { "status": "published" }}]
          }
        }
        """
        if depth > self.settings.max_depth:
            raise QueryDepthError(self.settings.max_depth)

        bool_query = ESBooleanQuery()
        for role in ROLES:
            clauses = roles.clauses(role)
            if clauses:
                bool_query[ROLE_KEYS[role]] = [  # pyright:ignore[reportGeneralTypeIssues] keys come from ROLE_KEYS
                    self.render_clause(clause, depth) for clause in clauses
                ]
        return ESQueryContext(bool=bool_query)

    def render_clause(self, clause: Clause, depth: int = 0) -> ESClause:
        """Render a single clause, recursing into container kinds."""
        # Every kind goes through validation, containers included
        kind = coerce(clause.kind)
        value = clause.value

        match kind:
            case QueryKind.WILDCARD if isinstance(value, str):
                return self.render_leaf(kind, clause.field, value.lower())
            case QueryKind.QUERY_STRING:
                return self.render_query_string(clause.field, value)
            case QueryKind.NESTED:
                return self.render_nested(clause.field, value, depth)
            case QueryKind.NESTED_QUERY:
                if not isinstance(value, NestedPath):
                    raise TypeMismatchError("nested_query", "a NestedPath", value)
                if not (isinstance(value.path, str) and value.path):
                    raise TypeMismatchError("nested_query", "a path name", value.path)
                return self.render_nested(value.path, value.query, depth)
            case QueryKind.HAS_CHILD:
                return self.render_has_child(value, depth)
            case _:
                return self.render_leaf(kind, clause.field, value)

    def render_leaf(self, kind: QueryKind, field: str, value: Any) -> ESLeafClause:
        """Generic {token: {field: value}} shape, value passed through as-is."""
        return {kind.token: {field: value}}

    def render_query_string(self, field: str, text: Any) -> ESQueryStringClause:
        """Free-text clause over a single field, with reserved characters escaped."""
        if not isinstance(text, str):
            raise TypeMismatchError("query_string", "a string", text)
        return ESQueryStringClause(
            query_string={
                "analyze_wildcard": True,
                "fields": [field],
                "query": sanitize(text),
            }
        )

    def render_nested(
        self, path: str, document: Any, depth: int
    ) -> ESNestedClause | ESQueryContext:
        """Wrap a sub-document's bool query under a nested path.

        Without a path (clauses grouped by `wrap_clauses`) the bool query is
        returned as-is.
        """
        if not isinstance(path, str):
            raise TypeMismatchError("nested", "a path name", path)
        if not isinstance(document, NestedDocument):
            raise TypeMismatchError("nested", "a NestedDocument", document)
        bool_query = self.render_bool(document, depth + 1)
        if not path:
            return bool_query
        return ESNestedClause(nested={"path": [path], "query": bool_query})

    def render_has_child(self, payload: Any, depth: int) -> ESHasChildClause:
        """Wrap a grouped sub-query so it runs against a child document type."""
        if not isinstance(payload, ChildQuery):
            raise TypeMismatchError("has_child", "a ChildQuery", payload)
        query = payload.query
        if not (
            isinstance(query, Clause)
            and isinstance(query.value, NestedDocument)
            and coerce(query.kind) is QueryKind.NESTED
            and not query.field
        ):
            raise TypeMismatchError(
                "has_child", "a query grouped with wrap_clauses", query
            )
        if not (isinstance(payload.type, str) and payload.type):
            raise TypeMismatchError("has_child", "a child type name", payload.type)
        log.trace(f"Rendering has_child query on type {payload.type!r}")
        return ESHasChildClause(
            has_child={
                "query": self.render_bool(query.value, depth + 1),
                "type": payload.type,
            }
        )
