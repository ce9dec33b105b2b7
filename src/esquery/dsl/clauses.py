from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any, Literal, Self

from esquery.dsl.kinds import QueryKind

Role = Literal["and", "not", "or", "filter"]

ROLES: tuple[Role, ...] = ("and", "not", "or", "filter")

# Attribute holding each role's clauses; `and`, `not` and `or` are keywords
ROLE_ATTRS: dict[Role, str] = {
    "and": "and_",
    "not": "not_",
    "or": "or_",
    "filter": "filter",
}

# Key each role renders under in a bool query
ROLE_KEYS: dict[Role, str] = {
    "and": "must",
    "not": "must_not",
    "or": "should",
    "filter": "filter",
}


@dataclass(frozen=True, kw_only=True, slots=True)
class Clause:
    """One typed query condition.

    `kind` is validated when the clause is rendered, not when it is built, so
    a clause can hold any value there and still be reported properly.
    """

    field: str
    value: Any = None
    kind: QueryKind | Any = QueryKind.MATCH

    @classmethod
    def match(cls, field: str, value: Any) -> Self:
        """Full-text match on a field."""
        return cls(field=field, value=value, kind=QueryKind.MATCH)

    @classmethod
    def term(cls, field: str, value: Any) -> Self:
        """Exact value on a field."""
        return cls(field=field, value=value, kind=QueryKind.TERM)

    @classmethod
    def terms(cls, field: str, values: Iterable[Any]) -> Self:
        """Any of several exact values on a field."""
        return cls(field=field, value=list(values), kind=QueryKind.TERMS)

    @classmethod
    def wildcard(cls, field: str, pattern: str) -> Self:
        """Wildcard pattern on a field, matched case-insensitively."""
        return cls(field=field, value=pattern, kind=QueryKind.WILDCARD)

    @classmethod
    def range(cls, field: str, **bounds: Any) -> Self:
        """Range bounds (gt, gte, lt, lte, format...) on a field."""
        return cls(field=field, value=bounds, kind=QueryKind.RANGE)

    @classmethod
    def exists(cls, field: str) -> Self:
        """Documents where the field has a value."""
        # renders as {"exists": {"field": <field>}}
        return cls(field="field", value=field, kind=QueryKind.EXISTS)

    @classmethod
    def query_string(cls, field: str, text: str) -> Self:
        """Free text searched on a field; reserved characters are escaped."""
        return cls(field=field, value=text, kind=QueryKind.QUERY_STRING)

    @classmethod
    def nested(cls, path: str, document: "NestedDocument") -> Self:
        """Role lists scoped to the nested object at `path`."""
        return cls(field=path, value=document, kind=QueryKind.NESTED)

    @classmethod
    def nested_query(cls, path: str, document: "NestedDocument") -> Self:
        """Role lists scoped to an explicitly named nested path."""
        return cls(
            field="",
            value=NestedPath(path=path, query=document),
            kind=QueryKind.NESTED_QUERY,
        )

    @classmethod
    def has_child(cls, child_type: str, query: "Clause") -> Self:
        """A wrapped sub-query run against child documents of `child_type`."""
        return cls(
            field="",
            value=ChildQuery(query=query, type=child_type),
            kind=QueryKind.HAS_CHILD,
        )


@dataclass(frozen=True, kw_only=True, slots=True)
class RoleLists:
    """Clauses grouped by how they combine in a bool query."""

    and_: tuple[Clause, ...] = ()
    not_: tuple[Clause, ...] = ()
    or_: tuple[Clause, ...] = ()
    filter: tuple[Clause, ...] = ()

    def __post_init__(self) -> None:
        """Freeze role lists so later changes to the caller's lists don't leak in."""
        for attr in ROLE_ATTRS.values():
            object.__setattr__(self, attr, tuple(getattr(self, attr)))

    def clauses(self, role: Role) -> tuple[Clause, ...]:
        """Clauses in the given role."""
        return getattr(self, ROLE_ATTRS[role])


@dataclass(frozen=True, kw_only=True, slots=True)
class NestedDocument(RoleLists):
    """Role lists embedded in a `nested` clause or a wrapped sub-query."""


@dataclass(frozen=True, kw_only=True, slots=True)
class NestedPath:
    """Payload of a `nested_query` clause."""

    path: str
    query: NestedDocument = field(default_factory=NestedDocument)


@dataclass(frozen=True, kw_only=True, slots=True)
class ChildQuery:
    """Payload of a `has_child` clause."""

    query: Clause
    type: str


def normalize_role(role: str) -> Role:
    """Map a role name to one of the four roles, defaulting to `and`."""
    match role.lower():
        case "or":
            return "or"
        case "not":
            return "not"
        case "filter":
            return "filter"
        case _:
            return "and"


def wrap_clauses(role: str, *clauses: Clause) -> Clause:
    """Group clauses under a single role as one nested clause.

    The result has no field, so it renders as a bare bool query. Use it to
    combine clauses inside another role, or as the query of `has_child`.
    Unknown role names fall back to `and`.
    """
    document = NestedDocument(**{ROLE_ATTRS[normalize_role(role)]: clauses})
    return Clause(field="", value=document, kind=QueryKind.NESTED)
