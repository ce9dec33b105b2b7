from typing import Any

import pytest

from esquery.dsl.clauses import (
    ChildQuery,
    Clause,
    NestedDocument,
    NestedPath,
    wrap_clauses,
)
from esquery.dsl.kinds import QueryKind
from esquery.dsl.renderer import ClauseRenderer, RenderSettings
from esquery.errors import QueryDepthError, TypeMismatchError, UnsupportedKindError


@pytest.fixture
def renderer() -> ClauseRenderer:
    return ClauseRenderer(RenderSettings())


LEAF_CASES = (
    ("clause", "expected"),
    [
        (
            Clause.match("title", "Search"),
            {"match": {"title": "Search"}},
        ),
        (
            Clause.term("status", "published"),
            {"term": {"status": "published"}},
        ),
        (
            Clause.terms("tags", ["a", "b"]),
            {"terms": {"tags": ["a", "b"]}},
        ),
        (
            Clause.range("age", gte=10, lt=20),
            {"range": {"age": {"gte": 10, "lt": 20}}},
        ),
        (
            Clause.exists("user"),
            {"exists": {"field": "user"}},
        ),
        (
            Clause.wildcard("user.id", "KiMcHy*"),
            {"wildcard": {"user.id": "kimchy*"}},
        ),
        (
            Clause(field="user.id", value={"value": "Ki*"}, kind=QueryKind.WILDCARD),
            {"wildcard": {"user.id": {"value": "Ki*"}}},
        ),
        (
            Clause(field="count", value=3, kind="term"),
            {"term": {"count": 3}},
        ),
    ],
)
LEAF_CASES_IDS = [
    "match",
    "term",
    "terms",
    "range",
    "exists",
    "wildcard lowercased",
    "wildcard structured value",
    "kind by name",
]


@pytest.mark.parametrize(*LEAF_CASES, ids=LEAF_CASES_IDS)
def test_render_leaf(
    clause: Clause, expected: dict[str, Any], renderer: ClauseRenderer
) -> None:
    rendered = renderer.render_clause(clause)
    assert rendered == expected
    assert len(rendered) == 1


def test_wildcard_does_not_mutate_clause(renderer: ClauseRenderer) -> None:
    clause = Clause.wildcard("user.id", "KiMcHy*")
    renderer.render_clause(clause)
    assert clause.value == "KiMcHy*"


def test_default_settings_ignore_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ESQUERY_RENDER__MAX_DEPTH", "1")
    monkeypatch.setenv("ESQUERY_RENDER__LOWERCASE_WILDCARDS", "false")
    renderer = ClauseRenderer()
    assert renderer.settings == RenderSettings()
    assert renderer.render_clause(Clause.wildcard("user.id", "KiM*")) == {
        "wildcard": {"user.id": "kim*"}
    }
    renderer.render_clause(nest(3))


def test_range_value_passed_through(renderer: ClauseRenderer) -> None:
    bounds = {"gte": "2015-01-01", "format": "yyyy-MM-dd"}
    rendered = renderer.render_clause(
        Clause(field="date", value=bounds, kind=QueryKind.RANGE)
    )
    assert rendered == {"range": {"date": bounds}}


def test_render_query_string(renderer: ClauseRenderer) -> None:
    rendered = renderer.render_clause(Clause.query_string("user.id", "kimchy!"))
    assert rendered == {
        "query_string": {
            "analyze_wildcard": True,
            "fields": ["user.id"],
            "query": "kimchy\\!",
        }
    }


def test_query_string_requires_text(renderer: ClauseRenderer) -> None:
    with pytest.raises(TypeMismatchError):
        renderer.render_clause(
            Clause(field="user.id", value=42, kind=QueryKind.QUERY_STRING)
        )


def test_render_nested(renderer: ClauseRenderer) -> None:
    clause = Clause.nested(
        "comments",
        NestedDocument(
            and_=[Clause.match("comments.author", "kimchy")],
            or_=[Clause.term("comments.stars", 5)],
        ),
    )
    assert renderer.render_clause(clause) == {
        "nested": {
            "path": ["comments"],
            "query": {
                "bool": {
                    "must": [{"match": {"comments.author": "kimchy"}}],
                    "should": [{"term": {"comments.stars": 5}}],
                }
            },
        }
    }


def test_nested_and_nested_query_render_alike(renderer: ClauseRenderer) -> None:
    document = NestedDocument(filter=[Clause.term("comments.hidden", False)])
    assert renderer.render_clause(
        Clause.nested("comments", document)
    ) == renderer.render_clause(Clause.nested_query("comments", document))


def test_wrapped_clauses_render_as_bool(renderer: ClauseRenderer) -> None:
    clause = wrap_clauses("or", Clause.term("a", 1), Clause.term("b", 2))
    assert renderer.render_clause(clause) == {
        "bool": {"should": [{"term": {"a": 1}}, {"term": {"b": 2}}]}
    }


def test_render_has_child(renderer: ClauseRenderer) -> None:
    clause = Clause.has_child(
        "answer", wrap_clauses("and", Clause.match("answer.body", "python"))
    )
    assert renderer.render_clause(clause) == {
        "has_child": {
            "query": {"bool": {"must": [{"match": {"answer.body": "python"}}]}},
            "type": "answer",
        }
    }


CONTAINER_MISMATCH_CASES = (
    "clause",
    [
        Clause.has_child("answer", Clause.match("answer.body", "python")),
        Clause(field="", value=Clause.match("a", "b"), kind=QueryKind.HAS_CHILD),
        Clause(field="comments", value={"and": []}, kind=QueryKind.NESTED),
        Clause(field="", value=NestedDocument(), kind=QueryKind.NESTED_QUERY),
        Clause(
            field="",
            value=ChildQuery(
                query=Clause.nested("comments", NestedDocument()), type="answer"
            ),
            kind=QueryKind.HAS_CHILD,
        ),
        *(
            Clause(
                field="",
                value=ChildQuery(
                    query=wrap_clauses("and", Clause.term("a", 1)), type=child_type
                ),
                kind=QueryKind.HAS_CHILD,
            )
            for child_type in (None, 5, "")
        ),
        *(
            Clause(
                field="",
                value=NestedPath(path=path, query=NestedDocument()),
                kind=QueryKind.NESTED_QUERY,
            )
            for path in (None, "")
        ),
    ],
)
CONTAINER_MISMATCH_CASES_IDS = [
    "has_child with plain clause",
    "has_child without payload",
    "nested with mapping",
    "nested_query without path",
    "has_child with path-scoped query",
    "has_child without type",
    "has_child with numeric type",
    "has_child with empty type",
    "nested_query with null path",
    "nested_query with empty path",
]


@pytest.mark.parametrize(*CONTAINER_MISMATCH_CASES, ids=CONTAINER_MISMATCH_CASES_IDS)
def test_container_type_mismatch(clause: Clause, renderer: ClauseRenderer) -> None:
    with pytest.raises(TypeMismatchError):
        renderer.render_clause(clause)


def test_container_kind_still_validated(renderer: ClauseRenderer) -> None:
    clause = Clause(
        field="",
        value=ChildQuery(
            query=Clause(field="", value=NestedDocument(), kind=100001),
            type="answer",
        ),
        kind=QueryKind.HAS_CHILD,
    )
    with pytest.raises(UnsupportedKindError) as exc_info:
        renderer.render_clause(clause)
    assert exc_info.value.kind == 100001


def test_unsupported_kind_deep_in_tree(renderer: ClauseRenderer) -> None:
    clause = Clause.nested(
        "comments",
        NestedDocument(and_=[Clause(field="a", value="b", kind="fuzzy")]),
    )
    with pytest.raises(UnsupportedKindError) as exc_info:
        renderer.render_clause(clause)
    assert exc_info.value.kind == "fuzzy"


def test_empty_roles_omitted(renderer: ClauseRenderer) -> None:
    assert renderer.render_bool(NestedDocument()) == {"bool": {}}
    assert renderer.render_bool(
        NestedDocument(not_=[Clause.term("a", 1)])
    ) == {"bool": {"must_not": [{"term": {"a": 1}}]}}


def test_role_order_preserved(renderer: ClauseRenderer) -> None:
    clauses = [Clause.term("field", i) for i in (3, 1, 2, 1)]
    rendered = renderer.render_bool(NestedDocument(filter=clauses))
    assert rendered["bool"]["filter"] == [
        {"term": {"field": 3}},
        {"term": {"field": 1}},
        {"term": {"field": 2}},
        {"term": {"field": 1}},
    ]


def nest(depth: int) -> Clause:
    clause = Clause.term("leaf", 1)
    for _ in range(depth):
        clause = wrap_clauses("and", clause)
    return clause


def test_depth_limit() -> None:
    renderer = ClauseRenderer(RenderSettings(max_depth=3))
    renderer.render_clause(nest(3))
    with pytest.raises(QueryDepthError) as exc_info:
        renderer.render_clause(nest(4))
    assert exc_info.value.limit == 3


def test_nested_path_payload(renderer: ClauseRenderer) -> None:
    clause = Clause(
        field="",
        value=NestedPath(path="a.b", query=NestedDocument(and_=[Clause.exists("a.b.c")])),
        kind=QueryKind.NESTED_QUERY,
    )
    assert renderer.render_clause(clause) == {
        "nested": {
            "path": ["a.b"],
            "query": {"bool": {"must": [{"exists": {"field": "a.b.c"}}]}},
        }
    }
