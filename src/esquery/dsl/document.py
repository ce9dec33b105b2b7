from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any, Literal, Self

import orjson
from loguru import logger as log

from esquery.dsl.clauses import ROLE_ATTRS, Clause, RoleLists, normalize_role
from esquery.dsl.renderer import ClauseRenderer
from esquery.dsl.types import ESBatchHeader, ESPayload


@dataclass(frozen=True, kw_only=True, slots=True)
class QueryDocument(RoleLists):
    """A search request: role lists plus paging, sort and cursor controls.

    `index` only appears in batch headers. `page_size` is never rendered; it is
    kept for callers paging through results themselves.
    """

    index: str = ""
    size: int = 0
    from_: int = 0
    page_size: int = 0
    sort: tuple[Mapping[str, str], ...] = ()
    search_after: tuple[Any, ...] = ()

    def __post_init__(self) -> None:
        """Freeze sequences, role lists included."""
        super(QueryDocument, self).__post_init__()
        object.__setattr__(self, "sort", tuple(self.sort))
        object.__setattr__(self, "search_after", tuple(self.search_after))

    def with_clauses(self, role: str, *clauses: Clause) -> Self:
        """Copy of this document with clauses appended to a role."""
        attr = ROLE_ATTRS[normalize_role(role)]
        return replace(self, **{attr: (*getattr(self, attr), *clauses)})

    def with_sort(self, field: str, direction: Literal["asc", "desc"] = "asc") -> Self:
        """Copy of this document with one more sort key."""
        return replace(self, sort=(*self.sort, {field: direction}))

    def with_cursor(self, *search_after: Any) -> Self:
        """Copy of this document resuming after the given sort values."""
        return replace(self, search_after=search_after)


def render_document(
    doc: QueryDocument, renderer: ClauseRenderer | None = None
) -> ESPayload:
    """Render the full request body of a document.

    Optional controls are left out when zero or empty. Any clause failing to
    render fails the whole document.
    """
    renderer = renderer or ClauseRenderer()
    payload = ESPayload(query=renderer.render_bool(doc))
    if doc.size:
        payload["size"] = doc.size
    if doc.from_:
        payload["from"] = doc.from_
    if doc.sort:
        payload["sort"] = [dict(entry) for entry in doc.sort]
    if doc.search_after:
        payload["search_after"] = list(doc.search_after)
    return payload


def to_json(
    doc: QueryDocument, renderer: ClauseRenderer | None = None, indent: bool = False
) -> str:
    """Render a document and encode it as JSON text."""
    option = orjson.OPT_INDENT_2 if indent else None
    body = orjson.dumps(render_document(doc, renderer), option=option).decode()
    log.bind(index=doc.index).trace(f"Rendered query: {body}")
    return body


def batch_header(doc: QueryDocument) -> str:
    """Multi-search header line naming the document's index."""
    return orjson.dumps(ESBatchHeader(index=doc.index)).decode()


def query_block(
    doc: QueryDocument, renderer: ClauseRenderer | None = None
) -> tuple[str, str]:
    """Header and body lines for one document of a multi-search request."""
    return batch_header(doc), to_json(doc, renderer)
