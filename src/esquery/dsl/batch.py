from collections.abc import Iterable

from loguru import logger as log

from esquery.dsl.document import QueryDocument, query_block
from esquery.dsl.renderer import ClauseRenderer


def render_batch_lines(
    docs: Iterable[QueryDocument], renderer: ClauseRenderer | None = None
) -> list[str]:
    """Alternating header and body lines for a multi-search request."""
    renderer = renderer or ClauseRenderer()
    lines = list[str]()
    for doc in docs:
        lines.extend(query_block(doc, renderer))
    return lines


def render_batch(
    docs: Iterable[QueryDocument], renderer: ClauseRenderer | None = None
) -> str:
    """Newline-delimited multi-search payload, every line newline-terminated.

    All or nothing: the first document failing to render fails the batch.

    Example return value:

    {"index":"index1"}
    {"query":{"bool":{"must":[...]}}}
    {"index":"index2"}
    {"query":{"bool":{"must":[...]}}}
    """
    lines = render_batch_lines(docs, renderer)
    log.debug(f"Rendered batch of {len(lines) // 2} queries")
    return "".join(f"{line}\n" for line in lines)
