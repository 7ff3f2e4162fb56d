# src/tally_governance/mcp/pagination.py
"""Opaque-cursor paging shared by every Tally list endpoint.

Requests carry ``page: {limit, afterCursor | beforeCursor}``; responses carry
``pageInfo: {firstCursor, lastCursor}``. Cursors are passed through untouched.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Optional

from tally_governance.mcp.errors import ValidationError

DEFAULT_LIMIT = 20
MAX_LIMIT = 50


def clamp_limit(limit: Optional[int]) -> int:
    """None/0 -> 20, otherwise clamped into [1, 50]."""
    if not limit:
        return DEFAULT_LIMIT
    return max(1, min(int(limit), MAX_LIMIT))


def page_input(
    limit: Optional[int] = None,
    after_cursor: Optional[str] = None,
    before_cursor: Optional[str] = None,
) -> Dict[str, Any]:
    if after_cursor and before_cursor:
        raise ValidationError("Provide either afterCursor or beforeCursor, not both")
    page: Dict[str, Any] = {"limit": clamp_limit(limit)}
    if after_cursor:
        page["afterCursor"] = after_cursor
    if before_cursor:
        page["beforeCursor"] = before_cursor
    return page


@dataclass
class Page:
    nodes: List[dict] = field(default_factory=list)
    first_cursor: Optional[str] = None
    last_cursor: Optional[str] = None

    @property
    def has_more(self) -> bool:
        return bool(self.last_cursor)

    @property
    def page_info(self) -> Dict[str, Optional[str]]:
        return {"firstCursor": self.first_cursor, "lastCursor": self.last_cursor}


def connection_page(data: Optional[dict], key: str) -> Page:
    """Pull ``data[key].{nodes,pageInfo}`` into a Page; missing data is an empty page."""
    conn = (data or {}).get(key) or {}
    info = conn.get("pageInfo") or {}
    return Page(
        nodes=[n for n in (conn.get("nodes") or []) if n],
        first_cursor=info.get("firstCursor") or None,
        last_cursor=info.get("lastCursor") or None,
    )


def walk_pages(
    fetch: Callable[[Dict[str, Any]], Page],
    limit: int = MAX_LIMIT,
    max_pages: Optional[int] = None,
) -> Iterator[dict]:
    """Yield nodes page by page, following lastCursor until it runs out.

    ``fetch`` receives the page input for each request. Nodes whose ``id``
    was already yielded are skipped.
    """
    seen: set[str] = set()
    after: Optional[str] = None
    pages = 0
    while True:
        page = fetch(page_input(limit, after_cursor=after))
        pages += 1
        for node in page.nodes:
            nid = node.get("id")
            if nid is not None:
                if nid in seen:
                    continue
                seen.add(nid)
            yield node
        if not page.has_more or not page.nodes or page.last_cursor == after:
            break
        if max_pages is not None and pages >= max_pages:
            break
        after = page.last_cursor
