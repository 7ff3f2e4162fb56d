import pytest

from tally_governance.mcp.errors import ValidationError
from tally_governance.mcp.pagination import Page, clamp_limit, connection_page, page_input, walk_pages


@pytest.mark.parametrize("requested, effective", [
    (None, 20),
    (0, 20),
    (5, 5),
    (50, 50),
    (51, 50),
    (999, 50),
    (-3, 1),
])
def test_clamp_limit(requested, effective):
    assert clamp_limit(requested) == effective


def test_page_input_passes_cursors_verbatim():
    assert page_input(10, after_cursor="abc==") == {"limit": 10, "afterCursor": "abc=="}
    assert page_input(before_cursor="xyz") == {"limit": 20, "beforeCursor": "xyz"}
    assert page_input() == {"limit": 20}


def test_page_input_rejects_both_cursors():
    with pytest.raises(ValidationError):
        page_input(after_cursor="a", before_cursor="b")


def test_connection_page_without_data_is_empty():
    for data in (None, {}, {"delegates": None}):
        page = connection_page(data, "delegates")
        assert page.nodes == []
        assert page.has_more is False


def test_connection_page_reads_page_info():
    page = connection_page(
        {"votes": {"nodes": [{"id": "1"}], "pageInfo": {"firstCursor": "f", "lastCursor": "l"}}},
        "votes",
    )
    assert page.nodes == [{"id": "1"}]
    assert page.page_info == {"firstCursor": "f", "lastCursor": "l"}
    assert page.has_more


def test_walk_pages_follows_last_cursor_and_skips_repeats():
    pages = {
        None: Page([{"id": "a"}, {"id": "b"}], "a", "c1"),
        "c1": Page([{"id": "b"}, {"id": "c"}], "b", "c2"),
        "c2": Page([{"id": "d"}], "d", None),
    }
    requested = []

    def fetch(page):
        requested.append(page)
        return pages[page.get("afterCursor")]

    ids = [n["id"] for n in walk_pages(fetch, limit=2)]

    assert ids == ["a", "b", "c", "d"]
    assert requested == [{"limit": 2}, {"limit": 2, "afterCursor": "c1"}, {"limit": 2, "afterCursor": "c2"}]


def test_walk_pages_respects_max_pages():
    def fetch(page):
        n = int(page.get("afterCursor") or 0)
        return Page([{"id": str(n)}], str(n), str(n + 1))

    assert [n["id"] for n in walk_pages(fetch, max_pages=3)] == ["0", "1", "2"]


def test_walk_pages_stops_when_cursor_does_not_advance():
    calls = []

    def fetch(page):
        calls.append(page)
        return Page([{"id": str(len(calls))}], None, "same")

    list(walk_pages(fetch, max_pages=10))
    assert len(calls) == 2
