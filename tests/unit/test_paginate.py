"""Unit tests for the page aggregator."""

import pytest

from mailersend_cli.utils.paginate import fetch_all, page_size_for


class PagedSource:
    """Serves numbered items in fixed-size pages and records each call."""

    def __init__(self, total: int, page_size: int = 0) -> None:
        self.items = list(range(1, total + 1))
        self.page_size = page_size
        self.calls = []

    def __call__(self, page, per_page):
        self.calls.append((page, per_page))
        size = self.page_size or per_page
        start = (page - 1) * size
        chunk = self.items[start:start + size]
        return chunk, start + size < len(self.items)


class TestPageSize:
    """Test cases for page_size_for."""

    @pytest.mark.parametrize("limit,expected", [
        (0, 25),
        (1, 10),
        (7, 10),
        (10, 10),
        (15, 15),
        (25, 25),
        (100, 25),
    ])
    def test_page_size(self, limit, expected):
        assert page_size_for(limit) == expected


class TestFetchAll:
    """Test cases for fetch_all."""

    def test_fetches_every_page_without_limit(self):
        source = PagedSource(60)

        items = fetch_all(source)

        assert items == list(range(1, 61))
        assert source.calls == [(1, 25), (2, 25), (3, 25)]

    def test_limit_truncates_first_page(self):
        source = PagedSource(30)

        items = fetch_all(source, limit=7)

        assert items == [1, 2, 3, 4, 5, 6, 7]
        assert source.calls == [(1, 10)]

    def test_limit_spanning_pages(self):
        source = PagedSource(100, page_size=25)

        items = fetch_all(source, limit=40)

        assert items == list(range(1, 41))
        assert [page for page, _ in source.calls] == [1, 2]

    def test_limit_larger_than_total(self):
        source = PagedSource(12)

        assert fetch_all(source, limit=50) == list(range(1, 13))

    def test_empty_result(self):
        source = PagedSource(0)

        assert fetch_all(source) == []
        assert source.calls == [(1, 25)]

    def test_fetcher_errors_propagate(self):
        def fetcher(page, per_page):
            if page == 2:
                raise RuntimeError("page 2 failed")
            return ["a"], True

        with pytest.raises(RuntimeError, match="page 2 failed"):
            fetch_all(fetcher)
