"""Tests for host pagination."""

from __future__ import annotations

import pytest

from fleetdash.ui.pager import next_page, page_count, paginate, prev_page


class TestPaginate:
    """Tests for paginate()."""

    def test_exact_pages(self) -> None:
        assert paginate([1, 2, 3, 4], 2) == [[1, 2], [3, 4]]

    def test_short_last_page(self) -> None:
        assert paginate(list(range(7)), 5) == [[0, 1, 2, 3, 4], [5, 6]]

    def test_page_larger_than_items(self) -> None:
        assert paginate(["a", "b"], 10) == [["a", "b"]]

    def test_empty(self) -> None:
        assert paginate([], 5) == []

    def test_concatenation_preserves_order(self) -> None:
        items = list(range(23))

        pages = paginate(items, 4)

        assert [item for page in pages for item in page] == items
        assert len(pages) == page_count(len(items), 4)

    @pytest.mark.parametrize("size", [0, -1])
    def test_invalid_page_size(self, size: int) -> None:
        with pytest.raises(ValueError, match="page_size"):
            paginate([1], size)


class TestNavigation:
    """Tests for wrap-around navigation."""

    def test_next_wraps(self) -> None:
        assert next_page(0, 3) == 1
        assert next_page(2, 3) == 0

    def test_prev_wraps(self) -> None:
        assert prev_page(1, 3) == 0
        assert prev_page(0, 3) == 2

    def test_single_page(self) -> None:
        assert next_page(0, 1) == 0
        assert prev_page(0, 1) == 0

    def test_no_pages(self) -> None:
        with pytest.raises(ValueError):
            next_page(0, 0)
        with pytest.raises(ValueError):
            prev_page(0, 0)


class TestNavigationInverse:
    """Tests for prev_page undoing next_page."""

    @pytest.mark.parametrize("count", [1, 2, 3, 5, 8])
    def test_prev_undoes_next(self, count: int) -> None:
        for index in range(count):
            assert prev_page(next_page(index, count), count) == index
            assert next_page(prev_page(index, count), count) == index

    @pytest.mark.parametrize("count", [1, 4, 7])
    def test_full_cycle_returns_to_start(self, count: int) -> None:
        index = 0
        for _ in range(count):
            index = next_page(index, count)

        assert index == 0
