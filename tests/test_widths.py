from __future__ import annotations

import pytest

from tagtable.models import MergedTable
from tagtable.widths import _shrink, allocate_widths, column_needs, fit_widths


class TestColumnNeeds:
    TABLE = MergedTable(
        rows=(
            ("File Name", "Id"),
            ("a.xml", "1"),
            ("long-name.xml", ""),
        )
    )

    def test_header_counts_without_truncate(self):
        assert column_needs(self.TABLE, truncate=False) == [13, 2]

    def test_header_ignored_with_truncate(self):
        assert column_needs(self.TABLE, truncate=True) == [13, 1]

    def test_header_only_table_with_truncate(self):
        table = MergedTable(rows=(("File Name", "Id"),))
        assert column_needs(table, truncate=True) == [0, 0]

    def test_no_columns(self):
        assert column_needs(MergedTable(rows=((),)), truncate=False) == []


class TestFitWidths:
    def test_narrow_columns_get_their_need(self):
        assert fit_widths([3, 10, 1], 20) == [3, 10, 1]

    def test_unused_space_flows_to_wide_columns(self):
        # 30 usable: 5 for the narrow one, the rest split 12/13.
        assert fit_widths([5, 40, 40], 32) == [5, 12, 13]

    def test_even_split_when_all_wide(self):
        assert fit_widths([50, 50], 21) == [10, 10]

    def test_zero_columns(self):
        assert fit_widths([], 80) == []

    def test_empty_column_collapses(self):
        assert fit_widths([0, 4], 20) == [0, 4]

    def test_budget_too_small_never_negative(self):
        # One usable character: only the last column in order gets it.
        assert fit_widths([10, 10, 10], 3) == [0, 0, 1]

    def test_negative_budget(self):
        assert fit_widths([10, 10], 0) == [0, 0]

    @pytest.mark.parametrize(
        ("needs", "total"),
        [
            ([1, 2, 3], 8),
            ([80, 80, 80, 80], 11),
            ([7, 120, 3, 45, 45], 80),
            ([200], 5),
            ([9, 9, 9, 9, 9, 9], 23),
            ([0, 0, 100], 40),
        ],
    )
    def test_fits_budget(self, needs: list[int], total: int):
        widths = fit_widths(needs, total)
        assert len(widths) == len(needs)
        assert sum(widths) + len(needs) - 1 <= total
        assert all(w >= 0 for w in widths)
        assert all(w <= n for w, n in zip(widths, needs, strict=True))

    def test_monotonic_in_need(self):
        needs = [30, 5, 60, 12]
        widths = fit_widths(needs, 50)
        by_need = [w for _, w in sorted(zip(needs, widths, strict=True))]
        assert by_need == sorted(by_need)

    def test_preserves_column_order(self):
        widths = fit_widths([40, 2], 80)
        assert widths == [40, 2]


class TestShrink:
    def test_decrements_in_index_order(self):
        widths = [5, 5, 1]
        _shrink(widths, 8)
        assert widths == [3, 4, 1]

    def test_stops_at_two(self):
        widths = [3, 3]
        _shrink(widths, 1)
        assert widths == [2, 2]

    def test_noop_when_fits(self):
        widths = [4, 4]
        _shrink(widths, 8)
        assert widths == [4, 4]

    def test_leaves_narrow_columns_alone(self):
        widths = [1, 2, 6]
        _shrink(widths, 5)
        assert widths == [1, 2, 2]


class TestAllocateWidths:
    def test_uses_table_content(self):
        table = MergedTable(
            rows=(
                ("File Name", "Id", "Name"),
                ("a.xml", "1", "Foo"),
                ("", "2", "Bar"),
            )
        )
        assert allocate_widths(table, 40, truncate=False) == [9, 2, 4]
        assert allocate_widths(table, 40, truncate=True) == [5, 1, 3]

    def test_wide_content_is_capped(self):
        table = MergedTable(rows=(("A", "B"), ("x" * 100, "y" * 100)))
        widths = allocate_widths(table, 41, truncate=True)
        assert widths == [20, 20]
