"""Tests for page/offset arithmetic."""

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from classroll.services.pagination import page_count, page_offset, pagination_info


class TestPagination:
    def test_offset_is_one_based(self):
        assert page_offset(1, 10) == 0
        assert page_offset(3, 10) == 20

    def test_pages_round_up(self):
        assert page_count(25, 10) == 3
        assert page_count(20, 10) == 2
        assert page_count(0, 10) == 0

    def test_info(self):
        assert pagination_info(3, 10, 25) == {"page": 3, "limit": 10, "total": 25, "pages": 3}
