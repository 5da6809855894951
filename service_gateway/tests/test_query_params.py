"""
Unit tests for inbound query parameter translation.
"""

import pytest
from pydantic import ValidationError

from service_gateway.app.domain.query_params import (
    MAX_PAGE_SIZE,
    GamesQueryParams,
    OrderedPageParams,
    PageParams,
    clamp_page_size,
)


class TestClampPageSize:
    """Test cases for clamp_page_size."""

    @pytest.mark.parametrize("page_size", [-5, 0, 1, 20, 39, 40])
    def test_small_sizes_unchanged(self, page_size):
        assert clamp_page_size(page_size) == page_size

    @pytest.mark.parametrize("page_size", [41, 100, 10_000])
    def test_large_sizes_clamped(self, page_size):
        assert clamp_page_size(page_size) == MAX_PAGE_SIZE


class TestPageParams:
    """Test cases for pagination parameters."""

    def test_defaults(self):
        assert PageParams().to_upstream_parameters() == {"page": "1", "page_size": "20"}

    def test_clamps_on_translation(self):
        assert PageParams(page=3, page_size=100).to_upstream_parameters() == {"page": "3", "page_size": "40"}

    @pytest.mark.parametrize("page, page_size", [(0, 0), (-2, -5)])
    def test_non_positive_values_pass_through(self, page, page_size):
        assert PageParams(page=page, page_size=page_size).to_upstream_parameters() == {
            "page": str(page),
            "page_size": str(page_size),
        }

    def test_rejects_non_integer(self):
        with pytest.raises(ValidationError):
            PageParams(page_size="many")

    def test_ordering_precedes_pagination(self):
        params = OrderedPageParams(ordering="-games_count", page_size=50)
        assert list(params.to_upstream_parameters().items()) == [
            ("ordering", "-games_count"),
            ("page", "1"),
            ("page_size", "40"),
        ]


class TestGamesQueryParams:
    """Test cases for GamesQueryParams."""

    def test_unset_filters_map_to_none(self):
        parameters = GamesQueryParams().to_upstream_parameters()
        assert parameters["search"] is None
        assert parameters["page"] == "1"
        assert parameters["page_size"] == "20"
        assert list(parameters)[-2:] == ["page", "page_size"]

    def test_booleans_are_lowercase(self):
        parameters = GamesQueryParams(search_precise=True, search_exact=False).to_upstream_parameters()
        assert parameters["search_precise"] == "true"
        assert parameters["search_exact"] == "false"

    def test_integers_are_stringified(self):
        parameters = GamesQueryParams(platforms_count=2, exclude_additions=1).to_upstream_parameters()
        assert parameters["platforms_count"] == "2"
        assert parameters["exclude_additions"] == "1"

    def test_filters_keep_declared_order(self):
        parameters = GamesQueryParams(ordering="-rating", search="zelda", genres="action").to_upstream_parameters()
        present = [name for name, value in parameters.items() if value is not None]
        assert present == ["search", "genres", "ordering", "page", "page_size"]

    def test_page_size_clamped(self):
        assert GamesQueryParams(page_size=100).to_upstream_parameters()["page_size"] == "40"
