"""
Unit tests for the RAWG URL builder.
"""

import pytest

from service_gateway.app.adapters.url_builder import build_url


BASE = "https://api.rawg.io/api"


class TestBuildUrl:
    """Test cases for build_url."""

    @pytest.mark.parametrize(
        "base_path, endpoint",
        [
            ("https://api.rawg.io/api", "games"),
            ("https://api.rawg.io/api/", "games"),
            ("https://api.rawg.io/api", "/games"),
            ("https://api.rawg.io/api/", "/games"),
        ],
    )
    def test_joins_with_single_slash(self, base_path, endpoint):
        """Leading and trailing slashes never double up."""
        assert build_url(base_path, endpoint, "", {}) == "https://api.rawg.io/api/games"

    def test_credential_comes_first(self):
        """The key parameter precedes every other pair."""
        url = build_url(BASE, "games", "secret", {"page": "2", "page_size": "40"})
        assert url == f"{BASE}/games?key=secret&page=2&page_size=40"

    def test_empty_credential_is_omitted(self):
        url = build_url(BASE, "games", "", {"page": "1"})
        assert url == f"{BASE}/games?page=1"
        assert "key=" not in url

    def test_skips_empty_and_missing_values(self):
        """Pairs with empty or None values never reach the query string."""
        url = build_url(
            BASE,
            "games",
            "k",
            {"search": "", "genres": None, "ordering": "-rating", "page": "1"},
        )
        assert url == f"{BASE}/games?key=k&ordering=-rating&page=1"

    def test_no_query_string_when_nothing_remains(self):
        assert build_url(BASE, "games/3498", "", {"search": ""}) == f"{BASE}/games/3498"
        assert build_url(BASE, "games/3498", "", None) == f"{BASE}/games/3498"

    def test_preserves_insertion_order(self):
        url = build_url(BASE, "games", "", {"z": "1", "a": "2", "m": "3"})
        assert url.endswith("?z=1&a=2&m=3")

    def test_percent_encodes_names_and_values(self):
        url = build_url(BASE, "games", "a&b=c", {"search": "half life 2", "dates": "2010-01-01,2020-12-31"})
        assert url == (
            f"{BASE}/games?key=a%26b%3Dc"
            "&search=half%20life%202"
            "&dates=2010-01-01%2C2020-12-31"
        )

    def test_unreserved_characters_are_kept(self):
        url = build_url(BASE, "games", "", {"ordering": "-released_at.~x"})
        assert url.endswith("?ordering=-released_at.~x")

    def test_non_ascii_values_are_utf8_encoded(self):
        url = build_url(BASE, "games", "", {"search": "pokémon"})
        assert url.endswith("?search=pok%C3%A9mon")
