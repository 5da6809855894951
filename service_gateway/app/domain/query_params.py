"""
Inbound query parameters and their translation to RAWG parameters.
"""

from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict


MAX_PAGE_SIZE = 40
DEFAULT_PAGE_SIZE = 20

GAME_FILTERS = (
    "search",
    "search_precise",
    "search_exact",
    "parent_platforms",
    "platforms",
    "stores",
    "developers",
    "publishers",
    "genres",
    "tags",
    "creators",
    "dates",
    "updated",
    "platforms_count",
    "metacritic",
    "exclude_collection",
    "exclude_additions",
    "exclude_parents",
    "exclude_game_series",
    "exclude_stores",
    "ordering",
)


def clamp_page_size(page_size: int) -> int:
    """RAWG pages hold at most 40 items; smaller values pass through as given."""
    return min(page_size, MAX_PAGE_SIZE)


def format_value(value) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class PageParams(BaseModel):
    """Pagination shared by every list route."""

    model_config = ConfigDict(extra="ignore")

    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE

    def to_upstream_parameters(self) -> Dict[str, Optional[str]]:
        return {
            "page": str(self.page),
            "page_size": str(clamp_page_size(self.page_size)),
        }


class OrderedPageParams(PageParams):
    """Pagination plus RAWG's ``ordering`` field."""

    ordering: Optional[str] = None

    def to_upstream_parameters(self) -> Dict[str, Optional[str]]:
        parameters: Dict[str, Optional[str]] = {"ordering": self.ordering}
        parameters.update(super().to_upstream_parameters())
        return parameters


class GamesQueryParams(PageParams):
    """Filters accepted by ``GET /api/games``."""

    search: Optional[str] = None
    search_precise: Optional[bool] = None
    search_exact: Optional[bool] = None
    parent_platforms: Optional[str] = None
    platforms: Optional[str] = None
    stores: Optional[str] = None
    developers: Optional[str] = None
    publishers: Optional[str] = None
    genres: Optional[str] = None
    tags: Optional[str] = None
    creators: Optional[str] = None
    dates: Optional[str] = None
    updated: Optional[str] = None
    platforms_count: Optional[int] = None
    metacritic: Optional[str] = None
    exclude_collection: Optional[int] = None
    exclude_additions: Optional[int] = None
    exclude_parents: Optional[int] = None
    exclude_game_series: Optional[int] = None
    exclude_stores: Optional[str] = None
    ordering: Optional[str] = None

    def to_upstream_parameters(self) -> Dict[str, Optional[str]]:
        """Filters in a fixed order, then ``page`` and the clamped ``page_size``.

        Unset filters map to ``None`` and are dropped by the URL builder.
        """
        parameters = {name: format_value(getattr(self, name)) for name in GAME_FILTERS}
        parameters.update(super().to_upstream_parameters())
        return parameters
