"""
RAWG response models.

Every model accepts unknown keys and keeps them, so forwarded payloads are
not trimmed to the fields declared here. Declared field names match the
upstream JSON case-insensitively, and every field has a default.
"""

from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_validator


T = TypeVar("T")


class RawgModel(BaseModel):
    """Base for all upstream payload models."""

    model_config = ConfigDict(extra="allow")

    @model_validator(mode="before")
    @classmethod
    def _match_field_names(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        known = {name.lower(): name for name in cls.model_fields}
        matched: Dict[str, Any] = {}
        for key, value in data.items():
            target = known.get(key.lower(), key) if isinstance(key, str) else key
            # An exact-case key wins over a differently cased duplicate
            if target != key and target in data:
                continue
            matched[target] = value
        return matched


class PaginatedResponse(RawgModel, Generic[T]):
    """One page of a RAWG list endpoint."""

    count: int = 0
    next: Optional[str] = None
    previous: Optional[str] = None
    results: List[T] = Field(default_factory=list)


class RawgEntity(RawgModel):
    id: int = 0
    name: str = ""
    slug: str = ""
    background_image: Optional[str] = None
    games_count: Optional[int] = None
    image: Optional[str] = None
    year_start: Optional[int] = None
    year_end: Optional[int] = None


class Tag(RawgEntity):
    language: Optional[str] = None
    image_background: Optional[str] = None


class Store(RawgEntity):
    domain: Optional[str] = None
    description: Optional[str] = None


class Creator(RawgEntity):
    image_background: Optional[str] = None


class Developer(RawgEntity):
    image_background: Optional[str] = None


class Publisher(RawgEntity):
    image_background: Optional[str] = None


class Genre(RawgEntity):
    image_background: Optional[str] = None


class Platform(RawgEntity):
    image_background: Optional[str] = None


class EsrbRating(RawgEntity):
    pass


class Requirements(RawgModel):
    minimum: Optional[str] = None
    recommended: Optional[str] = None


class PlatformInfo(RawgModel):
    platform: Platform = Field(default_factory=Platform)
    requirements: Optional[Requirements] = None
    released_at: Optional[str] = None


class ParentPlatform(RawgModel):
    platform: Platform = Field(default_factory=Platform)


class StoreInfo(RawgModel):
    id: int = 0
    store: Store = Field(default_factory=Store)
    url: Optional[str] = None


class Screenshot(RawgModel):
    id: int = 0
    image: str = ""


class Rating(RawgModel):
    id: int = 0
    title: str = ""
    count: int = 0
    percent: float = 0.0


class AddedByStatus(RawgModel):
    yet: int = 0
    owned: int = 0
    beaten: int = 0
    toplay: int = 0
    dropped: int = 0
    playing: int = 0


class Game(RawgEntity):
    """A RAWG game record, as returned by list and detail endpoints."""

    description: Optional[str] = None
    description_raw: Optional[str] = None
    # Dates stay strings so they are forwarded exactly as received
    released: Optional[str] = None
    updated: Optional[str] = None
    tba: bool = False
    free_to_play: bool = False
    metacritic: Optional[int] = None
    metacritic_url: Optional[str] = None
    metacritic_platform: Optional[str] = None
    rating: float = 0.0
    rating_top: int = 0
    ratings: Optional[List[Rating]] = None
    ratings_count: int = 0
    rating_count: int = 0
    community_rating: Optional[int] = None
    reviews_text_count: int = 0
    reviews_count: int = 0
    reviews_average: float = 0.0
    added: int = 0
    added_by_status: Optional[AddedByStatus] = None
    playtime: int = 0
    avg_playtime: int = 0
    median_playtime: int = 0
    suggestions_count: int = 0
    esrb_rating: Optional[EsrbRating] = None
    platforms: Optional[List[PlatformInfo]] = None
    parent_platforms: Optional[List[ParentPlatform]] = None
    stores: Optional[List[StoreInfo]] = None
    genres: Optional[List[Genre]] = None
    tags: Optional[List[Tag]] = None
    publishers: Optional[List[Publisher]] = None
    developers: Optional[List[Developer]] = None
    creators: Optional[List[Creator]] = None
    short_screenshots: Optional[List[Screenshot]] = None
    requirements: Optional[Requirements] = None
    alternative_names: Optional[List[str]] = None
    website: Optional[str] = None
    reddit_url: Optional[str] = None
    reddit_name: Optional[str] = None
    reddit_description: Optional[str] = None
    reddit_logo: Optional[str] = None
    reddit_count: int = 0
    twitch_count: int = 0
    youtube_count: int = 0
    achievements_count: int = 0
    parents_count: int = 0
    additions_count: int = 0
    game_series_count: int = 0
    saturated_color: Optional[str] = None
    dominant_color: Optional[str] = None
    user_game: Optional[Any] = None
    clip: Optional[Any] = None
