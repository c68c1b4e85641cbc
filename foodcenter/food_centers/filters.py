from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from typing import Any

from .models import FoodCenterSearch, FoodCenterStatus

logger = logging.getLogger(__name__)

EARTH_RADIUS_MILES = 3963.2
DEFAULT_RADIUS_MILES = 5.0
DEFAULT_STATUSES: frozenset[str] = frozenset({FoodCenterStatus.LISTED.value})
TEXT_FIELDS: tuple[str, ...] = ("state", "city", "address")


@dataclass(frozen=True)
class SpatialClause:
    """Records must lie within ``radius_miles`` of (longitude, latitude)."""

    longitude: float
    latitude: float
    radius_miles: float

    @property
    def center(self) -> tuple[float, float]:
        # Longitude first, as geospatial stores expect.
        return (self.longitude, self.latitude)

    @property
    def angular_radius(self) -> float:
        return self.radius_miles / EARTH_RADIUS_MILES


@dataclass(frozen=True)
class TextMatchClause:
    """Case-insensitive substring match against any of ``fields``."""

    query: str
    fields: tuple[str, ...] = TEXT_FIELDS

    @property
    def pattern(self) -> str:
        # q is inserted as-is, so pattern metacharacters keep their meaning.
        return ".*" + self.query + ".*"


@dataclass(frozen=True)
class FilterPredicate:
    status_in: frozenset[str] = DEFAULT_STATUSES
    spatial: SpatialClause | None = None
    text_match: TextMatchClause | None = None

    def __post_init__(self) -> None:
        if not self.status_in:
            raise ValueError("status_in must not be empty")
        if self.spatial is not None and self.text_match is not None:
            raise ValueError("spatial and text_match are mutually exclusive")

    def as_query(self) -> dict[str, Any]:
        """Render as a document-store style query, mainly for logging."""
        query: dict[str, Any] = {"status": {"$in": sorted(self.status_in)}}
        if self.spatial is not None:
            query["location"] = {
                "$geoWithin": {
                    "$centerSphere": [list(self.spatial.center), self.spatial.angular_radius]
                }
            }
        elif self.text_match is not None:
            query["$or"] = [
                {f: {"$regex": self.text_match.pattern, "$options": "i"}}
                for f in self.text_match.fields
            ]
        return query


def _parse_float(raw: str) -> float:
    """Parse a float, returning NaN for anything unparsable."""
    try:
        return float(raw)
    except (TypeError, ValueError):
        return math.nan


def _parse_radius(raw: str | None) -> float:
    if not raw:
        return DEFAULT_RADIUS_MILES
    value = _parse_float(raw)
    if not math.isfinite(value):
        return DEFAULT_RADIUS_MILES
    return value


def _parse_statuses(raw: str | None) -> frozenset[str]:
    if not raw:
        return DEFAULT_STATUSES
    # Caller tokens replace the default set; they are not trimmed or validated.
    return frozenset(raw.split(","))


def build_filter(search: FoodCenterSearch) -> FilterPredicate:
    """
    Build the filter predicate for a food center search.

    Coordinates take precedence over the text query: when both ``lat`` and
    ``long`` are given, ``q`` is ignored entirely. Malformed numbers never
    raise; the radius falls back to the default and bad coordinates become
    NaN, which matches nothing downstream.
    """
    status_in = _parse_statuses(search.status)

    spatial: SpatialClause | None = None
    text_match: TextMatchClause | None = None

    if search.latitude and search.longitude:
        spatial = SpatialClause(
            longitude=_parse_float(search.longitude),
            latitude=_parse_float(search.latitude),
            radius_miles=_parse_radius(search.radius),
        )
    elif search.q:
        text_match = TextMatchClause(query=search.q)

    predicate = FilterPredicate(status_in=status_in, spatial=spatial, text_match=text_match)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("Food center query: %s", json.dumps(predicate.as_query()))
    return predicate
