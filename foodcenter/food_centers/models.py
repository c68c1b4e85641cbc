from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class FoodCenterStatus(str, Enum):
    LISTED = "LISTED"
    UNLISTED = "UNLISTED"
    DELETED = "DELETED"


class Location(BaseModel):
    type: str = "Point"
    coordinates: list[float] = Field(
        default_factory=list,
        description="Longitude at index 0, latitude at index 1",
    )


class FoodCenterSearch(BaseModel):
    """Raw search parameters, exactly as they arrive on the query string."""

    model_config = ConfigDict(populate_by_name=True)

    q: str | None = None
    latitude: str | None = Field(default=None, alias="lat")
    longitude: str | None = Field(default=None, alias="long")
    radius: str | None = None
    status: str | None = Field(
        default=None, description="Comma separated, e.g. LISTED,UNLISTED"
    )


class FoodCenterIn(BaseModel):
    name: str = Field(..., min_length=1)
    address: str = ""
    city: str = ""
    state: str = ""
    capacity: int | None = Field(default=None, ge=0)
    location: Location | None = None
    contact_number: str | None = None
    status: FoodCenterStatus = FoodCenterStatus.LISTED


class FoodCenterUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1)
    address: str | None = None
    city: str | None = None
    state: str | None = None
    capacity: int | None = Field(default=None, ge=0)
    location: Location | None = None
    contact_number: str | None = None
    status: FoodCenterStatus | None = None


class FoodCenter(FoodCenterIn):
    id: str
    longitude: float | None = None
    latitude: float | None = None
    user_id: str | None = None


class FoodCenterCount(BaseModel):
    count: int
