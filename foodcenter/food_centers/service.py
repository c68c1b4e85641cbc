from __future__ import annotations

import logging
import uuid
from typing import Any

from .filters import build_filter
from .models import FoodCenter, FoodCenterIn, FoodCenterSearch, FoodCenterUpdate, Location
from .store import FoodCenterStore, get_store

logger = logging.getLogger(__name__)


def derive_coordinates(location: Location | None) -> dict[str, float]:
    """
    Flat longitude/latitude fields for a location.

    Only a pair ``[longitude, latitude]`` is used; any other length yields
    nothing, leaving existing scalar fields as they were.
    """
    if location is None or len(location.coordinates) != 2:
        return {}
    return {"longitude": location.coordinates[0], "latitude": location.coordinates[1]}


class FoodCenterService:
    def __init__(self, store: FoodCenterStore | None = None) -> None:
        self.store = store if store is not None else get_store()

    def get_all(self, search: FoodCenterSearch) -> list[FoodCenter]:
        return self.store.find(build_filter(search))

    def get_count(self, search: FoodCenterSearch) -> int:
        return self.store.count(build_filter(search))

    def get_by_user_id(self, user_id: str) -> list[FoodCenter]:
        return self.store.find_by_user(user_id)

    def get_by_id(self, food_center_id: str) -> FoodCenter | None:
        return self.store.get(food_center_id)

    def save(self, food_center: FoodCenterIn, user_id: str | None = None) -> FoodCenter:
        record = FoodCenter(
            **food_center.model_dump(),
            id=uuid.uuid4().hex,
            user_id=user_id,
            **derive_coordinates(food_center.location),
        )
        self.store.insert(record)
        logger.info("Created food center %s (%s)", record.id, record.name)
        return record

    def update(self, food_center_id: str, changes: FoodCenterUpdate) -> FoodCenter | None:
        updates: dict[str, Any] = changes.model_dump(exclude_unset=True, exclude_none=True, mode="json")
        updates.update(derive_coordinates(changes.location))
        updated = self.store.update(food_center_id, updates)
        if updated is None:
            logger.info("Update for unknown food center %s", food_center_id)
        else:
            logger.info("Updated food center %s", food_center_id)
        return updated
