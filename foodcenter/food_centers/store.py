from __future__ import annotations

import logging
import re
import threading
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd

from .config import DEFAULT_STORE_CONFIG, StoreConfig
from .filters import FilterPredicate, SpatialClause, TextMatchClause
from .models import FoodCenter

logger = logging.getLogger(__name__)

COLUMNS: list[str] = [
    "id",
    "name",
    "address",
    "city",
    "state",
    "capacity",
    "location",
    "contact_number",
    "status",
    "longitude",
    "latitude",
    "user_id",
]


def _central_angle(
    lon: np.ndarray, lat: np.ndarray, center_lon: float, center_lat: float
) -> np.ndarray:
    """Great-circle angle in radians between each point and the centre (haversine)."""
    lon1, lat1 = np.radians(lon), np.radians(lat)
    lon2, lat2 = np.radians(center_lon), np.radians(center_lat)
    a = (
        np.sin((lat2 - lat1) / 2.0) ** 2
        + np.cos(lat1) * np.cos(lat2) * np.sin((lon2 - lon1) / 2.0) ** 2
    )
    return 2.0 * np.arcsin(np.sqrt(np.clip(a, 0.0, 1.0)))


class FoodCenterStore:
    """
    In-memory food center records.

    ``find`` and ``count`` share one mask builder, so a count always equals
    the length of the matching list for the same predicate.
    """

    def __init__(self) -> None:
        self._records: dict[str, dict[str, Any]] = {}
        self._lock = threading.Lock()

    # ── Predicate evaluation ─────────────────────────────────────────────

    def _frame(self) -> pd.DataFrame:
        return pd.DataFrame.from_records(list(self._records.values()), columns=COLUMNS)

    @staticmethod
    def _spatial_mask(df: pd.DataFrame, clause: SpatialClause) -> np.ndarray:
        lon = pd.to_numeric(df["longitude"], errors="coerce").to_numpy(dtype=float)
        lat = pd.to_numeric(df["latitude"], errors="coerce").to_numpy(dtype=float)
        center_lon, center_lat = clause.center
        with np.errstate(invalid="ignore"):
            angle = _central_angle(lon, lat, center_lon, center_lat)
            # NaN on either side compares False, so it never matches.
            return angle <= clause.angular_radius

    @staticmethod
    def _text_mask(df: pd.DataFrame, clause: TextMatchClause) -> np.ndarray:
        try:
            regex = re.compile(clause.pattern, re.IGNORECASE)
        except re.error:
            logger.warning("Invalid search pattern %r, matching nothing", clause.query)
            return np.zeros(len(df), dtype=bool)

        mask = np.zeros(len(df), dtype=bool)
        for field in clause.fields:
            hits = df[field].map(lambda v: isinstance(v, str) and regex.search(v) is not None)
            mask |= hits.to_numpy(dtype=bool)
        return mask

    def _mask(self, df: pd.DataFrame, predicate: FilterPredicate) -> np.ndarray:
        mask = df["status"].isin(list(predicate.status_in)).to_numpy(dtype=bool, copy=True)
        if predicate.spatial is not None:
            mask &= self._spatial_mask(df, predicate.spatial)
        if predicate.text_match is not None:
            mask &= self._text_mask(df, predicate.text_match)
        return mask

    def find(self, predicate: FilterPredicate) -> list[FoodCenter]:
        with self._lock:
            records = list(self._records.values())
            df = self._frame()
        mask = self._mask(df, predicate)
        return [FoodCenter(**records[i]) for i in np.flatnonzero(mask)]

    def count(self, predicate: FilterPredicate) -> int:
        with self._lock:
            df = self._frame()
        return int(self._mask(df, predicate).sum())

    # ── Record access ────────────────────────────────────────────────────

    def get(self, food_center_id: str) -> FoodCenter | None:
        record = self._records.get(food_center_id)
        return FoodCenter(**record) if record else None

    def find_by_user(self, user_id: str) -> list[FoodCenter]:
        return [FoodCenter(**r) for r in list(self._records.values()) if r.get("user_id") == user_id]

    def insert(self, food_center: FoodCenter) -> FoodCenter:
        with self._lock:
            self._records[food_center.id] = food_center.model_dump(mode="json")
        return food_center

    def update(self, food_center_id: str, changes: dict[str, Any]) -> FoodCenter | None:
        with self._lock:
            record = self._records.get(food_center_id)
            if record is None:
                return None
            merged = FoodCenter(**{**record, **changes, "id": food_center_id})
            self._records[food_center_id] = merged.model_dump(mode="json")
        return merged

    def clear(self) -> None:
        with self._lock:
            self._records.clear()

    def __len__(self) -> int:
        return len(self._records)

    def load_csv(self, path: Path) -> int:
        """Load seed records; ``location`` is rebuilt from longitude/latitude."""
        df = pd.read_csv(path, dtype={"id": str, "user_id": str, "contact_number": str})
        loaded = 0
        for raw in df.to_dict(orient="records"):
            row = {k: (None if pd.isna(v) else v) for k, v in raw.items()}
            lon, lat = row.get("longitude"), row.get("latitude")
            if lon is not None and lat is not None:
                row["location"] = {"type": "Point", "coordinates": [lon, lat]}
            self.insert(FoodCenter(**row))
            loaded += 1
        logger.info("Loaded %d food centers from %s", loaded, path)
        return loaded


_store: FoodCenterStore | None = None


def get_store(config: StoreConfig = DEFAULT_STORE_CONFIG) -> FoodCenterStore:
    """Return the process-wide store, seeding it on first call."""
    global _store
    if _store is None:
        _store = FoodCenterStore()
        if config.seed_path.exists():
            _store.load_csv(config.seed_path)
    return _store


def clear_food_centers() -> None:
    get_store().clear()
