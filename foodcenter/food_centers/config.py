from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")

_DEFAULT_SEED = Path(__file__).resolve().parent.parent / "data" / "food_centers.csv"


@dataclass(frozen=True)
class StoreConfig:
    """
    Configuration for the in-memory food center store.

    A seed path that does not exist leaves the store empty.
    """

    seed_path: Path = Path(os.getenv("FOOD_CENTERS_SEED", str(_DEFAULT_SEED)))


DEFAULT_STORE_CONFIG = StoreConfig()
