from __future__ import annotations

from pathlib import Path

import pytest

from foodcenter.food_centers.filters import build_filter
from foodcenter.food_centers.models import FoodCenter, FoodCenterSearch, Location
from foodcenter.food_centers.store import FoodCenterStore

# Centre of Philadelphia
CENTER = {"lat": "39.9526", "long": "-75.1652"}


def _center(fid, name, city, state, address, lon, lat, status="LISTED"):
    return FoodCenter(
        id=fid,
        name=name,
        address=address,
        city=city,
        state=state,
        location=Location(coordinates=[lon, lat]),
        longitude=lon,
        latitude=lat,
        status=status,
    )


@pytest.fixture
def store() -> FoodCenterStore:
    s = FoodCenterStore()
    s.insert(_center("1", "Broad", "Philadelphia", "PA", "1400 N Broad St", -75.1597, 39.9726))  # ~1.4 mi
    s.insert(_center("2", "Camden", "Camden", "NJ", "520 Market St", -75.1196, 39.9448))  # ~2.5 mi
    s.insert(_center("3", "Springfield", "Springfield", "PA", "45 Spring Garden Rd", -75.3332, 39.9307))  # ~9 mi
    s.insert(_center("4", "Trenton", "Trenton", "NJ", "12 W State St", -74.7657, 40.2203, "UNLISTED"))  # ~28 mi
    s.insert(_center("5", "Wilmington", "Wilmington", "DE", "800 N King St", -75.5484, 39.7447, "DELETED"))
    s.insert(FoodCenter(id="6", name="No location", city="Philadelphia", state="PA"))
    return s


def _ids(store, **params):
    return [fc.id for fc in store.find(build_filter(FoodCenterSearch(**params)))]


# ── Status ───────────────────────────────────────────────────────────────


def test_default_search_returns_listed_only(store):
    assert _ids(store) == ["1", "2", "3", "6"]


def test_status_override(store):
    assert _ids(store, status="UNLISTED,DELETED") == ["4", "5"]


def test_unknown_status_token_matches_nothing(store):
    assert _ids(store, status="ARCHIVED") == []


# ── Spatial ──────────────────────────────────────────────────────────────


def test_spatial_default_radius(store):
    assert _ids(store, **CENTER) == ["1", "2"]


def test_spatial_larger_radius(store):
    assert _ids(store, **CENTER, radius="10") == ["1", "2", "3"]


def test_spatial_respects_status(store):
    assert _ids(store, **CENTER, radius="50", status="UNLISTED") == ["4"]


def test_spatial_ignores_text_query(store):
    assert _ids(store, **CENTER, q="Springfield") == ["1", "2"]


def test_swapped_coordinates_do_not_match(store):
    assert _ids(store, lat=CENTER["long"], long=CENTER["lat"]) == []


def test_malformed_coordinates_match_nothing(store):
    assert _ids(store, lat="abc", long="-75.1652", radius="100") == []


# ── Text ─────────────────────────────────────────────────────────────────


def test_text_is_case_insensitive_across_fields(store):
    # city "Springfield" and address "Spring Garden Rd" belong to the same record
    assert _ids(store, q="spring") == ["3"]


def test_text_matches_state(store):
    assert _ids(store, q="nj", status="LISTED,UNLISTED") == ["2", "4"]


def test_text_matches_address(store):
    assert _ids(store, q="broad") == ["1"]


def test_text_pattern_metacharacters_are_live(store):
    assert _ids(store, q="Spring.*Rd") == ["3"]


def test_invalid_pattern_matches_nothing(store):
    assert _ids(store, q="(unclosed") == []


# ── Count / find equivalence ─────────────────────────────────────────────


@pytest.mark.parametrize(
    "params",
    [
        {},
        {"status": "LISTED,UNLISTED,DELETED"},
        {"q": "st"},
        {"q": "(bad"},
        CENTER,
        {**CENTER, "radius": "40", "status": "LISTED,UNLISTED"},
        {"lat": "x", "long": "y"},
    ],
)
def test_count_equals_find_length(store, params):
    predicate = build_filter(FoodCenterSearch(**params))
    assert store.count(predicate) == len(store.find(predicate))


# ── Record access ────────────────────────────────────────────────────────


def test_update_merges_changes(store):
    updated = store.update("1", {"capacity": 42})
    assert updated.capacity == 42
    assert updated.name == "Broad"
    assert store.get("1").capacity == 42


def test_update_unknown_returns_none(store):
    assert store.update("missing", {"capacity": 1}) is None


def test_find_by_user():
    s = FoodCenterStore()
    s.insert(FoodCenter(id="a", name="A", user_id="u1"))
    s.insert(FoodCenter(id="b", name="B", user_id="u2"))
    assert [fc.id for fc in s.find_by_user("u1")] == ["a"]


def test_load_csv_builds_location(tmp_path: Path):
    csv = tmp_path / "seed.csv"
    csv.write_text(
        "id,name,address,city,state,capacity,contact_number,status,longitude,latitude,user_id\n"
        "s1,Pantry,1 Main St,Springfield,PA,10,555-0100,LISTED,-75.0,40.0,\n"
        "s2,Kitchen,2 Main St,Springfield,PA,,,UNLISTED,,,\n"
    )
    s = FoodCenterStore()
    assert s.load_csv(csv) == 2
    first = s.get("s1")
    assert first.location.coordinates == [-75.0, 40.0]
    assert first.user_id is None
    second = s.get("s2")
    assert second.location is None
    assert second.capacity is None
