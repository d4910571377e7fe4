"""
Test Proximity Service
Nearest-record queries over geohash-ordered records
"""

import random

import pytest

from geoproximity.exceptions import DataSourceError, InvalidArgument, InvalidHashCharacter
from geoproximity.services.proximity import (
    distance_to,
    fetch_by_distance,
    fetch_nearest,
    lexicographic_value,
    merge_by_key_distance
)
from geoproximity.services.range_provider import InMemoryRangeProvider
from geoproximity.utils.geohash import encode


def make_place(name, latitude, longitude, precision=12, **extra):
    place = {
        "name": name,
        "latitude": latitude,
        "longitude": longitude,
        "geohash": encode(latitude, longitude, precision),
    }
    place.update(extra)
    return place


def bay_area_places(count=200, seed=7):
    rng = random.Random(seed)
    return [
        make_place(
            f"place-{i}",
            37.7749 + rng.uniform(-0.5, 0.5),
            -122.4194 + rng.uniform(-0.5, 0.5)
        )
        for i in range(count)
    ]


class FailingProvider(InMemoryRangeProvider):
    def __init__(self, error):
        super().__init__([])
        self.error = error

    def scan_ascending(self, field, value, limit, inclusive=False, filters=None):
        raise self.error


def test_lexicographic_value():
    assert lexicographic_value("") == 0
    assert lexicographic_value("0") == 0
    assert lexicographic_value("b") == ord("b") - ord("0")
    assert lexicographic_value("10") == 26


def test_merge_takes_closer_key_first():
    above = [{"geohash": "s0p3"}, {"geohash": "s0p9"}]
    below = [{"geohash": "s0p0"}]

    merged = merge_by_key_distance("s0p2", above, below, 3)

    assert [e["geohash"] for e in merged] == ["s0p3", "s0p0", "s0p9"]


def test_merge_tie_prefers_descending_stream():
    merged = merge_by_key_distance("s0p2", [{"geohash": "s0p3"}], [{"geohash": "s0p1"}], 2)

    assert [e["geohash"] for e in merged] == ["s0p1", "s0p3"]


def test_merge_drains_remaining_stream():
    above = [{"geohash": g} for g in ("s0p3", "s0p4", "s0p5")]

    merged = merge_by_key_distance("s0p2", above, [], 2)

    assert [e["geohash"] for e in merged] == ["s0p3", "s0p4"]


def test_results_sorted_by_distance():
    provider = InMemoryRangeProvider(bay_area_places())
    center = encode(37.7749, -122.4194, 12)

    results = fetch_by_distance(provider, center, limit=10)

    assert len(results) == 10
    distances = [r["distance"] for r in results]
    assert distances == sorted(distances)


def test_result_length_capped_by_limit_and_data():
    places = bay_area_places(count=25)
    provider = InMemoryRangeProvider(places)
    center = encode(37.7749, -122.4194, 12)

    assert len(fetch_by_distance(provider, center, limit=5)) == 5
    assert len(fetch_by_distance(provider, center, limit=100)) == 25


def test_empty_provider_returns_empty_list():
    provider = InMemoryRangeProvider([])

    assert fetch_by_distance(provider, "9q8yyk8yuv", limit=10) == []


def test_exact_match_is_included():
    places = bay_area_places(count=50)
    target = places[17]
    provider = InMemoryRangeProvider(places)

    results = fetch_by_distance(provider, target["geohash"], limit=1)

    assert results[0]["name"] == target["name"]
    assert results[0]["distance"] == 0


def test_earlier_results_unchanged_by_later_queries():
    places = [make_place(f"p{i}", 10.0 + i * 0.01, 20.0) for i in range(20)]
    provider = InMemoryRangeProvider(places)

    first = fetch_by_distance(provider, encode(10.0, 20.0), limit=10)
    before = [r["distance"] for r in first]
    fetch_by_distance(provider, encode(10.19, 20.0), limit=20)

    assert [r["distance"] for r in first] == before
    assert before == sorted(before)
    assert all("distance" not in p for p in places)


def test_skip_decoding_after_decoded_query_has_no_distance():
    provider = InMemoryRangeProvider(bay_area_places(count=30))
    center = encode(37.7749, -122.4194, 12)

    fetch_by_distance(provider, center, limit=10)
    results = fetch_by_distance(provider, center, limit=10, skip_decoding=True)

    assert all("distance" not in r for r in results)


def test_skip_decoding_keeps_key_order():
    places = bay_area_places(count=50)
    provider = InMemoryRangeProvider(places)
    center = encode(37.7749, -122.4194, 12)

    results = fetch_by_distance(provider, center, limit=8, skip_decoding=True)

    assert len(results) == 8
    assert all("distance" not in r for r in results)
    center_value = lexicographic_value(center)
    gaps = [abs(lexicographic_value(r["geohash"]) - center_value) for r in results]
    assert gaps == sorted(gaps)


def test_over_fetch_recovers_neighbour_across_cell_boundary():
    """A record just south of the equator sorts far from a centre just north of it"""
    center = encode(0.0001, 10.0, 12)
    places = [
        make_place("north-1", 0.001, 10.0),
        make_place("north-2", 0.002, 10.0),
        make_place("north-3", 0.003, 10.0),
        make_place("south", -0.0001, 10.0),
    ]
    provider = InMemoryRangeProvider(places)

    narrow = fetch_by_distance(provider, center, limit=1, over_fetch=1)
    wide = fetch_by_distance(provider, center, limit=1, over_fetch=4)

    assert narrow[0]["name"] == "north-1"
    assert wide[0]["name"] == "south"


def test_filters_passed_to_provider():
    places = [
        make_place("a", 37.7750, -122.4194, country_code="US"),
        make_place("b", 37.7751, -122.4194, country_code="CA"),
        make_place("c", 37.7760, -122.4194, country_code="US"),
    ]
    provider = InMemoryRangeProvider(places)

    results = fetch_by_distance(
        provider, encode(37.7749, -122.4194), limit=5, filters={"country_code": "US"}
    )

    assert [r["name"] for r in results] == ["a", "c"]


def test_fetch_nearest_encodes_point():
    places = bay_area_places(count=50)
    provider = InMemoryRangeProvider(places)

    by_point = fetch_nearest(provider, 37.7749, -122.4194, limit=5)
    by_hash = fetch_by_distance(provider, encode(37.7749, -122.4194), limit=5)

    assert [r["name"] for r in by_point] == [r["name"] for r in by_hash]


def test_distance_to_uses_stored_coordinates():
    place = make_place("a", 0.0, 0.0)

    assert distance_to(place, 0.0, 1.0) == pytest.approx(111_194.9, rel=1e-4)


@pytest.mark.parametrize("kwargs", [{"limit": 0}, {"limit": -3}, {"limit": 5, "over_fetch": 0.5}])
def test_invalid_arguments(kwargs):
    provider = InMemoryRangeProvider(bay_area_places(count=5))

    with pytest.raises(InvalidArgument):
        fetch_by_distance(provider, "9q8yy", **kwargs)


def test_invalid_center():
    provider = InMemoryRangeProvider(bay_area_places(count=5))

    with pytest.raises(InvalidHashCharacter):
        fetch_by_distance(provider, "9q8ya", limit=3)


def test_provider_failure_raised_as_data_source_error():
    cause = RuntimeError("connection reset")

    with pytest.raises(DataSourceError) as exc_info:
        fetch_by_distance(FailingProvider(cause), "9q8yy", limit=3)

    assert exc_info.value.__cause__ is cause


def test_data_source_error_passes_through_unchanged():
    error = DataSourceError("timeout")

    with pytest.raises(DataSourceError) as exc_info:
        fetch_by_distance(FailingProvider(error), "9q8yy", limit=3)

    assert exc_info.value is error


def test_unindexed_field_is_invalid_argument():
    provider = InMemoryRangeProvider(bay_area_places(count=5))

    with pytest.raises(InvalidArgument):
        fetch_by_distance(provider, "9q8yy", limit=3, field="postcode_hash")
