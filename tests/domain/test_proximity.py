from __future__ import annotations

from locations_mcp.domain.proximity import is_near_any, is_same_place
from tests.helpers.locations import make_feature


def test_features_within_tolerance_are_the_same_place() -> None:
    first = make_feature(lat=42.0, lon=23.0)
    second = make_feature(lat=42.0003, lon=23.0004)

    assert is_same_place(first, second)


def test_features_beyond_tolerance_are_distinct() -> None:
    first = make_feature(lat=42.0, lon=23.0)
    far = make_feature(lat=42.01, lon=23.01)
    one_axis = make_feature(lat=42.0, lon=23.002)

    assert not is_same_place(first, far)
    assert not is_same_place(first, one_axis)


def test_is_near_any_checks_every_accepted_candidate() -> None:
    accepted = [make_feature(lat=41.0, lon=22.0), make_feature(lat=42.0, lon=23.0)]

    assert is_near_any(make_feature(lat=42.0005, lon=23.0005), accepted)
    assert not is_near_any(make_feature(lat=43.0, lon=24.0), accepted)
    assert not is_near_any(make_feature(), [])
