import math

import pytest

from src.marketplace.errors import InvalidInput
from src.marketplace.models.domain import Coordinate
from src.marketplace.services.geospatial import EARTH_RADIUS_KM, distance_km, haversine_km

from .conftest import RESTAURANT_LAT, RESTAURANT_LNG, north_of


def test_distance_is_symmetric_and_zero_for_same_point() -> None:
    sanaa = Coordinate.parse(RESTAURANT_LAT, RESTAURANT_LNG)
    aden = Coordinate.parse(12.7855, 45.0187)

    assert distance_km(sanaa, aden) == pytest.approx(distance_km(aden, sanaa))
    assert distance_km(sanaa, sanaa) == 0.0
    assert 290 < distance_km(sanaa, aden) < 310


def test_distance_due_north_matches_offset() -> None:
    origin = Coordinate.parse(RESTAURANT_LAT, RESTAURANT_LNG)
    target = Coordinate.parse(*north_of(RESTAURANT_LAT, RESTAURANT_LNG, 5.0))

    assert distance_km(origin, target) == pytest.approx(5.0, abs=1e-9)


def test_antipodal_points_do_not_overflow() -> None:
    assert haversine_km(0.0, 0.0, 0.0, 180.0) == pytest.approx(math.pi * EARTH_RADIUS_KM)


@pytest.mark.parametrize(
    "lat,lng",
    [(91, 0), (-90.5, 0), (0, 180.1), (0, -181), ("abc", 10), (None, 10), (float("nan"), 0)],
)
def test_coordinate_parse_rejects_invalid_values(lat, lng) -> None:
    with pytest.raises(InvalidInput):
        Coordinate.parse(lat, lng)


def test_coordinate_parse_accepts_numeric_strings() -> None:
    point = Coordinate.parse("15.5", "44.2")

    assert point.latitude == 15.5
    assert point.longitude == 44.2
