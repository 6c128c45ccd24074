"""Mini README: Tests for the great-circle helpers.

Covers symmetry of distances, reciprocal bearings, destination projection
and the guard against bearings between coincident points.
"""

from __future__ import annotations

import pytest

from flightplanner.geo import (
    Coordinate,
    DegenerateGeometry,
    bearing_deg,
    destination_point,
    distance_nm,
    midpoint,
)

SYDNEY = Coordinate(-33.9461, 151.1772)
BRISBANE = Coordinate(-27.3842, 153.1175)


def test_distance_is_symmetric_and_zero_on_itself() -> None:
    """Distance must not depend on direction and vanish for a single point."""

    assert distance_nm(SYDNEY, BRISBANE) == pytest.approx(distance_nm(BRISBANE, SYDNEY))
    assert distance_nm(SYDNEY, SYDNEY) == 0.0


def test_one_degree_of_latitude_is_sixty_miles() -> None:
    """A degree along a meridian is close to sixty nautical miles."""

    assert distance_nm(Coordinate(-34.0, 151.0), Coordinate(-35.0, 151.0)) == pytest.approx(60.04, abs=0.01)


def test_sydney_to_brisbane_distance() -> None:
    """Known city pair sanity check."""

    assert distance_nm(SYDNEY, BRISBANE) == pytest.approx(406.0, abs=5.0)


@pytest.mark.parametrize(
    "a,b",
    [
        (SYDNEY, Coordinate(-33.5, 151.5)),
        (Coordinate(0.0, 0.0), Coordinate(0.0, 5.0)),
        (Coordinate(10.0, 179.5), Coordinate(10.5, -179.5)),
    ],
)
def test_reciprocal_bearings_differ_by_180(a: Coordinate, b: Coordinate) -> None:
    """Outbound and return bearings are reciprocal on short legs."""

    difference = (bearing_deg(b, a) - bearing_deg(a, b)) % 360.0
    assert difference == pytest.approx(180.0, abs=0.5)


def test_cardinal_bearings() -> None:
    """Due north and due east along the equator."""

    origin = Coordinate(0.0, 0.0)
    assert bearing_deg(origin, Coordinate(1.0, 0.0)) == pytest.approx(0.0)
    assert bearing_deg(origin, Coordinate(0.0, 1.0)) == pytest.approx(90.0)
    assert 0.0 <= bearing_deg(origin, Coordinate(-1.0, -0.001)) < 360.0


def test_bearing_between_coincident_points_is_degenerate() -> None:
    """Callers get a typed error instead of an arbitrary heading."""

    with pytest.raises(DegenerateGeometry):
        bearing_deg(SYDNEY, Coordinate(SYDNEY.latitude, SYDNEY.longitude))


def test_destination_point_round_trips_distance_and_bearing() -> None:
    """Projecting along a bearing lands the requested distance away."""

    heading = bearing_deg(SYDNEY, BRISBANE)
    projected = destination_point(SYDNEY, heading, 100.0)
    assert distance_nm(SYDNEY, projected) == pytest.approx(100.0, abs=1e-6)
    assert bearing_deg(SYDNEY, projected) == pytest.approx(heading, abs=1e-6)


def test_midpoint_is_equidistant() -> None:
    """The midpoint splits the great circle in half."""

    middle = midpoint(SYDNEY, BRISBANE)
    assert distance_nm(SYDNEY, middle) == pytest.approx(distance_nm(middle, BRISBANE), abs=1e-6)
    assert midpoint(SYDNEY, SYDNEY) == SYDNEY


def test_coordinate_validation_and_normalisation() -> None:
    """Latitude is range checked and longitude wraps into (-180, 180]."""

    with pytest.raises(ValueError):
        Coordinate(91.0, 0.0)
    with pytest.raises(ValueError):
        Coordinate(float("nan"), 0.0)
    assert Coordinate(0.0, 190.0).longitude == pytest.approx(-170.0)
    assert Coordinate(0.0, -180.0).longitude == 180.0
