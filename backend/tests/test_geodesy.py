import random
from math import pi

import pytest

from geohistory.models.game import Coordinates
from geohistory.services.geodesy import EARTH_RADIUS_KM, destination_point, haversine_distance

PARIS = Coordinates(lat=48.8566, lng=2.3522)
LONDON = Coordinates(lat=51.5074, lng=-0.1278)


def random_point(rng):
    return Coordinates(lat=rng.uniform(-90, 90), lng=rng.uniform(-180, 180))


def test_known_distance():
    assert haversine_distance(PARIS, LONDON) == pytest.approx(343.5, abs=1.0)


def test_one_degree_of_latitude():
    a = Coordinates(lat=0, lng=0)
    b = Coordinates(lat=1, lng=0)
    assert haversine_distance(a, b) == pytest.approx(2 * pi * EARTH_RADIUS_KM / 360)


def test_antipodal_points_are_half_the_circumference_apart():
    a = Coordinates(lat=0, lng=0)
    b = Coordinates(lat=0, lng=180)
    assert haversine_distance(a, b) == pytest.approx(pi * EARTH_RADIUS_KM)


def test_distance_is_symmetric_non_negative_and_zero_on_self():
    rng = random.Random(42)
    for _ in range(500):
        a, b = random_point(rng), random_point(rng)
        assert haversine_distance(a, b) >= 0
        assert haversine_distance(a, b) == pytest.approx(haversine_distance(b, a))
        assert haversine_distance(a, a) == pytest.approx(0, abs=1e-9)


def test_destination_point_inverts_distance():
    rng = random.Random(7)
    for _ in range(1000):
        origin = random_point(rng)
        bearing = rng.random() * 2 * pi
        distance = rng.uniform(0, 10000)
        destination = destination_point(origin, bearing, distance)
        assert haversine_distance(origin, destination) == pytest.approx(distance, abs=1.0)


def test_destination_point_due_north():
    destination = destination_point(Coordinates(lat=0, lng=10), 0.0, 2 * pi * EARTH_RADIUS_KM / 360)
    assert destination.lat == pytest.approx(1.0)
    assert destination.lng == pytest.approx(10.0)


def test_destination_point_wraps_across_antimeridian():
    destination = destination_point(Coordinates(lat=0, lng=179.5), pi / 2, 200)
    assert -180 <= destination.lng <= 180
    assert destination.lng < 0
    assert haversine_distance(Coordinates(lat=0, lng=179.5), destination) == pytest.approx(200, abs=1e-3)


def test_zero_distance_stays_put():
    destination = destination_point(PARIS, 1.0, 0)
    assert destination.lat == pytest.approx(PARIS.lat)
    assert destination.lng == pytest.approx(PARIS.lng)
