import pytest

from saferide.services.geospatial import coordinate_distance, distance, path_length


def test_distance_is_zero_for_coincident_points():
    assert distance(34.7, 137.7, 34.7, 137.7) == 0.0


def test_distance_is_symmetric():
    forward = distance(34.7, 137.7, 35.681, 139.767)
    backward = distance(35.681, 139.767, 34.7, 137.7)

    assert forward == pytest.approx(backward)
    assert forward > 200_000


def test_one_degree_of_latitude_matches_earth_radius():
    assert distance(0.0, 0.0, 1.0, 0.0) == pytest.approx(111_194.93, rel=1e-6)


def test_triangle_inequality_along_route():
    a, b, c = (34.70, 137.70), (34.71, 137.712), (34.72, 137.72)

    assert distance(*a, *b) + distance(*b, *c) >= distance(*a, *c)


def test_coordinate_distance_uses_lng_lat_order():
    assert coordinate_distance((137.7, 34.7), (137.72, 34.72)) == pytest.approx(
        distance(34.7, 137.7, 34.72, 137.72)
    )


def test_path_length_sums_segments_and_clamps_end():
    coordinates = [(137.70, 34.70), (137.71, 34.70), (137.71, 34.71)]
    first = coordinate_distance(coordinates[0], coordinates[1])
    second = coordinate_distance(coordinates[1], coordinates[2])

    assert path_length(coordinates) == pytest.approx(first + second)
    assert path_length(coordinates, 1) == pytest.approx(second)
    assert path_length(coordinates, 0, 99) == pytest.approx(first + second)
    assert path_length(coordinates, 2, 2) == 0.0
    assert path_length(coordinates, 2, 1) == 0.0
