import pytest

from predpreyshelter.geometry import Coordinates, Direction, direction_to, distance, in_range, reflect


@pytest.mark.parametrize(
    "cell_id, expected",
    [(1, (1, 1)), (5, (5, 1)), (6, (1, 2)), (13, (3, 3)), (25, (5, 5))],
)
def test_from_cell_id_is_row_major_and_one_based(cell_id, expected):
    coords = Coordinates.from_cell_id(5, cell_id)

    assert coords == expected
    assert coords.to_cell_id(5) == cell_id


@pytest.mark.parametrize(
    "source, target, expected",
    [
        ((3, 3), (3, 1), Direction.TOP),
        ((3, 3), (3, 5), Direction.BOTTOM),
        ((5, 5), (1, 4), Direction.LEFT),
        ((1, 1), (5, 2), Direction.RIGHT),
        ((1, 1), (3, 2), Direction.BOTTOM_RIGHT),  # ratio exactly 0.5
        ((2, 4), (4, 2), Direction.TOP_RIGHT),
        ((4, 2), (2, 4), Direction.BOTTOM_LEFT),
        ((4, 4), (2, 3), Direction.TOP_LEFT),
    ],
)
def test_direction_to(source, target, expected):
    assert direction_to(Coordinates(*source), Coordinates(*target)) is expected


def test_direction_to_same_point_is_none():
    assert direction_to(Coordinates(2, 2), Coordinates(2, 2)) is None


def test_reflect_mirrors_through_pivot():
    assert reflect(Coordinates(3, 3), Coordinates(4, 5)) == Coordinates(2, 1)
    assert reflect(Coordinates(1, 1), Coordinates(2, 1)) == Coordinates(0, 1)


def test_in_range_is_inclusive_circle():
    assert in_range(Coordinates(1, 1), Coordinates(3, 3), 3)
    assert in_range(Coordinates(1, 1), Coordinates(4, 1), 3)
    assert not in_range(Coordinates(1, 1), Coordinates(4, 2), 3)
    assert distance(Coordinates(1, 1), Coordinates(4, 5)) == pytest.approx(5.0)
