import pytest

from predpreyshelter.errors import ConfigurationError, InvariantViolation
from predpreyshelter.geometry import in_range
from predpreyshelter.grid import Grid

OPPOSITE = {"top": "bottom", "bottom": "top", "left": "right", "right": "left"}


def test_neighbor_links_are_symmetric():
    grid = Grid(6)

    for cell in grid:
        for side, back in OPPOSITE.items():
            neighbor_id = getattr(cell, side)
            if neighbor_id is not None:
                assert getattr(grid.cell(neighbor_id), back) == cell.cell_id


def test_border_cells_have_no_outside_neighbors():
    grid = Grid(5)
    corner = grid.cell(1)

    assert corner.top is None and corner.left is None
    assert corner.right == 2 and corner.bottom == 6
    assert [c.cell_id for c in grid.neighbors(grid.cell(25))] == [20, 24]


@pytest.mark.parametrize("origin_id, vision", [(25, 3), (1, 3), (7, 2), (49, 4)])
def test_vision_scan_covers_disk_once(origin_id, vision):
    grid = Grid(7)
    origin = grid.cell(origin_id)

    seen = [c.cell_id for c in grid.cells_in_vision_range(origin, vision)]
    expected = {
        c.cell_id for c in grid
        if c is not origin and in_range(c.coordinates, origin.coordinates, vision)
    }

    assert len(seen) == len(set(seen))
    assert set(seen) == expected


def test_placements_and_grass_quantity():
    grid = Grid(5, grass_ids=[1, 2], thick_vegetation_ids=[3], shelter_ids=[4])

    assert grid.cell(1).grass.quantity == 3
    assert grid.cell(3).thick_vegetation.quantity == 7
    assert grid.cell(4).shelter_id == 4
    assert grid.grass_quantity() == 13


def test_shelter_cell_is_never_available():
    grid = Grid(5, shelter_ids=[7])
    cell = grid.cell(7)

    assert not grid.is_available(cell)
    assert not grid.is_available_for_spread(cell)
    with pytest.raises(InvariantViolation):
        grid.place_animal(cell, 1)
    with pytest.raises(InvariantViolation):
        grid.place_grass(cell)


def test_occupied_cell_rejects_second_animal():
    grid = Grid(5)
    cell = grid.cell(8)
    grid.place_animal(cell, 1)

    with pytest.raises(InvariantViolation):
        grid.place_animal(cell, 2)
    grid.clear_animal(cell, 2)
    assert cell.occupant == 1
    grid.clear_animal(cell, 1)
    assert grid.is_available(cell)


@pytest.mark.parametrize(
    "size, grass, thick, shelters",
    [
        (4, [], [], []),
        (5, list(range(1, 26)), [], [1]),
        (5, [26], [], []),
        (5, [0], [], []),
        (5, [3], [3], []),
        (5, [], [2], [2]),
    ],
)
def test_invalid_placements_raise(size, grass, thick, shelters):
    with pytest.raises(ConfigurationError):
        Grid(size, grass_ids=grass, thick_vegetation_ids=thick, shelter_ids=shelters)


def test_bind_shelter_to_other_cell_raises():
    grid = Grid(5)
    with pytest.raises(InvariantViolation):
        grid.bind_shelter(grid.cell(3), 4)


def test_traverse_is_row_major():
    grid = Grid(5)
    visited = []
    grid.traverse(lambda cell: visited.append(cell.cell_id))
    assert visited == list(range(1, 26))
