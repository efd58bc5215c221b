"""
Grid of cells wired into a four-neighbor mesh.

Cells are addressed by their 1-based row-major id. Each cell stores the ids of
its neighbors (or None at the border), the id of the animal standing on it and,
for shelter cells, its own id in `shelter_id`. Animals and shelters live in the
world's arenas; the grid only keeps ids.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, Iterator, List, Optional

from predpreyshelter.errors import ConfigurationError, InvariantViolation
from predpreyshelter.geometry import Coordinates, in_range
from predpreyshelter.vegetation import Grass, ThickVegetation, Vegetation

MIN_GRID_SIZE = 5


@dataclass(eq=False)
class Cell:
    cell_id: int
    coordinates: Coordinates
    vegetation: Optional[Vegetation] = None
    shelter_id: Optional[int] = None
    occupant: Optional[int] = None
    top: Optional[int] = None
    right: Optional[int] = None
    bottom: Optional[int] = None
    left: Optional[int] = None

    @property
    def grass(self) -> Optional[Grass]:
        return self.vegetation if isinstance(self.vegetation, Grass) else None

    @property
    def thick_vegetation(self) -> Optional[ThickVegetation]:
        return self.vegetation if isinstance(self.vegetation, ThickVegetation) else None

    @property
    def vegetation_quantity(self) -> int:
        return self.vegetation.quantity if self.vegetation is not None else 0

    def neighbor_ids(self) -> List[int]:
        return [cid for cid in (self.top, self.right, self.bottom, self.left) if cid is not None]


class Grid:
    def __init__(
        self,
        size: int,
        grass_ids: Iterable[int] = (),
        thick_vegetation_ids: Iterable[int] = (),
        shelter_ids: Iterable[int] = (),
    ):
        grass_ids = list(grass_ids)
        thick_vegetation_ids = list(thick_vegetation_ids)
        shelter_ids = list(shelter_ids)
        validate_placements(size, grass_ids, thick_vegetation_ids, shelter_ids)

        self.size = size
        self.cells: List[Cell] = [
            Cell(cell_id=cid, coordinates=Coordinates.from_cell_id(size, cid))
            for cid in range(1, size * size + 1)
        ]
        self._link_neighbors()

        for cid in grass_ids:
            self.place_grass(self.cell(cid))
        for cid in thick_vegetation_ids:
            self.place_thick_vegetation(self.cell(cid))
        for cid in shelter_ids:
            self.bind_shelter(self.cell(cid), cid)

    def _link_neighbors(self) -> None:
        for cell in self.cells:
            x, y = cell.coordinates
            if y > 1:
                cell.top = cell.cell_id - self.size
            if x < self.size:
                cell.right = cell.cell_id + 1
            if y < self.size:
                cell.bottom = cell.cell_id + self.size
            if x > 1:
                cell.left = cell.cell_id - 1

    def __iter__(self) -> Iterator[Cell]:
        return iter(self.cells)

    def __len__(self) -> int:
        return len(self.cells)

    def cell(self, cell_id: int) -> Cell:
        if not 1 <= cell_id <= len(self.cells):
            raise KeyError(f"No cell with id {cell_id} on a {self.size}x{self.size} grid")
        return self.cells[cell_id - 1]

    def _follow(self, cell_id: Optional[int]) -> Optional[Cell]:
        return None if cell_id is None else self.cells[cell_id - 1]

    def top_of(self, cell: Cell) -> Optional[Cell]:
        return self._follow(cell.top)

    def right_of(self, cell: Cell) -> Optional[Cell]:
        return self._follow(cell.right)

    def bottom_of(self, cell: Cell) -> Optional[Cell]:
        return self._follow(cell.bottom)

    def left_of(self, cell: Cell) -> Optional[Cell]:
        return self._follow(cell.left)

    def neighbors(self, cell: Cell) -> List[Cell]:
        """Present neighbors in the order top, right, bottom, left."""
        return [self.cells[cid - 1] for cid in cell.neighbor_ids()]

    def cells_in_vision_range(self, origin: Cell, vision_range: int) -> List[Cell]:
        """
        Cells within the Euclidean `vision_range` of `origin`, origin excluded.

        Walks the row through `origin` left then right, the column through
        `origin` up then down, and the column through every cell reached on the
        row. Every walk stops at the first cell outside the disk, so each cell
        is visited once.
        """
        center = origin.coordinates
        row = self._walk(origin, "left", center, vision_range) + self._walk(origin, "right", center, vision_range)
        cells = list(row)
        for cell in [origin] + row:
            cells.extend(self._walk(cell, "top", center, vision_range))
            cells.extend(self._walk(cell, "bottom", center, vision_range))
        return cells

    def _walk(self, start: Cell, side: str, center: Coordinates, vision_range: int) -> List[Cell]:
        walked = []
        current = self._follow(getattr(start, side))
        while current is not None and in_range(current.coordinates, center, vision_range):
            walked.append(current)
            current = self._follow(getattr(current, side))
        return walked

    @staticmethod
    def is_available(cell: Cell) -> bool:
        return cell.shelter_id is None and cell.occupant is None

    @staticmethod
    def is_available_for_spread(cell: Cell) -> bool:
        return cell.shelter_id is None and cell.vegetation is None

    def place_grass(self, cell: Cell, quantity: Optional[int] = None) -> Grass:
        if cell.vegetation is not None or cell.shelter_id is not None:
            raise InvariantViolation(f"Cannot grow grass on occupied cell {cell.cell_id}")
        cell.vegetation = Grass() if quantity is None else Grass(quantity)
        return cell.vegetation

    def place_thick_vegetation(self, cell: Cell, quantity: Optional[int] = None) -> ThickVegetation:
        if cell.vegetation is not None or cell.shelter_id is not None:
            raise InvariantViolation(f"Cannot grow thick vegetation on occupied cell {cell.cell_id}")
        cell.vegetation = ThickVegetation() if quantity is None else ThickVegetation(quantity)
        return cell.vegetation

    @staticmethod
    def replace_vegetation(cell: Cell, vegetation: Vegetation) -> None:
        if cell.vegetation is None:
            raise InvariantViolation(f"Cell {cell.cell_id} has no vegetation to replace")
        cell.vegetation = vegetation

    @staticmethod
    def bind_shelter(cell: Cell, shelter_cell_id: int) -> None:
        if shelter_cell_id != cell.cell_id:
            raise InvariantViolation(f"Shelter for cell {shelter_cell_id} cannot be bound to cell {cell.cell_id}")
        if cell.vegetation is not None or cell.shelter_id is not None:
            raise InvariantViolation(f"Cell {cell.cell_id} already holds vegetation or a shelter")
        cell.shelter_id = shelter_cell_id

    @staticmethod
    def place_animal(cell: Cell, animal_id: int) -> None:
        if cell.occupant is not None or cell.shelter_id is not None:
            raise InvariantViolation(f"Cell {cell.cell_id} cannot take animal #{animal_id}")
        cell.occupant = animal_id

    @staticmethod
    def clear_animal(cell: Cell, animal_id: int) -> None:
        if cell.occupant == animal_id:
            cell.occupant = None

    def traverse(self, callback: Callable[[Cell], None]) -> None:
        """Row-major read-only traversal."""
        for cell in self.cells:
            callback(cell)

    def grass_quantity(self) -> int:
        total = 0

        def _add(cell: Cell) -> None:
            nonlocal total
            total += cell.vegetation_quantity

        self.traverse(_add)
        return total


def validate_placements(
    size: int,
    grass_ids: List[int],
    thick_vegetation_ids: List[int],
    shelter_ids: List[int],
) -> None:
    if size < MIN_GRID_SIZE:
        raise ConfigurationError(f"Grid size must be at least {MIN_GRID_SIZE}, got {size}")
    placed = len(grass_ids) + len(thick_vegetation_ids) + len(shelter_ids)
    if placed > size * size:
        raise ConfigurationError(f"{placed} placed items do not fit on a {size}x{size} grid")
    seen = set()
    for cid in [*grass_ids, *thick_vegetation_ids, *shelter_ids]:
        if not 1 <= cid <= size * size:
            raise ConfigurationError(f"Cell id {cid} is outside the grid (1..{size * size})")
        if cid in seen:
            raise ConfigurationError(f"Cell id {cid} is used by more than one placement")
        seen.add(cid)
