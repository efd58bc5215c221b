"""
Two-tier vegetation.

Grass (light tier) holds 1-4 units and thick vegetation holds 5-10 units.
Grass growing past 4 becomes thick vegetation seeded at 5, thick vegetation
grazed below 5 becomes grass seeded at 4. A fully grown thick patch seeds
grass on its free neighbor cells.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, List

from predpreyshelter.errors import InvariantViolation
from predpreyshelter.events import VegetationSpread

if TYPE_CHECKING:
    from predpreyshelter.grid import Cell, Grid


STEPS_BEFORE_REGROWTH = 10

GRASS_DEFAULT_QUANTITY = 3
GRASS_MAX_QUANTITY = 4
GRASS_SPREAD_QUANTITY = 1
GRASS_DEMOTED_QUANTITY = GRASS_MAX_QUANTITY

THICK_DEFAULT_QUANTITY = 7
THICK_MIN_QUANTITY = 5
THICK_MAX_QUANTITY = 10
THICK_PROMOTED_QUANTITY = THICK_MIN_QUANTITY


class Vegetation:
    tier = ""

    def __init__(self, quantity: int):
        self.quantity = quantity
        self.steps_after_regrowth = 0

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(quantity={self.quantity})"


class Grass(Vegetation):
    tier = "grass"

    def __init__(self, quantity: int = GRASS_DEFAULT_QUANTITY):
        if quantity > GRASS_MAX_QUANTITY or quantity < 0:
            raise InvariantViolation(f"Grass quantity must be in [0, {GRASS_MAX_QUANTITY}], got {quantity}")
        super().__init__(quantity)

    def eat(self) -> bool:
        if self.quantity > 0:
            self.quantity -= 1
            return True
        return False

    def regrow(self) -> bool:
        """Advances the regrowth timer; returns True when the grass outgrew its tier."""
        if self.steps_after_regrowth < STEPS_BEFORE_REGROWTH:
            self.steps_after_regrowth += 1
            return False
        self.quantity += 1
        self.steps_after_regrowth = 0
        return self.quantity > GRASS_MAX_QUANTITY


class ThickVegetation(Vegetation):
    tier = "thick"

    def __init__(self, quantity: int = THICK_DEFAULT_QUANTITY):
        if quantity < THICK_MIN_QUANTITY or quantity > THICK_MAX_QUANTITY:
            raise InvariantViolation(
                f"Thick vegetation quantity must be in [{THICK_MIN_QUANTITY}, {THICK_MAX_QUANTITY}], got {quantity}"
            )
        super().__init__(quantity)

    def eat(self) -> bool:
        """Takes one unit; returns True when the patch fell below its tier."""
        self.quantity -= 1
        return self.quantity < THICK_MIN_QUANTITY

    def regrow(self) -> bool:
        """Advances the regrowth timer; returns True when the patch is ready to spread."""
        if self.steps_after_regrowth < STEPS_BEFORE_REGROWTH:
            self.steps_after_regrowth += 1
        elif self.quantity < THICK_MAX_QUANTITY:
            self.quantity += 1
            self.steps_after_regrowth = 0
        elif self.quantity == THICK_MAX_QUANTITY and self.steps_after_regrowth == STEPS_BEFORE_REGROWTH:
            return True
        return False


def regrow_cell(grid: "Grid", cell: "Cell") -> List[VegetationSpread]:
    """Runs one regrowth tick for the vegetation on `cell`, if any."""
    vegetation = cell.vegetation
    if isinstance(vegetation, Grass):
        if vegetation.regrow():
            grid.replace_vegetation(cell, ThickVegetation(THICK_PROMOTED_QUANTITY))
        return []
    if isinstance(vegetation, ThickVegetation):
        if vegetation.regrow():
            return spread(grid, cell)
    return []


def spread(grid: "Grid", cell: "Cell") -> List[VegetationSpread]:
    events = []
    for neighbor in grid.neighbors(cell):
        if grid.is_available_for_spread(neighbor):
            grid.place_grass(neighbor, GRASS_SPREAD_QUANTITY)
            events.append(VegetationSpread(cell.coordinates, neighbor.coordinates))
    return events


def graze_cell(grid: "Grid", cell: "Cell") -> bool:
    """
    Eats one unit of whatever vegetation grows on `cell`. Returns False when
    there is nothing to eat (no vegetation, or bare grass).
    """
    vegetation = cell.vegetation
    if isinstance(vegetation, Grass):
        return vegetation.eat()
    if isinstance(vegetation, ThickVegetation):
        if vegetation.eat():
            grid.replace_vegetation(cell, Grass(GRASS_DEMOTED_QUANTITY))
        return True
    return False


def has_food(cell: "Cell") -> bool:
    return cell.vegetation is not None and cell.vegetation.quantity > 0
