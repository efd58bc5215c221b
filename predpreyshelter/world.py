"""
World bootstrap: validation, grid generation, shelters with their starting
rosters and the animal arena the rest of the engine works on.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence
import logging

import numpy as np

from predpreyshelter.animal import Animal
from predpreyshelter.errors import ConfigurationError
from predpreyshelter.grid import MIN_GRID_SIZE, Cell, Grid
from predpreyshelter.shelter import DEFAULT_SHELTER_CAPACITY, Shelter, link_shelters
from predpreyshelter.species import Age, Sex, Species

logger = logging.getLogger(__name__)

DEFAULT_ROSTER_SIZE = 3


@dataclass
class AnimalSpec:
    sex: Sex
    age: Age = Age.ADULT
    alive: bool = True
    satiety: Optional[int] = None


@dataclass
class ShelterSpec:
    cell_id: int
    capacity: int = DEFAULT_SHELTER_CAPACITY
    roster: List[AnimalSpec] = field(default_factory=list)


def default_roster(count: int = DEFAULT_ROSTER_SIZE) -> List[AnimalSpec]:
    """Adults alternating female, male, female, ..."""
    return [AnimalSpec(sex=Sex.FEMALE if i % 2 == 0 else Sex.MALE) for i in range(count)]


def default_shelters(
    cell_ids: Iterable[int],
    capacity: int = DEFAULT_SHELTER_CAPACITY,
    roster_size: int = DEFAULT_ROSTER_SIZE,
) -> List[ShelterSpec]:
    return [ShelterSpec(cell_id=cid, capacity=capacity, roster=default_roster(roster_size)) for cid in cell_ids]


@dataclass
class World:
    grid: Grid
    rng: np.random.Generator
    animals: Dict[int, Animal] = field(default_factory=dict)
    shelters: Dict[int, Shelter] = field(default_factory=dict)
    prey: List[int] = field(default_factory=list)
    predators: List[int] = field(default_factory=list)
    next_id: int = 1

    def registry(self, species: Species) -> List[int]:
        return self.prey if species is Species.PREY else self.predators

    def create_animal(
        self,
        species: Species,
        sex: Sex,
        age: Age = Age.ADULT,
        cell_id: Optional[int] = None,
        shelter_id: Optional[int] = None,
        satiety: Optional[int] = None,
        alive: bool = True,
    ) -> Animal:
        """Adds a new animal to the arena. Registries are the caller's business."""
        animal = Animal(
            animal_id=self.next_id,
            species=species,
            sex=sex,
            age=age,
            satiety=satiety,
            alive=alive,
            cell_id=cell_id,
            shelter_id=shelter_id,
        )
        self.animals[animal.animal_id] = animal
        self.next_id += 1
        return animal

    def random_sex(self) -> Sex:
        return Sex.FEMALE if self.rng.random() < 0.5 else Sex.MALE

    def cell_of(self, animal: Animal) -> Optional[Cell]:
        return None if animal.cell_id is None else self.grid.cell(animal.cell_id)

    def animal_at(self, cell: Cell) -> Optional[Animal]:
        return None if cell.occupant is None else self.animals[cell.occupant]

    def shelter_of(self, animal: Animal) -> Optional[Shelter]:
        return None if animal.shelter_id is None else self.shelters.get(animal.shelter_id)

    def is_sheltered(self, animal: Animal) -> bool:
        cell = self.cell_of(animal)
        return cell is not None and cell.shelter_id is not None

    def alive_count(self, species: Species) -> int:
        return sum(1 for aid in self.registry(species) if self.animals[aid].alive)


def random_cell_ids(
    rng: np.random.Generator, size: int, count: int, excluded: Iterable[int]
) -> List[int]:
    excluded = set(excluded)
    candidates = [cid for cid in range(1, size * size + 1) if cid not in excluded]
    if count > len(candidates):
        raise ConfigurationError(f"Cannot pick {count} free cells out of {len(candidates)}")
    if count == 0:
        return []
    picked = rng.choice(candidates, size=count, replace=False)
    return sorted(int(cid) for cid in picked)


def build_world(
    size: int,
    grass_amount: int = 0,
    thick_vegetation_amount: int = 0,
    prey_shelters: Sequence[ShelterSpec] = (),
    predator_shelters: Sequence[ShelterSpec] = (),
    rng: Optional[np.random.Generator] = None,
    grass_ids: Optional[Sequence[int]] = None,
    thick_vegetation_ids: Optional[Sequence[int]] = None,
) -> World:
    """
    Builds a ready-to-run world.

    Vegetation lands on `grass_ids` / `thick_vegetation_ids` when given,
    otherwise on cells drawn from `rng` that hold no shelter. Every shelter is
    created with its roster inside and linked to its nearest same-species
    shelters.
    """
    rng = rng if rng is not None else np.random.default_rng()
    if grass_ids is not None:
        grass_amount = len(grass_ids)
    if thick_vegetation_ids is not None:
        thick_vegetation_amount = len(thick_vegetation_ids)

    if size < MIN_GRID_SIZE:
        raise ConfigurationError(f"Grid size must be at least {MIN_GRID_SIZE}, got {size}")
    if grass_amount < 0 or thick_vegetation_amount < 0:
        raise ConfigurationError(
            f"Vegetation amounts must not be negative, got grass {grass_amount} and thick {thick_vegetation_amount}"
        )
    placed = grass_amount + thick_vegetation_amount + len(prey_shelters) + len(predator_shelters)
    if placed > size * size:
        raise ConfigurationError(
            f"grass ({grass_amount}) + thick vegetation ({thick_vegetation_amount}) + "
            f"shelters ({len(prey_shelters) + len(predator_shelters)}) exceed {size * size} cells"
        )
    for spec in [*prey_shelters, *predator_shelters]:
        if spec.capacity < 0:
            raise ConfigurationError(f"Shelter on cell {spec.cell_id} has a negative capacity")
        if len(spec.roster) > spec.capacity:
            raise ConfigurationError(
                f"Shelter on cell {spec.cell_id} holds {len(spec.roster)} animals but has capacity {spec.capacity}"
            )

    shelter_ids = [spec.cell_id for spec in [*prey_shelters, *predator_shelters]]
    if grass_ids is None:
        grass_ids = random_cell_ids(rng, size, grass_amount, shelter_ids)
    if thick_vegetation_ids is None:
        thick_vegetation_ids = random_cell_ids(rng, size, thick_vegetation_amount, [*shelter_ids, *grass_ids])

    grid = Grid(size, grass_ids, thick_vegetation_ids, shelter_ids)
    world = World(grid=grid, rng=rng)

    for species, specs in ((Species.PREY, prey_shelters), (Species.PREDATOR, predator_shelters)):
        built = []
        for spec in specs:
            cell = grid.cell(spec.cell_id)
            shelter = Shelter(spec.cell_id, species, cell.coordinates, spec.capacity)
            world.shelters[spec.cell_id] = shelter
            built.append(shelter)
            for member in spec.roster:
                animal = world.create_animal(
                    species,
                    member.sex,
                    age=member.age,
                    cell_id=cell.cell_id,
                    shelter_id=shelter.cell_id,
                    satiety=member.satiety,
                    alive=member.alive,
                )
                shelter.admit(animal.animal_id)
                world.registry(species).append(animal.animal_id)
        link_shelters(built)

    logger.debug(
        "Built %dx%d world: %d grass, %d thick vegetation, %d shelters, %d prey, %d predators",
        size, size, len(grass_ids), len(thick_vegetation_ids), len(world.shelters),
        len(world.prey), len(world.predators),
    )
    return world
