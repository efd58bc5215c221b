"""
Tick orchestration.

One call to `Simulation.step()` regrows the vegetation, lets every prey act,
then every predator, merges the newborns into the registries, drops the
removed animals and finally hands the tick's events to the listeners.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple
import logging

import numpy as np

from predpreyshelter.animal import Animal
from predpreyshelter.behavior import AnimalState, BehaviorEngine, animal_state
from predpreyshelter.events import (
    AnimalBorn,
    AnimalDecomposed,
    AnimalEaten,
    AnimalMoved,
    Event,
    EventListener,
)
from predpreyshelter.geometry import Coordinates
from predpreyshelter.species import Species
from predpreyshelter.vegetation import regrow_cell
from predpreyshelter.world import World

logger = logging.getLogger(__name__)


@dataclass
class TickReport:
    tick: int
    events: List[Event] = field(default_factory=list)
    births: int = 0
    deaths: int = 0
    eaten: int = 0
    decomposed: int = 0
    prey_count: int = 0
    predator_count: int = 0
    grass_quantity: int = 0


@dataclass(frozen=True)
class CellView:
    cell_id: int
    coordinates: Coordinates
    vegetation: Optional[str]
    vegetation_quantity: int
    shelter_species: Optional[str]
    shelter_members: int
    occupant_id: Optional[int]
    occupant_species: Optional[str]
    occupant_alive: bool
    occupant_age: Optional[str] = None


@dataclass(frozen=True)
class GridSnapshot:
    tick: int
    size: int
    cells: Tuple[CellView, ...]

    CHANNELS = ("vegetation", "prey", "predator", "shelter")

    def to_array(self) -> np.ndarray:
        """
        Channel stack of shape (4, size, size), indexed [channel, y - 1, x - 1]:
        0 vegetation quantity, 1 prey on the cell (1 alive, -1 corpse),
        2 predator on the cell (same encoding), 3 animals inside a shelter.
        """
        array = np.zeros((len(self.CHANNELS), self.size, self.size), dtype=np.float32)
        for view in self.cells:
            row, col = view.coordinates.y - 1, view.coordinates.x - 1
            array[0, row, col] = view.vegetation_quantity
            if view.occupant_species is not None:
                channel = 1 if view.occupant_species == Species.PREY.value else 2
                array[channel, row, col] = 1.0 if view.occupant_alive else -1.0
            if view.shelter_species is not None:
                array[3, row, col] = view.shelter_members
        return array


class Simulation:
    def __init__(self, world: World, listeners: Iterable[EventListener] = ()):
        self.world = world
        self.engine = BehaviorEngine(world)
        self.tick = 0
        self._listeners: List[EventListener] = list(listeners)

    # ------------------------------------------------------------------
    # listeners
    # ------------------------------------------------------------------

    def subscribe(self, listener: EventListener) -> EventListener:
        self._listeners.append(listener)
        return listener

    def unsubscribe(self, listener: EventListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _dispatch(self, events: List[Event]) -> None:
        for event in events:
            for listener in list(self._listeners):
                listener(event)

    # ------------------------------------------------------------------
    # tick
    # ------------------------------------------------------------------

    def step(self) -> TickReport:
        events: List[Event] = []
        report = TickReport(tick=self.tick + 1, events=events)

        self.world.grid.traverse(lambda cell: events.extend(regrow_cell(self.world.grid, cell)))

        prey_born, prey_decomposed = self._run_pass(Species.PREY, events, report)
        self._reconcile(Species.PREY, prey_born, prey_decomposed)

        predator_born, predator_decomposed = self._run_pass(Species.PREDATOR, events, report)
        eaten = [e.animal_id for e in events if isinstance(e, AnimalEaten)]
        self._reconcile(Species.PREDATOR, predator_born, predator_decomposed)
        self._reconcile(Species.PREY, [], eaten)

        self.tick += 1
        report.births = len(prey_born) + len(predator_born)
        report.eaten = len(eaten)
        report.deaths += len(eaten)
        report.decomposed = len(prey_decomposed) + len(predator_decomposed)
        report.prey_count = self.prey_count
        report.predator_count = self.predator_count
        report.grass_quantity = self.grass_quantity()

        logger.debug(
            "tick %d: prey=%d predators=%d births=%d deaths=%d eaten=%d",
            self.tick, report.prey_count, report.predator_count,
            report.births, report.deaths, report.eaten,
        )
        self._dispatch(events)
        return report

    def _run_pass(self, species: Species, events: List[Event], report: TickReport) -> Tuple[List[int], List[int]]:
        """Plays one turn for every registered animal of `species`; the registry is not touched."""
        born: List[int] = []
        decomposed: List[int] = []

        for animal_id in list(self.world.registry(species)):
            animal = self.world.animals[animal_id]
            if animal.is_removed:
                continue

            if not animal.alive:
                if animal.try_to_decompose():
                    events.append(self._detach(animal))
                    decomposed.append(animal_id)
                continue

            source = self.world.cell_of(animal)
            turn_events = self.engine.step(animal)
            events.extend(turn_events)
            born.extend(e.animal_id for e in turn_events if isinstance(e, AnimalBorn))

            target = self.world.cell_of(animal)
            if target is not None and target is not source:
                events.append(AnimalMoved(animal_id, species.value, source.coordinates, target.coordinates))
            if not animal.alive:
                report.deaths += 1

        return born, decomposed

    def _detach(self, animal: Animal) -> AnimalDecomposed:
        cell = self.world.cell_of(animal)
        self.world.grid.clear_animal(cell, animal.animal_id)
        if cell.shelter_id is not None:
            self.world.shelters[cell.shelter_id].release(animal.animal_id)
        animal.cell_id = None
        return AnimalDecomposed(animal.animal_id, animal.species.value, cell.coordinates)

    def _reconcile(self, species: Species, born: List[int], removed: List[int]) -> None:
        registry = self.world.registry(species)
        if removed:
            gone = set(removed)
            registry[:] = [aid for aid in registry if aid not in gone]
            for aid in gone:
                self.world.animals.pop(aid, None)
        registry.extend(born)

    # ------------------------------------------------------------------
    # queries
    # ------------------------------------------------------------------

    def alive_count(self, species: Species) -> int:
        return self.world.alive_count(species)

    @property
    def prey_count(self) -> int:
        return self.alive_count(Species.PREY)

    @property
    def predator_count(self) -> int:
        return self.alive_count(Species.PREDATOR)

    def grass_quantity(self) -> int:
        return self.world.grid.grass_quantity()

    def has_alive_animals(self) -> bool:
        return self.prey_count > 0 or self.predator_count > 0

    def state_of(self, animal_id: int) -> AnimalState:
        animal = self.world.animals.get(animal_id)
        if animal is None:
            return AnimalState.REMOVED
        return animal_state(self.world, animal)

    def snapshot(self) -> GridSnapshot:
        views = []
        for cell in self.world.grid:
            occupant = self.world.animal_at(cell)
            shelter = self.world.shelters.get(cell.shelter_id) if cell.shelter_id is not None else None
            views.append(
                CellView(
                    cell_id=cell.cell_id,
                    coordinates=cell.coordinates,
                    vegetation=cell.vegetation.tier if cell.vegetation is not None else None,
                    vegetation_quantity=cell.vegetation_quantity,
                    shelter_species=shelter.species.value if shelter is not None else None,
                    shelter_members=len(shelter.members) if shelter is not None else 0,
                    occupant_id=occupant.animal_id if occupant is not None else None,
                    occupant_species=occupant.species.value if occupant is not None else None,
                    occupant_alive=occupant.alive if occupant is not None else False,
                    occupant_age=occupant.age.value if occupant is not None else None,
                )
            )
        return GridSnapshot(tick=self.tick, size=self.world.grid.size, cells=tuple(views))
