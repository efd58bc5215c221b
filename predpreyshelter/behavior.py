"""
Animal decision policy.

One engine drives both species. The species table decides the two places
where they differ: prey look out for predators and run for their shelter,
predators hunt prey on neighboring cells where prey graze on vegetation.

Turn order for one animal:

1. prey only: a live predator in sight -> run to the shelter
2. sheltered -> leave the shelter
3. not a child and fed enough -> try to mate (a birth ends the turn)
4. sated -> join the nearest visible adult of the own species
5. feed (graze / bite), otherwise move towards food or wander

After the decision the animal ages and gets hungrier.
"""
from __future__ import annotations

from enum import Enum
from typing import Callable, List, Optional

from predpreyshelter.animal import Animal
from predpreyshelter.events import AnimalBorn, AnimalEaten, Event
from predpreyshelter.geometry import Coordinates, Direction, direction_to, distance, reflect
from predpreyshelter.grid import Cell
from predpreyshelter.shelter import Shelter
from predpreyshelter.species import Age, Sex, Species
from predpreyshelter.vegetation import graze_cell, has_food
from predpreyshelter.world import World


class AnimalState(Enum):
    SHELTERED = "sheltered"
    FLEEING = "fleeing"
    ACTING = "acting"
    DECOMPOSING = "decomposing"
    REMOVED = "removed"


def animal_state(world: World, animal: Animal) -> AnimalState:
    if animal.is_removed:
        return AnimalState.REMOVED
    if not animal.alive:
        return AnimalState.DECOMPOSING
    if world.is_sheltered(animal):
        return AnimalState.SHELTERED
    if animal.flees:
        return AnimalState.FLEEING
    return AnimalState.ACTING


class BehaviorEngine:
    def __init__(self, world: World):
        self.world = world
        self.grid = world.grid

    # ------------------------------------------------------------------
    # turn
    # ------------------------------------------------------------------

    def step(self, animal: Animal) -> List[Event]:
        """Plays one turn for a live animal and returns the births and kills it caused."""
        events: List[Event] = []
        traits = animal.traits

        if traits.flees_from_predators:
            animal.flees = self.is_in_danger(animal)

        if animal.flees:
            self.run_to_shelter(animal)
        elif self.world.is_sheltered(animal):
            self.leave_cell(animal)
        else:
            child = None if animal.is_child else self.try_to_reproduce(animal)
            if child is not None:
                events.append(
                    AnimalBorn(
                        animal_id=child.animal_id,
                        species=child.species.value,
                        parent_id=animal.animal_id,
                        position=self.world.cell_of(child).coordinates,
                    )
                )
            elif traits.is_sated(animal.satiety):
                self.search_for_own_kind(animal)
            elif traits.hunts_prey:
                if not self.try_to_hunt(animal, events):
                    self.move_towards_prey(animal, events)
            elif not self.try_to_graze(animal):
                self.move_towards_food(animal)

        animal.live_one_step()
        return events

    # ------------------------------------------------------------------
    # perception
    # ------------------------------------------------------------------

    def visible_cells(self, animal: Animal) -> List[Cell]:
        current = self.world.cell_of(animal)
        if current is None:
            return []
        return self.grid.cells_in_vision_range(current, animal.vision_range)

    def nearest_visible(self, animal: Animal, condition: Callable[[Cell], bool]) -> Optional[Cell]:
        """Closest visible cell meeting `condition`; the first one scanned wins ties."""
        current = self.world.cell_of(animal)
        if current is None:
            return None
        best, best_distance = None, None
        for cell in self.visible_cells(animal):
            if not condition(cell):
                continue
            d = distance(current.coordinates, cell.coordinates)
            if best_distance is None or d < best_distance:
                best, best_distance = cell, d
        return best

    def _occupant_matches(self, cell: Cell, species: Species) -> Optional[Animal]:
        occupant = self.world.animal_at(cell)
        if occupant is None or occupant.species is not species or not occupant.alive:
            return None
        return occupant

    def is_in_danger(self, animal: Animal) -> bool:
        return any(
            self._occupant_matches(cell, Species.PREDATOR) is not None
            for cell in self.visible_cells(animal)
        )

    # ------------------------------------------------------------------
    # movement primitives
    # ------------------------------------------------------------------

    def move_to_cell(self, animal: Animal, target: Optional[Cell]) -> bool:
        current = self.world.cell_of(animal)
        if current is None or target is None or not self.grid.is_available(target):
            return False
        self.grid.clear_animal(current, animal.animal_id)
        if current.shelter_id is not None:
            self.world.shelters[current.shelter_id].release(animal.animal_id)
        self.grid.place_animal(target, animal.animal_id)
        animal.cell_id = target.cell_id
        return True

    def step_by_difference(self, animal: Animal, source: Coordinates, target: Coordinates) -> bool:
        """
        One step along the vector source -> target: the major axis first, then
        top/bottom (horizontal vector) or left/right (vertical vector).
        """
        current = self.world.cell_of(animal)
        if current is None or min(source) <= 0 or min(target) <= 0:
            return False

        dx = target.x - source.x
        dy = target.y - source.y
        if abs(dx) > abs(dy):
            primary = self.grid.right_of(current) if dx > 0 else self.grid.left_of(current)
            candidates = [primary, self.grid.top_of(current), self.grid.bottom_of(current)]
        else:
            primary = self.grid.bottom_of(current) if dy > 0 else self.grid.top_of(current)
            candidates = [primary, self.grid.left_of(current), self.grid.right_of(current)]

        for candidate in candidates:
            if self.move_to_cell(animal, candidate):
                return True
        return False

    def move_towards(self, animal: Animal, target: Optional[Cell]) -> bool:
        current = self.world.cell_of(animal)
        if current is None or target is None:
            return False
        return self.step_by_difference(animal, current.coordinates, target.coordinates)

    def move_in_direction(self, animal: Animal, direction: Direction) -> bool:
        current = self.world.cell_of(animal)
        if current is None:
            return False
        if direction in (Direction.TOP, Direction.TOP_RIGHT, Direction.TOP_LEFT):
            target = self.grid.top_of(current)
        elif direction in (Direction.BOTTOM, Direction.BOTTOM_RIGHT, Direction.BOTTOM_LEFT):
            target = self.grid.bottom_of(current)
        elif direction is Direction.RIGHT:
            target = self.grid.right_of(current)
        else:
            target = self.grid.left_of(current)
        return self.move_towards(animal, target)

    def leave_cell(self, animal: Animal) -> bool:
        """Tries the top, right, bottom and left neighbor; the first free one wins."""
        current = self.world.cell_of(animal)
        if current is None:
            return False
        for target in (
            self.grid.top_of(current),
            self.grid.right_of(current),
            self.grid.bottom_of(current),
            self.grid.left_of(current),
        ):
            if self.move_to_cell(animal, target):
                return True
        return False

    def move_towards_shelter(self, animal: Animal) -> bool:
        shelter = self.world.shelter_of(animal)
        current = self.world.cell_of(animal)
        if shelter is None or current is None:
            return False
        start = current.coordinates
        if self.step_by_difference(animal, start, shelter.coordinates):
            animal.moving_direction = direction_to(start, shelter.coordinates)
            return True
        return False

    def move_away_from_shelter(self, animal: Animal) -> bool:
        shelter = self.world.shelter_of(animal)
        current = self.world.cell_of(animal)
        if shelter is None or current is None:
            return False
        start = current.coordinates
        if self.step_by_difference(animal, start, reflect(start, shelter.coordinates)):
            animal.moving_direction = direction_to(start, self.world.cell_of(animal).coordinates)
            return True
        return False

    def move_to_next_cell(self, animal: Animal, target: Optional[Cell]) -> None:
        """
        Heads for `target` when there is one. Without a reachable target the
        animal keeps its last direction, then tries to walk away from its
        shelter, then towards it, and finally takes any free neighbor.
        """
        if self.move_towards(animal, target):
            animal.moving_direction = None
            return

        if animal.moving_direction is not None:
            if self.move_in_direction(animal, animal.moving_direction):
                return
            animal.moving_direction = None

        if self.move_away_from_shelter(animal):
            return
        if self.move_towards_shelter(animal):
            return
        self.leave_cell(animal)

    # ------------------------------------------------------------------
    # shelter
    # ------------------------------------------------------------------

    def run_to_shelter(self, animal: Animal) -> bool:
        """Returns True once the animal is inside a shelter."""
        if self.world.is_sheltered(animal):
            return True
        shelter = self.world.shelter_of(animal)
        current = self.world.cell_of(animal)
        if shelter is None or current is None:
            return False

        if shelter.cell_id in current.neighbor_ids():
            return self.enter_shelter(animal, shelter)
        self.step_by_difference(animal, current.coordinates, shelter.coordinates)
        return False

    def enter_shelter(self, animal: Animal, shelter: Shelter) -> bool:
        if shelter.species is not animal.species:
            return False
        if not shelter.admit(animal.animal_id):
            fallback = shelter.fallback
            if fallback is not None:
                animal.shelter_id = fallback
            return False
        current = self.world.cell_of(animal)
        self.grid.clear_animal(current, animal.animal_id)
        animal.cell_id = shelter.cell_id
        animal.shelter_id = shelter.cell_id
        animal.moving_direction = None
        return True

    # ------------------------------------------------------------------
    # reproduction
    # ------------------------------------------------------------------

    def try_to_reproduce(self, animal: Animal) -> Optional[Animal]:
        """
        Mates with the first adjacent live adult or senior of the other sex.
        The female needs enough satiety and a free neighbor cell for the child;
        she pays the species' reproduction cost.
        """
        traits = animal.traits
        current = self.world.cell_of(animal)
        if current is None or animal.is_child or animal.satiety_ratio < traits.reproduction_threshold:
            return None

        for cell in self.grid.neighbors(current):
            partner = self._occupant_matches(cell, animal.species)
            if partner is None or partner.sex is animal.sex or partner.is_child:
                continue

            female = animal if animal.sex is Sex.FEMALE else partner
            female_cell = self.world.cell_of(female)
            if female_cell is None or female.satiety_ratio < traits.female_satiety_floor:
                continue

            free_cells = [c for c in self.grid.neighbors(female_cell) if self.grid.is_available(c)]
            if not free_cells:
                continue

            child = self.world.create_animal(
                animal.species,
                self.world.random_sex(),
                age=Age.CHILD,
                cell_id=free_cells[0].cell_id,
                shelter_id=animal.shelter_id,
            )
            self.grid.place_animal(free_cells[0], child.animal_id)
            female.lose_satiety(traits.reproduction_cost)
            return child

        return None

    # ------------------------------------------------------------------
    # herding
    # ------------------------------------------------------------------

    def search_for_own_kind(self, animal: Animal) -> None:
        def _is_companion(cell: Cell) -> bool:
            other = self._occupant_matches(cell, animal.species)
            return other is not None and not other.is_child and cell.shelter_id is None

        self.move_to_next_cell(animal, self.nearest_visible(animal, _is_companion))

    # ------------------------------------------------------------------
    # prey feeding
    # ------------------------------------------------------------------

    def try_to_graze(self, animal: Animal) -> bool:
        current = self.world.cell_of(animal)
        if current is None or animal.satiety == animal.max_satiety:
            return False
        if graze_cell(self.grid, current):
            animal.gain_satiety(1)
            return True
        return False

    def move_towards_food(self, animal: Animal) -> None:
        target = self.nearest_visible(animal, lambda cell: self.grid.is_available(cell) and has_food(cell))
        if target is None and not animal.is_child and animal.satiety_ratio > animal.traits.wander_herd_ratio:
            self.search_for_own_kind(animal)
        else:
            self.move_to_next_cell(animal, target)

    # ------------------------------------------------------------------
    # predator feeding
    # ------------------------------------------------------------------

    def try_to_hunt(self, animal: Animal, events: List[Event]) -> bool:
        """Eats a live prey standing on a direct neighbor cell."""
        current = self.world.cell_of(animal)
        if current is None or animal.satiety == animal.max_satiety:
            return False

        for cell in self.grid.neighbors(current):
            prey = self._occupant_matches(cell, Species.PREY)
            if prey is None:
                continue
            self.grid.clear_animal(cell, prey.animal_id)
            prey.alive = False
            prey.cell_id = None
            animal.gain_satiety(animal.traits.predation_gain[prey.age])
            events.append(
                AnimalEaten(
                    animal_id=prey.animal_id,
                    predator_id=animal.animal_id,
                    position=cell.coordinates,
                    age=prey.age.value,
                )
            )
            return True
        return False

    def move_towards_prey(self, animal: Animal, events: List[Event]) -> None:
        def _has_prey(cell: Cell) -> bool:
            return cell.shelter_id is None and self._occupant_matches(cell, Species.PREY) is not None

        target = self.nearest_visible(animal, _has_prey)
        if target is None and not animal.is_child and animal.satiety_ratio > animal.traits.wander_herd_ratio:
            self.search_for_own_kind(animal)
            return
        self.move_to_next_cell(animal, target)
        self.try_to_hunt(animal, events)
