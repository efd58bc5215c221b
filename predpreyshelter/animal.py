from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from predpreyshelter.geometry import Direction
from predpreyshelter.species import Age, Sex, Species, SpeciesTraits, traits_for


@dataclass(eq=False)
class Animal:
    """
    One animal in the world arena.

    `cell_id` is the grid cell the animal stands on; while sheltered it is the
    shelter's cell, and it becomes None once the animal was eaten or has
    decomposed. `shelter_id` is the cell id of the animal's nearest shelter.
    Timing constants default to the species table and can be overridden per
    animal.
    """

    animal_id: int
    species: Species
    sex: Sex
    age: Age = Age.ADULT
    satiety: Optional[int] = None
    alive: bool = True
    cell_id: Optional[int] = None
    shelter_id: Optional[int] = None
    max_satiety: Optional[int] = None
    vision_range: Optional[int] = None
    steps_before_satiety_decrease: Optional[int] = None
    steps_after_satiety_decrease: int = 0
    steps_before_grow: Optional[int] = None
    steps_after_grow: int = 0
    steps_after_death: int = 0
    flees: bool = False
    moving_direction: Optional[Direction] = None
    traits: SpeciesTraits = field(init=False, repr=False)

    def __post_init__(self):
        self.traits = traits_for(self.species)
        if self.max_satiety is None:
            self.max_satiety = self.traits.max_satiety
        if self.satiety is None:
            self.satiety = self.traits.initial_satiety
        if self.vision_range is None:
            self.vision_range = self.traits.vision_range
        if self.steps_before_satiety_decrease is None:
            self.steps_before_satiety_decrease = self.traits.steps_before_satiety_decrease
        if self.steps_before_grow is None:
            self.steps_before_grow = self.traits.steps_before_grow
        self.satiety = max(0, min(self.satiety, self.max_satiety))

    def __str__(self) -> str:
        state = "alive" if self.alive else "dead"
        return f"{self.traits.name} #{self.animal_id} ({self.sex.value}, {self.age.value}, {state})"

    @property
    def is_child(self) -> bool:
        return self.age is Age.CHILD

    @property
    def satiety_ratio(self) -> float:
        return self.satiety / self.max_satiety

    @property
    def is_removed(self) -> bool:
        return self.cell_id is None

    def gain_satiety(self, amount: int) -> None:
        self.satiety = min(self.satiety + amount, self.max_satiety)

    def lose_satiety(self, amount: int) -> None:
        self.satiety = max(self.satiety - amount, 0)

    def try_to_decrease_satiety(self) -> None:
        """
        Counts one step towards the next satiety decrease. When the interval
        has elapsed the satiety drops by one; an animal with nothing left to
        lose starves instead.
        """
        if self.steps_after_satiety_decrease == self.steps_before_satiety_decrease:
            if self.satiety == 0:
                self.alive = False
                return
            self.satiety -= 1
            self.steps_after_satiety_decrease = 0
        else:
            self.steps_after_satiety_decrease += 1

    def try_to_grow(self) -> None:
        """Counts one step towards the next age tier; a senior dies of old age."""
        if self.steps_after_grow == self.steps_before_grow:
            next_age = self.age.next()
            if next_age is None:
                self.alive = False
                return
            self.age = next_age
            self.steps_after_grow = 0
        else:
            self.steps_after_grow += 1

    def try_to_decompose(self) -> bool:
        """Returns True on the tick the corpse has to leave the world."""
        if self.steps_after_death == self.traits.decomposition_delay:
            return True
        self.steps_after_death += 1
        return False

    def live_one_step(self) -> None:
        self.try_to_decrease_satiety()
        if self.alive:
            self.try_to_grow()
