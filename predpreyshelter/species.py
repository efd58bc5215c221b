"""
Species table. Both species share one behavior engine; everything that
differs between rabbits (prey) and foxes (predators) is listed here.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict


class Species(Enum):
    PREY = "prey"
    PREDATOR = "predator"


class Sex(Enum):
    FEMALE = "female"
    MALE = "male"


class Age(Enum):
    CHILD = "child"
    ADULT = "adult"
    SENIOR = "senior"

    def next(self):
        """The following age tier, or None for a senior."""
        if self is Age.CHILD:
            return Age.ADULT
        if self is Age.ADULT:
            return Age.SENIOR
        return None


@dataclass(frozen=True)
class SpeciesTraits:
    species: Species
    name: str
    max_satiety: int
    initial_satiety: int
    vision_range: int
    steps_before_satiety_decrease: int
    steps_before_grow: int
    # caller needs satiety / max_satiety >= this to try to mate
    reproduction_threshold: float
    # the female of a pair needs satiety / max_satiety >= this
    female_satiety_floor: float
    reproduction_cost: int
    # herd when sated: ratio >= herd_ratio (inclusive) or ratio > herd_ratio
    herd_ratio: float
    herd_ratio_inclusive: bool
    # herd instead of wandering when no food is visible
    wander_herd_ratio: float
    shelter_range: int
    flees_from_predators: bool
    hunts_prey: bool
    predation_gain: Dict[Age, int] = field(default_factory=dict)
    decomposition_delay: int = 20

    def is_sated(self, satiety: int) -> bool:
        ratio = satiety / self.max_satiety
        if self.herd_ratio_inclusive:
            return ratio >= self.herd_ratio
        return ratio > self.herd_ratio


PREY_TRAITS = SpeciesTraits(
    species=Species.PREY,
    name="rabbit",
    max_satiety=10,
    initial_satiety=5,
    vision_range=3,
    steps_before_satiety_decrease=8,
    steps_before_grow=30,
    reproduction_threshold=0.5,
    female_satiety_floor=0.5,
    reproduction_cost=10 // 3,
    herd_ratio=1.0,
    herd_ratio_inclusive=True,
    wander_herd_ratio=0.6,
    shelter_range=3,
    flees_from_predators=True,
    hunts_prey=False,
)

PREDATOR_TRAITS = SpeciesTraits(
    species=Species.PREDATOR,
    name="fox",
    max_satiety=16,
    initial_satiety=8,
    vision_range=3,
    steps_before_satiety_decrease=14,
    steps_before_grow=50,
    reproduction_threshold=0.8,
    female_satiety_floor=0.5,
    reproduction_cost=int(16 / 1.5),
    herd_ratio=0.7,
    herd_ratio_inclusive=False,
    wander_herd_ratio=0.7,
    shelter_range=5,
    flees_from_predators=False,
    hunts_prey=True,
    predation_gain={Age.CHILD: 4, Age.ADULT: 8, Age.SENIOR: 12},
)

SPECIES_TRAITS: Dict[Species, SpeciesTraits] = {
    Species.PREY: PREY_TRAITS,
    Species.PREDATOR: PREDATOR_TRAITS,
}


def traits_for(species: Species) -> SpeciesTraits:
    return SPECIES_TRAITS[species]
