from __future__ import annotations

from typing import List, Optional, Sequence

from predpreyshelter.geometry import Coordinates, distance, in_range
from predpreyshelter.species import Species, traits_for

DEFAULT_SHELTER_CAPACITY = 5


class Shelter:
    """
    A burrow or den bound to one grid cell.

    Only animals of `species` use it and at most `capacity` of them are inside
    at once. `nearest` lists the cell ids of the other shelters of the same
    species within `range`, closest first; a fleeing animal that finds this
    shelter full moves on to the head of that list.
    """

    def __init__(
        self,
        cell_id: int,
        species: Species,
        coordinates: Coordinates,
        capacity: int = DEFAULT_SHELTER_CAPACITY,
    ):
        self.cell_id = cell_id
        self.species = species
        self.coordinates = coordinates
        self.capacity = capacity
        self.range = traits_for(species).shelter_range
        self.nearest: List[int] = []
        self.members: List[int] = []

    def __repr__(self) -> str:
        return (
            f"Shelter(cell_id={self.cell_id}, species={self.species.value}, "
            f"members={len(self.members)}/{self.capacity})"
        )

    def has_room(self) -> bool:
        return len(self.members) < self.capacity

    def admit(self, animal_id: int) -> bool:
        if not self.has_room() or animal_id in self.members:
            return False
        self.members.append(animal_id)
        return True

    def release(self, animal_id: int) -> bool:
        if animal_id in self.members:
            self.members.remove(animal_id)
            return True
        return False

    def link_nearest(self, shelters: Sequence["Shelter"]) -> None:
        in_reach = [
            other for other in shelters
            if other is not self and in_range(self.coordinates, other.coordinates, self.range)
        ]
        # sorted() is stable, equal distances keep the input order
        in_reach = sorted(in_reach, key=lambda other: distance(self.coordinates, other.coordinates))
        self.nearest = [other.cell_id for other in in_reach]

    @property
    def fallback(self) -> Optional[int]:
        return self.nearest[0] if self.nearest else None


def link_shelters(shelters: Sequence[Shelter]) -> None:
    for shelter in shelters:
        shelter.link_nearest(shelters)
