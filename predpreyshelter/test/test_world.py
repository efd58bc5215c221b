import numpy as np
import pytest

from predpreyshelter.errors import ConfigurationError
from predpreyshelter.species import Sex, Species
from predpreyshelter.world import AnimalSpec, ShelterSpec, build_world, default_roster, default_shelters


def test_default_roster_alternates_sexes():
    assert [spec.sex for spec in default_roster(3)] == [Sex.FEMALE, Sex.MALE, Sex.FEMALE]


def test_random_vegetation_avoids_shelters():
    world = build_world(
        6,
        grass_amount=20,
        thick_vegetation_amount=10,
        prey_shelters=default_shelters([1, 2]),
        predator_shelters=default_shelters([36]),
        rng=np.random.default_rng(1),
    )

    vegetated = [c for c in world.grid if c.vegetation is not None]
    assert len(vegetated) == 30
    assert all(c.shelter_id is None for c in vegetated)
    assert len(world.prey) == 6
    assert len(world.predators) == 3


def test_animals_start_inside_their_shelter():
    world = build_world(6, prey_shelters=default_shelters([8]), rng=np.random.default_rng(1))

    for animal_id in world.prey:
        animal = world.animals[animal_id]
        assert animal.cell_id == 8 and animal.shelter_id == 8
        assert world.is_sheltered(animal)
    assert world.grid.cell(8).occupant is None
    assert world.shelters[8].members == world.prey


def test_shelters_link_within_their_species_only():
    world = build_world(
        7,
        prey_shelters=[ShelterSpec(1), ShelterSpec(3)],
        predator_shelters=[ShelterSpec(2)],
        rng=np.random.default_rng(0),
    )

    assert world.shelters[1].nearest == [3]
    assert world.shelters[2].nearest == []
    assert world.shelters[2].species is Species.PREDATOR


def test_same_seed_same_world():
    def _build(seed):
        world = build_world(8, grass_amount=10, thick_vegetation_amount=5, rng=np.random.default_rng(seed))
        return [(c.cell_id, c.vegetation.tier) for c in world.grid if c.vegetation is not None]

    assert _build(4) == _build(4)


@pytest.mark.parametrize(
    "kwargs",
    [
        dict(size=4),
        dict(size=5, grass_amount=20, thick_vegetation_amount=6),
        dict(size=5, prey_shelters=[ShelterSpec(3, capacity=2, roster=default_roster(3))]),
        dict(size=5, prey_shelters=[ShelterSpec(3)], predator_shelters=[ShelterSpec(3)]),
        dict(size=5, prey_shelters=[ShelterSpec(30)]),
        dict(size=5, grass_amount=-1),
        dict(size=5, thick_vegetation_amount=-2),
    ],
)
def test_bad_configuration_raises(kwargs):
    with pytest.raises(ConfigurationError):
        build_world(rng=np.random.default_rng(0), **kwargs)


def test_roster_can_hold_dead_and_young_animals():
    world = build_world(
        5,
        prey_shelters=[ShelterSpec(13, roster=[AnimalSpec(Sex.MALE, alive=False), AnimalSpec(Sex.FEMALE, satiety=2)])],
        rng=np.random.default_rng(0),
    )

    assert world.alive_count(Species.PREY) == 1
    assert world.animals[world.prey[1]].satiety == 2
