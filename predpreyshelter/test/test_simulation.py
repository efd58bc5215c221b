import numpy as np

from predpreyshelter.behavior import AnimalState
from predpreyshelter.events import AnimalDecomposed, AnimalEaten, AnimalMoved
from predpreyshelter.settings import build_settings, build_simulation
from predpreyshelter.simulation import Simulation
from predpreyshelter.species import Age, Sex, Species
from predpreyshelter.world import AnimalSpec, ShelterSpec, build_world, default_roster


def _make_simulation(prey_shelters=(), predator_shelters=(), grass_ids=(), size=7):
    world = build_world(
        size,
        prey_shelters=prey_shelters,
        predator_shelters=predator_shelters,
        rng=np.random.default_rng(3),
        grass_ids=list(grass_ids),
        thick_vegetation_ids=[],
    )
    return Simulation(world)


def _place(world, species, cell_id, sex=Sex.FEMALE, satiety=None, alive=True):
    animal = world.create_animal(species, sex, cell_id=cell_id, satiety=satiety, alive=alive)
    world.grid.place_animal(world.grid.cell(cell_id), animal.animal_id)
    world.registry(species).append(animal.animal_id)
    return animal


def test_dead_roster_member_is_not_counted_alive():
    roster = [AnimalSpec(Sex.FEMALE), AnimalSpec(Sex.MALE), AnimalSpec(Sex.FEMALE, alive=False)]
    sim = _make_simulation(prey_shelters=[ShelterSpec(25, capacity=5, roster=roster)])

    assert sim.alive_count(Species.PREY) == 2
    assert sim.prey_count == 2
    assert len(sim.world.shelters[25].members) == 3


def test_events_are_dispatched_after_the_tick():
    sim = _make_simulation(prey_shelters=[ShelterSpec(25, roster=default_roster(3))])
    received = []
    sim.subscribe(lambda event: received.append((sim.tick, event)))

    report = sim.step()

    moved = [event for _, event in received if isinstance(event, AnimalMoved)]
    assert len(moved) == 3
    assert {tick for tick, _ in received} == {1}
    assert [event for _, event in received] == report.events
    assert sim.world.shelters[25].members == []


def test_unsubscribed_listener_gets_nothing():
    sim = _make_simulation(prey_shelters=[ShelterSpec(25, roster=default_roster(2))])
    received = []
    listener = sim.subscribe(received.append)
    sim.unsubscribe(listener)

    sim.step()

    assert received == []


def test_eaten_prey_leaves_registry_after_predator_pass():
    sim = _make_simulation()
    _place(sim.world, Species.PREDATOR, 25, satiety=4)
    rabbit = _place(sim.world, Species.PREY, 26)

    report = sim.step()

    assert report.eaten == 1
    assert report.deaths == 1
    assert any(isinstance(e, AnimalEaten) and e.animal_id == rabbit.animal_id for e in report.events)
    assert rabbit.animal_id not in sim.world.prey
    assert rabbit.animal_id not in sim.world.animals
    assert sim.prey_count == 0
    assert sim.predator_count == 1


def test_newborns_join_registry_without_acting():
    sim = _make_simulation()
    _place(sim.world, Species.PREY, 25, sex=Sex.FEMALE, satiety=10)
    _place(sim.world, Species.PREY, 26, sex=Sex.MALE, satiety=10)

    report = sim.step()

    born = [aid for aid in sim.world.prey if sim.world.animals[aid].age is Age.CHILD]
    assert report.births == len(born) >= 1
    assert len(sim.world.prey) == len(set(sim.world.prey)) == 2 + len(born)
    assert all(sim.world.animals[aid].steps_after_grow == 0 for aid in born)


def test_corpse_is_removed_after_decomposition():
    sim = _make_simulation()
    corpse = _place(sim.world, Species.PREY, 25, alive=False)
    _place(sim.world, Species.PREY, 1, satiety=10)

    for _ in range(20):
        sim.step()
    assert corpse.animal_id in sim.world.prey
    assert sim.world.grid.cell(25).occupant == corpse.animal_id

    report = sim.step()

    assert any(isinstance(e, AnimalDecomposed) and e.animal_id == corpse.animal_id for e in report.events)
    assert report.decomposed == 1
    assert corpse.animal_id not in sim.world.prey
    assert sim.world.grid.cell(25).occupant is None


def test_dead_animal_in_shelter_is_released_on_decomposition():
    sim = _make_simulation(prey_shelters=[ShelterSpec(25, roster=[AnimalSpec(Sex.FEMALE, alive=False)])])
    corpse_id = sim.world.prey[0]

    for _ in range(21):
        sim.step()

    assert sim.world.shelters[25].members == []
    assert corpse_id not in sim.world.prey
    assert not sim.has_alive_animals()


def test_tick_counter_and_queries():
    sim = _make_simulation(grass_ids=[10, 11])

    assert sim.grass_quantity() == 6
    assert not sim.has_alive_animals()
    report = sim.step()
    assert report.tick == sim.tick == 1
    assert report.grass_quantity == 6


def test_snapshot_array_layout():
    sim = _make_simulation(prey_shelters=[ShelterSpec(25, roster=default_roster(2))], grass_ids=[3])
    fox = _place(sim.world, Species.PREDATOR, 9)

    snapshot = sim.snapshot()
    array = snapshot.to_array()

    assert array.shape == (4, 7, 7)
    assert array[0, 0, 2] == 3  # grass on (3, 1)
    assert array[2, 1, 1] == 1.0  # fox on (2, 2)
    assert array[3, 3, 3] == 2  # two rabbits inside the shelter on (4, 4)
    assert snapshot.cells[8].occupant_id == fox.animal_id


def test_seeded_runs_are_reproducible():
    overrides = dict(
        map_size=10,
        grass_amount=20,
        thick_vegetation_amount=10,
        rabbit_shelter_ids=[12, 45, 78],
        fox_shelter_ids=[30, 90],
        seed=7,
        logs_enabled=False,
    )

    def _run():
        sim = build_simulation(build_settings(overrides))
        reports = [sim.step() for _ in range(40)]
        return sim.snapshot().to_array(), [(r.prey_count, r.predator_count, r.births, r.eaten) for r in reports]

    first_array, first_counts = _run()
    second_array, second_counts = _run()

    assert np.array_equal(first_array, second_array)
    assert first_counts == second_counts


def test_state_of_follows_animal_through_its_life():
    sim = _make_simulation(prey_shelters=[ShelterSpec(25, roster=[AnimalSpec(Sex.FEMALE, alive=False)])])
    corpse_id = sim.world.prey[0]

    assert sim.state_of(corpse_id) is AnimalState.DECOMPOSING
    for _ in range(21):
        sim.step()
    assert sim.state_of(corpse_id) is AnimalState.REMOVED


def test_snapshot_reports_occupant_age():
    sim = _make_simulation()
    _place(sim.world, Species.PREY, 9)
    child = sim.world.create_animal(Species.PREY, Sex.MALE, age=Age.CHILD, cell_id=10)
    sim.world.grid.place_animal(sim.world.grid.cell(10), child.animal_id)

    cells = sim.snapshot().cells

    assert cells[8].occupant_age == "adult"
    assert cells[9].occupant_age == "child"
    assert cells[0].occupant_age is None
