import pytest

from predpreyshelter.animal import Animal
from predpreyshelter.species import Age, Sex, Species


def _animal(**kwargs):
    return Animal(animal_id=1, species=kwargs.pop("species", Species.PREY), sex=Sex.FEMALE, **kwargs)


@pytest.mark.parametrize("satiety, expected_satiety, expected_alive", [(5, 4, True), (0, 0, False)])
def test_satiety_decrease_at_interval(satiety, expected_satiety, expected_alive):
    animal = _animal(satiety=satiety, steps_before_satiety_decrease=10, steps_after_satiety_decrease=10)

    animal.try_to_decrease_satiety()

    assert animal.satiety == expected_satiety
    assert animal.alive is expected_alive


def test_satiety_counter_advances_between_decreases():
    animal = _animal(satiety=5, steps_before_satiety_decrease=10, steps_after_satiety_decrease=3)

    animal.try_to_decrease_satiety()

    assert animal.satiety == 5
    assert animal.steps_after_satiety_decrease == 4


@pytest.mark.parametrize(
    "age, expected_age, expected_alive",
    [(Age.CHILD, Age.ADULT, True), (Age.ADULT, Age.SENIOR, True), (Age.SENIOR, Age.SENIOR, False)],
)
def test_growth_at_interval(age, expected_age, expected_alive):
    animal = _animal(age=age, steps_before_grow=10, steps_after_grow=10)

    animal.try_to_grow()

    assert animal.age is expected_age
    assert animal.alive is expected_alive


def test_species_defaults_and_satiety_bounds():
    fox = _animal(species=Species.PREDATOR, satiety=40)
    rabbit = _animal()

    assert fox.max_satiety == 16 and fox.satiety == 16
    assert rabbit.satiety == 5 and rabbit.vision_range == 3

    rabbit.gain_satiety(100)
    assert rabbit.satiety == rabbit.max_satiety
    rabbit.lose_satiety(100)
    assert rabbit.satiety == 0


def test_starved_animal_skips_growth():
    animal = _animal(
        satiety=0,
        steps_before_satiety_decrease=1,
        steps_after_satiety_decrease=1,
        steps_before_grow=1,
        steps_after_grow=1,
        age=Age.CHILD,
    )

    animal.live_one_step()

    assert animal.alive is False
    assert animal.age is Age.CHILD


def test_corpse_decomposes_on_twenty_first_dead_tick():
    animal = _animal(alive=False)

    assert not any(animal.try_to_decompose() for _ in range(20))
    assert animal.try_to_decompose() is True
