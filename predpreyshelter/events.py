"""
Tick events. The engine collects them while a tick runs and hands them to the
subscribed listeners once the tick is complete; listeners never see a
half-finished tick and cannot mutate the registries the engine iterates.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Union
import logging

from predpreyshelter.geometry import Coordinates


@dataclass(frozen=True)
class AnimalMoved:
    animal_id: int
    species: str
    source: Coordinates
    target: Coordinates


@dataclass(frozen=True)
class AnimalBorn:
    animal_id: int
    species: str
    parent_id: int
    position: Coordinates


@dataclass(frozen=True)
class AnimalEaten:
    animal_id: int
    predator_id: int
    position: Coordinates
    age: str


@dataclass(frozen=True)
class AnimalDecomposed:
    animal_id: int
    species: str
    position: Coordinates


@dataclass(frozen=True)
class VegetationSpread:
    source: Coordinates
    target: Coordinates


Event = Union[AnimalMoved, AnimalBorn, AnimalEaten, AnimalDecomposed, VegetationSpread]
EventListener = Callable[[Event], None]


class EventLogger:
    """
    Listener that writes every tick event to the `predpreyshelter.events`
    logger. Passing `enabled=False` keeps the listener subscribed but silent.
    """

    def __init__(self, enabled: bool = True, logger: logging.Logger | None = None):
        self.enabled = enabled
        self.logger = logger or logging.getLogger(__name__)

    def __call__(self, event: Event) -> None:
        if not self.enabled:
            return
        self.logger.info(self.format(event))

    @staticmethod
    def format(event: Event) -> str:
        if isinstance(event, AnimalMoved):
            return f"{event.species} #{event.animal_id} has moved from {event.source} to {event.target}"
        if isinstance(event, AnimalBorn):
            return f"{event.species} #{event.animal_id} was born at {event.position} (parent #{event.parent_id})"
        if isinstance(event, AnimalEaten):
            return (
                f"prey #{event.animal_id} ({event.age}) was eaten at {event.position} "
                f"by predator #{event.predator_id}"
            )
        if isinstance(event, AnimalDecomposed):
            return f"{event.species} #{event.animal_id} has decomposed and was removed from {event.position}"
        if isinstance(event, VegetationSpread):
            return f"grass on {event.source} was spread to {event.target}"
        raise TypeError(f"Unknown event type: {type(event).__name__}")
