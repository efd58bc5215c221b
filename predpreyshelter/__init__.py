"""Predator/prey grid simulation: rabbits, foxes, two vegetation tiers and shelters."""

from predpreyshelter.errors import ConfigurationError, InvariantViolation
from predpreyshelter.settings import SimulationSettings, build_settings, build_simulation, load_settings
from predpreyshelter.simulation import Simulation, TickReport
from predpreyshelter.species import Species
from predpreyshelter.world import build_world

__version__ = "0.1"
