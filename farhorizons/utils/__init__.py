"""Utility functions and constants for Far Horizons."""

from .constants import (
    DEFAULT_DENSITY,
    DEFAULT_MIN_WORMHOLE_LENGTH,
    MAX_RADIUS,
    MAX_SPECIES,
    MAX_STARS,
    MAX_TURN,
    MIN_RADIUS,
    MIN_SPECIES,
    MIN_STARS,
    OFF_MAP_ORBIT,
    RNG_SEED_DEFAULT,
)
from .event_log import EventLog
from .names import commas, fixed_point, is_valid_name, name_problem
from .rng import GameRNG

__all__ = [
    "DEFAULT_DENSITY",
    "DEFAULT_MIN_WORMHOLE_LENGTH",
    "MAX_RADIUS",
    "MAX_SPECIES",
    "MAX_STARS",
    "MAX_TURN",
    "MIN_RADIUS",
    "MIN_SPECIES",
    "MIN_STARS",
    "OFF_MAP_ORBIT",
    "RNG_SEED_DEFAULT",
    "EventLog",
    "commas",
    "fixed_point",
    "is_valid_name",
    "name_problem",
    "GameRNG",
]
