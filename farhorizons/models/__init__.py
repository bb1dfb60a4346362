"""Data models for Far Horizons."""

from .colony import Colony, ColonyKind
from .coords import Coords
from .galaxy import Galaxy
from .game import Game, turn_dir
from .item import ITEMS, MAX_ITEMS, ItemInfo, ItemKind
from .planet import Gas, GasType, Planet, PlanetSpecial
from .ship import HULLS, JumpStatus, Ship, ShipClass, ShipStatus, ShipType
from .species import Species
from .star import StarColor, StarType, System
from .tech import NUM_TECHS, Tech
from .transaction import Transaction, TransactionType

__all__ = [
    "Colony",
    "ColonyKind",
    "Coords",
    "Galaxy",
    "Game",
    "turn_dir",
    "ITEMS",
    "MAX_ITEMS",
    "ItemInfo",
    "ItemKind",
    "Gas",
    "GasType",
    "Planet",
    "PlanetSpecial",
    "HULLS",
    "JumpStatus",
    "Ship",
    "ShipClass",
    "ShipStatus",
    "ShipType",
    "Species",
    "StarColor",
    "StarType",
    "System",
    "NUM_TECHS",
    "Tech",
    "Transaction",
    "TransactionType",
]
