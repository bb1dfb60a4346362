"""Item kinds carried by colonies and ships."""

from dataclasses import dataclass
from enum import IntEnum

from .tech import Tech


class ItemKind(IntEnum):
    RM = 0  # Raw material units
    PD = 1  # Planetary defense units
    SU = 2  # Starbase units
    DR = 3  # Damage repair units
    CU = 4  # Colonist units
    IU = 5  # Colonial mining units
    AU = 6  # Colonial manufacturing units
    FS = 7  # Fail-safe jump units
    JP = 8  # Jump portal units
    FM = 9  # Forced misjump units
    FJ = 10  # Forced jump units
    GT = 11  # Gravitic telescope units
    FD = 12  # Field distortion units
    TP = 13  # Terraforming plants
    GW = 14  # Germ warfare bombs
    SG1 = 15
    SG2 = 16
    SG3 = 17
    SG4 = 18
    SG5 = 19
    SG6 = 20
    SG7 = 21
    SG8 = 22
    SG9 = 23
    GU1 = 24
    GU2 = 25
    GU3 = 26
    GU4 = 27
    GU5 = 28
    GU6 = 29
    GU7 = 30
    GU8 = 31
    GU9 = 32
    X1 = 33
    X2 = 34
    X3 = 35
    X4 = 36
    X5 = 37


@dataclass(frozen=True)
class ItemInfo:
    abbr: str
    name: str
    cost: int
    carry_capacity: int
    critical_tech: int  # Tech index, 99 for unassigned items
    tech_requirement: int


def _build_items() -> tuple[ItemInfo, ...]:
    items = [
        ItemInfo("RM", "Raw Material Unit", 1, 1, Tech.MI, 1),
        ItemInfo("PD", "Planetary Defense Unit", 1, 3, Tech.ML, 1),
        ItemInfo("SU", "Starbase Unit", 110, 20, Tech.MA, 20),
        ItemInfo("DR", "Damage Repair Unit", 50, 1, Tech.MA, 30),
        ItemInfo("CU", "Colonist Unit", 1, 1, Tech.LS, 1),
        ItemInfo("IU", "Colonial Mining Unit", 1, 1, Tech.MI, 1),
        ItemInfo("AU", "Colonial Manufacturing Unit", 1, 1, Tech.MA, 1),
        ItemInfo("FS", "Fail-Safe Jump Unit", 25, 1, Tech.GV, 20),
        ItemInfo("JP", "Jump Portal Unit", 100, 10, Tech.GV, 25),
        ItemInfo("FM", "Forced Misjump Unit", 100, 5, Tech.GV, 30),
        ItemInfo("FJ", "Forced Jump Unit", 125, 5, Tech.GV, 40),
        ItemInfo("GT", "Gravitic Telescope Unit", 500, 20, Tech.GV, 50),
        ItemInfo("FD", "Field Distortion Unit", 50, 1, Tech.LS, 20),
        ItemInfo("TP", "Terraforming Plant", 50000, 100, Tech.BI, 40),
        ItemInfo("GW", "Germ Warfare Bomb", 1000, 100, Tech.BI, 50),
    ]
    # Shield generators and gun units scale with their mark
    for mark in range(1, 10):
        items.append(
            ItemInfo(f"SG{mark}", f"Mark-{mark} Shield Generator", 250 * mark, 5 * mark, Tech.LS, 10 * mark)
        )
    for mark in range(1, 10):
        items.append(
            ItemInfo(f"GU{mark}", f"Mark-{mark} Gun Unit", 250 * mark, 5 * mark, Tech.ML, 10 * mark)
        )
    for n in range(1, 6):
        items.append(ItemInfo(f"X{n}", f"X{n} Unit", 9999, 9999, 99, 999))
    return tuple(items)


ITEMS = _build_items()
MAX_ITEMS = len(ITEMS)


def empty_inventory() -> list[int]:
    """Return a zeroed quantity array indexed by ItemKind."""
    return [0] * MAX_ITEMS


def high_tech_items(tech: int, old_level: int, new_level: int) -> list[ItemInfo]:
    """Return items that became buildable when a tech rose from old_level to new_level."""
    return [
        item
        for item in ITEMS
        if item.critical_tech == tech and old_level < item.tech_requirement <= new_level
    ]
