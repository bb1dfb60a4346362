"""Ship data model."""

from dataclasses import dataclass, field
from enum import IntEnum

from ..errors import InternalConsistencyError
from ..utils.constants import FULL_PERCENT
from .coords import Coords
from .item import ITEMS, MAX_ITEMS, ItemKind, empty_inventory


class ShipClass(IntEnum):
    PB = 0  # Picketboat
    CT = 1  # Corvette
    ES = 2  # Escort
    FF = 3  # Frigate
    DD = 4  # Destroyer
    CL = 5  # Light cruiser
    CS = 6  # Strike cruiser
    CA = 7  # Heavy cruiser
    CC = 8  # Command cruiser
    BC = 9  # Battlecruiser
    BS = 10  # Battleship
    DN = 11  # Dreadnought
    SD = 12  # Super dreadnought
    BM = 13  # Battlemoon
    BW = 14  # Battleworld
    BR = 15  # Battlestar
    BA = 16  # Starbase
    TR = 17  # Transport


@dataclass(frozen=True)
class HullInfo:
    abbr: str
    tonnage: int  # Tens of thousands of tons
    cost: int


HULLS = (
    HullInfo("PB", 1, 100),
    HullInfo("CT", 2, 200),
    HullInfo("ES", 5, 500),
    HullInfo("FF", 10, 1_000),
    HullInfo("DD", 15, 1_500),
    HullInfo("CL", 20, 2_000),
    HullInfo("CS", 25, 2_500),
    HullInfo("CA", 30, 3_000),
    HullInfo("CC", 35, 3_500),
    HullInfo("BC", 40, 4_000),
    HullInfo("BS", 45, 4_500),
    HullInfo("DN", 50, 5_000),
    HullInfo("SD", 55, 5_500),
    HullInfo("BM", 60, 6_000),
    HullInfo("BW", 65, 6_500),
    HullInfo("BR", 70, 7_000),
    HullInfo("BA", 1, 100),
    HullInfo("TR", 1, 100),
)


class ShipType(IntEnum):
    FTL = 0
    SUB_LIGHT = 1
    STARBASE = 2

    @property
    def suffix(self) -> str:
        return ("", "S", "S")[self]


class JumpStatus(IntEnum):
    DID_NOT_JUMP = 0
    JUST_JUMPED = 1
    JUST_MOVED_HERE = 50
    JUMPED_VIA_WORMHOLE = 99


@dataclass
class ShipStatus:
    under_construction: bool = False
    on_surface: bool = False
    in_orbit: bool = False
    in_deep_space: bool = False
    jumped_in_combat: bool = False
    forced_jump: bool = False
    destroyed: bool = False


@dataclass
class Ship:
    """A ship or starbase owned by a species."""

    name: str
    coords: Coords  # Orbit 0 in deep space, 99 while off the map
    ship_class: ShipClass
    ship_type: ShipType = ShipType.FTL
    tonnage: int = 1  # Tens of thousands of tons
    status: ShipStatus = field(default_factory=ShipStatus)
    items: list[int] = field(default_factory=empty_inventory)  # Indexed by ItemKind
    age: int = 0
    remaining_cost: int = 0  # Still to pay while under construction
    dest: Coords = field(default_factory=Coords.unset)  # Forced-jump or telescope target
    just_jumped: JumpStatus = JumpStatus.DID_NOT_JUMP
    arrived_via_wormhole: bool = False  # Set for the turn after a wormhole jump
    loading_point: Coords = field(default_factory=Coords.unset)  # Where CUs were loaded
    unloading_point: Coords = field(default_factory=Coords.unset)  # Where to unload them
    auto_jump_target: Coords = field(default_factory=Coords.unset)

    def __post_init__(self):
        self.ship_class = ShipClass(self.ship_class)
        self.ship_type = ShipType(self.ship_type)
        self.just_jumped = JumpStatus(self.just_jumped)
        if self.tonnage < 1:
            raise ValueError(f"Invalid tonnage: {self.tonnage} (must be >= 1)")
        if len(self.items) != MAX_ITEMS:
            raise ValueError(f"Invalid inventory size: {len(self.items)} (must be {MAX_ITEMS})")

    @property
    def hull(self) -> HullInfo:
        return HULLS[self.ship_class]

    @property
    def capacity(self) -> int:
        """Cargo capacity in carrying units."""
        if self.ship_class == ShipClass.BA:
            return 10 * self.tonnage
        if self.ship_class == ShipClass.TR:
            return 10 * self.tonnage + (self.tonnage * self.tonnage) // 2
        return self.tonnage

    @property
    def original_cost(self) -> int:
        """Construction cost of the hull, after the sub-light discount."""
        cost = self.hull.cost
        if self.ship_class == ShipClass.TR or self.ship_type == ShipType.STARBASE:
            cost *= self.tonnage
        if self.ship_type == ShipType.SUB_LIGHT:
            cost = (3 * cost) // 4
        return cost

    def is_distorted(self, ignore_field_distorters: bool = False) -> bool:
        """A ship fully fitted with field distortion units hides its identity in space."""
        return (
            not ignore_field_distorters
            and not self.status.on_surface
            and self.items[ItemKind.FD] == self.tonnage
        )

    def short_name(self) -> str:
        """Class, tonnage and name without the status suffix, e.g. "TR1 Explorer"."""
        if self.ship_class == ShipClass.TR:
            return f"TR{self.tonnage}{self.ship_type.suffix} {self.name}"
        return f"{self.hull.abbr}{self.ship_type.suffix} {self.name}"

    def display_name(self, ignore_field_distorters: bool = False, truncate: bool = False) -> str:
        """Return the full ship id as shown in reports, e.g. "DD Hunter(A3O)".

        Args:
            ignore_field_distorters: Show the real name even if distorted
            truncate: Omit the age and status suffix

        Raises:
            InternalConsistencyError: If the ship has no recognisable status
        """
        distorted = self.is_distorted(ignore_field_distorters)
        if distorted:
            if self.ship_class == ShipClass.TR:
                name = f"TR{self.tonnage} ???"
            elif self.ship_class == ShipClass.BA:
                name = "BAS ???"
            else:
                name = f"{self.hull.abbr} ???"
        else:
            name = self.short_name()

        if truncate:
            return name

        name += "("
        if not distorted and not self.status.under_construction:
            name += f"A{max(self.age, 0)}"

        if self.status.under_construction:
            name += "C"
        elif self.status.in_orbit:
            name += "O"
        elif self.status.on_surface:
            name += "L"
        elif self.status.in_deep_space:
            name += "D"
        elif self.status.forced_jump:
            name += "FJ"
        elif self.status.jumped_in_combat:
            name += "WD"
        else:
            raise InternalConsistencyError(f"ship {self.name!r} has no location status")

        if self.ship_type == ShipType.STARBASE:
            name += f",{10000 * self.tonnage} tons"
        return name + ")"

    def cargo(self) -> str:
        """Return the cargo as "5 CU,10 IU"."""
        return ",".join(
            f"{qty} {ITEMS[i].abbr}" for i, qty in enumerate(self.items) if qty > 0
        )

    def mishap_chance(self, dest: Coords, gravitics: int) -> int:
        """Chance of a jump mishap, in hundredths of a percent.

        The base chance grows with the square of the distance and falls with
        gravitics tech. Age then eats into the chance of success.
        """
        if gravitics < 1:
            return FULL_PERCENT
        chance = (100 * self.coords.distance_squared_to(dest)) // gravitics
        if self.age > 0 and chance < FULL_PERCENT:
            success = FULL_PERCENT - chance
            success -= (2 * self.age * success) // 100
            chance = FULL_PERCENT - success
        return min(chance, FULL_PERCENT)
