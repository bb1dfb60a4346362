"""Star system data model."""

from dataclasses import dataclass, field
from enum import IntEnum

from .coords import Coords
from .planet import Planet, PlanetSpecial


class StarType(IntEnum):
    DWARF = 1
    DEGENERATE = 2
    MAIN_SEQUENCE = 3
    GIANT = 4

    @property
    def char(self) -> str:
        return " dDMG"[self]

    @property
    def label(self) -> str:
        return self.name.lower().replace("_", " ")


class StarColor(IntEnum):
    BLUE = 1
    BLUE_WHITE = 2
    WHITE = 3
    YELLOW_WHITE = 4
    YELLOW = 5
    ORANGE = 6
    RED = 7

    @property
    def char(self) -> str:
        return " OBAFGKM"[self]


# Dice rolled for planets, by stellar type and by colour
PLANET_DICE = {
    StarType.DWARF: 1,
    StarType.DEGENERATE: 2,
    StarType.MAIN_SEQUENCE: 2,
    StarType.GIANT: 3,
}
PLANET_DIE_SIZE = {
    StarColor.BLUE: 8,
    StarColor.BLUE_WHITE: 7,
    StarColor.WHITE: 6,
    StarColor.YELLOW_WHITE: 5,
    StarColor.YELLOW: 4,
    StarColor.ORANGE: 3,
    StarColor.RED: 2,
}


@dataclass
class System:
    """A star and its planets.

    Systems are keyed by Coords.system_id. The wormhole partner and the home
    species are stored as keys (coordinates and species number), never as
    object references.
    """

    coords: Coords  # Orbit always 0
    star_type: StarType
    color: StarColor
    size: int  # 0-9
    planets: list[Planet] = field(default_factory=list)  # Orbit 1..N, in order
    wormhole: Coords | None = None  # Other end of a natural wormhole
    visited_by: set[int] = field(default_factory=set)  # Species numbers
    home_species: int | None = None  # Species number if this is a home system
    message: int = 0  # Message id, 0 if none

    def __post_init__(self):
        self.star_type = StarType(self.star_type)
        self.color = StarColor(self.color)
        if not (0 <= self.size <= 9):
            raise ValueError(f"Invalid star size: {self.size} (must be 0-9)")
        for i, planet in enumerate(self.planets):
            if planet.orbit != i + 1:
                raise ValueError(
                    f"Invalid orbit for planet {i + 1} of {self.coords}: {planet.orbit}"
                )

    @property
    def key(self) -> int:
        return self.coords.system_id

    @property
    def num_planets(self) -> int:
        return len(self.planets)

    @property
    def stellar_type(self) -> str:
        """Three character stellar classification, e.g. "MG5"."""
        return f"{self.star_type.char}{self.color.char}{self.size}"

    def home_planet_index(self) -> int:
        """Return the list index of the ideal home planet, or -1."""
        for i, planet in enumerate(self.planets):
            if planet.special == PlanetSpecial.IDEAL_HOME_PLANET:
                return i
        return -1

    def home_planet_number(self) -> int:
        """Return the orbit of the ideal home planet, or 0."""
        return self.home_planet_index() + 1

    def planet(self, orbit: int) -> Planet | None:
        if 1 <= orbit <= len(self.planets):
            return self.planets[orbit - 1]
        return None
