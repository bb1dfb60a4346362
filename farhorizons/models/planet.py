"""Planet environment data model."""

from dataclasses import dataclass, field, replace
from enum import IntEnum

from .coords import Coords


class GasType(IntEnum):
    """Atmospheric gases, numbered as in the classic game tables."""

    H2 = 1
    CH4 = 2
    HE = 3
    NH3 = 4
    N2 = 5
    CO2 = 6
    O2 = 7
    HCL = 8
    CL2 = 9
    F2 = 10
    H2O = 11
    SO2 = 12
    H2S = 13

    @property
    def char(self) -> str:
        return GAS_SYMBOLS[self]


GAS_SYMBOLS = {
    GasType.H2: "H2",
    GasType.CH4: "CH4",
    GasType.HE: "He",
    GasType.NH3: "NH3",
    GasType.N2: "N2",
    GasType.CO2: "CO2",
    GasType.O2: "O2",
    GasType.HCL: "HCl",
    GasType.CL2: "Cl2",
    GasType.F2: "F2",
    GasType.H2O: "H2O",
    GasType.SO2: "SO2",
    GasType.H2S: "H2S",
}


class PlanetSpecial(IntEnum):
    NOT_SPECIAL = 0
    IDEAL_HOME_PLANET = 1
    IDEAL_COLONY_PLANET = 2
    RADIOACTIVE_HELLHOLE = 3


@dataclass
class Gas:
    """One gas in a planet's atmosphere."""

    type: GasType
    percentage: int  # 1-100

    def __post_init__(self):
        self.type = GasType(self.type)
        if not (0 <= self.percentage <= 100):
            raise ValueError(f"Invalid gas percentage: {self.percentage} (must be 0-100)")

    @property
    def label(self) -> str:
        return f"{self.type.char}({self.percentage}%)"


@dataclass
class Planet:
    """Physical environment of a single planet.

    Created by the generator and owned by its System. Colonies refer to a
    planet by its coordinates rather than holding the object.
    """

    coords: Coords  # Orbit is the planet number, 1-9
    diameter: int  # Thousands of kilometres
    gravity: int  # Earth gravity times 100
    temperature_class: int  # 1-30
    pressure_class: int  # 0-29
    mining_difficulty: int  # Times 100
    density: int = 0  # Times 100
    md_increase: int = 0  # Applied at the start of the next turn
    gases: list[Gas] = field(default_factory=list)  # At most four
    econ_efficiency: int = 100  # Percent, recomputed every turn
    special: PlanetSpecial = PlanetSpecial.NOT_SPECIAL
    message: int = 0  # Message id, 0 if none

    def __post_init__(self):
        self.special = PlanetSpecial(self.special)
        if not (1 <= self.coords.orbit <= 9):
            raise ValueError(f"Invalid orbit: {self.coords.orbit} (must be 1-9)")
        if len(self.gases) > 4:
            raise ValueError(f"Invalid atmosphere: {len(self.gases)} gases (must be at most 4)")

    @property
    def orbit(self) -> int:
        return self.coords.orbit

    def gas_percent(self, gas: GasType) -> int:
        """Return the percentage of a gas in the atmosphere, 0 if absent."""
        for g in self.gases:
            if g.type == gas:
                return g.percentage
        return 0

    def atmosphere(self) -> str:
        """Return the atmosphere as "O2(20%),N2(78%)" or "No atmosphere"."""
        if not self.gases:
            return "No atmosphere"
        return ",".join(g.label for g in self.gases)

    def clone(self) -> "Planet":
        return replace(self, gases=[Gas(g.type, g.percentage) for g in self.gases])
