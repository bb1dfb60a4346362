"""Species data model."""

from dataclasses import dataclass, field

from .colony import Colony
from .coords import Coords
from .planet import GasType, Planet
from .ship import Ship
from .star import System
from .tech import NUM_TECHS, Tech


def _tech_array() -> list[int]:
    return [0] * NUM_TECHS


@dataclass
class Species:
    """A player species: government, technology, tolerances and holdings."""

    number: int  # 1..N, stable for the game
    name: str
    government_name: str
    government_type: str
    home_system_name: str
    home: Coords  # Home planet coordinates
    required_gas: GasType = GasType.O2
    required_gas_min: int = 0  # Percent
    required_gas_max: int = 0  # Percent
    neutral_gases: list[GasType] = field(default_factory=list)
    poison_gases: list[GasType] = field(default_factory=list)
    auto_orders: bool = False  # AUTO command was issued
    tech_level: list[int] = field(default_factory=_tech_array)  # Indexed by Tech
    init_tech_level: list[int] = field(default_factory=_tech_array)  # At start of turn
    tech_knowledge: list[int] = field(default_factory=_tech_array)  # Not yet applied
    tech_eps: list[int] = field(default_factory=_tech_array)  # Experience points
    hp_original_base: int = 0  # Non-zero while a bombed home planet recovers
    econ_units: int = 0
    fleet_cost: int = 0
    fleet_percent_cost: int = 0  # Hundredths of a percent of production
    contact: list[bool] = field(default_factory=list)  # Indexed by species number
    ally: list[bool] = field(default_factory=list)
    enemy: list[bool] = field(default_factory=list)
    colonies: list[Colony] = field(default_factory=list)  # Home planet first
    ships: list[Ship] = field(default_factory=list)

    def __post_init__(self):
        self.required_gas = GasType(self.required_gas)
        self.neutral_gases = [GasType(g) for g in self.neutral_gases]
        self.poison_gases = [GasType(g) for g in self.poison_gases]
        if self.number < 1:
            raise ValueError(f"Invalid species number: {self.number} (must be >= 1)")
        for label in ("tech_level", "init_tech_level", "tech_knowledge", "tech_eps"):
            if len(getattr(self, label)) != NUM_TECHS:
                raise ValueError(f"Invalid {label}: must have {NUM_TECHS} entries")

    @property
    def id(self) -> str:
        return f"SP{self.number:02d}"

    def init_contact_masks(self, designed_species: int) -> None:
        """Size the contact, ally and enemy masks for species 1..designed_species."""
        self.contact = [False] * (designed_species + 1)
        self.ally = [False] * (designed_species + 1)
        self.enemy = [False] * (designed_species + 1)

    def has_contact(self, number: int) -> bool:
        return 0 <= number < len(self.contact) and self.contact[number]

    def is_ally(self, number: int) -> bool:
        return self.has_contact(number) and number < len(self.ally) and self.ally[number]

    def is_enemy(self, number: int) -> bool:
        return self.has_contact(number) and number < len(self.enemy) and self.enemy[number]

    def add_colony(self, colony: Colony) -> None:
        """Add a named planet unless one with the same name already exists."""
        if self.colony_named(colony.name) is None:
            self.colonies.append(colony)

    def colony_named(self, name: str) -> Colony | None:
        for colony in self.colonies:
            if colony.name == name:
                return colony
        return None

    def colony_at(self, coords: Coords) -> Colony | None:
        for colony in self.colonies:
            if colony.coords.same_planet(coords):
                return colony
        return None

    def home_colony(self) -> Colony | None:
        return self.colony_at(self.home)

    def life_support_needed(self, planet: Planet, home_planet: Planet) -> int:
        """Life support tech needed to live on a planet.

        Three levels per temperature and pressure class away from the home
        planet, three per poisonous gas present, and three more if the
        required gas is missing or outside the tolerated band.
        """
        needed = 3 * abs(planet.temperature_class - home_planet.temperature_class)
        needed += 3 * abs(planet.pressure_class - home_planet.pressure_class)

        required_gas_found = False
        for gas in planet.gases:
            if gas.percentage == 0:
                continue
            if gas.type == self.required_gas:
                required_gas_found = (
                    self.required_gas_min <= gas.percentage <= self.required_gas_max
                )
            elif gas.type in self.poison_gases:
                needed += 3
        if not required_gas_found:
            needed += 3
        return needed

    def distorted_number(self) -> int:
        """Species number shown to aliens for ships hidden by field distortion.

        Uses the life support level at the start of the turn so the number is
        stable for the whole turn.
        """
        ls = self.init_tech_level[Tech.LS]
        lo, hi = self.number & 0x0F, (self.number >> 4) & 0x0F
        return (ls % 5 + 3) * (4 * lo + hi) + (ls % 11 + 7)

    def closest_unvisited_system(
        self, coords: Coords, systems: list[System], also_visited: set[int] | None = None
    ) -> System | None:
        """Return the nearest system this species has not visited.

        Args:
            coords: Starting point
            systems: Candidate systems
            also_visited: Extra system keys to treat as visited
        """
        also_visited = also_visited or set()
        closest, closest_distance = None, 0
        for system in systems:
            if self.number in system.visited_by or system.key in also_visited:
                continue
            distance = coords.distance_squared_to(system.coords)
            if closest is None or distance < closest_distance:
                closest, closest_distance = system, distance
        return closest
