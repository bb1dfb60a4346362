"""Galaxy data model: the arena that owns every system, planet and species."""

from dataclasses import dataclass, field

from .coords import Coords
from .planet import Planet
from .species import Species
from .star import System


@dataclass
class Galaxy:
    """A generated star cluster and the species playing in it.

    Systems are keyed by Coords.system_id. Colonies and ships refer to
    planets and systems by coordinates; use planet_at() and system_at() to
    resolve them.
    """

    id: str
    name: str
    radius: int  # Parsecs; the cluster centre is at (radius, radius, radius)
    d_num_species: int = 0  # Designed number of species
    systems: dict[int, System] = field(default_factory=dict)
    species: list[Species] = field(default_factory=list)  # Ordered by number

    def __post_init__(self):
        if self.radius < 1:
            raise ValueError(f"Invalid radius: {self.radius} (must be >= 1)")

    @property
    def center(self) -> Coords:
        return Coords(self.radius, self.radius, self.radius)

    @property
    def num_species(self) -> int:
        return len(self.species)

    def add_system(self, system: System) -> None:
        if system.key in self.systems:
            raise ValueError(f"Duplicate system at {system.coords}")
        self.systems[system.key] = system

    def add_species(self, species: Species) -> None:
        self.species.append(species)

    def all_systems(self) -> list[System]:
        """Return a new list of every system, in insertion order."""
        return list(self.systems.values())

    def all_planets(self) -> list[Planet]:
        return [planet for system in self.systems.values() for planet in system.planets]

    def system_at(self, coords: Coords) -> System | None:
        return self.systems.get(coords.system_id)

    def planet_at(self, coords: Coords) -> Planet | None:
        system = self.system_at(coords)
        if system is None:
            return None
        return system.planet(coords.orbit)

    def home_systems(self) -> list[System]:
        return [s for s in self.systems.values() if s.home_species is not None]

    def wormhole_systems(self) -> list[System]:
        return [s for s in self.systems.values() if s.wormhole is not None]

    def species_by_number(self, number: int) -> Species | None:
        for species in self.species:
            if species.number == number:
                return species
        return None

    def alien_is_visible(self, species: Species, alien: Species, coords: Coords) -> bool:
        """Return True if species can see alien in the system at coords.

        The alien is visible if it has an undistorted ship in orbit or deep
        space there, a populated colony in the system that is not hiding, or a
        hidden colony on a planet where species also has population.
        """
        for ship in alien.ships:
            if not coords.same_system(ship.coords):
                continue
            if ship.is_distorted():
                continue
            if ship.status.in_orbit or ship.status.in_deep_space:
                return True

        for alien_colony in alien.colonies:
            if not coords.same_system(alien_colony.coords) or not alien_colony.populated:
                continue
            if not alien_colony.hidden:
                return True
            for colony in species.colonies:
                if colony.populated and colony.coords.same_planet(alien_colony.coords):
                    return True
        return False
