"""Where each species is present, and who has met whom."""

import logging
from dataclasses import dataclass

from ..models import Coords, Galaxy, Species

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Location:
    """A star system where a species has a populated colony or a ship."""

    species: int  # Species number
    coords: Coords  # Orbit always 0


def find_locations(galaxy: Galaxy) -> list[Location]:
    """List every (species, system) pair with a presence, once each.

    Populated colonies count, and so do ships, except ships off the map and
    ships that were forced to jump or jumped away in combat.
    """
    locations: list[Location] = []
    seen: set[tuple[int, int]] = set()

    def add(number: int, coords: Coords) -> None:
        key = (number, coords.system_id)
        if key not in seen:
            seen.add(key)
            locations.append(Location(number, coords.system()))

    for species in galaxy.species:
        for colony in species.colonies:
            if colony.coords.is_off_map or not colony.populated:
                continue
            add(species.number, colony.coords)
        for ship in species.ships:
            if ship.coords.is_off_map:
                continue
            if ship.status.forced_jump or ship.status.jumped_in_combat:
                continue
            add(species.number, ship.coords)
    return locations


def update_contacts(galaxy: Galaxy, species: Species, locations: list[Location]) -> list[int]:
    """Record first contact with every visible alien sharing a system with the species.

    Returns:
        Numbers of the species newly met
    """
    met = []
    for mine in locations:
        if mine.species != species.number:
            continue
        for theirs in locations:
            number = theirs.species
            if number == species.number or species.has_contact(number):
                continue
            if not theirs.coords.same_system(mine.coords):
                continue
            alien = galaxy.species_by_number(number)
            if alien is None or number >= len(species.contact):
                continue
            if galaxy.alien_is_visible(species, alien, mine.coords):
                species.contact[number] = True
                met.append(number)
                logger.debug(f"{species.id} met SP{number:02d} at {mine.coords}")
    return met
