"""Economy: planet efficiency, colony production and fleet maintenance."""

import logging
from dataclasses import dataclass

from ..errors import InternalConsistencyError
from ..models import Colony, Galaxy, ItemKind, Planet, ShipClass, ShipType, Species, Tech
from ..utils.constants import EFFICIENCY_BASE_LIMIT, FULL_PERCENT

logger = logging.getLogger(__name__)


def economic_efficiency(total_base: int) -> int:
    """Efficiency, in percent, of a planet with a given combined economic base.

    Up to 2000 (200.0) the planet runs at 100%. Beyond that only a twentieth
    of the excess is productive, so efficiency falls towards 5%.
    """
    excess = total_base - EFFICIENCY_BASE_LIMIT
    if excess <= 0:
        return 100
    return (100 * (excess // 20 + EFFICIENCY_BASE_LIMIT)) // total_base


def update_efficiencies(galaxy: Galaxy, total_bases: dict[tuple[int, int], int]) -> None:
    """Recompute econ_efficiency for every planet.

    Args:
        galaxy: Galaxy to update
        total_bases: Combined economic base of all non-home colonies, keyed
            by (system key, orbit) through planet_key()
    """
    for planet in galaxy.all_planets():
        planet.econ_efficiency = economic_efficiency(total_bases.get(planet_key(planet), 0))


def planet_key(planet: Planet) -> tuple[int, int]:
    return planet.coords.system_id, planet.orbit


def fleet_maintenance_cost(species: Species) -> int:
    """Upkeep for every ship on the map, after the military tech discount."""
    cost = 0
    for ship in species.ships:
        if ship.coords.is_off_map:
            continue
        if ship.ship_class == ShipClass.TR:
            n = 4 * ship.tonnage
        elif ship.ship_class == ShipClass.BA:
            n = 10 * ship.tonnage
        else:
            n = 20 * ship.tonnage
        if ship.ship_type == ShipType.SUB_LIGHT:
            n -= (25 * n) // 100
        cost += n
    discount = species.tech_level[Tech.ML] // 2
    return cost - (discount * cost) // 100


@dataclass
class ColonyProduction:
    """What a colony will produce this turn."""

    ls_needed: int
    penalty: int  # Percent lost to poor life support
    raw_materials: int  # Mined this turn, after the penalty, before efficiency
    capacity: int  # After the penalty, before efficiency
    balance: int  # Spendable production after efficiency


def colony_production(
    species: Species, colony: Colony, planet: Planet, home_planet: Planet
) -> ColonyProduction:
    """Work out a colony's production.

    Mining colonies yield two thirds of their raw materials and resort
    colonies two thirds of their capacity. Any other colony can spend the
    smaller of its raw materials (plus stockpile) and its capacity.
    """
    ls_needed = species.life_support_needed(planet, home_planet)
    penalty = 0
    if ls_needed != 0:
        ls = species.tech_level[Tech.LS]
        penalty = (100 * ls_needed) // ls if ls > 0 else 100

    raw_materials = (10 * species.tech_level[Tech.MI] * colony.mi_base) // planet.mining_difficulty
    raw_materials -= (penalty * raw_materials) // 100
    capacity = (species.tech_level[Tech.MA] * colony.ma_base) // 10
    capacity -= (penalty * capacity) // 100

    if colony.is_mining:
        balance = (2 * raw_materials) // 3
    elif colony.is_resort:
        balance = (2 * capacity) // 3
    else:
        balance = min(raw_materials + colony.items[ItemKind.RM], capacity)
    balance = (planet.econ_efficiency * balance + 50) // 100
    return ColonyProduction(ls_needed, penalty, raw_materials, capacity, balance)


def total_production(galaxy: Galaxy, species: Species) -> int:
    """Sum of the spendable production of every colony on the map.

    Raises:
        InternalConsistencyError: If a colony or the home world has no planet
    """
    home_planet = galaxy.planet_at(species.home)
    if home_planet is None:
        raise InternalConsistencyError(f"{species.id} home planet {species.home.id} does not exist")
    total = 0
    for colony in species.colonies:
        if colony.coords.is_off_map or colony.is_disbanded:
            continue
        planet = galaxy.planet_at(colony.coords)
        if planet is None:
            raise InternalConsistencyError(f"PL {colony.name} is at {colony.coords.id}, which has no planet")
        total += colony_production(species, colony, planet, home_planet).balance
    return total


def update_fleet_costs(galaxy: Galaxy, species: Species) -> None:
    """Store the fleet maintenance cost and its share of production.

    The share is kept in hundredths of a percent. It is stored uncapped and
    only limited to 100% where production is spent.
    """
    species.fleet_cost = fleet_maintenance_cost(species)
    production = total_production(galaxy, species)
    if production > 0:
        species.fleet_percent_cost = (FULL_PERCENT * species.fleet_cost) // production
    else:
        species.fleet_percent_cost = FULL_PERCENT
    logger.debug(
        f"{species.id}: fleet cost {species.fleet_cost}, production {production}, "
        f"percent {species.fleet_percent_cost}"
    )


def spendable(amount: int, fleet_percent_cost: int) -> tuple[int, int, int]:
    """Split production into (gross, fleet upkeep share, net)."""
    upkeep = (fleet_percent_cost * amount + 5000) // FULL_PERCENT
    return amount, upkeep, amount - upkeep
