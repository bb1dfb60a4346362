"""Colony updates: salvage, population, attrition, home world growth and ship ageing."""

import logging

from ..models import (
    ITEMS,
    Colony,
    ColonyKind,
    ItemKind,
    JumpStatus,
    Planet,
    Ship,
    ShipType,
    Species,
    Tech,
    Transaction,
    TransactionType,
)
from ..utils import EventLog, GameRNG
from ..utils.constants import ATTRITION_THRESHOLD, HOME_GROWTH_FACTOR, HP_AVAILABLE_POP, MAX_SHIP_AGE
from ..utils.names import fixed_point

logger = logging.getLogger(__name__)

RESORT_MAX_LSN = 6


# ---------- salvage ----------


def ship_salvage_value(ship: Ship) -> int:
    """Economic units recovered by scrapping a ship.

    A ship still under construction returns a quarter of what was paid for
    it; a finished ship loses value with age.
    """
    cost = ship.original_cost
    if ship.status.under_construction:
        return (cost - ship.remaining_cost) // 4
    return (3 * cost * (60 - ship.age)) // 400


def inventory_salvage_value(items: list[int], biology: int) -> int:
    """Economic units recovered from a planet's inventory.

    Raw materials fetch a tenth of a unit each and everything else a quarter
    of its cost. Terraforming plants are cheaper to a species with biology
    tech, so their cost is divided by the tech level first.
    """
    total = 0
    for kind, quantity in enumerate(items):
        if kind == ItemKind.RM:
            total += quantity // 10
        elif quantity > 0:
            cost = quantity * ITEMS[kind].cost
            if kind == ItemKind.TP:
                cost //= biology if biology > 0 else 100
            total += cost // 4
    return total


def salvage_disbanded(species: Species, log: EventLog) -> int:
    """Scrap every disbanded colony with the ships on it and credit the treasury.

    Ships in the colony's system are salvaged unless they are in orbit
    (starbases are always salvaged); their cargo is unloaded onto the
    planet first. Disbanded colonies and salvaged ships are then removed.

    Returns:
        Total economic units credited
    """
    credited = 0
    for colony in species.colonies:
        if not colony.is_disbanded:
            continue

        salvage = 0
        for ship in species.ships:
            if not colony.coords.same_system(ship.coords):
                continue
            if ship.status.in_orbit and ship.ship_type != ShipType.STARBASE:
                continue
            for kind, quantity in enumerate(ship.items):
                colony.items[kind] += quantity
            salvage += ship_salvage_value(ship)
            ship.status.destroyed = True

        salvage += inventory_salvage_value(colony.items, species.tech_level[Tech.BI])
        species.econ_units += salvage
        credited += salvage
        log.event(f"  PL {colony.name} was disbanded, generating {salvage} economic units in salvage.\n")
        logger.debug(f"{species.id}: PL {colony.name} disbanded for {salvage} EUs")

    species.colonies = [c for c in species.colonies if not c.is_disbanded]
    species.ships = [s for s in species.ships if not s.status.destroyed]
    return credited


# ---------- population ----------


def _population_percent(ls_needed: int, ls_actual: int) -> int:
    """Basic growth rate, 10 * (1 - needed/actual), in hundredths of a percent."""
    if ls_actual <= 0:
        return 1000 if ls_needed == 0 else -1
    return 10 * (100 - (100 * ls_needed) // ls_actual)


def _destroy_colony(colony: Colony) -> None:
    colony.kind = ColonyKind.COLONY
    colony.populated = False
    colony.mi_base = 0
    colony.ma_base = 0
    colony.pop_units = 0
    colony.items[ItemKind.PD] = 0
    colony.items[ItemKind.CU] = 0
    colony.siege_eff = 0


def _log_assimilations(
    species: Species, colony: Colony, transactions: list[Transaction], log: EventLog
) -> None:
    for t in transactions:
        if t.type != TransactionType.ASSIMILATION or t.value != species.number:
            continue
        if not colony.coords.same_planet(t.coords):
            continue
        text = (
            f"  Assimilation of {t.name_1} PL {t.name_2} increased mining base of "
            f"{species.name} PL {colony.name} by {fixed_point(t.number_1)}, "
            f"and manufacturing base by {fixed_point(t.number_2)}"
        )
        if t.number_3 > 0:
            text += f". Number of shipyards was also increased by {t.number_3}"
        log.event(text + ".\n")


def home_population(species: Species, colony: Colony) -> int:
    """Population units available on a home planet, reduced while it recovers from bombing."""
    if not colony.populated:
        return 0
    base = colony.economic_base
    if species.hp_original_base != 0:
        if base >= species.hp_original_base:
            species.hp_original_base = 0
        else:
            return (base * HP_AVAILABLE_POP) // species.hp_original_base
    return HP_AVAILABLE_POP


def colony_population(
    rng: GameRNG, species: Species, colony: Colony, planet: Planet, home_planet: Planet, log: EventLog
) -> int:
    """Population units a populated colony gains this turn.

    Growth depends on how well life support covers the planet, with a little
    random jitter and a bonus for biology. Mining and resort colonies do not
    grow, and neither does a colony holding nothing but defence units. A
    colony whose life support falls short is wiped out.
    """
    total = colony.economic_base + colony.items[ItemKind.CU] + colony.items[ItemKind.PD]
    ls_needed = species.life_support_needed(planet, home_planet)
    percent = _population_percent(ls_needed, species.tech_level[Tech.LS])
    if percent < 0:
        log.event(
            f"  !!! Life support tech level was too low to support colony on PL {colony.name}. "
            "Colony was destroyed.\n"
        )
        _destroy_colony(colony)
        return 0

    percent //= 100
    percent += rng.roll(percent // 4) - rng.roll(percent // 4)
    percent += species.tech_level[Tech.BI] // 20
    change = (percent * total) // 100

    if colony.mi_base > 0 and colony.ma_base == 0:
        colony.kind = ColonyKind.MINING
        change = 0
    elif colony.is_mining:
        colony.kind = ColonyKind.COLONY
        change = 0

    if (
        colony.ma_base > 0
        and colony.mi_base == 0
        and ls_needed <= RESORT_MAX_LSN
        and planet.gravity <= home_planet.gravity
    ):
        colony.kind = ColonyKind.RESORT
        change = 0
    elif colony.is_resort:
        colony.kind = ColonyKind.COLONY
        change = 0

    if total == colony.items[ItemKind.PD]:
        # Nothing but defence units: an invasion force, not settlers
        change = 0
    return change


def apply_attrition(colony: Colony, log: EventLog) -> bool:
    """Take one unit from a dwindling colony.

    Colonies with fewer than 50 units in total lose one unit a turn from the
    first non-empty pool: population, colonists, defences, manufacturing
    base, then mining base.

    Returns:
        True if the colony lost its last unit
    """
    total = (
        colony.pop_units
        + colony.mi_base
        + colony.ma_base
        + colony.items[ItemKind.CU]
        + colony.items[ItemKind.PD]
    )
    if not (0 < total < ATTRITION_THRESHOLD):
        return False

    if colony.pop_units > 0:
        colony.pop_units -= 1
        return total == 1

    if colony.items[ItemKind.CU] > 0:
        colony.items[ItemKind.CU] -= 1
        text = f"  Number of colonist units on PL {colony.name} was reduced by one unit due to normal attrition."
    elif colony.items[ItemKind.PD] > 0:
        colony.items[ItemKind.PD] -= 1
        text = (
            f"  Number of planetary defense units on PL {colony.name} "
            "was reduced by one unit due to normal attrition."
        )
    elif colony.ma_base > 0:
        colony.ma_base -= 1
        text = f"  Manufacturing base of PL {colony.name} was reduced by 0.1 due to normal attrition."
    else:
        colony.mi_base -= 1
        text = f"  Mining base of PL {colony.name} was reduced by 0.1 due to normal attrition."

    if total == 1:
        text += " The colony is dead!"
    log.event(text + "\n")
    return total == 1


def split_by_difficulty(total: int, mi_base: int, ma_base: int, mining_difficulty: int) -> tuple[int, int]:
    """Split new units between mining and manufacturing so they stay in balance.

    The harder the planet is to mine, the more of the split goes to mining.

    Returns:
        (mining units, manufacturing units)
    """
    denom = 100 + mining_difficulty
    ma_units = (100 * (total + mi_base) - mining_difficulty * ma_base + denom // 2) // denom
    mi_units = total - ma_units
    if mi_units < 0:
        return 0, total
    if ma_units < 0:
        return total, 0
    return mi_units, ma_units


def grow_home_bases(colony: Colony, mining_difficulty: int) -> None:
    """Add the home world's automatic 2% growth to its bases."""
    increment = (HOME_GROWTH_FACTOR * colony.economic_base) // 1000
    mi_units, ma_units = split_by_difficulty(increment, colony.mi_base, colony.ma_base, mining_difficulty)
    colony.mi_base += mi_units
    colony.ma_base += ma_units


def update_colony(
    rng: GameRNG,
    species: Species,
    colony: Colony,
    planet: Planet,
    home_planet: Planet,
    transactions: list[Transaction],
    log: EventLog,
) -> bool:
    """Advance one colony by a turn.

    Algorithm:
    1. Clear ambush spending and turn a HIDE order into hiding for this turn
    2. Install pending colonial mining and manufacturing units
    3. Log assimilations of alien colonies on the same planet
    4. Work out available population (home world or colony rules)
    5. Apply attrition to small colonies
    6. Grow the home world's bases
    7. Recompute the populated flag

    Returns:
        True if the colony became populated this turn
    """
    colony.use_on_ambush = 0
    colony.hidden = colony.hiding
    colony.hiding = False

    if colony.ius_to_install > 0:
        colony.mi_base += colony.ius_to_install
        colony.ius_to_install = 0
    if colony.aus_to_install > 0:
        colony.ma_base += colony.aus_to_install
        colony.aus_to_install = 0

    _log_assimilations(species, colony, transactions, log)

    colony.pop_units = 0
    if colony.is_home:
        colony.pop_units = home_population(species, colony)
    elif colony.populated:
        colony.pop_units = colony_population(rng, species, colony, planet, home_planet, log)

    if colony.populated and apply_attrition(colony, log):
        logger.debug(f"{species.id}: PL {colony.name} died out")

    if colony.is_home:
        grow_home_bases(colony, planet.mining_difficulty)

    return colony.check_population()


def age_ships(species: Species) -> None:
    """Clear jump flags and age ships still under construction."""
    for ship in species.ships:
        if ship.coords.is_off_map:
            continue
        ship.arrived_via_wormhole = ship.just_jumped == JumpStatus.JUMPED_VIA_WORMHOLE
        ship.just_jumped = JumpStatus.DID_NOT_JUMP
        if ship.status.under_construction:
            ship.age = min(ship.age + 1, MAX_SHIP_AGE)
