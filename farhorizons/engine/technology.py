"""Technology: transfers between species, natural growth and new-item notices."""

import logging

from ..errors import ConfigurationError
from ..models import Galaxy, Species, Tech, Transaction, TransactionType
from ..models.item import high_tech_items
from ..models.transaction import TECH_TRANSFER_NOT_FUNDED, TECH_TRANSFER_OFFER_TOO_LOW
from ..utils import EventLog, GameRNG

logger = logging.getLogger(__name__)

INTERSPECIES_CONSTRUCTION_LEVEL = 25  # Manufacturing tech needed to build for other species
RUNAWAY_GROWTH_LEVEL = 50  # Above this, growth from experience is capped at one level


def _tech_of(t: Transaction) -> Tech:
    try:
        return Tech(t.value)
    except ValueError as e:
        raise ConfigurationError(f"{t.type.name} transaction names unknown tech {t.value}") from e


def tech_transfer_cost(level: int) -> int:
    """Cost of raising a tech from level to level + 1 by transfer (25% discount)."""
    cost = level * level
    return cost - cost // 4


def apply_tech_transfers(
    galaxy: Galaxy, species: Species, transactions: list[Transaction], log: EventLog
) -> None:
    """Raise the species' tech levels from tech transfers offered to it.

    Each transfer buys as many levels as the donor's budget allows, up to the
    level the donor offered. The budget is number_1, or the donor's whole
    treasury when number_1 is 0, and never more than the treasury. The
    outcome is written back into the transaction for the donor's log:
    number_1 holds the cost or a failure code, number_2 and number_3 the
    old and new levels.

    Raises:
        ConfigurationError: If a transfer names an unknown donor or tech
    """
    for t in transactions:
        if t.type != TransactionType.TECH_TRANSFER or t.recipient != species.number:
            continue
        tech = _tech_of(t)
        log.event(f"  {tech.label} tech transfer from SP {t.name_1}")

        their_level = t.number_3
        my_level = species.tech_level[tech]
        if their_level <= my_level:
            log.write(" failed.\n")
            t.number_1 = TECH_TRANSFER_OFFER_TOO_LOW
            continue

        donor = galaxy.species_by_number(t.donor)
        if donor is None:
            raise ConfigurationError(f"tech transfer from unknown species {t.donor}")
        budget = t.number_1 if t.number_1 != 0 else donor.econ_units
        budget = min(budget, donor.econ_units)

        cost, new_level = 0, my_level
        while new_level < their_level:
            step = tech_transfer_cost(new_level)
            if cost + step > budget:
                break
            cost += step
            new_level += 1

        if new_level == my_level:
            log.write(" failed due to lack of funding.\n")
            t.number_1 = TECH_TRANSFER_NOT_FUNDED
            continue

        log.write(f" raised your tech level from {my_level} to {new_level} at a cost to them of {cost}.\n")
        t.number_1, t.number_2, t.number_3 = cost, my_level, new_level
        species.tech_level[tech] = new_level
        donor.econ_units -= cost
        logger.debug(f"{species.id} bought {tech.name} {my_level}->{new_level} from SP{donor.number:02d} for {cost}")


def grow_tech_level(rng: GameRNG, old_level: int, experience: int) -> tuple[int, int]:
    """Work out a tech's new level from its experience points.

    Algorithm:
    1. Find how far the points would go with no randomness: each level
       costs its square
    2. Apply half of that increase outright
    3. Spend the rest one level-sized chunk at a time, each chunk having a
       1 in n chance of buying the next level, where n is the current level
       (9 in 16 at level 1)
    4. Give a flat 1 in 6 chance of one extra level to any tech above 0
    5. Above level 50, never rise more than one level past step 1's result

    Args:
        rng: Random source
        old_level: Level at the start of the turn
        experience: Experience points accumulated

    Returns:
        (new level, experience points left over)
    """
    new_level = old_level
    max_level = None

    if experience != 0:
        points, level = experience, old_level
        while points >= level * level:
            points -= level * level
            level += 1
        if old_level > RUNAWAY_GROWTH_LEVEL:
            max_level = level + 1

        for _ in range((level - old_level) // 2):
            experience -= new_level * new_level
            new_level += 1

        while experience >= new_level:
            experience -= new_level
            n = new_level
            roll = rng.roll(16 * n)
            if 8 * n <= roll <= 8 * n + 15:
                new_level = n + 1

    if old_level > 0 and rng.roll(6) == 6:
        new_level += 1

    if max_level is not None and new_level > max_level:
        new_level = max_level
    return new_level, experience


def grow_techs(rng: GameRNG, species: Species, log: EventLog) -> None:
    """Apply natural growth to every tech and log the ones that rose."""
    for tech in Tech:
        old_level = species.tech_level[tech]
        new_level, species.tech_eps[tech] = grow_tech_level(rng, old_level, species.tech_eps[tech])
        if new_level > old_level:
            log.event(f"  {tech.label} tech level rose from {old_level} to {new_level}.\n")
            species.tech_level[tech] = new_level


def announce_high_tech(species: Species, log: EventLog) -> None:
    """Log the items that became buildable this turn and reset the start-of-turn levels."""
    for tech in Tech:
        old_level = species.init_tech_level[tech]
        new_level = species.tech_level[tech]
        if new_level > old_level:
            for item in high_tech_items(tech, old_level, new_level):
                log.event(f"  You now have the technology to build {item.name}s.\n")
            if tech == Tech.MA and old_level < INTERSPECIES_CONSTRUCTION_LEVEL <= new_level:
                log.event("  You now have the technology to do interspecies construction.\n")
        species.init_tech_level[tech] = new_level


def apply_knowledge_transfers(species: Species, transactions: list[Transaction], log: EventLog) -> None:
    """Raise the species' knowledge of a tech, not its usable level.

    A transfer only counts if the offered level beats both the current level
    and the current knowledge.
    """
    for t in transactions:
        if t.type != TransactionType.KNOWLEDGE_TRANSFER or t.recipient != species.number:
            continue
        tech = _tech_of(t)
        their_level = t.number_3
        if their_level <= max(species.tech_level[tech], species.tech_knowledge[tech]):
            continue
        species.tech_knowledge[tech] = their_level
        log.event(
            f"  SP {t.name_1} transferred knowledge of {tech.label} to you up to tech level {their_level}.\n"
        )


def report_transfers_to_donor(species: Species, transactions: list[Transaction], log: EventLog) -> None:
    """Tell a donor how each of its tech transfers went."""
    for t in transactions:
        if t.type != TransactionType.TECH_TRANSFER or t.donor != species.number:
            continue
        line = f"  {_tech_of(t).label} tech transfer to SP {t.name_2}"
        if t.number_1 < 0:
            line += " failed"
            if t.number_1 == TECH_TRANSFER_NOT_FUNDED:
                line += " due to lack of funding"
        else:
            line += f" raised their tech level from {t.number_2} to {t.number_3} at a cost to you of {t.number_1}"
        log.write(line + ".\n")
