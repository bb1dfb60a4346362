"""Turn processor: advance a galaxy by exactly one turn.

The processor works in two passes:
1. Per species, in species order: ledger notices (mishaps, transfers,
   detections), disbanded colony salvage, technology, colonies, ship ageing
   and messages. On the setup turn only messages are delivered.
2. Global: planet efficiencies, the locations index, first contacts, tech
   transfer outcomes for donors and fleet maintenance costs.

The turn counter only moves once both passes have succeeded; finish_turn()
then writes the new state into the next turn's directory and rewrites
game.json last, so a failed turn leaves the previous state authoritative.

Architecture:
Each ledger category is an independent method that writes into the
species' event log. process_species() composes them in their fixed order
and run() composes the two passes.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from functools import partial
from pathlib import Path

from ..errors import InternalConsistencyError
from ..models import ITEMS, Coords, Galaxy, Game, Planet, Species, Transaction, TransactionType
from ..utils import EventLog, GameRNG
from ..utils import serialization as store
from .colonies import age_ships, salvage_disbanded, update_colony
from .economy import planet_key, update_efficiencies, update_fleet_costs
from .locations import find_locations, update_contacts
from .technology import (
    announce_high_tech,
    apply_knowledge_transfers,
    apply_tech_transfers,
    grow_techs,
    report_transfers_to_donor,
)

logger = logging.getLogger(__name__)

EVENTS_HEADER = "\nOther events:\n"

MISJUMP = 3  # SHIP_MISHAP value for a ship that landed somewhere else

# DETECTION_DURING_SIEGE values
SIEGE_LANDING = 1
SIEGE_SHIP_CONSTRUCTION = 2
SIEGE_PD_CONSTRUCTION = 3
SIEGE_TRANSFER_TO = 4
SIEGE_TRANSFER_FROM = 5


@dataclass
class TurnResult:
    """Outcome of finishing a turn."""

    turn: int  # The new current turn
    logs: dict[int, str] = field(default_factory=dict)  # Species number -> event log text
    missing_orders: list[int] = field(default_factory=list)  # Species that sent no orders


class TurnProcessor:
    """Advances one galaxy by one turn.

    The processor mutates the galaxy, the game and the ledger entries it is
    given (tech transfer outcomes are written back into their entries) and
    returns each species' event log. It does no file I/O of its own: message
    bodies come from message_loader.
    """

    def __init__(
        self,
        galaxy: Galaxy,
        game: Game,
        transactions: list[Transaction],
        rng: GameRNG,
        message_loader: Callable[[int], str],
        orders_received: set[int] | None = None,
        initial_logs: dict[int, str] | None = None,
    ):
        """Create a processor.

        Args:
            galaxy: Galaxy at the start of the turn
            game: Turn counter, advanced by run()
            transactions: Ledger for the turn, in insertion order
            rng: Random source
            message_loader: Returns the body of a stored message by id
            orders_received: Species numbers that submitted orders; None
                means everyone did
            initial_logs: Text each species' log starts with
        """
        self.galaxy = galaxy
        self.game = game
        self.transactions = transactions
        self.rng = rng
        self.message_loader = message_loader
        self.orders_received = orders_received
        self.initial_logs = initial_logs or {}
        self.logs: dict[int, EventLog] = {}
        self.total_bases: dict[tuple[int, int], int] = {}

    # =========================================================================
    # ORCHESTRATION
    # =========================================================================

    def run(self) -> TurnResult:
        """Process the whole turn and advance the turn counter.

        Raises:
            InternalConsistencyError: If a colony has no planet or the ledger
                holds an unknown siege detection
            ConfigurationError: If the ledger names an unknown species or tech
        """
        turn = self.game.current_turn
        logger.info(f"Finishing turn {turn} for {self.galaxy.num_species} species")
        result = TurnResult(turn=turn)

        self.apply_mining_difficulty_increases()
        for species in self.galaxy.species:
            if not self.has_orders(species):
                logger.warning(f"{species.id} {species.name} did not submit orders for turn {turn}")
                result.missing_orders.append(species.number)
            self.logs[species.number] = self.process_species(species)

        self.execute_global_phase()
        self.game.advance()

        result.turn = self.game.current_turn
        result.logs = {number: log.text() for number, log in self.logs.items()}
        logger.info(f"Turn {turn} finished")
        return result

    def has_orders(self, species: Species) -> bool:
        if self.game.is_setup_turn or self.orders_received is None:
            return True
        return species.number in self.orders_received

    def process_species(self, species: Species) -> EventLog:
        """Run every per-species category in its fixed order.

        Returns:
            The species' event log for the turn
        """
        log = EventLog(header=EVENTS_HEADER, initial=self.initial_logs.get(species.number, ""))
        logger.debug(f"Processing {species.id} {species.name}")

        if not self.game.is_setup_turn:
            self.log_mishaps(species, log)
            salvage_disbanded(species, log)
            self.receive_economic_units(species, log)
            self.log_jump_portal_usage(species, log)
            self.log_telescope_detections(species, log)
            apply_tech_transfers(self.galaxy, species, self.transactions, log)
            grow_techs(self.rng, species, log)
        announce_high_tech(species, log)
        if not self.game.is_setup_turn:
            apply_knowledge_transfers(species, self.transactions, log)
            self.update_colonies(species, log)
            age_ships(species)
            self.log_landing_requests(species, log)
            self.log_construction_gifts(species, log)
            self.log_siege_detections(species, log)
        self.deliver_messages(species, log)
        return log

    def execute_global_phase(self) -> None:
        """Efficiencies, contacts, donor reports and fleet costs.

        The setup turn only refreshes efficiencies.
        """
        update_efficiencies(self.galaxy, self.total_bases)

        locations = find_locations(self.galaxy)
        logger.debug(f"{len(locations)} species locations")

        if not self.game.is_setup_turn:
            for species in self.galaxy.species:
                met = update_contacts(self.galaxy, species, locations)
                if met:
                    logger.info(f"{species.id} made contact with {len(met)} species")
                report_transfers_to_donor(species, self.transactions, self._log_for(species))
            for species in self.galaxy.species:
                update_fleet_costs(self.galaxy, species)

    # =========================================================================
    # PLANETS AND COLONIES
    # =========================================================================

    def apply_mining_difficulty_increases(self) -> None:
        """Apply the mining difficulty increases worked out last turn."""
        for planet in self.galaxy.all_planets():
            planet.mining_difficulty += planet.md_increase
            planet.md_increase = 0

    def update_colonies(self, species: Species, log: EventLog) -> None:
        """Update every colony on the map and total up colony bases per planet."""
        home_planet = self._planet_for(species.home, f"{species.id} home planet")
        for colony in species.colonies:
            if colony.coords.is_off_map:
                continue
            planet = self._planet_for(colony.coords, f"PL {colony.name}")

            newly_populated = update_colony(
                self.rng, species, colony, planet, home_planet, self.transactions, log
            )
            if newly_populated and colony.message:
                log.write(self.message_loader(colony.message))

            if not colony.is_home:
                key = planet_key(planet)
                self.total_bases[key] = self.total_bases.get(key, 0) + colony.economic_base

    def _planet_for(self, coords: Coords, label: str) -> Planet:
        planet = self.galaxy.planet_at(coords)
        if planet is None:
            raise InternalConsistencyError(f"{label} is at {coords.id}, which has no planet")
        return planet

    def _log_for(self, species: Species) -> EventLog:
        if species.number not in self.logs:
            self.logs[species.number] = EventLog(header=EVENTS_HEADER)
        return self.logs[species.number]

    # =========================================================================
    # LEDGER NOTICES
    # =========================================================================

    def _entries(self, kind: TransactionType, match: Callable[[Transaction], bool]) -> list[Transaction]:
        return [t for t in self.transactions if t.type == kind and match(t)]

    def log_mishaps(self, species: Species, log: EventLog) -> None:
        for t in self._entries(TransactionType.SHIP_MISHAP, lambda t: t.number_1 == species.number):
            text = f"  !!! {t.name_1}"
            if t.value < MISJUMP:
                text += " disappeared without a trace, cause unknown!\n"
            elif t.value == MISJUMP:
                text += f" mis-jumped to {t.x} {t.y} {t.z}!\n"
            else:
                text += " had a jump mishap! A fail-safe jump unit was expended.\n"
            log.event(text)

    def receive_economic_units(self, species: Species, log: EventLog) -> None:
        """Credit siege and looting proceeds and log every incoming transfer.

        Ordinary transfers were paid when the orders were processed, so they
        are only logged here.
        """
        kinds = (
            TransactionType.EU_TRANSFER,
            TransactionType.SIEGE_EU_TRANSFER,
            TransactionType.LOOTING_EU_TRANSFER,
        )
        for t in self.transactions:
            if t.type not in kinds or t.recipient != species.number:
                continue
            if t.type != TransactionType.EU_TRANSFER:
                species.econ_units += t.value

            text = f"  {t.value} economic units were received from SP {t.name_1}"
            if t.type == TransactionType.SIEGE_EU_TRANSFER:
                text += (
                    f" as a result of your successful siege of their PL {t.name_3}. "
                    f"The siege was {t.number_1}% effective"
                )
            elif t.type == TransactionType.LOOTING_EU_TRANSFER:
                text += f" as a result of your looting their PL {t.name_3}"
            log.event(text + ".\n")

    def log_jump_portal_usage(self, species: Species, log: EventLog) -> None:
        for t in self._entries(TransactionType.ALIEN_JUMP_PORTAL_USAGE, lambda t: t.number_1 == species.number):
            log.event(f"  {t.name_1} {t.name_2} used jump portal {t.name_3}.\n")

    def log_telescope_detections(self, species: Species, log: EventLog) -> None:
        for t in self._entries(TransactionType.TELESCOPE_DETECTION, lambda t: t.number_1 == species.number):
            log.event(
                f"! {t.name_1} detected the operation of an alien gravitic telescope "
                f"at x = {t.x}, y = {t.y}, z = {t.z}.\n"
            )

    def log_landing_requests(self, species: Species, log: EventLog) -> None:
        for t in self._entries(TransactionType.LANDING_REQUEST, lambda t: t.number_1 == species.number):
            outcome = "granted" if t.value != 0 else "denied"
            log.event(f"  {t.name_2} owned by SP {t.name_3} was {outcome} permission to land on PL {t.name_1}.\n")

    def log_construction_gifts(self, species: Species, log: EventLog) -> None:
        for t in self._entries(
            TransactionType.INTERSPECIES_CONSTRUCTION, lambda t: t.recipient == species.number
        ):
            if t.value == 1:
                verb = " was" if t.number_1 == 1 else "s were"
                log.event(
                    f"  {t.number_1} {ITEMS[t.number_2].name}{verb} constructed for you "
                    f"by SP {t.name_1} on PL {t.name_2}.\n"
                )
            else:
                log.event(f"  {t.name_2} was constructed for you by SP {t.name_1}.\n")

    def log_siege_detections(self, species: Species, log: EventLog) -> None:
        """Log what a besieging species caught the besieged planet trying to do.

        Raises:
            InternalConsistencyError: If an entry has an unknown detection code
        """
        for t in self._entries(TransactionType.DETECTION_DURING_SIEGE, lambda t: t.number_3 == species.number):
            text = f"  During the siege of {t.name_3} PL {t.name_1}, your forces detected the "
            if t.value == SIEGE_LANDING:
                text += f"landing of {t.name_2} on the planet.\n"
            elif t.value == SIEGE_SHIP_CONSTRUCTION:
                text += f"construction of {t.name_2}, but you destroyed it before it could be completed.\n"
            elif t.value == SIEGE_PD_CONSTRUCTION:
                text += (
                    "construction of planetary defenses, but you destroyed them "
                    "before they could be completed.\n"
                )
            elif t.value in (SIEGE_TRANSFER_TO, SIEGE_TRANSFER_FROM):
                plural = "s" if t.number_1 > 1 else ""
                direction = " to PL " if t.value == SIEGE_TRANSFER_TO else " from PL "
                text += (
                    f"transfer of {t.number_1} {ITEMS[t.number_2].name}{plural}{direction}{t.name_2}, "
                    "but you destroyed them in transit.\n"
                )
            else:
                raise InternalConsistencyError(f"unknown siege detection code {t.value}")
            log.event(text)

    def deliver_messages(self, species: Species, log: EventLog) -> None:
        for t in self._entries(TransactionType.MESSAGE_TO_SPECIES, lambda t: t.number_2 == species.number):
            log.event(f"\n  You received the following message from SP {t.name_1}:\n\n")
            log.write(self.message_loader(t.value))
            log.write("\n  *** End of Message ***\n\n")
            logger.debug(f"{species.id} received message {t.value} from SP {t.name_1}")


def finish_turn(game_dir: Path, rng: GameRNG) -> TurnResult:
    """Finish the current turn of the game stored in game_dir.

    Reads the galaxy, ledger and order files from the current turn's
    directory, processes the turn, and writes the galaxy and event logs into
    the next turn's directory. game.json is rewritten last.

    Raises:
        FileNotFoundError: If game.json or the turn's state is missing
        FarHorizonsError: If processing fails; nothing is written
    """
    game_dir = Path(game_dir)
    game = store.load_game(game_dir)
    turn_path = store.turn_path(game_dir, game.current_turn)
    galaxy = store.load_galaxy(turn_path)
    transactions = store.load_ledger(turn_path)
    logger.info(f"Loaded {len(transactions)} transactions from {turn_path}")

    orders = {s.number for s in galaxy.species if store.orders_received(turn_path, s.number)}
    initial_logs = {}
    if game.is_setup_turn:
        # The home system scans written at creation open the first log
        initial_logs = {
            s.number: store.read_text_if_exists(store.log_file(turn_path, s.number)) for s in galaxy.species
        }

    processor = TurnProcessor(
        galaxy,
        game,
        transactions,
        rng,
        message_loader=partial(store.load_message, game_dir),
        orders_received=orders,
        initial_logs=initial_logs,
    )
    result = processor.run()

    next_path = store.turn_path(game_dir, game.current_turn)
    store.save_galaxy(next_path, galaxy)
    for number, text in result.logs.items():
        store.write_text(store.log_file(next_path, number), text)
    store.save_game(game_dir, game)
    logger.info(f"Saved turn {game.current_turn} to {next_path}")
    return result
