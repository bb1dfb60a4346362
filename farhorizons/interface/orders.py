"""Order templates appended to each species' report.

The template has one section per order phase. Most sections are left for
the player to fill in, but a species with AUTO orders gets installs,
unloads, exploration jumps, recycling, construction and development orders
worked out for it.

Working the template out needs some scratch state (ships already given a
jump, systems already claimed by an explorer, development still needed per
colony). All of it lives in the OrderWriter, so writing the template never
changes the game.
"""

import logging

from ..engine.economy import spendable
from ..errors import InternalConsistencyError
from ..models import Colony, Coords, Galaxy, ItemKind, Ship, ShipClass, ShipType, Species, Tech
from ..utils.names import commas
from .report import SEPARATOR, colony_figures

logger = logging.getLogger(__name__)

SELF_SUFFICIENT_BASE = 2000  # Economic base (x10) of a colony that needs no more development


def mishap_text(ship: Ship, dest: Coords, gravitics: int) -> str:
    chance = ship.mishap_chance(dest, gravitics)
    return "mishap chance = %d.%02d%%" % (chance // 100, chance % 100)


def _location_code(ship: Ship, prefix: str = "", suffix: str = "") -> str:
    if ship.status.in_orbit:
        return "%sO%d%s" % (prefix, ship.coords.orbit, suffix)
    if ship.status.on_surface:
        return "%sL%d%s" % (prefix, ship.coords.orbit, suffix)
    return "%sD%s" % (prefix, suffix)


class OrderWriter:
    """Renders the order template for one species."""

    def __init__(self, galaxy: Galaxy, species: Species):
        self.galaxy = galaxy
        self.species = species
        self.home_planet = galaxy.planet_at(species.home)
        if self.home_planet is None:
            raise InternalConsistencyError(f"{species.id} home planet {species.home.id} does not exist")

        self._unloading: dict[int, Coords] = {}  # Ship index -> planned unloading point
        self._jumped: set[int] = set()  # Ships given a jump order
        self._dest: dict[int, Coords] = {}  # Ship index -> exploration target
        self._claimed: set[int] = set()  # System keys an explorer is already heading for
        self._ius_needed: dict[int, int] = {}  # Colony index -> IUs still needed
        self._aus_needed: dict[int, int] = {}

    def render(self) -> str:
        """Return the complete order section."""
        ships = self.species.ships
        self._unloading = {i: s.unloading_point for i, s in enumerate(ships) if s.unloading_point.is_set}
        self._jumped = set()
        self._dest = {}
        self._claimed = set()
        self._ius_needed = {i: c.ius_needed for i, c in enumerate(self.species.colonies)}
        self._aus_needed = {i: c.aus_needed for i, c in enumerate(self.species.colonies)}

        return "".join(
            [
                SEPARATOR,
                "\n\nORDER SECTION. Remove these two lines and everything above\n",
                "  them, and submit only the orders below.\n\n",
                self.render_combat(),
                self.render_pre_departure(),
                self.render_jumps(),
                self.render_production(),
                self.render_post_arrival(),
                self.render_strikes(),
            ]
        )

    @property
    def _gravitics(self) -> int:
        return self.species.tech_level[Tech.GV]

    def _target_colony(self, coords: Coords, ship: Ship) -> Colony:
        colony = self.species.colony_at(coords)
        if colony is None:
            raise InternalConsistencyError(f"{ship.name} is headed for {coords.id}, which is not a named planet")
        return colony

    def render_combat(self) -> str:
        return "START COMBAT\n; Place combat orders here.\n\nEND\n\n"

    def render_strikes(self) -> str:
        return "START STRIKES\n; Place strike orders here.\n\nEND\n"

    # ---------- pre-departure ----------

    def render_pre_departure(self) -> str:
        """Auto installs for every colony, and auto unloads for transports carrying colonists."""
        out = ["START PRE-DEPARTURE\n; Place pre-departure orders here.\n\n"]
        for colony in self.species.colonies:
            if colony.coords.is_off_map:
                continue
            if colony.auto_ius == 0 and colony.auto_aus == 0:
                out.append("\n")
            else:
                if colony.auto_ius:
                    out.append("\tInstall\t%d IU\tPL %s\n" % (colony.auto_ius, colony.name))
                if colony.auto_aus:
                    out.append("\tInstall\t%d AU\tPL %s\n" % (colony.auto_aus, colony.name))
            if self.species.auto_orders:
                out.extend(self._unload_orders(colony))
        out.append("END\n\n")
        return "".join(out)

    def _unload_orders(self, colony: Colony) -> list[str]:
        """Unload colonists at a populated colony that still needs development.

        Transports never unload where they were just loaded, and never in the
        home system.
        """
        out = []
        for index, ship in enumerate(self.species.ships):
            if ship.coords.is_off_map or not ship.coords.same_planet(colony.coords):
                continue
            if ship.status.jumped_in_combat or ship.status.forced_jump:
                continue
            if ship.ship_class != ShipClass.TR or ship.items[ItemKind.CU] < 1:
                continue
            if ship.loading_point.is_set and ship.loading_point.same_planet(colony.coords):
                continue
            if not colony.populated or colony.economic_base >= SELF_SUFFICIENT_BASE:
                continue
            if colony.coords.same_system(self.species.home):
                continue

            out.append("\tUnload\tTR%d%s %s\n\n" % (ship.tonnage, ship.ship_type.suffix, ship.name))
            self._unloading[index] = colony.coords
        return out

    # ---------- jumps ----------

    def render_jumps(self) -> str:
        out = ["START JUMPS\n; Place jump orders here.\n\n"]
        for index, ship in enumerate(self.species.ships):
            if ship.coords.is_off_map or ship.status.jumped_in_combat or ship.status.forced_jump:
                continue
            name = ship.display_name(ignore_field_distorters=True)

            if ship.auto_jump_target.is_set:
                target = self._target_colony(ship.auto_jump_target, ship)
                out.append(
                    "\tJump\t%s, PL %s\t; Age %d, %s\n\n"
                    % (name, target.name, ship.age, mishap_text(ship, target.coords, self._gravitics))
                )
                self._jumped.add(index)
            elif index in self._unloading:
                target = self._target_colony(self._unloading[index], ship)
                out.append(
                    "\tJump\t%s, PL %s\t; %s\n\n" % (name, target.name, mishap_text(ship, target.coords, self._gravitics))
                )
                self._jumped.add(index)

        if self.species.auto_orders:
            out.extend(self._exploration_jumps())
        out.append("END\n\n")
        return "".join(out)

    def _exploration_jumps(self) -> list[str]:
        """Send idle single-tonnage transports to the nearest unvisited systems.

        Other idle FTL ships get a jump order with the destination left for
        the player to fill in.
        """
        out = []
        systems = self.galaxy.all_systems()
        for index, ship in enumerate(self.species.ships):
            if ship.coords.is_off_map or index in self._jumped or ship.status.under_construction:
                continue
            if ship.status.jumped_in_combat or ship.status.forced_jump:
                continue
            if ship.ship_type != ShipType.FTL:
                continue

            line = "\tJump\t%s, " % ship.display_name(ignore_field_distorters=True)
            c = ship.coords
            if ship.ship_class == ShipClass.TR and ship.tonnage == 1:
                target = self.species.closest_unvisited_system(c, systems, self._claimed)
                line += "???" if target is None else str(target.coords)
                line += "\n\t\t\t; Age %d, now at %d %d %d, " % (ship.age, c.x, c.y, c.z)
                line += _location_code(ship, suffix=", ")
                if target is None:
                    self._dest[index] = Coords.unset()
                    line += "Mishap chance = ???"
                else:
                    self._claimed.add(target.key)
                    self._dest[index] = target.coords
                    line += mishap_text(ship, target.coords, self._gravitics)
            else:
                line += "???\t; Age %d, now at %d %d %d" % (ship.age, c.x, c.y, c.z)
                line += _location_code(ship, prefix=", ")
            out.append(line + "\n")
        return out

    # ---------- production ----------

    def _to_spend(self, colony: Colony) -> int:
        """Economic units a colony yields this turn, after fleet upkeep."""
        if not colony.populated:
            return 0
        planet = self.galaxy.planet_at(colony.coords)
        if planet is None:
            raise InternalConsistencyError(f"PL {colony.name} is at {colony.coords.id}, which has no planet")
        figures = colony_figures(self.species, colony, planet, self.home_planet)
        if colony.is_mining:
            amount = (2 * figures.raw_materials) // 3
        elif colony.is_resort:
            amount = (2 * figures.capacity) // 3
        else:
            amount = figures.available
        return spendable(amount, figures.fleet_percent_cost)[2]

    def render_production(self) -> str:
        """One PRODUCTION block per producing colony, last named planet first."""
        out = ["START PRODUCTION\n\n", ";   Economic units at start of turn = %d\n\n" % self.species.econ_units]
        colonies = list(enumerate(self.species.colonies))
        for index, colony in reversed(colonies):
            if colony.coords.is_off_map:
                continue
            if colony.mi_base == 0 and not colony.is_resort:
                continue
            if colony.ma_base == 0 and not colony.is_mining:
                continue
            out.append(self._production_block(index, colony))
        out.append("END\n\n")
        return "".join(out)

    def _production_block(self, index: int, colony: Colony) -> str:
        out = ["    PRODUCTION PL %s\n" % colony.name]
        to_spend = self._to_spend(colony)
        if colony.is_mining:
            out.append("    ; The above PRODUCTION order is required for this mining colony, even\n")
            out.append("    ;  if no other production orders are given for it. This mining colony\n")
            out.append("    ;  will generate %d economic units this turn.\n" % to_spend)
        elif colony.is_resort:
            out.append("    ; The above PRODUCTION order is required for this resort colony, even\n")
            out.append("    ;  though no other production orders can be given for it.  This resort\n")
            out.append("    ;  colony will generate %d economic units this turn.\n" % to_spend)
        else:
            c = colony.coords
            out.append(
                "    ; Place production orders here for planet %s (sector %d %d %d #%d).\n"
                % (colony.name, c.x, c.y, c.z, c.orbit)
            )
            line = "    ;  Avail pop = %d, shipyards = %d, to spend = %d" % (
                colony.pop_units,
                colony.shipyards,
                to_spend,
            )
            if colony.is_home:
                line += " (max = %d)" % (5 * to_spend) if self.species.hp_original_base else " (max = no limit)"
            else:
                line += " (max = %d)" % (2 * to_spend)
            out.append(line + ".\n\n")

        ius, aus = self._ius_needed[index], self._aus_needed[index]
        if ius:
            out.append("\tBuild\t%d IU\n" % ius)
        if aus:
            out.append("\tBuild\t%d AU\n" % aus)
        if ius or aus:
            out.append("\n")

        if self.species.auto_orders and not (colony.is_mining or colony.is_resort):
            out.extend(self._auto_production(index, colony))
        return "".join(out)

    def _auto_production(self, index: int, colony: Colony) -> list[str]:
        out = []
        planet = self.galaxy.planet_at(colony.coords)
        if colony.populated and planet is not None:
            excess = colony_figures(self.species, colony, planet, self.home_planet).excess
            if excess // 5 > 0:
                out.append("\tRecycle\t%d RM\n\n" % (5 * (excess // 5)))

        ships = list(enumerate(self.species.ships))
        for ship_index, ship in ships:
            if ship.coords.is_off_map or not ship.auto_jump_target.is_set:
                continue
            if not ship.auto_jump_target.same_planet(colony.coords):
                continue
            unloading = self._unloading.get(ship_index)
            target = self.species.colony_at(unloading) if unloading is not None else None
            if target is None:
                continue
            out.append(
                "\tDevelop\tPL %s, TR%d%s %s\n\n" % (target.name, ship.tonnage, ship.ship_type.suffix, ship.name)
            )

        for _, ship in ships:
            if ship.coords.is_off_map or not ship.coords.same_planet(colony.coords):
                continue
            if ship.status.under_construction:
                out.append(
                    "\tContinue\t%s, %d\t; Left to pay = %d\n\n"
                    % (ship.display_name(ignore_field_distorters=True), ship.remaining_cost, ship.remaining_cost)
                )
                continue
            if ship.ship_type != ShipType.STARBASE:
                continue
            growth = self.species.tech_level[Tech.MA] // 2 - ship.tonnage
            if growth < 1:
                continue
            out.append(
                "\tContinue\tBAS %s, %d\t; Current tonnage = %s\n\n"
                % (ship.name, 100 * growth, commas(10000 * ship.tonnage))
            )

        out.extend(self._develop_orders(index, colony))
        return out

    def _develop_orders(self, index: int, colony: Colony) -> list[str]:
        """Develop this colony, or its neighbours once it is self-sufficient.

        Colonists waiting on the planet and on transports there count towards
        the base already.
        """
        out = []
        base = colony.economic_base + self._ius_needed[index] + self._aus_needed[index]
        colonists = colony.items[ItemKind.CU] + sum(
            ship.items[ItemKind.CU] for ship in self.species.ships if ship.coords.same_planet(colony.coords)
        )
        base += colonists

        if colony.is_colony and base < SELF_SUFFICIENT_BASE and colony.pop_units > 0:
            units = min(colony.pop_units, SELF_SUFFICIENT_BASE - base)
            out.append("\tDevelop\t%d\n\n" % (2 * units))
            self._ius_needed[index] += units

        if base < SELF_SUFFICIENT_BASE and not colony.is_home:
            return out

        for other_index, other in enumerate(self.species.colonies):
            if other_index == index or other.coords.is_off_map:
                continue
            if not other.coords.same_system(colony.coords):
                continue
            other_base = other.economic_base + self._ius_needed[other_index] + self._aus_needed[other_index]
            if other_base == 0:
                continue
            other_base += min(other.items[ItemKind.IU] + other.items[ItemKind.AU], other.items[ItemKind.CU])
            if other_base >= SELF_SUFFICIENT_BASE:
                continue
            units = min(SELF_SUFFICIENT_BASE - other_base, colony.pop_units)
            out.append("\tDevelop\t%d\tPL %s\n\n" % (2 * units, other.name))
            self._aus_needed[other_index] += units
        return out

    # ---------- post-arrival ----------

    def render_post_arrival(self) -> str:
        out = ["START POST-ARRIVAL\n; Place post-arrival orders here.\n\n"]
        if self.species.auto_orders:
            out.append("\tAuto\n\n")
            out.extend(self._scan_orders())
        out.append("END\n\n")
        return "".join(out)

    def _scan_orders(self) -> list[str]:
        """Scan wherever an explorer lands unless the species already lives there."""
        out = []
        for index, ship in enumerate(self.species.ships):
            if ship.coords.is_off_map or ship.status.under_construction:
                continue
            if ship.ship_class != ShipClass.TR or ship.tonnage != 1 or ship.ship_type != ShipType.FTL:
                continue
            dest = self._dest.get(index, ship.dest)
            if dest.is_set and any(
                c.populated and not c.coords.is_off_map and c.coords.same_system(dest) for c in self.species.colonies
            ):
                continue
            out.append("\tScan\tTR1 %s\n" % ship.name)
        return out


def render_orders(galaxy: Galaxy, species: Species) -> str:
    """Render a species' order template. See OrderWriter."""
    logger.debug(f"Writing order template for {species.id}")
    return OrderWriter(galaxy, species).render()
