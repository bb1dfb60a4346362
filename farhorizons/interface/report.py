"""Species status reports.

A report opens with the event log of the turn just finished, then lists the
species' technology, atmosphere, fleet upkeep and contacts, one block per
producing colony, a one-line listing for other planets and loose ships, and
finally every alien seen in a system the species occupies.

Rendering never changes the game state, so rendering the same turn twice
gives byte-identical text. The only bookkeeping (which ships have already
been listed) lives in the writer and is discarded afterwards.
"""

from dataclasses import dataclass

from ..errors import InternalConsistencyError
from ..engine.colonies import split_by_difficulty
from ..engine.economy import colony_production, spendable
from ..engine.locations import Location, find_locations
from ..models import ITEMS, Colony, Coords, Galaxy, ItemKind, Planet, Ship, ShipClass, Species, Tech
from ..utils.constants import FULL_PERCENT
from ..utils.names import fixed_point

SEPARATOR = "\n\n* * * * * * * * * * * * * * * * * * * * * * * * *\n"
SHIP_NAME_WIDTH = 50
ALIEN_COLONY_WIDTH = 53


@dataclass
class ColonyFigures:
    """Production figures for a populated colony, as shown to its owner."""

    ls_needed: int
    penalty: int  # Percent
    raw_materials: int  # Mined this turn, after penalty and efficiency
    capacity: int  # After penalty and efficiency
    available: int  # Spendable this turn, before fleet upkeep
    excess: int  # Raw materials beyond capacity, which may be recycled
    fleet_percent_cost: int  # Hundredths of a percent, capped at 100%


def colony_figures(species: Species, colony: Colony, planet: Planet, home_planet: Planet) -> ColonyFigures:
    """Work out what a colony produces and can spend this turn."""
    production = colony_production(species, colony, planet, home_planet)
    efficiency = planet.econ_efficiency
    raw_materials = (efficiency * production.raw_materials + 50) // 100
    capacity = (efficiency * production.capacity + 50) // 100

    stock = raw_materials + colony.items[ItemKind.RM]
    available = min(stock, capacity)
    return ColonyFigures(
        ls_needed=production.ls_needed,
        penalty=production.penalty,
        raw_materials=raw_materials,
        capacity=capacity,
        available=available,
        excess=max(stock - capacity, 0),
        fleet_percent_cost=min(species.fleet_percent_cost, FULL_PERCENT),
    )


def _items_suffix(items: list[int]) -> str:
    """Return ", 5 CU, 10 IU" for every item held."""
    return "".join(
        f", {quantity} {ITEMS[kind].abbr}" for kind, quantity in enumerate(items) if quantity > 0
    )


def _item_label(kind: int) -> str:
    item = ITEMS[kind]
    return f"{item.name}s ({item.abbr},C{item.carry_capacity})"


class ReportWriter:
    """Renders one species' status report for one turn."""

    def __init__(
        self,
        galaxy: Galaxy,
        species: Species,
        turn: int,
        log_text: str | None = None,
        test_mode: bool = False,
    ):
        """Create a writer.

        Args:
            galaxy: Galaxy at the start of the turn
            species: Species the report is for
            turn: Turn being reported
            log_text: The species' event log for the turn, None if it has none
            test_mode: Hide where ships arriving through a wormhole ended up
        """
        self.galaxy = galaxy
        self.species = species
        self.turn = turn
        self.log_text = log_text
        self.test_mode = test_mode
        self.home_planet = self._planet(species.home, f"{species.id} home planet")
        self._listed: set[int] = set()  # Indexes into species.ships

    def render(self) -> str:
        """Return the complete report."""
        self._listed = set()
        parts = [
            self.render_log(),
            self.render_header(),
            self.render_tech_levels(),
            self.render_gases(),
            self.render_fleet_maintenance(),
            self.render_species_list("Species met", lambda n: True),
            self.render_species_list("Allies", self.species.is_ally),
            self.render_species_list("Enemies", self.species.is_enemy),
            "\nEconomic units = %d\n" % self.species.econ_units,
        ]
        for colony in self.species.colonies:
            if colony.coords.is_off_map:
                continue
            if colony.mi_base == 0 and colony.ma_base == 0 and not colony.is_home:
                continue
            parts.append(self.render_colony(colony))

        other = self.render_other_planets() + self.render_loose_ships()
        if other:
            parts.append(SEPARATOR + "\n\nOther planets and ships:\n\n" + other)

        parts.append(SEPARATOR)
        parts.append(self.render_aliens(find_locations(self.galaxy)))
        return "".join(parts)

    def _planet(self, coords: Coords, label: str) -> Planet:
        planet = self.galaxy.planet_at(coords)
        if planet is None:
            raise InternalConsistencyError(f"{label} is at {coords.id}, which has no planet")
        return planet

    def _ships(self) -> list[tuple[int, Ship]]:
        return list(enumerate(self.species.ships))

    # ---------- species sections ----------

    def render_log(self) -> str:
        if self.log_text is None:
            return ""
        if self.turn - 1 > 0:
            return "\n\n\t\t\tEVENT LOG FOR TURN %d\n" % (self.turn - 1) + self.log_text
        return self.log_text

    def render_header(self) -> str:
        sp = self.species
        return (
            "\n\t\t\t SPECIES STATUS\n\n\t\t\tSTART OF TURN %d\n\n" % self.turn
            + "Species name: %s\n" % sp.name
            + "Government name: %s\n" % sp.government_name
            + "Government type: %s\n" % sp.government_type
        )

    def render_tech_levels(self) -> str:
        lines = ["\nTech Levels:\n"]
        for tech in Tech:
            level = self.species.tech_level[tech]
            line = "   %s = %d" % (tech.label, level)
            if self.species.tech_knowledge[tech] > level:
                line += "/%d" % self.species.tech_knowledge[tech]
            lines.append(line + "\n")
        return "".join(lines)

    def render_gases(self) -> str:
        sp = self.species
        text = "\n\n\nAtmospheric Requirement: %d%%-%d%% %s" % (
            sp.required_gas_min,
            sp.required_gas_max,
            sp.required_gas.char,
        )
        text += "\nNeutral Gases:" + ",".join(" %s" % g.char for g in sp.neutral_gases)
        text += "\nPoisonous Gases:" + ",".join(" %s" % g.char for g in sp.poison_gases)
        return text + "\n"

    def render_fleet_maintenance(self) -> str:
        percent = self.species.fleet_percent_cost
        return "\nFleet maintenance cost = %d (%d.%02d%% of total production)\n" % (
            self.species.fleet_cost,
            percent // 100,
            percent % 100,
        )

    def render_species_list(self, title: str, include) -> str:
        """List the other species met that also pass include(number)."""
        names = [
            "SP %s" % alien.name
            for alien in self.galaxy.species
            if alien.number != self.species.number
            and self.species.has_contact(alien.number)
            and include(alien.number)
        ]
        if not names:
            return ""
        return "\n%s: %s\n" % (title, ", ".join(names))

    # ---------- producing colonies ----------

    def render_colony(self, colony: Colony) -> str:
        """Render the full block for a producing colony or the home planet."""
        planet = self._planet(colony.coords, f"PL {colony.name}")
        c = colony.coords
        out = [
            SEPARATOR,
            "\n\n%s: PL %s" % (colony.kind_label(), colony.name),
            "\n   Coordinates: x = %d, y = %d, z = %d, planet number %d\n" % (c.x, c.y, c.z, c.orbit),
        ]

        if colony.is_home and colony.economic_base < self.species.hp_original_base:
            needed = self.species.hp_original_base - colony.economic_base
            ius, aus = split_by_difficulty(needed, colony.mi_base, colony.ma_base, planet.mining_difficulty)
            out.append("\nWARNING! Home planet has not yet completely recovered from bombardment!\n")
            out.append("         %d IUs and %d AUs will have to be installed for complete recovery.\n" % (ius, aus))

        if colony.populated:
            out.append(self.render_production(colony, planet))

        inventory = [
            "   %s = %d" % (_item_label(kind), quantity)
            + (" (warship equivalence = %d tons)" % (50 * quantity) if kind == ItemKind.PD else "")
            + "\n"
            for kind, quantity in enumerate(colony.items)
            if quantity > 0 and kind != ItemKind.RM
        ]
        if inventory:
            out.append("\nPlanetary inventory:\n")
            out.extend(inventory)

        out.append(self.render_ships_at(colony))
        return "".join(out)

    def render_production(self, colony: Colony, planet: Planet) -> str:
        figures = colony_figures(self.species, colony, planet, self.home_planet)
        special = colony.is_mining or colony.is_resort
        out = []

        if not special:
            out.append("\nAvailable population units = %d\n" % colony.pop_units)
        if colony.siege_eff != 0:
            out.append("\nWARNING!  This planet is currently under siege and will remain\n")
            out.append("  under siege until the combat phase of the next turn!\n")
        if colony.use_on_ambush > 0:
            out.append("\nIMPORTANT!  This planet has made preparations for an ambush!\n")
        if colony.hidden:
            out.append("\nIMPORTANT!  This planet is actively hiding from alien observation!\n")

        out.append("\nProduction penalty = %d%% (LSN = %d)\n" % (figures.penalty, figures.ls_needed))
        out.append("\nEconomic efficiency = %d%%\n" % planet.econ_efficiency)

        if colony.mi_base > 0:
            out.append(
                "\nMining base = %s (MI = %d, MD = %s)\n"
                % (
                    fixed_point(colony.mi_base),
                    self.species.tech_level[Tech.MI],
                    fixed_point(planet.mining_difficulty, 100),
                )
            )
            if colony.is_mining:
                gross, upkeep, net = spendable((2 * figures.raw_materials) // 3, figures.fleet_percent_cost)
                out.append(
                    "   This mining colony will generate %d - %d = %d economic units this turn.\n"
                    % (gross, upkeep, net)
                )
            else:
                out.append("   %d raw material units will be produced this turn.\n" % figures.raw_materials)

        if colony.ma_base > 0:
            if colony.is_resort:
                out.append("\n")
            out.append(
                "Manufacturing base = %s (MA = %d)\n" % (fixed_point(colony.ma_base), self.species.tech_level[Tech.MA])
            )
            if colony.is_resort:
                gross, upkeep, net = spendable((2 * figures.capacity) // 3, figures.fleet_percent_cost)
                out.append(
                    "   This resort colony will generate %d - %d = %d economic units this turn.\n"
                    % (gross, upkeep, net)
                )
            else:
                out.append("   Production capacity this turn will be %d.\n" % figures.capacity)

        if colony.items[ItemKind.RM] > 0:
            out.append(
                "\n%s carried over from last turn = %d\n" % (_item_label(ItemKind.RM), colony.items[ItemKind.RM])
            )

        if not special:
            gross, upkeep, net = spendable(figures.available, figures.fleet_percent_cost)
            out.append("\nTotal available for spending this turn = %d - %d = %d\n" % (gross, upkeep, net))
            out.append("\nShipyard capacity = %d\n" % colony.shipyards)
        return "".join(out)

    def render_ships_at(self, colony: Colony) -> str:
        """List the species' ships at a colony: starbases, then transports, then the rest."""
        here = [(i, ship) for i, ship in self._ships() if ship.coords.same_planet(colony.coords)]
        ordered = (
            [(i, s) for i, s in here if s.ship_class == ShipClass.BA]
            + [(i, s) for i, s in here if s.ship_class == ShipClass.TR]
            + [(i, s) for i, s in here if s.ship_class not in (ShipClass.BA, ShipClass.TR)]
        )
        if not ordered:
            return ""

        out = [
            "\nShips at PL %s:\n" % colony.name,
            "  Name                          " + "                 Cap. Cargo\n",
            " " + "-" * 76 + "\n",
        ]
        for index, ship in ordered:
            self._listed.add(index)
            name = ship.display_name(ignore_field_distorters=True)
            line = "  " + name + " " * (SHIP_NAME_WIDTH - len(name)) + "%4d  " % ship.capacity
            if ship.status.under_construction:
                line += "Left to pay = %d\n" % ship.remaining_cost
            else:
                line += ship.cargo() + "\n"
            out.append(line)
        return "".join(out)

    # ---------- other planets and ships ----------

    def render_other_planets(self) -> str:
        """One line per planet with no economic base, followed by its ships."""
        out = []
        for colony in self.species.colonies:
            if colony.coords.is_off_map:
                continue
            if colony.mi_base > 0 or colony.ma_base > 0 or colony.is_home:
                continue
            c = colony.coords
            out.append("%4d%3d%3d #%d\tPL %s" % (c.x, c.y, c.z, c.orbit, colony.name))
            out.append(_items_suffix(colony.items) + "\n")

            for index, ship in self._ships():
                if index in self._listed or not ship.coords.same_planet(colony.coords):
                    continue
                self._listed.add(index)
                out.append(self._ship_line(ship))
        return "".join(out)

    def render_loose_ships(self) -> str:
        """Ships not yet listed, grouped with the other unlisted ships in their system."""
        out = []
        for index, ship in self._ships():
            if index in self._listed:
                continue
            self._listed.add(index)
            if ship.coords.is_off_map:
                continue

            name = ship.display_name(ignore_field_distorters=True)
            lost = ship.status.jumped_in_combat or ship.status.forced_jump
            if lost or (self.test_mode and ship.arrived_via_wormhole):
                out.append("  ?? ?? ??\t%s%s\n" % (name, _items_suffix(ship.items)))
                continue

            c = ship.coords
            out.append("%4d%3d%3d\t%s%s\n" % (c.x, c.y, c.z, name, _items_suffix(ship.items)))
            for other_index, other in self._ships():
                if other_index in self._listed or other.coords.is_off_map:
                    continue
                if not other.coords.same_system(ship.coords):
                    continue
                self._listed.add(other_index)
                out.append(self._ship_line(other))
        return "".join(out)

    def _ship_line(self, ship: Ship) -> str:
        return "\t\t%s%s\n" % (ship.display_name(ignore_field_distorters=True), _items_suffix(ship.items))

    # ---------- aliens ----------

    def render_aliens(self, locations: list[Location]) -> str:
        """List the alien colonies and ships in every system the species occupies."""
        out = []
        for mine in locations:
            if mine.species != self.species.number:
                continue
            header = self._alien_header(mine)
            printed = False
            for theirs in locations:
                if theirs.species == self.species.number or not theirs.coords.same_system(mine.coords):
                    continue
                alien = self.galaxy.species_by_number(theirs.species)
                if alien is None:
                    continue
                lines = self._alien_colonies(alien, mine) + self._alien_ships(alien, mine)
                if lines and not printed:
                    out.append(header)
                    printed = True
                out.extend(lines)
        return "".join(out)

    def _alien_header(self, location: Location) -> str:
        c = location.coords
        header = "\n\nAliens at x = %d, y = %d, z = %d" % (c.x, c.y, c.z)
        ours = next(
            (
                colony
                for colony in self.species.colonies
                if not colony.coords.is_off_map and colony.coords.same_system(c)
            ),
            None,
        )
        if ours is not None:
            header += " (PL %s star system)" % ours.name
        return header + ":\n"

    def _we_populate(self, coords: Coords) -> bool:
        return any(c.populated and c.coords.same_planet(coords) for c in self.species.colonies)

    def _alien_colonies(self, alien: Species, location: Location) -> list[str]:
        out = []
        for colony in alien.colonies:
            if colony.coords.is_off_map or not colony.coords.same_system(location.coords):
                continue
            if not colony.populated:
                continue
            neighbours = self._we_populate(colony.coords)
            if colony.hidden and not neighbours:
                continue

            industry = colony.economic_base
            if colony.is_mining:
                label = "Mining colony"
            elif colony.is_resort:
                label = "Resort colony"
            elif colony.is_home:
                label = "Home planet"
            elif industry > 0:
                label = "Colony planet"
            else:
                label = "Uncolonized planet"

            line = "  %s PL %s (pl #%d)" % (label, colony.name, colony.coords.orbit)
            out.append(line.ljust(ALIEN_COLONY_WIDTH) + "SP %s\n" % alien.name)

            if industry == 0:
                out.append("      (No economic base.)\n")
            else:
                approx = (industry + 5) // 10 if industry < 100 else ((industry + 50) // 100) * 10
                out.append("      (Economic base is approximately %d.)\n" % approx)

            if neighbours:
                defences = colony.items[ItemKind.PD]
                if defences == 1:
                    out.append("      (There is 1 %s on the planet.)\n" % ITEMS[ItemKind.PD].name)
                elif defences > 1:
                    out.append("      (There are %d %ss on the planet.)\n" % (defences, ITEMS[ItemKind.PD].name))
                if colony.shipyards == 1:
                    out.append("      (There is 1 shipyard on the planet.)\n")
                elif colony.shipyards > 1:
                    out.append("      (There are %d shipyards on the planet.)\n" % colony.shipyards)

            if colony.hidden:
                out.append("      (Colony is actively hiding from alien observation.)\n")
        return out

    def _alien_ships(self, alien: Species, location: Location) -> list[str]:
        out = []
        for ship in alien.ships:
            if ship.coords.is_off_map or not ship.coords.same_system(location.coords):
                continue
            # Nothing hides on the surface of a planet we populate
            can_hide = not self._we_populate(ship.coords)
            if can_hide and (ship.status.on_surface or ship.status.under_construction):
                continue

            name = ship.display_name()
            line = "  " + name + " " * (SHIP_NAME_WIDTH - len(name) - 4) + " "
            if ship.is_distorted():
                line += "SP %d" % alien.distorted_number()
            else:
                line += "SP %s" % alien.name
            out.append(line + "\n")
        return out


def render_report(
    galaxy: Galaxy,
    species: Species,
    turn: int,
    log_text: str | None = None,
    test_mode: bool = False,
) -> str:
    """Render a species' status report. See ReportWriter."""
    return ReportWriter(galaxy, species, turn, log_text, test_mode).render()
