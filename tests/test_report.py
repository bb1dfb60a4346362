"""Tests for status reports and order templates."""

from farhorizons.interface.orders import render_orders
from farhorizons.interface.report import SHIP_NAME_WIDTH, colony_figures, render_report
from farhorizons.models import Colony, Coords, ItemKind

from factories import make_ship


def add_camp(galaxy):
    """Give the Humans a colony in the empty system with a loaded transport in orbit."""
    humans = galaxy.species[0]
    humans.colonies.append(
        Colony(name="Camp", coords=Coords(5, 9, 5, 1), populated=True, mi_base=100, ma_base=100, pop_units=10)
    )
    ferry = make_ship("Ferry", Coords(5, 9, 5, 1), in_orbit=True)
    ferry.items[ItemKind.CU] = 5
    humans.ships.append(ferry)
    return humans


class TestReport:
    """Test the species status report."""

    def test_header(self, galaxy):
        """Test the report opens with the turn and the species' names."""
        text = render_report(galaxy, galaxy.species[0], 3)
        assert "\t\t\tSTART OF TURN 3\n" in text
        assert "Species name: Humans\n" in text
        assert "Government name: Humans Council\n" in text
        assert "   Life Support = 4\n" in text
        assert "\nEconomic units = 500\n" in text

    def test_event_log_heading(self, galaxy):
        """Test the event log is headed with the turn it covers."""
        humans = galaxy.species[0]
        assert render_report(galaxy, humans, 3, "events").startswith("\n\n\t\t\tEVENT LOG FOR TURN 2\nevents")
        assert render_report(galaxy, humans, 1, "scan").startswith("scan")
        assert render_report(galaxy, humans, 3).startswith("\n\t\t\t SPECIES STATUS")

    def test_home_planet_block(self, galaxy):
        """Test the home planet shows production and the ships in orbit."""
        text = render_report(galaxy, galaxy.species[0], 1)
        assert "HOME PLANET: PL Earth" in text
        assert "   Coordinates: x = 5, y = 5, z = 5, planet number 3\n" in text
        assert "   300 raw material units will be produced this turn.\n" in text
        assert "   Production capacity this turn will be 250.\n" in text
        assert "\nTotal available for spending this turn = 250 - 0 = 250\n" in text
        name = "TR1 Explorer(A0O)"
        assert "  " + name + " " * (SHIP_NAME_WIDTH - len(name)) + "  10  \n" in text

    def test_knowledge_shown(self, galaxy):
        """Test knowledge above the usable level is shown after a slash."""
        humans = galaxy.species[0]
        humans.tech_knowledge[5] = 9
        assert "   Biology = 3/9\n" in render_report(galaxy, humans, 1)

    def test_species_met(self, galaxy):
        """Test met species, allies and enemies are listed."""
        humans = galaxy.species[0]
        humans.contact[2] = True
        humans.enemy[2] = True
        text = render_report(galaxy, humans, 1)
        assert "\nSpecies met: SP Kzinti\n" in text
        assert "\nEnemies: SP Kzinti\n" in text
        assert "Allies" not in text

    def test_alien_ship(self, galaxy):
        """Test an alien ship in our system is listed with its owner."""
        galaxy.species[1].ships[0].coords = Coords(5, 5, 5, 2)
        text = render_report(galaxy, galaxy.species[0], 1)
        assert "\n\nAliens at x = 5, y = 5, z = 5 (PL Earth star system):\n" in text
        name = "DD Claw(A0O)"
        assert "  " + name + " " * (SHIP_NAME_WIDTH - len(name) - 4) + " SP Kzinti\n" in text

    def test_distorted_alien_ship(self, galaxy):
        """Test a distorted ship hides its name and owner."""
        claw = galaxy.species[1].ships[0]
        claw.coords = Coords(5, 5, 5, 2)
        claw.items[ItemKind.FD] = claw.tonnage
        text = render_report(galaxy, galaxy.species[0], 1)
        assert "DD ???(O)" in text
        assert "SP 67\n" in text
        assert "Claw" not in text

    def test_no_aliens(self, galaxy):
        """Test no alien section when we share no system."""
        assert "Aliens at" not in render_report(galaxy, galaxy.species[0], 1)

    def test_other_planets(self, galaxy):
        """Test a named planet without a base gets a one-line entry."""
        humans = galaxy.species[0]
        empty = Colony(name="Rock", coords=Coords(5, 9, 5, 2))
        empty.items[ItemKind.IU] = 5
        humans.colonies.append(empty)
        text = render_report(galaxy, humans, 1)
        assert "\n\nOther planets and ships:\n\n" in text
        assert "   5  9  5 #2\tPL Rock, 5 IU\n" in text

    def test_rendering_twice_is_identical(self, galaxy):
        """Test rendering does not change the game."""
        humans = add_camp(galaxy)
        first = render_report(galaxy, humans, 4, "log") + render_orders(galaxy, humans)
        second = render_report(galaxy, humans, 4, "log") + render_orders(galaxy, humans)
        assert first == second
        assert all(not ship.unloading_point.is_set for ship in humans.ships)

    def test_colony_figures(self, galaxy):
        """Test excess raw materials are those beyond capacity."""
        humans = galaxy.species[0]
        planet = galaxy.planet_at(humans.home)
        figures = colony_figures(humans, humans.home_colony(), planet, planet)
        assert figures.available == 250
        assert figures.excess == 50

    def test_fleet_share_capped_when_spending(self, galaxy):
        """Test upkeep above total production is shown as is but spent at 100%."""
        humans = galaxy.species[0]
        humans.fleet_cost = 298
        humans.fleet_percent_cost = 11920
        planet = galaxy.planet_at(humans.home)
        assert colony_figures(humans, humans.home_colony(), planet, planet).fleet_percent_cost == 10000
        assert "Fleet maintenance cost = 298 (119.20% of total production)\n" in render_report(galaxy, humans, 3)


class TestOrders:
    """Test the order template."""

    def test_sections_in_order(self, galaxy):
        """Test every phase has its section, in order."""
        text = render_orders(galaxy, galaxy.species[0])
        sections = ["COMBAT", "PRE-DEPARTURE", "JUMPS", "PRODUCTION\n", "POST-ARRIVAL", "STRIKES"]
        positions = [text.index("START " + s) for s in sections]
        assert positions == sorted(positions)
        assert text.rstrip().endswith("END")

    def test_production_block(self, galaxy):
        """Test the home planet gets a production block with its budget."""
        text = render_orders(galaxy, galaxy.species[0])
        assert ";   Economic units at start of turn = 500\n" in text
        assert "    PRODUCTION PL Earth\n" in text
        assert ";  Avail pop = 1500, shipyards = 1, to spend = 250 (max = no limit).\n" in text

    def test_no_auto_orders(self, galaxy):
        """Test a species without AUTO gets empty jump and post-arrival sections."""
        text = render_orders(galaxy, galaxy.species[0])
        assert "START JUMPS\n; Place jump orders here.\n\nEND\n" in text
        assert "START POST-ARRIVAL\n; Place post-arrival orders here.\n\nEND\n" in text
        assert "Recycle" not in text

    def test_explorer_sent_to_nearest_unvisited(self, galaxy):
        """Test an idle TR1 is sent to the nearest unvisited system and told to scan."""
        humans = galaxy.species[0]
        humans.auto_orders = True
        text = render_orders(galaxy, humans)
        assert "\tJump\tTR1 Explorer(A0O), 8 5 5\n\t\t\t; Age 0, now at 5 5 5, O3, mishap chance = 3.00%\n" in text
        assert "\tAuto\n\n\tScan\tTR1 Explorer\n" in text

    def test_explorers_claim_different_systems(self, galaxy):
        """Test two explorers are not sent to the same system."""
        humans = galaxy.species[0]
        humans.auto_orders = True
        humans.ships.append(make_ship("Pathfinder", Coords(5, 5, 5, 3), in_orbit=True))
        text = render_orders(galaxy, humans)
        assert "TR1 Explorer(A0O), 8 5 5\n" in text
        assert "TR1 Pathfinder(A0O), 5 9 5\n" in text

    def test_nowhere_left_to_explore(self, galaxy):
        """Test an explorer with no unvisited system gets a blank destination."""
        humans = galaxy.species[0]
        humans.auto_orders = True
        for system in galaxy.all_systems():
            system.visited_by.add(1)
        text = render_orders(galaxy, humans)
        assert "\tJump\tTR1 Explorer(A0O), ???\n" in text
        assert "Mishap chance = ???" in text

    def test_recycle_excess(self, galaxy):
        """Test raw materials beyond capacity are recycled in multiples of five."""
        humans = galaxy.species[0]
        humans.auto_orders = True
        assert "\tRecycle\t50 RM\n\n" in render_orders(galaxy, humans)

    def test_unload_at_colony(self, galaxy):
        """Test a transport carrying colonists unloads at a developing colony."""
        humans = add_camp(galaxy)
        humans.auto_orders = True
        text = render_orders(galaxy, humans)
        assert "\tUnload\tTR1 Ferry\n\n" in text
        assert "\tJump\tTR1 Ferry(A0O), PL Camp\t; mishap chance = 0.00%\n\n" in text
        assert "    PRODUCTION PL Camp\n" in text
        # Camp comes after Earth, so its block is written first
        assert text.index("PRODUCTION PL Camp") < text.index("PRODUCTION PL Earth")

    def test_no_unload_where_loaded(self, galaxy):
        """Test a transport does not unload where it picked the colonists up."""
        humans = add_camp(galaxy)
        humans.auto_orders = True
        humans.ships[-1].loading_point = Coords(5, 9, 5, 1)
        assert "Unload" not in render_orders(galaxy, humans)

    def test_auto_installs(self, galaxy):
        """Test pending automatic installs are written for every colony."""
        humans = galaxy.species[0]
        humans.home_colony().auto_ius = 12
        text = render_orders(galaxy, humans)
        assert "\tInstall\t12 IU\tPL Earth\n" in text
