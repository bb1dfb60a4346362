"""Tests for system scans and the galaxy listing."""

from farhorizons.interface.scan import list_galaxy, scan_galaxy_at, scan_system
from farhorizons.models import Coords, StarColor, StarType, System


class TestScanSystem:
    """Test the scan of a single system."""

    def test_header_and_planet_line(self, galaxy):
        """Test the scan shows the star and one fixed-width line per planet."""
        text = scan_system(galaxy.system_at(Coords(5, 5, 5)))
        assert text.startswith("Coordinates:\tx = 5\ty = 5\tz = 5\tstellar type = MG5   3 planets.\n\n")
        assert "  1   12  1.00  11    10    1.00   99  N2(78%),O2(20%)\n" in text

    def test_life_support_for_species(self, galaxy):
        """Test a scanning species sees its life support needs."""
        humans = galaxy.species[0]
        planet = galaxy.planet_at(humans.home)
        planet_2 = galaxy.planet_at(Coords(5, 5, 5, 2))
        planet_2.temperature_class += 1
        text = scan_system(galaxy.system_at(humans.home), humans, planet)
        assert "  2   12  1.00  12    10    1.00    3  N2(78%),O2(20%)\n" in text
        assert "  3   12  1.00  11    10    1.00    0  N2(78%),O2(20%)\n" in text

    def test_wormhole_terminus(self, galaxy):
        """Test a wormhole terminus is announced."""
        system = galaxy.system_at(Coords(5, 5, 5))
        system.wormhole = Coords(5, 9, 5)
        assert "This star system is the terminus of a natural wormhole.\n" in scan_system(system)

    def test_nova_remnant(self):
        """Test a system without planets is a nova remnant."""
        system = System(coords=Coords(1, 1, 1), star_type=StarType.GIANT, color=StarColor.RED, size=9)
        assert "This star is a nova remnant." in scan_system(system)

    def test_nothing_there(self, galaxy):
        """Test scanning empty space says so."""
        assert scan_galaxy_at(galaxy, Coords(1, 2, 3)) == (
            "Scan Report: There is no star system at x = 1, y = 2, z = 3.\n"
        )


class TestListGalaxy:
    """Test the game master's galaxy listing."""

    def test_totals(self, galaxy):
        """Test the listing ends with the star counts."""
        text = list_galaxy(galaxy)
        assert text.startswith("x = 5\ty = 5\tz = 5\tstellar type = MG5\n")
        assert "It contains 0 dwarf stars, 0 degenerate stars, 3 main sequence stars,\n" in text
        assert text.endswith("    and 0 giant stars, for a total of 3 stars.\n")

    def test_planets(self, galaxy):
        """Test the planet listing marks home planets and counts everything."""
        text = list_galaxy(galaxy, planets=True)
        assert "System #1:\tx = 5\ty = 5\tz = 5\tstellar type = MG5\t3 planets.\n" in text
        assert " HOM #3 dia= 12 g=1.00 tc=11 pc=10 md=1.00   0 N2(78%),O2(20%)\n" in text
        assert "The total number of planets in the galaxy is 8.\n" in text
        assert "The galaxy was designed for 2 species.\n" in text

    def test_wormholes_listed_once(self, galaxy):
        """Test each wormhole pair is listed once."""
        galaxy.system_at(Coords(5, 5, 5)).wormhole = Coords(5, 9, 5)
        galaxy.system_at(Coords(5, 9, 5)).wormhole = Coords(5, 5, 5)
        assert list_galaxy(galaxy, wormholes=True) == "Wormhole #1: from 5 5 5 to 5 9 5\n"
