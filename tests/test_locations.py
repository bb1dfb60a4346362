"""Tests for the locations index and first contact."""

from farhorizons.engine.locations import Location, find_locations, update_contacts
from farhorizons.models import Colony, Coords, ItemKind, ShipStatus


class TestFindLocations:
    """Test the (species, system) presence index."""

    def test_one_entry_per_species_and_system(self, galaxy):
        """Test a colony and a ship in the same system give one entry."""
        assert find_locations(galaxy) == [
            Location(1, Coords(5, 5, 5)),
            Location(2, Coords(8, 5, 5)),
        ]

    def test_ship_only_presence(self, galaxy):
        """Test a ship alone in a system counts."""
        galaxy.species[0].ships[0].coords = Coords(5, 9, 5)
        locations = find_locations(galaxy)
        assert Location(1, Coords(5, 9, 5)) in locations

    def test_forced_jump_and_off_map_excluded(self, galaxy):
        """Test ships that were forced away or are off the map do not count."""
        humans = galaxy.species[0]
        humans.ships[0].coords = Coords(5, 9, 5)
        humans.ships[0].status = ShipStatus(forced_jump=True)
        kzinti = galaxy.species[1]
        kzinti.ships[0].coords = Coords(5, 9, 5, 99)

        locations = find_locations(galaxy)

        assert all(not loc.coords.same_system(Coords(5, 9, 5)) for loc in locations)

    def test_unpopulated_colony_excluded(self, galaxy):
        """Test a named but empty planet does not count."""
        galaxy.species[0].colonies.append(Colony(name="Empty", coords=Coords(5, 9, 5, 1)))
        assert Location(1, Coords(5, 9, 5)) not in find_locations(galaxy)


class TestUpdateContacts:
    """Test first contact."""

    def test_visible_ship_makes_contact(self, galaxy):
        """Test an alien ship in orbit in our system is met."""
        humans, kzinti = galaxy.species
        kzinti.ships[0].coords = Coords(5, 5, 5, 2)

        met = update_contacts(galaxy, humans, find_locations(galaxy))

        assert met == [2]
        assert humans.has_contact(2)
        assert not kzinti.has_contact(1)

    def test_contact_is_made_once(self, galaxy):
        """Test a species already met is not reported again."""
        humans, kzinti = galaxy.species
        kzinti.ships[0].coords = Coords(5, 5, 5, 2)
        locations = find_locations(galaxy)
        update_contacts(galaxy, humans, locations)

        assert update_contacts(galaxy, humans, locations) == []

    def test_distorted_ship_unseen(self, galaxy):
        """Test a ship full of field distortion units is not seen."""
        humans, kzinti = galaxy.species
        claw = kzinti.ships[0]
        claw.coords = Coords(5, 5, 5, 2)
        claw.items[ItemKind.FD] = claw.tonnage

        assert update_contacts(galaxy, humans, find_locations(galaxy)) == []
        assert not humans.has_contact(2)

    def test_hidden_colony_seen_by_neighbours(self, galaxy):
        """Test a hidden colony is only seen from the same planet."""
        humans, kzinti = galaxy.species
        kzinti.ships = []
        kzinti.colonies.append(
            Colony(name="Burrow", coords=Coords(5, 5, 5, 1), populated=True, hidden=True, mi_base=10)
        )
        assert update_contacts(galaxy, humans, find_locations(galaxy)) == []

        humans.colonies.append(Colony(name="Camp", coords=Coords(5, 5, 5, 1), populated=True, mi_base=10))
        assert update_contacts(galaxy, humans, find_locations(galaxy)) == [2]

    def test_other_systems_ignored(self, galaxy):
        """Test aliens elsewhere are not met."""
        humans = galaxy.species[0]
        assert update_contacts(galaxy, humans, find_locations(galaxy)) == []
