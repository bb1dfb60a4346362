"""Shared fixtures: a small hand-built galaxy with two species."""

import pytest

from farhorizons.models import Coords, Galaxy, ShipClass
from farhorizons.utils import GameRNG

from factories import make_ship, make_species, make_system


@pytest.fixture
def galaxy():
    """Two species in neighbouring systems, plus one empty system.

    Humans live on (5 5 5) #3 with a transport in orbit. Kzinti live on
    (8 5 5) #3 with a destroyer in orbit. (5 9 5) has two planets and has
    not been visited by anyone.
    """
    g = Galaxy(id="test", name="Test", radius=10, d_num_species=2)
    home_a = make_system(5, 5, 5, home_orbit=3)
    home_b = make_system(8, 5, 5, home_orbit=3)
    empty = make_system(5, 9, 5, n_planets=2)
    for system in (home_a, home_b, empty):
        g.add_system(system)
    home_a.home_species = 1
    home_b.home_species = 2
    home_a.visited_by.add(1)
    home_b.visited_by.add(2)

    humans = make_species(1, "Humans", Coords(5, 5, 5, 3), "Earth")
    humans.ships.append(make_ship("Explorer", Coords(5, 5, 5, 3), in_orbit=True))
    kzinti = make_species(2, "Kzinti", Coords(8, 5, 5, 3), "Kzinhome")
    kzinti.ships.append(make_ship("Claw", Coords(8, 5, 5, 3), ShipClass.DD, tonnage=15, in_orbit=True))
    g.add_species(humans)
    g.add_species(kzinti)
    return g


@pytest.fixture
def rng():
    """Fixed-seed random source."""
    return GameRNG(42)
