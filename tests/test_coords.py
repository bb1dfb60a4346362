"""Tests for coordinates and the seeded random source."""

from farhorizons.models import Coords
from farhorizons.utils import GameRNG


class TestCoords:
    """Test Coords geometry."""

    def test_distance_is_rounded(self):
        """Test distance rounds to the nearest parsec."""
        a = Coords(0, 0, 0)
        assert a.distance_to(Coords(3, 4, 0)) == 5
        # sqrt(2) = 1.41
        assert a.distance_to(Coords(1, 1, 0)) == 1
        # sqrt(3) = 1.73
        assert a.distance_to(Coords(1, 1, 1)) == 2

    def test_closer_than_is_strict(self):
        """Test closer_than excludes the boundary."""
        a = Coords(0, 0, 0)
        assert a.closer_than(Coords(2, 0, 0), 3)
        assert not a.closer_than(Coords(3, 0, 0), 3)

    def test_same_system_ignores_orbit(self):
        """Test same_system compares only x, y and z."""
        a = Coords(1, 2, 3, 4)
        assert a.same_system(Coords(1, 2, 3))
        assert not a.same_planet(Coords(1, 2, 3))
        assert a.same_planet(Coords(1, 2, 3, 4))

    def test_delta_xyz(self):
        """Test per-axis distances are absolute."""
        assert Coords(1, 8, 3).delta_xyz(Coords(4, 2, 3, 5)) == (3, 6, 0)

    def test_system_clears_orbit(self):
        """Test system() drops the orbit."""
        assert Coords(1, 2, 3, 4).system() == Coords(1, 2, 3, 0)

    def test_unset_sentinel(self):
        """Test the unset sentinel is not set and not off the map."""
        unset = Coords.unset()
        assert not unset.is_set
        assert not unset.is_off_map
        assert Coords(0, 0, 0).is_set

    def test_off_map(self):
        """Test orbit 99 marks off-map locations."""
        assert Coords(1, 2, 3, 99).is_off_map
        assert not Coords(1, 2, 3, 9).is_off_map

    def test_system_id_is_unique_per_system(self):
        """Test system_id differs between systems and ignores the orbit."""
        assert Coords(1, 2, 3).system_id != Coords(3, 2, 1).system_id
        assert Coords(1, 2, 3, 5).system_id == Coords(1, 2, 3).system_id

    def test_str(self):
        """Test the plain "x y z" rendering."""
        assert str(Coords(10, 2, 33, 4)) == "10 2 33"


class TestGameRNG:
    """Test the deterministic random source."""

    def test_same_seed_same_sequence(self):
        """Test two sources with one seed produce the same rolls."""
        a, b = GameRNG(7), GameRNG(7)
        assert [a.roll(100) for _ in range(50)] == [b.roll(100) for _ in range(50)]

    def test_roll_range(self):
        """Test rolls stay within 1..n."""
        rng = GameRNG(1)
        rolls = [rng.roll(6) for _ in range(500)]
        assert min(rolls) >= 1
        assert max(rolls) <= 6

    def test_roll_of_zero_faces(self):
        """Test a die with no faces rolls 0."""
        rng = GameRNG(1)
        assert rng.roll(0) == 0
        assert rng.roll(-3) == 0

    def test_point_in_sphere(self):
        """Test sampled points stay within the sphere after rounding."""
        rng = GameRNG(3)
        for _ in range(200):
            x, y, z = rng.point_in_sphere(5)
            # rounding can move a point at most half a unit per axis
            assert x * x + y * y + z * z <= 6 * 6

    def test_point_in_empty_sphere(self):
        """Test a sphere with no radius gives the origin."""
        assert GameRNG(3).point_in_sphere(0) == (0, 0, 0)
