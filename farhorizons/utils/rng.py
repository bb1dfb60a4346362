"""Seeded dice for galaxy generation and turn processing."""

import random


class GameRNG:
    """Dice roller over a private random.Random.

    Every random decision in the generator and the turn processor is made
    through one instance, so the same seed and the same input files always
    produce the same galaxy and the same turn.
    """

    def __init__(self, seed: int):
        """Create a roller.

        Args:
            seed: Seed for the underlying generator
        """
        self.seed = seed
        self.rng = random.Random(seed)

    def roll(self, n: int) -> int:
        """Roll one n-sided die.

        Args:
            n: Number of faces

        Returns:
            A value in [1, n], or 0 for a die with no faces
        """
        if n < 1:
            return 0
        return self.rng.randint(1, n)

    def choice(self, seq):
        """Pick one element of a non-empty sequence."""
        return self.rng.choice(seq)

    def shuffle(self, seq) -> None:
        """Shuffle a list in place."""
        self.rng.shuffle(seq)

    def point_in_sphere(self, radius: int) -> tuple[int, int, int]:
        """Pick a lattice point within radius of the origin.

        Points are drawn uniformly from the enclosing cube until one lands
        inside the sphere, then rounded to the nearest integers.

        Args:
            radius: Sphere radius; below 1 always gives the origin

        Returns:
            (x, y, z) offsets from the origin
        """
        if radius < 1:
            return 0, 0, 0
        r = float(radius)
        while True:
            x = self.rng.uniform(-r, r)
            y = self.rng.uniform(-r, r)
            z = self.rng.uniform(-r, r)
            if x * x + y * y + z * z <= r * r:
                return round(x), round(y), round(z)
