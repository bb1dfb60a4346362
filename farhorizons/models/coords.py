"""Integer lattice coordinates with an orbit slot."""

import math
from dataclasses import dataclass, replace

from ..utils.constants import OFF_MAP_ORBIT


@dataclass(frozen=True)
class Coords:
    """A point in the cluster, optionally narrowed to one planet's orbit.

    Orbit 0 means the star itself; orbits 1..9 name planets. Orbit 99 marks
    colonies and ships that are in transit or otherwise off the map, and -1 on
    any axis marks an unset location.
    """

    x: int
    y: int
    z: int
    orbit: int = 0  # 0 = the star, N = planet number

    @classmethod
    def unset(cls) -> "Coords":
        """Return the sentinel used for "no location"."""
        return cls(-1, -1, -1, -1)

    @property
    def is_set(self) -> bool:
        return self.x != -1 and self.y != -1 and self.z != -1 and self.orbit != -1

    @property
    def is_off_map(self) -> bool:
        return self.orbit == OFF_MAP_ORBIT

    @property
    def system_id(self) -> int:
        """Integer key that identifies the system these coordinates are in."""
        return (self.x * 1_000 + self.y) * 1_000 + self.z

    @property
    def id(self) -> str:
        return f"{self.x:03d}.{self.y:03d}.{self.z:03d}/{self.orbit:02d}"

    @property
    def xyz(self) -> str:
        """Fixed-width "x y z" used in tabular output."""
        return f"{self.x:3d} {self.y:3d} {self.z:3d}"

    def system(self) -> "Coords":
        """Return the same location with the orbit cleared."""
        return replace(self, orbit=0)

    def with_orbit(self, orbit: int) -> "Coords":
        return replace(self, orbit=orbit)

    def distance_squared_to(self, other: "Coords") -> int:
        dx, dy, dz = self.x - other.x, self.y - other.y, self.z - other.z
        return dx * dx + dy * dy + dz * dz

    def distance_to(self, other: "Coords") -> int:
        """Euclidean distance in parsecs, rounded to the nearest integer."""
        return int(math.floor(math.sqrt(self.distance_squared_to(other)) + 0.5))

    def closer_than(self, other: "Coords", distance: int) -> bool:
        """Return True if other is strictly closer than distance parsecs."""
        return self.distance_squared_to(other) < distance * distance

    def delta_xyz(self, other: "Coords") -> tuple[int, int, int]:
        return abs(self.x - other.x), abs(self.y - other.y), abs(self.z - other.z)

    def same_system(self, other: "Coords") -> bool:
        return self.x == other.x and self.y == other.y and self.z == other.z

    def same_planet(self, other: "Coords") -> bool:
        return self.same_system(other) and self.orbit == other.orbit

    def __str__(self) -> str:
        return f"{self.x} {self.y} {self.z}"
