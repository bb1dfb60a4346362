"""Far Horizons: galaxy generator and turn processor for a play-by-turn 4X game."""

__version__ = "0.1.0"
