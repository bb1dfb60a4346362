"""Game state: the turn counter."""

from dataclasses import dataclass

from ..utils.constants import MAX_TURN


def turn_dir(turn: int) -> str:
    """Name of the directory that holds the state for a turn, e.g. "t000003"."""
    return f"t{turn:06d}"


@dataclass
class Game:
    """The turn counter for a game.

    Turn 0 is the setup turn. Finishing a turn increments the counter by one;
    discarding a turn decrements it, never below 0.
    """

    current_turn: int = 0

    def __post_init__(self):
        if not (0 <= self.current_turn <= MAX_TURN):
            raise ValueError(
                f"Invalid current_turn: {self.current_turn} (must be 0-{MAX_TURN})"
            )

    @property
    def is_setup_turn(self) -> bool:
        return self.current_turn == 0

    @property
    def turn_dir(self) -> str:
        return turn_dir(self.current_turn)

    def advance(self) -> None:
        """Move to the next turn."""
        if self.current_turn >= MAX_TURN:
            raise ValueError(f"Cannot advance past turn {MAX_TURN}")
        self.current_turn += 1

    def discard(self) -> None:
        """Roll back one turn, stopping at the setup turn."""
        self.current_turn = max(0, self.current_turn - 1)
