"""Game engine components."""

from .galaxy_generator import GenerationResult, generate_galaxy
from .turn_processor import TurnProcessor, TurnResult, finish_turn

__all__ = [
    "GenerationResult",
    "generate_galaxy",
    "TurnProcessor",
    "TurnResult",
    "finish_turn",
]
