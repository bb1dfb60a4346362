"""Exception hierarchy for the galaxy generator and turn processor."""


class FarHorizonsError(Exception):
    """Base class for every error raised deliberately by this package."""


class ConfigurationError(FarHorizonsError):
    """Setup or player data cannot produce a valid galaxy."""


class PlayerValidationError(ConfigurationError):
    """One or more player records failed validation.

    Attributes:
        problems: Every problem found, in file order
    """

    def __init__(self, problems: list[str]):
        self.problems = list(problems)
        if len(self.problems) == 1:
            message = self.problems[0]
        else:
            message = f"player file contained {len(self.problems)} errors:\n  " + "\n  ".join(
                self.problems
            )
        super().__init__(message)


class GalaxyGenerationError(FarHorizonsError):
    """The generator could not satisfy its placement or template constraints."""


class PlacementExhaustedError(GalaxyGenerationError):
    """No free lattice point could be found for a new star system."""


class InternalConsistencyError(FarHorizonsError):
    """State that should be impossible was reached (for example a colony with no planet)."""
