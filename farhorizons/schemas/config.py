"""Pydantic models for setup.json, the galaxy generator's input."""

import json
import logging
import os
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from ..errors import ConfigurationError
from ..utils.constants import (
    DEFAULT_DENSITY,
    DEFAULT_MIN_WORMHOLE_LENGTH,
    MAX_RADIUS,
    MAX_SPECIES,
    MIN_SPECIES,
    SYSTEMS_PER_SPECIES,
)
from ..utils.names import name_problem

logger = logging.getLogger(__name__)


class RadiusBounds(BaseModel):
    """Clamp applied to the computed galactic radius."""

    minimum: int = 0
    maximum: int = 0


class Overrides(BaseModel):
    """Explicit radius and star count, used instead of the estimates."""

    use_overrides: bool = False
    radius: int = 0
    number_of_stars: int = 0


class GalaxySettings(BaseModel):
    """The "galaxy" section of setup.json."""

    model_config = ConfigDict(populate_by_name=True)

    path: str = Field(default="", description="Game directory, defaults to the setup file's")
    name: str = Field(description="Galaxy name")
    overrides: Overrides = Field(default_factory=Overrides)
    large_cluster: bool = False
    density: str = Field(default=DEFAULT_DENSITY, description="sparse, normal or high")
    forbid_nearby_wormholes: bool = False
    minimum_distance: int = Field(default=1, description="Parsecs between home systems")
    min_wormhole_length: int = Field(
        default=DEFAULT_MIN_WORMHOLE_LENGTH, description="Shortest wormhole, in parsecs"
    )
    radius: RadiusBounds = Field(default_factory=RadiusBounds)

    @field_validator("name")
    @classmethod
    def check_name(cls, v: str) -> str:
        problem = name_problem(v)
        if problem:
            raise ValueError(f"galaxy: {problem}")
        return v

    @field_validator("density")
    @classmethod
    def check_density(cls, v: str) -> str:
        if v == "":
            return DEFAULT_DENSITY
        if v not in SYSTEMS_PER_SPECIES:
            raise ValueError("galaxy.density must be sparse, normal, or high")
        return v

    @field_validator("path")
    @classmethod
    def check_path(cls, v: str) -> str:
        if v != v.strip():
            raise ValueError("galaxy.path can't have leading or trailing spaces")
        if v in ("", ".", "*"):
            return ""
        cleaned = os.path.normpath(v)
        if cleaned != v:
            raise ValueError(f"galaxy.path {v!r} cleaned to {cleaned!r}")
        return v

    @field_validator("minimum_distance")
    @classmethod
    def check_minimum_distance(cls, v: int) -> int:
        if v < 1:
            raise ValueError("minimum distance must be at least 1")
        if v > MAX_RADIUS:
            raise ValueError(f"minimum distance must be less than {MAX_RADIUS}")
        return v

    @field_validator("min_wormhole_length")
    @classmethod
    def check_min_wormhole_length(cls, v: int) -> int:
        if v < 1:
            raise ValueError("minimum wormhole length must be at least 1")
        return v

    @model_validator(mode="after")
    def clamp_radius(self) -> "GalaxySettings":
        if self.radius.minimum < 1:
            self.radius.minimum = 1
        if self.radius.maximum < self.radius.minimum or self.radius.maximum > MAX_RADIUS:
            self.radius.maximum = MAX_RADIUS
        return self


class SetupConfig(BaseModel):
    """Contents of setup.json."""

    number_of_species: int = 0
    galaxy: GalaxySettings

    @field_validator("number_of_species")
    @classmethod
    def check_number_of_species(cls, v: int) -> int:
        if v < MIN_SPECIES:
            return MIN_SPECIES
        if v > MAX_SPECIES:
            raise ValueError(f"maximum number of species is {MAX_SPECIES}")
        return v

    @property
    def galaxy_path(self) -> Path:
        return Path(self.galaxy.path)


def load_setup_config(setup_file: Path) -> SetupConfig:
    """Load and validate setup.json.

    An empty, "." or "*" galaxy path is replaced by the directory holding the
    setup file.

    Args:
        setup_file: Path to setup.json

    Returns:
        Validated configuration with defaults applied

    Raises:
        ConfigurationError: If the file is not valid JSON or fails validation
        OSError: If the file cannot be read
    """
    setup_file = Path(setup_file)
    logger.info(f"Loading setup from {setup_file}")
    with open(setup_file) as f:
        text = f.read()
    try:
        config = SetupConfig.model_validate(json.loads(text))
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"{setup_file}: {e}") from e
    except ValidationError as e:
        raise ConfigurationError(_describe(e)) from e

    if config.galaxy.path == "":
        config.galaxy.path = str(setup_file.parent)
    logger.debug(f"Galaxy {config.galaxy.name!r} will be written to {config.galaxy.path}")
    return config


def _describe(error: ValidationError) -> str:
    """Flatten a pydantic error into one message per problem."""
    messages = []
    for detail in error.errors():
        message = detail["msg"].removeprefix("Value error, ")
        location = ".".join(str(part) for part in detail["loc"])
        messages.append(f"{location}: {message}" if location else message)
    return "\n".join(messages)
