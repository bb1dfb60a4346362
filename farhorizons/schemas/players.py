"""Pydantic models for players.json and the cross-player checks."""

import json
import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from ..errors import ConfigurationError, PlayerValidationError
from ..utils.constants import MAX_NAME_LENGTH, MIN_SPECIES_NAME_LENGTH, PLAYER_TECH_TOTAL
from ..utils.names import name_problem

logger = logging.getLogger(__name__)


class PlayerRecord(BaseModel):
    """One player's choices for their species."""

    model_config = ConfigDict(populate_by_name=True)

    email: str
    species_name: str
    home_system_name: str
    home_planet_name: str
    government_name: str
    government_type: str
    military_level: int = Field(default=0, ge=0)
    gravitics_level: int = Field(default=0, ge=0)
    life_support_level: int = Field(default=0, ge=0)
    biology_level: int = Field(default=0, ge=0)

    @property
    def tech_total(self) -> int:
        return self.military_level + self.gravitics_level + self.life_support_level + self.biology_level


_players_adapter = TypeAdapter(list[PlayerRecord])


def _name_problems(label: str, name: str, min_length: int = 0) -> str | None:
    problem = name_problem(name)
    if problem:
        return f"{label}: {problem}"
    if len(name) < min_length:
        return f"{label} {name!r} too short (min {min_length} chars allowed)"
    if len(name) > MAX_NAME_LENGTH:
        return f"{label} {name!r} too long (max {MAX_NAME_LENGTH} chars allowed)"
    return None


def validate_players(players: list[PlayerRecord]) -> list[str]:
    """Check every player record and the uniqueness rules across records.

    Args:
        players: Records in file order

    Returns:
        Every problem found, each prefixed with "player N:", in file order
    """
    problems = []
    emails: set[str] = set()
    species_names: set[str] = set()
    system_names: set[str] = set()
    planet_names: set[str] = set()

    for n, player in enumerate(players, start=1):
        if player.email != player.email.strip():
            problems.append(f"player {n}: email address must not have leading or trailing spaces")
        elif player.email in emails:
            problems.append(f"player {n}: duplicate email address {player.email!r}")
        else:
            emails.add(player.email)

        for label, name, seen, min_length in (
            ("species name", player.species_name, species_names, MIN_SPECIES_NAME_LENGTH),
            ("home system name", player.home_system_name, system_names, 0),
            ("home planet name", player.home_planet_name, planet_names, 0),
        ):
            problem = _name_problems(label, name, min_length)
            if problem:
                problems.append(f"player {n}: {problem}")
            elif name in seen:
                problems.append(f"player {n}: duplicate {label} {name!r}")
            else:
                seen.add(name)

        for label, name in (
            ("government name", player.government_name),
            ("government type", player.government_type),
        ):
            problem = _name_problems(label, name)
            if problem:
                problems.append(f"player {n}: {problem}")

        if player.tech_total != PLAYER_TECH_TOTAL:
            problems.append(f"player {n}: the tech levels must sum to {PLAYER_TECH_TOTAL}")

    return problems


def parse_players(data) -> list[PlayerRecord]:
    """Validate decoded players.json content.

    Raises:
        ConfigurationError: If the records do not have the expected shape
        PlayerValidationError: If any record breaks a naming or tech rule
    """
    try:
        players = _players_adapter.validate_python(data)
    except ValidationError as e:
        raise ConfigurationError(f"players: {e}") from e

    problems = validate_players(players)
    if problems:
        for problem in problems:
            logger.debug(problem)
        raise PlayerValidationError(problems)
    return players


def load_players(players_file: Path) -> list[PlayerRecord]:
    """Load and validate players.json."""
    players_file = Path(players_file)
    logger.info(f"Loading players from {players_file}")
    with open(players_file) as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"{players_file}: {e}") from e
    players = parse_players(data)
    logger.info(f"Loaded {len(players)} players")
    return players
