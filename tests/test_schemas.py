"""Tests for setup.json and players.json validation."""

import json

import pytest

from farhorizons.errors import ConfigurationError, PlayerValidationError
from farhorizons.schemas import SetupConfig, load_players, load_setup_config, parse_players


def player(n=1, **changes):
    record = {
        "email": f"player{n}@example.com",
        "species_name": f"Species {n}",
        "home_system_name": f"System {n}",
        "home_planet_name": f"Planet {n}",
        "government_name": f"Council {n}",
        "government_type": "Democracy",
        "military_level": 4,
        "gravitics_level": 4,
        "life_support_level": 4,
        "biology_level": 3,
    }
    record.update(changes)
    return record


class TestPlayers:
    """Test player record validation."""

    def test_valid_players(self):
        """Test well-formed records are accepted in file order."""
        players = parse_players([player(1), player(2)])
        assert [p.species_name for p in players] == ["Species 1", "Species 2"]
        assert players[0].tech_total == 15

    def test_species_name_too_short(self):
        """Test species names need at least five characters."""
        with pytest.raises(PlayerValidationError) as exc_info:
            parse_players([player(1, species_name="Orcs")])
        assert exc_info.value.problems == ["player 1: species name 'Orcs' too short (min 5 chars allowed)"]

    def test_name_with_forbidden_character(self):
        """Test names can't contain shell or quoting characters."""
        with pytest.raises(PlayerValidationError) as exc_info:
            parse_players([player(1, home_planet_name="Home$")])
        assert "invalid character '$'" in exc_info.value.problems[0]

    def test_duplicate_email(self):
        """Test two players can't share an email address."""
        with pytest.raises(PlayerValidationError) as exc_info:
            parse_players([player(1), player(2, email="player1@example.com")])
        assert exc_info.value.problems == ["player 2: duplicate email address 'player1@example.com'"]

    def test_tech_total(self):
        """Test the four chosen tech levels must add up to 15."""
        with pytest.raises(PlayerValidationError) as exc_info:
            parse_players([player(1, biology_level=4)])
        assert exc_info.value.problems == ["player 1: the tech levels must sum to 15"]

    def test_every_problem_reported(self):
        """Test all problems across all records are collected before failing."""
        bad = [
            player(1, species_name="Orcs"),
            player(2, species_name="Species 1", biology_level=0),
        ]
        with pytest.raises(PlayerValidationError) as exc_info:
            parse_players(bad)
        problems = exc_info.value.problems
        assert len(problems) == 2
        assert problems[0].startswith("player 1:")
        assert problems[1] == "player 2: the tech levels must sum to 15"
        assert "2 errors" in str(exc_info.value)

    def test_duplicate_species_name(self):
        """Test species names must be unique."""
        with pytest.raises(PlayerValidationError) as exc_info:
            parse_players([player(1), player(2, species_name="Species 1")])
        assert exc_info.value.problems == ["player 2: duplicate species name 'Species 1'"]

    def test_wrong_shape(self):
        """Test a record missing a field is a configuration error."""
        record = player(1)
        del record["email"]
        with pytest.raises(ConfigurationError):
            parse_players([record])

    def test_load_from_file(self, tmp_path):
        """Test players.json is read and validated."""
        path = tmp_path / "players.json"
        path.write_text(json.dumps([player(1)]))
        assert load_players(path)[0].email == "player1@example.com"


class TestSetupConfig:
    """Test setup.json defaults and bounds."""

    def test_defaults(self):
        """Test a minimal setup gets normal density and a full radius range."""
        config = SetupConfig.model_validate({"galaxy": {"name": "Milky Way"}})
        assert config.galaxy.density == "normal"
        assert config.galaxy.minimum_distance == 1
        assert config.galaxy.radius.minimum == 1
        assert config.galaxy.radius.maximum == 50

    def test_blank_density_is_normal(self):
        """Test an empty density string means normal."""
        config = SetupConfig.model_validate({"galaxy": {"name": "Milky Way", "density": ""}})
        assert config.galaxy.density == "normal"

    def test_unknown_density(self):
        """Test densities other than sparse, normal and high are rejected."""
        with pytest.raises(ValueError):
            SetupConfig.model_validate({"galaxy": {"name": "Milky Way", "density": "crowded"}})

    def test_radius_clamped(self):
        """Test a maximum below the minimum or beyond 50 is reset to 50."""
        config = SetupConfig.model_validate(
            {"galaxy": {"name": "Milky Way", "radius": {"minimum": 8, "maximum": 4}}}
        )
        assert (config.galaxy.radius.minimum, config.galaxy.radius.maximum) == (8, 50)

    def test_number_of_species(self):
        """Test too few species is raised to one and more than 100 rejected."""
        config = SetupConfig.model_validate({"number_of_species": 0, "galaxy": {"name": "Milky Way"}})
        assert config.number_of_species == 1
        with pytest.raises(ValueError):
            SetupConfig.model_validate({"number_of_species": 101, "galaxy": {"name": "Milky Way"}})

    def test_minimum_distance_bounds(self):
        """Test the home spacing must be between 1 and 50 parsecs."""
        for distance in (0, 51):
            with pytest.raises(ValueError):
                SetupConfig.model_validate({"galaxy": {"name": "Milky Way", "minimum_distance": distance}})

    def test_empty_path_is_setup_directory(self, tmp_path):
        """Test the game directory defaults to the one holding setup.json."""
        setup_file = tmp_path / "setup.json"
        setup_file.write_text(json.dumps({"galaxy": {"name": "Milky Way", "path": "."}}))
        config = load_setup_config(setup_file)
        assert config.galaxy_path == tmp_path

    def test_unclean_path(self, tmp_path):
        """Test a path that is not in normal form is rejected."""
        setup_file = tmp_path / "setup.json"
        setup_file.write_text(json.dumps({"galaxy": {"name": "Milky Way", "path": "games//one"}}))
        with pytest.raises(ConfigurationError) as exc_info:
            load_setup_config(setup_file)
        assert "galaxy.path" in str(exc_info.value)

    def test_invalid_json(self, tmp_path):
        """Test a setup file that is not JSON is a configuration error."""
        setup_file = tmp_path / "setup.json"
        setup_file.write_text("{")
        with pytest.raises(ConfigurationError):
            load_setup_config(setup_file)
