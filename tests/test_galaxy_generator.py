"""Tests for galaxy generation."""

import pytest

from farhorizons.engine.galaxy_generator import (
    calculate_radius,
    create_species,
    estimate_number_of_systems,
    generate_galaxy,
)
from farhorizons.errors import ConfigurationError
from farhorizons.models import ColonyKind, PlanetSpecial
from farhorizons.schemas import PlayerRecord, SetupConfig
from farhorizons.utils import GameRNG
from farhorizons.utils.constants import HP_AVAILABLE_POP, MAX_STARS, MIN_STARS, MIN_SYSTEM_SPACING

from factories import make_system


def make_players(n: int) -> list[PlayerRecord]:
    return [
        PlayerRecord(
            email=f"player{i}@example.com",
            species_name=f"Species {i}",
            home_system_name=f"System {i}",
            home_planet_name=f"Planet {i}",
            government_name=f"Government {i}",
            government_type="Monarchy",
            military_level=4,
            gravitics_level=4,
            life_support_level=4,
            biology_level=3,
        )
        for i in range(1, n + 1)
    ]


def make_config(**galaxy) -> SetupConfig:
    settings = {"name": "Testgalaxy", "minimum_distance": 1, "density": "high"}
    settings.update(galaxy)
    return SetupConfig.model_validate({"galaxy": settings})


def generate(seed=42, n_players=3):
    return generate_galaxy(make_config(), make_players(n_players), GameRNG(seed))


class TestSizing:
    """Test star count and radius estimates."""

    def test_star_count_by_density(self):
        """Test star count scales with density, sparse sized as normal."""
        assert estimate_number_of_systems(10, "sparse") == 60
        assert estimate_number_of_systems(10, "normal") == 60
        assert estimate_number_of_systems(10, "high") == 90

    def test_star_count_is_clamped(self):
        """Test star count is clamped to the allowed range."""
        assert estimate_number_of_systems(1, "sparse") == MIN_STARS
        assert estimate_number_of_systems(100, "high") == MAX_STARS

    def test_standard_radius(self):
        """Test a standard 15 species game gets a radius of 20."""
        assert calculate_radius(15) == 20

    def test_large_cluster_is_bigger(self):
        """Test a large cluster never has a smaller radius."""
        assert calculate_radius(15, large_cluster=True) > calculate_radius(15)

    def test_radius_too_small_rejected(self):
        """Test an override radius too small for the stars fails."""
        config = make_config(overrides={"use_overrides": True, "radius": 6, "number_of_stars": 200})
        with pytest.raises(ConfigurationError):
            generate_galaxy(config, make_players(3), GameRNG(1))


class TestGenerateGalaxy:
    """Test properties of a generated galaxy."""

    def test_star_count(self):
        """Test the galaxy holds the estimated number of stars."""
        result = generate()
        assert len(result.galaxy.systems) == estimate_number_of_systems(3, "high")

    def test_systems_inside_sphere(self):
        """Test every system lies within the cluster's boundary."""
        galaxy = generate().galaxy
        limit = 9 + galaxy.radius * galaxy.radius
        for system in galaxy.systems.values():
            assert system.coords.distance_squared_to(galaxy.center) <= limit

    def test_minimum_spacing(self):
        """Test no two systems are closer than three parsecs."""
        systems = generate().galaxy.all_systems()
        for i, a in enumerate(systems):
            for b in systems[i + 1 :]:
                assert not a.coords.closer_than(b.coords, MIN_SYSTEM_SPACING)

    def test_deterministic(self):
        """Test the same seed gives the same galaxy."""
        a = generate(seed=5).galaxy
        b = generate(seed=5).galaxy
        assert list(a.systems) == list(b.systems)
        assert [s.home for s in a.species] == [s.home for s in b.species]

    def test_species_on_ideal_home_planets(self):
        """Test each species lives on its system's ideal home planet."""
        galaxy = generate().galaxy
        assert [s.number for s in galaxy.species] == [1, 2, 3]
        for species in galaxy.species:
            system = galaxy.system_at(species.home)
            assert system.home_species == species.number
            assert system.num_planets >= 3
            planet = galaxy.planet_at(species.home)
            assert planet.special == PlanetSpecial.IDEAL_HOME_PLANET
            assert species.number in system.visited_by

    def test_home_colony(self):
        """Test the home colony starts populated with full available population."""
        galaxy = generate().galaxy
        for species in galaxy.species:
            home = species.home_colony()
            assert home.kind == ColonyKind.HOME
            assert home.populated
            assert home.pop_units == HP_AVAILABLE_POP
            assert home.mi_base > 0
            assert home.ma_base > 0

    def test_species_breathe_home_air(self):
        """Test a species needs no life support on its own home planet."""
        galaxy = generate().galaxy
        for species in galaxy.species:
            planet = galaxy.planet_at(species.home)
            assert species.life_support_needed(planet, planet) == 0

    def test_gases_partitioned(self):
        """Test every gas is required, neutral or poisonous, exactly once."""
        galaxy = generate().galaxy
        for species in galaxy.species:
            gases = [species.required_gas, *species.neutral_gases, *species.poison_gases]
            assert len(gases) == len(set(gases)) == 13

    def test_wormholes_are_symmetric(self):
        """Test each wormhole leads back to where it started."""
        galaxy = generate().galaxy
        for system in galaxy.wormhole_systems():
            partner = galaxy.system_at(system.wormhole)
            assert partner.wormhole == system.coords

    def test_scan_logs(self):
        """Test every species gets a scan of its home system."""
        result = generate()
        assert sorted(result.scan_logs) == [1, 2, 3]
        for species in result.galaxy.species:
            assert result.scan_logs[species.number].startswith(
                f"\nScan of home star system for SP {species.name}:"
            )

    def test_transcript(self):
        """Test the transcript summarises the generation."""
        transcript = generate().transcript
        assert "Summary for species #1" in transcript
        assert "This galaxy contains a total of" in transcript


class TestCreateSpecies:
    """Test species creation."""

    def test_tech_total_must_be_fifteen(self):
        """Test a player whose tech levels do not sum to 15 is rejected."""
        player = make_players(1)[0].model_copy(update={"biology_level": 9})
        system = make_system(1, 1, 1, home_orbit=3)
        with pytest.raises(ConfigurationError, match="must sum up to 15"):
            create_species(GameRNG(1), 1, player, system, 1)

    def test_oxygen_band(self):
        """Test the oxygen band is centred on the home planet's oxygen."""
        system = make_system(1, 1, 1, home_orbit=3)
        species = create_species(GameRNG(1), 1, make_players(1)[0], system, 1)
        # Half to double the home planet's 20%
        assert species.required_gas_min == 10
        assert species.required_gas_max == 40
        assert len(species.contact) == 2


class TestStandardScenario:
    """Test a four species game at normal density."""

    def test_four_species(self):
        """Test 24 systems, a radius of 13 and homes at least 6 parsecs apart."""
        config = make_config(density="normal", minimum_distance=6)
        galaxy = generate_galaxy(config, make_players(4), GameRNG(42)).galaxy

        assert len(galaxy.systems) == 24
        assert galaxy.radius == 13
        homes = galaxy.home_systems()
        assert len(homes) == 4
        for i, a in enumerate(homes):
            for b in homes[i + 1 :]:
                assert not a.coords.closer_than(b.coords, 6)

    def test_four_species_sparse(self):
        """Test a sparse cluster has enough systems for every species."""
        config = make_config(density="sparse", minimum_distance=6)
        galaxy = generate_galaxy(config, make_players(4), GameRNG(42)).galaxy

        assert len(galaxy.systems) == 24
        assert len(galaxy.home_systems()) == 4
