"""Galaxy generation: star placement, home systems, species and wormholes."""

import logging
import math
from dataclasses import dataclass, field

from ..errors import ConfigurationError, GalaxyGenerationError, PlacementExhaustedError
from ..interface.scan import scan_system
from ..models import (
    Colony,
    ColonyKind,
    Coords,
    Galaxy,
    GasType,
    Planet,
    Species,
    StarColor,
    StarType,
    System,
    Tech,
)
from ..schemas.config import SetupConfig
from ..schemas.players import PlayerRecord
from ..utils import EventLog, GameRNG
from ..utils.constants import (
    HP_AVAILABLE_POP,
    INITIAL_MANUFACTURING_TECH,
    INITIAL_MINING_TECH,
    MAX_CHANCE_OF_STAR,
    MAX_PLACEMENT_ATTEMPTS,
    MAX_PLANETS,
    MAX_RADIUS,
    MAX_STARS,
    MIN_CHANCE_OF_STAR,
    MIN_HOME_SYSTEM_PLANETS,
    MIN_PLANETS,
    MIN_RADIUS,
    MIN_STARS,
    MIN_SYSTEM_SPACING,
    NUM_GOOD_GASES,
    PLAYER_TECH_TOTAL,
    STANDARD_GALACTIC_RADIUS,
    STANDARD_NUMBER_OF_SPECIES,
    SYSTEMS_PER_SPECIES,
    WORMHOLE_PERCENT,
)
from ..utils.names import fixed_point
from .planet_generator import build_home_templates, generate_planets, roll_for_planets

logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    """A new galaxy plus the text produced while creating it."""

    galaxy: Galaxy
    scan_logs: dict[int, str] = field(default_factory=dict)  # Species number -> home system scan
    transcript: str = ""  # Game master's record of the generation


def estimate_number_of_systems(n_species: int, density: str) -> int:
    """Return the number of star systems for a game, clamped to [MIN_STARS, MAX_STARS]."""
    n = n_species * SYSTEMS_PER_SPECIES[density]
    if n < MIN_STARS:
        logger.warning(f"Forcing number of stars to minimum of {MIN_STARS} stars")
        return MIN_STARS
    if n > MAX_STARS:
        logger.warning(f"Forcing number of stars to maximum of {MAX_STARS} stars")
        return MAX_STARS
    return n


def calculate_radius(n_species: int, large_cluster: bool = False) -> int:
    """Return the smallest radius whose cube holds the volume needed for n_species.

    A standard game fits 15 species in a radius of 20 parsecs, so each species
    needs 20³/15 cubic parsecs. A large cluster gets half as much again.
    """
    volume = n_species * STANDARD_GALACTIC_RADIUS**3 // STANDARD_NUMBER_OF_SPECIES
    if large_cluster:
        volume = 3 * volume // 2
    r = MIN_RADIUS
    while r * r * r < volume:
        r += 1
    return r


def _resolve_radius(config: SetupConfig, n_species: int, transcript: EventLog) -> int:
    settings = config.galaxy
    radius = calculate_radius(n_species, settings.large_cluster)
    transcript.printf("For %d species, the galaxy should have a radius of about %d parsecs.\n", n_species, radius)
    overrides = settings.overrides
    if overrides.use_overrides and overrides.radius != 0 and overrides.radius != radius:
        transcript.printf("\tBut we are over-riding that to a radius of about %d parsecs.\n", overrides.radius)
        radius = overrides.radius
    if radius < settings.radius.minimum:
        logger.info(f"Raising radius from {radius} to configured minimum {settings.radius.minimum}")
        radius = settings.radius.minimum
    elif radius > settings.radius.maximum:
        logger.info(f"Lowering radius from {radius} to configured maximum {settings.radius.maximum}")
        radius = settings.radius.maximum
    if radius < MIN_RADIUS or radius > MAX_RADIUS:
        raise ConfigurationError(
            f"radius {radius} outside the allowed range of {MIN_RADIUS} to {MAX_RADIUS} parsecs"
        )
    return radius


def _check_feasibility(n_species: int, n_stars: int, radius: int) -> None:
    """Make sure every species can claim a handful of systems and the stars fit the sphere."""
    if not n_species < n_stars:
        raise ConfigurationError(f"{n_species} species need more than {n_stars} stars")
    if not 5 * n_species <= n_stars:
        raise ConfigurationError(f"{n_species} species need at least {5 * n_species} stars")

    volume = 4 * 314 * radius * radius * radius // 300
    chance_of_star = volume // n_stars
    if chance_of_star < MIN_CHANCE_OF_STAR:
        raise ConfigurationError(f"galactic radius is too small for {n_stars} stars")
    if chance_of_star > MAX_CHANCE_OF_STAR:
        raise ConfigurationError(f"galactic radius is too large for {n_stars} stars")


def new_system(
    rng: GameRNG, coords: Coords, min_planets: int = MIN_PLANETS, max_planets: int = MAX_PLANETS
) -> System:
    """Roll a star at coords and generate its planets.

    Main sequence stars are favoured; colour and size are uniform.
    """
    size = rng.roll(10) - 1
    roll = rng.roll(StarType.GIANT + 6)
    if roll == 1:
        star_type = StarType.DWARF
    elif roll == 2:
        star_type = StarType.DEGENERATE
    elif roll == 3:
        star_type = StarType.GIANT
    else:
        star_type = StarType.MAIN_SEQUENCE
    color = StarColor(rng.roll(StarColor.RED))

    n = roll_for_planets(rng, star_type, color, min_planets, max_planets)
    system = System(
        coords=coords,
        star_type=star_type,
        color=color,
        size=size,
        planets=generate_planets(rng, coords, n),
    )
    logger.debug(f"Generated {star_type.label} star with {n} planets at {coords.xyz}")
    return system


def place_systems(rng: GameRNG, galaxy: Galaxy, n_stars: int, transcript: EventLog) -> None:
    """Scatter n_stars systems through the sphere, keeping them 3 parsecs apart.

    Raises:
        PlacementExhaustedError: If too many consecutive points are rejected
    """
    center = galaxy.center
    boundary = 9 + galaxy.radius * galaxy.radius
    min_spacing_squared = MIN_SYSTEM_SPACING * MIN_SYSTEM_SPACING
    max_distance = 0
    planet_count = [0] * (MAX_PLANETS + 1)
    rejections = 0

    while len(galaxy.systems) < n_stars:
        if rejections >= MAX_PLACEMENT_ATTEMPTS:
            raise PlacementExhaustedError(
                f"unable to place star {len(galaxy.systems) + 1} of {n_stars} "
                f"after {MAX_PLACEMENT_ATTEMPTS} attempts"
            )
        dx, dy, dz = rng.point_in_sphere(galaxy.radius)
        at = Coords(center.x + dx, center.y + dy, center.z + dz)
        distance_from_center = at.distance_squared_to(center)
        if distance_from_center > boundary or at.system_id in galaxy.systems:
            rejections += 1
            continue
        if any(s.coords.distance_squared_to(at) < min_spacing_squared for s in galaxy.systems.values()):
            rejections += 1
            continue

        rejections = 0
        max_distance = max(max_distance, distance_from_center)
        system = new_system(rng, at)
        galaxy.add_system(system)
        planet_count[system.num_planets] += 1

    total_planets = sum(n * count for n, count in enumerate(planet_count))
    transcript.printf("Maximum distance from center of cluster is %f parsecs\n", math.sqrt(max_distance))
    for n, count in enumerate(planet_count):
        if count:
            transcript.printf("    %3d systems have %d planets\n", count, n)
    transcript.printf("    %3d planets per system on average\n", total_planets // len(galaxy.systems))


def get_random_system(rng: GameRNG, galaxy: Galaxy, min_distance: int) -> System:
    """Pick a system for a new home, away from other homes and wormholes.

    Raises:
        GalaxyGenerationError: If every candidate is too close to a forbidden system
    """
    systems = galaxy.all_systems()
    forbidden = [s for s in systems if s.home_species is not None or s.wormhole is not None]
    rng.shuffle(systems)
    for candidate in systems:
        if candidate.num_planets < MIN_HOME_SYSTEM_PLANETS:
            continue
        if candidate.home_species is not None or candidate.wormhole is not None:
            continue
        if any(candidate.coords.closer_than(f.coords, min_distance) for f in forbidden):
            continue
        return candidate
    logger.debug(f"{len(systems)} systems ({len(forbidden)} forbidden), {min_distance} parsecs")
    raise GalaxyGenerationError(f"all suitable systems are within {min_distance} parsecs of each other")


def convert_to_home_system(
    rng: GameRNG, system: System, template: list[Planet], species_number: int, transcript: EventLog
) -> None:
    """Overwrite a system's planets with a home template, then perturb them slightly.

    Every home system starts from the same template for its planet count, so
    the small random changes keep any two home systems from being identical.
    """
    planets = []
    for original, source in zip(system.planets, template):
        planet = source.clone()
        planet.coords = original.coords
        planets.append(planet)

    for planet in planets:
        if planet.temperature_class > 12:
            planet.temperature_class -= rng.roll(3) - 1
        elif planet.temperature_class > 0:
            planet.temperature_class += rng.roll(3) - 1
        if planet.pressure_class > 12:
            planet.pressure_class -= rng.roll(3) - 1
        elif planet.pressure_class > 0:
            planet.pressure_class += rng.roll(3) - 1
        if len(planet.gases) > 2:
            j = rng.roll(25) + 10
            a, b = planet.gases[1], planet.gases[2]
            if b.percentage > 50:
                a.percentage += j
                b.percentage -= j
            elif a.percentage > 50:
                a.percentage -= j
                b.percentage += j
        if planet.diameter > 12:
            planet.diameter -= rng.roll(3) - 1
        else:
            planet.diameter += rng.roll(3) - 1
        if planet.gravity > 100:
            planet.gravity -= rng.roll(10)
        else:
            planet.gravity += rng.roll(10)
        if planet.mining_difficulty > 100:
            planet.mining_difficulty -= rng.roll(10)
        else:
            planet.mining_difficulty += rng.roll(10)

    system.planets = planets
    system.home_species = species_number
    transcript.printf(
        "Converted system %s to home system (planets %d/%d)\n",
        system.coords.xyz,
        len(system.planets),
        len(template),
    )


def create_species(
    rng: GameRNG, number: int, player: PlayerRecord, home_system: System, designed_species: int
) -> Species:
    """Create a species on the ideal home planet of its (already converted) home system.

    The species breathes oxygen. Its tolerated band is centred on the home
    planet's oxygen level; the home atmosphere plus helium and water vapour
    are harmless, and random gases are added until seven are harmless. All
    other gases are poisonous.

    Raises:
        ConfigurationError: If the player's tech levels do not sum to 15
        GalaxyGenerationError: If the home planet has no oxygen
    """
    if player.tech_total != PLAYER_TECH_TOTAL:
        raise ConfigurationError(
            f"species {player.species_name!r}: total tech levels must sum up to {PLAYER_TECH_TOTAL}"
        )

    home_planet = home_system.planet(home_system.home_planet_number())
    if home_planet is None:
        raise GalaxyGenerationError(f"home system {home_system.coords} has no ideal home planet")

    oxygen = home_planet.gas_percent(GasType.O2)
    if oxygen == 0:
        raise GalaxyGenerationError(f"planet does not have required gas {GasType.O2.char}")
    required_min = max(1, oxygen // 2)
    required_max = 2 * oxygen
    if required_max < 20:
        required_max += 20
    required_max = min(required_max, 100)

    good = {g.type for g in home_planet.gases}
    good.add(GasType.HE)
    good.add(GasType.H2O)
    while len(good) < NUM_GOOD_GASES:
        good.add(GasType(rng.roll(len(GasType))))
    neutral = [g for g in GasType if g in good and g != GasType.O2]
    poison = [g for g in GasType if g not in good]

    tech = [0] * len(Tech)
    tech[Tech.MI] = INITIAL_MINING_TECH
    tech[Tech.MA] = INITIAL_MANUFACTURING_TECH
    tech[Tech.ML] = player.military_level
    tech[Tech.GV] = player.gravitics_level
    tech[Tech.LS] = player.life_support_level
    tech[Tech.BI] = player.biology_level

    # Bases are worked back from an initial production target
    levels = tech[Tech.MI] + tech[Tech.MA]
    n = 25 * levels + rng.roll(levels) + rng.roll(levels) + rng.roll(levels)
    mi_base = n * home_planet.mining_difficulty // (10 * tech[Tech.MI])
    ma_base = 10 * n // tech[Tech.MA]

    species = Species(
        number=number,
        name=player.species_name,
        government_name=player.government_name,
        government_type=player.government_type,
        home_system_name=player.home_system_name,
        home=home_planet.coords,
        required_gas=GasType.O2,
        required_gas_min=required_min,
        required_gas_max=required_max,
        neutral_gases=neutral,
        poison_gases=poison,
        tech_level=list(tech),
        init_tech_level=list(tech),
        tech_knowledge=list(tech),
    )
    species.init_contact_masks(designed_species)
    species.add_colony(
        Colony(
            name=player.home_planet_name,
            coords=home_planet.coords,
            kind=ColonyKind.HOME,
            populated=True,
            pop_units=HP_AVAILABLE_POP,
            shipyards=1,
            mi_base=mi_base,
            ma_base=ma_base,
        )
    )
    home_system.visited_by.add(number)
    return species


def _summarize_species(species: Species, galaxy: Galaxy, transcript: EventLog) -> None:

    home = species.home_colony()
    home_planet = galaxy.planet_at(species.home)
    system = galaxy.system_at(species.home)
    transcript.write("Scan of star system:\n\n")
    transcript.write(scan_system(system))
    transcript.write("\n")
    transcript.printf("\n  Summary for species #%d:\n", species.number)
    transcript.printf("\tName of species: %s\n", species.name)
    transcript.printf("\tName of home planet: %s\n", home.name)
    transcript.printf("\t\tCoordinates: %s #%d\n", species.home, species.home.orbit)
    transcript.printf("\tName of government: %s\n", species.government_name)
    transcript.printf("\tType of government: %s\n\n", species.government_type)
    transcript.printf(
        "\tTech levels: %s = %d,  %s = %d,  %s = %d\n",
        Tech.MI.label, species.tech_level[Tech.MI],
        Tech.MA.label, species.tech_level[Tech.MA],
        Tech.ML.label, species.tech_level[Tech.ML],
    )
    transcript.printf(
        "\t             %s = %d,  %s = %d,  %s = %d\n",
        Tech.GV.label, species.tech_level[Tech.GV],
        Tech.LS.label, species.tech_level[Tech.LS],
        Tech.BI.label, species.tech_level[Tech.BI],
    )
    transcript.printf(
        "\n\n\tFor this species, the required gas is %s (%d%%-%d%%).\n",
        species.required_gas.char,
        species.required_gas_min,
        species.required_gas_max,
    )
    transcript.write("\tGases neutral to species:")
    for gas in species.neutral_gases:
        transcript.printf(" %s ", gas.char)
    transcript.write("\n\tGases poisonous to species:")
    for gas in species.poison_gases:
        transcript.printf(" %s ", gas.char)
    transcript.printf(
        "\n\n\tInitial mining base = %s. Initial manufacturing base = %s.\n",
        fixed_point(home.mi_base),
        fixed_point(home.ma_base),
    )
    transcript.printf(
        "\tIn the first turn, %d raw material units will be produced,\n",
        10 * species.tech_level[Tech.MI] * home.mi_base // home_planet.mining_difficulty,
    )
    transcript.printf(
        "\tand the total production capacity will be %d.\n\n",
        species.tech_level[Tech.MA] * home.ma_base // 10,
    )


def place_wormholes(
    rng: GameRNG,
    galaxy: Galaxy,
    n_species: int,
    min_length: int,
    transcript: EventLog,
    home_clearance: int = 0,
) -> int:
    """Link pairs of systems with natural wormholes.

    About 8% of the non-home systems get a wormhole. Each end is a system with
    no wormhole yet, and the two ends are at least min_length parsecs apart.
    Stops early when no valid partner remains.

    Args:
        rng: Random source
        galaxy: Galaxy with its systems placed
        n_species: Number of species (their home systems are not counted)
        min_length: Shortest allowed wormhole, in parsecs
        transcript: Generation transcript
        home_clearance: If non-zero, no end may be closer than this to a home system

    Returns:
        Number of wormholes created
    """
    wanted = 1 + WORMHOLE_PERCENT * (len(galaxy.systems) - n_species) // 100
    transcript.printf("This galaxy wants a total of %d wormholes.\n", wanted)

    homes = galaxy.home_systems() if home_clearance else []

    def eligible(s: System) -> bool:
        if s.wormhole is not None:
            return False
        return not any(s.coords.closer_than(h.coords, home_clearance) for h in homes)

    created = 0
    for system in galaxy.all_systems():
        if created >= wanted:
            break
        if not eligible(system):
            continue
        partners = [
            other
            for other in galaxy.systems.values()
            if other is not system
            and eligible(other)
            and not other.coords.closer_than(system.coords, min_length)
        ]
        if not partners:
            continue
        partner = rng.choice(partners)
        system.wormhole = partner.coords
        partner.wormhole = system.coords
        created += 1
        logger.debug(f"Wormhole from {system.coords} to {partner.coords}")
    return created


def generate_galaxy(config: SetupConfig, players: list[PlayerRecord], rng: GameRNG) -> GenerationResult:
    """Generate a galaxy for a list of players.

    Algorithm:
    1. Size the galaxy: star count from the species count and density (or the
       override), radius from the species count, then check both are feasible
    2. Build one earth-like home template for each planet count 3..9
    3. Scatter the stars through the sphere, at least 3 parsecs apart
    4. Give each species a home system away from other homes and wormholes,
       convert it from the template, and create the species on its ideal
       home planet
    5. Link pairs of distant systems with natural wormholes
    6. Write each species' home system scan for its first log

    Args:
        config: Validated setup.json
        players: Validated player records, in species number order
        rng: Random source

    Returns:
        The galaxy, the per-species scan logs and the generation transcript

    Raises:
        ConfigurationError: If the setup cannot produce a valid galaxy
        GalaxyGenerationError: If placement or templating fails
    """

    settings = config.galaxy
    transcript = EventLog()
    n_species = len(players)
    if n_species == 0:
        raise ConfigurationError("there must be at least one player")

    if settings.overrides.use_overrides and settings.overrides.number_of_stars:
        typical = estimate_number_of_systems(n_species, settings.density)
        n_stars = settings.overrides.number_of_stars
        transcript.printf("For %d species, overriding normal %d stars to %d stars.\n", n_species, typical, n_stars)
        if n_stars < MIN_STARS:
            logger.warning(f"Forcing number of stars to minimum of {MIN_STARS} stars")
            n_stars = MIN_STARS
        elif n_stars > MAX_STARS:
            logger.warning(f"Forcing number of stars to maximum of {MAX_STARS} stars")
            n_stars = MAX_STARS
    else:
        n_stars = estimate_number_of_systems(n_species, settings.density)
        transcript.printf("For %d species, there should be about %d stars.\n", n_species, n_stars)

    radius = _resolve_radius(config, n_species, transcript)
    _check_feasibility(n_species, n_stars, radius)

    templates = build_home_templates(rng)

    galaxy = Galaxy(id=settings.name, name=settings.name, radius=radius, d_num_species=n_species)
    place_systems(rng, galaxy, n_stars, transcript)

    for number, player in enumerate(players, start=1):
        system = get_random_system(rng, galaxy, settings.minimum_distance)
        convert_to_home_system(rng, system, templates[system.num_planets], number, transcript)
        species = create_species(rng, number, player, system, n_species)
        galaxy.add_species(species)
        _summarize_species(species, galaxy, transcript)
        logger.info(f"Species #{number} {species.name} placed at {system.coords}")

    home_clearance = settings.minimum_distance if settings.forbid_nearby_wormholes else 0
    created = place_wormholes(
        rng, galaxy, n_species, settings.min_wormhole_length, transcript, home_clearance
    )
    if created == 1:
        transcript.printf("The galaxy contains %d natural wormhole.\n\n", created)
    else:
        transcript.printf("The galaxy contains %d natural wormholes.\n\n", created)

    result = GenerationResult(galaxy=galaxy)
    for species in galaxy.species:
        home_system = galaxy.system_at(species.home)
        home_planet = galaxy.planet_at(species.home)
        text = f"\nScan of home star system for SP {species.name}:\n\n"
        text += scan_system(home_system, species, home_planet)
        text += "\n"
        result.scan_logs[species.number] = text

    total_planets = len(galaxy.all_planets())
    transcript.printf(
        "This galaxy contains a total of %d stars and %d planets.\n", len(galaxy.systems), total_planets
    )
    result.transcript = transcript.text()
    logger.info(f"Galaxy generated: {len(galaxy.systems)} stars, {total_planets} planets, {created} wormholes")
    return result
