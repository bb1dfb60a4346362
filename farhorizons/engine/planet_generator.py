"""Planet generation: star system planet counts, environments and home templates."""

import logging

from ..errors import GalaxyGenerationError
from ..models import Coords, Gas, GasType, Planet, PlanetSpecial, StarColor, StarType
from ..models.star import PLANET_DICE, PLANET_DIE_SIZE
from ..utils import GameRNG
from ..utils.constants import MAX_PLANETS, MIN_HOME_SYSTEM_PLANETS, TEMPLATE_ATTEMPTS

logger = logging.getLogger(__name__)

# Starting diameter (thousands of km) and temperature class by position in the system
START_DIAMETER = (0, 5, 12, 13, 7, 20, 143, 121, 51, 49)
START_TEMPERATURE_CLASS = (0, 29, 27, 11, 9, 8, 6, 5, 5, 3)

GAS_GIANT_DIAMETER = 40
HOME_PLANET_ORBIT = 3
MIN_MINING_DIFFICULTY = 40
MAX_MINING_DIFFICULTY = 500


def roll_for_planets(
    rng: GameRNG, star_type: StarType, color: StarColor, min_planets: int, max_planets: int
) -> int:
    """Roll the number of planets for a star.

    Bigger stars roll more dice and bluer stars roll bigger dice. The total
    starts at -2 to favour small systems, then is nudged into the band.
    """
    n = -2
    for _ in range(PLANET_DICE[star_type]):
        n += rng.roll(PLANET_DIE_SIZE[color])
    while n < min_planets:
        n += rng.roll(2)
    while n > max_planets:
        n -= rng.roll(3)
    return n


def _randomize(rng: GameRNG, value: int, rolls: int) -> int:
    """Push a value up or down by rolls of a die a quarter of its size."""
    die_size = max(value // 4, 2)
    for _ in range(rolls):
        roll = rng.roll(die_size)
        if rng.roll(100) > 50:
            value += roll
        else:
            value -= roll
    return value


def _generate_gases(rng: GameRNG, temperature_class: int) -> list[Gas]:
    """Pick one to four gases, starting from a point in the gas table set by temperature."""
    first_gas = min(max(100 * temperature_class // 225, 1), 9)
    wanted = (rng.roll(4) + rng.roll(4)) // 2

    picked: list[tuple[GasType, int]] = []
    while not picked:
        for n in range(first_gas, first_gas + 5):
            if len(picked) == wanted:
                break
            gas = GasType(n)
            if gas == GasType.HE:
                # Helium is rare and boils off warm planets
                if rng.roll(3) > 1 or temperature_class > 5:
                    continue
                picked.append((gas, rng.roll(20)))
            else:
                if rng.roll(3) == 3:
                    continue
                quantity = rng.roll(50) if gas == GasType.O2 else rng.roll(100)
                picked.append((gas, quantity))

    total_quantity = sum(quantity for _, quantity in picked)
    gases = [Gas(gas, 100 * quantity // total_quantity) for gas, quantity in picked]
    gases[0].percentage += 100 - sum(g.percentage for g in gases)
    return gases


def _mining_difficulty(rng: GameRNG, diameter: int) -> int:
    md = 0
    while md < MIN_MINING_DIFFICULTY or md > MAX_MINING_DIFFICULTY:
        md = (rng.roll(3) + rng.roll(3) + rng.roll(3) - rng.roll(4)) * rng.roll(diameter)
        md += rng.roll(30) + rng.roll(30)
    return md * 11 // 5


def _earth_like_planet(rng: GameRNG, coords: Coords) -> Planet:
    """A planet a newly-created species can call home."""
    diameter = 11 + rng.roll(3)
    density = 500 + rng.roll(50)
    oxygen = 15 + rng.roll(15)
    gases = [Gas(GasType.N2, 0)]
    if rng.roll(3) == 1:
        gases.append(Gas(GasType.CO2, rng.roll(3)))
    gases.append(Gas(GasType.O2, oxygen))
    gases[0].percentage = 100 - sum(g.percentage for g in gases)
    return Planet(
        coords=coords,
        diameter=diameter,
        gravity=density * diameter // 72,
        temperature_class=9 + rng.roll(3),
        pressure_class=7 + rng.roll(3),
        mining_difficulty=_mining_difficulty(rng, diameter),
        density=density,
        gases=gases,
        special=PlanetSpecial.IDEAL_HOME_PLANET,
    )


def generate_planets(
    rng: GameRNG, system_coords: Coords, num_planets: int, earth_like: bool = False
) -> list[Planet]:
    """Generate the planets of a star system.

    Diameter and temperature start from the planet's position in the system
    and are then randomized. Gravity follows from density and diameter,
    pressure from gravity, and the atmosphere from temperature. Planets
    farther out are never warmer than the ones inside them.

    Args:
        rng: Random source
        system_coords: Coordinates of the star
        num_planets: Number of planets, 1-9
        earth_like: Make planet 3 an ideal home planet

    Returns:
        Planets in orbit order
    """
    if not (1 <= num_planets <= MAX_PLANETS):
        raise ValueError(f"Invalid num_planets: {num_planets} (must be 1-{MAX_PLANETS})")

    planets: list[Planet] = []
    previous_tc = 0
    for orbit in range(1, num_planets + 1):
        coords = system_coords.with_orbit(orbit)
        if earth_like and orbit == HOME_PLANET_ORBIT:
            planet = _earth_like_planet(rng, coords)
            planets.append(planet)
            previous_tc = planet.temperature_class
            continue

        position = 9 * orbit // num_planets if num_planets > 3 else 2 * orbit + 1

        diameter = _randomize(rng, START_DIAMETER[position], 4)
        while diameter < 3:
            diameter += rng.roll(4)
        gas_giant = diameter > GAS_GIANT_DIAMETER

        if gas_giant:
            density = 58 + rng.roll(56) + rng.roll(56)
        else:
            density = 368 + rng.roll(101) + rng.roll(101) + rng.roll(101) + rng.roll(101)
        gravity = density * diameter // 72

        tc = START_TEMPERATURE_CLASS[position]
        tc = _randomize(rng, tc, rng.roll(3) + rng.roll(3) + rng.roll(3))
        if gas_giant:
            while tc < 3:
                tc += rng.roll(2)
            while tc > 7:
                tc -= rng.roll(2)
        else:
            while tc < 1:
                tc += rng.roll(3)
            while tc > 30:
                tc -= rng.roll(3)
        # Inner planets of small systems are warmed up a little
        if num_planets < 4 and orbit < 3:
            while tc < 12:
                tc += rng.roll(4)
        if orbit > 1 and previous_tc < tc:
            tc = previous_tc
        previous_tc = tc

        pc = _randomize(rng, gravity // 10, rng.roll(3) + rng.roll(3) + rng.roll(3))
        if gas_giant:
            while pc < 11:
                pc += rng.roll(3)
            while pc > 29:
                pc -= rng.roll(3)
        else:
            while pc < 0:
                pc += rng.roll(3)
            while pc > 12:
                pc -= rng.roll(3)
        # Too light, too cold or too hot to hold an atmosphere
        if gravity < 10 or tc < 2 or tc > 27:
            pc = 0

        gases = _generate_gases(rng, tc) if pc > 0 else []

        planets.append(
            Planet(
                coords=coords,
                diameter=diameter,
                gravity=gravity,
                temperature_class=tc,
                pressure_class=pc,
                mining_difficulty=_mining_difficulty(rng, diameter),
                density=density,
                gases=gases,
            )
        )
    return planets


def _mark_ideal_colonies(planets: list[Planet]) -> int:
    """Flag rocky planets whose climate is close to the home planet's.

    Returns:
        Number of planets flagged
    """
    home = next(p for p in planets if p.special == PlanetSpecial.IDEAL_HOME_PLANET)
    count = 0
    for planet in planets:
        if planet is home or planet.diameter > GAS_GIANT_DIAMETER or planet.pressure_class == 0:
            continue
        delta = abs(planet.temperature_class - home.temperature_class)
        delta += abs(planet.pressure_class - home.pressure_class)
        if delta <= 4:
            planet.special = PlanetSpecial.IDEAL_COLONY_PLANET
            count += 1
    return count


def generate_home_template(
    rng: GameRNG, num_planets: int, attempts: int = TEMPLATE_ATTEMPTS
) -> list[Planet] | None:
    """Generate an earth-like system with at least one good colony site.

    Returns:
        Template planets (at origin coordinates), or None if no attempt succeeded
    """
    origin = Coords(0, 0, 0)
    for attempt in range(1, attempts + 1):
        planets = generate_planets(rng, origin, num_planets, earth_like=True)
        if _mark_ideal_colonies(planets) > 0:
            logger.debug(f"Template for {num_planets} planets accepted after {attempt} attempts")
            return planets
    return None


def build_home_templates(rng: GameRNG, attempts: int = TEMPLATE_ATTEMPTS) -> dict[int, list[Planet]]:
    """Build one home system template for every planet count a home system can have.

    Raises:
        GalaxyGenerationError: If any template could not be generated
    """
    templates = {}
    for n in range(MIN_HOME_SYSTEM_PLANETS, MAX_PLANETS + 1):
        template = generate_home_template(rng, n, attempts)
        if template is None:
            raise GalaxyGenerationError(f"unable to generate template for system with {n} planets")
        templates[n] = template
    return templates
