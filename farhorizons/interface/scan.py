"""Text scans of star systems and listings of the whole galaxy.

Both outputs are plain text in the classic fixed-width layout. A scan goes
into a species' event log (the home system scan on the setup turn) and the
galaxy listing is printed for the game master.
"""

from ..models import Coords, Galaxy, Planet, PlanetSpecial, Species, StarType, System
from ..utils.names import fixed_point

SCAN_HEADER = (
    "               Temp  Press Mining\n"
    "  #  Dia  Grav Class Class  Diff  LSN  Atmosphere\n"
    " " + "-" * 69 + "\n"
)

NOVA_REMNANT = (
    "\n\tThis star is a nova remnant. Any planets it may have once\n"
    "\thad have been blown away.\n\n"
)

NO_LSN = 99


def _atmosphere(planet: Planet) -> str:
    gases = [g for g in planet.gases if g.percentage > 0]
    if not gases:
        return "No atmosphere"
    return ",".join(g.label for g in gases)


def scan_system(
    system: System,
    species: Species | None = None,
    home_planet: Planet | None = None,
    message: str = "",
) -> str:
    """Render a scan of one star system.

    Args:
        system: System to scan
        species: Species doing the scan; its life support needs fill the LSN
            column, which shows 99 without one
        home_planet: The species' home planet, required with species
        message: Text of a message attached to the system, appended as is

    Returns:
        The scan report
    """
    lines = [
        "Coordinates:\tx = %d\ty = %d\tz = %d" % (system.coords.x, system.coords.y, system.coords.z),
        "\tstellar type = %s" % system.stellar_type,
        "   %d planets.\n\n" % system.num_planets,
    ]
    if system.wormhole is not None:
        lines.append("This star system is the terminus of a natural wormhole.\n\n")
    lines.append(SCAN_HEADER)

    if not system.planets:
        lines.append(NOVA_REMNANT)
        return "".join(lines)

    for planet in system.planets:
        lsn = NO_LSN
        if species is not None and home_planet is not None:
            lsn = species.life_support_needed(planet, home_planet)
        lines.append(
            "  %d  %3d  %s  %2d    %2d    %s %4d  %s\n"
            % (
                planet.orbit,
                planet.diameter,
                fixed_point(planet.gravity, 100),
                planet.temperature_class,
                planet.pressure_class,
                fixed_point(planet.mining_difficulty, 100),
                lsn,
                _atmosphere(planet),
            )
        )
    if message:
        lines.append(message)
    return "".join(lines)


def scan_galaxy_at(galaxy: Galaxy, coords: Coords) -> str:
    """Scan the system at coords, without a species."""
    system = galaxy.system_at(coords)
    if system is None:
        return "Scan Report: There is no star system at x = %d, y = %d, z = %d.\n" % (
            coords.x,
            coords.y,
            coords.z,
        )
    return scan_system(system)


def _climate_delta(planet: Planet, reference: Planet) -> int:
    """Life support needed on planet by a species native to reference, ignoring gases."""
    return 3 * abs(planet.temperature_class - reference.temperature_class) + 3 * abs(
        planet.pressure_class - reference.pressure_class
    )


def _planet_marker(planet: Planet) -> str:
    if planet.special == PlanetSpecial.IDEAL_HOME_PLANET:
        return " HOM "
    if planet.special == PlanetSpecial.IDEAL_COLONY_PLANET:
        return " COL "
    return "     "


def list_galaxy(galaxy: Galaxy, planets: bool = False, wormholes: bool = False) -> str:
    """List every system in the galaxy, followed by totals.

    Args:
        galaxy: Galaxy to list
        planets: Also list each planet, with HOM and COL markers and the
            LSN relative to the system's home or colony planet
        wormholes: List only the wormholes, one line per pair

    Returns:
        The listing
    """
    out: list[str] = []
    type_count = {star_type: 0 for star_type in StarType}
    total_planets = 0
    wormhole_ends = 0
    listed: set[int] = set()
    pairs = 0

    for number, system in enumerate(galaxy.all_systems(), start=1):
        if not wormholes:
            line = "System #%d:\t" % number if planets else ""
            line += "x = %d\ty = %d\tz = %d" % (system.coords.x, system.coords.y, system.coords.z)
            line += "\tstellar type = %s" % system.stellar_type
            if planets:
                line += "\t%d planets." % system.num_planets
            out.append(line + "\n")
            if not system.planets:
                out.append("\tStar #%d went nova! All planets were blown away!\n" % number)

        total_planets += system.num_planets
        type_count[system.star_type] += 1

        if system.wormhole is not None:
            wormhole_ends += 1
            if planets:
                out.append("!!! Natural wormhole from here to %s\n" % system.wormhole)
            elif wormholes and system.key not in listed:
                pairs += 1
                out.append("Wormhole #%d: from %s to %s\n" % (pairs, system.coords, system.wormhole))
                listed.add(system.key)
                listed.add(system.wormhole.system_id)

        if not planets:
            continue

        reference = next(
            (
                p
                for p in system.planets
                if p.special in (PlanetSpecial.IDEAL_HOME_PLANET, PlanetSpecial.IDEAL_COLONY_PLANET)
            ),
            None,
        )
        for planet in system.planets:
            line = _planet_marker(planet)
            line += "#%d dia=%3d g=%s tc=%2d pc=%2d md=%s" % (
                planet.orbit,
                planet.diameter,
                fixed_point(planet.gravity, 100),
                planet.temperature_class,
                planet.pressure_class,
                fixed_point(planet.mining_difficulty, 100),
            )
            if reference is not None:
                line += "%4d " % _climate_delta(planet, reference)
            else:
                line += "  "
            out.append(line + _atmosphere(planet) + "\n")
        out.append("\n")

    if not wormholes:
        out.append("The galaxy has a radius of %d parsecs.\n" % galaxy.radius)
        out.append(
            "It contains %d dwarf stars, %d degenerate stars, %d main sequence stars,\n"
            % (
                type_count[StarType.DWARF],
                type_count[StarType.DEGENERATE],
                type_count[StarType.MAIN_SEQUENCE],
            )
        )
        out.append(
            "    and %d giant stars, for a total of %d stars.\n"
            % (type_count[StarType.GIANT], len(galaxy.systems))
        )
        if planets:
            out.append("The total number of planets in the galaxy is %d.\n" % total_planets)
            out.append("The total number of natural wormholes in the galaxy is %d.\n" % (wormhole_ends // 2))
            out.append("The galaxy was designed for %d species.\n" % galaxy.d_num_species)
            out.append("A total of %d species have been designated so far.\n\n" % galaxy.num_species)
    return "".join(out)
