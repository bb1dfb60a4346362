"""Builders for hand-made test galaxies."""

from farhorizons.models import (
    Colony,
    ColonyKind,
    Coords,
    Gas,
    GasType,
    Planet,
    PlanetSpecial,
    Ship,
    ShipClass,
    ShipStatus,
    Species,
    StarColor,
    StarType,
    System,
)


def make_planet(coords: Coords, special=PlanetSpecial.NOT_SPECIAL) -> Planet:
    """An earth-like planet: 20% oxygen, 78% nitrogen."""
    return Planet(
        coords=coords,
        diameter=12,
        gravity=100,
        temperature_class=11,
        pressure_class=10,
        mining_difficulty=100,
        density=550,
        gases=[Gas(GasType.N2, 78), Gas(GasType.O2, 20)],
        special=special,
    )


def make_system(x: int, y: int, z: int, n_planets: int = 3, home_orbit: int = 0) -> System:
    at = Coords(x, y, z)
    planets = []
    for orbit in range(1, n_planets + 1):
        special = PlanetSpecial.IDEAL_HOME_PLANET if orbit == home_orbit else PlanetSpecial.NOT_SPECIAL
        planets.append(make_planet(at.with_orbit(orbit), special))
    return System(coords=at, star_type=StarType.MAIN_SEQUENCE, color=StarColor.YELLOW, size=5, planets=planets)


def make_species(number: int, name: str, home: Coords, planet_name: str, designed: int = 2) -> Species:
    tech = [10, 10, 5, 3, 4, 3]  # MI MA ML GV LS BI
    species = Species(
        number=number,
        name=name,
        government_name=f"{name} Council",
        government_type="Democracy",
        home_system_name=f"{name} Prime",
        home=home,
        required_gas=GasType.O2,
        required_gas_min=10,
        required_gas_max=40,
        neutral_gases=[GasType.N2, GasType.HE, GasType.H2O, GasType.CO2, GasType.H2, GasType.CH4],
        poison_gases=[GasType.NH3, GasType.HCL, GasType.CL2, GasType.F2, GasType.SO2, GasType.H2S],
        tech_level=list(tech),
        init_tech_level=list(tech),
        tech_knowledge=list(tech),
        econ_units=500,
    )
    species.init_contact_masks(designed)
    species.add_colony(
        Colony(
            name=planet_name,
            coords=home,
            kind=ColonyKind.HOME,
            populated=True,
            pop_units=1500,
            shipyards=1,
            mi_base=300,
            ma_base=250,
        )
    )
    return species


def make_ship(name: str, coords: Coords, ship_class=ShipClass.TR, tonnage: int = 1, **status) -> Ship:
    return Ship(
        name=name,
        coords=coords,
        ship_class=ship_class,
        tonnage=tonnage,
        status=ShipStatus(**status),
    )
