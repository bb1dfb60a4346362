"""Game state serialization to/from JSON.

The game directory holds game.json (the turn counter), setup.json,
players.json and message bodies (m000123.msg). Each turn has its own
directory, t000003 for turn 3, holding:

    galaxy.json        systems, planets and wormholes
    species.json       species, colonies and ships
    interspecies.json  the transaction ledger for the turn
    sp01.ord           orders submitted by species 1
    sp01.log.txt       events logged while the previous turn was finished
    sp01.rpt           the status report and order template

Every file is written to a temporary file first and then renamed into
place, so an interrupted write never leaves a half-written file behind.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from ..errors import ConfigurationError
from ..models.colony import Colony
from ..models.coords import Coords
from ..models.galaxy import Galaxy
from ..models.game import Game, turn_dir
from ..models.planet import GAS_SYMBOLS, Gas, Planet
from ..models.ship import Ship, ShipClass, ShipStatus
from ..models.species import Species
from ..models.star import System
from ..models.transaction import Transaction
from ..schemas.ledger import dump_ledger, parse_ledger

logger = logging.getLogger(__name__)

GAME_FILE = "game.json"
GALAXY_FILE = "galaxy.json"
SPECIES_FILE = "species.json"
LEDGER_FILE = "interspecies.json"

_GAS_BY_SYMBOL = {symbol: gas for gas, symbol in GAS_SYMBOLS.items()}


# ---------- file names ----------


def turn_path(game_dir: Path, turn: int) -> Path:
    return Path(game_dir) / turn_dir(turn)


def orders_file(path: Path, species_number: int) -> Path:
    return Path(path) / f"sp{species_number:02d}.ord"


def log_file(path: Path, species_number: int) -> Path:
    return Path(path) / f"sp{species_number:02d}.log.txt"


def report_file(path: Path, species_number: int) -> Path:
    return Path(path) / f"sp{species_number:02d}.rpt"


def message_file(game_dir: Path, message_id: int) -> Path:
    return Path(game_dir) / f"m{message_id:06d}.msg"


# ---------- raw I/O ----------


def write_text(path: Path, text: str) -> None:
    """Write a text file atomically, creating its directory if needed."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w") as f:
            f.write(text)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def write_json(path: Path, data: Any) -> None:
    write_text(path, json.dumps(data, indent=2) + "\n")


def read_json(path: Path) -> Any:
    """Read a JSON file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ConfigurationError: If the file is not valid JSON
    """
    path = Path(path)
    with open(path) as f:
        try:
            return json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"{path}: {e}") from e


def read_text_if_exists(path: Path) -> str:
    """Return the file's text, or "" if there is no such file."""
    try:
        return Path(path).read_text()
    except FileNotFoundError:
        return ""


def orders_received(path: Path, species_number: int) -> bool:
    """A species has submitted orders if its order file exists and is not empty."""
    try:
        return orders_file(path, species_number).stat().st_size > 0
    except FileNotFoundError:
        return False


# ---------- game.json ----------


def save_game(game_dir: Path, game: Game) -> None:
    write_json(Path(game_dir) / GAME_FILE, {"current_turn": game.current_turn})


def load_game(game_dir: Path) -> Game:
    """Load the turn counter.

    Raises:
        FileNotFoundError: If game.json doesn't exist
        ConfigurationError: If the turn is out of range
    """
    data = read_json(Path(game_dir) / GAME_FILE)
    try:
        return Game(current_turn=int(data["current_turn"]))
    except (KeyError, TypeError, ValueError) as e:
        raise ConfigurationError(f"game.json: {e}") from e


# ---------- messages ----------


def load_message(game_dir: Path, message_id: int) -> str:
    """Return a message body. Message files hold a single JSON string."""
    body = read_json(message_file(game_dir, message_id))
    if not isinstance(body, str):
        raise ConfigurationError(f"message {message_id} is not a string")
    return body


def save_message(game_dir: Path, message_id: int, body: str) -> None:
    write_json(message_file(game_dir, message_id), body)


# ---------- ledger ----------


def load_ledger(path: Path) -> list[Transaction]:
    """Load the interspecies ledger for a turn. A missing file means no transactions."""
    ledger_path = Path(path) / LEDGER_FILE
    if not ledger_path.exists():
        logger.debug(f"No ledger at {ledger_path}")
        return []
    return parse_ledger(read_json(ledger_path))


def save_ledger(path: Path, transactions: list[Transaction]) -> None:
    write_json(Path(path) / LEDGER_FILE, dump_ledger(transactions))


# ---------- galaxy.json and species.json ----------


def save_galaxy(path: Path, galaxy: Galaxy) -> None:
    """Write galaxy.json and species.json into a turn directory."""
    path = Path(path)
    write_json(path / GALAXY_FILE, _serialize_galaxy(galaxy))
    write_json(path / SPECIES_FILE, [_serialize_species(s) for s in galaxy.species])
    logger.debug(f"Saved {len(galaxy.systems)} systems and {len(galaxy.species)} species to {path}")


def load_galaxy(path: Path) -> Galaxy:
    """Read galaxy.json and species.json from a turn directory.

    Raises:
        FileNotFoundError: If either file doesn't exist
        ConfigurationError: If either file is malformed
    """
    path = Path(path)
    galaxy_data = read_json(path / GALAXY_FILE)
    species_data = read_json(path / SPECIES_FILE)
    try:
        galaxy = _deserialize_galaxy(galaxy_data)
        for data in species_data:
            galaxy.add_species(_deserialize_species(data))
    except (KeyError, TypeError, ValueError) as e:
        raise ConfigurationError(f"{path}: malformed game state: {e!r}") from e
    logger.debug(f"Loaded {len(galaxy.systems)} systems and {len(galaxy.species)} species from {path}")
    return galaxy


def _serialize_coords(c: Coords) -> dict[str, int]:
    return {"x": c.x, "y": c.y, "z": c.z, "orbit": c.orbit}


def _deserialize_coords(data: dict[str, int] | None) -> Coords:
    if data is None:
        return Coords.unset()
    return Coords(data["x"], data["y"], data["z"], data.get("orbit", 0))


def _serialize_galaxy(galaxy: Galaxy) -> dict[str, Any]:
    systems = sorted(galaxy.systems.values(), key=lambda s: s.key)
    wormholes = [
        {"from": _serialize_coords(s.coords), "to": _serialize_coords(s.wormhole)}
        for s in systems
        if s.wormhole is not None
    ]
    return {
        "id": galaxy.id,
        "name": galaxy.name,
        "radius": galaxy.radius,
        "d_num_species": galaxy.d_num_species,
        "species": [s.name for s in galaxy.species],
        "systems": [_serialize_system(s) for s in systems],
        "wormholes": wormholes,
    }


def _deserialize_galaxy(data: dict[str, Any]) -> Galaxy:
    galaxy = Galaxy(
        id=data["id"],
        name=data["name"],
        radius=data["radius"],
        d_num_species=data.get("d_num_species", len(data.get("species", []))),
    )
    for system_data in data["systems"]:
        galaxy.add_system(_deserialize_system(system_data))
    for link in data.get("wormholes", []):
        source = galaxy.system_at(_deserialize_coords(link["from"]))
        if source is None:
            raise ValueError(f"wormhole from empty space at {link['from']}")
        source.wormhole = _deserialize_coords(link["to"]).system()
    return galaxy


def _serialize_system(system: System) -> dict[str, Any]:
    return {
        "coords": _serialize_coords(system.coords),
        "star_type": int(system.star_type),
        "color": int(system.color),
        "size": system.size,
        "home_species": system.home_species,
        "message": system.message,
        "planets": [_serialize_planet(p) for p in system.planets],
        "visited_by": sorted(system.visited_by),
    }


def _deserialize_system(data: dict[str, Any]) -> System:
    return System(
        coords=_deserialize_coords(data["coords"]),
        star_type=data["star_type"],
        color=data["color"],
        size=data["size"],
        planets=[_deserialize_planet(p) for p in data.get("planets", [])],
        visited_by=set(data.get("visited_by", [])),
        home_species=data.get("home_species"),
        message=data.get("message", 0),
    )


def _serialize_planet(planet: Planet) -> dict[str, Any]:
    return {
        "orbit": planet.orbit,
        "density": planet.density,
        "diameter": planet.diameter,
        "econ_efficiency": planet.econ_efficiency,
        "gases": [{"gas": g.type.char, "percentage": g.percentage} for g in planet.gases],
        "gravity": planet.gravity,
        "message": planet.message,
        "mining_difficulty": planet.mining_difficulty,
        "md_increase": planet.md_increase,
        "pressure_class": planet.pressure_class,
        "special": int(planet.special),
        "temperature_class": planet.temperature_class,
        "coords": _serialize_coords(planet.coords),
    }


def _deserialize_planet(data: dict[str, Any]) -> Planet:
    return Planet(
        coords=_deserialize_coords(data["coords"]),
        diameter=data["diameter"],
        gravity=data["gravity"],
        temperature_class=data["temperature_class"],
        pressure_class=data["pressure_class"],
        mining_difficulty=data["mining_difficulty"],
        density=data.get("density", 0),
        md_increase=data.get("md_increase", 0),
        gases=[Gas(_GAS_BY_SYMBOL[g["gas"]], g["percentage"]) for g in data.get("gases", [])],
        econ_efficiency=data.get("econ_efficiency", 100),
        special=data.get("special", 0),
        message=data.get("message", 0),
    )


def _serialize_species(species: Species) -> dict[str, Any]:
    return {
        "number": species.number,
        "name": species.name,
        "government_name": species.government_name,
        "government_type": species.government_type,
        "home_system_name": species.home_system_name,
        "home": _serialize_coords(species.home),
        "required_gas": species.required_gas.char,
        "required_gas_min": species.required_gas_min,
        "required_gas_max": species.required_gas_max,
        "neutral_gases": [g.char for g in species.neutral_gases],
        "poison_gases": [g.char for g in species.poison_gases],
        "auto_orders": species.auto_orders,
        "tech_level": list(species.tech_level),
        "init_tech_level": list(species.init_tech_level),
        "tech_knowledge": list(species.tech_knowledge),
        "tech_eps": list(species.tech_eps),
        "hp_original_base": species.hp_original_base,
        "econ_units": species.econ_units,
        "fleet_cost": species.fleet_cost,
        "fleet_percent_cost": species.fleet_percent_cost,
        "contact": [n for n, flag in enumerate(species.contact) if flag],
        "ally": [n for n, flag in enumerate(species.ally) if flag],
        "enemy": [n for n, flag in enumerate(species.enemy) if flag],
        "mask_size": len(species.contact),
        "colonies": [_serialize_colony(c) for c in species.colonies],
        "ships": [_serialize_ship(s) for s in species.ships],
    }


def _mask(numbers: list[int], size: int) -> list[bool]:
    mask = [False] * size
    for n in numbers:
        mask[n] = True
    return mask


def _deserialize_species(data: dict[str, Any]) -> Species:
    size = data["mask_size"]
    return Species(
        number=data["number"],
        name=data["name"],
        government_name=data["government_name"],
        government_type=data["government_type"],
        home_system_name=data["home_system_name"],
        home=_deserialize_coords(data["home"]),
        required_gas=_GAS_BY_SYMBOL[data["required_gas"]],
        required_gas_min=data["required_gas_min"],
        required_gas_max=data["required_gas_max"],
        neutral_gases=[_GAS_BY_SYMBOL[g] for g in data["neutral_gases"]],
        poison_gases=[_GAS_BY_SYMBOL[g] for g in data["poison_gases"]],
        auto_orders=data.get("auto_orders", False),
        tech_level=list(data["tech_level"]),
        init_tech_level=list(data["init_tech_level"]),
        tech_knowledge=list(data["tech_knowledge"]),
        tech_eps=list(data["tech_eps"]),
        hp_original_base=data.get("hp_original_base", 0),
        econ_units=data.get("econ_units", 0),
        fleet_cost=data.get("fleet_cost", 0),
        fleet_percent_cost=data.get("fleet_percent_cost", 0),
        contact=_mask(data.get("contact", []), size),
        ally=_mask(data.get("ally", []), size),
        enemy=_mask(data.get("enemy", []), size),
        colonies=[_deserialize_colony(c) for c in data.get("colonies", [])],
        ships=[_deserialize_ship(s) for s in data.get("ships", [])],
    )


_COLONY_FIELDS = (
    "populated",
    "hiding",
    "hidden",
    "siege_eff",
    "shipyards",
    "ius_needed",
    "aus_needed",
    "auto_ius",
    "auto_aus",
    "ius_to_install",
    "aus_to_install",
    "mi_base",
    "ma_base",
    "pop_units",
    "use_on_ambush",
    "message",
    "special",
)


def _serialize_colony(colony: Colony) -> dict[str, Any]:
    data = {
        "name": colony.name,
        "coords": _serialize_coords(colony.coords),
        "kind": colony.kind.value,
    }
    for name in _COLONY_FIELDS:
        data[name] = getattr(colony, name)
    data["items"] = list(colony.items)
    return data


def _deserialize_colony(data: dict[str, Any]) -> Colony:
    kwargs = {name: data[name] for name in _COLONY_FIELDS if name in data}
    return Colony(
        name=data["name"],
        coords=_deserialize_coords(data["coords"]),
        kind=data["kind"],
        items=list(data["items"]),
        **kwargs,
    )


_STATUS_FIELDS = (
    "under_construction",
    "on_surface",
    "in_orbit",
    "in_deep_space",
    "jumped_in_combat",
    "forced_jump",
    "destroyed",
)


def _serialize_ship(ship: Ship) -> dict[str, Any]:
    return {
        "name": ship.name,
        "coords": _serialize_coords(ship.coords),
        "class": ship.hull.abbr,
        "type": int(ship.ship_type),
        "tonnage": ship.tonnage,
        "status": [name for name in _STATUS_FIELDS if getattr(ship.status, name)],
        "items": list(ship.items),
        "age": ship.age,
        "remaining_cost": ship.remaining_cost,
        "dest": _serialize_coords(ship.dest) if ship.dest.is_set else None,
        "just_jumped": int(ship.just_jumped),
        "arrived_via_wormhole": ship.arrived_via_wormhole,
        "loading_point": _serialize_coords(ship.loading_point) if ship.loading_point.is_set else None,
        "unloading_point": (
            _serialize_coords(ship.unloading_point) if ship.unloading_point.is_set else None
        ),
        "auto_jump_target": (
            _serialize_coords(ship.auto_jump_target) if ship.auto_jump_target.is_set else None
        ),
    }


def _deserialize_ship(data: dict[str, Any]) -> Ship:
    status = ShipStatus(**{name: True for name in data.get("status", [])})
    return Ship(
        name=data["name"],
        coords=_deserialize_coords(data["coords"]),
        ship_class=ShipClass[data["class"]],
        ship_type=data.get("type", 0),
        tonnage=data.get("tonnage", 1),
        status=status,
        items=list(data["items"]),
        age=data.get("age", 0),
        remaining_cost=data.get("remaining_cost", 0),
        dest=_deserialize_coords(data.get("dest")),
        just_jumped=data.get("just_jumped", 0),
        arrived_via_wormhole=data.get("arrived_via_wormhole", False),
        loading_point=_deserialize_coords(data.get("loading_point")),
        unloading_point=_deserialize_coords(data.get("unloading_point")),
        auto_jump_target=_deserialize_coords(data.get("auto_jump_target")),
    )
