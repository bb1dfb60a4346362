"""Validated file formats: setup.json, players.json and the interspecies ledger."""

from .config import GalaxySettings, Overrides, RadiusBounds, SetupConfig, load_setup_config
from .ledger import TransactionRecord, dump_ledger, parse_ledger
from .players import PlayerRecord, load_players, parse_players, validate_players

__all__ = [
    "GalaxySettings",
    "Overrides",
    "RadiusBounds",
    "SetupConfig",
    "load_setup_config",
    "TransactionRecord",
    "dump_ledger",
    "parse_ledger",
    "PlayerRecord",
    "load_players",
    "parse_players",
    "validate_players",
]
