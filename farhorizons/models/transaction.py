"""Interspecies transaction ledger entries."""

from dataclasses import dataclass
from enum import IntEnum

from .coords import Coords


class TransactionType(IntEnum):
    EU_TRANSFER = 1
    MESSAGE_TO_SPECIES = 2
    BESIEGE_PLANET = 3
    SIEGE_EU_TRANSFER = 4
    TECH_TRANSFER = 5
    DETECTION_DURING_SIEGE = 6
    SHIP_MISHAP = 7
    ASSIMILATION = 8
    INTERSPECIES_CONSTRUCTION = 9
    TELESCOPE_DETECTION = 10
    ALIEN_JUMP_PORTAL_USAGE = 11
    KNOWLEDGE_TRANSFER = 12
    LANDING_REQUEST = 13
    LOOTING_EU_TRANSFER = 14
    ALLIES_ORDER = 15


# Outcome codes written back into number_1 of a tech transfer
TECH_TRANSFER_OFFER_TOO_LOW = -1
TECH_TRANSFER_NOT_FUNDED = -2


@dataclass
class Transaction:
    """One event produced by order resolution and consumed by the turn processor.

    The meaning of value and of the number/name pairs depends on the type.
    The turn processor writes tech transfer outcomes back into number_1..3
    so the donor's log can report them later in the same turn.
    """

    type: TransactionType
    donor: int = 0  # Species number
    recipient: int = 0  # Species number
    value: int = 0
    x: int = 0
    y: int = 0
    z: int = 0
    pn: int = 0  # Planet number
    number_1: int = 0
    name_1: str = ""
    number_2: int = 0
    name_2: str = ""
    number_3: int = 0
    name_3: str = ""

    def __post_init__(self):
        self.type = TransactionType(self.type)

    @property
    def coords(self) -> Coords:
        return Coords(self.x, self.y, self.z, self.pn)
