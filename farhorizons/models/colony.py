"""Named planet (colony) data model."""

from dataclasses import dataclass, field
from enum import Enum

from .coords import Coords
from .item import MAX_ITEMS, ItemKind, empty_inventory


class ColonyKind(str, Enum):
    """What a named planet is to its species.

    Population is tracked separately by Colony.populated, so a HOME or COLONY
    can be populated or not. Mining and resort colonies count as colonies.
    """

    HOME = "home"
    COLONY = "colony"
    MINING = "mining"
    RESORT = "resort"
    DISBANDED = "disbanded"


@dataclass
class Colony:
    """A planet named and claimed by a species."""

    name: str
    coords: Coords  # Planet coordinates, orbit 99 while off the map
    kind: ColonyKind = ColonyKind.COLONY
    populated: bool = False
    hiding: bool = False  # HIDE order given this turn
    hidden: bool = False  # Hidden from aliens this turn
    siege_eff: int = 0  # Percent, 0-99
    shipyards: int = 0
    ius_needed: int = 0  # For incoming ships carrying only CUs
    aus_needed: int = 0
    auto_ius: int = 0  # Installed automatically next turn
    auto_aus: int = 0
    ius_to_install: int = 0
    aus_to_install: int = 0
    mi_base: int = 0  # Mining base times 10
    ma_base: int = 0  # Manufacturing base times 10
    pop_units: int = 0  # Available population units
    use_on_ambush: int = 0
    message: int = 0  # Message id logged when first populated
    special: int = 0
    items: list[int] = field(default_factory=empty_inventory)  # Indexed by ItemKind

    def __post_init__(self):
        self.kind = ColonyKind(self.kind)
        if len(self.items) != MAX_ITEMS:
            raise ValueError(f"Invalid inventory size: {len(self.items)} (must be {MAX_ITEMS})")
        if not (0 <= self.siege_eff <= 100):
            raise ValueError(f"Invalid siege_eff: {self.siege_eff} (must be 0-100)")

    @property
    def is_home(self) -> bool:
        return self.kind == ColonyKind.HOME

    @property
    def is_mining(self) -> bool:
        return self.kind == ColonyKind.MINING

    @property
    def is_resort(self) -> bool:
        return self.kind == ColonyKind.RESORT

    @property
    def is_disbanded(self) -> bool:
        return self.kind == ColonyKind.DISBANDED

    @property
    def is_colony(self) -> bool:
        return self.kind in (ColonyKind.COLONY, ColonyKind.MINING, ColonyKind.RESORT)

    @property
    def economic_base(self) -> int:
        return self.mi_base + self.ma_base

    def total_population(self) -> int:
        """Everything that counts towards keeping the colony alive."""
        return (
            self.mi_base
            + self.ma_base
            + self.ius_to_install
            + self.aus_to_install
            + self.items[ItemKind.PD]
            + self.items[ItemKind.CU]
            + self.pop_units
        )

    def check_population(self) -> bool:
        """Recompute the populated flag.

        A colony with nothing left stops being a mining or resort colony.

        Returns:
            True if the colony was not populated before and is now
        """
        was_populated = self.populated
        total = self.total_population()
        self.populated = total > 0
        if total == 0 and self.kind in (ColonyKind.MINING, ColonyKind.RESORT):
            self.kind = ColonyKind.COLONY
        return self.populated and not was_populated

    def kind_label(self) -> str:
        """Heading used for this planet in a species report."""
        if self.is_home:
            return "HOME PLANET"
        if self.is_mining:
            return "MINING COLONY"
        if self.is_resort:
            return "RESORT COLONY"
        if self.populated:
            return "COLONY PLANET"
        return "PLANET"
