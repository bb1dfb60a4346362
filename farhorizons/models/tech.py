"""Technology axes."""

from enum import IntEnum


class Tech(IntEnum):
    MI = 0  # Mining
    MA = 1  # Manufacturing
    ML = 2  # Military
    GV = 3  # Gravitics
    LS = 4  # Life support
    BI = 5  # Biology

    @property
    def label(self) -> str:
        return TECH_NAMES[self]


TECH_NAMES = {
    Tech.MI: "Mining",
    Tech.MA: "Manufacturing",
    Tech.ML: "Military",
    Tech.GV: "Gravitics",
    Tech.LS: "Life Support",
    Tech.BI: "Biology",
}

NUM_TECHS = len(Tech)
