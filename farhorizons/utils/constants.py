"""Game configuration constants."""

# A standard game
STANDARD_NUMBER_OF_SPECIES = 15
STANDARD_NUMBER_OF_STAR_SYSTEMS = 90
STANDARD_GALACTIC_RADIUS = 20  # Parsecs

# Galaxy limits
MIN_SPECIES = 1
MAX_SPECIES = 100
MIN_STARS = 12
MAX_STARS = 1000
MIN_RADIUS = 6
MAX_RADIUS = 50

# Systems per species for each density class. Sparse is sized as normal.
SYSTEMS_PER_SPECIES = {
    "sparse": 6,
    "normal": 6,
    "high": 9,
}
DEFAULT_DENSITY = "normal"

# Placement
MIN_SYSTEM_SPACING = 3  # Parsecs between any two systems
MAX_PLACEMENT_ATTEMPTS = 10_000  # Consecutive rejections before giving up
MIN_CHANCE_OF_STAR = 50
MAX_CHANCE_OF_STAR = 3200

# Planets per system
MIN_PLANETS = 1
MAX_PLANETS = 9
MIN_HOME_SYSTEM_PLANETS = 3
TEMPLATE_ATTEMPTS = 50_000

# Wormholes
DEFAULT_MIN_WORMHOLE_LENGTH = 20  # Parsecs
WORMHOLE_PERCENT = 8

# Species and colonies
HP_AVAILABLE_POP = 1500
INITIAL_MINING_TECH = 10
INITIAL_MANUFACTURING_TECH = 10
PLAYER_TECH_TOTAL = 15  # ML + GV + LS + BI
MAX_NAME_LENGTH = 31
MIN_SPECIES_NAME_LENGTH = 5
NUM_GOOD_GASES = 7

# Turn processing
ATTRITION_THRESHOLD = 50  # Colonies below this many units lose one per turn
EFFICIENCY_BASE_LIMIT = 2000  # Combined base (x10) before efficiency drops
HOME_GROWTH_FACTOR = 20  # Tenths of a percent
MAX_SHIP_AGE = 49
FULL_PERCENT = 10000  # Percentages stored in hundredths of a percent
OFF_MAP_ORBIT = 99
MAX_TURN = 999_999

# Testing
RNG_SEED_DEFAULT = 42  # Default seed for testing
