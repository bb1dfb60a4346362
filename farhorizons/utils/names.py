"""Name validation and text formatting helpers.

Names typed by players end up in reports, order files and on the command
line of the order parser, so they are restricted to letters, digits, spaces
and a handful of punctuation marks.
"""

FORBIDDEN_NAME_CHARACTERS = "$!`\"{}\\"
EXTRA_NAME_CHARACTERS = ".'-"


def name_problem(name: str) -> str | None:
    """Check a player-supplied name.

    Args:
        name: Name to check

    Returns:
        Description of the first problem found, or None if the name is valid

    Examples:
        >>> name_problem("Zorgons")
        >>> name_problem(" Zorgons")
        "name can't have leading or trailing spaces"
    """
    if name != name.strip():
        return "name can't have leading or trailing spaces"
    if name == "":
        return "name can't be blank"
    for ch in name:
        if ch in FORBIDDEN_NAME_CHARACTERS:
            return f"invalid character {ch!r} in name"
        if not (ch.isalpha() or ch.isdigit() or ch.isspace() or ch in EXTRA_NAME_CHARACTERS):
            return f"invalid character {ch!r} in name"
    return None


def is_valid_name(name: str) -> bool:
    """Return True if the name passes every check in name_problem."""
    return name_problem(name) is None


def commas(value: int) -> str:
    """Format an integer with thousands separators.

    Examples:
        >>> commas(1234567)
        '1,234,567'
        >>> commas(-1000)
        '-1,000'
    """
    return f"{value:,}"


def fixed_point(value: int, scale: int = 10) -> str:
    """Format a value stored as an integer multiple of 1/scale.

    Mining and manufacturing bases are stored times ten, gravity and mining
    difficulty times one hundred.

    Examples:
        >>> fixed_point(123)
        '12.3'
        >>> fixed_point(105, 100)
        '1.05'
    """
    width = len(str(scale)) - 1
    return f"{value // scale}.{value % scale:0{width}d}"
