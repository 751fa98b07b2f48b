"""Parsing of raw tagger output into (surface, tag) pairs."""

from typing import Iterable, Optional

from .errors import MalformedOutputError

SEPARATOR = "/"


def split_unit(unit: str) -> tuple[str, str]:
    """Split one ``surface/tag`` unit on its first separator.

    The search starts after the first character, so a slash token is
    read as a surface ("//SYM" -> ("/", "SYM")).

    Raises:
        MalformedOutputError: If the unit has no separator or no tag
    """
    idx = unit.find(SEPARATOR, 1)
    if idx == -1 or idx == len(unit) - 1:
        raise MalformedOutputError(unit)
    return unit[:idx], unit[idx + 1 :]


def is_delimiter(unit: str, delimiter: Optional[str]) -> bool:
    """Check whether a unit is the sentence delimiter.

    Taggers that tag the delimiter line like any token emit it as
    ``<delimiter>/<tag>``; both forms count.
    """
    if not delimiter:
        return False
    if unit == delimiter:
        return True
    return unit.startswith(delimiter + SEPARATOR)


def parse_units(
    units: Iterable[str], delimiter: Optional[str] = None
) -> list[tuple[str, str]]:
    """Parse whitespace-split output units, dropping delimiter units."""
    return [split_unit(unit) for unit in units if not is_delimiter(unit, delimiter)]


def parse(raw_output: str, delimiter: Optional[str] = None) -> list[tuple[str, str]]:
    """
    Parse raw tagger output.

    Args:
        raw_output: Whitespace-separated ``surface/tag`` units
        delimiter: Sentence delimiter marker to strip, if any

    Returns:
        Ordered list of (surface, tag) pairs

    Raises:
        MalformedOutputError: If a unit lacks a separator
    """
    return parse_units(raw_output.split(), delimiter)
