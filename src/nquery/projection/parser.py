"""Parsing for dotted field paths.

Splitting is purely lexical on ``.``. There is no escape syntax, so a key
that itself contains a dot cannot be addressed.
"""

from typing import Iterable, List

from ..errors import InvalidPath
from .types import PathExpression

SEPARATOR = "."


def parse_path(raw: str) -> PathExpression:
    """Parse a dotted path like ``Meta.data-source``.

    Args:
        raw: Path string from the user

    Returns:
        Parsed PathExpression

    Raises:
        InvalidPath: If ``raw`` is empty or has an empty segment
            (leading, trailing or doubled dot)

    Examples:
        >>> parse_path("a.b.c").segments
        ('a', 'b', 'c')
        >>> parse_path("a..b")
        Traceback (most recent call last):
        ...
        nquery.errors.InvalidPath: Invalid field path 'a..b': empty segment at position 2
    """
    if not raw:
        raise InvalidPath(raw, "path cannot be empty")

    segments = raw.split(SEPARATOR)
    for position, segment in enumerate(segments, start=1):
        if not segment:
            raise InvalidPath(raw, f"empty segment at position {position}")

    return PathExpression(raw=raw, segments=tuple(segments))


def parse_paths(raws: Iterable[str]) -> List[PathExpression]:
    """Parse several paths, keeping first-seen order and dropping repeats."""
    seen = set()
    paths = []
    for raw in raws:
        path = parse_path(raw)
        if path in seen:
            continue
        seen.add(path)
        paths.append(path)
    return paths
