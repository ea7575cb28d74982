"""Types for field path projection."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple, Union

JsonValue = Union[Dict[str, Any], List[Any], str, int, float, bool, None]
"""A decoded JSON value: object, array, string, number, boolean or null."""

JobDocument = Dict[str, Any]
"""Full JSON representation of one job, as returned by ``/v1/job/<id>``."""

ProjectedRecord = Dict[str, JsonValue]
"""Flat record keyed by the literal path strings, in request order."""


@dataclass(frozen=True, order=True)
class PathExpression:
    """Parsed dotted field path.

    Equality and ordering use only the literal string, which is also the
    output key. ``segments`` is derived from it deterministically.

    Examples:
        "ID" → PathExpression(raw="ID", segments=("ID",))
        "Meta.data-source" → PathExpression(raw="Meta.data-source", segments=("Meta", "data-source"))
    """

    raw: str
    """Original path string provided by the user."""

    segments: Tuple[str, ...] = field(compare=False)
    """Object keys to follow, outermost first. Never empty."""

    def __str__(self) -> str:
        return self.raw

    def __len__(self) -> int:
        return len(self.segments)
