"""Project job documents down to a flat record of dotted paths.

Resolution walks one object key per segment. Anything that is not an
object (scalar, array, null) or a missing key ends the walk with ``None``.
Arrays are never fanned out. A missing field and a field that is null in
the source both come out as ``None``.
"""

from typing import Any, Iterable, Mapping

from .types import JsonValue, PathExpression, ProjectedRecord


def resolve(document: Any, path: PathExpression) -> JsonValue:
    """Resolve one path against a decoded JSON value.

    Args:
        document: Decoded JSON value to walk (normally a job document)
        path: Parsed path expression

    Returns:
        The terminal value, verbatim, or None if any segment is absent
    """
    current = document
    for segment in path.segments:
        if not isinstance(current, Mapping):
            return None
        if segment not in current:
            return None
        current = current[segment]
    return current


def project(
    document: Any, paths: Iterable[PathExpression]
) -> ProjectedRecord:
    """Build a flat record with one entry per path, in the given order.

    Never raises for a well-formed PathExpression; values that cannot be
    resolved are None.

    Examples:
        >>> from nquery.projection.parser import parse_path
        >>> project({"ID": "redis", "Meta": None}, [parse_path("Meta.data-source")])
        {'Meta.data-source': None}
    """
    return {path.raw: resolve(document, path) for path in paths}
