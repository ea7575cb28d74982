"""Field path projection for job documents.

Syntax:
    segment[.segment...]

Examples:
    ID                      # top-level field
    Meta.data-source        # nested object key
    ParameterizedJob.Payload
"""

from .parser import parse_path, parse_paths
from .projector import project, resolve
from .types import JobDocument, JsonValue, PathExpression, ProjectedRecord

__all__ = [
    "JobDocument",
    "JsonValue",
    "PathExpression",
    "ProjectedRecord",
    "parse_path",
    "parse_paths",
    "project",
    "resolve",
]
