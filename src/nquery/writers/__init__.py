"""Output writers."""

from .json_writer import dumps, write_json

__all__ = ["dumps", "write_json"]
