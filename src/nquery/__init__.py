"""nquery: query Nomad jobs by ID prefix and project fields to JSON."""

__all__ = ["__version__"]

__version__ = "0.1.0"
