"""Pydantic models for nquery configuration."""

from .config import Settings

__all__ = ["Settings"]
