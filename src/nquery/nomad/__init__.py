"""Nomad HTTP API access."""

from .client import NomadClient, build_session
from .models import JobSummary, ParameterizedJobConfig, PeriodicConfig

__all__ = [
    "JobSummary",
    "NomadClient",
    "ParameterizedJobConfig",
    "PeriodicConfig",
    "build_session",
]
