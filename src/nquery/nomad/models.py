"""Nomad API models.

Listing entries (``/v1/jobs``) report ``Periodic`` and ``ParameterizedJob``
as booleans, while full job documents (``/v1/job/<id>``) carry objects in
the same fields. Both shapes are accepted here.
"""

from __future__ import annotations

from typing import List, Union

from pydantic import BaseModel, ConfigDict


class ParameterizedJobConfig(BaseModel):
    """Parameterized job configuration from a full job document."""

    model_config = ConfigDict(extra="allow")

    Payload: str = ""
    MetaRequired: List[str] | None = None
    MetaOptional: List[str] | None = None


class PeriodicConfig(BaseModel):
    """Periodic job configuration from a full job document."""

    model_config = ConfigDict(extra="allow")

    Enabled: bool = False
    Spec: str = ""
    SpecType: str = ""
    ProhibitOverlap: bool = False


class JobSummary(BaseModel):
    """One entry of a job listing."""

    model_config = ConfigDict(extra="allow", frozen=True)

    ID: str
    ParentID: str = ""
    Name: str = ""
    Namespace: str = ""
    Type: str = ""
    Status: str = ""
    Periodic: Union[bool, PeriodicConfig, None] = None
    ParameterizedJob: Union[bool, ParameterizedJobConfig, None] = None

    @property
    def is_parameterized(self) -> bool:
        """True when the job is a parameterized template."""
        return self.ParameterizedJob not in (None, False)

    @property
    def is_periodic(self) -> bool:
        """True when the job is launched on a schedule."""
        return self.Periodic not in (None, False)


__all__ = ["JobSummary", "ParameterizedJobConfig", "PeriodicConfig"]
