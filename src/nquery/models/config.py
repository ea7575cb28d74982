"""Runtime settings for talking to a Nomad cluster."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_ADDRESS = "http://127.0.0.1:4646"
DEFAULT_TIMEOUT = 30.0
DEFAULT_RETRIES = 3
DEFAULT_CONCURRENCY = 4


class Settings(BaseModel):
    """Connection and execution settings.

    Built once by the CLI entry point and passed explicitly to the client;
    the projection and assembly code never reads it.
    """

    model_config = ConfigDict(frozen=True)

    address: str = DEFAULT_ADDRESS
    token: str | None = Field(default=None, repr=False)
    namespace: str | None = None
    region: str | None = None
    timeout: float = DEFAULT_TIMEOUT
    retries: int = DEFAULT_RETRIES
    concurrency: int = DEFAULT_CONCURRENCY
    debug: bool = False

    @field_validator("address")
    @classmethod
    def address_is_http_url(cls, v: str) -> str:
        """Require an http(s) URL and drop any trailing slash."""

        if not v.startswith(("http://", "https://")):
            raise ValueError(f"Nomad address must be an http(s) URL: {v}")
        return v.rstrip("/")

    @field_validator("token", "namespace", "region")
    @classmethod
    def blank_is_unset(cls, v: str | None) -> str | None:
        """Treat empty strings (e.g. ``NOMAD_TOKEN=``) as unset."""

        return v or None

    @field_validator("timeout")
    @classmethod
    def timeout_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("timeout must be greater than 0")
        return v

    @field_validator("retries")
    @classmethod
    def retries_not_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("retries must be 0 or more")
        return v

    @field_validator("concurrency")
    @classmethod
    def concurrency_at_least_one(cls, v: int) -> int:
        if v < 1:
            raise ValueError("concurrency must be at least 1")
        return v

    def redacted(self) -> dict:
        """Settings as a dict with the token masked, for tracing."""

        data = self.model_dump()
        if data["token"]:
            data["token"] = "<redacted>"
        return data


__all__ = ["Settings"]
