"""Settings resolution for the CLI.

Resolution order for every setting:
1. Explicit CLI option
2. Environment variable
3. Built-in default
"""

import os
from typing import Any, Dict, Mapping, Optional

from .models import Settings

ENV_VARS = {
    "address": "NOMAD_ADDR",
    "token": "NOMAD_TOKEN",
    "namespace": "NOMAD_NAMESPACE",
    "region": "NOMAD_REGION",
    "timeout": "NQUERY_TIMEOUT",
    "retries": "NQUERY_RETRIES",
    "concurrency": "NQUERY_CONCURRENCY",
    "debug": "NQUERY_DEBUG",
}

TRUTHY = {"1", "true", "yes", "on"}


def _env_value(name: str, raw: str) -> Any:
    if name == "debug":
        return raw.strip().lower() in TRUTHY
    return raw


def resolve_settings(
    options: Mapping[str, Any], environ: Optional[Mapping[str, str]] = None
) -> Settings:
    """Build Settings from CLI options, falling back to the environment.

    Reads the environment fresh on every call.

    Args:
        options: CLI option values; None means "not given"
        environ: Environment mapping (default: os.environ)

    Returns:
        Validated Settings

    Raises:
        pydantic.ValidationError: If a value is out of range or malformed
    """
    environ = os.environ if environ is None else environ
    values: Dict[str, Any] = {}
    for name, env_var in ENV_VARS.items():
        value = options.get(name)
        if value is None and env_var in environ:
            value = _env_value(name, environ[env_var])
        if value is not None:
            values[name] = value
    return Settings(**values)
