"""Diagnostic output on stderr.

stdout is reserved for the JSON result, so everything here goes through
``click.echo(..., err=True)``.
"""

import click


def warn(message: str) -> None:
    """Print a warning that is always shown."""
    click.echo(f"Warning: {message}", err=True)


def error(message: str) -> None:
    click.echo(f"Error: {message}", err=True)


class Tracer:
    """Debug tracing bound to an explicit on/off switch."""

    def __init__(self, enabled: bool = False):
        self.enabled = enabled

    def __call__(self, message: str) -> None:
        if self.enabled:
            click.echo(f"[nquery] {message}", err=True)


NULL_TRACER = Tracer(enabled=False)
