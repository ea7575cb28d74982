"""nquery CLI entry point."""

import sys

import click
from pydantic import ValidationError

from .. import __version__
from ..assembler import JobFilter, ResultAssembler
from ..context import resolve_settings
from ..diagnostics import Tracer, error, warn
from ..errors import InvalidPath, NomadError
from ..nomad import NomadClient
from ..projection import parse_paths
from ..writers import write_json


def _parse_fields(ctx, param, value):
    """Click callback: turn repeated -f values into PathExpressions."""
    try:
        return parse_paths(value)
    except InvalidPath as e:
        raise click.BadParameter(str(e), ctx=ctx, param=param)


def _tri_state(name: str, positive: bool, negative: bool):
    """Combine a --flag/--no-flag pair into True, False or None.

    Examples:
        _tri_state("periodic", True, False)   # True
        _tri_state("periodic", False, False)  # None
        _tri_state("periodic", False, True)   # False
    """
    if positive and negative:
        raise click.UsageError(
            f"--{name} and --no-{name} cannot be used together"
        )
    if positive:
        return True
    if negative:
        return False
    return None


def _describe(exc: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
        for err in exc.errors()
    )


@click.command(context_settings=dict(help_option_names=["-h", "--help"]))
@click.argument("prefix", default="")
@click.option(
    "-p", "--parameterized", is_flag=True, help="Return only parameterized jobs"
)
@click.option(
    "--no-parameterized", is_flag=True, help="Exclude parameterized jobs"
)
@click.option("--periodic", is_flag=True, help="Return only periodic jobs")
@click.option("--no-periodic", is_flag=True, help="Exclude periodic jobs")
@click.option("--status", help="Return jobs with this status")
@click.option("--type", "job_type", help="Return jobs of this type")
@click.option(
    "-f",
    "--field",
    "fields",
    multiple=True,
    callback=_parse_fields,
    help="Dotted field path to include in the output (repeatable)",
)
@click.option(
    "--dispatched",
    is_flag=True,
    help="Also return jobs dispatched from matched parameterized jobs",
)
@click.option("--pretty", is_flag=True, help="Pretty print the JSON output")
@click.option("--address", help="Nomad HTTP address (overrides $NOMAD_ADDR)")
@click.option("--token", help="ACL token (overrides $NOMAD_TOKEN)")
@click.option("--namespace", help="Namespace (overrides $NOMAD_NAMESPACE)")
@click.option("--region", help="Region (overrides $NOMAD_REGION)")
@click.option("--timeout", type=float, help="Per-request timeout in seconds")
@click.option("--retries", type=int, help="Retries for transient failures")
@click.option(
    "--concurrency", type=int, help="Job documents fetched in parallel"
)
@click.option(
    "--debug", is_flag=True, help="Trace requests on stderr ($NQUERY_DEBUG)"
)
@click.version_option(__version__, prog_name="nquery")
def cli(
    prefix,
    parameterized,
    no_parameterized,
    periodic,
    no_periodic,
    status,
    job_type,
    fields,
    dispatched,
    pretty,
    address,
    token,
    namespace,
    region,
    timeout,
    retries,
    concurrency,
    debug,
):
    """Query Nomad jobs whose ID starts with PREFIX.

    Prints a JSON array of full job documents, or, with -f, of flat
    objects keyed by the requested field paths.

    Examples:
        nquery redis                          # all jobs starting with "redis"
        nquery -p etl -f ID -f Meta.data-source
        nquery --status running --pretty
    """
    job_filter = JobFilter(
        parameterized=_tri_state("parameterized", parameterized, no_parameterized),
        periodic=_tri_state("periodic", periodic, no_periodic),
        status=status,
        job_type=job_type,
    )

    try:
        settings = resolve_settings(
            {
                "address": address,
                "token": token,
                "namespace": namespace,
                "region": region,
                "timeout": timeout,
                "retries": retries,
                "concurrency": concurrency,
                # Unset flag falls through to $NQUERY_DEBUG
                "debug": True if debug else None,
            }
        )
    except ValidationError as e:
        raise click.UsageError(f"Invalid settings: {_describe(e)}")

    trace = Tracer(settings.debug)
    trace(f"settings: {settings.redacted()}")
    trace(f"prefix={prefix!r} filter={job_filter} fields={[str(f) for f in fields]}")

    try:
        with NomadClient(settings, trace=trace) as client:
            assembler = ResultAssembler(
                client,
                concurrency=settings.concurrency,
                include_dispatched=dispatched,
            )
            result = assembler.assemble(prefix, job_filter, fields)
    except NomadError as e:
        error(e.message)
        sys.exit(1)
    except KeyboardInterrupt:
        click.echo("Interrupted", err=True)
        sys.exit(130)

    for job_id in result.skipped:
        warn(f"Job {job_id} disappeared before it could be fetched, skipping")
    trace(f"{len(result.records)} record(s), {len(result.skipped)} skipped")

    write_json(result.records, pretty=pretty)


def main():
    """Entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
