from __future__ import annotations

from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from opsctl import __version__
from opsctl.config.loader import DEFAULT_CONFIG_PATH, ConfigLoader
from opsctl.errors import (
    EXIT_UNKNOWN_COMMAND,
    EXIT_UNKNOWN_INSTANCE_COMMAND,
    EXIT_USAGE,
    OpsctlError,
    UnsupportedWaitOperation,
    UsageError,
    WaitTimeout,
)
from opsctl.logging_config import configure_logging, get_logger
from opsctl.models.records import Record, RecordType, Service
from opsctl.output.render import OutputFormat, RenderFlags, render_record, render_records, render_tree

console = Console()
err_console = Console(stderr=True, soft_wrap=True)

RECORD_TYPES = click.Choice([t.value for t in RecordType])


class UnknownCommand(click.UsageError):
    def __init__(self, message: str, ctx: click.Context, exit_code: int) -> None:
        super().__init__(message, ctx)
        self.exit_code = exit_code


@contextmanager
def _usage_exit_codes() -> Iterator[None]:
    """Argument errors exit with 1; unknown commands keep their own code."""
    try:
        yield
    except UnknownCommand:
        raise
    except click.UsageError as e:
        e.exit_code = EXIT_USAGE
        raise


class OpsctlGroup(click.Group):
    """Click group that maps opsctl errors and unknown commands to exit codes."""

    unknown_command_exit_code = EXIT_UNKNOWN_COMMAND

    def resolve_command(self, ctx: click.Context, args: list[str]):
        cmd_name = args[0]
        if self.get_command(ctx, cmd_name) is None and not cmd_name.startswith("-"):
            raise UnknownCommand(
                f"No such command '{cmd_name}'.", ctx, self.unknown_command_exit_code
            )
        return super().resolve_command(ctx, args)

    def make_context(self, info_name, args, parent=None, **extra) -> click.Context:
        with _usage_exit_codes():
            return super().make_context(info_name, args, parent=parent, **extra)

    def invoke(self, ctx: click.Context):
        with _usage_exit_codes():
            try:
                return super().invoke(ctx)
            except OpsctlError as e:
                err_console.print(f"[red]{escape(str(e))}[/red]")
                ctx.exit(e.exit_code)


class InstanceGroup(OpsctlGroup):
    unknown_command_exit_code = EXIT_UNKNOWN_INSTANCE_COMMAND


def _collaborators(ctx: click.Context):
    from opsctl.clients.collaborators import Collaborators

    obj = ctx.obj
    if "clients" not in obj:
        clients = Collaborators(obj["config"].services, transport=obj.get("transport"))
        ctx.find_root().call_on_close(clients.close)
        obj["clients"] = clients
    return obj["clients"]


def _emit_records(ctx: click.Context, record_type: RecordType, records: Sequence[Record]) -> None:
    obj = ctx.obj
    selection = obj["profiles"].resolve(record_type, obj["fields"])
    click.echo(
        render_records(records, selection.profile, selection.fields, obj["format"], obj["flags"])
    )


def _emit_record(ctx: click.Context, record_type: RecordType, record: Record) -> None:
    obj = ctx.obj
    selection = obj["profiles"].resolve(record_type, obj["fields"])
    # Without --fields, lead with the profile's fields; otherwise with the user's.
    fields = selection.fields if obj["fields"] else None
    click.echo(render_record(record, selection.profile, fields, obj["format"], obj["flags"]))


@click.group(cls=OpsctlGroup)
@click.version_option(version=__version__, prog_name="opsctl")
@click.option(
    "--config",
    "config_path",
    default=str(DEFAULT_CONFIG_PATH),
    envvar="OPSCTL_CONFIG",
    type=click.Path(dir_okay=False),
    help="Config file path",
)
@click.option(
    "--format",
    "output_format",
    default=OutputFormat.TEXT.value,
    type=click.Choice([f.value for f in OutputFormat]),
    help="Output format",
)
@click.option("--fields", "-f", default=None, help="Comma-separated fields; name=N sets a width")
@click.option("--header/--no-header", default=True, help="Print a header row")
@click.option("--label/--no-label", default=True, help="Prefix values with field names in show output")
@click.option("--feedback/--no-feedback", default=True, help="Print an object count footer")
@click.option(
    "--log-level",
    default="WARNING",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Log level (logs go to stderr)",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config_path: str,
    output_format: str,
    fields: str | None,
    header: bool,
    label: bool,
    feedback: bool,
    log_level: str,
) -> None:
    """opsctl: query and control the CMDB, instance and monitoring services."""
    configure_logging(level=log_level)
    ctx.ensure_object(dict)

    loader = ConfigLoader(Path(config_path))
    config = loader.load()
    fmt = OutputFormat(output_format)

    ctx.obj["config"] = config
    ctx.obj["profiles"] = loader.load_profiles(config)
    ctx.obj["format"] = fmt
    ctx.obj["fields"] = fields
    ctx.obj["flags"] = RenderFlags.for_format(fmt, header=header, label=label, feedback=feedback)


@cli.command()
@click.argument("record_type", metavar="TYPE", type=RECORD_TYPES)
@click.argument("conditions", nargs=-1)
@click.pass_context
def query(ctx: click.Context, record_type: str, conditions: tuple[str, ...]) -> None:
    """List records of TYPE matching every field=value CONDITION."""
    rtype = RecordType(record_type)
    records = _collaborators(ctx).query(rtype, conditions)
    _emit_records(ctx, rtype, records)


@cli.command()
@click.argument("record_type", metavar="TYPE", type=RECORD_TYPES)
@click.argument("name")
@click.pass_context
def show(ctx: click.Context, record_type: str, name: str) -> None:
    """Show every field of a single record."""
    rtype = RecordType(record_type)
    record = _collaborators(ctx).get(rtype, name)
    _emit_record(ctx, rtype, record)


@cli.command("set")
@click.argument("record_type", metavar="TYPE", type=RECORD_TYPES)
@click.argument("name")
@click.argument("assignments", nargs=-1, required=True)
@click.pass_context
def set_fields(ctx: click.Context, record_type: str, name: str, assignments: tuple[str, ...]) -> None:
    """Update fields of a CMDB record (FIELD=VALUE ...) and show the result."""
    rtype = RecordType(record_type)
    if rtype.service is not Service.CMDB:
        raise UsageError(f"'{rtype}' records are not stored in the CMDB")

    values: dict[str, str] = {}
    for assignment in assignments:
        key, sep, value = assignment.partition("=")
        if not sep or not key:
            raise UsageError(f"Expected FIELD=VALUE, got '{assignment}'")
        values[key] = value

    get_logger("set", record_type=rtype.value, name=name).info("updating record", fields=sorted(values))
    record = _collaborators(ctx).cmdb.update(rtype.value, name, values)
    _emit_record(ctx, rtype, record)


@cli.command()
@click.argument("conditions", nargs=-1)
@click.pass_context
def tree(ctx: click.Context, conditions: tuple[str, ...]) -> None:
    """Show the environment hierarchy from CMDB environment records."""
    from opsctl.hierarchy.tree import build_tree

    records = _collaborators(ctx).cmdb.query(RecordType.ENVIRONMENT.value, conditions)
    roots = build_tree(records)
    click.echo(render_tree(roots, ctx.obj["format"], ctx.obj["flags"]))


@cli.group(cls=InstanceGroup)
def instance() -> None:
    """Inspect and control cloud instances."""


@instance.command("list")
@click.argument("conditions", nargs=-1)
@click.pass_context
def list_instances(ctx: click.Context, conditions: tuple[str, ...]) -> None:
    """List instances matching every field=value CONDITION."""
    records = _collaborators(ctx).instances.list(conditions)
    _emit_records(ctx, RecordType.INSTANCE, records)


@instance.command("show")
@click.argument("instance_id")
@click.pass_context
def show_instance(ctx: click.Context, instance_id: str) -> None:
    """Show every field of an instance."""
    record = _collaborators(ctx).instances.get(instance_id)
    _emit_record(ctx, RecordType.INSTANCE, record)


def _instance_action(ctx: click.Context, instance_id: str, action: str) -> None:
    get_logger("instance", instance=instance_id).info("instance action", action=action)
    record = _collaborators(ctx).instances.action(instance_id, action)
    _emit_record(ctx, RecordType.INSTANCE, record)


@instance.command()
@click.argument("instance_id")
@click.pass_context
def start(ctx: click.Context, instance_id: str) -> None:
    """Start an instance."""
    _instance_action(ctx, instance_id, "start")


@instance.command()
@click.argument("instance_id")
@click.pass_context
def stop(ctx: click.Context, instance_id: str) -> None:
    """Stop an instance."""
    _instance_action(ctx, instance_id, "stop")


@instance.command()
@click.argument("instance_id")
@click.pass_context
def reboot(ctx: click.Context, instance_id: str) -> None:
    """Reboot an instance."""
    _instance_action(ctx, instance_id, "reboot")


@cli.group(cls=OpsctlGroup)
def monitor() -> None:
    """Read service and host state from the monitoring API."""


@monitor.command("services")
@click.argument("host", required=False)
@click.pass_context
def monitor_services(ctx: click.Context, host: str | None) -> None:
    """List monitored services, optionally for one HOST."""
    records = _collaborators(ctx).monitor.services(host=host)
    _emit_records(ctx, RecordType.SERVICE, records)


@monitor.command("hosts")
@click.pass_context
def monitor_hosts(ctx: click.Context) -> None:
    """List monitored hosts."""
    records = _collaborators(ctx).monitor.hosts()
    _emit_records(ctx, RecordType.HOST, records)


@cli.command()
@click.argument("service")
@click.argument("operation")
@click.argument("count")
@click.argument("record_type", metavar="TYPE", type=RECORD_TYPES)
@click.argument("conditions", nargs=-1)
@click.option("--interval", type=click.IntRange(min=0), default=None, help="Seconds between attempts")
@click.option("--timeout", type=click.IntRange(min=1), default=None, help="Seconds before giving up")
@click.pass_context
def waitfor(
    ctx: click.Context,
    service: str,
    operation: str,
    count: str,
    record_type: str,
    conditions: tuple[str, ...],
    interval: int | None,
    timeout: int | None,
) -> None:
    """Poll SERVICE OPERATION until the result count matches COUNT (N, >N or 0).

    Only 'cmdb query' can be polled, e.g. opsctl waitfor cmdb query '>0' system status=ready
    """
    from opsctl.waiter.conditions import parse_condition
    from opsctl.waiter.poller import check_wait_operation, wait_for

    check_wait_operation(service, operation)
    condition = parse_condition(count)
    rtype = RecordType(record_type)
    if rtype.service is not Service.CMDB:
        raise UnsupportedWaitOperation(service, f"{operation} {rtype}")

    poll = ctx.obj["config"].poll
    interval = poll.interval if interval is None else interval
    timeout = poll.timeout if timeout is None else timeout
    cmdb = _collaborators(ctx).cmdb

    result = wait_for(
        condition,
        lambda: cmdb.query(rtype.value, conditions),
        interval=interval,
        timeout=timeout,
    )
    if not result.satisfied:
        raise WaitTimeout(
            f"Timed out after {timeout}s waiting for {condition} {rtype} record(s) "
            f"(last count: {result.last_count}, attempts: {result.attempts})"
        )
    if ctx.obj["flags"].feedback:
        console.print(
            f"[green]Condition {escape(str(condition))} met after {result.attempts} attempt(s).[/green]"
        )


@cli.command()
@click.pass_context
def profiles(ctx: click.Context) -> None:
    """Show the default fields and widths for each record type."""
    table = Table(title="Type Profiles")
    table.add_column("Type", style="cyan")
    table.add_column("Service", style="magenta")
    table.add_column("Fields")
    table.add_column("Widths")

    for profile in ctx.obj["profiles"]:
        widths = ", ".join(f"{f}={profile.width(f)}" for f in profile.fields)
        table.add_row(
            profile.record_type.value,
            profile.record_type.service.value,
            ", ".join(profile.fields),
            widths,
        )

    console.print(table)
