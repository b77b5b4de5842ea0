"""Typer CLI entrypoint."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import typer

from v4lsync.core import codec
from v4lsync.core.errors import V4lsyncError
from v4lsync.core.model import Value, WriteRecord
from v4lsync.core.service import DEFAULT_PROFILE, V4lService
from v4lsync.transports.v4lctl import DEFAULT_DEVICE, DEFAULT_TOOL

app = typer.Typer(help="Keep a v4lctl-controlled capture card in sync with a saved configuration")


@dataclass(frozen=True)
class Settings:
    device: str = DEFAULT_DEVICE
    profile: str = DEFAULT_PROFILE
    snapshot: str = ""
    tool: str = DEFAULT_TOOL


@app.callback()
def main(
    ctx: typer.Context,
    device: str = typer.Option(DEFAULT_DEVICE, "--device", "-c", envvar="V4LSYNC_DEVICE", help="Video device"),
    profile: str = typer.Option(DEFAULT_PROFILE, "--profile", envvar="V4LSYNC_PROFILE", help="Device profile ID"),
    snapshot: str = typer.Option(
        "", "--snapshot", envvar="V4LSYNC_SNAPSHOT", help="YAML file restored at start and saved at exit"
    ),
    tool: str = typer.Option(DEFAULT_TOOL, "--tool", envvar="V4LSYNC_TOOL", help="Control utility binary"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every device command"),
) -> None:
    if verbose:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    ctx.obj = Settings(device=device, profile=profile, snapshot=snapshot, tool=tool)


def _build_service(ctx: typer.Context) -> V4lService:
    settings: Settings = ctx.obj or Settings()
    service = V4lService(
        device=settings.device,
        profile_id=settings.profile,
        snapshot_path=settings.snapshot,
        tool=settings.tool,
    )
    for warning in getattr(service, "load_warnings", ()):
        typer.echo(f"Warning: {warning}", err=True)
    for warning in getattr(service, "runtime_warnings", ()):
        typer.echo(f"Warning: {warning}", err=True)
    return service


def _echo_revision(service: V4lService) -> None:
    revision = service.current()
    for spec in service.profile.attributes:
        typer.echo(f"  {spec.field} = {codec.encode(spec, revision[spec.field])}")


def _echo_writes(records: list[WriteRecord]) -> None:
    if not records:
        typer.echo("No changes")
        return
    for record in records:
        status = "ok" if record.success else "FAILED"
        typer.echo(f"{record.command} {record.value} [{status}]")


def _parse_assignments(service: V4lService, assignments: list[str]) -> dict[str, Value]:
    changes: dict[str, Value] = {}
    for item in assignments:
        field_name, sep, text = item.partition("=")
        if not sep:
            raise typer.BadParameter(f"Expected FIELD=VALUE, got '{item}'")
        spec = service.profile.attribute(field_name.strip())
        changes[spec.field] = codec.parse_user_value(spec, text)
    return changes


@app.command("profiles")
def list_profiles(ctx: typer.Context) -> None:
    """List available device profiles and their attributes."""
    try:
        service = _build_service(ctx)
        for profile in service.list_profiles():
            typer.echo(f"{profile.id}: {profile.name}")
            for spec in profile.attributes:
                typer.echo(f"  {spec.field} ({spec.kind.value}, default {codec.encode(spec, spec.default)})")
    except V4lsyncError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("get")
def get_attribute(ctx: typer.Context, name: str) -> None:
    """Print the current value of a device attribute (empty when unreadable)."""
    try:
        service = _build_service(ctx)
        typer.echo(service.get(name))
    except V4lsyncError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("set")
def set_attribute(ctx: typer.Context, name: str, value: str) -> None:
    """Send NAME VALUE to the device, e.g. `set "setattr mute" on` or `set bright 70%`."""
    try:
        service = _build_service(ctx)
        service.start(replay=False, read_device=False)
        try:
            ok = service.set(name, value)
        finally:
            service.stop()
        if not ok:
            typer.echo(f"Error: could not run {name} {value}", err=True)
            raise typer.Exit(code=1)
        typer.echo(f"Sent {name} {value}")
    except V4lsyncError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("show")
def show_revision(ctx: typer.Context) -> None:
    """Read every profile attribute from the device."""
    try:
        service = _build_service(ctx)
        typer.echo(f"Profile: {service.profile.id}")
        _echo_revision(service)
    except V4lsyncError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("configure")
def configure(ctx: typer.Context, assignments: list[str] = typer.Argument(..., help="FIELD=VALUE pairs")) -> None:
    """Change fields and push only the changed ones to the device."""
    try:
        service = _build_service(ctx)
        changes = _parse_assignments(service, assignments)
        service.start()
        try:
            _echo_writes(service.configure(changes))
        finally:
            service.stop()
    except V4lsyncError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("defaults")
def restore_defaults(ctx: typer.Context) -> None:
    """Push the profile defaults to the device."""
    try:
        service = _build_service(ctx)
        service.start()
        try:
            _echo_writes(service.restore_defaults())
        finally:
            service.stop()
    except V4lsyncError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("restore")
def restore_snapshot(ctx: typer.Context) -> None:
    """Replay the snapshot file to the device."""
    try:
        service = _build_service(ctx)
        if not service.snapshot_path:
            typer.echo("Error: --snapshot is required for restore", err=True)
            raise typer.Exit(code=1)
        executed = service.engine.restore(service.snapshot_path)
        typer.echo(f"Restored {executed} value(s) from {service.snapshot_path}")
    except V4lsyncError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("tune")
def tune(ctx: typer.Context) -> None:
    """Interactively edit attributes; each accepted edit is pushed immediately.

    Commands: `<field> <value>`, `defaults`, `show`, `quit`.
    """
    try:
        service = _build_service(ctx)
        service.start()
    except V4lsyncError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None

    try:
        _echo_revision(service)
        while True:
            line = typer.prompt("v4lsync", default="quit", show_default=False).strip()
            if line in {"quit", "exit", "q"}:
                break
            if line == "show":
                _echo_revision(service)
                continue
            if line == "defaults":
                _echo_writes(service.restore_defaults())
                continue
            field_name, _, text = line.partition(" ")
            try:
                spec = service.profile.attribute(field_name)
                value = codec.parse_user_value(spec, text)
            except V4lsyncError as exc:
                typer.echo(f"Error: {exc}", err=True)
                continue
            _echo_writes(service.configure({spec.field: value}))
    except typer.Abort:
        pass
    finally:
        service.stop()


def run() -> None:
    app()


if __name__ == "__main__":
    run()
