"""Typer CLI entrypoint."""

from __future__ import annotations

import logging
from pathlib import Path

import typer

from httpdimmer.core.errors import HttpDimmerError
from httpdimmer.core.model import CharacteristicResult
from httpdimmer.core.service import DimmerService

app = typer.Typer(help="HTTP/JSON dimmable light control with a persistent accessory registry")


@app.callback()
def main(
    ctx: typer.Context,
    config: Path | None = typer.Option(None, "--config", help="Path to the YAML device list"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = {"config": config}


def _build_service(ctx: typer.Context) -> DimmerService:
    config = (ctx.obj or {}).get("config")
    service = DimmerService(config_path=config)
    for warning in getattr(service, "load_warnings", ()):
        typer.echo(f"Warning: {warning}", err=True)
    return service


def _report(result: CharacteristicResult) -> None:
    if result.error:
        typer.echo(f"Warning: {result.error}", err=True)


@app.command("devices")
def list_devices(ctx: typer.Context) -> None:
    """List configured devices and their accessory ids."""
    try:
        service = _build_service(ctx)
        devices = service.list_devices()
        if not devices:
            typer.echo("No devices configured")
            return

        for device, accessory_id in devices:
            label = device.name or "<unnamed>"
            if accessory_id is None:
                typer.echo(f"{label} -> <skipped: needs name, on_url and off_url>")
            else:
                typer.echo(f"{label} ({device.stable_key}) -> {accessory_id}")
    except HttpDimmerError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("accessories")
def list_accessories(ctx: typer.Context) -> None:
    """List registered accessories."""
    try:
        service = _build_service(ctx)
        records = service.list_accessories()
        if not records:
            typer.echo("No accessories registered")
            return

        for record in records:
            info = record.information
            typer.echo(f"{record.uuid} {record.display_name}")
            if info:
                typer.echo(f"  {info.manufacturer} / {info.model} / {info.serial_number}")
    except HttpDimmerError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("sync")
def sync(ctx: typer.Context) -> None:
    """Reconcile registered accessories with the configured devices."""
    try:
        service = _build_service(ctx)
        report = service.last_report
        for record in report.added:
            typer.echo(f"Registered: {record.display_name} ({record.context.stable_key})")
        for record in report.updated:
            typer.echo(f"Updated: {record.display_name} ({record.context.stable_key})")
        for record in report.removed:
            typer.echo(f"Removed: {record.display_name} ({record.context.stable_key})")
        typer.echo(
            f"{len(report.added)} added, {len(report.updated)} updated, {len(report.removed)} removed"
        )
    except HttpDimmerError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("status")
def status(ctx: typer.Context, device: str = typer.Argument(..., help="Device id, name or uuid")) -> None:
    """Read the on/off state and brightness of a device."""
    try:
        service = _build_service(ctx)
        record, on_result, brightness_result = service.status(device)
        _report(on_result)
        _report(brightness_result)
        state = "on" if on_result.value else "off"
        typer.echo(f"{record.display_name}: {state}, brightness {brightness_result.value}%")
    except HttpDimmerError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


def _switch(ctx: typer.Context, device: str, value: bool) -> None:
    try:
        service = _build_service(ctx)
        record, result = service.set_on(device, value)
        _report(result)
        typer.echo(f"{record.display_name}: {'on' if result.value else 'off'}")
    except HttpDimmerError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("on")
def turn_on(ctx: typer.Context, device: str = typer.Argument(..., help="Device id, name or uuid")) -> None:
    """Turn a device on."""
    _switch(ctx, device, True)


@app.command("off")
def turn_off(ctx: typer.Context, device: str = typer.Argument(..., help="Device id, name or uuid")) -> None:
    """Turn a device off."""
    _switch(ctx, device, False)


@app.command("brightness")
def brightness(
    ctx: typer.Context,
    device: str = typer.Argument(..., help="Device id, name or uuid"),
    value: int | None = typer.Argument(None, help="Brightness 0-100"),
) -> None:
    """Set the brightness of a device.

    If VALUE is omitted, reads the current brightness instead.
    """
    try:
        service = _build_service(ctx)
        if value is None:
            record, result = service.get_brightness(device)
        else:
            record, result = service.set_brightness(device, value)
        _report(result)
        typer.echo(f"{record.display_name}: brightness {result.value}%")
    except HttpDimmerError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


def run() -> None:
    app()


if __name__ == "__main__":
    run()
