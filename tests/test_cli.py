from __future__ import annotations

from typer.testing import CliRunner

from httpdimmer import cli
from httpdimmer.core.model import (
    AccessoryInformation,
    AccessoryRecord,
    CharacteristicResult,
    DeviceConfig,
    SyncReport,
)

DESK = DeviceConfig(id="desk", name="Desk Lamp", on_url="http://desk/on", off_url="http://desk/off")


def _record() -> AccessoryRecord:
    return AccessoryRecord(
        uuid="0b5c6f0e-0000-5000-8000-000000000001",
        display_name="Desk Lamp",
        context=DESK,
        information=AccessoryInformation.for_device(DESK),
    )


class FakeService:
    def __init__(self, config_path=None) -> None:
        self.config_path = config_path
        self.load_warnings = ()
        self.last_report = SyncReport(added=(_record(),))

    def list_devices(self):
        return [(DESK, _record().uuid), (DeviceConfig(name="Broken"), None)]

    def list_accessories(self):
        return [_record()]

    def status(self, hint):
        return _record(), CharacteristicResult(value=True), CharacteristicResult(value=50)

    def set_on(self, hint, value):
        return _record(), CharacteristicResult(value=value)

    def get_brightness(self, hint):
        return _record(), CharacteristicResult(value=30)

    def set_brightness(self, hint, value):
        return _record(), CharacteristicResult(value=value, error="HTTP 500 from http://desk/set?b=75")


runner = CliRunner()


def test_devices_command(monkeypatch):
    monkeypatch.setattr(cli, "DimmerService", FakeService)
    result = runner.invoke(cli.app, ["devices"])
    assert result.exit_code == 0
    assert "Desk Lamp (desk) -> 0b5c6f0e" in result.stdout
    assert "Broken -> <skipped" in result.stdout


def test_accessories_command(monkeypatch):
    monkeypatch.setattr(cli, "DimmerService", FakeService)
    result = runner.invoke(cli.app, ["accessories"])
    assert result.exit_code == 0
    assert "Desk Lamp" in result.stdout
    assert "HTTP JSON Dimmer / HTTP-JSON-DIMMER / desk" in result.stdout


def test_sync_command(monkeypatch):
    monkeypatch.setattr(cli, "DimmerService", FakeService)
    result = runner.invoke(cli.app, ["sync"])
    assert result.exit_code == 0
    assert "Registered: Desk Lamp (desk)" in result.stdout
    assert "1 added, 0 updated, 0 removed" in result.stdout


def test_status_command(monkeypatch):
    monkeypatch.setattr(cli, "DimmerService", FakeService)
    result = runner.invoke(cli.app, ["status", "desk"])
    assert result.exit_code == 0
    assert "Desk Lamp: on, brightness 50%" in result.stdout


def test_on_off_commands(monkeypatch):
    monkeypatch.setattr(cli, "DimmerService", FakeService)
    assert "Desk Lamp: on" in runner.invoke(cli.app, ["on", "desk"]).stdout
    assert "Desk Lamp: off" in runner.invoke(cli.app, ["off", "desk"]).stdout


def test_brightness_command_reports_transport_warning(monkeypatch):
    monkeypatch.setattr(cli, "DimmerService", FakeService)
    result = runner.invoke(cli.app, ["brightness", "desk", "75"])
    assert result.exit_code == 0
    assert "Desk Lamp: brightness 75%" in result.stdout
    assert "Warning: HTTP 500" in result.stderr


def test_brightness_command_without_value_reads(monkeypatch):
    monkeypatch.setattr(cli, "DimmerService", FakeService)
    result = runner.invoke(cli.app, ["brightness", "desk"])
    assert result.exit_code == 0
    assert "brightness 30%" in result.stdout


def test_config_option_is_passed_through(monkeypatch, tmp_path):
    seen = {}

    class RecordingService(FakeService):
        def __init__(self, config_path=None) -> None:
            super().__init__(config_path)
            seen["config"] = config_path

    monkeypatch.setattr(cli, "DimmerService", RecordingService)
    result = runner.invoke(cli.app, ["--config", str(tmp_path / "lights.yaml"), "devices"])
    assert result.exit_code == 0
    assert seen["config"] == tmp_path / "lights.yaml"


def test_error_is_clean(monkeypatch):
    class FailingService(FakeService):
        def status(self, hint):
            from httpdimmer.core.errors import DeviceSelectionError

            raise DeviceSelectionError("No device found matching 'garage'")

    monkeypatch.setattr(cli, "DimmerService", FailingService)
    result = runner.invoke(cli.app, ["status", "garage"])
    assert result.exit_code == 1
    assert "Error: No device found matching 'garage'" in result.stderr
    assert "Traceback" not in result.stdout
    assert "Traceback" not in result.stderr


def test_load_warning_is_printed(monkeypatch):
    class WarnService(FakeService):
        def __init__(self, config_path=None) -> None:
            super().__init__(config_path)
            self.load_warnings = ("Config file /nowhere.yaml not found; no devices configured",)

    monkeypatch.setattr(cli, "DimmerService", WarnService)
    result = runner.invoke(cli.app, ["devices"])
    assert result.exit_code == 0
    assert "Warning: Config file /nowhere.yaml not found" in result.stderr
