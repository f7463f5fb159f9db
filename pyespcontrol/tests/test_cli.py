"""Tests for the command line interface."""
import json

import pytest

from pyespcontrol import ControlPanel, Settings, version
from pyespcontrol import __main__ as cli

LIFT = {"id": 1, "name": "Lift", "connected": True, "position": 120, "current": 350, "voltage": 12.1}
SPARE = {"id": 7, "name": "", "connected": False}


@pytest.fixture
def fake_panel(monkeypatch, transport):
    panels = []

    def make_panel(args):
        panel = ControlPanel(settings=Settings(host=args.host, timeout=args.timeout), transport=transport)
        panels.append(panel)
        return panel

    monkeypatch.setattr(cli, "make_panel", make_panel)
    return panels


def test_connection_args_build_panel():
    args = cli.p.parse_args(["status", "-host", "10.0.0.9", "-timeout", "3"])
    assert args.command == "status"
    panel = cli.make_panel(args)
    try:
        assert panel.host == "10.0.0.9"
        assert panel.settings.timeout == 3
        assert panel.transport.url("/api/status") == "http://10.0.0.9/api/status"
    finally:
        panel.transport.close()
    assert cli.settings.host != "10.0.0.9"


def test_watch_interval_arg():
    args = cli.p.parse_args(["-debug", "watch", "-interval", "2.5", "-nocolor"])
    assert args.debug and args.nocolor
    panel = cli.make_panel(args)
    try:
        assert panel.poller.interval == 2.5
    finally:
        panel.transport.close()


@pytest.mark.asyncio
async def test_run_status(fake_panel, transport, capsys):
    transport.route("/api/status", {"wifi_status": 3, "uptime_ms": 1000})
    await cli.run_status(cli.p.parse_args(["status"]))
    assert json.loads(capsys.readouterr().out) == {"wifi_status": 3, "uptime_ms": 1000}
    assert fake_panel[0].monitor.connected


@pytest.mark.asyncio
async def test_run_actuators(fake_panel, transport, capsys):
    transport.route("/api/actuator/status", {"actuators": [LIFT, SPARE]})
    await cli.run_actuators(cli.p.parse_args(["actuators"]))
    lines = capsys.readouterr().out.splitlines()
    assert lines[0].split() == ["1", "Lift", "Pos:", "120", "|", "350mA", "|", "12.1V"]
    assert lines[1].split() == ["7", "Actuator", "#7", "Disconnected"]


def test_main_version(monkeypatch, capsys):
    monkeypatch.setattr("sys.argv", ["pyespcontrol", "version"])
    cli.main()
    assert capsys.readouterr().out.strip() == f"pyESPControl version {version}"


def test_main_without_command_prints_help(monkeypatch, capsys):
    monkeypatch.setattr("sys.argv", ["pyespcontrol"])
    with pytest.raises(SystemExit) as exc:
        cli.main()
    assert exc.value.code == 1
    assert "usage" in capsys.readouterr().err


def test_main_reports_unreachable_device(monkeypatch, fake_panel, capsys):
    monkeypatch.setattr("sys.argv", ["pyespcontrol", "restart", "-host", "10.0.0.9"])
    with pytest.raises(SystemExit) as exc:
        cli.main()
    assert exc.value.code == 1
    assert capsys.readouterr().err.startswith("ERROR: Unable to connect to /api/restart")
    assert fake_panel[0].host == "10.0.0.9"
    assert fake_panel[0].monitor.reconnect_task.done()
