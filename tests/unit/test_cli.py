from __future__ import annotations

import json

from apps.freezer import cli
from apps.freezer.adapters import FixtureProcessGateway
from apps.freezer.state import SessionState
from tests.fixtures.sample_data import FRAME_PNG_PATH


def test_parser_wires_subcommands() -> None:
    parser = cli.build_parser()
    args = parser.parse_args(["--dev", "run", "--hotkey", "ctrl+f9"])
    assert args.func is cli._cmd_run
    assert args.dev is True
    assert args.hotkey == "ctrl+f9"
    assert parser.parse_args(["settings", "set-key", "abc"]).func is cli._cmd_settings_set_key


def test_settings_commands_write_store(tmp_path, monkeypatch, capsys) -> None:
    path = tmp_path / "settings.json"
    monkeypatch.setenv("FREEZER_SETTINGS_PATH", str(path))
    parser = cli.build_parser()

    args = parser.parse_args(["settings", "set-key", "abc"])
    args.func(args)
    assert json.loads(path.read_text(encoding="utf-8")) == {"google_cloud_api_key": "abc"}

    args = parser.parse_args(["settings", "clear-key"])
    args.func(args)
    assert json.loads(path.read_text(encoding="utf-8")) == {}
    assert "missing" in capsys.readouterr().out


def test_dev_runtime_uses_fixture_gateways(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("FREEZER_SETTINGS_PATH", str(tmp_path / "settings.json"))
    monkeypatch.setenv("FREEZER_OCR_CACHE_DIR", str(tmp_path / "cache"))
    args = cli.build_parser().parse_args(["--dev", "run", "--fixture-image", str(FRAME_PNG_PATH)])
    runtime = cli.build_runtime(cli._config_from_args(args), state=SessionState())

    assert isinstance(runtime.controller.gateways.process, FixtureProcessGateway)
    assert runtime.controller.ocr.cache is not None

    runtime.controller.on_hotkey()
    assert runtime.state.active is True
    assert runtime.state.capture is not None
    assert "google_cloud_api_key" in runtime.state.loading_error
    runtime.controller.on_hotkey()
    assert runtime.state.active is False
