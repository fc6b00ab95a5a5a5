from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List

import pytest
from typer.testing import CliRunner

from cli.app import app
from settings import get_settings
from sources.base import FeatureType, Subfeature
from stub_source import StubSource

HEADER = "chip name;feature name;units;input;normalized input [%];min;max;critical"


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture(autouse=True)
def _isolate(monkeypatch) -> None:
    for name in ("TMPSNREAD_BACKEND", "TMPSNREAD_HWMON_ROOT", "TMPSNREAD_DELIMITER"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("cli.app.configure_logging", lambda level=None: None)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def _install_stub(monkeypatch, stub: StubSource) -> List[Dict[str, Any]]:
    calls: List[Dict[str, Any]] = []

    def factory(backend, config_file=None, hwmon_root=None):
        calls.append({"backend": backend, "config_file": config_file, "hwmon_root": hwmon_root})
        return stub

    monkeypatch.setattr("cli.app.build_source", factory)
    return calls


def _invoke(runner: CliRunner, args: List[str]):
    return runner.invoke(app, args, prog_name="tmpsnread")


def test_version_skips_sensor_source(monkeypatch, runner: CliRunner) -> None:
    stub = StubSource()
    calls = _install_stub(monkeypatch, stub)

    result = _invoke(runner, ["--version"])

    assert result.exit_code == 0
    assert result.stdout.startswith("tmpsnread 1.0.0 Copyright (C) 2015")
    assert "GPLv3+" in result.stdout
    assert calls == []


def test_short_version_flag(monkeypatch, runner: CliRunner) -> None:
    calls = _install_stub(monkeypatch, StubSource())

    result = _invoke(runner, ["-V", "-d", "too-long"])

    assert result.exit_code == 0
    assert "tmpsnread" in result.stdout
    assert calls == []


def test_prints_readings(monkeypatch, runner: CliRunner) -> None:
    stub = StubSource(
        {
            "coretemp": [
                (
                    "temp1",
                    FeatureType.temperature,
                    {Subfeature.input: 45.0, Subfeature.max: 80.0, Subfeature.critical: 100.0},
                ),
                ("temp2", FeatureType.temperature, {Subfeature.input: 38.0}),
            ]
        }
    )
    calls = _install_stub(monkeypatch, stub)

    result = _invoke(runner, [])

    assert result.exit_code == 0
    assert result.stdout == (
        f"{HEADER}\n"
        "coretemp;temp1;C;45.00;56.25;N/A;80.00;100.00\n"
        "coretemp;temp2;C;38.00;N/A;N/A;N/A;N/A\n"
        "\n"
    )
    assert calls[0]["backend"] == "libsensors"
    assert calls[0]["config_file"] is None
    assert stub.opened is True
    assert stub.closed is True


def test_fahrenheit_and_delimiter(monkeypatch, runner: CliRunner) -> None:
    stub = StubSource(
        {"acpitz": [("temp1", FeatureType.temperature, {Subfeature.input: 100.0, Subfeature.max: 100.0})]}
    )
    _install_stub(monkeypatch, stub)

    result = _invoke(runner, ["--fahrenheit", "--delimiter", ","])

    assert result.exit_code == 0
    lines = result.stdout.split("\n")
    assert lines[1] == "acpitz,temp1,F,212.00,100.00,N/A,212.00,N/A"
    assert all(len(line.split(",")) == 8 for line in lines[:2])


def test_zero_sensors(monkeypatch, runner: CliRunner) -> None:
    stub = StubSource()
    _install_stub(monkeypatch, stub)

    result = _invoke(runner, [])

    assert result.exit_code == 0
    assert result.stdout == f"{HEADER}\nN/A;N/A;N/A;N/A;N/A;N/A;N/A;N/A\n\n"
    assert "tmpsnread: No sensors found!" in result.stderr
    assert "sensors-detect" in result.stderr
    assert stub.closed is True


@pytest.mark.parametrize("delimiter", ["ab", ";;", "tab"])
def test_multi_character_delimiter_is_rejected(monkeypatch, runner: CliRunner, delimiter: str) -> None:
    stub = StubSource()
    calls = _install_stub(monkeypatch, stub)

    result = _invoke(runner, ["-d", delimiter])

    assert result.exit_code != 0
    assert "the delimiter must be a single character" in result.stderr
    assert "Try 'tmpsnread --help' for more information." in result.stderr
    assert calls == []
    assert stub.opened is False


def test_empty_delimiter_is_rejected(monkeypatch, runner: CliRunner) -> None:
    calls = _install_stub(monkeypatch, StubSource())

    result = _invoke(runner, ["--delimiter", ""])

    assert result.exit_code == 1
    assert calls == []


def test_unreadable_config_file(monkeypatch, runner: CliRunner, tmp_path: Path) -> None:
    calls = _install_stub(monkeypatch, StubSource())
    missing = tmp_path / "missing.conf"

    result = _invoke(runner, ["--config-file", str(missing)])

    assert result.exit_code == 1
    assert f"tmpsnread: cannot open file : {missing}" in result.stderr
    assert calls == []


def test_readable_config_file_is_passed_on(monkeypatch, runner: CliRunner, tmp_path: Path) -> None:
    config = tmp_path / "sensors3.conf"
    config.write_text('chip "coretemp-*"\n')
    stub = StubSource()
    calls = _install_stub(monkeypatch, stub)

    result = _invoke(runner, ["-c", str(config)])

    assert result.exit_code == 0
    assert calls[0]["config_file"] == config


def test_source_init_failure(monkeypatch, runner: CliRunner) -> None:
    stub = StubSource(fail_open=True)
    _install_stub(monkeypatch, stub)

    result = _invoke(runner, [])

    assert result.exit_code == 1
    assert "tmpsnread: cannot initialize : stub" in result.stderr
    assert result.stdout == ""
    assert stub.closed is False


def test_unknown_option_is_a_usage_error(monkeypatch, runner: CliRunner) -> None:
    calls = _install_stub(monkeypatch, StubSource())

    result = _invoke(runner, ["--celsius"])

    assert result.exit_code == 2
    assert calls == []


def test_backend_option_selects_adapter(monkeypatch, runner: CliRunner) -> None:
    calls = _install_stub(monkeypatch, StubSource())

    result = _invoke(runner, ["--backend", "hwmon"])

    assert result.exit_code == 0
    assert calls[0]["backend"] == "hwmon"


def test_hwmon_backend_end_to_end(monkeypatch, runner: CliRunner, tmp_path: Path) -> None:
    chip_dir = tmp_path / "hwmon0"
    chip_dir.mkdir()
    (chip_dir / "name").write_text("k10temp\n")
    (chip_dir / "temp1_input").write_text("61250\n")
    (chip_dir / "temp1_crit").write_text("95000\n")
    monkeypatch.setenv("TMPSNREAD_BACKEND", "hwmon")
    monkeypatch.setenv("TMPSNREAD_HWMON_ROOT", str(tmp_path))

    result = _invoke(runner, ["-d", "|"])

    assert result.exit_code == 0
    assert result.stdout.split("\n")[1] == "k10temp|temp1|C|61.25|N/A|N/A|N/A|95.00"


def test_hwmon_backend_missing_root(monkeypatch, runner: CliRunner, tmp_path: Path) -> None:
    monkeypatch.setenv("TMPSNREAD_HWMON_ROOT", str(tmp_path / "nope"))

    result = _invoke(runner, ["-b", "hwmon"])

    assert result.exit_code == 1
    assert "tmpsnread: cannot initialize : hwmon" in result.stderr
