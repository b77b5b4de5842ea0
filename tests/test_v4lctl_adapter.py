from __future__ import annotations

import subprocess

import pytest

from v4lsync.transports.v4lctl import V4lctlAdapter


def _cp(cmd: list[str], rc: int, stdout: str = "", stderr: str = "") -> subprocess.CompletedProcess[str]:
    return subprocess.CompletedProcess(cmd, rc, stdout=stdout, stderr=stderr)


def test_read_parses_value_token(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[list[str]] = []

    def fake_run(cmd, check, capture_output, text, errors):
        calls.append(cmd)
        return _cp(cmd, 0, stdout="Auto Mute: on\n")

    monkeypatch.setattr(subprocess, "run", fake_run)

    adapter = V4lctlAdapter("/dev/video1")
    assert adapter.read("Auto Mute") == "on"
    assert calls == [["v4lctl", "-c", "/dev/video1", "show", "Auto Mute"]]


def test_read_keeps_dashes_and_stops_at_first_token(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_run(cmd, check, capture_output, text, errors):
        return _cp(cmd, 0, stdout="norm: PAL-I (PAL)\nsecond line\n")

    monkeypatch.setattr(subprocess, "run", fake_run)

    assert V4lctlAdapter().read("norm") == "PAL-I"


def test_read_unparseable_output_is_empty(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_run(cmd, check, capture_output, text, errors):
        return _cp(cmd, 1, stdout="unknown attribute\n")

    monkeypatch.setattr(subprocess, "run", fake_run)

    assert V4lctlAdapter().read("bright") == ""


def test_read_without_output_is_empty(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_run(cmd, check, capture_output, text, errors):
        return _cp(cmd, 0, stdout="")

    monkeypatch.setattr(subprocess, "run", fake_run)

    assert V4lctlAdapter().read("bright") == ""


def test_missing_tool_yields_empty_read_and_failed_write(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_run(cmd, check, capture_output, text, errors):
        raise FileNotFoundError(cmd[0])

    monkeypatch.setattr(subprocess, "run", fake_run)

    adapter = V4lctlAdapter()
    assert adapter.read("bright") == ""
    assert adapter.write("bright", "70%") is False


def test_write_splits_quoted_command(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[list[str]] = []

    def fake_run(cmd, check, capture_output, text, errors):
        calls.append(cmd)
        return _cp(cmd, 0)

    monkeypatch.setattr(subprocess, "run", fake_run)

    adapter = V4lctlAdapter("/dev/video0", tool="/usr/bin/v4lctl")
    assert adapter.write('setattr "Auto Mute"', "off") is True
    assert calls == [["/usr/bin/v4lctl", "-c", "/dev/video0", "setattr", "Auto Mute", "off"]]


def test_write_reports_success_even_when_tool_exits_nonzero(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_run(cmd, check, capture_output, text, errors):
        return _cp(cmd, 1, stderr="invalid value")

    monkeypatch.setattr(subprocess, "run", fake_run)

    assert V4lctlAdapter().write("setnorm", "PAL-Z") is True


def test_write_with_unbalanced_quotes_fails_without_running(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_run(cmd, check, capture_output, text, errors):
        raise AssertionError(f"Unexpected cmd: {cmd}")

    monkeypatch.setattr(subprocess, "run", fake_run)

    assert V4lctlAdapter().write('setattr "Auto Mute', "off") is False


def test_read_replaces_undecodable_output(monkeypatch: pytest.MonkeyPatch) -> None:
    seen: dict[str, str] = {}

    def fake_run(cmd, check, capture_output, text, errors):
        seen["errors"] = errors
        return _cp(cmd, 0, stdout="bright: ��\n")

    monkeypatch.setattr(subprocess, "run", fake_run)

    assert V4lctlAdapter().read("bright") == ""
    assert seen["errors"] == "replace"


def test_name_with_null_byte_yields_empty_read_and_failed_write(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_run(cmd, check, capture_output, text, errors):
        raise ValueError("embedded null byte")

    monkeypatch.setattr(subprocess, "run", fake_run)

    adapter = V4lctlAdapter()
    assert adapter.read("bri\x00ght") == ""
    assert adapter.write("bright", "70\x00%") is False
