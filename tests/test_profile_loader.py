from __future__ import annotations

from pathlib import Path

import pytest

from v4lsync.core.errors import ProfileValidationError
from v4lsync.core.model import Kind
from v4lsync.core.profile_loader import load_profiles


def _write_profile(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def test_load_packaged_profile() -> None:
    loaded = load_profiles()
    assert "osprey440" in loaded.profiles
    profile = loaded.profiles["osprey440"]
    assert [spec.field for spec in profile.attributes][:4] == ["input", "norm", "bright", "contrast"]

    bright = profile.attribute("bright")
    assert bright.kind is Kind.PERCENT
    assert bright.hardware_max == 65280
    assert bright.default == 50

    auto_mute = profile.attribute("Auto_Mute")
    assert auto_mute.name == "Auto Mute"
    assert auto_mute.default is True
    assert auto_mute.command == 'setattr "Auto Mute"'

    assert profile.attribute("norm").command == "setnorm"
    assert profile.attribute("Coring").maximum == 3


def test_percent_without_hardware_max_rejected(tmp_path: Path) -> None:
    _write_profile(
        tmp_path / "cfg" / "v4lsync" / "profiles" / "bad.yaml",
        """
id: bad_percent
name: Bad Percent
attributes:
  - field: bright
    name: bright
    kind: percent
    default: 50
    command: bright
""",
    )

    with pytest.raises(ProfileValidationError):
        load_profiles()


def test_missing_required_keys_rejected(tmp_path: Path) -> None:
    _write_profile(
        tmp_path / "cfg" / "v4lsync" / "profiles" / "missing.yaml",
        """
id: missing
name: Missing
""",
    )

    with pytest.raises(ProfileValidationError):
        load_profiles()


def test_unknown_kind_rejected(tmp_path: Path) -> None:
    _write_profile(
        tmp_path / "data" / "v4lsync" / "profiles" / "kind.yaml",
        """
id: odd_kind
name: Odd Kind
attributes:
  - field: gain
    name: gain
    kind: float
    default: 1
    command: setattr gain
""",
    )

    with pytest.raises(ProfileValidationError):
        load_profiles()


def test_user_profile_overrides_packaged(tmp_path: Path) -> None:
    _write_profile(
        tmp_path / "cfg" / "v4lsync" / "profiles" / "override.yaml",
        """
id: osprey440
name: User Override
attributes:
  - field: bright
    name: bright
    kind: percent
    default: 60
    command: bright
    hardware_max: 65408
  - field: mute
    name: mute
    kind: bool
    default: "on"
    command: setattr mute
""",
    )

    loaded = load_profiles()
    profile = loaded.profiles["osprey440"]
    assert profile.name == "User Override"
    assert profile.attribute("bright").hardware_max == 65408
    assert profile.attribute("mute").default is True
    assert any("overrides" in warning for warning in loaded.warnings)


def test_duplicate_yaml_keys_rejected(tmp_path: Path) -> None:
    _write_profile(
        tmp_path / "cfg" / "v4lsync" / "profiles" / "dup.yaml",
        """
id: dup
name: Duplicate
name: Duplicate Again
attributes:
  - field: mute
    name: mute
    kind: bool
    default: off
    command: setattr mute
""",
    )

    with pytest.raises(ProfileValidationError):
        load_profiles()


def test_duplicate_fields_rejected(tmp_path: Path) -> None:
    _write_profile(
        tmp_path / "cfg" / "v4lsync" / "profiles" / "dupfield.yaml",
        """
id: dup_field
name: Duplicate Field
attributes:
  - field: mute
    name: mute
    kind: bool
    default: off
    command: setattr mute
  - field: mute
    name: Auto Mute
    kind: bool
    default: on
    command: setattr "Auto Mute"
""",
    )

    with pytest.raises(ProfileValidationError):
        load_profiles()


def test_choice_default_must_be_listed(tmp_path: Path) -> None:
    _write_profile(
        tmp_path / "cfg" / "v4lsync" / "profiles" / "choice.yaml",
        """
id: bad_choice
name: Bad Choice
attributes:
  - field: norm
    name: norm
    kind: choice
    default: PAL-Z
    command: setnorm
    choices: [PAL, NTSC]
""",
    )

    with pytest.raises(ProfileValidationError):
        load_profiles()
