"""Tests for YAML loading and the include: directive."""

import sys
from pathlib import Path

import pytest

from gradletiming.core.config import State
from gradletiming.core.yaml_settings import (
    YamlWithIncludesSettingsSource,
    cli_includes,
    merge_dicts,
)


@pytest.fixture
def fixtures_dir():
    """Path to test fixtures directory."""
    return Path(__file__).parent / "fixtures"


def _load(path):
    return YamlWithIncludesSettingsSource(State, yaml_file=str(path))()


def test_package_defaults_always_loaded(fixtures_dir, mock_argv):
    data = _load(fixtures_dir / "minimal.yaml")

    assert data["config"]["snippet"]["dir_name"] == "buildings"
    assert data["config"]["snippet"]["min_duration_ms"] == 30
    assert data["config"]["inspect"]["encoding"] == "utf-8"


def test_project_file_overrides_defaults(fixtures_dir, mock_argv):
    data = _load(fixtures_dir / "minimal.yaml")

    assert (
        data["config"]["inspect"]["directory"]
        == "/tmp/project/app/buildings"
    )


def test_include_directive_merges_under_including_file(
    fixtures_dir, mock_argv
):
    data = _load(fixtures_dir / "with_include.yaml")

    # From the included file
    assert data["config"]["snippet"]["dir_name"] == "build/timings"
    # The including file wins
    assert data["config"]["snippet"]["min_duration_ms"] == 50
    assert "include" not in data


def test_nested_includes(fixtures_dir, mock_argv):
    data = _load(fixtures_dir / "nested_include.yaml")

    assert data["config"]["inspect"]["encoding"] == "latin-1"
    assert data["config"]["inspect"]["directory"] == "/tmp/with-include"
    assert data["config"]["snippet"]["dir_name"] == "build/timings"


def test_include_relative_to_including_file(tmp_path, mock_argv):
    subdir = tmp_path / "subdir"
    subdir.mkdir()
    (subdir / "extra.yaml").write_text(
        "config:\n  snippet:\n    dir_name: from-subdir\n"
    )
    main = tmp_path / "main.yaml"
    main.write_text("include: subdir/extra.yaml\n")

    data = _load(main)

    assert data["config"]["snippet"]["dir_name"] == "from-subdir"


def test_cli_include_wins(fixtures_dir, mock_argv):
    sys.argv = [
        "gradletiming",
        "--include",
        str(fixtures_dir / "override_encoding.yaml"),
    ]

    data = _load(fixtures_dir / "nested_include.yaml")

    assert data["config"]["inspect"]["encoding"] == "cp1252"
    assert data["config"]["inspect"]["directory"] == "/tmp/with-include"


def test_multiple_cli_includes_in_order(fixtures_dir, mock_argv):
    sys.argv = [
        "gradletiming",
        "--include", str(fixtures_dir / "override_encoding.yaml"),
        "--include", str(fixtures_dir / "snippet_overrides.yaml"),
    ]

    data = _load(fixtures_dir / "minimal.yaml")

    assert data["config"]["inspect"]["encoding"] == "cp1252"
    assert data["config"]["snippet"]["min_duration_ms"] == 100


def test_missing_project_file_is_skipped(tmp_path, mock_argv):
    data = _load(tmp_path / "absent.yaml")

    assert data["config"]["snippet"]["dir_name"] == "buildings"


def test_circular_include_detected(fixtures_dir, mock_argv):
    with pytest.raises(ValueError, match="Circular include"):
        _load(fixtures_dir / "circular_a.yaml")


def test_missing_include_raises(tmp_path, mock_argv):
    config_file = tmp_path / "config.yaml"
    config_file.write_text("include: nonexistent.yaml\n")

    with pytest.raises(FileNotFoundError):
        _load(config_file)


def test_empty_include_list(tmp_path, mock_argv):
    config_file = tmp_path / "config.yaml"
    config_file.write_text(
        "include: []\nconfig:\n  inspect:\n    encoding: ascii\n"
    )

    data = _load(config_file)

    assert data["config"]["inspect"]["encoding"] == "ascii"


def test_empty_file(tmp_path, mock_argv):
    config_file = tmp_path / "config.yaml"
    config_file.write_text("")

    data = _load(config_file)

    assert data["config"]["inspect"]["encoding"] == "utf-8"


def test_file_including_itself(tmp_path, mock_argv):
    config_file = tmp_path / "self.yaml"
    config_file.write_text("include: self.yaml\n")

    with pytest.raises(ValueError, match="Circular include"):
        _load(config_file)


def test_cli_includes_picks_values_only():
    argv = ["inspect", "--include", "a.yaml", "--directory", "logs",
            "--include", "b.yaml"]

    assert cli_includes(argv) == ["a.yaml", "b.yaml"]
    assert cli_includes(["--include"]) == []


def test_merge_dicts_keeps_base_untouched():
    base = {"config": {"inspect": {"encoding": "utf-8"}, "run_name": "x"}}

    merged = merge_dicts(base, {"config": {"inspect": {"encoding": "ascii"}}})

    assert merged == {"config": {"inspect": {"encoding": "ascii"}, "run_name": "x"}}
    assert base["config"]["inspect"]["encoding"] == "utf-8"
