"""Layered YAML configuration with include: support.

Files are merged in this order, later ones winning:

1. the package's defaults/default.yaml
2. gradletiming.yaml in the user config directory
3. ./gradletiming.yaml (the project file)
4. each --include FILE given on the command line

Any of them may name further files in an include: key. Those are
loaded first and then overlaid by the file that included them.
"""

from __future__ import annotations

import sys
from pathlib import Path

import yaml
from platformdirs import user_config_dir
from pydantic_settings import BaseSettings, YamlConfigSettingsSource

from gradletiming.core.log import logger

APP_NAME = "gradletiming"
CONFIG_FILENAME = f"{APP_NAME}.yaml"


def default_config_file() -> Path:
    return Path(__file__).parent.parent / "defaults" / "default.yaml"


def user_config_file() -> Path:
    return Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME


def cli_includes(argv: list[str]) -> list[str]:
    """Values of every --include option in argv."""
    return [
        value for flag, value in zip(argv, argv[1:])
        if flag == "--include"
    ]


def merge_dicts(base: dict, override: dict) -> dict:
    """Merge override into a copy of base, recursing into dicts."""
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_dicts(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_yaml(path: Path, seen: frozenset[Path] = frozenset()) -> dict:
    """Load one YAML file together with everything it includes.

    Include paths are relative to the including file.

    Raises:
        ValueError: A file includes itself, directly or not.
        FileNotFoundError: An included file does not exist.
    """
    path = path.resolve()
    if path in seen:
        raise ValueError(f"Circular include: {path}")

    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    includes = data.pop("include", None) or []
    if isinstance(includes, str):
        includes = [includes]

    merged: dict = {}
    for name in includes:
        included = path.parent / Path(name).expanduser()
        logger.debug("Including config file",
                     file=str(included), included_from=str(path))
        merged = merge_dicts(merged, load_yaml(included, seen | {path}))
    return merge_dicts(merged, data)


class YamlWithIncludesSettingsSource(YamlConfigSettingsSource):
    """pydantic-settings source reading the layered YAML files."""

    def __init__(self, settings_cls: type[BaseSettings], yaml_file=None):
        # _read_files() runs inside super().__init__()
        self._project_file = Path(
            yaml_file
            or settings_cls.model_config.get("yaml_file")
            or CONFIG_FILENAME
        ).expanduser()
        includes = cli_includes(sys.argv[1:])
        super().__init__(settings_cls, includes or None)

    def _read_files(self, files, deep_merge: bool = True):  # noqa: ARG002
        if files is None:
            files = []
        elif isinstance(files, (str, Path)):
            files = [files]

        candidates = [
            default_config_file(),
            user_config_file(),
            self._project_file,
            *(Path(f).expanduser() for f in files),
        ]

        result: dict = {}
        for path in candidates:
            if not path.is_file():
                logger.debug("No config file here", file=str(path))
                continue
            logger.debug("Loading config file", file=str(path))
            result = merge_dicts(result, load_yaml(path))
        return result
