"""Configuration and runtime state.

`State` is what every workflow node receives. Its `config` half is
loaded once by pydantic-settings from CLI flags, the environment, .env
and the layered YAML files (see yaml_settings.py). Its `runtime` half
is rebuilt for every inspect run.

String and path settings may contain templates, expanded once the
configuration has loaded:

    {platformdirs.user_state_dir}   platformdirs for this application
    {os.getcwd}                     any attribute or call in os
    {config.log_root}               another setting

Templates that do not resolve, such as the {log_root} and {run_name}
placeholders of the log file path, stay as they are.
"""

from __future__ import annotations

import codecs
import os
import re
from pathlib import Path

import platformdirs
from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from gradletiming.core.base import BaseConfig, BaseState
from gradletiming.core.log import Logger, setup_logger
from gradletiming.core.result import AggregateResult
from gradletiming.core.yaml_settings import (
    APP_NAME,
    CONFIG_FILENAME,
    YamlWithIncludesSettingsSource,
)
from gradletiming.tools.snippet import DEFAULT_DIR_NAME, DEFAULT_MIN_DURATION_MS

TEMPLATE_MODULES = {"os": os, "platformdirs": platformdirs}

_TEMPLATE = re.compile(r"\{([a-z_][a-z0-9_]*(?:\.[a-z0-9_]+)*)\}")


def _resolve(reference: str, state: State):
    head, *rest = reference.split(".")
    target = TEMPLATE_MODULES.get(head)
    if target is None:
        target, rest = state, [head, *rest]

    for name in rest:
        target = getattr(target, name)

    if callable(target):
        if head == "platformdirs":
            return target(APP_NAME, appauthor=False)
        return target()
    return target


def expand_templates(text: str, state: State) -> str:
    """Replace every resolvable {reference} in text."""
    def replace(match):
        try:
            value = _resolve(match.group(1), state)
        except (AttributeError, TypeError):
            return match.group(0)
        return match.group(0) if value is None else str(value)

    return _TEMPLATE.sub(replace, text)


def _expand_model(model: BaseModel, state: State) -> None:
    for name, value in model:
        if isinstance(value, BaseModel):
            _expand_model(value, state)
        elif isinstance(value, str):
            expanded = expand_templates(value, state)
            if expanded != value:
                setattr(model, name, expanded)
        elif isinstance(value, Path):
            expanded = expand_templates(str(value), state)
            if expanded != str(value):
                setattr(model, name, Path(expanded))


class InspectConfig(BaseConfig):
    """Build-log directory scanning."""

    directory: Path | None = Field(
        default=None,
        description=(
            "Directory of build logs to inspect when none is given "
            "on the command line (e.g. 'your/project/app/buildings')"
        ),
    )
    encoding: str = Field(
        default="utf-8",
        description="Text encoding of the build-log files",
    )

    @field_validator("encoding")
    @classmethod
    def _known_encoding(cls, value: str) -> str:
        try:
            codecs.lookup(value)
        except LookupError as e:
            raise ValueError(str(e)) from e
        return value


class SnippetConfig(BaseConfig):
    """Parameters of the generated Gradle listener."""

    dir_name: str = Field(
        default=DEFAULT_DIR_NAME,
        description=(
            "Directory the listener writes its out<millis>.txt "
            "files into, relative to the Gradle project"
        ),
    )
    min_duration_ms: int = Field(
        default=DEFAULT_MIN_DURATION_MS,
        ge=0,
        description="Tasks faster than this are not written",
    )


class Config(BaseConfig):
    """Everything read from YAML, the environment and the CLI.

    Closing it closes the logger's sinks.
    """

    logger: Logger = Field(default_factory=Logger, description="Log sinks and level")
    inspect: InspectConfig = Field(
        default_factory=InspectConfig,
        description="Build-log scanning",
    )
    snippet: SnippetConfig = Field(
        default_factory=SnippetConfig,
        description="Gradle listener snippet",
    )
    run_name: str = Field(
        default="default",
        description="Names the log subdirectory and the logfire service",
    )
    log_root: Path = Field(
        default_factory=(
            lambda: Path(platformdirs.user_state_dir(APP_NAME)) / "log"
        ),
        description="Where log files go (templates allowed)",
    )

    def setup_logger(self) -> Logger:
        """Route the global logger through this config's sinks."""
        return setup_logger(
            log_root=self.log_root,
            run_name=self.run_name,
            console=self.logger.console,
            file=self.logger.file,
            level=self.logger.level,
        )


class InspectState(BaseState):
    """One inspect run, from listing to report."""

    directory: Path | None = None
    files: list[Path] = Field(
        default_factory=list,
        description="Entries found directly inside the directory",
    )
    result: AggregateResult | None = None
    report: list[str] = Field(default_factory=list)
    status: str = Field(
        default="pending",
        description="pending, running or complete",
    )


class Runtime(BaseModel):
    inspect: InspectState = Field(default_factory=InspectState)


class State(BaseSettings):
    """Configuration plus the runtime state of the current run."""

    config: Config = Field(default_factory=Config)
    runtime: Runtime = Field(default_factory=Runtime)
    include: list[str] | None = Field(
        default=None,
        description=(
            "Extra YAML files merged over the others, "
            "later ones winning (repeat --include)"
        ),
    )

    model_config = SettingsConfigDict(
        yaml_file=CONFIG_FILENAME,
        env_prefix="GRADLETIMING_",
        env_nested_delimiter="__",
        env_file=".env",
        extra="ignore",
        arbitrary_types_allowed=True,
        cli_parse_args=True,
        cli_implicit_flags=True,
        cli_use_class_docs_for_groups=True,
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # The package defaults are YAML, so the environment has to
        # rank above YAML for overrides to apply
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlWithIncludesSettingsSource(settings_cls),
            file_secret_settings,
        )

    @model_validator(mode="after")
    def _expand_and_start_logging(self) -> State:
        _expand_model(self, self)
        self.config.setup_logger()
        return self


__all__ = [
    "State",
    "Config",
    "InspectConfig",
    "SnippetConfig",
    "InspectState",
    "Runtime",
    "expand_templates",
]
