"""Logging for gradletiming, backed by logfire.

Everything imports the module-level `logger`. It does nothing until
setup_logger() has run, after which calls go to logfire and from
there to the enabled sinks:

- console: logfire's own console output
- file: one line per record, written through an OpenTelemetry
  span exporter, optionally formatted with a template
"""

from __future__ import annotations

import contextlib
import os
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import logfire
from opentelemetry.proto.logs.v1 import logs_pb2
from opentelemetry.sdk.trace import ReadableSpan
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    ConsoleSpanExporter,
    SpanExporter,
    SpanExportResult,
)
from pydantic import Field, PrivateAttr, model_validator

from gradletiming.core.base import BaseConfig

# Level names mapped to OpenTelemetry severity numbers, most verbose
# first. spew sits below trace for per-line parsing noise.
LEVELS = {
    "spew": logs_pb2.SEVERITY_NUMBER_TRACE,
    "trace": logs_pb2.SEVERITY_NUMBER_TRACE3,
    "debug": logs_pb2.SEVERITY_NUMBER_DEBUG,
    "info": logs_pb2.SEVERITY_NUMBER_INFO,
    "warn": logs_pb2.SEVERITY_NUMBER_WARN,
    "error": logs_pb2.SEVERITY_NUMBER_ERROR,
    "fatal": logs_pb2.SEVERITY_NUMBER_FATAL,
}

# Span attributes that logfire and OpenTelemetry set themselves
_INTERNAL_ATTRS = {
    "code.filepath", "code.lineno", "code.function",
    "logfire.msg", "logfire.msg_template", "logfire.level_num",
    "logfire.span_type", "logfire.json_schema",
}


def severity(level: str | None) -> int:
    """Severity number of a level name; unknown or None is info."""
    return LEVELS.get((level or "info").lower(), LEVELS["info"])


def level_name(number: int) -> str:
    """Most severe level name at or below a severity number."""
    for name, threshold in reversed(LEVELS.items()):
        if number >= threshold:
            return name
    return "spew"


def _level_of(span: ReadableSpan) -> int:
    return (span.attributes or {}).get(
        "logfire.level_num", LEVELS["info"]
    )


class LevelFilter(SpanExporter):
    """Pass on only the spans at or above a minimum level."""

    def __init__(self, exporter: SpanExporter, level: str | None):
        self.exporter = exporter
        self.threshold = severity(level)

    def export(self, spans) -> SpanExportResult:
        kept = [s for s in spans if _level_of(s) >= self.threshold]
        if not kept:
            return SpanExportResult.SUCCESS
        return self.exporter.export(kept)

    def shutdown(self) -> None:
        self.exporter.shutdown()

    def force_flush(self, timeout_millis: int = 30000) -> bool:
        return self.exporter.force_flush(timeout_millis)


class ConsoleSink(BaseConfig):
    """Log records printed by logfire itself."""

    enabled: bool = Field(default=True, description="Print log records")
    level: str | None = Field(
        default=None,
        description="Minimum level; inherits Logger.level when unset",
    )
    colors: str = Field(
        default="auto",
        description="Color mode: auto, always, never",
    )

    def options(self):
        """logfire console options, or False when disabled."""
        if not self.enabled:
            return False
        return logfire.ConsoleOptions(
            # logfire has no spew level
            min_log_level="trace" if self.level == "spew" else (self.level or "info"),
            colors=self.colors,
            include_timestamps=True,
        )


class FileSink(BaseConfig):
    """Log records appended to a file.

    Without a format_template every record is written as the span's
    JSON. With one, the template is filled from timestamp, level,
    message, filepath, lineno, location and function, and any keyword
    attributes of the call are appended after a bar.
    """

    enabled: bool = Field(default=False, description="Write a log file")
    level: str | None = Field(
        default=None,
        description="Minimum level; inherits Logger.level when unset",
    )
    path: str = Field(
        default="{log_root}/{run_name}/gradletiming.log",
        description="Log file path; {log_root} and {run_name} are filled in",
    )
    format_template: str | None = Field(
        default=None,
        description="Line template, or None for JSON",
    )
    escape_special_characters: bool = Field(
        default=False,
        description="Write newlines and tabs in messages as \\n and \\t",
    )

    _file: Any = PrivateAttr(default=None)
    _processor: Any = PrivateAttr(default=None)

    def open(self, log_root: Path, run_name: str) -> BatchSpanProcessor:
        """Open the log file and return the processor feeding it."""
        log_path = Path(self.path.format(log_root=log_root, run_name=run_name))
        log_path.parent.mkdir(parents=True, exist_ok=True)

        # Line buffered; closed by close()
        self._file = open(log_path, "a", buffering=1, encoding="utf-8")  # noqa: SIM115
        exporter = ConsoleSpanExporter(out=self._file, formatter=self.render)
        self._processor = BatchSpanProcessor(LevelFilter(exporter, self.level))
        return self._processor

    def render(self, span: ReadableSpan) -> str:
        if not self.format_template:
            return span.to_json() + os.linesep

        attrs = dict(span.attributes or {})
        message = attrs.get("logfire.msg", span.name)
        if self.escape_special_characters:
            message = (
                message.replace("\\", "\\\\")
                .replace("\n", "\\n")
                .replace("\r", "\\r")
                .replace("\t", "\\t")
            )
        filepath = attrs.get("code.filepath", "")
        lineno = attrs.get("code.lineno", "")

        try:
            line = self.format_template.format(
                timestamp=datetime.fromtimestamp(span.start_time / 1e9, tz=UTC),
                level=level_name(_level_of(span)),
                message=message,
                filepath=filepath,
                lineno=lineno,
                location=f"{filepath}:{lineno}" if filepath else "",
                function=attrs.get("code.function", ""),
            )
        except KeyError as e:
            return f"ERROR: Invalid template field {e}\n"

        extra = sorted(
            (key, value) for key, value in attrs.items()
            if key not in _INTERNAL_ATTRS
            and not key.startswith(("otel.", "telemetry.", "service.", "process."))
        )
        if extra:
            line += " │ " + " ".join(f"{k}={v!r}" for k, v in extra)
        return line + "\n"

    def close(self):
        """Flush pending records into the file, then close it."""
        if self._processor is not None:
            self._processor.shutdown()
            self._processor = None
        if self._file is not None and not self._file.closed:
            self._file.close()


class Logger(BaseConfig):
    """Level plus sinks; closing it closes the sinks."""

    level: str = Field(
        default="info",
        description=(
            "Level for sinks that set none: "
            "spew, trace, debug, info, warn, error, fatal"
        ),
    )
    console: ConsoleSink = Field(default_factory=ConsoleSink)
    file: FileSink = Field(default_factory=FileSink)

    @model_validator(mode="after")
    def _inherit_level(self) -> Logger:
        for sink in (self.console, self.file):
            if sink.level is None:
                sink.level = self.level
        return self

    def setup(self, log_root: Path, run_name: str):
        """Configure logfire with the enabled sinks."""
        processors = []
        if self.file.enabled:
            processors.append(self.file.open(log_root, run_name))

        logfire.configure(
            service_name=f"gradletiming-{run_name}",
            send_to_logfire=False,
            console=self.console.options(),
            additional_span_processors=processors or None,
        )

    def _emit(self, level: str, msg: str, attrs: dict):
        logfire.log(
            level=LEVELS[level],
            msg_template=msg,
            attributes=attrs or None,
        )

    def spew(self, msg: str, **kwargs):
        self._emit("spew", msg, kwargs)

    def trace(self, msg: str, **kwargs):
        self._emit("trace", msg, kwargs)

    def debug(self, msg: str, **kwargs):
        self._emit("debug", msg, kwargs)

    def info(self, msg: str, **kwargs):
        self._emit("info", msg, kwargs)

    def warn(self, msg: str, **kwargs):
        self._emit("warn", msg, kwargs)

    warning = warn

    def error(self, msg: str, **kwargs):
        self._emit("error", msg, kwargs)

    def span(self, msg: str, **kwargs):
        """Context manager grouping the records logged inside it."""
        return logfire.span(msg, **kwargs)


class _ActiveLogger:
    """Stand-in for whichever Logger setup_logger() created last."""

    def __getattr__(self, name):
        if _active is None:
            if name == "span":
                return lambda *args, **kwargs: contextlib.nullcontext()
            return lambda *args, **kwargs: None
        return getattr(_active, name)


_active: Logger | None = None

logger = _ActiveLogger()


def setup_logger(
    log_root: Path,
    run_name: str,
    console: ConsoleSink | None = None,
    file: FileSink | None = None,
    level: str = "info",
) -> Logger:
    """Create the global Logger and route `logger` to it.

    Config calls this once configuration has loaded; tests call it
    directly for console-only or file-only logging.
    """
    global _active

    _active = Logger(
        level=level,
        console=console or ConsoleSink(),
        file=file or FileSink(),
    )
    _active.setup(log_root, run_name)
    return _active
