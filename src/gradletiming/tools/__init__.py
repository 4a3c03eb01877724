"""Build-log listing, parsing and rendering."""

from gradletiming.tools.files import list_files, read_content, read_contents
from gradletiming.tools.parser import aggregate, parse_duration
from gradletiming.tools.report import format_report
from gradletiming.tools.snippet import render_snippet

__all__ = [
    "list_files",
    "read_content",
    "read_contents",
    "aggregate",
    "parse_duration",
    "format_report",
    "render_snippet",
]
