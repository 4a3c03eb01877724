"""CLI command modules for gradletiming."""

from gradletiming.command.inspect import InspectCommand
from gradletiming.command.snippet import SnippetCommand

__all__ = ["InspectCommand", "SnippetCommand"]
