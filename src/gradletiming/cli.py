#!/usr/bin/env python3
"""gradletiming command line."""

import asyncio

from pydantic_settings import CliApp, CliSubCommand, get_subcommand

from gradletiming.command.inspect import InspectCommand
from gradletiming.command.snippet import SnippetCommand
from gradletiming.core.config import State


class CliState(State):
    """Aggregate task timings from Gradle build logs.

    Run `snippet` and paste its output into build.gradle; every build
    then leaves one timing log. `inspect --directory DIR` counts those
    builds and prints their total, average and longest durations.

    Any setting can also come from GRADLETIMING_* environment
    variables (GRADLETIMING_CONFIG__INSPECT__ENCODING=latin-1), a .env
    file, ./gradletiming.yaml or --include FILE.
    """

    inspect: CliSubCommand[InspectCommand]
    snippet: CliSubCommand[SnippetCommand]

    def cli_cmd(self):
        command = get_subcommand(self, is_required=False)
        if command is None:
            CliApp.run(CliState, cli_args=["--help"])
            raise SystemExit(1)

        with self.config:
            code = asyncio.run(command.run_workflow(self))
        raise SystemExit(code)


def main():
    CliApp.run(CliState)


if __name__ == "__main__":
    main()
