"""Inspect command - aggregate the timings of a build-log directory."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

from gradletiming.core.log import logger

if TYPE_CHECKING:
    from gradletiming.core.config import State


class InspectCommand(BaseModel):
    """Scan a directory of Gradle timing logs and print build count,
    total, average and longest task duration.

    Every file directly inside the directory counts as one build.
    Subdirectories are not descended into.
    """

    directory: Path | None = Field(
        default=None,
        description=(
            "Directory of build logs "
            "(defaults to config.inspect.directory)"
        ),
    )

    def resolve_directory(self, state: State) -> Path | None:
        return self.directory or state.config.inspect.directory

    async def run_workflow(self, state: State) -> int:
        """Run the inspect workflow and print its report.

        Args:
            state: State instance with config loaded

        Returns:
            Exit code (0=success, 2=no directory given)
        """
        directory = self.resolve_directory(state)
        if directory is None:
            logger.error(
                "No directory to inspect. Pass --directory or set "
                "config.inspect.directory"
            )
            return 2

        from gradletiming.workflow.graph import create_workflow
        from gradletiming.workflow.nodes.scan import ScanDirectory

        workflow = create_workflow()

        async with workflow.iter(
            ScanDirectory(directory=directory), state=state
        ) as run:
            async for _node in run:
                pass

        for line in state.runtime.inspect.report:
            print(line)

        logger.info("Inspection complete", directory=str(directory))
        return 0
