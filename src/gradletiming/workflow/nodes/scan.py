"""Scan node - list the build-log directory."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from pydantic_graph import BaseNode, GraphRunContext

from gradletiming.core.config import InspectState, State
from gradletiming.core.log import logger
from gradletiming.tools.files import list_files


@dataclass
class ScanDirectory(BaseNode[State]):
    """Start a run: reset runtime state and list the directory."""

    directory: Path

    async def run(
        self, ctx: GraphRunContext[State]
    ) -> "AggregateLogs":
        # Each run starts from fresh runtime state
        ctx.state.runtime.inspect = InspectState(
            directory=self.directory,
            status="running",
        )

        logger.info("Scanning directory", directory=str(self.directory))
        ctx.state.runtime.inspect.files = list_files(self.directory)

        if not ctx.state.runtime.inspect.files:
            logger.warning(
                "No build logs found", directory=str(self.directory)
            )

        from gradletiming.workflow.nodes.aggregate import AggregateLogs
        return AggregateLogs()
