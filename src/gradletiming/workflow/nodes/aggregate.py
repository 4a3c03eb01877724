"""Aggregate node - read every listed file and fold its timings."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, GraphRunContext

from gradletiming.core.config import State
from gradletiming.core.log import logger
from gradletiming.tools.files import read_contents
from gradletiming.tools.parser import aggregate


@dataclass
class AggregateLogs(BaseNode[State]):
    """Read the listed files one at a time and aggregate them."""

    async def run(self, ctx: GraphRunContext[State]) -> "Report":
        inspect = ctx.state.runtime.inspect
        encoding = ctx.state.config.inspect.encoding

        with logger.span(
            "Aggregating build logs",
            directory=str(inspect.directory),
            files=len(inspect.files),
        ):
            result = aggregate(read_contents(inspect.files, encoding))

        inspect.result = result
        logger.debug(
            "Aggregation done",
            builds=result.build_count,
            total_ms=result.total_duration_ms,
            longest_ms=result.longest_duration_ms,
            skipped_lines=result.skipped_lines,
            skipped_files=result.skipped_files,
        )

        from gradletiming.workflow.nodes.report import Report
        return Report()
