"""Report node - render the run's figures and finish."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, End, GraphRunContext

from gradletiming.core.config import State
from gradletiming.core.log import logger
from gradletiming.core.result import AggregateResult
from gradletiming.tools.report import format_report


@dataclass
class Report(BaseNode[State, None, AggregateResult]):
    """Render the report lines and end the run with its result."""

    async def run(
        self, ctx: GraphRunContext[State]
    ) -> End[AggregateResult]:
        inspect = ctx.state.runtime.inspect
        if inspect.result is None:
            raise ValueError("Nothing to report - logs were not aggregated")

        inspect.report = format_report(inspect.result)
        inspect.status = "complete"

        if inspect.result.build_count == 0:
            logger.warning(
                "No builds counted, average is not available",
                directory=str(inspect.directory),
            )

        return End(inspect.result)
