"""Graph workflow definition."""

from pydantic_graph import Graph

from gradletiming.core.config import State
from gradletiming.core.log import logger


def create_workflow():
    """Create the inspect workflow graph.

    ScanDirectory → AggregateLogs → Report

    Returns:
        Graph workflow with State as state_type
    """
    logger.debug("Building workflow graph")

    from gradletiming.workflow.nodes.aggregate import AggregateLogs
    from gradletiming.workflow.nodes.report import Report
    from gradletiming.workflow.nodes.scan import ScanDirectory

    return Graph(
        nodes=(
            ScanDirectory,
            AggregateLogs,
            Report,
        ),
        state_type=State
    )
