"""Workflow nodes for the inspect graph."""

from gradletiming.workflow.nodes.aggregate import AggregateLogs
from gradletiming.workflow.nodes.report import Report
from gradletiming.workflow.nodes.scan import ScanDirectory

__all__ = [
    "ScanDirectory",
    "AggregateLogs",
    "Report",
]
