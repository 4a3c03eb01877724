"""Human-readable rendering of an AggregateResult."""

from gradletiming.core.result import AggregateResult

NOT_AVAILABLE = "N/A"


def format_report(result: AggregateResult) -> list[str]:
    """Render the build count, total, average and longest duration.

    The average is shown as N/A when the run counted no builds.
    """
    average = result.average_duration_ms
    if average is None:
        average_line = f"Average: {NOT_AVAILABLE}"
    else:
        average_line = f"Average: {average:.1f} ms"

    return [
        f"Builds: {result.build_count}",
        f"Total: {result.total_duration_sec} sec",
        average_line,
        f"Longest: {result.longest_duration_ms} ms",
    ]
