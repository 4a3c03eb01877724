"""Parse task durations out of Gradle timing logs."""

import re
from collections.abc import Iterable

from gradletiming.core.log import logger
from gradletiming.core.result import AggregateResult

MARKER = "ms"

# Optional sign and ASCII digits; anything else is not a duration
_INTEGER = re.compile(r"[+-]?[0-9]+", re.ASCII)


def parse_duration(line: str) -> int | None:
    """Extract the millisecond figure from one log line.

    The figure is whatever precedes the first "ms" on the line,
    with spaces removed. Lines look like

        "      45 ms \\t :app:compileDebugJavaWithJavac"

    Args:
        line: One line of a timing log

    Returns:
        The duration in milliseconds, or None if the line has no
        "ms" or the text before it is not an integer
    """
    if MARKER not in line:
        return None

    prefix = line.split(MARKER, 1)[0].replace(" ", "")
    if not _INTEGER.fullmatch(prefix):
        return None
    return int(prefix)


def aggregate(contents: Iterable[str | None]) -> AggregateResult:
    """Fold build-log contents into one AggregateResult.

    Every non-empty content counts as one build, whether or not any
    duration was found in it. Empty and unreadable (None) contents
    are skipped without being counted.

    Args:
        contents: Text of each log file, None for unreadable files

    Returns:
        A new AggregateResult for this run
    """
    result = AggregateResult()

    for content in contents:
        if not content:
            result.skipped_files += 1
            continue

        for line in content.split("\n"):
            if MARKER not in line:
                continue

            duration = parse_duration(line)
            if duration is None:
                result.skipped_lines += 1
                logger.spew("Skipping malformed duration line", line=line)
                continue

            result.total_duration_ms += duration
            if duration > result.longest_duration_ms:
                result.longest_duration_ms = duration

        result.build_count += 1

    return result
