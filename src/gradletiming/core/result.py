"""Result types for build-log aggregation."""

from pydantic import BaseModel


class AggregateResult(BaseModel):
    """Aggregate timing figures of one inspection run.

    Created with all counters at zero, filled in while the run
    walks its files, then handed to the caller.
    """

    build_count: int = 0
    total_duration_ms: int = 0
    longest_duration_ms: int = 0
    skipped_lines: int = 0
    skipped_files: int = 0

    @property
    def total_duration_sec(self) -> float:
        return self.total_duration_ms / 1000

    @property
    def average_duration_ms(self) -> float | None:
        """Mean duration per build, or None when no build was counted."""
        if self.build_count == 0:
            return None
        return self.total_duration_ms / self.build_count
