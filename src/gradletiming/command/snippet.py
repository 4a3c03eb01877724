"""Snippet command - emit the Gradle timing listener."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

from gradletiming.core.log import logger
from gradletiming.tools.snippet import render_snippet

if TYPE_CHECKING:
    from gradletiming.core.config import State


class SnippetCommand(BaseModel):
    """Print the code to nest in build.gradle.

    The listener writes one timing log per build into the
    configured directory; point `inspect` at that directory.
    """

    output: Path | None = Field(
        default=None,
        description="Write the snippet to this file instead of stdout",
    )

    async def run_workflow(self, state: State) -> int:
        """Render the snippet from config.snippet.

        Returns:
            Exit code (0=success)
        """
        code = render_snippet(
            dir_name=state.config.snippet.dir_name,
            min_duration_ms=state.config.snippet.min_duration_ms,
        )

        if self.output is None:
            print(code, end="")
            return 0

        self.output.parent.mkdir(parents=True, exist_ok=True)
        self.output.write_text(code, encoding="utf-8")
        logger.info("Snippet written", file=str(self.output))
        return 0
