"""Model bases shared by configuration and runtime state.

Lives apart from config.py so log.py can use it without an import
cycle.
"""

from __future__ import annotations

import sys
from typing import Protocol, runtime_checkable

from pydantic import BaseModel


@runtime_checkable
class Closeable(Protocol):
    def close(self) -> None: ...


class BaseCloseable(BaseModel):
    """Model whose close() closes every field that has a close().

    Closing the top-level Config therefore closes the Logger, which
    closes its file sink. Usable as a context manager.
    """

    def close(self):
        for name, value in self:
            if not isinstance(value, Closeable):
                continue
            try:
                value.close()
            except Exception as e:
                # Report and carry on so later fields still close
                print(f"gradletiming: closing {name} failed: {e}",
                      file=sys.stderr)

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()
        return False


class BaseConfig(BaseCloseable):
    """Section of the configuration (YAML/env/CLI)."""


class BaseState(BaseCloseable):
    """Section of the runtime state, rebuilt for every run."""
