"""Command primitives.

Commands are immutable Pydantic models: each variant carries exactly the
fields its precondition needs, and field validators reject malformed
commands at construction time, before any handler runs.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Command(BaseModel):
    """Base class for every command accepted by the command bus."""

    model_config = ConfigDict(frozen=True)

    @property
    def command_name(self) -> str:
        return self.__class__.__name__
