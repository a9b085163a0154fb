from __future__ import annotations

from typing import Protocol


class SerializerProtocol(Protocol):
    """Protocol for a piece of emitted provider source text."""

    def serialize(self) -> str:
        """Return the rendered source text."""
