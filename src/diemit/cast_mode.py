from __future__ import annotations

from enum import Enum


class CastMode(Enum):
    """Select how generated code narrows component lookups.

    Factories and provider properties read components through untyped handles
    (``component``, ``parent1(component)``, ``plugin_extension``). The cast mode
    decides whether those reads are wrapped for static type checkers.
    """

    CAST = "cast"
    """Wrap lookups in ``typing.cast("ComponentType", ...)``."""

    NONE = "none"
    """Emit bare lookups and leave the values typed as ``Any``."""
