from __future__ import annotations

import keyword
from dataclasses import dataclass

from diemit.cast_mode import CastMode
from diemit.exceptions import DIEmitInvalidOptionsError

MIN_DIGEST_LENGTH = 8
MAX_DIGEST_LENGTH = 64


@dataclass(frozen=True, slots=True, kw_only=True)
class EmitOptions:
    """Configure the text emitted for dependency providers.

    One options object is shared by every serializer of a task so that class
    names, factory names and registrations agree with each other.
    """

    registry_name: str = "registry"
    """Name of the registry object that registration statements call into."""

    digest_length: int = 20
    """Number of SHA-256 hex characters used in generated class and factory names."""

    cast_mode: CastMode = CastMode.CAST
    """How component lookups are narrowed in generated code."""

    def __post_init__(self) -> None:
        if not isinstance(self.registry_name, str) or not self.registry_name.isidentifier():
            msg = f"Invalid registry_name {self.registry_name!r}: expected a Python identifier."
            raise DIEmitInvalidOptionsError(msg)
        if keyword.iskeyword(self.registry_name):
            msg = f"Invalid registry_name {self.registry_name!r}: it is a Python keyword."
            raise DIEmitInvalidOptionsError(msg)
        if (
            isinstance(self.digest_length, bool)
            or not isinstance(self.digest_length, int)
            or not MIN_DIGEST_LENGTH <= self.digest_length <= MAX_DIGEST_LENGTH
        ):
            msg = (
                f"Invalid digest_length {self.digest_length!r}: expected an int between "
                f"{MIN_DIGEST_LENGTH} and {MAX_DIGEST_LENGTH}."
            )
            raise DIEmitInvalidOptionsError(msg)
        if not isinstance(self.cast_mode, CastMode):
            msg = f"Invalid cast_mode {self.cast_mode!r}: expected a CastMode member."
            raise DIEmitInvalidOptionsError(msg)


DEFAULT_OPTIONS = EmitOptions()
