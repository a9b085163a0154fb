from __future__ import annotations

from collections.abc import Callable, Hashable, Iterable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Generic, TypeAlias, TypeVar

from diemit.exceptions import DIEmitEmptyProviderGroupError

if TYPE_CHECKING:
    from typing_extensions import Self

T = TypeVar("T")

Signature: TypeAlias = tuple[Hashable, ...]
"""Ordered property descriptors that decide group membership."""


@dataclass(frozen=True, slots=True)
class ProviderGroup(Generic[T]):
    """Providers sharing one property signature, in input order.

    A group always holds at least one member. ``of`` takes the first member as
    a required argument, and direct construction with no members fails fast.
    """

    signature: Signature
    members: tuple[T, ...]

    def __post_init__(self) -> None:
        if not self.members:
            msg = f"Provider group for signature {self.signature!r} has no members."
            raise DIEmitEmptyProviderGroupError(msg)

    @classmethod
    def of(cls, signature: Signature, first: T, *rest: T) -> Self:
        """Create a group from its first member and any later ones.

        Args:
            signature: Property signature shared by every member.
            first: Provider that introduced the signature.
            rest: Later providers with the same signature, in input order.

        """
        return cls(signature=signature, members=(first, *rest))

    @property
    def representative(self) -> T:
        """Return the member the shared declaration is rendered from."""
        return self.members[0]


def group_providers(
    providers: Iterable[T],
    *,
    signature: Callable[[T], Sequence[Hashable]],
) -> tuple[ProviderGroup[T], ...]:
    """Partition providers by ordered property signature.

    Groups appear in the order their signature was first seen and members keep
    their relative input order. Signatures compare element-wise, so the same
    properties in a different order form a different group.

    Args:
        providers: Providers in emission order.
        signature: Returns the ordered properties used as the grouping key.

    """
    members_by_signature: dict[Signature, list[T]] = {}
    for provider in providers:
        members_by_signature.setdefault(tuple(signature(provider)), []).append(provider)

    return tuple(
        ProviderGroup.of(key, members[0], *members[1:])
        for key, members in members_by_signature.items()
    )
