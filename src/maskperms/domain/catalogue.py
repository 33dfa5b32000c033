"""Filtering of the shared element-type catalogue down to reserved-prefix entries."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from maskperms.domain.model import Catalogue, ElementType

if TYPE_CHECKING:
    from collections.abc import Iterable

    from maskperms.domain.ports import LabelResolver

DIVIDER_SENTINEL: Final[str] = "--div--"
DEFAULT_RESERVED_PREFIX: Final[str] = "mask_"


def is_in_scope(identifier: str, prefix: str = DEFAULT_RESERVED_PREFIX) -> bool:
    """Return whether ``identifier`` belongs to the reserved-prefix domain."""

    return identifier != DIVIDER_SENTINEL and identifier.startswith(prefix)


def in_scope(identifiers: Iterable[str], prefix: str = DEFAULT_RESERVED_PREFIX) -> frozenset[str]:
    return frozenset(identifier for identifier in identifiers if is_in_scope(identifier, prefix))


def out_of_scope(
    identifiers: Iterable[str], prefix: str = DEFAULT_RESERVED_PREFIX
) -> frozenset[str]:
    return frozenset(
        identifier for identifier in identifiers if not is_in_scope(identifier, prefix)
    )


def build_catalogue(
    items: Iterable[tuple[str, str]],
    *,
    prefix: str = DEFAULT_RESERVED_PREFIX,
    resolver: LabelResolver | None = None,
) -> Catalogue:
    """Build the in-scope catalogue from raw ``(identifier, label)`` pairs.

    Dividers are dropped first, then entries without the reserved prefix. The
    first occurrence of an identifier wins, so display order follows the source.
    """

    seen: set[str] = set()
    element_types: list[ElementType] = []
    for identifier, label in items:
        if identifier == DIVIDER_SENTINEL or identifier in seen:
            continue
        seen.add(identifier)
        if not is_in_scope(identifier, prefix):
            continue
        resolved = resolver.resolve(label) if resolver is not None else label
        element_types.append(ElementType(identifier=identifier, label=resolved))
    return Catalogue(element_types=tuple(element_types))
