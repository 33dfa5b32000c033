"""Domain model for element-type permissions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator


@dataclass(frozen=True, slots=True)
class ElementType:
    """An assignable content-element type.

    ``label`` is for presentation only and never takes part in comparisons.
    """

    identifier: str
    label: str = field(compare=False)


@dataclass(frozen=True, slots=True)
class Catalogue:
    """Ordered snapshot of in-scope element types, unique by identifier."""

    element_types: tuple[ElementType, ...] = ()

    def __iter__(self) -> Iterator[ElementType]:
        return iter(self.element_types)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self.identifiers

    @property
    def identifiers(self) -> frozenset[str]:
        return frozenset(element.identifier for element in self.element_types)

    def labels(self) -> dict[str, str]:
        return {element.identifier: element.label for element in self.element_types}


@dataclass(eq=False, kw_only=True)
class BackendGroup:
    """A backend user group as owned by the permission store.

    The reconciler only ever touches ``allowed_element_types``; the field may
    carry entries that are unrelated to element types and must survive writes.
    """

    uid: int
    title: str
    description: str | None = None
    allowed_element_types: frozenset[str] = field(default_factory=frozenset[str])


@dataclass(frozen=True, slots=True)
class AutoMerge:
    """Union the catalogue into the current allow-list."""


@dataclass(frozen=True, slots=True)
class ExplicitSelection:
    """Replace the in-scope part of the allow-list with ``selected``."""

    selected: frozenset[str] = frozenset()


type UpdateMode = AutoMerge | ExplicitSelection


@dataclass(frozen=True, slots=True)
class GroupStatus:
    """Coverage of the catalogue by one group's allow-list."""

    group_id: int
    title: str
    missing: frozenset[str] = frozenset()

    @property
    def needs_update(self) -> bool:
        return bool(self.missing)


@dataclass(frozen=True, slots=True)
class GroupFailure:
    group_id: int
    reason: str


@dataclass(frozen=True, slots=True)
class ReconcileResult:
    """Outcome of a reconcile run.

    Groups listed in ``updated`` stay written even when others failed; there is
    no transaction spanning several groups.
    """

    updated: tuple[int, ...] = ()
    unchanged: tuple[int, ...] = ()
    failed: tuple[GroupFailure, ...] = ()

    @property
    def succeeded(self) -> bool:
        return not self.failed

    @property
    def failed_group_ids(self) -> tuple[int, ...]:
        return tuple(failure.group_id for failure in self.failed)
