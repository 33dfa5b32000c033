"""Ports implemented by catalogue and permission-store adapters."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import TracebackType

    from maskperms.domain.model import BackendGroup


@runtime_checkable
class CatalogueProvider(Protocol):
    """Source of every element type known to the system, in display order."""

    def list_element_types(self) -> Sequence[tuple[str, str]]:
        """Return ``(identifier, label)`` pairs; labels may need resolving."""
        ...


@runtime_checkable
class LabelResolver(Protocol):
    """Turns a raw (possibly localisable) label into display text."""

    def resolve(self, label: str) -> str: ...


class IdentityLabelResolver:
    def resolve(self, label: str) -> str:
        return label


@runtime_checkable
class GroupRepository(Protocol):
    """Persistence contract for backend groups and their allow-lists."""

    def list(self) -> Sequence[BackendGroup]: ...

    def get(self, group_id: int) -> BackendGroup | None: ...

    def read_allow_list(self, group: BackendGroup) -> frozenset[str]: ...

    def write_allow_list(self, group: BackendGroup, allow_list: frozenset[str]) -> None: ...


@dataclass(slots=True)
class PermissionRepositories:
    """Repositories required to reconcile group permissions."""

    groups: GroupRepository


@runtime_checkable
class PermissionUnitOfWork(Protocol):
    """Transaction boundary around one group's read-then-write.

    ``commit`` raises :class:`~maskperms.domain.errors.PersistenceError` when
    the store rejects the write.
    """

    @property
    def repositories(self) -> PermissionRepositories: ...

    def __enter__(self) -> PermissionUnitOfWork: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...
