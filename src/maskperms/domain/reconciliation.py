"""Reconciliation of group allow-lists against the element-type catalogue.

The reconciler holds no state between calls. Every operation re-reads the
catalogue and the group records it needs, so results never go stale across
administrative actions.

Writes happen one group at a time, each inside its own unit of work. A bulk
run that fails for one group keeps going and leaves the groups written so far
in place; callers get the failed group ids back in :class:`ReconcileResult`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from maskperms.domain.catalogue import (
    DEFAULT_RESERVED_PREFIX,
    build_catalogue,
    in_scope,
    out_of_scope,
)
from maskperms.domain.errors import GroupNotFoundError, PersistenceError
from maskperms.domain.model import (
    AutoMerge,
    ExplicitSelection,
    GroupFailure,
    GroupStatus,
    ReconcileResult,
)
from maskperms.domain.ports import IdentityLabelResolver

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from maskperms.domain.model import BackendGroup, Catalogue, UpdateMode
    from maskperms.domain.ports import (
        CatalogueProvider,
        GroupRepository,
        LabelResolver,
        PermissionUnitOfWork,
    )

log = getLogger(__name__)


@dataclass(slots=True)
class MaskPermissionReconciler:
    """Detect and fix groups whose allow-list lags behind the catalogue."""

    catalogue_provider: CatalogueProvider
    unit_of_work_factory: Callable[[], PermissionUnitOfWork]
    label_resolver: LabelResolver = field(default_factory=IdentityLabelResolver)
    reserved_prefix: str = DEFAULT_RESERVED_PREFIX

    # Catalogue ---------------------------------------------------------------

    def available_element_types(self) -> Catalogue:
        """Return the in-scope catalogue with display labels resolved."""

        return build_catalogue(
            self.catalogue_provider.list_element_types(),
            prefix=self.reserved_prefix,
            resolver=self.label_resolver,
        )

    def _required_identifiers(self) -> frozenset[str]:
        # labels never take part in comparisons, skip resolving them
        items = self.catalogue_provider.list_element_types()
        return build_catalogue(items, prefix=self.reserved_prefix).identifiers

    # Status ------------------------------------------------------------------

    def check_status(self, group_id: int | None = None) -> tuple[GroupStatus, ...]:
        """Report the missing catalogue identifiers for one or all groups."""

        required = self._required_identifiers()
        with self.unit_of_work_factory() as uow:
            repository = uow.repositories.groups
            if group_id is None:
                groups: Iterable[BackendGroup] = repository.list()
            else:
                groups = (_require_group(repository, group_id),)
            return tuple(
                GroupStatus(
                    group_id=group.uid,
                    title=group.title,
                    missing=required - repository.read_allow_list(group),
                )
                for group in groups
            )

    def update_necessary(self, group_id: int | None = None) -> bool:
        """Return whether the group (or any group, without an id) lacks catalogue entries."""

        return any(status.needs_update for status in self.check_status(group_id))

    def groups_needing_update(self) -> dict[int, bool]:
        return {status.group_id: status.needs_update for status in self.check_status()}

    def get_selected_masks(self, group_id: int) -> frozenset[str]:
        """Return the in-scope identifiers currently enabled for ``group_id``."""

        with self.unit_of_work_factory() as uow:
            repository = uow.repositories.groups
            group = _require_group(repository, group_id)
            return in_scope(repository.read_allow_list(group), self.reserved_prefix)

    # Updates -----------------------------------------------------------------

    def reconcile(self, mode: UpdateMode, *, group_id: int | None = None) -> ReconcileResult:
        """Apply ``mode`` to one group, or to every group when ``group_id`` is None.

        An unknown ``group_id`` raises :class:`GroupNotFoundError`. Persistence
        failures are collected per group and never abort the run.
        """

        if isinstance(mode, ExplicitSelection) and group_id is None:
            raise ValueError("An explicit selection needs a target group")

        required = self._required_identifiers() if isinstance(mode, AutoMerge) else frozenset()

        if group_id is None:
            with self.unit_of_work_factory() as uow:
                group_ids = [group.uid for group in uow.repositories.groups.list()]
        else:
            group_ids = [group_id]

        updated: list[int] = []
        unchanged: list[int] = []
        failed: list[GroupFailure] = []
        for current_id in group_ids:
            try:
                changed = self._reconcile_group(current_id, mode, required)
            except GroupNotFoundError as exc:
                if group_id is not None:
                    raise
                log.warning("Group %s vanished during bulk update", current_id)
                failed.append(GroupFailure(group_id=current_id, reason=str(exc)))
                continue
            except PersistenceError as exc:
                log.warning("Failed to store allow-list for group %s: %s", current_id, exc)
                failed.append(GroupFailure(group_id=current_id, reason=str(exc)))
                continue
            (updated if changed else unchanged).append(current_id)

        log.info(
            "Reconciled %d group(s): updated=%s, unchanged=%s, failed=%s",
            len(group_ids),
            updated,
            unchanged,
            [failure.group_id for failure in failed],
        )
        return ReconcileResult(
            updated=tuple(updated),
            unchanged=tuple(unchanged),
            failed=tuple(failed),
        )

    def update(self, group_id: int | None = None, selected: Iterable[str] | None = None) -> bool:
        """Reconcile using the argument shape to pick the mode.

        No ``selected`` means an automatic merge; a ``selected`` collection,
        even an empty one, replaces the group's in-scope entries.
        """

        mode: UpdateMode
        if selected is None:
            mode = AutoMerge()
        else:
            mode = ExplicitSelection(frozenset(selected))
        return self.reconcile(mode, group_id=group_id).succeeded

    def _reconcile_group(
        self,
        group_id: int,
        mode: UpdateMode,
        required: frozenset[str],
    ) -> bool:
        with self.unit_of_work_factory() as uow:
            repository = uow.repositories.groups
            group = _require_group(repository, group_id)
            current = repository.read_allow_list(group)
            target = self._target_allow_list(current, mode, required)
            if target == current:
                return False
            repository.write_allow_list(group, target)
            uow.commit()

        log.info(
            "Stored allow-list for group %s: +%s -%s",
            group_id,
            sorted(target - current),
            sorted(current - target),
        )
        return True

    def _target_allow_list(
        self,
        current: frozenset[str],
        mode: UpdateMode,
        required: frozenset[str],
    ) -> frozenset[str]:
        match mode:
            case AutoMerge():
                return current | required
            case ExplicitSelection(selected=selected):
                accepted = in_scope(selected, self.reserved_prefix)
                ignored = selected - accepted
                if ignored:
                    log.debug("Ignoring selections without reserved prefix: %s", sorted(ignored))
                return out_of_scope(current, self.reserved_prefix) | accepted


def _require_group(repository: GroupRepository, group_id: int) -> BackendGroup:
    group = repository.get(group_id)
    if group is None:
        raise GroupNotFoundError(group_id)
    return group
