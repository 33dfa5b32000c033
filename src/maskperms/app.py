"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from maskperms.adapters.catalogue import (
    JsonCatalogueProvider,
    TranslationLabelResolver,
    load_translations,
)
from maskperms.adapters.sqlalchemy.repositories import SqlAlchemyGroupRepository
from maskperms.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyPermissionUnitOfWork,
    is_started,
    startup,
)
from maskperms.config import get_catalogue_config
from maskperms.domain import (
    AutoMerge,
    BackendGroup,
    ExplicitSelection,
    MaskPermissionReconciler,
)
from maskperms.domain.ports import IdentityLabelResolver

if TYPE_CHECKING:
    from maskperms.domain import Catalogue, GroupStatus, ReconcileResult
    from maskperms.domain.ports import CatalogueProvider, LabelResolver, PermissionUnitOfWork

UnitOfWorkFactory = Callable[[], "PermissionUnitOfWork"]

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class StatusOverview:
    """Per-group update indicators plus the flag for the bulk action."""

    groups: tuple[GroupStatus, ...]

    @property
    def can_update(self) -> bool:
        return any(status.needs_update for status in self.groups)


@dataclass(frozen=True, slots=True)
class MaskSelection:
    """What the selection form for one group needs to render."""

    group_id: int
    title: str
    available: Catalogue
    selected: frozenset[str]


def _ensure_started() -> None:
    if not is_started():
        startup()


def build_reconciler(
    *,
    catalogue_provider: CatalogueProvider | None = None,
    label_resolver: LabelResolver | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    reserved_prefix: str | None = None,
) -> MaskPermissionReconciler:
    """Wire the reconciler from configuration, honouring explicit overrides."""

    if catalogue_provider is None or reserved_prefix is None:
        config = get_catalogue_config()
        if catalogue_provider is None:
            catalogue_provider = JsonCatalogueProvider(config.catalogue_path)
            if label_resolver is None and config.labels_path is not None:
                label_resolver = TranslationLabelResolver(load_translations(config.labels_path))
        if reserved_prefix is None:
            reserved_prefix = config.reserved_prefix

    if unit_of_work_factory is None:
        _ensure_started()
        unit_of_work_factory = SqlAlchemyPermissionUnitOfWork

    return MaskPermissionReconciler(
        catalogue_provider=catalogue_provider,
        unit_of_work_factory=unit_of_work_factory,
        label_resolver=label_resolver or IdentityLabelResolver(),
        reserved_prefix=reserved_prefix,
    )


def show_status(*, reconciler: MaskPermissionReconciler | None = None) -> StatusOverview:
    effective = reconciler or build_reconciler()
    return StatusOverview(groups=effective.check_status())


def update_groups(
    group_id: int | None = None,
    *,
    reconciler: MaskPermissionReconciler | None = None,
) -> ReconcileResult:
    """Merge the catalogue into one group, or into every group."""

    effective = reconciler or build_reconciler()
    log.info("Starting automatic update: group=%s", "all" if group_id is None else group_id)
    return effective.reconcile(AutoMerge(), group_id=group_id)


def select_masks(
    group_id: int,
    *,
    reconciler: MaskPermissionReconciler | None = None,
) -> MaskSelection:
    effective = reconciler or build_reconciler()
    statuses = effective.check_status(group_id)
    return MaskSelection(
        group_id=group_id,
        title=statuses[0].title,
        available=effective.available_element_types(),
        selected=effective.get_selected_masks(group_id),
    )


def save_masks(
    group_id: int,
    selected: Iterable[str],
    *,
    reconciler: MaskPermissionReconciler | None = None,
) -> ReconcileResult:
    """Store exactly ``selected`` as the group's reserved-prefix entries."""

    effective = reconciler or build_reconciler()
    return effective.reconcile(ExplicitSelection(frozenset(selected)), group_id=group_id)


def create_group(
    title: str,
    *,
    description: str | None = None,
    uid: int | None = None,
) -> BackendGroup:
    """Create a backend group with an empty allow-list."""

    _ensure_started()
    with SqlAlchemyPermissionUnitOfWork() as uow:
        repository = uow.repositories.groups
        if not isinstance(repository, SqlAlchemyGroupRepository):
            raise TypeError("Group creation needs the SQLAlchemy group repository")
        group = BackendGroup(
            uid=uid if uid is not None else repository.next_uid(),
            title=title,
            description=description,
        )
        repository.add(group)
        uow.commit()
    log.info("Created group %s (%s)", group.uid, group.title)
    return group

