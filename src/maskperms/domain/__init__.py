"""Domain layer: element-type catalogue, group allow-lists and their reconciliation."""

from __future__ import annotations

from .catalogue import (
    DEFAULT_RESERVED_PREFIX,
    DIVIDER_SENTINEL,
    build_catalogue,
    in_scope,
    is_in_scope,
    out_of_scope,
)
from .errors import GroupNotFoundError, MaskPermissionsError, PersistenceError
from .model import (
    AutoMerge,
    BackendGroup,
    Catalogue,
    ElementType,
    ExplicitSelection,
    GroupFailure,
    GroupStatus,
    ReconcileResult,
    UpdateMode,
)
from .reconciliation import MaskPermissionReconciler

__all__ = [
    "DEFAULT_RESERVED_PREFIX",
    "DIVIDER_SENTINEL",
    "AutoMerge",
    "BackendGroup",
    "Catalogue",
    "ElementType",
    "ExplicitSelection",
    "GroupFailure",
    "GroupNotFoundError",
    "GroupStatus",
    "MaskPermissionReconciler",
    "MaskPermissionsError",
    "PersistenceError",
    "ReconcileResult",
    "UpdateMode",
    "build_catalogue",
    "in_scope",
    "is_in_scope",
    "out_of_scope",
]
