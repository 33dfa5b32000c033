"""Domain error definitions."""

from __future__ import annotations


class MaskPermissionsError(Exception):
    """Base class for permission reconciliation errors."""


class GroupNotFoundError(MaskPermissionsError, LookupError):
    """Raised when a group identifier does not reference a stored group."""

    def __init__(self, group_id: int) -> None:
        super().__init__(f"Group not found: {group_id}")
        self.group_id = group_id


class PersistenceError(MaskPermissionsError):
    """Raised by a permission store when an allow-list cannot be written."""
