"""SQLAlchemy permission store adapter."""

from __future__ import annotations

from .mappings import (
    AllowListType,
    be_groups_table,
    decode_allow_list,
    encode_allow_list,
    mapper_registry,
    start_mappers,
)
from .repositories import SqlAlchemyGroupRepository

__all__ = [
    "AllowListType",
    "SqlAlchemyGroupRepository",
    "be_groups_table",
    "decode_allow_list",
    "encode_allow_list",
    "mapper_registry",
    "start_mappers",
]
