"""SQLAlchemy mapping metadata for backend groups."""

from __future__ import annotations

import logging
from functools import cache
from typing import TYPE_CHECKING, Final

from sqlalchemy import Column, Dialect, Integer, String, Table, Text, TypeDecorator, orm

from maskperms.domain.model import BackendGroup

if TYPE_CHECKING:
    from collections.abc import Iterable

log = logging.getLogger(__name__)

ELEMENT_TYPE_ENTRY_PREFIX: Final[str] = "tt_content:CType:"
ENTRY_SEPARATOR: Final[str] = ","
# marks raw entries that would otherwise be read back as bare identifiers
RAW_ENTRY_MARKER: Final[str] = ":"


def _decode_entry(entry: str) -> str:
    identifier = entry.removeprefix(ELEMENT_TYPE_ENTRY_PREFIX)
    if identifier != entry and identifier and ":" not in identifier:
        return identifier
    if ":" not in entry or entry.startswith(RAW_ENTRY_MARKER):
        return f"{RAW_ENTRY_MARKER}{entry}"
    return entry


def _encode_entry(entry: str) -> str:
    if entry.startswith(RAW_ENTRY_MARKER):
        return entry.removeprefix(RAW_ENTRY_MARKER)
    if ":" in entry:
        return entry
    return f"{ELEMENT_TYPE_ENTRY_PREFIX}{entry}"


def decode_allow_list(value: str | None) -> frozenset[str]:
    """Parse the stored field into identifiers and opaque permission entries.

    Only ``tt_content:CType:<identifier>`` entries with a plain identifier are
    unwrapped. Every other entry is kept as stored; entries without a ``:`` (or
    starting with one) get a leading ``:`` so they never pass for identifiers.
    """

    if not value:
        return frozenset()
    return frozenset(
        _decode_entry(entry)
        for entry in (raw.strip() for raw in value.split(ENTRY_SEPARATOR))
        if entry
    )


def encode_allow_list(entries: Iterable[str]) -> str:
    """Serialise an allow-list; the inverse of :func:`decode_allow_list`."""

    encoded = {_encode_entry(entry) for entry in (raw.strip() for raw in entries) if entry}
    return ENTRY_SEPARATOR.join(sorted(encoded))


class AllowListType(TypeDecorator[frozenset[str]]):
    impl = Text
    cache_ok = True

    def process_bind_param(self, value: frozenset[str] | None, dialect: Dialect) -> str:
        _ = dialect
        if value is None:
            return ""
        return encode_allow_list(value)

    def process_result_value(self, value: str | None, dialect: Dialect) -> frozenset[str]:
        _ = dialect
        return decode_allow_list(value)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

be_groups_table = Table(
    "be_groups",
    mapper_registry.metadata,
    Column("uid", Integer, primary_key=True, autoincrement=True),
    Column("title", String(50), nullable=False),
    Column("description", String, nullable=True),
    Column(
        "explicit_allowdeny",
        AllowListType(),
        key="allowed_element_types",
        nullable=False,
        default=frozenset(),
        server_default="",
    ),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")
    mapper_registry.map_imperatively(BackendGroup, be_groups_table)
    return mapper_registry

