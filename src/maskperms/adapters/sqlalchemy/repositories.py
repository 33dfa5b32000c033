"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

from sqlalchemy import func, select

from maskperms.domain.model import BackendGroup

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy.orm import InstrumentedAttribute, Session


class SqlAlchemyGroupRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, group: BackendGroup) -> None:
        self.session.add(group)

    def list(self) -> Sequence[BackendGroup]:
        uid_column = cast("InstrumentedAttribute[int]", BackendGroup.uid)
        stmt = select(BackendGroup).order_by(uid_column)
        return self.session.execute(stmt).scalars().all()

    def get(self, group_id: int) -> BackendGroup | None:
        return self.session.get(BackendGroup, group_id)

    def read_allow_list(self, group: BackendGroup) -> frozenset[str]:
        return frozenset(group.allowed_element_types)

    def write_allow_list(self, group: BackendGroup, allow_list: frozenset[str]) -> None:
        group.allowed_element_types = frozenset(allow_list)
        self.session.add(group)

    def next_uid(self) -> int:
        uid_column = cast("InstrumentedAttribute[int]", BackendGroup.uid)
        current = self.session.execute(select(func.max(uid_column))).scalar_one_or_none()
        return (current or 0) + 1
