from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002
from sqlalchemy.orm import Session, sessionmaker

from maskperms.adapters.sqlalchemy import start_mappers
from maskperms.adapters.sqlalchemy.migrations import upgrade_head
from maskperms.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyPermissionUnitOfWork,
    shutdown,
    startup,
)

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

DATA_DIR = Path(__file__).resolve().parent / "data"


@pytest.fixture(scope="session")
def catalogue_path() -> Path:
    return DATA_DIR / "ctype_items.json"


@pytest.fixture(scope="session")
def labels_path() -> Path:
    return DATA_DIR / "labels.json"


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    start_mappers()
    upgrade_head(engine=engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_session(sqlite_engine: Engine) -> Iterator[Session]:
    session_factory = sessionmaker(bind=sqlite_engine, future=True)
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def sqlite_unit_of_work(
    sqlite_engine: Engine,
    sqlite_session: Session,
) -> Iterator[Callable[[], SqlAlchemyPermissionUnitOfWork]]:
    startup(engine=sqlite_engine, force=True)

    def factory() -> SqlAlchemyPermissionUnitOfWork:
        return SqlAlchemyPermissionUnitOfWork()

    try:
        yield factory
    finally:
        # Release the shared in-memory connection before shutdown() disposes the engine.
        sqlite_session.close()
        shutdown()
