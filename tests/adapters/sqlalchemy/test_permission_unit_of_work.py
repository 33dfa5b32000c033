from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine

from maskperms.adapters.catalogue import StaticCatalogueProvider
from maskperms.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyPermissionUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)
from maskperms.domain import MaskPermissionReconciler, PersistenceError
from tests.helpers.permissions import SCENARIO_CATALOGUE, make_group

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from sqlalchemy.engine import Engine


@pytest.fixture(autouse=True)
def reset_unit_of_work_state() -> Iterator[None]:
    shutdown()
    yield
    shutdown()


def test_unit_of_work_requires_startup() -> None:
    with pytest.raises(StartupError):
        SqlAlchemyPermissionUnitOfWork()


def test_startup_requires_force_for_reconfiguration() -> None:
    engine_a = create_engine("sqlite+pysqlite:///:memory:", future=True)
    engine_b = create_engine("sqlite+pysqlite:///:memory:", future=True)

    startup(engine=engine_a, force=True)

    with pytest.raises(StartupError):
        startup(engine=engine_b)

    startup(engine=engine_b, force=True)
    assert configured_engine() is engine_b
    assert is_started()


def test_repositories_unavailable_outside_context(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)
    uow = SqlAlchemyPermissionUnitOfWork()

    with pytest.raises(StartupError):
        _ = uow.repositories


def test_unit_of_work_persists_groups(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)

    with SqlAlchemyPermissionUnitOfWork() as uow:
        uow.repositories.groups.add(make_group(1, {"mask_text"}))  # type: ignore[attr-defined]
        uow.commit()

    with SqlAlchemyPermissionUnitOfWork() as uow:
        group = uow.repositories.groups.get(1)
        assert group is not None
        assert uow.repositories.groups.read_allow_list(group) == {"mask_text"}


def test_uncommitted_changes_are_discarded(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)
    with SqlAlchemyPermissionUnitOfWork() as uow:
        uow.repositories.groups.add(make_group(1))  # type: ignore[attr-defined]
        uow.commit()

    with SqlAlchemyPermissionUnitOfWork() as uow:
        group = uow.repositories.groups.get(1)
        assert group is not None
        uow.repositories.groups.write_allow_list(group, frozenset({"mask_text"}))

    with SqlAlchemyPermissionUnitOfWork() as uow:
        group = uow.repositories.groups.get(1)
        assert group is not None
        assert group.allowed_element_types == frozenset()


def test_commit_failure_raises_persistence_error(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)
    with SqlAlchemyPermissionUnitOfWork() as uow:
        uow.repositories.groups.add(make_group(1))  # type: ignore[attr-defined]
        uow.commit()

    with SqlAlchemyPermissionUnitOfWork() as uow:
        uow.repositories.groups.add(make_group(1))  # type: ignore[attr-defined]
        with pytest.raises(PersistenceError):
            uow.commit()

def test_reconciler_against_sqlite(
    sqlite_unit_of_work: Callable[[], SqlAlchemyPermissionUnitOfWork],
) -> None:
    with sqlite_unit_of_work() as uow:
        repository = uow.repositories.groups
        first = make_group(1, {"mask_text", "pages:doktype:1"})
        repository.add(first)  # type: ignore[attr-defined]
        repository.add(make_group(2))  # type: ignore[attr-defined]
        uow.commit()

    reconciler = MaskPermissionReconciler(
        catalogue_provider=StaticCatalogueProvider.from_identifiers(SCENARIO_CATALOGUE),
        unit_of_work_factory=sqlite_unit_of_work,
    )

    assert reconciler.groups_needing_update() == {1: True, 2: True}
    assert reconciler.update() is True
    assert reconciler.update_necessary() is False
    assert reconciler.get_selected_masks(1) == {"mask_text", "mask_gallery"}

    assert reconciler.update(1, []) is True
    assert reconciler.get_selected_masks(1) == frozenset()
    with sqlite_unit_of_work() as uow:
        group = uow.repositories.groups.get(1)
        assert group is not None
        assert group.allowed_element_types == {"pages:doktype:1"}
