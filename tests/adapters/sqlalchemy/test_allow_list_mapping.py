from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import text
from sqlalchemy.orm import Session  # noqa: TC002

from maskperms.adapters.catalogue import StaticCatalogueProvider
from maskperms.adapters.sqlalchemy import decode_allow_list, encode_allow_list
from maskperms.domain import BackendGroup, MaskPermissionReconciler

if TYPE_CHECKING:
    from collections.abc import Callable

    from maskperms.adapters.sqlalchemy.unit_of_work import SqlAlchemyPermissionUnitOfWork

LEGACY_FIELD = "tt_content:CType:mask_a,tt_content:CType:mask_old:ALLOW,legacyflag"


def test_encode_tags_identifiers_and_keeps_other_entries() -> None:
    encoded = encode_allow_list({"mask_b", "mask_a", "pages:doktype:254", " "})

    assert encoded == "pages:doktype:254,tt_content:CType:mask_a,tt_content:CType:mask_b"


def test_decode_strips_element_type_prefix() -> None:
    decoded = decode_allow_list("tt_content:CType:mask_a, pages:doktype:254,,tt_content:CType:text")

    assert decoded == {"mask_a", "pages:doktype:254", "text"}


def test_decode_empty_field() -> None:
    assert decode_allow_list("") == frozenset()
    assert decode_allow_list(None) == frozenset()


def test_group_round_trips_through_database(sqlite_session: Session) -> None:
    sqlite_session.add(
        BackendGroup(
            uid=5,
            title="Editors",
            allowed_element_types=frozenset({"mask_a", "tables_modify:pages"}),
        )
    )
    sqlite_session.commit()

    raw = sqlite_session.execute(
        text("SELECT explicit_allowdeny FROM be_groups WHERE uid = 5")
    ).scalar_one()
    assert raw == "tables_modify:pages,tt_content:CType:mask_a"

    sqlite_session.expire_all()
    group = sqlite_session.get(BackendGroup, 5)
    assert group is not None
    assert group.allowed_element_types == {"mask_a", "tables_modify:pages"}


def test_legacy_rows_with_blank_field_load_empty(sqlite_session: Session) -> None:
    sqlite_session.execute(text("INSERT INTO be_groups (uid, title) VALUES (9, 'Legacy')"))
    sqlite_session.commit()

    group = sqlite_session.get(BackendGroup, 9)

    assert group is not None
    assert group.allowed_element_types == frozenset()


def test_foreign_entries_decode_out_of_identifier_space() -> None:
    decoded = decode_allow_list(LEGACY_FIELD + ",:odd,tt_content:CType:")

    assert decoded == {
        "mask_a",
        "tt_content:CType:mask_old:ALLOW",
        ":legacyflag",
        "::odd",
        "tt_content:CType:",
    }


def test_foreign_entries_are_written_back_unchanged() -> None:
    stored = "legacyflag,:odd,tt_content:CType:,tt_content:CType:mask_old:ALLOW"

    assert encode_allow_list(decode_allow_list(stored)) == ",".join(sorted(stored.split(",")))


def _insert_legacy_group(session: Session) -> None:
    session.execute(
        text("INSERT INTO be_groups (uid, title, explicit_allowdeny) VALUES (1, 'Legacy', :field)"),
        {"field": LEGACY_FIELD},
    )
    session.commit()


def _raw_field(session: Session) -> str:
    session.commit()
    return session.execute(
        text("SELECT explicit_allowdeny FROM be_groups WHERE uid = 1")
    ).scalar_one()


def test_merge_keeps_foreign_entries_verbatim(
    sqlite_session: Session,
    sqlite_unit_of_work: Callable[[], SqlAlchemyPermissionUnitOfWork],
) -> None:
    _insert_legacy_group(sqlite_session)
    reconciler = MaskPermissionReconciler(
        catalogue_provider=StaticCatalogueProvider.from_identifiers(["mask_new"]),
        unit_of_work_factory=sqlite_unit_of_work,
    )

    assert reconciler.update(1) is True

    assert _raw_field(sqlite_session) == (
        "legacyflag,tt_content:CType:mask_a,tt_content:CType:mask_new,"
        "tt_content:CType:mask_old:ALLOW"
    )


def test_explicit_selection_keeps_foreign_entries_verbatim(
    sqlite_session: Session,
    sqlite_unit_of_work: Callable[[], SqlAlchemyPermissionUnitOfWork],
) -> None:
    _insert_legacy_group(sqlite_session)
    reconciler = MaskPermissionReconciler(
        catalogue_provider=StaticCatalogueProvider.from_identifiers(["mask_a", "mask_b"]),
        unit_of_work_factory=sqlite_unit_of_work,
    )

    assert reconciler.get_selected_masks(1) == {"mask_a"}
    assert reconciler.update(1, selected=["mask_b"]) is True

    assert _raw_field(sqlite_session) == (
        "legacyflag,tt_content:CType:mask_b,tt_content:CType:mask_old:ALLOW"
    )
