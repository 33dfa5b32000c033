from __future__ import annotations

from maskperms.adapters.catalogue import TranslationLabelResolver
from maskperms.domain import (
    DIVIDER_SENTINEL,
    Catalogue,
    ElementType,
    build_catalogue,
    in_scope,
    is_in_scope,
    out_of_scope,
)


def test_is_in_scope_checks_prefix() -> None:
    assert is_in_scope("mask_text")
    assert not is_in_scope("text")
    assert not is_in_scope("xmask_text")
    assert is_in_scope("ce_hero", "ce_")


def test_divider_is_never_in_scope() -> None:
    assert not is_in_scope(DIVIDER_SENTINEL, "--")


def test_scope_partition() -> None:
    entries = {"mask_a", "header", "pages:doktype:1"}

    assert in_scope(entries) == {"mask_a"}
    assert out_of_scope(entries) == {"header", "pages:doktype:1"}


def test_build_catalogue_drops_dividers_duplicates_and_foreign_types() -> None:
    items = [
        (DIVIDER_SENTINEL, "Standard"),
        ("header", "Header"),
        ("mask_teaser", "Teaser"),
        ("mask_gallery", "Gallery"),
        ("mask_teaser", "Teaser again"),
    ]

    catalogue = build_catalogue(items)

    assert catalogue.element_types == (
        ElementType("mask_teaser", "Teaser"),
        ElementType("mask_gallery", "Gallery"),
    )
    assert catalogue.labels()["mask_teaser"] == "Teaser"


def test_build_catalogue_resolves_labels() -> None:
    resolver = TranslationLabelResolver({"LLL:EXT:mask/locallang.xlf:teaser": "Teaser"})

    catalogue = build_catalogue(
        [("mask_teaser", "LLL:EXT:mask/locallang.xlf:teaser")],
        resolver=resolver,
    )

    assert catalogue.labels() == {"mask_teaser": "Teaser"}


def test_catalogue_membership_ignores_labels() -> None:
    catalogue = Catalogue((ElementType("mask_a", "A"),))

    assert "mask_a" in catalogue
    assert ElementType("mask_a", "A") == ElementType("mask_a", "Other label")
    assert catalogue.identifiers == {"mask_a"}
