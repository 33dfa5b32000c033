"""File-backed element-type catalogue adapter."""

from __future__ import annotations

from .provider import (
    CatalogueError,
    JsonCatalogueProvider,
    StaticCatalogueProvider,
    TranslationLabelResolver,
    load_translations,
    parse_catalogue,
)
from .schema import CatalogueDocument, ElementTypeItem

__all__ = [
    "CatalogueDocument",
    "CatalogueError",
    "ElementTypeItem",
    "JsonCatalogueProvider",
    "StaticCatalogueProvider",
    "TranslationLabelResolver",
    "load_translations",
    "parse_catalogue",
]
