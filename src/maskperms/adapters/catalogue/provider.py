"""Catalogue providers and label resolvers backed by local files."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Final

from pydantic import TypeAdapter, ValidationError

from .schema import CatalogueDocument

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from pathlib import Path

log = getLogger(__name__)

LLL_PREFIX: Final[str] = "LLL:"

_TRANSLATIONS_ADAPTER: Final = TypeAdapter(dict[str, str])


class CatalogueError(RuntimeError):
    """Raised when a catalogue or translation file cannot be read."""


def _load_json(path: Path) -> object:
    try:
        with path.open(encoding="utf-8") as handle:
            return json.load(handle)
    except OSError as exc:
        raise CatalogueError(f"Cannot read {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise CatalogueError(f"Invalid JSON in {path}: {exc}") from exc


def parse_catalogue(payload: object) -> list[tuple[str, str]]:
    """Validate a catalogue payload and return ``(identifier, label)`` pairs."""

    try:
        document = CatalogueDocument.model_validate(payload)
    except ValidationError as exc:
        raise CatalogueError(f"Invalid catalogue: {exc}") from exc
    return document.pairs()


@dataclass(slots=True)
class JsonCatalogueProvider:
    """Reads the catalogue from a JSON export on every call."""

    path: Path

    def list_element_types(self) -> Sequence[tuple[str, str]]:
        pairs = parse_catalogue(_load_json(self.path))
        log.debug("Loaded %d catalogue entries from %s", len(pairs), self.path)
        return pairs


@dataclass(slots=True)
class StaticCatalogueProvider:
    items: Sequence[tuple[str, str]] = ()

    @classmethod
    def from_identifiers(cls, identifiers: Iterable[str]) -> StaticCatalogueProvider:
        return cls(items=tuple((identifier, identifier) for identifier in identifiers))

    def list_element_types(self) -> Sequence[tuple[str, str]]:
        return list(self.items)


@dataclass(slots=True)
class TranslationLabelResolver:
    """Resolves ``LLL:`` label references through a flat translation table.

    Lookups try the full reference first, then its trailing key. Unknown
    references fall back to that key; plain labels pass through unchanged.
    """

    translations: Mapping[str, str] = field(default_factory=dict[str, str])

    def resolve(self, label: str) -> str:
        if label in self.translations:
            return self.translations[label]
        if not label.startswith(LLL_PREFIX):
            return label
        key = label.rsplit(":", 1)[-1]
        return self.translations.get(key, key)


def load_translations(path: Path) -> dict[str, str]:
    try:
        return _TRANSLATIONS_ADAPTER.validate_python(_load_json(path))
    except ValidationError as exc:
        raise CatalogueError(f"Invalid translation table in {path}: {exc}") from exc
