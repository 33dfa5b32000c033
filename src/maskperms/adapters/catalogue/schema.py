"""Pydantic models describing exported element-type catalogues."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import cast

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class CatalogueBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ElementTypeItem(CatalogueBaseModel):
    """One entry of a ``CType`` items list.

    Entries come either as positional lists (``[label, value, icon, group]``)
    or as mappings with ``label`` and ``value`` keys.
    """

    label: str = ""
    value: str
    icon: str | None = None
    group: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _normalize_positional_schema(cls, value: object) -> object:
        if isinstance(value, Sequence) and not isinstance(value, str):
            positional = list(cast(Sequence[object], value))
            if len(positional) < 2:
                raise ValueError("Positional items need at least a label and a value")
            keys = ("label", "value", "icon", "group")
            return dict(zip(keys, positional, strict=False))
        return value

    @field_validator("value", mode="before")
    @classmethod
    def _stringify_value(cls, value: object) -> object:
        if isinstance(value, int):
            return str(value)
        return value

    @field_validator("label", mode="before")
    @classmethod
    def _none_to_blank(cls, value: object) -> object:
        return "" if value is None else value


class CatalogueDocument(CatalogueBaseModel):
    items: list[ElementTypeItem] = Field(default_factory=list[ElementTypeItem])

    @model_validator(mode="before")
    @classmethod
    def _wrap_bare_list(cls, value: object) -> object:
        if isinstance(value, Mapping):
            return value
        if isinstance(value, Sequence) and not isinstance(value, str):
            return {"items": value}
        return value

    def pairs(self) -> list[tuple[str, str]]:
        return [(item.value, item.label) for item in self.items]
