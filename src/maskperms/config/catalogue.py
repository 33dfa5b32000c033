"""Element-type catalogue configuration values."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from maskperms.domain.catalogue import DEFAULT_RESERVED_PREFIX

from .env import optional_env_var, require_env_vars
from .errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class CatalogueConfig:
    """Where to find the element-type catalogue and how to filter it."""

    catalogue_path: Path
    labels_path: Path | None = None
    reserved_prefix: str = DEFAULT_RESERVED_PREFIX


def get_catalogue_config() -> CatalogueConfig:
    values = require_env_vars(("MASKPERMS_CATALOGUE_PATH",))
    labels = optional_env_var("MASKPERMS_LABELS_PATH")
    prefix = optional_env_var("MASKPERMS_RESERVED_PREFIX") or DEFAULT_RESERVED_PREFIX
    if prefix.startswith(("-", ",")):
        raise ConfigurationError(f"Invalid reserved prefix: {prefix!r}")
    return CatalogueConfig(
        catalogue_path=Path(values["MASKPERMS_CATALOGUE_PATH"]).expanduser(),
        labels_path=Path(labels).expanduser() if labels else None,
        reserved_prefix=prefix,
    )
