"""Config loading helpers."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from config import CONFIG
from domain.policy_table import ConfigurationError, PolicyTable, table_from_config


def load_config(path: str | Path) -> Dict[str, Any]:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(path)
    with path.open("r", encoding="utf-8") as fh:
        try:
            if path.suffix.lower() in {".yaml", ".yml"}:
                payload = yaml.safe_load(fh)
            else:
                payload = json.load(fh)
        except (yaml.YAMLError, json.JSONDecodeError) as exc:
            raise ConfigurationError(f"{path}: {exc}") from exc
    if not isinstance(payload, dict):
        raise ConfigurationError(f"{path}: top level must be a mapping")
    return payload


def load_policy_table(source: Optional[str | Path | Mapping[str, Any]] = None) -> PolicyTable:
    """Build the policy table from a file path, a mapping, or the bundled ``CONFIG``."""

    if source is None:
        source = CONFIG
    if isinstance(source, Mapping):
        return table_from_config(source)
    return table_from_config(load_config(source))
