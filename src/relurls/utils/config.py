"""
Rewrite configuration.

Settings may come from a caller-supplied mapping or a JSON settings file.
Keys use the camelCase names of the host configuration surface
(``logAllChanges``) or their snake_case equivalents. Missing keys fall back
to the defaults, unknown keys are ignored, and supplied lists replace the
default lists outright.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from ..exceptions import ConfigurationError


_CAMEL_KEYS = {
    'logAllChanges': 'log_all_changes',
    'publicFolder': 'public_folder',
    'pageLinkAttributesToChange': 'page_link_attributes_to_change',
    'assetAttributesToChange': 'asset_attributes_to_change',
}


def _ordered_unique(values: Iterable[str]) -> Tuple[str, ...]:
    return tuple(dict.fromkeys(values))


@dataclass(frozen=True)
class RewriteConfiguration:
    log_all_changes: bool = False
    public_folder: str = "../public"  # Relative to the output directory
    page_link_attributes_to_change: Tuple[str, ...] = ("href",)
    asset_attributes_to_change: Tuple[str, ...] = ("src", "href")

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]] = None) -> RewriteConfiguration:
        """Build a configuration by shallow-merging data over the defaults."""
        return cls().merged(data)

    def merged(self, data: Optional[Mapping[str, Any]]) -> RewriteConfiguration:
        """Return a copy with the keys present in data replaced."""
        if not data:
            return self
        known = {f.name for f in fields(self)}
        overrides: Dict[str, Any] = {}
        for key, value in data.items():
            name = _CAMEL_KEYS.get(key, key)
            if name not in known or value is None:
                continue
            if name.endswith('_to_change'):
                value = _ordered_unique([value] if isinstance(value, str) else value)
            elif name == 'log_all_changes':
                value = bool(value)
            overrides[name] = value
        return replace(self, **overrides)


def load_settings(path: str) -> Dict[str, Any]:
    """
    Load a JSON settings file.

    Raises:
        ConfigurationError: if the file is missing, unreadable or not a JSON object
    """
    if not os.path.exists(path):
        raise ConfigurationError(f"Settings file not found: {path}")
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        raise ConfigurationError(f"Could not read settings file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"Settings file must hold a JSON object: {path}")
    return data
