"""
curveframe Configuration
========================

Defaults merged with an optional YAML override file.

Lookup order for the override file:
    1. $CURVEFRAME_CONFIG
    2. ./curveframe.yaml

Usage:
    from curveframe.config import get_config

    config = get_config()
    n = config.get('sampling.sample_count', 400)
"""

import copy
import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

import yaml


logger = logging.getLogger(__name__)


CONFIG_ENV_VAR = 'CURVEFRAME_CONFIG'
CONFIG_FILENAME = 'curveframe.yaml'

DEFAULTS: Dict[str, Any] = {
    'sampling': {
        'sample_count': 400,
        'morph_value': 1.0,
    },
    'frenet': {
        # Below this curvature the normal is the zero vector
        'curvature_threshold': 1e-6,
        # Below this |v x a|^2 torsion is reported as 0
        'torsion_threshold': 1e-12,
    },
    'logging': {
        'level': 'WARNING',
    },
    'output': {
        'format': 'parquet',
        'physical_arc_length': False,
    },
}


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge override into a copy of base."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class Config:
    """Read-only nested configuration with dotted-key lookup."""

    def __init__(self, data: Dict[str, Any], source: Optional[Path] = None):
        self._data = data
        self.source = source

    def get(self, key: str, default: Any = None) -> Any:
        """
        Look up a dotted key, e.g. 'frenet.curvature_threshold'.

        Returns default when any part of the path is missing.
        """
        node: Any = self._data
        for part in key.split('.'):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    def get_float(self, key: str, default: Any = None) -> float:
        """
        Dotted lookup converted to float.

        PyYAML reads exponent literals without a dot ('1e-9') as strings,
        so numeric strings are accepted here.
        """
        value = self.get(key, default)
        if isinstance(value, bool):
            raise ValueError(f"Config key {key!r} must be a number, got {value!r}")
        try:
            return float(value)
        except (TypeError, ValueError):
            raise ValueError(f"Config key {key!r} must be a number, got {value!r}") from None

    def get_int(self, key: str, default: Any = None) -> int:
        """Dotted lookup converted to int. '400', 400.0 and '4e2' are all 400."""
        value = self.get_float(key, default)
        if not value.is_integer():
            raise ValueError(f"Config key {key!r} must be an integer, got {self.get(key, default)!r}")
        return int(value)

    def to_dict(self) -> Dict[str, Any]:
        return copy.deepcopy(self._data)


def get_config_path() -> Optional[Path]:
    """Find the override file, or None if there is none."""
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        path = Path(env_path)
        if not path.exists():
            raise FileNotFoundError(f"{CONFIG_ENV_VAR} points to a missing file: {path}")
        return path

    local = Path(CONFIG_FILENAME)
    if local.exists():
        return local

    return None


def load_config(path: Optional[Path] = None) -> Config:
    """
    Load configuration from a YAML file merged over DEFAULTS.

    Args:
        path: Override file (None = defaults only)

    Returns:
        Config
    """
    if path is None:
        return Config(copy.deepcopy(DEFAULTS))

    with open(path) as f:
        raw = yaml.safe_load(f) or {}

    if not isinstance(raw, dict):
        raise ValueError(f"Config file {path} must contain a mapping, got {type(raw).__name__}")

    logger.debug("Loaded config overrides from %s", path)
    return Config(_merge(DEFAULTS, raw), source=Path(path))


@lru_cache(maxsize=1)
def get_config() -> Config:
    """Process-wide configuration, loaded once."""
    return load_config(get_config_path())


def reset_config() -> None:
    """Forget the cached configuration (next get_config() reloads)."""
    get_config.cache_clear()
