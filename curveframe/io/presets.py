"""
Presets: parse presets.yaml into CurveDefinitions.
"""

import math
from pathlib import Path
from typing import Any, Dict, Optional, Union

import sympy as sp
import yaml

from curveframe.core.types import CurveDefinition
from curveframe.validation.errors import PresetError


PRESETS_PATH = Path(__file__).parent.parent / 'presets.yaml'

REQUIRED_KEYS = ('x', 'y', 'z', 't_min', 't_max')


def resolve_bound(value: Union[int, float, str]) -> float:
    """Interval bound as float. Strings may use pi, e.g. '6*pi'."""
    if isinstance(value, bool):
        raise ValueError(f"bound must be a number, got {value!r}")
    if isinstance(value, (int, float)):
        return float(value)

    expr = sp.sympify(str(value).replace('^', '**'), locals={'pi': sp.pi, 'e': sp.E})
    if not expr.is_number:
        raise ValueError(f"bound {value!r} is not a constant")
    result = float(expr)
    if not math.isfinite(result):
        raise ValueError(f"bound {value!r} is not finite")
    return result


def definition_from_dict(key: str, entry: Dict[str, Any]) -> CurveDefinition:
    """Build a CurveDefinition from one catalog entry."""
    if not isinstance(entry, dict):
        raise PresetError(f"Preset '{key}' must be a mapping")

    missing = [k for k in REQUIRED_KEYS if k not in entry]
    if missing:
        raise PresetError(f"Preset '{key}' is missing: {', '.join(missing)}")

    try:
        t_min = resolve_bound(entry['t_min'])
        t_max = resolve_bound(entry['t_max'])
    except (ValueError, TypeError, sp.SympifyError) as e:
        raise PresetError(f"Preset '{key}' has a bad interval: {e}") from e

    return CurveDefinition(
        name=str(entry.get('name', key)),
        x_expr=str(entry['x']),
        y_expr=str(entry['y']),
        z_expr=str(entry['z']),
        t_min=t_min,
        t_max=t_max,
    )


def load_presets(path: Optional[Union[str, Path]] = None) -> Dict[str, CurveDefinition]:
    """
    Load the preset catalog.

    Args:
        path: YAML file (bundled presets.yaml if not provided)

    Returns:
        Dict mapping preset key -> CurveDefinition, in file order
    """
    p = Path(path) if path is not None else PRESETS_PATH

    if not p.exists():
        raise FileNotFoundError(f"No preset catalog at {p}")

    with open(p, encoding='utf-8') as f:
        raw = yaml.safe_load(f) or {}

    entries = raw.get('presets') if isinstance(raw, dict) else None
    if not isinstance(entries, dict):
        raise PresetError(f"{p} has no 'presets' mapping")

    return {str(key): definition_from_dict(str(key), entry) for key, entry in entries.items()}


def get_preset(name: str, path: Optional[Union[str, Path]] = None) -> CurveDefinition:
    """
    Look up a preset by key ('helix') or display name ('Helix'), case-insensitive.
    """
    presets = load_presets(path)
    wanted = name.strip().lower()

    for key, definition in presets.items():
        if key.lower() == wanted or definition.name.lower() == wanted:
            return definition

    available = ", ".join(presets)
    raise PresetError(f"Unknown preset: '{name}'. Available: {available}")
