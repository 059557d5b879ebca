"""
Curve Sampler
=============

Discretizes [t_min, t_max] into N points and evaluates position and
derivatives 1-3 at each, then accumulates arc length.

Grid (endpoint-inclusive, exact at both ends):
    t[i] = t_min + (i / (N - 1)) * (t_max - t_min)

Arc length (unscaled trapezoid sum, unit step):
    s[0] = 0
    s[i] = s[i-1] + 0.5 * (|r1[i-1]| + |r1[i]|)

s is reported in index-normalized units. Physical arc length is
s * (t_max - t_min) / (N - 1), applied by the caller.
"""

import logging
import math
import numbers
from typing import Optional

import numpy as np
from scipy.integrate import cumulative_trapezoid

from curveframe.config import get_config
from curveframe.core.symbolic import AXES, MAX_ORDER, CompiledCurve, component_name
from curveframe.core.types import Binding, CurveSamples
from curveframe.validation.errors import (
    EvaluationError,
    InvalidMorphValue,
    InvalidSampleCount,
)


logger = logging.getLogger(__name__)


MIN_SAMPLES = 2


def _get_sampling_config():
    config = get_config()
    return {
        'sample_count': config.get_int('sampling.sample_count', 400),
        'morph_value': config.get_float('sampling.morph_value', 1.0),
    }


def parameter_grid(t_min: float, t_max: float, sample_count: int) -> np.ndarray:
    """Uniform endpoint-inclusive grid with t[0] == t_min and t[-1] == t_max exactly."""
    i = np.arange(sample_count, dtype=float)
    t = t_min + (i / (sample_count - 1)) * (t_max - t_min)
    # t_min + (t_max - t_min) can round away from t_max
    t[0] = t_min
    t[-1] = t_max
    return t


def arc_lengths(r1: np.ndarray) -> np.ndarray:
    """Cumulative trapezoid sum of |r1| with unit step, starting at 0."""
    speed = np.linalg.norm(r1, axis=1)
    return cumulative_trapezoid(speed, dx=1.0, initial=0.0)


def _check_sample_count(sample_count) -> int:
    if isinstance(sample_count, bool) or not isinstance(sample_count, numbers.Integral):
        raise InvalidSampleCount(sample_count)
    if sample_count < MIN_SAMPLES:
        raise InvalidSampleCount(sample_count)
    return int(sample_count)


def _check_morph_value(morph_value) -> float:
    try:
        value = float(morph_value)
    except (TypeError, ValueError):
        raise InvalidMorphValue(morph_value)
    if not math.isfinite(value):
        raise InvalidMorphValue(morph_value)
    return value


def _first_bad_index(values: np.ndarray) -> Optional[int]:
    """Index of the first complex-valued or non-finite entry, or None."""
    if np.iscomplexobj(values):
        bad = (values.imag != 0) | ~np.isfinite(values.real)
    else:
        bad = ~np.isfinite(values)
    hits = np.flatnonzero(bad)
    return int(hits[0]) if len(hits) else None


def _locate_failure(evaluator, t: np.ndarray, lam: float) -> Optional[int]:
    """Re-run an evaluator point by point to find where it raises. None if no point does."""
    for i, ti in enumerate(t):
        try:
            evaluator(Binding(float(ti), lam))
        except Exception:
            return i
    return None


def _evaluate_component(
    compiled: CompiledCurve,
    name: str,
    t: np.ndarray,
    lam: float,
    out: np.ndarray,
) -> None:
    """Evaluate one component over the grid into `out`."""
    evaluator = compiled.evaluators[name]
    expression = getattr(evaluator, 'source', '')

    try:
        values = np.asarray(evaluator(Binding(t, lam)))
    except Exception as e:
        index = _locate_failure(evaluator, t, lam)
        raise EvaluationError(
            index, None if index is None else float(t[index]), name, expression,
            reason=f"{type(e).__name__}: {e}",
        ) from e

    if values.shape != t.shape:
        values = np.broadcast_to(values, t.shape)

    index = _first_bad_index(values)
    if index is not None:
        value = values[index]
        reason = "complex value" if np.iscomplexobj(values) and value.imag != 0 else f"non-finite value {value}"
        raise EvaluationError(index, float(t[index]), name, expression, reason=reason)

    out[:] = values.real if np.iscomplexobj(values) else values


def sample_curve(
    compiled: CompiledCurve,
    sample_count: Optional[int] = None,
    morph_value: Optional[float] = None,
) -> CurveSamples:
    """
    Sample a compiled curve on a uniform grid.

    Args:
        compiled: Output of compile_curve
        sample_count: Number of samples N >= 2 (from config if not provided)
        morph_value: Value bound to lambda / λ (from config if not provided)

    Returns:
        CurveSamples with read-only arrays of length N

    Raises:
        InvalidSampleCount: sample_count is not an integer >= 2
        InvalidMorphValue: morph_value is not finite
        EvaluationError: an evaluator raised or produced NaN/inf/complex
    """
    sampling_config = _get_sampling_config()
    if sample_count is None:
        sample_count = sampling_config['sample_count']
    if morph_value is None:
        morph_value = sampling_config['morph_value']

    n = _check_sample_count(sample_count)
    lam = _check_morph_value(morph_value)

    definition = compiled.definition
    t = parameter_grid(definition.t_min, definition.t_max, n)

    # derivs[k] holds order-k vectors: r, r1, r2, r3
    derivs = np.empty((MAX_ORDER + 1, n, 3), dtype=float)

    for order in range(MAX_ORDER + 1):
        for col, axis in enumerate(AXES):
            _evaluate_component(compiled, component_name(axis, order), t, lam, derivs[order, :, col])

    s = arc_lengths(derivs[1])

    r, r1, r2, r3 = (derivs[k].copy() for k in range(MAX_ORDER + 1))
    for arr in (t, r, r1, r2, r3, s):
        arr.flags.writeable = False

    logger.debug(
        "Sampled %r: N=%d, lambda=%g, t=[%g, %g], s[-1]=%g",
        definition.name, n, lam, t[0], t[-1], s[-1],
    )

    return CurveSamples(t=t, r=r, r1=r1, r2=r2, r3=r3, s=s)
