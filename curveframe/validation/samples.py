"""
Sample Structure Validation

Structural checks on CurveSamples before the Frenet solver touches them.
Numeric degeneracies are not checked here; the solver handles those.

Usage:
    from curveframe.validation import validate_samples

    validate_samples(samples)   # raises InvalidSamplesError
"""

from typing import List

import numpy as np

from .errors import InvalidSamplesError


VECTOR_FIELDS = ('r', 'r1', 'r2', 'r3')
SCALAR_FIELDS = ('t', 's')


def check_samples(samples) -> List[str]:
    """
    Collect structural problems in a CurveSamples-like object.

    Returns:
        List of problems (empty if valid)
    """
    problems = []

    for name in SCALAR_FIELDS + VECTOR_FIELDS:
        if not hasattr(samples, name):
            problems.append(f"missing field '{name}'")
    if problems:
        return problems

    n = np.shape(samples.t)[0] if np.ndim(samples.t) >= 1 else None
    if n is None or np.ndim(samples.t) != 1:
        return [f"t must be 1-dimensional, got shape {np.shape(samples.t)}"]
    if n == 0:
        return ["samples are empty"]

    if np.shape(samples.s) != (n,):
        problems.append(f"s has shape {np.shape(samples.s)}, expected ({n},)")

    for name in VECTOR_FIELDS:
        shape = np.shape(getattr(samples, name))
        if shape != (n, 3):
            problems.append(f"{name} has shape {shape}, expected ({n}, 3)")

    return problems


def validate_samples(samples) -> None:
    """Raise InvalidSamplesError if samples are structurally malformed."""
    problems = check_samples(samples)
    if problems:
        raise InvalidSamplesError(problems)
