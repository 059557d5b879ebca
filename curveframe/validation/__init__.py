"""
curveframe Validation Module

Error taxonomy and structural input checks.

Exports:
    - CurveFrameError: Base class for every error raised by curveframe
    - CurveCompileError: Expression failed to parse or differentiate
    - InvalidDefinitionError: Curve definition has an unusable interval
    - InvalidSampleCount: sample_count is not an integer >= 2
    - InvalidMorphValue: morph value is not finite
    - EvaluationError: Evaluator failed or returned non-finite at a sample
    - InvalidSamplesError: Frenet solver input is structurally malformed
    - PresetError: Unknown preset or malformed preset catalog
    - validate_samples / check_samples: CurveSamples structure checks
"""

from .errors import (
    CurveFrameError,
    CurveCompileError,
    InvalidDefinitionError,
    InvalidSampleCount,
    InvalidMorphValue,
    EvaluationError,
    InvalidSamplesError,
    PresetError,
)

from .samples import (
    check_samples,
    validate_samples,
)

__all__ = [
    # Errors
    'CurveFrameError',
    'CurveCompileError',
    'InvalidDefinitionError',
    'InvalidSampleCount',
    'InvalidMorphValue',
    'EvaluationError',
    'InvalidSamplesError',
    'PresetError',
    # Structure checks
    'check_samples',
    'validate_samples',
]
