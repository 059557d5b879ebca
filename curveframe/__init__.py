"""
curveframe: curve kinematics engine.

Public API:
    from curveframe import CurveDefinition, run
    result = run(CurveDefinition('Circle', 'cos(t)', 'sin(t)', '0', 0, 6.283185307179586))

Three engines, data flows strictly forward:
    curveframe.core.symbolic   CurveDefinition -> CompiledCurve (exact d/dt, d2/dt2, d3/dt3)
    curveframe.core.sampler    CompiledCurve -> CurveSamples (uniform grid, arc length)
    curveframe.core.frenet     CurveSamples -> [FrenetFrame] (T, N, B, curvature, torsion)

Also:
    curveframe.io          Preset catalog, Parquet/CSV tables
    curveframe.config      Configuration (defaults + curveframe.yaml)
    curveframe.validation  Error taxonomy
"""

from curveframe.core import (
    CompiledCurve,
    CurveDefinition,
    CurveSamples,
    FrenetFrame,
    Vec3,
    compile_curve,
    compute_frames,
    sample_curve,
)
from curveframe.run import PipelineResult, run
from curveframe.validation import (
    CurveFrameError,
    CurveCompileError,
    EvaluationError,
    InvalidMorphValue,
    InvalidSampleCount,
    InvalidSamplesError,
)

__all__ = [
    'CompiledCurve',
    'CurveDefinition',
    'CurveSamples',
    'FrenetFrame',
    'Vec3',
    'compile_curve',
    'compute_frames',
    'sample_curve',
    'PipelineResult',
    'run',
    'CurveFrameError',
    'CurveCompileError',
    'EvaluationError',
    'InvalidMorphValue',
    'InvalidSampleCount',
    'InvalidSamplesError',
]
