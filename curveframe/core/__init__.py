"""
curveframe Core
===============

Pure compute, no file I/O:

    symbolic.py  - CurveDefinition -> CompiledCurve (exact derivatives via SymbolicBackend)
    sampler.py   - CompiledCurve -> CurveSamples (uniform grid + trapezoid arc length)
    frenet.py    - CurveSamples -> [FrenetFrame] (T, N, B, curvature, torsion)
    types.py     - Value types shared by all three
"""

from curveframe.core.types import (
    Binding,
    CurveDefinition,
    CurveSamples,
    FrenetFrame,
    Vec3,
    ZERO,
)
from curveframe.core.symbolic import (
    CompiledCurve,
    Evaluator,
    SymbolicBackend,
    SympyBackend,
    compile_curve,
)
from curveframe.core.sampler import (
    arc_lengths,
    parameter_grid,
    sample_curve,
)
from curveframe.core.frenet import (
    compute_frames,
    frame_arrays,
)

__all__ = [
    # Types
    'Binding',
    'CurveDefinition',
    'CurveSamples',
    'FrenetFrame',
    'Vec3',
    'ZERO',
    # Differentiator
    'CompiledCurve',
    'Evaluator',
    'SymbolicBackend',
    'SympyBackend',
    'compile_curve',
    # Sampler
    'arc_lengths',
    'parameter_grid',
    'sample_curve',
    # Frenet solver
    'compute_frames',
    'frame_arrays',
]
