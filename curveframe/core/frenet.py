"""
Frenet Solver
=============

Frenet-Serret frame, curvature and torsion at every sample.

For v = r1, a = r2, j = r3:

    T = v / |v|                         (zero vector when |v| = 0)
    κ = |v × a| / |v|^3                 (no clamping: inf/nan at cusps)
    N = unit(a - (a·T) T)   if κ > curvature_threshold, else 0
    B = T × N
    τ = v · (a × j) / |v × a|^2   if |v × a|^2 > torsion_threshold, else 0

The zero normal at κ <= threshold makes N and B discontinuous at inflection
points. No frame continuation (parallel transport) is attempted.
"""

import logging
from typing import Dict, List, Optional

import numpy as np

from curveframe.config import get_config
from curveframe.core.types import CurveSamples, FrenetFrame, Vec3
from curveframe.validation.samples import validate_samples


logger = logging.getLogger(__name__)


def _get_frenet_config() -> Dict[str, float]:
    config = get_config()
    return {
        'curvature_threshold': config.get_float('frenet.curvature_threshold', 1e-6),
        'torsion_threshold': config.get_float('frenet.torsion_threshold', 1e-12),
    }


def normalize_rows(v: np.ndarray) -> np.ndarray:
    """Row-wise unit vectors; zero rows stay zero."""
    norms = np.linalg.norm(v, axis=1, keepdims=True)
    out = np.zeros_like(v)
    np.divide(v, norms, out=out, where=norms != 0)
    return out


def frame_arrays(
    samples: CurveSamples,
    curvature_threshold: Optional[float] = None,
    torsion_threshold: Optional[float] = None,
) -> Dict[str, np.ndarray]:
    """
    Frenet quantities for all samples as arrays.

    Args:
        samples: Sampler output
        curvature_threshold: Normal is zero at or below this curvature (from config if not provided)
        torsion_threshold: Torsion is zero at or below this |v × a|^2 (from config if not provided)

    Returns:
        Dict with T, N, B (N, 3) and curvature, torsion (N,)

    Raises:
        InvalidSamplesError: arrays missing or of mismatched length/shape
    """
    validate_samples(samples)

    frenet_config = _get_frenet_config()
    if curvature_threshold is None:
        curvature_threshold = frenet_config['curvature_threshold']
    if torsion_threshold is None:
        torsion_threshold = frenet_config['torsion_threshold']

    v = np.asarray(samples.r1, dtype=float)
    a = np.asarray(samples.r2, dtype=float)
    j = np.asarray(samples.r3, dtype=float)

    speed = np.linalg.norm(v, axis=1)
    tangent = normalize_rows(v)

    v_cross_a = np.cross(v, a)
    cross_norm = np.linalg.norm(v_cross_a, axis=1)

    with np.errstate(divide='ignore', invalid='ignore'):
        curvature = cross_norm / speed**3

    # a minus its projection onto T
    a_perp = a - np.sum(a * tangent, axis=1, keepdims=True) * tangent
    bending = curvature > curvature_threshold
    normal = np.where(bending[:, None], normalize_rows(a_perp), 0.0)

    binormal = np.cross(tangent, normal)

    # det(v, a, j) = v · (a × j)
    triple = np.einsum('ij,ij->i', v, np.cross(a, j))
    cross_sq = cross_norm**2
    torsion = np.zeros_like(triple)
    np.divide(triple, cross_sq, out=torsion, where=cross_sq > torsion_threshold)

    return {
        'T': tangent,
        'N': normal,
        'B': binormal,
        'curvature': curvature,
        'torsion': torsion,
    }


def compute_frames(
    samples: CurveSamples,
    curvature_threshold: Optional[float] = None,
    torsion_threshold: Optional[float] = None,
) -> List[FrenetFrame]:
    """
    One FrenetFrame per sample, in sample order.

    Numeric degeneracies (zero speed, zero curvature) never raise; they
    produce zero vectors, zero torsion, or inf/nan curvature.

    Raises:
        InvalidSamplesError: samples are structurally malformed
    """
    arrays = frame_arrays(samples, curvature_threshold, torsion_threshold)

    t = np.asarray(samples.t, dtype=float)
    s = np.asarray(samples.s, dtype=float)
    r = np.asarray(samples.r, dtype=float)

    frames = []
    for i in range(len(t)):
        frames.append(FrenetFrame(
            index=i,
            t=float(t[i]),
            s=float(s[i]),
            position=Vec3.from_array(r[i]),
            tangent=Vec3.from_array(arrays['T'][i]),
            normal=Vec3.from_array(arrays['N'][i]),
            binormal=Vec3.from_array(arrays['B'][i]),
            curvature=float(arrays['curvature'][i]),
            torsion=float(arrays['torsion'][i]),
        ))

    n_flat = int(np.sum(~np.any(arrays['N'] != 0, axis=1)))
    logger.debug("Computed %d frames (%d degenerate-normal)", len(frames), n_flat)

    return frames
