"""
Curve Kinematics Types

Value types that flow through the pipeline:

    CurveDefinition  ->  CompiledCurve  ->  CurveSamples  ->  [FrenetFrame]
    (caller)             (symbolic)         (sampler)         (frenet)

CurveDefinition, Binding, Vec3 and FrenetFrame are immutable.
CurveSamples holds preallocated numpy buffers that the sampler marks read-only.
"""

import math
from dataclasses import dataclass
from typing import NamedTuple, Union

import numpy as np

from curveframe.validation.errors import InvalidDefinitionError


class Vec3(NamedTuple):
    """3-component real vector."""
    x: float
    y: float
    z: float

    @classmethod
    def from_array(cls, a) -> "Vec3":
        return cls(float(a[0]), float(a[1]), float(a[2]))

    def norm(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)


ZERO = Vec3(0.0, 0.0, 0.0)


class Binding(NamedTuple):
    """
    Parameter record handed to every evaluator call.

    `lam` is the morph value; it answers to both `lambda` and `λ` in the
    source expression. `t` may be a scalar or a numpy array of parameter values.
    """
    t: Union[float, np.ndarray]
    lam: float


@dataclass(frozen=True)
class CurveDefinition:
    """
    Parametric curve r(t) = (x(t), y(t), z(t)) on [t_min, t_max].

    Args:
        name: Display name
        x_expr, y_expr, z_expr: Expressions in t (and optionally lambda / λ)
        t_min, t_max: Closed parameter interval, t_min < t_max
    """
    name: str
    x_expr: str
    y_expr: str
    z_expr: str
    t_min: float
    t_max: float

    def __post_init__(self):
        try:
            t_min = float(self.t_min)
            t_max = float(self.t_max)
        except (TypeError, ValueError):
            raise InvalidDefinitionError(
                self.name, f"interval bounds must be real numbers, got [{self.t_min!r}, {self.t_max!r}]"
            )
        if not (math.isfinite(t_min) and math.isfinite(t_max)):
            raise InvalidDefinitionError(self.name, f"interval [{t_min}, {t_max}] is not finite")
        if not t_min < t_max:
            raise InvalidDefinitionError(self.name, f"t_min must be < t_max, got [{t_min}, {t_max}]")

        object.__setattr__(self, 't_min', t_min)
        object.__setattr__(self, 't_max', t_max)

    @property
    def expressions(self):
        """(x_expr, y_expr, z_expr)"""
        return (self.x_expr, self.y_expr, self.z_expr)


@dataclass(frozen=True)
class CurveSamples:
    """
    Sampler output. All arrays share the same leading length N.

    Attributes:
        t:  (N,)   parameter values, endpoint-inclusive uniform grid
        r:  (N, 3) position
        r1: (N, 3) first derivative (velocity)
        r2: (N, 3) second derivative (acceleration)
        r3: (N, 3) third derivative (jerk)
        s:  (N,)   cumulative arc length, unscaled trapezoid sum
    """
    t: np.ndarray
    r: np.ndarray
    r1: np.ndarray
    r2: np.ndarray
    r3: np.ndarray
    s: np.ndarray

    def __len__(self) -> int:
        return len(self.t)

    def position(self, i: int) -> Vec3:
        return Vec3.from_array(self.r[i])

    def velocity(self, i: int) -> Vec3:
        return Vec3.from_array(self.r1[i])

    def acceleration(self, i: int) -> Vec3:
        return Vec3.from_array(self.r2[i])

    def jerk(self, i: int) -> Vec3:
        return Vec3.from_array(self.r3[i])


@dataclass(frozen=True)
class FrenetFrame:
    """
    Frenet-Serret frame at one sample.

    tangent/normal/binormal are unit vectors when curvature is non-degenerate.
    normal and binormal are ZERO when curvature <= threshold; torsion is 0 there.
    """
    index: int
    t: float
    s: float
    position: Vec3
    tangent: Vec3
    normal: Vec3
    binormal: Vec3
    curvature: float
    torsion: float

    @property
    def T(self) -> Vec3:
        return self.tangent

    @property
    def N(self) -> Vec3:
        return self.normal

    @property
    def B(self) -> Vec3:
        return self.binormal

    @property
    def is_degenerate(self) -> bool:
        """True when the normal was set to the zero vector."""
        return self.normal == ZERO
