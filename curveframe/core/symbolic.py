"""
Symbolic Differentiator
=======================

Turns a CurveDefinition into a CompiledCurve: 12 evaluators for
x, y, z and their 1st/2nd/3rd derivatives with respect to t.

Differentiation is exact (SymPy `diff`). Finite differences would compound
discretization error in the curvature and torsion formulas.

The CAS is reached only through SymbolicBackend, so any library that can
parse, differentiate and compile an expression can be substituted:

    compiled = compile_curve(definition)                      # SymPy
    compiled = compile_curve(definition, backend=MyBackend())

Expression grammar (SympyBackend):
    + - * / ^ **, parentheses, implicit multiplication,
    named functions (sin, cos, tan, exp, log, sqrt, sinh, ...),
    constants pi and e, free variable t, scale symbol lambda / λ.
"""

import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Tuple

import numpy as np
import sympy as sp
from sympy.core.function import AppliedUndef
from sympy.parsing.sympy_parser import (
    parse_expr,
    standard_transformations,
    convert_xor,
    implicit_multiplication,
)

from curveframe.core.types import Binding, CurveDefinition
from curveframe.validation.errors import CurveCompileError


logger = logging.getLogger(__name__)


AXES = ('x', 'y', 'z')
MAX_ORDER = 3

# Free variable and morph symbol shared by every compiled curve
T = sp.Symbol('t', real=True)
LAM = sp.Symbol('λ', real=True)

# `lambda` is a Python keyword; rewrite it to λ before tokenizing
_LAMBDA_WORD = re.compile(r"(?<![A-Za-z_])lambda\b")

# 2λ -> 2*λ; the tokenizer rejects a number glued to a name
_NUMBER_LAMBDA = re.compile(r"(?<![A-Za-z_\d.])(\d+\.?\d*|\.\d+)\s*λ")

_TRANSFORMATIONS = standard_transformations + (convert_xor, implicit_multiplication)


def component_name(axis: str, order: int) -> str:
    """'x', 'x1', 'x2', 'x3', ..."""
    return axis if order == 0 else f"{axis}{order}"


class Evaluator:
    """
    Compiled scalar function of (t, λ).

    Called with a Binding. Scalar t returns a Python number; array t returns
    an array of the same shape (constant expressions are broadcast).
    """

    def __init__(self, func: Callable, form: Any = None, source: str = ""):
        self._func = func
        self.form = form
        self.source = source

    def __call__(self, binding: Binding):
        with np.errstate(all='ignore'):
            value = np.asarray(self._func(binding.t, binding.lam))
        if np.ndim(binding.t) == 0:
            return value.item()
        return np.broadcast_to(value, np.shape(binding.t))

    def __repr__(self):
        return f"Evaluator({self.source or self.form!s})"


class SymbolicBackend(ABC):
    """Capability the differentiator needs from a computer-algebra library."""

    @abstractmethod
    def parse(self, text: str) -> Any:
        """Parse expression text into a symbolic form. Raise on bad input."""

    @abstractmethod
    def differentiate(self, form: Any) -> Any:
        """d/dt of a symbolic form. Raise if it cannot be differentiated."""

    @abstractmethod
    def compile_to_evaluator(self, form: Any) -> Evaluator:
        """Compile a symbolic form into an Evaluator over Binding(t, lam)."""


class SympyBackend(SymbolicBackend):
    """SymbolicBackend on top of SymPy (parse_expr / diff / lambdify)."""

    def __init__(self):
        self._local_dict = {
            't': T,
            'λ': LAM,
            'pi': sp.pi,
            'e': sp.E,
        }

    def parse(self, text: str) -> sp.Expr:
        if not isinstance(text, str) or not text.strip():
            raise ValueError("expression is empty")

        source = _NUMBER_LAMBDA.sub(r'\1*λ', _LAMBDA_WORD.sub('λ', text))
        form = parse_expr(
            source,
            local_dict=dict(self._local_dict),
            transformations=_TRANSFORMATIONS,
        )

        if not isinstance(form, sp.Expr):
            raise ValueError(f"not a scalar expression (parsed as {type(form).__name__})")

        unknown = sorted(str(s) for s in form.free_symbols - {T, LAM})
        if unknown:
            raise ValueError(f"unknown symbol(s): {', '.join(unknown)}")

        undefined = sorted(str(f.func) for f in form.atoms(AppliedUndef))
        if undefined:
            raise ValueError(f"unknown function(s): {', '.join(undefined)}")

        return form

    def differentiate(self, form: sp.Expr) -> sp.Expr:
        derivative = sp.diff(form, T)
        if derivative.has(sp.Derivative):
            raise ValueError(f"cannot differentiate {form} with respect to t")
        return derivative

    def compile_to_evaluator(self, form: sp.Expr) -> Evaluator:
        func = sp.lambdify((T, LAM), form, modules='numpy')
        return Evaluator(func, form=form, source=str(form))


_DEFAULT_BACKEND: Optional[SymbolicBackend] = None


def get_default_backend() -> SymbolicBackend:
    global _DEFAULT_BACKEND
    if _DEFAULT_BACKEND is None:
        _DEFAULT_BACKEND = SympyBackend()
    return _DEFAULT_BACKEND


@dataclass(frozen=True)
class CompiledCurve:
    """
    Evaluator bundle for one CurveDefinition.

    `evaluators` maps component names ('x', 'y1', 'z3', ...) to Evaluators.
    `forms` maps the same names to the backend's symbolic forms.
    """
    definition: CurveDefinition
    evaluators: Dict[str, Evaluator]
    forms: Dict[str, Any] = field(default_factory=dict)

    def __getattr__(self, name: str) -> Evaluator:
        # x, y1, z3, ... as attributes
        evaluators = self.__dict__.get('evaluators')
        if evaluators is not None and name in evaluators:
            return evaluators[name]
        raise AttributeError(name)

    def component(self, order: int) -> Tuple[Evaluator, Evaluator, Evaluator]:
        """(x, y, z) evaluators of the given derivative order (0..3)."""
        if not 0 <= order <= MAX_ORDER:
            raise ValueError(f"order must be in 0..{MAX_ORDER}, got {order}")
        return tuple(self.evaluators[component_name(axis, order)] for axis in AXES)

    def derivative_forms(self, axis: str):
        """[f, f', f'', f'''] symbolic forms for one axis."""
        return [self.forms[component_name(axis, k)] for k in range(MAX_ORDER + 1)]


def _compile_axis(
    backend: SymbolicBackend,
    axis: str,
    expression: str,
) -> Tuple[Dict[str, Evaluator], Dict[str, Any]]:
    """Parse, differentiate three times and compile one coordinate expression."""
    evaluators = {}
    forms = {}

    try:
        form = backend.parse(expression)
        for order in range(MAX_ORDER + 1):
            if order > 0:
                form = backend.differentiate(form)
            name = component_name(axis, order)
            forms[name] = form
            evaluators[name] = backend.compile_to_evaluator(form)
    except CurveCompileError:
        raise
    except Exception as e:
        raise CurveCompileError(expression, str(e) or type(e).__name__, axis=axis) from e

    logger.debug("Compiled %s(t) = %s (3 derivatives)", axis, forms[axis])
    return evaluators, forms


def compile_curve(
    definition: CurveDefinition,
    backend: Optional[SymbolicBackend] = None,
) -> CompiledCurve:
    """
    Compile a curve definition into 12 evaluators.

    Args:
        definition: Curve to compile
        backend: Symbolic-math capability (SympyBackend if not provided)

    Returns:
        CompiledCurve

    Raises:
        CurveCompileError: any expression fails to parse or differentiate.
            Nothing is returned for the other axes.
    """
    if backend is None:
        backend = get_default_backend()

    evaluators: Dict[str, Evaluator] = {}
    forms: Dict[str, Any] = {}

    for axis, expression in zip(AXES, definition.expressions):
        axis_evaluators, axis_forms = _compile_axis(backend, axis, expression)
        evaluators.update(axis_evaluators)
        forms.update(axis_forms)

    return CompiledCurve(definition=definition, evaluators=evaluators, forms=forms)
