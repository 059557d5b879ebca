"""
Tests for the Symbolic Differentiator.

Validates:
    1. All 12 evaluators exist and return exact derivative values
    2. lambda and λ resolve to the same morph symbol
    3. Malformed or unknown input fails with CurveCompileError
    4. The symbolic backend can be substituted
"""

import math

import numpy as np
import pytest
import sympy as sp

from curveframe.core.symbolic import (
    LAM,
    T,
    CompiledCurve,
    SympyBackend,
    compile_curve,
)
from curveframe.core.types import Binding, CurveDefinition
from curveframe.validation import CurveCompileError, CurveFrameError, InvalidDefinitionError


def _curve(x='t', y='0', z='0', t_min=0.0, t_max=1.0):
    return CurveDefinition('test', x, y, z, t_min, t_max)


class TestCompile:
    """Test compiled evaluators and their exact derivatives."""

    def test_twelve_evaluators(self, circle):
        """Expressions plus three derivatives per axis."""
        compiled = compile_curve(circle)
        assert isinstance(compiled, CompiledCurve)
        assert set(compiled.evaluators) == {
            'x', 'y', 'z', 'x1', 'y1', 'z1', 'x2', 'y2', 'z2', 'x3', 'y3', 'z3',
        }
        assert compiled.definition is circle

    def test_circle_derivatives(self, circle):
        """cos -> -sin -> -cos -> sin."""
        compiled = compile_curve(circle)
        b = Binding(0.3, 1.0)

        assert compiled.x(b) == pytest.approx(math.cos(0.3))
        assert compiled.x1(b) == pytest.approx(-math.sin(0.3))
        assert compiled.x2(b) == pytest.approx(-math.cos(0.3))
        assert compiled.x3(b) == pytest.approx(math.sin(0.3))
        assert compiled.y3(b) == pytest.approx(-math.cos(0.3))
        assert compiled.z2(b) == 0

    def test_symbolic_forms_are_exact(self, circle):
        """Derivatives are symbolic, not finite differences."""
        compiled = compile_curve(circle)
        assert compiled.forms['x1'] == -sp.sin(T)
        assert compiled.forms['y2'] == -sp.sin(T)
        assert compiled.derivative_forms('x') == [sp.cos(T), -sp.sin(T), -sp.cos(T), sp.sin(T)]

    def test_caret_is_power(self):
        """t^3 -> 3t^2 -> 6t -> 6."""
        compiled = compile_curve(_curve(x='t^3'))
        b = Binding(2.0, 1.0)
        assert compiled.x(b) == pytest.approx(8.0)
        assert compiled.x1(b) == pytest.approx(12.0)
        assert compiled.x2(b) == pytest.approx(12.0)
        assert compiled.x3(b) == pytest.approx(6.0)

    def test_constants_pi_and_e(self):
        """pi and e are constants, not unknown symbols."""
        compiled = compile_curve(_curve(x='e^t', y='sin(pi*t)'))
        b = Binding(0.0, 1.0)
        assert compiled.x(b) == pytest.approx(1.0)
        assert compiled.x3(b) == pytest.approx(1.0)
        assert compiled.y1(b) == pytest.approx(math.pi)

    def test_lambda_spellings_agree(self):
        """lambda and λ bind to the same morph value."""
        compiled = compile_curve(_curve(x='lambda * t^2', y='λ * t^2'))
        b = Binding(2.0, 3.0)
        assert compiled.x(b) == pytest.approx(12.0)
        assert compiled.y(b) == compiled.x(b)
        assert compiled.x2(b) == compiled.y2(b) == pytest.approx(6.0)
        assert compiled.forms['x'] == compiled.forms['y'] == LAM * T**2

    def test_number_times_lambda(self):
        """2lambda and 0.5λ read as products, like 2*lambda."""
        compiled = compile_curve(_curve(x='2lambda*t', y='0.5λ', z='3 lambda'))
        b = Binding(1.5, 4.0)
        assert compiled.forms['x'] == 2 * LAM * T
        assert compiled.x1(b) == pytest.approx(8.0)
        assert compiled.y(b) == pytest.approx(2.0)
        assert compiled.z(b) == pytest.approx(12.0)

    def test_lambda_inside_a_name(self):
        """mylambda is an unknown symbol, not my * lambda."""
        with pytest.raises(CurveCompileError, match='mylambda'):
            compile_curve(_curve(x='mylambda * t'))

    def test_lambda_bound_at_evaluation(self):
        """Same compiled curve, different morph values."""
        compiled = compile_curve(_curve(z='lambda * t'))
        assert compiled.z1(Binding(0.0, 2.0)) == pytest.approx(2.0)
        assert compiled.z1(Binding(0.0, -5.0)) == pytest.approx(-5.0)

    def test_vectorized_evaluation(self, circle):
        """Array t gives an array of the same shape, constants broadcast."""
        compiled = compile_curve(circle)
        t = np.linspace(0, 1, 5)
        np.testing.assert_allclose(compiled.y(Binding(t, 1.0)), np.sin(t))
        z = compiled.z(Binding(t, 1.0))
        assert z.shape == (5,)
        assert np.all(z == 0)

    def test_component_accessor(self, circle):
        compiled = compile_curve(circle)
        x1, y1, z1 = compiled.component(1)
        assert x1 is compiled.x1
        assert z1 is compiled.z1
        with pytest.raises(ValueError):
            compiled.component(4)


class TestCompileErrors:
    """Test that bad expressions raise CurveCompileError."""

    def test_unbalanced_parenthesis(self):
        """cos(t -> CurveCompileError naming the expression."""
        with pytest.raises(CurveCompileError) as exc:
            compile_curve(_curve(x='cos(t'))
        assert exc.value.expression == 'cos(t'
        assert exc.value.axis == 'x'
        assert isinstance(exc.value, CurveFrameError)

    def test_failure_in_last_axis(self):
        """One bad axis fails the whole compile."""
        with pytest.raises(CurveCompileError) as exc:
            compile_curve(_curve(z='t +* )'))
        assert exc.value.axis == 'z'

    def test_unknown_symbol(self):
        with pytest.raises(CurveCompileError, match='q'):
            compile_curve(_curve(y='t + q'))

    def test_unknown_function(self):
        with pytest.raises(CurveCompileError, match='foo'):
            compile_curve(_curve(x='foo(t)'))

    def test_empty_expression(self):
        with pytest.raises(CurveCompileError):
            compile_curve(_curve(x='   '))

    def test_not_a_scalar(self):
        with pytest.raises(CurveCompileError):
            compile_curve(_curve(x='t, t'))


class CountingBackend(SympyBackend):
    """SympyBackend that records how it is driven."""

    def __init__(self):
        super().__init__()
        self.parsed = []
        self.differentiated = 0
        self.compiled = 0

    def parse(self, text):
        self.parsed.append(text)
        return super().parse(text)

    def differentiate(self, form):
        self.differentiated += 1
        return super().differentiate(form)

    def compile_to_evaluator(self, form):
        self.compiled += 1
        return super().compile_to_evaluator(form)


class TestBackend:
    """Test substitution of the symbolic backend."""

    def test_backend_substitution(self, helix):
        """Three parses, nine derivatives, twelve evaluators."""
        backend = CountingBackend()
        compile_curve(helix, backend=backend)
        assert backend.parsed == ['cos(t)', 'sin(t)', 'λ*t/(2*pi)']
        assert backend.differentiated == 9
        assert backend.compiled == 12

    def test_backend_errors_are_wrapped(self):
        """Any backend exception becomes CurveCompileError."""

        class Broken(SympyBackend):
            def differentiate(self, form):
                raise RuntimeError("no calculus today")

        with pytest.raises(CurveCompileError, match='no calculus today'):
            compile_curve(_curve(), backend=Broken())


class TestDefinition:
    """Test interval checks on CurveDefinition."""

    def test_reversed_interval(self):
        with pytest.raises(InvalidDefinitionError) as exc:
            _curve(t_min=2.0, t_max=1.0)
        assert exc.value.name == 'test'
        assert str(exc.value).startswith("Invalid curve definition 'test'")
        assert not isinstance(exc.value, CurveCompileError)
        assert isinstance(exc.value, ValueError)

    def test_non_finite_interval(self):
        with pytest.raises(InvalidDefinitionError, match='not finite'):
            _curve(t_max=float('inf'))

    def test_bounds_coerced(self):
        definition = _curve(t_min=0, t_max=np.float32(2.0))
        assert type(definition.t_min) is float
        assert type(definition.t_max) is float
