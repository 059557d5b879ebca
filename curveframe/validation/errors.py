"""
Error Taxonomy

Every failure the kinematics engine surfaces to its caller.
Each component fails fast and atomically: no partial structures are returned.

PRINCIPLE: "Degenerate geometry is a value, malformed input is an error"

Usage:
    from curveframe.validation import CurveCompileError, EvaluationError

    try:
        samples = sample_curve(compiled, 400, 1.0)
    except EvaluationError as e:
        print(f"Bad sample {e.index} at t={e.t}: {e}")
"""

from typing import Optional


class CurveFrameError(Exception):
    """Base class for all curveframe errors."""


class CurveCompileError(CurveFrameError):
    """Raised when an expression cannot be parsed or differentiated."""

    def __init__(
        self,
        expression: str,
        reason: str,
        axis: Optional[str] = None,
    ):
        self.expression = expression
        self.reason = reason
        self.axis = axis

        where = f" ({axis}-expression)" if axis else ""
        super().__init__(f"Cannot compile {expression!r}{where}: {reason}")


class InvalidDefinitionError(CurveFrameError, ValueError):
    """Raised when a curve definition is incomplete or has an unusable parameter interval."""

    def __init__(self, name: str, reason: str):
        self.name = name
        self.reason = reason
        super().__init__(f"Invalid curve definition {name!r}: {reason}")


class InvalidSampleCount(CurveFrameError, ValueError):
    """Raised when a sample count is not an integer >= 2."""

    def __init__(self, sample_count):
        self.sample_count = sample_count
        super().__init__(
            f"sample_count must be an integer >= 2, got {sample_count!r}"
        )


class InvalidMorphValue(CurveFrameError, ValueError):
    """Raised when the morph value is not a finite real."""

    def __init__(self, morph_value):
        self.morph_value = morph_value
        super().__init__(f"morph_value must be finite, got {morph_value!r}")


class EvaluationError(CurveFrameError):
    """
    Raised when an evaluator fails or returns a non-finite value at a sample.

    index and t are None when the grid evaluation raised but no single
    sample reproduces the failure.
    """

    def __init__(
        self,
        index: Optional[int],
        t: Optional[float],
        component: str,
        expression: str = "",
        reason: str = "non-finite value",
    ):
        self.index = index
        self.t = t
        self.component = component
        self.expression = expression
        self.reason = reason

        if index is None:
            message = f"Evaluation of {component} failed over the grid (sample unknown): {reason}"
        else:
            message = f"Evaluation of {component} failed at sample {index} (t={t!r}): {reason}"
        if expression:
            message += f"\n  expression: {expression}"

        super().__init__(message)


class InvalidSamplesError(CurveFrameError):
    """Raised when Frenet solver input is structurally malformed."""

    def __init__(self, problems):
        if isinstance(problems, str):
            problems = [problems]
        self.problems = list(problems)

        message = "Invalid curve samples:\n" + "\n".join(
            f"  ERROR: {p}" for p in self.problems
        )
        super().__init__(message)


class PresetError(CurveFrameError, KeyError):
    """Raised when a preset is unknown or the catalog is malformed."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        return self.message
