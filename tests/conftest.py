import math

import pytest

from curveframe.config import CONFIG_ENV_VAR, reset_config
from curveframe.core.types import CurveDefinition


TWO_PI = 2 * math.pi


@pytest.fixture(autouse=True)
def _fresh_config(monkeypatch):
    """Every test starts from built-in defaults."""
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def circle():
    return CurveDefinition('Unit Circle', 'cos(t)', 'sin(t)', '0', 0.0, TWO_PI)


@pytest.fixture
def line():
    return CurveDefinition('Line', 't', '0', '0', -1.0, 1.0)


@pytest.fixture
def helix():
    return CurveDefinition('Helix', 'cos(t)', 'sin(t)', 'λ*t/(2*pi)', 0.0, 3 * TWO_PI)
