"""Shared pytest fixtures for calcarg tests."""

import pytest

from calcarg import Calculator, parse


@pytest.fixture
def health_formula() -> str:
    """Return the reference health-scaling formula."""
    return "(100-<age>)*<health>/100"


@pytest.fixture
def health_calculator(health_formula: str) -> Calculator:
    """Return the reference formula, parsed."""
    return parse(health_formula)


@pytest.fixture
def health_bindings() -> dict[str, float]:
    """Return bindings for the reference formula."""
    return {"age": 21, "health": 60}
