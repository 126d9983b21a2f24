"""Shared BDD fixtures for the marketplace."""

import pytest


@pytest.fixture()
def catalog():
    """Listed products by name."""
    return {}


@pytest.fixture()
def placed():
    """Identity of the order a scenario is working on."""
    return {}


@pytest.fixture()
def error():
    """Container for capturing exceptions raised in When steps."""
    return {"exc": None}
