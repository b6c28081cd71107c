"""Shared fixtures for calculator tests."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from app import create_app
from inttypes import SUPPORTED_TYPES
from models import DisplayOptions
from session import CalculatorSession


@pytest.fixture(params=SUPPORTED_TYPES, ids=lambda t: t.name)
def int_type(request):
    """Every supported width/signedness combination."""
    return request.param


@pytest.fixture
def session() -> CalculatorSession:
    return CalculatorSession()


@pytest.fixture
def raw_display() -> DisplayOptions:
    """Display options that leave rendered strings untouched."""
    return DisplayOptions(trim_leading_zeros=False, group_binary=False)


@pytest.fixture
def client(session):
    return TestClient(create_app(session=session))
