"""
Shared test fixtures: default reference data, job builders, test client.
"""

import os
import pytest
from fastapi.testclient import TestClient

# AI collaborators and spreadsheet fetches off for every test
os.environ["GEMINI_API_KEY"] = ""
os.environ["TRANSPORT_CSV_URL"] = ""
os.environ["VARIABLES_CSV_URL"] = ""
os.environ["BALLAST_CSV_URL"] = ""

from opticost.defaults import DEFAULT_RATES, DEFAULT_MODELS, DEFAULT_BALLAST_MODELS, DEFAULT_REGIONS
from opticost.deps import get_reference_data
from opticost.main import app
from opticost.reference_data import ReferenceData
from opticost.schemas import JobConfiguration


def _make_job(**overrides) -> JobConfiguration:
    """Installation of 2 Easy Park spots, 2 internal technicians, nothing else selected."""
    fields = {
        "service_kind": "full_installation",
        "destination_region": "MI",
        "distance_km": 100.0,
        "model_id": "easy_park",
        "spots": 2,
        "use_internal_techs": True,
        "techs_internal": 2,
    }
    fields.update(overrides)
    return JobConfiguration(**fields)


def _make_assistance(**overrides) -> JobConfiguration:
    fields = {
        "service_kind": "assistance",
        "destination_region": "MI",
        "distance_km": 100.0,
        "assistance_days": 2,
        "assistance_techs": 1,
    }
    fields.update(overrides)
    return JobConfiguration(**fields)


@pytest.fixture
def rates():
    return DEFAULT_RATES


@pytest.fixture
def models():
    return list(DEFAULT_MODELS)


@pytest.fixture
def ballast_models():
    return list(DEFAULT_BALLAST_MODELS)


@pytest.fixture
def regions():
    return dict(DEFAULT_REGIONS)


@pytest.fixture
def reference_data():
    return ReferenceData()


@pytest.fixture
def client(reference_data):
    """FastAPI test client serving the built-in reference data."""
    app.dependency_overrides[get_reference_data] = lambda: reference_data
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_job():
    return _make_job


@pytest.fixture
def make_assistance():
    return _make_assistance
