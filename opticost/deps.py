"""
FastAPI dependencies. Overridable in tests via app.dependency_overrides.
"""

from fastapi import Request

from .reference_data import ReferenceData, load_reference_data
from .research import LogisticsResearcher
from .sales_text import SalesDescriptionGenerator


def get_reference_data(request: Request) -> ReferenceData:
    """Reference data held read-only on app.state; loaded on first use if startup didn't."""
    data = getattr(request.app.state, "reference_data", None)
    if data is None:
        data = load_reference_data()
        request.app.state.reference_data = data
    return data


def get_researcher() -> LogisticsResearcher:
    return LogisticsResearcher()


def get_description_generator() -> SalesDescriptionGenerator:
    return SalesDescriptionGenerator()
