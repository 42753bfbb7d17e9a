"""
Sales description tests.

Tests:
1-3.  Template rules (crane unloading, customer unloading, overnight, insulated panels)
4.    Template never leaks internal figures
5-7.  AI path (contact sentence enforced, failure and no-key fallbacks)
"""

import urllib.error
from unittest.mock import patch

import pytest

from opticost.engine import calculate_quote
from opticost.sales_text import (
    SalesDescriptionGenerator,
    CRANE_UNLOADING_TEXT,
    CUSTOMER_UNLOADING_TEXT,
    OVERNIGHT_TEXT,
    INSULATED_TEXT,
    contact_sentence,
)

EMAIL = "sales@example.com"


@pytest.fixture
def generator():
    return SalesDescriptionGenerator(api_key="", contact_email=EMAIL)


@pytest.fixture
def quote(rates, models, ballast_models, regions):
    def _quote(job):
        return calculate_quote(job, rates, models, ballast_models,
                               regions.get(job.destination_region))
    return _quote


def test_template_crane_job(generator, quote, make_job):
    job = make_job(spots=10, distance_km=300.0, has_pv=True)
    text, source = generator.generate(job, quote(job), "Lombardia", "Easy Park")

    assert source == "template"
    assert text.startswith("INSTALLATION")
    assert "TRANSPORT" in text
    assert CRANE_UNLOADING_TEXT in text
    assert OVERNIGHT_TEXT in text
    assert "photovoltaic" in text
    assert text.endswith(contact_sentence(EMAIL))


def test_template_freight_job_with_insulated_panels(generator, quote, make_job):
    job = make_job(spots=25, has_insulated_panels=True, has_forklift_on_site=True)
    text, _ = generator.generate(job, quote(job))
    assert CUSTOMER_UNLOADING_TEXT in text
    assert INSULATED_TEXT in text
    assert "3 vehicles" in text
    assert OVERNIGHT_TEXT not in text


def test_template_assistance(generator, quote, make_assistance):
    job = make_assistance(assistance_techs=2)
    text, _ = generator.generate(job, quote(job))
    assert "Technical assistance" in text
    assert "No material shipment required." in text


def test_template_has_no_prices(generator, quote, make_job):
    job = make_job(spots=10, distance_km=300.0)
    breakdown = quote(job)
    text, _ = generator.generate(job, breakdown)
    assert "EUR" not in text
    assert "margin" not in text.lower()
    assert f"{breakdown.total_cost:,.2f}" not in text


def test_ai_text_gets_contact_sentence(quote, make_job):
    generator = SalesDescriptionGenerator(api_key="k", contact_email=EMAIL)
    job = make_job()
    with patch("opticost.sales_text.call_gemini",
               return_value="INSTALLATION\nTwo spots.\n\nTRANSPORT\nVan.") as call:
        text, source = generator.generate(job, quote(job))

    assert source == "ai"
    assert text.endswith(contact_sentence(EMAIL))
    assert contact_sentence(EMAIL) in call.call_args.args[0]


def test_ai_failure_falls_back_to_template(quote, make_job):
    generator = SalesDescriptionGenerator(api_key="k", contact_email=EMAIL)
    job = make_job()
    with patch("opticost.sales_text.call_gemini",
               side_effect=urllib.error.URLError("unreachable")):
        text, source = generator.generate(job, quote(job))
    assert source == "template"
    assert text.startswith("INSTALLATION")


def test_no_key_never_calls_ai(generator, quote, make_job):
    job = make_job()
    with patch("opticost.sales_text.call_gemini") as call:
        _, source = generator.generate(job, quote(job))
    assert source == "template"
    call.assert_not_called()
