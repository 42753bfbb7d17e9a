"""
Reference data loader tests.

Tests:
1-3.  Text helpers (sanitize_key, decimal vs money parsing)
4-5.  Transport sheet (quoted euro amounts, crane estimate, bad rows)
6-7.  Variables sheet (rate labels, both model layouts)
8.    Ballast sheet
9-11. load_reference_data (parsed sheets, fetch failure, nothing configured)
12.   Rate overrides never mutate the loaded table
"""

import http.client
import urllib.error
from unittest.mock import patch

import pytest

from opticost.config import Settings
from opticost.defaults import DEFAULT_RATES, DEFAULT_REGIONS, DEFAULT_MODELS
from opticost.reference_data import (
    sanitize_key,
    parse_decimal,
    parse_money,
    parse_transport_sheet,
    parse_variables_sheet,
    parse_ballast_sheet,
    load_reference_data,
    ReferenceData,
)
from opticost.schemas import RateOverrides

TRANSPORT_CSV = """Sigla,Regione,Bilico,Gru
MI,Lombardia,"€ 650,00","€ 900,00"
TO,Piemonte,700,
XX1,Nowhere,abc,10
BG,Lombardia
"""

VARIABLES_CSV = """Variabile,Valore
Costo orario tecnico,"35,50"
Margine,30%
Soglia distanza trasferta,200
Indennità trasferta (€),55
Easy Park XL,4.5,1.5,0.5,190,si
Heavy Park,260,6,2,1
"""

BALLAST_CSV = """Modello,Peso
Blocco 1600,1600
Twin Drive,2400
Broken,0
,1000
"""


def _cfg(**overrides):
    fields = {
        "TRANSPORT_CSV_URL": "https://sheets.example/transport.csv",
        "VARIABLES_CSV_URL": "https://sheets.example/variables.csv",
        "BALLAST_CSV_URL": "https://sheets.example/ballast.csv",
    }
    fields.update(overrides)
    return Settings(**fields)


def _fake_fetch(url, timeout):
    if "transport" in url:
        return TRANSPORT_CSV
    if "variables" in url:
        return VARIABLES_CSV
    return BALLAST_CSV


# ============================================================
# Helpers
# ============================================================

def test_sanitize_key_strips_accents_and_symbols():
    assert sanitize_key("Indennità trasferta (€)") == "indennita_trasferta___"
    assert sanitize_key("  Costo Orario ") == "costo_orario"


def test_parse_decimal_uses_comma_decimals():
    assert parse_decimal("1,85") == 1.85
    assert parse_decimal("25%") == 25.0
    assert parse_decimal("€ 50") == 50.0
    assert parse_decimal("n/a") is None
    assert parse_decimal(None, 3.0) == 3.0


def test_parse_money_drops_thousands_separator():
    assert parse_money("€ 1.200,50") == 1200.5
    assert parse_money("850") == 850.0
    assert parse_money("") is None


# ============================================================
# Sheets
# ============================================================

def test_transport_sheet_rows():
    regions = parse_transport_sheet(TRANSPORT_CSV)
    assert set(regions) == {"MI", "TO"}
    assert regions["MI"].truck_cost == 650.0
    assert regions["MI"].crane_cost == 900.0
    assert regions["MI"].region == "Lombardia"


def test_transport_sheet_estimates_missing_crane_price():
    regions = parse_transport_sheet(TRANSPORT_CSV)
    assert regions["TO"].crane_cost == pytest.approx(980.0)


def test_variables_sheet_rates():
    overrides, _ = parse_variables_sheet(VARIABLES_CSV)
    assert overrides == {
        "hourly_cost_internal": 35.5,
        "margin_pct": 30.0,
        "overnight_distance_threshold_km": 200.0,
        "per_diem_internal": 55.0,
    }


def test_variables_sheet_models_in_both_layouts():
    _, models = parse_variables_sheet(VARIABLES_CSV)
    by_id = {m.id: m for m in models}
    assert set(by_id) == {"easy_park_xl", "heavy_park"}

    xl = by_id["easy_park_xl"]
    assert xl.hours_structure_per_spot == 4.5
    assert xl.weight_structure_per_spot_kg == 190.0
    assert xl.requires_lifting is True

    heavy = by_id["heavy_park"]
    assert heavy.weight_structure_per_spot_kg == 260.0
    assert heavy.hours_structure_per_spot == 6.0
    assert heavy.hours_led_per_spot == 1.0
    assert heavy.requires_lifting is True


def test_ballast_sheet():
    ballast = parse_ballast_sheet(BALLAST_CSV)
    assert [(b.id, b.weight_kg) for b in ballast] == [
        ("blocco_1600", 1600.0),
        ("twin_drive", 2400.0),
    ]


# ============================================================
# Loader
# ============================================================

def test_load_reference_data_from_sheets():
    with patch("opticost.reference_data._fetch_text", side_effect=_fake_fetch):
        data = load_reference_data(_cfg())

    assert data.sources == ["transport", "variables", "models", "ballast"]
    assert data.region("mi").truck_cost == 650.0
    assert data.rates.margin_pct == 30.0
    assert data.rates.hourly_cost_external == DEFAULT_RATES.hourly_cost_external
    assert data.model("heavy_park") is not None
    assert len(data.ballast_models) == 2


def test_fetch_failure_falls_back_to_defaults():
    with patch("opticost.reference_data._fetch_text",
               side_effect=urllib.error.URLError("connection refused")):
        data = load_reference_data(_cfg())

    assert data.sources == []
    assert data.rates == DEFAULT_RATES
    assert data.regions == DEFAULT_REGIONS
    assert [m.id for m in data.models] == [m.id for m in DEFAULT_MODELS]


def test_nothing_configured_uses_defaults_without_fetching():
    with patch("opticost.reference_data._fetch_text") as fetch:
        data = load_reference_data(_cfg(TRANSPORT_CSV_URL="", VARIABLES_CSV_URL="",
                                        BALLAST_CSV_URL=""))
    fetch.assert_not_called()
    assert data.sources == []
    assert data.region("VR").crane_cost == 500.0


def test_rate_overrides_return_new_table():
    data = ReferenceData()
    changed = data.rates_with(RateOverrides(margin_pct=10.0, per_diem_internal=60.0))
    assert changed.margin_pct == 10.0
    assert changed.per_diem_internal == 60.0
    assert changed.daily_work_hours == DEFAULT_RATES.daily_work_hours
    assert data.rates.margin_pct == 25.0
    assert data.rates_with(RateOverrides()) is data.rates
    assert data.rates_with(None) is data.rates


def test_invalid_sheet_value_keeps_default_for_that_rate():
    sheet = 'Variabile,Valore\nbulk_discount_min_spots,"50,5"\nMargine,30\n'
    with patch("opticost.reference_data._fetch_text", return_value=sheet):
        data = load_reference_data(_cfg(TRANSPORT_CSV_URL="", BALLAST_CSV_URL=""))

    assert data.rates.bulk_discount_min_spots == DEFAULT_RATES.bulk_discount_min_spots
    assert data.rates.margin_pct == 30.0
    assert data.sources == ["variables"]


def test_only_invalid_sheet_values_leave_rates_untouched():
    sheet = 'Variabile,Valore\nbulk_discount_min_spots,"50,5"\n'
    with patch("opticost.reference_data._fetch_text", return_value=sheet):
        data = load_reference_data(_cfg(TRANSPORT_CSV_URL="", BALLAST_CSV_URL=""))

    assert data.rates == DEFAULT_RATES
    assert "variables" not in data.sources


def test_url_without_scheme_falls_back_to_defaults():
    data = load_reference_data(_cfg(TRANSPORT_CSV_URL="sheets.example/transport.csv",
                                    VARIABLES_CSV_URL="", BALLAST_CSV_URL=""))
    assert data.sources == []
    assert data.regions == DEFAULT_REGIONS


def test_truncated_response_falls_back_to_defaults():
    with patch("opticost.reference_data._fetch_text",
               side_effect=http.client.IncompleteRead(b"Sigla,Reg")):
        data = load_reference_data(_cfg())
    assert data.sources == []
    assert data.rates == DEFAULT_RATES
