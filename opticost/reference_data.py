"""
Reference data loader.

Fetches the published spreadsheet exports (freight prices per province,
business variables + product models, ballast models) and normalizes them
into validated catalog values for the engine. The sheets are hand-edited,
so column layout is guessed heuristically and anything unusable is dropped.

Never crashes: a sheet that is not configured, cannot be fetched or yields
nothing usable falls back to the built-in defaults for that part.
"""

import csv
import http.client
import io
import logging
import re
import unicodedata
import urllib.error
import urllib.request
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from pydantic import ValidationError

from .config import Settings, settings as app_settings
from .defaults import DEFAULT_RATES, DEFAULT_MODELS, DEFAULT_BALLAST_MODELS, DEFAULT_REGIONS
from .schemas import (
    RateTable,
    RateOverrides,
    ProductModel,
    BallastModel,
    RegionalLogistics,
    ReferenceSnapshot,
)

logger = logging.getLogger(__name__)

# Crane price estimate when the sheet leaves the column empty
CRANE_FROM_TRUCK_FACTOR = 1.4

# Weight above which a model is assumed to need site lifting equipment
LIFTING_WEIGHT_THRESHOLD_KG = 200.0

_RATE_FIELDS = set(RateTable.model_fields.keys())


# --- Text helpers ---

def sanitize_key(key: str) -> str:
    """'Indennità trasferta (€)' -> 'indennita_trasferta___'"""
    ascii_key = unicodedata.normalize("NFKD", key).encode("ascii", "ignore").decode("ascii")
    return re.sub(r"[^a-z0-9_]", "_", ascii_key.strip().lower())


def parse_decimal(value, default=None):
    """Parse '1,85' / '25%' / '€ 50' as a float. Comma is the decimal separator."""
    if value is None:
        return default
    text = str(value).replace("€", "").replace("%", "").strip().replace(",", ".")
    try:
        return float(text)
    except ValueError:
        return default


def parse_money(value, default=None):
    """Parse '€ 1.200,50' as 1200.5. Dot is the thousands separator."""
    if value is None:
        return default
    text = str(value).replace("€", "").strip().replace(".", "").replace(",", ".")
    try:
        return float(text)
    except ValueError:
        return default


def parse_csv_rows(text: str) -> List[List[str]]:
    """Split CSV text into trimmed cells, honoring quoted commas."""
    reader = csv.reader(io.StringIO(text))
    return [[cell.strip() for cell in row] for row in reader if row]


# --- Sheet parsers ---

def parse_transport_sheet(text: str) -> Dict[str, RegionalLogistics]:
    """
    Columns: province code, region, truck price, crane price.
    First row is a header.
    """
    regions = {}
    for row in parse_csv_rows(text)[1:]:
        if len(row) < 3:
            continue
        code = row[0].upper()[:2]
        if len(code) != 2 or not code.isalpha():
            continue
        truck = parse_money(row[2])
        if truck is None:
            continue
        crane = parse_money(row[3]) if len(row) > 3 else None
        regions[code] = RegionalLogistics(
            code=code,
            region=row[1],
            truck_cost=truck,
            crane_cost=crane if crane is not None else round(truck * CRANE_FROM_TRUCK_FACTOR, 2),
        )
    return regions


def _rate_field_for_key(key: str) -> Optional[str]:
    """Map a spreadsheet label (sanitized) to a RateTable field."""
    if key in _RATE_FIELDS:
        return key
    if "indennita_trasferta" in key or key == "diaria_squadra_interna":
        return "per_diem_internal"
    if key == "diaria_squadra_esterna":
        return "per_diem_external"
    if "costo" in key and "esterna" in key:
        return "hourly_cost_external"
    if "soglia" in key and "distanza" in key:
        return "overnight_distance_threshold_km"
    if "furgone" in key and "litro" in key:
        return "van_km_per_liter"
    if "gasolio" in key:
        return "diesel_price_per_liter"
    if "usura" in key:
        return "vehicle_wear_per_km"
    if ("costo" in key and "tecnico" in key) or key == "costo_orario_tecnico":
        return "hourly_cost_internal"
    if "margine" in key:
        return "margin_pct"
    if "sconto" in key and ("50" in key or "ottimizzazione" in key):
        return "bulk_discount_pct"
    return None


def _is_setting_key(key: str) -> bool:
    return "costo" in key or "diaria" in key or "soglia" in key


def _cell_number(row: List[str], idx: int):
    """Missing cell -> 0.0, unparseable cell -> None."""
    if idx >= len(row) or row[idx] == "":
        return 0.0
    return parse_decimal(row[idx])


def _is_yes(value: str) -> bool:
    v = (value or "").strip().lower()
    return "si" in v or "sì" in v or "yes" in v or v == "1"


def parse_model_row(row: List[str]) -> Optional[ProductModel]:
    """
    Two layouts seen in the sheet, told apart by magnitude (hours < 20, weights > 50):
      A: name | h structure | h PV | h LED | weight | lifting
      B: name | weight | h structure | h PV | h LED
    """
    if len(row) < 4:
        return None
    name = row[0]
    key = sanitize_key(name)
    if not name or _is_setting_key(key):
        return None

    v1, v2 = _cell_number(row, 1), _cell_number(row, 2)
    if v1 is None or v2 is None:
        return None
    v3 = _cell_number(row, 3) or 0.0
    v4 = _cell_number(row, 4) or 0.0

    if v4 > 50 or v1 < 20:
        hours_structure, hours_pv, hours_led, weight = v1, v2, v3, v4
        lifting = _is_yes(row[5]) if len(row) > 5 else False
    elif v1 > 50:
        weight, hours_structure, hours_pv, hours_led = v1, v2, v3, v4
        lifting = False
    else:
        return None

    if hours_structure <= 0 or weight <= 0:
        return None

    return ProductModel(
        id=key,
        name=name,
        hours_structure_per_spot=hours_structure,
        hours_pv_per_spot=hours_pv,
        hours_led_per_spot=hours_led,
        weight_structure_per_spot_kg=weight,
        requires_lifting=lifting or weight > LIFTING_WEIGHT_THRESHOLD_KG,
    )


def parse_variables_sheet(text: str) -> Tuple[Dict[str, float], List[ProductModel]]:
    """
    Mixed sheet: 'label, value' rows set rate table variables, wider rows
    describe product models. Returns (rate overrides, models).
    """
    overrides = {}
    models = []
    for row in parse_csv_rows(text):
        if len(row) < 2:
            continue
        key = sanitize_key(row[0])

        value = parse_decimal(row[1])
        if value is not None:
            rate_field = _rate_field_for_key(key)
            if rate_field:
                overrides[rate_field] = value

        model = parse_model_row(row)
        if model is not None:
            models.append(model)
    return overrides, models


def parse_ballast_sheet(text: str) -> List[BallastModel]:
    """Columns: name, unit weight kg. First row is a header."""
    ballast = []
    for row in parse_csv_rows(text)[1:]:
        if len(row) < 2 or not row[0]:
            continue
        weight = parse_decimal(row[1])
        if weight is None or weight <= 0:
            continue
        ballast.append(BallastModel(id=sanitize_key(row[0]), name=row[0], weight_kg=weight))
    return ballast


# --- Bundle ---

@dataclass(frozen=True)
class ReferenceData:
    rates: RateTable = field(default_factory=lambda: DEFAULT_RATES)
    models: List[ProductModel] = field(default_factory=lambda: list(DEFAULT_MODELS))
    ballast_models: List[BallastModel] = field(default_factory=lambda: list(DEFAULT_BALLAST_MODELS))
    regions: Dict[str, RegionalLogistics] = field(default_factory=lambda: dict(DEFAULT_REGIONS))
    sources: List[str] = field(default_factory=list)
    loaded_at: datetime = field(default_factory=datetime.utcnow)

    def region(self, code: str) -> Optional[RegionalLogistics]:
        return self.regions.get((code or "").strip().upper())

    def model(self, model_id: str) -> Optional[ProductModel]:
        for m in self.models:
            if m.id == model_id:
                return m
        return None

    def rates_with(self, overrides: Optional[RateOverrides]) -> RateTable:
        """A new RateTable with the form's overrides applied; the loaded one is untouched."""
        if overrides is None:
            return self.rates
        changes = overrides.model_dump(exclude_none=True)
        if not changes:
            return self.rates
        return RateTable(**{**self.rates.model_dump(), **changes})

    def snapshot(self) -> ReferenceSnapshot:
        return ReferenceSnapshot(
            rates=self.rates,
            models=self.models,
            ballast_models=self.ballast_models,
            regions=self.regions,
            sources=self.sources,
            loaded_at=self.loaded_at,
        )


def apply_rate_overrides(base: RateTable, overrides: Dict[str, float]) -> Tuple[RateTable, Dict[str, float]]:
    """
    Apply sheet values one key at a time. A value the RateTable rejects
    (e.g. 50.5 for an integer field) is dropped and the base value kept.

    Returns (rate table, overrides actually applied).
    """
    values = base.model_dump()
    applied = {}
    for key, value in overrides.items():
        try:
            RateTable(**{**values, key: value})
        except ValidationError as e:
            logger.warning("Ignoring sheet value %r for %s: %s", value, key, e.errors()[0]["msg"])
            continue
        values[key] = value
        applied[key] = value
    if not applied:
        return base, applied
    return RateTable(**values), applied


def _fetch_text(url: str, timeout: int) -> str:
    req = urllib.request.Request(url, headers={"User-Agent": "opticost/1.0"})
    with urllib.request.urlopen(req, timeout=timeout) as response:
        return response.read().decode("utf-8")


def _load_sheet(name: str, url: str, timeout: int) -> Optional[str]:
    if not url:
        logger.info("No URL configured for %s sheet — using defaults", name)
        return None
    try:
        return _fetch_text(url, timeout)
    except (urllib.error.URLError, http.client.HTTPException, OSError,
            UnicodeDecodeError, ValueError) as e:
        logger.warning("Fetching %s sheet failed: %s — using defaults", name, e)
        return None


def load_reference_data(cfg: Settings = None) -> ReferenceData:
    """Build a ReferenceData from the configured sheets, defaulting per part."""
    cfg = cfg or app_settings
    timeout = cfg.SHEET_FETCH_TIMEOUT
    sources = []

    regions = dict(DEFAULT_REGIONS)
    text = _load_sheet("transport", cfg.TRANSPORT_CSV_URL, timeout)
    if text is not None:
        parsed = parse_transport_sheet(text)
        if parsed:
            regions = parsed
            sources.append("transport")
        else:
            logger.warning("Transport sheet had no usable rows — using default regions")

    rates = DEFAULT_RATES
    models = list(DEFAULT_MODELS)
    text = _load_sheet("variables", cfg.VARIABLES_CSV_URL, timeout)
    if text is not None:
        overrides, parsed_models = parse_variables_sheet(text)
        rates, applied = apply_rate_overrides(DEFAULT_RATES, overrides)
        if applied:
            sources.append("variables")
        if parsed_models:
            models = parsed_models
            sources.append("models")
        else:
            logger.warning("Variables sheet had no model rows — using default models")

    ballast = list(DEFAULT_BALLAST_MODELS)
    text = _load_sheet("ballast", cfg.BALLAST_CSV_URL, timeout)
    if text is not None:
        parsed_ballast = parse_ballast_sheet(text)
        if parsed_ballast:
            ballast = parsed_ballast
            sources.append("ballast")
        else:
            logger.warning("Ballast sheet had no usable rows — using default ballast models")

    logger.info("Reference data loaded: %d models, %d ballast models, %d regions (sources: %s)",
                len(models), len(ballast), len(regions), ", ".join(sources) or "defaults")
    return ReferenceData(
        rates=rates,
        models=models,
        ballast_models=ballast,
        regions=regions,
        sources=sources,
    )
