"""
Built-in reference data and documented fallback values.

Used whenever the published spreadsheets are not configured, cannot be
fetched, or do not contain a usable entry. The engine reads these constants
directly for its own fallbacks (hotel price, ballast weight, freight estimate).
"""

from .schemas import RateTable, ProductModel, BallastModel, RegionalLogistics

DEFAULT_RATES = RateTable()

DEFAULT_MODELS = [
    ProductModel(
        id="easy_park",
        name="Easy Park",
        hours_structure_per_spot=4.0,
        hours_pv_per_spot=1.5,
        hours_led_per_spot=0.5,
        weight_structure_per_spot_kg=180.0,
        requires_lifting=False,
    ),
    ProductModel(
        id="infinity_park",
        name="Infinity Park",
        hours_structure_per_spot=5.5,
        hours_pv_per_spot=1.5,
        hours_led_per_spot=0.5,
        weight_structure_per_spot_kg=220.0,
        requires_lifting=True,
    ),
    ProductModel(
        id="solar_carport_pro",
        name="Solar Carport Pro",
        hours_structure_per_spot=6.0,
        hours_pv_per_spot=2.0,
        hours_led_per_spot=0.8,
        weight_structure_per_spot_kg=250.0,
        requires_lifting=True,
    ),
]

DEFAULT_BALLAST_MODELS = [
    BallastModel(id="cemento_16", name="Concrete block 1600 kg", weight_kg=1600.0),
    BallastModel(id="twin_drive_24", name="Twin Drive 2400 kg", weight_kg=2400.0),
]

# Seed freight prices per destination province (EUR per vehicle)
DEFAULT_REGIONS = {
    "VR": RegionalLogistics(code="VR", region="Veneto", truck_cost=350.0, crane_cost=500.0),
    "MI": RegionalLogistics(code="MI", region="Lombardia", truck_cost=600.0, crane_cost=850.0),
    "RM": RegionalLogistics(code="RM", region="Lazio", truck_cost=1200.0, crane_cost=1600.0),
}

# --- Sizing ---
HOURS_PER_SPOT_TARP = 1.0           # when the product model has no tarp figure
DEFAULT_BALLAST_WEIGHT_KG = 1600.0
ASSISTANCE_TOOLS_WEIGHT_KG = 100.0

# --- Equipment rental (forklift) ---
FORKLIFT_INCLUDED_DAYS = 5
FORKLIFT_EXTRA_DAY_COST = 120.0

# --- Travel & stay ---
DEFAULT_HOTEL_PRICE = 90.0
DEFAULT_PUBLIC_TRANSPORT_PRICE = 150.0    # per person, round trip
LOCAL_TRANSPORT_PER_DAY = 50.0            # taxi / local moves at destination
DEFAULT_TOLL_PER_KM = 0.07

# --- Transport selection ---
VAN_MAX_WEIGHT_KG = 1000.0
VAN_MAX_SPOTS = 3
CRANE_TRUCK_CAPACITY_KG = 16000.0
FREIGHT_TRUCK_CAPACITY_KG = 24000.0
INSULATED_PANELS_MAX_SPOTS_PER_TRUCK = 12

# Freight estimate for unknown regions: base + per-km (one way)
FREIGHT_TRUCK_FALLBACK_BASE = 600.0
FREIGHT_TRUCK_FALLBACK_PER_KM = 1.5
CRANE_TRUCK_FALLBACK_BASE = 850.0
CRANE_TRUCK_FALLBACK_PER_KM = 2.0
