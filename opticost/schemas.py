from pydantic import BaseModel, Field
from typing import Optional, List, Dict
from datetime import datetime
from .models import ServiceKind, TransportMode, AssistanceTransportMode


# --- Reference data (read-only inputs to the engine) ---

class RateTable(BaseModel):
    """Tunable business constants. Built once per reference-data load, never mutated."""
    overnight_distance_threshold_km: float = 150.0
    per_diem_internal: float = 50.0
    per_diem_external: float = 70.0
    daily_work_hours: float = 8.0
    van_km_per_liter: float = 11.0
    diesel_price_per_liter: float = 1.85
    vehicle_wear_per_km: float = 0.037
    hourly_cost_internal: float = 35.00
    hourly_cost_external: float = 26.50
    forklift_base_cost: float = 700.0
    bulk_discount_pct: float = 5.0
    bulk_discount_min_spots: int = 50
    margin_pct: float = 25.0

    class Config:
        frozen = True

    @property
    def fuel_cost_per_km(self) -> float:
        if self.van_km_per_liter <= 0:
            return 0.0
        return self.diesel_price_per_liter / self.van_km_per_liter

    @property
    def vehicle_cost_per_km(self) -> float:
        """Fuel plus wear, per km driven."""
        return self.fuel_cost_per_km + self.vehicle_wear_per_km


class ProductModel(BaseModel):
    id: str
    name: str
    hours_structure_per_spot: float
    hours_pv_per_spot: float = 0.0
    hours_led_per_spot: float = 0.0
    hours_tarp_per_spot: Optional[float] = None
    weight_structure_per_spot_kg: float
    requires_lifting: bool = False

    class Config:
        frozen = True


class BallastModel(BaseModel):
    id: str
    name: str
    weight_kg: float

    class Config:
        frozen = True


class RegionalLogistics(BaseModel):
    code: str
    region: str = ""
    truck_cost: float
    crane_cost: float

    class Config:
        frozen = True


# --- Job configuration (the request to price) ---

class JobConfiguration(BaseModel):
    service_kind: ServiceKind = ServiceKind.FULL_INSTALLATION
    destination_region: str = ""
    distance_km: float = Field(0.0, ge=0)

    # Installation
    model_id: str = ""
    spots: int = Field(2, ge=1)
    use_internal_techs: bool = True
    techs_internal: int = Field(2, ge=0)
    use_external_techs: bool = False
    techs_external: int = Field(0, ge=0)

    has_pv: bool = False
    has_led: bool = False
    has_tarp: bool = False
    has_insulated_panels: bool = False

    has_ballast: bool = False
    ballast_model_id: str = ""
    has_forklift_on_site: bool = False

    # Assistance
    assistance_days: float = Field(1.0, ge=0)
    assistance_techs: int = Field(1, ge=0)
    assistance_transport_mode: AssistanceTransportMode = AssistanceTransportMode.COMPANY_VEHICLE

    # Research overrides: None or 0 means "use the default"
    custom_toll_cost: Optional[float] = Field(None, ge=0)
    custom_hotel_cost: Optional[float] = Field(None, ge=0)
    custom_public_transport_cost: Optional[float] = Field(None, ge=0)

    class Config:
        frozen = True

    @property
    def is_installation(self) -> bool:
        return self.service_kind == ServiceKind.FULL_INSTALLATION

    @property
    def active_techs_internal(self) -> int:
        return self.techs_internal if self.use_internal_techs else 0

    @property
    def active_techs_external(self) -> int:
        return self.techs_external if self.use_external_techs else 0


# --- Output ---

class QuoteDetails(BaseModel):
    is_overnight: bool = False
    nights_in_hotel: int = 0
    number_of_vehicles: int = 1
    discount_applied_pct: float = 0.0
    vehicle_reason: str = ""
    ballast_count: int = 0
    ballast_total_weight_kg: float = 0.0
    tolls_included: float = 0.0
    hotel_price_used: float = 0.0
    driver_extras_included: float = 0.0


class QuoteBreakdown(BaseModel):
    service_kind: ServiceKind
    model_id: Optional[str] = None
    total_hours: float
    total_days: int
    total_weight_kg: float
    transport_mode: Optional[TransportMode] = None

    cost_labor: float
    cost_stay: float             # per-diem + lodging
    cost_travel: float           # fuel + tolls + wear, or tickets
    cost_equipment_rental: float
    cost_freight: float          # third-party vehicles incl. crane driver extras

    total_cost: float
    suggested_price: float
    margin_amount: float
    margin_pct: float

    details: QuoteDetails = Field(default_factory=QuoteDetails)
    assumptions: List[str] = []


# --- HTTP bodies ---

class RateOverrides(BaseModel):
    """Partial rate table sent by the settings form; unset fields keep the loaded value."""
    overnight_distance_threshold_km: Optional[float] = None
    per_diem_internal: Optional[float] = None
    per_diem_external: Optional[float] = None
    daily_work_hours: Optional[float] = Field(None, gt=0)
    van_km_per_liter: Optional[float] = Field(None, gt=0)
    diesel_price_per_liter: Optional[float] = None
    vehicle_wear_per_km: Optional[float] = None
    hourly_cost_internal: Optional[float] = None
    hourly_cost_external: Optional[float] = None
    forklift_base_cost: Optional[float] = None
    bulk_discount_pct: Optional[float] = None
    bulk_discount_min_spots: Optional[int] = None
    margin_pct: Optional[float] = None


class QuoteRequest(BaseModel):
    job: JobConfiguration
    rates: Optional[RateOverrides] = None


class ReferenceSnapshot(BaseModel):
    rates: RateTable
    models: List[ProductModel]
    ballast_models: List[BallastModel]
    regions: Dict[str, RegionalLogistics]
    sources: List[str] = []
    loaded_at: datetime


class ResearchRequest(BaseModel):
    address: str = Field(..., min_length=1)
    start_date: Optional[str] = None


class ResearchResult(BaseModel):
    distance_km: float = 0.0
    tolls_one_way: float = 0.0
    hotel_price: float = 80.0
    public_transport_price: float = 0.0
    address: str = ""

    def as_job_overrides(self) -> dict:
        """Fields to merge into a JobConfiguration. Tolls become the round-trip figure."""
        return {
            "distance_km": self.distance_km,
            "custom_toll_cost": round(self.tolls_one_way * 2, 2),
            "custom_hotel_cost": self.hotel_price,
            "custom_public_transport_cost": self.public_transport_price,
        }


class DescriptionResponse(BaseModel):
    text: str
    generated_by: str   # "ai" or "template"
