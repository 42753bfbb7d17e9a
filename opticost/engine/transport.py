"""
Stage 4 — Transport Selection.

Chooses how installation material reaches the site: company van, freight
truck (customer unloads with a forklift) or crane truck (self-unloading).
Not invoked for assistance jobs.

Decision order:
1. Van when weight <= 1000 kg, <= 3 spots and no ballast.
2. Crane truck when no forklift is on site and the load fits one crane's capacity.
3. Freight truck otherwise (forklift on site, or load above crane capacity).
"""

import logging
import math
from dataclasses import dataclass
from typing import List, Optional

from ..defaults import (
    VAN_MAX_WEIGHT_KG,
    VAN_MAX_SPOTS,
    CRANE_TRUCK_CAPACITY_KG,
    FREIGHT_TRUCK_CAPACITY_KG,
    INSULATED_PANELS_MAX_SPOTS_PER_TRUCK,
    FREIGHT_TRUCK_FALLBACK_BASE,
    FREIGHT_TRUCK_FALLBACK_PER_KM,
    CRANE_TRUCK_FALLBACK_BASE,
    CRANE_TRUCK_FALLBACK_PER_KM,
)
from ..models import TransportMode
from ..schemas import JobConfiguration, RateTable, RegionalLogistics

logger = logging.getLogger(__name__)

# Third-party vehicles only; the van travels with the crew
VEHICLE_CAPACITY_KG = {
    TransportMode.CRANE_TRUCK: CRANE_TRUCK_CAPACITY_KG,
    TransportMode.FREIGHT_TRUCK: FREIGHT_TRUCK_CAPACITY_KG,
}


@dataclass(frozen=True)
class TransportResult:
    mode: TransportMode
    vehicles: int
    freight_cost: float
    driver_extras: float
    reason: str


def van_eligible(job: JobConfiguration, total_weight_kg: float) -> bool:
    return (total_weight_kg <= VAN_MAX_WEIGHT_KG
            and job.spots <= VAN_MAX_SPOTS
            and not job.has_ballast)


def choose_third_party_mode(job: JobConfiguration, total_weight_kg: float):
    """Returns (mode, reason)."""
    if job.has_forklift_on_site:
        return TransportMode.FREIGHT_TRUCK, "Forklift on site: freight truck is sufficient"
    if total_weight_kg > CRANE_TRUCK_CAPACITY_KG:
        return TransportMode.FREIGHT_TRUCK, (
            f"Weight {total_weight_kg:,.0f} kg above crane truck capacity "
            f"({CRANE_TRUCK_CAPACITY_KG:,.0f} kg): freight truck required"
        )
    return TransportMode.CRANE_TRUCK, "No forklift on site: crane truck needed for unloading"


def vehicle_count(mode: TransportMode, job: JobConfiguration, total_weight_kg: float):
    """Returns (count, volume_bound); volume_bound is True when insulated panels drive the count."""
    if mode not in VEHICLE_CAPACITY_KG:
        raise ValueError(f"No third-party capacity for transport mode: {mode}")
    by_weight = max(1, math.ceil(total_weight_kg / VEHICLE_CAPACITY_KG[mode]))
    if job.has_insulated_panels and mode == TransportMode.FREIGHT_TRUCK:
        by_volume = math.ceil(job.spots / INSULATED_PANELS_MAX_SPOTS_PER_TRUCK)
        if by_volume > by_weight:
            return by_volume, True
    return by_weight, False


def base_vehicle_price(mode: TransportMode, region: Optional[RegionalLogistics],
                       distance_km: float) -> float:
    if mode == TransportMode.CRANE_TRUCK:
        if region is not None:
            return region.crane_cost
        return CRANE_TRUCK_FALLBACK_BASE + distance_km * CRANE_TRUCK_FALLBACK_PER_KM
    if mode == TransportMode.FREIGHT_TRUCK:
        if region is not None:
            return region.truck_cost
        return FREIGHT_TRUCK_FALLBACK_BASE + distance_km * FREIGHT_TRUCK_FALLBACK_PER_KM
    raise ValueError(f"Van has no third-party price: {mode}")


def select_transport(job: JobConfiguration, rates: RateTable, total_weight_kg: float,
                     region: Optional[RegionalLogistics], hotel_price: float,
                     assumptions: List[str]) -> TransportResult:
    if van_eligible(job, total_weight_kg):
        return TransportResult(
            mode=TransportMode.VAN,
            vehicles=1,
            freight_cost=0.0,
            driver_extras=0.0,
            reason=(f"Weight {total_weight_kg:,.0f} kg within van limit, "
                    f"{job.spots} spots, no ballast: company van"),
        )

    mode, reason = choose_third_party_mode(job, total_weight_kg)
    vehicles, volume_bound = vehicle_count(mode, job, total_weight_kg)
    if volume_bound:
        reason += (f"; insulated panels limit {INSULATED_PANELS_MAX_SPOTS_PER_TRUCK} "
                   f"spots per truck ({vehicles} trucks)")

    unit_price = base_vehicle_price(mode, region, job.distance_km)
    if region is None:
        logger.warning("No freight prices for region %r — estimating from distance",
                       job.destination_region)
        reason += "; freight price estimated from distance"
        assumptions.append(
            f"Region '{job.destination_region}' not in freight price list: "
            f"{unit_price:,.2f} per vehicle estimated from {job.distance_km:,.0f} km."
        )

    freight = unit_price * vehicles

    driver_extras = 0.0
    if mode == TransportMode.CRANE_TRUCK:
        # One hotel night + one external per-diem per crane driver
        driver_extras = (hotel_price + rates.per_diem_external) * vehicles
        freight += driver_extras

    return TransportResult(
        mode=mode,
        vehicles=vehicles,
        freight_cost=freight,
        driver_extras=driver_extras,
        reason=reason,
    )
