"""
Stage 3 — Travel & Stay.

The crew's own travel and their lodging / per-diem while away from base.

Composition rule: the team's travel is priced exactly once here. For
installations the material either rides in the team's van (no extra travel)
or goes by third-party vehicle whose price already includes its own fuel,
tolls and wear, so the transport stage never adds fuel for the material.
"""

from dataclasses import dataclass

from ..defaults import (
    DEFAULT_HOTEL_PRICE,
    DEFAULT_PUBLIC_TRANSPORT_PRICE,
    LOCAL_TRANSPORT_PER_DAY,
    DEFAULT_TOLL_PER_KM,
)
from ..models import ServiceKind, AssistanceTransportMode
from ..schemas import JobConfiguration, RateTable
from .crew import CrewResult


@dataclass(frozen=True)
class TravelResult:
    is_overnight: bool
    nights: int
    hotel_price: float
    tolls: float
    travel_cost: float
    stay_cost: float


def is_overnight(distance_km: float, rates: RateTable) -> bool:
    """Strictly above the threshold; exactly at the threshold is a day trip."""
    return distance_km > rates.overnight_distance_threshold_km


def _override(value, default: float) -> float:
    return value if value else default


def hotel_price(job: JobConfiguration) -> float:
    return _override(job.custom_hotel_cost, DEFAULT_HOTEL_PRICE)


def toll_cost(job: JobConfiguration) -> float:
    """Round-trip tolls: user figure if given, otherwise proportional to distance."""
    return _override(job.custom_toll_cost, job.distance_km * DEFAULT_TOLL_PER_KM * 2)


def vehicle_round_trip_cost(job: JobConfiguration, rates: RateTable) -> float:
    """Fuel + wear for the round trip, plus tolls."""
    return job.distance_km * 2 * rates.vehicle_cost_per_km + toll_cost(job)


def public_transport_cost(job: JobConfiguration, crew_size: int, total_days: int) -> float:
    ticket = _override(job.custom_public_transport_cost, DEFAULT_PUBLIC_TRANSPORT_PRICE)
    return ticket * crew_size + LOCAL_TRANSPORT_PER_DAY * total_days


def uses_public_transport(job: JobConfiguration) -> bool:
    return (job.service_kind == ServiceKind.ASSISTANCE
            and job.assistance_transport_mode == AssistanceTransportMode.PUBLIC_TRANSPORT)


def stay_cost(rates: RateTable, crew: CrewResult, nights: int, nightly_price: float) -> float:
    lodging = nights * crew.crew_size * nightly_price
    per_diem = (crew.total_days * crew.techs_internal * rates.per_diem_internal
                + crew.total_days * crew.techs_external * rates.per_diem_external)
    return lodging + per_diem


def price_travel_and_stay(job: JobConfiguration, rates: RateTable,
                          crew: CrewResult) -> TravelResult:
    overnight = is_overnight(job.distance_km, rates)
    nightly = hotel_price(job)

    if uses_public_transport(job):
        tolls = 0.0
        travel = public_transport_cost(job, crew.crew_size, crew.total_days)
    else:
        tolls = toll_cost(job)
        travel = vehicle_round_trip_cost(job, rates)

    nights = 0
    stay = 0.0
    if overnight:
        nights = max(0, crew.total_days - 1)
        stay = stay_cost(rates, crew, nights, nightly)

    return TravelResult(
        is_overnight=overnight,
        nights=nights,
        hotel_price=nightly,
        tolls=tolls,
        travel_cost=travel,
        stay_cost=stay,
    )
