"""
Stage 1 — Sizing.

Labor hours, shipped weight and ballast quantity from the product configuration.
Also decides whether a forklift must be rented (the extra-day surcharge is
added in the crew stage once the day count is known).
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from ..defaults import (
    DEFAULT_MODELS,
    HOURS_PER_SPOT_TARP,
    DEFAULT_BALLAST_WEIGHT_KG,
    ASSISTANCE_TOOLS_WEIGHT_KG,
)
from ..schemas import JobConfiguration, RateTable, ProductModel, BallastModel

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SizingResult:
    total_hours: float
    total_weight_kg: float
    discount_applied_pct: float = 0.0
    ballast_count: int = 0
    ballast_weight_kg: float = 0.0
    rental_base_cost: float = 0.0


def resolve_product_model(models: List[ProductModel], model_id: str,
                          assumptions: List[str]) -> ProductModel:
    """Find the referenced model; degrade to the first catalog entry if unknown."""
    catalog = models or DEFAULT_MODELS
    if not models:
        logger.warning("Empty product catalog — using built-in models")
        assumptions.append("Product catalog unavailable: built-in models used.")
    for model in catalog:
        if model.id == model_id:
            return model
    fallback = catalog[0]
    logger.warning("Unknown product model %r — falling back to %r", model_id, fallback.id)
    assumptions.append(
        f"Product model '{model_id}' not found: priced as '{fallback.name}'."
    )
    return fallback


def resolve_ballast_weight(ballast_models: List[BallastModel], ballast_model_id: str,
                           assumptions: List[str]) -> float:
    """Unit weight of the selected ballast model, or the default block weight."""
    for ballast in ballast_models or []:
        if ballast.id == ballast_model_id:
            return ballast.weight_kg
    logger.warning("Unknown ballast model %r — using %.0f kg per unit",
                   ballast_model_id, DEFAULT_BALLAST_WEIGHT_KG)
    assumptions.append(
        f"Ballast model '{ballast_model_id}' not found: "
        f"{DEFAULT_BALLAST_WEIGHT_KG:.0f} kg per unit assumed."
    )
    return DEFAULT_BALLAST_WEIGHT_KG


def hours_per_spot(model: ProductModel, job: JobConfiguration) -> float:
    hours = model.hours_structure_per_spot
    if job.has_pv:
        hours += model.hours_pv_per_spot
    if job.has_led:
        hours += model.hours_led_per_spot
    if job.has_tarp:
        tarp = model.hours_tarp_per_spot
        hours += tarp if tarp is not None else HOURS_PER_SPOT_TARP
    return hours


def ballast_count(spots: int) -> int:
    """2 units for the first two spots, +1 for every further 2 spots."""
    return (spots - 1) // 2 + 2


def size_installation(job: JobConfiguration, rates: RateTable, model: ProductModel,
                      ballast_models: List[BallastModel],
                      assumptions: List[str]) -> SizingResult:
    total_hours = hours_per_spot(model, job) * job.spots

    discount = 0.0
    if job.spots > rates.bulk_discount_min_spots:
        discount = rates.bulk_discount_pct
        total_hours = total_hours * (1 - discount / 100.0)

    structure_weight = model.weight_structure_per_spot_kg * job.spots

    count = 0
    ballast_weight = 0.0
    if job.has_ballast:
        count = ballast_count(job.spots)
        unit_weight = resolve_ballast_weight(ballast_models, job.ballast_model_id, assumptions)
        ballast_weight = count * unit_weight

    rental_base = 0.0
    if model.requires_lifting and not job.has_forklift_on_site:
        rental_base = rates.forklift_base_cost

    return SizingResult(
        total_hours=total_hours,
        total_weight_kg=structure_weight + ballast_weight,
        discount_applied_pct=discount,
        ballast_count=count,
        ballast_weight_kg=ballast_weight,
        rental_base_cost=rental_base,
    )


def size_assistance(job: JobConfiguration, rates: RateTable) -> SizingResult:
    return SizingResult(
        total_hours=job.assistance_days * rates.daily_work_hours,
        total_weight_kg=ASSISTANCE_TOOLS_WEIGHT_KG,
    )


def size_job(job: JobConfiguration, rates: RateTable, model: Optional[ProductModel],
             ballast_models: List[BallastModel], assumptions: List[str]) -> SizingResult:
    if job.is_installation:
        return size_installation(job, rates, model, ballast_models, assumptions)
    return size_assistance(job, rates)
