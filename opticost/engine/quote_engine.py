"""
Quote engine: runs the five stages in data-flow order and assembles the
QuoteBreakdown.

Input: JobConfiguration + RateTable + catalogs + optional RegionalLogistics
Output: QuoteBreakdown (fresh value per call)

Never raises for business reasons: unknown model ids, unknown regions and
missing overrides degrade to documented defaults, and every fallback is
listed in QuoteBreakdown.assumptions.
"""

import logging
from typing import List, Optional

from ..models import AssistanceTransportMode
from ..schemas import (
    JobConfiguration,
    RateTable,
    ProductModel,
    BallastModel,
    RegionalLogistics,
    QuoteBreakdown,
    QuoteDetails,
)
from .sizing import resolve_product_model, size_job
from .crew import plan_crew
from .travel import price_travel_and_stay
from .transport import select_transport
from .aggregation import aggregate

logger = logging.getLogger(__name__)


class QuoteEngine:
    """
    Stateless: one instance can serve concurrent requests. Reference data
    is passed per call and only read.
    """

    def calculate(self, job: JobConfiguration, rates: RateTable,
                  models: List[ProductModel],
                  ballast_models: Optional[List[BallastModel]] = None,
                  region: Optional[RegionalLogistics] = None) -> QuoteBreakdown:
        assumptions = []  # type: List[str]
        ballast_models = ballast_models or []

        model = None
        if job.is_installation:
            model = resolve_product_model(models, job.model_id, assumptions)

        # 1. Sizing
        sizing = size_job(job, rates, model, ballast_models, assumptions)
        # 2. Crew & duration
        crew = plan_crew(job, rates, sizing)
        # 3. Travel & stay
        travel = price_travel_and_stay(job, rates, crew)

        details = QuoteDetails(
            is_overnight=travel.is_overnight,
            nights_in_hotel=travel.nights,
            discount_applied_pct=sizing.discount_applied_pct,
            ballast_count=sizing.ballast_count,
            ballast_total_weight_kg=sizing.ballast_weight_kg,
            tolls_included=round(travel.tolls, 2),
            hotel_price_used=travel.hotel_price,
        )

        # 4. Transport (installations only)
        transport_mode = None
        freight = 0.0
        if job.is_installation:
            transport = select_transport(
                job, rates, sizing.total_weight_kg, region, travel.hotel_price, assumptions,
            )
            transport_mode = transport.mode
            freight = transport.freight_cost
            details.number_of_vehicles = transport.vehicles
            details.vehicle_reason = transport.reason
            details.driver_extras_included = round(transport.driver_extras, 2)
        elif job.assistance_transport_mode == AssistanceTransportMode.PUBLIC_TRANSPORT:
            details.number_of_vehicles = 0
            details.vehicle_reason = "Assistance: crew travels by public transport, no material shipped"
        else:
            details.vehicle_reason = "Assistance: crew travels by company vehicle with tools only"

        if sizing.discount_applied_pct:
            assumptions.append(
                f"Bulk discount of {sizing.discount_applied_pct:g}% applied to labor hours "
                f"(more than {rates.bulk_discount_min_spots} spots)."
            )

        # 5. Aggregation
        totals = aggregate(
            rates,
            labor=crew.labor_cost,
            stay=travel.stay_cost,
            travel=travel.travel_cost,
            equipment_rental=crew.equipment_rental_cost,
            freight=freight,
        )

        breakdown = QuoteBreakdown(
            service_kind=job.service_kind,
            model_id=model.id if model else None,
            total_hours=round(sizing.total_hours, 2),
            total_days=crew.total_days,
            total_weight_kg=round(sizing.total_weight_kg, 2),
            transport_mode=transport_mode,
            cost_labor=totals.cost_labor,
            cost_stay=totals.cost_stay,
            cost_travel=totals.cost_travel,
            cost_equipment_rental=totals.cost_equipment_rental,
            cost_freight=totals.cost_freight,
            total_cost=totals.total_cost,
            suggested_price=totals.suggested_price,
            margin_amount=totals.margin_amount,
            margin_pct=rates.margin_pct,
            details=details,
            assumptions=assumptions,
        )

        logger.info(
            "Quote %s: %.1f h, %d days, %.0f kg, mode=%s, total=%.2f",
            job.service_kind.value, breakdown.total_hours, breakdown.total_days,
            breakdown.total_weight_kg,
            transport_mode.value if transport_mode else "none",
            breakdown.total_cost,
        )
        return breakdown


def calculate_quote(job: JobConfiguration, rates: RateTable,
                    models: List[ProductModel],
                    ballast_models: Optional[List[BallastModel]] = None,
                    region: Optional[RegionalLogistics] = None) -> QuoteBreakdown:
    """Convenience wrapper around QuoteEngine().calculate()."""
    return QuoteEngine().calculate(job, rates, models, ballast_models, region)
