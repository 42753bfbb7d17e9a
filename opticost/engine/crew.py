"""
Stage 2 — Crew & Duration.

Effective crew size, elapsed working days, labor cost and the forklift
rental line (base charge from sizing + per-day surcharge past the free allowance).
"""

import math
from dataclasses import dataclass

from ..defaults import FORKLIFT_INCLUDED_DAYS, FORKLIFT_EXTRA_DAY_COST
from ..schemas import JobConfiguration, RateTable
from .sizing import SizingResult


@dataclass(frozen=True)
class CrewResult:
    crew_size: int
    techs_internal: int
    techs_external: int
    total_days: int
    labor_cost: float
    equipment_rental_cost: float


def effective_crew_size(job: JobConfiguration) -> int:
    """Clamped to 1 so hours always convert to days."""
    if job.is_installation:
        total = job.active_techs_internal + job.active_techs_external
    else:
        total = job.assistance_techs
    return max(1, total)


def elapsed_days(total_hours: float, crew_size: int, daily_work_hours: float) -> int:
    daily_team_hours = max(1, crew_size) * daily_work_hours
    if daily_team_hours <= 0:
        return 0
    # round() absorbs float noise such as 2.0000000000000004 from the discount factor
    return math.ceil(round(total_hours / daily_team_hours, 9))


def labor_cost(job: JobConfiguration, rates: RateTable, total_hours: float,
               crew_size: int) -> float:
    if not job.is_installation:
        return total_hours * rates.hourly_cost_internal
    hours_per_tech = total_hours / crew_size
    internal = hours_per_tech * job.active_techs_internal * rates.hourly_cost_internal
    external = hours_per_tech * job.active_techs_external * rates.hourly_cost_external
    return internal + external


def equipment_rental_cost(base_cost: float, total_days: int) -> float:
    if base_cost <= 0:
        return 0.0
    extra_days = max(0, total_days - FORKLIFT_INCLUDED_DAYS)
    return base_cost + extra_days * FORKLIFT_EXTRA_DAY_COST


def plan_crew(job: JobConfiguration, rates: RateTable, sizing: SizingResult) -> CrewResult:
    crew_size = effective_crew_size(job)
    days = elapsed_days(sizing.total_hours, crew_size, rates.daily_work_hours)

    if job.is_installation:
        internal, external = job.active_techs_internal, job.active_techs_external
    else:
        # Assistance technicians are company staff
        internal, external = job.assistance_techs, 0

    return CrewResult(
        crew_size=crew_size,
        techs_internal=internal,
        techs_external=external,
        total_days=days,
        labor_cost=labor_cost(job, rates, sizing.total_hours, crew_size),
        equipment_rental_cost=equipment_rental_cost(sizing.rental_base_cost, days),
    )
