"""
Crew & duration stage tests.

Tests:
1-3.  Effective crew size (toggles, clamp to 1, assistance count)
4-6.  Elapsed days (ceiling, float noise)
7-9.  Labor cost (internal/external split, assistance single rate)
10-11. Forklift rental extra days
"""

import pytest

from opticost.defaults import FORKLIFT_INCLUDED_DAYS, FORKLIFT_EXTRA_DAY_COST
from opticost.engine.crew import (
    effective_crew_size,
    elapsed_days,
    labor_cost,
    equipment_rental_cost,
    plan_crew,
)
from opticost.engine.sizing import SizingResult


def test_crew_size_honors_toggles(make_job):
    job = make_job(techs_internal=2, use_external_techs=False, techs_external=3)
    assert effective_crew_size(job) == 2
    job = make_job(techs_internal=2, use_external_techs=True, techs_external=3)
    assert effective_crew_size(job) == 5


def test_crew_size_clamped_to_one(make_job, make_assistance):
    assert effective_crew_size(make_job(use_internal_techs=False)) == 1
    assert effective_crew_size(make_assistance(assistance_techs=0)) == 1


def test_assistance_uses_its_own_count(make_assistance):
    assert effective_crew_size(make_assistance(assistance_techs=3)) == 3


def test_elapsed_days_rounds_up():
    assert elapsed_days(40, 2, 8) == 3
    assert elapsed_days(12, 2, 8) == 1
    assert elapsed_days(16, 2, 8) == 1
    assert elapsed_days(17, 2, 8) == 2


def test_elapsed_days_ignores_float_noise():
    # 51 spots × 4 h × 0.95 = 193.8 h; 193.8 / 6.46 is 30 in exact arithmetic
    hours = 4.0 * 51 * (1 - 5 / 100.0)
    assert elapsed_days(hours, 1, hours / 30) == 30


def test_elapsed_days_zero_hours():
    assert elapsed_days(0, 2, 8) == 0


def test_labor_cost_splits_by_team(rates, make_job):
    job = make_job(techs_internal=1, use_external_techs=True, techs_external=2)
    cost = labor_cost(job, rates, 30.0, 3)
    expected = 10.0 * 1 * rates.hourly_cost_internal + 10.0 * 2 * rates.hourly_cost_external
    assert cost == pytest.approx(expected)


def test_labor_cost_internal_only(rates, make_job):
    assert labor_cost(make_job(), rates, 12.0, 2) == pytest.approx(12.0 * rates.hourly_cost_internal)


def test_assistance_labor_is_single_rate(rates, make_assistance):
    job = make_assistance(assistance_techs=2)
    assert labor_cost(job, rates, 16.0, 2) == pytest.approx(16.0 * rates.hourly_cost_internal)


def test_rental_includes_free_days():
    assert equipment_rental_cost(700.0, FORKLIFT_INCLUDED_DAYS) == 700.0
    assert equipment_rental_cost(700.0, 1) == 700.0
    assert equipment_rental_cost(700.0, FORKLIFT_INCLUDED_DAYS + 3) == 700.0 + 3 * FORKLIFT_EXTRA_DAY_COST


def test_no_rental_without_base_charge():
    assert equipment_rental_cost(0.0, 30) == 0.0


def test_plan_crew_folds_rental_surcharge(rates, make_job):
    # 165 h with one technician -> 21 days -> 16 extra rental days
    job = make_job(techs_internal=1)
    sizing = SizingResult(total_hours=165.0, total_weight_kg=6600.0, rental_base_cost=700.0)
    crew = plan_crew(job, rates, sizing)
    assert crew.total_days == 21
    assert crew.equipment_rental_cost == pytest.approx(700.0 + 16 * FORKLIFT_EXTRA_DAY_COST)


def test_plan_crew_assistance_counts_as_internal(rates, make_assistance):
    sizing = SizingResult(total_hours=16.0, total_weight_kg=100.0)
    crew = plan_crew(make_assistance(assistance_techs=2), rates, sizing)
    assert crew.techs_internal == 2
    assert crew.techs_external == 0
    assert crew.total_days == 1
