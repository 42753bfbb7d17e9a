"""
Stage 5 — Aggregation.

Sums the five cost lines and applies cost-plus margin.
margin = total_cost × margin%, suggested_price = total_cost + margin.
"""

from dataclasses import dataclass

from ..schemas import RateTable


@dataclass(frozen=True)
class Totals:
    cost_labor: float
    cost_stay: float
    cost_travel: float
    cost_equipment_rental: float
    cost_freight: float
    total_cost: float
    margin_amount: float
    suggested_price: float


def aggregate(rates: RateTable, labor: float, stay: float, travel: float,
              equipment_rental: float, freight: float) -> Totals:
    lines = [round(v, 2) for v in (labor, stay, travel, equipment_rental, freight)]
    total_cost = round(sum(lines), 2)
    margin = round(total_cost * rates.margin_pct / 100.0, 2)
    return Totals(
        cost_labor=lines[0],
        cost_stay=lines[1],
        cost_travel=lines[2],
        cost_equipment_rental=lines[3],
        cost_freight=lines[4],
        total_cost=total_cost,
        margin_amount=margin,
        suggested_price=round(total_cost + margin, 2),
    )
