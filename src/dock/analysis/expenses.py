from __future__ import annotations

from dock.adapters.insurance import StateRateInsuranceEstimator
from dock.domain.finance import safe_divide
from dock.domain.metrics import ExpenseBreakdown
from dock.domain.ports import InsuranceEstimator
from dock.domain.property import PropertySnapshot, property_age

# Rule of thumb: $250-500 per unit per year for capex
CAPEX_BASE_RESERVE = 300.0


def capex_age_multiplier(age: int) -> float:
    """Older buildings reserve more. Ages outside 0-50 (including negative) get the top step."""
    if 0 <= age <= 10:
        return 0.75
    if 11 <= age <= 20:
        return 1.0
    if 21 <= age <= 30:
        return 1.25
    if 31 <= age <= 50:
        return 1.5
    return 2.0


def capex_reserve(snapshot: PropertySnapshot, as_of_year: int | None = None) -> float:
    age = property_age(snapshot.year_built, as_of_year)
    return CAPEX_BASE_RESERVE * capex_age_multiplier(age) * snapshot.unit_count


def estimate_insurance(
    snapshot: PropertySnapshot,
    insurance_estimator: InsuranceEstimator | None = None,
    as_of_year: int | None = None,
) -> float:
    estimator = insurance_estimator or StateRateInsuranceEstimator(as_of_year=as_of_year)
    estimate = estimator.estimate(
        property_value=snapshot.asking_price,
        square_feet=snapshot.square_feet,
        year_built=snapshot.year_built,
        state=snapshot.state,
        property_type=snapshot.property_type,
    )
    return estimate.total_annual_cost


def compute_expenses(
    snapshot: PropertySnapshot,
    effective_gross_income: float,
    *,
    insurance_estimator: InsuranceEstimator | None = None,
    as_of_year: int | None = None,
) -> ExpenseBreakdown:
    """
    Annual operating expenses. Debt service is financing, not operations,
    so it never appears here.
    """
    if snapshot.insurance_annual > 0:
        insurance = snapshot.insurance_annual
    else:
        insurance = estimate_insurance(snapshot, insurance_estimator, as_of_year)

    taxes = snapshot.annual_taxes
    management = effective_gross_income * snapshot.management_fee_percent
    repairs = snapshot.repairs_per_unit * snapshot.unit_count
    capex = capex_reserve(snapshot, as_of_year)
    utilities = 0.0  # tenant-paid
    other = snapshot.other_expenses

    total = taxes + insurance + management + repairs + capex + utilities + other

    return ExpenseBreakdown(
        taxes=taxes,
        insurance=insurance,
        management=management,
        repairs=repairs,
        capex_reserve=capex,
        utilities=utilities,
        other=other,
        expense_ratio=safe_divide(total, effective_gross_income),
    )
