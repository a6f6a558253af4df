from __future__ import annotations

import math
from functools import partial
from typing import Callable

from dock.adapters.logging_utils import get_logger
from dock.analysis.finance import compute_deal_economics
from dock.domain.metrics import (
    DealEconomics,
    RiskBuffers,
    SensitivityAnalysis,
    SensitivityResult,
    StressTestResults,
)
from dock.domain.ports import InsuranceEstimator
from dock.domain.property import PropertySnapshot

logger = get_logger(__name__)

EconomicsFn = Callable[[PropertySnapshot], DealEconomics]

RENT_SHOCK = 0.10
RATE_SHOCK = 0.01
EXIT_CAP_SHOCK = 0.005
EXIT_CAP_FLOOR = 0.01

WORST_CASE_VACANCY_BUMP = 0.05
WORST_CASE_VACANCY_CAP = 0.25
WORST_CASE_REPAIRS_BUMP = 0.10

VACANCY_SCAN_STEP = 0.01
VACANCY_SCAN_LIMIT = 1.0
RATE_SCAN_STEP = 0.0025
RATE_SCAN_LIMIT = 0.20


def break_even_occupancy(economics: DealEconomics) -> float:
    """
    Share of gross potential rent that must be collected to cover taxes,
    insurance and debt service once management (the only variable cost)
    is taken out. Always within [0, 1].
    """
    gpr = economics.gross_potential_rent
    if gpr <= 0:
        return 1.0

    breakdown = economics.expense_breakdown
    fixed_costs = breakdown.taxes + breakdown.insurance + economics.annual_debt_service
    variable_cost_ratio = breakdown.management / max(economics.effective_gross_income, 1.0)
    denominator = gpr * (1 - variable_cost_ratio)
    if denominator <= 0:
        return 1.0
    return max(0.0, min(fixed_costs / denominator, 1.0))


def _scaled_rent(snapshot: PropertySnapshot, factor: float) -> PropertySnapshot:
    return snapshot.with_overrides(
        estimated_rent_per_unit=snapshot.estimated_rent_per_unit * factor,
        estimated_total_rent=snapshot.estimated_total_rent * factor,
    )


def _result(label: str, econ: DealEconomics, base: DealEconomics) -> SensitivityResult:
    return SensitivityResult(
        label=label,
        noi=econ.net_operating_income,
        cash_flow=econ.annual_cash_flow,
        cash_on_cash=econ.cash_on_cash_return,
        dscr=econ.dscr,
        delta_from_base=econ.annual_cash_flow - base.annual_cash_flow,
    )


def _exit_cap_result(label: str, valuation: float, asking_price: float, base: DealEconomics) -> SensitivityResult:
    # Exit cap moves value, not operations: operating figures stay at base.
    return SensitivityResult(
        label=label,
        noi=base.net_operating_income,
        cash_flow=base.annual_cash_flow,
        cash_on_cash=base.cash_on_cash_return,
        dscr=base.dscr,
        delta_from_base=valuation - asking_price,
    )


def compute_sensitivity(
    snapshot: PropertySnapshot,
    base: DealEconomics,
    economics_fn: EconomicsFn = compute_deal_economics,
) -> SensitivityAnalysis:
    rate = snapshot.financing.interest_rate

    rent_up = economics_fn(_scaled_rent(snapshot, 1 + RENT_SHOCK))
    rent_down = economics_fn(_scaled_rent(snapshot, 1 - RENT_SHOCK))
    rate_up = economics_fn(snapshot.with_financing(interest_rate=rate + RATE_SHOCK))
    rate_down = economics_fn(snapshot.with_financing(interest_rate=rate - RATE_SHOCK))

    noi = base.net_operating_income
    exit_cap_up = base.in_place_cap_rate + EXIT_CAP_SHOCK
    valuation_up = noi / exit_cap_up if exit_cap_up > 0 else 0.0
    exit_cap_down = max(base.in_place_cap_rate - EXIT_CAP_SHOCK, EXIT_CAP_FLOOR)
    valuation_down = noi / exit_cap_down

    return SensitivityAnalysis(
        rent_up_10=_result("Rent +10%", rent_up, base),
        rent_down_10=_result("Rent -10%", rent_down, base),
        rate_up_1=_result("Rate +1%", rate_up, base),
        rate_down_1=_result("Rate -1%", rate_down, base),
        exit_cap_up_50bps=_exit_cap_result("Exit Cap +50bps", valuation_up, snapshot.asking_price, base),
        exit_cap_down_50bps=_exit_cap_result("Exit Cap -50bps", valuation_down, snapshot.asking_price, base),
    )


def scan_until_negative(
    start: float,
    step: float,
    limit: float,
    cash_flow_at: Callable[[float], float],
) -> float:
    """
    Linear scan start, start+step, ... while below `limit`; returns the first
    value whose cash flow is negative. If none is, returns `limit` (or
    `start` when it already sits at or above the limit).

    The number of steps is fixed up front, so the scan always terminates.
    """
    if start >= limit:
        return start

    n_steps = math.ceil(round((limit - start) / step, 9))
    for k in range(n_steps):
        value = round(start + k * step, 10)
        if cash_flow_at(value) < 0:
            return value

    logger.debug(
        "stress_scan_bound_reached",
        extra={"context": {"start": start, "limit": limit, "steps": n_steps}},
    )
    return limit


def compute_stress_test(
    snapshot: PropertySnapshot,
    economics: DealEconomics,
    economics_fn: EconomicsFn = compute_deal_economics,
) -> StressTestResults:
    # Worst case: rent -10%, vacancy +5pts (capped), repairs +10%
    worst_case = _scaled_rent(snapshot, 1 - RENT_SHOCK).with_overrides(
        vacancy_rate=min(snapshot.vacancy_rate + WORST_CASE_VACANCY_BUMP, WORST_CASE_VACANCY_CAP),
        repairs_per_unit=snapshot.repairs_per_unit * (1 + WORST_CASE_REPAIRS_BUMP),
    )
    worst_case_econ = economics_fn(worst_case)

    max_vacancy = scan_until_negative(
        start=snapshot.vacancy_rate,
        step=VACANCY_SCAN_STEP,
        limit=VACANCY_SCAN_LIMIT,
        cash_flow_at=lambda v: economics_fn(snapshot.with_overrides(vacancy_rate=v)).annual_cash_flow,
    )
    max_rate = scan_until_negative(
        start=snapshot.financing.interest_rate,
        step=RATE_SCAN_STEP,
        limit=RATE_SCAN_LIMIT,
        cash_flow_at=lambda r: economics_fn(snapshot.with_financing(interest_rate=r)).annual_cash_flow,
    )

    return StressTestResults(
        worst_case_cash_flow=worst_case_econ.annual_cash_flow,
        max_vacancy_before_negative=max_vacancy,
        max_rate_before_negative=max_rate,
        cushion_to_break_even=economics.annual_cash_flow / max(economics.gross_potential_rent, 1.0),
    )


def compute_risk_buffers(
    snapshot: PropertySnapshot,
    base_economics: DealEconomics,
    *,
    insurance_estimator: InsuranceEstimator | None = None,
    as_of_year: int | None = None,
) -> RiskBuffers:
    """
    Break-even occupancy, the six-scenario sensitivity table and the stress
    test. Every scenario re-runs the full deal economics on a modified copy
    of the snapshot.
    """
    economics_fn = partial(
        compute_deal_economics,
        insurance_estimator=insurance_estimator,
        as_of_year=as_of_year,
    )
    return RiskBuffers(
        break_even_occupancy=break_even_occupancy(base_economics),
        sensitivity_analysis=compute_sensitivity(snapshot, base_economics, economics_fn),
        stress_test_results=compute_stress_test(snapshot, base_economics, economics_fn),
    )
