from __future__ import annotations

from typing import Dict

from dock.analysis.expenses import compute_expenses
from dock.domain.finance import monthly_payment, safe_divide
from dock.domain.metrics import DealEconomics
from dock.domain.ports import InsuranceEstimator
from dock.domain.property import PropertySnapshot


def _monthly_rent(snapshot: PropertySnapshot) -> float:
    """
    Gross scheduled rent per month.
    - The total-rent figure wins when it is set.
    - Else per-unit rent times unit count.
    """
    if snapshot.estimated_total_rent > 0:
        return snapshot.estimated_total_rent
    return snapshot.estimated_rent_per_unit * snapshot.unit_count


def _financing_basics(snapshot: PropertySnapshot) -> Dict[str, float]:
    financing = snapshot.financing
    purchase_price = financing.purchase_price if financing.purchase_price > 0 else snapshot.asking_price
    loan_amount = financing.loan_amount if financing.loan_amount > 0 else purchase_price * financing.ltv

    if financing.total_cash_required > 0:
        total_cash_required = financing.total_cash_required
    else:
        total_cash_required = (purchase_price - loan_amount) + financing.closing_costs

    return {
        "purchase_price": purchase_price,
        "loan_amount": loan_amount,
        "total_cash_required": total_cash_required,
    }


def compute_deal_economics(
    snapshot: PropertySnapshot,
    *,
    insurance_estimator: InsuranceEstimator | None = None,
    as_of_year: int | None = None,
) -> DealEconomics:
    """
    Core underwriting brain: income, expenses, NOI, debt service and returns
    for one property. Every ratio with a zero or negative denominator is 0.
    """

    # --- income side ---
    monthly_rent = _monthly_rent(snapshot)
    gross_potential_rent = monthly_rent * 12.0
    vacancy_loss = gross_potential_rent * snapshot.vacancy_rate
    effective_gross_income = gross_potential_rent - vacancy_loss

    # --- operating expenses ---
    expenses = compute_expenses(
        snapshot,
        effective_gross_income,
        insurance_estimator=insurance_estimator,
        as_of_year=as_of_year,
    )
    total_operating_expenses = expenses.total

    # --- NOI (Net Operating Income) ---
    noi = effective_gross_income - total_operating_expenses

    # --- Debt service ---
    basics = _financing_basics(snapshot)
    purchase_price = basics["purchase_price"]
    financing = snapshot.financing

    monthly_debt_service = monthly_payment(
        principal=basics["loan_amount"],
        annual_rate=financing.interest_rate,
        term_years=financing.loan_term_years,
        interest_only=financing.is_interest_only,
    )
    annual_debt_service = monthly_debt_service * 12.0

    # --- Cash flow after debt (negative is allowed) ---
    annual_cash_flow = noi - annual_debt_service

    cash_on_cash = safe_divide(annual_cash_flow, basics["total_cash_required"])
    in_place_cap_rate = safe_divide(noi, purchase_price)

    # --- Stabilized cap rate ---
    # Market median rent replaces in-place rent; the expense total is reused as-is.
    market = snapshot.market_data
    stabilized_rent = market.median_rent if market is not None and market.median_rent is not None else monthly_rent
    stabilized_gpr = stabilized_rent * 12.0 * snapshot.unit_count
    stabilized_egi = stabilized_gpr * (1 - snapshot.vacancy_rate)
    stabilized_noi = stabilized_egi - total_operating_expenses
    stabilized_cap_rate = safe_divide(stabilized_noi, purchase_price)

    dscr = safe_divide(noi, annual_debt_service)

    price_per_unit = purchase_price / snapshot.unit_count if snapshot.unit_count > 0 else purchase_price
    price_per_square_foot = safe_divide(purchase_price, snapshot.square_feet)

    return DealEconomics(
        gross_potential_rent=gross_potential_rent,
        effective_gross_income=effective_gross_income,
        vacancy_loss=vacancy_loss,
        total_operating_expenses=total_operating_expenses,
        expense_breakdown=expenses,
        net_operating_income=noi,
        monthly_debt_service=monthly_debt_service,
        annual_debt_service=annual_debt_service,
        dscr=dscr,
        annual_cash_flow=annual_cash_flow,
        monthly_cash_flow=annual_cash_flow / 12.0,
        cash_on_cash_return=cash_on_cash,
        in_place_cap_rate=in_place_cap_rate,
        stabilized_cap_rate=stabilized_cap_rate,
        price_per_unit=price_per_unit,
        price_per_square_foot=price_per_square_foot,
    )
