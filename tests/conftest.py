# tests/conftest.py
import pytest

from dock.domain.property import FinancingTerms, PropertySnapshot, ScoringThresholds

AS_OF_YEAR = 2024


@pytest.fixture
def as_of_year():
    return AS_OF_YEAR


@pytest.fixture
def baseline_snapshot():
    """
    Single door, $2000/mo, new construction (capex multiplier 0.75),
    $300k price with $225k at 7% over 30 years. Cash flow is negative.
    """
    return PropertySnapshot(
        address="123 Test St",
        city="Birmingham",
        state="MI",
        zipcode="48009",
        asking_price=300_000.0,
        bedrooms=3,
        bathrooms=2.0,
        square_feet=1500,
        year_built=AS_OF_YEAR,
        unit_count=1,
        annual_taxes=3000.0,
        estimated_total_rent=2000.0,
        vacancy_rate=0.05,
        management_fee_percent=0.08,
        repairs_per_unit=1200.0,
        insurance_annual=1200.0,
        other_expenses=0.0,
        financing=FinancingTerms(
            purchase_price=300_000.0,
            loan_amount=225_000.0,
            interest_rate=0.07,
            loan_term_years=30,
            ltv=0.75,
            closing_costs=0.0,
        ),
        thresholds=ScoringThresholds(),
    )


@pytest.fixture
def all_cash_snapshot(baseline_snapshot):
    """Same property bought without debt."""
    return baseline_snapshot.with_financing(loan_amount=0.0, ltv=0.0)
