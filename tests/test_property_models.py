# tests/test_property_models.py
import pytest
from pydantic import ValidationError

from dock.domain.property import (
    FinancingTerms,
    MarketSnapshot,
    PropertySnapshot,
    PropertyType,
    property_age,
)


def test_financing_derived_amounts():
    f = FinancingTerms(purchase_price=300_000.0, loan_amount=225_000.0, closing_costs=6_000.0)
    assert f.down_payment == pytest.approx(75_000.0)
    assert f.down_payment_percent == pytest.approx(0.25)
    assert f.total_cash_required == pytest.approx(81_000.0)


def test_down_payment_percent_without_price():
    assert FinancingTerms().down_payment_percent == 0.0


def test_loan_and_ltv_stay_in_sync():
    f = FinancingTerms(purchase_price=400_000.0, ltv=0.80)
    assert f.with_loan_from_ltv().loan_amount == pytest.approx(320_000.0)

    g = FinancingTerms(purchase_price=400_000.0, loan_amount=300_000.0)
    assert g.with_ltv_from_loan().ltv == pytest.approx(0.75)

    no_price = FinancingTerms(loan_amount=100_000.0)
    assert no_price.with_ltv_from_loan() is no_price


@pytest.mark.parametrize(
    "kwargs",
    [
        {"ltv": 1.2},
        {"ltv": -0.1},
        {"interest_rate": -0.01},
        {"loan_term_years": -1},
    ],
)
def test_financing_rejects_out_of_range(kwargs):
    with pytest.raises(ValidationError):
        FinancingTerms(**kwargs)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"vacancy_rate": 1.5},
        {"vacancy_rate": -0.05},
        {"management_fee_percent": 2.0},
        {"unit_count": 0},
    ],
)
def test_snapshot_rejects_out_of_range(kwargs):
    with pytest.raises(ValidationError):
        PropertySnapshot(asking_price=100_000.0, **kwargs)


def test_market_snapshot_rejects_negative_days_on_market():
    with pytest.raises(ValidationError):
        MarketSnapshot(days_on_market=-3)


def test_snapshots_are_frozen(baseline_snapshot):
    with pytest.raises(ValidationError):
        baseline_snapshot.asking_price = 1.0


def test_overrides_return_copies(baseline_snapshot):
    cheaper = baseline_snapshot.with_overrides(asking_price=250_000.0)
    assert cheaper.asking_price == 250_000.0
    assert baseline_snapshot.asking_price == 300_000.0

    higher_rate = baseline_snapshot.with_financing(interest_rate=0.08)
    assert higher_rate.financing.interest_rate == 0.08
    assert higher_rate.financing.loan_amount == baseline_snapshot.financing.loan_amount
    assert baseline_snapshot.financing.interest_rate == 0.07


def test_full_address(baseline_snapshot):
    assert baseline_snapshot.full_address == "123 Test St, Birmingham, MI 48009"


def test_property_age_uses_given_year():
    assert property_age(1990, as_of_year=2024) == 34
    assert property_age(2030, as_of_year=2024) == -6


def test_property_type_accepts_display_value():
    snapshot = PropertySnapshot(property_type="Duplex")
    assert snapshot.property_type is PropertyType.DUPLEX
