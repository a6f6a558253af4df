import pytest

from dock.analysis.finance import compute_deal_economics
from dock.analysis.risk import (
    RATE_SCAN_LIMIT,
    VACANCY_SCAN_LIMIT,
    break_even_occupancy,
    compute_risk_buffers,
    scan_until_negative,
)


@pytest.fixture
def baseline_risk(baseline_snapshot, as_of_year):
    econ = compute_deal_economics(baseline_snapshot, as_of_year=as_of_year)
    return econ, compute_risk_buffers(baseline_snapshot, econ, as_of_year=as_of_year)


def test_break_even_is_clamped_to_one(baseline_risk):
    _, risk = baseline_risk
    # (3000 + 1200 + 17963.17) / (24000 * 0.92) is just above 1
    assert risk.break_even_occupancy == 1.0


def test_break_even_without_debt(all_cash_snapshot, as_of_year):
    econ = compute_deal_economics(all_cash_snapshot, as_of_year=as_of_year)
    assert break_even_occupancy(econ) == pytest.approx(4200.0 / 22_080.0)


def test_break_even_without_rent_is_full_occupancy(baseline_snapshot, as_of_year):
    snapshot = baseline_snapshot.with_overrides(estimated_total_rent=0.0)
    econ = compute_deal_economics(snapshot, as_of_year=as_of_year)
    assert break_even_occupancy(econ) == 1.0


def test_break_even_with_full_management_fee_does_not_divide_by_zero(baseline_snapshot, as_of_year):
    snapshot = baseline_snapshot.with_overrides(management_fee_percent=1.0)
    econ = compute_deal_economics(snapshot, as_of_year=as_of_year)
    assert break_even_occupancy(econ) == 1.0


def test_rent_sensitivity(baseline_risk):
    econ, risk = baseline_risk
    s = risk.sensitivity_analysis

    assert s.rent_up_10.label == "Rent +10%"
    assert s.rent_up_10.noi == pytest.approx(17_448.6)
    assert s.rent_up_10.delta_from_base == pytest.approx(2_097.6)

    assert s.rent_down_10.label == "Rent -10%"
    assert s.rent_down_10.noi == pytest.approx(13_253.4)
    assert s.rent_down_10.delta_from_base == pytest.approx(-2_097.6)


def test_rate_sensitivity(baseline_risk):
    econ, risk = baseline_risk
    s = risk.sensitivity_analysis

    assert s.rate_up_1.label == "Rate +1%"
    assert s.rate_up_1.noi == pytest.approx(econ.net_operating_income)
    assert s.rate_up_1.cash_flow == pytest.approx(-4_460.64, abs=0.01)
    assert s.rate_up_1.delta_from_base == pytest.approx(-1_848.48, abs=0.01)

    assert s.rate_down_1.label == "Rate -1%"
    assert s.rate_down_1.cash_flow == pytest.approx(-836.86, abs=0.01)
    assert s.rate_down_1.dscr > econ.dscr


def test_exit_cap_scenarios_revalue_without_touching_operations(baseline_risk):
    econ, risk = baseline_risk
    s = risk.sensitivity_analysis

    for scenario in (s.exit_cap_up_50bps, s.exit_cap_down_50bps):
        assert scenario.noi == econ.net_operating_income
        assert scenario.cash_flow == econ.annual_cash_flow
        assert scenario.cash_on_cash == econ.cash_on_cash_return
        assert scenario.dscr == econ.dscr

    assert s.exit_cap_up_50bps.label == "Exit Cap +50bps"
    assert s.exit_cap_up_50bps.delta_from_base == pytest.approx(-26_704.65, abs=0.01)
    assert s.exit_cap_down_50bps.label == "Exit Cap -50bps"
    assert s.exit_cap_down_50bps.delta_from_base == pytest.approx(32_488.63, abs=0.01)


def test_exit_cap_down_is_floored(baseline_snapshot, as_of_year):
    # tiny NOI -> cap rate near zero, the down case uses the 1% floor
    snapshot = baseline_snapshot.with_overrides(estimated_total_rent=700.0)
    econ = compute_deal_economics(snapshot, as_of_year=as_of_year)
    risk = compute_risk_buffers(snapshot, econ, as_of_year=as_of_year)

    expected = econ.net_operating_income / 0.01 - snapshot.asking_price
    assert risk.sensitivity_analysis.exit_cap_down_50bps.delta_from_base == pytest.approx(expected)


def test_sensitivity_does_not_mutate_snapshot(baseline_snapshot, as_of_year):
    before = baseline_snapshot.model_dump()
    econ = compute_deal_economics(baseline_snapshot, as_of_year=as_of_year)
    compute_risk_buffers(baseline_snapshot, econ, as_of_year=as_of_year)
    assert baseline_snapshot.model_dump() == before


def test_stress_test_for_negative_deal(baseline_risk):
    econ, risk = baseline_risk
    st = risk.stress_test_results

    # rent 1800, vacancy 10%, repairs 1320
    assert st.worst_case_cash_flow == pytest.approx(12_139.8 - 17_963.167, abs=0.01)
    # already negative at the current vacancy and rate
    assert st.max_vacancy_before_negative == pytest.approx(0.05)
    assert st.max_rate_before_negative == pytest.approx(0.07)
    assert st.cushion_to_break_even == pytest.approx(econ.annual_cash_flow / 24_000.0)


def test_stress_test_for_all_cash_deal(all_cash_snapshot, as_of_year):
    econ = compute_deal_economics(all_cash_snapshot, as_of_year=as_of_year)
    st = compute_risk_buffers(all_cash_snapshot, econ, as_of_year=as_of_year).stress_test_results

    # NOI = 22080 * (1 - v) - 5625 first turns negative at 75%
    assert st.max_vacancy_before_negative == pytest.approx(0.75)
    # no debt: rate never matters, the scan stops at its bound
    assert st.max_rate_before_negative == RATE_SCAN_LIMIT
    assert st.worst_case_cash_flow > 0


def test_scan_returns_limit_when_never_negative():
    calls = []

    def always_positive(value):
        calls.append(value)
        return 1.0

    assert scan_until_negative(0.0, 0.01, VACANCY_SCAN_LIMIT, always_positive) == VACANCY_SCAN_LIMIT
    assert len(calls) == 100
    assert max(calls) < VACANCY_SCAN_LIMIT


def test_scan_returns_first_negative_step():
    assert scan_until_negative(0.05, 0.01, 1.0, lambda v: 0.30 - v) == pytest.approx(0.31)


def test_scan_starting_past_the_limit_returns_start():
    calls = []
    assert scan_until_negative(1.2, 0.01, 1.0, lambda v: calls.append(v) or 1.0) == 1.2
    assert calls == []


def test_scenarios_lists_all_six_in_order(baseline_risk):
    _, risk = baseline_risk
    labels = [s.label for s in risk.sensitivity_analysis.scenarios()]
    assert labels == [
        "Rent +10%",
        "Rent -10%",
        "Rate +1%",
        "Rate -1%",
        "Exit Cap +50bps",
        "Exit Cap -50bps",
    ]
