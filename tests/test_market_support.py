import pytest

from dock.analysis.market import (
    compute_market_support,
    days_on_market_signal,
    demand_signal,
    determine_trend,
    price_appreciation_signal,
    rent_growth_signal,
    supply_signal,
    vacancy_signal,
)
from dock.domain.metrics import SignalStrength, TrendDirection
from dock.domain.property import MarketSnapshot


@pytest.mark.parametrize(
    "value, positive_is_good, expected",
    [
        (0.05, True, TrendDirection.UP),
        (-0.05, True, TrendDirection.DOWN),
        (0.02, True, TrendDirection.STABLE),
        (-0.02, True, TrendDirection.STABLE),
        (0.05, False, TrendDirection.DOWN),
        (-0.05, False, TrendDirection.UP),
        (0.0, False, TrendDirection.STABLE),
        (None, True, TrendDirection.UNKNOWN),
        (None, False, TrendDirection.UNKNOWN),
    ],
)
def test_trend_polarity(value, positive_is_good, expected):
    assert determine_trend(value, positive_is_good) is expected


@pytest.mark.parametrize(
    "value, expected",
    [
        (0.06, SignalStrength.STRONG),
        (0.05, SignalStrength.STRONG),
        (0.03, SignalStrength.MODERATE),
        (0.0, SignalStrength.WEAK),
        (-0.03, SignalStrength.WEAK),
        (None, SignalStrength.UNKNOWN),
    ],
)
def test_growth_signals(value, expected):
    assert rent_growth_signal(value) is expected
    assert price_appreciation_signal(value) is expected


@pytest.mark.parametrize(
    "value, expected",
    [
        (0.03, SignalStrength.STRONG),
        (0.05, SignalStrength.MODERATE),
        (0.08, SignalStrength.WEAK),
        (0.20, SignalStrength.WEAK),
        (None, SignalStrength.UNKNOWN),
    ],
)
def test_vacancy_signal(value, expected):
    assert vacancy_signal(value) is expected


@pytest.mark.parametrize(
    "value, expected",
    [(7, SignalStrength.STRONG), (14, SignalStrength.STRONG), (30, SignalStrength.MODERATE), (45, SignalStrength.WEAK), (120, SignalStrength.WEAK)],
)
def test_days_on_market_signal(value, expected):
    assert days_on_market_signal(value) is expected


@pytest.mark.parametrize(
    "value, expected",
    [(1.5, SignalStrength.STRONG), (3.0, SignalStrength.MODERATE), (5.0, SignalStrength.WEAK), (9.0, SignalStrength.WEAK)],
)
def test_supply_signal(value, expected):
    assert supply_signal(value) is expected


@pytest.mark.parametrize(
    "value, expected",
    [
        (0.03, SignalStrength.STRONG),
        (0.015, SignalStrength.MODERATE),
        (0.005, SignalStrength.NEUTRAL),
        (0.0, SignalStrength.NEUTRAL),
        (-0.01, SignalStrength.WEAK),
    ],
)
def test_demand_signal(value, expected):
    assert demand_signal(value) is expected


def test_no_market_data_is_all_unknown():
    support = compute_market_support(None)
    for indicator in (
        support.rent_growth,
        support.price_appreciation,
        support.vacancy_trend,
        support.days_on_market,
        support.supply_trend,
        support.demand_indicator,
    ):
        assert indicator.value == 0.0
        assert indicator.trend is TrendDirection.UNKNOWN
        assert indicator.signal is SignalStrength.UNKNOWN
        assert not indicator.is_known


def test_full_market_snapshot():
    market = MarketSnapshot(
        rent_growth_yoy=0.045,
        price_appreciation_yoy=-0.03,
        vacancy_rate=0.04,
        days_on_market=21,
        inventory_months=1.8,
        population_growth=None,
    )
    support = compute_market_support(market)

    assert support.rent_growth.value == pytest.approx(0.045)
    assert support.rent_growth.trend is TrendDirection.UP
    assert support.rent_growth.signal is SignalStrength.MODERATE

    assert support.price_appreciation.trend is TrendDirection.DOWN
    assert support.price_appreciation.signal is SignalStrength.WEAK

    # vacancy 4% is above the band, which is bad
    assert support.vacancy_trend.trend is TrendDirection.DOWN
    assert support.vacancy_trend.signal is SignalStrength.MODERATE

    assert support.days_on_market.value == pytest.approx(21.0)
    assert support.days_on_market.signal is SignalStrength.MODERATE
    assert support.supply_trend.signal is SignalStrength.STRONG

    assert support.demand_indicator.signal is SignalStrength.UNKNOWN
    assert support.demand_indicator.trend is TrendDirection.UNKNOWN
