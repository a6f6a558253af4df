from __future__ import annotations

from typing import Callable, Optional

from dock.domain.metrics import MarketIndicator, MarketSupport, SignalStrength, TrendDirection
from dock.domain.property import MarketSnapshot

# Moves smaller than this either way count as flat
TREND_BAND = 0.02


def determine_trend(value: Optional[float], positive_is_good: bool) -> TrendDirection:
    if value is None:
        return TrendDirection.UNKNOWN
    if value > TREND_BAND:
        return TrendDirection.UP if positive_is_good else TrendDirection.DOWN
    if value < -TREND_BAND:
        return TrendDirection.DOWN if positive_is_good else TrendDirection.UP
    return TrendDirection.STABLE


def _higher_is_better(strong: float, moderate: float, floor: float, at_floor: SignalStrength):
    def signal(value: Optional[float]) -> SignalStrength:
        if value is None:
            return SignalStrength.UNKNOWN
        if value >= strong:
            return SignalStrength.STRONG
        if value >= moderate:
            return SignalStrength.MODERATE
        if value >= floor:
            return at_floor
        return SignalStrength.WEAK
    return signal


def _lower_is_better(strong: float, moderate: float):
    def signal(value: Optional[float]) -> SignalStrength:
        if value is None:
            return SignalStrength.UNKNOWN
        if value <= strong:
            return SignalStrength.STRONG
        if value <= moderate:
            return SignalStrength.MODERATE
        return SignalStrength.WEAK
    return signal


rent_growth_signal = _higher_is_better(0.05, 0.02, 0.0, SignalStrength.WEAK)
price_appreciation_signal = _higher_is_better(0.05, 0.02, 0.0, SignalStrength.WEAK)
demand_signal = _higher_is_better(0.02, 0.01, 0.0, SignalStrength.NEUTRAL)
vacancy_signal = _lower_is_better(0.03, 0.06)
days_on_market_signal = _lower_is_better(14, 30)
supply_signal = _lower_is_better(2.0, 4.0)


def _indicator(
    value: Optional[float],
    positive_is_good: bool,
    signal: Callable[[Optional[float]], SignalStrength],
    description: str,
) -> MarketIndicator:
    return MarketIndicator(
        value=float(value) if value is not None else 0.0,
        trend=determine_trend(value, positive_is_good),
        signal=signal(value),
        description=description,
    )


def compute_market_support(market: MarketSnapshot | None) -> MarketSupport:
    """
    Classify the submarket. Missing data (no snapshot, or a None field)
    gives UNKNOWN trend and signal with a 0.0 raw value.
    """
    m = market or MarketSnapshot()
    dom = float(m.days_on_market) if m.days_on_market is not None else None

    return MarketSupport(
        rent_growth=_indicator(
            m.rent_growth_yoy, True, rent_growth_signal,
            "Year-over-year rent growth in submarket",
        ),
        price_appreciation=_indicator(
            m.price_appreciation_yoy, True, price_appreciation_signal,
            "Year-over-year home price appreciation",
        ),
        vacancy_trend=_indicator(
            m.vacancy_rate, False, vacancy_signal,
            "Current submarket vacancy rate",
        ),
        days_on_market=_indicator(
            dom, False, days_on_market_signal,
            "Average days on market",
        ),
        supply_trend=_indicator(
            m.inventory_months, False, supply_signal,
            "Months of housing inventory",
        ),
        demand_indicator=_indicator(
            m.population_growth, True, demand_signal,
            "Population growth trend",
        ),
    )
