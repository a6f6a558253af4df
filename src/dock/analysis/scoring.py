# src/dock/analysis/scoring.py
from __future__ import annotations

from typing import List, Sequence, Tuple

from dock.domain.metrics import (
    DealEconomics,
    MarketSupport,
    MetricCategory,
    MetricImportance,
    MetricScore,
    Recommendation,
    RiskBuffers,
    ScoredMetric,
)
from dock.domain.property import PropertySnapshot

# Worst-case cash flow above this (but not positive) is borderline, below it fails
WORST_CASE_BORDERLINE_FLOOR = -5000.0


# =====================================================================
# Per-metric bands
# =====================================================================


def _at_least(value: float, target: float, exceeds: float, borderline: float) -> MetricScore:
    if value >= target * exceeds:
        return MetricScore.EXCEEDS
    if value >= target:
        return MetricScore.MEETS
    if value >= target * borderline:
        return MetricScore.BORDERLINE
    return MetricScore.FAILS


def _at_most(value: float, limit: float, exceeds: float, borderline: float) -> MetricScore:
    if value <= limit * exceeds:
        return MetricScore.EXCEEDS
    if value <= limit:
        return MetricScore.MEETS
    if value <= limit * borderline:
        return MetricScore.BORDERLINE
    return MetricScore.FAILS


def score_cap_rate(value: float, target: float) -> MetricScore:
    return _at_least(value, target, exceeds=1.10, borderline=0.85)


def score_cash_on_cash(value: float, target: float) -> MetricScore:
    return _at_least(value, target, exceeds=1.25, borderline=0.75)


def score_dscr(value: float, target: float) -> MetricScore:
    return _at_least(value, target, exceeds=1.15, borderline=0.90)


def score_rent_growth(value: float, target: float) -> MetricScore:
    return _at_least(value, target, exceeds=1.5, borderline=0.5)


def score_vacancy(value: float, max_vacancy: float) -> MetricScore:
    return _at_most(value, max_vacancy, exceeds=0.5, borderline=1.25)


def score_break_even(value: float, max_occupancy: float) -> MetricScore:
    return _at_most(value, max_occupancy, exceeds=0.8, borderline=1.1)


def score_noi(value: float) -> MetricScore:
    return MetricScore.MEETS if value > 0 else MetricScore.FAILS


def score_worst_case_cash_flow(value: float) -> MetricScore:
    if value > 0:
        return MetricScore.MEETS
    if value > WORST_CASE_BORDERLINE_FLOOR:
        return MetricScore.BORDERLINE
    return MetricScore.FAILS


# =====================================================================
# Display helpers
# =====================================================================


def _pct(value: float) -> str:
    return f"{value * 100:.2f}%"


def _currency(value: float) -> str:
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.0f}"


def _multiple(value: float) -> str:
    return f"{value:.2f}x"


# =====================================================================
# Scoring
# =====================================================================


def score_all_metrics(
    snapshot: PropertySnapshot,
    economics: DealEconomics,
    market: MarketSupport,
    risk: RiskBuffers,
) -> List[ScoredMetric]:
    t = snapshot.thresholds
    worst_case = risk.stress_test_results.worst_case_cash_flow

    return [
        # Deal economics
        ScoredMetric(
            name="Cap Rate",
            value=economics.in_place_cap_rate,
            display_value=_pct(economics.in_place_cap_rate),
            threshold=t.target_cap_rate,
            display_threshold=_pct(t.target_cap_rate),
            score=score_cap_rate(economics.in_place_cap_rate, t.target_cap_rate),
            category=MetricCategory.DEAL_ECONOMICS,
            importance=MetricImportance.CRITICAL,
        ),
        ScoredMetric(
            name="Cash-on-Cash",
            value=economics.cash_on_cash_return,
            display_value=_pct(economics.cash_on_cash_return),
            threshold=t.target_cash_on_cash,
            display_threshold=_pct(t.target_cash_on_cash),
            score=score_cash_on_cash(economics.cash_on_cash_return, t.target_cash_on_cash),
            category=MetricCategory.DEAL_ECONOMICS,
            importance=MetricImportance.CRITICAL,
        ),
        ScoredMetric(
            name="DSCR",
            value=economics.dscr,
            display_value=_multiple(economics.dscr),
            threshold=t.target_dscr,
            display_threshold=_multiple(t.target_dscr),
            score=score_dscr(economics.dscr, t.target_dscr),
            category=MetricCategory.DEAL_ECONOMICS,
            importance=MetricImportance.CRITICAL,
        ),
        ScoredMetric(
            name="NOI",
            value=economics.net_operating_income,
            display_value=_currency(economics.net_operating_income),
            threshold=0.0,
            display_threshold="> $0",
            score=score_noi(economics.net_operating_income),
            category=MetricCategory.DEAL_ECONOMICS,
            importance=MetricImportance.HIGH,
        ),
        # Market support
        ScoredMetric(
            name="Rent Growth",
            value=market.rent_growth.value,
            display_value=_pct(market.rent_growth.value),
            threshold=t.min_rent_growth,
            display_threshold=_pct(t.min_rent_growth),
            score=score_rent_growth(market.rent_growth.value, t.min_rent_growth),
            category=MetricCategory.MARKET_SUPPORT,
            importance=MetricImportance.MEDIUM,
        ),
        ScoredMetric(
            name="Vacancy",
            value=market.vacancy_trend.value,
            display_value=_pct(market.vacancy_trend.value),
            threshold=t.max_vacancy,
            display_threshold="< " + _pct(t.max_vacancy),
            score=score_vacancy(market.vacancy_trend.value, t.max_vacancy),
            category=MetricCategory.MARKET_SUPPORT,
            importance=MetricImportance.MEDIUM,
        ),
        # Risk buffers
        ScoredMetric(
            name="Break-even Occupancy",
            value=risk.break_even_occupancy,
            display_value=_pct(risk.break_even_occupancy),
            threshold=t.max_break_even_occupancy,
            display_threshold="< " + _pct(t.max_break_even_occupancy),
            score=score_break_even(risk.break_even_occupancy, t.max_break_even_occupancy),
            category=MetricCategory.RISK_BUFFERS,
            importance=MetricImportance.HIGH,
        ),
        ScoredMetric(
            name="Worst Case Cash Flow",
            value=worst_case,
            display_value=_currency(worst_case),
            threshold=0.0,
            display_threshold="> $0",
            score=score_worst_case_cash_flow(worst_case),
            category=MetricCategory.RISK_BUFFERS,
            importance=MetricImportance.HIGH,
        ),
    ]


def overall_score(metrics: Sequence[ScoredMetric]) -> float:
    """Importance-weighted mean of band points, 0-100. Empty input scores 0."""
    total_weight = sum(m.importance.weight for m in metrics)
    if total_weight <= 0:
        return 0.0
    weighted = sum(m.score.points * m.importance.weight for m in metrics)
    return weighted / total_weight


def determine_recommendation(score: float, metrics: Sequence[ScoredMetric]) -> Recommendation:
    # Hard fails first: any critical metric failing vetoes the deal.
    if any(m.importance is MetricImportance.CRITICAL and m.score is MetricScore.FAILS for m in metrics):
        return Recommendation.PASS

    borderline_count = sum(1 for m in metrics if m.score is MetricScore.BORDERLINE)
    fail_count = sum(1 for m in metrics if m.score is MetricScore.FAILS)

    if score >= 85 and fail_count == 0:
        return Recommendation.STRONG_BUY
    if score >= 70 and fail_count == 0:
        return Recommendation.BUY
    if score >= 55 or (borderline_count <= 2 and fail_count <= 1):
        return Recommendation.HOLD
    if score >= 40:
        return Recommendation.CAUTION
    return Recommendation.PASS


def score(
    snapshot: PropertySnapshot,
    economics: DealEconomics,
    market: MarketSupport,
    risk: RiskBuffers,
) -> Tuple[float, Recommendation, List[ScoredMetric]]:
    metrics = score_all_metrics(snapshot, economics, market, risk)
    overall = overall_score(metrics)
    return overall, determine_recommendation(overall, metrics), metrics
