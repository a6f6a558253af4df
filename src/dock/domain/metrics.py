from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List


# ---------------------------------------------------------------------
# Layer 1: deal economics
# ---------------------------------------------------------------------

@dataclass(frozen=True)
class ExpenseBreakdown:
    taxes: float
    insurance: float
    management: float
    repairs: float
    capex_reserve: float
    utilities: float
    other: float
    expense_ratio: float    # total / effective gross income

    @property
    def total(self) -> float:
        return (
            self.taxes
            + self.insurance
            + self.management
            + self.repairs
            + self.capex_reserve
            + self.utilities
            + self.other
        )


@dataclass(frozen=True)
class DealEconomics:
    # Income (annual)
    gross_potential_rent: float
    effective_gross_income: float
    vacancy_loss: float

    # Expenses
    total_operating_expenses: float
    expense_breakdown: ExpenseBreakdown

    net_operating_income: float

    # Financing
    monthly_debt_service: float
    annual_debt_service: float
    dscr: float

    # Returns
    annual_cash_flow: float
    monthly_cash_flow: float
    cash_on_cash_return: float
    in_place_cap_rate: float
    stabilized_cap_rate: float

    # Price
    price_per_unit: float
    price_per_square_foot: float


# ---------------------------------------------------------------------
# Layer 2: market support
# ---------------------------------------------------------------------

class TrendDirection(str, Enum):
    UP = "up"
    DOWN = "down"
    STABLE = "stable"
    UNKNOWN = "unknown"


class SignalStrength(str, Enum):
    STRONG = "Strong"
    MODERATE = "Moderate"
    WEAK = "Weak"
    NEUTRAL = "Neutral"
    UNKNOWN = "Unknown"


@dataclass(frozen=True)
class MarketIndicator:
    value: float            # raw figure, 0.0 when unknown
    trend: TrendDirection
    signal: SignalStrength
    description: str = ""

    @property
    def is_known(self) -> bool:
        return self.signal is not SignalStrength.UNKNOWN


@dataclass(frozen=True)
class MarketSupport:
    rent_growth: MarketIndicator
    price_appreciation: MarketIndicator
    vacancy_trend: MarketIndicator
    days_on_market: MarketIndicator
    supply_trend: MarketIndicator
    demand_indicator: MarketIndicator


# ---------------------------------------------------------------------
# Layer 3: risk buffers
# ---------------------------------------------------------------------

@dataclass(frozen=True)
class SensitivityResult:
    label: str
    noi: float
    cash_flow: float
    cash_on_cash: float
    dscr: float
    delta_from_base: float  # cash flow delta, or valuation delta for exit-cap cases


@dataclass(frozen=True)
class SensitivityAnalysis:
    rent_up_10: SensitivityResult
    rent_down_10: SensitivityResult
    rate_up_1: SensitivityResult
    rate_down_1: SensitivityResult
    exit_cap_up_50bps: SensitivityResult
    exit_cap_down_50bps: SensitivityResult

    def scenarios(self) -> List[SensitivityResult]:
        return [
            self.rent_up_10,
            self.rent_down_10,
            self.rate_up_1,
            self.rate_down_1,
            self.exit_cap_up_50bps,
            self.exit_cap_down_50bps,
        ]


@dataclass(frozen=True)
class StressTestResults:
    worst_case_cash_flow: float
    max_vacancy_before_negative: float
    max_rate_before_negative: float
    cushion_to_break_even: float


@dataclass(frozen=True)
class RiskBuffers:
    break_even_occupancy: float
    sensitivity_analysis: SensitivityAnalysis
    stress_test_results: StressTestResults


# ---------------------------------------------------------------------
# Scoring
# ---------------------------------------------------------------------

class MetricScore(str, Enum):
    EXCEEDS = "Exceeds"
    MEETS = "Meets"
    BORDERLINE = "Borderline"
    FAILS = "Fails"

    @property
    def points(self) -> float:
        return _SCORE_POINTS[self]


_SCORE_POINTS = {
    MetricScore.EXCEEDS: 100.0,
    MetricScore.MEETS: 80.0,
    MetricScore.BORDERLINE: 50.0,
    MetricScore.FAILS: 20.0,
}


class MetricCategory(str, Enum):
    DEAL_ECONOMICS = "Deal Economics"
    MARKET_SUPPORT = "Market Support"
    RISK_BUFFERS = "Risk Buffers"


class MetricImportance(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"

    @property
    def weight(self) -> float:
        return _IMPORTANCE_WEIGHTS[self]


_IMPORTANCE_WEIGHTS = {
    MetricImportance.CRITICAL: 1.5,
    MetricImportance.HIGH: 1.0,
    MetricImportance.MEDIUM: 0.5,
}


@dataclass(frozen=True)
class ScoredMetric:
    name: str
    value: float
    display_value: str
    threshold: float
    display_threshold: str
    score: MetricScore
    category: MetricCategory
    importance: MetricImportance


class Recommendation(str, Enum):
    STRONG_BUY = "Strong Buy"
    BUY = "Buy"
    HOLD = "Hold"
    CAUTION = "Caution"
    PASS = "Pass"

    @property
    def description(self) -> str:
        return _RECOMMENDATION_TEXT[self]


_RECOMMENDATION_TEXT = {
    Recommendation.STRONG_BUY: "Excellent opportunity. All key metrics exceed targets with strong market support.",
    Recommendation.BUY: "Good investment. Metrics meet targets with acceptable risk profile.",
    Recommendation.HOLD: "Borderline deal. Some metrics meet targets but others need attention.",
    Recommendation.CAUTION: "Proceed carefully. Multiple metrics below target or significant risks present.",
    Recommendation.PASS: "Not recommended. Key metrics fail to meet minimum thresholds.",
}


@dataclass(frozen=True)
class DealMetrics:
    deal_economics: DealEconomics
    market_support: MarketSupport
    risk_buffers: RiskBuffers

    overall_score: float    # 0-100
    recommendation: Recommendation
    scored_metrics: List[ScoredMetric] = field(default_factory=list)
