from __future__ import annotations

from typing import Any

from dock.adapters.logging_utils import get_logger
from dock.analysis.finance import compute_deal_economics
from dock.analysis.market import compute_market_support
from dock.analysis.risk import compute_risk_buffers
from dock.analysis.scoring import score
from dock.domain.metrics import DealMetrics
from dock.domain.ports import InsuranceEstimator
from dock.domain.property import PropertySnapshot
from dock.services.validation import prepare_snapshot_payload

logger = get_logger(__name__)


def calculate_metrics(
    snapshot: PropertySnapshot,
    *,
    insurance_estimator: InsuranceEstimator | None = None,
    as_of_year: int | None = None,
) -> DealMetrics:
    """
    Main analysis entrypoint.

    Runs the three layers (deal economics, market support, risk buffers),
    scores them against the snapshot's thresholds and derives the
    recommendation. Nothing is cached: every call recomputes from scratch.

    insurance_estimator is only consulted when the snapshot carries no
    insurance figure; as_of_year pins "today" for property-age rules.
    """
    economics = compute_deal_economics(
        snapshot,
        insurance_estimator=insurance_estimator,
        as_of_year=as_of_year,
    )
    market = compute_market_support(snapshot.market_data)
    risk = compute_risk_buffers(
        snapshot,
        economics,
        insurance_estimator=insurance_estimator,
        as_of_year=as_of_year,
    )
    overall, recommendation, scored = score(snapshot, economics, market, risk)

    logger.info(
        "underwriting_completed",
        extra={
            "context": {
                "address": snapshot.full_address,
                "noi": round(economics.net_operating_income, 2),
                "dscr": round(economics.dscr, 4),
                "overall_score": round(overall, 2),
                "recommendation": recommendation.value,
            }
        },
    )

    return DealMetrics(
        deal_economics=economics,
        market_support=market,
        risk_buffers=risk,
        overall_score=overall,
        recommendation=recommendation,
        scored_metrics=scored,
    )


def analyze_payload(
    raw_payload: dict[str, Any],
    *,
    insurance_estimator: InsuranceEstimator | None = None,
    as_of_year: int | None = None,
) -> DealMetrics:
    """
    Loose dict in, metrics out. Raises ValueError (including pydantic's
    ValidationError) when the payload cannot describe a property.
    """
    payload = prepare_snapshot_payload(raw_payload)
    snapshot = PropertySnapshot(**payload)
    return calculate_metrics(snapshot, insurance_estimator=insurance_estimator, as_of_year=as_of_year)
