from __future__ import annotations

from dock.adapters.config import config
from dock.adapters.logging_utils import get_logger
from dock.domain.ports import InsuranceEstimate
from dock.domain.property import PropertyType, property_age

logger = get_logger(__name__)

# Average annual premium per $1000 of coverage
_STATE_BASE_RATES: dict[str, float] = {
    "AL": 6.5, "AK": 5.0, "AZ": 4.5, "AR": 6.0, "CA": 4.8,
    "CO": 5.5, "CT": 5.2, "DE": 4.8, "FL": 9.5, "GA": 5.8,
    "HI": 3.5, "ID": 4.0, "IL": 5.0, "IN": 4.8, "IA": 5.5,
    "KS": 7.0, "KY": 5.2, "LA": 8.5, "ME": 4.2, "MD": 4.5,
    "MA": 4.8, "MI": 5.0, "MN": 5.2, "MS": 7.5, "MO": 6.0,
    "MT": 4.5, "NE": 6.5, "NV": 4.0, "NH": 4.5, "NJ": 5.0,
    "NM": 4.8, "NY": 5.5, "NC": 5.5, "ND": 5.8, "OH": 4.5,
    "OK": 8.0, "OR": 3.8, "PA": 4.5, "RI": 5.5, "SC": 6.0,
    "SD": 5.5, "TN": 5.5, "TX": 7.5, "UT": 4.0, "VT": 4.5,
    "VA": 4.5, "WA": 4.0, "WV": 4.8, "WI": 4.5, "WY": 4.5,
}

_TYPE_ADJUSTMENTS: dict[PropertyType, float] = {
    PropertyType.SINGLE_FAMILY: 1.0,
    PropertyType.CONDO: 0.85,
    PropertyType.TOWNHOUSE: 0.95,
    PropertyType.MULTI_FAMILY: 1.15,
    PropertyType.DUPLEX: 1.15,
    PropertyType.TRIPLEX: 1.15,
    PropertyType.FOURPLEX: 1.15,
    PropertyType.APARTMENT: 1.20,
    PropertyType.MOBILE: 1.50,
    PropertyType.COMMERCIAL: 1.40,
    PropertyType.LAND: 0.10,
    PropertyType.OTHER: 1.0,
}

# Simplified stand-in for a FEMA flood-zone lookup
_HIGH_FLOOD_RISK_STATES = {"FL", "LA", "TX", "NC", "SC", "MS", "AL"}

COVERAGE_RATIO = 0.80
FLOOD_RATE_PER_1000 = 3.5   # NFIP average
MIN_DEDUCTIBLE = 1000.0


def _age_adjustment(age: int) -> float:
    if 0 <= age <= 10:
        return 0.85
    if 11 <= age <= 20:
        return 0.95
    if 21 <= age <= 30:
        return 1.0
    if 31 <= age <= 50:
        return 1.15
    return 1.30


def _size_adjustment(square_feet: int) -> float:
    if 0 <= square_feet <= 1500:
        return 0.90
    if 1501 <= square_feet <= 2500:
        return 1.0
    if 2501 <= square_feet <= 4000:
        return 1.10
    return 1.20


class StateRateInsuranceEstimator:
    """
    Rule-of-thumb homeowner's premium from a state rate table, adjusted for
    age, property type and size. Flood cover is added for high-risk states.
    """

    def __init__(self, as_of_year: int | None = None, default_base_rate: float | None = None) -> None:
        self.as_of_year = as_of_year
        self.default_base_rate = (
            default_base_rate if default_base_rate is not None else config.INSURANCE_BASE_RATE_DEFAULT
        )

    def base_rate(self, state: str) -> float:
        return _STATE_BASE_RATES.get(state.strip().upper(), self.default_base_rate)

    def estimate(
        self,
        *,
        property_value: float,
        square_feet: int,
        year_built: int,
        state: str,
        property_type: PropertyType,
    ) -> InsuranceEstimate:
        coverage = property_value * COVERAGE_RATIO
        adjusted_rate = (
            self.base_rate(state)
            * _age_adjustment(property_age(year_built, self.as_of_year))
            * _TYPE_ADJUSTMENTS.get(property_type, 1.0)
            * _size_adjustment(square_feet)
        )
        annual_premium = (coverage / 1000.0) * adjusted_rate

        is_flood_zone = state.strip().upper() in _HIGH_FLOOD_RISK_STATES
        flood = (coverage / 1000.0) * FLOOD_RATE_PER_1000 if is_flood_zone else None

        estimate = InsuranceEstimate(
            source="Estimate",
            annual_premium=annual_premium,
            coverage=coverage,
            deductible=max(MIN_DEDUCTIBLE, coverage * 0.01),
            is_flood_zone=is_flood_zone,
            flood_insurance=flood,
        )
        logger.debug(
            "insurance_estimated",
            extra={"context": {"state": state, "total_annual_cost": estimate.total_annual_cost}},
        )
        return estimate
