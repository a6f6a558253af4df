# src/dock/domain/ports.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from dock.domain.property import PropertyType


# ----------------------------
# Insurance estimator interface
# ----------------------------

@dataclass(frozen=True)
class InsuranceEstimate:
    source: str
    annual_premium: float
    coverage: float
    deductible: float
    is_flood_zone: bool = False
    flood_insurance: float | None = None

    @property
    def total_annual_cost(self) -> float:
        return self.annual_premium + (self.flood_insurance or 0.0)


class InsuranceEstimator(Protocol):
    def estimate(
        self,
        *,
        property_value: float,
        square_feet: int,
        year_built: int,
        state: str,
        property_type: PropertyType,
    ) -> InsuranceEstimate:
        ...
