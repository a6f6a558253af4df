from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PropertyType(str, Enum):
    SINGLE_FAMILY = "Single Family"
    MULTI_FAMILY = "Multi Family"
    CONDO = "Condo"
    TOWNHOUSE = "Townhouse"
    DUPLEX = "Duplex"
    TRIPLEX = "Triplex"
    FOURPLEX = "Fourplex"
    APARTMENT = "Apartment"
    LAND = "Land"
    COMMERCIAL = "Commercial"
    MOBILE = "Mobile"
    OTHER = "Other"


def property_age(year_built: int, as_of_year: int | None = None) -> int:
    year = as_of_year if as_of_year is not None else date.today().year
    return year - year_built


def _check_fraction(name: str, v: float) -> float:
    if not (0.0 <= v <= 1.0):
        raise ValueError(f"{name} must be between 0 and 1")
    return v


class FinancingTerms(BaseModel):
    """
    Loan terms for the acquisition.

    loan_amount and ltv describe the same thing; use with_loan_from_ltv()
    or with_ltv_from_loan() after editing one so the other follows.
    """
    model_config = ConfigDict(frozen=True)

    purchase_price: float = 0.0
    loan_amount: float = 0.0
    interest_rate: float = Field(default=0.07, description="Annual rate as decimal, 0.07 for 7%")
    loan_term_years: int = 30
    ltv: float = Field(default=0.75, description="Loan-to-value as decimal, 0.75 for 75%")
    closing_costs: float = 0.0
    is_interest_only: bool = False

    @field_validator("ltv")
    @classmethod
    def _ltv_range(cls, v: float) -> float:
        return _check_fraction("ltv", v)

    @field_validator("interest_rate")
    @classmethod
    def _rate_non_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError("interest_rate must be non-negative")
        return v

    @field_validator("loan_term_years")
    @classmethod
    def _term_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("loan_term_years must be non-negative")
        return v

    @property
    def down_payment(self) -> float:
        return self.purchase_price - self.loan_amount

    @property
    def down_payment_percent(self) -> float:
        if self.purchase_price <= 0:
            return 0.0
        return self.down_payment / self.purchase_price

    @property
    def total_cash_required(self) -> float:
        return self.down_payment + self.closing_costs

    def with_loan_from_ltv(self) -> FinancingTerms:
        return self.model_copy(update={"loan_amount": self.purchase_price * self.ltv})

    def with_ltv_from_loan(self) -> FinancingTerms:
        if self.purchase_price <= 0:
            return self
        return self.model_copy(update={"ltv": self.loan_amount / self.purchase_price})


class ScoringThresholds(BaseModel):
    model_config = ConfigDict(frozen=True)

    target_cap_rate: float = 0.06
    target_cash_on_cash: float = 0.08
    target_dscr: float = 1.25
    max_break_even_occupancy: float = 0.85
    min_rent_growth: float = 0.02
    max_vacancy: float = 0.08


class MarketSnapshot(BaseModel):
    """
    Submarket indicators as delivered by the market-data fetcher.
    None means the figure is unknown, never zero.
    """
    model_config = ConfigDict(frozen=True)

    fetched_at: datetime | None = None
    source: str = ""

    # Rent
    median_rent: float | None = None
    rent_growth_yoy: float | None = None
    rent_per_square_foot: float | None = None

    # Price
    median_home_price: float | None = None
    price_appreciation_yoy: float | None = None
    price_per_square_foot: float | None = None

    # Supply
    vacancy_rate: float | None = None
    days_on_market: int | None = Field(default=None, ge=0)
    inventory_months: float | None = None

    # Demand
    population_growth: float | None = None
    income_growth: float | None = None


class PropertySnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    # Location
    address: str = ""
    city: str = ""
    state: str = ""
    zipcode: str = ""

    # Physical
    asking_price: float = 0.0
    bedrooms: int = 0
    bathrooms: float = 0.0
    square_feet: int = 0
    year_built: int = 0
    property_type: PropertyType = PropertyType.SINGLE_FAMILY
    unit_count: int = Field(default=1, ge=1)

    # Tax
    tax_assessed_value: float = 0.0
    annual_taxes: float = 0.0

    # Rent (monthly)
    estimated_rent_per_unit: float = 0.0
    estimated_total_rent: float = 0.0

    # Expense assumptions
    vacancy_rate: float = 0.05
    management_fee_percent: float = 0.08
    repairs_per_unit: float = 1200.0
    insurance_annual: float = 0.0
    other_expenses: float = 0.0

    financing: FinancingTerms = Field(default_factory=FinancingTerms)
    thresholds: ScoringThresholds = Field(default_factory=ScoringThresholds)
    market_data: MarketSnapshot | None = None

    @field_validator("vacancy_rate", "management_fee_percent")
    @classmethod
    def _fraction_range(cls, v: float, info) -> float:
        return _check_fraction(info.field_name, v)

    @property
    def full_address(self) -> str:
        return f"{self.address}, {self.city}, {self.state} {self.zipcode}"

    def with_overrides(self, **changes: Any) -> PropertySnapshot:
        """
        Copy of this snapshot with the given fields replaced.

        Used to build sensitivity and stress scenarios; the copy is not
        re-validated, so a scenario may push a field past the bounds a
        caller is allowed to supply.
        """
        return self.model_copy(update=changes)

    def with_financing(self, **changes: Any) -> PropertySnapshot:
        return self.model_copy(update={"financing": self.financing.model_copy(update=changes)})
