# src/dock/adapters/config.py
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppConfig(BaseSettings):
    # App & logging
    ENV: str = Field(default="dev")
    LOG_LEVEL: str = Field(default="INFO")

    # Snapshot defaults applied when a payload omits them
    DEFAULT_VACANCY_RATE: float = Field(default=0.05)
    DEFAULT_MANAGEMENT_FEE_PERCENT: float = Field(default=0.08)
    DEFAULT_REPAIRS_PER_UNIT: float = Field(default=1200.0)
    DEFAULT_INTEREST_RATE: float = Field(default=0.07)
    DEFAULT_LOAN_TERM_YEARS: int = Field(default=30)
    DEFAULT_LTV: float = Field(default=0.75)

    # -----------------------------
    # Investor thresholds
    # -----------------------------
    TARGET_CAP_RATE: float = Field(default=0.06)
    TARGET_CASH_ON_CASH: float = Field(default=0.08)
    TARGET_DSCR: float = Field(default=1.25)
    MAX_BREAK_EVEN_OCCUPANCY: float = Field(default=0.85)
    MIN_RENT_GROWTH: float = Field(default=0.02)
    MAX_VACANCY: float = Field(default=0.08)

    # Per $1000 of coverage, for states missing from the rate table
    INSURANCE_BASE_RATE_DEFAULT: float = Field(default=5.0)

    model_config = SettingsConfigDict(
        env_prefix="DOCK_",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator(
        "DEFAULT_VACANCY_RATE",
        "DEFAULT_MANAGEMENT_FEE_PERCENT",
        "DEFAULT_INTEREST_RATE",
        "DEFAULT_LTV",
        "TARGET_CAP_RATE",
        "TARGET_CASH_ON_CASH",
        "MAX_BREAK_EVEN_OCCUPANCY",
        "MIN_RENT_GROWTH",
        "MAX_VACANCY",
        mode="before",
    )
    @classmethod
    def _to_non_negative_fraction(cls, v: Any) -> Any:
        if v is None:
            return v
        if isinstance(v, str):
            v = v.strip().replace("%", "")
        try:
            f = float(v)
        except Exception as err:
            raise ValueError("rate must be numeric or percent-like") from err
        if f > 1.0:
            f = f / 100.0
        if f < 0:
            raise ValueError("rate must be non-negative")
        return f

    @field_validator("TARGET_DSCR", mode="before")
    @classmethod
    def _dscr_positive(cls, v: Any) -> Any:
        f = float(v)
        if f <= 0:
            raise ValueError("TARGET_DSCR must be > 0")
        return f


config = AppConfig()
