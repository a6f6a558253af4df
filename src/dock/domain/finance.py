import math


def safe_divide(numerator: float, denominator: float) -> float:
    """numerator / denominator, or 0.0 when the denominator is zero or negative."""
    if denominator <= 0:
        return 0.0
    return numerator / denominator


def monthly_payment(
    principal: float,
    annual_rate: float,
    term_years: int,
    interest_only: bool = False,
) -> float:
    """
    Standard fixed-rate amortization formula:
    M = P * [ r / (1 - (1+r)^-n) ]
    P = loan principal
    r = monthly interest rate
    n = number of payments (months)

    (1+r)^-n goes through log1p/expm1 so a tiny rate still tends to P / n
    instead of collapsing to 1 - 1 = 0, and huge rates cannot overflow.

    No loan, no rate or no term means no debt service: returns 0.0.
    """
    if principal <= 0 or annual_rate <= 0 or term_years <= 0:
        return 0.0

    r = annual_rate / 12.0
    if interest_only:
        return principal * r

    n = term_years * 12
    discount = -math.expm1(-n * math.log1p(r))
    if discount <= 0:
        # rate too small to register once divided by 12
        return principal / n
    return principal * r / discount
