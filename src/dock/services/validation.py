# src/dock/services/validation.py

from typing import Any

from dock.adapters.config import config
from dock.domain.property import PropertyType

# Core fields that are truly required to reason about a deal
REQUIRED_CORE_FIELDS = [
    "asking_price",
]

_OPTIONAL_FLOAT_FIELDS = [
    "bathrooms",
    "tax_assessed_value",
    "annual_taxes",
    "estimated_rent_per_unit",
    "estimated_total_rent",
    "insurance_annual",
    "other_expenses",
]

_OPTIONAL_INT_FIELDS = [
    "bedrooms",
    "square_feet",
    "year_built",
]

_TEXT_FIELDS = ["address", "city", "state", "zipcode"]


def _to_num(val: Any, field_name: str) -> float:
    """
    Coerce values like:
      - 250000
      - "250000"
      - "6.5"
      - "6.5%"
      - 0.065
    into float.
    """
    if val is None:
        raise ValueError(f"Missing required numeric field: {field_name}")
    if isinstance(val, bool):
        raise ValueError(f"Invalid type for {field_name}: {type(val)}")
    if isinstance(val, (int, float)):
        return float(val)
    if isinstance(val, str):
        s = val.strip().replace(",", "").replace("$", "")
        if s.endswith("%"):
            # strip '%' but leave normalization decision to caller
            s = s[:-1]
        try:
            return float(s)
        except ValueError:
            raise ValueError(f"Invalid number for {field_name}: {val!r}") from None
    raise ValueError(f"Invalid type for {field_name}: {type(val)}")


def _to_num_optional(val: Any) -> float:
    """
    Lenient converter for optional numeric fields.
    Returns 0.0 when missing/blank/garbage.
    """
    if val is None or isinstance(val, bool):
        return 0.0
    if isinstance(val, (int, float)):
        return float(val)
    if isinstance(val, str):
        s = val.strip().replace(",", "").replace("$", "")
        if not s:
            return 0.0
        if s.endswith("%"):
            s = s[:-1]
        try:
            return float(s)
        except ValueError:
            return 0.0
    return 0.0


def _to_fraction(val: Any, field_name: str) -> float:
    """Percent-like input to a decimal fraction: "6.5%", "6.5", 6.5 and 0.065 all give 0.065."""
    is_percent_text = isinstance(val, str) and val.strip().endswith("%")
    f = _to_num(val, field_name)
    # If someone passes 25 instead of 0.25, normalize.
    if is_percent_text or abs(f) > 1.0:
        f /= 100.0
    return f


def _to_int(val: Any, field_name: str) -> int:
    try:
        return int(float(val))
    except (TypeError, ValueError):
        raise ValueError(f"Invalid {field_name}") from None


def _or_default(raw: dict[str, Any], key: str, default: Any) -> Any:
    """raw[key], or the default when the key is missing, None or blank."""
    val = raw.get(key)
    if val is None or (isinstance(val, str) and not val.strip()):
        return default
    return val


_TRUE_TEXT = {"true", "1", "yes", "y"}
_FALSE_TEXT = {"false", "0", "no", "n", ""}


def _to_bool(val: Any, field_name: str) -> bool:
    if val is None:
        return False
    if isinstance(val, bool):
        return val
    if isinstance(val, (int, float)):
        return val != 0
    if isinstance(val, str):
        s = val.strip().lower()
        if s in _TRUE_TEXT:
            return True
        if s in _FALSE_TEXT:
            return False
    raise ValueError(f"Invalid boolean for {field_name}: {val!r}")


def _normalize_property_type(raw_type: Any) -> PropertyType:
    """
    Accept the display value ("Single Family"), the member name
    ("SINGLE_FAMILY") or loose spellings ("single-family", "sfh").
    Unknown descriptions map to OTHER.
    """
    if isinstance(raw_type, PropertyType):
        return raw_type
    t = str(raw_type or "").strip()
    if not t:
        return PropertyType.SINGLE_FAMILY

    key = t.lower().replace("_", " ").replace("-", " ")
    for member in PropertyType:
        if key == member.value.lower():
            return member
    if key in {"sfh", "sfr"}:
        return PropertyType.SINGLE_FAMILY
    if key in {"multifamily", "multi family"}:
        return PropertyType.MULTI_FAMILY
    if key in {"4plex", "quadplex"}:
        return PropertyType.FOURPLEX
    return PropertyType.OTHER


def _prepare_financing(raw: dict[str, Any]) -> dict[str, Any]:
    return {
        "purchase_price": _to_num_optional(raw.get("purchase_price")),
        "loan_amount": _to_num_optional(raw.get("loan_amount")),
        "interest_rate": _to_fraction(
            _or_default(raw, "interest_rate", config.DEFAULT_INTEREST_RATE), "interest_rate"
        ),
        "loan_term_years": _to_int(
            _or_default(raw, "loan_term_years", config.DEFAULT_LOAN_TERM_YEARS), "loan_term_years"
        ),
        "ltv": _to_fraction(_or_default(raw, "ltv", config.DEFAULT_LTV), "ltv"),
        "closing_costs": _to_num_optional(raw.get("closing_costs")),
        "is_interest_only": _to_bool(raw.get("is_interest_only"), "is_interest_only"),
    }


def _prepare_thresholds(raw: dict[str, Any]) -> dict[str, Any]:
    return {
        "target_cap_rate": _to_fraction(
            _or_default(raw, "target_cap_rate", config.TARGET_CAP_RATE), "target_cap_rate"
        ),
        "target_cash_on_cash": _to_fraction(
            _or_default(raw, "target_cash_on_cash", config.TARGET_CASH_ON_CASH), "target_cash_on_cash"
        ),
        "target_dscr": _to_num(_or_default(raw, "target_dscr", config.TARGET_DSCR), "target_dscr"),
        "max_break_even_occupancy": _to_fraction(
            _or_default(raw, "max_break_even_occupancy", config.MAX_BREAK_EVEN_OCCUPANCY), "max_break_even_occupancy"
        ),
        "min_rent_growth": _to_fraction(
            _or_default(raw, "min_rent_growth", config.MIN_RENT_GROWTH), "min_rent_growth"
        ),
        "max_vacancy": _to_fraction(_or_default(raw, "max_vacancy", config.MAX_VACANCY), "max_vacancy"),
    }


def prepare_snapshot_payload(raw: dict[str, Any]) -> dict[str, Any]:
    """
    Normalize an incoming property payload into PropertySnapshot kwargs.

    Responsibilities:
      - Ensure the asking price exists and is numeric.
      - Normalize numeric/percent fields (strings, "$", ",", "%").
      - Apply configured defaults for omitted expense assumptions,
        financing terms and investor thresholds.
      - Leave market_data as a mapping; the model validates it.
    """
    # 1. Check core required fields
    for field in REQUIRED_CORE_FIELDS:
        if field not in raw:
            raise ValueError(f"Missing required field: {field}")

    cleaned: dict[str, Any] = {}
    for field in _TEXT_FIELDS:
        cleaned[field] = str(raw.get(field) or "")

    # 2. Required core numeric
    cleaned["asking_price"] = _to_num(raw["asking_price"], "asking_price")

    # 3. Optional physical / income fields
    for field in _OPTIONAL_FLOAT_FIELDS:
        cleaned[field] = _to_num_optional(raw.get(field))
    for field in _OPTIONAL_INT_FIELDS:
        cleaned[field] = int(_to_num_optional(raw.get(field)))
    cleaned["unit_count"] = _to_int(_or_default(raw, "unit_count", 1), "unit_count")
    cleaned["property_type"] = _normalize_property_type(raw.get("property_type"))

    # 4. Expense assumptions with defaults if missing or null
    cleaned["vacancy_rate"] = _to_fraction(
        _or_default(raw, "vacancy_rate", config.DEFAULT_VACANCY_RATE), "vacancy_rate"
    )
    cleaned["management_fee_percent"] = _to_fraction(
        _or_default(raw, "management_fee_percent", config.DEFAULT_MANAGEMENT_FEE_PERCENT), "management_fee_percent"
    )
    cleaned["repairs_per_unit"] = _to_num(
        _or_default(raw, "repairs_per_unit", config.DEFAULT_REPAIRS_PER_UNIT), "repairs_per_unit"
    )

    # 5. Nested values
    cleaned["financing"] = _prepare_financing(raw.get("financing") or {})
    cleaned["thresholds"] = _prepare_thresholds(raw.get("thresholds") or {})
    if raw.get("market_data") is not None:
        cleaned["market_data"] = raw["market_data"]

    return cleaned
