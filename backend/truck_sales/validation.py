from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy import Boolean, Integer, String, Text
from sqlalchemy.orm import DeclarativeMeta

from .models.inventory import LISTING_TYPES, TRUCK_STATUSES, LEASE_ONLY_FIELDS
from .models.leads import INQUIRY_TYPES, INQUIRY_STATUSES, FINANCING_STATUSES
from .time_utils import utcnow


# Money ceiling: $9,999,999.99
MAX_PRICE_CENTS = 999_999_999

MIN_TRUCK_YEAR = 1900

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class ValidationError(ValueError):
    """400-level input problem, optionally tied to one field."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field

    def to_dict(self) -> dict:
        return {
            "error": "Invalid data",
            "details": [{"field": self.field, "message": str(self)}],
        }


class ConflictError(ValueError):
    """409-level business rule conflict (e.g., duplicate VIN)."""


@dataclass(frozen=True)
class ModelValidationPolicy:
    """
    Per-endpoint allowlist applied on top of column metadata.

    writable_fields: keys a client may send; anything else is rejected.
    required_on_create: keys that must be present when partial=False.
    list_fields: non-column keys carrying a list of strings (child rows
    such as truck images and features).
    list_item_lengths: per list field, the width of the child column each
    item is stored in.
    """
    writable_fields: set[str]
    required_on_create: set[str] = frozenset()
    list_fields: set[str] = frozenset()
    list_item_lengths: dict[str, int] = field(default_factory=dict)


def _columns(model: DeclarativeMeta) -> dict[str, Any]:
    return {c.key: c for c in model.__mapper__.columns}


_PLAIN_INT_RE = re.compile(r"^-?\d+$")


def _coerce_int(key: str, value: Any) -> int:
    # bool is an int subclass; JSON true/false is never a number here
    if isinstance(value, bool):
        raise ValidationError(f"{key} must be an integer", key)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        raise ValidationError(f"{key} must be an integer, not a decimal", key)
    if isinstance(value, str):
        text = value.strip()
        if _PLAIN_INT_RE.match(text):
            return int(text)
        if "." in text:
            raise ValidationError(f"{key} must be an integer (no decimals)", key)
        if "e" in text.lower():
            raise ValidationError(f"{key} must be a plain integer (scientific notation not allowed)", key)
    raise ValidationError(f"{key} must be an integer", key)


def _coerce_value(col, value: Any):
    if value is None:
        return None

    coltype = col.type
    if isinstance(coltype, Integer):
        return _coerce_int(col.key, value)

    if isinstance(coltype, Boolean):
        if not isinstance(value, bool):
            raise ValidationError(f"{col.key} must be true or false", col.key)
        return value

    if isinstance(coltype, (String, Text)):
        if isinstance(value, (dict, list)):
            raise ValidationError(f"{col.key} must be a string", col.key)
        return str(value).strip()

    return value


def _coerce_string_list(key: str, value: Any, max_len: int | None = None) -> list[str]:
    if not isinstance(value, list):
        raise ValidationError(f"{key} must be a list of strings", key)
    cleaned = []
    for item in value:
        if not isinstance(item, str) or not item.strip():
            raise ValidationError(f"{key} must contain only non-blank strings", key)
        item = item.strip()
        if max_len and len(item) > max_len:
            raise ValidationError(f"{key} item exceeds max length {max_len}", key)
        cleaned.append(item)
    return cleaned


def _check_column(col, key: str, raw: Any):
    if raw is None:
        if not col.nullable:
            raise ValidationError(f"{key} cannot be null", key)
        return None

    val = _coerce_value(col, raw)

    if isinstance(val, str):
        if val == "" and not col.nullable:
            raise ValidationError(f"{key} cannot be blank", key)
        max_len = getattr(col.type, "length", None)
        if max_len and len(val) > max_len:
            raise ValidationError(f"{key} exceeds max length {max_len}", key)

    return val


def validate_payload(
    *,
    model: DeclarativeMeta,
    payload: dict,
    policy: ModelValidationPolicy,
    partial: bool,
) -> dict:
    """
    Turn a request body into a clean patch dict for `model`.

    Each key must be in policy.writable_fields and be either a mapped column
    or one of policy.list_fields. Column values are coerced by column type
    and checked for nullability, blankness and String length.

    partial=False (POST / PUT) also requires policy.required_on_create.
    partial=True (PATCH) checks only the keys present.
    """
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")

    if not partial:
        missing = sorted(set(policy.required_on_create) - set(payload))
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}", missing[0])

    cols = _columns(model)

    for key in payload:
        if key not in policy.writable_fields:
            raise ValidationError(f"Field not allowed: {key}", key)
        if key not in cols and key not in policy.list_fields:
            raise ValidationError(f"Unknown field: {key}", key)

    patch: dict = {}
    for key, raw in payload.items():
        if key in policy.list_fields:
            patch[key] = _coerce_string_list(key, raw, policy.list_item_lengths.get(key))
        else:
            patch[key] = _check_column(cols[key], key, raw)
    return patch


def _check_choice(patch: dict, key: str, choices: tuple[str, ...]) -> None:
    if key in patch and patch[key] is not None and patch[key] not in choices:
        raise ValidationError(f"{key} must be one of: {', '.join(choices)}", key)


def _check_money(patch: dict, key: str, *, positive: bool = False) -> None:
    value = patch.get(key)
    if value is None:
        return
    if positive and value <= 0:
        raise ValidationError(f"{key} must be > 0", key)
    if value < 0:
        raise ValidationError(f"{key} must be >= 0", key)
    if value > MAX_PRICE_CENTS:
        raise ValidationError(f"{key} cannot exceed {MAX_PRICE_CENTS} (${MAX_PRICE_CENTS / 100:,.2f})", key)


def enforce_rules_truck(patch: dict, current: dict | None = None) -> None:
    """
    Business rules that are not captured by SQLAlchemy metadata alone.

    `current` holds the persisted values for updates; the listing-type price
    rule is checked against the merged result so a PATCH touching only
    listing_type cannot leave a lease without a monthly price.
    """
    _check_choice(patch, "listing_type", LISTING_TYPES)
    _check_choice(patch, "status", TRUCK_STATUSES)

    if "year" in patch:
        max_year = utcnow().year + 1
        if not MIN_TRUCK_YEAR <= patch["year"] <= max_year:
            raise ValidationError(f"year must be between {MIN_TRUCK_YEAR} and {max_year}", "year")

    if "mileage" in patch and patch["mileage"] < 0:
        raise ValidationError("mileage must be >= 0", "mileage")

    _check_money(patch, "price_cents")
    _check_money(patch, "monthly_price_cents", positive=True)
    _check_money(patch, "down_payment_cents")

    if patch.get("lease_term_months") is not None and patch["lease_term_months"] <= 0:
        raise ValidationError("lease_term_months must be > 0", "lease_term_months")

    merged = dict(current or {})
    merged.update(patch)
    listing_type = merged.get("listing_type") or "SALE"

    if listing_type == "SALE":
        if not merged.get("price_cents") or merged["price_cents"] <= 0:
            raise ValidationError("Sale listings require a positive price.", "price_cents")
        # Lease-only columns are meaningless for a sale listing
        for key in LEASE_ONLY_FIELDS:
            if merged.get(key) is not None:
                patch[key] = None
    else:
        monthly = merged.get("monthly_price_cents")
        if monthly is None or monthly <= 0:
            raise ValidationError("Lease listings require a positive monthly price.", "monthly_price_cents")


def _check_email(patch: dict, key: str = "email") -> None:
    if key in patch and patch[key] is not None and not EMAIL_RE.match(patch[key]):
        raise ValidationError("Valid email is required", key)


def enforce_rules_inquiry(patch: dict) -> None:
    _check_email(patch)
    _check_choice(patch, "inquiry_type", INQUIRY_TYPES)
    _check_choice(patch, "status", INQUIRY_STATUSES)


def enforce_rules_financing(patch: dict) -> None:
    _check_email(patch)
    _check_choice(patch, "status", FINANCING_STATUSES)
    _check_money(patch, "annual_income_cents")
    _check_money(patch, "down_payment_cents")
