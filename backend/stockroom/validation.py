from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any

from sqlalchemy import Boolean, Integer, Numeric, String, Text
from sqlalchemy.orm import DeclarativeMeta


# Numeric(10, 2): eight digits before the decimal point
MAX_PRICE = Decimal("99999999.99")
MAX_QUANTITY = 2_147_483_647


class ValidationError(ValueError):
    """400-level input problem."""


class ConflictError(ValueError):
    """409-level business rule conflict (e.g., duplicate SKU)."""


@dataclass(frozen=True)
class ModelValidationPolicy:
    """
    Central policy layer:
    - writable_fields: wire names clients are allowed to set (security boundary)
    - required_on_create: wire names required for POST
    - field_aliases: wire name -> model column key, for camelCase payloads
    """
    writable_fields: set[str]
    required_on_create: set[str] = field(default_factory=set)
    field_aliases: dict[str, str] = field(default_factory=dict)

    def column_for(self, name: str) -> str:
        return self.field_aliases.get(name, name)


def _columns_by_key(model: DeclarativeMeta) -> dict[str, Any]:
    mapper = model.__mapper__
    return {c.key: c for c in mapper.columns}


def _coerce_integer(name: str, value: Any) -> int:
    # Already an int (but not bool which is a subclass of int)
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    # String input - must be plain digits (with optional leading minus)
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            raise ValidationError(f"{name} must be an integer")
        # Reject scientific notation (e.g., "1e15", "1E10")
        if 'e' in stripped.lower():
            raise ValidationError(f"{name} must be a plain integer (scientific notation not allowed)")
        # Reject decimal points (e.g., "12.5")
        if '.' in stripped:
            raise ValidationError(f"{name} must be an integer (no decimals)")
        try:
            return int(stripped)
        except ValueError:
            raise ValidationError(f"{name} must be an integer")
    # Reject floats explicitly
    if isinstance(value, float):
        raise ValidationError(f"{name} must be an integer, not a decimal")
    raise ValidationError(f"{name} must be an integer")


def _coerce_decimal(name: str, value: Any, scale: int | None) -> Decimal:
    if isinstance(value, bool) or not isinstance(value, (int, float, str, Decimal)):
        raise ValidationError(f"{name} must be a number")
    try:
        # str() first so 19.99 stays 19.99 instead of its binary expansion
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValidationError(f"{name} must be a number")
    if not amount.is_finite():
        raise ValidationError(f"{name} must be a finite number")
    if scale is not None and amount.as_tuple().exponent < -scale:
        raise ValidationError(f"{name} allows at most {scale} decimal places")
    return amount


def _coerce_value(name: str, col, value: Any):
    coltype = col.type

    if value is None:
        return None

    # Integers - strict validation to reject floats and scientific notation
    if isinstance(coltype, Integer):
        return _coerce_integer(name, value)

    if isinstance(coltype, Numeric):
        return _coerce_decimal(name, value, coltype.scale)

    # Booleans
    if isinstance(coltype, Boolean):
        if isinstance(value, bool):
            return value
        raise ValidationError(f"{name} must be true or false")

    # Strings / Text
    if isinstance(coltype, (String, Text)):
        if isinstance(value, (dict, list)):
            raise ValidationError(f"{name} must be a string")
        return str(value).strip()

    # Default: leave as-is
    return value


def validate_payload(
    *,
    model: DeclarativeMeta,
    payload: dict,
    policy: ModelValidationPolicy,
    partial: bool,
) -> dict:
    """
    Validates + normalizes incoming JSON against:
    - SQLAlchemy column metadata (nullable, type, String length)
    - a policy allowlist (writable_fields)
    - required_on_create (if partial=False)
    Returns a cleaned patch dict keyed by model column.

    partial=False: create semantics (enforce required_on_create)
    partial=True: patch semantics (validate only provided keys)
    """
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")

    if not partial:
        missing = sorted(f for f in policy.required_on_create if payload.get(f) is None)
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    cols = _columns_by_key(model)

    # Reject unknown / non-writable fields
    for k in payload.keys():
        if k not in policy.writable_fields:
            raise ValidationError(f"Field not allowed: {k}")
        if policy.column_for(k) not in cols:
            raise ValidationError(f"Unknown field: {k}")

    patch: dict = {}

    for k, raw in payload.items():
        key = policy.column_for(k)
        col = cols[key]

        # NULL handling
        if raw is None:
            if not col.nullable:
                raise ValidationError(f"{k} cannot be null")
            patch[key] = None
            continue

        val = _coerce_value(k, col, raw)

        # Blank string check for non-nullable text fields
        if isinstance(col.type, (String, Text)) and not col.nullable:
            if isinstance(val, str) and val == "":
                raise ValidationError(f"{k} cannot be blank")

        # Max length check for String(n)
        if isinstance(col.type, String) and col.type.length and isinstance(val, str):
            if len(val) > col.type.length:
                raise ValidationError(f"{k} exceeds max length {col.type.length}")

        patch[key] = val

    return patch


def enforce_rules_product(patch: dict) -> None:
    """
    Business rules that are not captured by SQLAlchemy metadata alone.
    Keep these small and centralized.
    """
    if "quantity_on_hand" in patch:
        qty = patch["quantity_on_hand"]
        if qty is None or qty < 0:
            raise ValidationError("quantityOnHand must be >= 0")
        if qty > MAX_QUANTITY:
            raise ValidationError(f"quantityOnHand cannot exceed {MAX_QUANTITY}")

    for key, label in (("cost_price", "costPrice"), ("selling_price", "sellingPrice")):
        price = patch.get(key)
        if price is None:
            continue
        if price < 0:
            raise ValidationError(f"{label} must be >= 0")
        if price > MAX_PRICE:
            raise ValidationError(f"{label} cannot exceed {MAX_PRICE}")

    threshold = patch.get("low_stock_threshold")
    if threshold is not None:
        if threshold < 0:
            raise ValidationError("lowStockThreshold must be >= 0")
        if threshold > MAX_QUANTITY:
            raise ValidationError(f"lowStockThreshold cannot exceed {MAX_QUANTITY}")


def validate_low_stock_threshold(value: Any) -> int:
    """Validate the organization-wide default threshold from a settings payload."""
    if value is None:
        raise ValidationError("defaultLowStockThreshold is required")
    threshold = _coerce_integer("defaultLowStockThreshold", value)
    if threshold < 0:
        raise ValidationError("defaultLowStockThreshold must be >= 0")
    if threshold > MAX_QUANTITY:
        raise ValidationError(f"defaultLowStockThreshold cannot exceed {MAX_QUANTITY}")
    return threshold
