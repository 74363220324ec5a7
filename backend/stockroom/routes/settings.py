from __future__ import annotations

from flask import Blueprint, jsonify, request, g, current_app

from ..decorators import require_auth
from ..services import settings_service
from ..services.tenant_service import TenantAccessError
from ..validation import ValidationError, validate_low_stock_threshold


settings_bp = Blueprint("settings", __name__, url_prefix="/api")

SETTINGS_FIELDS = {"defaultLowStockThreshold"}


@settings_bp.get("/settings")
@require_auth
def get_settings():
    try:
        return jsonify(settings_service.get_settings(g.org_id))
    except TenantAccessError:
        return jsonify({"error": "Organization not found"}), 404
    except Exception:
        current_app.logger.exception("Failed to load settings")
        return jsonify({"error": "Internal server error"}), 500


@settings_bp.put("/settings")
@require_auth
def update_settings():
    """
    Update organization-wide settings.

    Request body:
    {
        "defaultLowStockThreshold": 10
    }
    """
    payload = request.get_json(silent=True) or {}
    if not isinstance(payload, dict):
        return jsonify({"error": "Invalid JSON payload"}), 400

    unknown = sorted(set(payload) - SETTINGS_FIELDS)
    if unknown:
        return jsonify({"error": f"Field not allowed: {', '.join(unknown)}"}), 400

    try:
        threshold = validate_low_stock_threshold(payload.get("defaultLowStockThreshold"))
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400

    try:
        org = settings_service.update_settings(
            organization_id=g.org_id,
            default_low_stock_threshold=threshold,
        )
    except TenantAccessError:
        return jsonify({"error": "Organization not found"}), 404
    except Exception:
        current_app.logger.exception("Failed to update settings")
        return jsonify({"error": "Internal server error"}), 500

    return jsonify(org)
