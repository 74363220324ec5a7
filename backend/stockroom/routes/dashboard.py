# Overview: Flask API route for the stock dashboard.

from flask import Blueprint, g, current_app

from ..decorators import require_auth
from ..services import reporting_service
from ..services.tenant_service import TenantAccessError

dashboard_bp = Blueprint("dashboard", __name__, url_prefix="/api")


@dashboard_bp.get("/dashboard")
@require_auth
def get_dashboard():
    """
    Stock summary for the caller's organization.

    Returns totalProducts, totalQuantity, lowStockItems and the
    organization's defaultLowStockThreshold.
    """
    try:
        return reporting_service.get_dashboard(g.org_id)
    except TenantAccessError:
        return {"error": "Organization not found"}, 404
    except Exception:
        current_app.logger.exception("Failed to build dashboard")
        return {"error": "Internal server error"}, 500
