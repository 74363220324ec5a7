# Overview: Service-layer operations for reporting; dashboard aggregation per organization.

from __future__ import annotations

from ..extensions import db
from ..models import Organization, Product
from .tenant_service import scoped_query, TenantAccessError


def get_organization(organization_id: str) -> Organization:
    org = db.session.get(Organization, organization_id)
    if org is None:
        # Token outlived its organization
        raise TenantAccessError("Organization not found")
    return org


def get_dashboard(organization_id: str) -> dict:
    """
    Stock summary for one organization.

    A product is low on stock when quantity_on_hand is at or below its own
    low_stock_threshold, or the organization default when it has none.
    """
    org = get_organization(organization_id)
    default_threshold = org.default_low_stock_threshold

    products = (
        scoped_query(Product, organization_id)
        .order_by(Product.name.asc(), Product.id.asc())
        .all()
    )

    low_stock = [
        p for p in products
        if p.quantity_on_hand <= p.effective_low_stock_threshold(default_threshold)
    ]

    return {
        "totalProducts": len(products),
        "totalQuantity": sum(p.quantity_on_hand for p in products),
        "lowStockItems": [p.to_dict() for p in low_stock],
        "defaultLowStockThreshold": default_threshold,
    }
