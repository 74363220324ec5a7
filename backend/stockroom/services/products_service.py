# backend/stockroom/services/products_service.py
"""
Products Service with Multi-Tenant Support

MULTI-TENANT: Every operation takes the caller's organization_id (from
the verified token) and filters on it. A product owned by another
organization is reported exactly like a missing one.
"""
from __future__ import annotations

from sqlalchemy.exc import IntegrityError

from ..extensions import db
from ..models import Product
from ..validation import ConflictError
from .security_service import log_security_event
from .tenant_service import scoped_query

PRODUCT_MUTABLE_FIELDS = {
    "name",
    "sku",
    "description",
    "quantity_on_hand",
    "cost_price",
    "selling_price",
    "low_stock_threshold",
}


class ProductNotFoundError(LookupError):
    """Raised when a product is absent or belongs to another organization."""
    pass


def apply_product_patch(p: Product, patch: dict) -> None:
    for k, v in patch.items():
        if k not in PRODUCT_MUTABLE_FIELDS:
            continue
        setattr(p, k, v)


def _load_product(product_id: str, organization_id: str) -> Product:
    p = scoped_query(Product, organization_id).filter(Product.id == product_id).first()
    if p is not None:
        return p

    # Same answer either way; the audit log records which case it was
    owner = db.session.query(Product.organization_id).filter(Product.id == product_id).scalar()
    if owner is not None:
        log_security_event(
            event_type="CROSS_TENANT_ACCESS_DENIED",
            success=False,
            organization_id=organization_id,
            reason=f"Product {product_id} belongs to another organization",
        )
    raise ProductNotFoundError("Product not found")


def _ensure_sku_available(sku: str, organization_id: str, exclude_id: str | None = None) -> None:
    query = scoped_query(Product, organization_id).filter(Product.sku == sku)
    if exclude_id is not None:
        query = query.filter(Product.id != exclude_id)
    if query.first():
        raise ConflictError("SKU already exists for this organization.")


def _commit_product_write() -> None:
    try:
        db.session.commit()
    except IntegrityError as exc:
        # uq_products_org_sku caught a concurrent write with the same SKU
        db.session.rollback()
        raise ConflictError("SKU already exists for this organization.") from exc


def list_products(organization_id: str) -> dict:
    """
    Tenant-scoped product listing.

    Returns:
        Dict with 'items' and 'count'.
    """
    products = (
        scoped_query(Product, organization_id)
        .order_by(Product.name.asc(), Product.id.asc())
        .all()
    )
    return {
        "items": [p.to_dict() for p in products],
        "count": len(products),
    }


def get_product(*, product_id: str, organization_id: str) -> dict:
    """
    Read one product.

    Raises:
        ProductNotFoundError: If missing or owned by another organization
    """
    return _load_product(product_id, organization_id).to_dict()


def create_product(*, patch: dict, organization_id: str) -> dict:
    """
    Create product using a validated patch dict.

    The owning organization always comes from organization_id, never from
    the patch.

    Raises:
        ConflictError: If SKU already exists in the organization
    """
    sku = patch.get("sku")
    if not sku:
        raise ValueError("sku is required")

    _ensure_sku_available(sku, organization_id)

    p = Product(organization_id=organization_id)
    apply_product_patch(p, patch)
    if p.quantity_on_hand is None:
        p.quantity_on_hand = 0

    db.session.add(p)
    _commit_product_write()
    return p.to_dict()


def update_product(*, product_id: str, patch: dict, organization_id: str) -> dict:
    """
    Apply a partial update.

    Raises:
        ProductNotFoundError: If missing or owned by another organization
        ConflictError: If the new SKU is already used in the organization
    """
    p = _load_product(product_id, organization_id)

    if "sku" in patch and patch["sku"] != p.sku:
        _ensure_sku_available(patch["sku"], organization_id, exclude_id=p.id)

    apply_product_patch(p, patch)
    _commit_product_write()
    return p.to_dict()


def delete_product(*, product_id: str, organization_id: str) -> None:
    """
    Delete a product.

    Raises:
        ProductNotFoundError: If missing or owned by another organization
    """
    p = _load_product(product_id, organization_id)
    db.session.delete(p)
    db.session.commit()
