# Overview: Flask API routes for products operations; parses input and returns JSON responses.

# backend/stockroom/routes/products.py
"""
Product management routes with multi-tenant support.

MULTI-TENANT: All product operations are scoped to the caller's organization.
The organization id is derived from g.org_id (set by @require_auth).
Products of other organizations answer 404, same as missing ones.
"""
from flask import Blueprint, request, g, current_app

from ..services import products_service
from ..services.products_service import ProductNotFoundError
from ..models import Product
from ..validation import (
    ModelValidationPolicy,
    validate_payload,
    enforce_rules_product,
    ValidationError,
    ConflictError,
)
from ..decorators import require_auth

PRODUCT_POLICY = ModelValidationPolicy(
    writable_fields={
        "name",
        "sku",
        "description",
        "quantityOnHand",
        "costPrice",
        "sellingPrice",
        "lowStockThreshold",
    },
    required_on_create={"name", "sku"},
    field_aliases={
        "quantityOnHand": "quantity_on_hand",
        "costPrice": "cost_price",
        "sellingPrice": "selling_price",
        "lowStockThreshold": "low_stock_threshold",
    },
)

products_bp = Blueprint("products", __name__, url_prefix="/api/products")


def _validated_patch(partial: bool) -> dict:
    payload = request.get_json(silent=True)
    if payload is None:
        payload = {}
    patch = validate_payload(model=Product, payload=payload, policy=PRODUCT_POLICY, partial=partial)
    enforce_rules_product(patch)
    return patch


@products_bp.get("")
@require_auth
def list_products():
    """List all products of the caller's organization."""
    try:
        return products_service.list_products(g.org_id)
    except Exception:
        current_app.logger.exception("Failed to list products")
        return {"error": "Internal server error"}, 500


@products_bp.get("/<product_id>")
@require_auth
def get_product_route(product_id: str):
    try:
        return products_service.get_product(product_id=product_id, organization_id=g.org_id)
    except ProductNotFoundError:
        return {"error": "Product not found"}, 404
    except Exception:
        current_app.logger.exception("Failed to load product")
        return {"error": "Internal server error"}, 500


@products_bp.post("")
@require_auth
def create_product_route():
    """
    Create a new product.

    MULTI-TENANT: Product is created in the caller's organization;
    organizationId in the payload is rejected.
    """
    try:
        patch = _validated_patch(partial=False)
    except ValidationError as e:
        return {"error": str(e)}, 400

    try:
        created = products_service.create_product(patch=patch, organization_id=g.org_id)
    except ConflictError as e:
        return {"error": str(e)}, 409
    except Exception:
        current_app.logger.exception("Failed to create product")
        return {"error": "Internal server error"}, 500

    return created, 201


@products_bp.put("/<product_id>")
@require_auth
def update_product_route(product_id: str):
    """
    Update a product (partial).

    MULTI-TENANT: Only products in caller's organization can be updated.
    """
    try:
        patch = _validated_patch(partial=True)
    except ValidationError as e:
        return {"error": str(e)}, 400

    try:
        updated = products_service.update_product(
            product_id=product_id, patch=patch, organization_id=g.org_id
        )
    except ProductNotFoundError:
        return {"error": "Product not found"}, 404
    except ConflictError as e:
        return {"error": str(e)}, 409
    except Exception:
        current_app.logger.exception("Failed to update product")
        return {"error": "Internal server error"}, 500

    return updated, 200


@products_bp.delete("/<product_id>")
@require_auth
def delete_product_route(product_id: str):
    """
    Delete a product.

    MULTI-TENANT: Only products in caller's organization can be deleted.
    """
    try:
        products_service.delete_product(product_id=product_id, organization_id=g.org_id)
    except ProductNotFoundError:
        return {"error": "Product not found"}, 404
    except Exception:
        current_app.logger.exception("Failed to delete product")
        return {"error": "Internal server error"}, 500

    return {"ok": True, "message": "Deleted"}, 200
