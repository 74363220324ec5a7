"""
Multi-Tenant Service: Request Authentication and Tenant Scoping Helpers

Every request except signup/login must be scoped to a tenant
(organization). authenticate() turns the Authorization header into a
TenantContext using only the signed token; it never reads storage.

SECURITY INVARIANTS:
1. Every authenticated request has g.tenant / g.org_id set by @require_auth
2. organization_id always comes from the verified token, never from input
3. Queries touching tenant data go through scoped_query()
4. Foreign rows look exactly like missing rows to the caller

USAGE:
    from stockroom.services.tenant_service import get_current_tenant, scoped_query

    tenant = get_current_tenant()
    products = scoped_query(Product, tenant.organization_id).all()
"""

from __future__ import annotations

from dataclasses import dataclass

from flask import g

from ..extensions import db
from .session_service import verify_token, InvalidTokenError


BEARER_PREFIX = "Bearer "


class TenantAccessError(Exception):
    """Raised when tenant context is missing or cross-tenant access is attempted."""
    pass


class UnauthenticatedError(TenantAccessError):
    """No usable credentials were supplied (HTTP 401)."""
    pass


class ForbiddenError(TenantAccessError):
    """Credentials were supplied but are invalid or expired (HTTP 403)."""
    pass


@dataclass(frozen=True)
class TenantContext:
    """Trusted identity and tenant scope for one request."""
    user_id: str
    organization_id: str


def extract_bearer_token(header_value: str | None) -> str:
    """
    Pull the token out of an "Authorization: Bearer <token>" value.

    Raises UnauthenticatedError when the header is absent, uses another
    scheme, or carries an empty token.
    """
    # Scheme names are case-insensitive
    if not header_value or header_value[:len(BEARER_PREFIX)].lower() != BEARER_PREFIX.lower():
        raise UnauthenticatedError("Authentication required")

    token = header_value[len(BEARER_PREFIX):].strip()
    if not token or " " in token:
        raise UnauthenticatedError("Authentication required")
    return token


def authenticate(header_value: str | None) -> TenantContext:
    """
    Validate the Authorization header and return the caller's tenant context.

    Raises:
        UnauthenticatedError: no credentials supplied
        ForbiddenError: token present but invalid or expired
    """
    token = extract_bearer_token(header_value)

    try:
        claims = verify_token(token)
    except InvalidTokenError as exc:
        raise ForbiddenError("Invalid or expired token") from exc

    return TenantContext(user_id=claims.user_id, organization_id=claims.organization_id)


def get_current_tenant() -> TenantContext:
    """
    Get the current request's TenantContext from Flask g.

    SECURITY: Raises TenantAccessError if the context was never set.
    This should never happen after @require_auth, but is a safety check.
    """
    tenant = getattr(g, 'tenant', None)
    if tenant is None:
        raise TenantAccessError("Tenant context not established")
    return tenant


def get_current_org_id() -> str:
    return get_current_tenant().organization_id


def scoped_query(model, organization_id: str | None = None):
    """
    Create a base query restricted to one organization.

    Args:
        model: SQLAlchemy model class with an organization_id column
        organization_id: Organization ID (defaults to the current tenant)

    Usage:
        products = scoped_query(Product).order_by(Product.name).all()
    """
    if organization_id is None:
        organization_id = get_current_org_id()
    if not organization_id:
        raise TenantAccessError("Tenant context not established")

    return db.session.query(model).filter(model.organization_id == organization_id)
