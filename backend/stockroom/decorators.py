# Overview: Request decorators for API routes.

from functools import wraps
from flask import request, jsonify, g, current_app

from .services import tenant_service
from .services.tenant_service import UnauthenticatedError, ForbiddenError


def require_auth(f):
    """
    Require authentication and establish tenant context.

    MULTI-TENANT: Sets the following Flask g attributes:
    - g.tenant: The TenantContext from the verified token
    - g.org_id: The organization ID (tenant context) - REQUIRED
    - g.user_id: The authenticated user's ID

    SECURITY: Returns 401 if the Authorization header is missing or not a
    Bearer token, 403 if the token is invalid or expired. No database
    access happens here.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        try:
            tenant = tenant_service.authenticate(request.headers.get("Authorization"))
        except UnauthenticatedError as e:
            current_app.logger.warning("Rejected %s %s: %s", request.method, request.path, e)
            return jsonify({"error": "Authentication required"}), 401
        except ForbiddenError as e:
            current_app.logger.warning(
                "Rejected %s %s: %s (%s)", request.method, request.path, e, e.__cause__
            )
            return jsonify({"error": "Invalid or expired token"}), 403

        # Store tenant context in Flask g for access in routes
        g.tenant = tenant
        g.org_id = tenant.organization_id
        g.user_id = tenant.user_id

        return f(*args, **kwargs)

    return decorated_function
