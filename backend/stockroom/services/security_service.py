# Overview: Service-layer operations for the security audit log.

"""
Security Event Logging with Multi-Tenant Support

Signups, login outcomes and cross-tenant access attempts are written to
security_events with the organization they concern (when known).

Events are append-only. cleanup_security_events() is the only delete path.
"""

from __future__ import annotations

from datetime import timedelta

from flask import has_request_context, request

from ..extensions import db
from ..models import SecurityEvent
from ..time_utils import utcnow


def _request_metadata() -> dict:
    if not has_request_context():
        return {"resource": None, "action": None, "ip_address": None, "user_agent": None}
    return {
        "resource": request.path,
        "action": request.method,
        "ip_address": request.remote_addr,
        "user_agent": request.headers.get("User-Agent"),
    }


def log_security_event(
    event_type: str,
    success: bool,
    user_id: str | None = None,
    organization_id: str | None = None,
    reason: str | None = None,
) -> SecurityEvent:
    """
    Log security event to audit trail with tenant context.

    Request path, method, client IP and user agent are filled in from the
    active Flask request when there is one (CLI calls leave them empty).

    event_type examples:
    - SIGNUP
    - SIGNUP_REJECTED
    - LOGIN_SUCCEEDED
    - LOGIN_FAILED
    - CROSS_TENANT_ACCESS_DENIED
    """
    event = SecurityEvent(
        user_id=user_id,
        organization_id=organization_id,
        event_type=event_type,
        success=success,
        reason=reason,
        occurred_at=utcnow(),
        **_request_metadata(),
    )

    db.session.add(event)
    db.session.commit()

    return event


def cleanup_security_events(*, retention_days: int = 90) -> int:
    """Delete security events older than retention_days."""
    cutoff = utcnow() - timedelta(days=retention_days)
    deleted = db.session.query(SecurityEvent).filter(
        SecurityEvent.occurred_at < cutoff
    ).delete()
    db.session.commit()
    return deleted
