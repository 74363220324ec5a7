from __future__ import annotations

from ..extensions import db
from ..time_utils import to_utc_z


class SecurityEvent(db.Model):
    """
    Security event audit log with tenant context.

    Tracks signups, login outcomes and cross-tenant access attempts.
    organization_id and user_id are plain columns rather than foreign keys
    so a failed login for an unknown account can still be recorded.

    IMMUTABLE: Never update. Append-only; old rows are removed only by the
    retention cleanup.
    """
    __tablename__ = "security_events"
    __table_args__ = (
        db.Index("ix_security_events_user_type", "user_id", "event_type"),
        db.Index("ix_security_events_org_occurred", "organization_id", "occurred_at"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)

    # Nullable for pre-auth events
    organization_id = db.Column(db.String(36), nullable=True, index=True)
    user_id = db.Column(db.String(36), nullable=True, index=True)

    # SIGNUP, SIGNUP_REJECTED, LOGIN_SUCCEEDED, LOGIN_FAILED, CROSS_TENANT_ACCESS_DENIED
    event_type = db.Column(db.String(64), nullable=False, index=True)
    resource = db.Column(db.String(128), nullable=True)
    action = db.Column(db.String(64), nullable=True)

    success = db.Column(db.Boolean, nullable=False, index=True)
    reason = db.Column(db.Text, nullable=True)

    ip_address = db.Column(db.String(45), nullable=True)
    user_agent = db.Column(db.String(512), nullable=True)

    occurred_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now(), index=True)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "organizationId": self.organization_id,
            "userId": self.user_id,
            "eventType": self.event_type,
            "resource": self.resource,
            "action": self.action,
            "success": self.success,
            "reason": self.reason,
            "ipAddress": self.ip_address,
            "occurredAt": to_utc_z(self.occurred_at),
        }
