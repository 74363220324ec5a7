from __future__ import annotations

from ..extensions import db
from ..time_utils import to_utc_z
from .tenancy import new_id


class User(db.Model):
    """
    User accounts for authentication.

    MULTI-TENANT: Users belong to exactly one organization (organization_id),
    fixed at signup. Email is unique across ALL organizations: the
    uq_users_email constraint is what actually rejects a duplicate signup,
    including two racing requests for the same address.
    """
    __tablename__ = "users"
    __table_args__ = (
        db.UniqueConstraint("email", name="uq_users_email"),
        db.Index("ix_users_organization_id", "organization_id"),
    )

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    organization_id = db.Column(db.String(36), db.ForeignKey("organizations.id"), nullable=False)

    # Stored exactly as supplied; lookups are case-sensitive
    email = db.Column(db.String(255), nullable=False)

    # Bcrypt hashed password, never serialized
    password_hash = db.Column(db.String(255), nullable=False)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    last_login_at = db.Column(db.DateTime(timezone=True), nullable=True)

    organization = db.relationship("Organization", backref=db.backref("users", lazy=True))

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r} organization_id={self.organization_id}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "organizationId": self.organization_id,
            "email": self.email,
            "createdAt": to_utc_z(self.created_at),
            "lastLoginAt": to_utc_z(self.last_login_at) if self.last_login_at else None,
        }
