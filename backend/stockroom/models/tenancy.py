from __future__ import annotations

import uuid

from ..extensions import db
from ..time_utils import to_utc_z

DEFAULT_LOW_STOCK_THRESHOLD = 5


def new_id() -> str:
    """Opaque primary key for every tenant-owned row."""
    return str(uuid.uuid4())


class Organization(db.Model):
    """
    Multi-tenant root: Every tenant is an Organization.

    All users and products belong to exactly one organization and no
    data may cross organization boundaries. Created once per signup;
    only default_low_stock_threshold changes afterwards.
    """
    __tablename__ = "organizations"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    name = db.Column(db.String(255), nullable=False)

    default_low_stock_threshold = db.Column(
        db.Integer,
        nullable=False,
        default=DEFAULT_LOW_STOCK_THRESHOLD,
        server_default=str(DEFAULT_LOW_STOCK_THRESHOLD),
    )

    created_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        server_default=db.func.now(),
    )
    updated_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        server_default=db.func.now(),
        onupdate=db.func.now(),
    )

    def __repr__(self) -> str:
        return f"<Organization id={self.id} name={self.name!r}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "defaultLowStockThreshold": self.default_low_stock_threshold,
            "createdAt": to_utc_z(self.created_at),
            "updatedAt": to_utc_z(self.updated_at),
        }
