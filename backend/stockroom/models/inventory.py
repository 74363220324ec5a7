from __future__ import annotations

from decimal import Decimal

from ..extensions import db
from ..time_utils import to_utc_z
from .tenancy import new_id


def _money(value: Decimal | None) -> str | None:
    if value is None:
        return None
    return f"{Decimal(value):.2f}"


class Product(db.Model):
    """
    Product master data.

    MULTI-TENANT: Products are owned directly by an organization and the
    owner never changes. Every read and write filters on organization_id.

    SKUs are unique within an organization, not globally:
    UniqueConstraint("organization_id", "sku").
    """
    __tablename__ = "products"
    __table_args__ = (
        db.UniqueConstraint("organization_id", "sku", name="uq_products_org_sku"),
        db.Index("ix_products_org_name", "organization_id", "name"),
    )

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    organization_id = db.Column(db.String(36), db.ForeignKey("organizations.id"), nullable=False, index=True)

    name = db.Column(db.String(255), nullable=False)
    sku = db.Column(db.String(64), nullable=False)
    description = db.Column(db.Text, nullable=True)

    quantity_on_hand = db.Column(db.Integer, nullable=False, default=0, server_default="0")
    cost_price = db.Column(db.Numeric(10, 2), nullable=True)
    selling_price = db.Column(db.Numeric(10, 2), nullable=True)

    # NULL means "use the organization default"
    low_stock_threshold = db.Column(db.Integer, nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    updated_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        server_default=db.func.now(),
        onupdate=db.func.now(),
    )

    organization = db.relationship("Organization", backref=db.backref("products", lazy=True))

    def __repr__(self) -> str:
        return f"<Product id={self.id} sku={self.sku!r} name={self.name!r} organization_id={self.organization_id}>"

    def effective_low_stock_threshold(self, default_threshold: int) -> int:
        if self.low_stock_threshold is None:
            return default_threshold
        return self.low_stock_threshold

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "organizationId": self.organization_id,
            "name": self.name,
            "sku": self.sku,
            "description": self.description,
            "quantityOnHand": self.quantity_on_hand,
            "costPrice": _money(self.cost_price),
            "sellingPrice": _money(self.selling_price),
            "lowStockThreshold": self.low_stock_threshold,
            "createdAt": to_utc_z(self.created_at),
            "updatedAt": to_utc_z(self.updated_at),
        }
