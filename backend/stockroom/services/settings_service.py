# Overview: Service-layer operations for organization settings.

from __future__ import annotations

from flask import current_app

from ..extensions import db
from .reporting_service import get_organization


def get_settings(organization_id: str) -> dict:
    return get_organization(organization_id).to_dict()


def update_settings(*, organization_id: str, default_low_stock_threshold: int) -> dict:
    """
    Update the caller's organization defaults.

    Only default_low_stock_threshold is mutable; the name and id are fixed
    at signup.
    """
    org = get_organization(organization_id)
    previous = org.default_low_stock_threshold
    org.default_low_stock_threshold = default_low_stock_threshold
    db.session.commit()

    current_app.logger.info(
        "Organization %s default low-stock threshold %s -> %s",
        organization_id, previous, default_low_stock_threshold,
    )
    return org.to_dict()
