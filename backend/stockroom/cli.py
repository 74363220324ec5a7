# Overview: Flask CLI command groups for bootstrap, inspection, and maintenance.

# backend/stockroom/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv and export JWT_SECRET.
# - Set FLASK_APP to wsgi.py.
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap/repair:
# - python -m flask system init-db
#   Create any missing tables (use `flask db upgrade` for migrated deployments).
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
#
# Organization management (MULTI-TENANT):
# - python -m flask orgs list
#   List all organizations with user and product counts.
# - python -m flask orgs create --name "Acme" --email a@x.com --password "..."
#   Create a new organization and its first user (same path as POST /api/signup).
#
# User inspection:
# - python -m flask users list [--org-id <uuid>]
#
# Maintenance:
# - python -m flask maintenance cleanup-security-events --retention-days 90
#   Delete security events older than the retention window.

import click
from flask.cli import with_appcontext
from sqlalchemy import func

from .extensions import db
from .models import Organization, User, Product
from .services import auth_service, security_service
from .services.auth_service import InvalidInputError, DuplicateUserError


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init-db')
@with_appcontext
def init_db():
    """Create all tables that do not exist yet."""
    db.create_all()
    click.echo("PASS Database tables created")


@system_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Confirm destructive reset')
@with_appcontext
def reset_db(yes):
    """DEV/TEST only: drop and recreate every table."""
    if not yes:
        click.echo("FAIL Refusing to reset without --yes")
        raise SystemExit(1)
    db.drop_all()
    db.create_all()
    click.echo("PASS Database reset")


@click.group('orgs')
def orgs_group():
    """Organization (tenant) management commands."""


@orgs_group.command('list')
@with_appcontext
def list_orgs():
    """List all organizations."""
    orgs = db.session.query(Organization).order_by(Organization.created_at.asc()).all()
    if not orgs:
        click.echo("No organizations found.")
        return

    user_counts = dict(
        db.session.query(User.organization_id, func.count(User.id))
        .group_by(User.organization_id).all()
    )
    product_counts = dict(
        db.session.query(Product.organization_id, func.count(Product.id))
        .group_by(Product.organization_id).all()
    )

    for org in orgs:
        click.echo(
            f"{org.id}  {org.name}  threshold={org.default_low_stock_threshold}  "
            f"users={user_counts.get(org.id, 0)}  products={product_counts.get(org.id, 0)}"
        )


@orgs_group.command('create')
@click.option('--name', 'org_name', required=True, help='Organization name')
@click.option('--email', required=True, help='Email of the first user')
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True)
@with_appcontext
def create_org(org_name, email, password):
    """Create an organization and its first user."""
    try:
        result = auth_service.signup(email=email, password=password, organization_name=org_name)
    except (InvalidInputError, DuplicateUserError) as e:
        click.echo(f"FAIL {e}")
        raise SystemExit(1)

    click.echo(f"PASS Created organization {result.organization_id} with user {result.user_id}")


@click.group('users')
def users_group():
    """User inspection commands."""


@users_group.command('list')
@click.option('--org-id', default=None, help='Only users of this organization')
@with_appcontext
def list_users(org_id):
    """List users, optionally filtered by organization."""
    query = db.session.query(User).order_by(User.email.asc())
    if org_id:
        query = query.filter(User.organization_id == org_id)

    users = query.all()
    if not users:
        click.echo("No users found.")
        return

    for user in users:
        last_login = user.to_dict()["lastLoginAt"] or "never"
        click.echo(f"{user.id}  {user.email}  org={user.organization_id}  last_login={last_login}")


@click.group('maintenance')
def maintenance_group():
    """Maintenance commands."""


@maintenance_group.command('cleanup-security-events')
@click.option('--retention-days', type=int, default=90, show_default=True)
@with_appcontext
def cleanup_security_events_cli(retention_days):
    """
    Cleanup old security events.

    Default retention: 90 days.
    """
    deleted = security_service.cleanup_security_events(retention_days=retention_days)
    click.echo(f"Deleted {deleted} security events older than {retention_days} days.")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(orgs_group)  # Multi-tenant organization management
    app.cli.add_command(users_group)
    app.cli.add_command(maintenance_group)
