# Overview: Service-layer operations for auth; encapsulates business logic and database work.

"""
Authentication Service with Multi-Tenant Support

Signup creates a new tenant (Organization) together with its first User.
Login verifies credentials and issues a tenant-scoped session token.

MULTI-TENANT: Users belong to exactly one organization, fixed at signup.
Email uniqueness is global, not per tenant.

SECURITY NOTES:
- Passwords hashed with bcrypt (cost factor from BCRYPT_ROUNDS, default 12)
- Organization and user are written in a single transaction
- The users.email unique constraint is the authoritative duplicate check;
  the lookup before insert only short-circuits the common case
- UserNotFoundError subclasses InvalidCredentialsError so callers can
  answer both the same way
"""

from __future__ import annotations

from dataclasses import dataclass

import bcrypt
from flask import current_app
from sqlalchemy.exc import IntegrityError

from ..extensions import db
from ..models import User, Organization, DEFAULT_LOW_STOCK_THRESHOLD
from ..time_utils import utcnow
from . import session_service
from .security_service import log_security_event


# users.email and organizations.name are String(255)
MAX_FIELD_LENGTH = 255

# bcrypt only accepts passwords up to 72 bytes
MAX_PASSWORD_BYTES = 72

# Verified against on the unknown-email path, keyed by cost factor
_dummy_hashes: dict[int, str] = {}


class InvalidInputError(ValueError):
    """Raised when required signup/login fields are missing or blank."""
    pass


class DuplicateUserError(Exception):
    """Raised when an account already exists for the email."""
    pass


class InvalidCredentialsError(Exception):
    """Raised when email/password do not match an account."""
    pass


class UserNotFoundError(InvalidCredentialsError):
    """Raised when no account exists for the email."""
    pass


@dataclass(frozen=True)
class SignupResult:
    user_id: str
    organization_id: str


@dataclass(frozen=True)
class LoginResult:
    token: str
    user_id: str
    organization_id: str


def hash_password(password: str) -> str:
    """
    Hash password using bcrypt with a per-call random salt.

    Cost factor comes from BCRYPT_ROUNDS so tests can run cheaply.
    """
    salt = bcrypt.gensalt(rounds=current_app.config["BCRYPT_ROUNDS"])
    hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
    return hashed.decode('utf-8')  # Store as string in database


def verify_password(password: str, password_hash: str) -> bool:
    """
    Verify password against bcrypt hash.

    Returns False on mismatch. A malformed hash raises ValueError from
    bcrypt; that is a storage problem, not a wrong password.
    """
    return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))


def _password_too_long(password: str) -> bool:
    return len(password.encode('utf-8')) > MAX_PASSWORD_BYTES


def _dummy_hash() -> str:
    rounds = current_app.config["BCRYPT_ROUNDS"]
    if rounds not in _dummy_hashes:
        _dummy_hashes[rounds] = hash_password("dummy-password-for-timing")
    return _dummy_hashes[rounds]


def _require_fields(**fields) -> None:
    missing = [
        name for name, value in fields.items()
        if not isinstance(value, str) or not value.strip()
    ]
    if missing:
        raise InvalidInputError(f"Missing required fields: {', '.join(missing)}")


def _email_registered(email: str) -> bool:
    return db.session.query(User.id).filter(User.email == email).first() is not None


def signup(email: str, password: str, organization_name: str) -> SignupResult:
    """
    Create a new organization and its first user.

    Args:
        email: Login email, unique across all organizations
        password: Plaintext password (hashed before storage)
        organization_name: Display name of the new tenant

    Returns:
        SignupResult with the new user and organization ids

    Raises:
        InvalidInputError: If any field is missing, blank or too long
        DuplicateUserError: If the email is already registered
    """
    _require_fields(email=email, password=password, organizationName=organization_name)
    email = email.strip()
    organization_name = organization_name.strip()
    if len(email) > MAX_FIELD_LENGTH or len(organization_name) > MAX_FIELD_LENGTH:
        raise InvalidInputError(f"email and organizationName must be at most {MAX_FIELD_LENGTH} characters")
    if _password_too_long(password):
        raise InvalidInputError(f"password must be at most {MAX_PASSWORD_BYTES} bytes")

    if _email_registered(email):
        log_security_event(
            event_type="SIGNUP_REJECTED",
            success=False,
            reason="Email already registered",
        )
        raise DuplicateUserError("User already exists")

    password_hash = hash_password(password)

    # Organization and user commit together or not at all
    org = Organization(name=organization_name, default_low_stock_threshold=DEFAULT_LOW_STOCK_THRESHOLD)
    try:
        db.session.add(org)
        db.session.flush()  # ensure org.id exists before the user references it

        user = User(email=email, password_hash=password_hash, organization_id=org.id)
        db.session.add(user)
        db.session.commit()
    except IntegrityError as exc:
        db.session.rollback()
        # Lost a race with a concurrent signup for the same email
        current_app.logger.info("Signup rejected by unique constraint: %s", exc.orig)
        log_security_event(
            event_type="SIGNUP_REJECTED",
            success=False,
            reason="Email already registered (constraint)",
        )
        raise DuplicateUserError("User already exists") from exc
    except Exception:
        db.session.rollback()
        raise

    log_security_event(
        event_type="SIGNUP",
        success=True,
        user_id=user.id,
        organization_id=org.id,
    )
    current_app.logger.info("Signup created organization %s with user %s", org.id, user.id)

    return SignupResult(user_id=user.id, organization_id=org.id)


def login(email: str, password: str) -> LoginResult:
    """
    Authenticate by email and password and issue a session token.

    Raises:
        InvalidInputError: If email or password is missing
        UserNotFoundError: If no account has this email
        InvalidCredentialsError: If the password does not match
    """
    _require_fields(email=email, password=password)
    email = email.strip()
    # No account can have a password bcrypt refuses to hash
    too_long = _password_too_long(password)

    user = db.session.query(User).filter(User.email == email).first()
    if not user:
        if not too_long:
            # Same bcrypt cost as a password mismatch
            verify_password(password, _dummy_hash())
        log_security_event(
            event_type="LOGIN_FAILED",
            success=False,
            reason="Unknown email",
        )
        raise UserNotFoundError("Invalid credentials")

    if too_long or not verify_password(password, user.password_hash):
        log_security_event(
            event_type="LOGIN_FAILED",
            success=False,
            user_id=user.id,
            organization_id=user.organization_id,
            reason="Password mismatch",
        )
        raise InvalidCredentialsError("Invalid credentials")

    token = session_service.issue_token(user.id, user.organization_id)

    user.last_login_at = utcnow()
    db.session.commit()

    log_security_event(
        event_type="LOGIN_SUCCEEDED",
        success=True,
        user_id=user.id,
        organization_id=user.organization_id,
    )

    return LoginResult(token=token, user_id=user.id, organization_id=user.organization_id)
