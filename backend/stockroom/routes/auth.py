# Overview: Flask API routes for signup and login; parses input and returns JSON responses.

# backend/stockroom/routes/auth.py
"""
Authentication API routes

- POST /api/signup creates an organization and its first user
- POST /api/login returns a session token for the Authorization header

Unknown email and wrong password produce the same 401 response.
"""

from flask import Blueprint, request, jsonify, current_app

from ..services import auth_service
from ..services.auth_service import (
    InvalidInputError,
    DuplicateUserError,
    InvalidCredentialsError,
)


auth_bp = Blueprint("auth", __name__, url_prefix="/api")


@auth_bp.post("/signup")
def signup_route():
    """
    Create a new organization (tenant) and its first user.

    Request body:
    {
        "email": "a@x.com",
        "password": "...",
        "organizationName": "Acme"
    }
    """
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return jsonify({"error": "Invalid JSON payload"}), 400

    try:
        result = auth_service.signup(
            email=data.get("email"),
            password=data.get("password"),
            organization_name=data.get("organizationName"),
        )
    except InvalidInputError as e:
        return jsonify({"error": str(e)}), 400
    except DuplicateUserError:
        return jsonify({"error": "User already exists"}), 409
    except Exception:
        current_app.logger.exception("Failed to sign up user")
        return jsonify({"error": "Internal server error"}), 500

    return jsonify({
        "userId": result.user_id,
        "organizationId": result.organization_id,
        "message": "Signup successful",
    }), 201


@auth_bp.post("/login")
def login_route():
    """
    Authenticate user and issue a session token.

    Token must be included as "Authorization: Bearer <token>" on
    protected routes and is valid for 24 hours.
    """
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return jsonify({"error": "Invalid JSON payload"}), 400

    try:
        result = auth_service.login(
            email=data.get("email"),
            password=data.get("password"),
        )
    except InvalidInputError as e:
        return jsonify({"error": str(e)}), 400
    except InvalidCredentialsError:
        return jsonify({"error": "Invalid credentials"}), 401
    except Exception:
        current_app.logger.exception("Failed to login user")
        return jsonify({"error": "Internal server error"}), 500

    return jsonify({
        "token": result.token,
        "userId": result.user_id,
        "organizationId": result.organization_id,
        "message": "Login successful",
    }), 200
