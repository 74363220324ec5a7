"""
Pytest fixtures for Stockroom backend tests.

Provides test database setup, tenant fixtures, and test client.
"""

import pytest
from stockroom import create_app
from stockroom.extensions import db


TEST_SECRET = "test-signing-secret"
TEST_PASSWORD = "pw123"


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
        'JWT_SECRET': TEST_SECRET,
        'BCRYPT_ROUNDS': 4,
    })

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """Create fresh database for each test."""
    with app.app_context():
        # Clear all data but keep schema
        meta = db.metadata
        for table in reversed(meta.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()

        yield db.session

        # Cleanup after test
        db.session.rollback()


def auth_headers(token: str) -> dict:
    """Helper to create Authorization headers."""
    return {'Authorization': f'Bearer {token}'}


def signup_and_login(client, email: str, organization_name: str, password: str = TEST_PASSWORD) -> dict:
    """Sign up a tenant through the API and log in as its first user."""
    signup = client.post('/api/signup', json={
        'email': email,
        'password': password,
        'organizationName': organization_name,
    })
    assert signup.status_code == 201, signup.json

    login = client.post('/api/login', json={'email': email, 'password': password})
    assert login.status_code == 200, login.json

    return {
        'user_id': signup.json['userId'],
        'organization_id': signup.json['organizationId'],
        'token': login.json['token'],
        'headers': auth_headers(login.json['token']),
    }


@pytest.fixture(scope='function')
def tenant_a(client, db_session):
    """Organization A (first tenant) with a logged-in user."""
    return signup_and_login(client, "user_a@acme.com", "Org A - Acme Corp")


@pytest.fixture(scope='function')
def tenant_b(client, db_session):
    """Organization B (second tenant) with a logged-in user."""
    return signup_and_login(client, "user_b@beta.com", "Org B - Beta Inc")


@pytest.fixture(scope='function')
def product_a(client, tenant_a):
    """Product owned by Organization A."""
    resp = client.post('/api/products', headers=tenant_a['headers'], json={
        'name': 'Product A',
        'sku': 'PROD-A-001',
        'quantityOnHand': 10,
        'sellingPrice': '19.99',
    })
    assert resp.status_code == 201, resp.json
    return resp.json
