"""
Pytest fixtures for truck_sales backend tests.

Provides an in-memory database, an authenticated admin, a fake object
storage client and a truck factory.
"""

import itertools

import pytest

from truck_sales import create_app
from truck_sales.extensions import db
from truck_sales.services import auth_service, inventory_service
from truck_sales.storage import EXTENSION_KEY


ADMIN_PASSWORD = "Password123!"
PUBLIC_BASE_URL = "https://cdn.example.test/truck-images"


class FakeS3Client:
    """
    Records put_object and delete_object calls.

    fail=True simulates an outage; put_limit makes puts fail once that many
    objects are stored.
    """

    def __init__(self):
        self.objects = {}
        self.deleted = []
        self.fail = False
        self.put_limit = None

    def put_object(self, Bucket, Key, Body, ContentType):
        if self.fail or (self.put_limit is not None and len(self.objects) >= self.put_limit):
            raise RuntimeError("storage unavailable")
        self.objects[Key] = {"bucket": Bucket, "body": Body, "content_type": ContentType}
        return {"ETag": '"fake"'}

    def delete_object(self, Bucket, Key):
        self.deleted.append(Key)
        self.objects.pop(Key, None)
        return {}


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
        'VIEW_IP_SALT': 'test-salt',
        'STORAGE_BUCKET': 'truck-images',
        'STORAGE_PUBLIC_BASE_URL': PUBLIC_BASE_URL,
    })

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function', autouse=True)
def db_session(app):
    """Fresh database rows for each test."""
    with app.app_context():
        # Clear all data but keep schema
        meta = db.metadata
        for table in reversed(meta.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()
        db.session.expunge_all()

        yield db.session

        # Cleanup after test
        db.session.rollback()


@pytest.fixture(autouse=True)
def fast_bcrypt(monkeypatch):
    """Minimum bcrypt cost keeps login-heavy tests fast."""
    monkeypatch.setattr(auth_service, "BCRYPT_ROUNDS", 4)


@pytest.fixture(scope='function')
def admin_user(db_session):
    return auth_service.create_user(
        username="admin",
        email="admin@example.com",
        password=ADMIN_PASSWORD,
    )


@pytest.fixture(scope='function')
def admin_token(client, admin_user):
    token = get_auth_token(client, "admin", ADMIN_PASSWORD)
    assert token
    return token


@pytest.fixture(scope='function')
def admin_headers(admin_token):
    return auth_headers(admin_token)


@pytest.fixture(scope='function')
def fake_s3(app):
    """Swap the boto3 client for an in-memory fake for one test."""
    original = app.extensions[EXTENSION_KEY]
    fake = FakeS3Client()
    app.extensions[EXTENSION_KEY] = fake
    yield fake
    app.extensions[EXTENSION_KEY] = original


_serial = itertools.count(1)


def truck_payload(**overrides) -> dict:
    """Valid SALE truck payload with a unique VIN and stock number."""
    n = next(_serial)
    payload = {
        "title": f"2022 Ford F-150 XLT #{n}",
        "year": 2022,
        "make": "Ford",
        "model": "F-150",
        "trim": "XLT",
        "mileage": 15420,
        "fuel_type": "Gasoline",
        "transmission": "Automatic",
        "drivetrain": "4WD",
        "color": "Oxford White",
        "vin": f"1FTEW1EP5NK{n:06d}",
        "stock_number": f"F22-{n:04d}",
        "description": "Clean one-owner truck.",
        "price_cents": 4_299_900,
    }
    payload.update(overrides)
    return payload


@pytest.fixture(scope='function')
def make_truck(db_session):
    """Factory: create a truck through the service layer and return its dict."""
    def _make(**overrides):
        return inventory_service.create_truck(patch=truck_payload(**overrides))
    return _make


def get_auth_token(client, username: str, password: str) -> str:
    """Helper to get auth token for a user."""
    response = client.post('/api/auth/login', json={
        'username': username,
        'password': password
    })
    if response.status_code == 200:
        return response.json.get('token')
    return None


def auth_headers(token: str) -> dict:
    """Helper to create Authorization headers."""
    return {'Authorization': f'Bearer {token}'}
