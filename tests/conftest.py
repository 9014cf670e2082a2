import hashlib
import hmac
import json
import os
import time

# Must be set before barberflow is imported: config is read at import time
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["REDIS_ENABLED"] = "false"
os.environ["SECURITY_HEADERS_ENABLED"] = "true"
os.environ["STRIPE_SECRET_KEY"] = "sk_test_dummy"
os.environ["STRIPE_WEBHOOK_SECRET"] = "whsec_test_secret"
os.environ["STRIPE_PRO_PRICE_ID"] = "price_pro_test_id"
os.environ["STRIPE_BUSINESS_PRICE_ID"] = "price_business_test_id"
os.environ.pop("RESEND_API_KEY", None)

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from barberflow import email_service  # noqa: E402
from barberflow.database import Base, SessionLocal, engine  # noqa: E402
from barberflow.main import app  # noqa: E402
from barberflow.models import User  # noqa: E402

WEBHOOK_SECRET = os.environ["STRIPE_WEBHOOK_SECRET"]
DEFAULT_PASSWORD = "secret123"


@pytest.fixture(autouse=True)
def database():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def register(client):
    """Register a barber and return the response body (user fields plus token)"""

    def _register(email="sam@fadehouse.com", name="Sam Fade", password=DEFAULT_PASSWORD, **extra):
        response = client.post(
            "/api/auth/register",
            json={"name": name, "email": email, "password": password, **extra},
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _register


@pytest.fixture
def auth_headers(register):
    user = register()
    return {"Authorization": f"Bearer {user['token']}"}


@pytest.fixture
def other_headers(register):
    user = register(email="alex@cutabove.com", name="Alex Cut")
    return {"Authorization": f"Bearer {user['token']}"}


@pytest.fixture
def set_plan(db):
    """Force a user's plan directly in the database"""

    def _set_plan(email, plan, subscription_status="active", stripe_customer_id=None):
        user = db.query(User).filter(User.email == email).first()
        user.plan = plan
        user.subscription_status = subscription_status
        if stripe_customer_id:
            user.stripe_customer_id = stripe_customer_id
        db.commit()
        return user

    return _set_plan


@pytest.fixture
def create_service(client):
    def _create_service(headers, name="Classic Cut", duration=30, price=25.0, **extra):
        response = client.post(
            "/api/services",
            json={"name": name, "duration": duration, "price": price, **extra},
            headers=headers,
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _create_service


@pytest.fixture
def book(client):
    """Book an appointment and return the raw response"""

    def _book(headers, service_id, start, client_name="Jordan Lee", client_email="jordan@mail.com", **extra):
        return client.post(
            "/api/appointments",
            json={
                "clientName": client_name,
                "clientEmail": client_email,
                "serviceId": service_id,
                "startTime": start,
                **extra,
            },
            headers=headers,
        )

    return _book


@pytest.fixture
def captured_reset_emails(monkeypatch):
    """Replace the reset email sender and collect (to, link) pairs"""
    sent = []

    async def fake_send_password_reset_email(to, reset_link):
        sent.append((to, reset_link))
        return {"id": "email_test"}

    monkeypatch.setattr(email_service, "send_password_reset_email", fake_send_password_reset_email)
    return sent


def stripe_signature(payload: str, secret: str = WEBHOOK_SECRET, timestamp: int = None) -> str:
    """Build a Stripe-Signature header the same way Stripe signs deliveries"""
    timestamp = timestamp or int(time.time())
    signed = f"{timestamp}.{payload}".encode()
    signature = hmac.new(secret.encode(), signed, hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={signature}"


@pytest.fixture
def send_webhook(client):
    def _send(event: dict, secret: str = WEBHOOK_SECRET):
        payload = json.dumps(event)
        return client.post(
            "/api/billing/webhook",
            content=payload,
            headers={
                "Content-Type": "application/json",
                "Stripe-Signature": stripe_signature(payload, secret),
            },
        )

    return _send


class FakeRedis:
    """In-memory stand-in for the Redis commands the cache uses"""

    def __init__(self):
        self.store = {}

    def get(self, key):
        return self.store.get(key)

    def setex(self, key, ttl, value):
        self.store[key] = value


@pytest.fixture
def fake_redis(monkeypatch):
    from barberflow.cache import cache

    redis = FakeRedis()
    monkeypatch.setattr(cache, "redis_client", redis)
    return redis
