import pytest
import stripe

from barberflow.domain.billing.stripe_service import stripe_service
from barberflow.models import User


@pytest.fixture
def stripe_calls(monkeypatch):
    """Stub the Stripe API calls and record what they were asked to do"""
    calls = []

    def fake_create_customer(email, name, user_id):
        calls.append(("customer", email, user_id))
        return "cus_test_123"

    def fake_create_checkout_session(customer_id, price_id, user_id, plan):
        calls.append(("checkout", customer_id, price_id, plan))
        return "https://checkout.stripe.test/session"

    def fake_create_portal_session(customer_id):
        calls.append(("portal", customer_id))
        return "https://billing.stripe.test/portal"

    monkeypatch.setattr(stripe_service, "create_customer", fake_create_customer)
    monkeypatch.setattr(stripe_service, "create_checkout_session", fake_create_checkout_session)
    monkeypatch.setattr(stripe_service, "create_portal_session", fake_create_portal_session)
    return calls


def test_checkout_creates_customer_once(client, db, auth_headers, stripe_calls):
    response = client.post(
        "/api/billing/checkout", json={"planId": "price_pro_test_id"}, headers=auth_headers
    )

    assert response.status_code == 200
    assert response.json() == {"url": "https://checkout.stripe.test/session"}
    user = db.query(User).filter(User.email == "sam@fadehouse.com").first()
    assert user.stripe_customer_id == "cus_test_123"
    # Plan only changes once Stripe confirms through the webhook
    assert user.plan == "free"

    client.post("/api/billing/checkout", json={"planId": "price_business_test_id"}, headers=auth_headers)

    assert [c[0] for c in stripe_calls] == ["customer", "checkout", "checkout"]
    assert stripe_calls[1] == ("checkout", "cus_test_123", "price_pro_test_id", "pro")
    assert stripe_calls[2] == ("checkout", "cus_test_123", "price_business_test_id", "business")


def test_checkout_rejects_unknown_price(client, auth_headers, stripe_calls):
    response = client.post("/api/billing/checkout", json={"planId": "price_unknown"}, headers=auth_headers)

    assert response.status_code == 400
    assert response.json() == {"message": "Invalid plan selected"}
    assert stripe_calls == []


def test_checkout_stripe_failure_is_a_server_error(client, auth_headers, monkeypatch):
    def failing_create_customer(email, name, user_id):
        raise stripe.APIConnectionError("network down")

    monkeypatch.setattr(stripe_service, "create_customer", failing_create_customer)

    response = client.post(
        "/api/billing/checkout", json={"planId": "price_pro_test_id"}, headers=auth_headers
    )

    assert response.status_code == 500
    assert response.json() == {"message": "Failed to create checkout session"}


def test_checkout_requires_authentication(client):
    response = client.post("/api/billing/checkout", json={"planId": "price_pro_test_id"})

    assert response.status_code == 401


def test_portal_requires_a_stripe_customer(client, auth_headers, stripe_calls):
    response = client.post("/api/billing/portal", headers=auth_headers)

    assert response.status_code == 400
    assert response.json() == {"message": "No active subscription found"}


def test_portal_returns_hosted_url(client, auth_headers, set_plan, stripe_calls):
    set_plan("sam@fadehouse.com", "pro", stripe_customer_id="cus_existing")

    response = client.post("/api/billing/portal", headers=auth_headers)

    assert response.status_code == 200
    assert response.json() == {"url": "https://billing.stripe.test/portal"}
    assert stripe_calls == [("portal", "cus_existing")]


def test_current_plan(client, auth_headers, set_plan):
    free = client.get("/api/billing/current-plan", headers=auth_headers).json()
    assert free == {
        "plan": "free",
        "subscriptionStatus": "none",
        "stripeCustomerId": None,
        "hasActiveSubscription": False,
    }

    set_plan("sam@fadehouse.com", "business", stripe_customer_id="cus_1")
    paid = client.get("/api/billing/current-plan", headers=auth_headers).json()
    assert paid["plan"] == "business"
    assert paid["hasActiveSubscription"] is True


def test_usage_counts_this_months_bookings(client, auth_headers, create_service, book):
    from datetime import datetime, timedelta

    service = create_service(auth_headers)
    now = datetime.utcnow()
    period_start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    # Two slots inside the current month regardless of today's date
    book(auth_headers, service["id"], (period_start + timedelta(hours=9)).isoformat())
    book(auth_headers, service["id"], (period_start + timedelta(hours=10)).isoformat())

    usage = client.get("/api/billing/usage", headers=auth_headers).json()

    assert usage["plan"] == "free"
    assert usage["appointmentsThisMonth"] == 2
    assert usage["appointmentLimit"] == 50
    assert usage["appointmentsRemaining"] == 48
    assert usage["advancedAnalytics"] is False
    assert usage["periodStart"] == period_start.isoformat()


def test_usage_is_unlimited_on_paid_plans(client, auth_headers, set_plan):
    set_plan("sam@fadehouse.com", "pro")

    usage = client.get("/api/billing/usage", headers=auth_headers).json()

    assert usage["appointmentLimit"] is None
    assert usage["appointmentsRemaining"] is None
    assert usage["advancedAnalytics"] is True
