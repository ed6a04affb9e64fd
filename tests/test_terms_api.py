"""
API tests for the terms quote and schedule endpoints.
"""
from datetime import datetime
from decimal import Decimal


def test_plans(client, make_user):
    _, headers = make_user()
    plans = client.get("/terms/plans", headers=headers).json()
    assert {p["category"]: p["duration_months"] for p in plans} == {"SEMI_ANNUAL": 6, "ANNUAL": 12}


def test_quote_annual(client, make_user):
    _, headers = make_user()
    response = client.post("/terms/quote", json={"category": "ANNUAL", "principal": "10000"}, headers=headers)
    assert response.status_code == 200
    data = response.json()
    assert data["duration_months"] == 12
    assert Decimal(data["return_rate"]) == Decimal("0.30")
    assert Decimal(data["expected_return"]) == Decimal("3000")


def test_quote_rejects_non_positive_principal(client, make_user):
    _, headers = make_user()
    response = client.post("/terms/quote", json={"category": "ANNUAL", "principal": "0"}, headers=headers)
    assert response.status_code == 400
    assert "positive" in response.json()["detail"]


def test_quote_rejects_unknown_category(client, make_user):
    _, headers = make_user()
    response = client.post("/terms/quote", json={"category": "MONTHLY", "principal": "100"}, headers=headers)
    assert response.status_code == 400
    assert "Invalid plan category" in response.json()["detail"]


def test_schedule(client, make_user):
    _, headers = make_user()
    response = client.post(
        "/terms/schedule",
        json={"total_amount": "3000", "installments": 12, "start_date": "2024-01-01T00:00:00Z"},
        headers=headers
    )
    assert response.status_code == 200
    data = response.json()
    assert Decimal(data["installment_amount"]) == Decimal("250")
    assert len(data["payments"]) == 12
    first = datetime.fromisoformat(data["payments"][0]["due_date"].replace("Z", "+00:00"))
    second = datetime.fromisoformat(data["payments"][1]["due_date"].replace("Z", "+00:00"))
    assert first.isoformat() == "2024-01-01T00:00:00+00:00"
    assert second.isoformat() == "2024-01-31T00:00:00+00:00"


def test_schedule_rejects_zero_installments(client, make_user):
    _, headers = make_user()
    response = client.post("/terms/schedule", json={"total_amount": "3000", "installments": 0}, headers=headers)
    assert response.status_code == 400


def test_schedule_rejects_oversized_installment_count(client, make_user):
    _, headers = make_user()
    response = client.post(
        "/terms/schedule",
        json={"total_amount": "1000", "installments": 100000, "start_date": "2024-01-01T00:00:00Z"},
        headers=headers
    )
    assert response.status_code == 422


def test_schedule_past_calendar_range_rejected(client, make_user):
    _, headers = make_user()
    response = client.post(
        "/terms/schedule",
        json={"total_amount": "1000", "installments": 12, "start_date": "9999-06-01T00:00:00Z"},
        headers=headers
    )
    assert response.status_code == 400
    assert "calendar range" in response.json()["detail"]


def test_terms_require_session(client):
    assert client.post("/terms/quote", json={"category": "ANNUAL", "principal": "10000"}).status_code == 401


def test_responses_carry_correlation_id(client, make_user):
    _, headers = make_user()
    response = client.get("/terms/plans", headers={**headers, "X-Correlation-ID": "corr-123"})
    assert response.headers["X-Correlation-ID"] == "corr-123"
    assert "X-Process-Time" in response.headers


def test_health(client):
    assert client.get("/health").json()["status"] == "healthy"
