"""
API tests for the back-office dashboard and user moderation.
"""
from decimal import Decimal

import pytest

from stratwealth.kyc.models import KycStatus


def test_dashboard_stats(client, admin, investor, make_user):
    _, admin_headers = admin
    _, investor_headers = investor
    make_user(kyc=KycStatus.PENDING)
    client.post(
        "/investments",
        json={"sector": "REAL_ESTATE", "category": "SEMI_ANNUAL", "amount": "400000"},
        headers=investor_headers
    )
    client.post("/wallet/deposit", json={"amount": "100"}, headers=investor_headers)

    stats = client.get("/admin/dashboard/stats", headers=admin_headers).json()
    assert stats["total_users"] == 3
    assert stats["pending_kyc"] == 1
    assert stats["pending_wallet_transactions"] == 1
    assert stats["active_investments"] == 1
    assert Decimal(stats["total_invested"]) == Decimal("400000")
    assert Decimal(stats["total_expected_returns"]) == Decimal("60000")


@pytest.mark.parametrize("path", ["/admin/dashboard/stats", "/admin/users", "/admin/kyc", "/admin/wallets"])
def test_admin_routes_reject_anonymous(client, path: str):
    assert client.get(path).status_code == 401


@pytest.mark.parametrize("path", ["/admin/dashboard/stats", "/admin/users", "/admin/kyc", "/admin/wallets"])
def test_admin_routes_reject_users(client, make_user, path: str):
    _, headers = make_user(verified=True, kyc=KycStatus.APPROVED)
    assert client.get(path, headers=headers).status_code == 403


def test_list_and_search_users(client, admin, make_user):
    _, admin_headers = admin
    user, _ = make_user()

    everyone = client.get("/admin/users", headers=admin_headers).json()
    assert len(everyone) == 2
    found = client.get("/admin/users", params={"search": user.last_name}, headers=admin_headers).json()
    assert [u["id"] for u in found] == [user.id]
    assert client.get(f"/admin/users/{user.id}", headers=admin_headers).json()["email"] == user.email
    assert client.get("/admin/users/missing", headers=admin_headers).status_code == 404


def test_ban_and_unban(client, admin, make_user):
    _, admin_headers = admin
    user, headers = make_user()

    banned = client.post(f"/admin/users/{user.id}/ban", headers=admin_headers)
    assert banned.json()["is_banned"] is True
    assert client.get("/wallet", headers=headers).status_code == 403
    assert client.post(f"/admin/users/{user.id}/ban", headers=admin_headers).status_code == 409

    client.post(f"/admin/users/{user.id}/unban", headers=admin_headers)
    assert client.get("/wallet", headers=headers).status_code == 200


def test_admin_cannot_be_banned(client, admin):
    admin_user, admin_headers = admin
    assert client.post(f"/admin/users/{admin_user.id}/ban", headers=admin_headers).status_code == 400


def test_verify_email(client, admin, make_user):
    _, admin_headers = admin
    user, headers = make_user(balance=Decimal("1000000.00"), kyc=KycStatus.APPROVED)
    payload = {"sector": "REAL_ESTATE", "category": "SEMI_ANNUAL", "amount": "300000"}
    assert client.post("/investments", json=payload, headers=headers).status_code == 403

    verified = client.post(f"/admin/users/{user.id}/verify-email", headers=admin_headers)
    assert verified.json()["email_verified"] is True
    assert client.post("/investments", json=payload, headers=headers).status_code == 201
