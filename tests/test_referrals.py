"""
API tests for referral commissions.
"""
from decimal import Decimal

import pytest

from stratwealth.kyc.models import KycStatus
from stratwealth.referrals.models import Referral, ReferralCommission, ReferralStatus
from stratwealth.wallet.models import Wallet


@pytest.fixture
def referred_investor(db, make_user):
    """A referrer and an investor they brought in."""
    referrer, referrer_headers = make_user()
    investor, investor_headers = make_user(balance=Decimal("5000000.00"), verified=True, kyc=KycStatus.APPROVED)
    db.add(Referral(referrer_id=referrer.id, referred_id=investor.id, status=ReferralStatus.COMPLETED))
    db.commit()
    return (referrer, referrer_headers), (investor, investor_headers)


def set_rates(client, admin_headers, **rates):
    response = client.put("/admin/referral-settings", json=rates, headers=admin_headers)
    assert response.status_code == 200
    return response.json()


def test_settings_default_to_zero(client, admin):
    _, admin_headers = admin
    settings = client.get("/admin/referral-settings", headers=admin_headers).json()
    assert Decimal(settings["property_commission_rate"]) == Decimal("0")


def test_partial_settings_update_keeps_other_rates(client, admin):
    _, admin_headers = admin
    set_rates(client, admin_headers, property_commission_rate="2", market_commission_rate="1.5")
    updated = set_rates(client, admin_headers, market_commission_rate="3")

    assert Decimal(updated["property_commission_rate"]) == Decimal("2")
    assert Decimal(updated["market_commission_rate"]) == Decimal("3")


def test_investment_earns_pending_commission(client, db, admin, referred_investor, locked_entities):
    _, admin_headers = admin
    (referrer, referrer_headers), (_, investor_headers) = referred_investor
    set_rates(client, admin_headers, property_commission_rate="2")

    response = client.post(
        "/investments",
        json={"sector": "REAL_ESTATE", "category": "SEMI_ANNUAL", "amount": "300000"},
        headers=investor_headers
    )
    assert response.status_code == 201

    overview = client.get("/referrals", headers=referrer_headers).json()
    assert len(overview["referred_users"]) == 1
    assert Decimal(overview["total_pending"]) == Decimal("6000.00")
    commission = overview["commissions"][0]
    assert commission["transaction_type"] == "REAL_ESTATE_INVESTMENT"
    assert commission["source_id"] == response.json()["id"]

    paid = client.post(f"/admin/commissions/{commission['id']}/pay", headers=admin_headers)
    assert paid.status_code == 200
    assert paid.json()["status"] == "PAID"
    assert ReferralCommission in locked_entities
    db.expire_all()
    assert db.query(Wallet).filter(Wallet.user_id == referrer.id).one().balance == Decimal("6000.00")

    assert client.post(f"/admin/commissions/{commission['id']}/pay", headers=admin_headers).status_code == 409


def test_green_energy_uses_its_own_rate(client, admin, referred_investor):
    _, admin_headers = admin
    (_, referrer_headers), (_, investor_headers) = referred_investor
    set_rates(client, admin_headers, property_commission_rate="2", green_energy_commission_rate="1")

    client.post(
        "/investments",
        json={"sector": "GREEN_ENERGY", "category": "ANNUAL", "amount": "1500000"},
        headers=investor_headers
    )
    overview = client.get("/referrals", headers=referrer_headers).json()
    assert Decimal(overview["total_pending"]) == Decimal("15000.00")


def test_property_purchase_earns_commission(client, admin, referred_investor):
    _, admin_headers = admin
    (_, referrer_headers), (_, investor_headers) = referred_investor
    set_rates(client, admin_headers, property_commission_rate="2")

    listing = client.post(
        "/admin/properties",
        json={"name": "Garden Villa", "location": "Faro, Portugal", "price": "1000.00"},
        headers=admin_headers
    ).json()
    client.post(
        f"/properties/{listing['id']}/purchase",
        json={"type": "INSTALLMENT", "installments": 4},
        headers=investor_headers
    )

    commission = client.get("/referrals", headers=referrer_headers).json()["commissions"][0]
    assert commission["transaction_type"] == "PROPERTY_PURCHASE"
    assert Decimal(commission["amount"]) == Decimal("20.00")


def test_no_commission_at_zero_rate(client, referred_investor):
    (_, referrer_headers), (_, investor_headers) = referred_investor
    client.post(
        "/investments",
        json={"sector": "REAL_ESTATE", "category": "SEMI_ANNUAL", "amount": "300000"},
        headers=investor_headers
    )
    assert client.get("/referrals", headers=referrer_headers).json()["commissions"] == []


def test_commission_admin_routes_require_admin(client, make_user):
    _, headers = make_user()
    assert client.get("/admin/commissions", headers=headers).status_code == 403
    assert client.put("/admin/referral-settings", json={}, headers=headers).status_code == 403
