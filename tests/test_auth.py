"""
API tests for registration, login and the session gate.
"""
from stratwealth.auth.models import Role, User
from stratwealth.auth.service import issue_token
from stratwealth.core.config import settings
from stratwealth.referrals.models import Referral
from stratwealth.wallet.models import Wallet

PASSWORD = "password123"


def register_payload(**overrides):
    payload = {
        "first_name": "Ada",
        "last_name": "Lovelace",
        "email": "Ada@StratWealth.com",
        "password": "s3cure-pass",
    }
    payload.update(overrides)
    return payload


def test_register_creates_user_and_wallet(client, db):
    response = client.post("/auth/register", json=register_payload())
    assert response.status_code == 201
    data = response.json()
    assert data["role"] == "USER"
    assert data["token_type"] == "bearer"
    assert "access_token" in response.cookies

    user = db.query(User).filter(User.id == data["user_id"]).one()
    assert user.email == "ada@stratwealth.com"
    assert user.hashed_password != "s3cure-pass"
    assert db.query(Wallet).filter(Wallet.user_id == user.id).count() == 1


def test_register_duplicate_email(client):
    assert client.post("/auth/register", json=register_payload()).status_code == 201
    response = client.post("/auth/register", json=register_payload())
    assert response.status_code == 409
    assert "correlation_id" in response.json()


def test_register_short_password(client):
    response = client.post("/auth/register", json=register_payload(password="short"))
    assert response.status_code == 422


def test_register_with_referral_code(client, db, make_user):
    referrer, _ = make_user()
    response = client.post(
        "/auth/register",
        json=register_payload(email="referred@stratwealth.com", referral_code=referrer.referral_code.lower())
    )
    assert response.status_code == 201

    referral = db.query(Referral).filter(Referral.referred_id == response.json()["user_id"]).one()
    assert referral.referrer_id == referrer.id


def test_register_with_unknown_referral_code(client, db):
    response = client.post("/auth/register", json=register_payload(referral_code="NOPE1234"))
    assert response.status_code == 201
    assert db.query(Referral).count() == 0


def test_login_and_me(client, make_user):
    user, _ = make_user()
    response = client.post("/auth/login", json={"email": user.email, "password": PASSWORD})
    assert response.status_code == 200
    token = response.json()["access_token"]

    me = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    body = me.json()
    assert body["id"] == user.id
    assert body["kyc_status"] == "NOT_SUBMITTED"
    assert body["email_verified"] is False


def test_session_cookie_authenticates(client, make_user):
    user, _ = make_user()
    client.post("/auth/login", json={"email": user.email, "password": PASSWORD})
    assert client.get("/auth/me").status_code == 200

    client.post("/auth/logout")
    client.cookies.clear()
    assert client.get("/auth/me").status_code == 401


def test_login_wrong_password(client, make_user):
    user, _ = make_user()
    response = client.post("/auth/login", json={"email": user.email, "password": "wrong-password"})
    assert response.status_code == 401


def test_login_banned_user(client, make_user):
    user, _ = make_user(banned=True)
    response = client.post("/auth/login", json={"email": user.email, "password": PASSWORD})
    assert response.status_code == 403


def test_me_requires_session(client):
    response = client.get("/auth/me")
    assert response.status_code == 401
    assert response.json()["detail"]


def test_forged_token_is_unauthenticated(client):
    response = client.get("/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


def test_token_for_deleted_user_is_unauthenticated(client):
    ghost = User(id="00000000-0000-0000-0000-000000000000", role=Role.USER)
    response = client.get("/auth/me", headers={"Authorization": f"Bearer {issue_token(ghost)}"})
    assert response.status_code == 401


def test_browser_is_redirected_to_existing_page(client):
    response = client.get("/auth/me", headers={"Accept": "text/html"}, follow_redirects=False)
    assert response.status_code == 302
    assert response.headers["location"] == "/docs"
    assert client.get(response.headers["location"]).status_code == 200


def test_browser_redirect_target_is_configurable(client, monkeypatch):
    monkeypatch.setattr(settings, "LOGIN_REDIRECT_URL", "/app/sign-in")
    response = client.get("/auth/me", headers={"Accept": "text/html"}, follow_redirects=False)
    assert response.headers["location"] == "/app/sign-in"


def test_banned_session_is_forbidden(client, make_user):
    _, headers = make_user(banned=True)
    assert client.get("/auth/me", headers=headers).status_code == 403


def test_change_password(client, make_user):
    user, headers = make_user()
    response = client.post(
        "/auth/change-password",
        json={"current_password": PASSWORD, "new_password": "brand-new-pass"},
        headers=headers
    )
    assert response.status_code == 200

    login = client.post("/auth/login", json={"email": user.email, "password": "brand-new-pass"})
    assert login.status_code == 200


def test_change_password_wrong_current(client, make_user):
    _, headers = make_user()
    response = client.post(
        "/auth/change-password",
        json={"current_password": "not-it-at-all", "new_password": "brand-new-pass"},
        headers=headers
    )
    assert response.status_code == 400
