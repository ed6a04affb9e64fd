"""
API tests for KYC submission and review.
"""
from stratwealth.kyc.models import KycStatus
from stratwealth.notifications.models import Notification

SUBMISSION = {
    "country": "Portugal",
    "document_type": "PASSPORT",
    "document_number": "P98765432",
    "document_image": "kyc/uploads/passport-front.png",
}


def test_status_before_submission(client, make_user):
    _, headers = make_user()
    response = client.get("/kyc/status", headers=headers)
    assert response.status_code == 200
    assert response.json() == {"status": "NOT_SUBMITTED", "submission": None}


def test_submit_and_approve(client, db, make_user, admin):
    user, headers = make_user()
    _, admin_headers = admin

    submitted = client.post("/kyc/submit", json=SUBMISSION, headers=headers)
    assert submitted.status_code == 201
    assert submitted.json()["status"] == "PENDING"

    queue = client.get("/admin/kyc", params={"status": "PENDING"}, headers=admin_headers).json()
    assert [k["id"] for k in queue] == [submitted.json()["id"]]

    approved = client.post(f"/admin/kyc/{submitted.json()['id']}/approve", headers=admin_headers)
    assert approved.status_code == 200
    assert approved.json()["status"] == "APPROVED"

    me = client.get("/auth/me", headers=headers).json()
    assert me["kyc_status"] == "APPROVED"
    assert db.query(Notification).filter(Notification.user_id == user.id).count() == 1


def test_rejected_submission_can_be_resubmitted(client, make_user, admin):
    _, headers = make_user()
    _, admin_headers = admin

    kyc_id = client.post("/kyc/submit", json=SUBMISSION, headers=headers).json()["id"]
    rejected = client.post(f"/admin/kyc/{kyc_id}/reject", json={"reason": "Blurry image"}, headers=admin_headers)
    assert rejected.json()["status"] == "REJECTED"
    assert rejected.json()["rejection_reason"] == "Blurry image"

    again = client.post("/kyc/submit", json=SUBMISSION, headers=headers)
    assert again.status_code == 201
    assert again.json()["id"] == kyc_id
    assert again.json()["status"] == "PENDING"
    assert again.json()["rejection_reason"] is None


def test_approved_kyc_cannot_be_resubmitted(client, make_user):
    _, headers = make_user(kyc=KycStatus.APPROVED)
    assert client.post("/kyc/submit", json=SUBMISSION, headers=headers).status_code == 409


def test_reviewed_submission_cannot_be_reviewed_again(client, make_user, admin):
    _, headers = make_user()
    _, admin_headers = admin
    kyc_id = client.post("/kyc/submit", json=SUBMISSION, headers=headers).json()["id"]

    client.post(f"/admin/kyc/{kyc_id}/approve", headers=admin_headers)
    assert client.post(f"/admin/kyc/{kyc_id}/approve", headers=admin_headers).status_code == 409


def test_review_unknown_submission(client, admin):
    _, admin_headers = admin
    assert client.post("/admin/kyc/missing/approve", headers=admin_headers).status_code == 404


def test_review_requires_admin(client, make_user):
    _, headers = make_user()
    assert client.get("/admin/kyc", headers=headers).status_code == 403
