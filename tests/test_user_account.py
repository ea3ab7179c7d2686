import pytest

from conftest import DEFAULT_PASSWORD, auth_headers, create_user
from hankosign.modules.audit.models.audit_log import AuditLog

@pytest.fixture
def headers(client, db_session):
    create_user(db_session, "me@hankosign.jp", name="山田太郎")
    return auth_headers(client, "me@hankosign.jp")

def test_update_profile(client, db_session, headers):
    resp = client.patch("/api/user/profile", json={
        "name": "山田次郎", "name_kana": "ヤマダジロウ", "email": "jiro@hankosign.jp", "position": "課長"
    }, headers=headers)
    assert resp.status_code == 200, resp.text
    user = resp.json()["user"]
    assert user["name"] == "山田次郎"
    assert user["email"] == "jiro@hankosign.jp"
    assert user["position"] == "課長"

    entry = db_session.query(AuditLog).filter(AuditLog.action == "PROFILE_UPDATED").one()
    assert entry.details["updated_fields"] == ["email", "name", "name_kana", "position"]

def test_profile_email_must_be_unique(client, db_session, headers):
    create_user(db_session, "taken@hankosign.jp")
    resp = client.patch("/api/user/profile", json={"name": "山田", "email": "taken@hankosign.jp"}, headers=headers)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Email already in use"

def test_profile_keeping_own_email(client, headers):
    resp = client.patch("/api/user/profile", json={"name": "山田", "email": "me@hankosign.jp"}, headers=headers)
    assert resp.status_code == 200

def test_profile_requires_name(client, headers):
    resp = client.patch("/api/user/profile", json={"name": "", "email": "me@hankosign.jp"}, headers=headers)
    assert resp.status_code == 400

def test_update_company(client, db_session, headers):
    resp = client.patch("/api/user/company", json={"company_name": "山田商事", "corporate_number": "1234567890123"},
                        headers=headers)
    assert resp.status_code == 200
    assert resp.json()["user"]["corporate_number"] == "1234567890123"
    assert db_session.query(AuditLog).filter(AuditLog.action == "COMPANY_INFO_UPDATED").count() == 1

def test_corporate_number_too_long(client, headers):
    resp = client.patch("/api/user/company", json={"corporate_number": "12345678901234"}, headers=headers)
    assert resp.status_code == 400

def test_change_password(client, db_session, headers):
    resp = client.patch("/api/user/password", json={"current_password": DEFAULT_PASSWORD,
                                                    "new_password": "Changed123"}, headers=headers)
    assert resp.status_code == 200
    assert db_session.query(AuditLog).filter(AuditLog.action == "PASSWORD_CHANGED").count() == 1

    login = client.post("/api/auth/login", json={"email": "me@hankosign.jp", "password": "Changed123"})
    assert login.status_code == 200

def test_change_password_wrong_current(client, headers):
    resp = client.patch("/api/user/password", json={"current_password": "Wrong12345",
                                                    "new_password": "Changed123"}, headers=headers)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Current password is incorrect"

def test_change_password_policy(client, headers):
    resp = client.patch("/api/user/password", json={"current_password": DEFAULT_PASSWORD,
                                                    "new_password": "weak"}, headers=headers)
    assert resp.status_code == 400

def test_preferences_are_merged(client, headers):
    first = client.patch("/api/user/preferences", json={"language": "en", "timezone": "Asia/Tokyo"}, headers=headers)
    assert first.status_code == 200
    second = client.patch("/api/user/preferences", json={"email_notifications": False}, headers=headers)
    assert second.json()["preferences"] == {
        "language": "en", "timezone": "Asia/Tokyo", "email_notifications": False
    }

    me = client.get("/api/auth/me", headers=headers).json()["user"]
    assert me["preferences"]["language"] == "en"

def test_preferences_language_restricted(client, headers):
    resp = client.patch("/api/user/preferences", json={"language": "fr"}, headers=headers)
    assert resp.status_code == 400

def test_account_endpoints_require_authentication(client):
    assert client.patch("/api/user/company", json={}).status_code == 401
