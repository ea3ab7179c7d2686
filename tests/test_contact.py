from fastapi.testclient import TestClient

from hankosign.main import app

def contact_payload(**overrides):
    payload = {
        "name": "山田太郎",
        "email": "customer@hankosign.jp",
        "company": "山田商事",
        "subject": "導入について",
        "message": "料金プランを教えてください。",
    }
    payload.update(overrides)
    return payload

def test_contact_sends_support_and_confirmation(client, email_sender):
    resp = client.post("/api/contact", json=contact_payload())
    assert resp.status_code == 200
    support, confirmation = email_sender.sent
    assert support["to"] == "support@hankosign.jp"
    assert "導入について" in support["subject"]
    assert "料金プランを教えてください。" in support["html"]
    assert confirmation["to"] == "customer@hankosign.jp"

def test_contact_escapes_html(client, email_sender):
    client.post("/api/contact", json=contact_payload(message="<script>alert(1)</script>", name="<b>x</b>"))
    support = email_sender.sent[0]["html"]
    assert "<script>" not in support
    assert "&lt;script&gt;" in support
    assert "<b>x</b>" not in support

def test_contact_company_optional(client, email_sender):
    resp = client.post("/api/contact", json=contact_payload(company=None))
    assert resp.status_code == 200
    assert "会社名" not in email_sender.sent[0]["html"]

def test_contact_validation(client, email_sender):
    for override in ({"name": ""}, {"email": "bad"}, {"subject": " "}, {"message": ""},
                     {"message": "x" * 5001}, {"company": "c" * 101}):
        resp = client.post("/api/contact", json=contact_payload(**override))
        assert resp.status_code == 400, override
    assert email_sender.sent == []

def test_contact_mail_failure_is_500(client, email_sender):
    email_sender.fail = True
    resp = TestClient(app, raise_server_exceptions=False).post("/api/contact", json=contact_payload())
    assert resp.status_code == 500
    assert resp.json() == {"detail": "Internal server error"}
