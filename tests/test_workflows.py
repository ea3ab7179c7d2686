from datetime import datetime, timedelta

import pytest

from conftest import auth_headers, create_hanko, create_user, upload_pdf
from hankosign.modules.audit.models.audit_log import AuditLog
from hankosign.modules.notifications.models.notification import Notification
from hankosign.modules.workflows.models.workflow import Approval
from hankosign.modules.workflows.services.reminders import notify_overdue_approvals

@pytest.fixture
def people(client, db_session):
    owner = create_user(db_session, "owner@hankosign.jp", name="山田太郎")
    first = create_user(db_session, "first@hankosign.jp", name="佐藤一郎")
    second = create_user(db_session, "second@hankosign.jp", name="鈴木二郎")
    return {
        "owner": (owner.id, auth_headers(client, "owner@hankosign.jp")),
        "first": (first.id, auth_headers(client, "first@hankosign.jp")),
        "second": (second.id, auth_headers(client, "second@hankosign.jp")),
    }

def start_workflow(client, people, is_sequential=True, **step_extra):
    _, owner_headers = people["owner"]
    doc = upload_pdf(client, owner_headers, title="稟議書")
    steps = [{"approver_id": people["first"][0], **step_extra}, {"approver_id": people["second"][0]}]
    resp = client.post(f"/api/documents/{doc['id']}/workflow",
                       json={"name": "稟議", "is_sequential": is_sequential, "steps": steps},
                       headers=owner_headers)
    assert resp.status_code == 201, resp.text
    return doc, resp.json()["workflow"]

def pending_for(client, headers):
    return client.get("/api/approvals", headers=headers).json()["approvals"]

def test_create_workflow(client, db_session, people, email_sender):
    doc, workflow = start_workflow(client, people)
    assert workflow["current_step"] == 0
    assert workflow["total_steps"] == 2
    assert [a["order"] for a in workflow["approvals"]] == [0, 1]
    assert all(a["status"] == "PENDING" for a in workflow["approvals"])

    document = client.get(f"/api/documents/{doc['id']}", headers=people["owner"][1]).json()
    assert document["status"] == "PENDING"

    # Sequential: only the first approver is asked
    assert [m["to"] for m in email_sender.sent] == ["first@hankosign.jp"]
    assert db_session.query(Notification).filter(Notification.user_id == people["first"][0]).count() == 1
    assert db_session.query(AuditLog).filter(AuditLog.action == "WORKFLOW_CREATED").count() == 1

def test_parallel_workflow_asks_everyone(client, people, email_sender):
    start_workflow(client, people, is_sequential=False)
    assert sorted(m["to"] for m in email_sender.sent) == ["first@hankosign.jp", "second@hankosign.jp"]

def test_workflow_validation(client, people):
    _, owner_headers = people["owner"]
    doc = upload_pdf(client, owner_headers)
    url = f"/api/documents/{doc['id']}/workflow"

    assert client.post(url, json={"name": "x", "steps": []}, headers=owner_headers).status_code == 400
    assert client.post(url, json={"name": "x", "steps": [{"approver_id": 9999}]},
                       headers=owner_headers).status_code == 400
    too_many = [{"approver_id": people["first"][0]}] * 21
    assert client.post(url, json={"name": "x", "steps": too_many}, headers=owner_headers).status_code == 400

def test_only_one_workflow_per_document(client, people):
    doc, _ = start_workflow(client, people)
    resp = client.post(f"/api/documents/{doc['id']}/workflow",
                       json={"name": "again", "steps": [{"approver_id": people["first"][0]}]},
                       headers=people["owner"][1])
    assert resp.status_code == 400

def test_workflow_on_finished_document_rejected(client, people):
    _, owner_headers = people["owner"]
    doc = upload_pdf(client, owner_headers)
    client.patch(f"/api/documents/{doc['id']}/status", json={"status": "ARCHIVED"}, headers=owner_headers)
    resp = client.post(f"/api/documents/{doc['id']}/workflow",
                       json={"name": "x", "steps": [{"approver_id": people["first"][0]}]}, headers=owner_headers)
    assert resp.status_code == 400

def test_non_owner_cannot_start_workflow(client, people):
    doc = upload_pdf(client, people["owner"][1])
    resp = client.post(f"/api/documents/{doc['id']}/workflow",
                       json={"name": "x", "steps": [{"approver_id": people["first"][0]}]},
                       headers=people["first"][1])
    assert resp.status_code == 404

def test_get_workflow_visibility(client, db_session, people):
    doc, _ = start_workflow(client, people)
    url = f"/api/documents/{doc['id']}/workflow"
    assert client.get(url, headers=people["owner"][1]).status_code == 200
    assert client.get(url, headers=people["second"][1]).status_code == 200

    create_user(db_session, "stranger@hankosign.jp")
    assert client.get(url, headers=auth_headers(client, "stranger@hankosign.jp")).status_code == 404

def test_sequential_approval_to_completion(client, db_session, people, email_sender):
    doc, workflow = start_workflow(client, people)
    first_approval, second_approval = workflow["approvals"]

    # Second approver has to wait their turn
    resp = client.post(f"/api/approvals/{second_approval['id']}/approve", headers=people["second"][1])
    assert resp.status_code == 400

    resp = client.post(f"/api/approvals/{first_approval['id']}/approve", json={"comment": "OK"},
                       headers=people["first"][1])
    assert resp.status_code == 200
    assert resp.json()["approval"]["status"] == "APPROVED"
    assert resp.json()["approval"]["comment"] == "OK"
    assert resp.json()["document_status"] == "PENDING"
    assert email_sender.sent[-1]["to"] == "second@hankosign.jp"

    resp = client.post(f"/api/approvals/{second_approval['id']}/approve", headers=people["second"][1])
    assert resp.status_code == 200
    assert resp.json()["document_status"] == "COMPLETED"

    document = client.get(f"/api/documents/{doc['id']}", headers=people["owner"][1]).json()
    assert document["status"] == "COMPLETED"
    assert document["completed_at"] is not None

    workflow = client.get(f"/api/documents/{doc['id']}/workflow", headers=people["owner"][1]).json()["workflow"]
    assert workflow["current_step"] == 2
    assert workflow["completed_at"] is not None

    completion = email_sender.sent[-1]
    assert completion["to"] == "owner@hankosign.jp"
    assert doc["verification_code"] in completion["html"]

def test_completed_document_cannot_be_signed(client, people):
    doc, workflow = start_workflow(client, people, is_sequential=False)
    for approval, key in zip(workflow["approvals"], ("first", "second")):
        client.post(f"/api/approvals/{approval['id']}/approve", headers=people[key][1])

    hanko = create_hanko(client, people["owner"][1])
    resp = client.post("/api/signatures", json={"document_id": doc["id"], "hanko_id": hanko["id"],
                                                "position_x": 0, "position_y": 0}, headers=people["owner"][1])
    assert resp.status_code == 400

def test_reject_marks_document_rejected(client, db_session, people):
    doc, workflow = start_workflow(client, people)
    first_approval = workflow["approvals"][0]

    resp = client.post(f"/api/approvals/{first_approval['id']}/reject", json={"comment": "記載漏れ"},
                       headers=people["first"][1])
    assert resp.status_code == 200
    assert resp.json()["approval"]["status"] == "REJECTED"
    assert resp.json()["document_status"] == "REJECTED"
    assert db_session.query(AuditLog).filter(AuditLog.action == "APPROVAL_REJECTED").count() == 1

    # Nothing left to act on
    assert pending_for(client, people["second"][1]) == []

def test_approval_can_only_be_processed_once(client, people):
    _, workflow = start_workflow(client, people)
    approval = workflow["approvals"][0]
    client.post(f"/api/approvals/{approval['id']}/approve", headers=people["first"][1])
    resp = client.post(f"/api/approvals/{approval['id']}/reject", headers=people["first"][1])
    assert resp.status_code == 400

def test_only_the_approver_can_act(client, people):
    _, workflow = start_workflow(client, people)
    approval = workflow["approvals"][0]
    resp = client.post(f"/api/approvals/{approval['id']}/approve", headers=people["second"][1])
    assert resp.status_code == 404

def test_pending_approvals_list(client, people):
    doc, _ = start_workflow(client, people)
    approvals = pending_for(client, people["first"][1])
    assert len(approvals) == 1
    assert approvals[0]["document"]["id"] == doc["id"]
    assert approvals[0]["document"]["title"] == "稟議書"
    assert pending_for(client, people["owner"][1]) == []

def test_sequential_later_step_not_pending_until_its_turn(client, people):
    _, workflow = start_workflow(client, people)
    first_approval, second_approval = workflow["approvals"]
    assert pending_for(client, people["second"][1]) == []

    client.post(f"/api/approvals/{first_approval['id']}/approve", headers=people["first"][1])
    approvals = pending_for(client, people["second"][1])
    assert len(approvals) == 1
    assert approvals[0]["id"] == second_approval["id"]

def test_parallel_steps_all_pending(client, people):
    start_workflow(client, people, is_sequential=False)
    assert len(pending_for(client, people["first"][1])) == 1
    assert len(pending_for(client, people["second"][1])) == 1

def test_overdue_reminders_sent_once(client, db_session, people):
    start_workflow(client, people, due_date=(datetime.utcnow() - timedelta(days=1)).isoformat())

    assert notify_overdue_approvals(db_session) == 1
    assert notify_overdue_approvals(db_session) == 0

    overdue = db_session.query(Notification).filter(
        Notification.user_id == people["first"][0], Notification.title == "承認期限超過"
    ).count()
    assert overdue == 1
    assert db_session.query(Approval).filter(Approval.overdue_notified.is_(True)).count() == 1

def test_no_reminder_before_due_date(client, db_session, people):
    start_workflow(client, people, due_date=(datetime.utcnow() + timedelta(days=3)).isoformat())
    assert notify_overdue_approvals(db_session) == 0
