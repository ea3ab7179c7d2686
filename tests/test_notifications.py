import pytest

from conftest import auth_headers, create_user
from hankosign.modules.notifications.models.notification import Notification
from hankosign.modules.notifications.repositories.notification_repository import NotificationRepository
from hankosign.modules.notifications.services.notification_service import (
    DocumentStatusNotification, NotificationService
)

@pytest.fixture
def owner(db_session):
    return create_user(db_session, "owner@hankosign.jp")

def add_notification(db_session, user_id, status="COMPLETED"):
    service = NotificationService(NotificationRepository(db_session))
    notif = service.notify(DocumentStatusNotification(user_id, "契約書", status))
    db_session.commit()
    return notif

def test_status_notification_is_readable():
    template = DocumentStatusNotification(1, "契約書", "COMPLETED")
    assert template.to_dict() == {
        "user_id": 1,
        "title": "文書ステータスの変更",
        "message": "文書「契約書」のステータスが「完了」に変更されました。",
    }

def test_notify_is_staged_until_commit(db_session, owner):
    service = NotificationService(NotificationRepository(db_session))
    service.notify(DocumentStatusNotification(owner.id, "契約書", "REJECTED"))
    db_session.rollback()
    assert db_session.query(Notification).count() == 0

def test_list_notifications_newest_first(client, db_session, owner):
    first = add_notification(db_session, owner.id, "PENDING")
    second = add_notification(db_session, owner.id, "COMPLETED")
    headers = auth_headers(client, "owner@hankosign.jp")

    notifications = client.get("/api/notifications", headers=headers).json()["notifications"]
    assert [n["id"] for n in notifications] == [second.id, first.id]
    assert notifications[0]["read"] is False

def test_mark_as_read(client, db_session, owner):
    notif = add_notification(db_session, owner.id)
    headers = auth_headers(client, "owner@hankosign.jp")
    resp = client.patch(f"/api/notifications/{notif.id}/read", headers=headers)
    assert resp.status_code == 200
    assert resp.json()["read"] is True

def test_cannot_read_someone_elses_notification(client, db_session, owner):
    notif = add_notification(db_session, owner.id)
    create_user(db_session, "other@hankosign.jp")
    resp = client.patch(f"/api/notifications/{notif.id}/read", headers=auth_headers(client, "other@hankosign.jp"))
    assert resp.status_code == 404

def test_notifications_require_authentication(client):
    assert client.get("/api/notifications").status_code == 401
