from typing import List, Optional

from hankosign.modules.notifications.models.notification import Notification
from hankosign.modules.notifications.repositories.notification_repository import NotificationRepository

READABLE_STATUSES = {
    'DRAFT': '下書き',
    'PENDING': '承認待ち',
    'IN_PROGRESS': '署名中',
    'COMPLETED': '完了',
    'REJECTED': '却下',
    'ARCHIVED': 'アーカイブ',
}

class NotificationTemplate:
    def __init__(self, user_id: int, title: str, message: str):
        self.user_id = user_id
        self.title = title
        self.message = message

    def to_dict(self):
        return {
            'user_id': self.user_id,
            'title': self.title,
            'message': self.message
        }

class DocumentSignedNotification(NotificationTemplate):
    def __init__(self, user_id: int, document_title: str, signer_name: str):
        title = "文書に押印されました"
        message = f"{signer_name}さんが文書「{document_title}」に押印しました。"
        super().__init__(user_id, title, message)

class DocumentStatusNotification(NotificationTemplate):
    def __init__(self, user_id: int, document_title: str, new_status: str):
        title = "文書ステータスの変更"
        status_human = READABLE_STATUSES.get(new_status, new_status)
        message = f"文書「{document_title}」のステータスが「{status_human}」に変更されました。"
        super().__init__(user_id, title, message)

class ApprovalRequestNotification(NotificationTemplate):
    def __init__(self, user_id: int, document_title: str):
        title = "承認依頼"
        message = f"文書「{document_title}」の承認をお願いします。"
        super().__init__(user_id, title, message)

class ApprovalOverdueNotification(NotificationTemplate):
    def __init__(self, user_id: int, document_title: str):
        title = "承認期限超過"
        message = f"文書「{document_title}」の承認期限を過ぎています。"
        super().__init__(user_id, title, message)

class NotificationService:
    """
    In-app notifications.

    ``notify`` only stages the row in the session so it commits together with
    the change that triggered it.
    """

    def __init__(self, repository: NotificationRepository):
        self.notification_repository = repository

    def notify(self, template: NotificationTemplate) -> Notification:
        notif = Notification(**template.to_dict())
        return self.notification_repository.add(notif)

    def get_notifications(self, user_id: int) -> List[Notification]:
        return self.notification_repository.find_by_user_id(user_id)

    def mark_as_read(self, notification_id: int, user_id: int) -> Optional[Notification]:
        notif = self.notification_repository.find_for_user(notification_id, user_id)
        if not notif:
            return None
        return self.notification_repository.update(notif, {'read': True})
