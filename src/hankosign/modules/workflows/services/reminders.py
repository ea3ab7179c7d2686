import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from hankosign.modules.documents.models.document import Document, NON_SIGNABLE_STATUSES
from hankosign.modules.notifications.repositories.notification_repository import NotificationRepository
from hankosign.modules.notifications.services.notification_service import (
    ApprovalOverdueNotification, NotificationService
)
from hankosign.modules.workflows.models.workflow import Approval, ApprovalStatus
from hankosign.modules.workflows.services.workflow_service import WorkflowService

logger = logging.getLogger(__name__)

def notify_overdue_approvals(session: Session, now: Optional[datetime] = None) -> int:
    """Notify approvers of actionable steps past their due date, once per approval"""
    now = now or datetime.utcnow()

    approvals = (
        session.query(Approval)
        .join(Document, Approval.document_id == Document.id)
        .filter(
            Approval.status == ApprovalStatus.PENDING,
            Approval.due_date.isnot(None),
            Approval.due_date < now,
            Approval.overdue_notified.is_(False),
            Document.status.notin_(list(NON_SIGNABLE_STATUSES)),
        )
        .all()
    )

    notifier = NotificationService(NotificationRepository(session))
    notified = 0
    for approval in approvals:
        if not WorkflowService.is_actionable(approval):
            continue
        notifier.notify(ApprovalOverdueNotification(approval.approver_id, approval.document.title))
        approval.overdue_notified = True
        notified += 1

    session.commit()
    if notified:
        logger.info(f"Sent {notified} overdue approval notifications")
    return notified
