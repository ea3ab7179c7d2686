import logging
from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session, joinedload

from hankosign.config import get_settings
from hankosign.errors import NotFoundError, ValidationError
from hankosign.modules.audit.services.audit_service import AuditAction, AuditService
from hankosign.modules.documents.models.document import Document, DocumentStatus, NON_SIGNABLE_STATUSES
from hankosign.modules.notifications.repositories.notification_repository import NotificationRepository
from hankosign.modules.notifications.services.notification_service import (
    ApprovalRequestNotification, DocumentStatusNotification, NotificationService
)
from hankosign.modules.users.models.user import User
from hankosign.modules.workflows.models.workflow import Approval, ApprovalStatus, Workflow
from hankosign.modules.workflows.schemas.workflow_schemas import WorkflowCreate
from hankosign.services.email_sender import EmailSender
from hankosign.services.email_templates import approval_request_email, document_completed_email

logger = logging.getLogger(__name__)

class WorkflowService:

    @staticmethod
    def is_actionable(approval: Approval) -> bool:
        """A pending step can be acted on now; sequential workflows only expose the current step"""
        if approval.status != ApprovalStatus.PENDING:
            return False
        workflow = approval.workflow
        return not workflow.is_sequential or approval.order == workflow.current_step

    @staticmethod
    def _notify_actionable(session: Session, workflow: Workflow, document: Document) -> List[Approval]:
        notifier = NotificationService(NotificationRepository(session))
        actionable = [a for a in workflow.approvals if WorkflowService.is_actionable(a)]
        for approval in actionable:
            notifier.notify(ApprovalRequestNotification(approval.approver_id, document.title))
        return actionable

    @staticmethod
    def create_workflow(session: Session, owner: User, document_id: int,
                        data: WorkflowCreate) -> Tuple[Workflow, List[Approval]]:
        """
        Start an approval workflow on an owned document.

        Returns the workflow and the approvals whose approvers must be asked now.
        """
        # 1) Document checks
        document = (
            session.query(Document)
            .filter(Document.id == document_id, Document.created_by_id == owner.id)
            .first()
        )
        if not document:
            raise NotFoundError("Document not found")
        if document.workflow is not None:
            raise ValidationError("This document already has a workflow")
        if document.status in NON_SIGNABLE_STATUSES:
            raise ValidationError("A workflow cannot be started for this document")

        # 2) Approvers must exist
        approver_ids = {step.approver_id for step in data.steps}
        found = {u.id for u in session.query(User.id).filter(User.id.in_(approver_ids)).all()}
        if found != approver_ids:
            raise ValidationError("Approver not found")

        # 3) Workflow and its steps
        workflow = Workflow(
            document_id=document.id,
            name=data.name,
            current_step=0,
            total_steps=len(data.steps),
            is_sequential=data.is_sequential,
        )
        for order, step in enumerate(data.steps):
            workflow.approvals.append(Approval(
                document_id=document.id,
                approver_id=step.approver_id,
                order=order,
                status=ApprovalStatus.PENDING,
                due_date=step.due_date,
            ))
        session.add(workflow)
        document.status = DocumentStatus.PENDING
        session.flush()

        # 4) Notifications and audit, committed with the workflow
        actionable = WorkflowService._notify_actionable(session, workflow, document)
        AuditService(session).record(
            AuditAction.WORKFLOW_CREATED,
            "Workflow",
            workflow.id,
            user_id=owner.id,
            details={"document_id": document.id, "total_steps": workflow.total_steps,
                     "is_sequential": workflow.is_sequential},
        )
        session.commit()
        session.refresh(workflow)

        logger.info(f"Workflow {workflow.id} started on document {document.id} with {workflow.total_steps} steps")
        return workflow, actionable

    @staticmethod
    def get_workflow(session: Session, user: User, document_id: int) -> Workflow:
        """Workflow of a document, visible to its owner and its approvers"""
        workflow = session.query(Workflow).filter(Workflow.document_id == document_id).first()
        if not workflow:
            raise NotFoundError("Workflow not found")
        is_owner = workflow.document.created_by_id == user.id
        is_approver = any(a.approver_id == user.id for a in workflow.approvals)
        if not (is_owner or is_approver):
            raise NotFoundError("Workflow not found")
        return workflow

    @staticmethod
    def list_pending(session: Session, user: User) -> List[Approval]:
        """Caller's pending approvals that can be acted on now"""
        approvals = (
            session.query(Approval)
            .options(joinedload(Approval.document), joinedload(Approval.workflow))
            .join(Document, Approval.document_id == Document.id)
            .filter(
                Approval.approver_id == user.id,
                Approval.status == ApprovalStatus.PENDING,
                Document.status.notin_(list(NON_SIGNABLE_STATUSES)),
            )
            .order_by(Approval.created_at.desc(), Approval.id.desc())
            .all()
        )
        return [a for a in approvals if WorkflowService.is_actionable(a)]

    @staticmethod
    def _get_actionable_approval(session: Session, user: User, approval_id: int) -> Approval:
        approval = (
            session.query(Approval)
            .filter(Approval.id == approval_id, Approval.approver_id == user.id)
            .first()
        )
        if not approval:
            raise NotFoundError("Approval not found")
        if approval.status != ApprovalStatus.PENDING:
            raise ValidationError("This approval has already been processed")
        if approval.document.status in NON_SIGNABLE_STATUSES:
            raise ValidationError("This document is no longer open for approval")
        if not WorkflowService.is_actionable(approval):
            raise ValidationError("This approval step is not active yet")
        return approval

    @staticmethod
    def approve(session: Session, user: User, approval_id: int,
                comment: Optional[str] = None) -> Tuple[Approval, List[Approval]]:
        """
        Approve a step.

        Returns the approval and the approvals that became actionable because of it.
        Approving the last step completes the workflow and the document.
        """
        approval = WorkflowService._get_actionable_approval(session, user, approval_id)
        workflow = approval.workflow
        document = approval.document
        now = datetime.utcnow()

        approval.status = ApprovalStatus.APPROVED
        approval.acted_at = now
        approval.comment = comment
        approved = sum(1 for a in workflow.approvals if a.status == ApprovalStatus.APPROVED)
        workflow.current_step = approved

        notifier = NotificationService(NotificationRepository(session))
        newly_actionable: List[Approval] = []
        if approved == workflow.total_steps:
            workflow.completed_at = now
            document.status = DocumentStatus.COMPLETED
            document.completed_at = now
            notifier.notify(DocumentStatusNotification(
                document.created_by_id, document.title, DocumentStatus.COMPLETED.value
            ))
        elif workflow.is_sequential:
            newly_actionable = WorkflowService._notify_actionable(session, workflow, document)

        AuditService(session).record(
            AuditAction.APPROVAL_APPROVED,
            "Approval",
            approval.id,
            user_id=user.id,
            details={"document_id": document.id, "order": approval.order, "comment": comment},
        )
        session.commit()
        session.refresh(approval)

        logger.info(f"Approval {approval.id} approved; workflow {workflow.id} at step "
                    f"{workflow.current_step}/{workflow.total_steps}")
        return approval, newly_actionable

    @staticmethod
    def reject(session: Session, user: User, approval_id: int, comment: Optional[str] = None) -> Approval:
        """Reject a step; the document is rejected with it"""
        approval = WorkflowService._get_actionable_approval(session, user, approval_id)
        document = approval.document

        approval.status = ApprovalStatus.REJECTED
        approval.acted_at = datetime.utcnow()
        approval.comment = comment
        document.status = DocumentStatus.REJECTED

        NotificationService(NotificationRepository(session)).notify(DocumentStatusNotification(
            document.created_by_id, document.title, DocumentStatus.REJECTED.value
        ))
        AuditService(session).record(
            AuditAction.APPROVAL_REJECTED,
            "Approval",
            approval.id,
            user_id=user.id,
            details={"document_id": document.id, "order": approval.order, "comment": comment},
        )
        session.commit()
        session.refresh(approval)

        logger.info(f"Approval {approval.id} rejected; document {document.id} rejected")
        return approval

    @staticmethod
    async def send_approval_requests(email_sender: EmailSender, approvals: List[Approval]) -> None:
        base_url = get_settings().APP_BASE_URL
        for approval in approvals:
            document = approval.document
            await email_sender.send(
                approval.approver.email,
                f"【HankoSign】承認依頼: {document.title}",
                approval_request_email(approval.approver.name, document.title,
                                       f"{base_url}/documents/{document.id}"),
            )

    @staticmethod
    async def send_completion_email(email_sender: EmailSender, document: Document) -> None:
        owner = document.created_by
        await email_sender.send(
            owner.email,
            f"【HankoSign】承認完了: {document.title}",
            document_completed_email(owner.name, document.title,
                                     f"{get_settings().APP_BASE_URL}/verify/{document.verification_code}"),
        )
