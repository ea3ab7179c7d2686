from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from hankosign.database import get_db
from hankosign.errors import HankoSignError
from hankosign.modules.auth.dependencies import get_current_user, require_capability
from hankosign.modules.auth.services.permission import Capability
from hankosign.modules.users.models.user import User
from hankosign.modules.workflows.schemas.workflow_schemas import (
    ApprovalDecision, ApprovalDecisionResponse, ApprovalListResponse,
    WorkflowCreate, WorkflowEnvelope
)
from hankosign.modules.workflows.services.workflow_service import WorkflowService
from hankosign.services.email_sender import EmailSender, get_email_sender

router = APIRouter(tags=["workflows"])

@router.post("/documents/{document_id}/workflow", response_model=WorkflowEnvelope,
             status_code=status.HTTP_201_CREATED)
async def create_workflow(
    document_id: int,
    payload: WorkflowCreate,
    db: Session = Depends(get_db),
    email_sender: EmailSender = Depends(get_email_sender),
    current_user: User = Depends(get_current_user)
):
    """
    Start an approval workflow; the first actionable approvers are notified
    in-app and by email.
    """
    try:
        workflow, actionable = WorkflowService.create_workflow(db, current_user, document_id, payload)
    except HankoSignError as e:
        raise HTTPException(e.status_code, e.message)

    await WorkflowService.send_approval_requests(email_sender, actionable)
    return WorkflowEnvelope(workflow=workflow)

@router.get("/documents/{document_id}/workflow", response_model=WorkflowEnvelope)
def get_workflow(
    document_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    try:
        workflow = WorkflowService.get_workflow(db, current_user, document_id)
    except HankoSignError as e:
        raise HTTPException(e.status_code, e.message)
    return WorkflowEnvelope(workflow=workflow)

@router.get("/approvals", response_model=ApprovalListResponse)
def list_pending_approvals(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return ApprovalListResponse(approvals=WorkflowService.list_pending(db, current_user))

@router.post("/approvals/{approval_id}/approve", response_model=ApprovalDecisionResponse)
async def approve(
    approval_id: int,
    payload: Optional[ApprovalDecision] = None,
    db: Session = Depends(get_db),
    email_sender: EmailSender = Depends(get_email_sender),
    current_user: User = Depends(require_capability(Capability.APPROVE_WORKFLOW))
):
    comment = payload.comment if payload else None
    try:
        approval, newly_actionable = WorkflowService.approve(db, current_user, approval_id, comment)
    except HankoSignError as e:
        raise HTTPException(e.status_code, e.message)

    document = approval.document
    if approval.workflow.completed_at is not None:
        await WorkflowService.send_completion_email(email_sender, document)
    else:
        await WorkflowService.send_approval_requests(email_sender, newly_actionable)
    return ApprovalDecisionResponse(approval=approval, document_status=document.status)

@router.post("/approvals/{approval_id}/reject", response_model=ApprovalDecisionResponse)
def reject(
    approval_id: int,
    payload: Optional[ApprovalDecision] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_capability(Capability.APPROVE_WORKFLOW))
):
    comment = payload.comment if payload else None
    try:
        approval = WorkflowService.reject(db, current_user, approval_id, comment)
    except HankoSignError as e:
        raise HTTPException(e.status_code, e.message)
    return ApprovalDecisionResponse(approval=approval, document_status=approval.document.status)
