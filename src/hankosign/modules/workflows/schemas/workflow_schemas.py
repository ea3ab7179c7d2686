from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator

from hankosign.modules.documents.models.document import DocumentStatus
from hankosign.modules.workflows.models.workflow import ApprovalStatus

MAX_STEPS = 20

class WorkflowStep(BaseModel):
    approver_id: int
    due_date: Optional[datetime] = None

class WorkflowCreate(BaseModel):
    name: str = Field(max_length=200)
    is_sequential: bool = True
    steps: List[WorkflowStep]

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Please enter a workflow name")
        return v

    @field_validator("steps")
    @classmethod
    def steps_in_range(cls, v: List[WorkflowStep]) -> List[WorkflowStep]:
        if not v:
            raise ValueError("At least one approver is required")
        if len(v) > MAX_STEPS:
            raise ValueError(f"A workflow can have at most {MAX_STEPS} approvers")
        return v

class ApproverSummary(BaseModel):
    id: int
    name: str
    email: str

    model_config = {"from_attributes": True}

class ApprovalResponse(BaseModel):
    id: int
    workflow_id: int
    document_id: int
    approver_id: int
    order: int
    status: ApprovalStatus
    due_date: Optional[datetime] = None
    comment: Optional[str] = None
    acted_at: Optional[datetime] = None
    created_at: datetime
    approver: ApproverSummary

    model_config = {"from_attributes": True}

class WorkflowResponse(BaseModel):
    id: int
    document_id: int
    name: str
    current_step: int
    total_steps: int
    is_sequential: bool
    created_at: datetime
    completed_at: Optional[datetime] = None
    approvals: List[ApprovalResponse]

    model_config = {"from_attributes": True}

class WorkflowEnvelope(BaseModel):
    workflow: WorkflowResponse

class ApprovalDocument(BaseModel):
    id: int
    title: str
    status: DocumentStatus

    model_config = {"from_attributes": True}

class PendingApproval(BaseModel):
    id: int
    workflow_id: int
    order: int
    status: ApprovalStatus
    due_date: Optional[datetime] = None
    created_at: datetime
    document: ApprovalDocument

    model_config = {"from_attributes": True}

class ApprovalListResponse(BaseModel):
    approvals: List[PendingApproval]

class ApprovalDecision(BaseModel):
    comment: Optional[str] = Field(None, max_length=2000)

class ApprovalDecisionResponse(BaseModel):
    approval: ApprovalResponse
    document_status: DocumentStatus
