from .workflow import Approval, ApprovalStatus, Workflow

__all__ = ['Approval', 'ApprovalStatus', 'Workflow']
