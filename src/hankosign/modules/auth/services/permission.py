from enum import Enum
from typing import Dict, FrozenSet

from hankosign.modules.users.models.user import UserRole

class Capability(str, Enum):
    CREATE_HANKOS = "hanko.create"
    UPLOAD_DOCS = "document.upload"
    SIGN_DOCS = "document.sign"
    APPROVE_WORKFLOW = "workflow.approve"
    MANAGE_ROLES = "role.manage"
    MANAGE_ORG = "org.manage"
    VIEW_REPORTS = "report.view"
    ASSIGN_SUPER_ADMIN = "role.assign_super_admin"
    MANAGE_SYSTEM = "system.manage"
    VIEW_AUDIT_LOGS = "audit.view"

_USER_CAPABILITIES = frozenset({
    Capability.CREATE_HANKOS,
    Capability.UPLOAD_DOCS,
    Capability.SIGN_DOCS,
    Capability.APPROVE_WORKFLOW,
})

_ADMIN_CAPABILITIES = _USER_CAPABILITIES | {
    Capability.MANAGE_ROLES,
    Capability.MANAGE_ORG,
    Capability.VIEW_REPORTS,
}

ROLE_PERMISSIONS: Dict[UserRole, FrozenSet[Capability]] = {
    UserRole.USER: _USER_CAPABILITIES,
    UserRole.ADMIN: frozenset(_ADMIN_CAPABILITIES),
    UserRole.SUPER_ADMIN: frozenset(Capability),
}

def get_capabilities(user_role: UserRole) -> FrozenSet[Capability]:
    return ROLE_PERMISSIONS.get(user_role, frozenset())

def has_capability(user_role: UserRole, capability: Capability) -> bool:
    return capability in get_capabilities(user_role)
