import logging
from typing import Any, Dict, List, Tuple
from sqlalchemy.orm import Session

from hankosign.errors import ConflictError, NotFoundError, PermissionDeniedError, ValidationError
from hankosign.modules.audit.services.audit_service import AuditAction, AuditService
from hankosign.modules.auth.services.auth_service import AuthService
from hankosign.modules.auth.services.permission import Capability, has_capability
from hankosign.modules.users.models.user import User, UserRole

logger = logging.getLogger(__name__)

class UserService:

    @staticmethod
    def update_profile(session: Session, user: User, data: Dict[str, Any]) -> User:
        """Update name/contact fields; the new email must not belong to another account"""
        new_email = data.get("email")
        if new_email and new_email != user.email:
            taken = session.query(User).filter(User.email == new_email, User.id != user.id).first()
            if taken:
                raise ConflictError("Email already in use")

        for field, value in data.items():
            setattr(user, field, value)

        AuditService(session).record(
            AuditAction.PROFILE_UPDATED,
            entity_type="User",
            entity_id=user.id,
            user_id=user.id,
            details={"updated_fields": sorted(data.keys())}
        )
        session.commit()
        session.refresh(user)
        return user

    @staticmethod
    def update_company(session: Session, user: User, data: Dict[str, Any]) -> User:
        for field, value in data.items():
            setattr(user, field, value)

        AuditService(session).record(
            AuditAction.COMPANY_INFO_UPDATED,
            entity_type="User",
            entity_id=user.id,
            user_id=user.id,
            details={"updated_fields": sorted(data.keys())}
        )
        session.commit()
        session.refresh(user)
        return user

    @staticmethod
    def change_password(session: Session, user: User, current_password: str, new_password: str) -> None:
        if not AuthService.verify_password(current_password, user.password_hash):
            raise ValidationError("Current password is incorrect")

        user.password_hash = AuthService.get_password_hash(new_password)
        AuditService(session).record(
            AuditAction.PASSWORD_CHANGED,
            entity_type="User",
            entity_id=user.id,
            user_id=user.id
        )
        session.commit()

    @staticmethod
    def update_preferences(session: Session, user: User, data: Dict[str, Any]) -> Dict[str, Any]:
        """Merge the given keys into the stored preferences"""
        # A new dict so SQLAlchemy sees the JSON column change
        merged = dict(user.preferences or {})
        merged.update(data)
        user.preferences = merged
        session.commit()
        return merged


class RoleService:

    @staticmethod
    def list_users(session: Session, skip: int = 0, limit: int = 100) -> Tuple[List[User], int]:
        query = session.query(User).order_by(User.created_at.asc(), User.id.asc())
        return query.offset(skip).limit(limit).all(), query.count()

    @staticmethod
    def change_role(session: Session, actor: User, target_id: int, role_value: str) -> User:
        """
        Change another user's role.

        Checks run in this order: role value, super-admin assignment,
        self-change, target existence.
        """
        try:
            new_role = UserRole(role_value)
        except ValueError:
            raise ValidationError("Invalid role")

        if new_role == UserRole.SUPER_ADMIN and not has_capability(actor.role, Capability.ASSIGN_SUPER_ADMIN):
            raise PermissionDeniedError("Only super admins can assign super admin role")

        if actor.id == target_id:
            raise ValidationError("Cannot change your own role")

        target = session.get(User, target_id)
        if not target:
            raise NotFoundError("User not found")

        previous_role = target.role
        target.role = new_role
        AuditService(session).record(
            AuditAction.ROLE_CHANGED,
            entity_type="User",
            entity_id=target.id,
            user_id=actor.id,
            details={
                "new_role": new_role.value,
                "previous_role": previous_role.value,
                "changed_by": actor.email,
            }
        )
        session.commit()
        session.refresh(target)

        logger.info(f"User {actor.id} changed role of user {target.id} from {previous_role.value} to {new_role.value}")
        return target
