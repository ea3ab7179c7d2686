import logging
from sqlalchemy.orm import Session
from hankosign.modules.auth.services.auth_service import AuthService
from hankosign.modules.users.models.user import User, UserRole

logger = logging.getLogger(__name__)

DEMO_USERS = [
    {
        "email": "admin@hankosign.jp",
        "password": "Admin@123456",
        "name": "管理者太郎",
        "name_kana": "カンリシャタロウ",
        "department": "管理部",
        "position": "システム管理者",
        "role": UserRole.SUPER_ADMIN,
    },
    {
        "email": "manager@hankosign.jp",
        "password": "Manager@123456",
        "name": "部長次郎",
        "name_kana": "ブチョウジロウ",
        "department": "営業部",
        "position": "部長",
        "role": UserRole.ADMIN,
    },
    {
        "email": "user1@hankosign.jp",
        "password": "User@123456",
        "name": "社員三郎",
        "name_kana": "シャインサブロウ",
        "department": "営業部",
        "position": "営業担当",
        "role": UserRole.USER,
    },
]

def seed_demo_users(session: Session) -> int:
    """Create one account per role on an empty database. Returns the number created."""
    if session.query(User).count() > 0:
        logger.info("Demo data already present")
        return 0

    for data in DEMO_USERS:
        session.add(User(
            email=data["email"],
            password_hash=AuthService.get_password_hash(data["password"]),
            name=data["name"],
            name_kana=data["name_kana"],
            company_name="HankoSign株式会社",
            department=data["department"],
            position=data["position"],
            role=data["role"],
            is_active=True,
        ))
    session.commit()

    for data in DEMO_USERS:
        logger.info(f"Demo {data['role'].value}: {data['email']} / {data['password']}")
    return len(DEMO_USERS)
