import logging
from hankosign.database import engine, Base
# Import every model so it registers with Base
from hankosign.modules.users.models import User
from hankosign.modules.hankos.models import Hanko
from hankosign.modules.documents.models import Document, Signature
from hankosign.modules.workflows.models import Workflow, Approval
from hankosign.modules.audit.models import AuditLog
from hankosign.modules.notifications.models import Notification

logger = logging.getLogger(__name__)

def create_tables():
    """Create all tables in the database"""
    logger.info(f"Tables to create: {list(Base.metadata.tables.keys())}")
    Base.metadata.create_all(bind=engine)

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    create_tables()
