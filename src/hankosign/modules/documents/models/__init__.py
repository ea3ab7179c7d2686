from .document import Document, DocumentStatus, NON_SIGNABLE_STATUSES
from .signature import Signature

__all__ = ['Document', 'DocumentStatus', 'NON_SIGNABLE_STATUSES', 'Signature']
