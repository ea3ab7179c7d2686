from sqlalchemy import Column, Integer, Float, ForeignKey, DateTime, String, Boolean
from sqlalchemy.orm import relationship
from datetime import datetime
from hankosign.database import Base

class Signature(Base):
    __tablename__ = "signatures"

    id = Column(Integer, primary_key=True)
    document_id = Column(Integer, ForeignKey("documents.id"), nullable=False, index=True)
    hanko_id    = Column(Integer, ForeignKey("hankos.id"),    nullable=False)
    user_id     = Column(Integer, ForeignKey("users.id"),     nullable=False)
    page        = Column(Integer, nullable=False, default=1)
    position_x  = Column(Float, nullable=False)
    position_y  = Column(Float, nullable=False)
    timestamp   = Column(DateTime, default=datetime.utcnow, nullable=False)
    ip_address  = Column(String(45), nullable=False, default="unknown")
    user_agent  = Column(String(512), nullable=False, default="unknown")
    is_valid    = Column(Boolean, nullable=False, default=True)

    document = relationship("Document", back_populates="signatures")
    hanko    = relationship("Hanko", back_populates="signatures")
    user     = relationship("User")
