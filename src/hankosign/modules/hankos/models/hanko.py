from sqlalchemy import Column, Integer, String, Text, DateTime, Enum, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime
from enum import Enum as PyEnum
from hankosign.database import Base

class HankoType(PyEnum):
    MITOMEIN = "MITOMEIN"
    GINKOIN = "GINKOIN"
    JITSUIN = "JITSUIN"

class Hanko(Base):
    __tablename__ = 'hankos'

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey('users.id'), nullable=False, index=True)
    name = Column(String(50), nullable=False)
    type = Column(Enum(HankoType), nullable=False)
    image_url = Column(String(1024), nullable=False)
    image_key = Column(String(512), nullable=False)
    # Encoded image kept for quick access by the designer
    image_data = Column(Text, nullable=False)
    font = Column(String(100), nullable=True)
    size = Column(Integer, nullable=False, default=60)
    is_registered = Column(Boolean, default=False)
    registration_number = Column(String(50), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    user = relationship("User", back_populates="hankos")
    signatures = relationship("Signature", back_populates="hanko")
