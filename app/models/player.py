from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from app.core.database import Base


class Player(Base):
    __tablename__ = "players"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)
    position = Column(String, nullable=True)
    status = Column(String, default="Active", nullable=False)  # "Active", "Injured", "Inactive"

    user = relationship("User", back_populates="player")
