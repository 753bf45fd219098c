from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from app.core.database import Base


class Match(Base):
    __tablename__ = "matches"

    id = Column(Integer, primary_key=True, index=True)
    date = Column(DateTime, nullable=False, index=True)
    time = Column(String, nullable=False)
    opponent = Column(String, nullable=False)
    location = Column(String, nullable=False)
    details = Column(String, nullable=True)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=False)

    creator = relationship("User", foreign_keys=[created_by])
    # RSVPs go away with the match they belong to
    attendances = relationship("Attendance", back_populates="match", cascade="all, delete-orphan")
