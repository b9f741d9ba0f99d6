"""SQLAlchemy ORM models for ConfTimer."""

from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, BigInteger
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class ConferenceRecord(Base):
    """One row per live session: when it started, its deadline, how it ended."""

    __tablename__ = "conferences"

    id = Column(Integer, primary_key=True, autoincrement=True)
    started_at = Column(BigInteger, nullable=False)        # ms since epoch
    deadline_at = Column(BigInteger, nullable=True)        # ms since epoch
    ended_at = Column(BigInteger, nullable=True)           # ms since epoch
    end_reason = Column(String(32), nullable=True)         # countdown | closed
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    def __repr__(self) -> str:
        return (
            f"<ConferenceRecord id={self.id} started_at={self.started_at} "
            f"end_reason={self.end_reason}>"
        )
