"""
Database Models (SQLAlchemy ORM)
Obligations are the only persisted entity; payments are not stored
"""

from sqlalchemy import (
    Column, Integer, String, Numeric, Date, DateTime,
    Enum as SQLEnum, Index, CheckConstraint
)

from payledger.domain.models import ObligationStatus
from payledger.infrastructure.db.database import Base
from payledger.utils.time import now_utc_naive


class ObligationModel(Base):
    """Monetary obligation awaiting or having received payment"""
    __tablename__ = "obligation"

    id = Column(Integer, primary_key=True, autoincrement=True)
    label = Column(String(255), nullable=False)
    occurred_on = Column(Date, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    status = Column(
        SQLEnum(ObligationStatus, name="obligation_status"),
        nullable=False,
        default=ObligationStatus.OUTSTANDING
    )
    created_at = Column(DateTime, nullable=False, default=now_utc_naive)
    updated_at = Column(DateTime, nullable=False, default=now_utc_naive, onupdate=now_utc_naive)

    # Payment order: oldest first, ties by id
    __table_args__ = (
        Index('ix_obligation_status_date', 'status', 'occurred_on', 'id'),
        CheckConstraint('amount > 0', name='ck_obligation_amount_positive'),
    )
