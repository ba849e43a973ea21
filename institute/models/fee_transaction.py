from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship
from institute.core.database import Base
from institute.models.student import utcnow


class FeeTransaction(Base):
    __tablename__ = "fee_transactions"

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(
        Integer,
        ForeignKey("students.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    amount = Column(Numeric(12, 2), nullable=False)
    date = Column(String, nullable=True)
    narration = Column(String, nullable=False, default="Fee Payment")
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)

    student = relationship("Student", back_populates="transactions")
