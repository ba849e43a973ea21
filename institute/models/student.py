from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, Numeric, String
from sqlalchemy.orm import relationship
from institute.core.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Student(Base):
    __tablename__ = "students"

    id = Column(Integer, primary_key=True, index=True)
    enrollment_no = Column(String, unique=True, index=True, nullable=False)
    # TODO: hash once a login endpoint exists to verify against
    password = Column(String, nullable=False)

    name = Column(String, nullable=True, index=True)
    father_name = Column(String, nullable=True)
    mother_name = Column(String, nullable=True)
    dob = Column(String, nullable=True)
    gender = Column(String, nullable=True)
    email = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    guardian_phone = Column(String, nullable=True)
    address = Column(String, nullable=True)
    state = Column(String, nullable=True)
    pincode = Column(String, nullable=True)
    qualification = Column(String, nullable=True)

    # Course is referenced by name, not by id
    course = Column(String, nullable=True)
    batch_time = Column(String, nullable=True)
    admission_date = Column(String, nullable=True)
    session_start = Column(String, nullable=True)
    session_end = Column(String, nullable=True)
    photo_url = Column(String, nullable=True)

    # Cached sum of fee_transactions.amount, written only by the fee ledger
    paid_fee = Column(Numeric(12, 2), nullable=False, default=0)
    status = Column(String, nullable=False, default="Active")
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    transactions = relationship(
        "FeeTransaction",
        back_populates="student",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
