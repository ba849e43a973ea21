from datetime import date

from sqlalchemy import JSON, Column, Float, ForeignKey, Integer, String
from institute.core.database import Base


def today_iso() -> str:
    return date.today().isoformat()


class Certificate(Base):
    __tablename__ = "certificates"

    id = Column(Integer, primary_key=True, index=True)
    certificate_no = Column(String, unique=True, index=True, nullable=False)
    # Nulled when the student is deleted; the certificate stays verifiable
    student_id = Column(
        Integer,
        ForeignKey("students.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    # Snapshot taken at issue time
    student_name = Column(String, nullable=True)
    enrollment_no = Column(String, unique=True, index=True, nullable=False)
    course_name = Column(String, nullable=True)
    issue_date = Column(String, nullable=False, default=today_iso)

    # Optional overrides preferred over the live student profile on verify
    batch = Column(String, nullable=True)
    admission_date = Column(String, nullable=True)
    father_name = Column(String, nullable=True)
    dob = Column(String, nullable=True)

    # {"theory": .., "practical": .., "project": .., "viva": ..}
    marks = Column(JSON, nullable=True)
    percentage = Column(Float, nullable=True)
    grade = Column(String, nullable=True)
