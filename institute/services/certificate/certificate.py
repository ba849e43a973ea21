"""
Certificate issuance and public verification.

A certificate keeps a snapshot of the student's name, enrollment number and
course as they were at issue time. Verification merges that snapshot with
the holder's current profile without writing anything back.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from institute.core.database import store_errors, transaction
from institute.core.exceptions import ConflictException, NotFoundException, ValidationException
from institute.models.certificate import Certificate
from institute.models.student import Student
from institute.schemas.certificate import CertificateIssue

logger = logging.getLogger(__name__)

NOT_AVAILABLE = "N/A"

# (lower bound in percent, grade), checked top-down
GRADE_BANDS = (
    (90, "A+"),
    (80, "A"),
    (60, "B"),
    (33, "C"),
)


def grade_for(percentage: float) -> str:
    """Letter grade for a percentage."""
    for lower, grade in GRADE_BANDS:
        if percentage >= lower:
            return grade
    return "F"


def _first(*values) -> Any:
    for value in values:
        if value:
            return value
    return NOT_AVAILABLE


def enrich(certificate: Certificate, student: Optional[Student]) -> Dict[str, Any]:
    """
    Merge a certificate with its holder's current profile.

    Certificate fields win over student fields, which win over "N/A".
    ``student`` may be None when the record was deleted or never existed.
    Neither argument is modified.
    """
    data = {column.key: getattr(certificate, column.key) for column in Certificate.__table__.columns}

    session = NOT_AVAILABLE
    if student is not None and student.session_start and student.session_end:
        session = f"{student.session_start} - {student.session_end}"

    data.update(
        student_photo=(student.photo_url or None) if student is not None else None,
        batch=_first(certificate.batch, student and student.batch_time),
        admission_date=_first(certificate.admission_date, student and student.admission_date),
        father_name=_first(certificate.father_name, student and student.father_name),
        dob=_first(certificate.dob, student and student.dob),
        session=session,
    )
    return data


def get_by_enrollment(db: Session, enrollment_no: str) -> Optional[Certificate]:
    with store_errors():
        return db.query(Certificate).filter(Certificate.enrollment_no == enrollment_no).first()


def issue(db: Session, data: CertificateIssue) -> Certificate:
    """
    Persist a new certificate.

    The enrollment lookup only gives a readable error; the unique
    constraints on certificate_no and enrollment_no decide races.
    """
    if get_by_enrollment(db, data.enrollment_no):
        raise ConflictException(
            f"Certificate already issued for {data.student_name or 'student'} ({data.enrollment_no})",
            details={"enrollmentNo": data.enrollment_no},
        )

    with store_errors():
        student = db.get(Student, data.student_id)
    if student is None:
        raise NotFoundException(f"Student {data.student_id} not found")
    if student.enrollment_no != data.enrollment_no:
        raise ValidationException(
            f"Student {data.student_id} is enrolled as {student.enrollment_no}, not {data.enrollment_no}",
            details={"studentId": data.student_id, "enrollmentNo": data.enrollment_no},
        )

    values = data.model_dump(exclude_none=True)
    if "grade" not in values and data.percentage is not None:
        values["grade"] = grade_for(data.percentage)

    certificate = Certificate(**values)
    try:
        with transaction(db):
            db.add(certificate)
    except IntegrityError:
        raise ConflictException(
            f"Certificate {data.certificate_no} or enrollment {data.enrollment_no} already exists",
            details={"certificateNo": data.certificate_no, "enrollmentNo": data.enrollment_no},
        )

    db.refresh(certificate)
    logger.info(f"Issued certificate {certificate.certificate_no} to {certificate.enrollment_no}")
    return certificate


def verify(db: Session, certificate_no: str) -> Dict[str, Any]:
    with store_errors():
        certificate = (
            db.query(Certificate)
            .filter(Certificate.certificate_no == certificate_no)
            .first()
        )
        if certificate is None:
            raise NotFoundException("Invalid Certificate")

        student = (
            db.query(Student)
            .filter(Student.enrollment_no == certificate.enrollment_no)
            .first()
        )
    return enrich(certificate, student)


def list_certificates(db: Session) -> List[Certificate]:
    """All certificates, most recently issued first."""
    with store_errors():
        return db.query(Certificate).order_by(Certificate.id.desc()).all()


def delete_certificate(db: Session, certificate_id: int) -> None:
    with store_errors():
        certificate = db.get(Certificate, certificate_id)
    if certificate is None:
        raise NotFoundException(f"Certificate {certificate_id} not found")

    with transaction(db):
        db.delete(certificate)
    logger.info(f"Deleted certificate {certificate.certificate_no}")
