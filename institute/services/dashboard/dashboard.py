import logging
from decimal import Decimal
from typing import Dict

from sqlalchemy import func
from sqlalchemy.orm import Session

from institute.core.database import store_errors
from institute.models.certificate import Certificate
from institute.models.course import Course
from institute.models.student import Student
from institute.services.course.course import normalize_name

logger = logging.getLogger(__name__)


def stats(db: Session) -> Dict[str, object]:
    """
    Dashboard counters and the pending-fee total.

    What a student owes is the fee of the course whose name matches the
    student's ``course`` (trimmed, case-insensitive). Students without a
    matching course owe nothing; overpayments do not offset other students.
    """
    with store_errors():
        total_students = db.query(func.count(Student.id)).scalar()
        total_certs = db.query(func.count(Certificate.id)).scalar()

        fees_by_course = {}
        for course_name, fees in db.query(Course.course_name, Course.fees).order_by(Course.id):
            fees_by_course.setdefault(normalize_name(course_name), Decimal(str(fees or 0)))

        pending = Decimal(0)
        for course_name, paid_fee in db.query(Student.course, Student.paid_fee):
            owed = fees_by_course.get(normalize_name(course_name), Decimal(0))
            balance = owed - Decimal(str(paid_fee or 0))
            if balance > 0:
                pending += balance

    logger.debug(f"Dashboard: {total_students} students, {total_certs} certificates, {pending} pending")
    return {
        "total_students": total_students,
        "total_certs": total_certs,
        "total_fees": float(pending),
    }
