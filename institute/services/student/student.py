import logging
import os
import shutil
import uuid
from typing import List, Optional

from fastapi import UploadFile
from sqlalchemy import or_, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from institute.core.config import settings
from institute.core.database import store_errors, transaction
from institute.core.exceptions import ConflictException, NotFoundException, ValidationException
from institute.models.certificate import Certificate
from institute.models.student import Student
from institute.schemas.student import StudentCreate, StudentUpdate

logger = logging.getLogger(__name__)

SEARCH_LIMIT = 10
# Columns that may not be cleared through an update
REQUIRED_FIELDS = ("enrollment_no", "password", "status")
# Accepted photo content types and the extension each is stored under
PHOTO_TYPES = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
}
PHOTO_EXTENSIONS = (".jpg", ".jpeg", ".png", ".webp")


def get_student(db: Session, student_id: int) -> Student:
    """Get one student by ID"""
    with store_errors():
        student = db.get(Student, student_id)
    if student is None:
        raise NotFoundException("Student not found")
    return student


def get_student_by_enrollment(db: Session, enrollment_no: str) -> Optional[Student]:
    with store_errors():
        return db.query(Student).filter(Student.enrollment_no == enrollment_no).first()


def get_students(db: Session) -> List[Student]:
    """All students, newest admission record first"""
    with store_errors():
        return db.query(Student).order_by(Student.created_at.desc(), Student.id.desc()).all()


def search_students(db: Session, query: str) -> List[Student]:
    """Case-insensitive substring match on name or enrollment number"""
    query = (query or "").strip()
    with store_errors():
        return (
            db.query(Student)
            .filter(
                or_(
                    Student.name.icontains(query, autoescape=True),
                    Student.enrollment_no.icontains(query, autoescape=True),
                )
            )
            .order_by(Student.created_at.desc(), Student.id.desc())
            .limit(SEARCH_LIMIT)
            .all()
        )


def _duplicate(enrollment_no: str) -> ConflictException:
    return ConflictException(
        f"Enrollment number {enrollment_no} is already registered",
        details={"enrollmentNo": enrollment_no},
    )


def create_student(db: Session, student: StudentCreate) -> Student:
    """Register a new student. paid_fee always starts at 0."""
    if get_student_by_enrollment(db, student.enrollment_no):
        raise _duplicate(student.enrollment_no)

    db_student = Student(**student.model_dump(), paid_fee=0)
    try:
        with transaction(db):
            db.add(db_student)
    except IntegrityError:
        raise _duplicate(student.enrollment_no)

    db.refresh(db_student)
    logger.info(f"Registered student {db_student.enrollment_no}")
    return db_student


def update_student(db: Session, student_id: int, student: StudentUpdate) -> Student:
    """Partial update of profile fields"""
    db_student = get_student(db, student_id)
    changes = {
        field: value
        for field, value in student.model_dump(exclude_unset=True).items()
        if value is not None or field not in REQUIRED_FIELDS
    }

    new_enrollment = changes.get("enrollment_no")
    if new_enrollment and new_enrollment != db_student.enrollment_no:
        other = get_student_by_enrollment(db, new_enrollment)
        if other is not None and other.id != student_id:
            raise _duplicate(new_enrollment)

    try:
        with transaction(db):
            for field, value in changes.items():
                setattr(db_student, field, value)
    except IntegrityError:
        raise _duplicate(new_enrollment)

    db.refresh(db_student)
    return db_student


def delete_student(db: Session, student_id: int) -> None:
    """
    Delete a student together with its fee transactions.

    Certificates are kept and detached; they still verify by enrollment number.
    """
    db_student = get_student(db, student_id)
    with transaction(db):
        db.execute(
            update(Certificate)
            .where(Certificate.student_id == student_id)
            .values(student_id=None)
        )
        db.delete(db_student)
    logger.info(f"Deleted student {db_student.enrollment_no}")


def set_photo(db: Session, student_id: int, upload: UploadFile) -> Student:
    """
    Store an uploaded photo under UPLOAD_DIR and point photo_url at it.

    The stored extension comes from the content type, never from the
    client's filename, so StaticFiles only ever serves image types.
    """
    db_student = get_student(db, student_id)
    content_type = (upload.content_type or "").lower()
    extension = PHOTO_TYPES.get(content_type)
    client_extension = os.path.splitext(upload.filename or "")[1].lower()
    if extension is None or (client_extension and client_extension not in PHOTO_EXTENSIONS):
        raise ValidationException(
            "Photo must be a JPEG, PNG or WebP image",
            details={"contentType": upload.content_type, "filename": upload.filename},
        )

    filename = f"{uuid.uuid4().hex}{extension}"
    os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
    path = os.path.join(settings.UPLOAD_DIR, filename)

    with open(path, "wb") as buffer:
        shutil.copyfileobj(upload.file, buffer)

    try:
        with transaction(db):
            db_student.photo_url = f"{settings.UPLOAD_URL_PREFIX}/{filename}"
    except Exception:
        os.remove(path)
        raise

    db.refresh(db_student)
    logger.info(f"Stored photo for {db_student.enrollment_no} at {path}")
    return db_student
