from sqlalchemy import func
from sqlalchemy.orm import Session
from typing import List, Optional

from institute.core.database import store_errors, transaction
from institute.core.exceptions import NotFoundException
from institute.models.course import Course
from institute.schemas.course import CourseCreate, CourseUpdate


def normalize_name(name: Optional[str]) -> str:
    """Key used to match course names: trimmed and lower-cased."""
    return (name or "").strip().lower()


def get_course(db: Session, course_id: int) -> Course:
    """Get one course by ID"""
    with store_errors():
        course = db.get(Course, course_id)
    if course is None:
        raise NotFoundException(f"Course {course_id} not found")
    return course


def get_course_by_name(db: Session, name: str) -> Course:
    """Exact name match, ignoring case and surrounding whitespace"""
    with store_errors():
        course = (
            db.query(Course)
            .filter(func.lower(func.trim(Course.course_name)) == normalize_name(name))
            .order_by(Course.id)
            .first()
        )
    if course is None:
        raise NotFoundException("Course not found")
    return course


def get_courses(db: Session) -> List[Course]:
    with store_errors():
        return db.query(Course).order_by(Course.id).all()


def create_course(db: Session, course: CourseCreate) -> Course:
    db_course = Course(**course.model_dump())
    with transaction(db):
        db.add(db_course)
    db.refresh(db_course)
    return db_course


def update_course(db: Session, course_id: int, course: CourseUpdate) -> Course:
    """Partial update: only fields present in the request are written"""
    db_course = get_course(db, course_id)
    with transaction(db):
        for field, value in course.model_dump(exclude_unset=True).items():
            if value is None and field in ("course_name", "fees", "subjects"):
                continue
            setattr(db_course, field, value)
    db.refresh(db_course)
    return db_course


def delete_course(db: Session, course_id: int) -> None:
    """
    Delete a course.

    Students and certificates refer to courses by name, so they keep the
    old name after this.
    """
    db_course = get_course(db, course_id)
    with transaction(db):
        db.delete(db_course)
