from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from institute.api.deps import get_db
from institute.schemas.base import MessageResponse
from institute.schemas.course import Course, CourseCreate, CourseCreateResponse, CourseUpdate
from institute.services.course import course as crud_course

router = APIRouter()


@router.get("", response_model=List[Course])
def get_courses(db: Session = Depends(get_db)):
    return crud_course.get_courses(db)


@router.post("", response_model=CourseCreateResponse, status_code=status.HTTP_201_CREATED)
def create_course(
    course: CourseCreate,
    db: Session = Depends(get_db)
):
    return {"course": crud_course.create_course(db=db, course=course)}


@router.get("/name/{name}", response_model=Course)
def get_course_by_name(
    name: str,
    db: Session = Depends(get_db)
):
    """
    Look a course up by name (exact, case-insensitive, surrounding spaces ignored)
    """
    return crud_course.get_course_by_name(db, name=name)


@router.put("/{course_id}", response_model=Course)
def update_course(
    course_id: int,
    course: CourseUpdate,
    db: Session = Depends(get_db)
):
    return crud_course.update_course(db=db, course_id=course_id, course=course)


@router.delete("/{course_id}", response_model=MessageResponse)
def delete_course(
    course_id: int,
    db: Session = Depends(get_db)
):
    crud_course.delete_course(db=db, course_id=course_id)
    return {"message": "Course deleted"}
