from fastapi import APIRouter, Depends, File, UploadFile, status
from sqlalchemy.orm import Session
from typing import List
from institute.api.deps import get_db
from institute.services.student import student as crud_student
from institute.schemas.base import MessageResponse
from institute.schemas.student import Student, StudentCreate, StudentCreateResponse, StudentUpdate

router = APIRouter()


@router.post("", response_model=StudentCreateResponse, status_code=status.HTTP_201_CREATED)
def create_student(
    student: StudentCreate,
    db: Session = Depends(get_db)
):
    """
    Register a new student

    Required:
    - **enrollmentNo**: unique enrollment number
    - **password**
    """
    return {"student": crud_student.create_student(db=db, student=student)}


@router.get("", response_model=List[Student])
def get_students(db: Session = Depends(get_db)):
    """All students, newest first"""
    return crud_student.get_students(db)


@router.get("/search", response_model=List[Student])
def search_students(
    query: str = "",
    db: Session = Depends(get_db)
):
    """
    Search by name or enrollment number (case-insensitive substring, max 10)
    """
    return crud_student.search_students(db, query=query)


@router.get("/{student_id}", response_model=Student)
def get_student(
    student_id: int,
    db: Session = Depends(get_db)
):
    return crud_student.get_student(db, student_id=student_id)


@router.put("/{student_id}", response_model=Student)
def update_student(
    student_id: int,
    student: StudentUpdate,
    db: Session = Depends(get_db)
):
    """
    Update profile fields. Fields left out of the body are unchanged.
    """
    return crud_student.update_student(db=db, student_id=student_id, student=student)


@router.delete("/{student_id}", response_model=MessageResponse)
def delete_student(
    student_id: int,
    db: Session = Depends(get_db)
):
    """
    Delete a student and its fee history. Issued certificates remain.
    """
    crud_student.delete_student(db=db, student_id=student_id)
    return {"message": "Student deleted"}


@router.post("/{student_id}/photo", response_model=Student)
def upload_photo(
    student_id: int,
    photo: UploadFile = File(...),
    db: Session = Depends(get_db)
):
    """Upload a passport photo; served back under /uploads"""
    return crud_student.set_photo(db=db, student_id=student_id, upload=photo)
