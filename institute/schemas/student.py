from datetime import datetime
from typing import Optional
from pydantic import EmailStr, Field, field_validator

from institute.schemas.base import CamelModel


class StudentProfile(CamelModel):
    name: Optional[str] = None
    father_name: Optional[str] = None
    mother_name: Optional[str] = None
    dob: Optional[str] = None
    gender: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    guardian_phone: Optional[str] = None
    address: Optional[str] = None
    state: Optional[str] = None
    pincode: Optional[str] = None
    qualification: Optional[str] = None
    course: Optional[str] = None
    batch_time: Optional[str] = None
    admission_date: Optional[str] = None
    session_start: Optional[str] = None
    session_end: Optional[str] = None
    photo_url: Optional[str] = None

    @field_validator("email", mode="before")
    @classmethod
    def blank_email_is_none(cls, v):
        # Admission forms post "" for an empty email box
        if isinstance(v, str) and not v.strip():
            return None
        return v


class StudentCreate(StudentProfile):
    enrollment_no: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
    status: str = "Active"


class StudentUpdate(StudentProfile):
    """Partial update. paidFee is not accepted here; it belongs to the fee ledger."""
    enrollment_no: Optional[str] = Field(None, min_length=1)
    password: Optional[str] = Field(None, min_length=1)
    status: Optional[str] = None


class Student(StudentProfile):
    id: int
    enrollment_no: str
    paid_fee: float
    status: str
    created_at: datetime

    # Stored emails predate validation; never fail a read on them
    email: Optional[str] = None


class StudentCreateResponse(CamelModel):
    success: bool = True
    message: str = "Registered!"
    student: Student
