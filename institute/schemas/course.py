from typing import List, Optional
from pydantic import Field

from institute.schemas.base import CamelModel


class CourseBase(CamelModel):
    course_name: str = Field(..., min_length=1)
    duration: Optional[str] = None
    fees: float = Field(0, ge=0, allow_inf_nan=False)
    subjects: List[str] = []


class CourseCreate(CourseBase):
    pass


class CourseUpdate(CamelModel):
    course_name: Optional[str] = Field(None, min_length=1)
    duration: Optional[str] = None
    fees: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    subjects: Optional[List[str]] = None


class Course(CourseBase):
    id: int


class CourseCreateResponse(CamelModel):
    success: bool = True
    message: str = "Course saved!"
    course: Course
