from sqlalchemy import JSON, Column, Integer, Numeric, String
from institute.core.database import Base


class Course(Base):
    __tablename__ = "courses"

    id = Column(Integer, primary_key=True, index=True)
    course_name = Column(String, nullable=False, index=True)
    duration = Column(String, nullable=True)
    fees = Column(Numeric(12, 2), nullable=False, default=0)
    subjects = Column(JSON, nullable=False, default=list)
