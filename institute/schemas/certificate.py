from typing import Optional
from pydantic import Field

from institute.schemas.base import CamelModel


class Marks(CamelModel):
    theory: Optional[float] = None
    practical: Optional[float] = None
    project: Optional[float] = None
    viva: Optional[float] = None


class CertificateBase(CamelModel):
    certificate_no: str = Field(..., min_length=1)
    student_name: Optional[str] = None
    enrollment_no: str = Field(..., min_length=1)
    course_name: Optional[str] = None
    issue_date: Optional[str] = None
    batch: Optional[str] = None
    admission_date: Optional[str] = None
    father_name: Optional[str] = None
    dob: Optional[str] = None
    marks: Optional[Marks] = None
    percentage: Optional[float] = Field(None, ge=0, le=100, allow_inf_nan=False)
    grade: Optional[str] = None


class CertificateIssue(CertificateBase):
    student_id: int


class Certificate(CertificateBase):
    id: int
    student_id: Optional[int] = None


class EnrichedCertificate(Certificate):
    """Certificate merged with the holder's current profile. Never persisted."""
    student_photo: Optional[str] = None
    batch: str
    admission_date: str
    father_name: str
    dob: str
    session: str


class CertificateIssueResponse(CamelModel):
    success: bool = True
    message: str = "Certificate Issued Successfully!"
    data: Certificate


class CertificateVerifyResponse(CamelModel):
    success: bool = True
    data: EnrichedCertificate
