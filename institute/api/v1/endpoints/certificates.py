from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from institute.api.deps import get_db
from institute.schemas.base import MessageResponse
from institute.schemas.certificate import (
    Certificate,
    CertificateIssue,
    CertificateIssueResponse,
    CertificateVerifyResponse,
)
from institute.services.certificate import certificate as cert_service

router = APIRouter()


@router.post("/issue", response_model=CertificateIssueResponse, status_code=status.HTTP_201_CREATED)
def issue_certificate(
    certificate: CertificateIssue,
    db: Session = Depends(get_db)
):
    """
    Issue a certificate. One per enrollment number.

    **grade** is derived from **percentage** when left out.
    """
    return {"data": cert_service.issue(db, certificate)}


@router.get("", response_model=List[Certificate])
def get_certificates(db: Session = Depends(get_db)):
    """All certificates, most recent first"""
    return cert_service.list_certificates(db)


@router.get("/verify/{certificate_no}", response_model=CertificateVerifyResponse)
def verify_certificate(
    certificate_no: str,
    db: Session = Depends(get_db)
):
    """
    Public verification view: the certificate merged with the holder's
    photo, batch, admission date, parentage, date of birth and session.
    """
    return {"data": cert_service.verify(db, certificate_no)}


@router.delete("/{certificate_id}", response_model=MessageResponse)
def delete_certificate(
    certificate_id: int,
    db: Session = Depends(get_db)
):
    cert_service.delete_certificate(db, certificate_id)
    return {"message": "Certificate deleted successfully"}
