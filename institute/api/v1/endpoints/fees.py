from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from institute.api.deps import get_db
from institute.schemas.base import MessageResponse
from institute.schemas.fee import (
    FeeCollectRequest,
    FeeCollectResponse,
    FeeTransaction,
    ReconcileResponse,
)
from institute.services.fee import ledger

router = APIRouter()


@router.post("/collect", response_model=FeeCollectResponse)
def collect_fee(
    payment: FeeCollectRequest,
    db: Session = Depends(get_db)
):
    """
    Record a payment and add it to the student's paid total

    - **narration** defaults to "Fee Payment"
    """
    tx = ledger.collect(
        db,
        student_id=payment.student_id,
        amount=payment.amount,
        date=payment.date,
        narration=payment.narration,
    )
    return {"paid_fee": tx.student.paid_fee, "transaction": tx}


@router.get("/history/{student_id}", response_model=List[FeeTransaction])
def fee_history(
    student_id: int,
    db: Session = Depends(get_db)
):
    """Payments of one student, newest first"""
    return ledger.history(db, student_id=student_id)


@router.delete("/transaction/{transaction_id}", response_model=MessageResponse)
def void_transaction(
    transaction_id: int,
    db: Session = Depends(get_db)
):
    """Delete a payment and subtract its amount from the student's paid total"""
    ledger.void(db, transaction_id=transaction_id)
    return {"message": "Deleted"}


@router.post("/reconcile/{student_id}", response_model=ReconcileResponse)
def reconcile_student(
    student_id: int,
    db: Session = Depends(get_db)
):
    """Recompute the paid total from the payment history"""
    student, previous = ledger.reconcile(db, student_id=student_id)
    return {
        "student_id": student.id,
        "previous_paid_fee": previous,
        "paid_fee": student.paid_fee,
        "repaired": previous != student.paid_fee,
    }
