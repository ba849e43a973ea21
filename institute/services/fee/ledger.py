"""
Fee ledger.

A student's ``paid_fee`` is a cache of the sum of its fee transactions.
Every write that touches a transaction also adjusts that cache inside the
same database transaction, so the two can never be committed apart.
``reconcile`` recomputes the cache from history for rows that drifted
through writes made outside this module.
"""

import logging
import math
from decimal import Decimal, InvalidOperation
from typing import List, Optional, Tuple

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import DataError, IntegrityError
from sqlalchemy.orm import Session

from institute.core.database import store_errors, transaction
from institute.core.exceptions import NotFoundException, ValidationException
from institute.models.fee_transaction import FeeTransaction
from institute.models.student import Student

logger = logging.getLogger(__name__)

DEFAULT_NARRATION = "Fee Payment"
CENT = Decimal("0.01")
# Numeric(12, 2) leaves ten integer digits
MAX_AMOUNT = Decimal("9999999999.99")


def to_amount(amount) -> Decimal:
    """
    Parse a payment amount into a finite Decimal of whole cents.

    Sub-cent amounts are rejected rather than rounded, and so are amounts
    too large for the amount and paid_fee columns.
    """
    if isinstance(amount, bool) or amount is None:
        raise ValidationException("Amount must be a number", details={"amount": repr(amount)})
    if isinstance(amount, float) and not math.isfinite(amount):
        raise ValidationException("Amount must be a finite number", details={"amount": repr(amount)})
    try:
        value = Decimal(str(amount).strip())
    except InvalidOperation:
        raise ValidationException("Amount must be a number", details={"amount": repr(amount)})
    if not value.is_finite():
        raise ValidationException("Amount must be a finite number", details={"amount": repr(amount)})
    if abs(value) > MAX_AMOUNT:
        raise ValidationException(
            f"Amount must be between -{MAX_AMOUNT} and {MAX_AMOUNT}",
            details={"amount": repr(amount)},
        )
    try:
        cents = value.quantize(CENT)
    except InvalidOperation:
        raise ValidationException("Amount has too many digits", details={"amount": repr(amount)})
    if cents != value:
        raise ValidationException("Amount cannot have fractions of a cent", details={"amount": repr(amount)})
    return cents


def _get_student(db: Session, student_id: int) -> Student:
    with store_errors():
        student = db.get(Student, student_id)
    if student is None:
        raise NotFoundException(f"Student {student_id} not found")
    return student


def collect(
    db: Session,
    student_id: int,
    amount,
    date: Optional[str] = None,
    narration: Optional[str] = None,
) -> FeeTransaction:
    """Record a payment and add it to the student's paid total."""
    value = to_amount(amount)
    student = _get_student(db, student_id)

    tx = FeeTransaction(
        student_id=student.id,
        amount=value,
        date=date,
        narration=narration if narration and narration.strip() else DEFAULT_NARRATION,
    )
    try:
        with transaction(db):
            db.add(tx)
            db.flush()
            result = db.execute(
                update(Student)
                .where(Student.id == student.id)
                .values(paid_fee=Student.paid_fee + value)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                raise NotFoundException(f"Student {student_id} not found")
    except IntegrityError:
        # Student deleted between the lookup and the insert
        raise NotFoundException(f"Student {student_id} not found")
    except DataError:
        # paid_fee + amount no longer fits the column
        raise ValidationException(
            f"Paid total for student {student_id} would exceed {MAX_AMOUNT}",
            details={"amount": str(value)},
        )

    with store_errors():
        db.refresh(student)
        db.refresh(tx)
    logger.info(f"Collected {value} from student {student.enrollment_no}; paid_fee={student.paid_fee}")
    return tx


def void(db: Session, transaction_id: int) -> None:
    """Delete a transaction and take its stored amount back off the paid total."""
    with store_errors():
        tx = db.get(FeeTransaction, transaction_id)
    if tx is None:
        raise NotFoundException(f"Transaction {transaction_id} not found")

    student_id, amount = tx.student_id, tx.amount
    with transaction(db):
        db.execute(
            update(Student)
            .where(Student.id == student_id)
            .values(paid_fee=Student.paid_fee - amount)
            .execution_options(synchronize_session=False)
        )
        result = db.execute(delete(FeeTransaction).where(FeeTransaction.id == transaction_id))
        if result.rowcount != 1:
            # Voided concurrently; undo our decrement
            raise NotFoundException(f"Transaction {transaction_id} not found")

    with store_errors():
        student = db.get(Student, student_id)
        if student is not None:
            db.refresh(student)
    logger.info(f"Voided transaction {transaction_id} ({amount}) for student {student_id}")


def history(db: Session, student_id: int) -> List[FeeTransaction]:
    """Transactions of one student, newest first."""
    with store_errors():
        return (
            db.query(FeeTransaction)
            .filter(FeeTransaction.student_id == student_id)
            .order_by(FeeTransaction.created_at.desc(), FeeTransaction.id.desc())
            .all()
        )


def reconcile(db: Session, student_id: int) -> Tuple[Student, Decimal]:
    """
    Recompute ``paid_fee`` from the transaction history.

    The new total is computed and written by a single UPDATE, so a payment
    landing concurrently is either fully counted or not seen at all.

    Returns:
        (student, previous paid_fee)
    """
    student = _get_student(db, student_id)
    previous = Decimal(str(student.paid_fee or 0)).quantize(CENT)

    total = (
        select(func.coalesce(func.sum(FeeTransaction.amount), 0))
        .where(FeeTransaction.student_id == Student.id)
        .scalar_subquery()
    )
    with transaction(db):
        db.execute(
            update(Student)
            .where(Student.id == student_id)
            .values(paid_fee=total)
            .execution_options(synchronize_session=False)
        )

    db.refresh(student)
    current = Decimal(str(student.paid_fee or 0)).quantize(CENT)
    if current != previous:
        logger.warning(
            f"Repaired paid_fee drift for student {student.enrollment_no}: {previous} -> {current}"
        )
    return student, previous
