from datetime import datetime
from typing import Optional
from pydantic import Field

from institute.schemas.base import CamelModel


class FeeCollectRequest(CamelModel):
    student_id: int
    amount: float = Field(..., allow_inf_nan=False)
    date: Optional[str] = None
    narration: Optional[str] = None


class FeeTransaction(CamelModel):
    id: int
    student_id: int
    amount: float
    date: Optional[str] = None
    narration: str
    created_at: datetime


class FeeCollectResponse(CamelModel):
    message: str = "Success"
    paid_fee: float
    transaction: FeeTransaction


class ReconcileResponse(CamelModel):
    student_id: int
    previous_paid_fee: float
    paid_fee: float
    repaired: bool
