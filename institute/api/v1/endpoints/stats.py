from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from institute.api.deps import get_db
from institute.schemas.dashboard import DashboardStats
from institute.services.dashboard import dashboard

router = APIRouter()


@router.get("", response_model=DashboardStats)
def get_stats(db: Session = Depends(get_db)):
    """
    Dashboard counters

    - **totalStudents** / **totalCerts**: row counts
    - **totalFees**: unpaid balance summed over students, from each student's course fee
    """
    return dashboard.stats(db)
