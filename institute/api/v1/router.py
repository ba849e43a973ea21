from fastapi import APIRouter
from institute.api.v1.endpoints import certificates
from institute.api.v1.endpoints import courses
from institute.api.v1.endpoints import fees
from institute.api.v1.endpoints import stats
from institute.api.v1.endpoints import students

api_router = APIRouter()

api_router.include_router(
    stats.router,
    prefix="/stats",
    tags=["dashboard"]
)

api_router.include_router(
    students.router,
    prefix="/students",
    tags=["students"]
)

api_router.include_router(
    fees.router,
    prefix="/fees",
    tags=["fees"]
)

api_router.include_router(
    courses.router,
    prefix="/courses",
    tags=["courses"]
)

api_router.include_router(
    certificates.router,
    prefix="/certificates",
    tags=["certificates"]
)
