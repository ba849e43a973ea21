from institute.schemas.base import CamelModel


class DashboardStats(CamelModel):
    total_students: int
    total_certs: int
    total_fees: float
