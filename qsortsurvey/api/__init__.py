from qsortsurvey.api.health import router as health_router
from qsortsurvey.api.qsort import router as qsort_router

__all__ = [
    "health_router",
    "qsort_router",
]
