from .application_service import ApplicationService, to_applicant
from .target_service import TargetService
from .statistics_service import StatisticsService, summarize_applications

__all__ = [
    "ApplicationService",
    "TargetService",
    "StatisticsService",
    "summarize_applications",
    "to_applicant",
]
