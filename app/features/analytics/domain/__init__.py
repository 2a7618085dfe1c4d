from .models import (
    ConversionRates,
    InterviewRecord,
    JobAnalytics,
    JobRecord,
    MonthlyCount,
    OfferRecord,
    StatusChange,
    UpcomingDeadline,
)

__all__ = [
    "ConversionRates",
    "InterviewRecord",
    "JobAnalytics",
    "JobRecord",
    "MonthlyCount",
    "OfferRecord",
    "StatusChange",
    "UpcomingDeadline",
]
