"""
Pipeline metrics package.

Pure aggregation over job, status-change, interview and offer records.
"""

from .service import (
    FUNNEL_STAGES,
    attach_status_history,
    build_job_analytics,
    calculate_applications_sent,
    calculate_average_time_in_stage,
    calculate_conversion_rates,
    calculate_deadline_adherence,
    calculate_funnel_counts,
    calculate_interviews_scheduled,
    calculate_median_time_to_response,
    calculate_offers_received,
    calculate_response_rate,
    calculate_time_to_offer,
    get_monthly_applications,
    get_upcoming_deadlines,
    normalize_status,
)

__all__ = [
    "FUNNEL_STAGES",
    "attach_status_history",
    "build_job_analytics",
    "calculate_applications_sent",
    "calculate_average_time_in_stage",
    "calculate_conversion_rates",
    "calculate_deadline_adherence",
    "calculate_funnel_counts",
    "calculate_interviews_scheduled",
    "calculate_median_time_to_response",
    "calculate_offers_received",
    "calculate_response_rate",
    "calculate_time_to_offer",
    "get_monthly_applications",
    "get_upcoming_deadlines",
    "normalize_status",
]
