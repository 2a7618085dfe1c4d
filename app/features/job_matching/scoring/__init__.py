"""
Job match scoring package.

Keyword overlap between a job posting and the user's skills, employment
history and education, combined with a location tier into one score.
"""

from .service import calculate_job_match, extract_keywords, jaccard_similarity

__all__ = ["calculate_job_match", "extract_keywords", "jaccard_similarity"]
