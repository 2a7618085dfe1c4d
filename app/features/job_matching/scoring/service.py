"""
Job match scorer.

Each profile dimension is reduced to a keyword set and compared with the
job's keywords using Jaccard similarity. Sub-scores are weighted into an
overall score; strengths, gaps and recommendations come from independent
threshold rules and keep the order the rules are declared in.

Skills are the one dimension compared twice: once with the combined
title and description keywords, and once with the description keywords
alone. The higher similarity is used. A role title such as "Software
Engineer" rarely names a skill, and counting its words would cap a
profile that lists every skill in the description below 100. Experience
and education, and the missing-skills gap, use the combined keywords.
"""

from __future__ import annotations

import math
import re
from collections.abc import Iterable

from app.features.job_matching.domain.models import Job, MatchScore, Profile
from app.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

SKILLS_WEIGHT = 0.40
EXPERIENCE_WEIGHT = 0.35
EDUCATION_WEIGHT = 0.15
LOCATION_WEIGHT = 0.10

LOCATION_EXACT = 100
LOCATION_SAME_AREA = 75
LOCATION_NEUTRAL = 50

MIN_KEYWORD_LENGTH = 4
MISSING_SKILLS_LISTED = 3
MISSING_SKILLS_GAP_THRESHOLD = 5

_NON_WORD = re.compile(r"[^\w\s]", re.ASCII)


def extract_keywords(text: str) -> list[str]:
    """Lowercased tokens longer than three characters, punctuation stripped."""
    cleaned = _NON_WORD.sub(" ", (text or "").lower())
    return [word for word in cleaned.split() if len(word) >= MIN_KEYWORD_LENGTH]


def _ordered_set(words: Iterable[str]) -> dict[str, None]:
    # dict keeps first-seen order, which the missing-skills gap relies on
    return dict.fromkeys(words)


def jaccard_similarity(left: Iterable[str], right: Iterable[str]) -> float:
    """|A ∩ B| / |A ∪ B|, or 0.0 when both sets are empty."""
    a, b = set(left), set(right)
    union = a | b
    if not union:
        return 0.0
    return len(a & b) / len(union)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _location_score(profile_location: str | None, job_location: str | None) -> int:
    if not profile_location or not job_location:
        return LOCATION_NEUTRAL

    user_loc = profile_location.lower()
    job_loc = job_location.lower()
    if user_loc == job_loc or "remote" in job_loc:
        return LOCATION_EXACT
    if user_loc.split(",")[0] == job_loc.split(",")[0]:
        return LOCATION_SAME_AREA
    return LOCATION_NEUTRAL


def calculate_job_match(job: Job, profile: Profile) -> MatchScore:
    """
    Score how well a profile fits a job.

    Args:
        job: Job posting (title and description supply the keywords)
        profile: User profile with skills, employment history and education

    Returns:
        MatchScore with 0-100 sub-scores, weighted overall score and the
        strength/gap/recommendation lines that fired
    """
    description_keywords = _ordered_set(extract_keywords(job.job_description))
    job_keywords = _ordered_set(extract_keywords(f"{job.job_description} {job.job_title}"))

    user_skills = {skill.name.lower() for skill in profile.skills if skill.name}
    # Higher of combined and description-only similarity, see module docstring
    skills_score = 100 * max(
        jaccard_similarity(user_skills, job_keywords),
        jaccard_similarity(user_skills, description_keywords),
    )

    experience_keywords = {
        word
        for entry in profile.employment_history
        for word in extract_keywords(f"{entry.title} {entry.description}")
    }
    experience_score = 100 * jaccard_similarity(experience_keywords, job_keywords)

    education_keywords = {
        word
        for entry in profile.education
        for word in extract_keywords(f"{entry.degree} {entry.field}")
    }
    education_score = 100 * jaccard_similarity(education_keywords, job_keywords)

    location_score = _location_score(profile.location, job.location)

    overall_score = _round_half_up(
        skills_score * SKILLS_WEIGHT
        + experience_score * EXPERIENCE_WEIGHT
        + education_score * EDUCATION_WEIGHT
        + location_score * LOCATION_WEIGHT
    )

    strengths: list[str] = []
    if skills_score >= 70:
        strengths.append("Strong skill match")
    if experience_score >= 70:
        strengths.append("Relevant experience")
    if education_score >= 70:
        strengths.append("Educational background aligns")
    if location_score >= 90:
        strengths.append("Location match")

    gaps: list[str] = []
    missing_skills = [keyword for keyword in job_keywords if keyword not in user_skills]
    if len(missing_skills) > MISSING_SKILLS_GAP_THRESHOLD:
        listed = ", ".join(missing_skills[:MISSING_SKILLS_LISTED])
        remaining = len(missing_skills) - MISSING_SKILLS_LISTED
        gaps.append(f"{listed} and {remaining} more skills")
    if skills_score < 50:
        gaps.append("Skills gap detected")
    if experience_score < 50:
        gaps.append("Limited relevant experience")

    recommendations: list[str] = []
    if skills_score < 60:
        recommendations.append("Highlight transferable skills in your resume")
        recommendations.append("Consider adding relevant certifications")
    if experience_score < 60:
        recommendations.append("Emphasize relevant projects and achievements")
    if overall_score >= 70:
        recommendations.append("Strong match - prioritize this application")
    elif overall_score >= 50:
        recommendations.append("Good match - tailor your materials carefully")
    else:
        recommendations.append("Stretch opportunity - emphasize learning potential")

    logger.debug(
        "Job match calculated",
        overall_score=overall_score,
        job_keyword_count=len(job_keywords),
        skill_count=len(user_skills),
    )

    return MatchScore(
        overall_score=overall_score,
        skills_score=_round_half_up(skills_score),
        experience_score=_round_half_up(experience_score),
        education_score=_round_half_up(education_score),
        location_score=location_score,
        strengths=strengths,
        gaps=gaps,
        recommendations=recommendations,
    )
