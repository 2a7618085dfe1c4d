"""
Domain models for job matching.
"""

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


def _null_to_empty(value: Any) -> Any:
    # Profile JSON columns are schemaless; entries may carry explicit nulls
    return "" if value is None else value


class Skill(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str
    level: str | None = None

    normalize_name = field_validator("name", mode="before")(_null_to_empty)


class EmploymentEntry(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: str = ""
    company: str = ""
    description: str = ""

    normalize_text = field_validator("title", "company", "description", mode="before")(
        _null_to_empty
    )


class EducationEntry(BaseModel):
    model_config = ConfigDict(extra="ignore")

    degree: str = ""
    field: str = ""
    institution: str = ""

    normalize_text = field_validator("degree", "field", "institution", mode="before")(
        _null_to_empty
    )


class Job(BaseModel):
    """A saved job posting as read from the jobs table or a request body."""

    model_config = ConfigDict(extra="ignore")

    job_title: str
    job_description: str = ""
    company_name: str = ""
    location: str | None = None
    salary_min: float | None = Field(default=None, ge=0)
    salary_max: float | None = Field(default=None, ge=0)

    @model_validator(mode="after")
    def check_salary_range(self) -> "Job":
        if (
            self.salary_min is not None
            and self.salary_max is not None
            and self.salary_min > self.salary_max
        ):
            raise ValueError("salary_min must not exceed salary_max")
        return self


class Profile(BaseModel):
    """The parts of a user's profile that feed the match score."""

    model_config = ConfigDict(extra="ignore")

    skills: list[Skill] = Field(default_factory=list)
    employment_history: list[EmploymentEntry] = Field(default_factory=list)
    education: list[EducationEntry] = Field(default_factory=list)
    experience_level: str | None = None
    location: str | None = None

    @field_validator("skills", "employment_history", "education", mode="before")
    @classmethod
    def drop_null_entries(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, list):
            return [entry for entry in value if entry is not None]
        return value


@dataclass(slots=True)
class MatchScore:
    overall_score: int
    skills_score: int
    experience_score: int
    education_score: int
    location_score: int
    strengths: list[str] = field(default_factory=list)
    gaps: list[str] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)
