from .models import EducationEntry, EmploymentEntry, Job, MatchScore, Profile, Skill

__all__ = ["EducationEntry", "EmploymentEntry", "Job", "MatchScore", "Profile", "Skill"]
