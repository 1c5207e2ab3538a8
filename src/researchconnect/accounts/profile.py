"""
Student profile helpers: completion score, skills and display fields.
"""

from typing import Optional

from researchconnect.shared.schemas import StudentProfile

# Field -> points; the weights sum to 100
COMPLETION_WEIGHTS: dict[str, int] = {
    "institution": 15,
    "degree": 15,
    "skills": 20,
    "researchInterest": 20,
    "resumeLink": 15,
    "workEx": 15,
}

INTENTIONS = [
    "Learning",
    "Networking",
    "Job search",
    "Showcase portfolio",
    "Research collaboration",
]


def profile_completion(profile: Optional[StudentProfile]) -> int:
    """
    Percentage of the key profile fields that are filled in.

    Example:
        >>> profile_completion(StudentProfile(institution="MIT", skills=["Python"]))
        35
    """
    if profile is None:
        return 0
    score = 0
    for field_name, points in COMPLETION_WEIGHTS.items():
        if getattr(profile, field_name):
            score += points
    return min(score, 100)


def missing_fields(profile: Optional[StudentProfile]) -> list[str]:
    """Key fields still empty, in weight order."""
    if profile is None:
        return list(COMPLETION_WEIGHTS)
    return [name for name in COMPLETION_WEIGHTS if not getattr(profile, name)]


def toggle_skill(profile: StudentProfile, skill: str) -> StudentProfile:
    """Add the skill if absent, remove it otherwise; blank skills are ignored."""
    skill = skill.strip()
    if not skill:
        return profile
    if skill in profile.skills:
        skills = [s for s in profile.skills if s != skill]
    else:
        skills = [*profile.skills, skill]
    return profile.model_copy(update={"skills": skills})


def research_interests(profile: Optional[StudentProfile]) -> list[str]:
    """Split the free-text research interest into individual interests."""
    if profile is None or not profile.researchInterest:
        return []
    return [part.strip() for part in profile.researchInterest.split(",") if part.strip()]
