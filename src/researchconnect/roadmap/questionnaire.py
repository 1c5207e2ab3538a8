"""
Questionnaire Module - Multi-step preference wizards.
=====================================================

Two wizards collect the answers the roadmap generator needs:
- ResearchQuestionnaire (4 steps): field, experience, interests, goals
- PlacementQuestionnaire (5 steps): timeline, prep areas, levels,
  resources/companies, goals

Both share the ``Wizard`` step machine: ``next()`` only advances when the
current step is complete, ``back()`` stops at step 1, and ``submit()``
refuses to run twice concurrently.
"""

import json
from typing import Any, Callable, Optional, TypeVar, Union

from researchconnect.shared.config import get_settings
from researchconnect.shared.logging import get_logger
from researchconnect.shared.schemas import (
    PlacementPreferences,
    ResearchPreferences,
    RoadmapKind,
)
from researchconnect.shared.utils import parse_json_list, parse_json_object

logger = get_logger(__name__)

T = TypeVar("T")


# ─────────────────────────────────────────────────────────────────────────────
# Catalogue
# ─────────────────────────────────────────────────────────────────────────────

FIELDS_OF_STUDY = [
    "Computer Science",
    "Physics",
    "Mathematics",
    "Biology",
    "Chemistry",
    "Engineering",
    "Psychology",
    "Economics",
    "Environmental Science",
    "Data Science",
    "Artificial Intelligence",
    "Neuroscience",
    "Other",
]

EXPERIENCE_LEVELS = {
    "beginner": "Beginner - Just starting out",
    "intermediate": "Intermediate - Some research experience",
    "advanced": "Advanced - Significant research background",
}

INTEREST_AREAS_BY_FIELD: dict[str, list[str]] = {
    "Computer Science": [
        "Machine Learning",
        "Artificial Intelligence",
        "Computer Vision",
        "Natural Language Processing",
        "Cybersecurity",
        "Distributed Systems",
        "Human-Computer Interaction",
        "Algorithms",
    ],
    "Physics": [
        "Quantum Mechanics",
        "Particle Physics",
        "Astrophysics",
        "Condensed Matter",
        "Theoretical Physics",
        "Computational Physics",
    ],
    "Mathematics": [
        "Number Theory",
        "Algebra",
        "Topology",
        "Analysis",
        "Applied Mathematics",
        "Computational Mathematics",
    ],
    "Biology": [
        "Molecular Biology",
        "Genetics",
        "Neuroscience",
        "Ecology",
        "Bioinformatics",
        "Systems Biology",
    ],
    "Other": ["General Research"],
}

INTENSITY_TYPES = {
    "regular": "Regular & Moderate (8-10 hrs/week)",
    "intense": "Intense & Focused (15-20 hrs/week)",
    "weekend": "Weekend-Only (5-6 hrs/week)",
}

PREP_AREAS = {
    "aptitude": "Aptitude",
    "dsa": "DSA / Coding",
    "core_cs": "Core CS Subjects",
    "resume": "Resume & Projects",
    "interview": "Interview Skills",
    "company_specific": "Company-Specific",
}

PREP_LEVELS = {
    "beginner": "Beginner - Just starting",
    "intermediate": "Intermediate - Some practice done",
    "confident": "Confident - Good understanding",
}

COMMON_RESOURCES: dict[str, list[str]] = {
    "dsa": ["Striver's A2Z Sheet", "Love Babbar 450", "LeetCode", "NeetCode", "GeeksForGeeks DSA"],
    "aptitude": ["PrepInsta", "IndiaBix", "RS Aggarwal", "Arun Sharma Book"],
    "core_cs": ["GeeksForGeeks", "Gate Smashers YouTube", "Neso Academy"],
    "interview": ["InterviewBit", "Pramp", "CareerCup", "Pramp Mock Interviews"],
}


def interests_for_field(field_of_study: str) -> list[str]:
    """Interest areas offered for a field; unknown fields get the ``Other`` list."""
    return INTEREST_AREAS_BY_FIELD.get(field_of_study, INTEREST_AREAS_BY_FIELD["Other"])


def _add_unique(items: list[str], value: str) -> bool:
    value = value.strip()
    if not value or value in items:
        return False
    items.append(value)
    return True


# ─────────────────────────────────────────────────────────────────────────────
# Wizard Base
# ─────────────────────────────────────────────────────────────────────────────


class Wizard:
    """Step machine shared by the questionnaires."""

    total_steps: int = 1

    def __init__(self) -> None:
        self.step = 1
        self.is_submitting = False

    @property
    def progress(self) -> float:
        """Completion percentage of the current step."""
        return self.step / self.total_steps * 100

    @property
    def is_last_step(self) -> bool:
        return self.step == self.total_steps

    def can_proceed(self) -> bool:
        return self.step_complete(self.step)

    def step_complete(self, step: int) -> bool:  # pragma: no cover - overridden
        raise NotImplementedError

    def next(self) -> bool:
        """Advance one step if the current one is complete."""
        if self.step < self.total_steps and self.can_proceed():
            self.step += 1
            return True
        return False

    def back(self) -> bool:
        if self.step > 1:
            self.step -= 1
            return True
        return False

    def submit(self, callback: Callable[[Any], T]) -> Optional[T]:
        """
        Hand the collected preferences to ``callback``.

        Returns None without calling back when a submission is already in
        flight, the wizard is not on its last step, or that step is
        incomplete. ``is_submitting`` is reset afterwards even if the
        callback raises.
        """
        if self.is_submitting:
            logger.debug("Ignoring duplicate questionnaire submission")
            return None
        if not (self.is_last_step and self.can_proceed()):
            return None

        self.is_submitting = True
        try:
            return callback(self.to_preferences())
        finally:
            self.is_submitting = False

    def to_preferences(self) -> Any:  # pragma: no cover - overridden
        raise NotImplementedError

    def reset(self, initial: Any = None) -> None:
        """Go back to step 1 with fresh (or ``initial``) answers."""
        self.step = 1
        self.is_submitting = False
        self._load(initial)

    def _load(self, initial: Any) -> None:  # pragma: no cover - overridden
        raise NotImplementedError


# ─────────────────────────────────────────────────────────────────────────────
# Research Questionnaire
# ─────────────────────────────────────────────────────────────────────────────


class ResearchQuestionnaire(Wizard):
    """
    Four-step research preferences wizard.

    Example:
        >>> wizard = ResearchQuestionnaire()
        >>> wizard.set_field_of_study("Physics")
        >>> wizard.experience_level = "beginner"
        >>> wizard.next()
        True
    """

    total_steps = 4

    def __init__(self, initial: Union[ResearchPreferences, dict, None] = None):
        super().__init__()
        self._load(initial)

    def _load(self, initial: Union[ResearchPreferences, dict, None]) -> None:
        defaults = get_settings().roadmap.research
        data = initial.model_dump() if isinstance(initial, ResearchPreferences) else dict(initial or {})

        self.field_of_study: str = data.get("field_of_study") or ""
        self.experience_level: str = data.get("experience_level") or ""
        self.current_year: int = data.get("current_year") or defaults.current_year
        self.time_commitment: int = data.get("time_commitment") or defaults.time_commitment
        self.goals: str = data.get("goals") or ""
        self.prior_experience: str = data.get("prior_experience") or ""
        self.selected_interests: list[str] = [
            str(i) for i in parse_json_list(data.get("interest_areas"))
        ]
        self.min_goals_length = defaults.min_goals_length

    @property
    def available_interests(self) -> list[str]:
        return interests_for_field(self.field_of_study)

    def set_field_of_study(self, field_of_study: str) -> None:
        """Change the field, keeping only interests valid for the new field."""
        self.field_of_study = field_of_study
        allowed = interests_for_field(field_of_study)
        self.selected_interests = [i for i in self.selected_interests if i in allowed]

    def toggle_interest(self, interest: str) -> None:
        if interest in self.selected_interests:
            self.selected_interests.remove(interest)
        else:
            self.selected_interests.append(interest)

    def add_custom_interest(self, interest: str) -> bool:
        return _add_unique(self.selected_interests, interest)

    def remove_interest(self, interest: str) -> None:
        self.selected_interests = [i for i in self.selected_interests if i != interest]

    def step_complete(self, step: int) -> bool:
        if step == 1:
            return bool(self.field_of_study and self.experience_level)
        if step == 2:
            return self.current_year > 0 and self.time_commitment > 0
        if step == 3:
            return len(self.selected_interests) > 0
        if step == 4:
            return len(self.goals) > self.min_goals_length
        return True

    def to_preferences(self) -> ResearchPreferences:
        return ResearchPreferences(
            field_of_study=self.field_of_study,
            experience_level=self.experience_level,
            current_year=self.current_year,
            goals=self.goals,
            time_commitment=self.time_commitment,
            interest_areas=json.dumps(self.selected_interests),
            prior_experience=self.prior_experience,
        )


# ─────────────────────────────────────────────────────────────────────────────
# Placement Questionnaire
# ─────────────────────────────────────────────────────────────────────────────


class PlacementQuestionnaire(Wizard):
    """Five-step placement preparation wizard."""

    total_steps = 5

    def __init__(self, initial: Union[PlacementPreferences, dict, None] = None):
        super().__init__()
        self._load(initial)

    def _load(self, initial: Union[PlacementPreferences, dict, None]) -> None:
        defaults = get_settings().roadmap.placement
        data = (
            initial.model_dump() if isinstance(initial, PlacementPreferences) else dict(initial or {})
        )

        self.timeline_weeks: int = data.get("timeline_weeks") or defaults.timeline_weeks
        self.time_commitment: int = data.get("time_commitment") or defaults.time_commitment
        self.intensity_type: str = data.get("intensity_type") or ""
        self.prep_areas: list[str] = [str(a) for a in parse_json_list(data.get("prep_areas"))]
        self.current_levels: dict[str, str] = {
            str(k): str(v) for k, v in parse_json_object(data.get("current_levels")).items()
        }
        self.resources_started: list[str] = [
            str(r) for r in parse_json_list(data.get("resources_started"))
        ]
        self.target_companies: list[str] = [
            str(c) for c in parse_json_list(data.get("target_companies"))
        ]
        self.goals: str = data.get("goals") or ""
        self.special_needs: str = data.get("special_needs") or ""
        self.min_goals_length = defaults.min_goals_length

    def toggle_prep_area(self, area: str) -> None:
        """Select or deselect an area; deselecting drops its level."""
        if area in self.prep_areas:
            self.prep_areas.remove(area)
            self.current_levels.pop(area, None)
        else:
            self.prep_areas.append(area)

    def set_level(self, area: str, level: str) -> None:
        self.current_levels[area] = level

    def add_resource(self, resource: str) -> bool:
        return _add_unique(self.resources_started, resource)

    def remove_resource(self, resource: str) -> None:
        self.resources_started = [r for r in self.resources_started if r != resource]

    def add_company(self, company: str) -> bool:
        return _add_unique(self.target_companies, company)

    def remove_company(self, company: str) -> None:
        self.target_companies = [c for c in self.target_companies if c != company]

    def suggested_resources(self) -> dict[str, list[str]]:
        """Well-known resources for the selected areas."""
        return {area: COMMON_RESOURCES[area] for area in self.prep_areas if area in COMMON_RESOURCES}

    def intensity_suggestion(self) -> str:
        """Recommended intensity for the chosen timeline and weekly hours."""
        if self.timeline_weeks <= 4:
            return "intense"
        if self.timeline_weeks >= 16:
            return "regular"
        return "intense" if self.time_commitment >= 15 else "regular"

    def step_complete(self, step: int) -> bool:
        if step == 1:
            return self.timeline_weeks > 0 and self.time_commitment > 0 and bool(self.intensity_type)
        if step == 2:
            return len(self.prep_areas) > 0
        if step == 3:
            return all(self.current_levels.get(area) for area in self.prep_areas)
        if step == 5:
            return len(self.goals) >= self.min_goals_length
        # Resources and companies are optional
        return True

    def to_preferences(self) -> PlacementPreferences:
        return PlacementPreferences(
            timeline_weeks=self.timeline_weeks,
            time_commitment=self.time_commitment,
            intensity_type=self.intensity_type,
            prep_areas=json.dumps(self.prep_areas),
            current_levels=json.dumps(self.current_levels),
            resources_started=json.dumps(self.resources_started),
            target_companies=json.dumps(self.target_companies),
            special_needs=self.special_needs,
            goals=self.goals,
        )


# ─────────────────────────────────────────────────────────────────────────────
# Type Selection
# ─────────────────────────────────────────────────────────────────────────────

ROADMAP_TYPES = {
    RoadmapKind.RESEARCH.value: (
        "Research Roadmap",
        "Build research skills in your field: foundations to specialization.",
    ),
    RoadmapKind.PLACEMENT.value: (
        "Placement Prep Roadmap",
        "Prepare for campus placements: DSA, aptitude, core CS and interviews.",
    ),
}


class RoadmapTypeSelector:
    """Remembers which roadmap flavour the student picked."""

    def __init__(self) -> None:
        self.selected: Optional[str] = None

    def select(self, kind: str) -> str:
        self.selected = RoadmapKind(kind).value
        return self.selected

    def clear(self) -> None:
        self.selected = None

    def questionnaire(self, initial: Any = None) -> Wizard:
        if self.selected is None:
            raise ValueError("No roadmap type selected")
        return questionnaire_for(self.selected, initial)


def questionnaire_for(kind: str, initial: Any = None) -> Wizard:
    """Build the wizard for a roadmap kind."""
    if RoadmapKind(kind) is RoadmapKind.PLACEMENT:
        return PlacementQuestionnaire(initial)
    return ResearchQuestionnaire(initial)
