"""
Filters Module - Project search and filtering.
==============================================

Client-side filtering of project listings, shared by the Streamlit
explore page and the ``projects`` CLI command.

Filters apply in a fixed order (search, field, specialization, duration,
position type, upcoming deadline) and always preserve the input order.
"""

import re
from dataclasses import dataclass, field as dataclass_field
from datetime import date, timedelta
from typing import Iterable, Optional

from researchconnect.shared.config import get_settings
from researchconnect.shared.logging import get_logger
from researchconnect.shared.schemas import Project
from researchconnect.shared.utils import parse_date

logger = get_logger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
# Catalogue
# ─────────────────────────────────────────────────────────────────────────────

FIELDS_OF_STUDY: dict[str, dict[str, str]] = {
    "Sciences": {
        "physics": "Physics",
        "chemistry": "Chemistry",
        "biology": "Biology",
        "computer-science": "Computer Science",
    },
    "Mathematics": {
        "pure-mathematics": "Pure Mathematics",
        "applied-mathematics": "Applied Mathematics",
        "statistics": "Statistics",
    },
    "Other": {
        "engineering": "Engineering",
        "social-sciences": "Social Sciences",
        "humanities": "Humanities",
        "environmental-science": "Environmental Science",
        "materials-science": "Materials Science",
        "earth-sciences": "Earth Sciences",
    },
}

ALL_SPECIALIZATIONS = "all"

SPECIALIZATIONS_BY_FIELD: dict[str, dict[str, str]] = {
    "physics": {
        "quantum-mechanics": "Quantum Mechanics",
        "quantum-computing": "Quantum Computing",
        "astrophysics": "Astrophysics",
        "condensed-matter": "Condensed Matter Physics",
        "particle-physics": "Particle Physics",
        "optics": "Optics and Photonics",
    },
    "chemistry": {
        "organic-chemistry": "Organic Chemistry",
        "inorganic-chemistry": "Inorganic Chemistry",
        "physical-chemistry": "Physical Chemistry",
        "analytical-chemistry": "Analytical Chemistry",
        "biochemistry": "Biochemistry",
    },
    "biology": {
        "molecular-biology": "Molecular Biology",
        "genetics": "Genetics",
        "microbiology": "Microbiology",
        "ecology": "Ecology",
        "neuroscience": "Neuroscience",
        "bioinformatics": "Bioinformatics",
    },
    "computer-science": {
        "machine-learning": "Machine Learning",
        "artificial-intelligence": "Artificial Intelligence",
        "computer-vision": "Computer Vision",
        "natural-language-processing": "Natural Language Processing",
        "cybersecurity": "Cybersecurity",
        "distributed-systems": "Distributed Systems",
        "human-computer-interaction": "Human-Computer Interaction",
    },
    "pure-mathematics": {
        "algebra": "Algebra",
        "topology": "Topology",
        "number-theory": "Number Theory",
        "geometry": "Geometry",
        "analysis": "Analysis",
    },
    "applied-mathematics": {
        "numerical-analysis": "Numerical Analysis",
        "mathematical-modeling": "Mathematical Modeling",
        "optimization": "Optimization",
        "dynamical-systems": "Dynamical Systems",
    },
    "statistics": {
        "statistical-learning": "Statistical Learning",
        "bayesian-statistics": "Bayesian Statistics",
        "data-science": "Data Science",
        "biostatistics": "Biostatistics",
    },
    "engineering": {
        "electrical-engineering": "Electrical Engineering",
        "mechanical-engineering": "Mechanical Engineering",
        "civil-engineering": "Civil Engineering",
        "chemical-engineering": "Chemical Engineering",
        "biomedical-engineering": "Biomedical Engineering",
    },
    "social-sciences": {
        "psychology": "Psychology",
        "sociology": "Sociology",
        "economics": "Economics",
        "political-science": "Political Science",
        "anthropology": "Anthropology",
    },
    "humanities": {
        "history": "History",
        "philosophy": "Philosophy",
        "literature": "Literature",
        "linguistics": "Linguistics",
    },
    "environmental-science": {
        "climate-science": "Climate Science",
        "conservation": "Conservation",
        "sustainability": "Sustainability",
    },
    "materials-science": {
        "nanomaterials": "Nanomaterials",
        "polymers": "Polymers",
        "biomaterials": "Biomaterials",
    },
    "earth-sciences": {
        "geology": "Geology",
        "geophysics": "Geophysics",
        "oceanography": "Oceanography",
    },
}

POSITION_TYPES: dict[str, str] = {
    "paid": "Paid",
    "volunteer": "Volunteer",
    "credit": "Academic Credit",
    "thesis": "Thesis",
}

# Duration bucket -> (label, marker searched in a project's duration text)
DURATION_LABELS: dict[int, tuple[str, Optional[str]]] = {
    0: ("Any", None),
    1: ("Short-term (1-3 mo)", "short-term"),
    2: ("Medium-term (3-6 mo)", "medium-term"),
    3: ("Long-term (6+ mo)", "long-term"),
}


def field_label(slug: str) -> str:
    """Human label of a field slug (the slug itself when unknown)."""
    for group in FIELDS_OF_STUDY.values():
        if slug in group:
            return group[slug]
    return slug


def specialization_options(field_slug: Optional[str]) -> list[str]:
    """
    Specialization values offered for a field.

    Always starts with ``"all"``; an unknown or empty field yields only that.
    """
    return [ALL_SPECIALIZATIONS] + list(SPECIALIZATIONS_BY_FIELD.get(field_slug or "", {}))


def specialization_label(value: str) -> str:
    if value == ALL_SPECIALIZATIONS:
        return "All Specializations"
    for options in SPECIALIZATIONS_BY_FIELD.values():
        if value in options:
            return options[value]
    return value


# ─────────────────────────────────────────────────────────────────────────────
# Filter State
# ─────────────────────────────────────────────────────────────────────────────


@dataclass
class ProjectFilters:
    """Current state of the project filter panel."""

    search: str = ""
    field: str = ""
    specialization: str = ALL_SPECIALIZATIONS
    duration: int = 0
    position_types: list[str] = dataclass_field(default_factory=list)
    upcoming_deadline_only: bool = False

    @property
    def is_default(self) -> bool:
        return self == ProjectFilters()

    def set_field(self, field_slug: str) -> None:
        """Change the field; the specialization resets to ``all``."""
        self.field = field_slug
        self.specialization = ALL_SPECIALIZATIONS

    def toggle_position_type(self, position_type: str) -> None:
        if position_type in self.position_types:
            self.position_types.remove(position_type)
        else:
            self.position_types.append(position_type)

    def reset(self) -> "ProjectFilters":
        """Return the default filters."""
        return ProjectFilters()


# ─────────────────────────────────────────────────────────────────────────────
# Filtering
# ─────────────────────────────────────────────────────────────────────────────


def compile_search(query: str) -> re.Pattern:
    """
    Compile a search query as a case-insensitive regex.

    Invalid patterns fall back to a literal match.
    """
    try:
        return re.compile(query, re.IGNORECASE)
    except re.error:
        logger.debug(f"Invalid search pattern {query!r}, matching literally")
        return re.compile(re.escape(query), re.IGNORECASE)


def _matches_search(project: Project, pattern: re.Pattern) -> bool:
    haystack = " ".join(
        [
            project.name,
            project.sdesc,
            project.ldesc,
            project.professor_name,
            " ".join(project.tags),
        ]
    )
    if pattern.search(haystack):
        return True
    return any(pattern.search(tag) for tag in project.tags)


def _matches_duration(project: Project, bucket: int) -> bool:
    marker = DURATION_LABELS.get(bucket, ("", None))[1]
    if marker is None or not project.duration:
        return False
    return marker in project.duration.lower()


def _matches_position_types(project: Project, selected: list[str]) -> bool:
    if not project.position_type:
        return False
    return any(
        wanted.lower() in offered.lower()
        for wanted in selected
        for offered in project.position_type
    )


def _deadline_within(project: Project, today: date, window_days: int) -> bool:
    deadline = parse_date(project.deadline)
    if deadline is None:
        return False
    return today <= deadline <= today + timedelta(days=window_days)


def apply_filters(
    projects: Iterable[Project],
    filters: ProjectFilters,
    today: Optional[date] = None,
    window_days: Optional[int] = None,
) -> list[Project]:
    """
    Filter projects, preserving their order.

    Args:
        projects: Projects to filter
        filters: Current filter state
        today: Reference date for the deadline filter (defaults to today)
        window_days: Upcoming-deadline window (defaults to settings)

    Returns:
        Projects passing every active filter
    """
    filtered = list(projects)

    if filters.search:
        pattern = compile_search(filters.search)
        filtered = [p for p in filtered if _matches_search(p, pattern)]

    if filters.field:
        wanted = filters.field.lower()
        filtered = [p for p in filtered if (p.field_of_study or "").lower() == wanted]

    if filters.specialization and filters.specialization != ALL_SPECIALIZATIONS:
        wanted = filters.specialization.lower()
        filtered = [p for p in filtered if (p.specialization or "").lower() == wanted]

    if filters.duration:
        filtered = [p for p in filtered if _matches_duration(p, filters.duration)]

    if filters.position_types:
        filtered = [p for p in filtered if _matches_position_types(p, filters.position_types)]

    if filters.upcoming_deadline_only:
        reference = today or date.today()
        window = (
            window_days if window_days is not None else get_settings().projects.deadline_window_days
        )
        filtered = [p for p in filtered if _deadline_within(p, reference, window)]

    return filtered


def split_active(projects: Iterable[Project]) -> tuple[list[Project], list[Project]]:
    """Split projects into ``(active, inactive)`` for the professor's tabs."""
    active: list[Project] = []
    inactive: list[Project] = []
    for project in projects:
        (active if project.is_active else inactive).append(project)
    return active, inactive


def highlight_segments(text: str, query: str) -> list[tuple[str, bool]]:
    """
    Split ``text`` into ``(segment, is_match)`` pairs for highlighting.

    Example:
        >>> highlight_segments("Quantum optics lab", "optic")
        [('Quantum ', False), ('optic', True), ('s lab', False)]
    """
    if not query or not text:
        return [(text, False)] if text else []

    pattern = compile_search(query)
    segments: list[tuple[str, bool]] = []
    cursor = 0
    for match in pattern.finditer(text):
        start, end = match.span()
        if start == end:
            continue
        if start > cursor:
            segments.append((text[cursor:start], False))
        segments.append((text[start:end], True))
        cursor = end
    if cursor < len(text):
        segments.append((text[cursor:], False))
    return segments
