"""
Projects Module - Browsing and authoring research projects.
===========================================================

- filters: field/specialization catalogue and the student-side project filter
- forms: professor-side project form with validation

Filter Flow:
    list_projects_for_student() → apply_filters(ProjectFilters) → split_active()
"""

from researchconnect.projects.filters import (
    ALL_SPECIALIZATIONS,
    DURATION_LABELS,
    FIELDS_OF_STUDY,
    POSITION_TYPES,
    SPECIALIZATIONS_BY_FIELD,
    ProjectFilters,
    apply_filters,
    compile_search,
    field_label,
    highlight_segments,
    specialization_label,
    specialization_options,
    split_active,
)
from researchconnect.projects.forms import ProjectForm, add_tag, remove_tag, toggle_position_type

__all__ = [
    # Catalogue
    "ALL_SPECIALIZATIONS",
    "DURATION_LABELS",
    "FIELDS_OF_STUDY",
    "POSITION_TYPES",
    "SPECIALIZATIONS_BY_FIELD",
    "field_label",
    "specialization_label",
    "specialization_options",
    # Filters
    "ProjectFilters",
    "apply_filters",
    "compile_search",
    "highlight_segments",
    "split_active",
    # Forms
    "ProjectForm",
    "add_tag",
    "remove_tag",
    "toggle_position_type",
]
