"""
Project form: validation and payload building for new projects.
"""

from datetime import date
from typing import Any, Optional

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from researchconnect.shared.schemas import ProjectCreate


def _today(info: ValidationInfo) -> date:
    context = info.context or {}
    return context.get("today") or date.today()


class ProjectForm(BaseModel):
    """
    Input of the "create project" form.

    Validate with ``parse_form(ProjectForm, data, today=...)`` to get a
    ``FormValidationError`` listing the offending fields.
    """

    name: str = Field(..., description="Project title")
    sdesc: str = Field(..., description="Short description")
    ldesc: str = Field(..., description="Detailed description")
    tags: list[str] = Field(default_factory=list)
    field_of_study: Optional[str] = None
    specialization: Optional[str] = None
    duration: Optional[str] = None
    position_types: list[str] = Field(default_factory=list)
    deadline: Optional[date] = None
    is_active: bool = True

    @field_validator("name", "sdesc", "ldesc")
    @classmethod
    def required_text(cls, v: str, info: ValidationInfo) -> str:
        v = v.strip()
        if not v:
            labels = {"name": "Project name", "sdesc": "Short description", "ldesc": "Long description"}
            raise ValueError(f"{labels[info.field_name]} is required")
        return v

    @field_validator("field_of_study", "specialization", "duration", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("deadline", mode="before")
    @classmethod
    def blank_deadline(cls, v: Any) -> Any:
        return None if v == "" else v

    @field_validator("deadline")
    @classmethod
    def deadline_not_past(cls, v: Optional[date], info: ValidationInfo) -> Optional[date]:
        if v is not None and v < _today(info):
            raise ValueError("Deadline cannot be in the past")
        return v

    def to_payload(self) -> ProjectCreate:
        """Build the ``POST /projects`` payload."""
        return ProjectCreate(
            name=self.name,
            sdesc=self.sdesc,
            ldesc=self.ldesc,
            isActive=self.is_active,
            tags=list(self.tags),
            fieldOfStudy=self.field_of_study,
            specialization=self.specialization,
            duration=self.duration,
            positionType=list(self.position_types),
            deadline=self.deadline.isoformat() if self.deadline else None,
        )


# ─────────────────────────────────────────────────────────────────────────────
# List Helpers
# ─────────────────────────────────────────────────────────────────────────────


def add_tag(tags: list[str], tag: str) -> list[str]:
    """Append a trimmed tag; blank or duplicate tags are ignored."""
    tag = tag.strip()
    if not tag or tag in tags:
        return list(tags)
    return [*tags, tag]


def remove_tag(tags: list[str], tag: str) -> list[str]:
    return [t for t in tags if t != tag]


def toggle_position_type(selected: list[str], position_type: str) -> list[str]:
    if position_type in selected:
        return [t for t in selected if t != position_type]
    return [*selected, position_type]
