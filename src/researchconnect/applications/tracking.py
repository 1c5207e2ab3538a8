"""
Tracking Module - Application status tracking for students and professors.
==========================================================================

Provides:
- Status presentation (labels, badge tones)
- Student dashboard counters and recent activity
- Professor views: status tabs, search, past applicants, next actions
- Forms for applying, scheduling interviews and sending feedback
"""

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from researchconnect.shared.logging import get_logger
from researchconnect.shared.schemas import (
    Application,
    ApplicationRequest,
    ApplicationStatus,
    InterviewRequest,
    ProjectApplicant,
    ProjectApplications,
    StudentProfile,
)
from researchconnect.shared.utils import parse_date

logger = get_logger(__name__)

ALL_TAB = "all"

STATUS_LABELS: dict[str, str] = {
    ApplicationStatus.UNDER_REVIEW.value: "Under Review",
    ApplicationStatus.INTERVIEW.value: "Interview Scheduled",
    ApplicationStatus.ACCEPTED.value: "Accepted",
    ApplicationStatus.REJECTED.value: "Rejected",
    ApplicationStatus.WAITLISTED.value: "Waitlisted",
    ApplicationStatus.APPROVED.value: "Approved",
}

# Badge tone per status: success, info, neutral, danger, warning
STATUS_TONES: dict[str, str] = {
    ApplicationStatus.UNDER_REVIEW.value: "neutral",
    ApplicationStatus.INTERVIEW.value: "info",
    ApplicationStatus.ACCEPTED.value: "success",
    ApplicationStatus.APPROVED.value: "success",
    ApplicationStatus.REJECTED.value: "danger",
    ApplicationStatus.WAITLISTED.value: "warning",
}

PROFESSOR_TABS = [
    ALL_TAB,
    ApplicationStatus.UNDER_REVIEW.value,
    ApplicationStatus.INTERVIEW.value,
    ApplicationStatus.ACCEPTED.value,
    ApplicationStatus.WAITLISTED.value,
    ApplicationStatus.REJECTED.value,
]

ACCEPTED_STATUSES = {ApplicationStatus.ACCEPTED.value, ApplicationStatus.APPROVED.value}
PAST_STATUSES = {ApplicationStatus.ACCEPTED.value, ApplicationStatus.REJECTED.value}
RETRACTABLE_STATUSES = {ApplicationStatus.UNDER_REVIEW.value, ApplicationStatus.WAITLISTED.value}


# ─────────────────────────────────────────────────────────────────────────────
# Status Presentation
# ─────────────────────────────────────────────────────────────────────────────


def status_label(status: str) -> str:
    """Display label for a status; unknown statuses pass through."""
    return STATUS_LABELS.get((status or "").lower(), status)


def status_tone(status: str) -> str:
    return STATUS_TONES.get((status or "").lower(), "neutral")


def is_accepted(status: str) -> bool:
    """Accepted, including the legacy ``approved`` value."""
    return (status or "").lower() in ACCEPTED_STATUSES


def can_retract(application: Application) -> bool:
    """Students may retract only while the application is still undecided."""
    return application.status.lower() in RETRACTABLE_STATUSES


def available_actions(status: str) -> list[str]:
    """
    Statuses a professor can move an application to from ``status``.

    Example:
        >>> available_actions("interview")
        ['rejected', 'accepted']
    """
    status = (status or "").lower()
    actions: list[str] = []
    if status != ApplicationStatus.REJECTED.value:
        actions.append(ApplicationStatus.REJECTED.value)
    if status == ApplicationStatus.UNDER_REVIEW.value:
        actions.extend([ApplicationStatus.WAITLISTED.value, ApplicationStatus.INTERVIEW.value])
    if status in (
        ApplicationStatus.UNDER_REVIEW.value,
        ApplicationStatus.INTERVIEW.value,
        ApplicationStatus.WAITLISTED.value,
    ):
        actions.append(ApplicationStatus.ACCEPTED.value)
    return actions


# ─────────────────────────────────────────────────────────────────────────────
# Student View
# ─────────────────────────────────────────────────────────────────────────────


@dataclass
class ApplicationSummary:
    """Counters shown on the student dashboard."""

    total: int = 0
    active_projects: int = 0
    interviews: int = 0
    under_review: int = 0


def summarize(applications: Iterable[Application]) -> ApplicationSummary:
    summary = ApplicationSummary()
    for application in applications:
        status = application.status.lower()
        summary.total += 1
        if status in ACCEPTED_STATUSES:
            summary.active_projects += 1
        elif status == ApplicationStatus.INTERVIEW.value:
            summary.interviews += 1
        elif status == ApplicationStatus.UNDER_REVIEW.value:
            summary.under_review += 1
    return summary


def recent(applications: Iterable[Application], limit: int = 3) -> list[Application]:
    """The most recently created applications, newest first."""

    def created(application: Application) -> date:
        return parse_date(application.time_created) or date.min

    return sorted(applications, key=created, reverse=True)[:limit]


# ─────────────────────────────────────────────────────────────────────────────
# Professor View
# ─────────────────────────────────────────────────────────────────────────────


def _matches_query(applicant: ProjectApplicant, project_name: str, query: str) -> bool:
    if not query:
        return True
    query = query.lower()
    return (
        query in applicant.name.lower()
        or query in applicant.email.lower()
        or query in project_name.lower()
    )


def filter_project_applications(
    groups: Iterable[ProjectApplications],
    tab: str = ALL_TAB,
    query: str = "",
) -> list[ProjectApplications]:
    """
    Filter the professor's applications by status tab and search text.

    Counts are recomputed and projects left without applications are dropped.
    """
    result: list[ProjectApplications] = []
    for group in groups:
        kept = [
            applicant
            for applicant in group.applications
            if (tab == ALL_TAB or applicant.status == tab)
            and _matches_query(applicant, group.project.name, query)
        ]
        if kept:
            result.append(
                ProjectApplications(project=group.project, applications=kept, count=len(kept))
            )
    return result


def total_applications(groups: Iterable[ProjectApplications]) -> int:
    return sum(len(group.applications) for group in groups)


def past_applicants(applicants: Iterable[ProjectApplicant]) -> list[ProjectApplicant]:
    """Applicants with a final decision (accepted or rejected)."""
    return [a for a in applicants if a.status.lower() in PAST_STATUSES]


def find_applicant(
    groups: Iterable[ProjectApplications], application_id: int
) -> Optional[tuple[ProjectApplications, ProjectApplicant]]:
    for group in groups:
        for applicant in group.applications:
            if applicant.id == application_id:
                return group, applicant
    return None


# ─────────────────────────────────────────────────────────────────────────────
# Forms
# ─────────────────────────────────────────────────────────────────────────────


class ApplicationForm(BaseModel):
    """The apply dialog: availability and motivation are required."""

    availability: str = Field(..., description="When the student can work on the project")
    motivation: str = Field(..., description="Why the student wants to join")
    prior_projects: str = ""
    cv_link: str = ""
    publications_link: str = ""

    @field_validator("availability", "motivation")
    @classmethod
    def required_text(cls, v: str, info: ValidationInfo) -> str:
        v = v.strip()
        if not v:
            raise ValueError(f"{info.field_name.capitalize()} is required")
        return v

    @field_validator("prior_projects", "cv_link", "publications_link")
    @classmethod
    def strip(cls, v: str) -> str:
        return v.strip()

    def to_payload(self) -> ApplicationRequest:
        return ApplicationRequest(
            availability=self.availability,
            motivation=self.motivation,
            priorProjects=self.prior_projects,
            cvLink=self.cv_link,
            publicationsLink=self.publications_link,
        )


def prefill_from_profile(profile: Optional[StudentProfile]) -> dict[str, str]:
    """Initial apply-dialog values taken from the student's profile."""
    if profile is None:
        return {"cv_link": "", "publications_link": ""}
    return {"cv_link": profile.resumeLink, "publications_link": profile.publicationsLink}


class InterviewForm(BaseModel):
    """The schedule-interview dialog: date and time are required."""

    interview_date: str = Field(..., description="YYYY-MM-DD")
    interview_time: str = Field(..., description="HH:MM")
    interview_details: str = ""

    @field_validator("interview_date", "interview_time")
    @classmethod
    def required_text(cls, v: str, info: ValidationInfo) -> str:
        v = v.strip()
        if not v:
            label = "Interview date" if info.field_name == "interview_date" else "Interview time"
            raise ValueError(f"{label} is required")
        return v

    def to_payload(self) -> InterviewRequest:
        return InterviewRequest(
            interviewDate=self.interview_date,
            interviewTime=self.interview_time,
            interviewDetails=self.interview_details.strip(),
        )


class FeedbackForm(BaseModel):
    """Feedback sent to an applicant; must not be blank."""

    feedback: str

    @field_validator("feedback")
    @classmethod
    def not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Feedback cannot be empty")
        return v
