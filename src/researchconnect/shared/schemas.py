"""
Schemas Module - Pydantic data models for the application.
==========================================================

Defines the data contracts exchanged with the ResearchConnect API:
- Users, token claims and profiles
- Projects and paginated project listings
- Applications, both the student view and the professor view
- Research/placement preferences and generated roadmaps

The API is not consistent about field names (``sdesc`` on one endpoint,
``short_desc`` on another), so response models accept every spelling seen
on the wire via ``AliasChoices``. Request payload models use the names the
API expects on input.
"""

import json
from enum import Enum
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator


# ─────────────────────────────────────────────────────────────────────────────
# Enums
# ─────────────────────────────────────────────────────────────────────────────


class UserType(str, Enum):
    """Account roles, as carried in the JWT ``type`` claim."""

    STUDENT = "stu"
    FACULTY = "fac"


class ApplicationStatus(str, Enum):
    """Lifecycle of an application."""

    UNDER_REVIEW = "under_review"
    INTERVIEW = "interview"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    WAITLISTED = "waitlisted"
    # Legacy value, still present on older rows
    APPROVED = "approved"


class RoadmapKind(str, Enum):
    """Roadmap flavours offered by the type selector."""

    RESEARCH = "research"
    PLACEMENT = "placement"


# ─────────────────────────────────────────────────────────────────────────────
# Users & Auth
# ─────────────────────────────────────────────────────────────────────────────


class TokenClaims(BaseModel):
    """Claims carried by the API's bearer token."""

    user_id: str = Field(
        default="", validation_alias=AliasChoices("userId", "uid", "sub"), description="User ID"
    )
    name: str = Field(default="", description="Display name")
    email: str = Field(default="", description="Account email")
    type: str = Field(default="", description="Role: 'stu' or 'fac'")
    exp: Optional[int] = Field(default=None, description="Expiry (unix seconds)")
    iat: Optional[int] = Field(default=None, description="Issued at (unix seconds)")

    model_config = {"populate_by_name": True, "extra": "ignore"}

    @property
    def is_student(self) -> bool:
        return self.type == UserType.STUDENT.value

    @property
    def is_faculty(self) -> bool:
        return self.type == UserType.FACULTY.value


class UserSummary(BaseModel):
    """Minimal user record embedded in projects and applications."""

    uid: str = ""
    name: str = ""
    email: str = ""
    type: str = Field(default="", validation_alias=AliasChoices("type", "userType"))

    model_config = {"populate_by_name": True, "extra": "ignore"}


# ─────────────────────────────────────────────────────────────────────────────
# Projects
# ─────────────────────────────────────────────────────────────────────────────


class Project(BaseModel):
    """
    A research opportunity posted by a professor.

    ``is_active`` arrives as a bool from most endpoints and as the strings
    ``"true"``/``"false"`` from others; both normalize to a bool.
    """

    id: Optional[int] = Field(default=None, validation_alias=AliasChoices("ID", "id"))
    pid: str = Field(
        default="",
        validation_alias=AliasChoices("pid", "project_id"),
        description="Public project ID",
    )
    name: str = Field(default="", validation_alias=AliasChoices("name", "project_name"))
    sdesc: str = Field(
        default="",
        validation_alias=AliasChoices("sdesc", "shortDesc", "short_desc"),
        description="Short description",
    )
    ldesc: str = Field(
        default="",
        validation_alias=AliasChoices("ldesc", "longDesc", "long_desc"),
        description="Long description",
    )
    tags: list[str] = Field(default_factory=list)
    is_active: bool = Field(default=False, validation_alias=AliasChoices("isActive", "is_active"))
    uid: str = Field(
        default="",
        validation_alias=AliasChoices("uid", "creator", "creator_id"),
        description="Creator (professor) user ID",
    )
    user: Optional[UserSummary] = Field(default=None, description="Creator details")
    working_users: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("workingUsers", "working_users", "workUsers"),
    )
    field_of_study: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("fieldOfStudy", "field_of_study")
    )
    specialization: Optional[str] = None
    duration: Optional[str] = Field(
        default=None, description="Free text, e.g. 'short-term (1-3 months)'"
    )
    position_type: list[str] = Field(
        default_factory=list, validation_alias=AliasChoices("positionType", "position_type")
    )
    deadline: Optional[str] = Field(default=None, description="ISO date")

    model_config = {"populate_by_name": True, "extra": "ignore"}

    @field_validator("is_active", mode="before")
    @classmethod
    def coerce_active(cls, v: Any) -> bool:
        if isinstance(v, str):
            return v.strip().lower() in ("true", "1", "yes", "active")
        return bool(v)

    @field_validator("tags", "working_users", "position_type", mode="before")
    @classmethod
    def none_to_list(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator("name", "sdesc", "ldesc", "uid", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @property
    def professor_name(self) -> str:
        return self.user.name if self.user else ""


class RecommendedProject(Project):
    """A project with the recommender's match explanation."""

    match_score: float = 0.0
    match_reasons: list[str] = Field(default_factory=list)


class ProjectCreate(BaseModel):
    """Payload for ``POST /projects``."""

    name: str
    sdesc: str
    ldesc: str
    isActive: bool = True
    tags: list[str] = Field(default_factory=list)
    working_users: list[str] = Field(default_factory=list)
    fieldOfStudy: Optional[str] = None
    specialization: Optional[str] = None
    duration: Optional[str] = None
    positionType: list[str] = Field(default_factory=list)
    deadline: Optional[str] = None


class ProjectUpdate(BaseModel):
    """Partial update for ``PUT /projects/{pid}``; only set fields are sent."""

    isActive: Optional[bool] = None
    deadline: Optional[str] = None


class ProjectPage(BaseModel):
    """One page of the student project listing."""

    projects: list[Project] = Field(default_factory=list)
    total: int = 0
    page: int = 1
    page_size: int = Field(default=20, validation_alias=AliasChoices("pageSize", "page_size"))
    total_pages: int = Field(default=0, validation_alias=AliasChoices("totalPages", "total_pages"))

    model_config = {"populate_by_name": True, "extra": "ignore"}

    @field_validator("projects", mode="before")
    @classmethod
    def none_to_list(cls, v: Any) -> Any:
        return [] if v is None else v

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages


# ─────────────────────────────────────────────────────────────────────────────
# Applications
# ─────────────────────────────────────────────────────────────────────────────


class ApplicationProject(BaseModel):
    """Project block nested in a student's application."""

    project_name: str = ""
    project_id: str = ""
    short_desc: str = ""
    tags: list[str] = Field(default_factory=list)
    creator_id: str = ""

    model_config = {"extra": "ignore"}

    @field_validator("tags", mode="before")
    @classmethod
    def none_to_list(cls, v: Any) -> Any:
        return [] if v is None else v


class Application(BaseModel):
    """A student's application as returned by ``/applications/my``."""

    id: int = Field(default=0, validation_alias=AliasChoices("ID", "id"))
    pid: str = Field(default="", validation_alias=AliasChoices("pid", "PID"))
    uid: str = ""
    status: str = Field(
        default=ApplicationStatus.UNDER_REVIEW.value, description="Application status"
    )
    time_created: str = Field(
        default="", validation_alias=AliasChoices("time_created", "timeCreated")
    )
    availability: str = ""
    motivation: str = ""
    prior_projects: str = Field(
        default="", validation_alias=AliasChoices("prior_projects", "priorProjects")
    )
    cv_link: str = Field(default="", validation_alias=AliasChoices("cv_link", "cvLink"))
    publications_link: str = Field(
        default="", validation_alias=AliasChoices("publications_link", "publicationsLink")
    )
    interview_date: str = Field(
        default="", validation_alias=AliasChoices("interviewDate", "interview_date")
    )
    interview_time: str = Field(
        default="", validation_alias=AliasChoices("interviewTime", "interview_time")
    )
    interview_details: str = Field(
        default="", validation_alias=AliasChoices("interviewDetails", "interview_details")
    )
    project: Optional[ApplicationProject] = Field(
        default=None, validation_alias=AliasChoices("Project", "project")
    )
    professor: Optional[UserSummary] = Field(
        default=None, validation_alias=AliasChoices("User", "user", "professor")
    )

    model_config = {"populate_by_name": True, "extra": "ignore"}

    @field_validator(
        "availability",
        "motivation",
        "prior_projects",
        "cv_link",
        "publications_link",
        "interview_date",
        "interview_time",
        "interview_details",
        mode="before",
    )
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @property
    def project_name(self) -> str:
        if self.project and self.project.project_name:
            return self.project.project_name
        return "Unknown Project"

    @property
    def professor_name(self) -> str:
        if self.professor and self.professor.name:
            return self.professor.name
        return "Unknown Professor"


class ApplicationRequest(BaseModel):
    """Payload for ``POST /projects/{pid}/apply``."""

    availability: str
    motivation: str
    priorProjects: str = ""
    cvLink: str = ""
    publicationsLink: str = ""


class AppliedProject(BaseModel):
    """Row of ``/applications/my/applied-projects``."""

    pid: str = Field(default="", validation_alias=AliasChoices("pid", "PID", "project_id"))
    status: str = ""

    model_config = {"populate_by_name": True, "extra": "ignore"}


class ApplicationLookup(BaseModel):
    """Answer of ``/projects/{pid}/application-status``."""

    has_applied: bool = Field(
        default=False, validation_alias=AliasChoices("hasApplied", "has_applied")
    )
    application: Optional[Application] = None

    model_config = {"populate_by_name": True, "extra": "ignore"}


class ProjectApplicant(BaseModel):
    """An application joined with the applicant's profile (professor view)."""

    id: int = Field(default=0, validation_alias=AliasChoices("id", "ID"))
    uid: str = ""
    pid: str = Field(default="", validation_alias=AliasChoices("pid", "PID"))
    status: str = ApplicationStatus.UNDER_REVIEW.value
    time_created: str = Field(
        default="", validation_alias=AliasChoices("timeCreated", "time_created")
    )
    name: str = ""
    email: str = ""
    user_type: str = Field(default="", validation_alias=AliasChoices("userType", "user_type"))
    availability: str = ""
    motivation: str = ""
    prior_projects: str = Field(
        default="", validation_alias=AliasChoices("priorProjects", "prior_projects")
    )
    cv_link: str = Field(default="", validation_alias=AliasChoices("cvLink", "cv_link"))
    publications_link: str = Field(
        default="", validation_alias=AliasChoices("publicationsLink", "publications_link")
    )
    resume_link: str = Field(default="", validation_alias=AliasChoices("resumeLink", "resume_link"))
    institution: str = ""
    degree: str = ""
    location: str = ""
    work_ex: str = Field(default="", validation_alias=AliasChoices("workEx", "work_ex"))
    skills: list[str] = Field(default_factory=list)
    research_interest: str = Field(
        default="", validation_alias=AliasChoices("researchInterest", "research_interest")
    )
    intention: str = ""
    interview_date: str = Field(
        default="", validation_alias=AliasChoices("interviewDate", "interview_date")
    )
    interview_time: str = Field(
        default="", validation_alias=AliasChoices("interviewTime", "interview_time")
    )
    interview_details: str = Field(
        default="", validation_alias=AliasChoices("interviewDetails", "interview_details")
    )

    model_config = {"populate_by_name": True, "extra": "ignore"}

    @field_validator("skills", mode="before")
    @classmethod
    def none_to_list(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator(
        "name",
        "email",
        "availability",
        "motivation",
        "prior_projects",
        "cv_link",
        "publications_link",
        "resume_link",
        "institution",
        "degree",
        "location",
        "work_ex",
        "research_interest",
        "intention",
        "interview_date",
        "interview_time",
        "interview_details",
        mode="before",
    )
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v


class ProjectApplications(BaseModel):
    """A professor's project together with its applications."""

    project: Project
    applications: list[ProjectApplicant] = Field(default_factory=list)
    count: int = 0

    model_config = {"extra": "ignore"}

    @field_validator("applications", mode="before")
    @classmethod
    def none_to_list(cls, v: Any) -> Any:
        return [] if v is None else v


class InterviewRequest(BaseModel):
    """Payload for ``POST .../schedule-interview``."""

    interviewDate: str
    interviewTime: str
    interviewDetails: str = ""


# ─────────────────────────────────────────────────────────────────────────────
# Profiles
# ─────────────────────────────────────────────────────────────────────────────


class EducationEntry(BaseModel):
    institution: str
    degree: str
    field: str = ""
    startDate: str = ""
    endDate: Optional[str] = None
    current: bool = False
    description: Optional[str] = None


class ExperienceEntry(BaseModel):
    title: str
    company: str
    location: Optional[str] = None
    startDate: str = ""
    endDate: Optional[str] = None
    current: bool = False
    description: Optional[str] = None


class PublicationEntry(BaseModel):
    title: str
    authors: str
    journal: Optional[str] = None
    date: Optional[str] = None
    link: Optional[str] = None


class ProjectEntry(BaseModel):
    title: str
    description: str
    technologies: list[str] = Field(default_factory=list)
    link: Optional[str] = None


class StudentProfile(BaseModel):
    """
    Student profile as read from and written to ``/profile/student``.

    Field names follow the API's camelCase so the model dumps straight
    into the update payload.
    """

    uid: Optional[str] = None
    institution: str = Field(default="", description="University or school")
    degree: str = Field(default="", description="Degree being pursued")
    location: str = ""
    dates: str = Field(default="", description="Enrollment period")
    workEx: str = Field(default="", description="Work experience summary")
    projects: list[str] = Field(default_factory=list)
    skills: list[str] = Field(default_factory=list)
    activities: list[str] = Field(default_factory=list)
    resumeLink: str = ""
    publicationsLink: str = ""
    researchInterest: str = ""
    intention: str = Field(default="", description="Why the student is on the platform")
    summary: str = ""
    educationDetails: list[EducationEntry] = Field(default_factory=list)
    experienceDetails: list[ExperienceEntry] = Field(default_factory=list)
    publicationsList: list[PublicationEntry] = Field(default_factory=list)
    projectsDetails: list[ProjectEntry] = Field(default_factory=list)
    personalInfo: str = ""
    discoveryEnabled: bool = True

    model_config = {"extra": "ignore"}

    @field_validator(
        "projects",
        "skills",
        "activities",
        "educationDetails",
        "experienceDetails",
        "publicationsList",
        "projectsDetails",
        mode="before",
    )
    @classmethod
    def none_to_list(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator(
        "institution",
        "degree",
        "location",
        "dates",
        "workEx",
        "resumeLink",
        "publicationsLink",
        "researchInterest",
        "intention",
        "summary",
        "personalInfo",
        mode="before",
    )
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v


class UserProfile(BaseModel):
    """Public profile of any user, from ``/profile/user/{uid}``."""

    uid: str = ""
    name: str = ""
    email: str = ""
    type: str = ""
    student: Optional[StudentProfile] = None

    model_config = {"extra": "ignore"}


class ExploreUser(BaseModel):
    """Row of the explore-users directory."""

    uid: str = ""
    name: str = ""
    email: str = ""
    type: str = ""
    institution: str = ""
    degree: str = ""
    location: str = ""
    skills: list[str] = Field(default_factory=list)
    research_interest: str = Field(
        default="", validation_alias=AliasChoices("researchInterest", "research_interest")
    )

    model_config = {"populate_by_name": True, "extra": "ignore"}

    @field_validator("skills", mode="before")
    @classmethod
    def none_to_list(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator("institution", "degree", "location", "research_interest", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v


# ─────────────────────────────────────────────────────────────────────────────
# Roadmap
# ─────────────────────────────────────────────────────────────────────────────


class ResearchPreferences(BaseModel):
    """Answers of the research questionnaire, as stored by the API."""

    field_of_study: str = Field(..., description="Primary field of study")
    experience_level: str = Field(..., description="beginner, intermediate or advanced")
    current_year: int = Field(default=1, description="Year of study")
    goals: str = Field(..., description="Free-text research goals")
    time_commitment: int = Field(default=10, description="Hours per week")
    interest_areas: str = Field(default="[]", description="JSON-encoded list of interests")
    prior_experience: str = ""

    model_config = {"extra": "ignore"}


class PlacementPreferences(BaseModel):
    """Answers of the placement questionnaire, as stored by the API."""

    timeline_weeks: int = Field(default=12, description="Weeks until placements (1-52)")
    time_commitment: int = Field(default=10, description="Hours per week (1-40)")
    intensity_type: str = Field(..., description="regular, intense or weekend")
    prep_areas: str = Field(default="[]", description="JSON-encoded list of prep areas")
    current_levels: str = Field(default="{}", description="JSON-encoded area -> level map")
    resources_started: str = Field(default="[]", description="JSON-encoded list")
    target_companies: str = Field(default="[]", description="JSON-encoded list")
    special_needs: str = ""
    goals: str = Field(..., description="Free-text placement goals")

    model_config = {"extra": "ignore"}


class RoadmapNode(BaseModel):
    """One step of a generated roadmap."""

    id: str
    title: str = ""
    description: str = ""
    category: str = Field(
        default="", description="foundation, core, advanced or specialization"
    )
    duration: str = ""
    resources: list[str] = Field(default_factory=list)
    skills: list[str] = Field(default_factory=list)
    next_nodes: list[str] = Field(default_factory=list)

    model_config = {"extra": "ignore"}

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, v: Any) -> str:
        return str(v)

    @field_validator("next_nodes", mode="before")
    @classmethod
    def stringify_next(cls, v: Any) -> list[str]:
        return [str(item) for item in (v or [])]

    @field_validator("resources", "skills", mode="before")
    @classmethod
    def none_to_list(cls, v: Any) -> Any:
        return [] if v is None else v


class RoadmapStructure(BaseModel):
    """A complete generated roadmap."""

    title: str = ""
    description: str = ""
    total_time: str = ""
    nodes: list[RoadmapNode] = Field(default_factory=list)

    model_config = {"extra": "ignore"}

    @classmethod
    def from_payload(cls, payload: Any) -> "RoadmapStructure":
        """Accept either a decoded object or the raw JSON string the API stores."""
        if isinstance(payload, str):
            payload = json.loads(payload) if payload.strip() else {}
        return cls.model_validate(payload or {})


class RoadmapResult(BaseModel):
    """Outcome of a roadmap generation call."""

    roadmap: RoadmapStructure
    cached: bool = Field(default=False, description="Served from the server-side cache")
    message: str = ""
    roadmap_id: Optional[int] = None
