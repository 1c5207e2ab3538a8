"""
Applications Module - Applying to projects and reviewing applicants.
====================================================================

- tracking: status labels, allowed professor actions, dashboard summaries,
  applicant filtering and the application/interview/feedback forms
"""

from researchconnect.applications.tracking import (
    PROFESSOR_TABS,
    STATUS_LABELS,
    ApplicationForm,
    ApplicationSummary,
    FeedbackForm,
    InterviewForm,
    available_actions,
    can_retract,
    filter_project_applications,
    find_applicant,
    is_accepted,
    past_applicants,
    prefill_from_profile,
    recent,
    status_label,
    status_tone,
    summarize,
    total_applications,
)

__all__ = [
    # Status
    "PROFESSOR_TABS",
    "STATUS_LABELS",
    "available_actions",
    "can_retract",
    "is_accepted",
    "status_label",
    "status_tone",
    # Student dashboard
    "ApplicationSummary",
    "recent",
    "summarize",
    # Professor view
    "filter_project_applications",
    "find_applicant",
    "past_applicants",
    "total_applications",
    # Forms
    "ApplicationForm",
    "FeedbackForm",
    "InterviewForm",
    "prefill_from_profile",
]
