"""
Tests for the Applications Module.
==================================

Tests for:
- Status presentation and the professor's allowed actions
- Student dashboard summary and recent applications
- Professor applicant filtering
- Application, interview and feedback forms
"""

import pytest


# ─────────────────────────────────────────────────────────────────────────────
# Status Tests
# ─────────────────────────────────────────────────────────────────────────────


class TestStatus:
    """Tests for status labels and transitions."""

    def test_labels(self):
        """Test display labels for statuses."""
        from researchconnect.applications.tracking import status_label

        assert status_label("interview") == "Interview Scheduled"
        assert status_label("UNDER_REVIEW") == "Under Review"
        assert status_label("mystery") == "mystery"

    def test_tones(self):
        """Test colour tones for statuses."""
        from researchconnect.applications.tracking import status_tone

        assert status_tone("accepted") == "success"
        assert status_tone("approved") == "success"
        assert status_tone("rejected") == "danger"
        assert status_tone("mystery") == "neutral"

    def test_approved_counts_as_accepted(self):
        """Test that the legacy approved status counts as accepted."""
        from researchconnect.applications.tracking import is_accepted

        assert is_accepted("approved")
        assert is_accepted("accepted")
        assert not is_accepted("interview")

    @pytest.mark.parametrize(
        "status,expected",
        [
            ("under_review", ["rejected", "waitlisted", "interview", "accepted"]),
            ("interview", ["rejected", "accepted"]),
            ("waitlisted", ["rejected", "accepted"]),
            ("accepted", ["rejected"]),
            ("rejected", []),
        ],
    )
    def test_available_actions(self, status, expected):
        """Test the actions offered from each status."""
        from researchconnect.applications.tracking import available_actions

        assert available_actions(status) == expected

    @pytest.mark.parametrize(
        "status,expected",
        [("under_review", True), ("waitlisted", True), ("interview", False), ("accepted", False)],
    )
    def test_can_retract(self, status, expected):
        """Test which statuses a student may retract from."""
        from researchconnect.applications.tracking import can_retract
        from researchconnect.shared.schemas import Application

        assert can_retract(Application(status=status)) is expected


# ─────────────────────────────────────────────────────────────────────────────
# Student View Tests
# ─────────────────────────────────────────────────────────────────────────────


class TestStudentView:
    """Tests for the student dashboard helpers."""

    def _applications(self):
        from researchconnect.shared.schemas import Application

        rows = [
            ("accepted", "2026-09-01"),
            ("approved", "2026-09-15"),
            ("interview", "2026-10-10"),
            ("under_review", "2026-10-18T12:00:00Z"),
            ("rejected", ""),
        ]
        return [
            Application(id=i, status=status, time_created=created)
            for i, (status, created) in enumerate(rows, start=1)
        ]

    def test_summarize(self):
        """Test dashboard counts over the student's applications."""
        from researchconnect.applications.tracking import summarize

        summary = summarize(self._applications())

        assert summary.total == 5
        assert summary.active_projects == 2
        assert summary.interviews == 1
        assert summary.under_review == 1

    def test_recent_newest_first(self):
        """Test that recent applications are newest first."""
        from researchconnect.applications.tracking import recent

        assert [a.id for a in recent(self._applications())] == [4, 3, 2]
        assert [a.id for a in recent(self._applications(), limit=1)] == [4]

    def test_summarize_empty(self):
        """Test the summary of no applications."""
        from researchconnect.applications.tracking import summarize

        assert summarize([]).total == 0


# ─────────────────────────────────────────────────────────────────────────────
# Professor View Tests
# ─────────────────────────────────────────────────────────────────────────────


class TestProfessorView:
    """Tests for applicant filtering."""

    def test_all_tab(self, sample_project_applications):
        """Test that the all tab keeps every group."""
        from researchconnect.applications.tracking import (
            filter_project_applications,
            total_applications,
        )

        result = filter_project_applications(sample_project_applications)

        assert total_applications(result) == 4
        assert [g.count for g in result] == [3, 1]

    def test_status_tab_drops_empty_projects(self, sample_project_applications):
        """Test that a status tab drops projects left without applicants."""
        from researchconnect.applications.tracking import filter_project_applications

        result = filter_project_applications(sample_project_applications, tab="interview")

        assert len(result) == 1
        assert result[0].count == 1
        assert result[0].applications[0].name == "Alan Turing"

    def test_query_matches_name_email_or_project(self, sample_project_applications):
        """Test searching applicants by name, email or project."""
        from researchconnect.applications.tracking import filter_project_applications

        by_email = filter_project_applications(sample_project_applications, query="EMMY@")
        assert [a.id for g in by_email for a in g.applications] == [3]

        by_project = filter_project_applications(sample_project_applications, query="protein")
        assert [a.id for g in by_project for a in g.applications] == [4]

    def test_original_groups_unchanged(self, sample_project_applications):
        """Test that filtering leaves the input groups untouched."""
        from researchconnect.applications.tracking import filter_project_applications

        filter_project_applications(sample_project_applications, tab="accepted")

        assert sample_project_applications[0].count == 3
        assert len(sample_project_applications[0].applications) == 3

    def test_past_applicants(self, sample_project_applications):
        """Test that only accepted or rejected applicants count as past."""
        from researchconnect.applications.tracking import past_applicants

        applicants = [a for g in sample_project_applications for a in g.applications]

        assert [a.id for a in past_applicants(applicants)] == [3, 4]

    def test_find_applicant(self, sample_project_applications):
        """Test finding an applicant and its project by application id."""
        from researchconnect.applications.tracking import find_applicant

        group, applicant = find_applicant(sample_project_applications, 4)

        assert group.project.pid == "p-bio"
        assert applicant.name == "Barbara McClintock"
        assert find_applicant(sample_project_applications, 99) is None


# ─────────────────────────────────────────────────────────────────────────────
# Form Tests
# ─────────────────────────────────────────────────────────────────────────────


class TestForms:
    """Tests for application-related forms."""

    def test_application_form_payload(self):
        """Test the payload built from the application form."""
        from researchconnect.api.errors import parse_form
        from researchconnect.applications.tracking import ApplicationForm

        form = parse_form(
            ApplicationForm,
            {"availability": " Mornings ", "motivation": "Curious", "cv_link": " http://cv "},
        )
        payload = form.to_payload()

        assert payload.availability == "Mornings"
        assert payload.cvLink == "http://cv"
        assert payload.priorProjects == ""

    def test_application_form_requires_motivation(self):
        """Test that the application form needs a motivation."""
        from researchconnect.api.errors import FormValidationError, parse_form
        from researchconnect.applications.tracking import ApplicationForm

        with pytest.raises(FormValidationError) as exc_info:
            parse_form(ApplicationForm, {"availability": "Now", "motivation": "   "})

        assert exc_info.value.errors == {"motivation": "Motivation is required"}

    def test_prefill_from_profile(self):
        """Test prefilling the application form from the profile."""
        from researchconnect.applications.tracking import prefill_from_profile
        from researchconnect.shared.schemas import StudentProfile

        profile = StudentProfile(resumeLink="http://cv", publicationsLink="http://pubs")

        assert prefill_from_profile(profile) == {
            "cv_link": "http://cv",
            "publications_link": "http://pubs",
        }
        assert prefill_from_profile(None) == {"cv_link": "", "publications_link": ""}

    def test_interview_form(self):
        """Test the interview payload and its required time."""
        from researchconnect.api.errors import FormValidationError, parse_form
        from researchconnect.applications.tracking import InterviewForm

        form = parse_form(
            InterviewForm,
            {"interview_date": "2026-10-25", "interview_time": "14:00", "interview_details": " Room 4 "},
        )
        assert form.to_payload().model_dump() == {
            "interviewDate": "2026-10-25",
            "interviewTime": "14:00",
            "interviewDetails": "Room 4",
        }

        with pytest.raises(FormValidationError) as exc_info:
            parse_form(InterviewForm, {"interview_date": "2026-10-25", "interview_time": ""})
        assert exc_info.value.errors == {"interview_time": "Interview time is required"}

    def test_feedback_not_blank(self):
        """Test that blank feedback is rejected."""
        from researchconnect.api.errors import FormValidationError, parse_form
        from researchconnect.applications.tracking import FeedbackForm

        assert parse_form(FeedbackForm, {"feedback": " Great work "}).feedback == "Great work"
        with pytest.raises(FormValidationError):
            parse_form(FeedbackForm, {"feedback": "  "})
