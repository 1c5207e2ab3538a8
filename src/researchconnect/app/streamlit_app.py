"""
Streamlit App - ResearchConnect GUI.
====================================

Web interface for:
- Signing up, logging in and verifying email addresses
- Students: browsing projects, applying, tracking applications,
  recommendations, editing the profile and generating roadmaps
- Professors: managing projects and working users, reviewing current and
  past applicants, exploring users
- Public profiles, reachable from both roles

Each browser session keeps its own token in memory.

Run with: streamlit run src/researchconnect/app/streamlit_app.py
"""

import streamlit as st

# Page config must be first Streamlit command
st.set_page_config(
    page_title="ResearchConnect",
    page_icon="🔬",
    layout="wide",
    initial_sidebar_state="expanded",
)

from datetime import date

from researchconnect.api.auth import AuthSession, MemoryTokenStore
from researchconnect.api.client import ResearchConnectClient
from researchconnect.api.errors import (
    FormValidationError,
    NotFoundError,
    ResearchConnectError,
    SessionExpiredError,
    parse_form,
)
from researchconnect.shared.logging import get_logger
from researchconnect.shared.schemas import Project, UserType

logger = get_logger(__name__)

STATUS_BADGES = {
    "success": "🟢",
    "info": "🔵",
    "neutral": "⚪",
    "danger": "🔴",
    "warning": "🟠",
}


# ─────────────────────────────────────────────────────────────────────────────
# Session State Initialization
# ─────────────────────────────────────────────────────────────────────────────


def init_session_state():
    """Initialize session state variables."""
    if "logging_ready" not in st.session_state:
        from researchconnect.shared.logging import setup_logging_from_settings

        setup_logging_from_settings()
        st.session_state.logging_ready = True

    if "token_store" not in st.session_state:
        st.session_state.token_store = MemoryTokenStore()

    if "client" not in st.session_state:
        st.session_state.client = ResearchConnectClient(token_store=st.session_state.token_store)

    if "page" not in st.session_state:
        st.session_state.page = "login"

    if "pending_email" not in st.session_state:
        st.session_state.pending_email = ""

    if "filters" not in st.session_state:
        from researchconnect.projects.filters import ProjectFilters

        st.session_state.filters = ProjectFilters()

    if "project_page" not in st.session_state:
        st.session_state.project_page = 1

    if "roadmap_selector" not in st.session_state:
        from researchconnect.roadmap.questionnaire import RoadmapTypeSelector

        st.session_state.roadmap_selector = RoadmapTypeSelector()

    if "wizard" not in st.session_state:
        st.session_state.wizard = None

    if "roadmap_result" not in st.session_state:
        st.session_state.roadmap_result = None

    if "selected_pid" not in st.session_state:
        st.session_state.selected_pid = ""

    if "selected_uid" not in st.session_state:
        st.session_state.selected_uid = ""


def get_client() -> ResearchConnectClient:
    return st.session_state.client


def current_user():
    return AuthSession(st.session_state.token_store).current_user()


def go(page: str):
    st.session_state.page = page
    st.rerun()


def open_project(pid: str):
    st.session_state.selected_pid = pid
    go("project_detail")


def open_profile(uid: str):
    st.session_state.selected_uid = uid
    go("public_profile")


def show_error(error: ResearchConnectError):
    """Show a client error; expired sessions go back to the login page."""
    if isinstance(error, FormValidationError):
        for field_name, message in error.errors.items():
            st.error(f"{field_name}: {message}")
        return
    st.error(str(error))
    if isinstance(error, SessionExpiredError):
        st.session_state.page = "login"


def badge(status: str) -> str:
    from researchconnect.applications.tracking import status_label, status_tone

    return f"{STATUS_BADGES.get(status_tone(status), '⚪')} {status_label(status)}"


# ─────────────────────────────────────────────────────────────────────────────
# Sidebar
# ─────────────────────────────────────────────────────────────────────────────


STUDENT_PAGES = {
    "student_dashboard": "🏠 Dashboard",
    "browse_projects": "📚 Browse Projects",
    "my_applications": "📋 My Applications",
    "recommendations": "✨ Recommendations",
    "roadmap": "🗺️ Roadmap",
    "profile": "👤 Profile",
}

PROFESSOR_PAGES = {
    "professor_dashboard": "🏠 My Projects",
    "create_project": "➕ New Project",
    "applicants": "👥 Applicants",
    "past_applicants": "🗂️ Past Applicants",
    "explore_users": "🧭 Explore Users",
}

# Reachable from links, not listed in the sidebar
STUDENT_DETAIL_PAGES = {"project_detail"}
SHARED_DETAIL_PAGES = {"public_profile"}


def render_sidebar(user):
    """Render sidebar with navigation for the logged-in role."""
    with st.sidebar:
        st.title("🔬 ResearchConnect")
        st.caption("Research collaboration for students and professors")

        st.divider()

        if user is None:
            st.info("Log in to continue.")
            return

        st.markdown(f"**{user.name or user.email}**")
        st.caption("Student" if user.is_student else "Professor")

        pages = STUDENT_PAGES if user.is_student else PROFESSOR_PAGES
        for page, label in pages.items():
            if st.button(label, use_container_width=True, key=f"nav_{page}"):
                go(page)

        st.divider()

        if st.button("🚪 Log out", use_container_width=True):
            get_client().logout()
            st.session_state.wizard = None
            st.session_state.roadmap_result = None
            go("login")


# ─────────────────────────────────────────────────────────────────────────────
# Authentication Pages
# ─────────────────────────────────────────────────────────────────────────────


def render_login():
    from researchconnect.accounts.forms import LoginForm, login_with_redirect

    st.title("🔑 Log in")

    with st.form("login_form"):
        email = st.text_input("Email")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Log in", type="primary")

    if submitted:
        try:
            form = parse_form(LoginForm, {"email": email, "password": password})
            result = login_with_redirect(get_client(), form)
        except ResearchConnectError as e:
            show_error(e)
        else:
            if result.user is None:
                st.session_state.pending_email = result.email
                st.warning(result.message)
            go(result.page)

    col1, col2 = st.columns(2)
    with col1:
        if st.button("Create an account"):
            go("register")
    with col2:
        if st.button("Forgot password?"):
            go("forgot_password")


def render_register():
    from researchconnect.accounts.forms import RegisterForm

    st.title("📝 Sign up")

    with st.form("register_form"):
        name = st.text_input("Full name")
        email = st.text_input("Email")
        user_type = st.radio(
            "I am a",
            options=[UserType.STUDENT.value, UserType.FACULTY.value],
            format_func=lambda x: "Student" if x == UserType.STUDENT.value else "Professor",
            horizontal=True,
        )
        password = st.text_input("Password", type="password")
        confirm = st.text_input("Confirm password", type="password")
        submitted = st.form_submit_button("Sign up", type="primary")

    if submitted:
        try:
            form = parse_form(
                RegisterForm,
                {
                    "name": name,
                    "email": email,
                    "password": password,
                    "confirm_password": confirm,
                    "type": user_type,
                },
            )
            get_client().register(form.name, form.email, form.password, form.type)
        except ResearchConnectError as e:
            show_error(e)
        else:
            st.session_state.pending_email = form.email
            go("verify_email")

    if st.button("Already have an account? Log in"):
        go("login")


def render_verify_email():
    from researchconnect.accounts.forms import VerificationCode

    st.title("✉️ Verify your email")
    email = st.text_input("Email", value=st.session_state.pending_email)
    st.caption("Enter the 6-digit code we sent you. Pasted text is trimmed to its digits.")

    with st.form("verify_form"):
        raw_code = st.text_input("Code", max_chars=32)
        submitted = st.form_submit_button("Verify", type="primary")

    if submitted:
        try:
            form = parse_form(VerificationCode, {"code": VerificationCode.from_paste(raw_code)})
            get_client().verify_code(email, form.code)
        except ResearchConnectError as e:
            show_error(e)
        else:
            st.success("Email verified. You can log in now.")
            go("login")

    if st.button("Resend code"):
        try:
            get_client().send_verification_code(email)
            st.success(f"New code sent to {email}")
        except ResearchConnectError as e:
            show_error(e)


def render_forgot_password():
    from researchconnect.accounts.forms import ForgotPasswordForm, ResetPasswordForm

    st.title("🔒 Reset password")

    with st.form("forgot_form"):
        email = st.text_input("Email")
        submitted = st.form_submit_button("Send reset link")
    if submitted:
        try:
            form = parse_form(ForgotPasswordForm, {"email": email})
            get_client().forgot_password(form.email)
            st.success("If the account exists, a reset link is on its way.")
        except ResearchConnectError as e:
            show_error(e)

    st.divider()
    st.subheader("Have a reset token?")
    with st.form("reset_form"):
        token = st.text_input("Reset token")
        password = st.text_input("New password", type="password")
        confirm = st.text_input("Confirm new password", type="password")
        submitted = st.form_submit_button("Set new password", type="primary")
    if submitted:
        try:
            form = parse_form(
                ResetPasswordForm,
                {"token": token, "password": password, "confirm_password": confirm},
            )
            get_client().verify_reset_token(form.token)
            get_client().reset_password(form.token, form.password)
        except ResearchConnectError as e:
            show_error(e)
        else:
            st.success("Password updated.")
            go("login")

    if st.button("Back to login"):
        go("login")


# ─────────────────────────────────────────────────────────────────────────────
# Student Pages
# ─────────────────────────────────────────────────────────────────────────────


def render_student_dashboard(user):
    from researchconnect.accounts.profile import profile_completion, research_interests
    from researchconnect.applications.tracking import recent, summarize

    st.title(f"👋 Welcome, {user.name or 'student'}")
    client = get_client()

    try:
        applications = client.get_my_applications()
        try:
            profile = client.get_student_profile()
        except NotFoundError:
            profile = None
        recommendations = client.get_recommended_projects()
    except ResearchConnectError as e:
        show_error(e)
        return

    summary = summarize(applications)
    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Applications", summary.total)
    col2.metric("Active projects", summary.active_projects)
    col3.metric("Interviews", summary.interviews)
    col4.metric("Under review", summary.under_review)

    completion = profile_completion(profile)
    st.progress(completion / 100, text=f"Profile {completion}% complete")

    interests = research_interests(profile)
    if interests:
        st.markdown("**Research interests:** " + " ".join(f"`{i}`" for i in interests))

    st.subheader("🕘 Recent applications")
    for application in recent(applications):
        st.markdown(
            f"**{application.project_name}** ({application.professor_name}) · {badge(application.status)}"
        )

    st.subheader("✨ Recommended for you")
    render_recommendation_list(recommendations[:3])


def render_recommendation_list(recommendations):
    if not recommendations:
        st.caption("Complete your profile to get recommendations.")
    for project in recommendations:
        with st.container(border=True):
            st.markdown(f"**{project.name}** · match {project.match_score:.0%}")
            st.caption(project.sdesc)
            if project.match_reasons:
                st.caption(" · ".join(project.match_reasons))
            if st.button("View project", key=f"rec_{project.pid}"):
                open_project(project.pid)


def render_recommendations():
    st.title("✨ Recommendations")
    st.caption("Projects matched to the skills and interests on your profile.")
    try:
        recommendations = get_client().get_recommended_projects()
    except ResearchConnectError as e:
        show_error(e)
        return
    render_recommendation_list(recommendations)


def render_filter_panel():
    """Sidebar-free filter controls; returns the current ``ProjectFilters``."""
    from researchconnect.projects.filters import (
        DURATION_LABELS,
        FIELDS_OF_STUDY,
        POSITION_TYPES,
        field_label,
        specialization_label,
        specialization_options,
    )

    filters = st.session_state.filters

    with st.expander("🔍 Filters", expanded=not filters.is_default):
        filters.search = st.text_input("Search", value=filters.search, help="Regular expressions work too.")

        fields = [""] + [slug for group in FIELDS_OF_STUDY.values() for slug in group]
        chosen_field = st.selectbox(
            "Field of study",
            options=fields,
            index=fields.index(filters.field) if filters.field in fields else 0,
            format_func=lambda x: field_label(x) if x else "All Fields",
        )
        if chosen_field != filters.field:
            filters.set_field(chosen_field)

        specializations = specialization_options(filters.field)
        filters.specialization = st.selectbox(
            "Specialization",
            options=specializations,
            index=specializations.index(filters.specialization)
            if filters.specialization in specializations
            else 0,
            format_func=specialization_label,
            disabled=not filters.field,
        )

        filters.duration = st.select_slider(
            "Duration",
            options=list(DURATION_LABELS),
            value=filters.duration,
            format_func=lambda x: DURATION_LABELS[x][0],
        )

        filters.position_types = st.multiselect(
            "Position type",
            options=list(POSITION_TYPES),
            default=filters.position_types,
            format_func=lambda x: POSITION_TYPES[x],
        )

        filters.upcoming_deadline_only = st.checkbox(
            "Upcoming deadlines only", value=filters.upcoming_deadline_only
        )

        if st.button("Reset filters"):
            st.session_state.filters = filters.reset()
            st.rerun()

    return filters


def render_highlighted(text: str, query: str) -> str:
    from researchconnect.projects.filters import highlight_segments

    return "".join(f"**{seg}**" if hit else seg for seg, hit in highlight_segments(text, query))


def render_apply_form(project: Project):
    from researchconnect.applications.tracking import ApplicationForm, prefill_from_profile

    client = get_client()
    try:
        profile = client.get_student_profile()
    except NotFoundError:
        profile = None
    except ResearchConnectError as e:
        show_error(e)
        return
    defaults = prefill_from_profile(profile)

    with st.form(f"apply_{project.pid}"):
        availability = st.text_input("Availability")
        motivation = st.text_area("Motivation")
        prior_projects = st.text_area("Prior projects")
        cv_link = st.text_input("CV link", value=defaults["cv_link"])
        publications_link = st.text_input("Publications link", value=defaults["publications_link"])
        submitted = st.form_submit_button("Submit application", type="primary")

    if submitted:
        try:
            form = parse_form(
                ApplicationForm,
                {
                    "availability": availability,
                    "motivation": motivation,
                    "prior_projects": prior_projects,
                    "cv_link": cv_link,
                    "publications_link": publications_link,
                },
            )
            client.apply_to_project(project.pid, form.to_payload())
        except ResearchConnectError as e:
            show_error(e)
        else:
            st.success("Application submitted!")


def render_browse_projects():
    from researchconnect.projects.filters import apply_filters
    from researchconnect.shared.utils import format_date

    st.title("📚 Browse Projects")
    filters = render_filter_panel()
    client = get_client()

    try:
        page = client.list_projects_for_student(page=st.session_state.project_page)
        applied = {a.pid: a.status for a in client.get_my_applied_projects()}
    except ResearchConnectError as e:
        show_error(e)
        return

    projects = apply_filters(page.projects, filters)
    st.caption(f"{len(projects)} of {len(page.projects)} projects on this page · {page.total} total")

    for project in projects:
        with st.container(border=True):
            st.markdown(f"### {render_highlighted(project.name, filters.search)}")
            st.caption(
                f"{project.professor_name} · {project.duration or 'Flexible'} · "
                f"Deadline {format_date(project.deadline)}"
            )
            st.markdown(render_highlighted(project.sdesc, filters.search))
            if project.tags:
                st.caption(" ".join(f"`{tag}`" for tag in project.tags))

            if project.pid in applied:
                st.markdown(f"Applied · {badge(applied[project.pid])}")
            if st.button("Details", key=f"details_{project.pid}"):
                open_project(project.pid)

    col1, col2, col3 = st.columns([1, 2, 1])
    with col1:
        if st.button("← Previous", disabled=page.page <= 1):
            st.session_state.project_page -= 1
            st.rerun()
    with col2:
        st.caption(f"Page {page.page} of {max(page.total_pages, 1)}")
    with col3:
        if st.button("Next →", disabled=not page.has_next):
            st.session_state.project_page += 1
            st.rerun()


def render_project_detail():
    from researchconnect.applications.tracking import can_retract
    from researchconnect.projects.filters import field_label, specialization_label
    from researchconnect.shared.utils import format_date

    client = get_client()
    pid = st.session_state.selected_pid

    if st.button("← Back to projects"):
        go("browse_projects")

    try:
        project = client.get_project(pid)
        lookup = client.get_application_status(pid)
    except NotFoundError:
        st.warning("This project no longer exists or is not accepting applications.")
        return
    except ResearchConnectError as e:
        show_error(e)
        return

    st.title(project.name)
    st.caption(
        f"{project.professor_name} · "
        f"{field_label(project.field_of_study) if project.field_of_study else 'Any field'}"
        + (f" · {specialization_label(project.specialization)}" if project.specialization else "")
    )

    col1, col2, col3 = st.columns(3)
    col1.metric("Duration", project.duration or "Flexible")
    col2.metric("Deadline", format_date(project.deadline))
    col3.metric("Positions", ", ".join(project.position_type) or "-")

    st.markdown(project.ldesc or project.sdesc)
    if project.tags:
        st.caption(" ".join(f"`{tag}`" for tag in project.tags))
    if project.user and project.user.uid and st.button("👤 Professor profile"):
        open_profile(project.user.uid)

    st.divider()

    application = lookup.application if lookup.has_applied else None
    if application is None:
        st.subheader("Apply")
        render_apply_form(project)
        return

    st.subheader(f"Your application · {badge(application.status)}")
    if application.interview_date:
        st.info(
            f"Interview on {format_date(application.interview_date)} at "
            f"{application.interview_time}. {application.interview_details}"
        )
    if can_retract(application) and st.button("Retract application"):
        try:
            client.retract_application(pid)
        except ResearchConnectError as e:
            show_error(e)
        else:
            st.success("Application retracted.")
            st.rerun()


def render_my_applications():
    from researchconnect.applications.tracking import can_retract
    from researchconnect.shared.utils import format_date

    st.title("📋 My Applications")
    client = get_client()

    try:
        applications = client.get_my_applications()
    except ResearchConnectError as e:
        show_error(e)
        return

    if not applications:
        st.info("You have not applied to any projects yet.")
        return

    for application in applications:
        with st.container(border=True):
            st.markdown(f"**{application.project_name}** · {badge(application.status)}")
            st.caption(
                f"Professor: {application.professor_name} · Applied {format_date(application.time_created)}"
            )
            if application.interview_date:
                st.info(
                    f"Interview on {format_date(application.interview_date)} at "
                    f"{application.interview_time}. {application.interview_details}"
                )
            if can_retract(application) and st.button("Retract", key=f"retract_{application.id}"):
                try:
                    client.retract_application(application.pid)
                except ResearchConnectError as e:
                    show_error(e)
                else:
                    st.rerun()


def render_profile():
    from researchconnect.accounts.profile import (
        INTENTIONS,
        missing_fields,
        profile_completion,
        toggle_skill,
    )
    from researchconnect.shared.schemas import StudentProfile

    st.title("👤 Profile")
    client = get_client()

    try:
        profile = client.get_student_profile()
    except NotFoundError:
        profile = StudentProfile()
    except ResearchConnectError as e:
        show_error(e)
        return

    completion = profile_completion(profile)
    st.progress(completion / 100, text=f"{completion}% complete")
    missing = missing_fields(profile)
    if missing:
        st.caption("Still missing: " + ", ".join(missing))

    with st.form("profile_form"):
        institution = st.text_input("Institution", value=profile.institution)
        degree = st.text_input("Degree", value=profile.degree)
        location = st.text_input("Location", value=profile.location)
        work_ex = st.text_area("Work experience", value=profile.workEx)
        research_interest = st.text_input(
            "Research interests (comma separated)", value=profile.researchInterest
        )
        resume_link = st.text_input("Resume link", value=profile.resumeLink)
        publications_link = st.text_input("Publications link", value=profile.publicationsLink)
        intention = st.selectbox(
            "Why are you here?",
            options=[""] + INTENTIONS,
            index=(INTENTIONS.index(profile.intention) + 1) if profile.intention in INTENTIONS else 0,
        )
        new_skill = st.text_input("Add or remove a skill", help="Existing skills are removed.")
        submitted = st.form_submit_button("Save profile", type="primary")

    st.caption("Skills: " + (", ".join(profile.skills) or "none yet"))

    if submitted:
        updated = profile.model_copy(
            update={
                "institution": institution,
                "degree": degree,
                "location": location,
                "workEx": work_ex,
                "researchInterest": research_interest,
                "resumeLink": resume_link,
                "publicationsLink": publications_link,
                "intention": intention,
            }
        )
        updated = toggle_skill(updated, new_skill)
        try:
            client.update_student_profile(updated)
        except ResearchConnectError as e:
            show_error(e)
        else:
            st.success("Profile saved.")
            st.rerun()


# ─────────────────────────────────────────────────────────────────────────────
# Roadmap
# ─────────────────────────────────────────────────────────────────────────────


def render_research_step(wizard):
    from researchconnect.roadmap.questionnaire import EXPERIENCE_LEVELS, FIELDS_OF_STUDY

    if wizard.step == 1:
        field_of_study = st.selectbox(
            "Field of study",
            options=[""] + FIELDS_OF_STUDY,
            index=(FIELDS_OF_STUDY.index(wizard.field_of_study) + 1)
            if wizard.field_of_study in FIELDS_OF_STUDY
            else 0,
        )
        if field_of_study != wizard.field_of_study:
            wizard.set_field_of_study(field_of_study)
        levels = list(EXPERIENCE_LEVELS)
        wizard.experience_level = st.radio(
            "Experience level",
            options=levels,
            index=levels.index(wizard.experience_level) if wizard.experience_level in levels else 0,
            format_func=lambda x: EXPERIENCE_LEVELS[x],
        )
    elif wizard.step == 2:
        wizard.current_year = st.number_input("Year of study", 1, 10, wizard.current_year)
        wizard.time_commitment = st.slider("Hours per week", 1, 40, wizard.time_commitment)
    elif wizard.step == 3:
        wizard.selected_interests = st.multiselect(
            "Interest areas",
            options=sorted(set(wizard.available_interests) | set(wizard.selected_interests)),
            default=wizard.selected_interests,
        )
        custom = st.text_input("Add your own interest")
        if st.button("Add interest") and wizard.add_custom_interest(custom):
            st.rerun()
    else:
        wizard.goals = st.text_area(
            f"Research goals (more than {wizard.min_goals_length} characters)", value=wizard.goals
        )
        wizard.prior_experience = st.text_area("Prior experience", value=wizard.prior_experience)


def render_placement_step(wizard):
    from researchconnect.roadmap.questionnaire import INTENSITY_TYPES, PREP_AREAS, PREP_LEVELS

    if wizard.step == 1:
        wizard.timeline_weeks = st.slider("Weeks until placements", 1, 52, wizard.timeline_weeks)
        wizard.time_commitment = st.slider("Hours per week", 1, 40, wizard.time_commitment)
        st.caption(f"Suggested intensity: {INTENSITY_TYPES[wizard.intensity_suggestion()]}")
        intensities = list(INTENSITY_TYPES)
        wizard.intensity_type = st.radio(
            "Intensity",
            options=intensities,
            index=intensities.index(wizard.intensity_type)
            if wizard.intensity_type in intensities
            else intensities.index(wizard.intensity_suggestion()),
            format_func=lambda x: INTENSITY_TYPES[x],
        )
    elif wizard.step == 2:
        for area, label in PREP_AREAS.items():
            checked = st.checkbox(label, value=area in wizard.prep_areas, key=f"prep_{area}")
            if checked != (area in wizard.prep_areas):
                wizard.toggle_prep_area(area)
    elif wizard.step == 3:
        levels = list(PREP_LEVELS)
        for area in wizard.prep_areas:
            current = wizard.current_levels.get(area)
            level = st.radio(
                PREP_AREAS.get(area, area),
                options=levels,
                index=levels.index(current) if current in levels else 0,
                format_func=lambda x: PREP_LEVELS[x],
                key=f"level_{area}",
                horizontal=True,
            )
            wizard.set_level(area, level)
    elif wizard.step == 4:
        for area, resources in wizard.suggested_resources().items():
            st.caption(f"Popular for {PREP_AREAS.get(area, area)}: {', '.join(resources)}")
        wizard.resources_started = st.multiselect(
            "Resources already started",
            options=sorted(
                set(wizard.resources_started)
                | {r for rs in wizard.suggested_resources().values() for r in rs}
            ),
            default=wizard.resources_started,
        )
        company = st.text_input("Add a target company")
        if st.button("Add company") and wizard.add_company(company):
            st.rerun()
        if wizard.target_companies:
            st.caption("Target companies: " + ", ".join(wizard.target_companies))
    else:
        wizard.goals = st.text_area(
            f"Placement goals (at least {wizard.min_goals_length} characters)", value=wizard.goals
        )
        wizard.special_needs = st.text_area("Anything else we should know?", value=wizard.special_needs)


def render_roadmap_graph(structure):
    """Draw the roadmap as a Graphviz digraph, one rank per level."""
    from researchconnect.roadmap.layout import category_color, layout_roadmap

    layout = layout_roadmap(structure)
    lines = ["digraph roadmap {", "rankdir=TB;", 'node [shape=box, style="rounded,filled", fontcolor=white];']
    for positioned in layout.nodes:
        node = positioned.node
        label = node.title.replace('"', "'")
        lines.append(f'"{node.id}" [label="{label}", fillcolor="{category_color(node.category)}"];')
    for edge in layout.edges:
        lines.append(f'"{edge.source}" -> "{edge.target}" [color="{edge.color}"];')
    lines.append("}")
    st.graphviz_chart("\n".join(lines))


def render_roadmap_result(result):
    from researchconnect.roadmap.layout import ordered_steps, resource_icon

    structure = result.roadmap
    st.subheader(structure.title)
    st.caption(f"{structure.description} · Total time: {structure.total_time or '-'}")
    if result.cached:
        st.caption("Served from cache: your preferences have not changed.")

    render_roadmap_graph(structure)

    for number, node in enumerate(ordered_steps(structure), start=1):
        with st.expander(f"{number}. {node.title} · {node.category} · {node.duration}"):
            st.markdown(node.description)
            if node.skills:
                st.caption("Skills: " + ", ".join(node.skills))
            for resource in node.resources:
                st.markdown(f"{resource_icon(resource)} {resource}")


def render_roadmap():
    from researchconnect.roadmap.questionnaire import ROADMAP_TYPES, PlacementQuestionnaire
    from researchconnect.roadmap.service import RoadmapService

    st.title("🗺️ Roadmap")
    selector = st.session_state.roadmap_selector
    service = RoadmapService(get_client())

    if st.session_state.roadmap_result is not None:
        render_roadmap_result(st.session_state.roadmap_result)
        if st.button("Start over"):
            st.session_state.roadmap_result = None
            st.session_state.wizard = None
            selector.clear()
            st.rerun()
        return

    if selector.selected is None:
        cols = st.columns(len(ROADMAP_TYPES))
        for col, (kind, (title, description)) in zip(cols, ROADMAP_TYPES.items()):
            with col, st.container(border=True):
                st.markdown(f"**{title}**")
                st.caption(description)
                if st.button("Choose", key=f"choose_{kind}"):
                    selector.select(kind)
                    try:
                        saved = service.load_preferences(kind)
                    except ResearchConnectError as e:
                        show_error(e)
                        return
                    st.session_state.wizard = selector.questionnaire(saved)
                    st.rerun()
        return

    wizard = st.session_state.wizard
    st.progress(wizard.progress / 100, text=f"Step {wizard.step} of {wizard.total_steps}")

    if isinstance(wizard, PlacementQuestionnaire):
        render_placement_step(wizard)
    else:
        render_research_step(wizard)

    col1, col2 = st.columns(2)
    with col1:
        if st.button("← Back", disabled=wizard.step == 1):
            wizard.back()
            st.rerun()
    with col2:
        if wizard.is_last_step:
            if st.button("Generate roadmap", type="primary", disabled=not wizard.can_proceed()):
                try:
                    with st.spinner("Generating your roadmap..."):
                        result = wizard.submit(
                            lambda prefs: service.save_and_generate(selector.selected, prefs)
                        )
                except ResearchConnectError as e:
                    show_error(e)
                else:
                    st.session_state.roadmap_result = result
                    st.rerun()
        elif st.button("Next →", disabled=not wizard.can_proceed()):
            wizard.next()
            st.rerun()

    with st.expander("🕘 Previous roadmaps"):
        try:
            history = service.history()
        except ResearchConnectError as e:
            show_error(e)
            return
        for entry in history:
            st.markdown(f"**{entry.get('title') or entry['roadmap'].title}** · {entry.get('roadmap_type', 'research')}")


# ─────────────────────────────────────────────────────────────────────────────
# Professor Pages
# ─────────────────────────────────────────────────────────────────────────────


def render_professor_dashboard():
    from researchconnect.projects.filters import split_active
    from researchconnect.shared.schemas import ProjectUpdate
    from researchconnect.shared.utils import format_date

    st.title("🏠 My Projects")
    client = get_client()

    try:
        projects = client.list_my_projects()
    except ResearchConnectError as e:
        show_error(e)
        return

    active, inactive = split_active(projects)
    tab_active, tab_inactive = st.tabs([f"Active ({len(active)})", f"Inactive ({len(inactive)})"])

    for tab, group in ((tab_active, active), (tab_inactive, inactive)):
        with tab:
            if not group:
                st.caption("No projects here.")
            for project in group:
                with st.container(border=True):
                    st.markdown(f"**{project.name}**")
                    st.caption(f"{project.sdesc} · Deadline {format_date(project.deadline)}")
                    col1, col2 = st.columns(2)
                    label = "Deactivate" if project.is_active else "Activate"
                    if col1.button(label, key=f"toggle_{project.pid}"):
                        try:
                            client.update_project(
                                project.pid, ProjectUpdate(isActive=not project.is_active)
                            )
                        except ResearchConnectError as e:
                            show_error(e)
                        else:
                            st.rerun()
                    if col2.button("Delete", key=f"delete_{project.pid}"):
                        try:
                            client.delete_project(project.pid)
                        except ResearchConnectError as e:
                            show_error(e)
                        else:
                            st.rerun()
                    with st.expander(f"👥 Working users ({len(project.working_users)})"):
                        render_working_users(project.pid)


def render_working_users(pid: str):
    client = get_client()
    try:
        users = client.get_working_users(pid)
    except ResearchConnectError as e:
        show_error(e)
        return

    if not users:
        st.caption("Nobody is working on this project yet.")
    for member in users:
        uid = member.get("uid", "")
        col1, col2 = st.columns([3, 1])
        col1.markdown(f"**{member.get('name') or uid}** · {member.get('email', '')}")
        if col2.button("Remove", key=f"remove_{pid}_{uid}"):
            try:
                client.remove_working_user(pid, uid)
            except ResearchConnectError as e:
                show_error(e)
            else:
                st.rerun()


def render_create_project():
    from researchconnect.projects.filters import (
        DURATION_LABELS,
        FIELDS_OF_STUDY,
        POSITION_TYPES,
        field_label,
        specialization_label,
        specialization_options,
    )
    from researchconnect.projects.forms import ProjectForm

    st.title("➕ New Project")

    fields = [""] + [slug for group in FIELDS_OF_STUDY.values() for slug in group]
    field_of_study = st.selectbox(
        "Field of study", options=fields, format_func=lambda x: field_label(x) if x else "Select..."
    )

    with st.form("project_form"):
        name = st.text_input("Project name")
        sdesc = st.text_input("Short description")
        ldesc = st.text_area("Detailed description")
        tags = st.text_input("Tags (comma separated)")
        specialization = st.selectbox(
            "Specialization",
            options=specialization_options(field_of_study)[1:] or [""],
            format_func=lambda x: specialization_label(x) if x else "-",
        )
        duration = st.selectbox(
            "Duration",
            options=[""] + [label for bucket, (label, _) in DURATION_LABELS.items() if bucket],
        )
        position_types = st.multiselect(
            "Position types", options=list(POSITION_TYPES), format_func=lambda x: POSITION_TYPES[x]
        )
        deadline = st.date_input("Application deadline", value=None, min_value=date.today())
        is_active = st.checkbox("Active", value=True)
        submitted = st.form_submit_button("Create project", type="primary")

    if submitted:
        try:
            form = parse_form(
                ProjectForm,
                {
                    "name": name,
                    "sdesc": sdesc,
                    "ldesc": ldesc,
                    "tags": [t.strip() for t in tags.split(",") if t.strip()],
                    "field_of_study": field_of_study,
                    "specialization": specialization,
                    "duration": duration,
                    "position_types": position_types,
                    "deadline": deadline,
                    "is_active": is_active,
                },
                today=date.today(),
            )
            get_client().create_project(form.to_payload())
        except ResearchConnectError as e:
            show_error(e)
        else:
            st.success("Project created.")
            go("professor_dashboard")


def render_applicant_actions(project_pid: str, applicant):
    from researchconnect.applications.tracking import (
        FeedbackForm,
        InterviewForm,
        available_actions,
        status_label,
    )
    from researchconnect.shared.schemas import ApplicationStatus

    client = get_client()
    actions = available_actions(applicant.status)
    cols = st.columns(max(len(actions), 1))
    for col, action in zip(cols, actions):
        if action == ApplicationStatus.INTERVIEW.value:
            continue
        if col.button(status_label(action), key=f"{action}_{applicant.id}"):
            try:
                client.update_application_status(project_pid, applicant.id, action)
            except ResearchConnectError as e:
                show_error(e)
            else:
                st.rerun()

    if ApplicationStatus.INTERVIEW.value in actions:
        with st.form(f"interview_{applicant.id}"):
            interview_date = st.date_input("Interview date", min_value=date.today())
            interview_time = st.time_input("Interview time")
            details = st.text_input("Details (location or meeting link)")
            if st.form_submit_button("Schedule interview"):
                try:
                    form = parse_form(
                        InterviewForm,
                        {
                            "interview_date": interview_date.isoformat() if interview_date else "",
                            "interview_time": interview_time.strftime("%H:%M") if interview_time else "",
                            "interview_details": details,
                        },
                    )
                    client.schedule_interview(project_pid, applicant.id, form.to_payload())
                except ResearchConnectError as e:
                    show_error(e)
                else:
                    st.rerun()

    with st.form(f"feedback_{applicant.id}"):
        feedback = st.text_area("Feedback")
        if st.form_submit_button("Send feedback"):
            try:
                form = parse_form(FeedbackForm, {"feedback": feedback})
                client.send_feedback(project_pid, applicant.id, form.feedback)
            except ResearchConnectError as e:
                show_error(e)
            else:
                st.success("Feedback sent.")


def render_applicants():
    from researchconnect.applications.tracking import (
        PROFESSOR_TABS,
        filter_project_applications,
        status_label,
        total_applications,
    )
    from researchconnect.shared.utils import format_date, initials

    st.title("👥 Applicants")
    client = get_client()

    try:
        groups = client.get_all_project_applications()
    except ResearchConnectError as e:
        show_error(e)
        return

    col1, col2 = st.columns([1, 2])
    with col1:
        tab = st.selectbox(
            "Status",
            options=PROFESSOR_TABS,
            format_func=lambda x: "All" if x == "all" else status_label(x),
        )
    with col2:
        query = st.text_input("Search by name, email or project")

    shown = filter_project_applications(groups, tab=tab, query=query)
    st.caption(f"{total_applications(shown)} of {total_applications(groups)} applications")

    for group in shown:
        st.subheader(f"{group.project.name} ({group.count})")
        for applicant in group.applications:
            with st.expander(f"{initials(applicant.name)} · {applicant.name} · {badge(applicant.status)}"):
                st.caption(f"{applicant.email} · applied {format_date(applicant.time_created)}")
                st.markdown(f"**Availability:** {applicant.availability}")
                st.markdown(f"**Motivation:** {applicant.motivation}")
                if applicant.prior_projects:
                    st.markdown(f"**Prior projects:** {applicant.prior_projects}")
                if applicant.skills:
                    st.caption("Skills: " + ", ".join(applicant.skills))
                if applicant.cv_link:
                    st.markdown(f"[CV]({applicant.cv_link})")
                if applicant.uid and st.button("👤 View profile", key=f"profile_{applicant.id}"):
                    open_profile(applicant.uid)
                render_applicant_actions(group.project.pid, applicant)


def render_past_applicants():
    from researchconnect.applications.tracking import past_applicants
    from researchconnect.shared.utils import format_date

    st.title("🗂️ Past Applicants")
    client = get_client()

    try:
        projects = client.list_my_projects()
    except ResearchConnectError as e:
        show_error(e)
        return
    if not projects:
        st.info("Create a project first.")
        return

    by_pid = {p.pid: p for p in projects}
    pid = st.selectbox("Project", options=list(by_pid), format_func=lambda x: by_pid[x].name)

    try:
        group = client.get_past_applicants(pid)
    except ResearchConnectError as e:
        show_error(e)
        return

    decided = past_applicants(group.applications)
    st.caption(f"{len(decided)} decided applications")
    for applicant in decided:
        with st.container(border=True):
            col1, col2 = st.columns([3, 1])
            col1.markdown(f"**{applicant.name}** · {badge(applicant.status)}")
            col1.caption(f"{applicant.email} · applied {format_date(applicant.time_created)}")
            if applicant.uid and col2.button("Profile", key=f"past_{applicant.id}"):
                open_profile(applicant.uid)


def render_explore_users():
    st.title("🧭 Explore Users")

    col1, col2 = st.columns([1, 2])
    with col1:
        user_type = st.selectbox(
            "Role",
            options=["", UserType.STUDENT.value, UserType.FACULTY.value],
            format_func=lambda x: {"": "Everyone", "stu": "Students", "fac": "Professors"}[x],
        )
    with col2:
        search = st.text_input("Search by name, skill or interest")

    try:
        users = get_client().explore_users(user_type=user_type or None, search=search or None)
    except ResearchConnectError as e:
        show_error(e)
        return

    if not users:
        st.caption("No users found.")
    for member in users:
        with st.container(border=True):
            col1, col2 = st.columns([3, 1])
            col1.markdown(f"**{member.name}** · {member.institution or member.email}")
            if member.skills:
                col1.caption("Skills: " + ", ".join(member.skills[:6]))
            if col2.button("Profile", key=f"explore_{member.uid}"):
                open_profile(member.uid)


# ─────────────────────────────────────────────────────────────────────────────
# Public Profile
# ─────────────────────────────────────────────────────────────────────────────


def render_public_profile():
    from researchconnect.accounts.profile import research_interests

    try:
        profile = get_client().get_user_profile(st.session_state.selected_uid)
    except NotFoundError:
        st.warning("This user does not exist.")
        return
    except ResearchConnectError as e:
        show_error(e)
        return

    st.title(f"👤 {profile.name}")
    st.caption(f"{'Student' if profile.type == UserType.STUDENT.value else 'Professor'} · {profile.email}")

    student = profile.student
    if student is None:
        return

    st.markdown(f"**{student.degree or 'Student'}** at {student.institution or '-'}")
    if student.summary:
        st.markdown(student.summary)
    interests = research_interests(student)
    if interests:
        st.markdown("**Research interests:** " + " ".join(f"`{i}`" for i in interests))
    if student.skills:
        st.markdown("**Skills:** " + ", ".join(student.skills))
    if student.workEx:
        st.markdown(f"**Experience:** {student.workEx}")
    if student.resumeLink:
        st.markdown(f"[Resume]({student.resumeLink})")
    if student.publicationsLink:
        st.markdown(f"[Publications]({student.publicationsLink})")


# ─────────────────────────────────────────────────────────────────────────────
# Main App
# ─────────────────────────────────────────────────────────────────────────────


PUBLIC_PAGES = {
    "login": render_login,
    "register": render_register,
    "verify_email": render_verify_email,
    "forgot_password": render_forgot_password,
}


def route(page: str, user) -> str:
    """
    Resolve the page to show for ``user``.

    Logged-out users only reach public pages; logged-in users landing on a
    public page or on the other role's pages go to their dashboard.
    """
    if user is None:
        return page if page in PUBLIC_PAGES else "login"
    if user.is_student:
        own_pages = set(STUDENT_PAGES) | STUDENT_DETAIL_PAGES
    else:
        own_pages = set(PROFESSOR_PAGES)
    if page in own_pages or page in SHARED_DETAIL_PAGES:
        return page
    return AuthSession.dashboard_for(user.type)


def main():
    """Main application entry point."""
    init_session_state()

    try:
        user = current_user()
    except SessionExpiredError:
        st.session_state.token_store.clear()
        user = None

    render_sidebar(user)
    page = route(st.session_state.page, user)
    st.session_state.page = page

    if user is None:
        PUBLIC_PAGES[page]()
        return

    student_views = {
        "student_dashboard": lambda: render_student_dashboard(user),
        "browse_projects": render_browse_projects,
        "project_detail": render_project_detail,
        "my_applications": render_my_applications,
        "recommendations": render_recommendations,
        "roadmap": render_roadmap,
        "profile": render_profile,
    }
    professor_views = {
        "professor_dashboard": render_professor_dashboard,
        "create_project": render_create_project,
        "applicants": render_applicants,
        "past_applicants": render_past_applicants,
        "explore_users": render_explore_users,
    }
    views = student_views if user.is_student else professor_views
    views["public_profile"] = render_public_profile
    views[page]()


if __name__ == "__main__":
    main()
