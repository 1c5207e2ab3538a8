"""
CLI Main - Typer command-line interface.
========================================

Commands:
- register / login / logout / whoami / verify: account and session
- projects / project: browse research projects
- apply / retract / applications / status: student applications
- applicants / decide / interview: professor review of applicants
- roadmap / history: personalised roadmaps
- info: show configuration
- gui: launch the Streamlit web interface
"""

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

import typer
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from researchconnect.api.errors import FormValidationError, ResearchConnectError
from researchconnect.shared.logging import (
    LogContext,
    get_console,
    get_logger,
    setup_logging_from_settings,
)

logger = get_logger(__name__)

app = typer.Typer(
    name="researchconnect",
    help="""🔬 ResearchConnect - research collaboration for students and professors

Browse research projects, apply to them, review applicants and generate
personalised research or placement roadmaps from the terminal.

━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

COMMANDS OVERVIEW:

  register      Create a student (stu) or professor (fac) account
  login         Log in and store the session token
  logout        Forget the stored session token
  whoami        Show the logged-in user
  verify        Enter the 6-digit email verification code

  projects      List projects (students: paginated, filterable)
  project       Show one project
  apply         Apply to a project
  retract       Retract an undecided application
  applications  List your applications (professors: applications received)
  status        Show your application status (professors: update one)

  applicants    Professors: list applications to your projects
  decide        Professors: accept / reject / waitlist / interview
  interview     Professors: schedule an interview

  roadmap       Generate a research or placement roadmap
  history       List previously generated roadmaps

  info          Show configuration
  gui           Launch the Streamlit web interface

━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

QUICK START:

  researchconnect login -e ada@uni.edu
  researchconnect projects --field computer-science --search "quantum"
  researchconnect apply <pid>

Use 'researchconnect <command> --help' for detailed command options.
""",
    add_completion=False,
    rich_markup_mode="rich",
)

console = get_console()


# ─────────────────────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────────────────────


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Show debug logs from the API client.",
    ),
):
    """Global options."""
    setup_logging_from_settings()
    if verbose:
        ctx.with_resource(LogContext("DEBUG", "researchconnect"))


@contextmanager
def api_errors() -> Iterator[None]:
    """Print client errors nicely and exit with status 1."""
    try:
        yield
    except FormValidationError as e:
        for field_name, message in e.errors.items():
            console.print(f"[red]{field_name}: {message}[/red]")
        raise typer.Exit(1)
    except ResearchConnectError as e:
        logger.debug(f"Command failed: {e!r}")
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)


def _client():
    from researchconnect.api.client import get_client

    return get_client()


def _require(role: Optional[str] = None):
    """Return the logged-in user's claims, optionally checking the role."""
    from researchconnect.api.auth import AuthSession, TokenStore
    from researchconnect.api.errors import SessionExpiredError

    session = AuthSession(TokenStore())
    if role:
        return session.require_role(role)
    user = session.current_user()
    if user is None:
        raise SessionExpiredError("Not logged in. Run 'researchconnect login' first.")
    return user


# ─────────────────────────────────────────────────────────────────────────────
# Account Commands
# ─────────────────────────────────────────────────────────────────────────────


@app.command()
def register(
    name: str = typer.Option(..., "--name", "-n", prompt=True, help="Full name."),
    email: str = typer.Option(..., "--email", "-e", prompt=True, help="Account email."),
    user_type: str = typer.Option(
        "stu",
        "--type", "-t",
        help="Account type: 'stu' (student) or 'fac' (professor).",
    ),
    password: str = typer.Option(
        ..., "--password", prompt=True, hide_input=True, confirmation_prompt=True,
        help="Password (at least 8 characters).",
    ),
):
    """
    📝 Create an account.

    A verification code is emailed afterwards; confirm it with 'verify'.

    Examples:
        researchconnect register -n "Ada Lovelace" -e ada@uni.edu
        researchconnect register -t fac
    """
    from researchconnect.accounts.forms import RegisterForm
    from researchconnect.api.errors import parse_form

    with api_errors():
        form = parse_form(
            RegisterForm,
            {
                "name": name,
                "email": email,
                "password": password,
                "confirm_password": password,
                "type": user_type,
            },
        )
        with _client() as client:
            client.register(form.name, form.email, form.password, form.type)

    console.print(f"[green]✓ Account created for {email}[/green]")
    console.print("Check your inbox and run 'researchconnect verify' with the code.")


@app.command()
def login(
    email: str = typer.Option(..., "--email", "-e", prompt=True, help="Account email."),
    password: str = typer.Option(
        ..., "--password", prompt=True, hide_input=True, help="Account password."
    ),
):
    """
    🔑 Log in and store the session token.

    Unverified accounts are sent a new verification email.
    """
    from researchconnect.accounts.forms import LoginForm, login_with_redirect
    from researchconnect.api.errors import parse_form

    with api_errors():
        form = parse_form(LoginForm, {"email": email, "password": password})
        with _client() as client:
            result = login_with_redirect(client, form)

    if result.user is None:
        console.print(f"[yellow]{result.message}[/yellow]")
        console.print(f"Run 'researchconnect verify -e {result.email}' once you have the code.")
        raise typer.Exit(1)

    role = "Student" if result.user.is_student else "Professor"
    console.print(f"[green]✓ Logged in as {result.user.name or result.user.email} ({role})[/green]")


@app.command()
def logout():
    """🚪 Forget the stored session token."""
    with _client() as client:
        client.logout()
    console.print("[green]✓ Logged out[/green]")


@app.command()
def whoami():
    """👤 Show the logged-in user."""
    from researchconnect.shared.utils import format_date

    with api_errors():
        user = _require()

    expires = "never"
    if user.exp:
        from datetime import datetime

        expires = format_date(datetime.fromtimestamp(user.exp).date().isoformat())

    console.print(Panel(
        f"[bold]{user.name}[/bold]\n"
        f"Email: {user.email}\n"
        f"Role: {'Student' if user.is_student else 'Professor'}\n"
        f"User ID: {user.user_id}\n"
        f"Session expires: {expires}",
        title="👤 Current User",
    ))


@app.command()
def verify(
    email: str = typer.Option(..., "--email", "-e", prompt=True, help="Account email."),
    code: str = typer.Option(..., "--code", "-c", prompt=True, help="6-digit code from the email."),
    resend: bool = typer.Option(
        False, "--resend", help="Send a new code instead of verifying."
    ),
):
    """✉️ Verify your email with the 6-digit code."""
    from researchconnect.accounts.forms import VerificationCode
    from researchconnect.api.errors import parse_form

    with api_errors(), _client() as client:
        if resend:
            client.send_verification_code(email)
            console.print(f"[green]✓ New code sent to {email}[/green]")
            return
        form = parse_form(VerificationCode, {"code": VerificationCode.from_paste(code)})
        client.verify_code(email, form.code)

    console.print("[green]✓ Email verified. You can now log in.[/green]")


# ─────────────────────────────────────────────────────────────────────────────
# Project Commands
# ─────────────────────────────────────────────────────────────────────────────


@app.command()
def projects(
    search: str = typer.Option("", "--search", "-s", help="Regex matched against name, descriptions, professor and tags."),
    field_of_study: str = typer.Option("", "--field", "-f", help="Field of study slug, e.g. computer-science."),
    specialization: str = typer.Option("all", "--specialization", help="Specialization slug."),
    duration: int = typer.Option(0, "--duration", "-d", min=0, max=3, help="0 any, 1 short, 2 medium, 3 long."),
    position_types: list[str] = typer.Option([], "--position", "-p", help="Position type (repeatable)."),
    upcoming: bool = typer.Option(False, "--upcoming", help="Only projects with a deadline in the next weeks."),
    page: int = typer.Option(1, "--page", min=1, help="Page of the student listing."),
    all_pages: bool = typer.Option(False, "--all", "-a", help="Fetch every page."),
    mine: bool = typer.Option(False, "--mine", "-m", help="Professors: only your own projects."),
):
    """
    📚 List research projects.

    Students see active projects page by page; filters apply to the fetched
    projects. Professors can list their own projects with --mine.

    Examples:
        researchconnect projects --field computer-science -p paid
        researchconnect projects --search "neural|vision" --all
        researchconnect projects --mine
    """
    from researchconnect.projects.filters import ProjectFilters, apply_filters, split_active

    filters = ProjectFilters(
        search=search,
        field=field_of_study,
        specialization=specialization,
        duration=duration,
        position_types=list(position_types),
        upcoming_deadline_only=upcoming,
    )

    with api_errors(), _client() as client:
        footer = ""
        if mine:
            _require("fac")
            fetched = client.list_my_projects()
            active, inactive = split_active(fetched)
            footer = f"{len(active)} active, {len(inactive)} inactive"
        elif all_pages:
            fetched = list(client.iter_projects_for_student())
        else:
            result = client.list_projects_for_student(page=page)
            fetched = result.projects
            footer = f"Page {result.page} of {max(result.total_pages, 1)} ({result.total} projects)"

    shown = apply_filters(fetched, filters)
    if not shown:
        console.print("[yellow]No projects match your filters.[/yellow]")
        raise typer.Exit(0)

    table = Table(show_header=True, title="📚 Projects")
    table.add_column("PID", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Professor")
    table.add_column("Tags")
    table.add_column("Duration")
    table.add_column("Deadline")
    if mine:
        table.add_column("Active")

    from researchconnect.shared.utils import format_date, truncate_text

    for project in shown:
        row = [
            project.pid,
            truncate_text(project.name, 40),
            project.professor_name,
            ", ".join(project.tags[:3]),
            project.duration or "-",
            format_date(project.deadline),
        ]
        if mine:
            row.append("✓" if project.is_active else "✗")
        table.add_row(*row)

    console.print(table)
    if footer:
        console.print(f"[dim]{footer}[/dim]")


@app.command()
def project(pid: str = typer.Argument(..., help="Project ID.")):
    """🔎 Show one project."""
    from researchconnect.projects.filters import field_label, specialization_label
    from researchconnect.shared.utils import format_date

    with api_errors(), _client() as client:
        item = client.get_project(pid)

    details = [
        f"[bold]{item.name}[/bold]",
        f"Professor: {item.professor_name}",
        f"Field: {field_label(item.field_of_study) if item.field_of_study else '-'}",
    ]
    if item.specialization:
        details.append(f"Specialization: {specialization_label(item.specialization)}")
    details += [
        f"Duration: {item.duration or '-'}",
        f"Positions: {', '.join(item.position_type) or '-'}",
        f"Deadline: {format_date(item.deadline)}",
        f"Tags: {', '.join(item.tags) or '-'}",
        "",
        item.sdesc,
        "",
        item.ldesc,
    ]
    console.print(Panel("\n".join(details), title=f"🔎 {item.pid}"))


# ─────────────────────────────────────────────────────────────────────────────
# Student Application Commands
# ─────────────────────────────────────────────────────────────────────────────


@app.command()
def apply(
    pid: str = typer.Argument(..., help="Project ID."),
    availability: str = typer.Option(..., "--availability", prompt=True, help="When you can work on the project."),
    motivation: str = typer.Option(..., "--motivation", prompt=True, help="Why you want to join."),
    prior_projects: str = typer.Option("", "--prior-projects", help="Relevant earlier projects."),
    cv_link: Optional[str] = typer.Option(None, "--cv", help="CV link (defaults to your profile's resume)."),
    publications_link: Optional[str] = typer.Option(None, "--publications", help="Publications link."),
):
    """
    ✉️ Apply to a project.

    CV and publication links default to those on your profile.
    """
    from researchconnect.applications.tracking import ApplicationForm, prefill_from_profile
    from researchconnect.api.errors import NotFoundError, parse_form

    with api_errors(), _client() as client:
        _require("stu")
        try:
            defaults = prefill_from_profile(client.get_student_profile())
        except NotFoundError:
            defaults = prefill_from_profile(None)
        form = parse_form(
            ApplicationForm,
            {
                "availability": availability,
                "motivation": motivation,
                "prior_projects": prior_projects,
                "cv_link": cv_link if cv_link is not None else defaults["cv_link"],
                "publications_link": (
                    publications_link if publications_link is not None
                    else defaults["publications_link"]
                ),
            },
        )
        application = client.apply_to_project(pid, form.to_payload())

    console.print(f"[green]✓ Applied to {pid} (application #{application.id})[/green]")


@app.command()
def retract(
    pid: str = typer.Argument(..., help="Project ID."),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation."),
):
    """↩️ Retract your application to a project."""
    from researchconnect.applications.tracking import can_retract, status_label

    with api_errors(), _client() as client:
        _require("stu")
        application = client.get_application_for_project(pid)
        if application is None:
            console.print(f"[yellow]You have not applied to {pid}.[/yellow]")
            raise typer.Exit(1)
        if not can_retract(application):
            console.print(
                f"[yellow]Cannot retract: application is {status_label(application.status)}.[/yellow]"
            )
            raise typer.Exit(1)
        if not yes:
            typer.confirm(f"Retract your application to '{application.project_name}'?", abort=True)
        client.retract_application(pid)

    console.print("[green]✓ Application retracted[/green]")


@app.command()
def applications():
    """
    📋 List your applications with a summary.

    Professors get the applications to their projects instead (see 'applicants').
    """
    from researchconnect.applications.tracking import status_label, summarize
    from researchconnect.shared.utils import format_date

    with api_errors():
        user = _require()
    if user.is_faculty:
        applicants(tab="all", query="")
        return

    with api_errors(), _client() as client:
        items = client.get_my_applications()

    if not items:
        console.print("[yellow]You have not applied to any projects yet.[/yellow]")
        raise typer.Exit(0)

    summary = summarize(items)
    console.print(Panel(
        f"Total: {summary.total}   Active projects: {summary.active_projects}   "
        f"Interviews: {summary.interviews}   Under review: {summary.under_review}",
        title="📋 Applications",
    ))

    table = Table(show_header=True)
    table.add_column("PID", style="dim")
    table.add_column("Project", style="cyan")
    table.add_column("Professor")
    table.add_column("Status")
    table.add_column("Applied")
    table.add_column("Interview")

    for item in items:
        interview = ""
        if item.interview_date:
            interview = f"{format_date(item.interview_date)} {item.interview_time}".strip()
        table.add_row(
            item.pid,
            item.project_name,
            item.professor_name,
            status_label(item.status),
            format_date(item.time_created),
            interview or "-",
        )

    console.print(table)


@app.command()
def status(
    pid: str = typer.Argument(..., help="Project ID."),
    application_id: Optional[int] = typer.Argument(None, help="Professors: application ID."),
    new_status: Optional[str] = typer.Argument(None, help="Professors: new status."),
    feedback: Optional[str] = typer.Option(None, "--feedback", help="Professors: also send feedback."),
):
    """
    ❓ Show your application status for a project.

    Professors pass an application ID and a new status to update it,
    the same as 'decide'.

    Examples:
        researchconnect status p-123
        researchconnect status p-123 41 interview
    """
    from researchconnect.applications.tracking import status_label

    with api_errors():
        user = _require()
    if user.is_faculty:
        if application_id is None or new_status is None:
            console.print("[red]Professors: give an application ID and a new status.[/red]")
            raise typer.Exit(1)
        decide(pid, application_id, new_status, feedback)
        return

    with api_errors(), _client() as client:
        lookup = client.get_application_status(pid)

    if not lookup.has_applied or lookup.application is None:
        console.print(f"You have not applied to {pid}.")
        return

    application = lookup.application
    console.print(f"Status: [bold]{status_label(application.status)}[/bold]")
    if application.interview_details:
        console.print(f"Interview: {application.interview_details}")


# ─────────────────────────────────────────────────────────────────────────────
# Professor Commands
# ─────────────────────────────────────────────────────────────────────────────


@app.command()
def applicants(
    tab: str = typer.Option("all", "--status", "-s", help="Status tab: all, under_review, interview, waitlisted, accepted, rejected."),
    query: str = typer.Option("", "--search", "-q", help="Match applicant name, email or project name."),
):
    """👥 Professors: list applications to your projects."""
    from researchconnect.applications.tracking import (
        filter_project_applications,
        status_label,
        total_applications,
    )
    from researchconnect.shared.utils import format_date

    with api_errors(), _client() as client:
        _require("fac")
        groups = client.get_all_project_applications()

    shown = filter_project_applications(groups, tab=tab, query=query)
    console.print(
        f"[bold]{total_applications(shown)}[/bold] of {total_applications(groups)} applications"
    )

    for group in shown:
        table = Table(show_header=True, title=f"{group.project.name} ({group.project.pid})")
        table.add_column("ID", style="dim")
        table.add_column("Name", style="cyan")
        table.add_column("Email")
        table.add_column("Status")
        table.add_column("Applied")
        for applicant in group.applications:
            table.add_row(
                str(applicant.id),
                applicant.name,
                applicant.email,
                status_label(applicant.status),
                format_date(applicant.time_created),
            )
        console.print(table)


@app.command()
def decide(
    pid: str = typer.Argument(..., help="Project ID."),
    application_id: int = typer.Argument(..., help="Application ID."),
    new_status: str = typer.Argument(..., help="accepted, rejected, waitlisted or interview."),
    feedback: Optional[str] = typer.Option(None, "--feedback", help="Also send feedback to the applicant."),
):
    """⚖️ Professors: change an application's status."""
    from researchconnect.applications.tracking import (
        FeedbackForm,
        available_actions,
        find_applicant,
        status_label,
    )
    from researchconnect.api.errors import parse_form

    with api_errors(), _client() as client:
        _require("fac")
        found = find_applicant(client.get_all_project_applications(), application_id)
        if found is None or found[0].project.pid != pid:
            console.print(f"[red]No application #{application_id} on project {pid}.[/red]")
            raise typer.Exit(1)
        current = found[1].status
        allowed = available_actions(current)
        if new_status not in allowed:
            console.print(
                f"[red]Cannot move from {status_label(current)} to {new_status}. "
                f"Allowed: {', '.join(allowed) or 'none'}[/red]"
            )
            raise typer.Exit(1)
        client.update_application_status(pid, application_id, new_status)
        if feedback is not None:
            form = parse_form(FeedbackForm, {"feedback": feedback})
            client.send_feedback(pid, application_id, form.feedback)

    console.print(f"[green]✓ Application #{application_id} is now {status_label(new_status)}[/green]")


@app.command()
def interview(
    pid: str = typer.Argument(..., help="Project ID."),
    application_id: int = typer.Argument(..., help="Application ID."),
    date: str = typer.Option(..., "--date", prompt=True, help="Interview date (YYYY-MM-DD)."),
    time: str = typer.Option(..., "--time", prompt=True, help="Interview time (HH:MM)."),
    details: str = typer.Option("", "--details", help="Location, meeting link or notes."),
):
    """📅 Professors: schedule an interview."""
    from researchconnect.applications.tracking import InterviewForm
    from researchconnect.api.errors import parse_form

    with api_errors(), _client() as client:
        _require("fac")
        form = parse_form(
            InterviewForm,
            {"interview_date": date, "interview_time": time, "interview_details": details},
        )
        client.schedule_interview(pid, application_id, form.to_payload())

    console.print(f"[green]✓ Interview scheduled for {date} {time}[/green]")


# ─────────────────────────────────────────────────────────────────────────────
# Roadmap Commands
# ─────────────────────────────────────────────────────────────────────────────


@contextmanager
def _spinner(description: str) -> Iterator[None]:
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    ) as progress:
        task = progress.add_task(description, total=None)
        yield
        progress.remove_task(task)


def _advance(wizard, problem: str) -> None:
    if not wizard.next():
        console.print(f"[red]{problem}[/red]")
        raise typer.Exit(1)


def _split(answer: str) -> list[str]:
    return [part.strip() for part in answer.split(",") if part.strip()]


def _prompt_research(wizard) -> None:
    """Walk the research questionnaire with terminal prompts."""
    from researchconnect.roadmap.questionnaire import EXPERIENCE_LEVELS, FIELDS_OF_STUDY

    console.print(f"[dim]Fields: {', '.join(FIELDS_OF_STUDY)}[/dim]")
    wizard.set_field_of_study(typer.prompt("Field of study", default=wizard.field_of_study or None))
    wizard.experience_level = typer.prompt(
        f"Experience level ({', '.join(EXPERIENCE_LEVELS)})",
        default=wizard.experience_level or "beginner",
    )
    _advance(wizard, "Field of study and experience level are required.")

    wizard.current_year = typer.prompt("Current year of study", default=wizard.current_year, type=int)
    wizard.time_commitment = typer.prompt("Hours per week", default=wizard.time_commitment, type=int)
    _advance(wizard, "Year and weekly hours must be positive.")

    console.print(f"[dim]Suggested interests: {', '.join(wizard.available_interests)}[/dim]")
    answer = typer.prompt(
        "Interests (comma separated)", default=", ".join(wizard.selected_interests) or None
    )
    wizard.selected_interests = []
    for interest in _split(answer):
        wizard.add_custom_interest(interest)
    _advance(wizard, "Pick at least one interest.")

    wizard.goals = typer.prompt("Research goals", default=wizard.goals or None)
    wizard.prior_experience = typer.prompt(
        "Prior experience", default=wizard.prior_experience, show_default=False
    )


def _prompt_placement(wizard) -> None:
    """Walk the placement questionnaire with terminal prompts."""
    from researchconnect.roadmap.questionnaire import INTENSITY_TYPES, PREP_AREAS, PREP_LEVELS

    wizard.timeline_weeks = typer.prompt("Weeks until placements", default=wizard.timeline_weeks, type=int)
    wizard.time_commitment = typer.prompt("Hours per week", default=wizard.time_commitment, type=int)
    wizard.intensity_type = typer.prompt(
        f"Intensity ({', '.join(INTENSITY_TYPES)})",
        default=wizard.intensity_type or wizard.intensity_suggestion(),
    )
    _advance(wizard, "Timeline, weekly hours and intensity are required.")

    console.print(f"[dim]Prep areas: {', '.join(PREP_AREAS)}[/dim]")
    answer = typer.prompt("Prep areas (comma separated)", default=", ".join(wizard.prep_areas) or None)
    chosen = _split(answer)
    for area in list(wizard.prep_areas):
        if area not in chosen:
            wizard.toggle_prep_area(area)
    for area in chosen:
        if area not in wizard.prep_areas:
            wizard.toggle_prep_area(area)
    _advance(wizard, "Pick at least one prep area.")

    for area in wizard.prep_areas:
        wizard.set_level(area, typer.prompt(
            f"Level for {PREP_AREAS.get(area, area)} ({', '.join(PREP_LEVELS)})",
            default=wizard.current_levels.get(area, "beginner"),
        ))
    _advance(wizard, "Every prep area needs a level.")

    for area, resources in wizard.suggested_resources().items():
        console.print(f"[dim]{PREP_AREAS[area]}: {', '.join(resources)}[/dim]")
    wizard.resources_started = []
    for resource in _split(typer.prompt("Resources already started", default="", show_default=False)):
        wizard.add_resource(resource)
    wizard.target_companies = []
    for company in _split(typer.prompt("Target companies", default="", show_default=False)):
        wizard.add_company(company)
    _advance(wizard, "Could not record resources and companies.")

    wizard.goals = typer.prompt("Placement goals", default=wizard.goals or None)
    wizard.special_needs = typer.prompt("Anything else?", default=wizard.special_needs, show_default=False)


@app.command()
def roadmap(
    kind: str = typer.Argument("research", help="Roadmap type: research or placement."),
    new: bool = typer.Option(
        False, "--new", "-n", help="Answer the questionnaire again before generating."
    ),
):
    """
    🗺️ Generate a personalised roadmap.

    Saved preferences are reused; without them (or with --new) you are
    walked through the questionnaire first. Roadmaps for unchanged
    preferences are served from the server cache.

    Examples:
        researchconnect roadmap
        researchconnect roadmap placement --new
    """
    from researchconnect.roadmap.layout import ordered_steps, resource_icon
    from researchconnect.roadmap.questionnaire import questionnaire_for
    from researchconnect.roadmap.service import RoadmapService

    if kind not in ("research", "placement"):
        console.print("[red]Roadmap type must be 'research' or 'placement'.[/red]")
        raise typer.Exit(1)

    with api_errors(), _client() as client:
        _require("stu")
        service = RoadmapService(client)
        saved = service.load_preferences(kind)
        if new or saved is None:
            wizard = questionnaire_for(kind, saved)
            if kind == "placement":
                _prompt_placement(wizard)
            else:
                _prompt_research(wizard)
            with _spinner("Saving preferences and generating roadmap..."):
                result = wizard.submit(lambda prefs: service.save_and_generate(kind, prefs))
            if result is None:
                console.print(
                    f"[red]Goals need at least {wizard.min_goals_length} characters.[/red]"
                )
                raise typer.Exit(1)
        else:
            with _spinner("Generating roadmap..."):
                result = service.generate(kind)

    structure = result.roadmap
    console.print(Panel(
        f"[bold]{structure.title}[/bold]\n{structure.description}\n\n"
        f"Total time: {structure.total_time or '-'}"
        + ("\n[dim](from cache)[/dim]" if result.cached else ""),
        title="🗺️ Roadmap",
        border_style="green",
    ))

    for number, node in enumerate(ordered_steps(structure), start=1):
        lines = [node.description]
        if node.skills:
            lines.append(f"Skills: {', '.join(node.skills)}")
        for resource in node.resources:
            lines.append(f"{resource_icon(resource)} {resource}")
        console.print(Panel(
            "\n".join(lines),
            title=f"{number}. {node.title} [{node.category}] {node.duration}",
        ))


@app.command()
def history():
    """🕘 List previously generated roadmaps."""
    from researchconnect.roadmap.service import RoadmapService
    from researchconnect.shared.utils import format_date

    with api_errors(), _client() as client:
        _require("stu")
        entries = RoadmapService(client).history()

    if not entries:
        console.print("[yellow]No roadmaps generated yet.[/yellow]")
        raise typer.Exit(0)

    table = Table(show_header=True, title="🕘 Roadmap History")
    table.add_column("ID", style="dim")
    table.add_column("Type")
    table.add_column("Title", style="cyan")
    table.add_column("Steps", justify="right")
    table.add_column("Created")
    for entry in entries:
        table.add_row(
            str(entry.get("id", "")),
            str(entry.get("roadmap_type", "research")),
            entry.get("title") or entry["roadmap"].title,
            str(len(entry["roadmap"].nodes)),
            format_date(entry.get("created_at")),
        )
    console.print(table)


# ─────────────────────────────────────────────────────────────────────────────
# Info Command
# ─────────────────────────────────────────────────────────────────────────────


@app.command()
def info():
    """
    ℹ️ Show configuration.

    Useful for checking which API the client talks to and where the
    session token is stored.
    """
    from researchconnect import __version__
    from researchconnect.shared.config import get_settings

    settings = get_settings()
    token_file = settings.token_file

    console.print(Panel(
        f"[bold]ResearchConnect[/bold]\n"
        f"Version: {__version__}\n"
        f"Config: config/settings.yaml\n"
        f"API: {settings.get_effective_api_url()}\n"
        f"Timeout: {settings.get_effective_timeout()}s, retries: {settings.api.max_retries}\n"
        f"Page size: {settings.projects.page_size} (max {settings.projects.max_page_size})\n"
        f"Session file: {token_file} [{'✓' if token_file.exists() else '✗'}]\n"
        f"Log level: {settings.get_effective_log_level()}",
        title="ℹ️ Info",
    ))


# ─────────────────────────────────────────────────────────────────────────────
# GUI Command
# ─────────────────────────────────────────────────────────────────────────────


@app.command()
def gui():
    """
    🖥️ Launch Streamlit web interface.

    The GUI runs at http://localhost:8501 by default.
    Press Ctrl+C to stop the server.
    """
    import subprocess
    import sys

    app_path = Path(__file__).parent.parent / "app" / "streamlit_app.py"

    console.print("[bold]🚀 Launching ResearchConnect GUI...[/bold]")
    console.print(f"[dim]Running: streamlit run {app_path}[/dim]\n")

    subprocess.run([sys.executable, "-m", "streamlit", "run", str(app_path)])


# ─────────────────────────────────────────────────────────────────────────────
# Entry Point
# ─────────────────────────────────────────────────────────────────────────────


def cli():
    """CLI entry point."""
    app()


if __name__ == "__main__":
    cli()
