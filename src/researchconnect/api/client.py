"""
Client Module - REST client for the ResearchConnect API.
========================================================

Wraps a ``requests.Session`` with:
- Automatic retries with exponential backoff on connection failures
- Bearer token injection, proactive refresh and one refresh-and-retry on 401
- Mapping of error responses onto the ``api.errors`` hierarchy
- Typed return values (pydantic models from ``shared.schemas``)

HTTP error responses are never retried; only network-level failures are.
"""

from typing import Any, Iterator, Optional, Union

import requests
from pydantic import ValidationError
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from researchconnect.api.auth import TokenStore, decode_claims, is_token_expired
from researchconnect.api.errors import (
    ApiConnectionError,
    ApiError,
    InvalidResponseError,
    NotFoundError,
    SessionExpiredError,
    error_for_response,
)
from researchconnect.shared.config import get_settings
from researchconnect.shared.logging import get_logger
from researchconnect.shared.schemas import (
    Application,
    ApplicationLookup,
    ApplicationRequest,
    AppliedProject,
    ExploreUser,
    InterviewRequest,
    PlacementPreferences,
    Project,
    ProjectApplications,
    ProjectCreate,
    ProjectPage,
    ProjectUpdate,
    RecommendedProject,
    ResearchPreferences,
    RoadmapResult,
    RoadmapStructure,
    StudentProfile,
    TokenClaims,
    UserProfile,
)

logger = get_logger(__name__)

# Endpoints that must never trigger a token refresh
AUTH_ENDPOINTS = ("/auth/login", "/auth/signup", "/auth/refresh")

Payload = Union[dict[str, Any], list[Any], None]


class ResearchConnectClient:
    """
    Client for the ResearchConnect REST API.

    Example:
        >>> client = ResearchConnectClient()
        >>> client.login("ada@uni.edu", "s3cret-pass")
        >>> for project in client.list_projects():
        ...     print(project.name)
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        token_store: Optional[TokenStore] = None,
        timeout: Optional[int] = None,
        max_retries: Optional[int] = None,
        user_agent: Optional[str] = None,
        refresh_buffer_seconds: Optional[int] = None,
        retry_min_wait: Optional[float] = None,
        retry_max_wait: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: API root, e.g. ``http://localhost:8080/v1``
            token_store: Where the bearer token lives (file-backed by default)
            timeout: Request timeout in seconds
            max_retries: Attempts for connection failures
            user_agent: User agent string
            refresh_buffer_seconds: Refresh tokens expiring within this window
            retry_min_wait: Minimum backoff between retries
            retry_max_wait: Maximum backoff between retries
            session: Pre-built session (mainly for tests)
        """
        settings = get_settings()
        api_config = settings.api

        self.base_url = (base_url or settings.get_effective_api_url()).rstrip("/")
        self.token_store = token_store if token_store is not None else TokenStore()
        self.timeout = timeout if timeout is not None else settings.get_effective_timeout()
        self.max_retries = max_retries if max_retries is not None else api_config.max_retries
        self.user_agent = user_agent or api_config.user_agent
        self.refresh_buffer_seconds = (
            refresh_buffer_seconds
            if refresh_buffer_seconds is not None
            else api_config.refresh_buffer_seconds
        )
        self.retry_min_wait = (
            retry_min_wait if retry_min_wait is not None else api_config.retry_min_wait
        )
        self.retry_max_wait = (
            retry_max_wait if retry_max_wait is not None else api_config.retry_max_wait
        )

        self._session = session

        logger.debug(
            f"Client initialized: base_url={self.base_url}, "
            f"timeout={self.timeout}s, retries={self.max_retries}"
        )

    @property
    def session(self) -> requests.Session:
        """Get or create the requests session."""
        if self._session is None:
            self._session = requests.Session()
            self._session.headers.update(
                {
                    "User-Agent": self.user_agent,
                    "Accept": "application/json",
                }
            )
        return self._session

    # ─────────────────────────────────────────────────────────────────────────
    # Transport
    # ─────────────────────────────────────────────────────────────────────────

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _send(
        self,
        method: str,
        path: str,
        json: Payload = None,
        params: Optional[dict[str, Any]] = None,
        token: Optional[str] = None,
    ) -> requests.Response:
        """Send one request, retrying connection failures."""
        url = self._url(path)
        headers = {"Authorization": f"Bearer {token}"} if token else {}

        @retry(
            retry=retry_if_exception_type((requests.ConnectionError, requests.Timeout)),
            stop=stop_after_attempt(self.max_retries),
            wait=wait_exponential(min=self.retry_min_wait, max=self.retry_max_wait),
            before_sleep=lambda retry_state: logger.warning(
                f"Retry {retry_state.attempt_number}/{self.max_retries} for {method} {url}"
            ),
            reraise=True,
        )
        def _request_with_retry() -> requests.Response:
            return self.session.request(
                method,
                url,
                json=json,
                params=params,
                headers=headers,
                timeout=self.timeout,
            )

        try:
            return _request_with_retry()
        except (requests.ConnectionError, requests.Timeout) as e:
            logger.error(f"Failed to reach {url}: {e}")
            raise ApiConnectionError(f"Could not reach the API at {self.base_url}") from e

    @staticmethod
    def _decode(response: requests.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return None

    def _handle(self, method: str, path: str, response: requests.Response) -> Any:
        data = self._decode(response)
        if 200 <= response.status_code < 300:
            return data

        error = error_for_response(response.status_code, data, fallback=response.reason or "")
        logger.debug(f"{method} {path} failed: {error}")
        raise error

    def _ensure_fresh_token(self) -> Optional[str]:
        """Refresh the stored token when it is about to expire."""
        token = self.token_store.get()
        if token and is_token_expired(token, self.refresh_buffer_seconds):
            logger.info("Session token about to expire, refreshing")
            token = self.refresh_token()
        return token

    def request(
        self,
        method: str,
        path: str,
        json: Payload = None,
        params: Optional[dict[str, Any]] = None,
        authenticated: bool = True,
    ) -> Any:
        """
        Perform an API call and return the decoded JSON body.

        Args:
            method: HTTP method
            path: Path relative to the base URL
            json: JSON body
            params: Query parameters
            authenticated: Attach the bearer token

        Raises:
            ApiError: (or a subclass) on error responses
            SessionExpiredError: If the token could not be refreshed
            ApiConnectionError: If the API is unreachable
        """
        is_auth_endpoint = path.startswith(AUTH_ENDPOINTS)
        token = None
        if authenticated:
            token = self.token_store.get() if is_auth_endpoint else self._ensure_fresh_token()

        response = self._send(method, path, json=json, params=params, token=token)

        if response.status_code == 401 and authenticated and not is_auth_endpoint:
            logger.info(f"{method} {path} returned 401, refreshing session and retrying once")
            token = self.refresh_token()
            response = self._send(method, path, json=json, params=params, token=token)

        return self._handle(method, path, response)

    def close(self) -> None:
        """Close the HTTP session."""
        if self._session:
            self._session.close()
            self._session = None

    def __enter__(self) -> "ResearchConnectClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:  # type: ignore[no-untyped-def]
        self.close()

    # ─────────────────────────────────────────────────────────────────────────
    # Auth
    # ─────────────────────────────────────────────────────────────────────────

    def register(self, name: str, email: str, password: str, user_type: str) -> dict[str, Any]:
        """Create an account; the API then emails a verification code."""
        body = {"name": name, "email": email, "password": password, "type": user_type}
        return self.request("POST", "/auth/signup", json=body, authenticated=False) or {}

    def login(self, email: str, password: str) -> TokenClaims:
        """
        Log in and store the returned token.

        Raises:
            EmailNotVerifiedError: If the account's email is not verified
            AuthenticationError: On bad credentials
        """
        data = self.request(
            "POST", "/auth/login", json={"email": email, "password": password}, authenticated=False
        )
        token = (data or {}).get("token")
        if not token:
            raise ApiError(500, "Login response did not contain a token", data or {})
        self.token_store.set(token)
        claims = decode_claims(token)
        logger.info(f"Logged in as {claims.email} ({claims.type})")
        return claims

    def logout(self) -> None:
        """Forget the stored token (the API keeps no server-side session)."""
        self.token_store.clear()
        logger.info("Logged out")

    def get_current_user(self) -> dict[str, Any]:
        return self.request("GET", "/auth/me") or {}

    def refresh_token(self) -> str:
        """
        Exchange the current token for a fresh one.

        On any failure the stored token is cleared.

        Raises:
            SessionExpiredError: No token stored, or the refresh was refused
        """
        token = self.token_store.get()
        if not token:
            raise SessionExpiredError("Not logged in")

        try:
            response = self._send("POST", "/auth/refresh", json={"token": token}, token=token)
            data = self._handle("POST", "/auth/refresh", response)
        except ApiError as e:
            self.token_store.clear()
            raise SessionExpiredError(f"Session expired, please log in again ({e.message})") from e

        new_token = (data or {}).get("token")
        if not new_token:
            self.token_store.clear()
            raise SessionExpiredError("Session expired, please log in again")

        self.token_store.set(new_token)
        logger.debug("Session token refreshed")
        return new_token

    def forgot_password(self, email: str) -> dict[str, Any]:
        return self.request(
            "POST", "/auth/forgot-password", json={"email": email}, authenticated=False
        ) or {}

    def verify_reset_token(self, token: str) -> dict[str, Any]:
        return self.request(
            "POST", "/auth/verify-reset-token", json={"token": token}, authenticated=False
        ) or {}

    def reset_password(self, token: str, new_password: str) -> dict[str, Any]:
        return self.request(
            "POST",
            "/auth/reset-password",
            json={"token": token, "new_password": new_password},
            authenticated=False,
        ) or {}

    def send_verification_code(self, email: str) -> dict[str, Any]:
        return self.request(
            "POST", "/auth/send-verification-code", json={"email": email}, authenticated=False
        ) or {}

    def verify_code(self, email: str, code: str) -> dict[str, Any]:
        return self.request(
            "POST", "/auth/verify-code", json={"email": email, "code": code}, authenticated=False
        ) or {}

    def verify_email(self, token: str) -> dict[str, Any]:
        return self.request(
            "POST", "/auth/verify-email", json={"token": token}, authenticated=False
        ) or {}

    def resend_verification(self, email: str) -> dict[str, Any]:
        return self.request(
            "POST", "/auth/resend-verification", json={"email": email}, authenticated=False
        ) or {}

    # ─────────────────────────────────────────────────────────────────────────
    # Projects
    # ─────────────────────────────────────────────────────────────────────────

    def create_project(self, project: ProjectCreate) -> Project:
        data = self.request("POST", "/projects", json=project.model_dump(exclude_none=True))
        body = (data or {}).get("project", data) or {}
        return Project.model_validate(body)

    def list_projects(self) -> list[Project]:
        """All projects with their creators."""
        data = self.request("GET", "/projects") or {}
        return [Project.model_validate(p) for p in data.get("projects") or []]

    def list_projects_for_student(self, page: int = 1, page_size: Optional[int] = None) -> ProjectPage:
        """
        One page of projects visible to a student.

        The page size is clamped to ``[1, max_page_size]``.
        """
        projects_config = get_settings().projects
        size = page_size if page_size is not None else projects_config.page_size
        size = max(1, min(size, projects_config.max_page_size))
        data = self.request(
            "GET", "/projects/student", params={"page": max(1, page), "pageSize": size}
        )
        return ProjectPage.model_validate(data or {})

    def iter_projects_for_student(self, page_size: Optional[int] = None) -> Iterator[Project]:
        """Yield every student-visible project, page by page."""
        page = 1
        while True:
            result = self.list_projects_for_student(page=page, page_size=page_size)
            yield from result.projects
            if not result.has_next or not result.projects:
                break
            page += 1

    def list_my_projects(self) -> list[Project]:
        """Projects created by the logged-in professor."""
        data = self.request("GET", "/projects/my") or {}
        return [Project.model_validate(p) for p in data.get("projects") or []]

    def get_project(self, pid: str) -> Project:
        data = self.request("GET", f"/projects/{pid}") or {}
        return Project.model_validate(data.get("project", data))

    def update_project(self, pid: str, update: ProjectUpdate) -> dict[str, Any]:
        return self.request(
            "PUT", f"/projects/{pid}", json=update.model_dump(exclude_none=True)
        ) or {}

    def delete_project(self, pid: str) -> dict[str, Any]:
        return self.request("DELETE", f"/projects/{pid}") or {}

    def get_working_users(self, pid: str) -> list[dict[str, Any]]:
        data = self.request("GET", f"/projects/{pid}/working-users") or {}
        return list(data.get("workingUsers") or [])

    def remove_working_user(self, pid: str, uid: str) -> dict[str, Any]:
        return self.request("DELETE", f"/projects/{pid}/working-users/{uid}") or {}

    # ─────────────────────────────────────────────────────────────────────────
    # Applications
    # ─────────────────────────────────────────────────────────────────────────

    def apply_to_project(self, pid: str, application: ApplicationRequest) -> Application:
        """
        Apply to a project.

        Raises:
            NotFoundError: Project missing or inactive
            ConflictError: Already applied
        """
        data = self.request("POST", f"/projects/{pid}/apply", json=application.model_dump()) or {}
        logger.info(f"Applied to project {pid}")
        return Application.model_validate(data.get("application") or {})

    def retract_application(self, pid: str) -> dict[str, Any]:
        result = self.request("DELETE", f"/projects/{pid}/retract") or {}
        logger.info(f"Retracted application for project {pid}")
        return result

    def get_my_applications(self) -> list[Application]:
        data = self.request("GET", "/applications/my") or {}
        return [Application.model_validate(a) for a in data.get("applications") or []]

    def get_my_applied_projects(self) -> list[AppliedProject]:
        data = self.request("GET", "/applications/my/applied-projects") or {}
        return [AppliedProject.model_validate(a) for a in data.get("appliedProjects") or []]

    def get_application_status(self, pid: str) -> ApplicationLookup:
        data = self.request("GET", f"/projects/{pid}/application-status") or {}
        return ApplicationLookup.model_validate(data)

    def get_application_for_project(self, pid: str) -> Optional[Application]:
        """The student's application for ``pid``, searched in their applications."""
        for application in self.get_my_applications():
            if application.pid == pid:
                return application
        return None

    def get_all_project_applications(self) -> list[ProjectApplications]:
        """Every project of the professor with its applications."""
        data = self.request("GET", "/applications/all") or {}
        return [ProjectApplications.model_validate(g) for g in data.get("projects") or []]

    def update_application_status(self, pid: str, application_id: int, status: str) -> dict[str, Any]:
        result = self.request(
            "PUT", f"/projects/{pid}/applications/{application_id}", json={"status": status}
        ) or {}
        logger.info(f"Application {application_id} on {pid} set to {status}")
        return result

    def send_feedback(self, pid: str, application_id: int, feedback: str) -> dict[str, Any]:
        return self.request(
            "POST",
            f"/projects/{pid}/applications/{application_id}/feedback",
            json={"feedback": feedback},
        ) or {}

    def schedule_interview(
        self, pid: str, application_id: int, interview: InterviewRequest
    ) -> dict[str, Any]:
        return self.request(
            "POST",
            f"/projects/{pid}/applications/{application_id}/schedule-interview",
            json=interview.model_dump(),
        ) or {}

    def get_past_applicants(self, pid: str) -> ProjectApplications:
        data = self.request("GET", f"/projects/{pid}/past-applicants") or {}
        applications = data.get("applications") or []
        return ProjectApplications.model_validate(
            {
                "project": data.get("project") or {},
                "applications": applications,
                "count": data.get("count", len(applications)),
            }
        )

    # ─────────────────────────────────────────────────────────────────────────
    # Profiles
    # ─────────────────────────────────────────────────────────────────────────

    def get_student_profile(self) -> StudentProfile:
        data = self.request("GET", "/profile/student") or {}
        return StudentProfile.model_validate(data.get("student") or {})

    def update_student_profile(self, profile: StudentProfile) -> StudentProfile:
        data = self.request(
            "PUT", "/profile/student", json=profile.model_dump(mode="json", exclude={"uid"})
        ) or {}
        return StudentProfile.model_validate(data.get("student") or profile.model_dump())

    def get_recommended_projects(self) -> list[RecommendedProject]:
        data = self.request("GET", "/profile/student/recommendations") or {}
        return [RecommendedProject.model_validate(p) for p in data.get("recommendations") or []]

    def get_user_profile(self, uid: str) -> UserProfile:
        data = self.request("GET", f"/profile/user/{uid}") or {}
        return UserProfile.model_validate(data)

    def explore_users(
        self, user_type: Optional[str] = None, search: Optional[str] = None
    ) -> list[ExploreUser]:
        params = {}
        if user_type:
            params["type"] = user_type
        if search:
            params["search"] = search
        data = self.request("GET", "/profile/explore", params=params or None) or {}
        return [ExploreUser.model_validate(u) for u in data.get("users") or []]

    # ─────────────────────────────────────────────────────────────────────────
    # Roadmap
    # ─────────────────────────────────────────────────────────────────────────

    def save_preferences(self, preferences: ResearchPreferences) -> dict[str, Any]:
        return self.request("POST", "/roadmap/preferences", json=preferences.model_dump()) or {}

    def get_preferences(self) -> ResearchPreferences:
        """
        Raises:
            NotFoundError: No preferences saved yet
        """
        data = self.request("GET", "/roadmap/preferences") or {}
        return ResearchPreferences.model_validate(data.get("preference", data))

    def generate_roadmap(self) -> RoadmapResult:
        return self._roadmap_result(self.request("POST", "/roadmap/generate", json={}))

    def get_roadmap_history(self) -> list[dict[str, Any]]:
        data = self.request("GET", "/roadmap/history")
        if isinstance(data, dict):
            data = data.get("roadmaps") or []
        return list(data or [])

    def save_placement_preferences(self, preferences: PlacementPreferences) -> dict[str, Any]:
        return self.request(
            "POST", "/roadmap/placement/preferences", json=preferences.model_dump()
        ) or {}

    def get_placement_preferences(self) -> PlacementPreferences:
        """
        Raises:
            NotFoundError: No preferences saved yet
        """
        data = self.request("GET", "/roadmap/placement/preferences") or {}
        return PlacementPreferences.model_validate(data.get("preference", data))

    def generate_placement_roadmap(self) -> RoadmapResult:
        return self._roadmap_result(self.request("POST", "/roadmap/placement/generate", json={}))

    @staticmethod
    def _roadmap_result(data: Any) -> RoadmapResult:
        body = data or {}
        if "roadmap" not in body:
            raise NotFoundError(404, str(body.get("error") or "No roadmap in response"), body)
        try:
            roadmap = RoadmapStructure.from_payload(body["roadmap"])
        except (ValueError, ValidationError) as e:
            logger.warning(f"Could not decode roadmap: {e}")
            raise InvalidResponseError(200, "The server returned a malformed roadmap", body) from e
        return RoadmapResult(
            roadmap=roadmap,
            cached=bool(body.get("cached", False)),
            message=str(body.get("message", "")),
            roadmap_id=body.get("roadmapId"),
        )


# ─────────────────────────────────────────────────────────────────────────────
# Convenience Functions
# ─────────────────────────────────────────────────────────────────────────────


def get_client(token_store: Optional[TokenStore] = None) -> ResearchConnectClient:
    """Build a client from the loaded settings."""
    return ResearchConnectClient(token_store=token_store)
