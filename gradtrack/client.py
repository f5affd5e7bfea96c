"""
GradTrack API client and application-state cache.

ApiClient wraps every REST endpoint; all outbound HTTP goes through its
``requests.Session``. Pass a mock ``session`` in tests to intercept calls
without touching the network.

AppState holds the last-fetched lists for one signed-in user:
  - GET failures fall back to empty data (logged, never raised)
  - every mutation re-fetches the affected list in full
  - Kanban moves are optimistic and roll back on failure

Usage:
    client = ApiClient("http://localhost:5000/api/v1")
    client.login("me@example.com", "secret123")
    state = AppState(client)
    state.refresh_all()
    state.move_task(7, "completed")
"""

from __future__ import annotations

import logging

import requests

from gradtrack.services.kanban import KanbanBoard, KanbanFilters, KanbanSort

logger = logging.getLogger(__name__)

_DEFAULT_TIMEOUT = 15


class ApiError(Exception):
    """Non-2xx response (or transport failure) from the GradTrack API.

    Attributes:
        status_code: HTTP status, or None when the request never completed.
        message:     ``error`` field of the response body when present.
        details:     Field-level validation details, if any.
    """

    def __init__(self, status_code: int | None, message: str, details=None) -> None:
        self.status_code = status_code
        self.message = message
        self.details = details or []
        super().__init__(f"{status_code}: {message}" if status_code else message)


class ApiClient:

    def __init__(self, base_url: str, token: str | None = None,
                 session: requests.Session | None = None,
                 timeout: int = _DEFAULT_TIMEOUT) -> None:
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self._session = session
        self.current_user: dict | None = None

    @property
    def session(self) -> requests.Session:
        """Return (or lazily create) the requests.Session."""
        if self._session is None:
            self._session = requests.Session()
        return self._session

    # ── Transport ────────────────────────────────────────────────────────────

    def request(self, method: str, path: str, *, params=None, json=None):
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        try:
            resp = self.session.request(
                method,
                f"{self.base_url}{path}",
                params=params,
                json=json,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.warning("API %s %s failed: %s", method, path, exc)
            raise ApiError(None, str(exc)) from exc

        try:
            body = resp.json()
        except ValueError:
            body = {}

        if not resp.ok:
            message = body.get("error") if isinstance(body, dict) else None
            raise ApiError(
                resp.status_code,
                message or f"HTTP error {resp.status_code}",
                body.get("details") if isinstance(body, dict) else None,
            )
        return body

    # ── Auth ─────────────────────────────────────────────────────────────────

    def _remember(self, body: dict) -> dict:
        if body.get("token"):
            self.token = body["token"]
            self.current_user = body.get("user")
        return body

    def register(self, email: str, password: str, name: str | None = None) -> dict:
        return self._remember(self.request(
            "POST", "/auth/register", json={"email": email, "password": password, "name": name},
        ))

    def login(self, email: str, password: str) -> dict:
        return self._remember(self.request(
            "POST", "/auth/login", json={"email": email, "password": password},
        ))

    def logout(self) -> None:
        self.token = None
        self.current_user = None

    def me(self) -> dict | None:
        if not self.token:
            return None
        try:
            self.current_user = self.request("GET", "/auth/me").get("user")
        except ApiError:
            return None
        return self.current_user

    # ── Resources ────────────────────────────────────────────────────────────

    def list_universities(self, **filters) -> dict:
        return self.request("GET", "/universities", params=filters or None)

    def get_university(self, university_id: int) -> dict:
        return self.request("GET", f"/universities/{university_id}")["university"]

    def create_university(self, data: dict) -> dict:
        return self.request("POST", "/universities", json=data)["university"]

    def update_university(self, university_id: int, data: dict) -> dict:
        return self.request("PUT", f"/universities/{university_id}", json=data)["university"]

    def delete_university(self, university_id: int) -> None:
        self.request("DELETE", f"/universities/{university_id}")

    def list_tasks(self, **filters) -> dict:
        return self.request("GET", "/tasks", params=filters or None)

    def create_task(self, data: dict) -> dict:
        return self.request("POST", "/tasks", json=data)["task"]

    def update_task(self, task_id: int, data: dict) -> dict:
        return self.request("PUT", f"/tasks/{task_id}", json=data)["task"]

    def delete_task(self, task_id: int) -> None:
        self.request("DELETE", f"/tasks/{task_id}")

    def list_documents(self, **filters) -> dict:
        return self.request("GET", "/documents", params=filters or None)

    def create_document(self, data: dict) -> dict:
        return self.request("POST", "/documents", json=data)["document"]

    def update_document(self, document_id: int, data: dict) -> dict:
        return self.request("PUT", f"/documents/{document_id}", json=data)["document"]

    def delete_document(self, document_id: int) -> None:
        self.request("DELETE", f"/documents/{document_id}")

    def list_deadlines(self, **filters) -> dict:
        return self.request("GET", "/deadlines", params=filters or None)

    def create_deadline(self, data: dict) -> dict:
        return self.request("POST", "/deadlines", json=data)["deadline"]

    def update_deadline(self, deadline_id: int, data: dict) -> dict:
        return self.request("PUT", f"/deadlines/{deadline_id}", json=data)["deadline"]

    def delete_deadline(self, deadline_id: int) -> None:
        self.request("DELETE", f"/deadlines/{deadline_id}")

    # ── Dashboard ────────────────────────────────────────────────────────────

    def dashboard_stats(self) -> dict:
        return self.request("GET", "/dashboard/stats")

    def recent_activity(self, limit: int = 10) -> dict:
        return self.request("GET", "/dashboard/activity", params={"limit": limit})

    def upcoming_deadlines(self) -> dict:
        return self.request("GET", "/dashboard/upcoming-deadlines")


class AppState:
    """Client-side cache of one user's tracker data."""

    def __init__(self, client: ApiClient) -> None:
        self.client = client
        self.universities: list[dict] = []
        self.tasks: list[dict] = []
        self.kanban_tasks: dict = {}
        self.documents: list[dict] = []
        self.grouped_documents: dict = {}
        self.deadlines: list[dict] = []
        self.categorized_deadlines: dict = {}
        self.stats: dict = {}
        self.activities: list[dict] = []
        self.board = KanbanBoard()

    def _fetch(self, label, call, fallback):
        try:
            return call()
        except ApiError as exc:
            logger.warning("Loading %s failed, showing empty data: %s", label, exc)
            return fallback

    # ── Loads ────────────────────────────────────────────────────────────────

    def load_universities(self) -> list[dict]:
        body = self._fetch("universities", self.client.list_universities, {})
        self.universities = body.get("universities") or []
        return self.universities

    def load_tasks(self) -> list[dict]:
        body = self._fetch("tasks", self.client.list_tasks, {})
        self.tasks = body.get("tasks") or []
        self.kanban_tasks = body.get("kanbanTasks") or {}
        self.board.load(self.tasks)
        return self.tasks

    def load_documents(self) -> list[dict]:
        body = self._fetch("documents", self.client.list_documents, {})
        self.documents = body.get("documents") or []
        self.grouped_documents = body.get("groupedDocuments") or {}
        return self.documents

    def load_deadlines(self) -> list[dict]:
        body = self._fetch("deadlines", self.client.list_deadlines, {})
        self.deadlines = body.get("deadlines") or []
        self.categorized_deadlines = body.get("categorizedDeadlines") or {}
        return self.deadlines

    def load_dashboard(self) -> dict:
        self.stats = self._fetch("dashboard stats", self.client.dashboard_stats, {})
        body = self._fetch("activity", self.client.recent_activity, {})
        self.activities = body.get("activities") or []
        return self.stats

    def refresh_all(self) -> None:
        self.load_universities()
        self.load_tasks()
        self.load_documents()
        self.load_deadlines()
        self.load_dashboard()

    # ── Mutations (write, then re-fetch the affected list) ───────────────────

    def save_university(self, data: dict, university_id: int | None = None) -> dict:
        if university_id is None:
            saved = self.client.create_university(data)
        else:
            saved = self.client.update_university(university_id, data)
        self.load_universities()
        return saved

    def delete_university(self, university_id: int) -> None:
        self.client.delete_university(university_id)
        self.load_universities()
        # Detached tasks and deadlines lose their university link
        self.load_tasks()
        self.load_deadlines()

    def save_task(self, data: dict, task_id: int | None = None) -> dict:
        saved = self.client.create_task(data) if task_id is None else self.client.update_task(task_id, data)
        self.load_tasks()
        return saved

    def delete_task(self, task_id: int) -> None:
        self.client.delete_task(task_id)
        self.load_tasks()

    def save_document(self, data: dict, document_id: int | None = None) -> dict:
        if document_id is None:
            saved = self.client.create_document(data)
        else:
            saved = self.client.update_document(document_id, data)
        self.load_documents()
        return saved

    def delete_document(self, document_id: int) -> None:
        self.client.delete_document(document_id)
        self.load_documents()

    def save_deadline(self, data: dict, deadline_id: int | None = None) -> dict:
        if deadline_id is None:
            saved = self.client.create_deadline(data)
        else:
            saved = self.client.update_deadline(deadline_id, data)
        self.load_deadlines()
        return saved

    def delete_deadline(self, deadline_id: int) -> None:
        self.client.delete_deadline(deadline_id)
        self.load_deadlines()

    # ── Kanban ───────────────────────────────────────────────────────────────

    def set_kanban_view(self, filters: KanbanFilters | None = None,
                        sort: KanbanSort | None = None) -> dict:
        if filters is not None:
            self.board.filters = filters
        if sort is not None:
            self.board.sort = sort
        return self.board.render()

    def move_task(self, task_id: int, column: str) -> dict:
        """Optimistic move; raises TaskMoveError after rolling the board back."""
        moved = self.board.move_task(task_id, column, persist=self.client.update_task)
        self.tasks = list(self.board.tasks)
        self.kanban_tasks = self.board.render()
        return moved
