"""GitLab API adapter (REST v4)."""

import logging
import threading
from datetime import datetime
from typing import Any, Callable, Dict, List, TypeVar

import requests

from mr_conflict_checker.adapters.base import (
    APIError,
    AuthenticationFailed,
    GitPlatformAdapter,
    GitPlatformError,
    OperationCancelled,
    RateLimited,
    TransportError,
)
from mr_conflict_checker.adapters.rate_limiter import DEFAULT_INTERVAL, RateLimiter
from mr_conflict_checker.models import Author, MergeRequest, Namespace, Repository

LOG = logging.getLogger("mr_conflict_checker.adapters.gitlab")

T = TypeVar("T")

API_PREFIX = "/api/v4"
# GitLab maximum per_page
PER_PAGE = 100


def normalize_base_url(url: str) -> str:
    """Strip trailing slash and /api/v4 suffix; endpoints add the prefix."""
    url = url.rstrip("/")
    if url.endswith(API_PREFIX):
        url = url[: -len(API_PREFIX)]
    return url


def _parse_iso(s: str) -> datetime:
    return datetime.fromisoformat(s.replace("Z", "+00:00"))


def _repository_from_api(data: Dict[str, Any]) -> Repository:
    ns = data.get("namespace") or {}
    return Repository(
        id=data["id"],
        name=data.get("name") or "",
        web_url=data.get("web_url") or "",
        namespace=Namespace(
            id=ns.get("id") or 0,
            name=ns.get("name") or "",
            path=ns.get("path") or "",
        ),
    )


def _merge_request_from_api(data: Dict[str, Any]) -> MergeRequest:
    author = data.get("author") or {}
    changes_count = data.get("changes_count")
    return MergeRequest(
        id=data["iid"],
        title=data.get("title") or "",
        author=Author(
            name=author.get("name") or "",
            username=author.get("username") or "",
            email=author.get("email") or "",
        ),
        web_url=data.get("web_url") or "",
        source_branch=data.get("source_branch") or "",
        target_branch=data.get("target_branch") or "",
        has_conflicts=bool(data.get("has_conflicts")),
        created_at=_parse_iso(data["created_at"]),
        merge_status=data.get("merge_status"),
        changes_count=str(changes_count) if changes_count is not None else None,
    )


def _decode(parse: Callable[[Dict[str, Any]], T], data: Any, what: str) -> T:
    try:
        return parse(data)
    except (KeyError, TypeError, ValueError) as e:
        raise GitPlatformError(f"failed to decode {what}: {e}") from e


def _is_real_change(change: Dict[str, Any]) -> bool:
    if change.get("new_file") or change.get("renamed_file") or change.get("deleted_file"):
        return True
    return bool((change.get("diff") or "").strip())


class GitLabAdapter(GitPlatformAdapter):
    """GitLab API implementation with bearer auth and a per-client rate limiter.

    Use as a context manager (or call close()) so the limiter and the HTTP
    session are released with the client.
    """

    def __init__(
        self,
        url: str,
        token: str,
        cancel_event: threading.Event | None = None,
        timeout: float = 30,
        interval: float = DEFAULT_INTERVAL,
    ) -> None:
        self.base_url = normalize_base_url(url)
        self._timeout = timeout
        self._cancel_event = cancel_event
        self._rate_limiter = RateLimiter(interval)
        self._session = requests.Session()
        self._session.headers.update(
            {
                "Authorization": f"Bearer {token}",
                "Content-Type": "application/json",
            }
        )

    def __enter__(self) -> "GitLabAdapter":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Stop the rate limiter and close the HTTP session."""
        self._rate_limiter.close()
        self._session.close()

    def _request(self, method: str, path: str, params: Dict[str, Any] | None = None) -> requests.Response:
        self._rate_limiter.wait(self._cancel_event)
        url = f"{self.base_url}{API_PREFIX}{path}"
        LOG.debug("%s %s params=%s", method, url, params)
        try:
            resp = self._session.request(method, url, params=params, timeout=self._timeout)
        except requests.RequestException as e:
            raise TransportError(e) from e
        if resp.status_code == 401:
            raise AuthenticationFailed()
        if resp.status_code == 429:
            raise RateLimited()
        if resp.status_code >= 400:
            raise APIError(resp.status_code, resp.text)
        return resp

    def _get_json(self, path: str, params: Dict[str, Any] | None = None) -> Any:
        resp = self._request("GET", path, params=params)
        try:
            return resp.json()
        except ValueError as e:
            raise GitPlatformError(f"failed to decode response from {path}: {e}") from e

    def _get_all_pages(self, path: str, params: Dict[str, Any] | None = None) -> List[Dict[str, Any]]:
        """GET every page of a list endpoint.

        A page shorter than PER_PAGE ends pagination, so a full last page
        costs one extra request for the empty page after it.
        """
        items: List[Dict[str, Any]] = []
        page = 1
        while True:
            if self._cancel_event is not None and self._cancel_event.is_set():
                raise OperationCancelled()
            page_params = {**(params or {}), "page": page, "per_page": PER_PAGE}
            try:
                data = self._get_json(path, params=page_params)
            except GitPlatformError as e:
                LOG.debug("Listing %s failed on page %d: %s", path, page, e)
                raise
            if not isinstance(data, list):
                raise GitPlatformError(f"expected a list from {path}, got {type(data).__name__}")
            items.extend(data)
            if len(data) < PER_PAGE:
                return items
            page += 1

    def test_connection(self) -> None:
        """GET /user; succeeds on any 2xx."""
        self._request("GET", "/user")

    def list_repositories(self) -> List[Repository]:
        data_list = self._get_all_pages("/projects", params={"membership": "true"})
        return [_decode(_repository_from_api, data, "repository") for data in data_list]

    def list_merge_requests(
        self,
        repo_id: int,
        source_branch: str = "",
        target_branch: str = "",
    ) -> List[MergeRequest]:
        params: Dict[str, Any] = {"state": "opened"}
        if source_branch:
            params["source_branch"] = source_branch
        if target_branch:
            params["target_branch"] = target_branch
        data_list = self._get_all_pages(f"/projects/{repo_id}/merge_requests", params=params)
        return [_decode(_merge_request_from_api, data, "merge request") for data in data_list]

    def get_merge_request(self, repo_id: int, mr_id: int) -> MergeRequest:
        data = self._get_json(f"/projects/{repo_id}/merge_requests/{mr_id}")
        return _decode(_merge_request_from_api, data, "merge request")

    def get_merge_request_change_count(self, repo_id: int, mr_id: int) -> int:
        data = self._get_json(f"/projects/{repo_id}/merge_requests/{mr_id}/changes")
        if not isinstance(data, dict):
            raise GitPlatformError(f"expected an object from merge request {mr_id} changes")
        changes = data.get("changes") or []
        return sum(1 for change in changes if isinstance(change, dict) and _is_real_change(change))
