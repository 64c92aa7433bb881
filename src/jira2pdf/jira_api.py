# src/jira2pdf/jira_api.py
from __future__ import annotations

import logging
import time
from typing import Any, Iterator

import httpx

from .config import Settings
from .errors import AuthError, FetchError
from .parse import Issue, parse_issue

log = logging.getLogger(__name__)

MYSELF_PATH = "/rest/api/2/myself"
PROJECT_PATH = "/rest/api/2/project"
SEARCH_PATH = "/rest/api/2/search"


class JiraClient:
    def __init__(self, settings: Settings, client: httpx.Client | None = None) -> None:
        self.settings = settings
        self._owns_client = client is None
        self.client = client or settings.build_client()

    # lifecycle
    def close(self) -> None:
        if self._owns_client:
            self.client.close()

    def __enter__(self) -> "JiraClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # transport
    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        start = time.perf_counter()
        try:
            r = self.client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise FetchError(f"Jira {path} request failed: {e}") from e

        log.debug("HTTP response", extra={
            "method": method, "path": path, "status_code": r.status_code,
            "elapsed_ms": int((time.perf_counter() - start) * 1000),
        })
        if r.status_code in (401, 403):
            raise AuthError(f"Jira {path} returned {r.status_code}, check J2P_USERNAME/J2P_PASSWORD. Body: {r.text}")
        if r.status_code >= 400:
            raise FetchError(f"Jira {path} returned {r.status_code}. Body: {r.text}")
        try:
            return r.json()
        except ValueError as e:
            raise FetchError(f"Jira {path} returned a malformed body: {e}") from e

    # API
    def get_myself(self) -> dict:
        """Authentication sanity check."""
        data = self._request("GET", MYSELF_PATH)
        if not isinstance(data, dict):
            raise FetchError(f"Jira {MYSELF_PATH} returned an unexpected body")
        return data

    def list_project_keys(self) -> list[str]:
        data = self._request("GET", PROJECT_PATH)
        if not isinstance(data, list):
            raise FetchError(f"Jira {PROJECT_PATH} returned an unexpected body")
        keys = [p["key"] for p in data if isinstance(p, dict) and p.get("key")]
        log.info("Projects discovered", extra={"count": len(keys)})
        return keys

    def search_issues_stream(
        self,
        *,
        jql: str,
        fields: list[str] | None = None,
        page_size: int | None = None,
    ) -> Iterator[dict]:
        """
        Streams raw issues from POST /rest/api/2/search page by page.
        Stops at the first page holding fewer issues than the page size. Jira
        may cap maxResults below the requested size; the cap it reports in the
        response is then used as the page size.
        """
        if page_size is None:
            page_size = self.settings.page_size

        next_start = 0
        while True:
            payload: dict[str, Any] = {
                "jql": jql,
                "startAt": next_start,
                "maxResults": page_size,
            }
            if fields is not None:
                payload["fields"] = fields

            data = self._request("POST", SEARCH_PATH, json=payload)
            if not isinstance(data, dict) or not isinstance(data.get("issues") or [], list):
                raise FetchError(f"Jira {SEARCH_PATH} returned an unexpected body")

            issues = data.get("issues") or []
            log.info("Search page", extra={"jql": jql, "start_at": next_start, "count": len(issues)})
            for it in issues:
                yield it

            effective = page_size
            server_max = data.get("maxResults")
            if isinstance(server_max, int) and 0 < server_max < page_size:
                effective = server_max

            returned = len(issues)
            next_start += returned
            if returned < effective:
                break

    def fetch_issues(self, jql: str, fields: list[str] | None = None) -> list[Issue]:
        """Fetch every issue matching ``jql``; any failed page fails the whole fetch."""
        issues = [parse_issue(raw) for raw in self.search_issues_stream(jql=jql, fields=fields)]
        log.info("Fetch done", extra={"jql": jql, "count": len(issues)})
        return issues


__all__ = [
    "JiraClient",
    "MYSELF_PATH",
    "PROJECT_PATH",
    "SEARCH_PATH",
]
