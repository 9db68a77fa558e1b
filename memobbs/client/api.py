"""Thin synchronous wrapper over the memo board HTTP API."""

import logging
from typing import Any, Callable, Dict, Iterable, List, Optional

import httpx

from memobbs.core.errors import ErrorCode

logger = logging.getLogger(__name__)

API_PREFIX = "/api"
RENEWAL_HEADER = "X-New-Token"
DEFAULT_TIMEOUT_SECS = 10.0


class ApiClientError(Exception):
    """Non-2xx response, or a transport failure (``status_code`` 0)."""

    def __init__(self, status_code: int, error: str, code: Optional[str] = None):
        super().__init__(f"{status_code}: {error}")
        self.status_code = status_code
        self.error = error
        self.code = code

    @property
    def is_token_expired(self) -> bool:
        return self.status_code == 401 and self.code == ErrorCode.TOKEN_EXPIRED

    @classmethod
    def from_response(cls, response: httpx.Response) -> "ApiClientError":
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}
        error = body.get("error") or f"HTTP error! status: {response.status_code}"
        return cls(response.status_code, str(error), body.get("code"))


class MemoApiClient:
    """Calls the ``/api`` endpoints and reports renewed tokens to listeners.

    ``http`` may be any ``httpx.Client``; FastAPI's ``TestClient`` works too.
    """

    def __init__(
        self,
        base_url: str = "",
        http: Optional[httpx.Client] = None,
        timeout: float = DEFAULT_TIMEOUT_SECS,
    ):
        self.http = http if http is not None else httpx.Client(base_url=base_url, timeout=timeout)
        self._token_listeners: List[Callable[[str], None]] = []

    def on_new_token(self, callback: Callable[[str], None]) -> None:
        self._token_listeners.append(callback)

    def close(self) -> None:
        self.http.close()

    def _request(self, method: str, path: str, token: Optional[str] = None, **kwargs) -> Any:
        headers = dict(kwargs.pop("headers", None) or {})
        if token:
            headers["Authorization"] = f"Bearer {token}"

        try:
            response = self.http.request(method, f"{API_PREFIX}{path}", headers=headers, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} failed: {e}")
            raise ApiClientError(0, f"Network error: {e}") from e

        renewed = response.headers.get(RENEWAL_HEADER)
        if renewed:
            for listener in self._token_listeners:
                listener(renewed)

        if response.is_error:
            raise ApiClientError.from_response(response)
        return response.json()

    # ===== AUTH =====

    def login(self, username: str, password: str) -> str:
        return self._request("POST", "/auth/login", json={"username": username, "password": password})["token"]

    def refresh(self, token: str) -> str:
        return self._request("POST", "/auth/refresh", token=token)["token"]

    def verify(self, token: str) -> Dict[str, Any]:
        return self._request("GET", "/auth/verify", token=token)

    # ===== MEMOS =====

    def list_memos(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/memos")

    def get_memo(self, memo_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/memos/{memo_id}")

    def get_memos_by_date(self, date: str) -> List[Dict[str, Any]]:
        return self._request("GET", f"/memos/date/{date}")

    def search_memos(self, query: str, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        params: Dict[str, Any] = {"q": query}
        if limit is not None:
            params["limit"] = limit
        return self._request("GET", "/memos/search", params=params)

    def get_stats(self, year: int, month: int) -> Dict[str, int]:
        return self._request("GET", f"/memos/stats/{year}/{month}")

    def create_memo(
        self,
        content: str,
        resources: Iterable[Dict[str, Any]] = (),
        tags: Iterable[str] = (),
    ) -> Dict[str, Any]:
        payload = {"content": content, "resources": list(resources), "tags": list(tags)}
        return self._request("POST", "/memos", json=payload)

    def update_memo(
        self,
        token: Optional[str],
        memo_id: str,
        content: str,
        resources: Iterable[Dict[str, Any]] = (),
        tags: Iterable[str] = (),
    ) -> Dict[str, Any]:
        payload = {"content": content, "resources": list(resources), "tags": list(tags)}
        return self._request("PUT", f"/memos/{memo_id}", token=token, json=payload)

    def delete_memo(self, token: Optional[str], memo_id: str) -> Dict[str, Any]:
        return self._request("DELETE", f"/memos/{memo_id}", token=token)

    # ===== RESOURCES =====

    def upload_resource(
        self, filename: str, data: bytes, content_type: str = "application/octet-stream"
    ) -> Dict[str, Any]:
        return self._request("POST", "/resources", files={"file": (filename, data, content_type)})

    def health(self) -> Dict[str, Any]:
        return self._request("GET", "/health")
