"""Observable client-side state mirroring the server's memo collection."""

import logging
from typing import Any, Callable, Dict, Iterable, List, Optional, TypeVar

from memobbs.client.api import ApiClientError, MemoApiClient
from memobbs.client.storage import MemoryTokenStorage
from memobbs.core import clock

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Store:
    """Holds state and calls subscribers after every change."""

    def __init__(self):
        self._subscribers: List[Callable[["Store"], None]] = []

    def subscribe(self, callback: Callable[["Store"], None]) -> Callable[[], None]:
        """Register ``callback``; the returned function unsubscribes it."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _notify(self) -> None:
        for callback in list(self._subscribers):
            callback(self)


class AuthStore(Store):
    """Admin session: the current token, persisted through a token storage."""

    def __init__(self, api: MemoApiClient, storage=None):
        super().__init__()
        self.api = api
        self.storage = storage if storage is not None else MemoryTokenStorage()
        self.token: Optional[str] = self.storage.get()
        api.on_new_token(self.adopt_token)

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def _set_token(self, token: Optional[str]) -> None:
        self.token = token
        if token:
            self.storage.set(token)
        else:
            self.storage.clear()
        self._notify()

    def login(self, username: str, password: str) -> None:
        try:
            token = self.api.login(username, password)
        except ApiClientError as e:
            logger.warning(f"Login error: {e.error}")
            raise
        self._set_token(token)

    def logout(self) -> None:
        self._set_token(None)

    def refresh(self) -> bool:
        """Swap the current token for a fresh one; log out when that is refused."""
        if not self.token:
            return False
        try:
            token = self.api.refresh(self.token)
        except ApiClientError as e:
            logger.info(f"Token refresh failed ({e.code or e.status_code}), logging out")
            self.logout()
            return False
        self._set_token(token)
        return True

    def adopt_token(self, token: str) -> None:
        """Take a token the server renewed through the response header."""
        if token and token != self.token:
            self._set_token(token)

    def get_auth_header(self) -> str:
        return f"Bearer {self.token}" if self.token else ""


class MemoStore(Store):
    """Memo list, selected date filter and monthly stats."""

    def __init__(self, api: MemoApiClient, auth: AuthStore):
        super().__init__()
        self.api = api
        self.auth = auth
        self.memos: List[Dict[str, Any]] = []
        self.loading = False
        self.error: Optional[str] = None
        self.selected_date: Optional[str] = None
        self.stats: Dict[str, int] = {}

    @property
    def displayed_memos(self) -> List[Dict[str, Any]]:
        """Memos created inside ``[selected_date, selected_date + 1 day)``, or all of them."""
        if not self.selected_date:
            return list(self.memos)
        try:
            start, end = clock.day_bounds(clock.parse_date(self.selected_date))
        except ValueError:
            return []
        return [memo for memo in self.memos if clock.in_day(memo["createdAt"], start, end)]

    def _authorized(self, call: Callable[[Optional[str]], T]) -> T:
        """Run an admin call, retrying once after a refresh when the token expired.

        The memo server refuses to refresh a token that has already expired,
        so against it an expired session ends in logout and the original error
        is raised. The retry only succeeds with a server that still renews
        expired tokens. Tokens inside the renewal window are swapped through
        the ``X-New-Token`` header before they expire.
        """
        try:
            return call(self.auth.token)
        except ApiClientError as e:
            if not e.is_token_expired or not self.auth.refresh():
                raise
        return call(self.auth.token)

    def _load(self, fetch: Callable[[], List[Dict[str, Any]]]) -> None:
        self.loading = True
        self.error = None
        self._notify()
        try:
            self.memos = fetch()
        except ApiClientError as e:
            logger.error(f"Failed to fetch memos: {e}")
            self.error = "Failed to fetch memos"
        finally:
            self.loading = False
            self._notify()

    def fetch_memos(self) -> None:
        self._load(self.api.list_memos)

    def fetch_memos_by_date(self, date: str) -> None:
        self.selected_date = date
        self._load(lambda: self.api.get_memos_by_date(date))

    def clear_date_filter(self) -> None:
        self.selected_date = None
        self.fetch_memos()

    def search(self, query: str) -> None:
        self.selected_date = None
        self._load(lambda: self.api.search_memos(query))

    def create_memo(
        self,
        content: str,
        resources: Iterable[Dict[str, Any]] = (),
        tags: Iterable[str] = (),
    ) -> Dict[str, Any]:
        self.loading = True
        self.error = None
        try:
            memo = self.api.create_memo(content, resources, tags)
        except ApiClientError as e:
            logger.error(f"Create memo error: {e}")
            self.error = e.error or "Failed to create memo"
            raise
        finally:
            self.loading = False
        if not self.selected_date:
            self.memos = [memo] + self.memos
        self._notify()
        return memo

    def update_memo(
        self,
        memo_id: str,
        content: str,
        resources: Iterable[Dict[str, Any]] = (),
        tags: Iterable[str] = (),
    ) -> Dict[str, Any]:
        resources, tags = list(resources), list(tags)
        self.loading = True
        self.error = None
        try:
            memo = self._authorized(
                lambda token: self.api.update_memo(token, memo_id, content, resources, tags)
            )
        except ApiClientError as e:
            logger.error(f"Update memo error: {e}")
            self.error = e.error or "Failed to update memo"
            raise
        finally:
            self.loading = False
        self.memos = [memo if m["id"] == memo_id else m for m in self.memos]
        self._notify()
        return memo

    def delete_memo(self, memo_id: str) -> None:
        try:
            self._authorized(lambda token: self.api.delete_memo(token, memo_id))
        except ApiClientError as e:
            logger.error(f"Delete error: {e}")
            self.error = e.error or "Failed to delete memo"
            self._notify()
            raise
        self.memos = [m for m in self.memos if m["id"] != memo_id]
        self._notify()

    def fetch_stats(self, year: int, month: int) -> Dict[str, int]:
        try:
            self.stats = self.api.get_stats(year, month)
        except ApiClientError as e:
            logger.error(f"Failed to fetch stats for {year}-{month:02d}: {e}")
            self.error = "Failed to fetch stats"
            self.stats = {}
        self._notify()
        return self.stats
