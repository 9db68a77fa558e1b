"""
Unit tests for the client-side stores, token storage and route guard.
"""

from datetime import timedelta
from unittest.mock import Mock

import pytest

from memobbs.client import (
    ApiClientError,
    AuthStore,
    JsonFileTokenStorage,
    MemoApiClient,
    MemoStore,
    MemoryTokenStorage,
    Router,
)
from memobbs.core.errors import ErrorCode

# Same credentials as the settings fixture in conftest.py
ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "correct-horse-battery"


def expired_error() -> ApiClientError:
    return ApiClientError(401, "Token expired", ErrorCode.TOKEN_EXPIRED)


@pytest.fixture
def api(client) -> MemoApiClient:
    return MemoApiClient(http=client)


@pytest.fixture
def auth(api) -> AuthStore:
    return AuthStore(api)


@pytest.fixture
def memo_store(api, auth) -> MemoStore:
    return MemoStore(api, auth)


class TestTokenStorage:
    def test_memory_storage(self):
        storage = MemoryTokenStorage()
        assert storage.get() is None
        storage.set("abc")
        assert storage.get() == "abc"
        storage.clear()
        assert storage.get() is None

    def test_json_file_storage_persists(self, tmp_path):
        path = tmp_path / "state" / "token.json"
        JsonFileTokenStorage(path).set("abc")
        assert JsonFileTokenStorage(path).get() == "abc"
        JsonFileTokenStorage(path).clear()
        assert JsonFileTokenStorage(path).get() is None

    def test_corrupt_file_is_ignored(self, tmp_path):
        path = tmp_path / "token.json"
        path.write_text("{not json", encoding="utf-8")
        assert JsonFileTokenStorage(path).get() is None


class TestAuthStore:
    def test_login_and_logout(self, auth):
        changes = []
        auth.subscribe(lambda store: changes.append(store.is_authenticated))

        auth.login(ADMIN_USERNAME, ADMIN_PASSWORD)
        assert auth.is_authenticated
        assert auth.get_auth_header().startswith("Bearer ")

        auth.logout()
        assert not auth.is_authenticated
        assert auth.get_auth_header() == ""
        assert changes == [True, False]

    def test_failed_login_keeps_anonymous(self, auth):
        with pytest.raises(ApiClientError) as exc_info:
            auth.login(ADMIN_USERNAME, "wrong")
        assert exc_info.value.code == ErrorCode.INVALID_CREDENTIALS
        assert not auth.is_authenticated

    def test_token_restored_from_storage(self, api, admin_token):
        auth = AuthStore(api, MemoryTokenStorage(admin_token))
        assert auth.is_authenticated

    def test_refresh_with_expired_token_logs_out(self, api, token_factory):
        storage = MemoryTokenStorage(token_factory(issued_offset=-timedelta(hours=25)))
        auth = AuthStore(api, storage)
        assert auth.refresh() is False
        assert not auth.is_authenticated
        assert storage.get() is None

    def test_unsubscribe(self, auth):
        calls = []
        unsubscribe = auth.subscribe(lambda store: calls.append(1))
        unsubscribe()
        auth.logout()
        assert calls == []


class TestMemoStore:
    def test_fetch_memos(self, memo_store, sample_memos):
        memo_store.fetch_memos()
        assert len(memo_store.memos) == 5
        assert memo_store.loading is False
        assert memo_store.error is None

    def test_fetch_by_date_and_clear(self, memo_store, sample_memos):
        memo_store.fetch_memos_by_date("2024-02-29")
        assert memo_store.selected_date == "2024-02-29"
        assert len(memo_store.displayed_memos) == 2

        memo_store.clear_date_filter()
        assert memo_store.selected_date is None
        assert len(memo_store.displayed_memos) == 5

    def test_displayed_memos_filter_locally(self, memo_store, sample_memos):
        memo_store.fetch_memos()
        memo_store.selected_date = "2024-03-01"
        assert [m["content"]["raw"] for m in memo_store.displayed_memos] == ["March first, at midnight"]

    def test_fetch_error_is_captured(self, memo_store):
        memo_store.fetch_memos_by_date("not-a-date")
        assert memo_store.error == "Failed to fetch memos"
        assert memo_store.displayed_memos == []

    def test_create_prepends(self, memo_store, sample_memos):
        memo_store.fetch_memos()
        memo = memo_store.create_memo("fresh memo", tags=["new"])
        assert memo_store.memos[0]["id"] == memo["id"]
        assert memo["tags"] == ["new"]

    def test_update_and_delete_as_admin(self, memo_store, auth, sample_memos):
        auth.login(ADMIN_USERNAME, ADMIN_PASSWORD)
        memo_store.fetch_memos()
        target = memo_store.memos[0]["id"]

        updated = memo_store.update_memo(target, "edited")
        assert updated["content"]["raw"] == "edited"
        assert memo_store.memos[0]["content"]["raw"] == "edited"

        memo_store.delete_memo(target)
        assert all(m["id"] != target for m in memo_store.memos)

    def test_renewed_token_is_adopted(self, memo_store, auth, token_factory, sample_memos):
        stale = token_factory(issued_offset=-timedelta(hours=23, minutes=30))
        auth.adopt_token(stale)
        memo_store.delete_memo(sample_memos[0].id)
        assert auth.token != stale
        assert auth.is_authenticated

    def test_expired_session_ends_in_logout(self, memo_store, auth, token_factory, sample_memos):
        auth.adopt_token(token_factory(issued_offset=-timedelta(hours=25)))
        with pytest.raises(ApiClientError) as exc_info:
            memo_store.delete_memo(sample_memos[0].id)
        assert exc_info.value.code == ErrorCode.TOKEN_EXPIRED
        assert not auth.is_authenticated
        memo_store.fetch_memos()
        assert sample_memos[0].id in [m["id"] for m in memo_store.memos]

    def test_stats(self, memo_store, sample_memos):
        stats = memo_store.fetch_stats(2024, 2)
        assert len(stats) == 29
        assert stats["2024-02-29"] == 2


class TestRefreshRetry:
    """An admin call is retried at most once, after a refresh"""

    @pytest.fixture
    def fake_api(self):
        fake = Mock()
        fake.refresh.return_value = "fresh-token"
        return fake

    def test_retry_succeeds_after_refresh(self, fake_api):
        fake_api.delete_memo.side_effect = [expired_error(), {"message": "Memo deleted successfully"}]
        auth = AuthStore(fake_api, MemoryTokenStorage("old-token"))
        store = MemoStore(fake_api, auth)

        store.delete_memo("m1")

        assert fake_api.delete_memo.call_count == 2
        assert fake_api.delete_memo.call_args_list[1].args == ("fresh-token", "m1")

    def test_second_failure_propagates(self, fake_api):
        fake_api.delete_memo.side_effect = [expired_error(), expired_error(), {"message": "unreachable"}]
        auth = AuthStore(fake_api, MemoryTokenStorage("old-token"))
        store = MemoStore(fake_api, auth)

        with pytest.raises(ApiClientError):
            store.delete_memo("m1")
        assert fake_api.delete_memo.call_count == 2
        assert fake_api.refresh.call_count == 1

    def test_other_errors_are_not_retried(self, fake_api):
        fake_api.delete_memo.side_effect = ApiClientError(404, "Memo not found", ErrorCode.NOT_FOUND)
        auth = AuthStore(fake_api, MemoryTokenStorage("old-token"))

        with pytest.raises(ApiClientError):
            MemoStore(fake_api, auth).delete_memo("m1")
        fake_api.refresh.assert_not_called()


class TestRouterGuard:
    def test_admin_requires_login(self):
        router = Router(AuthStore(Mock(), MemoryTokenStorage()))
        navigation = router.push("/admin")
        assert navigation.name == "login"
        assert navigation.query == {"redirect": "/admin"}

    def test_logged_in_user_skips_login_page(self):
        router = Router(AuthStore(Mock(), MemoryTokenStorage("token")))
        assert router.push("/login").name == "admin"
        assert router.push("/admin").name == "admin"

    def test_home_is_public(self):
        assert Router(AuthStore(Mock(), MemoryTokenStorage())).push("/").name == "home"

    def test_unknown_route(self):
        with pytest.raises(KeyError):
            Router(AuthStore(Mock(), MemoryTokenStorage())).resolve("/nowhere")
