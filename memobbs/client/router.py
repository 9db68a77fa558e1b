"""Client routes and the guard that keeps ``/admin`` behind a login."""

from dataclasses import dataclass, field
from typing import Dict, Optional

from memobbs.client.stores import AuthStore

ROUTES = {
    "home": "/",
    "login": "/login",
    "admin": "/admin",
}
REQUIRES_AUTH = frozenset({"admin"})


@dataclass(frozen=True)
class Navigation:
    name: str
    path: str
    query: Dict[str, str] = field(default_factory=dict)


class Router:
    def __init__(self, auth: AuthStore):
        self.auth = auth
        self.current: Optional[Navigation] = None

    def resolve(self, path: str) -> Navigation:
        """Apply the guard to a requested path and return where navigation lands."""
        name = next((n for n, p in ROUTES.items() if p == path), None)
        if name is None:
            raise KeyError(f"Unknown route: {path}")

        if name in REQUIRES_AUTH and not self.auth.is_authenticated:
            return Navigation("login", ROUTES["login"], {"redirect": path})
        if name == "login" and self.auth.is_authenticated:
            return Navigation("admin", ROUTES["admin"])
        return Navigation(name, path)

    def push(self, path: str) -> Navigation:
        self.current = self.resolve(path)
        return self.current
