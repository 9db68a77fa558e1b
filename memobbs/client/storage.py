"""Places the auth store can keep its token between runs."""

import json
import logging
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)

TOKEN_KEY = "admin_token"


class MemoryTokenStorage:
    def __init__(self, token: Optional[str] = None):
        self._token = token

    def get(self) -> Optional[str]:
        return self._token

    def set(self, token: str) -> None:
        self._token = token

    def clear(self) -> None:
        self._token = None


class JsonFileTokenStorage:
    """Keeps the token under ``admin_token`` in a small JSON file."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def _read(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable token file {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def get(self) -> Optional[str]:
        token = self._read().get(TOKEN_KEY)
        return token if isinstance(token, str) and token else None

    def set(self, token: str) -> None:
        data = self._read()
        data[TOKEN_KEY] = token
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data), encoding="utf-8")

    def clear(self) -> None:
        data = self._read()
        if data.pop(TOKEN_KEY, None) is None:
            return
        self.path.write_text(json.dumps(data), encoding="utf-8")
