"""
Login session: the user object returned by /auth is kept on disk under a fixed key.
Every bill request reads the bearer token from here.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from core.exceptions import ApiRequestError
from core.interfaces import ITokenStorage
from core.models import ApiError
from providers.http import HttpTransport

logger = logging.getLogger(__name__)


class FileTokenStorage(ITokenStorage):
    """JSON file acting as durable client-side storage: {"<key>": <user>}."""

    def __init__(self, path: str | Path, key: str = "user") -> None:
        self._path = Path(path)
        self._key = key

    def _read_all(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            with open(self._path, encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Ignoring unreadable session file %s: %s", self._path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def load(self) -> dict[str, Any] | None:
        user = self._read_all().get(self._key)
        return user if isinstance(user, dict) else None

    def save(self, user: dict[str, Any]) -> None:
        data = self._read_all()
        data[self._key] = user
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with open(self._path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)

    def clear(self) -> None:
        data = self._read_all()
        if self._key not in data:
            return
        del data[self._key]
        with open(self._path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)


class AuthService:
    """register / login / logout against the /auth endpoints."""

    def __init__(self, transport: HttpTransport, storage: ITokenStorage, auth_path: str = "/auth") -> None:
        self._http = transport
        self._storage = storage
        self._auth_path = "/" + auth_path.strip("/")

    def _authenticate(self, action: str, user_data: dict[str, Any]) -> dict[str, Any]:
        data = self._http.request("POST", f"{self._auth_path}/{action}", json=user_data, auth=False)
        if not isinstance(data, dict) or not data.get("token"):
            raise ApiRequestError(ApiError(message=f"{action.capitalize()} response has no token", data=data))
        self._storage.save(data)
        logger.info("%s succeeded for %s", action.capitalize(), data.get("email") or data.get("name") or "user")
        return data

    def register(self, user_data: dict[str, Any]) -> dict[str, Any]:
        return self._authenticate("register", user_data)

    def login(self, user_data: dict[str, Any]) -> dict[str, Any]:
        return self._authenticate("login", user_data)

    def logout(self) -> None:
        self._storage.clear()

    @property
    def current_user(self) -> dict[str, Any] | None:
        return self._storage.load()

    @property
    def is_logged_in(self) -> bool:
        return self._storage.token() is not None
