from __future__ import annotations

from typing import Any


def _email_key(email: object) -> str:
    return str(email or "").strip().lower()


class DocumentUsersRepository:
    def __init__(self, users: list[dict[str, Any]]) -> None:
        self._users = users

    def add(self, *, user: dict[str, Any]) -> dict[str, Any]:
        item = dict(user)
        self._users.append(item)
        return item

    def get_by_email(self, *, email: str) -> dict[str, Any] | None:
        wanted = _email_key(email)
        if not wanted:
            return None
        for row in self._users:
            if isinstance(row, dict) and _email_key(row.get("email")) == wanted:
                return dict(row)
        return None

    def exists(self, *, email: str) -> bool:
        return self.get_by_email(email=email) is not None
