from __future__ import annotations

from dataclasses import dataclass


@dataclass
class AuthContext:
    """Bearer token used by the HTTP gateway for one caller."""

    token: str | None = None

    def set_token(self, token: str | None) -> None:
        cleaned = (token or "").strip()
        self.token = cleaned or None

    def clear_token(self) -> None:
        self.token = None

    @property
    def authenticated(self) -> bool:
        return bool(self.token)

    def headers(self) -> dict[str, str]:
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}
