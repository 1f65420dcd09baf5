"""
Identity model as returned by the LMS backend (`/users/me`, login, register).

The backend is loose about types: ids may be numbers and roles may arrive in
lower case. Both are normalized here so the rest of the app compares plain
strings and `Role` members.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from .domain import Role


class Identity(BaseModel):
    """Authenticated user: `{id, name, email, role}`."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    name: str
    email: str
    role: Role

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_str(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("role", mode="before")
    @classmethod
    def _role_upper(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN

    def to_view(self) -> dict:
        """Plain dict for UI components (navigation, profile)."""
        return {"id": self.id, "name": self.name, "email": self.email, "role": self.role.value}
