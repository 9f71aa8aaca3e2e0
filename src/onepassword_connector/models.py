"""Pydantic models for the JSON documents returned by the ``op`` CLI."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class OpObject(BaseModel):
    """Fields shared by every ``op`` object."""

    model_config = ConfigDict(extra="ignore")

    id: str
    name: str = ""


class User(OpObject):
    """User as listed by ``op user list`` and the vault/group member lists."""

    email: str = ""
    type: str = ""
    state: str = ""
    role: str = ""
    permissions: list[str] = Field(default_factory=list)


class Group(OpObject):
    """Group as listed by ``op group list`` and ``op vault group list``."""

    description: str = ""
    state: str = ""
    created_at: str = ""
    permissions: list[str] = Field(default_factory=list)


class Vault(OpObject):
    content_version: int = 0


class Account(OpObject):
    domain: str = ""
    type: str = ""
    state: str = ""
    created_at: str = ""


class AuthResponse(BaseModel):
    """Output of ``op whoami``."""

    model_config = ConfigDict(extra="ignore")

    url: str = ""
    email: str = ""
    user_uuid: str = ""
    account_uuid: str = ""
    shorthand: str = ""


__all__ = [
    "Account",
    "AuthResponse",
    "Group",
    "OpObject",
    "User",
    "Vault",
]
