from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class SearchScope(str, Enum):
    BASE = "base"
    ONE = "one"
    SUBTREE = "subtree"

    @classmethod
    def parse(cls, value: "str | SearchScope") -> "SearchScope":
        if isinstance(value, cls):
            return value
        s = (value or "").strip().lower()
        if s == "sub":
            return cls.SUBTREE
        return cls(s)


class AuthStage(str, Enum):
    IDLE = "idle"
    CONNECTING = "connecting"
    ADMIN_BINDING = "admin_binding"
    SEARCHING = "searching"
    CREDENTIAL_BINDING = "credential_binding"
    CLOSED = "closed"


@dataclass(frozen=True)
class ConnectionConfig:
    url: str
    timeout: float = 1.0
    bind_dn: Optional[str] = None
    bind_credentials: Optional[str] = field(default=None, repr=False)

    @property
    def has_admin_bind(self) -> bool:
        return bool((self.bind_dn or "").strip())


@dataclass(frozen=True)
class SearchConfig:
    base_dn: str
    field: str = "uid"
    object_class: str = "top"
    scope: SearchScope = SearchScope.SUBTREE
    filter: Optional[str] = None


@dataclass
class DirectoryEntry:
    """Entry returned by a search; valid only while its connection is open."""

    dn: str
    attributes: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ProvisionRequest:
    username: str
    display_name: str = ""
    email: str = ""
    password: str = field(default="", repr=False)
