from __future__ import annotations

from typing import Any, Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ...ldap.models import ConnectionConfig, SearchConfig, SearchScope

ScopeName = Literal["base", "one", "sub", "subtree"]

_URL_SCHEMES = ("ldap://", "ldaps://", "ldapi://")


class BindSettings(BaseModel):
    dn: str = Field(default="", max_length=1024)
    credentials: str = Field(default="")  # plaintext

    @field_validator("dn")
    @classmethod
    def _strip(cls, v: str) -> str:
        return (v or "").strip()


class SearchSettings(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    dn: str = Field(..., min_length=1, max_length=1024)
    field: str = Field(default="uid", min_length=1, max_length=128)
    object_class: str = Field(default="top", alias="objectClass", min_length=1, max_length=128)
    scope: ScopeName = Field(default="subtree")
    filter: Optional[str] = Field(default=None)

    @field_validator("dn", "field", "object_class")
    @classmethod
    def _strip_required(cls, v: str) -> str:
        s = (v or "").strip()
        if not s:
            raise ValueError("Значение не может быть пустым.")
        return s

    @field_validator("field", "object_class")
    @classmethod
    def _validate_attribute_name(cls, v: str) -> str:
        if any(ch in v for ch in "()=*\\ "):
            raise ValueError(f"Некорректное имя атрибута LDAP: '{v}'.")
        return v

    @field_validator("scope", mode="before")
    @classmethod
    def _normalize_scope(cls, v: Any) -> Any:
        return (v or "subtree").strip().lower() if isinstance(v, str) else v

    @field_validator("filter")
    @classmethod
    def _blank_filter_is_none(cls, v: Optional[str]) -> Optional[str]:
        s = (v or "").strip()
        return s or None


class LdapSettings(BaseModel):
    url: str = Field(..., min_length=1)
    timeout: float = Field(default=1.0, gt=0, le=300)
    bind: BindSettings = Field(default_factory=BindSettings)
    search: SearchSettings

    @field_validator("url")
    @classmethod
    def _validate_url(cls, v: str) -> str:
        s = (v or "").strip()
        if not s.lower().startswith(_URL_SCHEMES):
            raise ValueError("LDAP URL должен начинаться с ldap://, ldaps:// или ldapi://.")
        return s

    @classmethod
    def from_options(cls, options: Mapping[str, Any]) -> "LdapSettings":
        """Build settings from the dotted option names (`bind.dn`, `search.objectClass`, ...)."""
        nested: dict[str, Any] = {}
        for key, value in options.items():
            if value is None:
                continue
            head, _, tail = key.partition(".")
            if tail:
                nested.setdefault(head, {})[tail] = value
            else:
                nested[head] = value
        return cls.model_validate(nested)

    def to_connection_config(self) -> ConnectionConfig:
        return ConnectionConfig(
            url=self.url,
            timeout=self.timeout,
            bind_dn=self.bind.dn or None,
            bind_credentials=self.bind.credentials or None,
        )

    def to_search_config(self) -> SearchConfig:
        return SearchConfig(
            base_dn=self.search.dn,
            field=self.search.field,
            object_class=self.search.object_class,
            scope=SearchScope.parse(self.search.scope),
            filter=self.search.filter,
        )
