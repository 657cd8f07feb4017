from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .services.settings import LdapSettings, load_ldap_settings


class EnvSettings(BaseSettings):
    model_config = SettingsConfigDict(populate_by_name=True)

    ldap_url: str = Field("ldap://localhost:389", alias="LDAP_URL")
    ldap_timeout: float = Field(1.0, alias="LDAP_TIMEOUT")
    ldap_bind_dn: str = Field("", alias="LDAP_BIND_DN")
    ldap_bind_credentials: str = Field("", alias="LDAP_BIND_CREDENTIALS")
    ldap_search_dn: str = Field("", alias="LDAP_SEARCH_DN")
    ldap_search_field: str = Field("uid", alias="LDAP_SEARCH_FIELD")
    ldap_search_class: str = Field("top", alias="LDAP_SEARCH_CLASS")
    ldap_search_scope: str = Field("subtree", alias="LDAP_SEARCH_SCOPE")
    ldap_search_filter: Optional[str] = Field(None, alias="LDAP_SEARCH_FILTER")

    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_dir: str = Field("data/logs", alias="LOG_DIR")
    log_retention_days: int = Field(30, alias="LOG_RETENTION_DAYS")


@lru_cache(maxsize=1)
def get_env() -> EnvSettings:
    return EnvSettings()


def ldap_settings_from_env(env: Optional[EnvSettings] = None) -> LdapSettings:
    env = env or get_env()
    return load_ldap_settings(
        {
            "url": env.ldap_url,
            "timeout": env.ldap_timeout,
            "bind.dn": env.ldap_bind_dn,
            "bind.credentials": env.ldap_bind_credentials,
            "search.dn": env.ldap_search_dn,
            "search.field": env.ldap_search_field,
            "search.objectClass": env.ldap_search_class,
            "search.scope": env.ldap_search_scope,
            "search.filter": env.ldap_search_filter,
        }
    )
