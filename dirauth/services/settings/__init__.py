"""Settings service package.

Typed LDAP settings (schema) and loading from the dotted option surface or
from the environment.
"""
from __future__ import annotations

from typing import Any, Mapping

from pydantic import ValidationError

from ...errors import ConfigurationError
from .schema import BindSettings, LdapSettings, SearchSettings


def load_ldap_settings(options: Mapping[str, Any]) -> LdapSettings:
    """Validate dotted options; invalid settings raise ConfigurationError."""
    try:
        return LdapSettings.from_options(options)
    except ValidationError as e:
        errors = "; ".join(
            f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg', '')}" for err in e.errors()
        )
        raise ConfigurationError(f"Invalid LDAP settings: {errors}") from e


__all__ = [
    "BindSettings",
    "LdapSettings",
    "SearchSettings",
    "load_ldap_settings",
]
