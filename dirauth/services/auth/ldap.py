from __future__ import annotations

from typing import Any, Mapping, Optional

from ...ldap import DirectoryAuthClient, ProvisionRequest
from ...ldap.utils import entry_email, first_value, get_attribute
from ..settings import LdapSettings


_HIDDEN_ATTRIBUTES = {"userpassword", "unicodepwd"}


def _public_attributes(attributes: Mapping[str, Any]) -> dict[str, Any]:
    # password hashes and binary values (photos, certificates) are not exposed
    out: dict[str, Any] = {}
    for name, value in attributes.items():
        if name.lower() in _HIDDEN_ATTRIBUTES:
            continue
        values = value if isinstance(value, (list, tuple)) else [value]
        if any(isinstance(v, (bytes, bytearray)) for v in values):
            continue
        out[name] = value
    return out


def user_payload(username: str, attributes: Mapping[str, Any]) -> dict:
    """Session-ready user data built from an authenticated entry."""
    display = first_value(get_attribute(attributes, "displayName")) or first_value(get_attribute(attributes, "cn"))
    dn = first_value(get_attribute(attributes, "dn")) or first_value(get_attribute(attributes, "distinguishedName"))
    return {
        "username": username,
        "display_name": str(display or username),
        "email": entry_email(attributes),
        "dn": str(dn or ""),
        "auth": "ldap",
        "attributes": _public_attributes(attributes),
    }


def ldap_authenticate(
    username: str,
    password: str,
    settings: LdapSettings,
    client: Optional[DirectoryAuthClient] = None,
) -> dict:
    """Аутентификация пользователя через LDAP.

    Returns the user payload; dirauth.errors propagate unchanged.
    """
    client = client or DirectoryAuthClient()
    attributes = client.authenticate(
        settings.to_connection_config(),
        settings.to_search_config(),
        username,
        password,
    )
    return user_payload(username, attributes)


def ldap_provision(
    request: ProvisionRequest,
    settings: LdapSettings,
    client: Optional[DirectoryAuthClient] = None,
) -> bool:
    client = client or DirectoryAuthClient()
    return client.provision(settings.to_connection_config(), settings.to_search_config(), request)
