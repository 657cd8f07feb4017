"""Application service layer.

Stable import surface for routers:
    from dirauth.services import ...
"""

from .auth import ldap_authenticate, ldap_provision, user_payload
from .settings import LdapSettings, load_ldap_settings

__all__ = [
    "ldap_authenticate",
    "ldap_provision",
    "user_payload",
    "LdapSettings",
    "load_ldap_settings",
]
