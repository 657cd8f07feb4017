from .ldap import ldap_authenticate, ldap_provision, user_payload

__all__ = ["ldap_authenticate", "ldap_provision", "user_payload"]
