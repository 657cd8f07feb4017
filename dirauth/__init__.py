"""dirauth: LDAP username/password authentication and user provisioning."""

__version__ = "0.1.0"
