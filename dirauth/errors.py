from __future__ import annotations


class DirectoryAuthError(Exception):
    """Superclass for all exceptions"""


class DirectoryConnectionError(DirectoryAuthError):
    """The directory service could not be reached or dropped the link"""


class BindError(DirectoryAuthError):
    """The administrative (service account) bind was rejected"""

    def __init__(self, dn: str, message: str = "") -> None:
        super().__init__(message or f'Administrative bind failed for "{dn}"')
        self.dn = dn


class InvalidCredentialsError(DirectoryAuthError):
    def __init__(self, user: str) -> None:
        super().__init__(f'Invalid credentials for user "{user}"')
        self.user = user


class DuplicateUserError(DirectoryAuthError):
    def __init__(self, user: str) -> None:
        super().__init__(f'User "{user}" already exists in the directory')
        self.user = user


class ProvisionError(DirectoryAuthError):
    """Creating a directory entry failed"""


class ConfigurationError(DirectoryAuthError):
    """dirauth was configured incorrectly"""
