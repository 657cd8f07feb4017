"""LDAP directory authentication package.

Public API:
    - ConnectionConfig, SearchConfig, SearchScope
    - DirectoryEntry, ProvisionRequest
    - DirectoryAuthClient
"""

from .models import AuthStage, ConnectionConfig, DirectoryEntry, ProvisionRequest, SearchConfig, SearchScope
from .client import DirectoryAuthClient
from .transport import DirectoryConnection, DirectoryTransport, Ldap3Transport, TransportError

__all__ = [
    "AuthStage",
    "ConnectionConfig",
    "DirectoryEntry",
    "ProvisionRequest",
    "SearchConfig",
    "SearchScope",
    "DirectoryAuthClient",
    "DirectoryConnection",
    "DirectoryTransport",
    "Ldap3Transport",
    "TransportError",
]
