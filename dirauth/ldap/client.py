from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterator, Optional

from ldap3.core.results import RESULT_ENTRY_ALREADY_EXISTS

from ..errors import (
    BindError,
    ConfigurationError,
    DirectoryConnectionError,
    DuplicateUserError,
    InvalidCredentialsError,
    ProvisionError,
)
from .models import AuthStage, ConnectionConfig, ProvisionRequest, SearchConfig
from .search import first_search_outcome
from .transport import DirectoryConnection, DirectoryTransport, Ldap3Transport, TransportError
from .utils import build_user_filter, user_dn

log = logging.getLogger(__name__)


class _Attempt:
    """Tracks the stage of one operation for logging."""

    def __init__(self, operation: str, username: str) -> None:
        self.operation = operation
        self.username = username
        self.stage = AuthStage.IDLE

    def advance(self, stage: AuthStage) -> None:
        log.debug("%s %r: %s -> %s", self.operation, self.username, self.stage.value, stage.value)
        self.stage = stage


def new_user_attributes(search: SearchConfig, request: ProvisionRequest) -> dict[str, Any]:
    object_classes: list[str] = []
    for oc in (search.object_class, "organizationalPerson", "person"):
        if oc and oc not in object_classes:
            object_classes.append(oc)

    attrs: dict[str, Any] = {
        "cn": request.username,
        "sn": request.display_name or request.username,
        "objectClass": object_classes,
        "userPassword": request.password,
    }
    if request.email:
        attrs["mail"] = request.email
    return attrs


class DirectoryAuthClient:
    """Authenticates users against (and provisions users into) an LDAP directory.

    Every call opens its own connection and closes it exactly once before
    returning, whatever the outcome. Transport failures never leave this
    class: they are re-raised as one of the `dirauth.errors` kinds.
    """

    def __init__(self, transport: Optional[DirectoryTransport] = None) -> None:
        self.transport: DirectoryTransport = transport or Ldap3Transport()

    @contextmanager
    def _connection(self, cfg: ConnectionConfig, attempt: _Attempt) -> Iterator[DirectoryConnection]:
        attempt.advance(AuthStage.CONNECTING)
        try:
            conn = self.transport.open(cfg.url, cfg.timeout)
        except TransportError as e:
            attempt.advance(AuthStage.CLOSED)
            log.warning("Unable to connect to %s: %s", cfg.url, e)
            raise DirectoryConnectionError(f"Unable to connect to {cfg.url}") from e

        try:
            yield conn
        finally:
            try:
                conn.unbind()
            except Exception as e:
                log.debug("Ignoring error while closing connection to %s: %s", cfg.url, e)
            attempt.advance(AuthStage.CLOSED)

    def authenticate(
        self,
        connection: ConnectionConfig,
        search: SearchConfig,
        username: str,
        password: str,
    ) -> dict[str, Any]:
        """Verify `username`/`password` and return the user's directory attributes.

        The returned mapping holds the entry's attributes plus its `dn`.

        Raises:
            DirectoryConnectionError: the directory could not be reached or the search failed.
            BindError: the configured administrative bind was rejected.
            InvalidCredentialsError: unknown user or wrong password (deliberately not told apart).
        """
        if not username or not password:
            log.info("Rejecting login with empty username or password")
            raise InvalidCredentialsError(username)

        log.debug("Login attempt for %r (url=%s, search.dn=%s, search.field=%s, search.objectClass=%s)",
                  username, connection.url, search.base_dn, search.field, search.object_class)

        attempt = _Attempt("authenticate", username)
        with self._connection(connection, attempt) as conn:
            if connection.has_admin_bind:
                attempt.advance(AuthStage.ADMIN_BINDING)
                try:
                    conn.bind(connection.bind_dn or "", connection.bind_credentials or "")
                except TransportError as e:
                    log.warning("Admin bind as %s failed: %s", connection.bind_dn, e)
                    raise BindError(connection.bind_dn or "") from e

            attempt.advance(AuthStage.SEARCHING)
            flt = build_user_filter(search, username)
            log.debug("Searching %s (scope=%s) with filter %s", search.base_dn, search.scope.value, flt)
            try:
                events = conn.search(search.base_dn, flt, search.scope)
            except TransportError as e:
                log.warning("Search request for %r failed: %s", username, e)
                raise DirectoryConnectionError(f"Directory search failed: {e}") from e
            entry = first_search_outcome(events, username)

            attempt.advance(AuthStage.CREDENTIAL_BINDING)
            try:
                conn.bind(entry.dn, password)
            except TransportError as e:
                log.info("User bind failed for %s: %s", entry.dn, e)
                raise InvalidCredentialsError(username) from None

            result = dict(entry.attributes)
            result.setdefault("dn", entry.dn)

        log.info("User %r authenticated as %s", username, entry.dn)
        return result

    def provision(
        self,
        connection: ConnectionConfig,
        search: SearchConfig,
        request: ProvisionRequest,
    ) -> bool:
        """Create `cn=<username>,<search.base_dn>`; the directory decides on collisions."""
        if not connection.has_admin_bind:
            raise ConfigurationError("Provisioning users requires bind.dn and bind.credentials")
        if not request.username or not request.password:
            raise ProvisionError("Username and password are required to provision a user")

        dn = user_dn(request.username, search.base_dn)
        attrs = new_user_attributes(search, request)

        attempt = _Attempt("provision", request.username)
        with self._connection(connection, attempt) as conn:
            attempt.advance(AuthStage.ADMIN_BINDING)
            try:
                conn.bind(connection.bind_dn or "", connection.bind_credentials or "")
            except TransportError as e:
                log.error("Admin bind as %s failed, cannot provision users: %s", connection.bind_dn, e)
                raise ConfigurationError("Failed to bind with LDAP admin credentials") from e

            log.debug("Adding user entry %s (objectClass=%s)", dn, attrs["objectClass"])
            try:
                conn.add(dn, attrs)
            except TransportError as e:
                if e.code == RESULT_ENTRY_ALREADY_EXISTS:
                    log.info("User %s already exists", dn)
                    raise DuplicateUserError(request.username) from e
                log.warning("Adding %s failed (code=%s): %s", dn, e.code, e)
                raise ProvisionError(f"Failed to create user in LDAP: {e}") from e

        log.info("User %r created as %s", request.username, dn)
        return True
