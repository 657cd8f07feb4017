"""Directory transport: the boundary between dirauth and the LDAP wire protocol.

`DirectoryAuthClient` only talks to `DirectoryTransport` / `DirectoryConnection`.
`Ldap3Transport` is the production implementation on top of ldap3; tests plug
in an in-memory directory instead.

Every transport failure is raised as `TransportError` (with the LDAP result
code when the server sent one). Search results are delivered as a stream of
events: zero or more `SearchEntry`, then `SearchEnd` or `SearchFailure`.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterator, Optional, Protocol, Union

from ldap3 import (
    ALL_ATTRIBUTES,
    BASE,
    LEVEL,
    NONE,
    SIMPLE,
    SUBTREE,
    SYNC,
    Connection,
    Server,
)
from ldap3.core.exceptions import LDAPException
from ldap3.core.results import RESULT_SIZE_LIMIT_EXCEEDED, RESULT_SUCCESS

from .models import DirectoryEntry, SearchScope

log = logging.getLogger(__name__)


class TransportError(Exception):
    def __init__(self, message: str, code: Optional[int] = None) -> None:
        super().__init__(message)
        self.code = code


@dataclass(frozen=True)
class SearchEntry:
    entry: DirectoryEntry


@dataclass(frozen=True)
class SearchEnd:
    pass


@dataclass(frozen=True)
class SearchFailure:
    error: Exception


SearchEvent = Union[SearchEntry, SearchEnd, SearchFailure]


class DirectoryConnection(Protocol):
    def bind(self, dn: str, credentials: str) -> None: ...

    def search(self, base_dn: str, search_filter: str, scope: SearchScope) -> Iterator[SearchEvent]: ...

    def add(self, dn: str, attributes: dict[str, Any]) -> None: ...

    def unbind(self) -> None: ...


class DirectoryTransport(Protocol):
    def open(self, url: str, timeout: float) -> DirectoryConnection: ...


_LDAP3_SCOPES = {
    SearchScope.BASE: BASE,
    SearchScope.ONE: LEVEL,
    SearchScope.SUBTREE: SUBTREE,
}


def _transport_error(e: LDAPException) -> TransportError:
    code = getattr(e, "result", None)
    return TransportError(str(e), code=code if isinstance(code, int) else None)


def _result_error(conn: Connection, what: str) -> TransportError:
    res = dict(conn.result or {})
    desc = res.get("description") or res.get("message") or "unknown error"
    code = res.get("result")
    return TransportError(f"{what}: {desc}", code=code if isinstance(code, int) else None)


class Ldap3Connection:
    """One ldap3 connection; used by exactly one operation at a time."""

    def __init__(self, conn: Connection) -> None:
        self._conn = conn

    def bind(self, dn: str, credentials: str) -> None:
        self._conn.user = dn
        self._conn.password = credentials
        try:
            ok = self._conn.bind()
        except LDAPException as e:
            raise _transport_error(e) from e
        if not ok:
            raise _result_error(self._conn, "bind failed")

    def search(self, base_dn: str, search_filter: str, scope: SearchScope) -> Iterator[SearchEvent]:
        try:
            self._conn.search(
                search_base=base_dn,
                search_filter=search_filter,
                search_scope=_LDAP3_SCOPES[scope],
                attributes=ALL_ATTRIBUTES,
            )
        except LDAPException as e:
            yield SearchFailure(_transport_error(e))
            return

        res = dict(self._conn.result or {})
        # a size-limited search still carries usable entries
        if res.get("result", RESULT_SUCCESS) not in (RESULT_SUCCESS, RESULT_SIZE_LIMIT_EXCEEDED):
            yield SearchFailure(_result_error(self._conn, "search failed"))
            return

        for item in self._conn.response or []:
            if item.get("type") != "searchResEntry":
                continue
            attrs = dict(item.get("attributes") or {})
            yield SearchEntry(DirectoryEntry(dn=str(item.get("dn") or ""), attributes=attrs))
        yield SearchEnd()

    def add(self, dn: str, attributes: dict[str, Any]) -> None:
        try:
            ok = self._conn.add(dn, attributes=attributes)
        except LDAPException as e:
            raise _transport_error(e) from e
        if not ok:
            raise _result_error(self._conn, "add failed")

    def unbind(self) -> None:
        try:
            self._conn.unbind()
        except LDAPException as e:
            raise _transport_error(e) from e


class Ldap3Transport:
    """Opens plain ldap3 connections (SYNC strategy, no server schema read)."""

    def __init__(self, client_strategy: str = SYNC) -> None:
        self.client_strategy = client_strategy

    def make_server(self, url: str, timeout: float) -> Server:
        return Server(url, get_info=NONE, connect_timeout=timeout)

    def open(self, url: str, timeout: float) -> Ldap3Connection:
        log.debug("Opening LDAP connection to %s (timeout=%ss)", url, timeout)
        try:
            server = self.make_server(url, timeout)
            conn = Connection(
                server,
                authentication=SIMPLE,
                auto_bind=False,
                client_strategy=self.client_strategy,
                raise_exceptions=True,
                receive_timeout=timeout,
            )
            conn.open()
        except LDAPException as e:
            raise _transport_error(e) from e
        return Ldap3Connection(conn)
