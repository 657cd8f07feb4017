from __future__ import annotations

import logging
from typing import Iterable, Optional

from ..errors import DirectoryConnectionError, InvalidCredentialsError
from .models import DirectoryEntry
from .transport import SearchEnd, SearchEntry, SearchEvent, SearchFailure, TransportError

log = logging.getLogger(__name__)


class SearchSettlement:
    """First-wins outcome of a user search.

    Exactly one of entry / end / error settles it; every later event is a
    no-op. `result()` returns the entry or raises the mapped error.
    """

    def __init__(self, username: str) -> None:
        self.username = username
        self._settled = False
        self._entry: Optional[DirectoryEntry] = None
        self._error: Optional[Exception] = None

    @property
    def settled(self) -> bool:
        return self._settled

    def on_entry(self, entry: DirectoryEntry) -> bool:
        if self._settled:
            return False
        self._settled = True
        self._entry = entry
        log.debug("User found: %s", entry.dn)
        return True

    def on_end(self) -> bool:
        if self._settled:
            return False
        self._settled = True
        self._error = InvalidCredentialsError(self.username)
        log.info("User %r not found in directory", self.username)
        return True

    def on_error(self, error: Exception) -> bool:
        if self._settled:
            return False
        self._settled = True
        self._error = error
        log.warning("Search error for user %r: %s", self.username, error)
        return True

    def dispatch(self, event: SearchEvent) -> bool:
        if isinstance(event, SearchEntry):
            return self.on_entry(event.entry)
        if isinstance(event, SearchEnd):
            return self.on_end()
        if isinstance(event, SearchFailure):
            return self.on_error(event.error)
        raise TypeError(f"unknown search event: {event!r}")

    def result(self) -> DirectoryEntry:
        if not self.settled:
            raise RuntimeError("search has not settled")
        if self._entry is not None:
            return self._entry
        err = self._error
        if isinstance(err, InvalidCredentialsError):
            raise err
        raise DirectoryConnectionError(f"Directory search failed: {err}") from err


def first_search_outcome(events: Iterable[SearchEvent], username: str) -> DirectoryEntry:
    """Consume search events until the first one settles the search.

    The event stream is closed as soon as the outcome is known, so nothing
    after the deciding event is read. A stream that runs dry without an end
    event counts as an end.
    """
    settlement = SearchSettlement(username)
    stream = iter(events)
    try:
        for event in stream:
            if settlement.dispatch(event):
                break
        else:
            settlement.on_end()
    except TransportError as e:
        settlement.on_error(e)
    finally:
        close = getattr(stream, "close", None)
        if close is not None:
            close()
    return settlement.result()
