import pytest

from dirauth.errors import DirectoryConnectionError, InvalidCredentialsError
from dirauth.ldap.models import DirectoryEntry
from dirauth.ldap.search import SearchSettlement, first_search_outcome
from dirauth.ldap.transport import SearchEnd, SearchEntry, SearchFailure, TransportError

ENTRY = DirectoryEntry("uid=bob,dc=x", {"uid": ["bob"]})
OTHER = DirectoryEntry("uid=bob2,dc=x", {"uid": ["bob2"]})


def test_settlement_entry_wins_over_later_events() -> None:
    settlement = SearchSettlement("bob")

    assert settlement.on_entry(ENTRY)
    assert not settlement.on_error(TransportError("late"))
    assert not settlement.on_end()
    assert not settlement.on_entry(OTHER)

    assert settlement.result() is ENTRY


def test_settlement_end_wins_over_later_entry() -> None:
    settlement = SearchSettlement("ghost")

    assert settlement.on_end()
    assert not settlement.on_entry(ENTRY)

    with pytest.raises(InvalidCredentialsError) as exc_info:
        settlement.result()
    assert exc_info.value.user == "ghost"


def test_settlement_error_wins_over_later_entry() -> None:
    settlement = SearchSettlement("bob")
    err = TransportError("boom")

    assert settlement.on_error(err)
    assert not settlement.on_entry(ENTRY)

    with pytest.raises(DirectoryConnectionError) as exc_info:
        settlement.result()
    assert exc_info.value.__cause__ is err


def test_settlement_result_before_settling() -> None:
    settlement = SearchSettlement("bob")

    assert not settlement.settled
    with pytest.raises(RuntimeError):
        settlement.result()


def test_settlement_is_settled_by_first_event() -> None:
    settlement = SearchSettlement("bob")

    assert settlement.on_end()
    assert settlement.settled
    assert not settlement.on_entry(ENTRY)
    with pytest.raises(InvalidCredentialsError):
        settlement.result()


def test_settlement_rejects_unknown_events() -> None:
    with pytest.raises(TypeError):
        SearchSettlement("bob").dispatch("entry")  # type: ignore[arg-type]


def test_first_search_outcome_with_plain_list() -> None:
    events = [SearchEntry(ENTRY), SearchEntry(OTHER), SearchEnd()]

    assert first_search_outcome(events, "bob") is ENTRY


def test_first_search_outcome_exhausted_stream_is_not_found() -> None:
    with pytest.raises(InvalidCredentialsError):
        first_search_outcome(iter([]), "bob")


def test_first_search_outcome_failure_event() -> None:
    with pytest.raises(DirectoryConnectionError):
        first_search_outcome([SearchFailure(TransportError("down")), SearchEntry(ENTRY)], "bob")


def test_first_search_outcome_closes_stream() -> None:
    closed = []
    read = []

    def stream():
        try:
            for event in (SearchEntry(ENTRY), SearchEntry(OTHER), SearchEnd()):
                read.append(event)
                yield event
        finally:
            closed.append(True)

    assert first_search_outcome(stream(), "bob") is ENTRY
    assert closed == [True]
    assert len(read) == 1
