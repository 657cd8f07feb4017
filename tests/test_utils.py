import pytest

from dirauth.ldap.models import SearchConfig, SearchScope
from dirauth.ldap.utils import (
    build_user_filter,
    entry_email,
    escape_ldap_filter_value,
    first_value,
    normalize_filter_fragment,
    user_dn,
)


@pytest.mark.parametrize(
    ["value", "expected"],
    [
        ("bob", "bob"),
        ("a*b", r"a\2ab"),
        ("(x)", r"\28x\29"),
        ("back\\slash", r"back\5cslash"),
        ("nul\x00", r"nul\00"),
    ],
)
def test_escape_ldap_filter_value(value: str, expected: str) -> None:
    assert escape_ldap_filter_value(value) == expected


@pytest.mark.parametrize(
    ["fragment", "expected"],
    [
        (None, ""),
        ("", ""),
        ("  ", ""),
        ("ou=staff", "(ou=staff)"),
        ("(ou=staff)", "(ou=staff)"),
        (" (|(ou=a)(ou=b)) ", "(|(ou=a)(ou=b))"),
    ],
)
def test_normalize_filter_fragment(fragment, expected: str) -> None:
    assert normalize_filter_fragment(fragment) == expected


def test_build_user_filter() -> None:
    search = SearchConfig(base_dn="dc=x", field="uid", object_class="person")
    assert build_user_filter(search, "bob") == "(&(objectClass=person)(uid=bob))"


def test_build_user_filter_with_fragment() -> None:
    search = SearchConfig(
        base_dn="dc=x",
        field="sAMAccountName",
        object_class="user",
        scope=SearchScope.SUBTREE,
        filter="!(userAccountControl:1.2.840.113556.1.4.803:=2)",
    )
    assert (
        build_user_filter(search, "j.doe")
        == "(&(objectClass=user)(sAMAccountName=j.doe)(!(userAccountControl:1.2.840.113556.1.4.803:=2)))"
    )


def test_user_dn() -> None:
    assert user_dn("alice", "ou=people,dc=x") == "cn=alice,ou=people,dc=x"
    assert user_dn("a+b", "dc=x") == r"cn=a\+b,dc=x"


@pytest.mark.parametrize(
    ["attributes", "expected"],
    [
        ({"mail": ["a@x.com"], "email": "b@x.com"}, "a@x.com"),
        ({"email": "b@x.com", "userPrincipalName": "c@x.com"}, "b@x.com"),
        ({"userPrincipalName": ["c@x.com"]}, "c@x.com"),
        ({"MAIL": ["upper@x.com"]}, "upper@x.com"),
        ({"mail": [], "userPrincipalName": "c@x.com"}, "c@x.com"),
        ({"cn": ["bob"]}, None),
    ],
)
def test_entry_email(attributes: dict, expected) -> None:
    assert entry_email(attributes) == expected


def test_first_value() -> None:
    assert first_value(["a", "b"]) == "a"
    assert first_value([]) is None
    assert first_value("a") == "a"


@pytest.mark.parametrize(
    ["value", "expected"],
    [
        ("base", SearchScope.BASE),
        ("one", SearchScope.ONE),
        ("sub", SearchScope.SUBTREE),
        ("SUBTREE", SearchScope.SUBTREE),
        (SearchScope.ONE, SearchScope.ONE),
    ],
)
def test_search_scope_parse(value, expected: SearchScope) -> None:
    assert SearchScope.parse(value) is expected


def test_search_scope_parse_invalid() -> None:
    with pytest.raises(ValueError):
        SearchScope.parse("children")
