import pytest

from dirauth.ldap import ConnectionConfig, DirectoryAuthClient, SearchConfig
from dirauth.ldap.models import SearchScope
from tests.fakes import FakeDirectory, FakeTransport

ADMIN_DN = "cn=admin,dc=x"
ADMIN_PASSWORD = "adminpw"
BOB_DN = "uid=bob,dc=x"


@pytest.fixture
def directory() -> FakeDirectory:
    d = FakeDirectory()
    d.add_entry(ADMIN_DN, {"cn": ["admin"], "objectClass": ["person"], "userPassword": [ADMIN_PASSWORD]})
    d.add_entry(
        BOB_DN,
        {
            "uid": ["bob"],
            "cn": ["Bob B"],
            "mail": ["bob@x.com"],
            "objectClass": ["top", "person"],
            "userPassword": ["secret"],
        },
    )
    return d


@pytest.fixture
def transport(directory: FakeDirectory) -> FakeTransport:
    return FakeTransport(directory)


@pytest.fixture
def client(transport: FakeTransport) -> DirectoryAuthClient:
    return DirectoryAuthClient(transport)


@pytest.fixture
def connection_config() -> ConnectionConfig:
    return ConnectionConfig(
        url="ldap://ldap.x:389",
        timeout=2.0,
        bind_dn=ADMIN_DN,
        bind_credentials=ADMIN_PASSWORD,
    )


@pytest.fixture
def search_config() -> SearchConfig:
    return SearchConfig(base_dn="dc=x", field="uid", object_class="person", scope=SearchScope.SUBTREE)
