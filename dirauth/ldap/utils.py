from __future__ import annotations

from typing import Any, Mapping, Optional

from ldap3.utils.dn import escape_rdn

from .models import SearchConfig


def escape_ldap_filter_value(value: str) -> str:
    """RFC 4515 escaping for LDAP filter values."""
    out: list[str] = []
    for ch in value:
        if ch == "\\":
            out.append("\\5c")
        elif ch == "*":
            out.append("\\2a")
        elif ch == "(":
            out.append("\\28")
        elif ch == ")":
            out.append("\\29")
        elif ch == "\x00":
            out.append("\\00")
        else:
            out.append(ch)
    return "".join(out)


def normalize_filter_fragment(fragment: Optional[str]) -> str:
    """Wrap a raw filter fragment in parentheses if the caller left them out.

    "memberOf=cn=staff,dc=x" -> "(memberOf=cn=staff,dc=x)"
    """
    s = (fragment or "").strip()
    if not s:
        return ""
    if s.startswith("(") and s.endswith(")"):
        return s
    return f"({s})"


def build_user_filter(search: SearchConfig, username: str) -> str:
    terms = [
        f"(objectClass={escape_ldap_filter_value(search.object_class)})",
        f"({search.field}={escape_ldap_filter_value(username)})",
    ]
    extra = normalize_filter_fragment(search.filter)
    if extra:
        terms.append(extra)
    return "(&" + "".join(terms) + ")"


def user_dn(username: str, base_dn: str) -> str:
    """DN of a provisioned user: cn=<username>,<base_dn>."""
    return f"cn={escape_rdn(username)},{base_dn}"


def first_value(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return value[0] if value else None
    return value


def get_attribute(attributes: Mapping[str, Any], name: str) -> Any:
    """Case-insensitive attribute lookup (LDAP attribute names are case-insensitive)."""
    if name in attributes:
        return attributes[name]
    lname = name.lower()
    for k, v in attributes.items():
        if k.lower() == lname:
            return v
    return None


def entry_email(attributes: Mapping[str, Any]) -> Optional[str]:
    for name in ("mail", "email", "userPrincipalName"):
        v = first_value(get_attribute(attributes, name))
        if v:
            return str(v)
    return None
