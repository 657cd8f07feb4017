from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ..env_settings import ldap_settings_from_env
from ..errors import (
    BindError,
    ConfigurationError,
    DirectoryAuthError,
    DirectoryConnectionError,
    DuplicateUserError,
    InvalidCredentialsError,
    ProvisionError,
)
from ..ldap import DirectoryAuthClient, ProvisionRequest
from ..services import LdapSettings, ldap_authenticate, ldap_provision

log = logging.getLogger(__name__)

router = APIRouter(prefix="/auth/ldap")

# (error class, kind, HTTP status, safe message)
_ERRORS: list[tuple[type[DirectoryAuthError], str, int, str]] = [
    (InvalidCredentialsError, "invalid_credentials", status.HTTP_401_UNAUTHORIZED, "Неверный логин или пароль."),
    (DuplicateUserError, "duplicate_user", status.HTTP_409_CONFLICT, "Пользователь уже существует."),
    (BindError, "bind_error", status.HTTP_502_BAD_GATEWAY, "Ошибка bind служебной учётной записи LDAP."),
    (ProvisionError, "provision_error", status.HTTP_502_BAD_GATEWAY, "Не удалось создать пользователя в LDAP."),
    (DirectoryConnectionError, "connection_error", status.HTTP_503_SERVICE_UNAVAILABLE, "LDAP-сервер недоступен."),
    (ConfigurationError, "configuration_error", status.HTTP_500_INTERNAL_SERVER_ERROR, "LDAP не настроен (проверьте настройки)."),
]


class LoginForm(BaseModel):
    username: str = Field(..., min_length=1, max_length=256)
    password: str = Field(..., min_length=1)


class RegisterForm(BaseModel):
    username: str = Field(..., min_length=1, max_length=256)
    display_name: str = Field(default="", max_length=256)
    email: str = Field(default="", max_length=320)
    password: str = Field(..., min_length=1)


def get_ldap_settings() -> LdapSettings:
    return ldap_settings_from_env()


def get_directory_client() -> DirectoryAuthClient:
    return DirectoryAuthClient()


def error_response(exc: DirectoryAuthError) -> JSONResponse:
    for cls, kind, code, message in _ERRORS:
        if isinstance(exc, cls):
            return JSONResponse({"ok": False, "error": kind, "message": message}, status_code=code)
    return JSONResponse(
        {"ok": False, "error": "error", "message": "Ошибка LDAP."},
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


@router.post("/login")
def login(
    form: LoginForm,
    settings: LdapSettings = Depends(get_ldap_settings),
    client: DirectoryAuthClient = Depends(get_directory_client),
):
    username = form.username.strip()
    try:
        user = ldap_authenticate(username, form.password, settings, client=client)
    except DirectoryAuthError as e:
        log.info("LDAP login failed for %r: %s", username, type(e).__name__)
        return error_response(e)
    return {"ok": True, "user": user}


@router.post("/users", status_code=status.HTTP_201_CREATED)
def register(
    form: RegisterForm,
    settings: LdapSettings = Depends(get_ldap_settings),
    client: DirectoryAuthClient = Depends(get_directory_client),
):
    request = ProvisionRequest(
        username=form.username.strip(),
        display_name=form.display_name.strip(),
        email=form.email.strip(),
        password=form.password,
    )
    try:
        ldap_provision(request, settings, client=client)
    except DirectoryAuthError as e:
        log.info("LDAP provisioning failed for %r: %s", request.username, type(e).__name__)
        return error_response(e)
    return {"ok": True}
