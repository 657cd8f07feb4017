from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .env_settings import get_env
from .errors import DirectoryAuthError
from .log_config import setup_logging
from .routers import auth as auth_router

log = logging.getLogger(__name__)


@asynccontextmanager
async def _lifespan(app: FastAPI):
    env = get_env()
    setup_logging(level=env.log_level, log_dir=env.log_dir, retention_days=env.log_retention_days)
    log.info("dirauth started (LDAP url=%s)", env.ldap_url)
    yield


def create_app() -> FastAPI:
    app = FastAPI(title="dirauth", lifespan=_lifespan)
    app.include_router(auth_router.router)

    # Settings are resolved as a dependency; their errors never reach the endpoint body.
    @app.exception_handler(DirectoryAuthError)
    async def _directory_auth_error(request: Request, exc: DirectoryAuthError) -> JSONResponse:
        log.warning("%s %s failed: %s", request.method, request.url.path, exc)
        return auth_router.error_response(exc)

    @app.get("/health")
    def health():
        return {"ok": True}

    return app


app = create_app()
