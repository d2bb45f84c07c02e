"""
DFS CRM — sales CRM backend.

App factory wiring: logging, session middleware, rate limiting, error
handlers, and the router mounts. Business logic lives in services/.
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from loguru import logger
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.middleware.sessions import SessionMiddleware

from . import __version__
from .config import settings
from .connector_status import log_connector_status
from .errors import CRMError, crm_error_handler
from .http_client import close_clients
from .logging_config import setup_logging
from .rate_limit import limiter
from .routers import crm, integration, reports, settings as settings_router

setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    log_connector_status()
    logger.info("DFS CRM {} started", __version__)
    yield
    await close_clients()


app = FastAPI(title="DFS CRM", version=__version__, lifespan=lifespan)
app.state.limiter = limiter
app.add_middleware(SlowAPIMiddleware)
app.add_middleware(SessionMiddleware, secret_key=settings.secret_key)
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_exception_handler(CRMError, crm_error_handler)

app.include_router(crm.router)
app.include_router(integration.router)
app.include_router(reports.router)
app.include_router(settings_router.router)


@app.get("/health")
async def health():
    return {"status": "ok", "version": __version__}
