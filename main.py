import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import InterfaceError, OperationalError
from starlette.middleware.cors import CORSMiddleware

from config import settings
from core.errors import ApiError, ServerError, ServiceUnavailableError, ValidationError
from services.db import dispose_engine, init_db
from api.v1.router import api_router

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
_LOG = logging.getLogger("diet_planner")


@asynccontextmanager
async def lifespan(_: FastAPI):
    if settings.auto_create_tables:
        await init_db()
    yield
    await dispose_engine()


app = FastAPI(title="Diet Planner API", version="1.0.0", lifespan=lifespan)

# CORS (public demo only – lock down in prod)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


# ───────── error rendering: {"error": code, "details": ...} ─────────
def _render(exc: ApiError) -> JSONResponse:
    return JSONResponse(status_code=exc.status, content={"error": exc.code, "details": exc.details})


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    if exc.status >= 500:
        _LOG.error("%s %s → %s", request.method, request.url.path, exc)
    return _render(exc)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        f"{'.'.join(str(p) for p in err['loc'] if p != 'body')}: {err['msg']}"
        for err in exc.errors()
    ]
    return _render(ValidationError("VALIDATION_ERROR", details))


@app.exception_handler(OperationalError)
@app.exception_handler(InterfaceError)
async def database_down_handler(request: Request, exc: Exception) -> JSONResponse:
    _LOG.error("database unavailable on %s %s: %s", request.method, request.url.path, exc)
    return _render(ServiceUnavailableError(details="Database is unavailable, try again later"))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    _LOG.exception("unhandled error on %s %s", request.method, request.url.path)
    return _render(ServerError(details="Internal server error"))


app.include_router(api_router, prefix="/api/v1")


@app.get("/health", tags=["meta"])
def health() -> dict[str, str]:
    return {"status": "ok", "env": settings.env_name}
