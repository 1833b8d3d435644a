"""FastAPI application entrypoint.

Responsibilities kept minimal:
  * App / lifespan initialization
  * Router registration (auth, users, tasks)
  * Cross-cutting concerns: metrics middleware & exception handlers
"""

from contextlib import asynccontextmanager
import logging
import os
from fastapi import FastAPI, Request, Response
try:  # Optional OpenTelemetry
    from opentelemetry import trace
    from opentelemetry.sdk.resources import Resource
    from opentelemetry.sdk.trace import TracerProvider
    from opentelemetry.sdk.trace.export import BatchSpanProcessor
    from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
    _otel_available = True
except ImportError:  # pragma: no cover
    _otel_available = False
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST

from .api.auth import router as auth_router
from .api.users import router as users_router
from .api.tasks import router as tasks_router
from .db.session import engine, Base
from .errors import BaseAppException
from .logging_config import configure_logging
from .metrics import REQUEST_COUNT, REQUEST_LATENCY

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):  # pragma: no cover - simple startup path
    """Initialize database schema (idempotent for tests)."""
    Base.metadata.create_all(bind=engine)
    logger.info("taskboard started (database %s)", engine.url.render_as_string(hide_password=True))
    yield


# --- Optional .env loading (opt-in via APP_LOAD_DOTENV) ---
if os.getenv("APP_LOAD_DOTENV") in {"1", "true", "TRUE", "yes", "on"}:  # pragma: no cover
    try:
        from dotenv import load_dotenv  # type: ignore
        # Respect existing env (override=False). Default search walks up from CWD.
        load_dotenv(override=False)
    except ImportError:
        logger.warning("APP_LOAD_DOTENV set but python-dotenv is not installed")

configure_logging()

app = FastAPI(title="Taskboard API", version="0.1.0", lifespan=lifespan)

# --- OpenTelemetry Tracing (optional) ---
if _otel_available and os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT"):
    endpoint = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT")
    resource = Resource.create({"service.name": "taskboard-backend"})
    provider = TracerProvider(resource=resource)
    exporter = OTLPSpanExporter(endpoint=endpoint)
    provider.add_span_processor(BatchSpanProcessor(exporter))
    trace.set_tracer_provider(provider)
    tracer = trace.get_tracer(__name__)
else:  # pragma: no cover
    tracer = None

# --- CORS (for local frontend dev) ---
cors_origins_env = os.getenv("CORS_ALLOW_ORIGINS")
if cors_origins_env:
    allow_origins = [o.strip() for o in cors_origins_env.split(",") if o.strip()]
else:
    allow_origins = ["http://localhost:3000"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Register routers once ---
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(tasks_router)


def _path_label(path: str) -> str:
    for prefix in ("/tasks/", "/users/"):
        if path.startswith(prefix) and len(path) > len(prefix):
            return prefix + ":id"
    return path


@app.middleware("http")
async def metrics_middleware(request: Request, call_next):
    path_label = _path_label(request.url.path)
    method = request.method
    status_code = 500  # unless call_next returns a response
    try:
        with REQUEST_LATENCY.labels(method=method, path=path_label).time():
            if tracer:
                with tracer.start_as_current_span(f"HTTP {method} {path_label}"):
                    response: Response = await call_next(request)
            else:
                response: Response = await call_next(request)
        status_code = response.status_code
    finally:
        REQUEST_COUNT.labels(method=method, path=path_label, status=str(status_code)).inc()
    return response


@app.get("/metrics")
def metrics():  # pragma: no cover - external scrape
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


@app.exception_handler(BaseAppException)
async def app_exception_handler(request: Request, exc: BaseAppException):
    return JSONResponse(
        status_code=exc.http_status,
        content={"detail": {"code": exc.code, "message": exc.message}},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):  # pragma: no cover
    logger.exception("unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"detail": {"code": "INTERNAL_ERROR", "message": "unexpected error"}},
    )


@app.get("/healthz")
async def health():
    health = {"status": "ok", "database": engine.dialect.name}
    # Tracing status
    health['tracing'] = 'enabled' if tracer else 'disabled'
    return health
