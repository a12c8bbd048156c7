import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from postgrest.exceptions import APIError
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from fieldbase.config import settings
from fieldbase.core.exceptions import AppError, to_action_error, status_code_for
from fieldbase.core.rate_limit import limiter
from fieldbase.core.responses import failure
from fieldbase.modules.users import routes as users_routes
from fieldbase.modules.auth import routes as auth_routes
from fieldbase.modules.workspaces import routes as workspaces_routes
from fieldbase.modules.projects import routes as projects_routes
from fieldbase.modules.tables import routes as tables_routes
from fieldbase.modules.fields import routes as fields_routes
from fieldbase.modules.records import routes as records_routes
from fieldbase.modules.invitations import routes as invitations_routes

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application startup")
    yield
    logger.info("Application shutdown")


app = FastAPI(
    lifespan=lifespan,
    title=settings.app_name,
    debug=settings.debug,
    redirect_slashes=False,
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


def _failure_response(exc: Exception) -> JSONResponse:
    error = to_action_error(exc, expose_unknown=not settings.is_production)
    return JSONResponse(status_code=status_code_for(error), content=failure(error))


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return _failure_response(exc)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return _failure_response(exc)


@app.exception_handler(APIError)
async def store_exception_handler(request: Request, exc: APIError):
    logger.error(f"Store error on {request.method} {request.url.path}: {exc.code} {exc.message}")
    return _failure_response(exc)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception: %s", exc)
    return _failure_response(exc)


class SecurityHeadersMiddleware:
    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        async def send_with_headers(message):
            if message["type"] == "http.response.start":
                message.setdefault("headers", [])
                message["headers"].extend([
                    (b"X-Content-Type-Options", b"nosniff"),
                    (b"X-Frame-Options", b"DENY"),
                    (b"X-XSS-Protection", b"1; mode=block"),
                ])
            await send(message)

        await self.app(scope, receive, send_with_headers)


app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include module routes
app.include_router(auth_routes.router, prefix="/api/v1")
app.include_router(users_routes.router, prefix="/api/v1")
app.include_router(workspaces_routes.router, prefix="/api/v1")
app.include_router(projects_routes.router, prefix="/api/v1")
app.include_router(tables_routes.router, prefix="/api/v1")
app.include_router(fields_routes.router, prefix="/api/v1")
app.include_router(records_routes.router, prefix="/api/v1")
app.include_router(invitations_routes.router, prefix="/api/v1")
app.include_router(invitations_routes.landing_router)


@app.get("/")
async def root():
    return {"message": "Welcome to fieldbase", "status": "healthy"}


@app.get("/health")
@limiter.exempt
async def health():
    return {"status": "healthy"}


@app.get("/ready")
@limiter.exempt
async def ready():
    """Readiness check: extend here with a Supabase round-trip if needed."""
    return {"status": "ready"}
