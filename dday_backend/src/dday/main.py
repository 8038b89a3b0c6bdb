import logging

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .clock import get_today
from .errors import DDayError
from .logging_config import configure_logging
from .routers import notifications as notifications_router
from .routers import tasks as tasks_router
from .settings import get_settings

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "health", "description": "Service health and status endpoints."},
    {
        "name": "tasks",
        "description": "CRUD operations for D-Day tasks with urgency ordering, filtering and pagination.",
    },
    {
        "name": "notifications",
        "description": "Which task reminders fire on a given day.",
    },
]

_settings = get_settings()
configure_logging(_settings.log_level)

app = FastAPI(
    title="D-Day Backend",
    description="Task tracker organized around a single target date (D-Day) per task.",
    version="0.1.0",
    openapi_tags=openapi_tags,
)

# Configure CORS based on settings (.env -> CORS_ALLOW_ORIGINS), with '*' fallback
allow_all = (_settings.cors_allow_origins == ["*"]) or (len(_settings.cors_allow_origins) == 0)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if allow_all else _settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Return a consistent JSON structure for request validation errors.

    Response format:
        {
            "error": "ValidationError",
            "detail": [... pydantic/fastapi error details ...],
            "message": "Request validation failed"
        }
    """
    return JSONResponse(
        status_code=422,
        content={
            "error": "ValidationError",
            "message": "Request validation failed",
            # ctx may carry the raised exception instance, which is not JSON serializable
            "detail": [{k: v for k, v in err.items() if k != "ctx"} for err in exc.errors()],
        },
    )


@app.exception_handler(DDayError)
async def dday_exception_handler(request: Request, exc: DDayError) -> JSONResponse:
    """
    Map engine errors raised outside body parsing (e.g. a bad query date) to 422.
    """
    logger.warning("%s on %s: %s", type(exc).__name__, request.url.path, exc)
    return JSONResponse(
        status_code=422,
        content={"error": type(exc).__name__, "message": str(exc)},
    )


# PUBLIC_INTERFACE
@app.get("/", summary="Health Check", tags=["health"])
def health_check(today=Depends(get_today)):
    """
    Health check endpoint.

    Returns:
        A JSON object indicating service health, the storage backend and the
        date the service currently treats as today.
    """
    return {"message": "Healthy", "backend": _settings.persistence_backend, "today": today.isoformat()}


# Include routers
app.include_router(tasks_router.router)
app.include_router(notifications_router.router)
