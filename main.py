import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from civic_reporter import config
from civic_reporter.database.config import engine, Base
from civic_reporter.errors import ApiError, InternalServerError, SchemaValidationError
from civic_reporter.middleware.timing import timing_middleware
from civic_reporter.routes import departments_router, issues_router

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: Create tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield

    # Shutdown: Dispose of the engine
    await engine.dispose()

app = FastAPI(title="Civic Issue Reporter", lifespan=lifespan, debug=config.DEBUG)

app.middleware("http")(timing_middleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s | %(name)s | %(message)s",
)


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Render anything unexpected as a JSON 500; detail only in development."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    error = InternalServerError(error=str(exc) if config.DEBUG else None)
    return JSONResponse(status_code=error.status_code, content=error.to_body())


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report malformed request bodies as 400s in the same shape as other errors."""
    error = SchemaValidationError.from_pydantic(exc.errors())
    logger.warning(
        f"Rejected {request.method} {request.url.path}",
        extra={"errors": error.extra["errors"]},
    )
    return JSONResponse(status_code=error.status_code, content=error.to_body())


app.include_router(departments_router)
app.include_router(issues_router)
