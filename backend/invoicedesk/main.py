import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from invoicedesk.core.config import settings
from invoicedesk.core.database import reset_database
from invoicedesk.core.exceptions import ConfigurationError, DataFetchError, MutationError
from invoicedesk.routers import customers, dashboard, invoices, seed

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

OPENAPI_TAGS = [
    {"name": "Dashboard", "description": "Revenue, latest invoices and summary cards."},
    {"name": "Invoices", "description": "Search, create, update and delete invoices."},
    {"name": "Customers", "description": "Customer listing with invoice totals."},
    {"name": "Seed", "description": "Bootstrap the schema and placeholder data."},
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Dispose the database pool on shutdown."""
    yield
    reset_database()


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.version,
    description="Invoice management dashboard API.",
    openapi_tags=OPENAPI_TAGS,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(DataFetchError)
async def data_fetch_error_handler(request: Request, exc: DataFetchError) -> JSONResponse:
    return JSONResponse(status_code=500, content={"detail": str(exc)})


@app.exception_handler(MutationError)
async def mutation_error_handler(request: Request, exc: MutationError) -> JSONResponse:
    return JSONResponse(status_code=500, content={"detail": str(exc)})


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(
    request: Request, exc: ConfigurationError
) -> JSONResponse:
    logger.error("Database is not configured: %s", exc)
    return JSONResponse(status_code=500, content={"detail": str(exc)})


app.include_router(dashboard.router, prefix="/dashboard", tags=["Dashboard"])
app.include_router(invoices.router, prefix="/dashboard/invoices", tags=["Invoices"])
app.include_router(customers.router, prefix="/dashboard/customers", tags=["Customers"])
app.include_router(seed.router, prefix="/seed", tags=["Seed"])


@app.get("/")
async def root() -> dict[str, str]:
    return {
        "app": settings.APP_NAME,
        "version": settings.version,
        "status": "running",
    }


@app.get("/health")
async def health_check() -> dict[str, str]:
    return {"status": "ok"}
