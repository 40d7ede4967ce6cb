import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from invoicedesk.core.cache import ListingCache, get_listing_cache
from invoicedesk.core.database import Database, get_database
from invoicedesk.services.seed_service import SeedService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "",
    summary="Seed the database",
    responses={500: {"description": "Seeding failed"}},
)
def seed_database(
    db: Database = Depends(get_database),
    cache: ListingCache = Depends(get_listing_cache),
) -> JSONResponse:
    """Create missing tables and insert placeholder rows, skipping duplicates."""
    try:
        SeedService(db, cache).seed()
    except Exception as exc:
        logger.exception("Database seeding failed")
        return JSONResponse(status_code=500, content={"error": str(exc)})
    return JSONResponse(content={"message": "Database seeded successfully"})
