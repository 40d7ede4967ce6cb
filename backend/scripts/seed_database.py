"""Create the schema and load placeholder rows into the configured database.

Usage (from ``backend/``)::

    python -m scripts.seed_database
"""

import logging
import sys

from invoicedesk.core.config import settings
from invoicedesk.core.database import get_database, reset_database
from invoicedesk.services.seed_service import SeedService


def main() -> int:
    logging.basicConfig(level=settings.LOG_LEVEL)
    try:
        result = SeedService(get_database()).seed()
    finally:
        reset_database()
    print(
        f"Seeded {result.users} users, {result.customers} customers, "
        f"{result.revenue} revenue rows, {result.invoices} invoices"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
