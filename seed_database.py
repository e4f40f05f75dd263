#!/usr/bin/env python3
"""
Seed the library store with the fixture authors and books.

Clears the authors and books collections, then inserts the fixture dataset.
Runs once against the configured MONGO_URL and exits.
"""

import asyncio
import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from library.database import MongoConnection
from library.seeder import seed_database
from utilities.config import config
from utilities.logger import setup_logging, get_logger


async def main():
    """Main function to seed the database."""
    setup_logging(
        log_level=config.log_level,
        log_format=config.log_format,
        log_file=config.get_log_file_path(),
        debug=config.debug
    )

    logger = get_logger(__name__)
    connection = MongoConnection(
        connection_url=config.mongo_url,
        database_name=config.mongo_database,
        server_selection_timeout_ms=config.mongo_server_selection_timeout_ms
    )

    try:
        await connection.connect()
        if not connection.is_connected:
            logger.error("MongoDB is not reachable, nothing seeded", url=config.mongo_url)
            sys.exit(1)

        result = await seed_database(connection.database)
        logger.info("Seeding finished", **result.model_dump(mode="json"))

    except Exception as e:
        logger.error("Seeding failed", error=str(e))
        sys.exit(1)

    finally:
        await connection.disconnect()


if __name__ == "__main__":
    asyncio.run(main())
