#!/usr/bin/env python3
"""
Clear All Data Script

Deletes every client, project, time entry and timer document, starting the
database fresh. Use after schema changes that old documents do not satisfy.

Usage:
    python scripts/clear_all_data.py --yes
    python scripts/clear_all_data.py --yes --user user_2abc

Environment:
    Requires the same environment as the main application
"""

import argparse
import asyncio
import logging
import os
import sys

# Add the project root to Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from timekeeper.shared.database import async_client, db, CLIENTS, PROJECTS, TIME_ENTRIES, TIMERS

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


async def clear_all_data(database, user_id=None):
    """
    Delete all time tracking documents.

    Args:
        database: Target database
        user_id: Only delete this user's documents

    Returns:
        dict: Deleted document count per collection
    """
    counts = {}
    for collection_name in (TIME_ENTRIES, TIMERS, PROJECTS, CLIENTS):
        if user_id is None:
            query = {}
        elif collection_name == TIMERS:
            query = {"_id": user_id}
        else:
            query = {"user_id": user_id}
        result = await database[collection_name].delete_many(query)
        counts[collection_name] = result.deleted_count
        logger.info(f"Deleted {result.deleted_count} document(s) from {collection_name}")
    return counts


async def main(argv=None):
    parser = argparse.ArgumentParser(description="Delete all clients, projects and time entries")
    parser.add_argument("--yes", action="store_true", help="Confirm the deletion")
    parser.add_argument("--user", help="Only clear data owned by this user id")
    args = parser.parse_args(argv)

    if not args.yes:
        logger.error("Refusing to delete data without --yes")
        return 1

    try:
        await clear_all_data(db, args.user)
        logger.info("All data cleared successfully")
        return 0
    except Exception as e:
        logger.error(f"Script failed: {str(e)}")
        return 1
    finally:
        async_client.close()


if __name__ == "__main__":
    exit_code = asyncio.run(main())
    sys.exit(exit_code)
