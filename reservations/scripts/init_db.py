#!/usr/bin/env python3
"""Create the appointments table in the database named by DATABASE_URL.

Run:
    python -m reservations.scripts.init_db [--drop-all]
"""
from __future__ import annotations

import argparse
import asyncio

from reservations.config import load_postgres_config
from reservations.core.logger import configure, get_logger
from reservations.infra.database.engine import close_engine, init_db

logger = get_logger(__name__)


async def main(drop_all: bool = False) -> None:
    config = load_postgres_config()
    try:
        await init_db(config, drop_all=drop_all)
    finally:
        await close_engine()
    logger.info("Appointments schema ready")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--drop-all", action="store_true", help="Drop tables before creating them")
    args = parser.parse_args()
    configure()
    asyncio.run(main(drop_all=args.drop_all))
