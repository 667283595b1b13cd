#!/usr/bin/env python3
"""
Database management script.
Creates and drops tables, seeds sample data, purges expired sessions and
diagnoses database and Supabase connectivity.
"""

import asyncio
import os
import sys
import argparse
import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker

from homeswift.config import settings
from homeswift.database import engine, Base, AsyncSessionLocal, check_database_connection
from homeswift.catalog import SupabaseCatalog, SupabaseError
from homeswift.models import UserRole  # importing the package registers every table on Base
from homeswift.repositories import UserRepository, PropertyRepository, ImageRepository
from homeswift.services.session import SessionService
from homeswift.utils.generator import generate_properties

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

ADMIN_EMAIL = os.environ.get("ADMIN_EMAIL", "admin@example.com")
ADMIN_PASSWORD = os.environ.get("ADMIN_PASSWORD", "admin123456")

DATABASE_TIPS = [
    "Is the database server running and reachable from this machine?",
    "Check DATABASE_URL, or DB_HOST / DB_PORT / DB_NAME / DB_USER / DB_PASSWORD.",
    "Hosted Postgres (Supabase) may require SSL and the pooler host on port 6543.",
    "Make sure no firewall or VPN blocks the database port.",
    "Run `python migrate.py create-tables` once the connection works.",
]

SUPABASE_TIPS = [
    "Set SUPABASE_URL to the project URL, e.g. https://<project>.supabase.co.",
    "Set SUPABASE_SERVICE_ROLE_KEY (or SUPABASE_ANON_KEY) from the project API settings.",
    "Make sure the `properties` table exists and row level security allows reads.",
]


def database_target(url: str) -> str:
    """Database URL without credentials."""
    return url.split("@", 1)[1] if "@" in url else url


class MigrationManager:
    """Runs database maintenance against an engine and its session factory."""

    def __init__(
        self,
        db_engine: Optional[AsyncEngine] = None,
        session_factory: Optional[async_sessionmaker] = None
    ):
        self.engine = db_engine or engine
        self.session_factory = session_factory or AsyncSessionLocal

    async def create_tables(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("All tables created")

    async def drop_tables(self) -> None:
        """
        Drop every table.

        Raises:
            RuntimeError: Outside development and testing
        """
        if not settings.is_development and not settings.is_testing:
            raise RuntimeError("Dropping tables is only allowed in development or testing")

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
        logger.info("All tables dropped")

    async def seed_database(self, property_count: int = 20, seed: Optional[int] = 42) -> bool:
        """
        Create the admin account and generated listings owned by it.

        Returns:
            False when the admin already exists and nothing was seeded
        """
        logger.info("Seeding database with initial data")

        async with self.session_factory() as session:
            user_repo = UserRepository(session)

            if await user_repo.get_by_email(ADMIN_EMAIL):
                logger.info("Admin user already exists, skipping seed")
                return False

            admin = await user_repo.create_user({
                "email": ADMIN_EMAIL,
                "password": ADMIN_PASSWORD,
                "first_name": "System",
                "last_name": "Administrator",
                "role": UserRole.ADMIN,
                "email_verified": True,
            })

            property_repo = PropertyRepository(session)
            image_repo = ImageRepository(session)

            for listing in generate_properties(property_count, seed=seed):
                images = listing.pop("images", [])
                property_obj = await property_repo.create_property({**listing, "owner_id": admin.id})
                for image in images:
                    await image_repo.add_image(property_obj.id, image)

        logger.info("Database seeded successfully")
        logger.info(f"Admin user created: {ADMIN_EMAIL}")
        logger.info(f"Listings created: {property_count}")
        logger.warning("Please change the admin password in production!")
        return True

    async def reset_database(self, property_count: int = 20) -> None:
        """Drop, recreate and reseed every table."""
        logger.warning("Resetting database - all data will be lost!")
        await self.drop_tables()
        await self.create_tables()
        await self.seed_database(property_count=property_count)
        logger.info("Database reset completed")

    async def purge_sessions(self) -> int:
        async with self.session_factory() as session:
            removed = await SessionService(session).purge_expired()
        logger.info(f"Removed {removed} expired sessions")
        return removed

    async def check_database(self) -> bool:
        async with self.session_factory() as session:
            return await check_database_connection(session)

    async def check_supabase(self) -> bool:
        if not settings.supabase_configured:
            logger.error("SUPABASE_URL and a Supabase key are not configured")
            return False

        try:
            return await SupabaseCatalog(settings.supabase_url, settings.supabase_key).check_connection()
        except SupabaseError as e:
            logger.error(f"Supabase check failed: {e}")
            return False


def print_tips(title: str, tips: list) -> None:
    print(f"\n{title}")
    for tip in tips:
        print(f"  - {tip}")


async def run_check(manager: MigrationManager, supabase: bool) -> bool:
    """Run the connectivity diagnostics; prints the target or troubleshooting tips."""
    healthy = True

    if await manager.check_database():
        print(f"Database connection OK: {database_target(settings.database_url)}")
    else:
        healthy = False
        print(f"Database connection FAILED: {database_target(settings.database_url)}")
        print_tips("Troubleshooting:", DATABASE_TIPS)

    if supabase:
        if await manager.check_supabase():
            print(f"Supabase connection OK: {settings.supabase_url}")
        else:
            healthy = False
            print(f"Supabase connection FAILED: {settings.supabase_url or '(not configured)'}")
            print_tips("Troubleshooting:", SUPABASE_TIPS)

    return healthy


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="HomeSwift database management")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("create-tables", help="Create all tables")

    drop_parser = subparsers.add_parser("drop-tables", help="Drop all tables (development/testing only)")
    drop_parser.add_argument("--confirm", action="store_true", help="Confirm dropping every table")

    seed_parser = subparsers.add_parser("seed", help="Create the admin account and sample listings")
    seed_parser.add_argument("--properties", type=int, default=20, help="Number of listings to generate")

    reset_parser = subparsers.add_parser("reset", help="Drop, recreate and reseed (development/testing only)")
    reset_parser.add_argument("--confirm", action="store_true", help="Confirm database reset")
    reset_parser.add_argument("--properties", type=int, default=20, help="Number of listings to generate")

    subparsers.add_parser("purge-sessions", help="Delete expired login sessions")

    check_parser = subparsers.add_parser("check-db", help="Diagnose database connectivity")
    check_parser.add_argument("--supabase", action="store_true", help="Also check the Supabase REST API")

    return parser


def main(argv: Optional[list] = None) -> int:
    """Main CLI interface. Returns the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    manager = MigrationManager()

    try:
        if args.command == "create-tables":
            asyncio.run(manager.create_tables())

        elif args.command == "drop-tables":
            if not args.confirm:
                print("Dropping tables requires --confirm flag")
                return 1
            asyncio.run(manager.drop_tables())

        elif args.command == "seed":
            asyncio.run(manager.seed_database(property_count=args.properties))

        elif args.command == "reset":
            if not args.confirm:
                print("Database reset requires --confirm flag")
                return 1
            asyncio.run(manager.reset_database(property_count=args.properties))

        elif args.command == "purge-sessions":
            asyncio.run(manager.purge_sessions())

        elif args.command == "check-db":
            if not asyncio.run(run_check(manager, supabase=args.supabase)):
                return 1

    except Exception as e:
        logger.error(f"Command failed: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
