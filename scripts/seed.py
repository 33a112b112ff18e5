"""
Reset & Seed Script

Drops every table in DATABASE_URL, recreates the schema and loads the demo
accounts and starter menu.
Run from project root: python scripts/seed.py --yes

Author: Khalil Bannouri
Version: 1.0.0
"""

import argparse
import asyncio
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.core.config import get_settings, setup_logging
from app.database import build_engine, build_session_maker
from app.seed import SEED_PASSWORD, SEED_USERS, reset_database, seed_database

# Windows event loop fix
if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())


async def main() -> None:
    settings = get_settings()
    setup_logging(settings)

    engine = build_engine(settings)
    try:
        await reset_database(engine)
        counts = await seed_database(build_session_maker(engine))
    finally:
        await engine.dispose()

    print("=" * 60)
    print("🌱 SEED COMPLETE")
    print("=" * 60)
    print(f"   Users: {counts['users']}")
    print(f"   Menu items: {counts['menus']}")
    print(f"\n🔑 Accounts (password: {SEED_PASSWORD}):")
    for name, email, role in SEED_USERS:
        print(f"   {role.value:<8} {email:<24} {name}")
    print("=" * 60)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Reset the database and load demo data")
    parser.add_argument("--yes", action="store_true", help="Confirm dropping all tables")
    args = parser.parse_args()

    if not args.yes:
        print("❌ This drops every table. Re-run with --yes to confirm.")
        sys.exit(1)

    asyncio.run(main())
