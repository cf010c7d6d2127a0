"""
Initialize database — creates all tables and seeds the default fleet.
Run once before first launch, or after adding new models.
Usage: python scripts/setup/init_db.py [--no-seed]
"""

import argparse
import asyncio
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from fleetsync.database import create_tables, engine
from fleetsync.config import settings
from fleetsync.services.fleet_seed import DEFAULT_FLEET
from fleetsync.services.storage import build_storage
from fleetsync.services.sync_hub import build_hub
from sqlalchemy import inspect, text


def main():
    parser = argparse.ArgumentParser(description="Create FleetSync tables and seed the default fleet")
    parser.add_argument("--no-seed", action="store_true", help="Only create tables")
    args = parser.parse_args()

    print("🗄️  FleetSync DB Initialization")
    print("=" * 40)
    print(f"📡 Database: {settings.DATABASE_URL}")

    # Test connection
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        print("✅ Database connection OK")
    except Exception as e:
        print(f"❌ Cannot connect to database: {e}")
        sys.exit(1)

    print("\n📋 Creating tables...")
    create_tables()
    tables = inspect(engine).get_table_names()
    print(f"📊 Tables in database ({len(tables)} total):")
    for t in tables:
        print(f"   ✓ {t}")

    if not args.no_seed:
        hub = build_hub(build_storage("sql"))
        seeded = asyncio.run(hub.store.seed_if_empty(DEFAULT_FLEET))
        print(f"\n🌱 Seeded {seeded} vehicles" if seeded else "\n📊 Fleet already present — seed skipped")

    print("\n🎉 Database ready! You can now start the backend:")
    print(f"   uvicorn fleetsync.main:app --host {settings.BACKEND_IP} --port {settings.BACKEND_PORT} --reload")


if __name__ == "__main__":
    main()
