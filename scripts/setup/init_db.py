# scripts/setup/init_db.py
"""
Initialize database — creates all tables, optionally seeds a mall with slots.
Run once before first launch, or after adding new models.
Usage:
  python scripts/setup/init_db.py
  python scripts/setup/init_db.py --seed "City Centre Mall" --location "MG Road" --slots 40
"""

import argparse
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from app.database import create_tables, engine, SessionLocal
from app.config import settings
from app.models.mall import Mall
from app.models.parking_slot import ParkingSlot, SlotStatus
from sqlalchemy import inspect, text


def seed_mall(name: str, location: str, slots: int) -> Mall:
    """Create a mall and `slots` free parking slots numbered S-001, S-002, ..."""
    db = SessionLocal()
    try:
        mall = db.query(Mall).filter(Mall.name == name).first()
        if mall:
            print(f"ℹ️  Mall '{name}' already exists (id={mall.id}) — skipping")
            return mall
        mall = Mall(name=name, location=location)
        db.add(mall)
        db.flush()
        db.add_all([
            ParkingSlot(mall_id=mall.id, slot_number=f"S-{n:03d}", status=SlotStatus.FREE.value)
            for n in range(1, slots + 1)
        ])
        db.commit()
        print(f"✅ Seeded mall '{name}' (id={mall.id}) with {slots} slots")
        return mall
    finally:
        db.close()


def main():
    parser = argparse.ArgumentParser(description="Create tables and optionally seed a mall")
    parser.add_argument("--seed", metavar="MALL_NAME", help="Create a mall with this name")
    parser.add_argument("--location", default=None, help="Mall location")
    parser.add_argument("--slots", type=int, default=20, help="Number of slots to provision")
    args = parser.parse_args()

    print("🗄️  Mall Parking DB Initialization")
    print("=" * 40)
    print(f"📡 Database: {settings.DATABASE_URL}")

    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        print("✅ Database connection OK")
    except Exception as e:
        print(f"❌ Cannot connect to database: {e}")
        print("\nMake sure PostgreSQL is running:")
        print("  docker-compose up -d db")
        print("  # or: sudo systemctl start postgresql")
        sys.exit(1)

    print("\n📋 Creating tables...")
    create_tables()
    tables = sorted(inspect(engine).get_table_names())
    print(f"\n📊 Tables in database ({len(tables)} total):")
    for t in tables:
        print(f"   ✓ {t}")

    if args.seed:
        if args.slots < 1:
            print("❌ --slots must be at least 1")
            sys.exit(1)
        seed_mall(args.seed, args.location, args.slots)

    print("\n🎉 Database ready! You can now start the backend:")
    print(f"   uvicorn app.main:app --host 0.0.0.0 --port {settings.BACKEND_PORT} --reload")


if __name__ == "__main__":
    main()
