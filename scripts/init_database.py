#!/usr/bin/env python
"""
Database initialization script for the house map.

Creates the ``houses`` and ``votes`` tables and optionally seeds houses from a
JSON file of already-geocoded addresses:

    [{"name": "21 Dove Street", "address": "21 Dove Street, New Orleans", "latitude": 29.97, "longitude": -90.05}]

Seeded houses have no creator, so nobody can delete them through the API.
"""

import argparse
import json
import os
import sys

# Add the src directory to the Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src")))

from dotenv import load_dotenv
from sqlalchemy import text
from sqlalchemy.orm import sessionmaker
from database.database import build_engine, get_database_url
from models import Base, House


def drop_tables(engine):
    """Drop the house map tables."""
    print("Dropping all database tables...")
    Base.metadata.drop_all(engine)
    print("Tables dropped successfully.")

def create_tables(engine):
    """Create all tables defined in the models."""
    print("Creating database tables...")
    print(f"Tables to be created: {list(Base.metadata.tables.keys())}")
    Base.metadata.create_all(engine)
    print("Tables created successfully.")

def load_seed_rows(path):
    """Read seed rows from a JSON file, skipping entries without coordinates."""
    with open(path, "r", encoding="utf-8") as f:
        rows = json.load(f)

    valid = []
    for row in rows:
        if row.get("latitude") is None or row.get("longitude") is None:
            print(f"   Skipping {row.get('name') or row.get('address')}: no coordinates")
            continue
        valid.append(row)
    return valid

def seed_houses(session, rows):
    """Insert ownerless houses, skipping names that already exist."""
    added = 0
    for row in rows:
        name = (row.get("name") or row.get("address") or "").strip()
        if not name:
            name = f"House at {float(row['latitude']):.4f}, {float(row['longitude']):.4f}"
        if session.query(House).filter_by(name=name).first():
            print(f"   Already seeded: {name}")
            continue
        session.add(House(
            name=name,
            address=row.get("address") or None,
            description=row.get("description") or None,
            latitude=float(row["latitude"]),
            longitude=float(row["longitude"]),
        ))
        print(f"   Added: {name} ({float(row['latitude']):.4f}, {float(row['longitude']):.4f})")
        added += 1
    session.commit()
    return added

def main():
    """Main function to initialize the database."""
    load_dotenv()

    parser = argparse.ArgumentParser(description="Create the house map tables and optionally seed houses.")
    parser.add_argument("--drop", action="store_true", help="Drop existing tables first")
    parser.add_argument("--seed", metavar="FILE", help="JSON file of geocoded houses to insert")
    args = parser.parse_args()

    engine = build_engine(get_database_url())
    Session = sessionmaker(bind=engine)
    session = Session()

    try:
        # Check if the database is accessible
        session.execute(text("SELECT 1"))
        print("Database connection successful.")

        if args.drop:
            drop_tables(engine)

        create_tables(engine)

        if args.seed:
            print(f"Seeding houses from {args.seed}...")
            count = seed_houses(session, load_seed_rows(args.seed))
            print(f"Seeded {count} houses.")

        print("Database initialization completed successfully.")
    except Exception as e:
        print(f"Error initializing database: {str(e)}")
        sys.exit(1)
    finally:
        session.close()

if __name__ == "__main__":
    main()
