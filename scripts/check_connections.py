#!/usr/bin/env python3
"""
Connection Check Script

Run this to verify the relational store, media store and AI generator are reachable.
Usage: python scripts/check_connections.py
"""
import sys
sys.path.insert(0, '.')

from app.db.postgres import test_postgres_connection
from app.db.mongodb import test_mongo_connection
from app.services.ai_client import get_ai_client
from app.core.config import get_settings


def main():
    settings = get_settings()
    print("=" * 50)
    print("BRIDGEUP - CONNECTION CHECK")
    print("=" * 50)

    # Relational store
    print("\n[1] Checking relational store...")
    if settings.database_url:
        print(f"    URL: {settings.database_url.split('@')[-1]}")
    else:
        print(f"    URL: postgresql://{settings.postgres_user}:****@{settings.postgres_host}:{settings.postgres_port}/{settings.postgres_db}")
    if test_postgres_connection():
        print("    ✅ Database: CONNECTED")
    else:
        print("    ❌ Database: FAILED")

    # Media store
    print("\n[2] Checking MongoDB (GridFS media)...")
    print(f"    URI: {settings.mongodb_uri}")
    print(f"    Database: {settings.mongodb_db} / bucket: {settings.media_bucket}")
    if test_mongo_connection():
        print("    ✅ MongoDB: CONNECTED")
    else:
        print("    ❌ MongoDB: FAILED")

    # Interview-prep generator (only if API key is set)
    print("\n[3] Checking AI generator...")
    client = get_ai_client()
    if client.is_configured:
        print(f"    Base URL: {settings.ai_base_url} / model: {settings.ai_model}")
        if client.test_connection():
            print("    ✅ AI: CONNECTED")
        else:
            print("    ❌ AI: FAILED (prep schedules will use the local fallback)")
    else:
        print("    ⚠️  AI: API key not configured (prep schedules will use the local fallback)")

    print("\n" + "=" * 50)
    print("Connection check complete!")
    print("=" * 50)


if __name__ == "__main__":
    main()
