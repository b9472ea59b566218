#!/usr/bin/env python3
"""
Connection Check Script

Run this to verify the database and the configured LLM provider are reachable.
Usage: python scripts/check_connections.py
"""
import sys
sys.path.insert(0, '.')

from visadocs.core.config import get_settings
from visadocs.core.errors import LLMProviderError
from visadocs.db.postgres import test_postgres_connection
from visadocs.services.llm_client import create_provider


def main():
    settings = get_settings()
    print("=" * 50)
    print("VISA DOCUMENT PLATFORM - CONNECTION CHECK")
    print("=" * 50)

    # Database
    print("\n[1] Checking database...")
    if settings.database_url:
        print(f"    URL: {settings.database_url.split('@')[-1]}")
    else:
        print(f"    URL: postgresql://{settings.postgres_user}:****@{settings.postgres_host}:{settings.postgres_port}/{settings.postgres_db}")
    if test_postgres_connection():
        print("    ✅ Database: CONNECTED")
    else:
        print("    ❌ Database: FAILED")

    # LLM provider
    print(f"\n[2] Checking LLM provider ({settings.llm_provider})...")
    try:
        provider = create_provider()
    except (LLMProviderError, ValueError) as e:
        print(f"    ⚠️  {settings.llm_provider}: not configured ({e})")
    else:
        print(f"    Model: {provider.model}")
        if provider.test_connection():
            print(f"    ✅ {settings.llm_provider}: CONNECTED")
        else:
            print(f"    ❌ {settings.llm_provider}: FAILED")

    print("\n" + "=" * 50)
    print("Connection check complete!")
    print("=" * 50)


if __name__ == "__main__":
    main()
