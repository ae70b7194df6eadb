#!/usr/bin/env python3
"""
Connection Check Script

Run this to verify MongoDB and the geocoder are reachable.
Usage: python scripts/check_connections.py
"""
from internhub.core.config import get_settings
from internhub.db.mongodb import test_mongo_connection
from internhub.services.geocoder import get_geocoder


def main():
    settings = get_settings()
    print("=" * 50)
    print("INTERNHUB - CONNECTION CHECK")
    print("=" * 50)

    # MongoDB
    print("\n[1] Checking MongoDB...")
    print(f"    URI: {settings.mongodb_uri}")
    print(f"    Database: {settings.mongodb_db}")
    if test_mongo_connection():
        print("    MongoDB: CONNECTED")
    else:
        print("    MongoDB: FAILED")

    # Geocoder (only if API key is set)
    print("\n[2] Checking geocoder...")
    if settings.geocoder_api_key:
        print(f"    Provider: {settings.geocoder_provider} ({settings.geocoder_url})")
        if get_geocoder().test_connection():
            print("    Geocoder: CONNECTED")
        else:
            print("    Geocoder: FAILED")
    else:
        print("    Geocoder: API key not configured (radius search disabled)")

    print("\n" + "=" * 50)
    print("Connection check complete!")
    print("=" * 50)


if __name__ == "__main__":
    main()
