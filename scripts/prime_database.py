#!/usr/bin/env python3
"""
Prime the database with baseline candidates, bills and inspiration posts.
Run with: python scripts/prime_database.py [--enrich]

Safe to run repeatedly: rows that already exist are skipped.
"""
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app import create_app, db, get_settings
from app.enrichment.prime import prime_database
from app.errors import ConfigurationError, StoreError
from app.providers import Providers, build_providers
from app.store import Store


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    enrich = '--enrich' in argv

    try:
        app = create_app()
    except ConfigurationError as e:
        print(f"Missing configuration: {e}")
        return 1

    with app.app_context():
        db.create_all()
        settings = get_settings(app)
        providers = build_providers(settings) if enrich else Providers()

        try:
            result = prime_database(
                Store(),
                providers,
                enrich=enrich,
                webhook_url=settings.prime_webhook_url,
                timeout=settings.provider_timeout,
            )
        except StoreError as e:
            print(f"Error during database priming: {e}")
            return 1

        print("\nDatabase priming summary:")
        for key, value in result.as_dict().items():
            print(f"  - {key}: {value}")

    return 1 if result.errors else 0


if __name__ == '__main__':
    sys.exit(main())
