"""Storefront management CLI.

Usage:
    python -m storefront.manage setup-db   # Create all tables
    python -m storefront.manage drop-db    # Drop all tables
    python -m storefront.manage serve      # Run the API with uvicorn

The domain reads ``DATABASE_URL`` when it is first imported, so
``--database-url`` is applied to the environment before that happens.
"""

import argparse
import os
import sys

import uvicorn


def setup_database() -> None:
    from storefront.domain import init_domain
    from storefront.utils.db import setup_db

    print("Initializing storefront domain...")
    domain = init_domain()
    print("Creating storefront database schema...")
    setup_db(domain)
    print("Done.")


def drop_database() -> None:
    from storefront.domain import init_domain
    from storefront.utils.db import drop_db

    print("Initializing storefront domain...")
    domain = init_domain()
    print("Dropping storefront database schema...")
    drop_db(domain)
    print("Done.")


def serve(host: str, port: int, reload: bool) -> None:
    uvicorn.run("storefront.app:app", host=host, port=port, reload=reload, log_config=None)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Storefront management")
    parser.add_argument("--database-url", help="SQLAlchemy URL (default: DATABASE_URL or local SQLite)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)
    serve_parser.add_argument("--reload", action="store_true")

    args = parser.parse_args(argv)
    if args.database_url:
        os.environ["DATABASE_URL"] = args.database_url

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "serve":
        serve(args.host, args.port, args.reload)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
