"""Marketplace database management CLI.

Creates and drops the relational catalog schema and seeds demo listings.
The catalog database is taken from CATALOG_DATABASE_URL unless --database-url
is given.

Usage:
    python src/manage.py setup-db                       # Create catalog tables
    python src/manage.py drop-db                        # Drop catalog tables
    python src/manage.py seed --seller-id <seller-id>   # Insert demo products
"""

import argparse
import os
import sys
from uuid import uuid4

DEMO_PRODUCTS = [
    {
        "title": "Vintage Camera",
        "description": "Classic film camera in great condition",
        "price": 29900,
        "stock": 3,
        "category": "Electronics",
    },
    {
        "title": "Handmade Wooden Desk",
        "description": "Solid oak desk, handcrafted",
        "price": 45000,
        "stock": 1,
        "category": "Furniture",
    },
    {
        "title": "Designer Sunglasses",
        "description": "Brand new, never worn",
        "price": 12000,
        "stock": 10,
        "category": "Fashion",
    },
]


def _sql_store(database_url=None):
    from catalogue.store.sql_adapter import SqlCatalogStore

    database_url = database_url or os.getenv("CATALOG_DATABASE_URL")
    if not database_url:
        print("CATALOG_DATABASE_URL is not set and --database-url was not given.")
        sys.exit(1)
    return SqlCatalogStore(database_uri=database_url)


def setup_database(database_url=None):
    """Create the catalog schema."""
    store = _sql_store(database_url)
    print("Creating catalog schema...")
    store.create_schema()
    print("Done.")


def drop_database(database_url=None):
    """Drop the catalog schema."""
    store = _sql_store(database_url)
    print("Dropping catalog schema...")
    store.drop_schema()
    print("Done.")


def seed(seller_id, database_url=None, store=None):
    """Insert the demo listings for ``seller_id`` unless the seller already has some."""
    from catalogue.store import Product

    store = store or _sql_store(database_url)
    if store.products_for_seller(seller_id):
        print("Products already exist, skipping.")
        return []

    created = []
    for data in DEMO_PRODUCTS:
        product = store.add_product(Product(id=str(uuid4()), seller_id=seller_id, **data))
        print(f"  Product: {product.title}")
        created.append(product)

    print("Seed complete.")
    return created


def main():
    parser = argparse.ArgumentParser(description="Marketplace database management")
    parser.add_argument("--database-url", help="Catalog database URL (default: $CATALOG_DATABASE_URL)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create the catalog tables")
    subparsers.add_parser("drop-db", help="Drop the catalog tables")

    seed_parser = subparsers.add_parser("seed", help="Insert demo products for a seller")
    seed_parser.add_argument("--seller-id", required=True, help="Owner of the demo listings")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database(args.database_url)
    elif args.command == "drop-db":
        drop_database(args.database_url)
    elif args.command == "seed":
        seed(args.seller_id, args.database_url)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
