"""Integration tests for the database management CLI."""

import sys

import pytest
from catalogue.store.sql_adapter import SqlCatalogStore
from manage import DEMO_PRODUCTS, main, seed
from sqlalchemy import create_engine, inspect


def test_seed_inserts_demo_products_once(catalog):
    created = seed("seller-1", store=catalog)

    assert [p.title for p in created] == [data["title"] for data in DEMO_PRODUCTS]
    assert seed("seller-1", store=catalog) == []
    assert len(catalog.products_for_seller("seller-1")) == len(DEMO_PRODUCTS)


def test_setup_and_drop_db(monkeypatch, tmp_path):
    url = f"sqlite:///{tmp_path / 'catalog.db'}"

    monkeypatch.setattr(sys, "argv", ["manage.py", "--database-url", url, "setup-db"])
    main()
    assert "catalog_products" in inspect(create_engine(url)).get_table_names()

    monkeypatch.setattr(sys, "argv", ["manage.py", "--database-url", url, "seed", "--seller-id", "seller-1"])
    main()
    assert len(SqlCatalogStore(database_uri=url).products_for_seller("seller-1")) == len(DEMO_PRODUCTS)

    monkeypatch.setattr(sys, "argv", ["manage.py", "--database-url", url, "drop-db"])
    main()
    assert "catalog_products" not in inspect(create_engine(url)).get_table_names()


def test_missing_database_url_exits(monkeypatch):
    monkeypatch.delenv("CATALOG_DATABASE_URL", raising=False)
    monkeypatch.setattr(sys, "argv", ["manage.py", "setup-db"])

    with pytest.raises(SystemExit):
        main()
