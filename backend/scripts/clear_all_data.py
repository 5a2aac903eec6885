#!/usr/bin/env python3
"""
Delete all rows from every application table (keeps the schema).
Uses the same database as the app (DATABASE_PATH / data/salonsuite.db).

Run from the backend dir:
  python scripts/clear_all_data.py            # every tenant
  python scripts/clear_all_data.py glow-studio  # one tenant's rows only
"""
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import text
from salonsuite.core.database import engine, Base
from salonsuite.core.db_transaction import db_transaction
import salonsuite.models  # noqa: F401  populate Base.metadata


def clear_all_tables():
    is_sqlite = engine.url.get_backend_name() == "sqlite"

    with engine.begin() as conn:
        if is_sqlite:
            conn.execute(text("PRAGMA foreign_keys = OFF"))
        try:
            for table in reversed(Base.metadata.sorted_tables):
                conn.execute(table.delete())
                print(f"Cleared: {table.name}")
        finally:
            if is_sqlite:
                conn.execute(text("PRAGMA foreign_keys = ON"))
    print("All tables cleared.")


def clear_tenant(tenant_id: str):
    """Delete one tenant's rows, children first."""
    with db_transaction() as db:
        for table in reversed(Base.metadata.sorted_tables):
            if table.name == "tenants":
                continue
            if "tenant_id" in table.c:
                result = db.execute(table.delete().where(table.c.tenant_id == tenant_id))
                print(f"Cleared {result.rowcount} rows from {table.name}")
            elif table.name == "booking_services":
                bookings = Base.metadata.tables["bookings"]
                db.execute(table.delete().where(table.c.booking_id.in_(
                    bookings.select().with_only_columns(bookings.c.id).where(bookings.c.tenant_id == tenant_id)
                )))
            elif table.name == "invoice_items":
                invoices = Base.metadata.tables["invoices"]
                db.execute(table.delete().where(table.c.invoice_id.in_(
                    invoices.select().with_only_columns(invoices.c.id).where(invoices.c.tenant_id == tenant_id)
                )))
    print(f"Tenant {tenant_id} cleared.")


if __name__ == "__main__":
    if len(sys.argv) > 1:
        clear_tenant(sys.argv[1])
    else:
        clear_all_tables()
