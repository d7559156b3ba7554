#!/usr/bin/env python3
"""Migration script to add manual-edit tracking and category ordering.

This migration adds two columns to databases created by older releases:
- transactions.is_manually_edited (BOOLEAN, default=0)
  Set when a user categorizes a transaction or corrects its amount by hand;
  bulk recategorization leaves such rows alone.
- categories.display_order (INTEGER, default=0)
  Ordering used when listing categories.

After the columns exist, the default categories and rules are seeded if
they are missing, and default categories get their display order.

Usage:
    python migrations/migrate_add_manual_edit_tracking.py [--db-path PATH]
"""

import sys
from pathlib import Path

# Add src to path so we can import spendtrack modules
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from sqlalchemy import text, inspect
from spendtrack.database.factories import create_sqlite_database
from spendtrack.database.models import Category
from spendtrack.domain.category import CategoryService, DEFAULT_CATEGORIES

NEW_COLUMNS = [
    ("transactions", "is_manually_edited", "BOOLEAN NOT NULL DEFAULT 0"),
    ("categories", "display_order", "INTEGER NOT NULL DEFAULT 0"),
]


def column_exists(engine, table_name: str, column_name: str) -> bool:
    """Check if a column exists in a table.

    Args:
        engine: SQLAlchemy engine
        table_name: Name of the table
        column_name: Name of the column

    Returns:
        True if column exists, False otherwise
    """
    inspector = inspect(engine)
    columns = [col["name"] for col in inspector.get_columns(table_name)]
    return column_name in columns


def migrate_database(database_path: str | None = None) -> None:
    """Add missing columns, then seed defaults.

    Args:
        database_path: Path to database file. If None, uses default location.

    Raises:
        RuntimeError: If the database schema is missing
    """
    db = create_sqlite_database(database_path=database_path)
    db.connect()

    try:
        # Get engine from sessionmaker by creating a session and accessing its bind
        session = db.session_factory()
        try:
            engine = session.bind
            if engine is None:
                raise RuntimeError("Could not get database engine from session")
        finally:
            session.close()

        inspector = inspect(engine)
        for table_name, _, _ in NEW_COLUMNS:
            if table_name not in inspector.get_table_names():
                raise RuntimeError(
                    f"Table '{table_name}' does not exist. Please initialize the database schema first."
                )

        added = 0
        with engine.begin() as conn:
            for table_name, column_name, ddl in NEW_COLUMNS:
                if column_exists(engine, table_name, column_name):
                    print(f"  Column already present: {table_name}.{column_name}")
                    continue
                conn.execute(text(f"ALTER TABLE {table_name} ADD COLUMN {column_name} {ddl}"))
                print(f"  Added column: {table_name}.{column_name}")
                added += 1

        print("Seeding default categories and rules...")
        categories_created, rules_created = CategoryService(db).seed_defaults()
        print(f"  Created {categories_created} categories and {rules_created} rules")

        session = db.session_factory()
        try:
            for order, (category_id, _, _, _) in enumerate(DEFAULT_CATEGORIES, start=1):
                session.query(Category).filter(
                    Category.id == category_id, Category.display_order == 0
                ).update({"display_order": order, "is_default": True}, synchronize_session=False)
            session.commit()
        finally:
            session.close()

        if added == 0 and categories_created == 0 and rules_created == 0:
            print("Migration already applied: nothing to do")
        else:
            print("Migration completed successfully!")

    except Exception as e:
        print(f"Migration failed: {e}")
        raise
    finally:
        db.disconnect()


def main():
    """Main entry point for migration script."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Migrate database to add manual-edit tracking and category ordering"
    )
    parser.add_argument(
        "--db-path",
        type=str,
        help="Path to database file (overrides SPENDTRACK_DB_PATH environment variable)",
    )
    args = parser.parse_args()

    try:
        migrate_database(database_path=args.db_path)
        return 0
    except Exception as e:
        print(f"\nMigration failed: {e}", file=sys.stderr)
        import traceback
        traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
