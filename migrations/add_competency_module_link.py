"""
Migration: explicit module link on competency records.

- competency_records: add module_id (TEXT, nullable).
- Backfill: rows whose competency_name equals a module title (case-insensitive)
  get that module's id. Anything else stays NULL and is matched by name at read time.
"""

import sqlite3
import os


def run_migration():
    db_path = os.getenv("DATABASE_URL", "sqlite:///./rxtrain.db").replace("sqlite:///", "")
    conn = None
    try:
        conn = sqlite3.connect(db_path)
        cursor = conn.cursor()

        cursor.execute(
            "SELECT name FROM sqlite_master WHERE type='table' AND name='competency_records'"
        )
        if not cursor.fetchone():
            print("competency_records table not found. Skipping.")
            return

        try:
            cursor.execute("ALTER TABLE competency_records ADD COLUMN module_id TEXT")
            print("competency_records: added module_id")
        except sqlite3.OperationalError as e:
            if "duplicate column" in str(e).lower():
                print("competency_records.module_id already exists. Skipping column add.")
            else:
                raise

        cursor.execute(
            """
            UPDATE competency_records
            SET module_id = (
                SELECT m.id FROM training_modules m
                WHERE lower(m.title) = lower(competency_records.competency_name)
                ORDER BY m.order_index LIMIT 1
            )
            WHERE module_id IS NULL
            """
        )
        print(f"competency_records: linked {cursor.rowcount} row(s) by exact title")

        conn.commit()
        print("✓ Migration add_competency_module_link completed successfully!")

    except sqlite3.Error as e:
        print(f"Error during migration: {e}")
        if conn:
            conn.rollback()
    finally:
        if conn:
            conn.close()


if __name__ == "__main__":
    run_migration()
