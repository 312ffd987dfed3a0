#!/usr/bin/env python3
"""
Bulk-create user accounts from a CSV export.

Run: python scripts/import_users.py users.csv
     python scripts/import_users.py users.csv -o results.json

Columns: FirstName, LastName, Email, Password. Extra columns are ignored.
Emails containing "manager" get the manager role.
"""
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

_project_root = Path(__file__).resolve().parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))


def main() -> int:
    parser = argparse.ArgumentParser(description="Import users from CSV")
    parser.add_argument("csv_path", type=Path)
    parser.add_argument("-o", "--output", type=Path, default=None, help="Write results JSON here")
    args = parser.parse_args()

    from api.config import SessionLocal, create_db
    from api.services.errors import ImportRowError
    from api.services.import_service import import_rows, read_csv_rows

    if not args.csv_path.is_file():
        print(f"File not found: {args.csv_path}", file=sys.stderr)
        return 1

    create_db()
    try:
        with args.csv_path.open(newline="", encoding="utf-8-sig") as fh:
            rows = read_csv_rows(fh)
    except ImportRowError as e:
        print(e.message, file=sys.stderr)
        return 1

    db = SessionLocal()
    try:
        result = import_rows(db, rows)
    finally:
        db.close()

    report = {"success": result.success, "errors": result.errors}
    print(f"Imported {len(result.success)} user(s), {len(result.errors)} failed.")
    for err in result.errors:
        print(f"  {err.get('email') or '<no email>'}: {err['error']}")
    if args.output:
        args.output.write_text(json.dumps(report, indent=2), encoding="utf-8")
        print(f"Wrote {args.output}")
    return 0 if not result.errors else 2


if __name__ == "__main__":
    sys.exit(main())
