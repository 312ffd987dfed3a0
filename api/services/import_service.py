"""
Bulk user import from spreadsheet rows.

Each row is applied independently; a bad row is reported and the rest continue.
Role is manager when the email contains "manager", technician otherwise.
"""

from __future__ import annotations

import csv
import logging
from dataclasses import dataclass, field
from typing import Iterable, Mapping, Optional, TextIO

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from api.models.models import ROLE_MANAGER, ROLE_TECHNICIAN, User
from api.services.errors import ImportRowError
from api.utils.jwt import get_password_hash

logger = logging.getLogger("uvicorn")

REQUIRED_COLUMNS = ("FirstName", "LastName", "Email", "Password")


@dataclass
class ImportResult:
    success: list[dict] = field(default_factory=list)
    errors: list[dict] = field(default_factory=list)


def role_for_email(email: str) -> str:
    return ROLE_MANAGER if "manager" in email.lower() else ROLE_TECHNICIAN


def _clean(row: Mapping[str, Optional[str]], key: str) -> str:
    value = row.get(key)
    return value.strip() if isinstance(value, str) else ""


def import_row(db: Session, row: Mapping[str, Optional[str]]) -> dict:
    """Create one account. Raises ImportRowError for a row that cannot be applied."""
    first, last = _clean(row, "FirstName"), _clean(row, "LastName")
    email, password = _clean(row, "Email").lower(), _clean(row, "Password")
    if not (first and last and email and password):
        raise ImportRowError("Missing required fields")
    if db.query(User).filter(User.email == email).first() is not None:
        raise ImportRowError("Email already registered")
    role = role_for_email(email)
    user = User(
        email=email,
        full_name=f"{first} {last}",
        hashed_password=get_password_hash(password),
        role=role,
    )
    db.add(user)
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise ImportRowError(f"Database error: {e.__class__.__name__}") from e
    return {"email": email, "role": role}


def import_rows(db: Session, rows: Iterable[Mapping[str, Optional[str]]]) -> ImportResult:
    result = ImportResult()
    for row in rows:
        try:
            result.success.append(import_row(db, row))
        except ImportRowError as e:
            result.errors.append({"email": row.get("Email"), "error": e.message})
    logger.info("Bulk import finished ok=%s failed=%s", len(result.success), len(result.errors))
    return result


def read_csv_rows(fh: TextIO) -> list[dict]:
    """Parse a CSV with a header row. Missing required columns is a file-level error."""
    reader = csv.DictReader(fh)
    missing = [c for c in REQUIRED_COLUMNS if c not in (reader.fieldnames or [])]
    if missing:
        raise ImportRowError(f"CSV is missing columns: {', '.join(missing)}")
    return [dict(r) for r in reader]
