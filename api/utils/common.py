"""
Common utility functions used across multiple routes and services.
"""

import math
from datetime import datetime
from typing import Iterable, Optional

from fastapi import HTTPException

from api.schemas.user_schemas import User
from api.services.errors import RxTrainError


def iso_format(dt: datetime) -> str:
    """Format datetime as ISO string with Z suffix."""
    return dt.isoformat() + "Z"


def round_half_up(value: float) -> int:
    """Round .5 away from zero for non-negative values (Python's round() is banker's)."""
    return int(math.floor(value + 0.5))


def mean_or_none(values: Iterable[float]) -> Optional[float]:
    vals = list(values)
    if not vals:
        return None
    return sum(vals) / len(vals)


def percent(part: int, whole: int) -> int:
    """Rounded percentage; 0 when the whole is empty."""
    if whole <= 0:
        return 0
    return round_half_up(part / whole * 100)


def display_name(current_user: User) -> str:
    """Get display name from the profile or email."""
    name = current_user.full_name
    if isinstance(name, str) and name.strip():
        return name.strip()
    # fallback: email prefix
    return current_user.email.split("@", 1)[0]


def to_http_error(exc: RxTrainError) -> HTTPException:
    """Translate a domain error into the HTTP error the routes raise."""
    return HTTPException(status_code=exc.status_code, detail=exc.message)
