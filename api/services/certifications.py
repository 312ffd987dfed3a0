"""Certification expiry tracking."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable

from api.services.records import CertificationRecord

EXPIRING_WINDOW_DAYS = 21

STATUS_ACTIVE = "active"
STATUS_EXPIRING_SOON = "expiring_soon"
STATUS_EXPIRED = "expired"


@dataclass(frozen=True)
class CertificationStatus:
    certification: CertificationRecord
    days_until_expiration: int
    status: str


def days_until_expiration(expiration_date: date, today: date) -> int:
    return (expiration_date - today).days


def certification_status(expiration_date: date, today: date) -> str:
    days = days_until_expiration(expiration_date, today)
    if days < 0:
        return STATUS_EXPIRED
    if days <= EXPIRING_WINDOW_DAYS:
        return STATUS_EXPIRING_SOON
    return STATUS_ACTIVE


def evaluate(certs: Iterable[CertificationRecord], today: date) -> list[CertificationStatus]:
    """Soonest expiration first."""
    out = [
        CertificationStatus(
            certification=c,
            days_until_expiration=days_until_expiration(c.expiration_date, today),
            status=certification_status(c.expiration_date, today),
        )
        for c in certs
    ]
    return sorted(out, key=lambda s: s.certification.expiration_date)
