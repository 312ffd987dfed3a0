"""
Certification tracking: technicians see their own, managers see everyone's.
"""

from datetime import date
from uuid import uuid4

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from api.config import get_db
from api.models.models import Certification, User as DbUser
from api.schemas.certification_schemas import (
    CertificationListResponse,
    CertificationResponse,
    CreateCertificationRequest,
)
from api.schemas.user_schemas import User
from api.services.certifications import CertificationStatus, evaluate
from api.services.records import CertificationRecord
from api.utils.auth import get_current_user, require_manager

certification_routes = APIRouter()


def _record(c: Certification) -> CertificationRecord:
    return CertificationRecord(
        id=c.id,
        user_id=int(c.user_id),
        certification_name=c.certification_name,
        issue_date=c.issue_date,
        expiration_date=c.expiration_date,
    )


def _response(s: CertificationStatus) -> CertificationResponse:
    c = s.certification
    return CertificationResponse(
        id=c.id,
        user_id=c.user_id,
        certification_name=c.certification_name,
        issue_date=c.issue_date.isoformat(),
        expiration_date=c.expiration_date.isoformat(),
        days_until_expiration=s.days_until_expiration,
        status=s.status,
    )


@certification_routes.get("/certifications", response_model=CertificationListResponse)
async def list_certifications(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> CertificationListResponse:
    q = db.query(Certification)
    if not current_user.is_manager:
        q = q.filter(Certification.user_id == current_user.id)
    statuses = evaluate((_record(c) for c in q.all()), date.today())
    return CertificationListResponse(certifications=[_response(s) for s in statuses])


@certification_routes.post("/certifications", response_model=CertificationResponse)
async def add_certification(
    body: CreateCertificationRequest,
    manager: User = Depends(require_manager),
    db: Session = Depends(get_db),
) -> CertificationResponse:
    if db.query(DbUser).filter(DbUser.id == body.user_id).first() is None:
        raise HTTPException(status_code=404, detail="User not found")
    row = Certification(
        id=str(uuid4()),
        user_id=body.user_id,
        certification_name=body.certification_name.strip(),
        issue_date=body.issue_date,
        expiration_date=body.expiration_date,
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    return _response(evaluate([_record(row)], date.today())[0])
