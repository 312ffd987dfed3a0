"""
Manager administration: technician groups, bulk user import and the open-ended
response review.
"""

from collections import OrderedDict

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from api.config import get_db
from api.models.models import OpenEndedResponse, TechnicianGroup, TrainingModule, User as DbUser
from api.schemas.import_schemas import BulkImportRequest, BulkImportResponse, ImportFailure, ImportSuccess
from api.schemas.insights_schemas import CreateGroupRequest, GroupResponse
from api.schemas.open_ended_schemas import GradedResponse, ModuleResponses, ResponsesOverview, UserResponses
from api.schemas.user_schemas import User
from api.services.import_service import import_rows
from api.services.training_repository import create_group
from api.utils.auth import require_manager
from api.utils.common import iso_format

admin_routes = APIRouter()


@admin_routes.post("/groups", response_model=GroupResponse)
async def add_group(
    body: CreateGroupRequest,
    manager: User = Depends(require_manager),
    db: Session = Depends(get_db),
) -> GroupResponse:
    name = body.name.strip()
    if not name:
        raise HTTPException(status_code=422, detail="Group name is required")
    if db.query(TechnicianGroup).filter(TechnicianGroup.name == name).first() is not None:
        raise HTTPException(status_code=400, detail="Group already exists")
    ids = set(body.member_ids)
    found = {u.id for u in db.query(DbUser).filter(DbUser.id.in_(ids)).all()} if ids else set()
    missing = sorted(ids - found)
    if missing:
        raise HTTPException(status_code=404, detail=f"Unknown users: {missing}")
    group = create_group(db, name, ids)
    return GroupResponse(id=group.id or "", name=group.name, member_ids=sorted(group.member_ids))


@admin_routes.post("/admin/import", response_model=BulkImportResponse)
async def bulk_import(
    body: BulkImportRequest,
    manager: User = Depends(require_manager),
    db: Session = Depends(get_db),
) -> BulkImportResponse:
    """Create accounts row by row; failed rows are reported, not fatal."""
    result = import_rows(db, (r.model_dump() for r in body.rows))
    return BulkImportResponse(
        success=[ImportSuccess(**s) for s in result.success],
        errors=[ImportFailure(**e) for e in result.errors],
    )


@admin_routes.get("/responses", response_model=ResponsesOverview)
async def list_responses(
    manager: User = Depends(require_manager),
    db: Session = Depends(get_db),
) -> ResponsesOverview:
    """Open-ended answers grouped by module, then by technician; newest first within a user."""
    rows = (
        db.query(OpenEndedResponse, TrainingModule, DbUser)
        .join(TrainingModule, TrainingModule.id == OpenEndedResponse.module_id)
        .join(DbUser, DbUser.id == OpenEndedResponse.user_id)
        .order_by(TrainingModule.order_index.asc(), DbUser.full_name.asc(), OpenEndedResponse.submitted_at.desc())
        .all()
    )
    modules: "OrderedDict[str, ModuleResponses]" = OrderedDict()
    users: dict[tuple[str, int], UserResponses] = {}
    for resp, module, user in rows:
        if module.id not in modules:
            modules[module.id] = ModuleResponses(module_id=module.id, module_title=module.title, users=[])
        key = (module.id, user.id)
        if key not in users:
            users[key] = UserResponses(user_id=user.id, full_name=user.full_name or "", email=user.email, responses=[])
            modules[module.id].users.append(users[key])
        users[key].responses.append(
            GradedResponse(
                id=resp.id,
                question_id=resp.question_id,
                question=resp.question.question if resp.question else "",
                answer=resp.answer,
                ai_grade=resp.ai_grade,
                ai_feedback=resp.ai_feedback,
                submitted_at=iso_format(resp.submitted_at),
                graded_at=iso_format(resp.graded_at) if resp.graded_at else None,
            )
        )
    return ResponsesOverview(modules=list(modules.values()))
