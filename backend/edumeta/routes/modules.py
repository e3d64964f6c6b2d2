"""Course module routes."""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from .. import schemas, services
from ..database import get_session
from .deps import ListParams, envelope, list_params, page_envelope

router = APIRouter(prefix="/modules", tags=["modules"])


@router.post("", status_code=status.HTTP_201_CREATED)
def create_module(payload: schemas.CreateModule, db: Session = Depends(get_session)):
    module = services.ModuleService(db).create(payload)
    return envelope("Module created successfully", module)


@router.get("")
def list_modules(
    params: ListParams = Depends(list_params),
    course_id: Optional[uuid.UUID] = Query(None, alias="courseId"),
    db: Session = Depends(get_session),
):
    items, total = services.ModuleService(db).find_all(
        params.page, params.limit, params.start_date, params.end_date, course_id=course_id
    )
    return page_envelope("Modules retrieved successfully", items, total, params)


@router.get("/{module_id}")
def get_module(module_id: str, db: Session = Depends(get_session)):
    module = services.ModuleService(db).find_by_id(module_id)
    return envelope("Module retrieved successfully", module)


@router.put("/{module_id}")
def update_module(module_id: str, payload: schemas.UpdateModule, db: Session = Depends(get_session)):
    module = services.ModuleService(db).update(module_id, payload)
    return envelope("Module updated successfully", module)


@router.delete("/{module_id}")
def delete_module(module_id: str, db: Session = Depends(get_session)):
    services.ModuleService(db).delete(module_id)
    return envelope("Module deleted successfully")
