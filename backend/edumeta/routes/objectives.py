"""Learning objective routes."""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from .. import schemas, services
from ..database import get_session
from .deps import ListParams, envelope, list_params, page_envelope

router = APIRouter(prefix="/objectives", tags=["objectives"])


@router.post("", status_code=status.HTTP_201_CREATED)
def create_objective(payload: schemas.CreateObjective, db: Session = Depends(get_session)):
    objective = services.ObjectiveService(db).create(payload)
    return envelope("Objective created successfully", objective)


@router.get("")
def list_objectives(
    params: ListParams = Depends(list_params),
    course_id: Optional[uuid.UUID] = Query(None, alias="courseId"),
    db: Session = Depends(get_session),
):
    items, total = services.ObjectiveService(db).find_all(
        params.page, params.limit, params.start_date, params.end_date, course_id=course_id
    )
    return page_envelope("Objectives retrieved successfully", items, total, params)


@router.get("/{objective_id}")
def get_objective(objective_id: str, db: Session = Depends(get_session)):
    objective = services.ObjectiveService(db).find_by_id(objective_id)
    return envelope("Objective retrieved successfully", objective)


@router.put("/{objective_id}")
def update_objective(objective_id: str, payload: schemas.UpdateObjective, db: Session = Depends(get_session)):
    objective = services.ObjectiveService(db).update(objective_id, payload)
    return envelope("Objective updated successfully", objective)


@router.delete("/{objective_id}")
def delete_objective(objective_id: str, db: Session = Depends(get_session)):
    services.ObjectiveService(db).delete(objective_id)
    return envelope("Objective deleted successfully")
