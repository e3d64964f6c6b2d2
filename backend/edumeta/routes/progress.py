"""Course progress routes (lesson completion within an enrollment)."""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from .. import schemas, services
from ..database import get_session
from .deps import ListParams, envelope, list_params, page_envelope

router = APIRouter(prefix="/course-progress", tags=["course-progress"])


@router.post("", status_code=status.HTTP_201_CREATED)
def record_progress(payload: schemas.CreateProgress, db: Session = Depends(get_session)):
    """Mark a lesson completed for an enrollment.

    The lesson must belong to the enrolled course.
    """
    progress = services.CourseProgressService(db).create(payload)
    return envelope("Course progress recorded successfully", progress)


@router.get("")
def list_progress(
    params: ListParams = Depends(list_params),
    enrollment_id: Optional[uuid.UUID] = Query(None, alias="enrollmentId"),
    db: Session = Depends(get_session),
):
    items, total = services.CourseProgressService(db).find_all(
        params.page, params.limit, params.start_date, params.end_date, enrollment_id=enrollment_id
    )
    return page_envelope("Course progress retrieved successfully", items, total, params)


@router.get("/{progress_id}")
def get_progress(progress_id: str, db: Session = Depends(get_session)):
    progress = services.CourseProgressService(db).find_by_id(progress_id)
    return envelope("Course progress retrieved successfully", progress)


@router.put("/{progress_id}")
def update_progress(progress_id: str, payload: schemas.UpdateProgress, db: Session = Depends(get_session)):
    progress = services.CourseProgressService(db).update(progress_id, payload)
    return envelope("Course progress updated successfully", progress)


@router.delete("/{progress_id}")
def delete_progress(progress_id: str, db: Session = Depends(get_session)):
    services.CourseProgressService(db).delete(progress_id)
    return envelope("Course progress deleted successfully")
