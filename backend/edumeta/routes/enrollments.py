"""Enrollment routes.

Updating an enrollment only toggles `isActive`; deactivation keeps the
enrollment and its progress history.
"""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from .. import schemas, services
from ..database import get_session
from .deps import ListParams, envelope, list_params, page_envelope

router = APIRouter(prefix="/enrollments", tags=["enrollments"])


@router.post("", status_code=status.HTTP_201_CREATED)
def create_enrollment(payload: schemas.CreateEnrollment, db: Session = Depends(get_session)):
    """Enroll a user in a course. Responds 409 if already enrolled."""
    enrollment = services.EnrollmentService(db).create(payload)
    return envelope("Enrollment created successfully", enrollment)


@router.get("")
def list_enrollments(
    params: ListParams = Depends(list_params),
    user_id: Optional[uuid.UUID] = Query(None, alias="userId"),
    course_id: Optional[uuid.UUID] = Query(None, alias="courseId"),
    db: Session = Depends(get_session),
):
    items, total = services.EnrollmentService(db).find_all(
        params.page, params.limit, params.start_date, params.end_date,
        user_id=user_id, course_id=course_id,
    )
    return page_envelope("Enrollments retrieved successfully", items, total, params)


@router.get("/{enrollment_id}")
def get_enrollment(enrollment_id: str, db: Session = Depends(get_session)):
    enrollment = services.EnrollmentService(db).find_by_id(enrollment_id)
    return envelope("Enrollment retrieved successfully", enrollment)


@router.put("/{enrollment_id}")
def update_enrollment(enrollment_id: str, payload: schemas.UpdateEnrollment, db: Session = Depends(get_session)):
    enrollment = services.EnrollmentService(db).update(enrollment_id, payload)
    return envelope("Enrollment updated successfully", enrollment)


@router.delete("/{enrollment_id}")
def delete_enrollment(enrollment_id: str, db: Session = Depends(get_session)):
    services.EnrollmentService(db).delete(enrollment_id)
    return envelope("Enrollment deleted successfully")
