"""Course routes.

Listing accepts `professorId` and `categoryId` filters in addition to
pagination.
"""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from .. import schemas, services
from ..database import get_session
from .deps import ListParams, envelope, list_params, page_envelope

router = APIRouter(prefix="/courses", tags=["courses"])


@router.post("", status_code=status.HTTP_201_CREATED)
def create_course(payload: schemas.CreateCourse, db: Session = Depends(get_session)):
    """Create a course. Responds 404 if the professor or category does not exist."""
    course = services.CourseService(db).create(payload)
    return envelope("Course created successfully", course)


@router.get("")
def list_courses(
    params: ListParams = Depends(list_params),
    professor_id: Optional[uuid.UUID] = Query(None, alias="professorId"),
    category_id: Optional[uuid.UUID] = Query(None, alias="categoryId"),
    db: Session = Depends(get_session),
):
    items, total = services.CourseService(db).find_all(
        params.page, params.limit, params.start_date, params.end_date,
        professor_id=professor_id, category_id=category_id,
    )
    return page_envelope("Courses retrieved successfully", items, total, params)


@router.get("/{course_id}")
def get_course(course_id: str, db: Session = Depends(get_session)):
    course = services.CourseService(db).find_by_id(course_id)
    return envelope("Course retrieved successfully", course)


@router.put("/{course_id}")
def update_course(course_id: str, payload: schemas.UpdateCourse, db: Session = Depends(get_session)):
    course = services.CourseService(db).update(course_id, payload)
    return envelope("Course updated successfully", course)


@router.delete("/{course_id}")
def delete_course(course_id: str, db: Session = Depends(get_session)):
    """Delete a course together with its objectives, modules, enrollments and reviews."""
    services.CourseService(db).delete(course_id)
    return envelope("Course deleted successfully")
