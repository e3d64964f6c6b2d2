"""Lesson routes."""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from .. import schemas, services
from ..database import get_session
from .deps import ListParams, envelope, list_params, page_envelope

router = APIRouter(prefix="/lessons", tags=["lessons"])


@router.post("", status_code=status.HTTP_201_CREATED)
def create_lesson(payload: schemas.CreateLesson, db: Session = Depends(get_session)):
    """Create a lesson of type `text`, `video` or `quiz` inside a module."""
    lesson = services.LessonService(db).create(payload)
    return envelope("Lesson created successfully", lesson)


@router.get("")
def list_lessons(
    params: ListParams = Depends(list_params),
    module_id: Optional[uuid.UUID] = Query(None, alias="moduleId"),
    db: Session = Depends(get_session),
):
    items, total = services.LessonService(db).find_all(
        params.page, params.limit, params.start_date, params.end_date, module_id=module_id
    )
    return page_envelope("Lessons retrieved successfully", items, total, params)


@router.get("/{lesson_id}")
def get_lesson(lesson_id: str, db: Session = Depends(get_session)):
    lesson = services.LessonService(db).find_by_id(lesson_id)
    return envelope("Lesson retrieved successfully", lesson)


@router.put("/{lesson_id}")
def update_lesson(lesson_id: str, payload: schemas.UpdateLesson, db: Session = Depends(get_session)):
    lesson = services.LessonService(db).update(lesson_id, payload)
    return envelope("Lesson updated successfully", lesson)


@router.delete("/{lesson_id}")
def delete_lesson(lesson_id: str, db: Session = Depends(get_session)):
    services.LessonService(db).delete(lesson_id)
    return envelope("Lesson deleted successfully")
