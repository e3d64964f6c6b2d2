"""Review routes, addressed by the (userId, courseId) pair."""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from .. import schemas, services
from ..database import get_session
from .deps import ListParams, envelope, list_params, page_envelope

router = APIRouter(prefix="/reviews", tags=["reviews"])


@router.post("", status_code=status.HTTP_201_CREATED)
def create_review(payload: schemas.CreateReview, db: Session = Depends(get_session)):
    """Create a review. A user can review a given course only once (409)."""
    review = services.ReviewService(db).create(payload)
    return envelope("Review created successfully", review)


@router.get("")
def list_reviews(
    params: ListParams = Depends(list_params),
    user_id: Optional[uuid.UUID] = Query(None, alias="userId"),
    course_id: Optional[uuid.UUID] = Query(None, alias="courseId"),
    db: Session = Depends(get_session),
):
    items, total = services.ReviewService(db).find_all(
        params.page, params.limit, params.start_date, params.end_date,
        user_id=user_id, course_id=course_id,
    )
    return page_envelope("Reviews retrieved successfully", items, total, params)


@router.get("/{user_id}/{course_id}")
def get_review(user_id: str, course_id: str, db: Session = Depends(get_session)):
    review = services.ReviewService(db).find_by_id(user_id, course_id)
    return envelope("Review retrieved successfully", review)


@router.put("/{user_id}/{course_id}")
def update_review(user_id: str, course_id: str, payload: schemas.UpdateReview, db: Session = Depends(get_session)):
    review = services.ReviewService(db).update(user_id, course_id, payload)
    return envelope("Review updated successfully", review)


@router.delete("/{user_id}/{course_id}")
def delete_review(user_id: str, course_id: str, db: Session = Depends(get_session)):
    services.ReviewService(db).delete(user_id, course_id)
    return envelope("Review deleted successfully")
