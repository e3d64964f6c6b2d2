"""Category routes."""

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from .. import schemas, services
from ..database import get_session
from .deps import ListParams, envelope, list_params, page_envelope

router = APIRouter(prefix="/categories", tags=["categories"])


@router.post("", status_code=status.HTTP_201_CREATED)
def create_category(payload: schemas.CreateCategory, db: Session = Depends(get_session)):
    category = services.CategoryService(db).create(payload)
    return envelope("Category created successfully", category)


@router.get("")
def list_categories(params: ListParams = Depends(list_params), db: Session = Depends(get_session)):
    items, total = services.CategoryService(db).find_all(params.page, params.limit, params.start_date, params.end_date)
    return page_envelope("Categories retrieved successfully", items, total, params)


@router.get("/{category_id}")
def get_category(category_id: str, db: Session = Depends(get_session)):
    category = services.CategoryService(db).find_by_id(category_id)
    return envelope("Category retrieved successfully", category)


@router.put("/{category_id}")
def update_category(category_id: str, payload: schemas.UpdateCategory, db: Session = Depends(get_session)):
    category = services.CategoryService(db).update(category_id, payload)
    return envelope("Category updated successfully", category)


@router.delete("/{category_id}")
def delete_category(category_id: str, db: Session = Depends(get_session)):
    """Delete a category; its courses keep existing without a category."""
    services.CategoryService(db).delete(category_id)
    return envelope("Category deleted successfully")
