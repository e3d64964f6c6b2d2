"""User routes.

Endpoints implemented:
- POST /users
- GET /users
- GET /users/wallet/{address}
- GET /users/{id}
- PUT /users/{id}
- PATCH /users/{id}/wallet
- DELETE /users/{id}
"""

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from .. import schemas, services
from ..database import get_session
from .deps import ListParams, envelope, list_params, page_envelope

router = APIRouter(prefix="/users", tags=["users"])


@router.post("", status_code=status.HTTP_201_CREATED)
def create_user(payload: schemas.CreateUser, db: Session = Depends(get_session)):
    """Create a user. Responds 409 if the email or wallet is already taken."""
    user = services.UserService(db).create(payload)
    return envelope("User created successfully", user)


@router.get("")
def list_users(params: ListParams = Depends(list_params), db: Session = Depends(get_session)):
    """List users, most recent first, with pagination metadata."""
    users, total = services.UserService(db).find_all(params.page, params.limit, params.start_date, params.end_date)
    return page_envelope("Users retrieved successfully", users, total, params)


@router.get("/wallet/{address}")
def get_user_by_wallet(address: str, db: Session = Depends(get_session)):
    """Look a user up by linked wallet address (case-insensitive)."""
    user = services.UserService(db).find_by_wallet_address(address)
    return envelope("User retrieved successfully", user)


@router.get("/{user_id}")
def get_user(user_id: str, db: Session = Depends(get_session)):
    user = services.UserService(db).find_by_id(user_id)
    return envelope("User retrieved successfully", user)


@router.put("/{user_id}")
def update_user(user_id: str, payload: schemas.UpdateUser, db: Session = Depends(get_session)):
    """Apply a partial update. Responds 409 if the new email or wallet collides."""
    user = services.UserService(db).update(user_id, payload)
    return envelope("User updated successfully", user)


@router.patch("/{user_id}/wallet")
def link_wallet(user_id: str, payload: schemas.LinkWallet, db: Session = Depends(get_session)):
    """Link a wallet address to an existing user."""
    user = services.UserService(db).link_wallet(user_id, payload)
    return envelope("Wallet linked successfully", user)


@router.delete("/{user_id}")
def delete_user(user_id: str, db: Session = Depends(get_session)):
    services.UserService(db).delete(user_id)
    return envelope("User deleted successfully")
