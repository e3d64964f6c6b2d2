"""Shared query parameters and response envelopes for route handlers."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from fastapi import Query


@dataclass
class ListParams:
    page: int
    limit: int
    start_date: Optional[datetime]
    end_date: Optional[datetime]


def list_params(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1),
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
) -> ListParams:
    """Pagination and `createdAt` range parameters.

    Non-numeric or out of range values fail validation and are answered
    with 400 by the application's validation handler.
    """
    return ListParams(page=page, limit=limit, start_date=start_date, end_date=end_date)


def envelope(message: str, data=None) -> dict:
    if data is None:
        return {"message": message}
    return {"message": message, "data": data}


def page_envelope(message: str, items: list, total: int, params: ListParams) -> dict:
    return {"message": message, "data": items, "total": total, "page": params.page, "limit": params.limit}
