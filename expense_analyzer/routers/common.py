from datetime import datetime
from decimal import Decimal
from typing import Optional, Tuple
from uuid import UUID

from fastapi import HTTPException, Response, status

from expense_analyzer.models.timestamps import to_utc_naive

NIL_UUID = UUID(int=0)


def bad_request(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


def not_found(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


def require_id(value: Optional[UUID], field_name: str) -> UUID:
    """Reject a missing or all-zero id with a 400"""
    if value is None or value == NIL_UUID:
        raise bad_request(f"{field_name} is required")
    return value


def require_positive_amount(amount: Decimal) -> None:
    if amount <= 0:
        raise bad_request("Amount must be greater than zero")


def require_name(name: str) -> str:
    if not name:
        raise bad_request("Name is required")
    return name


def require_date_range(start_date: datetime, end_date: datetime) -> Tuple[datetime, datetime]:
    """Return both bounds as naive UTC, rejecting a start after the end with a 400"""
    start_date, end_date = to_utc_naive(start_date), to_utc_naive(end_date)
    if start_date > end_date:
        raise bad_request("Start date must be before end date")
    return start_date, end_date


def set_location(response: Response, resource: str, entity_id: UUID) -> None:
    response.headers["Location"] = f"/api/v1/{resource}/{entity_id}"
