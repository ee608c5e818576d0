from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session
from typing import List
from datetime import datetime
from uuid import UUID, uuid4

from expense_analyzer.crud.crud_income import IncomeRepository
from expense_analyzer.db.core import IncomeDB, get_db
from expense_analyzer.logging_config import get_logger
from expense_analyzer.models import income as income_models
from expense_analyzer.models.money import TotalResponse
from expense_analyzer.routers.common import (
    not_found,
    require_date_range,
    require_id,
    require_positive_amount,
    set_location,
)
from expense_analyzer.versioning import require_api_version

logger = get_logger(__name__)

router = APIRouter(
    prefix="/api/v{version}/income",
    tags=["income"],
    dependencies=[Depends(require_api_version("1.0"))],
)


def get_income_repository(db: Session = Depends(get_db)) -> IncomeRepository:
    return IncomeRepository(db)


def _validate(income: income_models.IncomeCreate) -> None:
    require_id(income.category_id, "CategoryId")
    require_id(income.account_id, "AccountId")
    require_positive_amount(income.amount)


@router.get("/", response_model=List[income_models.IncomeResponse])
def read_income(repo: IncomeRepository = Depends(get_income_repository)):
    """
    Retrieve all income, newest first.
    """
    return repo.get_all_ordered_by_date()

@router.get("/daterange", response_model=List[income_models.IncomeResponse])
def read_income_by_date_range(
    start_date: datetime = Query(..., alias="startDate"),
    end_date: datetime = Query(..., alias="endDate"),
    repo: IncomeRepository = Depends(get_income_repository)
):
    """
    Retrieve income with a timestamp between startDate and endDate, both inclusive.
    """
    start_date, end_date = require_date_range(start_date, end_date)
    return repo.get_by_date_range(start_date, end_date)

@router.get("/account/{account_id}", response_model=List[income_models.IncomeResponse])
def read_income_by_account(account_id: UUID, repo: IncomeRepository = Depends(get_income_repository)):
    return repo.get_by_account(account_id)

@router.get("/account/{account_id}/total", response_model=TotalResponse)
def read_total_income_by_account(account_id: UUID, repo: IncomeRepository = Depends(get_income_repository)):
    return TotalResponse(id=account_id, total=repo.get_total_by_account(account_id))

@router.get("/category/{category_id}", response_model=List[income_models.IncomeResponse])
def read_income_by_category(category_id: UUID, repo: IncomeRepository = Depends(get_income_repository)):
    return repo.get_by_category(category_id)

@router.get("/category/{category_id}/total", response_model=TotalResponse)
def read_total_income_by_category(category_id: UUID, repo: IncomeRepository = Depends(get_income_repository)):
    return TotalResponse(id=category_id, total=repo.get_total_by_category(category_id))

@router.get("/{income_id}", response_model=income_models.IncomeResponse)
def read_income_entry(income_id: UUID, repo: IncomeRepository = Depends(get_income_repository)):
    db_income = repo.get_by_id(income_id)
    if db_income is None:
        raise not_found("Income not found")
    return db_income

@router.post("/", response_model=income_models.IncomeResponse, status_code=status.HTTP_201_CREATED)
def create_income(
    income: income_models.IncomeCreate,
    response: Response,
    repo: IncomeRepository = Depends(get_income_repository)
):
    _validate(income)

    db_income = IncomeDB(id=uuid4(), **income.model_dump())
    repo.insert(db_income)
    repo.save_changes()
    logger.info(f"Created income {db_income.id} of {db_income.amount} on account {db_income.account_id}")

    set_location(response, "income", db_income.id)
    return db_income

@router.put("/{income_id}", status_code=status.HTTP_204_NO_CONTENT)
def update_income(
    income_id: UUID,
    income: income_models.IncomeUpdate,
    repo: IncomeRepository = Depends(get_income_repository)
):
    db_income = repo.get_by_id(income_id)
    if db_income is None:
        raise not_found("Income not found")

    _validate(income)

    for field, value in income.model_dump().items():
        setattr(db_income, field, value)

    repo.update(db_income)
    repo.save_changes()

@router.delete("/{income_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_income(income_id: UUID, repo: IncomeRepository = Depends(get_income_repository)):
    db_income = repo.get_by_id(income_id)
    if db_income is None:
        raise not_found("Income not found")

    repo.delete(db_income)
    repo.save_changes()
    logger.info(f"Deleted income {income_id}")
