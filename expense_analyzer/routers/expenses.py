from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session
from typing import List
from datetime import datetime
from uuid import UUID, uuid4

from expense_analyzer.crud.crud_expense import ExpenseRepository
from expense_analyzer.db.core import ExpenseDB, get_db
from expense_analyzer.logging_config import get_logger
from expense_analyzer.models import expense as expense_models
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
    prefix="/api/v{version}/expenses",
    tags=["expenses"],
    dependencies=[Depends(require_api_version("1.0"))],
)


def get_expense_repository(db: Session = Depends(get_db)) -> ExpenseRepository:
    return ExpenseRepository(db)


def _validate(expense: expense_models.ExpenseCreate) -> None:
    require_id(expense.category_id, "CategoryId")
    require_id(expense.account_id, "AccountId")
    require_positive_amount(expense.amount)


@router.get("/", response_model=List[expense_models.ExpenseResponse])
def read_expenses(repo: ExpenseRepository = Depends(get_expense_repository)):
    """
    Retrieve all expenses, newest first, with their tag ids.
    """
    return repo.get_all_ordered_by_date()

@router.get("/daterange", response_model=List[expense_models.ExpenseResponse])
def read_expenses_by_date_range(
    start_date: datetime = Query(..., alias="startDate"),
    end_date: datetime = Query(..., alias="endDate"),
    repo: ExpenseRepository = Depends(get_expense_repository)
):
    start_date, end_date = require_date_range(start_date, end_date)
    return repo.get_by_date_range(start_date, end_date)

@router.get("/account/{account_id}", response_model=List[expense_models.ExpenseResponse])
def read_expenses_by_account(account_id: UUID, repo: ExpenseRepository = Depends(get_expense_repository)):
    return repo.get_by_account(account_id)

@router.get("/account/{account_id}/total", response_model=TotalResponse)
def read_total_expenses_by_account(account_id: UUID, repo: ExpenseRepository = Depends(get_expense_repository)):
    return TotalResponse(id=account_id, total=repo.get_total_by_account(account_id))

@router.get("/category/{category_id}", response_model=List[expense_models.ExpenseResponse])
def read_expenses_by_category(category_id: UUID, repo: ExpenseRepository = Depends(get_expense_repository)):
    return repo.get_by_category(category_id)

@router.get("/category/{category_id}/total", response_model=TotalResponse)
def read_total_expenses_by_category(category_id: UUID, repo: ExpenseRepository = Depends(get_expense_repository)):
    return TotalResponse(id=category_id, total=repo.get_total_by_category(category_id))

@router.get("/tag/{tag_id}", response_model=List[expense_models.ExpenseResponse])
def read_expenses_by_tag(tag_id: UUID, repo: ExpenseRepository = Depends(get_expense_repository)):
    return repo.get_by_tag(tag_id)

@router.get("/{expense_id}", response_model=expense_models.ExpenseResponse)
def read_expense(expense_id: UUID, repo: ExpenseRepository = Depends(get_expense_repository)):
    db_expense = repo.get_by_id(expense_id)
    if db_expense is None:
        raise not_found("Expense not found")
    return db_expense

@router.post("/", response_model=expense_models.ExpenseResponse, status_code=status.HTTP_201_CREATED)
def create_expense(
    expense: expense_models.ExpenseCreate,
    response: Response,
    repo: ExpenseRepository = Depends(get_expense_repository)
):
    _validate(expense)

    db_expense = ExpenseDB(id=uuid4(), **expense.model_dump(exclude={"tag_ids"}))
    repo.insert(db_expense)
    repo.set_tags(db_expense, expense.tag_ids)
    repo.save_changes()
    logger.info(f"Created expense {db_expense.id} of {db_expense.amount} on account {db_expense.account_id}")

    set_location(response, "expenses", db_expense.id)
    # Commit expired the instance; reload it together with its tag links
    return repo.get_by_id(db_expense.id)

@router.put("/{expense_id}", status_code=status.HTTP_204_NO_CONTENT)
def update_expense(
    expense_id: UUID,
    expense: expense_models.ExpenseUpdate,
    repo: ExpenseRepository = Depends(get_expense_repository)
):
    db_expense = repo.get_by_id(expense_id)
    if db_expense is None:
        raise not_found("Expense not found")

    _validate(expense)

    for field, value in expense.model_dump(exclude={"tag_ids"}).items():
        setattr(db_expense, field, value)

    repo.update(db_expense)
    repo.set_tags(db_expense, expense.tag_ids)
    repo.save_changes()

@router.delete("/{expense_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_expense(expense_id: UUID, repo: ExpenseRepository = Depends(get_expense_repository)):
    db_expense = repo.get_by_id(expense_id)
    if db_expense is None:
        raise not_found("Expense not found")

    repo.delete(db_expense)
    repo.save_changes()
    logger.info(f"Deleted expense {expense_id}")
