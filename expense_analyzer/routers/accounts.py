from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
from typing import List
from uuid import UUID, uuid4

from expense_analyzer.crud.crud_account import AccountRepository
from expense_analyzer.db.core import AccountDB, ArgumentError, get_db
from expense_analyzer.logging_config import get_logger
from expense_analyzer.models import account as account_models
from expense_analyzer.routers.common import bad_request, not_found, require_name, set_location
from expense_analyzer.versioning import require_api_version

logger = get_logger(__name__)

router = APIRouter(
    prefix="/api/v{version}/accounts",
    tags=["accounts"],
    dependencies=[Depends(require_api_version("1.0"))],
)


def get_account_repository(db: Session = Depends(get_db)) -> AccountRepository:
    return AccountRepository(db)


@router.get("/", response_model=List[account_models.AccountResponse])
def read_accounts(repo: AccountRepository = Depends(get_account_repository)):
    """
    Retrieve all accounts, ordered by name.
    """
    return repo.get_all_ordered_by_name()

@router.get("/search", response_model=List[account_models.AccountResponse])
def search_accounts(name: str = "", repo: AccountRepository = Depends(get_account_repository)):
    """
    Case-insensitive search by part of the account name.
    """
    return repo.search_by_name(name)

@router.get("/by-name/{name}", response_model=account_models.AccountResponse)
def read_account_by_name(name: str, repo: AccountRepository = Depends(get_account_repository)):
    try:
        db_account = repo.get_by_name(name)
    except ArgumentError as e:
        raise bad_request(str(e))
    if db_account is None:
        raise not_found("Account not found")
    return db_account

@router.get("/{account_id}", response_model=account_models.AccountResponse)
def read_account(account_id: UUID, repo: AccountRepository = Depends(get_account_repository)):
    db_account = repo.get_by_id(account_id)
    if db_account is None:
        raise not_found("Account not found")
    return db_account

@router.post("/", response_model=account_models.AccountResponse, status_code=status.HTTP_201_CREATED)
def create_account(
    account: account_models.AccountCreate,
    response: Response,
    repo: AccountRepository = Depends(get_account_repository)
):
    """
    Create a new account. Names are unique.
    """
    name = require_name(account.name)
    if repo.exists_by_name(name):
        raise bad_request(f"Account name '{name}' already exists")

    db_account = AccountDB(id=uuid4(), name=name)
    repo.insert(db_account)
    repo.save_changes()
    logger.info(f"Created account {db_account.id} ({name})")

    set_location(response, "accounts", db_account.id)
    return db_account

@router.put("/{account_id}", status_code=status.HTTP_204_NO_CONTENT)
def update_account(
    account_id: UUID,
    account: account_models.AccountUpdate,
    repo: AccountRepository = Depends(get_account_repository)
):
    db_account = repo.get_by_id(account_id)
    if db_account is None:
        raise not_found("Account not found")

    name = require_name(account.name)
    if repo.exists(AccountDB.name == name, AccountDB.id != account_id):
        raise bad_request(f"Account name '{name}' already exists")

    db_account.name = name
    repo.update(db_account)
    repo.save_changes()

@router.delete("/{account_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_account(account_id: UUID, repo: AccountRepository = Depends(get_account_repository)):
    """
    Delete an account. Refused with 409 while income, expenses or transfers reference it.
    """
    db_account = repo.get_by_id(account_id)
    if db_account is None:
        raise not_found("Account not found")

    repo.delete(db_account)
    repo.save_changes()
    logger.info(f"Deleted account {account_id}")
