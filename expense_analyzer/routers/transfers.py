from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session
from typing import List
from datetime import datetime
from uuid import UUID, uuid4

from expense_analyzer.crud.crud_transfer import TransferRepository
from expense_analyzer.db.core import TransferDB, get_db
from expense_analyzer.logging_config import get_logger
from expense_analyzer.models import transfer as transfer_models
from expense_analyzer.routers.common import (
    bad_request,
    not_found,
    require_date_range,
    require_id,
    require_positive_amount,
    set_location,
)
from expense_analyzer.versioning import require_api_version

logger = get_logger(__name__)

router = APIRouter(
    prefix="/api/v{version}/transfer",
    tags=["transfer"],
    dependencies=[Depends(require_api_version("1.0"))],
)


def get_transfer_repository(db: Session = Depends(get_db)) -> TransferRepository:
    return TransferRepository(db)


def _validate(transfer: transfer_models.TransferCreate) -> None:
    outgoing = require_id(transfer.outgoing_account_id, "OutgoingAccountId")
    incoming = require_id(transfer.incoming_account_id, "IncomingAccountId")
    if outgoing == incoming:
        raise bad_request("OutgoingAccountId and IncomingAccountId must be different")
    require_positive_amount(transfer.amount)


@router.get("/", response_model=List[transfer_models.TransferResponse])
def read_transfers(repo: TransferRepository = Depends(get_transfer_repository)):
    """
    Retrieve all transfers, newest first.
    """
    return repo.get_all_ordered_by_date()

@router.get("/daterange", response_model=List[transfer_models.TransferResponse])
def read_transfers_by_date_range(
    start_date: datetime = Query(..., alias="startDate"),
    end_date: datetime = Query(..., alias="endDate"),
    repo: TransferRepository = Depends(get_transfer_repository)
):
    start_date, end_date = require_date_range(start_date, end_date)
    return repo.get_by_date_range(start_date, end_date)

@router.get("/account/{account_id}", response_model=List[transfer_models.TransferResponse])
def read_transfers_by_account(account_id: UUID, repo: TransferRepository = Depends(get_transfer_repository)):
    """
    Retrieve transfers in which the account is either the sender or the receiver.
    """
    return repo.get_by_account(account_id)

@router.get("/account/{account_id}/total", response_model=transfer_models.TransferTotalsResponse)
def read_transfer_totals_by_account(account_id: UUID, repo: TransferRepository = Depends(get_transfer_repository)):
    """
    Money moved out of and into the account by transfers.
    """
    return transfer_models.TransferTotalsResponse(
        account_id=account_id,
        outgoing=repo.get_total_outgoing_by_account(account_id),
        incoming=repo.get_total_incoming_by_account(account_id),
    )

@router.get("/outgoing/{account_id}", response_model=List[transfer_models.TransferResponse])
def read_transfers_by_outgoing_account(account_id: UUID, repo: TransferRepository = Depends(get_transfer_repository)):
    return repo.get_by_outgoing_account(account_id)

@router.get("/incoming/{account_id}", response_model=List[transfer_models.TransferResponse])
def read_transfers_by_incoming_account(account_id: UUID, repo: TransferRepository = Depends(get_transfer_repository)):
    return repo.get_by_incoming_account(account_id)

@router.get("/{transfer_id}", response_model=transfer_models.TransferResponse)
def read_transfer(transfer_id: UUID, repo: TransferRepository = Depends(get_transfer_repository)):
    db_transfer = repo.get_by_id(transfer_id)
    if db_transfer is None:
        raise not_found("Transfer not found")
    return db_transfer

@router.post("/", response_model=transfer_models.TransferResponse, status_code=status.HTTP_201_CREATED)
def create_transfer(
    transfer: transfer_models.TransferCreate,
    response: Response,
    repo: TransferRepository = Depends(get_transfer_repository)
):
    _validate(transfer)

    db_transfer = TransferDB(id=uuid4(), **transfer.model_dump())
    repo.insert(db_transfer)
    repo.save_changes()
    logger.info(
        f"Created transfer {db_transfer.id}: {db_transfer.amount} from "
        f"{db_transfer.outgoing_account_id} to {db_transfer.incoming_account_id}"
    )

    set_location(response, "transfer", db_transfer.id)
    return db_transfer

@router.put("/{transfer_id}", status_code=status.HTTP_204_NO_CONTENT)
def update_transfer(
    transfer_id: UUID,
    transfer: transfer_models.TransferUpdate,
    repo: TransferRepository = Depends(get_transfer_repository)
):
    db_transfer = repo.get_by_id(transfer_id)
    if db_transfer is None:
        raise not_found("Transfer not found")

    _validate(transfer)

    for field, value in transfer.model_dump().items():
        setattr(db_transfer, field, value)

    repo.update(db_transfer)
    repo.save_changes()

@router.delete("/{transfer_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_transfer(transfer_id: UUID, repo: TransferRepository = Depends(get_transfer_repository)):
    db_transfer = repo.get_by_id(transfer_id)
    if db_transfer is None:
        raise not_found("Transfer not found")

    repo.delete(db_transfer)
    repo.save_changes()
    logger.info(f"Deleted transfer {transfer_id}")
