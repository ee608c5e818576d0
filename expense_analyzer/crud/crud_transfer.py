from sqlalchemy import desc, func, or_
from sqlalchemy.orm import Session
from typing import List
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from expense_analyzer.crud.base import Repository
from expense_analyzer.db.core import TransferDB
from expense_analyzer.models.money import to_money


class TransferRepository(Repository[TransferDB]):
    """Transfer queries. Every list is ordered newest first; date bounds are inclusive."""

    def __init__(self, db: Session):
        super().__init__(db, TransferDB)

    def get_by_outgoing_account(self, account_id: UUID) -> List[TransferDB]:
        return self.db.query(TransferDB).filter(
            TransferDB.outgoing_account_id == account_id
        ).order_by(desc(TransferDB.timestamp)).all()

    def get_by_incoming_account(self, account_id: UUID) -> List[TransferDB]:
        return self.db.query(TransferDB).filter(
            TransferDB.incoming_account_id == account_id
        ).order_by(desc(TransferDB.timestamp)).all()

    def get_by_account(self, account_id: UUID) -> List[TransferDB]:
        """Transfers where the account is on either side"""
        return self.db.query(TransferDB).filter(
            or_(
                TransferDB.outgoing_account_id == account_id,
                TransferDB.incoming_account_id == account_id
            )
        ).order_by(desc(TransferDB.timestamp)).all()

    def get_by_date_range(self, start_date: datetime, end_date: datetime) -> List[TransferDB]:
        return self.db.query(TransferDB).filter(
            TransferDB.timestamp >= start_date,
            TransferDB.timestamp <= end_date
        ).order_by(desc(TransferDB.timestamp)).all()

    def get_by_account_and_date_range(self, account_id: UUID, start_date: datetime, end_date: datetime) -> List[TransferDB]:
        return self.db.query(TransferDB).filter(
            or_(
                TransferDB.outgoing_account_id == account_id,
                TransferDB.incoming_account_id == account_id
            ),
            TransferDB.timestamp >= start_date,
            TransferDB.timestamp <= end_date
        ).order_by(desc(TransferDB.timestamp)).all()

    def get_all_ordered_by_date(self) -> List[TransferDB]:
        return self.db.query(TransferDB).order_by(desc(TransferDB.timestamp)).all()

    def get_total_outgoing_by_account(self, account_id: UUID) -> Decimal:
        total = self.db.query(func.sum(TransferDB.amount)).filter(
            TransferDB.outgoing_account_id == account_id
        ).scalar()
        return to_money(total)

    def get_total_incoming_by_account(self, account_id: UUID) -> Decimal:
        total = self.db.query(func.sum(TransferDB.amount)).filter(
            TransferDB.incoming_account_id == account_id
        ).scalar()
        return to_money(total)
