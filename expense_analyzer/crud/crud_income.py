from sqlalchemy import desc, func
from sqlalchemy.orm import Session
from typing import List
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from expense_analyzer.crud.base import Repository
from expense_analyzer.db.core import IncomeDB
from expense_analyzer.models.money import to_money


class IncomeRepository(Repository[IncomeDB]):
    """Income queries. Every list is ordered newest first; date bounds are inclusive."""

    def __init__(self, db: Session):
        super().__init__(db, IncomeDB)

    def get_by_account(self, account_id: UUID) -> List[IncomeDB]:
        return self.db.query(IncomeDB).filter(
            IncomeDB.account_id == account_id
        ).order_by(desc(IncomeDB.timestamp)).all()

    def get_by_category(self, category_id: UUID) -> List[IncomeDB]:
        return self.db.query(IncomeDB).filter(
            IncomeDB.category_id == category_id
        ).order_by(desc(IncomeDB.timestamp)).all()

    def get_by_date_range(self, start_date: datetime, end_date: datetime) -> List[IncomeDB]:
        return self.db.query(IncomeDB).filter(
            IncomeDB.timestamp >= start_date,
            IncomeDB.timestamp <= end_date
        ).order_by(desc(IncomeDB.timestamp)).all()

    def get_by_account_and_date_range(self, account_id: UUID, start_date: datetime, end_date: datetime) -> List[IncomeDB]:
        return self.db.query(IncomeDB).filter(
            IncomeDB.account_id == account_id,
            IncomeDB.timestamp >= start_date,
            IncomeDB.timestamp <= end_date
        ).order_by(desc(IncomeDB.timestamp)).all()

    def get_all_ordered_by_date(self) -> List[IncomeDB]:
        return self.db.query(IncomeDB).order_by(desc(IncomeDB.timestamp)).all()

    def get_total_by_account(self, account_id: UUID) -> Decimal:
        total = self.db.query(func.sum(IncomeDB.amount)).filter(
            IncomeDB.account_id == account_id
        ).scalar()
        return to_money(total)

    def get_total_by_category(self, category_id: UUID) -> Decimal:
        total = self.db.query(func.sum(IncomeDB.amount)).filter(
            IncomeDB.category_id == category_id
        ).scalar()
        return to_money(total)
