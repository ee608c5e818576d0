from sqlalchemy import desc, func
from sqlalchemy.orm import Query, Session, selectinload
from typing import Iterable, List, Optional
from datetime import datetime
from decimal import Decimal
from uuid import UUID, uuid4

from expense_analyzer.crud.base import Repository
from expense_analyzer.db.core import ArgumentNullError, ExpenseDB, ExpenseTagDB
from expense_analyzer.logging_config import get_logger
from expense_analyzer.models.money import to_money

logger = get_logger(__name__)


class ExpenseRepository(Repository[ExpenseDB]):
    """
    Expense queries and tag management.

    Every read eager-loads the expense's tag links, so ``ExpenseDB.tag_ids``
    is safe to use on anything this repository returns.
    """

    def __init__(self, db: Session):
        super().__init__(db, ExpenseDB)

    def get_queryable(self) -> Query:
        return self.db.query(ExpenseDB).options(selectinload(ExpenseDB.expense_tags))

    def get_by_id(self, expense_id: UUID) -> Optional[ExpenseDB]:
        return self.get_queryable().filter(ExpenseDB.id == expense_id).first()

    def get_by_account(self, account_id: UUID) -> List[ExpenseDB]:
        return self.get_queryable().filter(
            ExpenseDB.account_id == account_id
        ).order_by(desc(ExpenseDB.timestamp)).all()

    def get_by_category(self, category_id: UUID) -> List[ExpenseDB]:
        return self.get_queryable().filter(
            ExpenseDB.category_id == category_id
        ).order_by(desc(ExpenseDB.timestamp)).all()

    def get_by_tag(self, tag_id: UUID) -> List[ExpenseDB]:
        return self.get_queryable().join(
            ExpenseTagDB, ExpenseTagDB.expense_id == ExpenseDB.id
        ).filter(
            ExpenseTagDB.tag_id == tag_id
        ).order_by(desc(ExpenseDB.timestamp)).all()

    def get_by_date_range(self, start_date: datetime, end_date: datetime) -> List[ExpenseDB]:
        return self.get_queryable().filter(
            ExpenseDB.timestamp >= start_date,
            ExpenseDB.timestamp <= end_date
        ).order_by(desc(ExpenseDB.timestamp)).all()

    def get_by_account_and_date_range(self, account_id: UUID, start_date: datetime, end_date: datetime) -> List[ExpenseDB]:
        return self.get_queryable().filter(
            ExpenseDB.account_id == account_id,
            ExpenseDB.timestamp >= start_date,
            ExpenseDB.timestamp <= end_date
        ).order_by(desc(ExpenseDB.timestamp)).all()

    def get_all_ordered_by_date(self) -> List[ExpenseDB]:
        return self.get_queryable().order_by(desc(ExpenseDB.timestamp)).all()

    def get_total_by_account(self, account_id: UUID) -> Decimal:
        total = self.db.query(func.sum(ExpenseDB.amount)).filter(
            ExpenseDB.account_id == account_id
        ).scalar()
        return to_money(total)

    def get_total_by_category(self, category_id: UUID) -> Decimal:
        total = self.db.query(func.sum(ExpenseDB.amount)).filter(
            ExpenseDB.category_id == category_id
        ).scalar()
        return to_money(total)

    # ===== TAGS =====

    def get_tag_ids(self, expense_id: UUID) -> List[UUID]:
        links = self.db.query(ExpenseTagDB).filter(ExpenseTagDB.expense_id == expense_id).all()
        return [link.tag_id for link in links]

    def set_tags(self, expense: ExpenseDB, tag_ids: Iterable[UUID]) -> None:
        """Stage link inserts/deletes so the expense ends up tagged with exactly ``tag_ids``"""
        if expense is None:
            raise ArgumentNullError("expense")
        if tag_ids is None:
            raise ArgumentNullError("tag_ids")

        if expense.id is None:
            expense.id = uuid4()

        wanted = list(dict.fromkeys(tag_ids))

        # The session does not autoflush, so links staged by an earlier call
        # are only visible through session.new and session.deleted
        current = {
            link.tag_id: link
            for link in self.db.query(ExpenseTagDB).filter(ExpenseTagDB.expense_id == expense.id).all()
            if link not in self.db.deleted
        }
        current.update({
            obj.tag_id: obj
            for obj in self.db.new
            if isinstance(obj, ExpenseTagDB) and obj.expense_id == expense.id
        })

        for tag_id, link in current.items():
            if tag_id in wanted:
                continue
            if link in self.db.new:
                self.db.expunge(link)
            else:
                self.db.delete(link)

        for tag_id in wanted:
            if tag_id not in current:
                self.db.add(ExpenseTagDB(expense_id=expense.id, tag_id=tag_id))

        logger.debug(f"Staged tags {wanted} for expense {expense.id}")
