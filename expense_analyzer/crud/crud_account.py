from sqlalchemy.orm import Session
from typing import List, Optional

from expense_analyzer.crud.base import Repository
from expense_analyzer.db.core import AccountDB, ArgumentError


def _require_name(name: str) -> None:
    if name is None or not name.strip():
        raise ArgumentError("Name cannot be null or whitespace.")


class AccountRepository(Repository[AccountDB]):
    """Account-specific queries on top of the generic repository."""

    def __init__(self, db: Session):
        super().__init__(db, AccountDB)

    def get_by_name(self, name: str) -> Optional[AccountDB]:
        """Get an account by its exact, unique name"""
        _require_name(name)
        return self.db.query(AccountDB).filter(AccountDB.name == name).first()

    def exists_by_name(self, name: str) -> bool:
        _require_name(name)
        return self.exists(AccountDB.name == name)

    def get_all_ordered_by_name(self) -> List[AccountDB]:
        return self.db.query(AccountDB).order_by(AccountDB.name).all()

    def search_by_name(self, name_pattern: Optional[str]) -> List[AccountDB]:
        """Case-insensitive literal substring search; a blank pattern returns every account"""
        if name_pattern is None or not name_pattern.strip():
            return self.get_all_ordered_by_name()

        return self.db.query(AccountDB).filter(
            AccountDB.name.icontains(name_pattern, autoescape=True)
        ).order_by(AccountDB.name).all()
