import os
import sqlite3
import time
from typing import Callable, Optional, Tuple, Type, TypeVar
from sqlalchemy import create_engine, event, ForeignKey, Index, UniqueConstraint, String, Text, DECIMAL, DateTime
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase, Mapped, relationship, mapped_column
from datetime import datetime
from uuid import UUID, uuid4
from decimal import Decimal
from dotenv import load_dotenv

from expense_analyzer.logging_config import get_logger

load_dotenv()

logger = get_logger(__name__)

DATABASE_URL = os.environ.get("DATABASE_URL", "sqlite:///expense_analyzer.db")
DB_RETRY_COUNT = int(os.environ.get("DB_RETRY_COUNT", "3"))
DB_RETRY_DELAY = float(os.environ.get("DB_RETRY_DELAY", "5"))

T = TypeVar("T")


class ArgumentError(ValueError):
    """Invalid argument passed to a repository; raised before any I/O."""


class ArgumentNullError(ArgumentError):
    def __init__(self, param_name: str):
        super().__init__(f"Value cannot be None. (Parameter '{param_name}')")
        self.param_name = param_name


class Base(DeclarativeBase):
    pass


class AccountDB(Base):
    __tablename__ = "accounts"

    __table_args__ = (
        UniqueConstraint("name", name="uq_account_name"),
    )

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)


class CategoryDB(Base):
    __tablename__ = "categories"

    __table_args__ = (
        UniqueConstraint("name", name="uq_category_name"),
    )

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)


class TagDB(Base):
    __tablename__ = "tags"

    __table_args__ = (
        UniqueConstraint("name", name="uq_tag_name"),
    )

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)


class ExpenseDB(Base):
    __tablename__ = "expenses"

    __table_args__ = (
        Index("idx_expenses_account", "account_id"),
        Index("idx_expenses_category", "category_id"),
        Index("idx_expenses_timestamp", "timestamp"),
    )

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)

    # Foreign Keys
    category_id: Mapped[UUID] = mapped_column(ForeignKey("categories.id", ondelete="RESTRICT"), nullable=False)
    account_id: Mapped[UUID] = mapped_column(ForeignKey("accounts.id", ondelete="RESTRICT"), nullable=False)

    # Expense Data
    amount: Mapped[Decimal] = mapped_column(DECIMAL(15, 2), nullable=False)
    timestamp: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    comment: Mapped[Optional[str]] = mapped_column(Text)

    # Relationships (explicit loading only)
    category = relationship("CategoryDB", lazy="raise")
    account = relationship("AccountDB", lazy="raise")
    expense_tags = relationship(
        "ExpenseTagDB",
        back_populates="expense",
        cascade="all",
        passive_deletes=True,
        lazy="raise",
    )

    @property
    def tag_ids(self):
        return [link.tag_id for link in self.expense_tags]


class ExpenseTagDB(Base):
    __tablename__ = "expense_tags"

    # Composite Primary Key
    expense_id: Mapped[UUID] = mapped_column(ForeignKey("expenses.id", ondelete="CASCADE"), primary_key=True)
    tag_id: Mapped[UUID] = mapped_column(ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True)

    expense = relationship("ExpenseDB", back_populates="expense_tags", lazy="raise")
    tag = relationship("TagDB", lazy="raise")


class IncomeDB(Base):
    __tablename__ = "income"

    __table_args__ = (
        Index("idx_income_account", "account_id"),
        Index("idx_income_category", "category_id"),
        Index("idx_income_timestamp", "timestamp"),
    )

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)

    # Foreign Keys
    category_id: Mapped[UUID] = mapped_column(ForeignKey("categories.id", ondelete="RESTRICT"), nullable=False)
    account_id: Mapped[UUID] = mapped_column(ForeignKey("accounts.id", ondelete="RESTRICT"), nullable=False)

    # Income Data
    amount: Mapped[Decimal] = mapped_column(DECIMAL(15, 2), nullable=False)
    timestamp: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    comment: Mapped[Optional[str]] = mapped_column(Text)

    # Relationships (explicit loading only)
    category = relationship("CategoryDB", lazy="raise")
    account = relationship("AccountDB", lazy="raise")


class TransferDB(Base):
    __tablename__ = "transfers"

    __table_args__ = (
        Index("idx_transfers_outgoing_account", "outgoing_account_id"),
        Index("idx_transfers_incoming_account", "incoming_account_id"),
        Index("idx_transfers_timestamp", "timestamp"),
    )

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)

    # Foreign Keys (outgoing != incoming is checked by the API, not here)
    outgoing_account_id: Mapped[UUID] = mapped_column(ForeignKey("accounts.id", ondelete="RESTRICT"), nullable=False)
    incoming_account_id: Mapped[UUID] = mapped_column(ForeignKey("accounts.id", ondelete="RESTRICT"), nullable=False)

    # Transfer Data
    amount: Mapped[Decimal] = mapped_column(DECIMAL(15, 2), nullable=False)
    timestamp: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    comment: Mapped[Optional[str]] = mapped_column(Text)

    # Relationships (explicit loading only)
    outgoing_account = relationship("AccountDB", foreign_keys=[outgoing_account_id], lazy="raise")
    incoming_account = relationship("AccountDB", foreign_keys=[incoming_account_id], lazy="raise")


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores FK constraints unless enabled per connection
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def connect_with_retry(
    connect: Callable[[], T],
    transient_errors: Tuple[Type[BaseException], ...],
    retries: int = DB_RETRY_COUNT,
    delay: float = DB_RETRY_DELAY,
) -> T:
    """
    Call ``connect`` until it succeeds, retrying transient failures.

    Args:
        connect: Zero-argument callable returning a DBAPI connection
        transient_errors: Exception types treated as transient
        retries: Number of retries after the first attempt
        delay: Seconds to wait between attempts

    Returns:
        Whatever ``connect`` returns

    Raises:
        The last transient error once all retries are exhausted.
    """
    attempts = max(retries, 0) + 1
    for attempt in range(attempts):
        try:
            return connect()
        except transient_errors as e:
            if attempt == attempts - 1:
                logger.error(f"Database connection failed after {attempts} attempts: {e}")
                raise
            logger.warning(f"Database connection failed (attempt {attempt + 1}/{attempts}): {e}")
            time.sleep(delay)


def install_connection_retry(target_engine: Engine, retries: int = DB_RETRY_COUNT, delay: float = DB_RETRY_DELAY) -> None:
    """Retry new DBAPI connections of ``target_engine`` on OperationalError."""

    @event.listens_for(target_engine, "do_connect")
    def _connect(dialect, conn_rec, cargs, cparams):
        return connect_with_retry(
            lambda: dialect.connect(*cargs, **cparams),
            (dialect.loaded_dbapi.OperationalError,),
            retries=retries,
            delay=delay,
        )


engine = create_engine(DATABASE_URL, echo=os.getenv("SQL_ECHO", "false").lower() == "true")
install_connection_retry(engine)
session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)


# Dependency to get the database session
def get_db():
    database = session_local()
    try:
        yield database
    finally:
        database.close()
