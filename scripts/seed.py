import sys
import os
import random
from sqlalchemy.orm import Session
from datetime import datetime, timedelta
from decimal import Decimal
from uuid import uuid4
from faker import Faker

# Add the project root to the Python path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from expense_analyzer.crud.base import Repository
from expense_analyzer.crud.crud_account import AccountRepository
from expense_analyzer.crud.crud_expense import ExpenseRepository
from expense_analyzer.crud.crud_income import IncomeRepository
from expense_analyzer.crud.crud_transfer import TransferRepository
from expense_analyzer.db.core import (
    Base,
    engine,
    session_local,
    AccountDB,
    CategoryDB,
    TagDB,
    ExpenseDB,
    IncomeDB,
    TransferDB,
)
from expense_analyzer.models.money import to_money

fake = Faker()

ACCOUNT_NAMES = ["Checking", "Savings", "Credit Card", "Cash", "Brokerage"]

EXPENSE_CATEGORIES = [
    "Rent", "Utilities", "Groceries", "Restaurants", "Gas", "Public Transit",
    "Pharmacy", "Streaming Services", "Clothing", "Electronics", "Bank Fee",
]
INCOME_CATEGORIES = ["Paycheck", "Bonus", "Interest", "Refund"]

TAG_NAMES = ["recurring", "business", "vacation", "gift", "reimbursable", "subscription"]


def _random_timestamp() -> datetime:
    return fake.date_time_between(start_date="-1y", end_date="now")


def seed_database():
    """
    Fills the database with a year of sample accounts, expenses, income and transfers.
    """
    Base.metadata.create_all(bind=engine)
    db: Session = session_local()

    accounts = AccountRepository(db)
    categories = Repository(db, CategoryDB)
    tags = Repository(db, TagDB)
    expenses = ExpenseRepository(db)
    income = IncomeRepository(db)
    transfers = TransferRepository(db)

    try:
        # Check if data exists to prevent duplicate seeding
        if accounts.count() > 0:
            print("Database appears to be already seeded. Exiting.")
            return

        print("Seeding database with sample data...")

        # 1. Reference data
        print("Creating accounts, categories and tags...")
        account_rows = [AccountDB(id=uuid4(), name=name) for name in ACCOUNT_NAMES]
        expense_categories = [CategoryDB(id=uuid4(), name=name) for name in EXPENSE_CATEGORIES]
        income_categories = [CategoryDB(id=uuid4(), name=name) for name in INCOME_CATEGORIES]
        tag_rows = [TagDB(id=uuid4(), name=name) for name in TAG_NAMES]

        accounts.insert_range(account_rows)
        categories.insert_range(expense_categories + income_categories)
        tags.insert_range(tag_rows)

        # 2. Expenses, some of them tagged
        print("Creating expenses...")
        for _ in range(300):
            expense = ExpenseDB(
                id=uuid4(),
                account_id=random.choice(account_rows).id,
                category_id=random.choice(expense_categories).id,
                amount=to_money(random.uniform(3.0, 400.0)),
                timestamp=_random_timestamp(),
                comment=fake.catch_phrase() if random.random() < 0.5 else None,
            )
            expenses.insert(expense)
            if random.random() < 0.3:
                chosen = random.sample(tag_rows, k=random.randint(1, 2))
                expenses.set_tags(expense, [tag.id for tag in chosen])

        # 3. Income, twice a month into the first account
        print("Creating income...")
        paycheck = income_categories[0]
        start = datetime.now() - timedelta(days=365)
        for i in range(24):
            income.insert(IncomeDB(
                id=uuid4(),
                account_id=account_rows[0].id,
                category_id=paycheck.id,
                amount=to_money(random.uniform(2500.0, 3500.0)),
                timestamp=start + timedelta(days=15 * i),
                comment=fake.company(),
            ))
        for _ in range(10):
            income.insert(IncomeDB(
                id=uuid4(),
                account_id=random.choice(account_rows).id,
                category_id=random.choice(income_categories[1:]).id,
                amount=to_money(random.uniform(10.0, 1000.0)),
                timestamp=_random_timestamp(),
            ))

        # 4. Transfers between distinct accounts
        print("Creating transfers...")
        for _ in range(40):
            outgoing, incoming = random.sample(account_rows, k=2)
            transfers.insert(TransferDB(
                id=uuid4(),
                outgoing_account_id=outgoing.id,
                incoming_account_id=incoming.id,
                amount=to_money(Decimal(random.randint(50, 2000))),
                timestamp=_random_timestamp(),
                comment=fake.sentence(nb_words=4) if random.random() < 0.3 else None,
            ))

        # One commit for the whole batch
        saved = transfers.save_changes()
        print(f"Successfully seeded database ({saved} rows).")

    except Exception as e:
        print(f"An error occurred: {e}")
        db.rollback()
        raise
    finally:
        db.close()

if __name__ == "__main__":
    seed_database()
