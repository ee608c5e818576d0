from datetime import datetime
from decimal import Decimal
from uuid import uuid4

import pytest

from expense_analyzer.crud.base import Repository
from expense_analyzer.crud.crud_expense import ExpenseRepository
from expense_analyzer.db.core import ArgumentNullError, ExpenseDB, TagDB

from conftest import make_expense


@pytest.fixture
def tags(db_session):
    rows = [TagDB(id=uuid4(), name=name) for name in ("food", "work", "travel")]
    repo = Repository(db_session, TagDB)
    repo.insert_range(rows)
    repo.save_changes()
    return [row.id for row in rows]


@pytest.fixture
def expenses(db_session) -> ExpenseRepository:
    return ExpenseRepository(db_session)


def test_set_tags_on_new_expense(expenses, seeded, tags):
    food, work, _ = tags
    expense = make_expense(seeded.checking, seeded.groceries, "19.99", datetime(2025, 3, 1))
    expenses.insert(expense)
    expenses.set_tags(expense, [food, work, food])
    expenses.save_changes()

    stored = expenses.get_by_id(expense.id)
    assert set(stored.tag_ids) == {food, work}
    assert set(expenses.get_tag_ids(expense.id)) == {food, work}


def test_set_tags_assigns_missing_id(expenses, seeded, tags):
    expense = ExpenseDB(
        account_id=seeded.checking,
        category_id=seeded.groceries,
        amount=Decimal("3.50"),
        timestamp=datetime(2025, 3, 2),
    )
    expenses.insert(expense)
    expenses.set_tags(expense, tags[:1])

    assert expense.id is not None
    expenses.save_changes()
    assert expenses.get_tag_ids(expense.id) == tags[:1]


def test_set_tags_replaces_existing_set(expenses, seeded, tags):
    food, work, travel = tags
    expense = make_expense(seeded.checking, seeded.groceries, "60.00", datetime(2025, 3, 3))
    expenses.insert(expense)
    expenses.set_tags(expense, [food, work])
    expenses.save_changes()

    stored = expenses.get_by_id(expense.id)
    expenses.set_tags(stored, [work, travel])
    expenses.save_changes()

    assert set(expenses.get_by_id(expense.id).tag_ids) == {work, travel}

    expenses.set_tags(expenses.get_by_id(expense.id), [])
    expenses.save_changes()
    assert expenses.get_by_id(expense.id).tag_ids == []


def test_set_tags_rejects_none(expenses, seeded):
    expense = make_expense(seeded.checking, seeded.groceries, "1.00", datetime(2025, 3, 4))
    with pytest.raises(ArgumentNullError):
        expenses.set_tags(None, [])
    with pytest.raises(ArgumentNullError):
        expenses.set_tags(expense, None)


def test_get_by_tag(expenses, seeded, tags):
    food, work, travel = tags
    lunch = make_expense(seeded.checking, seeded.groceries, "12.00", datetime(2025, 4, 1), "lunch")
    taxi = make_expense(seeded.savings, seeded.groceries, "30.00", datetime(2025, 4, 2), "taxi")
    expenses.insert_range([lunch, taxi])
    expenses.set_tags(lunch, [food, work])
    expenses.set_tags(taxi, [work, travel])
    expenses.save_changes()

    assert [e.comment for e in expenses.get_by_tag(work)] == ["taxi", "lunch"]
    assert [e.comment for e in expenses.get_by_tag(food)] == ["lunch"]
    assert expenses.get_by_tag(uuid4()) == []


def test_deleting_expense_or_tag_removes_links(expenses, db_session, seeded, tags):
    food, work, _ = tags
    first = make_expense(seeded.checking, seeded.groceries, "8.00", datetime(2025, 5, 1))
    second = make_expense(seeded.checking, seeded.groceries, "9.00", datetime(2025, 5, 2))
    expenses.insert_range([first, second])
    expenses.set_tags(first, [food])
    expenses.set_tags(second, [food, work])
    expenses.save_changes()

    expenses.delete(expenses.get_by_id(first.id))
    expenses.save_changes()
    assert expenses.get_by_tag(food) == [expenses.get_by_id(second.id)]

    tag_repo = Repository(db_session, TagDB)
    tag_repo.delete_by_id(food)
    tag_repo.save_changes()
    assert expenses.get_tag_ids(second.id) == [work]


def test_queries_and_totals(expenses, seeded):
    expenses.insert_range([
        make_expense(seeded.checking, seeded.groceries, "10.00", datetime(2025, 6, 1), "a"),
        make_expense(seeded.checking, seeded.groceries, "20.00", datetime(2025, 6, 10), "b"),
        make_expense(seeded.savings, seeded.groceries, "5.00", datetime(2025, 6, 20), "c"),
    ])
    expenses.save_changes()

    assert [e.comment for e in expenses.get_all_ordered_by_date()] == ["c", "b", "a"]
    assert [e.comment for e in expenses.get_by_account(seeded.checking)] == ["b", "a"]
    assert [e.comment for e in expenses.get_by_category(seeded.groceries)] == ["c", "b", "a"]
    assert [e.comment for e in expenses.get_by_date_range(datetime(2025, 6, 1), datetime(2025, 6, 10))] == ["b", "a"]
    assert [e.comment for e in expenses.get_by_account_and_date_range(
        seeded.checking, datetime(2025, 6, 5), datetime(2025, 6, 30)
    )] == ["b"]

    assert expenses.get_total_by_account(seeded.checking) == Decimal("30.00")
    assert expenses.get_total_by_category(seeded.groceries) == Decimal("35.00")
    assert expenses.get_total_by_account(uuid4()) == Decimal("0.00")


def test_set_tags_twice_before_saving(expenses, seeded, tags):
    food, work, travel = tags
    expense = make_expense(seeded.checking, seeded.groceries, "14.00", datetime(2025, 7, 1))
    expenses.insert(expense)
    expenses.set_tags(expense, [food])
    expenses.set_tags(expense, [food, work])
    expenses.save_changes()

    assert set(expenses.get_tag_ids(expense.id)) == {food, work}

    stored = expenses.get_by_id(expense.id)
    expenses.set_tags(stored, [travel])
    expenses.set_tags(stored, [work, travel])
    expenses.save_changes()

    assert set(expenses.get_tag_ids(expense.id)) == {work, travel}


def test_save_count_excludes_links_removed_by_cascade(expenses, db_session, seeded, tags):
    food, work, _ = tags
    expense = make_expense(seeded.checking, seeded.groceries, "7.00", datetime(2025, 7, 2))
    expenses.insert(expense)
    expenses.set_tags(expense, [food, work])
    assert expenses.save_changes() == 3

    tag_repo = Repository(db_session, TagDB)
    tag_repo.delete_by_id(food)
    assert tag_repo.save_changes() == 1
    assert expenses.get_tag_ids(expense.id) == [work]
