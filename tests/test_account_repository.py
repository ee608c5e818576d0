from uuid import uuid4

import pytest

from expense_analyzer.crud.crud_account import AccountRepository
from expense_analyzer.db.core import AccountDB, ArgumentError


@pytest.fixture
def accounts(db_session, seeded) -> AccountRepository:
    repo = AccountRepository(db_session)
    repo.insert(AccountDB(id=uuid4(), name="Brokerage"))
    repo.save_changes()
    return repo


def test_get_by_name_is_exact(accounts):
    assert accounts.get_by_name("Savings").name == "Savings"
    assert accounts.get_by_name("savings") is None
    assert accounts.get_by_name("Sav") is None


@pytest.mark.parametrize("name", [None, "", "   "])
def test_blank_names_are_rejected(accounts, name):
    with pytest.raises(ArgumentError):
        accounts.get_by_name(name)
    with pytest.raises(ArgumentError):
        accounts.exists_by_name(name)


def test_exists_by_name(accounts):
    assert accounts.exists_by_name("Checking")
    assert not accounts.exists_by_name("Cash")


def test_get_all_ordered_by_name(accounts):
    assert [a.name for a in accounts.get_all_ordered_by_name()] == ["Brokerage", "Checking", "Savings"]


def test_search_by_name_is_case_insensitive_substring(accounts):
    assert [a.name for a in accounts.search_by_name("ING")] == ["Checking", "Savings"]
    assert [a.name for a in accounts.search_by_name("broker")] == ["Brokerage"]
    assert accounts.search_by_name("zzz") == []


@pytest.mark.parametrize("pattern", [None, "", "  "])
def test_blank_search_returns_everything(accounts, pattern):
    assert accounts.search_by_name(pattern) == accounts.get_all_ordered_by_name()


def test_search_treats_wildcards_literally(accounts):
    accounts.insert(AccountDB(id=uuid4(), name="Joint_100%"))
    accounts.save_changes()

    assert [a.name for a in accounts.search_by_name("_")] == ["Joint_100%"]
    assert [a.name for a in accounts.search_by_name("100%")] == ["Joint_100%"]
    assert accounts.search_by_name("%%") == []
