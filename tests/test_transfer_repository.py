from datetime import datetime
from decimal import Decimal
from uuid import uuid4

import pytest

from expense_analyzer.crud.crud_transfer import TransferRepository

from conftest import make_transfer


@pytest.fixture
def transfers(db_session, seeded) -> TransferRepository:
    repo = TransferRepository(db_session)
    repo.insert(make_transfer(seeded.checking, seeded.savings, "500.00", datetime(2025, 1, 20)))
    repo.save_changes()
    return repo


def _ids(rows):
    return [row.id for row in rows]


def test_transfer_between_accounts(transfers, seeded):
    (transfer,) = transfers.get_all()

    assert _ids(transfers.get_by_outgoing_account(seeded.checking)) == [transfer.id]
    assert transfers.get_by_incoming_account(seeded.checking) == []
    assert _ids(transfers.get_by_account(seeded.checking)) == [transfer.id]
    assert _ids(transfers.get_by_account(seeded.savings)) == [transfer.id]


def test_get_by_account_has_no_duplicates(transfers, seeded):
    # Repositories do not forbid a transfer onto the same account
    transfers.insert(make_transfer(seeded.savings, seeded.savings, "1.00", datetime(2025, 1, 21)))
    transfers.save_changes()

    rows = transfers.get_by_account(seeded.savings)
    assert len(rows) == 2
    assert len(set(_ids(rows))) == 2


def test_get_by_account_is_union_of_sides(transfers, seeded):
    transfers.insert(make_transfer(seeded.savings, seeded.checking, "75.00", datetime(2025, 2, 3)))
    transfers.save_changes()

    both = set(_ids(transfers.get_by_account(seeded.checking)))
    outgoing = set(_ids(transfers.get_by_outgoing_account(seeded.checking)))
    incoming = set(_ids(transfers.get_by_incoming_account(seeded.checking)))

    assert both == outgoing | incoming
    assert len(both) == 2


def test_date_ranges(transfers, seeded):
    transfers.insert(make_transfer(seeded.savings, seeded.checking, "75.00", datetime(2025, 2, 3)))
    transfers.save_changes()

    january = transfers.get_by_date_range(datetime(2025, 1, 1), datetime(2025, 1, 20))
    assert [row.amount for row in january] == [Decimal("500.00")]

    rows = transfers.get_by_account_and_date_range(seeded.savings, datetime(2025, 1, 1), datetime(2025, 12, 31))
    assert [row.amount for row in rows] == [Decimal("75.00"), Decimal("500.00")]

    assert [row.amount for row in transfers.get_all_ordered_by_date()] == [Decimal("75.00"), Decimal("500.00")]


def test_totals_per_side(transfers, seeded):
    transfers.insert(make_transfer(seeded.savings, seeded.checking, "75.00", datetime(2025, 2, 3)))
    transfers.save_changes()

    assert transfers.get_total_outgoing_by_account(seeded.checking) == Decimal("500.00")
    assert transfers.get_total_incoming_by_account(seeded.checking) == Decimal("75.00")
    assert transfers.get_total_outgoing_by_account(uuid4()) == Decimal("0.00")
