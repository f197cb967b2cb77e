import uuid

import pytest
from sqlalchemy import select, func
from sqlalchemy.exc import OperationalError

from app.db.models import Customer, Address
from app.services import cascade
from app.services.address import count_addresses
from app.services.cascade import CascadeOutcome, delete_customer
from app.services.errors import InvalidArgument


async def _remaining(db_session, customer_id):
    customers = await db_session.execute(select(func.count(Customer.id)).where(Customer.id == customer_id))
    addresses = await db_session.execute(select(func.count(Address.id)).where(Address.customer_id == customer_id))
    return customers.scalar(), addresses.scalar()


async def _no_transactions(db, customer_id):
    raise OperationalError("BEGIN", {}, Exception("transactions are not supported"))


@pytest.mark.asyncio
async def test_delete_customer_in_transaction(db_session, make_customer, new_address):
    jane = await make_customer(addresses=[new_address(), new_address(), new_address()])
    ann = await make_customer(first_name="Ann")

    result = await delete_customer(db_session, jane.id)

    assert result.outcome == CascadeOutcome.COMMITTED
    assert result.deleted
    assert result.addresses_deleted == 3
    assert await _remaining(db_session, jane.id) == (0, 0)
    assert await _remaining(db_session, ann.id) == (1, 1)

    counts = await count_addresses(db_session, [jane.id, ann.id])
    assert jane.id not in counts


@pytest.mark.asyncio
async def test_delete_customer_after_reads_in_same_session(db_session, make_customer):
    jane = await make_customer()
    await count_addresses(db_session, [jane.id])

    result = await delete_customer(db_session, jane.id)

    assert result.outcome == CascadeOutcome.COMMITTED


@pytest.mark.asyncio
async def test_delete_customer_not_found(db_session):
    result = await delete_customer(db_session, uuid.uuid4().hex)

    assert result.outcome == CascadeOutcome.NOT_FOUND
    assert not result.deleted


@pytest.mark.asyncio
async def test_delete_customer_invalid_id(db_session):
    with pytest.raises(InvalidArgument, match="Invalid customer id"):
        await delete_customer(db_session, "not-a-customer")


@pytest.mark.asyncio
async def test_delete_customer_falls_back_when_transaction_fails(db_session, make_customer, new_address, monkeypatch):
    monkeypatch.setattr(cascade, "_delete_in_transaction", _no_transactions)
    jane = await make_customer(addresses=[new_address(), new_address()])

    result = await delete_customer(db_session, jane.id)

    assert result.outcome == CascadeOutcome.FALLBACK_APPLIED
    assert result.deleted
    assert result.addresses_deleted == 2
    assert await _remaining(db_session, jane.id) == (0, 0)


@pytest.mark.asyncio
async def test_delete_customer_fallback_not_found(db_session, monkeypatch):
    monkeypatch.setattr(cascade, "_delete_in_transaction", _no_transactions)

    result = await delete_customer(db_session, uuid.uuid4().hex)

    assert result.outcome == CascadeOutcome.NOT_FOUND


@pytest.mark.asyncio
async def test_delete_customer_without_transactions(db_session, make_customer):
    jane = await make_customer()

    result = await delete_customer(db_session, jane.id, use_transaction=False)

    assert result.outcome == CascadeOutcome.FALLBACK_APPLIED
    assert await _remaining(db_session, jane.id) == (0, 0)


@pytest.mark.asyncio
async def test_delete_customer_fallback_failure_is_reported(db_session, make_customer, monkeypatch):
    async def lost_connection(db, customer_id):
        raise OperationalError("DELETE", {}, Exception("connection reset"))

    monkeypatch.setattr(cascade, "_delete_in_transaction", _no_transactions)
    monkeypatch.setattr(cascade, "_delete_best_effort", lost_connection)
    jane = await make_customer()

    result = await delete_customer(db_session, jane.id)

    assert result.outcome == CascadeOutcome.FAILED
    assert not result.deleted
    assert "connection reset" in result.error
    assert await _remaining(db_session, jane.id) == (1, 1)


def _fail_customer_delete(monkeypatch):
    real_delete = cascade.delete

    def delete_with_failure(table):
        if table is Customer:
            raise OperationalError("DELETE", {}, Exception("disk I/O error"))
        return real_delete(table)

    monkeypatch.setattr(cascade, "delete", delete_with_failure)


@pytest.mark.asyncio
async def test_transaction_rolls_back_address_delete(db_session, make_customer, monkeypatch):
    jane = await make_customer()
    _fail_customer_delete(monkeypatch)

    with pytest.raises(OperationalError):
        await cascade._delete_in_transaction(db_session, jane.id)

    assert await _remaining(db_session, jane.id) == (1, 1)


@pytest.mark.asyncio
async def test_fallback_failure_can_leave_partial_state(db_session, make_customer, monkeypatch):
    jane = await make_customer()
    _fail_customer_delete(monkeypatch)

    result = await delete_customer(db_session, jane.id)

    assert result.outcome == CascadeOutcome.FAILED
    # addresses went in their own commit, the customer row did not
    assert await _remaining(db_session, jane.id) == (1, 0)
