"""Deleting a customer together with every address it owns.

The delete first runs inside a single transaction. If that scope cannot be
opened or fails part way (for any reason other than the customer being
absent), the same steps are repeated as independent statements with no
rollback between them. Callers get a CascadeDeleteResult naming the branch
that ran instead of an exception, so a FAILED fallback may have left the
addresses gone and the customer still present.
"""
import enum
import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import delete

from app.db.models import Customer, Address
from app.services.lookup import require_id, fetch_customer

logger = logging.getLogger(__name__)


class CascadeOutcome(str, enum.Enum):
    COMMITTED = "COMMITTED"
    FALLBACK_APPLIED = "FALLBACK_APPLIED"
    NOT_FOUND = "NOT_FOUND"
    FAILED = "FAILED"


@dataclass
class CascadeDeleteResult:
    customer_id: str
    outcome: CascadeOutcome
    addresses_deleted: int = 0
    error: Optional[str] = None

    @property
    def deleted(self) -> bool:
        return self.outcome in (CascadeOutcome.COMMITTED, CascadeOutcome.FALLBACK_APPLIED)


async def _delete_in_transaction(db: AsyncSession, customer_id: str) -> Optional[int]:
    """Delete addresses then customer in one transaction.

    Returns the number of addresses removed, or None if the customer does not exist.
    """
    # the transaction has to own the whole unit of work
    if db.in_transaction():
        await db.commit()

    transaction = await db.begin()
    try:
        customer = await fetch_customer(db, customer_id)
        if customer is None:
            await transaction.rollback()
            return None

        result = await db.execute(delete(Address).where(Address.customer_id == customer_id))
        await db.execute(delete(Customer).where(Customer.id == customer_id))
        await transaction.commit()
        return result.rowcount
    except Exception:
        if transaction.is_active:
            await transaction.rollback()
        raise


async def _delete_best_effort(db: AsyncSession, customer_id: str) -> Optional[int]:
    """Same steps as _delete_in_transaction, each committed on its own."""
    if db.in_transaction():
        await db.rollback()

    customer = await fetch_customer(db, customer_id)
    if customer is None:
        return None

    result = await db.execute(delete(Address).where(Address.customer_id == customer_id))
    await db.commit()

    await db.execute(delete(Customer).where(Customer.id == customer_id))
    await db.commit()
    return result.rowcount


async def delete_customer(db: AsyncSession, customer_id: str, use_transaction: bool = True) -> CascadeDeleteResult:
    customer_id = require_id(customer_id, "Invalid customer id")

    if use_transaction:
        try:
            deleted = await _delete_in_transaction(db, customer_id)
        except Exception as e:
            logger.warning(f"Transaction failed for customer {customer_id}, attempting non-transactional cleanup: {e}")
        else:
            if deleted is None:
                return CascadeDeleteResult(customer_id, CascadeOutcome.NOT_FOUND)
            logger.info(f"Customer {customer_id} deleted with {deleted} address(es)")
            return CascadeDeleteResult(customer_id, CascadeOutcome.COMMITTED, addresses_deleted=deleted)

    try:
        deleted = await _delete_best_effort(db, customer_id)
    except Exception as e:
        logger.error(f"Non-transactional delete failed for customer {customer_id}", exc_info=True)
        await db.rollback()
        return CascadeDeleteResult(customer_id, CascadeOutcome.FAILED, error=str(e))

    if deleted is None:
        return CascadeDeleteResult(customer_id, CascadeOutcome.NOT_FOUND)

    logger.info(f"Customer {customer_id} deleted without transaction, {deleted} address(es) removed")
    return CascadeDeleteResult(customer_id, CascadeOutcome.FALLBACK_APPLIED, addresses_deleted=deleted)
