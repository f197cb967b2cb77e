import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from app.core.normalize import normalize_id
from app.db.models import Customer, Address
from app.schemas.address import AddressResponse
from app.schemas.customer import CustomerDetail, CustomerResponse
from app.services.errors import InvalidArgument, InternalError

logger = logging.getLogger(__name__)


def require_id(value, message: str = "Invalid id") -> str:
    record_id = normalize_id(value)
    if record_id is None:
        raise InvalidArgument(message)
    return record_id


async def fetch_customer(db: AsyncSession, customer_id: str) -> Optional[Customer]:
    result = await db.execute(select(Customer).where(Customer.id == customer_id))
    return result.scalar_one_or_none()


async def fetch_addresses(db: AsyncSession, customer_id: str) -> list[Address]:
    result = await db.execute(
        select(Address)
        .where(Address.customer_id == customer_id)
        .order_by(Address.created_at, Address.id)
    )
    return list(result.scalars().all())


def customer_detail(customer: Customer, addresses: list[Address]) -> CustomerDetail:
    return CustomerDetail(
        **CustomerResponse.model_validate(customer).model_dump(),
        addresses=[AddressResponse.model_validate(address) for address in addresses],
    )


async def commit_or_fail(db: AsyncSession, action: str) -> None:
    try:
        await db.commit()
    except SQLAlchemyError:
        logger.error(f"Failed to {action}", exc_info=True)
        await db.rollback()
        raise InternalError("Internal server error")
