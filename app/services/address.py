import logging
from typing import Iterable, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, and_

from app.core.normalize import clean_text, normalize_id
from app.db.models import Customer, Address, REQUIRED_ADDRESS_FIELDS, field_name
from app.schemas.address import AddressCreate, AddressUpdate, AddressResponse
from app.schemas.customer import CustomerDetail, CustomerResponse
from app.schemas.search import AddressSearchPage, AddressSearchResult
from app.services.errors import InvalidArgument, NotFound
from app.services.lookup import require_id, fetch_customer, fetch_addresses, customer_detail, commit_or_fail
from app.services.query import address_search_conditions, page_offset, total_pages

logger = logging.getLogger(__name__)


def split_ids(raw: Optional[str]) -> list[str]:
    return [part.strip() for part in (raw or "").split(",") if part.strip()]


async def count_addresses(db: AsyncSession, customer_ids: Iterable[str]) -> dict[str, int]:
    """Number of addresses per customer id; ids without addresses are left out.

    An empty id list is not an empty answer: it counts addresses for every
    customer. Kept for compatibility with existing callers.
    """
    ids = []
    for value in customer_ids:
        record_id = normalize_id(value)
        if record_id and record_id not in ids:
            ids.append(record_id)

    query = select(Address.customer_id, func.count(Address.id)).group_by(Address.customer_id)
    if ids:
        query = query.where(Address.customer_id.in_(ids))
    else:
        logger.debug("Address counts requested without ids, counting all customers")

    result = await db.execute(query)
    return {customer_id: count for customer_id, count in result.all()}


async def search_addresses(
    db: AsyncSession,
    city: Optional[str] = None,
    state: Optional[str] = None,
    pincode: Optional[str] = None,
    page: int = 1,
    limit: int = 20
) -> AddressSearchPage:
    """Find addresses by location and page over the distinct customers owning them."""
    conditions = address_search_conditions(city, state, pincode)
    if not conditions:
        return AddressSearchPage(data=[], page=page, limit=limit, total=0, total_pages=1)

    matched = and_(*conditions)

    # Addresses whose customer row is gone are skipped.
    owners = (
        select(Address.customer_id)
        .join(Customer, Customer.id == Address.customer_id)
        .where(matched)
        .group_by(Address.customer_id)
    )

    count_result = await db.execute(select(func.count()).select_from(owners.subquery()))
    total = count_result.scalar() or 0

    page_ids = []
    offset = page_offset(page, limit)
    if offset < total:
        ids_result = await db.execute(
            owners.order_by(Address.customer_id).offset(offset).limit(limit)
        )
        page_ids = list(ids_result.scalars().all())

    data = []
    if page_ids:
        customers_result = await db.execute(select(Customer).where(Customer.id.in_(page_ids)))
        customers = {customer.id: customer for customer in customers_result.scalars().all()}

        addresses_result = await db.execute(
            select(Address)
            .where(matched, Address.customer_id.in_(page_ids))
            .order_by(Address.created_at, Address.id)
        )
        grouped = {customer_id: [] for customer_id in page_ids}
        for address in addresses_result.scalars().all():
            grouped[address.customer_id].append(AddressResponse.model_validate(address))

        data = [
            AddressSearchResult(
                customer=CustomerResponse.model_validate(customers[customer_id]),
                matched_addresses=grouped[customer_id]
            )
            for customer_id in page_ids
            if customer_id in customers
        ]

    logger.debug(f"Address search city={city!r} state={state!r} pincode={pincode!r}: {total} customer(s)")

    return AddressSearchPage(
        data=data,
        page=page,
        limit=limit,
        total=total,
        total_pages=total_pages(total, limit)
    )


def _check_address_values(values: dict) -> None:
    """Run the model validators on a throwaway instance so nothing is half-applied."""
    probe = Address()
    for field, value in values.items():
        try:
            setattr(probe, field, value)
        except ValueError as e:
            raise InvalidArgument(str(e))


def _require_ids(customer_id: str, address_id: str) -> tuple[str, str]:
    customer_id = normalize_id(customer_id)
    address_id = normalize_id(address_id)
    if customer_id is None or address_id is None:
        raise InvalidArgument("Invalid id(s)")
    return customer_id, address_id


async def _require_customer(db: AsyncSession, customer_id: str) -> Customer:
    customer = await fetch_customer(db, customer_id)
    if not customer:
        raise NotFound("Customer not found")
    return customer


async def _require_owned_address(db: AsyncSession, customer_id: str, address_id: str) -> Address:
    result = await db.execute(
        select(Address).where(Address.id == address_id, Address.customer_id == customer_id)
    )
    address = result.scalar_one_or_none()
    if not address:
        raise NotFound("Address not found for this customer")
    return address


async def add_address(db: AsyncSession, customer_id: str, data: AddressCreate) -> CustomerDetail:
    customer_id = require_id(customer_id, "Invalid customer id")

    missing = [field_name(field) for field in REQUIRED_ADDRESS_FIELDS if not clean_text(getattr(data, field))]
    if missing:
        raise InvalidArgument(f"Missing required fields: {', '.join(missing)}")

    try:
        address = Address(customer_id=customer_id, **data.model_dump(exclude_unset=True))
    except ValueError as e:
        raise InvalidArgument(str(e))

    customer = await _require_customer(db, customer_id)

    db.add(address)
    await commit_or_fail(db, f"add address for customer {customer_id}")
    logger.info(f"Address {address.id} added for customer {customer_id}")

    addresses = await fetch_addresses(db, customer_id)
    return customer_detail(customer, addresses)


async def update_address(
    db: AsyncSession,
    customer_id: str,
    address_id: str,
    data: AddressUpdate
) -> CustomerDetail:
    customer_id, address_id = _require_ids(customer_id, address_id)

    # customerId is not part of AddressUpdate, so it can never be moved
    update_data = data.model_dump(exclude_unset=True)
    _check_address_values(update_data)

    customer = await _require_customer(db, customer_id)
    address = await _require_owned_address(db, customer_id, address_id)

    for field, value in update_data.items():
        setattr(address, field, value)

    await commit_or_fail(db, f"update address {address_id}")
    logger.info(f"Address {address_id} updated for customer {customer_id} fields={sorted(update_data)}")

    addresses = await fetch_addresses(db, customer_id)
    return customer_detail(customer, addresses)


async def delete_address(db: AsyncSession, customer_id: str, address_id: str) -> CustomerDetail:
    customer_id, address_id = _require_ids(customer_id, address_id)

    customer = await _require_customer(db, customer_id)
    address = await _require_owned_address(db, customer_id, address_id)

    await db.delete(address)
    await commit_or_fail(db, f"delete address {address_id}")
    logger.info(f"Address {address_id} deleted for customer {customer_id}")

    addresses = await fetch_addresses(db, customer_id)
    return customer_detail(customer, addresses)
