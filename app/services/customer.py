import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func

from app.core.normalize import clean_text
from app.db.models import Customer, Address, REQUIRED_ADDRESS_FIELDS, field_name
from app.schemas.customer import CustomerCreate, CustomerUpdate, CustomerResponse, CustomerDetail, CustomerPage
from app.services.errors import InvalidArgument, NotFound, Conflict
from app.services.lookup import require_id, fetch_customer, fetch_addresses, customer_detail, commit_or_fail
from app.services.query import parse_sort, customer_search_filter, page_offset, total_pages

logger = logging.getLogger(__name__)

CONTACT_FIELDS = ("first_name", "last_name", "email", "phone")


async def list_customers(
    db: AsyncSession,
    search: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
    sort: Optional[str] = None
) -> CustomerPage:
    condition = customer_search_filter(search)

    query = select(Customer)
    count_query = select(func.count(Customer.id))
    if condition is not None:
        query = query.where(condition)
        count_query = count_query.where(condition)

    count_result = await db.execute(count_query)
    total = count_result.scalar() or 0

    customers = []
    offset = page_offset(page, limit)
    # pages past the end never reach the driver, whatever their size
    if offset < total:
        query = query.order_by(*parse_sort(sort)).offset(offset).limit(limit)
        result = await db.execute(query)
        customers = result.scalars().all()

    logger.debug(f"Customer listing search={search!r} page={page} limit={limit}: {len(customers)} of {total}")

    return CustomerPage(
        data=[CustomerResponse.model_validate(customer) for customer in customers],
        page=page,
        limit=limit,
        total=total,
        total_pages=total_pages(total, limit)
    )


async def get_customer(db: AsyncSession, customer_id: str) -> CustomerDetail:
    customer_id = require_id(customer_id, "Invalid customer id")

    customer = await fetch_customer(db, customer_id)
    if not customer:
        raise NotFound("Customer not found")

    addresses = await fetch_addresses(db, customer_id)
    return customer_detail(customer, addresses)


async def _email_taken(db: AsyncSession, email: str, exclude_id: Optional[str] = None) -> bool:
    query = select(Customer.id).where(Customer.email == email)
    if exclude_id:
        query = query.where(Customer.id != exclude_id)
    result = await db.execute(query.limit(1))
    return result.first() is not None


def _validate_create_request(data: CustomerCreate) -> None:
    if any(not clean_text(getattr(data, field)) for field in CONTACT_FIELDS):
        raise InvalidArgument("FirstName, LastName, Email, Phone are required")

    if not data.addresses:
        raise InvalidArgument("At least one address is required.")

    for index, address in enumerate(data.addresses, start=1):
        if any(not clean_text(getattr(address, field)) for field in REQUIRED_ADDRESS_FIELDS):
            raise InvalidArgument(f"Address #{index} is missing required fields.")


async def create_customer(db: AsyncSession, data: CustomerCreate) -> CustomerDetail:
    """Create a customer together with its initial addresses.

    The customer row is committed before the addresses are built. If any
    address is then rejected by the model validators, the customer stays
    in place without addresses and InvalidArgument carries the per-address
    errors; nothing is rolled back.
    """
    _validate_create_request(data)

    email = data.email.strip()
    if await _email_taken(db, email):
        logger.warning(f"Customer creation rejected, email already exists: {email}")
        raise Conflict("Customer email already exists")

    customer = Customer(
        first_name=data.first_name,
        last_name=data.last_name,
        email=email,
        phone=data.phone
    )
    db.add(customer)
    await commit_or_fail(db, "create customer")
    logger.info(f"Customer created: {customer.id}")

    addresses = []
    errors = []
    for index, payload in enumerate(data.addresses, start=1):
        try:
            addresses.append(Address(customer_id=customer.id, **payload.model_dump()))
        except ValueError as e:
            errors.append({"index": index, "message": str(e)})

    if errors:
        logger.error(f"Address insert failed for customer {customer.id}, customer kept without addresses: {errors}")
        raise InvalidArgument("Invalid address data", details=errors)

    db.add_all(addresses)
    await commit_or_fail(db, "create addresses")
    logger.info(f"Created {len(addresses)} address(es) for customer {customer.id}")

    return customer_detail(customer, addresses)


async def update_customer(db: AsyncSession, customer_id: str, data: CustomerUpdate) -> CustomerDetail:
    customer_id = require_id(customer_id, "Invalid customer id")

    update_data = {}
    for field, value in data.model_dump(exclude_unset=True).items():
        if value is None:
            continue
        value = clean_text(value)
        if not value:
            raise InvalidArgument(f"{field_name(field)} cannot be empty")
        update_data[field] = value

    if update_data.get("email") and await _email_taken(db, update_data["email"], exclude_id=customer_id):
        logger.warning(f"Customer {customer_id} update rejected, email in use: {update_data['email']}")
        raise Conflict("Email already in use by another customer")

    customer = await fetch_customer(db, customer_id)
    if not customer:
        raise NotFound("Customer not found")

    for field, value in update_data.items():
        setattr(customer, field, value)

    customer.updated_at = datetime.utcnow()
    await commit_or_fail(db, f"update customer {customer_id}")
    logger.info(f"Customer updated: {customer_id} fields={sorted(update_data)}")

    addresses = await fetch_addresses(db, customer_id)
    return customer_detail(customer, addresses)
