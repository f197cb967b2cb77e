from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import address_search_paging
from app.api.errors import to_http_error
from app.db.session import get_db
from app.schemas.address import AddressCreate, AddressUpdate, AddressCounts
from app.schemas.customer import CustomerDetail
from app.schemas.search import AddressSearchPage
from app.services.address import (
    split_ids,
    count_addresses,
    search_addresses,
    add_address,
    update_address,
    delete_address,
)


router = APIRouter(prefix="/api/address", tags=["addresses"])


@router.get("/counts", response_model=AddressCounts)
async def address_counts(
    customer_ids: Optional[str] = Query(None, alias="customerIds", description="Comma separated customer ids"),
    db: AsyncSession = Depends(get_db)
):
    try:
        counts = await count_addresses(db, split_ids(customer_ids))
        return AddressCounts(counts=counts)
    except Exception as e:
        raise to_http_error(e)


@router.get("/search-address", response_model=AddressSearchPage)
async def search_address(
    city: Optional[str] = Query(None, description="City prefix"),
    state: Optional[str] = Query(None, description="State prefix"),
    pincode: Optional[str] = Query(None, description="Digits contained in the postal code"),
    paging: tuple[int, int] = Depends(address_search_paging),
    db: AsyncSession = Depends(get_db)
):
    page, limit = paging
    try:
        return await search_addresses(db, city=city, state=state, pincode=pincode, page=page, limit=limit)
    except Exception as e:
        raise to_http_error(e)


@router.post("/{customer_id}/addresses", response_model=CustomerDetail, status_code=status.HTTP_201_CREATED)
async def create_address(
    customer_id: str,
    data: AddressCreate,
    db: AsyncSession = Depends(get_db)
):
    try:
        return await add_address(db, customer_id, data)
    except Exception as e:
        raise to_http_error(e)


@router.patch("/{customer_id}/addresses/{address_id}", response_model=CustomerDetail)
async def patch_address(
    customer_id: str,
    address_id: str,
    data: AddressUpdate,
    db: AsyncSession = Depends(get_db)
):
    try:
        return await update_address(db, customer_id, address_id, data)
    except Exception as e:
        raise to_http_error(e)


@router.delete("/{customer_id}/addresses/{address_id}", response_model=CustomerDetail)
async def remove_address(
    customer_id: str,
    address_id: str,
    db: AsyncSession = Depends(get_db)
):
    try:
        return await delete_address(db, customer_id, address_id)
    except Exception as e:
        raise to_http_error(e)
