from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import customer_paging
from app.api.errors import to_http_error
from app.core.config import settings
from app.db.session import get_db
from app.schemas.customer import CustomerCreate, CustomerUpdate, CustomerDetail, CustomerPage
from app.services.cascade import CascadeOutcome, delete_customer
from app.services.customer import list_customers, get_customer, create_customer, update_customer


router = APIRouter(prefix="/api/customers", tags=["customers"])


@router.get("", response_model=CustomerPage)
async def list_customers_route(
    search: Optional[str] = Query(None, description="Matches names and email; digits also match the phone"),
    sort: Optional[str] = Query(None, description='Comma separated fields, "-" prefix for descending'),
    paging: tuple[int, int] = Depends(customer_paging),
    db: AsyncSession = Depends(get_db)
):
    page, limit = paging
    try:
        return await list_customers(db, search=search, page=page, limit=limit, sort=sort)
    except Exception as e:
        raise to_http_error(e)


@router.post("/add-customer", response_model=CustomerDetail, status_code=status.HTTP_201_CREATED)
async def create_customer_route(
    data: CustomerCreate,
    db: AsyncSession = Depends(get_db)
):
    try:
        return await create_customer(db, data)
    except Exception as e:
        raise to_http_error(e)


@router.get("/{customer_id}", response_model=CustomerDetail)
async def get_customer_route(
    customer_id: str,
    db: AsyncSession = Depends(get_db)
):
    try:
        return await get_customer(db, customer_id)
    except Exception as e:
        raise to_http_error(e)


@router.put("/{customer_id}", response_model=CustomerDetail)
async def update_customer_route(
    customer_id: str,
    data: CustomerUpdate,
    db: AsyncSession = Depends(get_db)
):
    try:
        return await update_customer(db, customer_id, data)
    except Exception as e:
        raise to_http_error(e)


@router.delete("/{customer_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_customer_route(
    customer_id: str,
    db: AsyncSession = Depends(get_db)
):
    try:
        result = await delete_customer(db, customer_id, use_transaction=settings.CASCADE_USE_TRANSACTIONS)
    except Exception as e:
        raise to_http_error(e)

    if result.outcome == CascadeOutcome.NOT_FOUND:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Customer not found")
    if result.outcome == CascadeOutcome.FAILED:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal server error")

    return Response(status_code=status.HTTP_204_NO_CONTENT)
