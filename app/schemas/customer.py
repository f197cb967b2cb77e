from datetime import datetime
from typing import List, Optional

from app.schemas.base import CamelModel
from app.schemas.address import AddressCreate, AddressResponse


class CustomerCreate(CamelModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    addresses: Optional[List[AddressCreate]] = None


class CustomerUpdate(CamelModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None


class CustomerResponse(CamelModel):
    id: str
    first_name: str
    last_name: str
    email: str
    phone: str
    created_at: datetime
    updated_at: datetime


class CustomerDetail(CustomerResponse):
    addresses: List[AddressResponse] = []


class CustomerPage(CamelModel):
    data: List[CustomerResponse] = []
    page: int
    limit: int
    total: int
    total_pages: int
