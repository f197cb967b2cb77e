from typing import List

from app.schemas.base import CamelModel
from app.schemas.address import AddressResponse
from app.schemas.customer import CustomerResponse


class AddressSearchResult(CamelModel):
    customer: CustomerResponse
    matched_addresses: List[AddressResponse] = []


class AddressSearchPage(CamelModel):
    data: List[AddressSearchResult] = []
    page: int
    limit: int
    total: int
    total_pages: int
