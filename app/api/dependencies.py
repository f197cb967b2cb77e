from typing import Optional

from fastapi import Query

from app.core.config import settings
from app.services.query import parse_paging


def customer_paging(
    page: Optional[str] = Query(None, description="Page number, starting at 1"),
    limit: Optional[str] = Query(None, description="Page size, 1-100"),
) -> tuple[int, int]:
    return parse_paging(page, limit, settings.DEFAULT_PAGE_LIMIT, settings.MAX_PAGE_LIMIT)


def address_search_paging(
    page: Optional[str] = Query(None, description="Page number, starting at 1"),
    limit: Optional[str] = Query(None, description="Customers per page, 1-100"),
) -> tuple[int, int]:
    return parse_paging(page, limit, settings.ADDRESS_SEARCH_PAGE_LIMIT, settings.MAX_PAGE_LIMIT)
