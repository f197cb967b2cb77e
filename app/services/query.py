"""Paging, sorting and text-matching helpers shared by the listing queries."""
import math
from typing import Optional

from sqlalchemy import or_

from app.core.normalize import digits_only, fold_text
from app.db.models import Customer, Address


DEFAULT_CUSTOMER_SORT = "firstName,lastName"

SORTABLE_CUSTOMER_FIELDS = {
    "firstName": Customer.first_name,
    "lastName": Customer.last_name,
    "email": Customer.email,
    "phone": Customer.phone,
    "createdAt": Customer.created_at,
    "updatedAt": Customer.updated_at,
}
SORTABLE_CUSTOMER_FIELDS.update({
    column.key: column for column in list(SORTABLE_CUSTOMER_FIELDS.values())
})


def _to_int(value) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def parse_paging(page, limit, default_limit: int = 10, max_limit: int = 100) -> tuple[int, int]:
    """Lenient page/limit parsing: bad numbers fall back to defaults, out-of-range ones are clamped."""
    page_num = _to_int(page)
    if page_num is None or page_num < 1:
        page_num = 1

    limit_num = _to_int(limit)
    if limit_num is None:
        limit_num = default_limit
    limit_num = min(max(limit_num, 1), max_limit)

    return page_num, limit_num


def page_offset(page: int, limit: int) -> int:
    return (page - 1) * limit


def total_pages(total: int, limit: int) -> int:
    return max(math.ceil(total / limit), 1)


def escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def contains_pattern(value: str) -> str:
    return f"%{escape_like(value)}%"


def prefix_pattern(value: str) -> str:
    return f"{escape_like(value)}%"


def parse_sort(sort: Optional[str]) -> list:
    """Turn "firstName,-createdAt" into ORDER BY clauses, ignoring unknown fields."""
    clauses = []
    for key in (sort or "").split(","):
        key = key.strip()
        descending = key.startswith("-")
        column = SORTABLE_CUSTOMER_FIELDS.get(key.lstrip("-"))
        if column is None:
            continue
        clauses.append(column.desc() if descending else column.asc())

    if not clauses and sort != DEFAULT_CUSTOMER_SORT:
        return parse_sort(DEFAULT_CUSTOMER_SORT)

    # stable page boundaries for equal sort keys
    clauses.append(Customer.id.asc())
    return clauses


def customer_search_filter(search: Optional[str]):
    """Case-insensitive name/email substring match, OR'd with a phone digit match.

    Returns None when there is nothing to search for.
    """
    term = (search or "").strip()
    if not term:
        return None

    # both sides casefolded
    pattern = contains_pattern(fold_text(term))
    conditions = [
        Customer.first_name_folded.like(pattern, escape="\\"),
        Customer.last_name_folded.like(pattern, escape="\\"),
        Customer.email_folded.like(pattern, escape="\\"),
    ]

    phone_digits = digits_only(term)
    if phone_digits:
        conditions.append(Customer.phone_digits.contains(phone_digits))

    return or_(*conditions)


def address_search_conditions(city: Optional[str] = None, state: Optional[str] = None, pincode: Optional[str] = None) -> list:
    """City/state are case-insensitive prefix matches; pincode matches the digits of the postal code.

    Every returned condition must hold. An empty list means no usable criteria.
    """
    conditions = []

    city = (city or "").strip()
    if city:
        conditions.append(Address.city_folded.like(prefix_pattern(fold_text(city)), escape="\\"))

    state = (state or "").strip()
    if state:
        conditions.append(Address.state_folded.like(prefix_pattern(fold_text(state)), escape="\\"))

    pin_digits = digits_only((pincode or "").strip())
    if pin_digits:
        conditions.append(Address.postal_code_digits.contains(pin_digits))

    return conditions
