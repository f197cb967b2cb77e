from typing import Dict, Optional

from app.schemas.base import CamelModel


class AddressCreate(CamelModel):
    label: Optional[str] = None
    line1: Optional[str] = None
    line2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None


class AddressUpdate(AddressCreate):
    pass


class AddressResponse(CamelModel):
    id: str
    customer_id: str
    label: Optional[str] = None
    line1: str
    line2: Optional[str] = None
    city: str
    state: str
    postal_code: str
    country: str


class AddressCounts(CamelModel):
    counts: Dict[str, int] = {}
