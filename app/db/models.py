from datetime import datetime
from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import validates

from app.core.normalize import clean_text, digits_only, fold_text, new_id
from app.db.base import Base


# JSON spelling of each column, used in validation messages
FIELD_NAMES = {
    "first_name": "firstName",
    "last_name": "lastName",
    "postal_code": "postalCode",
    "customer_id": "customerId",
}

ADDRESS_MAX_LENGTHS = {
    "line1": 50,
    "line2": 50,
    "city": 20,
    "state": 20,
    "postal_code": 20,
    "country": 30,
}

REQUIRED_ADDRESS_FIELDS = ("line1", "city", "state", "postal_code", "country")

EDITABLE_ADDRESS_FIELDS = ("label", "line1", "line2", "city", "state", "postal_code", "country")


def field_name(key: str) -> str:
    return FIELD_NAMES.get(key, key)


class Customer(Base):
    __tablename__ = "customers"

    id = Column(String(32), primary_key=True, default=new_id)
    first_name = Column(String(255), nullable=False, index=True)
    last_name = Column(String(255), nullable=False, index=True)
    email = Column(String(255), nullable=False, index=True)
    phone = Column(String(50), nullable=False)
    phone_digits = Column(String(50), nullable=False, default="", index=True)
    # casefolded copies for case-insensitive search
    first_name_folded = Column(String(255), nullable=False, default="", index=True)
    last_name_folded = Column(String(255), nullable=False, default="", index=True)
    email_folded = Column(String(255), nullable=False, default="", index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    @validates("first_name", "last_name", "email", "phone")
    def _validate_contact_field(self, key, value):
        value = clean_text(value)
        if not value:
            raise ValueError(f"{field_name(key)} is required")
        if key == "phone":
            self.phone_digits = digits_only(value)
        else:
            setattr(self, f"{key}_folded", fold_text(value))
        return value


class Address(Base):
    __tablename__ = "addresses"

    id = Column(String(32), primary_key=True, default=new_id)
    # Ownership is checked by the services; there is deliberately no foreign key.
    customer_id = Column(String(32), nullable=False, index=True)
    label = Column(String(255), nullable=True)
    line1 = Column(String(50), nullable=False)
    line2 = Column(String(50), nullable=True)
    city = Column(String(20), nullable=False)
    state = Column(String(20), nullable=False)
    postal_code = Column(String(20), nullable=False)
    city_folded = Column(String(80), nullable=False, default="", index=True)
    state_folded = Column(String(80), nullable=False, default="", index=True)
    postal_code_digits = Column(String(20), nullable=False, default="", index=True)
    country = Column(String(30), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    @validates("customer_id")
    def _validate_customer_id(self, key, value):
        if not value:
            raise ValueError("customerId is required")
        return value

    @validates(*EDITABLE_ADDRESS_FIELDS)
    def _validate_text_field(self, key, value):
        value = clean_text(value)
        if not value:
            if key in REQUIRED_ADDRESS_FIELDS:
                raise ValueError(f"{field_name(key)} is required")
            value = None

        max_length = ADDRESS_MAX_LENGTHS.get(key)
        if value is not None and max_length and len(value) > max_length:
            raise ValueError(f"{field_name(key)} must be at most {max_length} characters")

        if key == "postal_code":
            self.postal_code_digits = digits_only(value)
        elif key in ("city", "state"):
            setattr(self, f"{key}_folded", fold_text(value))
        return value
