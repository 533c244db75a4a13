"""Customer schemas"""

from datetime import datetime
from typing import List, Optional

from pydantic import EmailStr, Field, field_validator, model_validator

from app.reference.address import validate_postal_code, validate_state
from app.reference.countries import find_country
from app.reference.phone import validate_phone_number
from app.schemas.base import BlankToNoneModel, CamelModel


class CustomerBase(BlankToNoneModel):
    email: Optional[EmailStr] = None
    phone_country_code: Optional[str] = Field(None, description="Dialling code, e.g. +81")
    phone: Optional[str] = None
    country: Optional[str] = Field(None, description="Country name or ISO alpha-2")
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("country")
    @classmethod
    def known_country(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        found = find_country(v)
        if not found:
            raise ValueError(f"Unknown country: {v}")
        return found.name

    @model_validator(mode="after")
    def check_phone_and_address(self):
        if self.phone:
            message = validate_phone_number(self.phone, self.phone_country_code)
            if message:
                raise ValueError(message)
        # postal code / region are only checked once a country is known
        if self.country and self.zip_code:
            message = validate_postal_code(self.zip_code, self.country)
            if message:
                raise ValueError(message)
        if self.country and self.state:
            message = validate_state(self.state, self.country)
            if message:
                raise ValueError(message)
        return self


class CustomerCreate(CustomerBase):
    name: str = Field(..., min_length=1, max_length=200)


class CustomerUpdate(CustomerBase):
    name: Optional[str] = Field(None, min_length=1, max_length=200)


class CustomerResponse(CamelModel):
    id: int
    name: str
    email: Optional[str] = None
    phone_country_code: Optional[str] = None
    phone: Optional[str] = None
    country: Optional[str] = None
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    notes: Optional[str] = None
    full_phone: str = ""
    created_at: datetime
    updated_at: Optional[datetime] = None


class CustomerListResponse(CamelModel):
    data: List[CustomerResponse]
    total: int
    page: int
    limit: int
