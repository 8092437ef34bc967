from datetime import date
from typing import Any

from pydantic import Field, field_validator

from .base import BaseDomainModel, coerce_calendar_date


class CustomerDomain(BaseDomainModel):
    """
    The pure domain representation of a shop Customer.

    The model is deliberately permissive: an empty name or a malformed
    phone number still builds a CustomerDomain so the data-entry validators
    can report every problem at once instead of failing on the first one.

    Attributes:
        id (int | None): Store-assigned identifier, None before creation.
        first_name (str): The customer's given name.
        last_name (str): The customer's family name.
        address (str): Postal address.
        phone (str): Contact phone number, canonical form ddd-ddd-dddd.
        start_date (date | None): The date the customer relationship began.
    """

    id: int | None = None
    first_name: str = Field("", description="Given name")
    last_name: str = Field("", description="Family name")
    address: str = Field("", description="Postal address")
    phone: str = Field("", description="Phone number in xxx-xxx-xxxx format")
    start_date: date | None = Field(None, description="Customer since")

    @field_validator('start_date', mode='before')
    @classmethod
    def truncate_start_date(cls, v: Any) -> Any:
        """Ignores any time-of-day or offset component of the start date."""
        return coerce_calendar_date(v)

    def get_full_name(self) -> str:
        """
        Returns the display name of the customer.

        Returns:
            str: First and last name separated by a space.
        """
        return f"{self.first_name} {self.last_name}"

    model_config = {
        **BaseDomainModel.model_config,
        "json_schema_extra": {
            "example": {
                "firstName": "John",
                "lastName": "Doe",
                "address": "123 Main St",
                "phone": "123-456-7890",
                "startDate": "2025-05-20"
            }
        }
    }
