from datetime import date
from typing import Any

from pydantic import Field, field_validator

from .base import BaseDomainModel, coerce_calendar_date


class SalesPersonDomain(BaseDomainModel):
    """
    The pure domain representation of a Sales Person.

    Attributes:
        id (int | None): Store-assigned identifier.
        first_name (str): The salesperson's given name.
        last_name (str): The salesperson's family name.
        address (str): Postal address.
        phone (str): Contact phone number, canonical form ddd-ddd-dddd.
        start_date (date | None): The date the employee joined the shop.
        termination_date (date | None): The last day of employment, if any.
        manager (str): Free-text name of the supervising person.
    """

    id: int | None = None
    first_name: str = Field("", description="Given name")
    last_name: str = Field("", description="Family name")
    address: str = Field("", description="Postal address")
    phone: str = Field("", description="Phone number in xxx-xxx-xxxx format")
    start_date: date | None = Field(None, description="Date of hire (cannot be in the future)")
    termination_date: date | None = Field(None, description="Date of termination, empty while employed")
    manager: str = Field("", description="Name of the supervising manager")

    @field_validator('start_date', 'termination_date', mode='before')
    @classmethod
    def truncate_dates(cls, v: Any) -> Any:
        """Ignores any time-of-day or offset component of the dates."""
        return coerce_calendar_date(v)

    @property
    def is_active(self) -> bool:
        """True while the salesperson has no termination date."""
        return self.termination_date is None

    def get_full_name(self) -> str:
        """
        Returns the formatted full name of the salesperson.

        Returns:
            str: The combination of First and Last name.
        """
        return f"{self.first_name} {self.last_name}"

    model_config = {
        **BaseDomainModel.model_config,
        "json_schema_extra": {
            "example": {
                "firstName": "Jane",
                "lastName": "Smith",
                "address": "456 Oak St",
                "phone": "987-654-3210",
                "startDate": "2024-01-15",
                "terminationDate": None,
                "manager": "Michael Scott"
            }
        }
    }
