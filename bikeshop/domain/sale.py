from datetime import date
from typing import Any

from pydantic import Field, field_validator

from .base import BaseDomainModel, coerce_calendar_date
from .customer import CustomerDomain
from .product import ProductDomain
from .sales_person import SalesPersonDomain


class SaleDomain(BaseDomainModel):
    """
    The pure domain representation of a Sale transaction.

    A sale links one product, one salesperson and one customer on a given
    calendar date. When read back from the store it carries embedded copies
    of the three referenced records as they existed at read time; these are
    None when the referenced record no longer exists. Sales are immutable
    once created.

    Attributes:
        id (int | None): Store-assigned identifier.
        product_id (int): Foreign key to the Product.
        sales_person_id (int): Foreign key to the Sales Person.
        customer_id (int): Foreign key to the Customer.
        sale_date (date | None): Calendar date of the sale (wire name: ``date``).
        product (ProductDomain | None): Embedded product snapshot.
        sales_person (SalesPersonDomain | None): Embedded salesperson snapshot.
        customer (CustomerDomain | None): Embedded customer snapshot.
    """

    id: int | None = None
    product_id: int = Field(0, description="ID of the sold product")
    sales_person_id: int = Field(0, description="ID of the salesperson involved")
    customer_id: int = Field(0, description="ID of the purchasing customer")
    sale_date: date | None = Field(None, alias="date", description="The date of the sale")

    product: ProductDomain | None = None
    sales_person: SalesPersonDomain | None = None
    customer: CustomerDomain | None = None

    @field_validator('sale_date', mode='before')
    @classmethod
    def truncate_sale_date(cls, v: Any) -> Any:
        """Compares sales by calendar date only."""
        return coerce_calendar_date(v)

    def commission_amount(self) -> float:
        """
        Returns the commission earned on this sale.

        Returns:
            float: The embedded product's commission, or 0.0 without a product.
        """
        if self.product is None:
            return 0.0
        return self.product.commission_amount()

    model_config = {
        **BaseDomainModel.model_config,
        "json_schema_extra": {
            "example": {
                "productId": 1,
                "salesPersonId": 1,
                "customerId": 1,
                "date": "2024-10-15"
            }
        }
    }
