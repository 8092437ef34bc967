from datetime import date

from pydantic import Field

from .base import BaseDomainModel
from .sale import SaleDomain


class CommissionReport(BaseDomainModel):
    """
    One salesperson's aggregated activity within a reporting period.

    Derived on every computation from the current sale and salesperson
    collections, never persisted. Totals are kept at full precision;
    rounding happens only in the display projections below.
    """

    salesperson_id: int
    salesperson_name: str
    total_sales: float = Field(..., description="Sum of sale prices in USD")
    total_commission: float = Field(..., description="Sum of per-sale commission in USD")
    number_of_sales: int = Field(..., ge=1)
    sales_details: list[SaleDomain] = Field(default_factory=list, description="Contributing sales, newest first")


class CommissionSummaryRow(BaseDomainModel):
    """Display-ready summary row of the commission report table."""
    salesperson_id: int
    salesperson_name: str
    total_sales: float
    total_commission: float
    number_of_sales: int
    total_sales_display: str
    total_commission_display: str


class CommissionDetailLine(BaseDomainModel):
    """A single sale in the commission drill-down."""
    sale_id: int | None
    sale_date: date | None
    date_display: str
    product_name: str
    customer_name: str
    sale_price: float
    commission: float
    sale_price_display: str
    commission_display: str


class CommissionDetail(BaseDomainModel):
    """
    The drill-down view of a single salesperson's commission.

    The footer totals equal the summary row's totals for the same
    salesperson and period.
    """
    salesperson_id: int
    salesperson_name: str
    title: str
    lines: list[CommissionDetailLine]
    total_sales: float
    total_commission: float
    total_sales_display: str
    total_commission_display: str
