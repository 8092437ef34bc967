# bikeshop/domain/__init__.py

# 1. Reference Entities
from .customer import CustomerDomain
from .product import ProductDomain
from .sales_person import SalesPersonDomain

# 2. The Transaction Entity
from .sale import SaleDomain

# 3. Reporting
from .commission_report import (
    CommissionDetail,
    CommissionDetailLine,
    CommissionReport,
    CommissionSummaryRow,
)
from .period import DateRange, PeriodSelector, ReportingPeriod, in_period, quarter_of, to_calendar_date

# 4. Data Entry
from .validation import ValidationResult


__all__ = [
    "CommissionDetail",
    "CommissionDetailLine",
    "CommissionReport",
    "CommissionSummaryRow",
    "CustomerDomain",
    "DateRange",
    "PeriodSelector",
    "ProductDomain",
    "ReportingPeriod",
    "SaleDomain",
    "SalesPersonDomain",
    "ValidationResult",
    "in_period",
    "quarter_of",
    "to_calendar_date",
]
