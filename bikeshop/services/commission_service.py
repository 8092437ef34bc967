import logging
from collections.abc import Iterable, Sequence

from bikeshop.domain.commission_report import CommissionReport
from bikeshop.domain.period import DateRange, ReportingPeriod
from bikeshop.domain.sale import SaleDomain
from bikeshop.domain.sales_person import SalesPersonDomain


logger = logging.getLogger(__name__)


def calculate_sale_commission(sale: SaleDomain) -> float:
    """
    Commission earned on one sale: salePrice * commissionPercentage / 100.

    Args:
        sale (SaleDomain): A sale with its embedded product.

    Returns:
        float: The unrounded commission in dollars.
    """
    return sale.commission_amount()


def filter_sales_by_period(sales: Iterable[SaleDomain], period: ReportingPeriod) -> list[SaleDomain]:
    """
    Keeps the sales whose calendar date falls inside the period.

    Args:
        sales (Iterable[SaleDomain]): All sales.
        period (ReportingPeriod): The applied reporting period.

    Returns:
        list[SaleDomain]: Matching sales in their original order.
    """
    return [s for s in sales if s.sale_date is not None and period.contains(s.sale_date)]


def filter_sales_by_range(sales: Iterable[SaleDomain], date_range: DateRange) -> list[SaleDomain]:
    """
    Keeps the sales dated between both ends of the range, inclusive.

    Args:
        sales (Iterable[SaleDomain]): All sales.
        date_range (DateRange): The applied sales-list filter.

    Returns:
        list[SaleDomain]: Matching sales in their original order; all of
            them when the range is missing an end.
    """
    return [s for s in sales if date_range.contains(s.sale_date)]


def _group_by_sales_person(sales: Iterable[SaleDomain]) -> dict[int, list[SaleDomain]]:
    groups: dict[int, list[SaleDomain]] = {}
    for sale in sales:
        if sale.product is None:
            logger.warning(
                f"Skipping sale {sale.id}: product {sale.product_id} is missing, commission cannot be computed."
            )
            continue
        groups.setdefault(sale.sales_person_id, []).append(sale)
    return groups


def _build_report(sales_person: SalesPersonDomain, sales: list[SaleDomain]) -> CommissionReport:
    total_sales = 0.0
    total_commission = 0.0
    for sale in sales:
        total_sales += sale.product.sale_price
        total_commission += calculate_sale_commission(sale)

    # sorted() is stable, so same-day sales keep their input order
    details = sorted(sales, key=lambda s: s.sale_date, reverse=True)

    return CommissionReport(
        salesperson_id=sales_person.id,
        salesperson_name=sales_person.get_full_name(),
        total_sales=total_sales,
        total_commission=total_commission,
        number_of_sales=len(sales),
        sales_details=details,
    )


def aggregate(
    salespersons: Sequence[SalesPersonDomain],
    sales: Iterable[SaleDomain],
    period: ReportingPeriod,
) -> list[CommissionReport]:
    """
    Builds the quarterly commission report.

    Sales are filtered to the period and grouped per salesperson. Only
    salespersons with at least one sale in the period get a row. Totals
    are accumulated at full precision. Rows are ranked by total commission,
    highest first; ties keep the order of the salesperson collection.

    Sales pointing at a salesperson id with no record, or lacking their
    embedded product, are logged and left out.

    Args:
        salespersons (Sequence[SalesPersonDomain]): The salesperson collection.
        sales (Iterable[SaleDomain]): The sale collection, with embedded products.
        period (ReportingPeriod): The applied reporting period.

    Returns:
        list[CommissionReport]: One row per active salesperson, ranked.
    """
    groups = _group_by_sales_person(filter_sales_by_period(sales, period))
    if not groups:
        return []

    reports: list[CommissionReport] = []
    seen: set[int] = set()
    for sales_person in salespersons:
        if sales_person.id in seen or sales_person.id not in groups:
            continue
        seen.add(sales_person.id)
        reports.append(_build_report(sales_person, groups[sales_person.id]))

    for orphan_id in sorted(groups.keys() - seen):
        logger.warning(
            f"Skipping {len(groups[orphan_id])} sale(s) in {period.label}: "
            f"salesperson {orphan_id} not found."
        )

    return sorted(reports, key=lambda r: r.total_commission, reverse=True)


def find_report(reports: Iterable[CommissionReport], salesperson_id: int) -> CommissionReport | None:
    """Returns the report row for one salesperson, or None."""
    return next((r for r in reports if r.salesperson_id == salesperson_id), None)
