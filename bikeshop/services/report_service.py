from collections.abc import Iterable
from datetime import date

from bikeshop.domain.commission_report import (
    CommissionDetail,
    CommissionDetailLine,
    CommissionReport,
    CommissionSummaryRow,
)
from bikeshop.domain.period import ReportingPeriod
from bikeshop.services.commission_service import calculate_sale_commission, find_report


def format_currency(amount: float) -> str:
    """
    Formats a dollar amount for display.

    Args:
        amount (float): Full-precision amount.

    Returns:
        str: The amount rounded to cents, e.g. '$1,234.50'.
    """
    return f"${amount:,.2f}"


def format_date(d: date | None) -> str:
    """Localized calendar format used by the report, e.g. '10/5/2024'."""
    if d is None:
        return ""
    return f"{d.month}/{d.day}/{d.year}"


def empty_report_message(period: ReportingPeriod) -> str:
    return f"No commission reports found for Q{period.quarter} {period.year}."


def build_summary_rows(reports: Iterable[CommissionReport]) -> list[CommissionSummaryRow]:
    """
    Projects aggregated reports into display rows.

    Amounts are rounded to two decimals here and only here; the
    CommissionReport totals stay at full precision.

    Args:
        reports (Iterable[CommissionReport]): Output of the aggregator, already ranked.

    Returns:
        list[CommissionSummaryRow]: Rows in the same order.
    """
    return [
        CommissionSummaryRow(
            salesperson_id=r.salesperson_id,
            salesperson_name=r.salesperson_name,
            total_sales=round(r.total_sales, 2),
            total_commission=round(r.total_commission, 2),
            number_of_sales=r.number_of_sales,
            total_sales_display=format_currency(r.total_sales),
            total_commission_display=format_currency(r.total_commission),
        )
        for r in reports
    ]


def build_detail(report: CommissionReport) -> CommissionDetail:
    """
    Builds the sale-by-sale breakdown for one salesperson.

    Args:
        report (CommissionReport): The salesperson's aggregated row.

    Returns:
        CommissionDetail: Lines newest first, with a totals footer equal to
            the summary row.
    """
    lines = []
    for sale in report.sales_details:
        sale_price = sale.product.sale_price if sale.product else 0.0
        commission = calculate_sale_commission(sale)
        lines.append(
            CommissionDetailLine(
                sale_id=sale.id,
                sale_date=sale.sale_date,
                date_display=format_date(sale.sale_date),
                product_name=sale.product.name if sale.product else "Unknown",
                customer_name=sale.customer.get_full_name() if sale.customer else "Unknown",
                sale_price=round(sale_price, 2),
                commission=round(commission, 2),
                sale_price_display=format_currency(sale_price),
                commission_display=format_currency(commission),
            )
        )

    return CommissionDetail(
        salesperson_id=report.salesperson_id,
        salesperson_name=report.salesperson_name,
        title=f"Quarterly Commission Details for {report.salesperson_name}",
        lines=lines,
        total_sales=round(report.total_sales, 2),
        total_commission=round(report.total_commission, 2),
        total_sales_display=format_currency(report.total_sales),
        total_commission_display=format_currency(report.total_commission),
    )


def build_detail_for(reports: Iterable[CommissionReport], salesperson_id: int) -> CommissionDetail | None:
    """
    Selects one salesperson by id and builds the drill-down view.

    Returns:
        CommissionDetail | None: None when the salesperson has no row in the report.
    """
    report = find_report(reports, salesperson_id)
    if report is None:
        return None
    return build_detail(report)
