from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import ValidationError
from sqlmodel import Session

# Layer 4: Data Access (Session)
from bikeshop.data_access.database import get_session

# Layer 3: Domain Entities (Pydantic models)
from bikeshop.domain import (
    CommissionDetail,
    CommissionReport,
    CommissionSummaryRow,
    CustomerDomain,
    DateRange,
    ProductDomain,
    ReportingPeriod,
    SaleDomain,
    SalesPersonDomain,
    ValidationResult,
)

# Layer 2: Services
from bikeshop.services.commission_service import aggregate
from bikeshop.services.customer_service import CustomerService
from bikeshop.services.product_service import ProductService
from bikeshop.services.report_service import build_detail_for, build_summary_rows
from bikeshop.services.sale_service import SaleService
from bikeshop.services.sales_person_service import SalesPersonService
from bikeshop.services.validation_service import (
    validate_customer,
    validate_product,
    validate_sale,
    validate_salesperson,
)


router = APIRouter(prefix="/api")

SessionDep = Annotated[Session, Depends(get_session)]
YearQuery = Annotated[int | None, Query(description="Report year, defaults to the current year")]
QuarterQuery = Annotated[int | None, Query(ge=1, le=4, description="Report quarter 1-4, defaults to the current quarter")]
CurrentIdQuery = Annotated[int | None, Query(alias="currentId", description="ID of the record being edited")]
StartDateQuery = Annotated[str | None, Query(alias="startDate", description="First sale date included (YYYY-MM-DD)")]
EndDateQuery = Annotated[str | None, Query(alias="endDate", description="Last sale date included (YYYY-MM-DD)")]


# --- CUSTOMERS ---
@router.get("/customers", tags=["Customers"])
def get_all_customers(session: SessionDep) -> list[CustomerDomain]:
    """Retrieves all customers."""
    return CustomerService(session).get_all_customers()

@router.get("/customers/{id}", tags=["Customers"])
def get_customer(id: int, session: SessionDep) -> CustomerDomain:
    return CustomerService(session).get_customer(id)

@router.post("/customers", tags=["Customers"], status_code=status.HTTP_201_CREATED)
def create_customer(data: CustomerDomain, session: SessionDep) -> CustomerDomain:
    """Creates a customer after data-entry validation."""
    return CustomerService(session).create_customer(data)

@router.put("/customers/{id}", tags=["Customers"])
def update_customer(id: int, data: CustomerDomain, session: SessionDep) -> CustomerDomain:
    return CustomerService(session).update_customer(id, data)

@router.delete("/customers/{id}", tags=["Customers"], status_code=status.HTTP_204_NO_CONTENT)
def delete_customer(id: int, session: SessionDep) -> None:
    CustomerService(session).delete_customer(id)
    return None


# --- PRODUCTS ---
@router.get("/products", tags=["Products"])
def get_all_products(session: SessionDep) -> list[ProductDomain]:
    """Retrieves the product catalog."""
    return ProductService(session).get_all_products()

@router.get("/products/{id}", tags=["Products"])
def get_product(id: int, session: SessionDep) -> ProductDomain:
    return ProductService(session).get_product_by_id(id)

@router.post("/products", tags=["Products"], status_code=status.HTTP_201_CREATED)
def create_product(data: ProductDomain, session: SessionDep) -> ProductDomain:
    """Creates a product; rejects duplicates of an existing name and manufacturer."""
    return ProductService(session).create_product(data)

@router.put("/products/{id}", tags=["Products"])
def update_product(id: int, data: ProductDomain, session: SessionDep) -> ProductDomain:
    return ProductService(session).update_product(id, data)

@router.delete("/products/{id}", tags=["Products"], status_code=status.HTTP_204_NO_CONTENT)
def delete_product(id: int, session: SessionDep) -> None:
    ProductService(session).delete_product(id)
    return None


# --- SALESPERSONS ---
@router.get("/salespersons", tags=["Salespersons"])
def get_all_salespersons(session: SessionDep) -> list[SalesPersonDomain]:
    """Retrieves all salespersons, active and terminated."""
    return SalesPersonService(session).get_all_sales_people()

@router.get("/salespersons/{id}", tags=["Salespersons"])
def get_salesperson(id: int, session: SessionDep) -> SalesPersonDomain:
    return SalesPersonService(session).get_sales_person_by_id(id)

@router.post("/salespersons", tags=["Salespersons"], status_code=status.HTTP_201_CREATED)
def create_salesperson(data: SalesPersonDomain, session: SessionDep) -> SalesPersonDomain:
    """Creates a salesperson; rejects duplicate names and phone numbers."""
    return SalesPersonService(session).create_sales_person(data)

@router.put("/salespersons/{id}", tags=["Salespersons"])
def update_salesperson(id: int, data: SalesPersonDomain, session: SessionDep) -> SalesPersonDomain:
    return SalesPersonService(session).update_sales_person(id, data)

@router.delete("/salespersons/{id}", tags=["Salespersons"], status_code=status.HTTP_204_NO_CONTENT)
def delete_salesperson(id: int, session: SessionDep) -> None:
    SalesPersonService(session).delete_sales_person(id)
    return None


# --- SALES (create and read only) ---
def _parse_date_range(start_date: str | None, end_date: str | None) -> DateRange:
    try:
        return DateRange(start_date=start_date, end_date=end_date)
    except ValidationError:
        raise HTTPException(
            status_code=422,
            detail="startDate and endDate must be calendar dates (YYYY-MM-DD)."
        )

@router.get("/sales", tags=["Sales"])
def get_all_sales(
    session: SessionDep,
    start_date: StartDateQuery = None,
    end_date: EndDateQuery = None,
) -> list[SaleDomain]:
    """Retrieves sales with embedded product, salesperson and customer.
    When both startDate and endDate are given, only sales dated between
    them (both days included) are returned.
    """
    return SaleService(session).get_all_sales(_parse_date_range(start_date, end_date))

@router.get("/sales/{id}", tags=["Sales"])
def get_sale(id: int, session: SessionDep) -> SaleDomain:
    return SaleService(session).get_sale(id)

@router.post("/sales", tags=["Sales"], status_code=status.HTTP_201_CREATED)
def create_sale(data: SaleDomain, session: SessionDep) -> SaleDomain:
    """Records a sale. Sales cannot be edited or deleted afterwards."""
    return SaleService(session).create_sale(data)


# --- DATA-ENTRY VALIDATION (side-effect free) ---
@router.post("/validate/customers", tags=["Validation"])
def check_customer(data: CustomerDomain) -> ValidationResult:
    """Runs the customer validator without saving, for on-change feedback."""
    return validate_customer(data)

@router.post("/validate/products", tags=["Validation"])
def check_product(data: ProductDomain, session: SessionDep, current_id: CurrentIdQuery = None) -> ValidationResult:
    return validate_product(data, ProductService(session).get_all_products(), current_id=current_id)

@router.post("/validate/salespersons", tags=["Validation"])
def check_salesperson(data: SalesPersonDomain, session: SessionDep, current_id: CurrentIdQuery = None) -> ValidationResult:
    return validate_salesperson(data, SalesPersonService(session).get_all_sales_people(), current_id=current_id)

@router.post("/validate/sales", tags=["Validation"])
def check_sale(data: SaleDomain) -> ValidationResult:
    return validate_sale(data)


# --- COMMISSION REPORTS ---
def _resolve_period(year: int | None, quarter: int | None) -> ReportingPeriod:
    current = ReportingPeriod.current()
    return ReportingPeriod(
        year=current.year if year is None else year,
        quarter=current.quarter if quarter is None else quarter,
    )

def _build_reports(session: Session, period: ReportingPeriod) -> list[CommissionReport]:
    salespersons = SalesPersonService(session).get_all_sales_people()
    sales = SaleService(session).get_all_sales()
    return aggregate(salespersons, sales, period)

@router.get("/reports/commissions", tags=["Reports"])
def get_commission_report(
    session: SessionDep,
    year: YearQuery = None,
    quarter: QuarterQuery = None,
) -> list[CommissionSummaryRow]:
    """Quarterly commission per salesperson, highest commission first.
    Salespersons without sales in the quarter are not listed.
    """
    period = _resolve_period(year, quarter)
    return build_summary_rows(_build_reports(session, period))

@router.get("/reports/commissions/{salesperson_id}", tags=["Reports"])
def get_commission_detail(
    salesperson_id: int,
    session: SessionDep,
    year: YearQuery = None,
    quarter: QuarterQuery = None,
) -> CommissionDetail:
    """Sale-by-sale commission breakdown for one salesperson in the quarter."""
    period = _resolve_period(year, quarter)
    detail = build_detail_for(_build_reports(session, period), salesperson_id)
    if detail is None:
        raise HTTPException(
            status_code=404,
            detail=f"No commission report for salesperson {salesperson_id} in {period.label}."
        )
    return detail
