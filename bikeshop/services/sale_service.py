import logging
from typing import List

from fastapi import HTTPException, status
from sqlmodel import Session, select

from bikeshop.data_access.models import DimCustomer, DimProduct, DimSalesPerson, FactSale
from bikeshop.domain.customer import CustomerDomain
from bikeshop.domain.period import DateRange
from bikeshop.domain.product import ProductDomain
from bikeshop.domain.sale import SaleDomain
from bikeshop.domain.sales_person import SalesPersonDomain
from bikeshop.services.commission_service import filter_sales_by_range
from bikeshop.services.store_errors import ensure_valid, save
from bikeshop.services.validation_service import validate_sale


logger = logging.getLogger(__name__)

class SaleService:
    """
    Service layer for the FactSale table.

    Sales are created once and then only read. Reads embed the product,
    salesperson and customer as they exist at read time, which is what the
    commission report aggregates over.
    """

    def __init__(self, session: Session):
        """
        Initializes the SaleService with a database session.

        Args:
            session (Session): The active SQLModel/SQLAlchemy session.
        """
        self.session = session

    def _map_to_domain(
        self,
        db_sale: FactSale,
        products: dict[int, DimProduct],
        people: dict[int, DimSalesPerson],
        customers: dict[int, DimCustomer],
    ) -> SaleDomain:
        product = products.get(db_sale.product_id)
        person = people.get(db_sale.sales_person_id)
        customer = customers.get(db_sale.customer_id)
        return SaleDomain(
            id=db_sale.id,
            product_id=db_sale.product_id,
            sales_person_id=db_sale.sales_person_id,
            customer_id=db_sale.customer_id,
            sale_date=db_sale.sale_date,
            product=ProductDomain.model_validate(product.model_dump()) if product else None,
            sales_person=SalesPersonDomain.model_validate(person.model_dump()) if person else None,
            customer=CustomerDomain.model_validate(customer.model_dump()) if customer else None,
        )

    def _lookup_tables(self) -> tuple[dict[int, DimProduct], dict[int, DimSalesPerson], dict[int, DimCustomer]]:
        products = {p.id: p for p in self.session.exec(select(DimProduct)).all()}
        people = {p.id: p for p in self.session.exec(select(DimSalesPerson)).all()}
        customers = {c.id: c for c in self.session.exec(select(DimCustomer)).all()}
        return products, people, customers

    def _validate_references(self, sale_in: SaleDomain) -> None:
        """
        Internal validator to ensure all referenced records exist.

        Args:
            sale_in (SaleDomain): The incoming sale data.

        Raises:
            HTTPException: 404 status if any referenced ID is unknown.
        """
        checks = [
            (DimProduct, sale_in.product_id, "Product"),
            (DimSalesPerson, sale_in.sales_person_id, "Sales Person"),
            (DimCustomer, sale_in.customer_id, "Customer"),
        ]
        for model, entity_id, name in checks:
            if not self.session.get(model, entity_id):
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail=f"{name} with ID {entity_id} not found."
                )

    def get_all_sales(self, date_range: DateRange | None = None) -> List[SaleDomain]:
        """
        Retrieves sales with their embedded product, salesperson and customer.

        Args:
            date_range (DateRange | None): Optional inclusive filter on the
                sale date, applied only when both ends are set.

        Returns:
            List[SaleDomain]: The matching sales in insertion order.
        """
        products, people, customers = self._lookup_tables()
        sales = self.session.exec(select(FactSale).order_by(FactSale.id)).all()
        result = [self._map_to_domain(s, products, people, customers) for s in sales]
        if date_range is None:
            return result
        return filter_sales_by_range(result, date_range)

    def get_sale(self, sale_id: int) -> SaleDomain:
        """
        Retrieves one sale.

        Raises:
            HTTPException: 404 status if the sale does not exist.
        """
        db_sale = self.session.get(FactSale, sale_id)
        if not db_sale:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Sale with ID {sale_id} not found."
            )
        return self._map_to_domain(db_sale, *self._lookup_tables())

    def create_sale(self, sale_in: SaleDomain) -> SaleDomain:
        """
        Records a new sale.

        Args:
            sale_in (SaleDomain): The selections and the sale date. Any
                embedded records in the payload are ignored.

        Returns:
            SaleDomain: The stored sale with its embedded records.

        Raises:
            HTTPException: 422 status if a selection or the date is invalid.
            HTTPException: 404 status if a referenced record does not exist.
        """
        ensure_valid(validate_sale(sale_in))
        self._validate_references(sale_in)

        new_sale = FactSale(
            product_id=sale_in.product_id,
            sales_person_id=sale_in.sales_person_id,
            customer_id=sale_in.customer_id,
            sale_date=sale_in.sale_date,
        )
        save(self.session, new_sale, "sale")
        logger.info(f"Recorded sale {new_sale.id} for sales person {new_sale.sales_person_id}.")
        return self.get_sale(new_sale.id)
