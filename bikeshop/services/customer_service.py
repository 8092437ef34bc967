import logging
from typing import List

from fastapi import HTTPException, status
from sqlmodel import Session, select

# Layer 4: Data Access
from bikeshop.data_access.models import DimCustomer

# Layer 3: Domain Entities
from bikeshop.domain.customer import CustomerDomain

# Layer 2: Supporting Services
from bikeshop.services.store_errors import ensure_valid, remove, save
from bikeshop.services.validation_service import validate_customer


logger = logging.getLogger(__name__)

class CustomerService:
    """
    Service layer for managing Customer records in the store.

    Every write is gated by the customer data-entry validator, so the store
    only ever holds records that passed the same rules the entry forms use.
    """

    def __init__(self, session: Session):
        """
        Initializes the CustomerService with a database session.

        Args:
            session (Session): The active SQLModel/SQLAlchemy session.
        """
        self.session = session

    def _map_to_domain(self, db_customer: DimCustomer) -> CustomerDomain:
        return CustomerDomain.model_validate(db_customer.model_dump())

    def _get_dim_customer_or_404(self, customer_id: int) -> DimCustomer:
        """
        Internal helper to retrieve a customer database record or raise a 404 error.

        Args:
            customer_id (int): The primary key ID of the customer to find.

        Returns:
            DimCustomer: The database record found.

        Raises:
            HTTPException: 404 status code if the customer does not exist.
        """
        customer = self.session.get(DimCustomer, customer_id)
        if not customer:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Customer with ID {customer_id} not found."
            )
        return customer

    def get_all_customers(self) -> List[CustomerDomain]:
        """Retrieves all customer records."""
        customers = self.session.exec(select(DimCustomer)).all()
        return [self._map_to_domain(c) for c in customers]

    def get_customer(self, customer_id: int) -> CustomerDomain:
        """
        Retrieves a single customer by ID.

        Raises:
            HTTPException: 404 status code if the customer is not found.
        """
        return self._map_to_domain(self._get_dim_customer_or_404(customer_id))

    def create_customer(self, customer_in: CustomerDomain) -> CustomerDomain:
        """
        Validates and persists a new customer.

        Args:
            customer_in (CustomerDomain): The submitted customer.

        Returns:
            CustomerDomain: The stored customer with its new ID.

        Raises:
            HTTPException: 422 status code if validation fails.
        """
        ensure_valid(validate_customer(customer_in))

        new_customer = DimCustomer(**customer_in.model_dump(exclude={"id"}))
        save(self.session, new_customer, "customer")
        logger.info(f"Created customer {new_customer.id}.")
        return self._map_to_domain(new_customer)

    def update_customer(self, customer_id: int, customer_in: CustomerDomain) -> CustomerDomain:
        """
        Replaces the data of an existing customer.

        Raises:
            HTTPException: 404 if the customer does not exist, 422 if validation fails.
        """
        db_customer = self._get_dim_customer_or_404(customer_id)
        ensure_valid(validate_customer(customer_in))

        for key, value in customer_in.model_dump(exclude={"id"}).items():
            setattr(db_customer, key, value)

        save(self.session, db_customer, "customer")
        return self._map_to_domain(db_customer)

    def delete_customer(self, customer_id: int) -> None:
        """
        Deletes a customer.

        Raises:
            HTTPException: 404 if not found, 409 if sales still reference it.
        """
        db_customer = self._get_dim_customer_or_404(customer_id)
        remove(self.session, db_customer, "Customer")
        logger.info(f"Deleted customer {customer_id}.")
