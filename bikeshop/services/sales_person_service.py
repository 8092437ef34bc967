import logging
from typing import List

from fastapi import HTTPException, status
from sqlmodel import Session, select

from bikeshop.data_access.models import DimSalesPerson
from bikeshop.domain.sales_person import SalesPersonDomain
from bikeshop.services.store_errors import ensure_valid, remove, save
from bikeshop.services.validation_service import validate_salesperson


logger = logging.getLogger(__name__)

class SalesPersonService:
    """
    Service layer for managing Sales Person records.

    Duplicate names and duplicate phone numbers are rejected with
    independent error keys, both reported at once when both collide.
    """

    def __init__(self, session: Session):
        """
        Initializes the SalesPersonService with a database session.

        Args:
            session (Session): The active SQLModel/SQLAlchemy session.
        """
        self.session = session

    def _map_to_domain(self, db_person: DimSalesPerson) -> SalesPersonDomain:
        return SalesPersonDomain.model_validate(db_person.model_dump())

    def _get_dim_sales_person_or_404(self, sales_person_id: int) -> DimSalesPerson:
        """
        Internal helper to retrieve a sales person record or raise a 404 error.

        Args:
            sales_person_id (int): The primary key ID of the sales person.

        Returns:
            DimSalesPerson: The retrieved database record.

        Raises:
            HTTPException: 404 status code if the sales person does not exist.
        """
        person = self.session.get(DimSalesPerson, sales_person_id)
        if not person:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Sales Person with ID {sales_person_id} not found."
            )
        return person

    def create_sales_person(self, person_in: SalesPersonDomain) -> SalesPersonDomain:
        """
        Validates and persists a new Sales Person.

        Args:
            person_in (SalesPersonDomain): The submitted salesperson.

        Returns:
            SalesPersonDomain: The newly created record.

        Raises:
            HTTPException: 422 status code if a field is invalid, the name or
                phone already exists, or a date lies in the future.
        """
        ensure_valid(validate_salesperson(person_in, self.get_all_sales_people()))

        new_person = DimSalesPerson(**person_in.model_dump(exclude={"id"}))
        save(self.session, new_person, "sales person")
        logger.info(f"Created sales person {new_person.id} ({person_in.get_full_name()}).")
        return self._map_to_domain(new_person)

    def get_all_sales_people(self) -> List[SalesPersonDomain]:
        """
        Retrieves all sales people records from the database.

        Returns:
            List[SalesPersonDomain]: A list of all sales person records.
        """
        people = self.session.exec(select(DimSalesPerson)).all()
        return [self._map_to_domain(p) for p in people]

    def get_sales_person_by_id(self, sales_person_id: int) -> SalesPersonDomain:
        """
        Retrieves a specific sales person by their unique identifier.

        Raises:
            HTTPException: 404 status code if the sales person is not found.
        """
        return self._map_to_domain(self._get_dim_sales_person_or_404(sales_person_id))

    def update_sales_person(self, sales_person_id: int, person_in: SalesPersonDomain) -> SalesPersonDomain:
        """
        Updates the information of an existing sales person.

        Args:
            sales_person_id (int): The ID of the sales person to update.
            person_in (SalesPersonDomain): The updated domain data.

        Returns:
            SalesPersonDomain: The updated record.

        Raises:
            HTTPException: 404 status code if the target sales person does not exist.
            HTTPException: 422 status code if the updated data is invalid.
        """
        db_person = self._get_dim_sales_person_or_404(sales_person_id)
        ensure_valid(
            validate_salesperson(person_in, self.get_all_sales_people(), current_id=sales_person_id)
        )

        for key, value in person_in.model_dump(exclude={"id"}).items():
            setattr(db_person, key, value)

        save(self.session, db_person, "sales person")
        return self._map_to_domain(db_person)

    def delete_sales_person(self, sales_person_id: int) -> None:
        """
        Deletes a sales person record.

        Raises:
            HTTPException: 404 status code if the sales person is not found.
            HTTPException: 409 status code if sales still reference the record.
        """
        db_person = self._get_dim_sales_person_or_404(sales_person_id)
        remove(self.session, db_person, "Sales Person")
        logger.info(f"Deleted sales person {sales_person_id}.")
