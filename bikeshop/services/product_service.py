import logging
from typing import List

from fastapi import HTTPException
from sqlmodel import Session, select

# Layer 4: Data Access
from bikeshop.data_access.models import DimProduct

# Layer 3: Domain Entities
from bikeshop.domain.product import ProductDomain

# Layer 2: Supporting Services
from bikeshop.services.store_errors import ensure_valid, remove, save
from bikeshop.services.validation_service import validate_product


logger = logging.getLogger(__name__)


class ProductService:
    """
    Service layer for managing the shop's Product catalog.

    Enforces the pricing rules and the case-insensitive (name, manufacturer)
    uniqueness rule through the product validator before any write.
    """

    def __init__(self, session: Session):
        """
        Initializes the ProductService with a database session.

        Args:
            session (Session): The active SQLModel/SQLAlchemy session.
        """
        self.session = session

    # --- 1. LAYERED MAPPING HELPERS ---

    def _map_to_domain(self, db_product: DimProduct) -> ProductDomain:
        """
        Converts a Data Access entity (SQLModel) into a Domain entity (Pydantic).

        Args:
            db_product (DimProduct): The database record to be transformed.

        Returns:
            ProductDomain: The clean business representation of the product.
        """
        return ProductDomain.model_validate(db_product.model_dump())

    def _get_dim_product_or_404(self, product_id: int) -> DimProduct:
        db_product = self.session.get(DimProduct, product_id)
        if not db_product:
            raise HTTPException(status_code=404, detail=f"Product with ID {product_id} not found.")
        return db_product

    # --- 2. FULL CRUD OPERATIONS ---

    def get_all_products(self) -> List[ProductDomain]:
        """
        Retrieves all products in the catalog.

        Returns:
            List[ProductDomain]: A list of all products as domain entities.
        """
        products = self.session.exec(select(DimProduct)).all()
        return [self._map_to_domain(p) for p in products]

    def get_product_by_id(self, product_id: int) -> ProductDomain:
        """
        Retrieves a single product by its database ID.

        Raises:
            HTTPException: 404 status if the product is not found.
        """
        return self._map_to_domain(self._get_dim_product_or_404(product_id))

    def create_product(self, product_in: ProductDomain) -> ProductDomain:
        """
        Validates and persists a new product.

        Args:
            product_in (ProductDomain): The submitted product.

        Returns:
            ProductDomain: The newly created product as a domain entity.

        Raises:
            HTTPException: 422 status if a pricing rule fails or the product
                duplicates an existing (name, manufacturer) pair.
        """
        ensure_valid(validate_product(product_in, self.get_all_products()))

        new_product = DimProduct(**product_in.model_dump(exclude={"id"}))
        save(self.session, new_product, "product")
        logger.info(f"Created product {new_product.id} ({new_product.name}).")
        return self._map_to_domain(new_product)

    def update_product(self, product_id: int, data: ProductDomain) -> ProductDomain:
        """
        Updates an existing product. The product itself is excluded from
        the duplicate check.

        Raises:
            HTTPException: 404 if the product does not exist.
            HTTPException: 422 if the updated data is invalid.
        """
        db_product = self._get_dim_product_or_404(product_id)
        ensure_valid(validate_product(data, self.get_all_products(), current_id=product_id))

        for key, value in data.model_dump(exclude={"id"}).items():
            setattr(db_product, key, value)

        save(self.session, db_product, "product")
        return self._map_to_domain(db_product)

    def delete_product(self, product_id: int) -> None:
        """
        Removes a product from the catalog.

        Raises:
            HTTPException: 404 status if the product is not found.
        """
        db_product = self._get_dim_product_or_404(product_id)
        remove(self.session, db_product, "Product")
        logger.info(f"Deleted product {product_id}.")
