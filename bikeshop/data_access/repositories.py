import logging
from typing import Any, Generic, TypeVar

import httpx
from pydantic import TypeAdapter, ValidationError

from bikeshop.core.config import settings
from bikeshop.domain.base import BaseDomainModel
from bikeshop.domain.customer import CustomerDomain
from bikeshop.domain.product import ProductDomain
from bikeshop.domain.sale import SaleDomain
from bikeshop.domain.sales_person import SalesPersonDomain


logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseDomainModel)


class StoreError(Exception):
    """Base error for any failed call to the store API."""

    def __init__(self, message: str, status_code: int | None = None, detail: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.detail = detail


class FetchError(StoreError):
    """A collection or record could not be read (transport, status or payload shape)."""


class MutationError(StoreError):
    """A create, update or delete was rejected by the store."""


def _error_detail(response: httpx.Response) -> Any:
    try:
        return response.json().get("detail")
    except (ValueError, AttributeError):
        return response.text or None


class EntityRepository(Generic[ModelT]):
    """
    Read/create access to one entity collection of the store API.

    The last fetched collection is cached until :meth:`invalidate` is
    called; every successful write through the repository invalidates it,
    so the next :meth:`get_all` re-fetches. Cached data is never patched in
    place.
    """

    def __init__(self, client: httpx.Client, path: str, model: type[ModelT], name: str) -> None:
        """
        Args:
            client (httpx.Client): Client whose base_url points at the store API.
            path (str): Collection path relative to the base URL, e.g. '/sales'.
            model (type[ModelT]): Domain model every payload is validated against.
            name (str): Human-readable plural used in error messages.
        """
        self.client = client
        self.path = path
        self.model = model
        self.name = name
        self._adapter = TypeAdapter(list[model])
        self._cache: list[ModelT] | None = None

    @property
    def is_cached(self) -> bool:
        return self._cache is not None

    def _request(self, error_cls: type[StoreError], action: str, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            response = self.client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.warning(f"Failed to {action} {self.name}: {e}")
            raise error_cls(f"Failed to {action} {self.name}") from e

        if not response.is_success:
            logger.warning(f"Failed to {action} {self.name}: HTTP {response.status_code}")
            raise error_cls(
                f"Failed to {action} {self.name}",
                status_code=response.status_code,
                detail=_error_detail(response),
            )
        return response

    def _payload(self, data: ModelT) -> dict[str, Any]:
        return data.model_dump(mode="json", by_alias=True, exclude={"id"})

    def _parse_one(self, response: httpx.Response, error_cls: type[StoreError], action: str) -> ModelT:
        try:
            return self.model.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise error_cls(f"Failed to {action} {self.name}: unexpected response") from e

    def invalidate(self) -> None:
        """Drops the cached collection so the next read goes to the store."""
        self._cache = None

    def refetch(self) -> list[ModelT]:
        """
        Reads the whole collection from the store and caches it.

        Returns:
            list[ModelT]: The validated collection.

        Raises:
            FetchError: On transport failure, a non-success status, or a
                payload that does not match the model.
        """
        response = self._request(FetchError, "fetch", "GET", self.path)
        try:
            records = self._adapter.validate_python(response.json())
        except (ValueError, ValidationError) as e:
            logger.warning(f"Discarding malformed {self.name} payload: {e}")
            raise FetchError(f"Failed to fetch {self.name}: unexpected response") from e
        self._cache = records
        return list(records)

    def get_all(self) -> list[ModelT]:
        """Returns the cached collection, fetching it first if needed."""
        if self._cache is None:
            return self.refetch()
        return list(self._cache)

    def get(self, entity_id: int) -> ModelT:
        """
        Reads a single record.

        Raises:
            FetchError: If the record is missing or the request fails.
        """
        response = self._request(FetchError, "fetch", "GET", f"{self.path}/{entity_id}")
        return self._parse_one(response, FetchError, "fetch")

    def create(self, data: ModelT) -> ModelT:
        """
        Creates a record and invalidates the cached collection.

        Raises:
            MutationError: If the store rejects the record.
        """
        response = self._request(MutationError, "create", "POST", self.path, json=self._payload(data))
        self.invalidate()
        return self._parse_one(response, MutationError, "create")


class MutableEntityRepository(EntityRepository[ModelT]):
    """Repository for entities that can also be updated and deleted."""

    def update(self, entity_id: int, data: ModelT) -> ModelT:
        """
        Replaces a record and invalidates the cached collection.

        Raises:
            MutationError: If the store rejects the update.
        """
        response = self._request(
            MutationError, "update", "PUT", f"{self.path}/{entity_id}", json=self._payload(data)
        )
        self.invalidate()
        return self._parse_one(response, MutationError, "update")

    def delete(self, entity_id: int) -> None:
        """
        Deletes a record and invalidates the cached collection.

        Raises:
            MutationError: If the store rejects the deletion.
        """
        self._request(MutationError, "delete", "DELETE", f"{self.path}/{entity_id}")
        self.invalidate()


class StoreRepositories:
    """One explicit repository per entity type of the store API."""

    def __init__(self, client: httpx.Client) -> None:
        self.client = client
        self.customers = MutableEntityRepository(client, "/customers", CustomerDomain, "customers")
        self.products = MutableEntityRepository(client, "/products", ProductDomain, "products")
        self.salespersons = MutableEntityRepository(client, "/salespersons", SalesPersonDomain, "salespersons")
        self.sales = EntityRepository(client, "/sales", SaleDomain, "sales")

    @classmethod
    def from_settings(cls) -> "StoreRepositories":
        """Builds repositories against ``settings.STORE_API_URL``."""
        client = httpx.Client(base_url=settings.STORE_API_URL, timeout=settings.STORE_TIMEOUT)
        return cls(client)

    def invalidate_all(self) -> None:
        for repo in (self.customers, self.products, self.salespersons, self.sales):
            repo.invalidate()
