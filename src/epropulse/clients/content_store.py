"""Content Store client for the hosted Postgres REST service."""

import logging
from typing import Any

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from schemas.item import SearchableItem

from .client import Client
from .exceptions import ValidationError

logger = logging.getLogger(__name__)

Filters = dict[str, Any]


class ContentStoreClient(Client):
    """Client for the Content Store's REST query interface.

    Rows live in named collections (tables) reached under ``/rest/v1``.
    Filters map a column to a value (equality) or to an ``(operator, value)``
    pair for the other query operators (``neq``, ``ilike``, ``gte`` ...).
    Sequence operands are written as lists, so ``("in", [1, 2])`` becomes
    ``in.(1,2)``.

    Example:
        config = {"base_url": "https://project.example.co", "api_key": "..."}
        with ContentStoreClient(config) as store:
            products = store.fetch("Propulser", model=Product)
    """

    API_PATH = "/rest/v1"

    def _collection_path(self, collection: str) -> str:
        return f"{self.API_PATH}/{collection}"

    def _build_filters(self, filters: Filters | None) -> dict[str, str]:
        """Translate a filter mapping into query parameters."""
        params: dict[str, str] = {}
        for column, value in (filters or {}).items():
            if isinstance(value, tuple):
                operator, operand = value
            else:
                operator, operand = "eq", value
            if isinstance(operand, bool):
                operand = str(operand).lower()
            elif isinstance(operand, (list, tuple)):
                operand = "(" + ",".join(map(str, operand)) + ")"
            params[column] = f"{operator}.{operand}"
        return params

    def select(
        self,
        collection: str,
        filters: Filters | None = None,
        columns: str = "*",
        order: str | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> list[dict[str, Any]]:
        """Fetch rows from a collection.

        Args:
            collection: Collection (table) name
            filters: Column filters, see class docstring
            columns: Column selection, including embedded relations
            order: Ordering such as ``"published_at.desc"``
            limit: Maximum number of rows
            offset: Number of rows to skip

        Returns:
            List of raw row dicts (empty when the store answers null)
        """
        params: dict[str, Any] = {"select": columns}
        params.update(self._build_filters(filters))
        if order:
            params["order"] = order
        if limit is not None:
            params["limit"] = limit
        if offset is not None:
            params["offset"] = offset

        response = self.get(self._collection_path(collection), params=params)
        rows = response.json()
        if not isinstance(rows, list):
            logger.warning(f"Unexpected payload for {collection}: {type(rows).__name__}")
            return []
        logger.debug(f"Fetched {len(rows)} rows from {collection}")
        return rows

    def insert(
        self, collection: str, rows: list[dict[str, Any]]
    ) -> list[dict[str, Any]]:
        """Insert rows and return their stored representation."""
        response = self.post(
            self._collection_path(collection),
            json=rows,
            headers={"Prefer": "return=representation"},
        )
        logger.info(f"Inserted {len(rows)} rows into {collection}")
        return response.json() or []

    def update(
        self, collection: str, values: dict[str, Any], filters: Filters
    ) -> list[dict[str, Any]]:
        """Update the rows matching filters and return them.

        Raises:
            ValueError: If filters is empty (refuses a whole-table update)
        """
        if not filters:
            raise ValueError("update requires at least one filter")
        response = self.patch(
            self._collection_path(collection),
            params=self._build_filters(filters),
            json=values,
            headers={"Prefer": "return=representation"},
        )
        return response.json() or []

    def remove(self, collection: str, filters: Filters) -> None:
        """Delete the rows matching filters.

        Raises:
            ValueError: If filters is empty (refuses a whole-table delete)
        """
        if not filters:
            raise ValueError("remove requires at least one filter")
        self.delete(
            self._collection_path(collection),
            params=self._build_filters(filters),
        )
        logger.info(f"Deleted rows from {collection} matching {filters}")

    def fetch(
        self,
        collection: str,
        model: type[BaseModel] = SearchableItem,
        filters: Filters | None = None,
        validate: bool = True,
        **kwargs,
    ) -> list[BaseModel] | list[dict[str, Any]]:
        """Fetch a collection as a list of validated records.

        Args:
            collection: Collection (table) name
            model: Schema each row is validated against
            filters: Column filters
            validate: If False, return the raw dicts
            **kwargs: Passed through to select()

        Raises:
            ValidationError: If validate=True and a row fails validation
            APIError: If the store returns a non-2xx response
            ConnectionError: If the network connection fails
        """
        rows = self.select(collection, filters=filters, **kwargs)
        if not validate:
            return rows
        return self._validate_rows(rows, model)

    def save_markup(
        self,
        collection: str,
        key: str,
        value: Any,
        markup: str,
        metadata: dict[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        """Persist serialized editor markup on the row where key == value.

        Args:
            collection: Collection holding the authored content
            key: Identifying column, usually ``slug`` or ``id``
            value: Identifying value
            markup: Serialized document
            metadata: Extra columns written alongside the content
        """
        values = {"content": markup}
        values.update(metadata or {})
        return self.update(collection, values, {key: value})

    def _validate_rows(
        self, rows: list[dict[str, Any]], model: type[BaseModel]
    ) -> list[BaseModel]:
        validated: list[BaseModel] = []

        for i, row in enumerate(rows):
            try:
                validated.append(model.model_validate(row))
            except PydanticValidationError as e:
                row_id = row.get("id", f"index {i}")
                raise ValidationError(
                    f"Row {row_id} failed validation",
                    errors=[str(err) for err in e.errors()],
                ) from e

        return validated
