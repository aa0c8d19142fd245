"""Persist editor markup into the Content Store."""

import logging
from typing import Any

from epropulse.clients.content_store import ContentStoreClient
from epropulse.clients.exceptions import StoreError

logger = logging.getLogger(__name__)

SAVE_FAILED_NOTICE = "❌ Échec de l'enregistrement. Vos modifications sont conservées localement."


class StorePersistence:
    """on_change collaborator saving markup to one Content Store row.

    A failed save is logged and turned into a notice; authoring continues
    and the next change retries with the latest markup.

    Attributes:
        collection: Store collection holding the row
        key: Column identifying the row
        value: Value of that column
        metadata: Extra columns written with every save
        notices: User-visible messages about failed saves
        last_saved: Markup of the last successful save
    """

    def __init__(
        self,
        client: ContentStoreClient,
        collection: str,
        key: str,
        value: Any,
        metadata: dict | None = None,
    ):
        self.client = client
        self.collection = collection
        self.key = key
        self.value = value
        self.metadata = dict(metadata or {})
        self.notices: list[str] = []
        self.last_saved: str | None = None

    def __call__(self, markup: str) -> bool:
        return self.save(markup)

    def save(self, markup: str) -> bool:
        try:
            self.client.save_markup(
                self.collection, self.key, self.value, markup, self.metadata
            )
        except StoreError as e:
            logger.error(f"Failed to save {self.collection} {self.key}={self.value}: {e}")
            self.notices.append(SAVE_FAILED_NOTICE)
            return False
        self.last_saved = markup
        logger.debug(f"Saved {len(markup)} characters to {self.collection}")
        return True
