"""Search view state: one collection, one query, debounced recomputation."""

import logging
import threading
from typing import Any, Callable, Iterable

from pydantic import BaseModel

from epropulse.clients.content_store import ContentStoreClient
from epropulse.clients.exceptions import StoreError
from epropulse.scheduling import DebounceScope, TimerFactory
from schemas.item import SearchableItem

from .engine import (
    DEFAULT_SEARCH_KEYS,
    extract_categories,
    filter_items,
    item_names,
    rank_suggestions,
    sanitize_query,
)

logger = logging.getLogger(__name__)

LOAD_FAILED_NOTICE = "Impossible de charger le catalogue. Veuillez réessayer."


class SearchSession:
    """State behind a storefront or blog search view.

    Typing goes through a debouncer so results are recomputed once per
    quiescence window; category changes apply at once. The collection is
    owned by the session and replaced wholesale when refetched.

    Attributes:
        items: Current source collection
        term: Committed (debounced) search term
        category: Selected category, or None
        notices: User-visible messages about failed loads
    """

    def __init__(
        self,
        items: Any = None,
        search_keys: Iterable[str] = DEFAULT_SEARCH_KEYS,
        on_results: Callable[[list], None] | None = None,
        delay_ms: float = 300,
        timer_factory: TimerFactory = threading.Timer,
    ):
        self.items: list = list(items) if isinstance(items, (list, tuple)) else []
        self.search_keys = tuple(search_keys)
        self.on_results = on_results
        self.term = ""
        self.category: str | None = None
        self.notices: list[str] = []
        self._scope = DebounceScope(timer_factory)
        self._commit = self._scope.debounce(self._commit_term, delay_ms)
        self._results: list = list(self.items)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    @property
    def results(self) -> list:
        return list(self._results)

    @property
    def categories(self) -> list[str]:
        return extract_categories(self.items)

    @property
    def closed(self) -> bool:
        return self._scope.closed

    def set_term(self, value: str) -> None:
        """Record a keystroke; results follow after the quiescence window."""
        if self.closed:
            return
        self._commit(sanitize_query(value))

    def flush(self) -> None:
        """Commit a pending term immediately (e.g. on Enter)."""
        self._commit.flush()

    def set_category(self, value: str | None) -> None:
        if self.closed:
            return
        self.category = sanitize_query(value) or None
        self._recompute()

    def clear(self) -> None:
        self._commit.cancel()
        self.term = ""
        self.category = None
        self._recompute()

    def suggestions(self, extra: Iterable[str] = (), query: str | None = None) -> list[str]:
        """Suggestions for query (default: the committed term)."""
        if query is None:
            query = self.term
        return rank_suggestions(query, extra, item_names(self.items))

    def replace_items(self, items: Any) -> None:
        self.items = list(items) if isinstance(items, (list, tuple)) else []
        self._recompute()

    def load(
        self,
        client: ContentStoreClient,
        collection: str,
        model: type[BaseModel] = SearchableItem,
        **kwargs,
    ) -> bool:
        """Refetch the collection from the Content Store.

        A store failure leaves an empty collection and a notice; the session
        stays usable.

        Returns:
            True if the collection was loaded
        """
        try:
            items = client.fetch(collection, model=model, **kwargs)
        except StoreError as e:
            logger.error(f"Failed to load {collection}: {e}")
            self.notices.append(LOAD_FAILED_NOTICE)
            self.replace_items([])
            return False
        self.replace_items(items)
        logger.info(f"Loaded {len(self.items)} items from {collection}")
        return True

    def close(self) -> None:
        """Tear the view down: pending recomputations are dropped."""
        self._scope.close()

    def _commit_term(self, term: str) -> None:
        if self.closed:
            return
        self.term = term
        self._recompute()

    def _recompute(self) -> None:
        self._results = filter_items(
            self.items, self.term, self.category, self.search_keys
        )
        if self.on_results is not None and not self.closed:
            self.on_results(self.results)
