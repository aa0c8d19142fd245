"""Structural statistics of authored documents.

Stats are recomputed from scratch for every document version: words come
from the plain-text projection, element counts from parsing the markup.
"""

import hashlib
import logging
import math
import threading
from collections import Counter
from typing import Callable

from lxml import etree
from lxml import html as lxml_html

from epropulse.scheduling import Debouncer, TimerFactory
from schemas.seo import SEOStats

logger = logging.getLogger(__name__)

WORDS_PER_MINUTE = 200
DEFAULT_DELAY_MS = 500
COUNTED_TAGS = ("h1", "h2", "h3", "a", "img", "video")

EMPTY_STATS = SEOStats()


def count_words(plain_text: str | None) -> int:
    if not plain_text:
        return 0
    return len(plain_text.split())


def reading_time(words: int) -> int:
    """Minutes needed to read words at 200 words per minute."""
    return math.ceil(words / WORDS_PER_MINUTE)


def count_tags(markup_html: str) -> Counter:
    """Count the elements of interest in an HTML fragment.

    Raises:
        etree.ParserError: If the markup cannot be parsed
        ValueError: If the markup holds characters lxml refuses
    """
    counts: Counter = Counter()
    if not markup_html.strip():
        return counts
    root = lxml_html.document_fromstring(markup_html)
    for element in root.iter(*COUNTED_TAGS):
        counts[element.tag] += 1
    return counts


class SEOAnalyzer:
    """Compute SEOStats for markup plus its plain-text projection.

    Results are memoized for the analyzer's lifetime under a SHA-256 digest
    of both inputs. The memo is unbounded; one analyzer serves one authoring
    session, where the number of distinct versions stays small.

    Attributes:
        delay_ms: Quiescence window used by analyze_later()
    """

    def __init__(
        self,
        delay_ms: float = DEFAULT_DELAY_MS,
        timer_factory: TimerFactory = threading.Timer,
    ):
        self.delay_ms = delay_ms
        self._cache: dict[str, SEOStats] = {}
        self._debounced = Debouncer(self._analyze_and_report, delay_ms, timer_factory)

    @staticmethod
    def cache_key(markup_html: str, plain_text: str) -> str:
        digest = hashlib.sha256()
        digest.update(markup_html.encode("utf-8"))
        digest.update(b"\0")
        digest.update(plain_text.encode("utf-8"))
        return digest.hexdigest()

    @property
    def cache_size(self) -> int:
        return len(self._cache)

    def analyze(self, markup_html: str | None, plain_text: str | None) -> SEOStats:
        """Return the stats of a document version.

        Never raises: markup that fails to parse yields all-zero stats.
        """
        markup_html = markup_html or ""
        plain_text = plain_text or ""

        key = self.cache_key(markup_html, plain_text)
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        words = count_words(plain_text)
        try:
            counts = count_tags(markup_html)
        except (etree.ParserError, ValueError) as e:
            logger.warning(f"SEO analysis failed, reporting empty stats: {e}")
            return EMPTY_STATS

        stats = SEOStats(
            words=words,
            reading_time=reading_time(words),
            h1=counts["h1"],
            h2=counts["h2"],
            h3=counts["h3"],
            links=counts["a"],
            images=counts["img"],
            videos=counts["video"],
        )
        self._cache[key] = stats
        return stats

    def analyze_later(
        self,
        markup_html: str,
        plain_text: str,
        on_stats: Callable[[SEOStats], None],
    ) -> None:
        """Schedule an analysis; bursts collapse into the latest version."""
        self._debounced(markup_html, plain_text, on_stats)

    def flush(self) -> bool:
        return self._debounced.flush()

    def clear(self) -> None:
        self._cache.clear()

    def close(self) -> None:
        """Abandon any scheduled analysis."""
        self._debounced.close()

    def _analyze_and_report(
        self,
        markup_html: str,
        plain_text: str,
        on_stats: Callable[[SEOStats], None],
    ) -> None:
        on_stats(self.analyze(markup_html, plain_text))
