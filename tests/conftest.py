"""Pytest fixtures for Epropulse tests."""

import json

import pytest


class FakeTimer:
    """Stand-in for threading.Timer driven by a ManualClock."""

    def __init__(self, clock, interval, function, args=None, kwargs=None):
        self.clock = clock
        self.interval = interval
        self.function = function
        self.args = args or ()
        self.kwargs = kwargs or {}
        self.daemon = False
        self.deadline = None
        self.cancelled = False
        self.fired = False

    def start(self):
        self.deadline = self.clock.now + round(self.interval * 1000, 6)
        self.clock.timers.append(self)

    def cancel(self):
        self.cancelled = True

    @property
    def active(self):
        return self.deadline is not None and not self.cancelled and not self.fired

    def fire(self):
        self.fired = True
        self.function(*self.args, **self.kwargs)


class ManualClock:
    """Millisecond clock that fires FakeTimers only when advanced."""

    def __init__(self):
        self.now = 0.0
        self.timers: list[FakeTimer] = []

    def timer(self, interval, function, args=None, kwargs=None):
        return FakeTimer(self, interval, function, args, kwargs)

    @property
    def active(self) -> list[FakeTimer]:
        return [timer for timer in self.timers if timer.active]

    def advance(self, ms: float) -> None:
        target = self.now + ms
        while True:
            due = [timer for timer in self.active if timer.deadline <= target]
            if not due:
                break
            timer = min(due, key=lambda t: t.deadline)
            self.now = timer.deadline
            timer.fire()
        self.now = target


@pytest.fixture
def clock():
    """Manual clock whose .timer is a drop-in timer_factory."""
    return ManualClock()


@pytest.fixture
def sample_products():
    """Five product rows as returned by the Content Store."""
    return [
        {
            "id": 1,
            "name": "Pack Prompts Marketing",
            "description": "200 prompts pour vos campagnes",
            "category": "A",
            "brand": "Epropulse",
            "price": 15000,
            "original_price": 20000,
            "slug": "pack-prompts-marketing-1700000000",
        },
        {
            "id": 2,
            "name": "Formation Automatisation",
            "description": "Automatisez vos tâches répétitives",
            "category": "B",
            "brand": "Visual Arise",
            "price": 45000,
        },
        {
            "id": 3,
            "name": "Guide Éditorial IA",
            "description": "Rédiger avec l'IA",
            "category": "A",
            "brand": "Epropulse",
            "price": 9900,
        },
        {
            "id": 4,
            "name": "Chatbot WhatsApp",
            "description": "Un assistant qui répond à vos clients",
            "category": "C",
            "brand": "Visual Arise",
            "price": 120000,
            "is_new": True,
        },
        {
            "id": 5,
            "name": "Kit Design Graphique",
            "description": "Modèles pour réseaux sociaux",
            "category": "B",
            "brand": "Epropulse",
            "price": 7500,
            "promo": True,
        },
    ]


@pytest.fixture
def sample_post():
    """Blog post row with its author, category and tags."""
    return {
        "id": "post-1",
        "title": "Automatiser son marketing avec l'IA",
        "slug": "automatiser-son-marketing-avec-l-ia",
        "excerpt": "Découvrez comment l'IA change la prospection des petites entreprises.",
        "content": "<h1>Automatiser</h1><p>Texte</p>",
        "cover_image": "https://cdn.example.com/cover.jpg",
        "published_at": "2025-03-14T09:30:00Z",
        "updated_at": "2025-03-15T10:00:00Z",
        "is_published": True,
        "views": 42,
        "category": "Marketing",
        "author": {"id": "a1", "name": "Awa Diallo", "role": "Rédactrice"},
        "blog_category": {"id": 3, "slug": "marketing", "name": "Marketing"},
        "tags": [
            {"id": 1, "slug": "ia", "name": "IA"},
            {"id": 2, "slug": "automatisation", "name": "Automatisation"},
        ],
    }


@pytest.fixture
def products_file(tmp_path, sample_products):
    """sample_products written to a JSON file."""
    path = tmp_path / "products.json"
    path.write_text(json.dumps(sample_products), encoding="utf-8")
    return path


def words(count: int) -> str:
    return " ".join(f"mot{i}" for i in range(count))


@pytest.fixture
def seo_article():
    """Markup with one h1, two h2, one link, no images and 320 words of text."""
    body = words(313)
    markup = (
        "<h1>Titre principal</h1>"
        f"<p>{body}</p>"
        "<h2>Première partie</h2>"
        '<p><a href="https://example.com">lien</a></p>'
        "<h2>Seconde partie</h2>"
    )
    return markup
