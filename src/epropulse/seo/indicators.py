"""Grade SEOStats for the editor's indicator panel."""

from schemas.seo import Indicator, SEOStats, SEOThresholds


def _words(stats: SEOStats, t: SEOThresholds) -> Indicator:
    if stats.words >= t.words_good:
        status, message = "good", "✅ Optimal"
    elif stats.words >= t.words_warning:
        status, message = "warning", "⚠️ Moyen"
    else:
        status, message = "bad", "❌ Trop court"
    return Indicator(label="Mots", value=stats.words, status=status, message=message)


def _h1(stats: SEOStats, t: SEOThresholds) -> Indicator:
    if stats.h1 == t.h1_expected:
        status, message = "good", "✅ Parfait"
    elif stats.h1 > t.h1_expected:
        status, message = "bad", "❌ Trop de H1"
    else:
        status, message = "bad", "❌ 1 H1 requis"
    return Indicator(label="H1", value=stats.h1, status=status, message=message)


def _h2(stats: SEOStats, t: SEOThresholds) -> Indicator:
    if stats.h2 >= t.h2_good:
        return Indicator(label="H2", value=stats.h2, status="good", message="✅ Structure bonne")
    return Indicator(label="H2", value=stats.h2, status="warning", message="⚠️ Ajoutez des H2")


def _links(stats: SEOStats, t: SEOThresholds) -> Indicator:
    if stats.links >= t.links_good:
        return Indicator(
            label="Liens", value=stats.links, status="good", message="✅ Liens présents"
        )
    return Indicator(
        label="Liens", value=stats.links, status="warning", message="⚠️ Ajoutez des liens"
    )


def classify(stats: SEOStats, thresholds: SEOThresholds | None = None) -> list[Indicator]:
    """Return the panel's indicators in display order.

    Reading time and images are informational and always neutral.
    """
    t = thresholds or SEOThresholds()
    return [
        _words(stats, t),
        Indicator(label="Lecture", value=f"{stats.reading_time} min", status="neutral"),
        _h1(stats, t),
        _h2(stats, t),
        Indicator(label="Images", value=stats.images, status="neutral"),
        _links(stats, t),
    ]


def statuses(stats: SEOStats, thresholds: SEOThresholds | None = None) -> dict[str, str]:
    """Map each indicator label to its status."""
    return {indicator.label: indicator.status for indicator in classify(stats, thresholds)}
