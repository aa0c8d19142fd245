"""Tests for SEO statistics, indicators and head metadata."""

import json

import pytest
from lxml import etree

from epropulse.editor import EditorDocument
from epropulse.seo import (
    SEOAnalyzer,
    breadcrumbs,
    build_page_metadata,
    classify,
    count_tags,
    count_words,
    create_environment,
    metadata_for_post,
    reading_time,
    render_head,
    statuses,
)
from epropulse.seo.analyzer import EMPTY_STATS
from schemas.item import BlogPost
from schemas.seo import PageMetadata, SEOStats, SEOThresholds


class TestCounting:
    """Tests for word and element counting."""

    @pytest.mark.parametrize("text", ["", "   ", "\n\t", None])
    def test_blank_text_has_no_words(self, text):
        """Blank text has zero words."""
        assert count_words(text) == 0

    def test_words_split_on_whitespace(self):
        """Words are whitespace-delimited tokens."""
        assert count_words("Bonjour  tout\nle monde !") == 5

    @pytest.mark.parametrize("words, minutes", [(0, 0), (1, 1), (199, 1), (200, 1), (201, 2), (320, 2)])
    def test_reading_time(self, words, minutes):
        """Reading time is ceil(words / 200)."""
        assert reading_time(words) == minutes

    def test_count_tags(self):
        """Headings, links and media are counted."""
        counts = count_tags(
            "<h1>T</h1><h2>a</h2><h2>b</h2><h3>c</h3>"
            '<p><a href="/x">x</a> <img src="/i.png"></p><video src="/v.mp4"></video>'
        )

        assert counts["h1"] == 1
        assert counts["h2"] == 2
        assert counts["h3"] == 1
        assert counts["a"] == 1
        assert counts["img"] == 1
        assert counts["video"] == 1

    def test_count_tags_blank(self):
        """Blank markup has no elements."""
        assert sum(count_tags("  ").values()) == 0


class TestSEOAnalyzer:
    """Tests for SEOAnalyzer."""

    def test_article_scenario(self, seo_article):
        """One h1, two h2, one link and 320 words grade good everywhere."""
        text = EditorDocument.from_html(seo_article).get_text()

        stats = SEOAnalyzer().analyze(seo_article, text)

        assert stats == SEOStats(words=320, reading_time=2, h1=1, h2=2, links=1, images=0)
        assert statuses(stats) == {
            "Mots": "good",
            "Lecture": "neutral",
            "H1": "good",
            "H2": "good",
            "Images": "neutral",
            "Liens": "good",
        }

    def test_words_zero_iff_blank_text(self):
        """Words come from the plain text, not the markup."""
        analyzer = SEOAnalyzer()

        assert analyzer.analyze("<p>du texte</p>", "  ").words == 0
        assert analyzer.analyze("", "un").words == 1

    def test_none_inputs(self):
        """Missing inputs give empty stats."""
        assert SEOAnalyzer().analyze(None, None) == EMPTY_STATS

    def test_parse_failure_gives_empty_stats(self, monkeypatch, caplog):
        """Markup that cannot be parsed yields zeros and a warning."""

        def broken(markup):
            raise etree.ParserError("Document is empty")

        monkeypatch.setattr("epropulse.seo.analyzer.count_tags", broken)

        stats = SEOAnalyzer().analyze("<p>x</p>", "x y z")

        assert stats == EMPTY_STATS
        assert "SEO analysis failed" in caplog.text

    def test_cache_keyed_by_content(self):
        """Same-length edits are not served from the cache."""
        analyzer = SEOAnalyzer()

        first = analyzer.analyze("<h1>ab</h1>", "ab")
        second = analyzer.analyze("<h2>ab</h2>", "ab")

        assert first.h1 == 1 and first.h2 == 0
        assert second.h1 == 0 and second.h2 == 1
        assert analyzer.cache_size == 2

    def test_cache_hit(self):
        """Identical input is analyzed once."""
        analyzer = SEOAnalyzer()

        first = analyzer.analyze("<p>a</p>", "a")
        second = analyzer.analyze("<p>a</p>", "a")

        assert first is second
        assert analyzer.cache_size == 1

        analyzer.clear()
        assert analyzer.cache_size == 0

    def test_cache_key_separates_inputs(self):
        """Moving text between markup and plain text changes the key."""
        assert SEOAnalyzer.cache_key("ab", "c") != SEOAnalyzer.cache_key("a", "bc")

    def test_analyze_later_is_debounced(self, clock):
        """Only the latest version is analyzed after 500 ms."""
        reports = []
        analyzer = SEOAnalyzer(timer_factory=clock.timer)

        analyzer.analyze_later("<h1>a</h1>", "a", reports.append)
        clock.advance(250)
        analyzer.analyze_later("<h1>a</h1><h2>b</h2>", "a b", reports.append)
        clock.advance(499)

        assert reports == []

        clock.advance(1)

        assert reports == [SEOStats(words=2, reading_time=1, h1=1, h2=1)]

    def test_close_abandons_analysis(self, clock):
        """A closed analyzer reports nothing."""
        reports = []
        analyzer = SEOAnalyzer(timer_factory=clock.timer)

        analyzer.analyze_later("<h1>a</h1>", "a", reports.append)
        analyzer.close()
        clock.advance(1000)

        assert reports == []


class TestIndicators:
    """Tests for classify()."""

    def test_order_and_labels(self):
        """Indicators come in panel order."""
        labels = [indicator.label for indicator in classify(SEOStats())]

        assert labels == ["Mots", "Lecture", "H1", "H2", "Images", "Liens"]

    @pytest.mark.parametrize(
        "words, status, message",
        [(300, "good", "✅ Optimal"), (150, "warning", "⚠️ Moyen"), (149, "bad", "❌ Trop court")],
    )
    def test_words(self, words, status, message):
        """Word thresholds are 300 and 150."""
        indicator = classify(SEOStats(words=words))[0]

        assert indicator.status == status
        assert indicator.message == message

    @pytest.mark.parametrize(
        "h1, status, message",
        [(1, "good", "✅ Parfait"), (2, "bad", "❌ Trop de H1"), (0, "bad", "❌ 1 H1 requis")],
    )
    def test_h1(self, h1, status, message):
        """Exactly one H1 is expected."""
        indicator = classify(SEOStats(h1=h1))[2]

        assert (indicator.status, indicator.message) == (status, message)

    def test_h2_and_links_warnings(self):
        """Too few H2 or no links warn."""
        result = statuses(SEOStats(h2=1, links=0))

        assert result["H2"] == "warning"
        assert result["Liens"] == "warning"

    def test_reading_time_value(self):
        """Reading time is shown in minutes."""
        assert classify(SEOStats(reading_time=3))[1].value == "3 min"

    def test_custom_thresholds(self):
        """Thresholds are configurable."""
        thresholds = SEOThresholds(words_good=100, words_warning=50)

        assert statuses(SEOStats(words=120), thresholds)["Mots"] == "good"

    def test_negative_stats_rejected(self):
        """Stats are non-negative."""
        with pytest.raises(ValueError):
            SEOStats(words=-1)


class TestPageMetadata:
    """Tests for head metadata."""

    def test_defaults(self):
        """Defaults describe the home page."""
        meta = build_page_metadata()

        assert meta.canonical == "https://www.epropulse.com"
        assert meta.full_title == meta.title
        assert meta.robots.startswith("index, follow")

    def test_title_suffix(self):
        """Titles get the site name appended once."""
        assert build_page_metadata(title="Blog").full_title == "Blog | Epropulse"
        assert build_page_metadata(title="Epropulse Blog").full_title == "Epropulse Blog"

    def test_none_fields_use_defaults(self):
        """None values fall back to the defaults."""
        assert build_page_metadata(image=None).image == PageMetadata().image

    def test_no_index(self):
        """no_index asks crawlers to stay away."""
        assert build_page_metadata(no_index=True).robots == "noindex, nofollow"

    def test_post_metadata(self, sample_post):
        """Article pages describe the post and carry BlogPosting data."""
        post = BlogPost.model_validate(sample_post)

        meta = metadata_for_post(post)

        assert meta.title == post.title
        assert meta.description == post.excerpt
        assert meta.canonical == "https://www.epropulse.com/blog/automatiser-son-marketing-avec-l-ia"
        assert meta.type == "article"
        assert meta.published_time == "2025-03-14T09:30:00Z"
        assert meta.schema_data["@type"] == "BlogPosting"
        assert meta.schema_data["author"] == {"@type": "Person", "name": "Awa Diallo"}
        assert not meta.no_index

    def test_seo_fields_win(self, sample_post):
        """Author-supplied SEO fields override title and excerpt."""
        sample_post.update(seo_title="Titre SEO", seo_description="Description SEO")

        meta = metadata_for_post(BlogPost.model_validate(sample_post))

        assert meta.title == "Titre SEO"
        assert meta.description == "Description SEO"

    def test_long_excerpt_truncated(self, sample_post):
        """Descriptions derived from excerpts stay short."""
        sample_post["excerpt"] = "mot " * 100

        meta = metadata_for_post(BlogPost.model_validate(sample_post))

        assert len(meta.description) <= 161
        assert meta.description.endswith("…")

    def test_draft_not_indexed(self, sample_post):
        """Unpublished posts are not indexed."""
        sample_post["is_published"] = False

        assert metadata_for_post(BlogPost.model_validate(sample_post)).no_index

    def test_breadcrumbs(self):
        """Breadcrumbs are numbered from 1."""
        data = breadcrumbs(("Accueil", "https://www.epropulse.com"), ("Blog", "https://www.epropulse.com/blog"))

        assert [entry["position"] for entry in data["itemListElement"]] == [1, 2]


class TestRenderHead:
    """Tests for render_head()."""

    def test_renders_tags(self, sample_post):
        """Title, canonical, Open Graph and JSON-LD are rendered."""
        meta = metadata_for_post(BlogPost.model_validate(sample_post))

        html = render_head(meta)

        assert "<title>Automatiser son marketing avec l&#39;IA | Epropulse</title>" in html
        assert '<link rel="canonical" href="https://www.epropulse.com/blog/automatiser-son-marketing-avec-l-ia">' in html
        assert '<meta property="og:type" content="article">' in html
        assert '<meta property="article:published_time" content="2025-03-14T09:30:00Z">' in html
        assert '<script type="application/ld+json">' in html

    def test_json_ld_is_valid_json(self, sample_post):
        """The structured data block parses back to the schema data."""
        meta = metadata_for_post(BlogPost.model_validate(sample_post))

        html = render_head(meta)
        start = html.index('<script type="application/ld+json">') + len('<script type="application/ld+json">')
        end = html.index("</script>", start)

        assert json.loads(html[start:end]) == meta.schema_data

    def test_escapes_values(self):
        """Values are HTML-escaped."""
        html = render_head(build_page_metadata(description='"><script>alert(1)</script>'))

        assert "<script>alert(1)</script>" not in html

    def test_default_keywords_and_no_article_times(self):
        """Pages without keywords use the site defaults."""
        html = render_head(build_page_metadata())

        assert "IA, digital, formation" in html
        assert "article:published_time" not in html

    def test_page_templates_get_text_filters(self, tmp_path, sample_post):
        """Templates loaded from another directory can use the text filters."""
        (tmp_path / "post.html.j2").write_text(
            "<p>{{ post.published_at|format_date }} | {{ post.author|format_authors }}"
            ' | {{ post.tags|parse_tags|join(", ") }}</p>'
            "{{ post.content|clean_content|safe }}",
            encoding="utf-8",
        )
        sample_post["content"] += "<script>track()</script>"
        env = create_environment(tmp_path)

        html = env.get_template("post.html.j2").render(post=sample_post)

        assert html == (
            "<p>14 mars 2025 | Awa Diallo | IA, Automatisation</p>"
            "<h1>Automatiser</h1><p>Texte</p>"
        )
