"""Command-line interface for epropulse."""

import argparse
import json
import logging
import sys
from pathlib import Path

from pydantic import BaseModel, ValidationError

from epropulse.clients import ContentStoreClient, StoreError
from epropulse.config import load_store_config
from epropulse.editor import EditorDocument
from epropulse.localization import (
    country_code_to_flag_emoji,
    detect_user_country_code,
    format_price,
    resolve_locale,
)
from epropulse.search import extract_categories, filter_items, item_names, rank_suggestions
from epropulse.seo import SEOAnalyzer, classify, metadata_for_post, render_head
from epropulse.text import product_slug, slugify
from schemas.item import BlogPost, Product, SearchableItem

MODELS: dict[str, type[BaseModel]] = {
    "item": SearchableItem,
    "product": Product,
    "post": BlogPost,
}


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the CLI."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )


def load_items(args: argparse.Namespace) -> list:
    """Load records from --input or from the Content Store collection.

    Raises:
        StoreError: If the Content Store request fails
        OSError: If the input file cannot be read
        ValueError: If the input is not a JSON list of valid records
    """
    model = MODELS[args.kind]
    if args.input is not None:
        rows = json.loads(args.input.read_text(encoding="utf-8"))
        if not isinstance(rows, list):
            raise ValueError(f"{args.input} does not hold a JSON list")
        return [model.model_validate(row) for row in rows]

    with ContentStoreClient(load_store_config()) as client:
        return client.fetch(args.collection, model=model)


def search(args: argparse.Namespace) -> int:
    """Execute the search command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    try:
        items = load_items(args)
    except (StoreError, OSError, ValueError, ValidationError) as e:
        logger.error(f"Failed to load items: {e}")
        return 1

    results = filter_items(items, args.term, args.category)
    logger.info(f"{len(results)} of {len(items)} items match")
    for item in results:
        logger.info(f"  {item.id}: {item.display_name}")

    return 0


def categories(args: argparse.Namespace) -> int:
    """Execute the categories command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    try:
        items = load_items(args)
    except (StoreError, OSError, ValueError, ValidationError) as e:
        logger.error(f"Failed to load items: {e}")
        return 1

    for category in extract_categories(items):
        logger.info(f"  {category}")

    return 0


def suggest(args: argparse.Namespace) -> int:
    """Execute the suggest command."""
    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    names: list[str] = []
    if args.input is not None or args.collection is not None:
        try:
            names = item_names(load_items(args))
        except (StoreError, OSError, ValueError, ValidationError) as e:
            logger.error(f"Failed to load items: {e}")
            return 1

    for suggestion in rank_suggestions(args.query, args.extra or [], names, limit=args.limit):
        logger.info(f"  {suggestion}")

    return 0


def analyze(args: argparse.Namespace) -> int:
    """Execute the analyze command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    html_path = args.file.resolve()
    if not html_path.exists():
        logger.error(f"HTML file not found: {html_path}")
        return 1

    markup = html_path.read_text(encoding="utf-8")
    text = EditorDocument.from_html(markup).get_text()

    analyzer = SEOAnalyzer()
    try:
        stats = analyzer.analyze(markup, text)
    finally:
        analyzer.close()

    logger.info(f"SEO analysis of {html_path.name}")
    for indicator in classify(stats):
        line = f"  {indicator.label}: {indicator.value}"
        if indicator.message:
            line += f" {indicator.message}"
        logger.info(line)

    return 0


def locale_info(args: argparse.Namespace) -> int:
    """Execute the locale command."""
    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    country = args.country or detect_user_country_code()
    info = resolve_locale(country)

    logger.info(f"{country_code_to_flag_emoji(info.country_code)} {info.country_code}")
    logger.info(f"  Currency: {info.currency_label}")
    logger.info(f"  Phone prefix: {info.phone_prefix}")
    if args.price is not None:
        logger.info(f"  Price: {format_price(args.price)} {info.currency_symbol}")

    return 0


def slug(args: argparse.Namespace) -> int:
    """Execute the slugify command."""
    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    value = product_slug(args.text) if args.timestamp else slugify(args.text)
    if not value:
        logger.error(f"Nothing left to slugify in {args.text!r}")
        return 1

    logger.info(value)
    return 0


def head(args: argparse.Namespace) -> int:
    """Execute the head command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    post_path = args.post.resolve()
    if not post_path.exists():
        logger.error(f"Post file not found: {post_path}")
        return 1

    try:
        post = BlogPost.model_validate_json(post_path.read_text(encoding="utf-8"))
    except ValidationError as e:
        logger.error(f"Invalid post {post_path.name}: {e.error_count()} errors")
        return 1

    rendered = render_head(metadata_for_post(post, args.site_url))
    if args.output is not None:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(rendered, encoding="utf-8")
        logger.info(f"Wrote head for {post.slug} to {args.output}")
    else:
        sys.stdout.write(rendered)

    return 0


def _add_source_arguments(parser: argparse.ArgumentParser, required: bool = True) -> None:
    source = parser.add_mutually_exclusive_group(required=required)
    source.add_argument(
        "--input",
        type=Path,
        help="JSON file holding a list of records",
    )
    source.add_argument(
        "--collection",
        type=str,
        help="Content Store collection to fetch (uses EPROPULSE_STORE_URL)",
    )
    parser.add_argument(
        "--kind",
        choices=sorted(MODELS),
        default="item",
        help="Record schema (default: item)",
    )


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code
    """
    parser = argparse.ArgumentParser(
        prog="epropulse",
        description="Search, SEO and locale tools for the Epropulse catalogue and blog",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output",
    )

    subparsers = parser.add_subparsers(
        title="commands",
        description="Available commands",
        dest="command",
    )

    search_parser = subparsers.add_parser(
        "search",
        help="Filter records by term and category",
        description="Filter products or posts by an accent-insensitive term and an exact category.",
    )
    _add_source_arguments(search_parser)
    search_parser.add_argument(
        "--term",
        type=str,
        default="",
        help="Search term",
    )
    search_parser.add_argument(
        "--category",
        type=str,
        default=None,
        help="Exact category to keep",
    )
    search_parser.set_defaults(func=search)

    categories_parser = subparsers.add_parser(
        "categories",
        help="List distinct categories",
        description="List the distinct categories of a collection in first-seen order.",
    )
    _add_source_arguments(categories_parser)
    categories_parser.set_defaults(func=categories)

    suggest_parser = subparsers.add_parser(
        "suggest",
        help="Suggest search completions",
        description="Rank free-form suggestions and record names containing the query.",
    )
    suggest_parser.add_argument("query", type=str, help="Partial query")
    _add_source_arguments(suggest_parser, required=False)
    suggest_parser.add_argument(
        "--extra",
        action="append",
        help="Free-form suggestion (repeatable)",
    )
    suggest_parser.add_argument(
        "--limit",
        type=int,
        default=5,
        help="Maximum number of suggestions (default: 5)",
    )
    suggest_parser.set_defaults(func=suggest)

    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Compute SEO statistics for an HTML file",
        description="Count words, headings, links and media in an HTML article and grade them.",
    )
    analyze_parser.add_argument(
        "--file",
        type=Path,
        required=True,
        help="Path to the HTML file",
    )
    analyze_parser.set_defaults(func=analyze)

    locale_parser = subparsers.add_parser(
        "locale",
        help="Show currency and phone prefix for a country",
        description="Resolve a country code (or the detected one) to its currency and phone prefix.",
    )
    locale_parser.add_argument(
        "country",
        nargs="?",
        default=None,
        help="ISO 3166 alpha-2 code (default: detected from the environment)",
    )
    locale_parser.add_argument(
        "--price",
        type=float,
        default=None,
        help="Price to format in the resolved currency",
    )
    locale_parser.set_defaults(func=locale_info)

    slug_parser = subparsers.add_parser(
        "slugify",
        help="Turn a title into a URL slug",
        description="Lowercase, strip accents and hyphenate a title.",
    )
    slug_parser.add_argument("text", type=str, help="Title to slugify")
    slug_parser.add_argument(
        "--timestamp",
        action="store_true",
        help="Append a Unix timestamp, as product slugs do",
    )
    slug_parser.set_defaults(func=slug)

    head_parser = subparsers.add_parser(
        "head",
        help="Render head metadata for a blog post",
        description="Render title, robots, Open Graph, Twitter and JSON-LD tags for a blog post.",
    )
    head_parser.add_argument(
        "--post",
        type=Path,
        required=True,
        help="JSON file holding one blog post",
    )
    head_parser.add_argument(
        "--site-url",
        type=str,
        default="https://www.epropulse.com",
        help="Site root used for canonical URLs",
    )
    head_parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write the tags to this file instead of stdout",
    )
    head_parser.set_defaults(func=head)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
