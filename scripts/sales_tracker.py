#!/usr/bin/env python3
"""
Global Sales Tracker command line.

Works on the same storage as the API (see config/settings.py for the
environment variables that select it).

Usage:
    python scripts/sales_tracker.py import-products products.txt
    python scripts/sales_tracker.py record HB851 Japan "LLC Tech"
    python scripts/sales_tracker.py history --search llc
    python scripts/sales_tracker.py cross-ref country Japan
    python scripts/sales_tracker.py delete <sale-id>
    python scripts/sales_tracker.py analyze
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Callable, List, Optional, TextIO

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from config.settings import Settings, configure_logging, load_settings
from domain.countries import COMMON_COUNTRIES
from domain.time import format_sale_date
from domain.views import ViewMode, cross_reference, distinct_countries, search_history
from repositories.storage import PersistenceError, build_storage
from services.analysis_service import AnalysisRequester
from services.product_import_service import import_product_text
from services.record_store import RecordStore
from services.sale_entry_service import SaleEntryWorkflow

CROSS_REF_MODES = {
    "country": ViewMode.BY_COUNTRY,
    "series": ViewMode.BY_SERIES,
}


def confirm(prompt: str, input_fn: Optional[Callable[[str], str]] = None) -> bool:
    """Ask a yes/no question; anything but y/yes is a no."""
    try:
        answer = (input_fn or input)(f"{prompt} [y/N] ")
    except EOFError:
        return False
    return answer.strip().lower() in ("y", "yes")


def cmd_record(store: RecordStore, args: argparse.Namespace, out: TextIO) -> int:
    workflow = SaleEntryWorkflow(store)
    workflow.form.selected_series = args.series
    workflow.form.customer_name = args.customer
    if args.country in COMMON_COUNTRIES:
        workflow.choose_country(args.country)
    else:
        workflow.form.use_custom_country = True
        workflow.form.custom_country = args.country

    result = workflow.submit()
    if not result.success:
        print(f"Error: {result.notification.message}", file=sys.stderr)
        return 1

    print(result.notification.message, file=out)
    print(f"Sale ID: {result.sale.id}", file=out)
    return 0


def cmd_delete(store: RecordStore, args: argparse.Namespace, out: TextIO) -> int:
    sale = store.get_sale(args.sale_id)
    if sale is None:
        print(f"No record with id {args.sale_id}; nothing deleted.", file=out)
        return 0

    if not args.yes and not confirm(f"Delete {sale.describe()}?"):
        print("Cancelled.", file=out)
        return 0

    store.delete_sale(args.sale_id)
    print(f"Deleted {sale.describe()}", file=out)
    return 0


def cmd_history(store: RecordStore, args: argparse.Namespace, out: TextIO) -> int:
    matches = search_history(store.sales, args.search)
    print(f"{len(matches)} records found", file=out)
    for sale in matches:
        print(
            f"{format_sale_date(sale.timestamp):<13} {sale.series_name:<16} "
            f"{sale.country:<20} {sale.customer_name:<20} {sale.id}",
            file=out,
        )
    return 0


def cmd_countries(store: RecordStore, args: argparse.Namespace, out: TextIO) -> int:
    for country in distinct_countries(store.sales):
        print(country, file=out)
    return 0


def cmd_cross_ref(store: RecordStore, args: argparse.Namespace, out: TextIO) -> int:
    results = cross_reference(store.sales, CROSS_REF_MODES[args.mode], args.name)
    print(f"{len(results)} Found", file=out)
    for item in results:
        print(f"  {item}", file=out)
    return 0


def cmd_import_products(store: RecordStore, args: argparse.Namespace, out: TextIO) -> int:
    if args.file == "-":
        text = sys.stdin.read()
    else:
        text = Path(args.file).read_text(encoding="utf-8")

    result = import_product_text(store, text)
    if result.parsed == 0:
        print("Nothing to import.", file=out)
        return 0

    print(f"Imported {result.parsed} names ({result.added} new); {result.total} products total", file=out)
    return 0


def cmd_products(store: RecordStore, args: argparse.Namespace, out: TextIO) -> int:
    print(f"{len(store.products)} products", file=out)
    for product in store.products:
        print(f"  {product}", file=out)
    return 0


def cmd_clear_products(store: RecordStore, args: argparse.Namespace, out: TextIO) -> int:
    if not args.yes and not confirm(f"Remove all {len(store.products)} products? Sales are kept."):
        print("Cancelled.", file=out)
        return 0

    store.clear_products()
    print("All products cleared.", file=out)
    return 0


def cmd_analyze(
    store: RecordStore,
    args: argparse.Namespace,
    out: TextIO,
    requester: AnalysisRequester,
) -> int:
    report = asyncio.run(requester.generate_report(store.sales, store.products))
    print(report, file=out)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Record and explore product series sales by country and customer",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Import product series (newline, comma, semicolon or pipe separated)
  python sales_tracker.py import-products products.txt

  # Record a sale (countries outside the suggested list are accepted)
  python sales_tracker.py record HB851 Japan "LLC Tech"

  # Which series were sold to Japan?
  python sales_tracker.py cross-ref country Japan
        """
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("record", help="Record a sale")
    p.add_argument("series", help="Product series name (must be imported first)")
    p.add_argument("country", help="Country the series was sold to")
    p.add_argument("customer", help="Customer name or abbreviation")

    p = sub.add_parser("delete", help="Delete one sale record")
    p.add_argument("sale_id")
    p.add_argument("--yes", action="store_true", help="Skip the confirmation prompt")

    p = sub.add_parser("history", help="List sale records, most recent first")
    p.add_argument("--search", default="", help="Filter by series, country or customer")

    sub.add_parser("countries", help="List countries with recorded sales")

    p = sub.add_parser("cross-ref", help="Cross-reference countries and series")
    p.add_argument("mode", choices=sorted(CROSS_REF_MODES))
    p.add_argument("name", help="Country or series to look up")

    p = sub.add_parser("import-products", help="Import product series from a text file")
    p.add_argument("file", nargs="?", default="-", help="Text file, or - for stdin (default)")

    sub.add_parser("products", help="List product series")

    p = sub.add_parser("clear-products", help="Remove every product series")
    p.add_argument("--yes", action="store_true", help="Skip the confirmation prompt")

    sub.add_parser("analyze", help="Generate an AI sales report")

    return parser


COMMANDS = {
    "record": cmd_record,
    "delete": cmd_delete,
    "history": cmd_history,
    "countries": cmd_countries,
    "cross-ref": cmd_cross_ref,
    "import-products": cmd_import_products,
    "products": cmd_products,
    "clear-products": cmd_clear_products,
}


def main(
    argv: Optional[List[str]] = None,
    settings: Optional[Settings] = None,
    store: Optional[RecordStore] = None,
    out: TextIO = sys.stdout,
) -> int:
    """Main entry point for the CLI."""
    args = build_parser().parse_args(argv)
    settings = settings or load_settings()
    configure_logging(settings)

    try:
        store = store or RecordStore.open(build_storage(settings))
        if args.command == "analyze":
            return cmd_analyze(store, args, out, AnalysisRequester.from_settings(settings))
        return COMMANDS[args.command](store, args, out)

    except KeyboardInterrupt:
        print("\n\nInterrupted by user", file=sys.stderr)
        return 130

    except PersistenceError as e:
        print(f"\nStorage error: {e}", file=sys.stderr)
        return 1

    except (OSError, RuntimeError, UnicodeDecodeError) as e:
        print(f"\nERROR: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
