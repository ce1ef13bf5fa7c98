"""
Command line entry point: search AutoScout24 and Subito for motorcycles.
"""
import argparse
import asyncio
import json
import os
import sys
from typing import List, Optional

from .config import config
from .core import SearchSession, run_search
from .credentials import CredentialStore
from .errors import InvalidFiltersError
from .export import save_output_rows
from .fetcher import PlaywrightFetcher
from .models import SearchFilters, SearchResult
from .utils import init_logger


def parse_args(argv: Optional[List[str]] = None):
    ap = argparse.ArgumentParser(description="Motorcycle listings search across AutoScout24 and Subito.it")
    # Filters
    ap.add_argument("--brand", type=str, default=None, help="Brand, e.g. 'Honda'")
    ap.add_argument("--model", type=str, default=None, help="Model, e.g. 'CBR600'")
    ap.add_argument("--min-price", type=float, default=None, help="Minimum price (EUR)")
    ap.add_argument("--max-price", type=float, default=None, help="Maximum price (EUR)")
    ap.add_argument("--min-year", type=int, default=None, help="Minimum registration year")
    ap.add_argument("--max-year", type=int, default=None, help="Maximum registration year")
    ap.add_argument("--max-mileage", type=float, default=None, help="Maximum mileage (km)")
    ap.add_argument("--region", type=str, default=None, help="Region, e.g. 'Lombardia'")
    # Fetching
    ap.add_argument("--backend", choices=["firecrawl", "playwright"], default="firecrawl",
                    help="Page fetcher: Firecrawl API (needs an API key) or a local browser")
    ap.add_argument("--headful", action="store_true", help="Show the browser window (playwright backend)")
    ap.add_argument("--credentials", type=str, default=config.CREDENTIALS_PATH,
                    help="Path to the credentials JSON file")
    ap.add_argument("--set-api-key", type=str, default=None, help="Validate and store a Firecrawl API key")
    ap.add_argument("--test-api-key", type=str, default=None, help="Check a Firecrawl API key without storing it")
    # Output
    ap.add_argument("--out", type=str, default="", help="CSV/XLSX file to export results to")
    ap.add_argument("--json", action="store_true", help="Print the result as JSON")
    # Logging
    lvl_choices = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    ap.add_argument("--log-level", choices=lvl_choices, default=None,
                    help="Global log level for both console and file (overrides --log-console/--log-file).")
    ap.add_argument("--log-console", choices=lvl_choices, default=os.getenv("LOG_CONSOLE", "INFO"),
                    help="Console log level (default from env LOG_CONSOLE or INFO).")
    ap.add_argument("--log-file", choices=lvl_choices, default=os.getenv("LOG_FILE", "DEBUG"),
                    help="File log level (default from env LOG_FILE or DEBUG).")
    ap.add_argument("--log-file-path", default=config.LOG_FILE_PATH,
                    help="Path to log file (default from env LOG_FILE_PATH or motoscout.log).")
    ap.add_argument("--no-file-log", action="store_true",
                    help="Disable file logging (only console output).")

    return ap.parse_args(argv)


def filters_from_args(args) -> SearchFilters:
    return SearchFilters.from_dict({
        "brand": args.brand,
        "model": args.model,
        "min_price": args.min_price,
        "max_price": args.max_price,
        "min_year": args.min_year,
        "max_year": args.max_year,
        "max_mileage": args.max_mileage,
        "region": args.region,
    })


def print_result(result: SearchResult, as_json: bool = False) -> None:
    if as_json:
        print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
        return
    if not result.success:
        print(f"Search failed: {result.error}")
        return
    for r in result.data or []:
        extra = " | ".join(x for x in (r.year, r.mileage, r.location) if x)
        print(f"[{r.source.value}] {r.title} | {r.price}" + (f" | {extra}" if extra else ""))
    print(f">>> {len(result.data or [])} listings")


async def _run(args, logger) -> int:
    session = SearchSession(CredentialStore(args.credentials), logger=logger)

    if args.test_api_key is not None:
        valid = await session.test_api_key(args.test_api_key)
        print("API key is valid" if valid else "API key is not valid")
        return 0 if valid else 1

    if args.set_api_key is not None:
        if not await session.configure_api_key(args.set_api_key):
            print("API key is not valid. Check that it is correct.")
            return 1
        print("API key configured")
        return 0

    try:
        filters = filters_from_args(args)
    except InvalidFiltersError as e:
        print(f"Invalid filters: {e}")
        return 2

    if args.backend == "playwright":
        async with PlaywrightFetcher(headless=not args.headful) as fetcher:
            result = await run_search(filters, fetcher, logger=logger)
    else:
        try:
            result = await session.search(filters)
        finally:
            await session.aclose()

    print_result(result, as_json=args.json)
    if result.success and args.out:
        save_output_rows(result.data or [], args.out, logger=logger)
    return 0 if result.success else 1


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    eff_console = args.log_level or args.log_console
    eff_file = args.log_level or args.log_file
    logger = init_logger(
        console_level=eff_console,
        file_level=eff_file,
        log_file=None if args.no_file_log else args.log_file_path
    )
    logger.info(
        f"Logger initialized: console={eff_console}, "
        f"file={'DISABLED' if args.no_file_log else eff_file}, "
        f"path={'N/A' if args.no_file_log else args.log_file_path}"
    )
    return asyncio.run(_run(args, logger))


if __name__ == "__main__":
    sys.exit(main())
