"""
Main CLI entry point for the MTG rules package.
"""

import argparse
import logging
import sys
from datetime import datetime
from typing import List, Optional

from ..cache import CacheStore
from ..error_handling import WriteOutcome
from ..logging_config import setup_logging
from ..models import LoadResult, RuleEntry
from ..rulebooks import RulesOrchestrator, RuleRepository
from ..rulebooks.handlers import ContentValidator

logger = logging.getLogger(__name__)


def print_entry(entry: RuleEntry) -> None:
    print("\n" + "=" * 60)
    print(f"{entry.name}  (rule {entry.id})")
    print("=" * 60)
    if entry.full_text:
        for paragraph in entry.full_text:
            print(f"  {paragraph}")
    else:
        print("  No detailed description for this rule.")


def print_listing(entries: List[RuleEntry]) -> None:
    for entry in entries:
        print(f"{entry.id:<14} {entry.name}")


def print_summary(result: LoadResult) -> None:
    print("\n" + "=" * 60)
    print("RULES LOAD")
    print("=" * 60)
    if result.success:
        origin = "cache" if result.from_cache else result.source
        print(f"Entries: {len(result.entries)}")
        print(f"Source: {origin}")
    else:
        print(f"Failed ({result.error_kind}): {result.error_message}")
    print(f"Time: {result.processing_time:.2f}s")
    print("=" * 60)


class NullCache:
    """Cache stand-in for --no-cache: never hits, never stores."""

    def get(self, version):
        return None

    def put(self, text, version):
        return WriteOutcome(ok=True)

    def clear(self):
        return WriteOutcome(ok=True)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Load keyword rules from the MTG Comprehensive Rules")
    parser.add_argument("--refresh", action="store_true", help="Ignore the cached copy and fetch again")
    parser.add_argument("--no-cache", action="store_true", help="Do not read or write the local cache")
    parser.add_argument("--strict", action="store_true", help="Require a full-size document when validating")
    parser.add_argument("--list", action="store_true", help="List all entries sorted by name")
    parser.add_argument("--show", type=str, default=None, metavar="ID", help="Print one entry, e.g. 702.19")
    parser.add_argument("--search", type=str, default=None, help="Case-insensitive search on entry names")
    parser.add_argument("--log-file", type=str, default=None, help="Custom log file name or absolute path")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    if args.log_file:
        log_file = args.log_file
    else:
        log_file = f"run_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"
    setup_logging(log_file)

    try:
        validator = ContentValidator.strict() if args.strict else ContentValidator()
        cache = NullCache() if args.no_cache else CacheStore(validator=validator)
        orchestrator = RulesOrchestrator(cache=cache, validator=validator)
        result = orchestrator.run(use_cache=not (args.refresh or args.no_cache))
        print_summary(result)
        if not result.success:
            return 1

        repository = RuleRepository(result.entries)
        if args.show:
            entry = repository.get(args.show)
            if entry is None:
                print(f"\nNo rule with id {args.show}")
                return 1
            print_entry(entry)
        if args.search:
            matches = repository.find(args.search)
            print(f"\n{len(matches)} match(es) for '{args.search}':")
            print_listing(matches)
        if args.list:
            print()
            print_listing(repository.sorted_by_name())
        return 0

    except KeyboardInterrupt:
        print("\nProcess interrupted by user")
        return 130
    except Exception as e:
        logger.error(f"Unexpected error in main: {e}")
        raise


if __name__ == "__main__":
    sys.exit(main())
