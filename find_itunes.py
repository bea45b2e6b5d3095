import argparse
import logging
import sys

from config import Config
from models import SearchStatus
from services import ITunesSearchService


def print_outcome(outcome, max_results):
    if outcome.status is SearchStatus.EMPTY:
        print("No media found for your search terms.")
        return
    for i, result in enumerate(outcome.results[:max_results]):
        print(f"\n--- Result {i+1} ---")
        print(f"Title: {result.title}")
        print(f"Artist: {result.artist}")
        print(f"Kind: {result.media_kind}")
        print(f"Artwork: {result.artwork_url or 'N/A'}")
        print(f"Preview: {result.preview_url or 'N/A'}")


def main(argv=None, service=None):
    config = Config()
    parser = argparse.ArgumentParser(description="Search the iTunes Store for media.")
    parser.add_argument("search_terms", help="The terms to search for.")
    parser.add_argument("-n", "--num_results", type=int, default=config.CLI_RESULT_LIMIT,
                        help=f"Number of top results to display (default: {config.CLI_RESULT_LIMIT}).")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Log request details to stderr.")

    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")

    print(f"Searching the iTunes Store for \"{args.search_terms}\"...")
    service = service or ITunesSearchService(config)
    try:
        outcome = service.search(args.search_terms)
    finally:
        service.close()

    if not outcome.ok:
        print(f"Search failed ({outcome.status.value}): {outcome.detail}", file=sys.stderr)
        return 1
    print_outcome(outcome, args.num_results)
    return 0


if __name__ == "__main__":
    sys.exit(main())
