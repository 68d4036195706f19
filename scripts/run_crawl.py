"""Helper script to execute the site crawler in isolation.

Runs the crawler against a single URL with verbose logging and prints the
frontier statistics next to the discovered targets. Useful for debugging
why a page was or was not picked up.
"""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
import sys

# Guarantee imports resolve to the local source tree when running from a checkout.
PROJECT_ROOT = Path(__file__).resolve().parent.parent
SRC_PATH = PROJECT_ROOT / "src"
if SRC_PATH.exists():
    src_str = str(SRC_PATH)
    if src_str not in sys.path:
        sys.path.insert(0, src_str)

from visual_regression.core.config import load_configuration
from visual_regression.recon.crawler import CrawlError, Spider


def parse_arguments() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Runs only the crawler against a seed URL")
    parser.add_argument("url", help="Seed URL")
    parser.add_argument("--depth", type=int, default=None, help="Max depth (default 2)")
    parser.add_argument("--pages", type=int, default=None, help="Max pages (default 20)")
    parser.add_argument("--concurrency", type=int, default=None)
    parser.add_argument("--selector", default=None)
    parser.add_argument(
        "--headless",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Overrides HEADLESS from .env/environment variables",
    )
    parser.add_argument("--json", action="store_true", help="Print targets as JSON")
    return parser.parse_args()


def main() -> None:
    args = parse_arguments()
    logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    config = load_configuration(
        args.url,
        max_depth=args.depth,
        max_pages=args.pages,
        concurrency=args.concurrency,
        selector=args.selector,
    )
    if args.headless is not None:
        config.headless = args.headless

    spider = Spider(config)

    print(f"[*] Crawling {config.seed_url}")
    try:
        targets = spider.run()
    except KeyboardInterrupt:
        print("[!] Interrupted by user")
        return
    except CrawlError as exc:
        print(f"[!] {exc}")
        sys.exit(1)

    if args.json:
        print(json.dumps([target.to_dict() for target in targets], indent=2))
    else:
        for record in spider.frontier.records:
            print(f"    depth {record.entry.depth}  {record.target.name:<30} {record.target.url}")

    print(f"    Targets          : {len(targets)}")
    print(f"    URLs discovered  : {spider.frontier.visited_count}")
    print(f"    Left in frontier : {spider.frontier.pending_count}")


if __name__ == "__main__":
    main()
