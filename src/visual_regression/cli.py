"""Command line interface for the visual regression crawler."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from .core.config import DEFAULT_CONFIG_PATH, ConfigurationError, load_configuration
from .core.project import ProjectConfig, ProjectConfigError
from .recon.crawler import CrawlError, Spider
from .recon.urls import InvalidUrlError


def parse_arguments(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="visual-regression",
        description="Self-hosted visual regression testing tool",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    crawl = subparsers.add_parser("crawl", help="Crawl a website to auto-discover targets")
    crawl.add_argument("url", help="Base URL to crawl")
    crawl.add_argument("-d", "--depth", type=int, default=2, help="Max depth to crawl")
    crawl.add_argument("-p", "--pages", type=int, default=20, help="Max pages to find")
    crawl.add_argument("--concurrency", type=int, default=None, help="Simultaneous page visits")
    crawl.add_argument("--selector", default=None, help="Element every target page must contain")
    crawl.add_argument("-s", "--save", action="store_true", help="Save found targets to the config file")
    crawl.add_argument("-c", "--config", default=str(DEFAULT_CONFIG_PATH), help="Configuration file path")
    crawl.add_argument("-v", "--verbose", action="store_true", help="Log every page visit")

    init = subparsers.add_parser("init", help="Initialize a sample configuration file")
    init.add_argument("-f", "--force", action="store_true", help="Overwrite existing configuration")
    init.add_argument("-c", "--config", default=str(DEFAULT_CONFIG_PATH), help="Configuration file path")

    return parser.parse_args(argv)


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def run_crawl(args: argparse.Namespace) -> int:
    try:
        config = load_configuration(
            args.url,
            max_depth=args.depth,
            max_pages=args.pages,
            concurrency=args.concurrency,
            selector=args.selector,
            config_path=args.config,
        )
    except ConfigurationError as exc:
        print(f"[!] Invalid options: {exc}", file=sys.stderr)
        return 1

    print(f"[*] Crawling {config.seed_url}...")
    try:
        targets = Spider(config).run()
    except (CrawlError, InvalidUrlError) as exc:
        print(f"[!] Error crawling website: {exc}", file=sys.stderr)
        return 1

    print(f"\n[+] Found {len(targets)} targets:")
    for target in targets:
        print(f"  - {target.name}: {target.url}")

    if args.save and not targets:
        print("\n[!] No targets found; configuration left unchanged.")
    elif args.save:
        project = ProjectConfig.load(config.config_path)
        project = project.with_targets(config.seed_url, targets)
        try:
            project.validate()
        except ProjectConfigError as exc:
            print(f"[!] Not saving configuration: {exc}", file=sys.stderr)
            return 1
        project.save(config.config_path)
        print(f"\n[+] Configuration updated with found targets ({config.config_path}).")

    return 0


def run_init(args: argparse.Namespace) -> int:
    config_path = Path(args.config)
    if config_path.exists() and not args.force:
        print("[!] Configuration file already exists. Use --force to overwrite.")
        return 0

    ProjectConfig.sample().save(config_path)
    print(f"[+] Sample configuration created at {config_path}")
    print("[*] Edit the configuration file to match your website URLs and targets.")
    return 0


def run_cli(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_arguments(argv)
    setup_logging(getattr(args, "verbose", False))

    if args.command == "crawl":
        return run_crawl(args)
    return run_init(args)


def main() -> None:
    sys.exit(run_cli())


if __name__ == "__main__":
    main()
