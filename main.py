#!/usr/bin/env python3
"""
Main entry point for the link checker.
"""

import argparse
import asyncio
import logging
import sys
from typing import Optional

from linkcheck import __version__
from linkcheck.crawler.fetcher import WebFetcher
from linkcheck.crawler.scheduler import LinkCheckScheduler
from linkcheck.exceptions import LinkCheckError
from linkcheck.storage.report import ReportWriter
from linkcheck.utils.config import Config, load_config
from linkcheck.utils.logger import setup_logging
from linkcheck.utils.screenshot import PlaywrightScreenshotter


class CrawlerApp:
    """Main application class for the link checker."""

    def __init__(self):
        self.scheduler: Optional[LinkCheckScheduler] = None
        self.logger = logging.getLogger(__name__)

    def setup_logging(self, config: Config):
        """Setup logging configuration."""
        setup_logging(config.logging)

    async def run(self, seed_url: str, config: Config) -> int:
        """Run one link check and write the report."""
        crawler_config = config.crawler
        fetcher = WebFetcher(
            user_agent=crawler_config.user_agent,
            request_timeout=crawler_config.request_timeout,
            username=crawler_config.username,
            password=crawler_config.password,
            max_content_bytes=crawler_config.max_content_bytes
        )

        screenshotter = None
        if config.screenshot.enabled:
            screenshotter = PlaywrightScreenshotter(
                directory=config.screenshot.directory,
                full_page=config.screenshot.full_page,
                timeout=config.screenshot.timeout,
                user_agent=crawler_config.user_agent,
                username=crawler_config.username,
                password=crawler_config.password
            )

        # Seed URL problems surface here, before any request is made
        self.scheduler = LinkCheckScheduler(fetcher, seed_url, crawler_config, screenshot=screenshotter)

        async with fetcher:
            if screenshotter is not None:
                await screenshotter.start()
            try:
                results = await self.scheduler.run()
            finally:
                if screenshotter is not None:
                    await screenshotter.close()

        if config.output:
            ReportWriter(results, self.scheduler.seed_url).write_json(config.output)

        return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='linkcheck',
        description="Crawl a website and report the status of every link",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  linkcheck https://example.com/                    # Check with defaults
  linkcheck https://example.com/ -c 4 -i 200        # 4 concurrent tasks, 200ms apart
  linkcheck https://example.com/ -u user -p secret  # Basic authentication
  linkcheck https://example.com/ -s shots/          # Save page screenshots
  linkcheck https://example.com/ -o report.json     # Also write a JSON report
        """
    )

    parser.add_argument('url', help='Seed URL to start checking from')
    parser.add_argument('-u', '--username', help='Basic authentication username')
    parser.add_argument('-p', '--password', help='Basic authentication password')
    parser.add_argument('-t', '--timeout', type=float, help='Request timeout in seconds (default: 8)')
    parser.add_argument('-i', '--interval', type=int, help='Wait before each request in milliseconds (default: 0)')
    parser.add_argument('-c', '--concurrency', type=int, help='Maximum concurrent requests (default: 1)')
    parser.add_argument('-s', '--screenshot-dir', help='Save a screenshot of every internal page to this directory')
    parser.add_argument('-o', '--output', help='Write the report as JSON to this file')
    parser.add_argument('--config', help='Path to a YAML configuration file')
    parser.add_argument('--log-file', help='Also write logs to this file')
    parser.add_argument('--log-json', action='store_true', help='Emit logs as JSON lines')
    parser.add_argument('-v', '--verbose', action='store_true', help='Show debug logs')
    parser.add_argument('--version', action='version', version=f'linkcheck {__version__}')

    return parser


def main(argv=None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    overrides = {
        'crawler': {
            'username': args.username,
            'password': args.password,
            'request_timeout': args.timeout,
            'interval': args.interval,
            'concurrency': args.concurrency,
        },
        'logging': {
            'level': 'DEBUG' if args.verbose else None,
            'file': args.log_file,
            'json': True if args.log_json else None,
        },
        'screenshot': {
            'directory': args.screenshot_dir,
        },
        'output': args.output,
    }

    try:
        config = load_config(args.config, overrides)
    except LinkCheckError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    app = CrawlerApp()
    app.setup_logging(config)

    try:
        return asyncio.run(app.run(args.url, config))
    except LinkCheckError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return 1
    except Exception as e:
        logging.getLogger(__name__).error(f"Fatal error: {e}", exc_info=True)
        return 1


if __name__ == '__main__':
    sys.exit(main())
