"""
Command-line interface for the crawler.
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Sequence

from sitecrawler.core import Crawler, CrawlerConfig, Page
from sitecrawler.document import HtmlDocument
from sitecrawler.errors import CrawlerError
from sitecrawler.fetcher import DEFAULT_TIMEOUT_S, DEFAULT_USER_AGENT, RequestsFetcher
from sitecrawler.matchers import (
    ExtensionUrlMatcher,
    PathPrefixUrlMatcher,
    RegexUrlMatcher,
    UrlMatcher,
)
from sitecrawler.normalizers import (
    FragmentNormalizer,
    HostNormalizer,
    QueryStringNormalizer,
    TrailingSlashNormalizer,
    UrlNormalizer,
)
from sitecrawler.url import Url

logger = logging.getLogger("sitecrawler")


@dataclass(slots=True)
class PageResult:
    """Result data for a single returned page."""
    url: str
    scanned_at: Optional[str] = None
    status_code: Optional[int] = None
    title: Optional[str] = None
    h1_present: Optional[bool] = None
    h1_contents: List[str] = field(default_factory=list)

    @classmethod
    def from_page(cls, page: Page) -> "PageResult":
        document = page.document
        result = cls(
            url=str(page.url),
            scanned_at=datetime.now(timezone.utc).replace(microsecond=0).isoformat(),
            status_code=getattr(document, "status_code", None),
        )
        if isinstance(document, HtmlDocument):
            meta = document.metadata()
            result.title = meta.title
            result.h1_present = meta.h1_present
            result.h1_contents = list(meta.h1_contents)
        return result


def print_summary(crawler: Crawler) -> None:
    """Print the bookkeeping of the last crawl to stderr."""
    stats = crawler.stats
    rows = [
        ("Pages crawled", stats.pages_crawled),
        ("Pages returned", stats.pages_returned),
        ("URLs rejected", len(crawler.urls_rejected)),
        ("URLs left in queue", len(crawler.urls_queued)),
    ]
    lines = ["=" * 50, f"CRAWL SUMMARY {crawler.base_url}", "=" * 50, ""]
    lines += [f"{label + ':':<24}{value}" for label, value in rows]
    lines.append("")
    if stats.error_counts:
        lines.append("Fetch errors:")
        for error_type, count in sorted(stats.error_counts.items()):
            label = "Connection errors" if error_type == "connection_error" else f"HTTP {error_type}"
            lines.append(f"  {label}: {count}")
    else:
        lines.append("No fetch errors.")
    sys.stderr.write("\n".join(lines) + "\n\n")


def default_output_path(seed: Url, crawls_dir: Path = Path("crawls")) -> Path:
    """crawls/{host}_{timestamp}.json for the crawled seed."""
    host = (seed.host or "unknown").replace(".", "_")
    crawls_dir.mkdir(parents=True, exist_ok=True)
    return crawls_dir / f"{host}_{datetime.now():%Y%m%d_%H%M%S}.json"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sitecrawler",
        description="Crawl the links found under a start URL and output JSON results.",
    )
    parser.add_argument("start_url", help="Start URL (e.g. https://example.com/docs/)")
    parser.add_argument("--limit", type=int, default=0, help="Maximum pages to return, 0 for no limit (default: 0)")
    parser.add_argument("--stop-on-error", action="store_true", help="Stop the crawl on the first failed request")
    parser.add_argument("--timeout", type=float, default=DEFAULT_TIMEOUT_S, help="Request timeout in seconds (default: 15)")
    parser.add_argument("--user-agent", default=DEFAULT_USER_AGENT, help="User-Agent header")
    parser.add_argument(
        "--whitelist", action="append", default=[], metavar="REGEX",
        help="Only return pages whose URL matches this pattern (repeatable)",
    )
    parser.add_argument(
        "--blacklist", action="append", default=[], metavar="REGEX",
        help="Do not return pages whose URL matches this pattern (repeatable)",
    )
    parser.add_argument(
        "--path-prefix",
        help="Only return pages whose path starts with this prefix (e.g., '/products')",
    )
    parser.add_argument("--skip-assets", action="store_true", help="Do not return images, archives, scripts and fonts")
    parser.add_argument("--strip-query", action="store_true", help="Drop query strings from discovered links")
    parser.add_argument("--strip-trailing-slash", action="store_true", help="Drop trailing slashes from discovered links")
    parser.add_argument("--out", help="Output file path, or '-' for stdout (default: auto-generated in crawls/)")
    parser.add_argument("--pretty", action="store_true", help="Pretty-print JSON")
    parser.add_argument(
        "-v", "--verbose", action="count", default=0,
        help="Log progress and print a summary (-vv for debug output)",
    )
    return parser


def build_config(args: argparse.Namespace) -> CrawlerConfig:
    """Translate parsed arguments into crawler configuration."""
    whitelist: List[UrlMatcher] = [RegexUrlMatcher(p) for p in args.whitelist]
    if args.path_prefix:
        whitelist.append(PathPrefixUrlMatcher(args.path_prefix))

    blacklist: List[UrlMatcher] = [RegexUrlMatcher(p) for p in args.blacklist]
    if args.skip_assets:
        blacklist.append(ExtensionUrlMatcher())

    normalizers: List[UrlNormalizer] = [HostNormalizer(), FragmentNormalizer()]
    if args.strip_query:
        normalizers.append(QueryStringNormalizer())
    if args.strip_trailing_slash:
        normalizers.append(TrailingSlashNormalizer())

    return CrawlerConfig(
        limit=args.limit,
        stop_on_error=args.stop_on_error,
        logger=logger if args.verbose else None,
        whitelist_url_matchers=whitelist,
        blacklist_url_matchers=blacklist,
        url_normalizers=normalizers,
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for the crawler CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.limit < 0:
        parser.error("--limit must be >= 0")

    if args.verbose:
        logging.basicConfig(
            stream=sys.stderr,
            level=logging.DEBUG if args.verbose > 1 else logging.INFO,
            format="%(asctime)s %(levelname)s %(message)s",
        )

    crawler = Crawler(
        fetcher=RequestsFetcher(timeout_s=args.timeout, user_agent=args.user_agent),
        config=build_config(args),
    )

    try:
        results = [PageResult.from_page(page) for page in crawler.crawl(args.start_url)]
    except CrawlerError as e:
        sys.stderr.write(f"{parser.prog}: error: {e}\n")
        return 2

    if args.verbose:
        print_summary(crawler)

    payload = [asdict(r) for r in results]
    json_text = json.dumps(payload, ensure_ascii=False, indent=2 if args.pretty else None)

    if args.out == "-":
        print(json_text)
    else:
        output_path = Path(args.out) if args.out else default_output_path(crawler.base_url)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(json_text, encoding="utf-8")
        if args.verbose:
            sys.stderr.write(f"Results written to: {output_path}\n")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
