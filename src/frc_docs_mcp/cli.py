"""CLI for frc-docs-mcp: scrape, postprocess, serve, and stats commands."""

import argparse
import asyncio
import logging
import sys

from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from .config import Config, load_config
from .errors import FrcDocsError
from .knowledge.bundle import read_bundle_data
from .logging_config import setup_logging

logger = logging.getLogger(__name__)


def cmd_scrape(args: argparse.Namespace, config: Config) -> None:
	"""Run the full ingestion pass and write the bundle."""
	from .scraper.pipeline import scrape

	asyncio.run(scrape(config))


def cmd_postprocess(args: argparse.Namespace, config: Config) -> None:
	"""Repair the existing bundle in place."""
	from .scraper.postprocess import postprocess_bundle

	postprocess_bundle(config.bundle_path)


def cmd_serve(args: argparse.Namespace, config: Config) -> None:
	"""Run the MCP server (stdio transport)."""
	from .server import run_server

	run_server(config)


def cmd_stats(args: argparse.Namespace, config: Config) -> None:
	"""Print bundle metadata."""
	data = read_bundle_data(config.bundle_path)
	metadata = data["metadata"]

	console = Console()
	table = Table(title=f"Documentation bundle ({config.bundle_path})")
	table.add_column("Library")
	table.add_column("Pages", justify="right")
	for lib in metadata.get("libraries", []):
		table.add_row(lib["name"], str(lib["pages"]))
	table.add_section()
	table.add_row("Total", str(metadata.get("totalPages", 0)))

	console.print(table)
	console.print(f"Total tokens: {metadata.get('totalTokens', 0):,}")
	console.print(f"Generated at: {metadata.get('generatedAt', 'unknown')}")


def build_parser() -> argparse.ArgumentParser:
	parser = argparse.ArgumentParser(
		prog="frc-docs-mcp",
		description="Offline FRC documentation search served over MCP",
	)
	parser.add_argument("--log-level", type=str, default=None, help="DEBUG, INFO, WARNING, ERROR")
	subparsers = parser.add_subparsers(dest="command")

	scrape_parser = subparsers.add_parser("scrape", help="Scrape all libraries and build the bundle")
	scrape_parser.set_defaults(func=cmd_scrape)

	postprocess_parser = subparsers.add_parser("postprocess", help="Repair the bundle without re-scraping")
	postprocess_parser.set_defaults(func=cmd_postprocess)

	serve_parser = subparsers.add_parser("serve", help="Run MCP server (stdio)")
	serve_parser.set_defaults(func=cmd_serve)

	stats_parser = subparsers.add_parser("stats", help="Show bundle statistics")
	stats_parser.set_defaults(func=cmd_stats)

	return parser


def main(argv: list[str] | None = None) -> None:
	"""CLI entry point."""
	parser = build_parser()
	args = parser.parse_args(argv)

	if not args.command:
		parser.print_help()
		sys.exit(1)

	load_dotenv()
	config = load_config()
	setup_logging(level=args.log_level, log_dir=config.log_dir)

	try:
		args.func(args, config)
	except FrcDocsError as e:
		logger.error(str(e))
		print(f"Error: {e}", file=sys.stderr)
		sys.exit(1)


if __name__ == "__main__":
	main()
