# main.py

"""Entry point for the price_scout application (TUI or headless CLI)."""

import argparse
import asyncio
import logging
import sys

from price_scout.config.logging_config import setup_logging
from price_scout.config.settings import Settings

logger = logging.getLogger("price_scout.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    valid_ids = ", ".join(s["id"] for s in Settings.AVAILABLE_SOURCES)

    parser = argparse.ArgumentParser(
        prog="price_scout",
        description="Second-hand market price lookup and listing templates.",
        epilog=f"Available sources: {valid_ids}",
    )
    parser.add_argument(
        "--health",
        action="store_true",
        default=False,
        help="Run a connectivity health check on all sources.",
    )
    sub = parser.add_subparsers(dest="command")

    price = sub.add_parser("price", help="Aggregate prices for a query.")
    price.add_argument("query", help="Product name or keywords.")
    price.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="json",
        dest="output_format",
        help="Output format (default: json).",
    )

    appraise = sub.add_parser(
        "appraise", help="Identify an item from a photo and price it."
    )
    appraise.add_argument("image", help="Path to a JPEG/PNG photo.")
    appraise.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="json",
        dest="output_format",
        help="Output format (default: json).",
    )

    template = sub.add_parser(
        "template", help="Learn a listing template from reference URLs."
    )
    template.add_argument("urls", nargs="+", help="Reference listing URLs.")
    template.add_argument(
        "--save",
        default=None,
        dest="save_category",
        metavar="CATEGORY",
        help="Store the synthesized template under CATEGORY.",
    )

    templates = sub.add_parser("templates", help="Manage saved templates.")
    templates.add_argument("action", choices=["list", "show", "delete"])
    templates.add_argument("template_id", nargs="?", default=None)
    templates.add_argument(
        "-n",
        "--name",
        default=None,
        dest="product_name",
        help="Product name used when previewing a template.",
    )
    return parser


def _run_tui() -> None:
    """Launch the interactive Textual TUI."""
    from price_scout.ui.app import PriceScoutApp

    try:
        app = PriceScoutApp()
        app.run()
    except Exception:
        logger.critical("Fatal error during TUI run", exc_info=True)
        raise
    finally:
        logger.info("price_scout TUI shutting down")


def _run_cli(args: argparse.Namespace) -> None:
    """Run a headless CLI command and exit."""
    from price_scout.cli import runner

    if args.command == "price":
        exit_code = asyncio.run(
            runner.cli_price(args.query, args.output_format)
        )
    elif args.command == "appraise":
        exit_code = asyncio.run(
            runner.cli_appraise(args.image, args.output_format)
        )
    elif args.command == "template":
        exit_code = asyncio.run(
            runner.cli_template(args.urls, save_category=args.save_category)
        )
    else:
        exit_code = runner.cli_templates(
            args.action,
            template_id=args.template_id,
            product_name=args.product_name,
        )
    sys.exit(exit_code)


def _run_health_check() -> None:
    """Run scraper connectivity health check."""
    from price_scout.cli.runner import run_health_check

    exit_code = asyncio.run(run_health_check())
    sys.exit(exit_code)


def main() -> None:
    """Route to TUI (no args) or a headless CLI command."""
    log_file = setup_logging()
    logger.info("price_scout starting, log file: %s", log_file)

    parser = _build_parser()
    args = parser.parse_args()

    if args.health:
        _run_health_check()
    elif args.command is None:
        _run_tui()
    else:
        _run_cli(args)


if __name__ == "__main__":
    main()
