"""Command-line interface for CryptoPro exporter."""

import argparse
import logging
import sys
from typing import List, Optional

from prometheus_client import start_http_server

from . import __version__
from .config import ConfigManager, ExporterConfig, parse_listen_address
from .metrics import ExporterMetrics
from .publisher import build_publishers
from .report import run_checks
from .runner import CommandRunner

DEFAULT_CONFIG_PATH = "/etc/cryptopro-exporter/config.json"

SERVE_EPILOG = """\
exposed metrics:
  cryptopro_version
  cryptopro_license_active
  cryptopro_license_permanent
  cryptopro_license_expires_in
  cryptopro_user_certificate_expires_in{container="..."}
  cryptopro_exporter_errors_total
  cryptopro_exporter_errors_version_total
  cryptopro_exporter_errors_license_total
  cryptopro_exporter_errors_user_certificates_total

Per-check error counters carry the Prometheus "_total" suffix. Dashboards
that query cryptopro_exporter_errors_{version,license,user_certificates}
without it need updating.
Every counter also has a matching "_created" timestamp sample.
"""

logger = logging.getLogger("cryptopro-exporter")


def load_config(args: argparse.Namespace) -> ExporterConfig:
    """Build configuration from the config file, then apply command-line flags."""
    config_mgr = ConfigManager(args.config or DEFAULT_CONFIG_PATH)
    if config_mgr.exists():
        config = config_mgr.load()
        logger.debug("Loaded configuration from %s", config_mgr.config_path)
    elif args.config:
        raise FileNotFoundError(f"Config file not found: {args.config}")
    else:
        config = ExporterConfig()

    return config.override(
        listen_address=getattr(args, "listen_address", None),
        period=getattr(args, "period", None),
        cpconfig=args.cpconfig,
        certmgr=args.certmgr,
        cryptcp=args.cryptcp,
        command_timeout=args.command_timeout,
    )


def cmd_serve(args: argparse.Namespace) -> int:
    """Expose metrics over HTTP and refresh them periodically."""
    try:
        config = load_config(args)
        host, port = parse_listen_address(config.listen_address)
    except (OSError, TypeError, ValueError) as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    metrics = ExporterMetrics()
    runner = CommandRunner(timeout=config.command_timeout)
    publishers = build_publishers(config, metrics, runner)

    try:
        start_http_server(port, addr=host)
    except OSError as e:
        logger.error(f"Failed to start web server at {config.listen_address}: {e}")
        return 1
    logger.info(f"Starting web server at {host}:{port}")

    threads = [publisher.start() for publisher in publishers]

    try:
        for thread in threads:
            thread.join()
    except KeyboardInterrupt:
        logger.info("Shutting down")
        for publisher in publishers:
            publisher.stop()

    return 0


def cmd_ensure(args: argparse.Namespace) -> int:
    """Run checks once and print metric values."""
    try:
        config = load_config(args)
    except (OSError, TypeError, ValueError) as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    return run_checks(config, CommandRunner(timeout=config.command_timeout))


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        help=f"JSON configuration file (default: {DEFAULT_CONFIG_PATH} if present)",
    )
    parser.add_argument("--cpconfig", help="cpconfig binary path")
    parser.add_argument("--certmgr", help="certmgr binary path")
    parser.add_argument("--cryptcp", help="cryptcp binary path")
    parser.add_argument(
        "--command-timeout",
        type=float,
        help="Kill a CryptoPro tool after this many seconds (default: no timeout)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"],
        help="Logging verbosity",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="CryptoPro exporter - Prometheus metrics for CryptoPro CSP",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument("--version", action="version", version=f"cryptopro-exporter {__version__}")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Serve command
    serve_parser = subparsers.add_parser(
        "serve",
        help="Serve metrics over HTTP",
        epilog=SERVE_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    _add_common_arguments(serve_parser)
    serve_parser.add_argument(
        "--listen-address",
        help="The address to listen on for HTTP requests (default: :9189)",
    )
    serve_parser.add_argument(
        "--period",
        type=float,
        help="How often to check in minutes (default: 720)",
    )

    # Ensure command
    ensure_parser = subparsers.add_parser("ensure", help="Run checks and print metric values")
    _add_common_arguments(ensure_parser)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Route to command handler
    if args.command == "serve":
        return cmd_serve(args)
    elif args.command == "ensure":
        return cmd_ensure(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
