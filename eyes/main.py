import argparse
import asyncio
import logging
import sys

from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from . import __version__
from .config import ScanConfig
from .errors import PortSpecError, TargetResolutionError
from .scanner import PortScanner
from .ui import JsonReporter, ScanReporter
from .utils import parse_ports, resolve_target

EXIT_USAGE = 2
EXIT_INTERRUPTED = 130

err_console = Console(stderr=True)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="eyes", description="Eyes - asynchronous TCP connect port scanner")
    parser.add_argument("target", help="The IP or hostname to scan")
    parser.add_argument("-p", "--ports", default="1-1024", help="List of ports to scan (e.g. 22,80,8000-8100)")
    parser.add_argument("-c", "--concurrency", type=int, default=1000, help="Number of simultaneous connection attempts (Default: 1000)")
    parser.add_argument("-t", "--timeout", type=int, default=3, help="Connection timeout in seconds (Default: 3)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Display every port, not only open ones")
    parser.add_argument("--json", action="store_true", help="Emit one JSON object per port")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def setup_logging(debug: bool):
    if not debug:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, rich_tracebacks=True)]
    )


def build_config(args: argparse.Namespace) -> ScanConfig:
    """
    Turns parsed CLI arguments into a validated, frozen ScanConfig.
    Raises PortSpecError, TargetResolutionError or ValidationError.
    """
    ports = parse_ports(args.ports)
    target_ip = resolve_target(args.target)
    return ScanConfig(
        target=args.target,
        target_ip=target_ip,
        ports=ports,
        concurrency=args.concurrency,
        timeout=args.timeout,
        verbose=args.verbose
    )


def main(argv=None) -> int:
    parser = build_parser()
    if argv is None:
        argv = sys.argv[1:]
    if not argv:
        parser.print_help(sys.stderr)
        return EXIT_USAGE

    args = parser.parse_args(argv)
    setup_logging(args.debug)

    try:
        config = build_config(args)
    except PortSpecError as e:
        err_console.print(f"[bold red]Error:[/bold red] invalid port specification: {escape(str(e))}", highlight=False)
        return EXIT_USAGE
    except TargetResolutionError as e:
        err_console.print(f"[bold red]Error:[/bold red] {escape(str(e))}", highlight=False)
        return EXIT_USAGE
    except ValidationError as e:
        err_console.print(f"[bold red]Error:[/bold red] invalid scan options\n{escape(str(e))}", highlight=False)
        return EXIT_USAGE

    reporter_cls = JsonReporter if args.json else ScanReporter
    reporter = reporter_cls(verbose=config.verbose)
    scanner = PortScanner(config)

    try:
        asyncio.run(scanner.run(reporter))
    except KeyboardInterrupt:
        err_console.print("\n[yellow]Scan interrupted by user.[/yellow]")
        return EXIT_INTERRUPTED
    return 0


def run():
    sys.exit(main())


if __name__ == "__main__":
    run()
