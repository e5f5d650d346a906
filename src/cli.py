"""Command line front-end: race a set of API domains and report the best route.

Values not given on the command line come from the SPEEDTEST_* environment
variables read by config.config.Config.
"""
import argparse
import asyncio
import json
import logging

from pydantic import ValidationError

from config.config import Config
from config.logging_config import setup_logging
from core.errors import RaceConfigurationError
from core.speed_tester import create_tester

logger = logging.getLogger(__name__)

EXIT_FOUND = 0
EXIT_NONE = 1
EXIT_CONFIG = 2


def parse_header(raw):
    name, sep, value = raw.partition(":")
    if not sep or not name.strip():
        raise argparse.ArgumentTypeError(f"header must look like NAME:VALUE, got {raw!r}")
    return name.strip(), value.strip()


def parse_json(raw):
    try:
        return json.loads(raw)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"invalid JSON: {e}")


def build_parser():
    p = argparse.ArgumentParser(description="Find the fastest of several equivalent API routes")
    p.add_argument("--domain", "-d", action="append", dest="domains", help="domain to test (repeatable)")
    p.add_argument("--path", "-p", default=None, help="path requested on every domain")
    p.add_argument("--expected", "-e", type=parse_json, default=None, help="expected JSON response")
    p.add_argument("--timeout", "-t", type=int, default=None, help="per-request timeout in ms")
    p.add_argument(
        "--header", "-H", type=parse_header, action="append", dest="headers",
        help="request header NAME:VALUE (repeatable)",
    )
    p.add_argument("--scheme", choices=["http", "https"], default=None)
    p.add_argument(
        "--mode", choices=["race", "best", "continuous"], default="race",
        help="race: full ranking; best: best route only; continuous: fastest first, ranking after",
    )
    p.add_argument(
        "--log-level", type=str.upper, choices=["DEBUG", "INFO", "WARNING", "ERROR"], default=None,
    )
    return p


async def run(args):
    config = Config.tester_config(
        domains=args.domains,
        test_path=args.path,
        expected_response=args.expected,
        timeout_ms=args.timeout,
        headers=dict(args.headers) if args.headers else None,
        scheme=args.scheme,
    )
    tester = create_tester(config)

    if args.mode == "best":
        best = await tester.get_best_route()
        return EXIT_FOUND if best else EXIT_NONE

    if args.mode == "continuous":
        fastest, remaining = await tester.get_best_route_with_continuous_testing()
        if fastest:
            logger.info(f"Route ready for use: {fastest.endpoint} ({fastest.elapsed_ms}ms)")
        logger.info("Waiting for the remaining routes to finish...")
        await remaining
        return EXIT_FOUND if fastest else EXIT_NONE

    result = await tester.test_concurrent_with_fastest()
    logger.info(
        f"Completed {result.completed_count}/{result.total_count}, "
        f"{len(result.successful)} usable route(s)"
    )
    return EXIT_FOUND if result.fastest else EXIT_NONE


def main(argv=None):
    args = build_parser().parse_args(argv)
    setup_logging(level=args.log_level)
    try:
        return asyncio.run(run(args))
    except (RaceConfigurationError, ValidationError) as e:
        logger.error(f"Invalid configuration: {e}")
        return EXIT_CONFIG


if __name__ == "__main__":
    raise SystemExit(main())
