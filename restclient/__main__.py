"""
Entrypoint: load config, init logging, send one request and print the result.
"""

import argparse
import json
import sys

import structlog

from .config import get_config
from .exceptions import RestClientError
from .logging_config import configure_logging
from .request import Request


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="restclient", description="Send a single HTTP request.")
    parser.add_argument("url")
    parser.add_argument("-X", "--method", default="GET")
    parser.add_argument("-H", "--header", action="append", default=[],
                        help="header as 'Name: Value', may be repeated")
    parser.add_argument("-d", "--field", action="append", default=[],
                        help="form field as name=value, sent with POST")
    parser.add_argument("--user")
    parser.add_argument("--password")
    parser.add_argument("--token")
    parser.add_argument("--log-level")
    return parser


def main(argv=None, transport=None) -> int:
    """Main entry point, returns the process exit code."""
    args = build_parser().parse_args(argv)
    config = get_config()

    log_config = config.logging
    configure_logging(
        level=args.log_level or log_config.get('level', 'INFO'),
        fmt=log_config.get('format', 'json'),
    )
    logger = structlog.get_logger(__name__)

    try:
        request = Request(args.url, transport=transport, config=config).set_method(args.method)
        for header in args.header:
            name, _, value = header.partition(':')
            request.set_header(name.strip(), value.strip())
        for field in args.field:
            name, _, value = field.partition('=')
            request.set_field(name, value)
        if args.token:
            request.auth_by_token(args.token)
        elif args.user:
            request.auth_basic(args.user, args.password or "")
    except RestClientError as e:
        logger.error("invalid_request", error=str(e))
        return 2

    with request:
        response = request.send()

    if response is None:
        print("no response", file=sys.stderr)
        return 1

    print(f"HTTP {response.status}")
    body = response.get_body()
    if isinstance(body, str):
        print(body)
    else:
        print(json.dumps(body, indent=2))

    return 0 if 0 < response.status < 400 else 1


if __name__ == "__main__":
    sys.exit(main())
