"""Application entrypoint.

Loads settings, builds the configured rules and performs tenant loading
against the given endpoint.
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Sequence

from tenant_loader.core.settings import SettingsError, load_settings
from tenant_loader.core.trace import TraceContext
from tenant_loader.core.types import flags_from_tenant_attributes
from tenant_loader.loading import build_loader
from tenant_loader.observability.logger import configure_logging, get_logger


def _pairs(values: Sequence[str], option: str) -> dict[str, str]:
    out: dict[str, str] = {}
    for value in values:
        key, sep, item = value.partition("=")
        if not sep or not key:
            raise argparse.ArgumentTypeError(f"{option} expects KEY=VALUE, got '{value}'")
        out[key] = item
    return out


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Load tenant reference and sample data")
    parser.add_argument("--settings", default="config/settings.yaml", help="Settings file path")
    parser.add_argument(
        "--flag",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Tenant parameter, e.g. loadReference=true (repeatable)",
    )
    parser.add_argument(
        "--tenant-attributes",
        default=None,
        help="JSON file with tenant attributes; its parameters become flags",
    )
    parser.add_argument(
        "--header",
        action="append",
        default=[],
        metavar="NAME=VALUE",
        help="Request header forwarded when it starts with X- (repeatable)",
    )
    parser.add_argument("--url", default=None, help="Endpoint base URL (overrides headers)")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logger = get_logger("tenant_loader.cli")

    try:
        settings = load_settings(args.settings)
    except SettingsError as e:
        logger.error(str(e))
        return 1

    configure_logging(
        settings.observability.log_level,
        structured=settings.observability.structured_logging,
    )

    try:
        flags: dict[str, object] = {}
        if args.tenant_attributes:
            with open(args.tenant_attributes, encoding="utf-8") as f:
                flags.update(flags_from_tenant_attributes(json.load(f)))
        flags.update(_pairs(args.flag, "--flag"))
        headers = _pairs(args.header, "--header")
        loading = build_loader(settings)
    except (OSError, ValueError, argparse.ArgumentTypeError) as e:
        logger.error(str(e))
        return 1

    logger.info(
        "Settings loaded (rules=%d, flags=%s)",
        len(loading.rules),
        ",".join(sorted(flags)) or "(none)",
    )

    trace = TraceContext(
        tenant=headers.get("X-Okapi-Tenant"),
        log_file=settings.observability.trace_file if settings.observability.trace_enabled else None,
    )
    outcome = loading.perform(
        flags,
        headers,
        endpoint_base_url=args.url or settings.loading.okapi_url,
        trace=trace,
    )
    trace.finish()

    print(json.dumps(outcome.to_dict()))
    if not outcome.succeeded:
        logger.error("Tenant loading failed: %s", outcome.error)
        return 1

    logger.info("Tenant loading finished: %d files loaded", outcome.count)
    return 0


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        sys.exit(130)
