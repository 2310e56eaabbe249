from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence

import yaml

from roommatetap.config import AppConfig, ConfigError, ConfigLoadRequest, YamlConfigLoader
from roommatetap.config.environment import BINDINGS
from roommatetap.config.models import LoggingSettings, replace_field
from roommatetap.logging import init_logging

logger = logging.getLogger(__name__)

REDACTED = "***"
_SECRET_FIELDS = tuple(b.field for b in BINDINGS if b.secret) + ("google_login.client_secret",)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="roommatetap", description="RoommateTap runtime configuration")
    parser.add_argument(
        "--configs-dir",
        default="configs",
        help="Directory holding main.yml and environment overlays (default: configs)",
    )
    parser.add_argument(
        "--dotenv",
        default=".env",
        help="Path to a .env file read before the process environment (default: .env)",
    )
    parser.add_argument(
        "--no-dotenv",
        action="store_true",
        help="Disable loading .env (the process environment still applies)",
    )
    parser.add_argument(
        "--strict-env",
        action="store_true",
        help="Fail when a bound environment variable is not set instead of binding an empty value",
    )

    subparsers = parser.add_subparsers(dest="command", required=True, help="Command to run")

    # Command: show
    subparsers.add_parser("show", help="Print the resolved configuration with secrets redacted")

    # Command: check
    subparsers.add_parser("check", help="Resolve the configuration and report errors")

    return parser


def redact(config: AppConfig) -> AppConfig:
    for field in _SECRET_FIELDS:
        value = config
        for segment in field.split("."):
            value = getattr(value, segment)
        if value:
            config = replace_field(config, field, REDACTED)
    return config


def _load_config(args: argparse.Namespace) -> AppConfig:
    request = ConfigLoadRequest(
        configs_dir=args.configs_dir,
        dotenv_path=None if args.no_dotenv else args.dotenv,
        strict_env=args.strict_env,
    )
    return YamlConfigLoader().load(request)


def _show(config: AppConfig) -> None:
    payload = redact(config).model_dump(mode="json", by_alias=True)
    sys.stdout.write(yaml.safe_dump(payload, sort_keys=False))


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    init_logging(LoggingSettings())
    try:
        config = _load_config(args)
    except ConfigError as e:
        logger.error("config.failed error=%s", e)
        return 1
    init_logging(config.logging)

    if args.command == "show":
        _show(config)
    elif args.command == "check":
        logger.info("config.ok environment=%s", config.environment)
    return 0


if __name__ == "__main__":
    sys.exit(main())
