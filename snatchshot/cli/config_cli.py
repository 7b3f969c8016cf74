"""snatchshot-config CLI entrypoint.

Subcommands: get, show, validate.

Resolves settings the same way the app does at launch (environment, then build
metadata, then the bundled config file) so a build's configuration can be
checked before it ships. With --events, structured events are appended to a
JSONL file.
"""

from __future__ import annotations

import argparse
import logging
import sys
import uuid
from pathlib import Path
from typing import Optional, TextIO

from snatchshot.adapters.telemetry.jsonl import JsonlTelemetry
from snatchshot.config.config_resolver import DEFAULT_CONFIG_FILE, ConfigResolver
from snatchshot.config.keys import DEFAULT_DATABASE_API_TIMEOUT, ConfigKey
from snatchshot.config.settings import describe, load_app_config
from snatchshot.errors.errors import ConfigError, ConfigValidationError, MissingConfigError
from snatchshot.ports.telemetry import Telemetry

APP_VERSION = "0.1.0"

EXIT_OK = 0
EXIT_MISSING = 1
EXIT_INVALID = 2


def build_parser() -> argparse.ArgumentParser:
    """
    Return the top-level CLI argument parser.
    """
    p = argparse.ArgumentParser(prog="snatchshot-config")
    sub = p.add_subparsers(dest="command", required=True)

    def add_common(sp: argparse.ArgumentParser) -> None:
        """Add arguments shared across all subcommands."""
        sp.add_argument(
            "--config-file",
            type=Path,
            default=Path(DEFAULT_CONFIG_FILE),
            help="Bundled KEY = VALUE config file",
        )
        sp.add_argument(
            "--metadata", type=Path, default=None, help="Build metadata (Info.plist or .toml)"
        )
        sp.add_argument("--env-prefix", default="", help="Prefix for environment variables")
        sp.add_argument("--events", type=Path, default=None, help="Append JSONL events here")
        sp.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    get = sub.add_parser("get", help="Print one resolved value")
    add_common(get)
    get.add_argument("key", choices=[k.value for k in ConfigKey])
    get.add_argument("--number", action="store_true", help="Resolve as a number")
    get.add_argument(
        "--default",
        type=float,
        default=DEFAULT_DATABASE_API_TIMEOUT,
        help="Fallback for --number when absent or unparsable",
    )

    show = sub.add_parser("show", help="Print configuration status")
    add_common(show)

    validate = sub.add_parser(
        "validate", help="Report every missing mandatory key, then check typed values"
    )
    add_common(validate)
    return p


def _build_resolver(args: argparse.Namespace) -> ConfigResolver:
    telemetry: Optional[Telemetry] = None
    if args.events is not None:
        telemetry = JsonlTelemetry(
            session_id=str(uuid.uuid4()),
            app_version=APP_VERSION,
            sink_path=args.events,
        )
    return ConfigResolver.from_paths(
        args.config_file,
        args.metadata,
        env_prefix=args.env_prefix,
        telemetry=telemetry,
    )


def run_get(resolver: ConfigResolver, args: argparse.Namespace, out: TextIO) -> int:
    if args.number:
        print(resolver.resolve_double(args.key, args.default), file=out)
        return EXIT_OK
    print(resolver.resolve_string(args.key), file=out)
    return EXIT_OK


def run_show(resolver: ConfigResolver, out: TextIO) -> int:
    config = load_app_config(resolver)
    print("Configuration Status:", file=out)
    for label, value in describe(config, resolver).items():
        print(f"- {label}: {value}", file=out)
    return EXIT_OK


def run_validate(resolver: ConfigResolver, out: TextIO) -> int:
    load_app_config(resolver)
    print("ok", file=out)
    return EXIT_OK


def main(argv: list[str] | None = None, out: TextIO | None = None, err: TextIO | None = None) -> int:
    """CLI entrypoint wrapper compatible with setuptools scripts."""
    out = out or sys.stdout
    err = err or sys.stderr
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    try:
        resolver = _build_resolver(args)
        if args.command == "get":
            return run_get(resolver, args, out)
        if args.command == "show":
            return run_show(resolver, out)
        return run_validate(resolver, out)
    except MissingConfigError as exc:
        print(f"error: {exc.key} is not configured", file=err)
        return EXIT_MISSING
    except ConfigValidationError as exc:
        if exc.missing:
            print("missing required config key(s):", file=err)
            for key in exc.missing:
                print(f"  {key}", file=err)
        else:
            for error in exc.errors:
                print(f"invalid {error['path']}: {error['message']}", file=err)
        return EXIT_INVALID
    except (ConfigError, ValueError) as exc:
        print(f"error: {exc}", file=err)
        return EXIT_INVALID


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
