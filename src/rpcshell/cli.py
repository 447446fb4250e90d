"""CLI argument parsing and application startup."""

import argparse
import logging
import sys
import time
from typing import NoReturn, Optional

from rpcshell import __version__
from rpcshell.config import Config, load_config
from rpcshell.environment import SchemaEnvironment
from rpcshell.errors import AppError
from rpcshell.logging_utils import log_event, setup_logging
from rpcshell.path_utils import map_path
from rpcshell.repl import Repl
from rpcshell.schema import load_schema
from rpcshell.session import Session


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rpcshell",
        description="Interactive shell for exploring and calling RPC services",
    )
    parser.add_argument("-c", "--config", help="Path to JSON config file")
    parser.add_argument("--host", help="Server host (default: 127.0.0.1)")
    parser.add_argument("-p", "--port", help="Server port (default: 50051)")
    parser.add_argument("-s", "--schema", help="Path to JSON schema descriptor")
    parser.add_argument("--package", help="Package to select on startup")
    parser.add_argument("--service", help="Service to select on startup")
    parser.add_argument("--splash", help="Path to splash text printed on startup")
    parser.add_argument("--history", help="Path to line history file")
    parser.add_argument("-l", "--log", help="Path to log file (logging is off without it)")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def resolve_config(args: argparse.Namespace) -> Config:
    """Merge config file values with command-line overrides."""
    config = Config()
    if args.config:
        config = load_config(_map_cli_arg(args.config, "config"))

    return config.with_overrides(
        host=args.host,
        port=args.port,
        schema_path=args.schema,
        package=args.package,
        service=args.service,
        splash_text_path=args.splash,
        history_path=args.history,
        log_file=args.log,
    )


def _map_cli_arg(path: str, arg_name: str) -> str:
    try:
        return map_path(path)
    except ValueError as e:
        raise AppError(f"Invalid {arg_name} path: {e}") from e


def build_environment(config: Config) -> SchemaEnvironment:
    """Load the schema and apply the startup package/service selection."""
    if not config.schema_path:
        raise AppError("a schema descriptor is required (--schema or 'schema_path' in config)")

    schema = load_schema(_map_cli_arg(config.schema_path, "schema"))
    env = SchemaEnvironment(schema, Session(host=config.host, port=config.port))

    if config.package:
        env.use_package(config.package)
    if config.service:
        env.use_service(config.service)
    return env


def main(argv: Optional[list[str]] = None) -> None:
    """Application entry point."""
    args = build_parser().parse_args(argv)
    app_started = time.perf_counter()

    try:
        config = resolve_config(args)
        log_file = _map_cli_arg(config.log_file, "log") if config.log_file else None
        setup_logging(log_file)
        env = build_environment(config)
    except AppError as e:
        _die(str(e))
    except OSError as e:
        _die(f"Could not start: {e}")

    log_event(
        "session_start",
        level=logging.INFO,
        target=f"{config.host}:{config.port}",
        package=env.session.package,
        service=env.session.service,
        schema_file=config.schema_path,
        log_file=log_file,
    )

    repl = Repl(config, env)
    reason = "error"
    try:
        reason = repl.start()
    finally:
        repl.close()
        log_event(
            "session_stop",
            level=logging.INFO,
            reason=reason,
            uptime_ms=round((time.perf_counter() - app_started) * 1000, 1),
        )


def _die(message: str) -> NoReturn:
    print(f"ERROR: {message}", file=sys.stderr)
    print("Run 'rpcshell --help' for usage.", file=sys.stderr)
    sys.exit(1)
