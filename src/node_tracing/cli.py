"""Command line entry-point for inspecting node tracing configuration."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Callable, Dict, List, Optional

from .config import TracingSettings
from .context import NodeIdentity, StaticExecutionContext, WorkflowIdentity
from .diagnostics import diagnostics_from_settings
from .tracing import TracingConfig, TracingOptions, get_tracing_config

CommandHandler = Callable[[TracingSettings, argparse.Namespace], None]


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="node-tracing",
        description="Inspect the Langfuse tracing configuration for workflow nodes.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log every tracing decision to stderr.",
    )
    subparsers = parser.add_subparsers(dest="command")
    subparsers.required = True

    check_parser = subparsers.add_parser(
        "check",
        help="Report whether Langfuse credentials are configured",
    )
    check_parser.set_defaults(func=_handle_check)

    inspect_parser = subparsers.add_parser(
        "inspect",
        help="Build the tracing config for a node and print it as JSON",
    )
    inspect_parser.add_argument("--workflow-id", required=True)
    inspect_parser.add_argument("--workflow-name", required=True)
    inspect_parser.add_argument("--node-name", required=True)
    inspect_parser.add_argument("--node-type", default="")
    inspect_parser.add_argument("--execution-id", required=True)
    inspect_parser.add_argument(
        "--metadata",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Additional metadata entry (repeatable)",
    )
    inspect_parser.set_defaults(func=_handle_inspect)

    return parser.parse_args(argv)


def run_cli(argv: Optional[List[str]] = None) -> None:
    """Entry-point invoked from ``python -m node_tracing``."""

    arg_list = list(argv) if argv is not None else sys.argv[1:]
    args = _parse_args(arg_list)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    try:
        settings = TracingSettings.load()
    except RuntimeError as exc:
        raise SystemExit(str(exc)) from exc
    handler: CommandHandler = args.func
    handler(settings, args)


def _handle_check(settings: TracingSettings, args: argparse.Namespace) -> None:
    state = "configured" if settings.has_credentials else "missing"
    print(f"Credentials: {state}")
    print(f" - public key: {'set' if settings.has_public_key else 'unset'}")
    print(f" - secret key: {'set' if settings.has_secret_key else 'unset'}")
    print(f"Host: {settings.host}")
    print(f"Flush at: {settings.flush_at}")
    if settings.debug_log_path is not None:
        print(f"Debug log: {settings.debug_log_path}")
    else:
        print("Debug log: disabled")


def _handle_inspect(settings: TracingSettings, args: argparse.Namespace) -> None:
    context = StaticExecutionContext(
        execution_id=args.execution_id,
        workflow=WorkflowIdentity(id=args.workflow_id, name=args.workflow_name),
        node=NodeIdentity(name=args.node_name, type=args.node_type),
        logger=logging.getLogger("node_tracing.engine"),
    )
    options = TracingOptions(additional_metadata=_parse_metadata(args.metadata))
    config = get_tracing_config(
        context,
        options,
        settings=settings,
        diagnostics=diagnostics_from_settings(settings),
    )
    print(json.dumps(_summarize(config), indent=2, ensure_ascii=False, default=str))


def _parse_metadata(entries: List[str]) -> Dict[str, str]:
    metadata: Dict[str, str] = {}
    for entry in entries:
        key, sep, value = entry.partition("=")
        if not sep or not key.strip():
            raise SystemExit(f"--metadata expects KEY=VALUE, got '{entry}'")
        metadata[key.strip()] = value
    return metadata


def _summarize(config: TracingConfig) -> Dict[str, object]:
    return {
        "run_name": config.run_name,
        "metadata": dict(config.metadata),
        "tracing_enabled": config.tracing_enabled,
        "callbacks": [entry.kind for entry in config.callbacks or ()],
    }


if __name__ == "__main__":  # pragma: no cover - manual execution hook
    run_cli()
