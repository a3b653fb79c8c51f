"""
CLI for coder-faas - run and poke at functions locally.

Commands:
    list        List functions found in a module
    invoke      Invoke a function in-process and print the response
    run         Serve functions over HTTP with uvicorn
"""

import argparse
import asyncio
import json
import sys
from typing import Dict, List, Optional

from .config import apply_config, load_functions_yaml
from .runtime import build_context, build_url, encode_body, get_function, invoke, load_functions
from .types import CoderFaasError

LOAD_ERRORS = (CoderFaasError, FileNotFoundError, ImportError)

DEFAULT_MODULE = "functions"


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="coderfaas",
        description="Run coder-faas functions locally",
    )
    parser.add_argument(
        "-c", "--config",
        default=None,
        help="Path to functions.yaml (default: auto-detect)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # list command
    list_parser = subparsers.add_parser("list", help="List discovered functions")
    list_parser.add_argument("module", nargs="?", default=DEFAULT_MODULE, help="Module containing functions")

    # invoke command
    invoke_parser = subparsers.add_parser("invoke", help="Invoke a function in-process")
    invoke_parser.add_argument("name", help="Function name")
    invoke_parser.add_argument("--module", "-m", default=DEFAULT_MODULE, help="Module containing functions")
    invoke_parser.add_argument("-X", "--method", default="GET", help="HTTP method (default: GET)")
    invoke_parser.add_argument(
        "-q", "--query",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Query parameter (repeatable)",
    )
    invoke_parser.add_argument(
        "-H", "--header",
        action="append",
        default=[],
        metavar="KEY:VALUE",
        help="Request header (repeatable)",
    )
    invoke_parser.add_argument("-d", "--data", default=None, help="Raw request body")

    # run command
    run_parser = subparsers.add_parser("run", help="Serve functions over HTTP")
    run_parser.add_argument("module", nargs="?", default=DEFAULT_MODULE, help="Module containing functions")
    run_parser.add_argument("--function", "-f", help="Specific function to serve")
    run_parser.add_argument("--host", default=None, help="Interface to bind (default: $HOST or 0.0.0.0)")
    run_parser.add_argument("--port", "-p", type=int, default=None, help="Port to listen on (default: $PORT or 8080)")

    return parser


def _parse_pairs(items: List[str], sep: str) -> Dict[str, str]:
    pairs: Dict[str, str] = {}
    for item in items:
        key, found, value = item.partition(sep)
        if not found:
            raise ValueError(f"Expected KEY{sep}VALUE, got '{item}'")
        pairs[key.strip()] = value.strip()
    return pairs


def cmd_list(args: argparse.Namespace) -> int:
    """List functions."""
    try:
        functions = load_functions(args.module)
        if not functions:
            print(f"No functions found in {args.module}")
            return 0
        functions = apply_config(functions, load_functions_yaml(args.config))
    except LOAD_ERRORS as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    rows = []
    for func in sorted(functions, key=lambda f: f.name):
        path = func.http_trigger.path if func.http_trigger else "-"
        methods = ",".join(func.http_trigger.methods) if func.http_trigger else "-"
        rows.append((func.name, func.namespace, path, methods, "enabled" if func.enabled else "disabled"))

    headers = ("NAME", "NAMESPACE", "PATH", "METHODS", "STATUS")
    widths = [max(len(headers[i]), max(len(row[i]) for row in rows)) for i in range(len(headers))]
    for row in [headers] + rows:
        print("  ".join(cell.ljust(widths[i]) for i, cell in enumerate(row)).rstrip())
    return 0


def cmd_invoke(args: argparse.Namespace) -> int:
    """Invoke a function and print its response."""
    try:
        query = _parse_pairs(args.query, "=")
        headers = _parse_pairs(args.header, ":")
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        load_functions(args.module)
        [meta] = apply_config([get_function(args.name)], load_functions_yaml(args.config))
    except LOAD_ERRORS as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    url = build_url(meta, query)
    headers.setdefault("host", "localhost")

    ctx = build_context(meta, args.method, url, headers, query, args.data)
    try:
        response = asyncio.run(invoke(meta, ctx))
    except Exception as e:
        print(f"Error: function {meta.name} failed: {e}", file=sys.stderr)
        return 1

    print(f"Status: {response.status}")
    for key, value in response.headers.items():
        print(f"{key}: {value}")
    print()

    body = encode_body(response).decode(errors="replace")
    if response.body is not None and not isinstance(response.body, (str, bytes)):
        body = json.dumps(response.body, indent=2, ensure_ascii=False)
    print(body)
    return 0


def cmd_run(args: argparse.Namespace) -> int:
    """Serve functions with uvicorn."""
    import os

    from .runtime import run_function

    if args.config:
        os.environ["CODERFAAS_CONFIG"] = args.config

    try:
        run_function(args.module, args.function, host=args.host, port=args.port)
    except LOAD_ERRORS as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    commands = {
        "list": cmd_list,
        "invoke": cmd_invoke,
        "run": cmd_run,
    }

    handler = commands.get(args.command)
    if handler:
        return handler(args)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
