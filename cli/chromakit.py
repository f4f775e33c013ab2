"""chromakit CLI: talk to a Chroma server from the shell."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Awaitable, Callable

# Ensure project root is importable when running as script
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from chromakit.client import ChromaHttpClient  # noqa: E402
from contracts.errors import ChromaClientError  # noqa: E402
from contracts.result import Failure, OperationResult  # noqa: E402
from contracts.settings import ClientSettings  # noqa: E402


def _parse_pairs(pairs: list[str] | None, flag: str) -> dict[str, str]:
    out: dict[str, str] = {}
    for item in pairs or []:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise ValueError(f"{flag} expects KEY=VALUE, got {item!r}")
        out[key] = value
    return out


def build_settings(args: argparse.Namespace) -> ClientSettings:
    """Config file values, overridden by whatever was given on the command line."""
    data: dict[str, Any] = {}
    if args.config:
        from chromakit.settings_loader import load_settings

        data = load_settings(args.config).model_dump()

    for field in ("host", "port", "tenant", "database", "timeout"):
        value = getattr(args, field)
        if value is not None:
            data[field] = value
    if args.ssl:
        data["ssl"] = True
    headers = _parse_pairs(args.header, "--header")
    if headers:
        data["headers"] = {**data.get("headers", {}), **headers}

    return ClientSettings(**data)


def _dump(value: Any) -> Any:
    if hasattr(value, "model_dump"):
        return value.model_dump(mode="json")
    if isinstance(value, list):
        return [_dump(v) for v in value]
    return value


# ── commands ────────────────────────────────────────────────────────


async def cmd_heartbeat(client: ChromaHttpClient, args: argparse.Namespace) -> OperationResult:
    """Print the server heartbeat in nanoseconds."""
    result = await client.heartbeat()
    if result.ok:
        print(result.value)
    return result


async def cmd_version(client: ChromaHttpClient, args: argparse.Namespace) -> OperationResult:
    result = await client.version()
    if result.ok:
        print(result.value)
    return result


async def cmd_list(client: ChromaHttpClient, args: argparse.Namespace) -> OperationResult:
    """List collections in the current tenant/database."""
    result = await client.list_collections(limit=args.limit, offset=args.offset)
    if not result.ok:
        return result

    if args.json:
        print(json.dumps(_dump(result.value)))
    elif not result.value:
        print("No collections.")
    else:
        for col in result.value:
            meta = json.dumps(col.metadata) if col.metadata else ""
            print(f"{col.id}  {col.name}  {meta}".rstrip())
    return result


async def cmd_count(client: ChromaHttpClient, args: argparse.Namespace) -> OperationResult:
    result = await client.count_collections()
    if result.ok:
        print(result.value)
    return result


async def cmd_create(client: ChromaHttpClient, args: argparse.Namespace) -> OperationResult:
    """Create (or get-or-create) a collection."""
    metadata = args.metadata or None
    if args.get_or_create:
        result = await client.get_or_create_collection(args.name, metadata)
    else:
        result = await client.create_collection(args.name, metadata)
    if result.ok:
        print(json.dumps(_dump(result.value)))
    return result


async def cmd_get(client: ChromaHttpClient, args: argparse.Namespace) -> OperationResult:
    result = await client.get_collection(args.name)
    if result.ok:
        print(json.dumps(_dump(result.value)))
    return result


async def cmd_delete(client: ChromaHttpClient, args: argparse.Namespace) -> OperationResult:
    result = await client.delete_collection(args.name)
    if result.ok:
        print(f"Deleted collection: {args.name}")
    return result


async def cmd_reset(client: ChromaHttpClient, args: argparse.Namespace) -> OperationResult:
    result = await client.reset()
    if result.ok:
        print("Database reset.")
    return result


Command = Callable[[ChromaHttpClient, argparse.Namespace], Awaitable[OperationResult]]


async def _run(settings: ClientSettings, func: Command, args: argparse.Namespace) -> OperationResult:
    async with ChromaHttpClient(settings) as client:
        return await func(client, args)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chromakit",
        description="chromakit: Chroma HTTP API client",
    )
    parser.add_argument("--config", "-c", help="Path to a chromakit.yaml settings file")
    parser.add_argument("--host", help="Server host (default: localhost)")
    parser.add_argument("--port", help="Server port (default: 8000)")
    parser.add_argument("--ssl", action="store_true", help="Use https")
    parser.add_argument("--tenant", help="Tenant (default: default_tenant)")
    parser.add_argument("--database", help="Database (default: default_database)")
    parser.add_argument("--timeout", type=float, help="Request timeout in seconds")
    parser.add_argument(
        "--header", "-H", action="append", metavar="KEY=VALUE", help="Extra request header"
    )
    parser.add_argument("--log-level", default="WARNING", help="Logging level")
    sub = parser.add_subparsers(dest="command")

    p_hb = sub.add_parser("heartbeat", help="Server time in nanoseconds")
    p_hb.set_defaults(func=cmd_heartbeat)

    p_ver = sub.add_parser("version", help="Server version")
    p_ver.set_defaults(func=cmd_version)

    p_list = sub.add_parser("list", help="List collections")
    p_list.add_argument("--limit", "-n", type=int, help="Max collections")
    p_list.add_argument("--offset", type=int, help="Skip this many collections")
    p_list.add_argument("--json", action="store_true", help="Output raw JSON")
    p_list.set_defaults(func=cmd_list)

    p_count = sub.add_parser("count", help="Count collections")
    p_count.set_defaults(func=cmd_count)

    p_create = sub.add_parser("create", help="Create a collection")
    p_create.add_argument("name", help="Collection name")
    p_create.add_argument(
        "--get-or-create", action="store_true", help="Return the collection if it exists"
    )
    p_create.add_argument(
        "--metadata", "-m", action="append", metavar="KEY=VALUE", help="Collection metadata"
    )
    p_create.set_defaults(func=cmd_create)

    p_get = sub.add_parser("get", help="Show a collection")
    p_get.add_argument("name", help="Collection name")
    p_get.set_defaults(func=cmd_get)

    p_del = sub.add_parser("delete", help="Delete a collection")
    p_del.add_argument("name", help="Collection name")
    p_del.set_defaults(func=cmd_delete)

    p_reset = sub.add_parser("reset", help="Reset the database (needs ALLOW_RESET)")
    p_reset.set_defaults(func=cmd_reset)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        sys.exit(1)

    from chromakit.log_setup import setup_logging

    setup_logging(args.log_level)

    try:
        settings = build_settings(args)
    except FileNotFoundError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)
    except Exception as exc:
        print(f"Error: invalid settings: {exc}", file=sys.stderr)
        sys.exit(1)

    if getattr(args, "metadata", None) is not None:
        try:
            args.metadata = _parse_pairs(args.metadata, "--metadata")
        except ValueError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            sys.exit(1)

    try:
        result = asyncio.run(_run(settings, args.func, args))
    except ChromaClientError as exc:
        print(f"Error [{exc.kind.value}]: {exc.error.message}", file=sys.stderr)
        sys.exit(1)

    if isinstance(result, Failure):
        print(f"Error [{result.kind.value}]: {result.error.message}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
