"""
CLI tools for inspecting GraphQL documents the way the middleware does.
"""

import json
import sys
from pathlib import Path
from typing import Dict, Optional

from graphql_headerkit.core.graphql_analyzer import GraphQLOperationAnalyzer, OperationFields
from graphql_headerkit.core.middleware import resolve_json_document
from graphql_headerkit.utils.config import config, resolve_header_name
from graphql_headerkit.utils.display import print_banner, print_config_summary, print_header_lines


def _read_source(source: Optional[str]) -> bytes:
    """Read raw bytes from a file path, or stdin when omitted or '-'."""
    if not source or source == "-":
        return sys.stdin.buffer.read()
    return Path(source).read_bytes()


def build_headers(result: OperationFields, query_header: str, mutation_header: str) -> Dict[str, str]:
    """Header mapping exactly as the middleware would set it."""
    headers = {}
    if result.queries:
        headers[query_header] = ",".join(result.queries)
    if result.mutations:
        headers[mutation_header] = ",".join(result.mutations)
    return headers


def extract_command(args):
    """Classify one GraphQL document and print the result."""
    try:
        body = _read_source(args.source)
    except OSError as e:
        print(f"❌ Cannot read {args.source}: {e}", file=sys.stderr)
        return 1

    if args.json:
        document, reason = resolve_json_document(body)
        if reason:
            print(f"⚠️  Not a JSON envelope ({reason}), reading as raw GraphQL", file=sys.stderr)
    else:
        document = body.decode("utf-8", errors="replace")

    result = GraphQLOperationAnalyzer.extract(document)

    if args.format == "json":
        print(json.dumps({"queries": result.queries, "mutations": result.mutations}))
        return 0

    query_header = resolve_header_name(args.query_header, config.QUERY_HEADER)
    mutation_header = resolve_header_name(args.mutation_header, config.MUTATION_HEADER)
    print_header_lines(build_headers(result, query_header, mutation_header))
    return 0


def config_command(args):
    """Show the effective configuration."""
    print_banner()
    print_config_summary(config.__dict__)
    return 0


def setup_cli_parser(subparsers):
    """Setup CLI argument parsers for all commands."""

    # extract
    p_extract = subparsers.add_parser("extract", help="Extract resource names from a document")
    p_extract.add_argument("source", nargs="?", help="File to read (default: stdin)")
    p_extract.add_argument(
        "--json", action="store_true", help="Input is a JSON request body ({query, ...})"
    )
    p_extract.add_argument(
        "--format", choices=["headers", "json"], default="headers", help="Output format"
    )
    p_extract.add_argument("--query-header", help="Header name for query fields")
    p_extract.add_argument("--mutation-header", help="Header name for mutation fields")
    p_extract.set_defaults(func=extract_command)

    # config
    p_config = subparsers.add_parser("config", help="Show current configuration")
    p_config.set_defaults(func=config_command)
