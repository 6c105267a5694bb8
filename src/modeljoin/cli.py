from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Optional

import uvicorn

from .api import app
from .cache import ResponseCache
from .compute import compute_models, compute_stats, get_providers
from .config import load_settings
from .errors import ConfigurationError, ModelJoinError
from .matcher import CandidateIndex, find_match
from .records import parse_providers

ATTRIBUTION = (
    "Benchmark data provided by Artificial Analysis (https://artificialanalysis.ai)",
    "Capability data from models.dev (https://models.dev)",
)
METHODOLOGY_URL = "https://artificialanalysis.ai/methodology"


def _port_type(value: str) -> int:
    try:
        port = int(value)
    except Exception:
        raise argparse.ArgumentTypeError(f"Invalid port {value!r}. Must be an integer in 1..65535.")

    if not (1 <= port <= 65535):
        raise argparse.ArgumentTypeError(f"Invalid port {port}. Valid range is 1..65535.")

    return port


def _default_port(value: int) -> int:
    try:
        return _port_type(str(value))
    except argparse.ArgumentTypeError as e:
        raise SystemExit(f"Invalid MODELJOIN_PORT={value!r}. {e} Use --port <1-65535>.")


def build_parser(prog: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=prog, description="Join LLM benchmark data with model capabilities")
    parser.add_argument(
        "command",
        nargs="?",
        default="serve",
        choices=["serve", "export", "match", "refresh", "cache", "quota", "info"],
        help="Command (default: serve)",
    )
    parser.add_argument(
        "slugs",
        nargs="*",
        help="Benchmark model slugs to resolve (match command)",
    )

    # Serve options
    parser.add_argument(
        "--bind",
        "--host",
        dest="bind",
        default=None,
        help="Bind address (default: 127.0.0.1)",
    )
    parser.add_argument(
        "--port",
        type=_port_type,
        default=None,
        help="Port to listen on (default: 55480)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level for the CLI and uvicorn (default: info)",
    )

    # Export options
    parser.add_argument(
        "--pretty",
        action="store_true",
        help="Pretty-print JSON output",
    )
    parser.add_argument(
        "--output",
        type=str,
        help="Write output to a file instead of stdout",
    )
    parser.add_argument(
        "--unmatched",
        action="store_true",
        help="Only export rows that found no capability match",
    )
    parser.add_argument(
        "--refresh",
        action="store_true",
        help="Ignore cached responses and refetch both sources",
    )

    # Match options
    parser.add_argument(
        "--creator",
        help="Benchmark creator/provider slug for the match command (e.g. openai)",
    )
    parser.add_argument(
        "--providers-file",
        type=Path,
        help="Resolve against a local models.dev api.json instead of the cached catalog",
    )

    # Cache options
    parser.add_argument(
        "--clear",
        action="store_true",
        help="Delete cached responses (cache command)",
    )

    return parser


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def serve(host: str, port: int, log_level: str) -> None:
    url_host = "localhost" if host in {"0.0.0.0", "::"} else host
    print(f"Starting modeljoin on http://{url_host}:{port}")
    uvicorn.run(app, host=host, port=port, log_level=log_level)


def export(pretty: bool, output: Optional[str], refresh: bool, unmatched: bool) -> None:
    data = compute_models(refresh=refresh, unmatched_only=unmatched)
    payload = json.dumps(data, indent=2 if pretty else None)

    if output:
        Path(output).write_text(payload + "\n", encoding="utf-8")
    else:
        print(payload)


def match(slugs: list[str], creator: Optional[str], providers_file: Optional[Path]) -> int:
    if providers_file is not None:
        try:
            raw = json.loads(providers_file.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise SystemExit(f"error: cannot read providers file {providers_file}: {e}")
        providers = parse_providers(raw)
    else:
        providers = get_providers()
    index = CandidateIndex(providers)

    misses = 0
    for slug in slugs:
        result = find_match(creator, slug, index)
        if result is None:
            misses += 1
            print(f"{slug}\tunmatched")
        else:
            print(f"{slug}\t{result.provider_id}/{result.model.id}\t{result.kind.value}")
    return 1 if misses else 0


def refresh() -> None:
    stats = compute_stats(refresh=True)
    print(
        f"benchmarks: {stats['benchmark_models']} models, "
        f"catalog: {stats['catalog_models']} models from {stats['catalog_providers']} providers, "
        f"matched: {stats['matched']}/{stats['total']} ({stats['match_rate']:.1f}%)"
    )


def cache(clear: bool) -> None:
    settings = load_settings()
    response_cache = ResponseCache(settings.cache_dir, ttl=settings.cache_ttl)
    if clear:
        print(f"Removed {response_cache.clear()} cached responses")
        return
    print(json.dumps(response_cache.stats(), indent=2))


def quota() -> None:
    settings = load_settings()
    current = ResponseCache(settings.cache_dir, ttl=settings.cache_ttl).get_quota()
    if current is None:
        print("No quota data available.")
        print("Run a command that fetches benchmark data (e.g. 'modeljoin refresh') to record it.")
        return

    print("API Quota Status")
    print("================")
    print(f"Limit:     {current.limit} requests/day")
    print(f"Remaining: {current.remaining} requests")
    print(f"Used:      {current.used} requests ({100.0 - current.percentage_remaining():.1f}%)")
    print(f"Resets:    {current.reset}")
    print(f"Updated:   {current.updated_at.strftime('%Y-%m-%d %H:%M:%S UTC')}")
    if current.is_low():
        print()
        print(f"WARNING: Quota is low ({current.percentage_remaining():.1f}% remaining)")


def info() -> None:
    settings = load_settings()
    stats = ResponseCache(settings.cache_dir, ttl=settings.cache_ttl).stats()
    print("Cache:")
    print(f"  Location: {stats['cache_dir']}")
    print(f"  Files: {stats['entries']} ({stats['fresh']} fresh)")
    print(f"  Size: {stats['total_bytes']} bytes")
    print()
    print("Sources:")
    print(f"  Benchmarks: {settings.aa_base_url}")
    print(f"  Capabilities: {settings.models_dev_url}")
    print()
    print("Attribution:")
    for line in ATTRIBUTION:
        print(f"  {line}")
    print()
    print(f"Methodology: {METHODOLOGY_URL}")


def cli(argv: list[str] | None = None, prog: str = "modeljoin") -> int:
    parser = build_parser(prog=prog)
    args = parser.parse_args(argv)

    try:
        settings = load_settings()
    except ConfigurationError as e:
        raise SystemExit(f"{e} Fix the environment variable or pass the option explicitly.")

    log_level = args.log_level or settings.log_level
    _configure_logging(log_level)

    try:
        if args.command == "serve":
            port = args.port if args.port is not None else _default_port(settings.port)
            serve(args.bind or settings.host, port, log_level.lower())
            return 0

        if args.command == "export":
            export(args.pretty, args.output, args.refresh, args.unmatched)
            return 0

        if args.command == "match":
            if not args.slugs:
                parser.error("match requires at least one model slug")
            return match(args.slugs, args.creator, args.providers_file)

        if args.command == "refresh":
            refresh()
            return 0

        if args.command == "cache":
            cache(args.clear)
            return 0

        if args.command == "quota":
            quota()
            return 0

        if args.command == "info":
            info()
            return 0
    except ModelJoinError as e:
        raise SystemExit(f"error: {e}")

    parser.error(f"Unknown command: {args.command}")
    return 2


def main() -> None:
    raise SystemExit(cli())
