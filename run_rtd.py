#!/usr/bin/env python3
"""
Run the RTD provider.

Usage:
    python run_rtd.py enrich --request request.json --store store.yaml
    python run_rtd.py enrich --request request.json --store store.json --config rtd.yaml
    python run_rtd.py serve --port 5060
"""

import argparse
import json
import sys

import yaml


def _load_file(path):
    with open(path) as f:
        return yaml.safe_load(f)


def enrich(args) -> int:
    from src.rtd import InMemorySignalStore, RtdProvider
    from src.rtd.config import InvalidModuleConfigError, load_module_config
    from src.rtd.logging import configure_logging

    # stdout carries the enriched request only
    configure_logging(stream=sys.stderr)

    request = _load_file(args.request)
    store = InMemorySignalStore(_load_file(args.store) if args.store else {})

    try:
        config = load_module_config(args.config) if args.config else None
    except InvalidModuleConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    provider = RtdProvider(store)
    provider.init()
    provider.prepare(request, config)
    json.dump(request, sys.stdout, indent=2)
    print()
    return 0


def serve(args) -> int:
    from src.rtd import RedisSignalStore, RtdProvider
    from src.rtd.api import run_server

    provider = RtdProvider(RedisSignalStore(redis_url=args.redis_url, prefix=args.prefix))
    provider.init()
    run_server(provider, host=args.host, port=args.port, debug=args.debug)
    return 0


def main():
    parser = argparse.ArgumentParser(description="Run the RTD provider")
    subparsers = parser.add_subparsers(dest="command", required=True)

    enrich_parser = subparsers.add_parser("enrich", help="Enrich a request file")
    enrich_parser.add_argument("--request", required=True, help="Request JSON/YAML file")
    enrich_parser.add_argument("--store", help="JSON/YAML map of store key to value")
    enrich_parser.add_argument("--config", help="Module config YAML file")
    enrich_parser.set_defaults(func=enrich)

    serve_parser = subparsers.add_parser("serve", help="Run the RTD API")
    serve_parser.add_argument("--host", default="0.0.0.0", help="Host to bind to")
    serve_parser.add_argument("--port", type=int, default=5060, help="Port to run on")
    serve_parser.add_argument("--redis-url", default=None, help="Redis URL (default: RTD_REDIS_URL)")
    serve_parser.add_argument("--prefix", default=None, help="Redis key prefix")
    serve_parser.add_argument("--debug", action="store_true", help="Enable debug mode")
    serve_parser.set_defaults(func=serve)

    args = parser.parse_args()
    sys.exit(args.func(args))


if __name__ == "__main__":
    main()
