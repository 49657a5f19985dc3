"""
influence CLI - build citation graphs around a single work.
"""

import argparse
import asyncio
import json
import logging
import sys

from .core.config import InfluenceConfig
from .core.errors import InfluenceError
from .core.logs import setup_logging
from .export.formats import GraphExporter
from .graph.builder import GraphBuilder
from .providers.openalex import OpenAlexSource
from .search.resolver import WorkResolver

logger = logging.getLogger("influence.cli")


async def run_graph(args, config: InfluenceConfig) -> int:
    """build a graph and print or export it."""
    async with OpenAlexSource(config.providers) as source:
        builder = GraphBuilder(source, config.expansion)
        graph = await builder.build_graph(args.seed, args.depth, args.limit)

    exporter = GraphExporter()
    data = exporter.to_json(graph, args.output)
    if args.graphml:
        exporter.to_graphml(graph, args.graphml)

    if not args.output:
        print(json.dumps(data, indent=2))
    else:
        center = graph.center
        print(f"Center: {center.work.title} ({center.work.year})")
        print(f"Nodes: {len(graph.nodes)}  Links: {len(graph.links)}")
        print(f"Output: {args.output}")

    return 0


async def run_resolve(args, config: InfluenceConfig) -> int:
    """resolve a query and print the match."""
    async with OpenAlexSource(config.providers) as source:
        work = await WorkResolver(source).resolve(args.query)

    if work is None:
        print("No matching work found.", file=sys.stderr)
        return 1

    print(json.dumps(work.summary(), indent=2))
    return 0


def run_serve(args, config: InfluenceConfig) -> int:
    """run the http service."""
    import uvicorn

    uvicorn.run(
        "web.app:app",
        host=args.host or config.server.host,
        port=args.port or config.server.port,
        log_level=config.log_level.lower()
    )
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Citation graph builder for a single work.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
examples:
  influence graph W2741809807
  influence graph https://openalex.org/W2741809807 --depth 3 --limit 30 -o graph.json
  influence resolve "Attention is all you need"
  influence serve --port 3000
        """
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="debug logging"
    )

    sub = parser.add_subparsers(dest="command")

    graph_parser = sub.add_parser("graph", help="build a citation graph")
    graph_parser.add_argument("seed", help="OpenAlex work id or URL")
    graph_parser.add_argument(
        "--depth", "-d",
        default=None,
        help="levels per side, 1-3 (default: 2)"
    )
    graph_parser.add_argument(
        "--limit", "-l",
        default=None,
        help="new nodes per level, 1-30 (default: 20)"
    )
    graph_parser.add_argument(
        "--output", "-o",
        metavar="FILE",
        help="write JSON to FILE instead of stdout"
    )
    graph_parser.add_argument(
        "--graphml",
        metavar="FILE",
        help="also write GraphML to FILE"
    )

    resolve_parser = sub.add_parser("resolve", help="resolve an id, DOI or title")
    resolve_parser.add_argument("query", help="OpenAlex id, DOI or title")

    serve_parser = sub.add_parser("serve", help="run the http service")
    serve_parser.add_argument("--host", default=None)
    serve_parser.add_argument("--port", type=int, default=None)

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    config = InfluenceConfig.from_env()
    if args.verbose:
        config.log_level = "DEBUG"
    setup_logging(config.log_level)

    if args.command == "serve":
        return run_serve(args, config)

    try:
        if args.command == "graph":
            return asyncio.run(run_graph(args, config))
        return asyncio.run(run_resolve(args, config))
    except InfluenceError as e:
        logger.debug(f"[cli] {e.code}: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
