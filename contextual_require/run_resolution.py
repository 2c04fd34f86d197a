"""Resolve contextual import requests against a YAML-described tree.

Example:
    python -m contextual_require.run_resolution tree.yml "@Shared/Types" "@Config" \
        --context Server/Services/Combat --config resolver.yml
"""

import argparse
import logging
from pathlib import Path

from contextual_require.build_resolver_config import (
    build_resolver_config,
    locate_node,
)
from contextual_require.errors import ResolutionError
from contextual_require.import_generator import ImportGenerator
from contextual_require.instance_tree_host import InstanceTreeHost
from contextual_require.load_config import load_config
from contextual_require.load_tree import load_tree


def run_resolution(args: argparse.Namespace) -> int:
    """Resolve every request from the context node and print the results."""
    host = InstanceTreeHost()
    tree = load_tree(args.tree)
    raw_config = load_config(args.config)
    if args.instrumentation:
        raw_config["instrumentation"] = True
        raw_config["track_performance"] = True
    config = build_resolver_config(raw_config, host, tree)

    context = locate_node(host, tree, args.context)
    if context is None:
        msg = f"Context '{args.context}' not found in {args.tree}"
        raise SystemExit(msg)

    generator = ImportGenerator(host, config)
    generator.generate(context)

    failures = 0
    for request in args.requests:
        try:
            node, value = generator.resolve_with_node(context, request)
        except (ResolutionError, LookupError) as e:
            failures += 1
            print(f"{request} -> error: {e}")
            continue
        where = host.full_name(node) if node is not None else "(host)"
        print(f"{request} -> {where} = {value!r}")

    if args.report:
        generator.stats.write_report(args.report)
        print(f"Wrote resolution report to {args.report}")

    generator.dispose()
    return 1 if failures else 0


def main(argv: list[str] | None = None) -> int:
    """Parse arguments and run the resolution."""
    ap = argparse.ArgumentParser(
        description="Resolve contextual import requests against a container tree.",
    )
    ap.add_argument(
        "tree",
        type=Path,
        help="YAML file describing the container tree",
    )
    ap.add_argument(
        "requests",
        nargs="+",
        help="Requests to resolve, e.g. @Shared/Types or @Config",
    )
    ap.add_argument(
        "--context",
        required=True,
        help="Slash separated location of the calling module inside the tree",
    )
    ap.add_argument(
        "--config",
        help="Path to a YAML resolver configuration file",
    )
    ap.add_argument(
        "--report",
        type=Path,
        help="Write a JSON report of counters and timings to this path",
    )
    ap.add_argument(
        "--instrumentation",
        action="store_true",
        help="Collect counters and timings regardless of the config file",
    )
    ap.add_argument(
        "--verbose",
        action="store_true",
        help="Log every resolution step",
    )
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    return run_resolution(args)


if __name__ == "__main__":
    raise SystemExit(main())
