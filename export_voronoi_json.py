#!/usr/bin/env python3
"""
Generate random sites, build their clipped Voronoi diagram and write it as JSON.
"""

import json

import numpy as np
import structlog

from py_voronoi.core import build_diagram
from py_voronoi.export import diagram_to_dict
from py_voronoi.logging_config import configure_logging

logger = structlog.get_logger()


def main():
    """Main function."""
    import argparse

    parser = argparse.ArgumentParser(description="Export a clipped Voronoi diagram as JSON")
    parser.add_argument("--sites", type=int, default=50, help="Number of random sites")
    parser.add_argument("--width", type=float, default=1200.0, help="Domain width")
    parser.add_argument("--height", type=float, default=1000.0, help="Domain height")
    parser.add_argument("--seed", type=int, default=162921633, help="Random seed")
    parser.add_argument("--output", default="voronoi_export.json", help="Output file")
    parser.add_argument("--log-level", default=None, help="Override PY_VORONOI_LOG_LEVEL")

    args = parser.parse_args()
    configure_logging(args.log_level)

    rng = np.random.default_rng(args.seed)
    sites = rng.uniform((0, 0), (args.width, args.height), size=(args.sites, 2))

    diagram = build_diagram(sites, args.width, args.height)
    json_data = diagram_to_dict(diagram)

    with open(args.output, "w") as f:
        json.dump(json_data, f, indent=2)

    logger.info("Exported diagram", output=args.output, cells=len(diagram),
                edges=len(diagram.edges))
    print(f"Wrote {len(diagram)} cells to {args.output}")


if __name__ == "__main__":
    main()
