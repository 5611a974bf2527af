"""JSON-ready export of a finished diagram."""

from typing import Any, Dict

import numpy as np

from .core.diagram import VoronoiDiagram


def convert_to_serializable(obj):
    """Recursively convert numpy types to Python native types."""
    if isinstance(obj, np.integer):
        return int(obj)
    elif isinstance(obj, np.floating):
        return float(obj)
    elif isinstance(obj, np.ndarray):
        return obj.tolist()
    elif isinstance(obj, (list, tuple)):
        return [convert_to_serializable(item) for item in obj]
    elif isinstance(obj, dict):
        return {key: convert_to_serializable(value) for key, value in obj.items()}
    else:
        return obj


def diagram_to_dict(diagram: VoronoiDiagram) -> Dict[str, Any]:
    """Sites, vertex loops, neighbors and edges of a diagram as plain data."""
    loops = diagram.compute_vertex_loops()
    return convert_to_serializable({
        "width": diagram.domain.width,
        "height": diagram.domain.height,
        "cells": {
            "p": [list(site) for site in diagram.sites],  # Sites
            "v": [[list(vertex) for vertex in loop] for loop in loops],  # Vertex loops
            "c": [diagram.neighbors(i) for i in range(len(diagram))],  # Neighbors
        },
        "edges": [
            {
                "cells": [edge.left, edge.right],
                "start": list(edge.start),
                "end": list(edge.end),
            }
            for edge in diagram.edges
        ],
    })
