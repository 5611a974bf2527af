"""
Core diagram functionality.
"""

from .geometry import Point, Domain
from .edges import BisectorEdge, HalfEdge, HalfEdgeRef, Side, link_triple
from .regions import Region, remove_adjacent_duplicates
from .diagram import DiagramBuilder, VoronoiDiagram
from .errors import (VoronoiError, MalformedInputError, PreconditionError,
                     EndPointAlreadySetError, DegenerateRegionError)
from .sweep_adapter import build_diagram

__all__ = ['Point', 'Domain', 'BisectorEdge', 'HalfEdge', 'HalfEdgeRef', 'Side', 'link_triple',
           'Region', 'remove_adjacent_duplicates', 'DiagramBuilder', 'VoronoiDiagram',
           'VoronoiError', 'MalformedInputError', 'PreconditionError',
           'EndPointAlreadySetError', 'DegenerateRegionError', 'build_diagram']
