"""
Clipped Voronoi regions assembled from sweep-line edge fragments.
"""

__version__ = "0.1.0"
