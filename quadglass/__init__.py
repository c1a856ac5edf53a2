"""Greedy quadtree approximation of raster images."""
from .errors import (
    QuadglassError,
    InvalidInputError,
    NoMoreRefinableNodesError,
    DecodeError,
    EncodeError,
)
from .color import Color
from .prefix_sum import PrefixSum2D
from .region_stats import RegionStats
from .quadtree import QNode, QuadTree, split_rect
from .render import render_rgb, render_rgba, FRAME_ALPHA

__version__ = "0.1.0"
