# quadglass/render.py
from collections import deque
from typing import Iterable, Mapping, Optional, Tuple

import numpy as np

from .quadtree import QuadTree

RGB = Tuple[int, int, int]

# alpha written into every animation frame
FRAME_ALPHA = 100


def _paint(canvas: np.ndarray, top_left, bottom_right, color, outline: Optional[RGB]):
    (r0, c0), (r1, c1) = top_left, bottom_right
    canvas[r0:r1 + 1, c0:c1 + 1, :3] = color
    if outline is not None:
        canvas[r0, c0:c1 + 1, :3] = outline
        canvas[r1, c0:c1 + 1, :3] = outline
        canvas[r0:r1 + 1, c0, :3] = outline
        canvas[r0:r1 + 1, c1, :3] = outline


def _render(tree: QuadTree, channels: int, outline: Optional[RGB], alpha: int = FRAME_ALPHA) -> np.ndarray:
    canvas = np.zeros((tree.height, tree.width, channels), dtype=np.uint8)
    if channels == 4:
        canvas[..., 3] = alpha
    nodes = tree.nodes
    q = deque([0])
    while q:
        node = nodes[q.popleft()]
        if node.children is not None:
            q.extend(node.children)
            continue
        color = tree.stats.average(node.top_left, node.bottom_right).to_u8()
        _paint(canvas, node.top_left, node.bottom_right, color, outline)
    return canvas


def render_rgb(tree: QuadTree, outline: Optional[RGB] = None) -> np.ndarray:
    """Paint every leaf with its mean color into an (H, W, 3) uint8 array."""
    return _render(tree, 3, outline)


def render_rgba(tree: QuadTree, outline: Optional[RGB] = None, alpha: int = FRAME_ALPHA) -> np.ndarray:
    """Same as render_rgb with a constant alpha channel, for animation frames."""
    if not 0 <= alpha <= 255:
        raise ValueError("alpha must be in 0..255")
    return _render(tree, 4, outline, alpha)


def render_leaves(height: int, width: int, leaves: Iterable[Mapping]) -> np.ndarray:
    """Rebuild an RGB raster from serialized leaves (see pipeline.serialize_tree)."""
    canvas = np.zeros((height, width, 3), dtype=np.uint8)
    for leaf in leaves:
        _paint(canvas, tuple(leaf["top_left"]), tuple(leaf["bottom_right"]), tuple(leaf["color"]), None)
    return canvas
