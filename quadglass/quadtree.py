# quadglass/quadtree.py
import heapq
import logging
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, Tuple

from .errors import NoMoreRefinableNodesError
from .prefix_sum import Coord
from .region_stats import RegionStats

logger = logging.getLogger(__name__)

Rect = Tuple[Coord, Coord]
Children = Tuple[int, int, int, int]  # nw, ne, sw, se


@dataclass
class QNode:
    top_left: Coord
    bottom_right: Coord
    children: Optional[Children] = None

    @property
    def is_leaf(self) -> bool:
        return self.children is None

    @property
    def rows(self) -> int:
        return self.bottom_right[0] - self.top_left[0] + 1

    @property
    def cols(self) -> int:
        return self.bottom_right[1] - self.top_left[1] + 1

    def can_split(self) -> bool:
        return self.rows > 1 and self.cols > 1


def split_rect(top_left: Coord, bottom_right: Coord) -> Optional[Tuple[Rect, Rect, Rect, Rect]]:
    """Split an inclusive rectangle into (nw, ne, sw, se) quadrants.

    Returns None when the rectangle is a single pixel tall or wide. Floor
    division puts the smaller half on the north and west sides.
    """
    (r0, c0), (r1, c1) = top_left, bottom_right
    if r1 - r0 < 1 or c1 - c0 < 1:
        return None
    sr = (r0 + r1) // 2
    sc = (c0 + c1) // 2
    nw = ((r0, c0), (sr, sc))
    ne = ((r0, sc + 1), (sr, c1))
    sw = ((sr + 1, c0), (r1, sc))
    se = ((sr + 1, sc + 1), (r1, c1))
    return nw, ne, sw, se


class QuadTree:
    """Quadtree over an image, refined greedily by region error.

    Nodes live in an append-only list and refer to their children by index.
    The heap holds ``(-error, index)`` for leaves; entries for nodes that
    have since been split are dropped when popped.
    """

    def __init__(self, stats: RegionStats):
        self.stats = stats
        self._dimensions = stats.shape
        h, w = self._dimensions
        self._nodes: List[QNode] = [QNode((0, 0), (h - 1, w - 1))]
        self._heap: List[Tuple[int, int]] = []
        self._steps = 0
        self._push(0)

    # ---------------- arena ----------------
    def _push(self, index: int) -> None:
        node = self._nodes[index]
        metric = self.stats.error_metric(node.top_left, node.bottom_right)
        heapq.heappush(self._heap, (-metric, index))

    def _append(self, rect: Rect) -> int:
        self._nodes.append(QNode(rect[0], rect[1]))
        return len(self._nodes) - 1

    # ---------------- refinement ----------------
    def refine(self) -> int:
        """Split the leaf with the largest error and return its index.

        Raises NoMoreRefinableNodesError once no leaf can be split.
        """
        while self._heap:
            neg_metric, index = heapq.heappop(self._heap)
            node = self._nodes[index]
            if not node.is_leaf:
                continue
            quads = split_rect(node.top_left, node.bottom_right)
            if quads is None:
                continue
            children = tuple(self._append(q) for q in quads)
            node.children = children
            for child in children:
                self._push(child)
            self._steps += 1
            logger.debug("split node %d (error %d) -> %s", index, -neg_metric, children)
            return index
        raise NoMoreRefinableNodesError()

    def refine_many(self, n: int) -> int:
        """Attempt n refinement steps; returns the number completed."""
        for _ in range(n):
            self.refine()
        return n

    # ---------------- queries ----------------
    @property
    def height(self) -> int:
        return self._dimensions[0]

    @property
    def width(self) -> int:
        return self._dimensions[1]

    @property
    def steps(self) -> int:
        return self._steps

    @property
    def nodes(self) -> Sequence[QNode]:
        return tuple(self._nodes)

    @property
    def node_count(self) -> int:
        return len(self._nodes)

    @property
    def leaf_count(self) -> int:
        return sum(1 for n in self._nodes if n.is_leaf)

    def leaves(self) -> Iterator[QNode]:
        return (n for n in self._nodes if n.is_leaf)

    def total_error(self) -> int:
        return sum(self.stats.error_metric(n.top_left, n.bottom_right) for n in self.leaves())
