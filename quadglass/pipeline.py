# quadglass/pipeline.py
import json
import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

import numpy as np

from .image_io import default_output_path, load_rgb_array, save_animation, save_image
from .quadtree import QuadTree
from .region_stats import RegionStats
from .render import FRAME_ALPHA, render_leaves, render_rgb, render_rgba

logger = logging.getLogger(__name__)


@dataclass
class RefineConfig:
    """Settings for one refinement run."""
    iterations: int = 0
    gif_stride: Optional[int] = None  # capture a frame every N steps; None -> still image
    outline: Optional[Tuple[int, int, int]] = None
    frame_duration_ms: int = 100
    alpha: int = FRAME_ALPHA

    def __post_init__(self):
        if self.iterations < 0:
            raise ValueError("iterations must be >= 0")
        if self.gif_stride is not None and self.gif_stride <= 0:
            raise ValueError("gif stride must be positive")
        if self.frame_duration_ms <= 0:
            raise ValueError("frame duration must be positive")
        if not 0 <= self.alpha <= 255:
            raise ValueError("alpha must be in 0..255")
        if self.outline is not None:
            if len(self.outline) != 3 or any(not 0 <= c <= 255 for c in self.outline):
                raise ValueError("outline must be an RGB triple in 0..255")
            self.outline = tuple(int(c) for c in self.outline)

    @property
    def animated(self) -> bool:
        return self.gif_stride is not None


@dataclass
class RefineResult:
    tree: QuadTree
    image: Optional[np.ndarray] = None
    frames: List[np.ndarray] = field(default_factory=list)


def build_tree(img: np.ndarray) -> QuadTree:
    return QuadTree(RegionStats.from_array(img))


def iter_frames(tree: QuadTree, iterations: int, stride: int,
                outline=None, alpha: int = FRAME_ALPHA) -> Iterator[np.ndarray]:
    """Yield the unrefined frame, then one frame every `stride` steps.

    The last step is only captured when it falls on the stride.
    """
    yield render_rgba(tree, outline, alpha)
    for i in range(1, iterations + 1):
        tree.refine()
        if i % stride == 0:
            yield render_rgba(tree, outline, alpha)


def refine_image(img: np.ndarray, config: RefineConfig) -> RefineResult:
    tree = build_tree(img)
    if config.animated:
        frames = list(iter_frames(tree, config.iterations, config.gif_stride,
                                  config.outline, config.alpha))
        return RefineResult(tree=tree, frames=frames)
    tree.refine_many(config.iterations)
    return RefineResult(tree=tree, image=render_rgb(tree, config.outline))


# ---------------- stats & serialization ----------------
def psnr(orig: np.ndarray, recon: np.ndarray) -> float:
    mse = float(np.mean((orig.astype(np.float64) - recon.astype(np.float64)) ** 2))
    if mse == 0.0:
        return float("inf")
    PIXEL_MAX = 255.0
    return 20.0 * math.log10(PIXEL_MAX / math.sqrt(mse))


def serialize_tree(tree: QuadTree) -> Dict[str, Any]:
    leaves = [
        {
            "top_left": list(n.top_left),
            "bottom_right": list(n.bottom_right),
            "color": list(tree.stats.average(n.top_left, n.bottom_right).to_u8()),
        }
        for n in tree.leaves()
    ]
    return {"height": tree.height, "width": tree.width, "steps": tree.steps, "leaves": leaves}


def deserialize_to_array(data: Dict[str, Any]) -> np.ndarray:
    return render_leaves(int(data["height"]), int(data["width"]), data["leaves"])


# ---------------- file level ----------------
def refine_file(in_path: Union[str, Path], config: RefineConfig,
                out_path: Optional[Union[str, Path]] = None,
                json_path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """Decode, refine, and write an image or animation. Returns run stats."""
    arr = load_rgb_array(in_path)
    if out_path is None:
        out_path = default_output_path(in_path, animated=config.animated)
    logger.info("refining %s (%d iterations)", in_path, config.iterations)

    result = refine_image(arr, config)
    info: Dict[str, Any] = {
        "output": str(out_path),
        "steps": result.tree.steps,
        "nodes": result.tree.node_count,
        "leaves": result.tree.leaf_count,
    }
    if config.animated:
        save_animation(result.frames, out_path, config.frame_duration_ms)
        info["frames"] = len(result.frames)
        info["psnr"] = psnr(arr, render_rgb(result.tree))
    else:
        save_image(result.image, out_path)
        info["psnr"] = psnr(arr, result.image if config.outline is None else render_rgb(result.tree))

    if json_path is not None:
        with open(json_path, "w", encoding="utf-8") as f:
            json.dump(serialize_tree(result.tree), f, separators=(",", ":"))
        info["json"] = str(json_path)
    return info
