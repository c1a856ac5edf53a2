# quadglass/image_io.py
"""Pillow-backed decode and encode helpers."""
import logging
import string
from pathlib import Path
from typing import BinaryIO, List, Optional, Sequence, Tuple, Union

import numpy as np
from PIL import Image

from .errors import DecodeError, EncodeError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def load_rgb_array(src: Union[PathLike, BinaryIO]) -> np.ndarray:
    """Decode an image file (or stream) into an HxW x 3 uint8 array."""
    try:
        with Image.open(src) as img:
            arr = np.array(img.convert("RGB"))
    except OSError as err:
        raise DecodeError(f"unable to decode image: {err}") from err
    logger.info("decoded %s: %dx%d", src, arr.shape[1], arr.shape[0])
    return arr


def save_image(arr: np.ndarray, path: PathLike, fmt: Optional[str] = None) -> None:
    try:
        Image.fromarray(arr).save(path, format=fmt)
    except (OSError, ValueError, KeyError) as err:
        raise EncodeError(f"unable to write {path}: {err}") from err


def save_animation(frames: Sequence[np.ndarray], path: Union[PathLike, BinaryIO],
                   duration_ms: int = 100) -> None:
    """Write frames as a GIF that loops forever."""
    if not frames:
        raise EncodeError("no frames to encode")
    images: List[Image.Image] = [Image.fromarray(f) for f in frames]
    try:
        images[0].save(path, format="GIF", save_all=True, append_images=images[1:],
                       duration=duration_ms, loop=0)
    except (OSError, ValueError) as err:
        raise EncodeError(f"error in encoding gif: {err}") from err
    logger.info("wrote %d frame animation", len(images))


def parse_hex_color(code: str) -> Tuple[int, int, int]:
    """'#rrggbb' or 'rrggbb' -> (r, g, b)."""
    h = code.lstrip("#")
    if len(h) != 6:
        raise ValueError("hex code must be 6 characters long")
    if any(c not in string.hexdigits for c in h):
        raise ValueError("invalid hex code")
    return (int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16))


def default_output_path(input_path: PathLike, animated: bool = False) -> Path:
    """<stem>-comprs.<ext> next to the input, .gif for animations."""
    p = Path(input_path)
    suffix = ".gif" if animated else p.suffix
    return p.with_name(f"{p.stem}-comprs{suffix}")
