#!/usr/bin/env python3
"""
cli/refine.py
Command-line wrapper around quadglass.

Usage examples:
  # refine an image for 2000 steps (writes photo-comprs.jpg next to the input)
  quadglass refine photo.jpg -n 2000

  # draw leaf borders in black and pick the output path
  quadglass refine photo.jpg -n 500 --outline 000000 -o out.png

  # animate refinement, one frame every 25 steps, and dump the leaves as JSON
  quadglass refine photo.jpg -n 1000 --gif 25 --json

  # rebuild a PNG from a JSON dump
  quadglass decompress photo-comprs.json --out recon.png
"""

import argparse
import json
import logging
import math
import sys
from pathlib import Path
from typing import List, Optional

from quadglass.errors import QuadglassError
from quadglass.image_io import parse_hex_color, save_image
from quadglass.pipeline import RefineConfig, deserialize_to_array, refine_file


def _fmt_psnr(p: float) -> str:
    return "inf" if math.isinf(p) else f"{p:.2f}"


def cmd_refine(args) -> int:
    outline = parse_hex_color(args.outline) if args.outline else None
    config = RefineConfig(
        iterations=args.iterations,
        gif_stride=args.gif,
        outline=outline,
        frame_duration_ms=args.duration,
    )
    json_path = None
    if args.json:
        json_path = Path(args.input).with_name(Path(args.input).stem + "-comprs.json")

    print(f"[+] Input: {args.input}")
    if config.animated:
        print(f"[+] Animating {config.iterations} steps, frame every {config.gif_stride}")
    info = refine_file(args.input, config, out_path=args.out, json_path=json_path)
    if "frames" in info:
        print(f"[+] Encoded {info['frames']} frames")
    print(f"[+] Wrote: {info['output']}")
    if "json" in info:
        print(f"[+] Wrote: {info['json']}")
    print(f"[+] PSNR: {_fmt_psnr(info['psnr'])} dB")
    print(f"[+] Nodes: {info['nodes']}, leaves: {info['leaves']}")
    return 0


def cmd_decompress(args) -> int:
    with open(args.json, "r", encoding="utf-8") as f:
        data = json.load(f)
    out = args.out or str(Path(args.json).with_suffix(".png"))
    save_image(deserialize_to_array(data), out)
    print(f"[+] Decompressed saved to {out}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="quadglass", description="Greedy quadtree image approximation")
    p.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    sub = p.add_subparsers(dest="cmd", required=True)

    r = sub.add_parser("refine", help="Refine image -> approximated image or GIF")
    r.add_argument("input", help="Input image path")
    r.add_argument("-o", "--out", default=None, help="Output path (default: <stem>-comprs.<ext>)")
    r.add_argument("-n", "--iterations", type=int, default=0, help="number of refinement steps")
    r.add_argument("--outline", default=None, help="hex color for leaf outlines, e.g. 000000")
    r.add_argument("--gif", type=int, default=None, metavar="STRIDE",
                   help="write a GIF with a frame every STRIDE steps")
    r.add_argument("--duration", type=int, default=100, help="GIF frame duration in ms")
    r.add_argument("--json", action="store_true", help="also write leaves as <stem>-comprs.json")
    r.set_defaults(func=cmd_refine)

    d = sub.add_parser("decompress", help="Rebuild PNG from a JSON dump")
    d.add_argument("json", help="JSON file written by refine --json")
    d.add_argument("--out", help="Output PNG path (default: <json stem>.png)")
    d.set_defaults(func=cmd_decompress)
    return p


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")
    try:
        return args.func(args)
    except (QuadglassError, ValueError, OSError) as err:
        print(err)
        return 1


if __name__ == "__main__":
    sys.exit(main())
