#!/usr/bin/env python3
"""
web/app.py - Web entrypoint for quadglass.

Features:
- AJAX-friendly refine endpoint (returns JSON with base64 previews)
- Still image or GIF of the refinement, optional leaf outlines
- Saves outputs to ./output and returns download links

Usage (dev):
    python -m web.app
"""

import base64
import io
import json
import os
import uuid
from pathlib import Path

from flask import Flask, request, render_template, send_file, redirect, url_for, flash, jsonify
from werkzeug.utils import secure_filename
from PIL import Image

from quadglass.errors import DecodeError, EncodeError, InvalidInputError, NoMoreRefinableNodesError
from quadglass.image_io import load_rgb_array, parse_hex_color, save_animation, save_image
from quadglass.pipeline import RefineConfig, psnr, refine_image, serialize_tree
from quadglass.render import render_rgb

PROJECT_ROOT = Path(__file__).resolve().parent.parent
ALLOWED = {"png", "jpg", "jpeg", "gif", "bmp"}
MAX_ITERATIONS = 20000
DEFAULT_ITERATIONS = 500

app = Flask(__name__, template_folder=str(Path(__file__).resolve().parent / "templates"))
app.secret_key = os.environ.get("FLASK_SECRET", "change_me_for_prod")
app.config.setdefault("OUTPUT_DIR", PROJECT_ROOT / "output")


def output_dir() -> Path:
    out = Path(app.config["OUTPUT_DIR"])
    out.mkdir(parents=True, exist_ok=True)
    return out


def allowed_filename(filename: str) -> bool:
    return "." in filename and filename.rsplit(".", 1)[1].lower() in ALLOWED


def b64_png(arr) -> str:
    buf = io.BytesIO()
    Image.fromarray(arr).save(buf, format="PNG")
    return base64.b64encode(buf.getvalue()).decode("ascii")


@app.route("/", methods=["GET"])
def index():
    return render_template("index.html", result=None, default_iterations=DEFAULT_ITERATIONS)


@app.route("/refine", methods=["POST"])
def refine():
    """
    Main refine endpoint.
    AJAX callers (X-Requested-With: XMLHttpRequest or Accept: application/json)
    get JSON; everyone else gets the rendered template.
    """
    prefer_json = (request.headers.get("X-Requested-With") == "XMLHttpRequest") or \
        ("application/json" in (request.headers.get("Accept") or ""))

    def respond_error(msg, http_code=400):
        if prefer_json:
            return jsonify({"error": msg}), http_code
        flash(msg)
        return redirect(url_for("index"))

    if "image" not in request.files:
        return respond_error("No file uploaded")
    file = request.files["image"]
    if file.filename == "":
        return respond_error("No file selected")
    if not allowed_filename(file.filename):
        return respond_error("Unsupported file type (allowed: %s)" % ", ".join(sorted(ALLOWED)))

    iterations_str = (request.form.get("iterations") or "").strip()
    stride_str = (request.form.get("gif_stride") or "").strip()
    outline_str = (request.form.get("outline") or "").strip()
    try:
        iterations = int(iterations_str) if iterations_str else DEFAULT_ITERATIONS
        stride = int(stride_str) if stride_str else None
        outline = parse_hex_color(outline_str) if outline_str else None
        config = RefineConfig(iterations=min(iterations, MAX_ITERATIONS), gif_stride=stride, outline=outline)
    except ValueError as e:
        return respond_error(f"Invalid parameter: {e}")

    try:
        arr = load_rgb_array(file.stream)
        result = refine_image(arr, config)
    except (DecodeError, InvalidInputError) as e:
        return respond_error(f"Cannot open image: {e}")
    except NoMoreRefinableNodesError:
        return respond_error("Too many iterations for this image")

    tree = result.tree
    recon = render_rgb(tree)
    p = psnr(arr, recon)

    uid = uuid.uuid4().hex[:12]
    ext = "gif" if config.animated else "png"
    out_name = f"refined_{uid}.{ext}"
    json_name = f"tree_{uid}.json"
    out_dir = output_dir()
    try:
        if config.animated:
            save_animation(result.frames, out_dir / out_name)
        else:
            save_image(result.image, out_dir / out_name)
    except EncodeError as e:
        return respond_error(f"Encode failed: {e}", 500)
    try:
        with open(out_dir / json_name, "w", encoding="utf-8") as f:
            json.dump(serialize_tree(tree), f, separators=(",", ":"))
    except OSError as e:
        app.logger.warning("Failed to write json: %s", e)
        json_name = None

    payload = {
        "psnr": "inf" if p == float("inf") else f"{p:.2f}",
        "steps": tree.steps,
        "nodes": tree.node_count,
        "leaves": tree.leaf_count,
        "out_name": out_name,
        "json_name": json_name,
        "frames": len(result.frames),
    }
    if prefer_json:
        payload["orig_b64"] = b64_png(arr)
        payload["recon_b64"] = b64_png(result.image if result.image is not None else recon)
        return jsonify(payload)
    return render_template("index.html", result=payload, default_iterations=config.iterations)


@app.route("/download/<fname>")
def download(fname):
    p = output_dir() / secure_filename(fname)
    if not p.exists():
        flash("File not found")
        return redirect(url_for("index"))
    return send_file(str(p), as_attachment=True)


if __name__ == "__main__":
    print("Starting quadglass web app on http://127.0.0.1:5000")
    app.run(host="0.0.0.0", port=5000, debug=True)
