#!/usr/bin/env python3
"""
DLA Growth Runner

Grows a single DLA cluster, either headless (prints a summary) or with a
live matplotlib view that redraws the cluster while the worker thread grows it.
"""

import argparse
import sys
import time

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.animation import FuncAnimation

from dla_growth import GrowthConfig, GrowthEngine, mask_offsets, utils

MASK_COLOUR = np.array([255, 255, 255], dtype=np.uint8)


def render_frame(engine: GrowthEngine) -> np.ndarray:
    """
    Rasterize the bonded particles into an (D, D, 3) uint8 image indexed [y, x].
    Mask neighbourhoods are painted white underneath when mask drawing is on.
    """
    d = engine.diameter
    image = np.zeros((d, d, 3), dtype=np.uint8)

    # Read the length once; everything below stays within it.
    n = len(engine.bonded)
    xs = engine.bonded.x_coords()[:n].astype(np.int64)
    ys = engine.bonded.y_coords()[:n].astype(np.int64)
    colors = engine.bonded.colors()[:n]

    if engine.draw_mask_enabled and n:
        offsets = mask_offsets(engine.mask_size)
        mx = (xs[:, None] + offsets[None, :, 0]).ravel()
        my = (ys[:, None] + offsets[None, :, 1]).ravel()
        keep = (mx >= 0) & (mx < d) & (my >= 0) & (my < d)
        image[my[keep], mx[keep]] = MASK_COLOUR

    image[ys, xs] = colors
    return image


def show(engine: GrowthEngine, interval_ms: int = 50) -> None:
    """Run the engine on its worker thread and animate until the window closes."""
    fig, ax = plt.subplots(figsize=(7, 7))
    fig.patch.set_facecolor("black")
    ax.set_axis_off()
    artist = ax.imshow(render_frame(engine), origin="lower", interpolation="nearest")
    title = ax.set_title("", color="white")

    def update(_frame):
        artist.set_data(render_frame(engine))
        snap = engine.snapshot()
        state = "running" if snap["running"] else "done"
        title.set_text(f"N={snap['mass']}/{snap['target']} | mask={snap['mask_size']} | {state}")
        return artist, title

    engine.start()
    # Keep a reference so the animation is not garbage collected.
    anim = FuncAnimation(fig, update, interval=interval_ms, cache_frame_data=False)
    try:
        plt.show()
    finally:
        engine.clear()


def build_config(args) -> GrowthConfig:
    params = utils.load_params(args.config) if args.config else {}
    overrides = {
        "diameter": args.diameter,
        "fill_percentage": args.fill,
        "mask_size": args.mask,
        "seed": args.seed,
        "first_color": args.first_color,
        "second_color": args.second_color,
    }
    params.update({k: v for k, v in overrides.items() if v is not None})
    if args.draw_mask:
        params["draw_mask_enabled"] = True
    return GrowthConfig.from_dict(params)


def main():
    parser = argparse.ArgumentParser(
        description="Grow a DLA cluster in a bounded disc",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--config", type=str, default=None, help="JSON or TOML parameter file")
    parser.add_argument("--diameter", type=int, default=None, help="Domain diameter D (default: 500)")
    parser.add_argument("--fill", type=float, default=None, help="Fill percentage 0-100 (default: 100)")
    parser.add_argument("--mask", type=int, choices=[4, 8, 12, 16], default=None, help="Mask size")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducibility")
    parser.add_argument("--first-color", type=str, default=None, help="Colour of the first particles")
    parser.add_argument("--second-color", type=str, default=None, help="Colour of the last particles")
    parser.add_argument("--draw-mask", action="store_true", help="Draw mask neighbourhoods in the live view")
    parser.add_argument("--show", action="store_true", help="Open a live matplotlib view")
    parser.add_argument("--log-level", type=str, default="INFO", help="Logging level (default: INFO)")

    args = parser.parse_args()
    utils.setup_logging(args.log_level)

    engine = GrowthEngine(build_config(args))

    if args.show:
        show(engine)
        return 0

    print(f"Growing DLA: D={engine.diameter}, fill={engine.fill_percentage}%, mask={engine.mask_size}")
    start_time = time.time()
    engine.run()
    elapsed_time = time.time() - start_time

    snap = engine.snapshot()
    print(f"\n✅ Growth completed!")
    print(f"   Time elapsed: {elapsed_time:.2f} seconds")
    print(f"   Particles bonded: {snap['mass']} (target {snap['target']})")
    print(f"   Max radius: {snap['r_max']:.1f}, radius of gyration: {snap['r_gyration']:.1f}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
