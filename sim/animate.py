# sim/animate.py
import math
import numpy as np
import matplotlib
matplotlib.use("Agg")  # off-screen backend for image/GIF writing
import matplotlib.pyplot as plt
from matplotlib.patches import Polygon as MplPoly
import imageio.v2 as imageio

HEADING_TICK_METERS = 0.4
VIEW_MARGIN_METERS = 1.0


def _view_bounds(path, car=None):
    """Axis limits that fit the whole path plus the car footprint and a margin."""
    xs = np.array([p.x for p in path])
    ys = np.array([p.y for p in path])
    pad = VIEW_MARGIN_METERS
    if car is not None:
        pad += 0.5 * math.hypot(car.length, car.width)
    return (xs.min() - pad, xs.max() + pad), (ys.min() - pad, ys.max() + pad)


def draw_scene(ax, path, start, end, car=None, upto=None):
    """Draw the path (optionally only the first `upto` samples) and both endpoints."""
    (x_lo, x_hi), (y_lo, y_hi) = _view_bounds(path, car)
    ax.set_aspect('equal', adjustable='box')
    ax.set_xlim(x_lo, x_hi)
    ax.set_ylim(y_lo, y_hi)
    ax.grid(True, linewidth=0.5, color="#dddddd")

    shown = path if upto is None else path[:upto]
    if shown:
        ax.plot([p.x for p in shown], [p.y for p in shown],
                linewidth=2, color="green", label="Path")

    ax.plot(start.x, start.y, marker='o', markersize=8, color="blue", label="Start")
    ax.plot(end.x, end.y, marker='o', markersize=8, color="red", label="End")
    for pose, col in ((start, "blue"), (end, "red")):
        hx = pose.x + HEADING_TICK_METERS * math.cos(pose.theta)
        hy = pose.y + HEADING_TICK_METERS * math.sin(pose.theta)
        ax.plot([pose.x, hx], [pose.y, hy], linewidth=2, color=col)

    ax.set_xlabel("x [m]")
    ax.set_ylabel("y [m]")


def save_path_png(path, start, end, out_path, car=None, footprint_every=10):
    """
    Save a PNG of the sampled clothoid with start/end markers.

    Args:
        path: list of PathSample (anything with .x, .y, .theta)
        start, end: the fitted Pose pair
        out_path: PNG filename
        car: optional Car; its footprint is drawn every `footprint_every` samples
    """
    fig, ax = plt.subplots(figsize=(6, 6))
    draw_scene(ax, path, start, end, car)

    if car is not None and footprint_every > 0:
        for p in path[::footprint_every]:
            ax.add_patch(MplPoly(car.footprint(p), closed=True, fill=False,
                                 linewidth=1, alpha=0.5))

    ax.legend(loc="best")
    ax.set_title("Clothoid path")
    fig.savefig(out_path, dpi=150, bbox_inches="tight")
    plt.close(fig)
    return out_path


def frame_indices(n, stride):
    """Sample indices for GIF frames: every `stride`-th one, always ending on n-1."""
    indices = list(range(0, n, stride))
    if indices[-1] != n - 1:
        indices.append(n - 1)
    return indices


def save_gif_frames(
    path,
    start,
    end,
    out="clothoid.gif",
    stride=1,
    *,
    car=None,
    frame_delay=0.10,
):
    """
    Save an animated GIF of the car moving along `path`.

    Args:
        path: list of PathSample poses.
        start, end: the fitted Pose pair.
        out (str): output GIF filename.
        stride (int | float): sample every k-th pose (float is cast to int).
        car (Car|None): if provided, draws its rectangle footprint.
        frame_delay (float): frame duration in seconds.
    """
    stride_int = max(1, int(round(stride)))

    def render_frame(k_idx):
        fig, ax = plt.subplots(figsize=(6, 6))
        draw_scene(ax, path, start, end, car, upto=k_idx + 1)

        p = path[k_idx]
        if car is not None:
            ax.add_patch(MplPoly(car.footprint(p), closed=True, fill=False, linewidth=2))
        else:
            ax.plot(p.x, p.y, marker='o', markersize=6, color="black")
        hx = p.x + 2 * HEADING_TICK_METERS * math.cos(p.theta)
        hy = p.y + 2 * HEADING_TICK_METERS * math.sin(p.theta)
        ax.plot([p.x, hx], [p.y, hy], linewidth=2, color='red')
        ax.set_title(f"t = {p.t:.2f} s   s = {p.s:.2f} m   kappa = {p.kappa:+.3f}")

        # rasterize
        fig.canvas.draw()
        w, h = fig.canvas.get_width_height()
        buf = np.frombuffer(fig.canvas.buffer_rgba(), dtype=np.uint8)
        rgb = buf.reshape(h, w, 4)[..., :3].copy()
        plt.close(fig)
        return rgb

    imgs = [render_frame(k) for k in frame_indices(len(path), stride_int)]

    imageio.mimsave(out, imgs, duration=float(frame_delay))
    return out
