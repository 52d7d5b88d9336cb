"""Chart rendering for FastQC reports."""

import io
from typing import Dict, List, Optional

import numpy as np
import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt

from app.presentation.badges import PALETTE
from app.processing.qc_report import GCBin, QualityPoint

# Phred thresholds drawn as reference lines on the quality chart
QUALITY_REFERENCE_LINES: Dict[int, str] = {28: PALETTE["yellow"], 20: PALETTE["red"]}


def render_per_base_quality(points: List[QualityPoint], width: float = 8.0, height: float = 3.0) -> bytes:
    """Mean (solid) and median (dashed) quality per base position, as PNG."""
    fig, ax = _new_axes(width, height)
    x = np.arange(len(points))
    mean = _nan_filled([p.mean for p in points])
    ax.plot(x, mean, color=PALETTE["green"], linewidth=2, label="Mean Quality")

    if any(p.median is not None for p in points):
        median = _nan_filled([p.median for p in points])
        ax.plot(x, median, color=PALETTE["accent"], linewidth=1, linestyle="--", label="Median")

    for q, color in QUALITY_REFERENCE_LINES.items():
        ax.axhline(q, color=color, linestyle=":", linewidth=1)
        ax.text(len(points) - 1 if points else 0, q + 0.5, f"Q{q}", color=color, fontsize=8, ha="right")

    ax.set_ylim(0, 40)
    ax.set_xlabel("Position (bp)")
    _set_base_ticks(ax, [str(p.base) for p in points])
    ax.legend(loc="lower left", fontsize=8, facecolor=PALETTE["panel"], labelcolor=PALETTE["text"])
    return _to_png(fig)


def render_gc_content(bins: List[GCBin], width: float = 8.0, height: float = 2.5) -> bytes:
    """Per-sequence GC content distribution as a bar chart, as PNG.

    Bins missing either value are left out.
    """
    fig, ax = _new_axes(width, height)
    complete = [b for b in bins if b.gc is not None and b.count is not None]
    gc = np.array([b.gc for b in complete], dtype=float)
    counts = np.array([b.count for b in complete], dtype=float)
    ax.bar(gc, counts, width=0.8, color=PALETTE["purple"])
    ax.set_xlabel("%GC")
    ax.grid(axis="x", visible=False)
    return _to_png(fig)


def _nan_filled(values: List[Optional[float]]) -> np.ndarray:
    """Missing values become NaN so the line shows a gap."""
    return np.array([np.nan if v is None else v for v in values], dtype=float)


def _new_axes(width: float, height: float):
    fig, ax = plt.subplots(figsize=(width, height), dpi=100)
    fig.patch.set_facecolor(PALETTE["panel"])
    ax.set_facecolor(PALETTE["panel"])
    for spine in ax.spines.values():
        spine.set_color(PALETTE["border"])
    ax.tick_params(colors=PALETTE["muted"], labelsize=8)
    ax.xaxis.label.set_color(PALETTE["muted"])
    ax.yaxis.label.set_color(PALETTE["muted"])
    ax.grid(color=PALETTE["border"], linestyle="--", linewidth=0.5)
    return fig, ax


def _set_base_ticks(ax, labels: List[str], max_ticks: int = 15) -> None:
    if not labels:
        return
    step = max(1, int(np.ceil(len(labels) / max_ticks)))
    positions = list(range(0, len(labels), step))
    ax.set_xticks(positions)
    ax.set_xticklabels([labels[i] for i in positions])


def _to_png(fig) -> bytes:
    buf = io.BytesIO()
    try:
        fig.savefig(buf, format="png", facecolor=fig.get_facecolor(), bbox_inches="tight")
    finally:
        plt.close(fig)
    return buf.getvalue()
