"""Bar chart of targets against achieved sums."""
from __future__ import annotations

import os
import tempfile
import warnings
from pathlib import Path
from typing import Sequence

from .models import OptimizationResult

__all__ = ["render_results_chart"]


def _select_backend() -> None:
    import matplotlib  # type: ignore

    try:
        backend = matplotlib.get_backend().lower()
    except Exception:
        backend = ""
    if backend in {"agg", "tkagg"}:
        return
    env_backend = os.environ.get("MPLBACKEND", "").lower()
    prefer_tk = bool(os.environ.get("DISPLAY")) or env_backend == "tkagg"
    if prefer_tk:
        try:
            matplotlib.use("TkAgg")
            return
        except Exception as exc:  # pragma: no cover - depends on system backend
            warnings.warn(
                f"Preferred GUI backend 'TkAgg' unavailable; falling back to 'Agg': {exc}",
                RuntimeWarning,
            )
    matplotlib.use("Agg")


def render_results_chart(
    results: Sequence[OptimizationResult], path: str | os.PathLike[str] | None = None
) -> str:
    """Render one pair of bars (target, achieved) per row to a **PNG file**.

    Returns the written path.  Without *path* a temporary file is created.
    """
    # Lazy import so the package works without matplotlib unless a chart is requested
    try:
        import numpy as np  # type: ignore
        import matplotlib.pyplot as plt  # type: ignore
    except ImportError as exc:  # pragma: no cover - environment-dependent
        raise RuntimeError(
            "matplotlib is required to render charts. Install it or run without --chart."
        ) from exc
    _select_backend()

    targets = np.array([float(r.original_row.target) for r in results], dtype=float)
    achieved = np.array([float(r.achieved_sum) for r in results], dtype=float)
    xs = np.arange(len(results))
    width = 0.4

    fig, ax = plt.subplots(figsize=(max(6, len(results) * 0.8), 4))
    ax.bar(xs - width / 2, targets, width, label="target", color="#c8c8c8")
    ax.bar(xs + width / 2, achieved, width, label="achieved", color="#2a7ab0")
    ax.set_xticks(xs)
    ax.set_xticklabels([str(i + 1) for i in xs])
    ax.set_xlabel("row")
    ax.set_ylabel("value")
    ax.set_title("Target vs achieved sum")
    if len(results):
        ax.legend()
    ax.grid(True, axis="y", alpha=0.3)

    if path is None:
        fd, tmp = tempfile.mkstemp(suffix=".png")
        os.close(fd)
        png_path = Path(tmp)
    else:
        png_path = Path(path)
    fig.savefig(png_path, format="png")
    plt.close(fig)
    return str(png_path)
