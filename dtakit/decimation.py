"""Largest-Triangle-Three-Buckets downsampling for long traces.

Rendering tens of thousands of points adds nothing visible, so the rendering
side reduces a series to ``samples`` points once it exceeds ``threshold``.
The first and last points are always kept; every other bucket contributes the
point forming the largest triangle with the previously kept point and the
mean of the next bucket.
"""

from __future__ import annotations

from typing import Tuple

import numpy as np

from .config import CONFIG


def lttb_indices(x: np.ndarray, y: np.ndarray, samples: int) -> np.ndarray:
    """Indices of the points LTTB keeps.

    Args:
        x: Monotonic X values.
        y: Y values, same length as ``x``.
        samples: Number of points to keep (at least 3 to decimate at all).

    Returns:
        numpy.ndarray: Sorted integer indices into ``x``/``y``.
    """
    x = np.asarray(x, dtype=float)
    y = np.asarray(y, dtype=float)
    n = len(x)
    if samples >= n or samples < 3:
        return np.arange(n)

    edges = np.linspace(1, n - 1, samples - 1).astype(int)
    kept = np.empty(samples, dtype=int)
    kept[0] = 0
    kept[-1] = n - 1

    prev = 0
    for i in range(samples - 2):
        start, stop = edges[i], edges[i + 1]
        if i + 2 < len(edges):
            nxt = slice(edges[i + 1], edges[i + 2])
        else:
            nxt = slice(n - 1, n)
        avg_x = float(np.mean(x[nxt]))
        avg_y = float(np.mean(y[nxt]))

        bx = x[start:stop]
        by = y[start:stop]
        area = np.abs(
            (x[prev] - avg_x) * (by - y[prev]) - (x[prev] - bx) * (avg_y - y[prev])
        )
        prev = start + int(np.argmax(area))
        kept[i + 1] = prev

    return kept


def decimate(
    x,
    y,
    samples: int = CONFIG.decimation_samples,
    threshold: int = CONFIG.decimation_threshold,
) -> Tuple[np.ndarray, np.ndarray]:
    """Return ``(x, y)`` reduced with LTTB when longer than ``threshold``."""
    x = np.asarray(x, dtype=float)
    y = np.asarray(y, dtype=float)
    if len(x) <= threshold:
        return x, y
    idx = lttb_indices(x, y, samples)
    return x[idx], y[idx]
