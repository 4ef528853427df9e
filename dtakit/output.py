"""Write session results and curve tables to reproducible CSV files.

This module is the output boundary between an in-memory session and the
tabular artifacts a user keeps alongside the figure.
"""

from __future__ import annotations

import logging
import os
from typing import Dict

import pandas as pd

from .data_processing import curve_frame, derivative_frame, samples_frame
from .reporting import create_results_dataframe
from .session import Session

logger = logging.getLogger(__name__)


def _build_viewport_table(session: Session) -> pd.DataFrame:
    """Build a two-row table with the current main and derivative viewports.

    Args:
        session (Session): Session whose viewports are exported.

    Returns:
        pandas.DataFrame: Columns ``Chart``, ``x_min``, ``x_max``, ``y_min`` and
        ``y_max``; charts without a viewport are omitted.
    """
    rows = []
    for name, vp in (
        ("main", session.main_viewport),
        ("derivative", session.derivative_viewport),
    ):
        if vp is None:
            continue
        rows.append(
            {
                "Chart": name,
                "x_min": vp.x_min,
                "x_max": vp.x_max,
                "y_min": vp.y_min,
                "y_max": vp.y_max,
            }
        )
    return pd.DataFrame(rows, columns=["Chart", "x_min", "x_max", "y_min", "y_max"])


def save_results_csv(session: Session, output_dir: str = "output") -> Dict[str, str]:
    """Save tangent results, cleaned samples, curves and viewports as CSV.

    Args:
        session (Session): Loaded session.
        output_dir (str): Directory where CSV outputs are written.

    Returns:
        dict[str, str]: Paths keyed by ``"results"``, ``"samples"``,
        ``"curve"``, ``"derivative"`` and ``"viewports"``.
    """
    os.makedirs(output_dir, exist_ok=True)

    paths = {
        "results": os.path.join(output_dir, "tangent_results.csv"),
        "samples": os.path.join(output_dir, "samples.csv"),
        "curve": os.path.join(output_dir, "curve.csv"),
        "derivative": os.path.join(output_dir, "derivative.csv"),
        "viewports": os.path.join(output_dir, "viewports.csv"),
    }

    create_results_dataframe(session).to_csv(paths["results"], index=False)
    samples_frame(session.samples).to_csv(paths["samples"], index=False)
    curve_frame(session.curve_points).to_csv(paths["curve"], index=False)
    derivative_frame(session.derivative_points).to_csv(
        paths["derivative"], index=False
    )
    _build_viewport_table(session).to_csv(paths["viewports"], index=False)

    for key, path in paths.items():
        logger.info("Saved %s table to %s", key, path)
    return paths
