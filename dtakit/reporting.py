"""Format tangent results and guidance for display and export.

This module turns session state into the values a results panel shows: each
tangent's slope and anchor point, the transition temperature, and which hint
fits the user's progress.
"""

from __future__ import annotations

from typing import Dict, List

import numpy as np
import pandas as pd

from .config import HINTS
from .geometry import segment_is_visible, tangent_equation
from .schema import COLUMNS
from .session import Session, intersection

PLACEHOLDER = "—"


def format_number(value, decimals: int = 4) -> str:
    """Format a number with fixed decimals, or a dash when not finite.

    Args:
        value: Value to format; non-numeric input is treated as missing.
        decimals (int, optional): Decimal places. Defaults to ``4``.

    Returns:
        str: Formatted value or ``"—"``.
    """
    if isinstance(value, bool):
        return PLACEHOLDER
    try:
        v = float(value)
    except (TypeError, ValueError):
        return PLACEHOLDER
    if not np.isfinite(v):
        return PLACEHOLDER
    return f"{v:.{int(decimals)}f}"


def summarize_session(session: Session) -> Dict:
    """Collect per-tangent parameters and the transition estimate.

    Returns:
        dict: ``{"tangents": [...], "intersection": {...} | None,
        "transition_temperature": float}``. Each tangent entry holds the raw
        and formatted slope, anchor point, equation, segment and whether the
        segment meets the main viewport; empty slots appear as ``None``.
    """
    tangents: List[Dict | None] = []
    for index, slot in enumerate(session.slots):
        if slot is None:
            tangents.append(None)
            continue
        p = slot.params
        tangents.append(
            {
                "index": index,
                "name": session.config.tangent_names[index],
                "slope": p.slope,
                "x0": p.x0,
                "y0": p.y0,
                "slope_text": format_number(p.slope, 6),
                "x0_text": format_number(p.x0, 2),
                "y0_text": format_number(p.y0, 4),
                "equation": tangent_equation(p),
                "segment": [tuple(slot.segment[0]), tuple(slot.segment[1])],
                "visible": session.main_viewport is not None
                and segment_is_visible(slot.segment, session.main_viewport),
            }
        )

    point = intersection(session)
    return {
        "tangents": tangents,
        "intersection": None if point is None else {"x": point.x, "y": point.y},
        "transition_temperature": np.nan if point is None else float(point.x),
        "transition_temperature_text": format_number(
            None if point is None else point.x, 1
        ),
    }


def create_results_dataframe(session: Session) -> pd.DataFrame:
    """One row per drawn tangent plus the transition temperature.

    Returns:
        pandas.DataFrame: Columns ``Tangent``, ``Slope``, anchor temperature and
        signal, ``Equation`` and ``Transition Temperature (°C)`` (repeated on
        each row; NaN until both tangents exist and cross).
    """
    summary = summarize_session(session)
    rows = []
    for entry in summary["tangents"]:
        if entry is None:
            continue
        rows.append(
            {
                "Tangent": entry["name"],
                "Slope": entry["slope"],
                f"Anchor {COLUMNS.temperature}": entry["x0"],
                f"Anchor {COLUMNS.signal}": entry["y0"],
                "Equation": entry["equation"],
                "Transition Temperature (°C)": summary["transition_temperature"],
            }
        )
    columns = [
        "Tangent",
        "Slope",
        f"Anchor {COLUMNS.temperature}",
        f"Anchor {COLUMNS.signal}",
        "Equation",
        "Transition Temperature (°C)",
    ]
    return pd.DataFrame(rows, columns=columns)


def hint_index_for_session(session: Session, current: int = 0) -> int:
    """Index into :data:`dtakit.config.HINTS` matching the tangent progress.

    With only the second tangent drawn the ``current`` index is kept.
    """
    first_drawn = session.slots[0] is not None
    second_drawn = session.slots[1] is not None
    last = len(HINTS) - 1
    if first_drawn and second_drawn:
        return last
    if first_drawn:
        return min(3, last)
    if second_drawn:
        return current
    return 0


def next_hint_index(current: int) -> int:
    """Advance to the next hint, wrapping to the first."""
    return current + 1 if current < len(HINTS) - 1 else 0
